"""Pathspec-based file filtering.

Source enumeration honours the extension's own .gitignore on top of a set of
default patterns for Composer, TYPO3 build and IDE directories, so vendor code
and generated files never count as extension code.
"""

import logging
from pathlib import Path
from typing import Iterator

import pathspec

logger = logging.getLogger(__name__)


# Always ignored, whether or not a .gitignore exists
DEFAULT_IGNORE_PATTERNS: list[str] = [
    ".git/",
    "vendor/",
    "node_modules/",
    ".Build/",
    "/public/",
    "/var/",
    ".cache/",
    ".idea/",
    ".vscode/",
    ".conformance-reports/",
]


class PathspecFilter:
    """File filter based on the pathspec library."""

    def __init__(self, repo_path: Path):
        """
        Initialize the filter.

        Args:
            repo_path: Extension root path
        """
        self.repo_path = repo_path
        self._spec = pathspec.GitIgnoreSpec.from_lines(
            DEFAULT_IGNORE_PATTERNS + self._read_gitignore()
        )

    def _read_gitignore(self) -> list[str]:
        """Read root .gitignore lines, empty when absent or unreadable."""
        gitignore_path = self.repo_path / ".gitignore"
        if not gitignore_path.is_file():
            return []
        try:
            return gitignore_path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {gitignore_path}: {e}")
            return []

    def should_ignore(self, path: Path) -> bool:
        """Check if a file should be ignored."""
        try:
            relative = path.relative_to(self.repo_path) if path.is_absolute() else path
        except ValueError:
            return False
        return self._spec.match_file(relative.as_posix())

    def iter_files(self, directory: Path, pattern: str = "*") -> Iterator[Path]:
        """Yield non-ignored files below a directory matching a glob, sorted."""
        if not directory.is_dir():
            return
        for path in sorted(directory.rglob(pattern)):
            if path.is_file() and not self.should_ignore(path):
                yield path

