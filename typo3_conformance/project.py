"""
Extension project loader - resolves the target directory and offers the
surface-level probes the checks are built on

Probes never parse PHP, YAML or JSON: a file existing counts as
"configured", and code patterns are plain substring or regex line matches.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from typo3_conformance.errors import ConformanceError, NotAnExtensionError
from typo3_conformance.filters import PathspecFilter

logger = logging.getLogger(__name__)


# ============================================================
# Configuration constants
# ============================================================

# At least one of these marks a TYPO3 extension
EXTENSION_MARKERS = ["composer.json", "ext_emconf.php"]

Pattern = Union[str, re.Pattern]


# ============================================================
# Data models
# ============================================================

@dataclass
class ExtensionProject:
    """
    Extension project context

    Attributes:
        path: Extension root directory
        repo: Git repository when the extension root holds a .git directory
        file_filter: Ignore rules applied when enumerating sources
    """
    path: Path
    repo: Optional[Repo] = None
    file_filter: Optional[PathspecFilter] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.file_filter is None:
            self.file_filter = PathspecFilter(self.path)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def has_git(self) -> bool:
        return self.repo is not None

    # ---------------- existence probes ----------------

    def has_file(self, *candidates: str) -> bool:
        """True when any of the relative paths is an existing file."""
        return any((self.path / c).is_file() for c in candidates)

    def has_dir(self, *candidates: str) -> bool:
        """True when any of the relative paths is an existing directory."""
        return any((self.path / c).is_dir() for c in candidates)

    def first_file(self, *candidates: str) -> Optional[str]:
        for candidate in candidates:
            if (self.path / candidate).is_file():
                return candidate
        return None

    # ---------------- file enumeration ----------------

    def files(self, subdir: str, pattern: str = "*") -> list[Path]:
        """Non-ignored files below a subdirectory matching a glob."""
        return list(self.file_filter.iter_files(self.path / subdir, pattern))

    def php_files(self, subdir: str = "Classes") -> list[Path]:
        return self.files(subdir, "*.php")

    def count_files(self, subdir: str, pattern: str) -> int:
        return len(self.files(subdir, pattern))

    def subdirectories(self, subdir: str) -> list[Path]:
        directory = self.path / subdir
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.iterdir() if p.is_dir())

    def find_dirs(self, subdir: str, name: str) -> list[Path]:
        """Directories with the given name anywhere below subdir."""
        directory = self.path / subdir
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.rglob(name) if p.is_dir())

    # ---------------- content probes ----------------

    def read_text(self, relative: Union[str, Path]) -> str:
        """
        Read a file, empty string when missing or unreadable

        Falls back to latin-1 for files that are not valid UTF-8.
        """
        file_path = self.path / relative
        if not file_path.is_file():
            return ""
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return file_path.read_text(encoding="latin-1")
        except OSError as e:
            logger.warning(f"Failed to read {file_path}: {e}")
            return ""

    def file_contains(self, relative: str, pattern: Pattern) -> bool:
        return count_matching_lines(self.read_text(relative), pattern) > 0

    def count_matches(self, subdir: str, pattern: Pattern, glob: str = "*") -> int:
        """Number of matching lines in all files below subdir (grep -r | wc -l)."""
        return sum(
            count_matching_lines(self.read_text(f), pattern)
            for f in self.files(subdir, glob)
        )

    def contains(self, subdir: str, pattern: Pattern, glob: str = "*") -> bool:
        """True when any file below subdir has a matching line."""
        return any(
            count_matching_lines(self.read_text(f), pattern) > 0
            for f in self.files(subdir, glob)
        )

    # ---------------- git probes ----------------

    def is_tracked(self, relative: str) -> bool:
        """Whether a file is tracked by git; always True without a repository."""
        if self.repo is None:
            return True
        try:
            self.repo.git.ls_files("--error-unmatch", relative)
        except GitCommandError:
            return False
        return True


# ============================================================
# Helpers
# ============================================================

def count_matching_lines(text: str, pattern: Pattern) -> int:
    """Count lines containing a substring or matching a compiled regex."""
    if not text:
        return 0
    if isinstance(pattern, str):
        return sum(1 for line in text.splitlines() if pattern in line)
    return sum(1 for line in text.splitlines() if pattern.search(line))


def _open_repository(path: Path) -> Optional[Repo]:
    if not (path / ".git").exists():
        return None
    try:
        return Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        logger.warning(f"Ignoring unusable git repository at {path}: {e}")
        return None


def is_extension(path: Path) -> bool:
    return any((path / marker).is_file() for marker in EXTENSION_MARKERS)


def load_project(target: Union[str, Path], require_extension: bool = False) -> ExtensionProject:
    """
    Load an extension directory

    Args:
        target: Extension directory path
        require_extension: Reject directories without composer.json or ext_emconf.php

    Returns:
        ExtensionProject

    Raises:
        ConformanceError: Path missing or not a directory
        NotAnExtensionError: require_extension is set and no marker file exists
    """
    project_path = Path(target).resolve()

    if not project_path.exists():
        raise ConformanceError(f"Directory {target} not found")
    if not project_path.is_dir():
        raise ConformanceError(f"Path is not a directory: {target}")

    if require_extension and not is_extension(project_path):
        raise NotAnExtensionError(
            "Not a TYPO3 extension (composer.json or ext_emconf.php not found)"
        )

    return ExtensionProject(path=project_path, repo=_open_repository(project_path))
