"""File filtering for the conformance checks.

This module provides pathspec-based gitignore filtering using
the mature pathspec library.
"""

from typo3_conformance.filters.pathspec_filter import (
    PathspecFilter,
    DEFAULT_IGNORE_PATTERNS,
)

__all__ = [
    "PathspecFilter",
    "DEFAULT_IGNORE_PATTERNS",
]
