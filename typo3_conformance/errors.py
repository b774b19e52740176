"""
Error types raised by the conformance checker.
"""


class ConformanceError(Exception):
    """Base class for all conformance checker errors."""
    pass


class NotAnExtensionError(ConformanceError):
    """The target directory is not a TYPO3 extension."""
    pass


class ReportFileError(ConformanceError):
    """The report file cannot be read or written."""
    pass


class ConfigError(ConformanceError):
    """The scoring configuration file is invalid."""
    pass
