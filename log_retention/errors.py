"""Exceptions raised by the read-side of the log directory."""


class LogRetentionError(Exception):
    """Base class for log retention errors."""


class InvalidPathError(LogRetentionError):
    """Raised when a requested file name resolves outside the log directory."""


class DirectoryError(LogRetentionError):
    """Raised when the log directory cannot be opened or enumerated."""


class LogFileError(LogRetentionError):
    """Raised when a log file cannot be opened or read."""
