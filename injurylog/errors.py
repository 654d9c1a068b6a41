"""Exceptions raised by the injury log engine."""


class InjuryLogError(Exception):
    """Base class for injury log errors."""


class StorageError(InjuryLogError):
    """The storage backend failed or returned something unusable."""


class NotFoundError(StorageError):
    """The requested blob does not exist."""

    def __init__(self, path: str):
        super().__init__(f"{path} not found")
        self.path = path


class ConflictError(StorageError):
    """A write was rejected because the blob changed since it was read."""

    def __init__(self, path: str, expected_version: str | None = None):
        super().__init__(f"{path} was modified by another writer (expected version {expected_version})")
        self.path = path
        self.expected_version = expected_version


class LogFormatError(InjuryLogError, ValueError):
    """A value cannot be represented in the unescaped CSV log format."""
