"""Exception classes for resource-accessor."""

from pathlib import Path


class ResourceAccessorError(Exception):
    """Base exception for all resource-accessor errors."""
    pass


class PathError(ResourceAccessorError):
    """Raised when a logical path is malformed or cannot be decoded."""
    pass


class EncodingError(ResourceAccessorError):
    """Raised when the configured output encoding is not supported."""
    pass


class ArchiveOpenError(ResourceAccessorError):
    """Raised when an archive cannot be opened or read.

    Attributes:
        archive_path: Path of the archive that failed to open
    """

    def __init__(self, message: str, archive_path: Path | None = None):
        super().__init__(message)
        self.archive_path = archive_path


class RootDescriptorError(ResourceAccessorError):
    """Raised when a resource root descriptor cannot be parsed."""
    pass


class ConfigError(ResourceAccessorError):
    """Raised when a configuration file is missing or invalid."""
    pass
