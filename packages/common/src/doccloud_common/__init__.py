"""Doc Cloud common - shared errors, settings and logging."""

from doccloud_common.config import Settings, get_settings
from doccloud_common.errors import (
    ArchiveIOError,
    ConfigFileError,
    DocCloudError,
    DuplicateBookNameError,
    MissingCompiledBookError,
    MissingFieldError,
    ProtocolError,
    PublishError,
    RemoteRejectedError,
    StorageError,
    TransportError,
    UnsafeStorageError,
    UploadError,
    ValidationError,
)
from doccloud_common.logging_config import configure_logging, get_logger

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Errors
    "DocCloudError",
    "ConfigFileError",
    "ValidationError",
    "MissingFieldError",
    "DuplicateBookNameError",
    "MissingCompiledBookError",
    "UnsafeStorageError",
    "PublishError",
    "ArchiveIOError",
    "StorageError",
    "UploadError",
    "TransportError",
    "ProtocolError",
    "RemoteRejectedError",
]
