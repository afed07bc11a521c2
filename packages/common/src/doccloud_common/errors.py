"""Custom error types for the doc-cloud publisher.

All errors follow the "fail fast" principle with explicit messages.
The orchestrator stamps ``phase`` on an error before re-raising it so the
host can report which step of the publish run failed.
"""

from typing import Optional


class DocCloudError(Exception):
    """Base exception for all doc-cloud errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.phase: Optional[str] = None


class ConfigFileError(DocCloudError):
    """Publish configuration file is missing or malformed."""

    pass


# -----------------------------------------------------------------------------
# Validation errors
# -----------------------------------------------------------------------------


class ValidationError(DocCloudError):
    """Publish configuration failed validation."""

    pass


class MissingFieldError(ValidationError):
    """A required identity field (name, version) is empty or absent."""

    def __init__(self, field: str):
        super().__init__(f"Project's {field} is missing")
        self.field = field


class DuplicateBookNameError(ValidationError):
    """Two books share a name (compared case-insensitively)."""

    def __init__(self, name: str):
        super().__init__(f"Book name '{name}' is duplicated")
        self.name = name


class MissingCompiledBookError(ValidationError):
    """A book's compiled output directory does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Compiled book not found: {path}")
        self.path = path


class UnsafeStorageError(ValidationError):
    """Scratch storage overlaps a book's compiled output.

    Storage is wiped at the start of every run.
    """

    def __init__(self, storage: str, output: str):
        super().__init__(f"Scratch storage {storage} overlaps compiled output {output}")
        self.storage = storage
        self.output = output


# -----------------------------------------------------------------------------
# Publish errors
# -----------------------------------------------------------------------------


class PublishError(DocCloudError):
    """Error while packaging or uploading a publish run."""

    pass


class ArchiveIOError(PublishError):
    """Filesystem failure while assembling the archive."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Archive I/O failed on {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path


class StorageError(PublishError):
    """Scratch storage could not be reset or written."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Scratch storage failed on {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path


class UploadError(PublishError):
    """Error pushing the archive to Doc Cloud."""

    pass


class TransportError(UploadError):
    """Network-level failure (timeout, connection refused, ...)."""

    pass


class ProtocolError(UploadError):
    """Doc Cloud answered with a body that breaks the response contract.

    The raw body is kept on ``body`` and embedded in the message.
    """

    def __init__(self, body: str):
        super().__init__(f"Response not in expected JSON format: {body}")
        self.body = body


class RemoteRejectedError(UploadError):
    """Doc Cloud answered with ``success: false``."""

    def __init__(self, remote_error: Optional[str]):
        super().__init__(f"Doc Cloud rejected the package: {remote_error or 'unknown error'}")
        self.remote_error = remote_error
