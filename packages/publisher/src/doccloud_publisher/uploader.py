"""Doc Cloud upload client.

Posts the archive as a multipart form (field ``doc-package``) and checks the
JSON verdict. Upload progress is estimated from bytes handed to the HTTP
stream: the file is split into ``max(books, 10)`` equal slices and one tick
is emitted per slice sent, except the last one, which is filled only once
Doc Cloud confirms success.
"""

import asyncio
import io
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from doccloud_common import (
    ArchiveIOError,
    ProtocolError,
    RemoteRejectedError,
    TransportError,
    get_logger,
)

from doccloud_publisher.models import UploadResponse
from doccloud_publisher.progress import ProgressSink

logger = get_logger(__name__)

UPLOAD_FIELD_NAME = "doc-package"
DEFAULT_UPLOAD_TIMEOUT = 120.0  # seconds
MIN_UPLOAD_STEPS = 10
ARCHIVE_CONTENT_TYPE = "application/zip"


class UploadProgress:
    """Maps cumulative bytes sent to progress ticks."""

    def __init__(self, progress: ProgressSink, file_size: int, steps: int):
        self.progress = progress
        self.file_size = file_size
        self.steps = steps
        self.step_size = file_size / steps
        self.next_boundary = self.step_size
        self.sent = 0
        self.ticks = 0

    def advance(self, n_bytes: int) -> None:
        self.sent += n_bytes
        while (
            self.sent >= self.next_boundary
            and self.sent < self.file_size
            and self.ticks < self.steps - 1
        ):
            self.progress.tick()
            self.ticks += 1
            self.next_boundary += self.step_size
            logger.debug(
                "upload_progress",
                percent=round(100 * self.sent / self.file_size),
                sent=self.sent,
                size=self.file_size,
            )


class ProgressReader:
    """File wrapper reporting every chunk read by the HTTP stream.

    Delegates ``seek``/``tell`` so httpx can size the part and send a
    Content-Length instead of chunked encoding.
    """

    def __init__(self, fileobj: BinaryIO, on_read: Callable[[int], None]):
        self._file = fileobj
        self._on_read = on_read
        self.name = getattr(fileobj, "name", "")

    def read(self, size: int = -1) -> bytes:
        chunk = self._file.read(size)
        if chunk:
            self._on_read(len(chunk))
        return chunk

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()


class DocCloudUploader:
    """Single-attempt uploader for publish archives.

    Example:
        >>> uploader = DocCloudUploader("https://docs.example.com/api/packages")
        >>> await uploader.upload(archive_path, books_count=2, progress=progress)
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_UPLOAD_TIMEOUT,
        field_name: str = UPLOAD_FIELD_NAME,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the uploader.

        Args:
            endpoint: Doc Cloud URL receiving the multipart POST
            timeout: Upload timeout in seconds
            field_name: Multipart field carrying the archive
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.field_name = field_name
        self._transport = transport

    async def upload(
        self,
        archive_path: Union[str, Path],
        books_count: int,
        progress: ProgressSink,
    ) -> UploadResponse:
        """Upload an archive and validate Doc Cloud's answer.

        Args:
            archive_path: Zip produced by ``assemble_archive``
            books_count: Number of books in the archive (sizes the tick budget)
            progress: Sink ticked while bytes are sent, filled on success

        Returns:
            Parsed Doc Cloud response (``success`` is always True)

        Raises:
            ArchiveIOError: If the archive cannot be opened
            TransportError: On timeout or connection failure
            ProtocolError: If the body is not ``{"success": bool, ...}`` JSON
            RemoteRejectedError: If Doc Cloud answers ``success: false``
        """
        archive_path = Path(archive_path)
        try:
            # Loaded off the event loop; httpx iterates multipart bodies inline.
            payload = await asyncio.to_thread(archive_path.read_bytes)
        except OSError as e:
            raise ArchiveIOError(str(archive_path), e.strerror or str(e)) from e
        file_size = len(payload)

        steps = max(books_count, MIN_UPLOAD_STEPS)
        # The archive step already reserved one unit per book for the upload.
        progress.expand_by(max(0, steps - books_count))
        tracker = UploadProgress(progress, file_size, steps)

        logger.info(
            "upload_started",
            endpoint=self.endpoint,
            archive=archive_path.name,
            size=file_size,
        )

        reader = ProgressReader(io.BytesIO(payload), tracker.advance)
        files = {self.field_name: (archive_path.name, reader, ARCHIVE_CONTENT_TYPE)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                # httpx timeouts apply per operation; this bounds the whole request.
                response = await asyncio.wait_for(
                    client.post(self.endpoint, files=files), timeout=self.timeout
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error("upload_timeout", endpoint=self.endpoint, timeout=self.timeout)
            raise TransportError(
                f"Upload to {self.endpoint} timed out after {self.timeout}s: {e!r}"
            ) from e
        except httpx.TransportError as e:
            logger.error("upload_transport_error", endpoint=self.endpoint, error=str(e))
            raise TransportError(f"Upload to {self.endpoint} failed: {e}") from e

        verdict = self._parse_response(response)
        if not verdict.success:
            logger.error("upload_rejected", status=response.status_code, error=verdict.error)
            raise RemoteRejectedError(verdict.error)

        progress.fill()
        logger.info("upload_completed", status=response.status_code, sent=tracker.sent)
        return verdict

    @staticmethod
    def _parse_response(response: httpx.Response) -> UploadResponse:
        body = response.text
        try:
            return UploadResponse.model_validate_json(body)
        except PydanticValidationError as e:
            logger.error(
                "upload_protocol_error",
                status=response.status_code,
                body=body[:200],
                error=str(e),
            )
            raise ProtocolError(body) from e
