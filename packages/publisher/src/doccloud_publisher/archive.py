"""Archive assembly.

Packs ``docs.json`` plus every compiled file of every book into
``<storage>/<name>_<version>.zip``. Books are read concurrently (one task per
book, one thread-backed read per file); each file lands at
``books/<book>/<relative path>`` with forward slashes whatever the host OS.

Entries are written sorted, with a fixed timestamp, so two runs over the
same input produce the same bytes.
"""

import asyncio
import io
import zipfile
from pathlib import Path
from typing import Union

from doccloud_common import ArchiveIOError, get_logger

from doccloud_publisher.manifest import MANIFEST_FILENAME
from doccloud_publisher.models import BookRef, PublishConfig
from doccloud_publisher.progress import ProgressSink

logger = get_logger(__name__)

# One unit is ticked when a book is packed; the other is left for the upload.
PROGRESS_UNITS_PER_BOOK = 2

BOOKS_PREFIX = "books"
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


def archive_key(book_name: str, relative: Path) -> str:
    """Archive path for a file of ``book_name`` at ``relative`` inside its output dir."""
    return "/".join([BOOKS_PREFIX, book_name, relative.as_posix()])


def list_book_files(root: Path) -> list[Path]:
    """All files (no directories) below ``root``, recursively."""
    return sorted(path for path in root.rglob("*") if path.is_file())


async def _read_file(path: Path) -> bytes:
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise ArchiveIOError(str(path), e.strerror or str(e)) from e


async def _pack_book(
    book: BookRef,
    entries: dict[str, bytes],
    progress: ProgressSink,
    counter: dict[str, int],
    total_books: int,
) -> None:
    root = book.output_path
    if not root.is_dir():
        raise ArchiveIOError(str(root), "compiled book directory is missing")

    try:
        files = await asyncio.to_thread(list_book_files, root)
    except OSError as e:
        raise ArchiveIOError(str(root), e.strerror or str(e)) from e

    contents = await asyncio.gather(*(_read_file(path) for path in files))
    for path, data in zip(files, contents):
        entries[archive_key(book.name, path.relative_to(root))] = data

    counter["done"] += 1
    progress.tick()
    logger.info(
        "book_packaged",
        book=book.name,
        files=len(files),
        progress=f"{counter['done']}/{total_books}",
    )


def _zip_bytes(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for key in sorted(entries):
            info = zipfile.ZipInfo(key, date_time=ZIP_TIMESTAMP)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, entries[key])
    return buffer.getvalue()


async def assemble_archive(
    config: PublishConfig,
    storage: Union[str, Path],
    progress: ProgressSink,
) -> Path:
    """Build the publish archive from the manifest and compiled books.

    Args:
        config: Validated publish config
        storage: Scratch directory already holding ``docs.json``
        progress: Sink ticked once per packed book

    Returns:
        Path to ``<storage>/<name>_<version>.zip``

    Raises:
        ArchiveIOError: If the manifest or any book file cannot be read
    """
    storage = Path(storage)
    manifest_path = storage / MANIFEST_FILENAME

    entries: dict[str, bytes] = {MANIFEST_FILENAME: await _read_file(manifest_path)}

    progress.expand_by(PROGRESS_UNITS_PER_BOOK * len(config.books))

    counter = {"done": 0}
    await asyncio.gather(
        *(
            _pack_book(book, entries, progress, counter, len(config.books))
            for book in config.books
        )
    )

    content = await asyncio.to_thread(_zip_bytes, entries)
    archive_path = storage / config.archive_filename
    try:
        await asyncio.to_thread(archive_path.write_bytes, content)
    except OSError as e:
        raise ArchiveIOError(str(archive_path), e.strerror or str(e)) from e

    logger.info(
        "archive_written",
        path=str(archive_path),
        entries=len(entries),
        size=len(content),
    )
    return archive_path
