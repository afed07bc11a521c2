"""Publish configuration validation.

Checks run in a fixed order and stop at the first violation:
identity fields, duplicate book names, then compiled output on disk.

``validate_storage`` guards the scratch directory, which every run wipes.
"""

from pathlib import Path
from typing import Union

from doccloud_common import (
    DuplicateBookNameError,
    MissingCompiledBookError,
    MissingFieldError,
    UnsafeStorageError,
    get_logger,
)

from doccloud_publisher.models import PublishConfig

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "version")


def validate_config(config: PublishConfig) -> None:
    """Validate a publish config against the filesystem.

    Args:
        config: Publish configuration to inspect (not modified)

    Raises:
        MissingFieldError: If ``name`` or ``version`` is empty
        DuplicateBookNameError: If two book names match case-insensitively
        MissingCompiledBookError: If ``<outdir>/<name>`` does not exist
    """
    for field in REQUIRED_FIELDS:
        if not getattr(config, field, None):
            raise MissingFieldError(field)

    seen: set[str] = set()
    for book in config.books:
        key = book.name.lower()
        if key in seen:
            raise DuplicateBookNameError(book.name)
        seen.add(key)

    # Books may share an outdir; only the derived <outdir>/<name> must exist.
    for book in config.books:
        if not book.output_path.exists():
            raise MissingCompiledBookError(str(book.output_path))

    logger.debug("config_validated", name=config.name, books=len(config.books))


def validate_storage(config: PublishConfig, storage: Union[str, Path]) -> None:
    """Refuse scratch storage that overlaps a book's compiled output.

    Raises:
        UnsafeStorageError: If ``storage`` is, contains or sits inside
            ``<outdir>/<name>`` of any book
    """
    scratch = Path(storage).resolve()
    for book in config.books:
        output = book.output_path.resolve()
        if scratch == output or scratch in output.parents or output in scratch.parents:
            raise UnsafeStorageError(str(storage), str(book.output_path))
