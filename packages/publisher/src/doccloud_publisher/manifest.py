"""Manifest (docs.json) construction.

The manifest is the whole validated config with every book titled. It is
written to scratch storage and read back by the archive step.
"""

import json
from pathlib import Path
from typing import Union

from doccloud_common import StorageError, get_logger

from doccloud_publisher.models import PublishConfig

logger = get_logger(__name__)

MANIFEST_FILENAME = "docs.json"


def build_manifest(config: PublishConfig) -> PublishConfig:
    """Return a copy of ``config`` where untitled books use their name as title."""
    books = [
        book if book.title else book.model_copy(update={"title": book.name})
        for book in config.books
    ]
    return config.model_copy(update={"books": books})


def manifest_json(manifest: PublishConfig) -> str:
    """Serialize a manifest with stable key order.

    Identical manifests always give byte-identical text.
    """
    payload = manifest.model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def write_manifest(manifest: PublishConfig, storage: Union[str, Path]) -> Path:
    """Write ``docs.json`` into scratch storage.

    Returns:
        Path to the written manifest

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(storage) / MANIFEST_FILENAME
    try:
        path.write_text(manifest_json(manifest), encoding="utf-8")
    except OSError as e:
        raise StorageError(str(path), e.strerror or str(e)) from e
    logger.info("manifest_written", path=str(path), books=len(manifest.books))
    return path


def persist_manifest(
    config: PublishConfig, storage: Union[str, Path]
) -> tuple[PublishConfig, Path]:
    """Build the manifest for ``config`` and write it to ``storage``."""
    manifest = build_manifest(config)
    return manifest, write_manifest(manifest, storage)
