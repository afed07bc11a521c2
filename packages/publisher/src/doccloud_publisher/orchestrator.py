"""Publish run orchestration.

Sequences validation, manifest, archive and upload for a single run:

    IDLE -> VALIDATING -> BUILDING_MANIFEST -> ASSEMBLING -> UPLOADING -> DONE

Any phase may fail; the run moves to FAILED and the original error is
re-raised with ``error.phase`` set. There are no retries at this layer.
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from doccloud_common import (
    DocCloudError,
    Settings,
    StorageError,
    get_logger,
    get_settings,
)

from doccloud_publisher.archive import assemble_archive
from doccloud_publisher.manifest import persist_manifest
from doccloud_publisher.models import PublishConfig, PublishResult
from doccloud_publisher.progress import ProgressSink
from doccloud_publisher.uploader import DocCloudUploader
from doccloud_publisher.validator import validate_config, validate_storage

logger = get_logger(__name__)


class PublishState(str, Enum):
    """Lifecycle of a publish run."""

    IDLE = "idle"
    VALIDATING = "validating"
    BUILDING_MANIFEST = "building_manifest"
    ASSEMBLING = "assembling"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


def reset_storage(storage: Union[str, Path]) -> Path:
    """Remove ``storage`` if present and recreate it empty.

    Raises:
        StorageError: If the directory cannot be removed or created
    """
    storage = Path(storage)
    try:
        if storage.exists():
            shutil.rmtree(storage)
        storage.mkdir(parents=True)
    except OSError as e:
        raise StorageError(str(storage), e.strerror or str(e)) from e
    return storage


class PublishOrchestrator:
    """Runs one publish attempt end to end.

    Example:
        >>> orchestrator = PublishOrchestrator()
        >>> result = await orchestrator.publish(config, ".doccloud", ProgressCounter())
        >>> result.archive_path
        PosixPath('.doccloud/pandora-cloud_1.0.0.zip')
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        uploader: Optional[DocCloudUploader] = None,
    ):
        self.settings = settings or get_settings()
        self.uploader = uploader or DocCloudUploader(
            endpoint=self.settings.doc_cloud_url,
            timeout=self.settings.upload_timeout,
        )
        self.state = PublishState.IDLE

    def _enter(self, state: PublishState) -> None:
        self.state = state
        logger.debug("publish_state", state=state.value)

    async def publish(
        self,
        config: PublishConfig,
        storage: Union[str, Path],
        progress: ProgressSink,
    ) -> PublishResult:
        """Validate, package and upload ``config``'s books.

        Args:
            config: Publish configuration from the host
            storage: Scratch directory, wiped before the manifest is written
            progress: Host progress sink

        Returns:
            PublishResult with the archive and manifest paths

        Raises:
            DocCloudError: The first failure, with ``phase`` set
        """
        storage = Path(storage)
        logger.info("publish_started", name=config.name, version=config.version)

        try:
            self._enter(PublishState.VALIDATING)
            validate_config(config)
            validate_storage(config, storage)

            self._enter(PublishState.BUILDING_MANIFEST)
            reset_storage(storage)
            manifest, manifest_path = persist_manifest(config, storage)

            self._enter(PublishState.ASSEMBLING)
            archive_path = await assemble_archive(manifest, storage, progress)

            self._enter(PublishState.UPLOADING)
            await self.uploader.upload(archive_path, len(manifest.books), progress)
        except DocCloudError as e:
            e.phase = self.state.value
            logger.error("publish_failed", phase=e.phase, error=str(e))
            self.state = PublishState.FAILED
            raise
        except Exception as e:
            logger.exception("publish_crashed", phase=self.state.value, error=str(e))
            self.state = PublishState.FAILED
            raise

        self._enter(PublishState.DONE)
        logger.info("publish_completed", archive=str(archive_path))
        return PublishResult(
            archive_path=archive_path,
            manifest_path=manifest_path,
            books_count=len(manifest.books),
        )
