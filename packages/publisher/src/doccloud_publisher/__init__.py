"""Doc Cloud publisher - package compiled books and push them to Doc Cloud.

Quick Start
-----------
>>> from doccloud_publisher import PublishConfig, PublishOrchestrator, ProgressCounter
>>> config = PublishConfig.from_file("publish.json")
>>> result = await PublishOrchestrator().publish(config, ".doccloud", ProgressCounter())
"""

from .archive import PROGRESS_UNITS_PER_BOOK, archive_key, assemble_archive
from .manifest import (
    MANIFEST_FILENAME,
    build_manifest,
    manifest_json,
    persist_manifest,
    write_manifest,
)
from .models import BookRef, PublishConfig, PublishResult, UploadResponse
from .orchestrator import PublishOrchestrator, PublishState, reset_storage
from .plugin import PLUGIN, PluginDescriptor, PluginType, RunContext, check, handle, install
from .progress import ProgressCounter, ProgressSink
from .uploader import MIN_UPLOAD_STEPS, UPLOAD_FIELD_NAME, DocCloudUploader
from .validator import validate_config, validate_storage

__all__ = [
    # Models
    "BookRef",
    "PublishConfig",
    "PublishResult",
    "UploadResponse",
    # Pipeline
    "validate_config",
    "validate_storage",
    "build_manifest",
    "manifest_json",
    "write_manifest",
    "persist_manifest",
    "assemble_archive",
    "archive_key",
    "DocCloudUploader",
    "PublishOrchestrator",
    "PublishState",
    "reset_storage",
    # Progress
    "ProgressSink",
    "ProgressCounter",
    # Host plugin
    "PLUGIN",
    "PluginDescriptor",
    "PluginType",
    "RunContext",
    "install",
    "check",
    "handle",
    # Constants
    "MANIFEST_FILENAME",
    "MIN_UPLOAD_STEPS",
    "PROGRESS_UNITS_PER_BOOK",
    "UPLOAD_FIELD_NAME",
]

__version__ = "0.1.0"
