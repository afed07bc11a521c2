"""Pydantic models for publish configuration and Doc Cloud responses.

Config models are frozen; transforms such as the manifest title back-fill
return copies instead of mutating caller-owned data. Unknown keys are kept
so richer host configs survive into the manifest.
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from doccloud_common import ConfigFileError


class BookRef(BaseModel):
    """One compiled book to publish."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(description="Book identifier, unique per config (case-insensitive)")
    outdir: str = Field(description="Directory holding the compiled output of this book")
    type: Optional[str] = Field(default=None, description="Opaque book type, passed through")
    title: Optional[str] = Field(default=None, description="Display title (defaults to name)")

    @property
    def output_path(self) -> Path:
        """Compiled output directory: ``<outdir>/<name>``."""
        return Path(self.outdir) / self.name


class PublishConfig(BaseModel):
    """Project-level publish configuration.

    ``name`` and ``version`` default to empty strings so a config missing
    them still loads; ``validate_config`` reports them as missing fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(default="", description="Project name")
    version: str = Field(default="", description="Project version")
    books: list[BookRef] = Field(default_factory=list)

    @property
    def archive_filename(self) -> str:
        return f"{self.name}_{self.version}.zip"

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PublishConfig":
        """Load a publish config from a JSON file.

        Raises:
            ConfigFileError: If the file is missing, not JSON, or malformed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigFileError(f"Cannot read publish config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"Publish config {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigFileError(
                f"Publish config {path} must be a JSON object, got {type(data).__name__}"
            )

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigFileError(f"Publish config {path} is malformed: {e}") from e


class UploadResponse(BaseModel):
    """Doc Cloud verdict: ``{"success": bool, "error"?: str}``."""

    model_config = ConfigDict(extra="allow")

    success: bool = Field(strict=True)
    error: Optional[str] = None


class PublishResult(BaseModel):
    """Outcome of a successful publish run."""

    archive_path: Path
    manifest_path: Path
    books_count: int
