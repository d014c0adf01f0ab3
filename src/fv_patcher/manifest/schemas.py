"""Filelist manifest model.

The remote filelist is YAML with capitalised keys::

    Version: "2024-05-01"
    DownloadPrefix: https://original.fvproject.com/rof/
    Deletes:
      - Name: old.dat
    Downloads:
      - Name: spells_us.txt
        MD5: 0123456789abcdef0123456789abcdef
        Date: "20240501"
        Size: 1024
"""
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fv_patcher.core.errors import CacheError, ManifestParseError


class FileEntry(BaseModel):
    """One filelist line item. ``date`` and ``size`` are advisory only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., alias="Name", min_length=1, description="Path relative to the install root")
    md5: str = Field(default="", alias="MD5", description="Expected hex digest")
    date: str = Field(default="", alias="Date")
    size: int = Field(default=0, alias="Size", ge=0)

    @field_validator("name", "md5", "date", mode="before")
    @classmethod
    def coerce_text(cls, v) -> str:
        """YAML may load unquoted numbers or dates as non-strings; keep them as text."""
        if v is None:
            return ""
        return str(v)

    @field_validator("md5")
    @classmethod
    def normalize_md5(cls, v: str) -> str:
        return v.strip().lower()


class ManifestDocument(BaseModel):
    """Desired state for one (client, expansion) pair. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = Field(default="", alias="Version")
    download_prefix: str = Field(default="", alias="DownloadPrefix")
    deletes: List[FileEntry] = Field(default_factory=list, alias="Deletes")
    downloads: List[FileEntry] = Field(default_factory=list, alias="Downloads")

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("deletes", "downloads", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("downloads")
    @classmethod
    def require_download_hashes(cls, v: List[FileEntry]) -> List[FileEntry]:
        """Every download entry must declare a checksum."""
        missing = [entry.name for entry in v if not entry.md5]
        if missing:
            raise ValueError(f"download entries without MD5: {', '.join(missing)}")
        return v

    def url_for(self, entry: FileEntry) -> str:
        """Fetch URL for an entry: the download prefix concatenated with its name."""
        return self.download_prefix + entry.name

    @classmethod
    def from_yaml(cls, data: Union[bytes, str]) -> "ManifestDocument":
        """Parse a filelist document.

        Raises:
            ManifestParseError: If the YAML is malformed or fails validation.
        """
        try:
            raw = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise ManifestParseError(f"Invalid filelist YAML: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ManifestParseError(
                f"Filelist must be a mapping, got {type(raw).__name__}"
            )

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ManifestParseError(f"Invalid filelist: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "ManifestDocument":
        """Load and parse a cached filelist from disk."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CacheError(f"Cannot read cached filelist {path}: {e}") from e
        return cls.from_yaml(data)
