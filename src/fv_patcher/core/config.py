"""Run configuration threaded through every patcher component."""
from enum import Enum
from pathlib import Path
from typing import Optional

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fv_patcher.core.errors import ConfigError

APP_NAME = "fvpatcher"


class Client(str, Enum):
    """Supported game clients."""

    ROF = "rof"  # RoF2 client


class Expansion(str, Enum):
    """Expansions served by the filelist host."""

    ORIGINAL = "original"
    KUNARK = "kunark"


class WritePolicy(str, Enum):
    """When fetched bytes are written to the installation root.

    MISMATCH_ONLY reproduces the historic patcher: bytes are written (and
    counted) only when their checksum does not match the filelist, and a
    verified fetch is discarded. ALWAYS writes every fetched file and treats
    a checksum mismatch as a warning.
    """

    MISMATCH_ONLY = "mismatch-only"
    ALWAYS = "always"


def settings_root() -> Path:
    """Per-user directory holding cached filelists (``~/.config/fvpatcher`` on Linux)."""
    return Path(platformdirs.user_config_dir(APP_NAME))


class PatcherConfig(BaseModel):
    """Everything a patch run needs, validated once up front."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Installation root to patch")
    client: Client = Field(..., description="Game client identifier")
    expansion: Expansion = Field(..., description="Expansion identifier")
    verbose: bool = Field(default=False)
    cache_dir: Path = Field(default_factory=settings_root, description="Filelist cache directory")
    max_age_days: int = Field(default=7, ge=0, description="Days before a cached filelist is refetched")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    verify_tls: bool = Field(default=False, description="Verify TLS peers when fetching")
    force_refresh: bool = Field(default=False, description="Refetch the filelist regardless of age")
    write_policy: WritePolicy = Field(default=WritePolicy.MISMATCH_ONLY)
    manifest_url: Optional[str] = Field(default=None, description="Override for the filelist URL")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: Path) -> Path:
        """Installation root must already exist as a directory."""
        if not v.is_dir():
            raise ValueError(f"root must be an existing directory, got: {v}")
        return v

    @classmethod
    def build(cls, **values) -> "PatcherConfig":
        """Construct a config, raising ConfigError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
