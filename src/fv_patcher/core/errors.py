"""Core exception types for fv-patcher."""
from typing import Optional


class FvPatcherError(Exception):
    """Base exception for all fv-patcher errors."""
    pass


class ConfigError(FvPatcherError):
    """Raised when patcher configuration is invalid."""
    pass


class TransportError(FvPatcherError):
    """Raised when a remote fetch fails (network, TLS or HTTP status)."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CacheError(FvPatcherError):
    """Raised when the local manifest cache cannot be written or read."""
    pass


class ManifestParseError(FvPatcherError):
    """Raised when a filelist document is malformed."""
    pass
