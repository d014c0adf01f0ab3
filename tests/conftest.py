"""Pytest fixtures for fv-patcher tests."""
import hashlib
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import yaml

from fv_patcher.core.errors import TransportError

PREFIX = "https://original.fvproject.com/rof/"


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


class FakeFetcher:
    """In-memory stand-in for the HTTP fetcher.

    Serves bytes registered per URL, records every requested URL, raises
    TransportError (as a 404) for anything unregistered, and notes when it
    is closed.
    """

    def __init__(self, responses: Optional[Dict[str, bytes]] = None):
        self.responses: Dict[str, bytes] = dict(responses or {})
        self.requests: List[str] = []
        self.closed = False

    def __call__(self, url: str) -> bytes:
        self.requests.append(url)
        if url not in self.responses:
            raise TransportError(f"GET {url} returned HTTP 404", url=url, status_code=404)
        return self.responses[url]

    def __enter__(self) -> "FakeFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.closed = True


def filelist_yaml(
    deletes: Optional[List[dict]] = None,
    downloads: Optional[List[dict]] = None,
    version: str = "2024-05-01",
    prefix: str = PREFIX,
) -> str:
    """Render a filelist document in the wire format."""
    return yaml.safe_dump({
        "Version": version,
        "DownloadPrefix": prefix,
        "Deletes": deletes or [],
        "Downloads": downloads or [],
    })


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """Empty installation root directory."""
    root = tmp_path / "everquest"
    root.mkdir()
    return root


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "settings"
