"""Filelist management: fetching, caching, and parsing."""
from fv_patcher.manifest.cache import filelist_name, filelist_url, is_cache_stale, resolve_manifest
from fv_patcher.manifest.fetcher import Fetcher, SessionFetcher, fetch_url, make_fetcher
from fv_patcher.manifest.schemas import FileEntry, ManifestDocument

__all__ = [
    "FileEntry",
    "Fetcher",
    "ManifestDocument",
    "SessionFetcher",
    "fetch_url",
    "filelist_name",
    "filelist_url",
    "is_cache_stale",
    "make_fetcher",
    "resolve_manifest",
]
