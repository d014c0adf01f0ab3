"""Manifest cache: reuse a downloaded filelist until it ages out."""
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from fv_patcher.core.config import PatcherConfig
from fv_patcher.core.errors import CacheError
from fv_patcher.manifest.fetcher import Fetcher, make_fetcher
from fv_patcher.manifest.schemas import ManifestDocument

logger = logging.getLogger(__name__)


def filelist_name(client: str, expansion: str) -> str:
    """Cache file name for a (client, expansion) pair.

    Examples:
        rof, kunark -> filelist_rof.kunark.yml
    """
    return f"filelist_{client}.{expansion}.yml"


def filelist_url(client: str, expansion: str) -> str:
    """Remote filelist location for a (client, expansion) pair.

    Examples:
        rof, original -> https://original.fvproject.com/rof/filelist_rof.yml
    """
    return f"https://{expansion}.fvproject.com/{client}/filelist_{client}.yml"


def is_cache_stale(path: Path, max_age_days: int = 7, now: Optional[datetime] = None) -> bool:
    """True if ``path`` is missing or was last modified more than ``max_age_days`` ago."""
    try:
        mtime = Path(path).stat().st_mtime
    except OSError:
        return True

    now = now or datetime.now()
    cutoff = now - timedelta(days=max_age_days)
    return datetime.fromtimestamp(mtime) < cutoff


def resolve_manifest(config: PatcherConfig, fetcher: Optional[Fetcher] = None) -> ManifestDocument:
    """Return the filelist for ``config``, refreshing the cached copy if stale.

    A stale or missing cache is always refetched; there is no fallback to an
    older copy when the fetch fails.

    Args:
        config: Run configuration (client, expansion, cache_dir, max_age_days)
        fetcher: Callable returning the bytes at a URL (default: HTTP)

    Returns:
        Parsed ManifestDocument

    Raises:
        TransportError: If the filelist fetch fails
        CacheError: If the cache directory or file cannot be written or read
        ManifestParseError: If the filelist is malformed
    """
    client = config.client.value
    expansion = config.expansion.value
    cache_dir = Path(config.cache_dir)
    cache_path = cache_dir / filelist_name(client, expansion)
    url = config.manifest_url or filelist_url(client, expansion)

    logger.info(f"Filelist URL is {url}")

    if config.force_refresh or is_cache_stale(cache_path, config.max_age_days):
        logger.info(f"GET {url} ...")
        if fetcher is None:
            with make_fetcher(config) as fetch:
                data = fetch(url)
        else:
            data = fetcher(url)
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
            cache_path.write_bytes(data)
        except OSError as e:
            raise CacheError(f"Cannot write filelist cache {cache_path}: {e}") from e
        logger.info(f"Filelist cached to {cache_path}")
    else:
        logger.info(f"Using cached filelist: {cache_path}")

    return ManifestDocument.load(cache_path)
