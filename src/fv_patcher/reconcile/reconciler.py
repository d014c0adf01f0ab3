"""Reconcile an installation root against a filelist.

Two sequential passes over one ManifestDocument:

- the delete pass removes every listed path that exists; a failed removal is
  logged and the pass continues.
- the download pass hashes each listed file, fetches those that are absent or
  differ, and writes fetched bytes according to the WritePolicy. A failed
  fetch raises TransportError and ends the run.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from fv_patcher.core import hashing
from fv_patcher.core.config import WritePolicy
from fv_patcher.manifest.fetcher import Fetcher
from fv_patcher.manifest.schemas import FileEntry, ManifestDocument

logger = logging.getLogger(__name__)


@dataclass
class PassResult:
    """Counts reported by one pass."""

    attempted: int = 0
    succeeded: int = 0


@dataclass
class ReconcileReport:
    """Outcome of a full reconciliation run."""

    deletes: PassResult = field(default_factory=PassResult)
    downloads: PassResult = field(default_factory=PassResult)
    mismatches: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class Reconciler:
    """Applies a filelist to an installation root."""

    def __init__(
        self,
        root: Path,
        fetcher: Fetcher,
        write_policy: WritePolicy = WritePolicy.MISMATCH_ONLY,
        verbose: bool = False,
    ):
        self.root = Path(root)
        self.fetcher = fetcher
        self.write_policy = write_policy
        self.verbose = verbose
        self.mismatches: List[str] = []
        self.errors: List[str] = []

    def _full_path(self, entry: FileEntry) -> Path:
        # Names are always relative to the root, even with a leading separator.
        return self.root / entry.name.lstrip("/\\")

    def _record_error(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    def handle_deletes(self, manifest: ManifestDocument) -> PassResult:
        """Remove every ``deletes`` entry present under the root."""
        result = PassResult(attempted=len(manifest.deletes))
        logger.info(f"Processing {result.attempted} requests for deletes ...")

        for entry in manifest.deletes:
            full_path = self._full_path(entry)
            if not full_path.exists():
                continue

            logger.info(f"Deleting {entry.name}")
            try:
                if full_path.is_dir() and not full_path.is_symlink():
                    full_path.rmdir()
                else:
                    full_path.unlink()
            except OSError as e:
                self._record_error(f"Delete failed for {entry.name}: {e}")
                continue
            result.succeeded += 1

        logger.info(f"- {result.succeeded} files deleted")
        return result

    def _local_state(self, entry: FileEntry) -> str:
        """Classify the local copy of ``entry`` as missing, ok, mismatch or unreadable."""
        full_path = self._full_path(entry)
        if not full_path.exists():
            return "missing"
        try:
            actual = hashing.digest_of_file(full_path)
        except OSError as e:
            self._record_error(f"Cannot hash {entry.name}: {e}")
            return "unreadable"
        return "ok" if actual == entry.md5 else "mismatch"

    def plan_deletes(self, manifest: ManifestDocument) -> List[FileEntry]:
        """Entries the delete pass would remove."""
        return [entry for entry in manifest.deletes if self._full_path(entry).exists()]

    def plan_downloads(self, manifest: ManifestDocument) -> List[FileEntry]:
        """Entries the download pass would fetch, without touching the network."""
        return [
            entry for entry in manifest.downloads
            if self._local_state(entry) in ("missing", "mismatch")
        ]

    def _write(self, entry: FileEntry, data: bytes) -> bool:
        full_path = self._full_path(entry)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as e:
            self._record_error(f"Write failed for {entry.name}: {e}")
            return False
        return True

    def handle_downloads(self, manifest: ManifestDocument) -> PassResult:
        """Fetch every ``downloads`` entry that is missing or differs locally.

        Raises:
            TransportError: If any fetch fails; remaining entries are not processed
        """
        result = PassResult(attempted=len(manifest.downloads))
        logger.info(f"Processing {result.attempted} requests for downloads ...")

        for entry in manifest.downloads:
            state = self._local_state(entry)
            if state == "unreadable":
                continue
            if state == "ok":
                logger.log(logging.INFO if self.verbose else logging.DEBUG, f"OK {entry.name}")
                continue

            url = manifest.url_for(entry)
            logger.info(f"GET {url}")
            data = self.fetcher(url)
            received = hashing.digest(data)

            if received != entry.md5:
                logger.warning(
                    f"Downloaded MD5 does not match for {entry.name}. "
                    f"Got {received}, expected {entry.md5}. Writing to disk anyway!!!"
                )
                self.mismatches.append(entry.name)
                if self._write(entry, data):
                    result.succeeded += 1
            elif self.write_policy is WritePolicy.ALWAYS:
                if self._write(entry, data):
                    result.succeeded += 1

        logger.info(f"- {result.succeeded} files downloaded")
        return result

    def run(self, manifest: ManifestDocument) -> ReconcileReport:
        """Delete pass, then download pass."""
        self.mismatches = []
        self.errors = []
        deletes = self.handle_deletes(manifest)
        downloads = self.handle_downloads(manifest)
        return ReconcileReport(
            deletes=deletes,
            downloads=downloads,
            mismatches=list(self.mismatches),
            errors=list(self.errors),
        )
