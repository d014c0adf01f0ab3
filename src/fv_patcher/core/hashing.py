"""Content checksums used to detect missing or corrupt files.

The filelist publishes MD5 digests, so MD5 is fixed here by the wire format.
It is a corruption check only and says nothing about authenticity.
"""
import hashlib
from pathlib import Path
from typing import Union

CHUNK_SIZE = 1 << 16


def digest(data: bytes) -> str:
    """Return the lower-case hex MD5 of ``data``."""
    return hashlib.md5(data).hexdigest()


def digest_of_file(path: Union[str, Path]) -> str:
    """Stream a file through MD5 without loading it whole.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    h = hashlib.md5()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(block)
    return h.hexdigest()
