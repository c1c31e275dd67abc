"""Content hashing helpers for manifest staleness and observer evidence.

Every digest is rendered as ``sha256:<hex>`` so manifest hashes, lockfile
checksums and schema checksums share one comparable format.
"""

from __future__ import annotations

import hashlib
from pathlib import Path


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_hash(data: bytes) -> str:
    """Return ``sha256:<hex>`` for raw bytes."""
    return f"sha256:{sha256_hex(data)}"


def file_checksum(path: Path) -> str:
    """Return ``sha256:<hex>`` of a file's contents."""
    return content_hash(Path(path).read_bytes())
