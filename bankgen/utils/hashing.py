"""bankgen - Hashing utilities.

All hash functions return HEX DIGEST ONLY (no prefix).
"""

import hashlib
from collections.abc import Iterable


def sha256_bytes(data: bytes) -> str:
    """Compute SHA256 hash of bytes.

    Args:
        data: Bytes to hash.

    Returns:
        SHA256 hex digest (64 lowercase hex characters, no prefix).
    """
    return hashlib.sha256(data).hexdigest()


def path_set_digest(paths: Iterable[str]) -> str:
    """Compute an order-independent digest of a set of hierarchical paths.

    Paths are sorted by code point and joined with newlines before hashing,
    so the digest only changes when the set of paths changes.

    Args:
        paths: Path strings (e.g. "event:/Weapons/Fire").

    Returns:
        SHA256 hex digest of the canonical path listing.
    """
    canonical = "\n".join(sorted(paths))
    return sha256_bytes(canonical.encode("utf-8"))
