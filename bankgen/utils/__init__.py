"""bankgen - Utility modules."""

from bankgen.utils.atomic_io import atomic_write_bytes, atomic_write_text, cleanup_orphan_temp_files
from bankgen.utils.hashing import path_set_digest, sha256_bytes

__all__ = [
    # atomic_io
    "atomic_write_bytes",
    "atomic_write_text",
    "cleanup_orphan_temp_files",
    # hashing
    "sha256_bytes",
    "path_set_digest",
]
