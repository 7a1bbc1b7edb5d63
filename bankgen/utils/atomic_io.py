"""bankgen - Atomic publish of generated files.

A generated source file is either the complete previous version or the
complete new version, never a partial write:
1. Write to a temp path in the same directory
2. Flush + best-effort fsync
3. Rename temp -> final (the publish boundary)

Failpoints (crash tests):
- ATOMIC_WRITE_AFTER_TMP_WRITE: After writing the temp file, before fsync
- ATOMIC_WRITE_AFTER_FSYNC_BEFORE_RENAME: After fsync, before the rename
- ATOMIC_WRITE_AFTER_RENAME: After the rename completes
"""

import logging
import os
from pathlib import Path

from bankgen.utils.failpoints import maybe_fail

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


def _write_all(fd: int, data: bytes) -> None:
    """Write all bytes to a file descriptor, retrying short writes and EINTR.

    Raises:
        OSError: If the write fails or makes no progress.
    """
    view = memoryview(data)
    while view:
        try:
            written = os.write(fd, view)
        except InterruptedError:
            continue
        if written == 0:
            raise OSError("os.write() returned 0 bytes unexpectedly")
        view = view[written:]


def _fsync_directory(dir_path: Path) -> None:
    """Best-effort fsync on a directory so the rename survives a crash."""
    try:
        fd = os.open(dir_path, os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except (OSError, AttributeError):
        # O_DIRECTORY is POSIX only; directory fsync is best-effort
        pass


def atomic_write_bytes(final_path: str | Path, data: bytes, temp_suffix: str = TEMP_SUFFIX) -> None:
    """Atomically replace final_path with data.

    Safe to call when a stale temp file exists (it is overwritten). On a
    write failure the temp file is removed and final_path is untouched.

    Args:
        final_path: Target file.
        data: Complete file contents.
        temp_suffix: Suffix appended to the file name for the temp file.

    Raises:
        OSError: If directory creation, write, or rename fails.
    """
    final_path = Path(final_path)
    temp_path = final_path.with_name(final_path.name + temp_suffix)
    final_path.parent.mkdir(parents=True, exist_ok=True)

    fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    try:
        _write_all(fd, data)
        maybe_fail("ATOMIC_WRITE_AFTER_TMP_WRITE")
        os.fsync(fd)
    except OSError:
        os.close(fd)
        try:
            os.remove(temp_path)
        except OSError:
            pass  # Best-effort cleanup
        raise
    else:
        os.close(fd)

    _fsync_directory(final_path.parent)
    maybe_fail("ATOMIC_WRITE_AFTER_FSYNC_BEFORE_RENAME")

    os.replace(temp_path, final_path)
    maybe_fail("ATOMIC_WRITE_AFTER_RENAME")


def atomic_write_text(
    final_path: str | Path,
    text: str,
    encoding: str = "utf-8",
    temp_suffix: str = TEMP_SUFFIX,
) -> None:
    """Atomically replace final_path with text (see atomic_write_bytes)."""
    atomic_write_bytes(final_path, text.encode(encoding), temp_suffix)


def cleanup_orphan_temp_files(directory: str | Path, temp_suffix: str = TEMP_SUFFIX) -> int:
    """Remove temp files left behind by interrupted writes.

    Args:
        directory: Directory to scan (not recursive).
        temp_suffix: Temp file suffix to match.

    Returns:
        Number of files removed.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return 0

    removed = 0
    for temp_file in directory.glob(f"*{temp_suffix}"):
        try:
            temp_file.unlink()
            removed += 1
        except OSError:
            pass  # Best-effort cleanup
    if removed:
        logger.info("Removed %d orphan temp file(s) from %s", removed, directory)
    return removed
