"""bankgen - Failpoint injection for crash testing.

Lets tests kill a run at a named point to prove that an interrupted run
never leaves a partial generated file behind.

Safety gate: failpoints are only active when BANKGEN_ENABLE_FAILPOINTS=1;
otherwise maybe_fail() is a no-op.

Environment variables:
- BANKGEN_ENABLE_FAILPOINTS: "1" enables the failpoint system
- BANKGEN_FAILPOINT: Name of the failpoint to trigger
- BANKGEN_FAILPOINT_EXIT_CODE: Exit code used when crashing (default: 42)

Failpoints:
- ATOMIC_WRITE_AFTER_TMP_WRITE, ATOMIC_WRITE_AFTER_FSYNC_BEFORE_RENAME,
  ATOMIC_WRITE_AFTER_RENAME (bankgen.utils.atomic_io)
- FETCH_BEFORE_PUBLISH (bankgen.pipeline, after rendering, before writing)
"""

from __future__ import annotations

import os

_PREFIX = "FAILPOINT_"


def _normalize(name: str) -> str:
    name = name.strip().upper()
    if name.startswith(_PREFIX):
        name = name[len(_PREFIX) :]
    return name


def is_failpoint_enabled() -> bool:
    """Check if the failpoint system is enabled."""
    return os.environ.get("BANKGEN_ENABLE_FAILPOINTS") == "1"


def get_active_failpoint() -> str | None:
    """Get the armed failpoint name (without FAILPOINT_ prefix), if any."""
    if not is_failpoint_enabled():
        return None
    target = os.environ.get("BANKGEN_FAILPOINT", "")
    return _normalize(target) or None


def maybe_fail(point: str) -> None:
    """Crash the process if the named failpoint is armed.

    Uses os._exit() so that no finally blocks or atexit handlers run, the
    same as a killed process.

    Args:
        point: Failpoint name, with or without the FAILPOINT_ prefix.
    """
    target = get_active_failpoint()
    if target is None or _normalize(point) != target:
        return

    try:
        exit_code = int(os.environ.get("BANKGEN_FAILPOINT_EXIT_CODE", "42"))
    except ValueError:
        exit_code = 42
    os._exit(exit_code)
