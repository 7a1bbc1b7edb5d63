"""bankgen - Path collection.

Reduces the raw paths reported by the loaded banks to the de-duplicated
list handed to identifier synthesis.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bankgen.namespaces import Namespace
from bankgen.studio import PathRecord

logger = logging.getLogger(__name__)


def collect_paths(records: Iterable[PathRecord], namespace: Namespace) -> list[str]:
    """Filter and de-duplicate raw paths for one namespace.

    Rules:
    - blank paths are skipped
    - snapshots are skipped when collecting events
    - the scheme prefix must match the namespace (case-insensitive)
    - duplicates are dropped case-insensitively; the first spelling and the
      first-seen order are kept

    Args:
        records: Raw path records from the loaded banks.
        namespace: Namespace being collected.

    Returns:
        Unique paths in discovery order. Empty when nothing survives.
    """
    prefix = namespace.prefix
    seen: set[str] = set()
    paths: list[str] = []
    skipped = 0

    for record in records:
        path = record.path
        if not path or not path.strip():
            continue
        if namespace is Namespace.EVENT and record.is_snapshot:
            skipped += 1
            continue
        key = path.lower()
        if not key.startswith(prefix):
            skipped += 1
            continue
        if key in seen:
            continue
        seen.add(key)
        paths.append(path)

    logger.debug("Collected %d %s paths (%d filtered out)", len(paths), namespace.value, skipped)
    return paths
