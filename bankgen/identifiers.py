"""bankgen - Unique identifier synthesis.

Turns slash-delimited FMOD paths into short, readable, collision-free
identifiers:

1. Every path is named after its last segment (depth 1).
2. While identifiers collide, colliding paths are renamed using one more
   trailing segment per round, as long as they still have one.
3. Whatever still collides once segments run out is disambiguated with a
   numeric suffix (``Name_2``, ``Name_3``, ...) in input order.
4. The table is sorted by identifier (code-point order).

The result only depends on input order through step 3.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from bankgen.errors import EmptyPathList
from bankgen.namespaces import Namespace
from bankgen.utils.hashing import path_set_digest

logger = logging.getLogger(__name__)

_ASCII_ALNUM = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789")


# --- Result Types ---


@dataclass(frozen=True)
class IdentifierEntry:
    """One generated identifier and the path it stands for."""

    identifier: str
    path: str


@dataclass(frozen=True)
class IdentifierTable:
    """Final identifier table for one namespace, sorted by identifier."""

    namespace: Namespace
    entries: tuple[IdentifierEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[IdentifierEntry]:
        return iter(self.entries)

    def identifiers(self) -> list[str]:
        return [entry.identifier for entry in self.entries]

    def as_dict(self) -> dict[str, str]:
        """Identifier -> path mapping, in table order."""
        return {entry.identifier: entry.path for entry in self.entries}

    def path_for(self, identifier: str) -> str:
        """Look up the original path of an identifier.

        Raises:
            KeyError: If the identifier is not in the table.
        """
        for entry in self.entries:
            if entry.identifier == identifier:
                return entry.path
        raise KeyError(identifier)

    def source_digest(self) -> str:
        """Digest of the path set this table was generated from."""
        return path_set_digest(entry.path for entry in self.entries)


@dataclass
class _PathItem:
    """Working state for one path during synthesis."""

    path: str
    segments: tuple[str, ...]
    identifier: str = ""
    depth: int = 1


# --- Naming ---


def to_pascal_token(segment: str, default_token: str) -> str:
    """Convert one path segment into a PascalCase token.

    A word starts at the beginning of the segment and after any run of
    characters that are not ASCII letters or digits. The first character of
    each word is upper-cased and the rest lower-cased; separators are
    dropped.

    Args:
        segment: Raw path segment (e.g. "player-footsteps_01").
        default_token: Returned when nothing alphanumeric remains.

    Returns:
        Token such as "PlayerFootsteps01". Prefixed with "_" when it would
        start with a digit.
    """
    chars: list[str] = []
    new_word = True
    for ch in segment:
        if ch in _ASCII_ALNUM:
            chars.append(ch.upper() if new_word else ch.lower())
            new_word = False
        else:
            new_word = True

    token = "".join(chars) or default_token
    if token[0].isdigit():
        token = "_" + token
    return token


def split_segments(path: str, namespace: Namespace) -> tuple[str, ...]:
    """Split a path into its segments after the namespace prefix.

    Empty segments are dropped. A bare root (e.g. ``bus:/``) yields the
    namespace's root placeholder so that every path has a name.
    """
    body = path[len(namespace.prefix) :] if path.lower().startswith(namespace.prefix) else path
    segments = tuple(seg for seg in body.split("/") if seg)
    if not segments:
        return (namespace.root_placeholder,)
    return segments


def make_name(segments: Sequence[str], depth: int, default_token: str) -> str:
    """Concatenate the tokens of the last ``depth`` segments."""
    start = max(0, len(segments) - depth)
    return "".join(to_pascal_token(seg, default_token) for seg in segments[start:])


# --- Synthesis ---


def _colliding_indices(items: list[_PathItem]) -> list[int]:
    groups: dict[str, list[int]] = {}
    for idx, item in enumerate(items):
        groups.setdefault(item.identifier, []).append(idx)
    return [idx for members in groups.values() if len(members) > 1 for idx in members]


def synthesize_identifiers(paths: Sequence[str], namespace: Namespace) -> IdentifierTable:
    """Build a unique identifier for every path.

    Args:
        paths: De-duplicated paths of a single namespace. Their order decides
            which path keeps the bare name when suffixes are needed.
        namespace: Namespace the paths belong to.

    Returns:
        IdentifierTable sorted by identifier.

    Raises:
        EmptyPathList: If paths is empty.
    """
    if not paths:
        raise EmptyPathList(f"No {namespace.plural} to generate identifiers for")

    default_token = namespace.default_token
    items = [_PathItem(path=p, segments=split_segments(p, namespace)) for p in paths]
    for item in items:
        item.identifier = make_name(item.segments, item.depth, default_token)

    max_depth = max(len(item.segments) for item in items)
    rounds = 0
    for depth in range(2, max_depth + 1):
        colliding = _colliding_indices(items)
        if not colliding:
            break
        rounds += 1
        for idx in colliding:
            item = items[idx]
            # Fully consumed paths keep their name and fall through to the suffix step
            if depth <= len(item.segments):
                item.depth = depth
                item.identifier = make_name(item.segments, item.depth, default_token)

    claimed: set[str] = set()
    suffixed = 0
    for item in items:
        base = item.identifier
        candidate = base
        n = 2
        while candidate in claimed:
            candidate = f"{base}_{n}"
            n += 1
        if candidate != base:
            suffixed += 1
        claimed.add(candidate)
        item.identifier = candidate

    logger.debug(
        "Synthesized %d %s identifiers (%d growth rounds, max depth %d, %d suffixed)",
        len(items),
        namespace.value,
        rounds,
        max(item.depth for item in items),
        suffixed,
    )

    entries = sorted(
        (IdentifierEntry(identifier=item.identifier, path=item.path) for item in items),
        key=lambda entry: entry.identifier,
    )
    return IdentifierTable(namespace=namespace, entries=tuple(entries))
