"""bankgen - Bank directory resolution.

Finds the directory holding the compiled banks. Tiers, first match wins:

1. ``<source>/<platform folder>`` if it directly contains ``*.bank`` files
2. ``<source>`` if it directly contains ``*.bank`` files
3. the directory with the most ``*.bank`` files anywhere under the project
   root (excluding engine/tool cache directories)
4. an explicitly supplied fallback directory
5. BankDirectoryNotFound

``<source>`` is the configured source bank path, resolved against the
project root when relative.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from bankgen.config import (
    BANK_EXTENSION,
    DEFAULT_PLATFORM_FOLDER,
    EXCLUDED_DIRECTORY_NAMES,
    PLATFORM_FOLDERS,
)
from bankgen.errors import BankDirectoryNotFound

logger = logging.getLogger(__name__)


def platform_folder(platform: str) -> str:
    """Map a build target tag to the FMOD platform build folder.

    Args:
        platform: Target tag such as "webgl", "windows", "macos".

    Returns:
        "WebGL" for web targets, "Desktop" for everything else.
    """
    return PLATFORM_FOLDERS.get(platform.strip().lower(), DEFAULT_PLATFORM_FOLDER)


def _resolve_against(path: str | Path, project_root: Path) -> Path:
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = project_root / path
    return path.resolve()


def count_bank_files(directory: Path) -> int:
    """Count ``*.bank`` files directly inside a directory.

    Sub-directories are not searched. A missing or unreadable directory
    counts as zero.
    """
    try:
        with os.scandir(directory) as entries:
            return sum(
                1
                for entry in entries
                if entry.name.lower().endswith(BANK_EXTENSION) and entry.is_file()
            )
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return 0


def find_best_bank_directory(
    root: Path,
    excluded_dirs: Iterable[str] = EXCLUDED_DIRECTORY_NAMES,
) -> Path | None:
    """Find the directory under root that directly holds the most banks.

    Depth-first walk with an explicit stack. Directories named in
    excluded_dirs (case-insensitive) are skipped along with everything below
    them; symlinked directories are not followed. Children are visited in
    name order and only a strictly higher count replaces the current best, so
    ties go to the directory reached first. Directories that cannot be read
    count as zero.

    Args:
        root: Directory to search (usually the project root).
        excluded_dirs: Directory names to skip.

    Returns:
        The best directory, or None if no directory holds any bank.
    """
    excluded = {name.lower() for name in excluded_dirs}
    best_path: Path | None = None
    best_count = 0

    stack: list[Path] = [Path(root)]
    while stack:
        current = stack.pop()
        if current.name.lower() in excluded:
            continue

        bank_count = 0
        children: list[Path] = []
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            children.append(Path(entry.path))
                        elif entry.name.lower().endswith(BANK_EXTENSION) and entry.is_file():
                            bank_count += 1
                    except OSError:
                        continue
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)
            continue

        if bank_count > best_count:
            best_count = bank_count
            best_path = current

        # Reverse so the smallest name is popped first
        children.sort(key=lambda p: p.name, reverse=True)
        stack.extend(children)

    if best_path is not None:
        logger.debug("Best bank directory %s (%d banks)", best_path, best_count)
    return best_path


def resolve_bank_directory(
    source_bank_path: str | Path,
    platform: str,
    project_root: Path,
    fallback_dir: str | Path | None = None,
    excluded_dirs: Iterable[str] = EXCLUDED_DIRECTORY_NAMES,
) -> Path:
    """Locate the directory containing the compiled banks.

    Args:
        source_bank_path: Configured bank build path (absolute or relative to
            project_root).
        platform: Build target tag used to pick the platform sub-folder.
        project_root: Project root; base for relative paths and the search.
        fallback_dir: Directory used when every heuristic fails (stands in
            for picking a folder by hand).
        excluded_dirs: Directory names skipped by the brute-force search.

    Returns:
        Absolute path of the bank directory.

    Raises:
        BankDirectoryNotFound: If no tier produced a directory.
    """
    project_root = Path(project_root).resolve()
    source = _resolve_against(source_bank_path, project_root)

    platform_path = source / platform_folder(platform)
    if count_bank_files(platform_path) > 0:
        logger.info("Using platform bank folder %s", platform_path)
        return platform_path

    if count_bank_files(source) > 0:
        logger.info("Using source bank folder %s", source)
        return source

    logger.info("No banks under %s, searching %s", source, project_root)
    best = find_best_bank_directory(project_root, excluded_dirs)
    if best is not None:
        logger.info("Using best matching bank folder %s", best)
        return best

    if fallback_dir is not None:
        fallback = _resolve_against(fallback_dir, project_root)
        if not fallback.is_dir():
            raise BankDirectoryNotFound(f"Bank folder not found: {fallback}")
        logger.info("Using fallback bank folder %s", fallback)
        return fallback

    raise BankDirectoryNotFound(
        f"FMOD bank folder not found (source bank path: {source}, searched: {project_root})"
    )
