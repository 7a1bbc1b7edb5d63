"""bankgen - Offline studio session.

The FMOD Studio runtime is an external collaborator: bankgen only talks to
it through the small protocol below. A backend is any object factory that
returns a StudioSystem; it is configured as a ``"module:callable"``
reference (settings ``backend`` / env BANKGEN_BACKEND) and imported on
demand.

offline_session() owns the whole lifecycle: create, initialize, load banks
(string tables first), and on every exit path unload what was loaded and
release the system.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from bankgen.config import (
    BANK_EXTENSION,
    DEFAULT_MAX_CHANNELS,
    OFFLINE_INIT_FLAGS,
    STRINGS_BANK_SUFFIX,
)
from bankgen.errors import BankLoadWarning, SystemInitFailed
from bankgen.namespaces import Namespace

logger = logging.getLogger(__name__)


class StudioResult(str, Enum):
    """Result codes understood by bankgen. Backends may return others."""

    OK = "OK"
    ERR_EVENT_ALREADY_LOADED = "ERR_EVENT_ALREADY_LOADED"
    ERR_FILE_BAD = "ERR_FILE_BAD"
    ERR_FILE_NOTFOUND = "ERR_FILE_NOTFOUND"
    ERR_VERSION = "ERR_VERSION"
    ERR_INITIALIZATION = "ERR_INITIALIZATION"


_LOAD_SUCCESS = frozenset({StudioResult.OK.value, StudioResult.ERR_EVENT_ALREADY_LOADED.value})


# --- Collaborator protocol ---


class PathDescriptor(Protocol):
    def is_valid(self) -> bool: ...

    def get_path(self) -> str: ...


class EventDescriptor(PathDescriptor, Protocol):
    def is_snapshot(self) -> bool: ...


class Bank(Protocol):
    def is_valid(self) -> bool: ...

    def list_events(self) -> Sequence[EventDescriptor]: ...

    def list_buses(self) -> Sequence[PathDescriptor]: ...

    def unload(self) -> Any: ...


class StudioSystem(Protocol):
    def initialize(self, max_channels: int, flags: str) -> Any: ...

    def load_bank_file(self, path: str) -> tuple[Any, Bank | None]: ...

    def release(self) -> Any: ...


SystemFactory = Callable[[], StudioSystem]


@dataclass(frozen=True)
class PathRecord:
    """A raw path reported by a loaded bank."""

    path: str
    is_snapshot: bool = False


@dataclass
class LoadedBanks:
    """Banks loaded by an offline session, plus the files that failed."""

    banks: list[Bank] = field(default_factory=list)
    warnings: list[BankLoadWarning] = field(default_factory=list)


# --- Helpers ---


def result_name(result: Any) -> str:
    """Normalize a backend result (enum member, string, ...) to its name."""
    value = getattr(result, "value", result)
    if isinstance(value, str):
        return value.upper()
    name = getattr(result, "name", None)
    return str(name if name is not None else result).upper()


def load_system_factory(reference: str) -> SystemFactory:
    """Import a backend factory from a ``"module:callable"`` reference.

    Raises:
        SystemInitFailed: If the reference is malformed, the module cannot be
            imported, or the attribute is missing or not callable.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise SystemInitFailed(f"Invalid backend reference '{reference}', expected 'module:callable'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SystemInitFailed(f"Cannot import backend module '{module_name}': {e}") from e

    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part, None)
        if target is None:
            raise SystemInitFailed(f"Backend '{reference}' not found")
    if not callable(target):
        raise SystemInitFailed(f"Backend '{reference}' is not callable")
    return target


def list_bank_files(directory: Path) -> list[Path]:
    """List ``*.bank`` files directly inside a directory in load order.

    String-table banks (``*.strings.bank``) come first because other banks
    reference their strings; each group is sorted by file name.
    """
    files = sorted(
        (p for p in Path(directory).iterdir() if p.name.lower().endswith(BANK_EXTENSION) and p.is_file()),
        key=lambda p: p.name,
    )
    strings = [p for p in files if p.name.lower().endswith(STRINGS_BANK_SUFFIX)]
    regular = [p for p in files if not p.name.lower().endswith(STRINGS_BANK_SUFFIX)]
    return strings + regular


def _create_system(factory: SystemFactory) -> StudioSystem:
    try:
        system = factory()
    except Exception as e:
        raise SystemInitFailed(f"FMOD Studio System.create failed: {e}") from e
    if system is None:
        raise SystemInitFailed("FMOD Studio System.create failed: backend returned no system")
    return system


def _release(system: StudioSystem, loaded: LoadedBanks) -> None:
    for bank in loaded.banks:
        try:
            if bank.is_valid():
                bank.unload()
        except Exception:
            logger.warning("Failed to unload bank", exc_info=True)
    try:
        system.release()
    except Exception:
        logger.warning("Failed to release studio system", exc_info=True)


def _warn_load_failed(loaded: LoadedBanks, bank_file: Path, result: str) -> None:
    warning = BankLoadWarning(bank_file=Path(bank_file).name, result=result)
    logger.warning("[FMOD] %s", warning)
    loaded.warnings.append(warning)


@contextmanager
def offline_session(
    factory: SystemFactory,
    bank_files: Iterable[Path],
    max_channels: int = DEFAULT_MAX_CHANNELS,
) -> Iterator[LoadedBanks]:
    """Open an offline studio system with the given banks loaded.

    Banks are loaded in the order given (see list_bank_files). A bank whose
    load result is neither OK nor ERR_EVENT_ALREADY_LOADED, or whose
    load raises, is recorded as a BankLoadWarning and skipped.

    Args:
        factory: Backend factory returning a fresh StudioSystem.
        bank_files: Bank files to load.
        max_channels: Channel count for initialize().

    Yields:
        LoadedBanks with the valid banks and the load warnings.

    Raises:
        SystemInitFailed: If the system cannot be created or initialized.
    """
    system = _create_system(factory)
    loaded = LoadedBanks()
    try:
        try:
            init_result = system.initialize(max_channels, OFFLINE_INIT_FLAGS)
        except Exception as e:
            raise SystemInitFailed(f"FMOD Studio initialize failed: {e}") from e
        if result_name(init_result) != StudioResult.OK.value:
            raise SystemInitFailed(f"FMOD Studio initialize failed: {result_name(init_result)}")

        for bank_file in bank_files:
            try:
                load_result, bank = system.load_bank_file(str(bank_file))
            except Exception as e:
                # Bindings that raise on a non-OK result
                _warn_load_failed(loaded, bank_file, str(e) or type(e).__name__)
                continue
            name = result_name(load_result)
            if name in _LOAD_SUCCESS:
                if bank is not None and bank.is_valid():
                    loaded.banks.append(bank)
            else:
                _warn_load_failed(loaded, bank_file, name)

        logger.info("Loaded %d banks (%d failed)", len(loaded.banks), len(loaded.warnings))
        yield loaded
    finally:
        _release(system, loaded)


def iter_bank_paths(banks: Iterable[Bank], namespace: Namespace) -> Iterator[PathRecord]:
    """Yield the raw paths of every valid event or bus in the given banks."""
    for bank in banks:
        if not bank.is_valid():
            continue
        if namespace is Namespace.EVENT:
            for desc in bank.list_events():
                if desc.is_valid():
                    yield PathRecord(path=desc.get_path(), is_snapshot=bool(desc.is_snapshot()))
        else:
            for desc in bank.list_buses():
                if desc.is_valid():
                    yield PathRecord(path=desc.get_path())
