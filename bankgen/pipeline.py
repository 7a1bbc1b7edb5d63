"""bankgen - Fetch pipeline.

One run for one namespace:

    resolve bank dir -> load banks -> collect paths -> synthesize
    identifiers -> render -> atomic publish

Run-level failures (bank directory not found, studio system not
available, backend errors while reading the banks) abort the run after
the studio session is released and are reported through FetchResult.
A bank that fails to load is only a warning. When no paths survive
collection the run ends with the informational NO_PATHS_FOUND outcome
and nothing is written.

The generated file is only written after the full table is built, and
then atomically, so an aborted run leaves the previous file in place.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bankgen.collector import collect_paths
from bankgen.emitter import render
from bankgen.errors import BankDirectoryNotFound, BankgenError, FetchErrorCode, SystemInitFailed
from bankgen.identifiers import synthesize_identifiers
from bankgen.namespaces import Namespace
from bankgen.resolver import resolve_bank_directory
from bankgen.schemas import FetchSettings
from bankgen.studio import (
    SystemFactory,
    iter_bank_paths,
    list_bank_files,
    load_system_factory,
    offline_session,
)
from bankgen.utils.atomic_io import TEMP_SUFFIX, atomic_write_text, cleanup_orphan_temp_files
from bankgen.utils.failpoints import maybe_fail

logger = logging.getLogger(__name__)


class FetchOutcome(str, Enum):
    """How a fetch run ended."""

    GENERATED = "GENERATED"
    NO_PATHS_FOUND = "NO_PATHS_FOUND"
    UP_TO_DATE = "UP_TO_DATE"
    STALE = "STALE"
    FAILED = "FAILED"


@dataclass
class FetchResult:
    """Result of a fetch run."""

    ok: bool
    outcome: FetchOutcome
    error_code: str | None = None
    message: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


def _configured_factory(settings: FetchSettings) -> SystemFactory:
    if not settings.backend:
        raise SystemInitFailed(
            "No FMOD studio backend configured; set 'backend' in bankgen.json "
            "or BANKGEN_BACKEND to a 'module:callable' factory"
        )
    return load_system_factory(settings.backend)


def _failed(code: str, message: str, metrics: dict[str, Any]) -> FetchResult:
    return FetchResult(
        ok=False,
        outcome=FetchOutcome.FAILED,
        error_code=code,
        message=message,
        metrics=metrics,
    )


def run_fetch(
    namespace: Namespace,
    settings: FetchSettings,
    *,
    system_factory: SystemFactory | None = None,
    check: bool = False,
) -> FetchResult:
    """Generate the identifier source file for one namespace.

    Args:
        namespace: Namespace to generate (events or buses).
        settings: Run configuration.
        system_factory: Studio backend factory. Defaults to the backend
            configured in settings.
        check: Compare against the existing output instead of writing it.

    Returns:
        FetchResult describing the outcome.
    """
    start_time = time.monotonic()
    output_path = settings.output_path(namespace)
    metrics: dict[str, Any] = {
        "namespace": namespace.value,
        "language": settings.language,
    }

    # --- Resolve and load ---
    try:
        bank_dir = resolve_bank_directory(
            settings.source_bank_path,
            settings.platform,
            settings.project_root,
            fallback_dir=settings.fallback_bank_dir,
        )
        metrics["bank_dir"] = str(bank_dir)
        try:
            bank_files = list_bank_files(bank_dir)
        except OSError as e:
            raise BankDirectoryNotFound(f"Cannot read bank folder {bank_dir}: {e}") from e
        metrics["bank_files"] = len(bank_files)

        factory = system_factory or _configured_factory(settings)
        with offline_session(factory, bank_files, settings.max_channels) as loaded:
            metrics["banks_loaded"] = len(loaded.banks)
            metrics["bank_load_warnings"] = [str(w) for w in loaded.warnings]
            paths = collect_paths(iter_bank_paths(loaded.banks, namespace), namespace)
    except BankgenError as e:
        logger.error("Fetch %s failed: %s", namespace.plural, e.message)
        return _failed(e.code.value, e.message, metrics)
    except Exception as e:
        # Raised by the backend while the session was open; already released
        logger.error("Fetch %s failed: studio backend error: %s", namespace.plural, e)
        return _failed(FetchErrorCode.BACKEND_ERROR.value, f"Studio backend error: {e}", metrics)

    metrics["paths_collected"] = len(paths)

    if not paths:
        message = f"No {namespace.plural} found. Make sure banks are built for the correct platform."
        logger.info(message)
        return FetchResult(
            ok=True,
            outcome=FetchOutcome.NO_PATHS_FOUND,
            message=message,
            metrics=metrics,
        )

    # --- Synthesize and render ---
    try:
        table = synthesize_identifiers(paths, namespace)
    except BankgenError as e:
        logger.error("Fetch %s failed: %s", namespace.plural, e.message)
        return _failed(e.code.value, e.message, metrics)

    text = render(table, settings.language, code_namespace=settings.code_namespace)
    metrics["identifiers"] = len(table)
    metrics["source_digest"] = table.source_digest()

    # --- Drift check ---
    if check:
        try:
            existing = output_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            existing = None
        except OSError as e:
            return _failed(FetchErrorCode.WRITE_FAILED.value, f"Cannot read {output_path}: {e}", metrics)
        if existing == text:
            return FetchResult(
                ok=True,
                outcome=FetchOutcome.UP_TO_DATE,
                message=f"{output_path} is up to date",
                metrics=metrics,
                artifact_path=str(output_path),
            )
        return FetchResult(
            ok=False,
            outcome=FetchOutcome.STALE,
            message=f"{output_path} is out of date; run `bankgen {namespace.plural}`",
            metrics=metrics,
            artifact_path=str(output_path),
        )

    # --- Atomic publish ---
    try:
        cleanup_orphan_temp_files(output_path.parent, temp_suffix=output_path.name + TEMP_SUFFIX)
        maybe_fail("FETCH_BEFORE_PUBLISH")
        atomic_write_text(output_path, text)
    except OSError as e:
        logger.error("Failed to write %s: %s", output_path, e)
        return _failed(FetchErrorCode.WRITE_FAILED.value, f"Failed to write {output_path}: {e}", metrics)

    metrics["fetch_time_ms"] = int((time.monotonic() - start_time) * 1000)
    logger.info(
        "Generated %d %s into %s (%dms)",
        len(table),
        namespace.plural,
        output_path,
        metrics["fetch_time_ms"],
    )
    return FetchResult(
        ok=True,
        outcome=FetchOutcome.GENERATED,
        message=f"Generated enum and database:\n{output_path}\n\n{len(table)} {namespace.plural} found.",
        metrics=metrics,
        artifact_path=str(output_path),
    )
