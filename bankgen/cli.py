"""bankgen command line.

    bankgen events          generate event identifiers
    bankgen buses           generate bus identifiers
    bankgen all             both, events first

Without flags the run is driven by bankgen.json / BANKGEN_* settings.
Exit code 0 on success (including "no results"), 1 on failure or, with
--check, when the generated file is out of date.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from bankgen import __version__
from bankgen.config import SUPPORTED_LANGUAGES
from bankgen.errors import FetchErrorCode
from bankgen.namespaces import Namespace
from bankgen.pipeline import FetchOutcome, run_fetch
from bankgen.schemas import load_settings

_TARGETS = {
    "events": (Namespace.EVENT,),
    "buses": (Namespace.BUS,),
    "all": (Namespace.EVENT, Namespace.BUS),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bankgen",
        description="Generate FMOD event/bus identifier enums from compiled banks",
    )
    parser.add_argument("target", choices=sorted(_TARGETS), help="What to generate")
    parser.add_argument("--project-root", help="Project root (default: BANKGEN_PROJECT_ROOT or cwd)")
    parser.add_argument("--source-bank-path", help="FMOD bank build path")
    parser.add_argument("--platform", help="Build target tag, e.g. desktop or webgl")
    parser.add_argument("--fallback-bank-dir", help="Bank folder used when discovery finds nothing")
    parser.add_argument("--backend", help="Studio backend factory as 'module:callable'")
    parser.add_argument("--language", choices=SUPPORTED_LANGUAGES, help="Generated source language")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit 1 if the generated file is out of date",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(
            args.project_root,
            source_bank_path=args.source_bank_path,
            platform=args.platform,
            fallback_bank_dir=args.fallback_bank_dir,
            backend=args.backend,
            language=args.language,
        )
    except ValueError as e:
        print(f"Error: {FetchErrorCode.CONFIG_INVALID.value} - {e}", file=sys.stderr)
        return 1

    exit_code = 0
    for namespace in _TARGETS[args.target]:
        result = run_fetch(namespace, settings, check=args.check)
        if result.outcome is FetchOutcome.FAILED:
            print(f"Error: {result.error_code} - {result.message}", file=sys.stderr)
            return 1
        if result.outcome is FetchOutcome.STALE:
            print(result.message, file=sys.stderr)
            exit_code = 1
            continue
        print(result.message)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
