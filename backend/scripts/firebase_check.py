"""
Check the Firebase setup: environment, service account, Admin SDK and a
single Firestore read. Exits 0 when every check passes, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gateway.config import Settings, get_settings
from gateway.diagnostics import DiagnosticReporter


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value!r}")
    return number


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Firebase connection test")
    parser.add_argument(
        "-c",
        "--credentials",
        type=str,
        default=None,
        help="Path to the service account JSON file",
    )
    parser.add_argument(
        "--collection",
        type=str,
        default=None,
        help="Collection to read one document from",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for Firestore before giving up",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostic internals to stderr",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    overrides = {}
    if args.credentials:
        overrides["firebase_service_account_path"] = args.credentials
    if args.collection:
        overrides["firebase_probe_collection"] = args.collection
    if args.timeout is not None:
        overrides["firebase_probe_timeout"] = args.timeout
    settings = Settings.model_validate({**get_settings().model_dump(), **overrides})

    reporter = DiagnosticReporter(settings)
    ok = asyncio.run(reporter.run())
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
