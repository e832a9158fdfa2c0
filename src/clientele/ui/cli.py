from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import TypeAdapter

from clientele.adapters.snapshot import CustomerPayload, FileSnapshotFetcher, HttpSnapshotFetcher
from clientele.app import run_customer_aggregation
from clientele.config import configure_logging, get_snapshot_source_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from clientele.domain.customers import AggregationOutcome
    from clientele.domain.ports.fetching import SnapshotFetcher

log = logging.getLogger(__name__)

_CUSTOMERS_ADAPTER = TypeAdapter(list[CustomerPayload])


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile customer records into aggregates")
    subparsers = parser.add_subparsers(dest="command", required=True)

    customers = subparsers.add_parser(
        "customers",
        help="Aggregate customers from a snapshot and print them as JSON",
    )
    source = customers.add_mutually_exclusive_group()
    source.add_argument(
        "--snapshot",
        type=Path,
        help="Read the snapshot from a JSON file instead of the admin endpoint",
    )
    source.add_argument(
        "--url",
        type=str,
        help="Admin base URL to fetch the snapshot from (defaults to CLIENTELE_SNAPSHOT_URL)",
    )
    customers.add_argument(
        "--include-anonymous",
        action="store_true",
        help="Keep identities seen only through telemetry without phone or email",
    )
    customers.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation, 0 for compact output (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _build_source(args: argparse.Namespace) -> SnapshotFetcher:
    if args.snapshot is not None:
        return FileSnapshotFetcher(args.snapshot)
    return HttpSnapshotFetcher(config=get_snapshot_source_config(base_url=args.url))


def _write_customers(outcome: AggregationOutcome, *, indent: int) -> None:
    payloads = [CustomerPayload.from_aggregate(customer) for customer in outcome.customers]
    rendered = _CUSTOMERS_ADAPTER.dump_json(payloads, by_alias=True, indent=indent or None)
    sys.stdout.write(rendered.decode("utf-8") + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.indent < 0:
            raise ValueError("--indent must be non-negative")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "customers":
            outcome = run_customer_aggregation(
                source=_build_source(parsed_args),
                include_anonymous=parsed_args.include_anonymous,
            )
            _write_customers(outcome, indent=parsed_args.indent)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during aggregation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load `.env`, install the SIGINT handler, run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
