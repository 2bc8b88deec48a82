from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from xrefsync.app import run_association_load
from xrefsync.config import (
    ConfigurationError,
    configure_logging,
    get_association_load_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile external identifier associations with the registry"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Run an association load")
    load.add_argument(
        "--input-file",
        type=Path,
        help="Tab-delimited association file to stage before reconciling "
        "(overrides XREFSYNC_INPUT_FILE)",
    )
    load.add_argument(
        "--delete-reload",
        action="store_true",
        default=None,
        help="Delete everything the job stream created in its previous run first",
    )
    load.add_argument(
        "--debug",
        action="store_true",
        help="Log every pair decision and discrepancy",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.debug else logging.INFO)

    try:
        config = get_association_load_config().with_overrides(
            input_file=parsed_args.input_file,
            delete_reload=parsed_args.delete_reload,
        )
        if config.input_file is not None and not config.input_file.is_file():
            raise ValueError(f"Input file not found: {config.input_file}")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        summary = run_association_load(config)
        log.info(
            "Association load finished: staged=%s, deleted=%s, units=%s",
            summary.staged_records,
            summary.deleted.total,
            summary.units,
        )
    except Exception:
        log.exception("Fatal error during association load")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
