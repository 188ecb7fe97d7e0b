import argparse
import logging
import os
import sys
from typing import List, Optional

from csv_io import write_accounts
from models import PaymentsError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Replay a CSV of transactions and print final client balances.",
    )
    parser.add_argument("input", help="path to the transactions CSV file")
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="log and skip malformed rows instead of aborting",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"stderr log level (default: ${LOG_LEVEL_ENV} or {DEFAULT_LOG_LEVEL})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(skip_invalid_rows=args.skip_invalid)
    try:
        accounts = engine.process_file(args.input)
    except PaymentsError as e:
        logger.error(f"Invalid input in {args.input}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Failed to read {args.input}: {e}")
        return 1

    write_accounts(accounts.values(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
