import argparse
import csv
import logging
import sys
from typing import List, Optional

from config import DEFAULT_LOG_LEVEL, ReplayPolicy, configure_logging
from payments_engine import PaymentsEngine
from writer import write_accounts

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="payments-replay",
        description="Replay a transactions CSV and print the resulting client balances.",
    )
    arg_parser.add_argument("input", help="CSV file with columns: type, client, tx, amount")
    arg_parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="diagnostics written to stderr (default: %(default)s)",
    )
    arg_parser.add_argument(
        "--allow-disputes-on-locked-accounts",
        action="store_true",
        help="accept dispute, resolve and chargeback records for locked accounts",
    )
    arg_parser.add_argument(
        "--allow-redispute-after-chargeback",
        action="store_true",
        help="accept a new dispute on a transaction that was already charged back",
    )
    return arg_parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)

    policy = ReplayPolicy(
        allow_disputes_on_locked_accounts=args.allow_disputes_on_locked_accounts,
        allow_redispute_after_chargeback=args.allow_redispute_after_chargeback,
    )
    engine = PaymentsEngine(policy)

    try:
        engine.process_file(args.input)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    write_accounts(engine.state.ledger.accounts(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
