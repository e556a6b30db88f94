import logging
import sys
from dataclasses import dataclass

LOG_FORMAT = "%(levelname)s: %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class ReplayPolicy:
    """
    Rules the ledger leaves open, made explicit.

    allow_disputes_on_locked_accounts:
        Accept dispute, resolve and chargeback records for a client whose
        account was locked by an earlier chargeback. Deposits and withdrawals
        on a locked account are always rejected.
    allow_redispute_after_chargeback:
        Accept a new dispute against a transaction that was already charged back.
    """

    allow_disputes_on_locked_accounts: bool = False
    allow_redispute_after_chargeback: bool = False


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Send diagnostics to stderr so stdout carries only the CSV result."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
