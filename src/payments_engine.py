import logging
from typing import Dict, Iterable, Optional, TextIO, Tuple, Union

from config import ReplayPolicy
from errors import RecordError, TransactionError
from models import ClientAccount, ReplayStats, TransactionRecord
from record_parser import RecordParser
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction file into client balances.

    Records are applied strictly in input order. A record that fails to parse
    or is refused by the ledger rules is logged and skipped; only failing to
    open or read the input stops the replay.
    """

    def __init__(self, policy: Optional[ReplayPolicy] = None):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state, policy)
        self._parser = RecordParser()
        self._stats = ReplayStats()

    @property
    def state(self) -> StateManager:
        return self._state

    @property
    def stats(self) -> ReplayStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying {filepath}")
        with open(filepath, "r", newline="", encoding="utf-8") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process an open CSV stream and return final account states."""
        self._replay(self._parser.read(stream))
        return self._state.ledger.as_dict()

    def process_records(self, records: Iterable[TransactionRecord]) -> Dict[int, ClientAccount]:
        """Apply already-parsed records, numbered from 1."""
        self._replay(enumerate(records, start=1))
        return self._state.ledger.as_dict()

    def _replay(self, items: Iterable[Tuple[int, Union[TransactionRecord, RecordError]]]) -> None:
        for line_number, item in items:
            if isinstance(item, RecordError):
                self._stats.record_malformed(item.code)
                logger.warning(f"Line {line_number}: skipping malformed record: {item}")
                continue

            try:
                self._processor.apply(item)
            except TransactionError as e:
                self._stats.record_rejected(e.code)
                logger.warning(f"Line {line_number}: rejected {item!r}: {e}")
            else:
                self._stats.record_applied()

        logger.info(
            f"Applied: {self._stats.applied}, "
            f"Rejected: {self._stats.rejected}, "
            f"Malformed: {self._stats.malformed}"
        )
