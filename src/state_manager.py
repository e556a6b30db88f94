from typing import Dict, Optional, Set

from ledger import ClientLedger
from models import HistoryEntry


class StateManager:
    """
    Everything a replay mutates: the client ledger, the history of applied
    deposits and withdrawals, and the dispute bookkeeping.
    Owned by a single TransactionProcessor for the length of one replay.
    """

    def __init__(self):
        self.ledger = ClientLedger()
        self._transactions: Dict[int, HistoryEntry] = {}
        self._disputed_transaction_ids: Set[int] = set()
        self._charged_back_transaction_ids: Set[int] = set()

    def store_transaction(self, transaction_id: int, entry: HistoryEntry) -> None:
        """Store transaction for future dispute lookups. Entries are never removed."""
        self._transactions[transaction_id] = entry

    def get_transaction(self, transaction_id: int) -> Optional[HistoryEntry]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def mark_transaction_disputed(self, transaction_id: int) -> None:
        """Mark a transaction as disputed."""
        self._disputed_transaction_ids.add(transaction_id)

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        """Check if transaction is currently disputed."""
        return transaction_id in self._disputed_transaction_ids

    def clear_transaction_dispute(self, transaction_id: int) -> None:
        """Clear dispute status for a transaction."""
        self._disputed_transaction_ids.discard(transaction_id)

    def mark_transaction_charged_back(self, transaction_id: int) -> None:
        self._charged_back_transaction_ids.add(transaction_id)

    def is_transaction_charged_back(self, transaction_id: int) -> bool:
        return transaction_id in self._charged_back_transaction_ids

    @property
    def disputed_transaction_ids(self) -> Set[int]:
        """Snapshot of the transactions currently under dispute."""
        return set(self._disputed_transaction_ids)
