import logging
from decimal import DecimalException
from typing import Optional, Tuple, Union

from config import ReplayPolicy
from errors import (
    AccountLocked,
    AlreadyDisputed,
    BalanceOverflow,
    ClientMismatch,
    DuplicateTransaction,
    InsufficientFunds,
    TransactionChargedBack,
    TransactionNotDisputed,
    TransactionNotFound,
)
from models import (
    ClientAccount,
    Chargeback,
    Deposit,
    Dispute,
    HistoryEntry,
    Resolve,
    TransactionRecord,
    TransactionType,
    Withdrawal,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transaction records to state, one at a time, in input order.

    apply() either changes state and returns, or raises a TransactionError
    subclass and leaves state as it was. The one exception is a refused deposit
    or withdrawal, which still opens an empty account for its client. It never
    reads or writes files; deciding what to do with a rejection is left to the caller.
    """

    def __init__(self, state: StateManager, policy: Optional[ReplayPolicy] = None):
        self._state = state
        self._policy = policy or ReplayPolicy()

    @property
    def policy(self) -> ReplayPolicy:
        return self._policy

    def apply(self, record: TransactionRecord) -> None:
        """
        Apply a single record.

        Raises:
            DuplicateTransaction, InsufficientFunds, AccountLocked:
                deposit or withdrawal refused
            TransactionNotFound, AlreadyDisputed, TransactionChargedBack:
                dispute refused
            TransactionNotDisputed: resolve or chargeback of an undisputed transaction
            ClientMismatch: referenced transaction belongs to another client
            BalanceOverflow: a balance would leave the exact decimal range
        """
        try:
            self._dispatch(record)
        except DecimalException as e:
            raise BalanceOverflow(record.transaction_id, type(e).__name__) from e

        logger.debug(f"Applied {record!r}")

    def _dispatch(self, record: TransactionRecord) -> None:
        match record.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(record)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(record)
            case TransactionType.DISPUTE:
                self._handle_dispute(record)
            case TransactionType.RESOLVE:
                self._handle_resolve(record)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(record)
            case _:
                raise TypeError(f"not a transaction record: {record!r}")

    def _open_account(self, record: Union[Deposit, Withdrawal]) -> ClientAccount:
        if self._state.has_transaction(record.transaction_id):
            raise DuplicateTransaction(record.transaction_id)

        account = self._state.ledger.get_or_create(record.client_id)

        if account.locked:
            raise AccountLocked(record.transaction_id, f"client {record.client_id}")

        return account

    def _handle_deposit(self, record: Deposit) -> None:
        account = self._open_account(record)
        account.credit(record.amount)
        self._remember(record)

    def _handle_withdrawal(self, record: Withdrawal) -> None:
        account = self._open_account(record)

        if account.available < record.amount:
            raise InsufficientFunds(
                record.transaction_id,
                f"available {account.available}, requested {record.amount}",
            )

        account.debit(record.amount)
        self._remember(record)

    def _remember(self, record: Union[Deposit, Withdrawal]) -> None:
        self._state.store_transaction(
            record.transaction_id,
            HistoryEntry(record.client_id, record.amount, record.transaction_type),
        )

    def _handle_dispute(self, record: Dispute) -> None:
        original = self._state.get_transaction(record.transaction_id)

        if original is None:
            raise TransactionNotFound(record.transaction_id)

        account = self._owned_account(record, original)

        if self._state.is_transaction_disputed(record.transaction_id):
            raise AlreadyDisputed(record.transaction_id)

        if (
            self._state.is_transaction_charged_back(record.transaction_id)
            and not self._policy.allow_redispute_after_chargeback
        ):
            raise TransactionChargedBack(record.transaction_id)

        # available may go negative when the disputed funds were already spent
        account.hold(original.amount)
        self._state.mark_transaction_disputed(record.transaction_id)

    def _handle_resolve(self, record: Resolve) -> None:
        account, original = self._disputed(record)

        account.release_hold(original.amount)
        self._state.clear_transaction_dispute(record.transaction_id)

    def _handle_chargeback(self, record: Chargeback) -> None:
        account, original = self._disputed(record)

        account.remove_held(original.amount)
        account.lock()
        self._state.clear_transaction_dispute(record.transaction_id)
        self._state.mark_transaction_charged_back(record.transaction_id)

    def _disputed(self, record: Union[Resolve, Chargeback]) -> Tuple[ClientAccount, HistoryEntry]:
        if not self._state.is_transaction_disputed(record.transaction_id):
            raise TransactionNotDisputed(record.transaction_id)

        # disputed ids always have a history entry
        original = self._state.get_transaction(record.transaction_id)
        return self._owned_account(record, original), original

    def _owned_account(self, record: Union[Dispute, Resolve, Chargeback], original: HistoryEntry) -> ClientAccount:
        if original.client_id != record.client_id:
            raise ClientMismatch(
                record.transaction_id,
                f"owned by client {original.client_id}, referenced by client {record.client_id}",
            )

        # the owner's account was created when the original was applied
        account = self._state.ledger.get_or_create(record.client_id)

        if account.locked and not self._policy.allow_disputes_on_locked_accounts:
            raise AccountLocked(record.transaction_id, f"client {record.client_id}")

        return account
