from typing import Optional


class PaymentsError(Exception):
    """Base class for every recoverable payments error."""

    code = "payments_error"
    message = "payments error"

    def __init__(self, transaction_id: Optional[int] = None, detail: Optional[str] = None):
        self.transaction_id = transaction_id
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.transaction_id is not None:
            text = f"tx {self.transaction_id}: {text}"
        if self.detail:
            text = f"{text} ({self.detail})"
        return text


class RecordError(PaymentsError):
    """A row could not be turned into a legal transaction record."""

    code = "record_error"
    message = "invalid record"


class MalformedRecord(RecordError):
    code = "malformed_record"
    message = "malformed record"


class UnknownTransactionType(RecordError):
    code = "unknown_transaction_type"
    message = "unknown transaction type"


class MissingAmount(RecordError):
    code = "missing_amount"
    message = "amount is required for deposits and withdrawals"


class SuperfluousAmount(RecordError):
    code = "superfluous_amount"
    message = "amount is not allowed for disputes, resolves and chargebacks"


class AmountNotPositive(RecordError):
    code = "amount_not_positive"
    message = "amount must be a positive number"


class AmountOutOfRange(RecordError):
    code = "amount_out_of_range"
    message = "amount is too large or too precise"


class TransactionError(PaymentsError):
    """
    A well-formed record was rejected by the ledger rules.
    Raised by TransactionProcessor.apply. State is unchanged when raised, except
    that a refused deposit or withdrawal still opens an empty account for its client.
    """

    code = "transaction_error"
    message = "transaction rejected"


class DuplicateTransaction(TransactionError):
    code = "duplicate_transaction"
    message = "transaction id already used"


class InsufficientFunds(TransactionError):
    code = "insufficient_funds"
    message = "insufficient available funds"


class AccountLocked(TransactionError):
    code = "account_locked"
    message = "account is locked"


class TransactionNotFound(TransactionError):
    code = "transaction_not_found"
    message = "referenced transaction does not exist"


class AlreadyDisputed(TransactionError):
    code = "already_disputed"
    message = "transaction is already disputed"


class TransactionNotDisputed(TransactionError):
    code = "transaction_not_disputed"
    message = "transaction is not under dispute"


class ClientMismatch(TransactionError):
    code = "client_mismatch"
    message = "transaction belongs to a different client"


class TransactionChargedBack(TransactionError):
    code = "transaction_charged_back"
    message = "transaction was already charged back"


class BalanceOverflow(TransactionError):
    code = "balance_overflow"
    message = "balance cannot be represented exactly"
