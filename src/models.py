from collections import Counter
from dataclasses import dataclass, field
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from enum import Enum
from typing import ClassVar, Tuple, Union

from errors import AmountNotPositive, AmountOutOfRange, MalformedRecord

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# money is exact to 28 significant digits and stays below 10**28
MONEY_DIGITS = 28

# balance arithmetic must be exact; Inexact and Overflow raise instead of rounding
MONEY_CONTEXT = Context(
    prec=MONEY_DIGITS,
    Emax=MONEY_DIGITS - 1,
    traps=[InvalidOperation, Inexact, Overflow],
)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class _Record:
    """
    Fields shared by every transaction record.
    Subclasses are the only legal shapes; amount exists only where it is required.
    """

    transaction_type: ClassVar[TransactionType]

    client_id: int
    transaction_id: int

    def __post_init__(self):
        _check_id("tx", self.transaction_id, MAX_TRANSACTION_ID, None)
        _check_id("client", self.client_id, MAX_CLIENT_ID, self.transaction_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True, repr=False)
class _AmountRecord(_Record):
    amount: Decimal

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.amount, Decimal):
            raise MalformedRecord(self.transaction_id, f"amount must be a Decimal, got {type(self.amount).__name__}")
        # zero is refused too: a zero deposit or withdrawal moves nothing
        if not self.amount.is_finite() or self.amount <= 0:
            raise AmountNotPositive(self.transaction_id, f"got {self.amount}")
        digits, exponent = _significant(self.amount)
        if self.amount.adjusted() >= MONEY_DIGITS or exponent < -MONEY_DIGITS or digits > MONEY_DIGITS:
            raise AmountOutOfRange(self.transaction_id, f"got {self.amount}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True, repr=False)
class Deposit(_AmountRecord):
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT


@dataclass(frozen=True, repr=False)
class Withdrawal(_AmountRecord):
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL


@dataclass(frozen=True, repr=False)
class Dispute(_Record):
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE


@dataclass(frozen=True, repr=False)
class Resolve(_Record):
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE


@dataclass(frozen=True, repr=False)
class Chargeback(_Record):
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK


TransactionRecord = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

RECORD_CLASSES = {
    record_class.transaction_type: record_class
    for record_class in (Deposit, Withdrawal, Dispute, Resolve, Chargeback)
}


def _significant(amount: Decimal) -> Tuple[int, int]:
    """Digit count and exponent of a finite amount, ignoring trailing zeros."""
    _, digits, exponent = amount.as_tuple()
    zeros = len(digits) - len("".join(map(str, digits)).rstrip("0"))
    return len(digits) - zeros, exponent + zeros


def _check_id(name: str, value: int, upper: int, transaction_id) -> None:
    # bool is an int subclass, reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedRecord(transaction_id, f"{name} id must be an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise MalformedRecord(transaction_id, f"{name} id {value} out of range 0..{upper}")


@dataclass(frozen=True)
class HistoryEntry:
    """What a later dispute needs to know about an applied deposit or withdrawal."""

    client_id: int
    amount: Decimal
    transaction_type: TransactionType


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return MONEY_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self._set(MONEY_CONTEXT.add(self.available, amount), self.held)

    def debit(self, amount: Decimal) -> None:
        self._set(MONEY_CONTEXT.subtract(self.available, amount), self.held)

    def hold(self, amount: Decimal) -> None:
        self._set(
            MONEY_CONTEXT.subtract(self.available, amount),
            MONEY_CONTEXT.add(self.held, amount),
        )

    def release_hold(self, amount: Decimal) -> None:
        self._set(
            MONEY_CONTEXT.add(self.available, amount),
            MONEY_CONTEXT.subtract(self.held, amount),
        )

    def remove_held(self, amount: Decimal) -> None:
        self._set(self.available, MONEY_CONTEXT.subtract(self.held, amount))

    def _set(self, available: Decimal, held: Decimal) -> None:
        """Commit both balances, or neither if their total is not exact."""
        MONEY_CONTEXT.add(available, held)
        self.available = available
        self.held = held

    def lock(self) -> None:
        self.locked = True


@dataclass
class ReplayStats:
    """Counters for one replay run."""

    applied: int = 0
    rejected: int = 0
    malformed: int = 0
    by_code: Counter = field(default_factory=Counter)

    def record_applied(self) -> None:
        self.applied += 1

    def record_rejected(self, code: str) -> None:
        self.rejected += 1
        self.by_code[code] += 1

    def record_malformed(self, code: str) -> None:
        self.malformed += 1
        self.by_code[code] += 1

    @property
    def seen(self) -> int:
        return self.applied + self.rejected + self.malformed
