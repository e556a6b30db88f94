import csv
from decimal import Decimal, InvalidOperation
from typing import Iterable, Iterator, Mapping, Optional, TextIO, Tuple, Union

from errors import MalformedRecord, MissingAmount, RecordError, SuperfluousAmount, UnknownTransactionType
from models import RECORD_CLASSES, TransactionRecord, TransactionType

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_TYPES = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)

# csv.DictReader puts surplus fields under the None key
_EXTRA_FIELDS = None


class RecordParser:
    """
    Turns CSV rows into transaction records.
    Anything that does not fit one of the record shapes raises a RecordError.
    """

    def parse_row(self, row: Mapping[Optional[str], Optional[str]]) -> TransactionRecord:
        """Parse CSV row into a transaction record."""
        normalized = {
            key.strip().lower(): (value or "").strip()
            for key, value in row.items()
            if key is not _EXTRA_FIELDS
        }

        for column in REQUIRED_COLUMNS:
            if not normalized.get(column):
                raise MalformedRecord(detail=f"missing '{column}' column in {dict(row)}")

        transaction_id = _parse_id("tx", normalized["tx"], None)
        client_id = _parse_id("client", normalized["client"], transaction_id)

        try:
            transaction_type = TransactionType(normalized["type"].lower())
        except ValueError:
            raise UnknownTransactionType(transaction_id, normalized["type"]) from None

        amount = _parse_amount(normalized.get("amount", ""), transaction_id)
        record_class = RECORD_CLASSES[transaction_type]

        if transaction_type in AMOUNT_TYPES:
            if amount is None:
                raise MissingAmount(transaction_id)
            return record_class(client_id=client_id, transaction_id=transaction_id, amount=amount)

        if amount is not None:
            raise SuperfluousAmount(transaction_id)
        return record_class(client_id=client_id, transaction_id=transaction_id)

    def parse_rows(
        self, rows: Iterable[Mapping[Optional[str], Optional[str]]], first_line: int = 2
    ) -> Iterator[Tuple[int, Union[TransactionRecord, RecordError]]]:
        """
        Yield (line number, record) for each row, or (line number, error)
        for rows that do not parse. Line numbers assume a header on line 1.
        """
        for line_number, row in enumerate(rows, start=first_line):
            try:
                yield line_number, self.parse_row(row)
            except RecordError as e:
                yield line_number, e

    def read(self, stream: TextIO) -> Iterator[Tuple[int, Union[TransactionRecord, RecordError]]]:
        """Parse an open CSV stream with a `type, client, tx, amount` header."""
        return self.parse_rows(csv.DictReader(stream, skipinitialspace=True))


def _parse_id(name: str, value: str, transaction_id: Optional[int]) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedRecord(transaction_id, f"{name} id is not an integer: {value!r}") from None


def _parse_amount(value: str, transaction_id: int) -> Optional[Decimal]:
    if not value:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise MalformedRecord(transaction_id, f"amount is not a decimal: {value!r}") from None
