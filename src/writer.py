import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import ClientAccount

HEADER = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal) -> str:
    """Plain notation without trailing zeros, e.g. 1.5000 -> 1.5, 1E+2 -> 100."""
    normalized = value.normalize()
    if normalized.is_zero():
        # normalize() keeps the sign of -0
        return "0"
    return f"{normalized:f}"


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per account, in the order given."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for account in accounts:
        writer.writerow(
            (
                account.client_id,
                format_decimal(account.available),
                format_decimal(account.held),
                format_decimal(account.total),
                str(account.locked).lower(),
            )
        )
