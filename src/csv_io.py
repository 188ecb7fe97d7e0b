import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, TextIO

from models import (
    ClientAccount,
    InvalidTransactionError,
    Transaction,
    TransactionParseError,
    TransactionType,
    quantize_amount,
)

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """Parse CSV row into Transaction. Raises TransactionParseError."""
    extra_fields = [v.strip() for v in row.get(None) or [] if v.strip()]
    if extra_fields:
        raise TransactionParseError(f"unexpected extra fields {extra_fields}")

    normalized = {
        (k or "").strip(): (v or "").strip()
        for k, v in row.items()
        if not isinstance(v, list)
    }

    try:
        transaction_type_str = normalized["type"].lower()
        client_str = normalized["client"]
        transaction_id_str = normalized["tx"]
    except KeyError as e:
        raise TransactionParseError(f"missing column {e}") from None

    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError:
        raise TransactionParseError(f"unknown transaction type {transaction_type_str!r}") from None

    try:
        client_id = int(client_str)
        transaction_id = int(transaction_id_str)
    except ValueError as e:
        raise TransactionParseError(f"invalid id: {e}") from None

    amount = None
    amount_str = normalized.get("amount", "")
    if amount_str:
        try:
            amount = Decimal(amount_str)
        except InvalidOperation:
            raise TransactionParseError(f"invalid amount {amount_str!r}") from None

    try:
        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except InvalidTransactionError as e:
        raise TransactionParseError(str(e)) from None


def _is_blank(row: Dict[Optional[str], Any]) -> bool:
    for value in row.values():
        fields = value if isinstance(value, list) else [value]
        if any((field or "").strip() for field in fields):
            return False
    return True


def read_transactions(
    stream: TextIO,
    skip_invalid: bool = False,
    on_invalid: Optional[Callable[[TransactionParseError], None]] = None,
) -> Iterator[Transaction]:
    """
    Lazily decode transactions from a CSV stream, one row at a time.

    With skip_invalid, malformed rows are logged and dropped; otherwise the
    first malformed row raises TransactionParseError.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    for row in reader:
        if _is_blank(row):
            continue

        try:
            transaction = parse_csv_row(row)
        except TransactionParseError as e:
            error = TransactionParseError(str(e), line_number=reader.line_num)
            if not skip_invalid:
                raise error from None
            logger.warning(f"Skipping row: {error}")
            if on_invalid is not None:
                on_invalid(error)
            continue

        yield transaction


def open_transactions(
    filepath: str,
    skip_invalid: bool = False,
    on_invalid: Optional[Callable[[TransactionParseError], None]] = None,
) -> Iterator[Transaction]:
    """Read CSV file and yield transactions; the file stays open until exhausted."""
    with open(filepath, "r", newline="") as f:
        yield from read_transactions(f, skip_invalid=skip_invalid, on_invalid=on_invalid)


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{quantize_amount(value):f}"


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write account balances as CSV, sorted by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
