from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional

AMOUNT_PRECISION = Decimal("0.0001")
# Largest single deposit or withdrawal. Even 2**32 of them stay well inside
# LEDGER_CONTEXT, so balance arithmetic is exact.
MAX_AMOUNT = Decimal("100000000000000000000")
LEDGER_CONTEXT = Context(prec=64, rounding=ROUND_HALF_EVEN)
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class PaymentsError(Exception):
    """Base class for errors raised outside the ledger core."""


class InvalidTransactionError(PaymentsError, ValueError):
    """Transaction kind and fields do not form a valid combination."""


class TransactionParseError(PaymentsError):
    """Input row could not be decoded into a Transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_referential(self) -> bool:
        return self in (TransactionType.DISPUTE, TransactionType.RESOLVE, TransactionType.CHARGEBACK)


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


def quantize_amount(amount: Decimal) -> Decimal:
    return amount.quantize(AMOUNT_PRECISION, context=LEDGER_CONTEXT)


@dataclass(frozen=True)
class Transaction:
    """
    One input record. Deposits and withdrawals carry a positive amount;
    disputes, resolves and chargebacks carry none and refer to an earlier
    transaction by id.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise InvalidTransactionError(f"client id {self.client_id} out of range")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise InvalidTransactionError(f"transaction id {self.transaction_id} out of range")

        if self.transaction_type.is_referential:
            if self.amount is not None:
                raise InvalidTransactionError(
                    f"{self.transaction_type.value} tx {self.transaction_id}: amount not allowed"
                )
            return

        if self.amount is None:
            raise InvalidTransactionError(
                f"{self.transaction_type.value} tx {self.transaction_id}: amount required"
            )
        if not self.amount.is_finite():
            raise InvalidTransactionError(
                f"{self.transaction_type.value} tx {self.transaction_id}: invalid amount {self.amount}"
            )
        if self.amount > MAX_AMOUNT:
            raise InvalidTransactionError(
                f"{self.transaction_type.value} tx {self.transaction_id}: amount {self.amount} exceeds maximum {MAX_AMOUNT}"
            )
        amount = quantize_amount(self.amount)
        if amount <= 0:
            raise InvalidTransactionError(
                f"{self.transaction_type.value} tx {self.transaction_id}: amount must be positive, got {self.amount}"
            )
        # frozen, store the quantized value directly
        object.__setattr__(self, "amount", amount)

    @classmethod
    def deposit(cls, client_id: int, transaction_id: int, amount: Decimal) -> "Transaction":
        return cls(TransactionType.DEPOSIT, client_id, transaction_id, amount)

    @classmethod
    def withdrawal(cls, client_id: int, transaction_id: int, amount: Decimal) -> "Transaction":
        return cls(TransactionType.WITHDRAWAL, client_id, transaction_id, amount)

    @classmethod
    def dispute(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.DISPUTE, client_id, transaction_id)

    @classmethod
    def resolve(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.RESOLVE, client_id, transaction_id)

    @classmethod
    def chargeback(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.CHARGEBACK, client_id, transaction_id)

    @property
    def is_referential(self) -> bool:
        return self.transaction_type.is_referential

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionRecord:
    """History entry kept for deposits and withdrawals so they can be disputed."""

    transaction_id: int
    client_id: int
    amount: Decimal
    transaction_type: TransactionType
    disputed: bool = False


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.applied = 0
        self.ignored = 0
        self.skipped_rows = 0

    def record(self, result: ProcessingResult) -> None:
        self.processed += 1
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    def record_skipped_row(self) -> None:
        self.skipped_rows += 1

    def __repr__(self) -> str:
        return (
            f"ProcessingStats(processed={self.processed}, applied={self.applied}, "
            f"ignored={self.ignored}, skipped_rows={self.skipped_rows})"
        )
