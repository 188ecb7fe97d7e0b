import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Optional

from models import ProcessingResult, TransactionRecord, TransactionType

if TYPE_CHECKING:
    from ledger import Ledger

logger = logging.getLogger(__name__)


class DisputeTracker:
    """
    History of deposits and withdrawals, keyed by transaction id.

    A record starts undisputed. Dispute marks it disputed and holds its
    amount; resolve clears the flag and releases the hold; chargeback removes
    the held funds, locks the account and drops the record for good.
    Anything inconsistent (unknown id, wrong client, wrong state) is ignored.
    """

    def __init__(self, ledger: "Ledger"):
        self._ledger = ledger
        self._records: Dict[int, TransactionRecord] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get_record(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored transaction by ID."""
        return self._records.get(transaction_id)

    def is_disputed(self, transaction_id: int) -> bool:
        """Check if transaction is currently disputed."""
        record = self._records.get(transaction_id)
        return record is not None and record.disputed

    def record(
        self,
        transaction_id: int,
        client_id: int,
        amount: Decimal,
        transaction_type: TransactionType,
    ) -> ProcessingResult:
        """Store transaction for future dispute lookups."""
        if transaction_id in self._records:
            logger.warning(f"Tx {transaction_id} already recorded, keeping first entry")
            return ProcessingResult.IGNORED

        self._records[transaction_id] = TransactionRecord(
            transaction_id=transaction_id,
            client_id=client_id,
            amount=amount,
            transaction_type=transaction_type,
        )
        return ProcessingResult.APPLIED

    def _lookup(self, action: str, transaction_id: int, client_id: int) -> Optional[TransactionRecord]:
        record = self._records.get(transaction_id)

        if record is None:
            logger.info(f"{action} for tx {transaction_id}: transaction not found")
            return None

        if record.client_id != client_id:
            logger.warning(f"{action} for tx {transaction_id}: client mismatch (expected {record.client_id}, got {client_id})")
            return None

        return record

    def dispute(self, transaction_id: int, client_id: int) -> ProcessingResult:
        record = self._lookup("Dispute", transaction_id, client_id)
        if record is None:
            return ProcessingResult.IGNORED

        if record.disputed:
            logger.info(f"Dispute for tx {transaction_id}: transaction already disputed")
            return ProcessingResult.IGNORED

        record.disputed = True
        return self._ledger.hold(client_id, record.amount)

    def resolve(self, transaction_id: int, client_id: int) -> ProcessingResult:
        record = self._lookup("Resolve", transaction_id, client_id)
        if record is None:
            return ProcessingResult.IGNORED

        if not record.disputed:
            logger.info(f"Resolve for tx {transaction_id}: transaction not disputed")
            return ProcessingResult.IGNORED

        record.disputed = False
        return self._ledger.release(client_id, record.amount)

    def chargeback(self, transaction_id: int, client_id: int) -> ProcessingResult:
        record = self._lookup("Chargeback", transaction_id, client_id)
        if record is None:
            return ProcessingResult.IGNORED

        if not record.disputed:
            logger.info(f"Chargeback for tx {transaction_id}: transaction not disputed")
            return ProcessingResult.IGNORED

        del self._records[transaction_id]
        return self._ledger.chargeback(client_id, record.amount)
