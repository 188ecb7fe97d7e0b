import logging
from typing import Dict, Iterable

from models import Transaction, ClientAccount, ProcessingStats, TransactionParseError
from ledger import Ledger
from transaction_processor import TransactionProcessor
from csv_io import open_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction stream against client accounts, one transaction at
    a time and strictly in arrival order.
    """

    def __init__(self, skip_invalid_rows: bool = False):
        self._skip_invalid_rows = skip_invalid_rows
        self._ledger = Ledger()
        self._processor = TransactionProcessor(self._ledger)
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        transactions = open_transactions(
            filepath,
            skip_invalid=self._skip_invalid_rows,
            on_invalid=self._record_skipped_row,
        )
        accounts = self.process(transactions)

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Applied: {self._stats.applied}, "
            f"Ignored: {self._stats.ignored}, "
            f"Skipped rows: {self._stats.skipped_rows}"
        )
        return accounts

    def process(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply transactions in order and return final account states."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)
            self._stats.record(result)
        return self._ledger.get_all_accounts()

    def _record_skipped_row(self, error: TransactionParseError) -> None:
        logger.debug(f"Counted skipped row: {error}")
        self._stats.record_skipped_row()
