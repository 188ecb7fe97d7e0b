import logging

from models import Transaction, TransactionType, ProcessingResult
from ledger import Ledger

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Routes transactions to the ledger or the dispute tracker.
    Returns ProcessingResult to indicate whether state changed.
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: State was updated
            IGNORED: Transaction was dropped (locked account, insufficient funds,
                unknown or mismatched reference, wrong dispute state)
        """
        # Accounts are created on first sight of a client, whatever the outcome
        self._ledger.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._ledger.apply_deposit(
                    transaction.client_id, transaction.transaction_id, transaction.amount
                )
            case TransactionType.WITHDRAWAL:
                result = self._ledger.apply_withdrawal(
                    transaction.client_id, transaction.transaction_id, transaction.amount
                )
            case TransactionType.DISPUTE:
                result = self._ledger.disputes.dispute(transaction.transaction_id, transaction.client_id)
            case TransactionType.RESOLVE:
                result = self._ledger.disputes.resolve(transaction.transaction_id, transaction.client_id)
            case TransactionType.CHARGEBACK:
                result = self._ledger.disputes.chargeback(transaction.transaction_id, transaction.client_id)
            case _:
                result = ProcessingResult.IGNORED

        if result == ProcessingResult.IGNORED:
            logger.debug(f"Ignored {transaction}")
        return result
