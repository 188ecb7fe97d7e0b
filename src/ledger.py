import logging
from decimal import Decimal
from typing import Dict, Optional

from models import ClientAccount, ProcessingResult, TransactionType
from dispute_tracker import DisputeTracker

logger = logging.getLogger(__name__)


class Ledger:
    """
    Client accounts and the balance rules applied to them.
    Deposits and withdrawals are recorded in the dispute tracker so they can
    later be disputed, resolved or charged back.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.disputes = DisputeTracker(self)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def apply_deposit(self, client_id: int, transaction_id: int, amount: Decimal) -> ProcessingResult:
        account = self.get_or_create_account(client_id)
        if account.locked:
            logger.info(f"Deposit tx {transaction_id}: client {client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        account.credit(amount)
        self.disputes.record(transaction_id, client_id, amount, TransactionType.DEPOSIT)
        return ProcessingResult.APPLIED

    def apply_withdrawal(self, client_id: int, transaction_id: int, amount: Decimal) -> ProcessingResult:
        account = self.get_or_create_account(client_id)
        if account.locked:
            logger.info(f"Withdrawal tx {transaction_id}: client {client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        if account.available < amount:
            logger.info(f"Withdrawal tx {transaction_id}: insufficient funds (available {account.available}, requested {amount})")
            return ProcessingResult.IGNORED

        account.debit(amount)
        self.disputes.record(transaction_id, client_id, amount, TransactionType.WITHDRAWAL)
        return ProcessingResult.APPLIED

    # hold/release/chargeback are only reached through a recorded transaction,
    # so the account always exists already.

    def hold(self, client_id: int, amount: Decimal) -> ProcessingResult:
        self._accounts[client_id].hold(amount)
        return ProcessingResult.APPLIED

    def release(self, client_id: int, amount: Decimal) -> ProcessingResult:
        self._accounts[client_id].release_hold(amount)
        return ProcessingResult.APPLIED

    def chargeback(self, client_id: int, amount: Decimal) -> ProcessingResult:
        account = self._accounts[client_id]
        account.remove_held(amount)
        account.lock()
        logger.info(f"Client {client_id} locked after chargeback of {amount}")
        return ProcessingResult.APPLIED
