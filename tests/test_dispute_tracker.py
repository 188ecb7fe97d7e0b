import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import ProcessingResult, TransactionType
from ledger import Ledger


class TestDisputeTracker:
    def setup_method(self):
        self.ledger = Ledger()
        self.tracker = self.ledger.disputes
        self.ledger.apply_deposit(1, 1, Decimal("5.0"))

    def account(self, client_id=1):
        return self.ledger.get_account(client_id)

    def test_record_duplicate_ignored(self):
        result = self.tracker.record(1, 1, Decimal("99"), TransactionType.DEPOSIT)

        assert result == ProcessingResult.IGNORED
        assert self.tracker.get_record(1).amount == Decimal("5.0")
        assert len(self.tracker) == 1

    def test_dispute_holds_amount(self):
        result = self.tracker.dispute(1, 1)

        assert result == ProcessingResult.APPLIED
        assert self.tracker.is_disputed(1)
        assert self.account().available == Decimal("0")
        assert self.account().held == Decimal("5.0")
        assert self.account().total == Decimal("5.0")

    def test_dispute_unknown_transaction(self):
        result = self.tracker.dispute(99, 1)

        assert result == ProcessingResult.IGNORED
        assert self.account().available == Decimal("5.0")

    def test_dispute_client_mismatch(self):
        self.ledger.get_or_create_account(2)
        result = self.tracker.dispute(1, 2)

        assert result == ProcessingResult.IGNORED
        assert not self.tracker.is_disputed(1)
        assert self.account().held == Decimal("0")
        assert self.account(2).held == Decimal("0")

    def test_dispute_twice_is_idempotent(self):
        self.tracker.dispute(1, 1)
        result = self.tracker.dispute(1, 1)

        assert result == ProcessingResult.IGNORED
        assert self.account().available == Decimal("0")
        assert self.account().held == Decimal("5.0")

    def test_resolve_releases_hold(self):
        self.tracker.dispute(1, 1)
        result = self.tracker.resolve(1, 1)

        assert result == ProcessingResult.APPLIED
        assert not self.tracker.is_disputed(1)
        assert 1 in self.tracker
        assert self.account().available == Decimal("5.0")
        assert self.account().held == Decimal("0")

    def test_resolve_not_disputed(self):
        result = self.tracker.resolve(1, 1)

        assert result == ProcessingResult.IGNORED
        assert self.account().available == Decimal("5.0")

    def test_resolve_twice(self):
        self.tracker.dispute(1, 1)
        self.tracker.resolve(1, 1)
        result = self.tracker.resolve(1, 1)

        assert result == ProcessingResult.IGNORED
        assert self.account().available == Decimal("5.0")
        assert self.account().held == Decimal("0")

    def test_resolve_client_mismatch(self):
        self.tracker.dispute(1, 1)
        result = self.tracker.resolve(1, 2)

        assert result == ProcessingResult.IGNORED
        assert self.tracker.is_disputed(1)

    def test_chargeback_removes_record(self):
        self.tracker.dispute(1, 1)
        result = self.tracker.chargeback(1, 1)

        assert result == ProcessingResult.APPLIED
        assert 1 not in self.tracker
        assert self.account().available == Decimal("0")
        assert self.account().held == Decimal("0")
        assert self.account().total == Decimal("0")
        assert self.account().locked is True

    def test_chargeback_not_disputed(self):
        result = self.tracker.chargeback(1, 1)

        assert result == ProcessingResult.IGNORED
        assert 1 in self.tracker
        assert self.account().locked is False

    def test_chargeback_client_mismatch(self):
        self.tracker.dispute(1, 1)
        result = self.tracker.chargeback(1, 2)

        assert result == ProcessingResult.IGNORED
        assert self.account().locked is False
        assert self.account().held == Decimal("5.0")

    def test_references_after_chargeback_are_ignored(self):
        self.tracker.dispute(1, 1)
        self.tracker.chargeback(1, 1)

        assert self.tracker.dispute(1, 1) == ProcessingResult.IGNORED
        assert self.tracker.resolve(1, 1) == ProcessingResult.IGNORED
        assert self.tracker.chargeback(1, 1) == ProcessingResult.IGNORED
        assert self.account().total == Decimal("0")

    def test_redispute_after_resolve(self):
        self.tracker.dispute(1, 1)
        self.tracker.resolve(1, 1)
        result = self.tracker.dispute(1, 1)

        assert result == ProcessingResult.APPLIED
        assert self.account().held == Decimal("5.0")

    def test_dispute_withdrawal_holds_withdrawn_amount(self):
        self.ledger.apply_withdrawal(1, 2, Decimal("2.0"))
        result = self.tracker.dispute(2, 1)

        assert result == ProcessingResult.APPLIED
        assert self.account().available == Decimal("1.0")
        assert self.account().held == Decimal("2.0")
        assert self.account().total == Decimal("3.0")

    def test_locked_account_still_accepts_dispute_lifecycle(self):
        self.ledger.apply_deposit(1, 2, Decimal("3.0"))
        self.tracker.dispute(1, 1)
        self.tracker.chargeback(1, 1)
        assert self.account().locked is True

        assert self.tracker.dispute(2, 1) == ProcessingResult.APPLIED
        assert self.tracker.resolve(2, 1) == ProcessingResult.APPLIED
        assert self.account().available == Decimal("3.0")
        assert self.account().held == Decimal("0")
