import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount
from models import (
    AccountSnapshot,
    AccountTransaction,
    AccountTransactionType,
    ProcessingStats,
    Transaction,
    TransactionType,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount="100.0",
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == "100.0"

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_repr(self):
        transaction = Transaction(TransactionType.WITHDRAWAL, client_id=2, transaction_id=7, amount="1.5")
        assert repr(transaction) == "Transaction(withdrawal, client=2, tx=7, amount=1.5)"

    def test_type_from_csv_value(self):
        assert TransactionType("chargeback") is TransactionType.CHARGEBACK


class TestAccountTransaction:
    def test_default_not_disputed(self):
        record = AccountTransaction(
            transaction_id=1,
            transaction_type=AccountTransactionType.DEPOSIT,
            amount=Amount.parse("10"),
        )
        assert record.disputed is False


class TestAccountSnapshot:
    def test_as_row(self):
        snapshot = AccountSnapshot(client="1", available="1.5000", held="0.0000", total="1.5000", locked=False)
        assert snapshot.as_row() == ["1", "1.5000", "0.0000", "1.5000", "false"]

    def test_locked_row(self):
        snapshot = AccountSnapshot(client="3", available="0.0000", held="0.0000", total="0.0000", locked=True)
        assert snapshot.as_row()[-1] == "true"


class TestProcessingStats:
    def test_counters(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_success()
        stats.record_failure()
        stats.record_skipped()

        assert stats.processed == 2
        assert stats.failed == 1
        assert stats.skipped == 1
        assert str(stats) == "Processed: 2, Failed: 1, Skipped: 1"
