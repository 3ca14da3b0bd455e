from dataclasses import dataclass
from enum import Enum
from typing import Optional

from amount import Amount

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class AccountTransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass
class Transaction:
    """Incoming record. The amount is kept as raw text; the ledger validates it."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[str] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class AccountTransaction:
    """A deposit or withdrawal recorded on an account, kept for dispute lookups."""

    transaction_id: int
    transaction_type: AccountTransactionType
    amount: Amount
    disputed: bool = False


@dataclass(frozen=True)
class AccountSnapshot:
    client: str
    available: str
    held: str
    total: str
    locked: bool

    def as_row(self) -> list:
        return [self.client, self.available, self.held, self.total, str(self.locked).lower()]


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_skipped(self):
        self.skipped += 1

    def __str__(self) -> str:
        return f"Processed: {self.processed}, Failed: {self.failed}, Skipped: {self.skipped}"
