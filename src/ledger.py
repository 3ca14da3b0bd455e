from typing import Callable, Dict, Iterator, List, Optional, Set

from account import Account
from amount import Amount, AmountError
from errors import PaymentsError
from models import AccountSnapshot, Transaction, TransactionType


class LedgerError(PaymentsError):
    message = "Ledger operation failed"

    def __init__(self, transaction_id: int):
        super().__init__(f"{self.message} (tx id {transaction_id})")
        self.transaction_id = transaction_id


class DuplicateTransactionError(LedgerError):
    message = "Transaction id already processed"


class MissingAmountError(LedgerError):
    message = "Transaction amount is missing"


class NegativeAmountError(LedgerError):
    message = "Transaction amount is negative"


SkipCallback = Callable[[int, AmountError], None]


class Ledger:
    """
    Routes transactions to client accounts, creating accounts on first use.

    Deposit and withdrawal ids are unique across all clients. Dispute, resolve and
    chargeback refer to an id on the account named by the record's client.
    Rejections raise a PaymentsError and leave the ledger unchanged.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        self._processed_transaction_ids: Set[int] = set()

    def process_transaction(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                amount = self._validate_amount(transaction)
                self._get_or_create_account(transaction.client_id).deposit(transaction.transaction_id, amount)
                self._processed_transaction_ids.add(transaction.transaction_id)
            case TransactionType.WITHDRAWAL:
                amount = self._validate_amount(transaction)
                self._get_or_create_account(transaction.client_id).withdraw(transaction.transaction_id, amount)
                self._processed_transaction_ids.add(transaction.transaction_id)
            case TransactionType.DISPUTE:
                self._get_or_create_account(transaction.client_id).dispute(transaction.transaction_id)
            case TransactionType.RESOLVE:
                self._get_or_create_account(transaction.client_id).resolve(transaction.transaction_id)
            case TransactionType.CHARGEBACK:
                self._get_or_create_account(transaction.client_id).chargeback(transaction.transaction_id)
            case _:
                raise ValueError(f"Unsupported transaction type: {transaction.transaction_type}")

    def _validate_amount(self, transaction: Transaction) -> Amount:
        """Runs before the account is touched; a record rejected here never creates one."""
        if transaction.transaction_id in self._processed_transaction_ids:
            raise DuplicateTransactionError(transaction.transaction_id)

        if transaction.amount is None:
            raise MissingAmountError(transaction.transaction_id)

        amount = Amount.parse(transaction.amount)
        if amount.is_negative():
            raise NegativeAmountError(transaction.transaction_id)
        return amount

    def _get_or_create_account(self, client_id: int) -> Account:
        if client_id not in self._accounts:
            self._accounts[client_id] = Account(client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Account:
        """Look up an account that must exist. A miss means a broken invariant, not bad input."""
        try:
            return self._accounts[client_id]
        except KeyError:
            raise LookupError(f"Missing account {client_id}") from None

    def has_account(self, client_id: int) -> bool:
        return client_id in self._accounts

    def accounts(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def snapshot_all(self, on_skipped: Optional[SkipCallback] = None) -> List[AccountSnapshot]:
        """
        Build a snapshot per account.

        An account whose available + held overflows is left out of the result and
        reported through on_skipped instead of failing the whole report.
        """
        snapshots = []
        for account in self._accounts.values():
            try:
                total = account.total
            except AmountError as e:
                if on_skipped is not None:
                    on_skipped(account.client_id, e)
                continue

            snapshots.append(
                AccountSnapshot(
                    client=str(account.client_id),
                    available=str(account.available),
                    held=str(account.held),
                    total=str(total),
                    locked=account.locked,
                )
            )
        return snapshots
