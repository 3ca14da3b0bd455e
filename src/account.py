from typing import Dict, Iterator, Optional

from amount import Amount, AmountError
from errors import PaymentsError
from models import AccountTransaction, AccountTransactionType


class AccountOperationError(PaymentsError):
    """Base class for rejected account operations. Carries the transaction id."""

    message = "Account operation failed"

    def __init__(self, transaction_id: int):
        super().__init__(f"{self.message} (tx id {transaction_id})")
        self.transaction_id = transaction_id


class AccountLockedError(AccountOperationError):
    message = "Account is locked"


class TransactionExistsError(AccountOperationError):
    message = "Transaction already exists"


class UnknownTransactionError(AccountOperationError):
    message = "Unknown transaction"


class WithdrawalLimitExceededError(AccountOperationError):
    message = "Withdrawal limit exceeded"


class AlreadyDisputedError(AccountOperationError):
    message = "Transaction already disputed"


class NotDisputedError(AccountOperationError):
    message = "Transaction not disputed"


class WithdrawalDisputeError(AccountOperationError):
    message = "Withdrawal transaction cannot be disputed / resolved / charged back"


class InvalidAmountOperationError(AccountOperationError):
    message = "Invalid amount operation"

    def __init__(self, transaction_id: int, cause: AmountError):
        super().__init__(transaction_id)
        self.cause = cause


class Account:
    """
    One client's balances and the deposits/withdrawals recorded against them.

    Every operation checks the lock first, then validates, then computes the new
    balances before assigning anything, so a rejected operation leaves the account
    exactly as it was.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self.available = Amount.zero()
        self.held = Amount.zero()
        self.locked = False
        self._transactions: Dict[int, AccountTransaction] = {}

    @property
    def total(self) -> Amount:
        return self.available.add(self.held)

    def get_transaction(self, transaction_id: int) -> Optional[AccountTransaction]:
        return self._transactions.get(transaction_id)

    def transactions(self) -> Iterator[AccountTransaction]:
        return iter(self._transactions.values())

    def transaction_count(self) -> int:
        return len(self._transactions)

    def deposit(self, transaction_id: int, amount: Amount) -> None:
        self._check_unlocked(transaction_id)
        if transaction_id in self._transactions:
            raise TransactionExistsError(transaction_id)

        try:
            available = self.available.add(amount)
        except AmountError as e:
            raise InvalidAmountOperationError(transaction_id, e) from e

        self.available = available
        self._transactions[transaction_id] = AccountTransaction(
            transaction_id=transaction_id,
            transaction_type=AccountTransactionType.DEPOSIT,
            amount=amount,
        )

    def withdraw(self, transaction_id: int, amount: Amount) -> None:
        self._check_unlocked(transaction_id)
        if transaction_id in self._transactions:
            raise TransactionExistsError(transaction_id)

        if self.available < amount:
            raise WithdrawalLimitExceededError(transaction_id)

        try:
            available = self.available.sub(amount)
        except AmountError as e:
            raise InvalidAmountOperationError(transaction_id, e) from e

        self.available = available
        self._transactions[transaction_id] = AccountTransaction(
            transaction_id=transaction_id,
            transaction_type=AccountTransactionType.WITHDRAWAL,
            amount=amount,
        )

    def dispute(self, transaction_id: int) -> None:
        """Move a deposit's amount from available to held."""
        self._check_unlocked(transaction_id)
        original = self._lookup(transaction_id)

        if original.disputed:
            raise AlreadyDisputedError(transaction_id)

        # TODO: withdrawal disputes would need a way to recall funds that already left the account
        if original.transaction_type != AccountTransactionType.DEPOSIT:
            raise WithdrawalDisputeError(transaction_id)

        available, held = self._move(transaction_id, self.available, self.held, original.amount)
        self.available = available
        self.held = held
        original.disputed = True

    def resolve(self, transaction_id: int) -> None:
        """Release a disputed deposit's amount back to available."""
        self._check_unlocked(transaction_id)
        original = self._lookup_disputed(transaction_id)

        held, available = self._move(transaction_id, self.held, self.available, original.amount)
        self.available = available
        self.held = held
        original.disputed = False

    def chargeback(self, transaction_id: int) -> None:
        """Remove a disputed deposit's held amount and lock the account for good."""
        self._check_unlocked(transaction_id)
        original = self._lookup_disputed(transaction_id)

        try:
            held = self.held.sub(original.amount)
        except AmountError as e:
            raise InvalidAmountOperationError(transaction_id, e) from e

        self.held = held
        self.locked = True
        original.disputed = False

    def _check_unlocked(self, transaction_id: int) -> None:
        if self.locked:
            raise AccountLockedError(transaction_id)

    def _lookup(self, transaction_id: int) -> AccountTransaction:
        original = self._transactions.get(transaction_id)
        if original is None:
            raise UnknownTransactionError(transaction_id)
        return original

    def _lookup_disputed(self, transaction_id: int) -> AccountTransaction:
        original = self._lookup(transaction_id)
        if not original.disputed:
            raise NotDisputedError(transaction_id)
        if original.transaction_type != AccountTransactionType.DEPOSIT:
            raise WithdrawalDisputeError(transaction_id)
        return original

    @staticmethod
    def _move(transaction_id: int, source: Amount, target: Amount, amount: Amount):
        try:
            return source.sub(amount), target.add(amount)
        except AmountError as e:
            raise InvalidAmountOperationError(transaction_id, e) from e

    def __repr__(self) -> str:
        return f"Account(client={self.client_id}, available={self.available}, held={self.held}, locked={self.locked})"
