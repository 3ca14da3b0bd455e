import csv
import logging
import re
from typing import Dict, Iterable, Optional, TextIO

from amount import AmountError
from errors import PaymentsError
from ledger import Ledger
from models import (
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    AccountSnapshot,
    ProcessingStats,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]

_ID_PATTERN = re.compile(r"[0-9]+")


def _parse_id(text: str, name: str, maximum: int) -> int:
    if not _ID_PATTERN.fullmatch(text):
        raise ValueError(f"invalid {name} id: {text!r}")
    value = int(text)
    if value > maximum:
        raise ValueError(f"{name} id out of range: {value}")
    return value


class PaymentsEngine:
    """
    Feeds CSV transaction rows to a Ledger in arrival order.
    Unparsable rows and rejected transactions are logged and skipped; the stream continues.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self._ledger = ledger if ledger is not None else Ledger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, AccountSnapshot]:
        """Process CSV file and return final account snapshots keyed by client id."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            self.process_stream(f)
        logger.info(f"Processing complete. {self._stats}")
        return self.snapshots()

    def process_stream(self, stream: TextIO) -> None:
        reader = csv.DictReader(stream)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                logger.warning(f"Failed to read row at line {reader.line_num}: {e}")
                self._stats.record_skipped()
                continue

            transaction = self._parse_csv_row(row)
            if transaction is None:
                self._stats.record_skipped()
                continue
            self.process_transaction(transaction)

    def process_transactions(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self.process_transaction(transaction)

    def process_transaction(self, transaction: Transaction) -> bool:
        try:
            self._ledger.process_transaction(transaction)
        except PaymentsError as e:
            self._stats.record_failure()
            logger.warning(f"Rejected {transaction}: {e}")
            return False

        self._stats.record_success()
        return True

    def snapshots(self) -> Dict[int, AccountSnapshot]:
        return {
            int(snapshot.client): snapshot
            for snapshot in self._ledger.snapshot_all(on_skipped=self._log_skipped_account)
        }

    def write_accounts(self, stream: TextIO) -> None:
        """Write the account table as CSV, ordered by client id."""
        snapshots = self.snapshots()
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(OUTPUT_HEADER)
        for client_id in sorted(snapshots):
            writer.writerow(snapshots[client_id].as_row())

    @staticmethod
    def _log_skipped_account(client_id: int, error: AmountError) -> None:
        logger.warning(f"Account {client_id} left out of the report: {error}")

    def _parse_csv_row(self, row: Dict[str, str]) -> Optional[Transaction]:
        """Parse CSV row into Transaction."""
        try:
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            transaction_type_str = normalized["type"].lower()
            client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID)
            transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID)

            return Transaction(
                transaction_type=TransactionType(transaction_type_str),
                client_id=client_id,
                transaction_id=transaction_id,
                amount=normalized.get("amount") or None,
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None
