"""Journal: an entity's book of original entry.

A journal only accepts transactions of its own entity that are balanced and
have at least two lines; a rejected transaction is logged and reported
through the return value, never half-added.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime

from src.pa_common.enums import TransactionStatus
from src.pa_common.errors import LedgerError
from src.pa_ledger.domain.balance import MIN_POSTABLE_LINES, LineTotals, is_transaction_balanced, line_totals
from src.pa_ledger.domain.models import TransactionLine
from src.pa_ledger.domain.transaction import Transaction
from src.pa_money.decimal_engine import DecimalEngine

logger = logging.getLogger(__name__)


def _day(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


@dataclass
class Journal:
    id: str
    name: str
    entity_id: str
    description: str | None = None
    transactions: list[Transaction] = field(default_factory=list)

    def __post_init__(self) -> None:
        for attr in ("id", "name", "entity_id"):
            if not str(getattr(self, attr) or "").strip():
                raise LedgerError("MISSING_FIELD", f"Journal {attr} is required.")
        self.name = self.name.strip()
        self.description = (self.description or "").strip() or None

    def _reject(self, tx: Transaction, reason: str) -> bool:
        logger.warning("Journal [%s/%s]: transaction %s %s. Not added.", self.name, self.id, tx.id, reason)
        return False

    def add_transaction(self, tx: Transaction, engine: DecimalEngine | None = None) -> bool:
        if tx.entity_id != self.entity_id:
            return self._reject(tx, f"belongs to entity {tx.entity_id}, not {self.entity_id}")
        if len(tx.lines) < MIN_POSTABLE_LINES:
            return self._reject(tx, "has fewer than two lines")
        if not is_transaction_balanced(tx.lines, engine):
            return self._reject(tx, "is not balanced")
        if self.get_transaction_by_id(tx.id) is not None:
            return self._reject(tx, "already exists")
        self.transactions.append(tx)
        return True

    def remove_transaction(self, transaction_id: str) -> bool:
        kept = [tx for tx in self.transactions if tx.id != transaction_id]
        removed = len(kept) < len(self.transactions)
        self.transactions = kept
        return removed

    def get_all_transactions(self) -> list[Transaction]:
        return list(self.transactions)

    def get_transaction_by_id(self, transaction_id: str) -> Transaction | None:
        return next((tx for tx in self.transactions if tx.id == transaction_id), None)

    def get_transactions_by_date_range(self, start: date, end: date) -> list[Transaction]:
        """Transactions dated from ``start`` through ``end``, both days included."""
        first, last = _day(start), _day(end)
        return [tx for tx in self.transactions if first <= _day(tx.entry_date) <= last]

    def _lines(self, only_posted: bool) -> Iterator[TransactionLine]:
        for tx in self.transactions:
            if only_posted and tx.status is not TransactionStatus.POSTED:
                continue
            yield from tx.lines

    def totals(self, only_posted: bool = False, engine: DecimalEngine | None = None) -> LineTotals:
        return line_totals(list(self._lines(only_posted)), engine)

    def total_debits(self, only_posted: bool = False, engine: DecimalEngine | None = None) -> int:
        return self.totals(only_posted, engine).debits

    def total_credits(self, only_posted: bool = False, engine: DecimalEngine | None = None) -> int:
        return self.totals(only_posted, engine).credits

    def is_journal_balanced(self, only_posted: bool = False, engine: DecimalEngine | None = None) -> bool:
        return self.totals(only_posted, engine).is_balanced
