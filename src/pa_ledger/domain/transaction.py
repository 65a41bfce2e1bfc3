"""Transaction aggregate: draft -> posted -> void, plus reversing entries.

Persistence is out of scope; callers store the aggregate after a
successful post() / void().
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from src.pa_common.enums import TransactionStatus
from src.pa_common.errors import TransactionError
from src.pa_ledger.domain.balance import (
    MIN_POSTABLE_LINES,
    assert_postable,
    is_transaction_balanced,
    line_totals,
)
from src.pa_ledger.domain.models import TransactionLine, new_line_id
from src.pa_money.decimal_engine import DecimalEngine

logger = logging.getLogger(__name__)


@dataclass
class Transaction:
    id: str
    entry_date: date
    description: str
    entity_id: str
    lines: list[TransactionLine]
    status: TransactionStatus = TransactionStatus.DRAFT
    reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("id", "description", "entity_id"):
            if not str(getattr(self, name) or "").strip():
                raise TransactionError("MISSING_FIELD", f"Transaction {name} is required.", self.id or None)
        if self.entry_date is None:
            raise TransactionError("MISSING_FIELD", "Transaction date is required.", self.id)
        if len(self.lines) < MIN_POSTABLE_LINES:
            raise TransactionError(
                "INVALID_LINES", "Transaction must have at least two lines.", self.id
            )
        self.description = self.description.strip()
        self.lines = list(self.lines)
        self.status = TransactionStatus(self.status)

    def is_balanced(self, engine: DecimalEngine | None = None) -> bool:
        return is_transaction_balanced(self.lines, engine)

    def total_amount(self, engine: DecimalEngine | None = None) -> int:
        """Sum of debit lines, in cents."""
        return line_totals(self.lines, engine).debits

    def _require_status(self, expected: TransactionStatus, action: str) -> None:
        if self.status is not expected:
            raise TransactionError(
                "INVALID_STATUS",
                f"Cannot {action} transaction. Current status: {self.status.value}. "
                f"Expected '{expected.value}'.",
                self.id,
            )

    def add_line(self, line: TransactionLine) -> str:
        self._require_status(TransactionStatus.DRAFT, "add lines to")
        self.lines.append(line)
        return line.line_id

    def remove_line(self, line_id: str) -> bool:
        """Drop the line with ``line_id``; False when no line has that id."""
        self._require_status(TransactionStatus.DRAFT, "remove lines from")
        kept = [line for line in self.lines if line.line_id != line_id]
        removed = len(kept) < len(self.lines)
        self.lines = kept
        return removed

    def post(self, engine: DecimalEngine | None = None) -> None:
        """draft -> posted. Raises UnbalancedTransactionError when debits != credits."""
        self._require_status(TransactionStatus.DRAFT, "post")
        totals = assert_postable(self.lines, transaction_id=self.id, engine=engine)
        self.status = TransactionStatus.POSTED
        logger.info("Transaction %s posted: total=%d cents", self.id, totals.debits)

    def void(self) -> None:
        self._require_status(TransactionStatus.POSTED, "void")
        self.status = TransactionStatus.VOID
        logger.info("Transaction %s voided", self.id)

    def create_reversal(
        self,
        new_id: str,
        reversal_date: date | None = None,
        description: str | None = None,
    ) -> "Transaction":
        """New draft transaction with every line's direction flipped."""
        self._require_status(TransactionStatus.POSTED, "create reversal of")
        lines = [
            replace(
                line,
                is_debit=not line.is_debit,
                line_id=new_line_id(),
                memo=line.memo or f"Reversal of line for account {line.account_ref}",
            )
            for line in self.lines
        ]
        return Transaction(
            id=new_id,
            entry_date=reversal_date or date.today(),
            description=description or f"Reversal of transaction {self.id}",
            entity_id=self.entity_id,
            lines=lines,
            reference=f"Reversal of {self.reference}" if self.reference else f"Reversal of Tx {self.id}",
            metadata={**self.metadata, "reversal_of_transaction_id": self.id, "is_reversal_entry": True},
        )
