"""Double-entry balance checks, run before a transaction is persisted.

Strict by intent: a malformed line amount stops posting with
InvalidLineAmountError instead of being coerced or skipped.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from src.pa_common.errors import TransactionError, UnbalancedTransactionError
from src.pa_ledger.domain.models import TransactionLine, line_amount
from src.pa_money.decimal_engine import DecimalEngine, default_engine

logger = logging.getLogger(__name__)

MIN_POSTABLE_LINES = 2


@dataclass(frozen=True)
class LineTotals:
    debits: int    # cents
    credits: int   # cents

    @property
    def difference(self) -> int:
        return self.debits - self.credits

    @property
    def is_balanced(self) -> bool:
        return self.debits == self.credits


def is_transaction_balanced(
    lines: Sequence[TransactionLine], engine: DecimalEngine | None = None
) -> bool:
    """True iff sum(debit amounts) == sum(credit amounts), exactly.

    An empty sequence is vacuously balanced; the minimum line count is
    enforced separately by assert_postable().
    """
    eng = engine or default_engine()
    balance = eng.zero()
    for index, line in enumerate(lines):
        amount = line_amount(index, line)
        if line.is_debit:
            balance = eng.add(balance, amount, exact=True)
        else:
            balance = eng.subtract(balance, amount, exact=True)
    return balance.is_zero


def line_totals(lines: Sequence[TransactionLine], engine: DecimalEngine | None = None) -> LineTotals:
    eng = engine or default_engine()
    debits = credits = eng.zero()
    for index, line in enumerate(lines):
        amount = line_amount(index, line)
        if line.is_debit:
            debits = eng.add(debits, amount, exact=True)
        else:
            credits = eng.add(credits, amount, exact=True)
    return LineTotals(debits=debits.to_int(), credits=credits.to_int())


def assert_postable(
    lines: Sequence[TransactionLine],
    min_lines: int = MIN_POSTABLE_LINES,
    transaction_id: str | None = None,
    engine: DecimalEngine | None = None,
) -> LineTotals:
    """Raise unless ``lines`` may be posted: enough lines, valid amounts, balanced."""
    if len(lines) < min_lines:
        raise TransactionError(
            "INVALID_LINES",
            f"Transaction must have at least {min_lines} lines, got {len(lines)}",
            transaction_id,
        )
    totals = line_totals(lines, engine)
    if not totals.is_balanced:
        logger.warning(
            "Transaction %s unbalanced: debits=%d credits=%d",
            transaction_id or "<new>", totals.debits, totals.credits,
        )
        raise UnbalancedTransactionError(totals.debits, totals.credits, transaction_id)
    return totals
