"""Trial balance over a chart of accounts."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from src.pa_ledger.domain.account_balance import calculate_account_balance
from src.pa_ledger.domain.models import Account, TransactionLine
from src.pa_money.decimal_engine import DecimalEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: str
    account_code: str
    account_name: str
    debit: int    # cents
    credit: int   # cents


@dataclass(frozen=True)
class TrialBalance:
    rows: list[TrialBalanceRow]
    total_debits: int
    total_credits: int

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


def build_trial_balance(
    accounts: Iterable[Account],
    lines_by_account: Mapping[str, Sequence[TransactionLine]],
    engine: DecimalEngine | None = None,
) -> TrialBalance:
    """One row per account, ordered by code.

    A positive balance lands on the account's natural side; a negative one
    (e.g. an overdrawn asset) lands on the opposite side as an absolute value.
    """
    rows: list[TrialBalanceRow] = []
    for account in sorted(accounts, key=lambda a: a.code):
        balance = calculate_account_balance(
            lines_by_account.get(account.id, ()), account.normal_balance, engine  # type: ignore[arg-type]
        )
        on_natural_side = balance >= 0
        natural, opposite = (balance, 0) if on_natural_side else (0, -balance)
        debit, credit = (natural, opposite) if account.is_debit_normal else (opposite, natural)
        rows.append(TrialBalanceRow(account.id, account.code, account.name, debit, credit))

    total_debits = sum(r.debit for r in rows)
    total_credits = sum(r.credit for r in rows)
    if total_debits != total_credits:
        logger.warning(
            "Trial balance OUT OF BALANCE: debits=%d credits=%d", total_debits, total_credits
        )
    else:
        logger.info("Trial balance in balance: total=%d", total_debits)
    return TrialBalance(rows=rows, total_debits=total_debits, total_credits=total_credits)
