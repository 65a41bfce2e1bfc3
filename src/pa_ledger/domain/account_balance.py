"""Account balance derivation for reporting.

Unlike the posting-time validator, reporting must survive dirty historical
data: a line with an invalid amount is logged and skipped, never fatal.
"""

import logging
from collections.abc import Sequence

from src.pa_common.enums import NormalBalance
from src.pa_common.errors import InvalidLineAmountError
from src.pa_ledger.domain.models import TransactionLine, line_amount, parse_normal_balance
from src.pa_money.decimal_engine import DecimalEngine, default_engine

logger = logging.getLogger(__name__)


def calculate_account_balance(
    lines: Sequence[TransactionLine],
    normal_balance: NormalBalance | str,
    engine: DecimalEngine | None = None,
) -> int:
    """Signed balance in cents, positive on the account's natural side.

    debit-normal: debits add, credits subtract; credit-normal: the reverse.
    Accumulation is exact and the result is a Python int, so totals of any
    size come back whole.
    """
    eng = engine or default_engine()
    side = parse_normal_balance(normal_balance)
    balance = eng.zero()
    for index, line in enumerate(lines):
        try:
            amount = line_amount(index, line)
        except InvalidLineAmountError:
            logger.warning(
                "Skipping line %d with invalid amount %r (account=%s)",
                index, line.amount, line.account_ref or "?",
            )
            continue
        if line.is_debit == (side is NormalBalance.DEBIT):
            balance = eng.add(balance, amount, exact=True)
        else:
            balance = eng.subtract(balance, amount, exact=True)
    return balance.to_int()
