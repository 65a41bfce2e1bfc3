"""LedgerApplicationService: thin composition layer over the ledger domain.

Stateless; each call works on the lines supplied by the caller.
"""

from collections import defaultdict

from src.pa_ledger.application.schemas import (
    AccountBalanceRequest,
    AccountBalanceResponse,
    TrialBalanceRequest,
    TrialBalanceResponse,
    ValidateTransactionRequest,
    ValidateTransactionResponse,
)
from src.pa_ledger.domain.account_balance import calculate_account_balance
from src.pa_ledger.domain.balance import assert_postable, line_totals
from src.pa_ledger.domain.chart_of_accounts import default_chart_of_accounts
from src.pa_ledger.domain.models import TransactionLine
from src.pa_ledger.domain.trial_balance import build_trial_balance
from src.pa_money.cents import cents_to_decimal
from src.pa_money.currency import format_cents_as_currency
from src.pa_money.decimal_engine import DecimalEngine, default_engine


class LedgerApplicationService:
    def __init__(self, engine: DecimalEngine | None = None) -> None:
        self._engine = engine or default_engine()

    def validate_transaction(self, req: ValidateTransactionRequest) -> ValidateTransactionResponse:
        lines = [line.to_domain() for line in req.lines]
        if req.require_postable:
            totals = assert_postable(lines, engine=self._engine)
        else:
            totals = line_totals(lines, self._engine)
        return ValidateTransactionResponse(
            balanced=totals.is_balanced,
            debits=totals.debits,
            credits=totals.credits,
            difference=totals.difference,
        )

    def account_balance(self, req: AccountBalanceRequest) -> AccountBalanceResponse:
        lines = [line.to_domain() for line in req.lines]
        cents = calculate_account_balance(lines, req.normal_balance, self._engine)
        return AccountBalanceResponse(
            balance_cents=cents,
            balance=str(cents_to_decimal(cents, self._engine)),
            formatted=format_cents_as_currency(cents, req.currency, req.locale, self._engine),
        )

    def trial_balance(self, req: TrialBalanceRequest) -> TrialBalanceResponse:
        accounts = (
            [a.to_domain() for a in req.accounts] if req.accounts is not None
            else default_chart_of_accounts()
        )
        by_account: dict[str, list[TransactionLine]] = defaultdict(list)
        for line in req.lines:
            by_account[line.account_ref].append(line.to_domain())
        tb = build_trial_balance(accounts, by_account, self._engine)
        return TrialBalanceResponse.from_domain(tb)
