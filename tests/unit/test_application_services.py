"""Tests for LedgerApplicationService and RuleApplicationService (no HTTP)."""

import pytest

from src.pa_common.errors import UnbalancedTransactionError, UnknownAccountKeyError
from src.pa_ledger.application.schemas import (
    AccountBalanceRequest,
    AccountIn,
    LineIn,
    TrialBalanceRequest,
    ValidateTransactionRequest,
)
from src.pa_ledger.application.service import LedgerApplicationService
from src.pa_money.decimal_engine import DecimalEngine
from src.pa_rules.application.schemas import CustomRuleIn, SuggestRequest
from src.pa_rules.application.service import RuleApplicationService


@pytest.fixture
def ledger(engine: DecimalEngine) -> LedgerApplicationService:
    return LedgerApplicationService(engine)


@pytest.fixture
def rules() -> RuleApplicationService:
    return RuleApplicationService()


class TestLedgerService:
    def test_validate(self, ledger: LedgerApplicationService) -> None:
        req = ValidateTransactionRequest(lines=[
            LineIn(amount=10000, is_debit=True),
            LineIn(amount=6000, is_debit=False),
            LineIn(amount=3999, is_debit=False),
        ])
        result = ledger.validate_transaction(req)
        assert result.balanced is False
        assert result.difference == 1

    def test_validate_postable_raises(self, ledger: LedgerApplicationService) -> None:
        req = ValidateTransactionRequest(
            lines=[LineIn(amount=1, is_debit=True), LineIn(amount=2, is_debit=False)],
            require_postable=True,
        )
        with pytest.raises(UnbalancedTransactionError):
            ledger.validate_transaction(req)

    def test_account_balance(self, ledger: LedgerApplicationService) -> None:
        req = AccountBalanceRequest(
            normal_balance="credit",
            lines=[LineIn(amount=10000, is_debit=True), LineIn(amount=3000, is_debit=False)],
        )
        result = ledger.account_balance(req)
        assert result.balance_cents == -7000
        assert result.balance == "-70.00"
        assert result.formatted == "-$70.00"

    @pytest.mark.parametrize("total", [10**20, 10**25])
    def test_account_balance_wide_total(self, ledger: LedgerApplicationService, total: int) -> None:
        req = AccountBalanceRequest(
            normal_balance="debit",
            lines=[LineIn(amount=total, is_debit=True)],
        )
        result = ledger.account_balance(req)
        assert result.balance_cents == total
        assert result.balance == f"{total // 100}.00"
        assert result.formatted == f"${total // 100:,}.00"

    def test_trial_balance_custom_chart(self, ledger: LedgerApplicationService) -> None:
        req = TrialBalanceRequest(
            accounts=[
                AccountIn(id="cash", code="1", name="Cash", account_type="asset"),
                AccountIn(id="rent", code="2", name="Rent", account_type="income"),
            ],
            lines=[
                LineIn(amount=500, is_debit=True, account_ref="cash"),
                LineIn(amount=500, is_debit=False, account_ref="rent"),
            ],
        )
        result = ledger.trial_balance(req)
        assert result.is_balanced
        assert [(r.account_id, r.debit, r.credit) for r in result.rows] == [("cash", 500, 0), ("rent", 0, 500)]


class TestRuleService:
    def test_defaults_loaded(self, rules: RuleApplicationService) -> None:
        assert {r.action.account_ref for r in rules.default_rules} >= {"5110", "4510"}

    def test_suggest_default(self, rules: RuleApplicationService) -> None:
        result = rules.suggest(SuggestRequest(description="Monthly Service Fee", amount=1200))
        assert result is not None
        assert result.account_ref == "5110"
        assert result.account_name == "Bank Service Charges"

    def test_custom_rule_by_key(self, rules: RuleApplicationService) -> None:
        custom = CustomRuleIn(
            name="Hardware",
            conditions=[{"field": "payee", "operator": "contains", "value": "depot"}],
            account_key="repairs",
            is_debit=True,
        )
        result = rules.suggest(SuggestRequest(description="POS 4411", payee="Home Depot", custom_rules=[custom]))
        assert result is not None and result.account_ref == "5020"

    def test_custom_rule_wins_tie_against_default(self, rules: RuleApplicationService) -> None:
        custom = CustomRuleIn(
            name="Fee to office",
            conditions=[{"field": "description", "operator": "contains", "value": "service fee"}],
            account_ref="5120",
            is_debit=True,
            priority=100,
        )
        result = rules.suggest(SuggestRequest(description="SERVICE FEE", custom_rules=[custom]))
        assert result is not None and result.account_ref == "5120"

    def test_custom_rule_unknown_key(self, rules: RuleApplicationService) -> None:
        custom = CustomRuleIn(
            name="Parking",
            conditions=[{"field": "description", "operator": "contains", "value": "PARK"}],
            account_key="parking",
            is_debit=True,
        )
        with pytest.raises(UnknownAccountKeyError):
            rules.suggest(SuggestRequest(description="PARKING", custom_rules=[custom]))

    def test_custom_rule_unknown_account_dropped(self, rules: RuleApplicationService) -> None:
        custom = CustomRuleIn(
            name="Ghost",
            conditions=[{"field": "description", "operator": "contains", "value": "GHOST"}],
            account_ref="0000",
            is_debit=True,
        )
        assert rules.suggest(SuggestRequest(description="GHOST", custom_rules=[custom])) is None

    def test_no_match(self, rules: RuleApplicationService) -> None:
        assert rules.suggest(SuggestRequest(description="Tenant deposit")) is None
