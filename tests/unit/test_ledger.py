"""Tests for pa_ledger.domain.ledger: recording posted transactions and reporting."""

import logging
from datetime import date

import pytest

from src.pa_common.enums import AccountType
from src.pa_common.errors import LedgerError
from src.pa_ledger.domain.journal import Journal
from src.pa_ledger.domain.ledger import Ledger
from src.pa_ledger.domain.models import Account, TransactionLine
from src.pa_ledger.domain.transaction import Transaction
from src.pa_money.decimal_engine import DecimalEngine

LOGGER = "src.pa_ledger.domain.ledger"


def _posted(tx_id: str, debit_ref: str = "1020", credit_ref: str = "4010", amount: int = 10000,
            entity: str = "entity-1", post: bool = True) -> Transaction:
    tx = Transaction(
        id=tx_id,
        entry_date=date(2025, 1, 31),
        description="Rent received",
        entity_id=entity,
        lines=[
            TransactionLine(amount=amount, is_debit=True, account_ref=debit_ref),
            TransactionLine(amount=amount, is_debit=False, account_ref=credit_ref),
        ],
    )
    if post:
        tx.post()
    return tx


@pytest.fixture
def ledger(engine: DecimalEngine) -> Ledger:
    ledger = Ledger("entity-1", engine)
    ledger.add_account(Account(id="1020", code="1020", name="Operating Bank", account_type="asset"))
    ledger.add_account(Account(id="4010", code="4010", name="Rental Income", account_type="income"))
    ledger.add_account(
        Account(id="5020", code="5020", name="Repairs", account_type="expense", is_active=False)
    )
    return ledger


class TestSetup:
    def test_entity_required(self) -> None:
        with pytest.raises(LedgerError):
            Ledger("  ")

    def test_duplicate_account(self, ledger: Ledger) -> None:
        with pytest.raises(LedgerError) as exc_info:
            ledger.add_account(Account(id="1020", code="1020", name="Again", account_type="asset"))
        assert exc_info.value.reason == "DUPLICATE_ACCOUNT"

    def test_accounts_by_type(self, ledger: Ledger) -> None:
        assert [a.id for a in ledger.get_accounts_by_type("income")] == ["4010"]
        assert [a.id for a in ledger.get_accounts_by_type(AccountType.ASSET)] == ["1020"]
        assert len(ledger.get_all_accounts()) == 3

    def test_add_journal(self, ledger: Ledger) -> None:
        journal = Journal(id="gj", name="General", entity_id="entity-1")
        ledger.add_journal(journal)
        assert ledger.get_journal("gj") is journal
        with pytest.raises(LedgerError) as exc_info:
            ledger.add_journal(journal)
        assert exc_info.value.reason == "DUPLICATE_JOURNAL"

    def test_journal_of_other_entity(self, ledger: Ledger) -> None:
        with pytest.raises(LedgerError) as exc_info:
            ledger.add_journal(Journal(id="gj", name="General", entity_id="entity-2"))
        assert exc_info.value.reason == "ENTITY_MISMATCH"


class TestRecordTransaction:
    def test_records_and_updates_balances(self, ledger: Ledger) -> None:
        assert ledger.record_transaction(_posted("t1")) is True
        assert ledger.get_account_balance("1020") == 10000
        assert ledger.get_account_balance("4010") == 10000
        assert [tx.id for tx in ledger.get_all_recorded_transactions()] == ["t1"]
        assert [tx.id for tx in ledger.get_recorded_transactions_for_account("4010")] == ["t1"]
        assert ledger.get_recorded_transactions_for_account("5020") == []

    @pytest.mark.parametrize(
        "tx,fragment",
        [
            (_posted("t1", entity="entity-2"), "entity-2"),
            (_posted("t1", post=False), "only 'posted'"),
            (_posted("t1", credit_ref="9999"), "unknown account"),
            (_posted("t1", debit_ref="5020"), "inactive account"),
        ],
    )
    def test_rejections(self, ledger: Ledger, caplog: pytest.LogCaptureFixture, tx: Transaction, fragment: str) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            assert ledger.record_transaction(tx) is False
        assert fragment in caplog.text
        assert ledger.get_all_recorded_transactions() == ()
        assert ledger.get_account_balance("1020") == 0

    def test_rejects_unbalanced(self, ledger: Ledger, caplog: pytest.LogCaptureFixture) -> None:
        tx = _posted("t1")
        tx.lines.append(TransactionLine(amount=1, is_debit=True, account_ref="1020"))
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            assert ledger.record_transaction(tx) is False
        assert "not balanced" in caplog.text

    def test_rejects_duplicate(self, ledger: Ledger) -> None:
        tx = _posted("t1")
        assert ledger.record_transaction(tx) is True
        assert ledger.record_transaction(tx) is False
        assert ledger.get_account_balance("1020") == 10000

    def test_unknown_account_balance_is_zero(self, ledger: Ledger, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            assert ledger.get_account_balance("nope") == 0
        assert "nope" in caplog.text


class TestTrialBalance:
    def test_in_balance_after_recording(self, ledger: Ledger) -> None:
        ledger.record_transaction(_posted("t1", amount=10000))
        ledger.record_transaction(_posted("t2", amount=2500))
        tb = ledger.generate_trial_balance()
        assert tb.is_balanced
        rows = {r.account_code: (r.debit, r.credit) for r in tb.rows}
        assert rows == {"1020": (12500, 0), "4010": (0, 12500), "5020": (0, 0)}

    def test_wide_totals(self, ledger: Ledger) -> None:
        ledger.record_transaction(_posted("t1", amount=10**25))
        tb = ledger.generate_trial_balance()
        assert tb.total_debits == tb.total_credits == 10**25
