"""Tests for pa_ledger.domain.transaction: lifecycle and reversing entries."""

from datetime import date

import pytest

from src.pa_common.enums import TransactionStatus
from src.pa_common.errors import TransactionError, UnbalancedTransactionError
from src.pa_ledger.domain.models import TransactionLine
from src.pa_ledger.domain.transaction import Transaction
from src.pa_money.decimal_engine import DecimalEngine


def _make(credit: int = 10000, **overrides: object) -> Transaction:
    fields: dict[str, object] = {
        "id": "tx-1",
        "entry_date": date(2025, 1, 31),
        "description": "  January rent  ",
        "entity_id": "entity-1",
        "lines": [
            TransactionLine(amount=10000, is_debit=True, account_ref="1020"),
            TransactionLine(amount=credit, is_debit=False, account_ref="4010"),
        ],
        "reference": "INV-7",
    }
    fields.update(overrides)
    return Transaction(**fields)  # type: ignore[arg-type]


class TestConstruction:
    def test_defaults(self) -> None:
        tx = _make()
        assert tx.status is TransactionStatus.DRAFT
        assert tx.description == "January rent"
        assert tx.total_amount() == 10000

    @pytest.mark.parametrize("field", ["id", "description", "entity_id"])
    def test_required_text_fields(self, field: str) -> None:
        with pytest.raises(TransactionError) as exc_info:
            _make(**{field: "  "})
        assert exc_info.value.reason == "MISSING_FIELD"

    def test_date_required(self) -> None:
        with pytest.raises(TransactionError) as exc_info:
            _make(entry_date=None)
        assert exc_info.value.reason == "MISSING_FIELD"

    def test_needs_two_lines(self) -> None:
        with pytest.raises(TransactionError) as exc_info:
            _make(lines=[TransactionLine(amount=1, is_debit=True)])
        assert exc_info.value.reason == "INVALID_LINES"


class TestPost:
    def test_post_balanced(self) -> None:
        tx = _make()
        tx.post()
        assert tx.status is TransactionStatus.POSTED

    def test_post_unbalanced_stays_draft(self) -> None:
        tx = _make(credit=9999)
        assert tx.is_balanced() is False
        with pytest.raises(UnbalancedTransactionError):
            tx.post()
        assert tx.status is TransactionStatus.DRAFT

    def test_post_twice(self) -> None:
        tx = _make()
        tx.post()
        with pytest.raises(TransactionError) as exc_info:
            tx.post()
        assert exc_info.value.reason == "INVALID_STATUS"

    def test_add_line_only_in_draft(self) -> None:
        tx = _make(credit=6000)
        tx.add_line(TransactionLine(amount=4000, is_debit=False, account_ref="4020"))
        assert tx.is_balanced()
        tx.post()
        with pytest.raises(TransactionError):
            tx.add_line(TransactionLine(amount=1, is_debit=True))


class TestLines:
    def test_add_line_returns_id(self) -> None:
        tx = _make(credit=6000)
        line = TransactionLine(amount=4000, is_debit=False, account_ref="4020")
        assert tx.add_line(line) == line.line_id

    def test_remove_line(self) -> None:
        tx = _make(credit=6000)
        extra = TransactionLine(amount=1, is_debit=True, account_ref="1020")
        line_id = tx.add_line(extra)
        assert tx.remove_line(line_id) is True
        assert len(tx.lines) == 2
        assert tx.remove_line(line_id) is False

    def test_remove_line_only_in_draft(self) -> None:
        tx = _make()
        tx.post()
        with pytest.raises(TransactionError) as exc_info:
            tx.remove_line(tx.lines[0].line_id)
        assert exc_info.value.reason == "INVALID_STATUS"
        assert len(tx.lines) == 2

    def test_total_amount_uses_given_engine(self, engine: DecimalEngine) -> None:
        big = 10**25
        tx = _make(
            lines=[
                TransactionLine(amount=big, is_debit=True),
                TransactionLine(amount=big, is_debit=False),
            ]
        )
        assert tx.total_amount(engine) == big

    def test_line_ids_ignored_in_equality(self) -> None:
        a = TransactionLine(amount=5, is_debit=True, account_ref="1020")
        b = TransactionLine(amount=5, is_debit=True, account_ref="1020")
        assert a.line_id != b.line_id
        assert a == b


class TestVoid:
    def test_void_posted(self) -> None:
        tx = _make()
        tx.post()
        tx.void()
        assert tx.status is TransactionStatus.VOID

    def test_void_draft_rejected(self) -> None:
        with pytest.raises(TransactionError) as exc_info:
            _make().void()
        assert exc_info.value.reason == "INVALID_STATUS"
        assert exc_info.value.transaction_id == "tx-1"


class TestReversal:
    def test_flips_every_line(self) -> None:
        tx = _make()
        tx.post()
        rev = tx.create_reversal("tx-2", reversal_date=date(2025, 2, 1))
        assert rev.status is TransactionStatus.DRAFT
        assert rev.entry_date == date(2025, 2, 1)
        assert [(ln.amount, ln.is_debit) for ln in rev.lines] == [(10000, False), (10000, True)]
        assert rev.is_balanced()
        assert rev.description == "Reversal of transaction tx-1"
        assert rev.reference == "Reversal of INV-7"
        assert rev.metadata["reversal_of_transaction_id"] == "tx-1"
        assert rev.metadata["is_reversal_entry"] is True
        assert {ln.line_id for ln in rev.lines}.isdisjoint(ln.line_id for ln in tx.lines)

    def test_original_untouched(self) -> None:
        tx = _make()
        tx.post()
        tx.create_reversal("tx-2")
        assert tx.lines[0].is_debit is True
        assert tx.status is TransactionStatus.POSTED

    def test_reference_fallback(self) -> None:
        tx = _make(reference=None)
        tx.post()
        assert tx.create_reversal("tx-2").reference == "Reversal of Tx tx-1"

    def test_only_posted(self) -> None:
        with pytest.raises(TransactionError):
            _make().create_reversal("tx-2")
