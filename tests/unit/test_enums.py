"""Tests for pa_common.enums."""

from src.pa_common.enums import AccountType, NormalBalance, TransactionStatus


class TestNormalBalance:
    def test_values(self) -> None:
        assert NormalBalance.DEBIT == "debit"
        assert NormalBalance.CREDIT == "credit"

    def test_from_string(self) -> None:
        assert NormalBalance("credit") is NormalBalance.CREDIT


class TestAccountType:
    def test_members(self) -> None:
        assert {t.value for t in AccountType} == {"asset", "liability", "equity", "income", "expense"}


class TestTransactionStatus:
    def test_members(self) -> None:
        assert [s.value for s in TransactionStatus] == ["draft", "posted", "void"]

    def test_str_enum(self) -> None:
        assert isinstance(TransactionStatus.POSTED, str)
