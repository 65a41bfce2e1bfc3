"""Ledger domain models: pure dataclasses, no persistence dependency."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from src.pa_common.enums import AccountType, NormalBalance
from src.pa_common.errors import InvalidLineAmountError, InvalidNormalBalanceError

_DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def new_line_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TransactionLine:
    amount: int                  # cents, >= 0; direction lives only in is_debit
    is_debit: bool
    account_ref: str = ""
    memo: str | None = None
    line_id: str = field(default_factory=new_line_id, compare=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TransactionLine":
        """Build from a storage row: is_debit arrives as 0/1, keys in either case style.

        The amount is passed through untouched; validation belongs to the
        balance validator / calculator that consume the line.
        """
        is_debit = row.get("is_debit", row.get("isDebit", False))
        account_ref = row.get("account_id", row.get("account_ref", row.get("accountRef", "")))
        kwargs: dict[str, Any] = {}
        if row.get("id") is not None:
            kwargs["line_id"] = str(row["id"])
        return cls(
            amount=row.get("amount"),  # type: ignore[arg-type]
            is_debit=bool(is_debit),
            account_ref=str(account_ref or ""),
            memo=row.get("memo", row.get("description")),
            **kwargs,
        )


def line_amount(index: int, line: TransactionLine) -> int:
    """Return the line's amount as int cents or raise InvalidLineAmountError.

    Accepts int or an integral Decimal; rejects bool, str, float, None and
    negatives rather than coercing them.
    """
    amount: object = line.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, Decimal)):
        raise InvalidLineAmountError(index, amount)
    if isinstance(amount, Decimal):
        if not amount.is_finite() or amount.as_integer_ratio()[1] != 1:
            raise InvalidLineAmountError(index, amount)
        amount = int(amount)
    if amount < 0:
        raise InvalidLineAmountError(index, amount)
    return amount


def parse_normal_balance(value: NormalBalance | str) -> NormalBalance:
    if isinstance(value, NormalBalance):
        return value
    if isinstance(value, str):
        try:
            return NormalBalance(value.strip().lower())
        except ValueError:
            pass
    raise InvalidNormalBalanceError(value)


def normal_balance_for(account_type: AccountType | str) -> NormalBalance:
    """Caller convention: assets/expenses are debit-normal, everything else credit-normal."""
    return NormalBalance.DEBIT if AccountType(account_type) in _DEBIT_NORMAL_TYPES else NormalBalance.CREDIT


@dataclass
class Account:
    id: str
    code: str
    name: str
    account_type: AccountType
    normal_balance: NormalBalance | None = None   # derived from account_type when omitted
    is_active: bool = True
    parent_id: str | None = None

    def __post_init__(self) -> None:
        self.account_type = AccountType(self.account_type)
        if self.normal_balance is None:
            self.normal_balance = normal_balance_for(self.account_type)
        else:
            self.normal_balance = parse_normal_balance(self.normal_balance)

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance is NormalBalance.DEBIT
