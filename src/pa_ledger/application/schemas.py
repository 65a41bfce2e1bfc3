"""Pydantic schemas for the pa_ledger API."""

from pydantic import BaseModel, Field

from src.pa_ledger.domain.models import Account, TransactionLine
from src.pa_ledger.domain.trial_balance import TrialBalance

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LineIn(BaseModel):
    # Range and type checks happen in the domain validator so that bad
    # amounts surface as InvalidLineAmountError (2001), not a schema error.
    amount: int = Field(..., description="Line amount in cents, >= 0")
    is_debit: bool
    account_ref: str = ""
    memo: str | None = None

    def to_domain(self) -> TransactionLine:
        return TransactionLine(
            amount=self.amount, is_debit=self.is_debit, account_ref=self.account_ref, memo=self.memo
        )


class ValidateTransactionRequest(BaseModel):
    lines: list[LineIn]
    require_postable: bool = Field(
        False, description="Also enforce the two-line minimum and raise on imbalance"
    )


class AccountBalanceRequest(BaseModel):
    normal_balance: str = Field(..., description="'debit' or 'credit'")
    lines: list[LineIn]
    currency: str | None = None
    locale: str | None = None


class AccountIn(BaseModel):
    id: str
    code: str
    name: str
    account_type: str
    normal_balance: str | None = None
    is_active: bool = True

    def to_domain(self) -> Account:
        return Account(
            id=self.id,
            code=self.code,
            name=self.name,
            account_type=self.account_type,  # type: ignore[arg-type]
            normal_balance=self.normal_balance,  # type: ignore[arg-type]
            is_active=self.is_active,
        )


class TrialBalanceRequest(BaseModel):
    accounts: list[AccountIn] | None = Field(
        None, description="Chart of accounts; the default chart when omitted"
    )
    lines: list[LineIn] = Field(default_factory=list, description="Posted lines; account_ref selects the account")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ValidateTransactionResponse(BaseModel):
    balanced: bool
    debits: int
    credits: int
    difference: int


class AccountBalanceResponse(BaseModel):
    balance_cents: int
    balance: str
    formatted: str


class TrialBalanceRowOut(BaseModel):
    account_id: str
    account_code: str
    account_name: str
    debit: int
    credit: int


class TrialBalanceResponse(BaseModel):
    rows: list[TrialBalanceRowOut]
    total_debits: int
    total_credits: int
    is_balanced: bool

    @classmethod
    def from_domain(cls, tb: TrialBalance) -> "TrialBalanceResponse":
        return cls(
            rows=[
                TrialBalanceRowOut(
                    account_id=r.account_id,
                    account_code=r.account_code,
                    account_name=r.account_name,
                    debit=r.debit,
                    credit=r.credit,
                )
                for r in tb.rows
            ],
            total_debits=tb.total_debits,
            total_credits=tb.total_credits,
            is_balanced=tb.is_balanced,
        )
