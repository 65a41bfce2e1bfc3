"""Pydantic schemas for the pa_rules API."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from src.pa_rules.domain.engine import Suggestion
from src.pa_rules.domain.models import DEFAULT_RULE_PRIORITY, RuleCondition

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CustomRuleIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    conditions: list[RuleCondition]
    account_ref: str | None = Field(None, description="Concrete account id")
    account_key: str | None = Field(None, description="Logical mapping key, e.g. 'bank_fees'")
    is_debit: bool
    priority: int = DEFAULT_RULE_PRIORITY
    scope_entity_ref: str | None = None

    @model_validator(mode="after")
    def one_account_target(self) -> "CustomRuleIn":
        if (self.account_ref is None) == (self.account_key is None):
            raise ValueError("exactly one of account_ref / account_key is required")
        return self


class SuggestRequest(BaseModel):
    description: str = ""
    amount: int | str | None = Field(
        None, description="int = cents; str = currency text such as '$1,234.50'"
    )
    payee: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict, description="Extra subject fields")
    entity_ref: str | None = None
    custom_rules: list[CustomRuleIn] = Field(default_factory=list)

    def subject(self) -> dict[str, Any]:
        return {
            **self.fields,
            "description": self.description,
            "amount": self.amount,
            "payee": self.payee,
        }


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SuggestionResponse(BaseModel):
    rule_id: str
    rule_name: str
    account_ref: str
    account_name: str | None = None
    is_debit: bool
    description: str
    priority: int

    @classmethod
    def from_domain(cls, s: Suggestion, account_name: str | None = None) -> "SuggestionResponse":
        return cls(
            rule_id=s.rule_id,
            rule_name=s.rule_name,
            account_ref=s.account_ref,
            account_name=account_name,
            is_debit=s.is_debit,
            description=s.description,
            priority=s.priority,
        )
