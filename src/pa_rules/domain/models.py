"""Categorization rule models.

Conditions form a tagged union discriminated on ``operator``: each variant
carries an operand of one concrete type (text, pattern, cents, range, list)
and knows how to test a single subject value.
"""

import re
from functools import lru_cache
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.pa_common.errors import AppError
from src.pa_money.cents import decimal_to_cents
from src.pa_money.currency import normalize_amount_string

DEFAULT_RULE_PRIORITY = 50

MAX_PATTERN_LENGTH = 200
MAX_PATTERN_SUBJECT = 1000   # characters searched by matches_regex

_QUANTIFIER_START = "+*{"


def _has_nested_quantifier(pattern: str) -> bool:
    """True for a quantified group that already holds a quantifier: (a+)+, ((ab)*c)*, (x{2,})+.

    One linear pass; escapes and character classes are skipped.
    """
    groups: list[bool] = []   # per open group: contains a quantifier
    in_class = False
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            in_class = ch != "]"
        elif ch == "[":
            in_class = True
        elif ch == "(":
            groups.append(False)
        elif ch == ")" and groups:
            inner = groups.pop()
            quantified = i + 1 < n and pattern[i + 1] in _QUANTIFIER_START
            if inner and quantified:
                return True
            if groups and (inner or quantified):
                groups[-1] = True
        elif ch in _QUANTIFIER_START and groups:
            groups[-1] = True
        i += 1
    return False


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


@lru_cache(maxsize=256)
def _compile(pattern: str, case_sensitive: bool) -> re.Pattern[str]:
    return re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)


def subject_cents(value: Any) -> int | None:
    """Amount of a subject field in cents.

    int values are already cents; str / Decimal / float values are currency
    units as they appear in imports ("$1,234.50") and get converted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return decimal_to_cents(normalize_amount_string(str(value)))
    except AppError:
        return None


class _Condition(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)

    def matches(self, value: Any) -> bool:
        raise NotImplementedError


class TextCondition(_Condition):
    operator: Literal["equals", "not_equals", "contains", "not_contains", "starts_with", "ends_with"]
    value: str
    case_sensitive: bool = False

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        subject = _fold(str(value), self.case_sensitive)
        needle = _fold(self.value, self.case_sensitive)
        if self.operator == "equals":
            return subject == needle
        if self.operator == "not_equals":
            return subject != needle
        if self.operator == "contains":
            return needle in subject
        if self.operator == "not_contains":
            return needle not in subject
        if self.operator == "starts_with":
            return subject.startswith(needle)
        return subject.endswith(needle)


class PatternCondition(_Condition):
    operator: Literal["matches_regex"]
    value: str = Field(min_length=1, max_length=MAX_PATTERN_LENGTH)
    case_sensitive: bool = False

    @field_validator("value")
    @classmethod
    def must_compile(cls, v: str) -> str:
        if _has_nested_quantifier(v):
            raise ValueError("nested quantifiers are not allowed")
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid regular expression: {exc}") from exc
        return v

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        subject = str(value)[:MAX_PATTERN_SUBJECT]
        return _compile(self.value, self.case_sensitive).search(subject) is not None


class AmountCondition(_Condition):
    operator: Literal["greater_than", "less_than", "greater_or_equal", "less_or_equal"]
    value: int  # cents

    def matches(self, value: Any) -> bool:
        cents = subject_cents(value)
        if cents is None:
            return False
        if self.operator == "greater_than":
            return cents > self.value
        if self.operator == "less_than":
            return cents < self.value
        if self.operator == "greater_or_equal":
            return cents >= self.value
        return cents <= self.value


class AmountRangeCondition(_Condition):
    operator: Literal["between"]
    low: int   # cents, inclusive
    high: int  # cents, inclusive

    @model_validator(mode="after")
    def ordered(self) -> "AmountRangeCondition":
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must not exceed high ({self.high})")
        return self

    def matches(self, value: Any) -> bool:
        cents = subject_cents(value)
        return cents is not None and self.low <= cents <= self.high


class ListCondition(_Condition):
    operator: Literal["in_list", "not_in_list"]
    values: list[str] = Field(min_length=1)
    case_sensitive: bool = False

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        subject = _fold(str(value), self.case_sensitive)
        found = any(subject == _fold(v, self.case_sensitive) for v in self.values)
        return found if self.operator == "in_list" else not found


class EmptyCondition(_Condition):
    operator: Literal["is_empty", "is_not_empty"]

    def matches(self, value: Any) -> bool:
        empty = value is None or (isinstance(value, str) and not value.strip())
        return empty if self.operator == "is_empty" else not empty


RuleCondition = Annotated[
    Union[
        TextCondition,
        PatternCondition,
        AmountCondition,
        AmountRangeCondition,
        ListCondition,
        EmptyCondition,
    ],
    Field(discriminator="operator"),
]


class RuleAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_ref: str
    is_debit: bool
    description: str = ""


class TemplateAction(BaseModel):
    """Action of a rule template: a logical account key, resolved later."""

    model_config = ConfigDict(frozen=True)

    account_key: str
    is_debit: bool
    description: str = ""


class _RuleBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    description: str = ""
    priority: int = DEFAULT_RULE_PRIORITY  # higher wins
    conditions: list[RuleCondition]
    is_active: bool = True
    scope_entity_ref: str | None = None


class Rule(_RuleBase):
    action: RuleAction


class RuleTemplate(_RuleBase):
    action: TemplateAction
