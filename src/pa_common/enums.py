"""Global enums. Values match the persistence layer's stored strings exactly."""

from enum import Enum


class NormalBalance(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class AccountType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    DRAFT = "draft"
    POSTED = "posted"
    VOID = "void"
