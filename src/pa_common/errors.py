"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Numeric / decimal engine
  2xxx: Ledger (lines, balances, transaction lifecycle)
  3xxx: Categorization rules
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Numeric ---

class InvalidNumericInputError(AppError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(1001, f"Invalid numeric input: {value!r}", 422)


class DivisionByZeroError(AppError):
    def __init__(self, dividend: object) -> None:
        super().__init__(1002, f"Division by zero: {dividend} / 0", 422)


class PrecisionExceededError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Result exceeds working precision: {detail}", 422)


# --- 2xxx: Ledger ---

class InvalidLineAmountError(AppError):
    def __init__(self, index: int, amount: object) -> None:
        self.index = index
        self.amount = amount
        super().__init__(
            2001,
            f"Line {index} has invalid amount {amount!r}: expected non-negative integer cents",
            422,
        )


class InvalidNormalBalanceError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(2002, f"Normal balance must be 'debit' or 'credit', got {value!r}", 422)


class TransactionError(AppError):
    """Lifecycle / shape violation of a transaction. ``reason`` is a stable machine code."""

    def __init__(self, reason: str, message: str, transaction_id: str | None = None) -> None:
        self.reason = reason
        self.transaction_id = transaction_id
        super().__init__(2003, message, 422)


class UnbalancedTransactionError(AppError):
    def __init__(self, debits: int, credits: int, transaction_id: str | None = None) -> None:
        self.debits = debits
        self.credits = credits
        self.transaction_id = transaction_id
        super().__init__(
            2004,
            f"Transaction unbalanced: debits {debits} cents, credits {credits} cents",
            422,
        )


class LedgerError(AppError):
    """Journal / ledger setup violation (missing id, duplicate, entity mismatch)."""

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(2005, message, 422)


# --- 3xxx: Rules ---

class InvalidRuleError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"Invalid rule: {detail}", 422)


class UnknownAccountKeyError(AppError):
    def __init__(self, key: str) -> None:
        super().__init__(3002, f"Unknown account mapping key: {key}", 404)

