"""Default chart of accounts for a small property-management entity.

Account ids equal their codes so rule mappings can refer to either.
"""

from src.pa_common.enums import AccountType, NormalBalance
from src.pa_ledger.domain.models import Account

# (code, name, type, parent_code, explicit normal balance for contra accounts)
_DEFAULT_CHART: list[tuple[str, str, AccountType, str | None, NormalBalance | None]] = [
    # Assets
    ("1000", "Current Assets", AccountType.ASSET, None, None),
    ("1010", "Cash and Cash Equivalents", AccountType.ASSET, "1000", None),
    ("1020", "Checking Account", AccountType.ASSET, "1010", None),
    ("1030", "Savings Account", AccountType.ASSET, "1010", None),
    ("1100", "Accounts Receivable", AccountType.ASSET, "1000", None),
    ("1110", "Tenant Receivables", AccountType.ASSET, "1100", None),
    ("1200", "Prepaid Expenses", AccountType.ASSET, "1000", None),
    ("1500", "Fixed Assets", AccountType.ASSET, None, None),
    ("1520", "Buildings", AccountType.ASSET, "1500", None),
    ("1525", "Accumulated Depreciation - Buildings", AccountType.ASSET, "1520", NormalBalance.CREDIT),
    # Liabilities
    ("2000", "Current Liabilities", AccountType.LIABILITY, None, None),
    ("2010", "Accounts Payable", AccountType.LIABILITY, "2000", None),
    ("2100", "Tenant Security Deposits (Liability)", AccountType.LIABILITY, "2000", None),
    ("2500", "Long-Term Liabilities", AccountType.LIABILITY, None, None),
    ("2510", "Mortgage Payable", AccountType.LIABILITY, "2500", None),
    # Equity
    ("3000", "Equity", AccountType.EQUITY, None, None),
    ("3010", "Owner's Capital", AccountType.EQUITY, "3000", None),
    ("3020", "Owner's Draws", AccountType.EQUITY, "3000", NormalBalance.DEBIT),
    ("3030", "Retained Earnings", AccountType.EQUITY, "3000", None),
    # Income
    ("4000", "Operating Revenue", AccountType.INCOME, None, None),
    ("4010", "Rental Income", AccountType.INCOME, "4000", None),
    ("4020", "Late Fee Income", AccountType.INCOME, "4000", None),
    ("4500", "Non-Operating Income", AccountType.INCOME, None, None),
    ("4510", "Interest Income", AccountType.INCOME, "4500", None),
    # Expenses
    ("5000", "Property Operating Expenses", AccountType.EXPENSE, None, None),
    ("5020", "Repairs and Maintenance", AccountType.EXPENSE, "5000", None),
    ("5030", "Utilities", AccountType.EXPENSE, "5000", None),
    ("5031", "Utilities (Recoverable)", AccountType.EXPENSE, "5000", None),
    ("5040", "Property Insurance", AccountType.EXPENSE, "5000", None),
    ("5050", "Property Taxes", AccountType.EXPENSE, "5000", None),
    ("5100", "General & Administrative Expenses", AccountType.EXPENSE, None, None),
    ("5110", "Bank Service Charges", AccountType.EXPENSE, "5100", None),
    ("5120", "Office Supplies & Software", AccountType.EXPENSE, "5100", None),
    ("5800", "Financial Expenses", AccountType.EXPENSE, None, None),
    ("5810", "Mortgage Interest Expense", AccountType.EXPENSE, "5800", None),
]


def default_chart_of_accounts() -> list[Account]:
    """Fresh Account objects for the default chart (callers may mutate them)."""
    return [
        Account(
            id=code,
            code=code,
            name=name,
            account_type=account_type,
            normal_balance=normal_balance,
            parent_id=parent,
        )
        for code, name, account_type, parent, normal_balance in _DEFAULT_CHART
    ]
