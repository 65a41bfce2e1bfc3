"""Logical category keys -> concrete account ids in a chart of accounts."""

import logging
from collections.abc import Iterable, Mapping

from src.pa_common.errors import UnknownAccountKeyError
from src.pa_ledger.domain.models import Account

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_MAPPING: dict[str, str] = {
    "bank_fees": "5110",          # Bank Service Charges
    "interest_income": "4510",
    "property_tax": "5050",
    "mortgage_interest": "5810",
    "insurance": "5040",          # Property Insurance
    "rental_income": "4010",
    "utilities": "5031",          # Utilities (Recoverable)
    "repairs": "5020",
    "office_supplies": "5120",
}


class AccountMapping:
    """Indexes a chart of accounts by id and code and resolves category keys."""

    def __init__(self, accounts: Iterable[Account], mapping: Mapping[str, str]) -> None:
        self._by_id: dict[str, Account] = {}
        self._by_code: dict[str, Account] = {}
        for account in accounts:
            self._by_id[account.id] = account
            self._by_code[account.code] = account
        self._mapping = dict(mapping)

        missing = [f"{key}: {account_id}" for key, account_id in self._mapping.items()
                   if account_id not in self._by_id]
        if missing:
            logger.warning(
                "Mapped accounts missing from the chart of accounts: %s", ", ".join(missing)
            )

    @property
    def keys(self) -> list[str]:
        return list(self._mapping)

    def category_account_id(self, key: str) -> str | None:
        account_id = self._mapping.get(key)
        if not account_id or account_id not in self._by_id:
            logger.warning('No valid account mapped for category "%s"', key)
            return None
        return account_id

    def require_category_account_id(self, key: str) -> str:
        account_id = self.category_account_id(key)
        if account_id is None:
            raise UnknownAccountKeyError(key)
        return account_id

    def get_by_id(self, account_id: str) -> Account | None:
        return self._by_id.get(account_id)

    def get_by_code(self, code: str) -> Account | None:
        return self._by_code.get(code)

    def account_exists(self, account_id: str) -> bool:
        """True only for accounts that are present and active."""
        account = self._by_id.get(account_id)
        return account is not None and account.is_active
