"""Ledger: accounts, journals and the posted transactions applied to them.

record_transaction() validates the whole transaction before applying any
line, so a rejected transaction never leaves a partial trace in the
account balances.
"""

import logging
from collections import defaultdict

from src.pa_common.enums import AccountType, TransactionStatus
from src.pa_common.errors import LedgerError
from src.pa_ledger.domain.account_balance import calculate_account_balance
from src.pa_ledger.domain.journal import Journal
from src.pa_ledger.domain.models import Account, TransactionLine
from src.pa_ledger.domain.transaction import Transaction
from src.pa_ledger.domain.trial_balance import TrialBalance, build_trial_balance
from src.pa_money.decimal_engine import DecimalEngine, default_engine

logger = logging.getLogger(__name__)


class Ledger:
    def __init__(self, entity_id: str, engine: DecimalEngine | None = None) -> None:
        if not (entity_id or "").strip():
            raise LedgerError("MISSING_FIELD", "Ledger entity_id is required.")
        self.entity_id = entity_id
        self._engine = engine or default_engine()
        self._accounts: dict[str, Account] = {}
        self._journals: dict[str, Journal] = {}
        self._recorded: list[Transaction] = []
        self._lines_by_account: dict[str, list[TransactionLine]] = defaultdict(list)

    # --- accounts ---

    def add_account(self, account: Account) -> None:
        if account.id in self._accounts:
            raise LedgerError("DUPLICATE_ACCOUNT", f"Account {account.id} already exists in ledger.")
        self._accounts[account.id] = account

    def get_account(self, account_id: str) -> Account | None:
        return self._accounts.get(account_id)

    def get_all_accounts(self) -> list[Account]:
        return list(self._accounts.values())

    def get_accounts_by_type(self, account_type: AccountType | str) -> list[Account]:
        wanted = AccountType(account_type)
        return [a for a in self._accounts.values() if a.account_type is wanted]

    # --- journals ---

    def add_journal(self, journal: Journal) -> None:
        if journal.entity_id != self.entity_id:
            raise LedgerError(
                "ENTITY_MISMATCH",
                f"Journal {journal.id} for entity {journal.entity_id} cannot be added "
                f"to ledger for entity {self.entity_id}.",
            )
        if journal.id in self._journals:
            raise LedgerError("DUPLICATE_JOURNAL", f"Journal {journal.id} already exists in ledger.")
        self._journals[journal.id] = journal

    def get_journal(self, journal_id: str) -> Journal | None:
        return self._journals.get(journal_id)

    # --- posting ---

    def _reject(self, tx: Transaction, reason: str) -> bool:
        logger.warning("Ledger (entity %s): transaction %s %s. Rejected.", self.entity_id, tx.id, reason)
        return False

    def record_transaction(self, tx: Transaction) -> bool:
        """Apply a posted transaction to its accounts; False (with a warning) when rejected."""
        if tx.entity_id != self.entity_id:
            return self._reject(tx, f"belongs to entity {tx.entity_id}")
        if not tx.is_balanced(self._engine):
            return self._reject(tx, "is not balanced")
        if tx.status is not TransactionStatus.POSTED:
            return self._reject(tx, f"has status '{tx.status.value}', only 'posted' can be recorded")
        if any(r.id == tx.id for r in self._recorded):
            return self._reject(tx, "has already been recorded")
        for line in tx.lines:
            account = self._accounts.get(line.account_ref)
            if account is None:
                return self._reject(tx, f"references unknown account {line.account_ref!r}")
            if not account.is_active:
                return self._reject(tx, f"references inactive account {account.id} ({account.name})")

        for line in tx.lines:
            self._lines_by_account[line.account_ref].append(line)
        self._recorded.append(tx)
        logger.info("Ledger (entity %s): recorded transaction %s", self.entity_id, tx.id)
        return True

    def get_all_recorded_transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._recorded)

    def get_recorded_transactions_for_account(self, account_id: str) -> list[Transaction]:
        return [tx for tx in self._recorded if any(ln.account_ref == account_id for ln in tx.lines)]

    # --- reporting ---

    def get_account_balance(self, account_id: str) -> int:
        """Signed balance in cents on the account's natural side; 0 for an unknown id."""
        account = self._accounts.get(account_id)
        if account is None:
            logger.warning("Ledger: balance requested for unknown account %s", account_id)
            return 0
        return calculate_account_balance(
            self._lines_by_account.get(account_id, []),
            account.normal_balance,  # type: ignore[arg-type]
            self._engine,
        )

    def generate_trial_balance(self) -> TrialBalance:
        return build_trial_balance(self._accounts.values(), self._lines_by_account, self._engine)
