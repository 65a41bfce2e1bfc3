"""RuleApplicationService: default rules resolved once, custom rules per call."""

import logging

from src.pa_ledger.domain.chart_of_accounts import default_chart_of_accounts
from src.pa_rules.application.schemas import CustomRuleIn, SuggestionResponse, SuggestRequest
from src.pa_rules.domain.engine import suggest_account
from src.pa_rules.domain.mapping import DEFAULT_ACCOUNT_MAPPING, AccountMapping
from src.pa_rules.domain.models import Rule
from src.pa_rules.domain.templates import (
    DEFAULT_RULE_TEMPLATES,
    create_rule,
    filter_usable_rules,
    resolve_rules,
)

logger = logging.getLogger(__name__)


class RuleApplicationService:
    def __init__(self, mapping: AccountMapping | None = None) -> None:
        self._mapping = mapping or AccountMapping(default_chart_of_accounts(), DEFAULT_ACCOUNT_MAPPING)
        self._defaults = resolve_rules(DEFAULT_RULE_TEMPLATES, self._mapping)
        logger.info("Loaded %d default categorization rules", len(self._defaults))

    @property
    def default_rules(self) -> list[Rule]:
        return list(self._defaults)

    def _build_custom(self, custom: CustomRuleIn) -> Rule:
        # account_key goes through the mapping; an unknown key is a 404
        account_ref = custom.account_ref or self._mapping.require_category_account_id(custom.account_key or "")
        return create_rule(
            name=custom.name,
            description=custom.description,
            conditions=custom.conditions,
            account_ref=account_ref,
            is_debit=custom.is_debit,
            scope=custom.scope_entity_ref,
            priority=custom.priority,
        )

    def suggest(self, req: SuggestRequest) -> SuggestionResponse | None:
        # Custom rules come first so they win priority ties against defaults.
        custom = filter_usable_rules([self._build_custom(r) for r in req.custom_rules], self._mapping)
        suggestion = suggest_account([*custom, *self._defaults], req.subject(), req.entity_ref)
        if suggestion is None:
            return None
        account = self._mapping.get_by_id(suggestion.account_ref)
        return SuggestionResponse.from_domain(suggestion, account.name if account else None)
