"""Default rule templates and their resolution against an account mapping.

Templates name a logical account key ("bank_fees"); resolve_rules() turns
them into concrete Rules and drops any whose account cannot be used.
"""

import logging
import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from config.settings import settings
from src.pa_common.errors import InvalidRuleError
from src.pa_rules.domain.mapping import AccountMapping
from src.pa_rules.domain.models import (
    DEFAULT_RULE_PRIORITY,
    Rule,
    RuleAction,
    RuleTemplate,
    TemplateAction,
    TextCondition,
)

logger = logging.getLogger(__name__)


def _contains(text: str) -> TextCondition:
    return TextCondition(field="description", operator="contains", value=text)


DEFAULT_RULE_TEMPLATES: list[RuleTemplate] = [
    RuleTemplate(
        id="std-bank-fee-service",
        name="Bank Service Fee",
        description="Automatically categorize general bank service fees based on description.",
        priority=100,
        conditions=[_contains("SERVICE FEE")],
        action=TemplateAction(account_key="bank_fees", is_debit=True, description="Bank Service Fee"),
    ),
    RuleTemplate(
        id="std-interest-income",
        name="Interest Income",
        description="Interest credited by the bank.",
        priority=90,
        conditions=[_contains("INTEREST PAID")],
        action=TemplateAction(account_key="interest_income", is_debit=False, description="Interest Income"),
    ),
    RuleTemplate(
        id="std-mortgage-interest",
        name="Mortgage Interest",
        priority=80,
        conditions=[_contains("MORTGAGE INTEREST")],
        action=TemplateAction(account_key="mortgage_interest", is_debit=True, description="Mortgage Interest"),
    ),
    RuleTemplate(
        id="std-property-tax",
        name="Property Tax",
        priority=80,
        conditions=[_contains("PROPERTY TAX")],
        action=TemplateAction(account_key="property_tax", is_debit=True, description="Property Tax"),
    ),
    RuleTemplate(
        id="std-insurance",
        name="Property Insurance",
        priority=70,
        conditions=[_contains("INSURANCE")],
        action=TemplateAction(account_key="insurance", is_debit=True, description="Property Insurance"),
    ),
    RuleTemplate(
        id="std-utilities",
        name="Utilities",
        priority=60,
        conditions=[_contains("UTILIT")],
        action=TemplateAction(account_key="utilities", is_debit=True, description="Utilities"),
    ),
]


def filter_usable_rules(rules: Iterable[Rule], mapping: AccountMapping) -> list[Rule]:
    """Keep rules whose action account exists and is active; warn about the rest."""
    usable: list[Rule] = []
    for rule in rules:
        if mapping.account_exists(rule.action.account_ref):
            usable.append(rule)
        else:
            logger.warning(
                'Rule "%s" (%s) has invalid account id: %s. Skipping.',
                rule.name, rule.id, rule.action.account_ref,
            )
    return usable


def resolve_rules(
    templates: Sequence[RuleTemplate],
    mapping: AccountMapping,
    unknown_prefix: str | None = None,
) -> list[Rule]:
    prefix = settings.UNKNOWN_ACCOUNT_PREFIX if unknown_prefix is None else unknown_prefix
    rules: list[Rule] = []
    for template in templates:
        key = template.action.account_key
        account_ref = mapping.category_account_id(key) or f"{prefix}{key}"
        fields = template.model_dump(exclude={"action"})
        rules.append(
            Rule.model_validate({
                **fields,
                "action": RuleAction(
                    account_ref=account_ref,
                    is_debit=template.action.is_debit,
                    description=template.action.description,
                ),
            })
        )
    return filter_usable_rules(rules, mapping)


def create_rule(
    name: str,
    description: str,
    conditions: Sequence[Any],
    account_ref: str,
    is_debit: bool,
    scope: str | None = None,
    priority: int = DEFAULT_RULE_PRIORITY,
) -> Rule:
    """Build a new active custom rule.

    ``conditions`` may be condition models or plain dicts; dicts are
    validated into the condition union by ``operator``.
    """
    try:
        return Rule.model_validate({
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "priority": priority,
            "conditions": [
                c.model_dump() if hasattr(c, "model_dump") else c for c in conditions
            ],
            "action": {"account_ref": account_ref, "is_debit": is_debit, "description": name},
            "is_active": True,
            "scope_entity_ref": scope,
        })
    except ValidationError as exc:
        raise InvalidRuleError(str(exc)) from exc
