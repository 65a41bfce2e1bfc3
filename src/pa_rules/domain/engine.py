"""Rule matching and selection.

Pure functions with no I/O.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from src.pa_rules.domain.models import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suggestion:
    rule_id: str
    rule_name: str
    account_ref: str
    is_debit: bool
    description: str
    priority: int


def rule_matches(rule: Rule, subject: Mapping[str, Any]) -> bool:
    """All conditions must hold. A rule without conditions never matches."""
    if not rule.conditions:
        return False
    return all(c.matches(subject.get(c.field)) for c in rule.conditions)


def _in_scope(rule: Rule, entity_ref: str | None) -> bool:
    return rule.scope_entity_ref is None or rule.scope_entity_ref == entity_ref


def select_rule(
    rules: Sequence[Rule],
    subject: Mapping[str, Any],
    entity_ref: str | None = None,
) -> Rule | None:
    """Highest-priority active, in-scope matching rule; ties keep the first declared."""
    best: Rule | None = None
    for rule in rules:
        if not rule.is_active or not _in_scope(rule, entity_ref):
            continue
        if not rule_matches(rule, subject):
            continue
        if best is None or rule.priority > best.priority:
            best = rule
    return best


def suggest_account(
    rules: Sequence[Rule],
    subject: Mapping[str, Any],
    entity_ref: str | None = None,
) -> Suggestion | None:
    rule = select_rule(rules, subject, entity_ref)
    if rule is None:
        logger.debug("No rule matched subject fields=%s", sorted(subject))
        return None
    logger.debug("Rule %s matched -> account %s", rule.id, rule.action.account_ref)
    return Suggestion(
        rule_id=rule.id,
        rule_name=rule.name,
        account_ref=rule.action.account_ref,
        is_debit=rule.action.is_debit,
        description=rule.action.description or rule.name,
        priority=rule.priority,
    )
