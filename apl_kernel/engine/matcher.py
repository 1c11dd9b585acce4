"""
Rule Matcher — first-match, priority-ordered rule selection.

A rule applies to an attempt when:
1. The spell it governs is available (no snapshot, or snapshot says available), and
2. It is unconditional, or its condition validates against the current state.

The first applicable rule in declaration order is the expected one. Scan
order is the tie-break, so ties cannot occur.
"""

from typing import Optional

from apl_kernel.engine.abilities import AbilityAvailabilityTracker
from apl_kernel.engine.state import ConditionStateStore
from apl_kernel.models.apl import Apl, ConditionalRule, Rule, UnconditionalRule
from apl_kernel.models.events import AnyEvent


class RuleMatcher:
    """Selects the expected rule for an attempt from the pre-event state."""

    def __init__(
        self,
        abilities: AbilityAvailabilityTracker,
        conditions: ConditionStateStore,
    ):
        self.abilities = abilities
        self.conditions = conditions

    def rule_applies(self, rule: Rule, event: AnyEvent) -> bool:
        if not self.abilities.is_available(rule.spell.id):
            return False
        if isinstance(rule, UnconditionalRule):
            return True
        if isinstance(rule, ConditionalRule):
            return rule.condition.validate(
                self.conditions.get(rule.condition.key), event
            )
        raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

    def applicable_rule(self, apl: Apl, event: AnyEvent) -> Optional[Rule]:
        """The highest-priority applicable rule, or None."""
        for rule in apl.rules:
            if self.rule_applies(rule, event):
                return rule
        return None
