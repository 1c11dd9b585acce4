"""
APL Store — declared Action Priority Lists, built and ready to check.

Queried by: the API's check endpoints
Updated by: APL declarations
"""

from typing import Dict, List, Optional
from uuid import uuid4

from apl_kernel.conditions.base import Condition
from apl_kernel.conditions.registry import build_condition
from apl_kernel.engine.evaluator import APLEvaluator
from apl_kernel.models.apl import Apl, ConditionalRule, UnconditionalRule
from apl_kernel.models.definition import AplDefinition


def build_apl(definition: AplDefinition) -> Apl:
    """
    Build an Apl from its declaration.

    A rule whose condition spec yields the key of a registered condition
    shares that condition instance. Other rule conditions are built on their
    own and are never advanced by the engine, so they validate against None.
    """
    conditions = [build_condition(spec) for spec in definition.conditions]
    by_key: Dict[str, Condition] = {c.key: c for c in conditions}

    rules = []
    for rule_def in definition.rules:
        if rule_def.condition is None:
            rules.append(UnconditionalRule(spell=rule_def.spell))
            continue
        condition = build_condition(rule_def.condition)
        condition = by_key.get(condition.key, condition)
        rules.append(ConditionalRule(spell=rule_def.spell, condition=condition))

    return Apl(conditions=conditions, rules=rules)


class AplStore:
    """
    In-memory APL store.
    Each entry keeps the declaration alongside its evaluator. Evaluators keep
    no events between checks.
    """

    def __init__(self):
        self._definitions: Dict[str, AplDefinition] = {}
        self._evaluators: Dict[str, APLEvaluator] = {}

    def register(self, definition: AplDefinition) -> str:
        """Build and store an APL. Raises on invalid declarations."""
        apl = build_apl(definition)
        apl_id = f"apl_{uuid4().hex[:12]}"
        self._definitions[apl_id] = definition
        self._evaluators[apl_id] = APLEvaluator(apl)
        return apl_id

    def get(self, apl_id: str) -> Optional[APLEvaluator]:
        """Get the evaluator for an APL."""
        return self._evaluators.get(apl_id)

    def get_definition(self, apl_id: str) -> Optional[AplDefinition]:
        return self._definitions.get(apl_id)

    def list(self) -> List[dict]:
        """All declared APLs with their ids."""
        return [
            {"id": apl_id, "definition": definition.model_dump(mode="json")}
            for apl_id, definition in self._definitions.items()
        ]

    def remove(self, apl_id: str) -> bool:
        """Remove an APL from the store."""
        if apl_id in self._definitions:
            del self._definitions[apl_id]
            del self._evaluators[apl_id]
            return True
        return False
