"""
Condition State Store — the current state of every registered condition.

Every event advances every registered condition, whether or not the event is
relevant to it; each condition's own update() decides relevance.
"""

from typing import Any, Dict, List

from apl_kernel.conditions.base import Condition
from apl_kernel.models.events import AnyEvent


class ConditionStateStore:
    """Condition key → state, owned by a single evaluation run."""

    def __init__(self, conditions: List[Condition]):
        self._conditions = list(conditions)
        self._state: Dict[str, Any] = {}
        for condition in self._conditions:
            self._state[condition.key] = condition.init()

    def get(self, key: str) -> Any:
        """
        State for a condition key.

        Keys that were never registered yield None; conditions must treat
        that the same as their initial state.
        """
        return self._state.get(key)

    def advance(self, event: AnyEvent) -> None:
        """Apply one event to every registered condition."""
        # All new values are computed from pre-event state before any is written.
        updated = [
            (condition.key, condition.update(self._state.get(condition.key), event))
            for condition in self._conditions
        ]
        for key, value in updated:
            self._state[key] = value

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._state)
