"""Check Result — the outcome of evaluating one event stream against an APL."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from apl_kernel.models.apl import Rule, Spell
from apl_kernel.models.events import Ability


class CheckInfo(BaseModel):
    """Which actor's attempts are evaluated."""

    model_config = ConfigDict(frozen=True)

    player_id: int


class Violation(BaseModel):
    """The actor cast something other than the highest-priority applicable rule."""

    actual_cast: Ability                    # What was cast
    expected_cast: Spell                    # What should have been cast
    rule: Rule                              # The rule that applied


class CheckResult(BaseModel):
    """
    Successes and violations, in stream order.

    An empty result means no governed attempt was recorded. It is not an
    error state.
    """

    successes: List[Rule] = []
    violations: List[Violation] = []

    @computed_field
    @property
    def total(self) -> int:
        return len(self.successes) + len(self.violations)

    @computed_field
    @property
    def accuracy(self) -> Optional[float]:
        if self.total == 0:
            return None
        return len(self.successes) / self.total
