"""
APL Evaluator — checks a combat log against an Action Priority List.

A single left-to-right fold over the event stream. For each event:
1. If it is a cast by the subject player of a governed spell, find the
   applicable rule using the state as of *before* this event and record a
   success (the rule's spell was cast) or a violation (something else was).
   An attempt with no applicable rule records nothing.
2. Advance the ability availability tracker with the event.
3. Advance every registered condition with the event.

Because the decision in (1) happens before (2) and (3), a condition can never
validate against the effect of its own triggering event.

Behavioral Contract:
- Deterministic: the same (apl, events, player) always yields an equal result
- Total: unknown events, missing snapshots and unregistered condition keys
  never raise
- The fold accumulator lives for exactly one evaluation
"""

from typing import Iterable, List, Optional, Sequence, Union

from apl_kernel.engine.abilities import AbilityAvailabilityTracker
from apl_kernel.engine.matcher import RuleMatcher
from apl_kernel.engine.state import ConditionStateStore
from apl_kernel.logging import get_logger
from apl_kernel.models.apl import Apl, Rule
from apl_kernel.models.events import AnyEvent, CastEvent, parse_event
from apl_kernel.models.result import CheckInfo, CheckResult, Violation

logger = get_logger(__name__)


class CheckState:
    """The fold accumulator. Created per run, discarded once the result is extracted."""

    def __init__(self, apl: Apl):
        self.successes: List[Rule] = []
        self.violations: List[Violation] = []
        self.abilities = AbilityAvailabilityTracker()
        self.conditions = ConditionStateStore(apl.conditions)
        self.matcher = RuleMatcher(self.abilities, self.conditions)

    def to_result(self) -> CheckResult:
        return CheckResult(
            successes=list(self.successes),
            violations=list(self.violations),
        )


class APLEvaluator:
    """Evaluates event streams against one APL."""

    def __init__(self, apl: Apl):
        self.apl = apl
        self._governed = apl.governed_spell_ids()

    def _is_attempt(self, event: AnyEvent, player_id: int) -> bool:
        return (
            isinstance(event, CastEvent)
            and event.source_id == player_id
            and event.ability.guid in self._governed
        )

    def _check_attempt(self, state: CheckState, event: CastEvent) -> None:
        rule = state.matcher.applicable_rule(self.apl, event)
        if rule is None:
            return
        if rule.spell.id == event.ability.guid:
            state.successes.append(rule)
        else:
            state.violations.append(
                Violation(
                    rule=rule,
                    expected_cast=rule.spell,
                    actual_cast=event.ability,
                )
            )
            logger.debug(
                "apl_violation",
                timestamp=event.timestamp,
                expected=rule.spell.id,
                actual=event.ability.guid,
            )

    def evaluate(self, events: Iterable, player_id: int) -> CheckResult:
        """Fold the ordered event stream into a CheckResult."""
        state = CheckState(self.apl)

        for raw in events:
            event = parse_event(raw)
            if self._is_attempt(event, player_id):
                self._check_attempt(state, event)
            state.abilities.observe(event)
            state.conditions.advance(event)

        result = state.to_result()
        logger.debug(
            "apl_check_completed",
            player_id=player_id,
            successes=len(result.successes),
            violations=len(result.violations),
        )
        return result


class AplCheck:
    """
    Callable check bound to one APL: (events, info) -> CheckResult.

    The last result is kept and returned again when called with the same
    events sequence object and equal info, so re-rendering callers do not
    refold an unchanged log.
    """

    def __init__(self, apl: Apl):
        self.evaluator = APLEvaluator(apl)
        self._last_events: Optional[Sequence] = None
        self._last_info: Optional[CheckInfo] = None
        self._last_result: Optional[CheckResult] = None

    @property
    def apl(self) -> Apl:
        return self.evaluator.apl

    def __call__(
        self,
        events: Sequence,
        info: Union[CheckInfo, dict],
    ) -> CheckResult:
        if not isinstance(info, CheckInfo):
            info = CheckInfo.model_validate(info)

        if (
            self._last_result is not None
            and events is self._last_events
            and info == self._last_info
        ):
            return self._last_result

        result = self.evaluator.evaluate(events, info.player_id)
        self._last_events = events
        self._last_info = info
        self._last_result = result
        return result


def apl_check(apl: Apl) -> AplCheck:
    """Bind an APL into a check over (events, info)."""
    return AplCheck(apl)
