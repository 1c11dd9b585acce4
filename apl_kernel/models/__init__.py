"""APL Kernel data models."""

from apl_kernel.models.apl import (
    Apl,
    ConditionalRule,
    Rule,
    Spell,
    UnconditionalRule,
    rule_spell,
)
from apl_kernel.models.definition import (
    AplDefinition,
    RuleDefinition,
)
from apl_kernel.models.events import (
    Ability,
    AnyEvent,
    ApplyBuffEvent,
    BaseEvent,
    CastEvent,
    EventType,
    GenericEvent,
    RemoveBuffEvent,
    UpdateSpellUsableEvent,
    parse_event,
    parse_events,
)
from apl_kernel.models.result import CheckInfo, CheckResult, Violation

__all__ = [
    "Ability",
    "AnyEvent",
    "Apl",
    "AplDefinition",
    "ApplyBuffEvent",
    "BaseEvent",
    "CastEvent",
    "CheckInfo",
    "CheckResult",
    "ConditionalRule",
    "EventType",
    "GenericEvent",
    "RemoveBuffEvent",
    "Rule",
    "RuleDefinition",
    "Spell",
    "UnconditionalRule",
    "UpdateSpellUsableEvent",
    "Violation",
    "parse_event",
    "parse_events",
    "rule_spell",
]
