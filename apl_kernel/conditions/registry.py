"""
Condition Registry — builds conditions from declarative specs.

A spec is a dict whose "kind" selects a factory; the remaining keys are the
factory's arguments. This lets APLs be declared as JSON over the API.
"""

from typing import Any, Callable, Dict

from pydantic import BaseModel, StrictInt, ValidationError

from apl_kernel.conditions.base import Condition
from apl_kernel.conditions.buffs import buff_present
from apl_kernel.models.apl import Spell


class UnknownConditionError(Exception):
    """Raised when a spec names a condition kind with no registered factory."""


class ConditionSpecError(Exception):
    """Raised when a spec's arguments do not fit its factory."""


class BuffPresentSpec(BaseModel):
    """Arguments of a buff_present spec."""

    spell: Spell
    target: StrictInt                       # Actor id; floats and booleans are rejected


def _build_buff_present(spec: Dict[str, Any]) -> Condition:
    try:
        args = BuffPresentSpec.model_validate(spec)
    except ValidationError as e:
        raise ConditionSpecError(f"Invalid buff_present spec: {e}") from e
    return buff_present(args.spell, args.target)


_FACTORIES: Dict[str, Callable[[Dict[str, Any]], Condition]] = {
    "buff_present": _build_buff_present,
}


def register_condition(
    kind: str, factory: Callable[[Dict[str, Any]], Condition]
) -> None:
    """Register a factory for a custom condition kind."""
    _FACTORIES[kind] = factory


def registered_kinds() -> list:
    return sorted(_FACTORIES)


def build_condition(spec: Dict[str, Any]) -> Condition:
    """Build a condition from its spec."""
    kind = spec.get("kind")
    factory = _FACTORIES.get(kind) if isinstance(kind, str) else None
    if factory is None:
        raise UnknownConditionError(
            f"Unknown condition kind {kind!r}; known kinds: {registered_kinds()}"
        )
    return factory(spec)
