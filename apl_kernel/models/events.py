"""Combat log events — the typed stream the APL engine folds over."""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    CAST = "cast"
    UPDATE_SPELL_USABLE = "updatespellusable"
    APPLY_BUFF = "applybuff"
    REMOVE_BUFF = "removebuff"


class Ability(BaseModel):
    """The ability reference carried on a log event."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    guid: int
    name: str = ""
    type: Optional[int] = None                          # School bitmask
    ability_icon: Optional[str] = Field(default=None, alias="abilityIcon")


class BaseEvent(BaseModel):
    """Fields shared by every event in the stream."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timestamp: int
    type: str
    source_id: Optional[int] = Field(default=None, alias="sourceID")
    target_id: Optional[int] = Field(default=None, alias="targetID")


class CastEvent(BaseEvent):
    """An actor attempted an ability."""

    type: str = EventType.CAST.value
    ability: Ability


class UpdateSpellUsableEvent(BaseEvent):
    """Availability snapshot for an ability (cooldown / charges / resources)."""

    type: str = EventType.UPDATE_SPELL_USABLE.value
    ability: Ability
    is_available: bool = Field(alias="isAvailable")
    is_on_gcd: Optional[bool] = Field(default=None, alias="isOnGCD")
    charges_available: Optional[int] = Field(default=None, alias="chargesAvailable")
    max_charges: Optional[int] = Field(default=None, alias="maxCharges")


class ApplyBuffEvent(BaseEvent):
    type: str = EventType.APPLY_BUFF.value
    ability: Ability


class RemoveBuffEvent(BaseEvent):
    type: str = EventType.REMOVE_BUFF.value
    ability: Ability


class GenericEvent(BaseEvent):
    """Any event kind the engine does not interpret. Extra fields are kept."""


AnyEvent = Union[
    CastEvent,
    UpdateSpellUsableEvent,
    ApplyBuffEvent,
    RemoveBuffEvent,
    GenericEvent,
]


# Event registry — maps the backend's type strings to event models
_EVENT_MODELS: Dict[str, Type[BaseEvent]] = {
    EventType.CAST.value: CastEvent,
    EventType.UPDATE_SPELL_USABLE.value: UpdateSpellUsableEvent,
    EventType.APPLY_BUFF.value: ApplyBuffEvent,
    EventType.REMOVE_BUFF.value: RemoveBuffEvent,
}


def parse_event(raw: Union[Dict[str, Any], BaseEvent]) -> AnyEvent:
    """
    Parse one raw analytics-backend event into its typed model.

    Already-typed events pass through untouched. Unknown kinds become
    GenericEvent so that they flow through the fold as no-ops.
    """
    if isinstance(raw, BaseEvent):
        return raw
    event_type = raw.get("type")
    if not isinstance(event_type, str):
        # BaseEvent rejects the missing or non-string type with a ValidationError
        return GenericEvent.model_validate(raw)
    model = _EVENT_MODELS.get(event_type, GenericEvent)
    return model.model_validate(raw)


def parse_events(raw_events: Iterable[Union[Dict[str, Any], BaseEvent]]) -> List[AnyEvent]:
    """Parse an ordered sequence of raw events, preserving order."""
    return [parse_event(raw) for raw in raw_events]
