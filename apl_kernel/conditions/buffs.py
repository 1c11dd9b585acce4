"""Buff conditions."""

from typing import Optional

from apl_kernel.conditions.base import Condition
from apl_kernel.models.apl import Spell
from apl_kernel.models.events import AnyEvent, ApplyBuffEvent, RemoveBuffEvent


class BuffPresent(Condition[bool]):
    """
    Holds while the buff `spell` is active.

    The target only distinguishes the key, so one APL can track the same buff
    on several targets under separate keys. Application and removal are
    matched on the ability id alone.
    """

    def __init__(self, spell: Spell, target: int):
        super().__init__(f"buffPresent-{spell.id}-{target}")
        self.spell = spell
        self.target = target

    def init(self) -> bool:
        return False

    def update(self, state: Optional[bool], event: AnyEvent) -> Optional[bool]:
        if isinstance(event, ApplyBuffEvent) and event.ability.guid == self.spell.id:
            return True
        if isinstance(event, RemoveBuffEvent) and event.ability.guid == self.spell.id:
            return False
        return state

    def validate(self, state: Optional[bool], event: AnyEvent) -> bool:
        return bool(state)

    def describe(self) -> dict:
        return {
            "key": self.key,
            "kind": "buff_present",
            "spell": self.spell.model_dump(mode="json"),
            "target": self.target,
        }


def buff_present(spell: Spell, target: int) -> BuffPresent:
    """Condition: `spell`'s buff is currently applied."""
    return BuffPresent(spell, target)
