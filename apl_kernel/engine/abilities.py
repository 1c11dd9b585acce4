"""
Ability Availability Tracker — latest availability snapshot per spell.

Fed every event of the stream; only updatespellusable events have effect.
Stream order is trusted: the latest snapshot wins, out-of-order events are
not reconciled. A spell never observed has no constraint information and is
treated as available.
"""

from typing import Dict, Optional

from apl_kernel.models.events import AnyEvent, UpdateSpellUsableEvent


class AbilityAvailabilityTracker:
    """Per-spell availability, derived from the processed prefix of the stream."""

    def __init__(self):
        self._snapshots: Dict[int, UpdateSpellUsableEvent] = {}

    def observe(self, event: AnyEvent) -> None:
        """Record the event if it is an availability update."""
        if isinstance(event, UpdateSpellUsableEvent):
            self._snapshots[event.ability.guid] = event

    def snapshot(self, spell_id: int) -> Optional[UpdateSpellUsableEvent]:
        """The latest availability event for a spell, if any."""
        return self._snapshots.get(spell_id)

    def is_available(self, spell_id: int) -> bool:
        snapshot = self._snapshots.get(spell_id)
        return snapshot is None or snapshot.is_available

    def as_dict(self) -> Dict[int, UpdateSpellUsableEvent]:
        return dict(self._snapshots)
