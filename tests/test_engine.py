"""Tests for the availability tracker, condition state store and rule matcher."""

from apl_kernel.conditions.base import CallableCondition
from apl_kernel.conditions.buffs import buff_present
from apl_kernel.engine.abilities import AbilityAvailabilityTracker
from apl_kernel.engine.matcher import RuleMatcher
from apl_kernel.engine.state import ConditionStateStore
from apl_kernel.models.apl import Apl, ConditionalRule, Spell
from apl_kernel.models.events import (
    Ability,
    ApplyBuffEvent,
    CastEvent,
    GenericEvent,
    UpdateSpellUsableEvent,
)

FIREBALL = Spell(id=133, name="Fireball")
PYROBLAST = Spell(id=11366, name="Pyroblast")
COMBUSTION = Spell(id=190319, name="Combustion")
HOT_STREAK = Spell(id=48108, name="Hot Streak!")


def _usable(spell: Spell, available: bool, timestamp: int = 0) -> UpdateSpellUsableEvent:
    return UpdateSpellUsableEvent(
        timestamp=timestamp,
        source_id=1,
        ability=Ability(guid=spell.id, name=spell.name),
        is_available=available,
    )


def _cast(spell: Spell, timestamp: int = 0) -> CastEvent:
    return CastEvent(timestamp=timestamp, source_id=1, ability=Ability(guid=spell.id, name=spell.name))


class TestAbilityAvailabilityTracker:
    def setup_method(self):
        self.tracker = AbilityAvailabilityTracker()

    def test_unseen_spell_is_available(self):
        assert self.tracker.is_available(COMBUSTION.id) is True
        assert self.tracker.snapshot(COMBUSTION.id) is None

    def test_snapshot_marks_unavailable(self):
        self.tracker.observe(_usable(COMBUSTION, False))
        assert self.tracker.is_available(COMBUSTION.id) is False

    def test_latest_snapshot_wins(self):
        self.tracker.observe(_usable(COMBUSTION, False, timestamp=10))
        self.tracker.observe(_usable(COMBUSTION, True, timestamp=20))
        assert self.tracker.is_available(COMBUSTION.id) is True
        assert self.tracker.snapshot(COMBUSTION.id).timestamp == 20

    def test_stream_order_is_trusted(self):
        self.tracker.observe(_usable(COMBUSTION, True, timestamp=20))
        self.tracker.observe(_usable(COMBUSTION, False, timestamp=10))
        assert self.tracker.is_available(COMBUSTION.id) is False

    def test_other_events_ignored(self):
        self.tracker.observe(_cast(COMBUSTION))
        self.tracker.observe(GenericEvent(timestamp=0, type="damage"))
        assert self.tracker.as_dict() == {}

    def test_snapshots_are_per_spell(self):
        self.tracker.observe(_usable(COMBUSTION, False))
        assert self.tracker.is_available(FIREBALL.id) is True


class TestConditionStateStore:
    def test_initial_state(self):
        store = ConditionStateStore([buff_present(HOT_STREAK, 1)])
        assert store.snapshot() == {"buffPresent-48108-1": False}

    def test_advance_updates_every_condition(self):
        store = ConditionStateStore([buff_present(HOT_STREAK, 1), buff_present(HOT_STREAK, 2)])
        store.advance(ApplyBuffEvent(timestamp=0, ability=Ability(guid=HOT_STREAK.id)))
        assert store.get("buffPresent-48108-1") is True
        assert store.get("buffPresent-48108-2") is True

    def test_unregistered_key_is_none(self):
        store = ConditionStateStore([])
        assert store.get("buffPresent-48108-1") is None

    def test_duplicate_keys_last_registration_wins(self):
        first = CallableCondition("dup", lambda: "a", lambda s, e: s + "a", lambda s, e: True)
        second = CallableCondition("dup", lambda: "b", lambda s, e: s + "b", lambda s, e: True)
        store = ConditionStateStore([first, second])
        assert store.get("dup") == "b"

        # Both updates read the pre-event value; the later one is written last.
        store.advance(GenericEvent(timestamp=0, type="damage"))
        assert store.get("dup") == "bb"


class TestRuleMatcher:
    def setup_method(self):
        self.hot_streak = buff_present(HOT_STREAK, 1)
        self.apl = Apl(
            conditions=[self.hot_streak],
            rules=[
                COMBUSTION,
                ConditionalRule(spell=PYROBLAST, condition=self.hot_streak),
                FIREBALL,
            ],
        )
        self.abilities = AbilityAvailabilityTracker()
        self.conditions = ConditionStateStore(self.apl.conditions)
        self.matcher = RuleMatcher(self.abilities, self.conditions)

    def test_first_available_rule_wins(self):
        rule = self.matcher.applicable_rule(self.apl, _cast(FIREBALL))
        assert rule.spell == COMBUSTION

    def test_unavailable_rule_skipped(self):
        self.abilities.observe(_usable(COMBUSTION, False))
        rule = self.matcher.applicable_rule(self.apl, _cast(FIREBALL))
        assert rule.spell == FIREBALL

    def test_conditional_rule_applies_when_condition_holds(self):
        self.abilities.observe(_usable(COMBUSTION, False))
        self.conditions.advance(ApplyBuffEvent(timestamp=0, ability=Ability(guid=HOT_STREAK.id)))
        rule = self.matcher.applicable_rule(self.apl, _cast(FIREBALL))
        assert rule.spell == PYROBLAST

    def test_no_rule_when_everything_unavailable(self):
        for spell in (COMBUSTION, PYROBLAST, FIREBALL):
            self.abilities.observe(_usable(spell, False))
        assert self.matcher.applicable_rule(self.apl, _cast(FIREBALL)) is None

    def test_rule_applies_checks_availability_before_condition(self):
        calls = []
        condition = CallableCondition(
            "spy", lambda: None, lambda s, e: s,
            lambda s, e: calls.append(e) or True,
        )
        rule = ConditionalRule(spell=PYROBLAST, condition=condition)
        self.abilities.observe(_usable(PYROBLAST, False))
        assert self.matcher.rule_applies(rule, _cast(PYROBLAST)) is False
        assert calls == []

    def test_validate_receives_attempt_event(self):
        seen = []
        condition = CallableCondition(
            "spy", lambda: None, lambda s, e: s,
            lambda s, e: seen.append(e) or True,
        )
        rule = ConditionalRule(spell=PYROBLAST, condition=condition)
        event = _cast(FIREBALL, timestamp=42)
        assert self.matcher.rule_applies(rule, event) is True
        assert seen == [event]
