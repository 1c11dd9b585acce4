"""Action Priority List — governed spells, rules and the list itself."""

from typing import Annotated, Any, List, Literal, Optional, Set, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from apl_kernel.conditions.base import Condition


class Spell(BaseModel):
    """A governed action. Defined by the spell catalog, never by the engine."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    icon: Optional[str] = None


class UnconditionalRule(BaseModel):
    """Applies whenever its spell is available."""

    kind: Literal["unconditional"] = "unconditional"
    spell: Spell


class ConditionalRule(BaseModel):
    """Applies when its spell is available and its condition validates."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["conditional"] = "conditional"
    spell: Spell
    condition: Condition

    @field_serializer("condition")
    def _serialize_condition(self, condition: Condition) -> dict:
        return condition.describe()


Rule = Annotated[Union[UnconditionalRule, ConditionalRule], Field(discriminator="kind")]


def rule_spell(rule: Union[UnconditionalRule, ConditionalRule]) -> Spell:
    """The spell a rule governs."""
    return rule.spell


class Apl(BaseModel):
    """
    An Action Priority List.

    `rules` order IS the priority order: the first entry dominates every
    later one. `conditions` lists the conditions whose state the engine
    threads through the stream.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    conditions: List[Condition] = []
    rules: List[Rule]

    @field_validator("rules", mode="before")
    @classmethod
    def _coerce_bare_spells(cls, value: Any) -> Any:
        """A bare Spell in the rule list is an unconditional rule."""
        if not isinstance(value, (list, tuple)):
            return value
        return [
            UnconditionalRule(spell=item) if isinstance(item, Spell) else item
            for item in value
        ]

    @model_validator(mode="after")
    def _reject_duplicate_condition_keys(self) -> "Apl":
        seen: Set[str] = set()
        duplicates = []
        for condition in self.conditions:
            if condition.key in seen:
                duplicates.append(condition.key)
            seen.add(condition.key)
        if duplicates:
            raise ValueError(
                f"Duplicate condition keys in APL: {sorted(set(duplicates))}"
            )
        return self

    def governed_spell_ids(self) -> Set[int]:
        """Ids of every spell that appears in at least one rule."""
        return {rule_spell(rule).id for rule in self.rules}
