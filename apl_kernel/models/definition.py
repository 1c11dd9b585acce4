"""APL Definition — the declarative (JSON) form of an Action Priority List."""

from typing import List, Optional

from pydantic import BaseModel

from apl_kernel.models.apl import Spell


class RuleDefinition(BaseModel):
    """One priority entry. No condition means the rule is unconditional."""

    spell: Spell
    condition: Optional[dict] = None        # Condition spec, e.g. {"kind": "buff_present", ...}


class AplDefinition(BaseModel):
    """A declared APL, built into an Apl by the condition registry."""

    name: str
    description: str = ""
    conditions: List[dict] = []             # Condition specs whose state is tracked
    rules: List[RuleDefinition]
