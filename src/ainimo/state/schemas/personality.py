"""
Derived personality shapes.

Nothing here is persisted: a ``PersonalityState`` is recomputed from
``PersonalityData`` whenever it is needed.
"""

from pydantic import Field

from ..schema import FrozenModel, PersonalityType


class AffinityScores(FrozenModel):
    """Affinity points normalized to percentages summing to 100."""
    scholar: float = 25.0
    social: float = 25.0
    playful: float = 25.0
    zen: float = 25.0


class StatModifiers(FrozenModel):
    """Multipliers applied to positive stat gains (1.0 = no effect)."""
    intelligence: float = 1.0
    memory: float = 1.0
    friendliness: float = 1.0
    energy: float = 1.0
    xp: float = 1.0


class PersonalityState(FrozenModel):
    type: PersonalityType = PersonalityType.NONE
    strength: float = Field(default=0.0, ge=0, le=100)
    resistance: float = Field(default=0.0, ge=0, le=90)
    is_locked: bool = False
    modifiers: StatModifiers = Field(default_factory=StatModifiers)
    affinity_scores: AffinityScores = Field(default_factory=AffinityScores)
