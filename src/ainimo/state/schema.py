"""
Pydantic models for the persisted companion save.

Every record is frozen: engine functions return updated copies
(``model_copy(update=...)``) and never mutate what they were given.
All timestamps are epoch milliseconds.
"""

from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..clock import local_date, now_ms


SCHEMA_VERSION = "1.0.0"


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class ActionType(str, Enum):
    TALK = "talk"
    STUDY = "study"
    PLAY = "play"
    REST = "rest"      # Only action that restores energy; limited per day


class IntelligenceTier(str, Enum):
    BABY = "baby"
    CHILD = "child"
    TEEN = "teen"
    ADULT = "adult"


# Ordinal order for tier comparisons
TIER_ORDER: tuple[IntelligenceTier, ...] = (
    IntelligenceTier.BABY,
    IntelligenceTier.CHILD,
    IntelligenceTier.TEEN,
    IntelligenceTier.ADULT,
)


class MoodType(str, Enum):
    HAPPY = "happy"
    NORMAL = "normal"
    TIRED = "tired"
    SAD = "sad"


class PersonalityType(str, Enum):
    SCHOLAR = "scholar"
    SOCIAL = "social"
    PLAYFUL = "playful"
    ZEN = "zen"
    HARMONIOUS = "harmonious"  # No archetype dominates
    NONE = "none"              # Not enough actions yet


class AffinityKey(str, Enum):
    """The four archetypes that accumulate affinity points."""
    SCHOLAR = "scholar"
    SOCIAL = "social"
    PLAYFUL = "playful"
    ZEN = "zen"


class MiniGameType(str, Enum):
    MEMORY = "memory"
    RHYTHM = "rhythm"
    PUZZLE = "puzzle"
    QUIZ = "quiz"


class ItemCategory(str, Enum):
    HAT = "hat"
    ACCESSORY = "accessory"
    BACKGROUND = "background"


class ItemRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class FrozenModel(BaseModel):
    """Base for immutable records."""
    model_config = ConfigDict(frozen=True)


def generate_id() -> str:
    """Short unique id for log entries."""
    return str(uuid4())[:8]


# -----------------------------------------------------------------------------
# Attributes
# -----------------------------------------------------------------------------

class GameParameters(FrozenModel):
    """
    The companion's attribute vector.

    Stats are integers in [0, 100]. ``mood`` is derived from friendliness,
    energy and intelligence; the default is what the other defaults derive.
    """
    level: int = Field(default=1, ge=1, le=100)
    xp: int = Field(default=0, ge=0)
    intelligence: int = Field(default=10, ge=0, le=100)
    memory: int = Field(default=5, ge=0, le=100)
    friendliness: int = Field(default=50, ge=0, le=100)
    energy: int = Field(default=100, ge=0, le=100)
    mood: int = Field(default=53, ge=0, le=100)


class RestLimitState(FrozenModel):
    """Rests used on ``last_reset_date`` (local YYYY-MM-DD)."""
    count: int = Field(default=0, ge=0)
    last_reset_date: str = ""


class ChatMessage(FrozenModel):
    """One line of the conversation log."""
    id: str = Field(default_factory=generate_id)
    speaker: Literal["user", "companion"]
    text: str
    timestamp: int


# -----------------------------------------------------------------------------
# Personality
# -----------------------------------------------------------------------------

class AffinityPoints(FrozenModel):
    """Accumulated, never-decreasing affinity per archetype."""
    scholar: int = Field(default=0, ge=0)
    social: int = Field(default=0, ge=0)
    playful: int = Field(default=0, ge=0)
    zen: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.scholar + self.social + self.playful + self.zen


class PersonalityData(FrozenModel):
    """
    Persisted personality history.

    Once ``locked_type`` is set it never changes for the life of the save.
    """
    affinity_points: AffinityPoints = Field(default_factory=AffinityPoints)
    total_actions: int = Field(default=0, ge=0)
    locked_type: PersonalityType | None = None
    locked_at: int | None = None


# -----------------------------------------------------------------------------
# Achievements
# -----------------------------------------------------------------------------

class AchievementStats(FrozenModel):
    """Counters the achievement conditions are evaluated against."""
    talk_count: int = 0
    study_count: int = 0
    play_count: int = 0
    rest_count: int = 0
    total_actions: int = 0
    messages_sent: int = 0
    current_login_streak: int = 0
    max_login_streak: int = 0
    total_play_days: int = 0
    last_play_date: str = ""
    rest_limit_hit_days: int = 0
    last_rest_limit_hit_date: str = ""
    today_actions: tuple[ActionType, ...] = ()
    today_actions_date: str = ""


class UnlockedAchievement(FrozenModel):
    id: str
    unlocked_at: int


class AchievementState(FrozenModel):
    """
    Unlock ledger plus notification queue.

    ``unlocked`` is append-only. ``pending_notifications`` is FIFO.
    """
    unlocked: tuple[UnlockedAchievement, ...] = ()
    stats: AchievementStats = Field(default_factory=AchievementStats)
    selected_title_id: str | None = None
    pending_notifications: tuple[str, ...] = ()

    @property
    def unlocked_ids(self) -> set[str]:
        return {entry.id for entry in self.unlocked}


# -----------------------------------------------------------------------------
# Mini-games
# -----------------------------------------------------------------------------

class MiniGameScore(FrozenModel):
    high_score: int = 0
    total_plays: int = 0
    total_wins: int = 0
    last_played_at: int = 0  # Drives the per-game cooldown


def _default_scores() -> dict[MiniGameType, MiniGameScore]:
    return {game_type: MiniGameScore() for game_type in MiniGameType}


class MiniGameState(FrozenModel):
    scores: dict[MiniGameType, MiniGameScore] = Field(default_factory=_default_scores)

    def score_for(self, game_type: MiniGameType) -> MiniGameScore:
        return self.scores.get(game_type, MiniGameScore())


# -----------------------------------------------------------------------------
# Inventory
# -----------------------------------------------------------------------------

class OwnedItem(FrozenModel):
    item_id: str
    acquired_at: int


class EquippedItems(FrozenModel):
    hat: str | None = None
    accessory: str | None = None
    background: str | None = None


class Inventory(FrozenModel):
    coins: int = Field(default=0, ge=0)
    items: tuple[OwnedItem, ...] = ()
    equipped: EquippedItems = Field(default_factory=EquippedItems)


# -----------------------------------------------------------------------------
# Save root
# -----------------------------------------------------------------------------

class GameState(FrozenModel):
    """
    Top-level save object.

    Sub-structures default to their empty values so saves written before a
    feature existed still load.
    """
    schema_version: str = SCHEMA_VERSION
    created_at: int = Field(default_factory=now_ms)
    last_action_time: int = Field(default_factory=now_ms)
    parameters: GameParameters = Field(default_factory=GameParameters)
    rest_limit: RestLimitState = Field(default_factory=RestLimitState)
    messages: tuple[ChatMessage, ...] = ()
    personality: PersonalityData = Field(default_factory=PersonalityData)
    achievements: AchievementState = Field(default_factory=AchievementState)
    mini_games: MiniGameState = Field(default_factory=MiniGameState)
    inventory: Inventory = Field(default_factory=Inventory)


def new_game_state(now: int | None = None) -> GameState:
    """Fresh save with every structure at its initial value."""
    now = now_ms() if now is None else now
    return GameState(
        created_at=now,
        last_action_time=now,
        rest_limit=RestLimitState(count=0, last_reset_date=local_date(now)),
    )
