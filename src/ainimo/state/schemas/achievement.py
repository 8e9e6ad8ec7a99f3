"""
Achievement definitions and their condition taxonomy.

Definitions are static catalog data, not save data. A condition is a
tagged union discriminated on ``type``; the evaluator dispatches on it.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from ..schema import ActionType, FrozenModel, IntelligenceTier


class AchievementCategory(str, Enum):
    ACTION = "action"
    STATS = "stats"
    MILESTONE = "milestone"
    STREAK = "streak"
    COLLECTION = "collection"
    SECRET = "secret"


class AchievementRarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


StatName = Literal["intelligence", "memory", "friendliness", "energy", "mood"]


class ActionCountCondition(FrozenModel):
    type: Literal["action_count"] = "action_count"
    action: ActionType
    count: int


class TotalActionsCondition(FrozenModel):
    type: Literal["total_actions"] = "total_actions"
    count: int


class StatReachCondition(FrozenModel):
    type: Literal["stat_reach"] = "stat_reach"
    stat: StatName
    value: int


class StatMaxCondition(FrozenModel):
    type: Literal["stat_max"] = "stat_max"
    stat: StatName


class AllStatsReachCondition(FrozenModel):
    """Intelligence, memory, friendliness and energy all at ``value``."""
    type: Literal["all_stats_reach"] = "all_stats_reach"
    value: int


class LevelReachCondition(FrozenModel):
    type: Literal["level_reach"] = "level_reach"
    level: int


class TierReachCondition(FrozenModel):
    type: Literal["tier_reach"] = "tier_reach"
    tier: IntelligenceTier


class MessageCountCondition(FrozenModel):
    type: Literal["message_count"] = "message_count"
    count: int


class LoginStreakCondition(FrozenModel):
    type: Literal["login_streak"] = "login_streak"
    days: int


class PlayDaysCondition(FrozenModel):
    type: Literal["play_days"] = "play_days"
    days: int


class AchievementCountCondition(FrozenModel):
    type: Literal["achievement_count"] = "achievement_count"
    count: int


class RestLimitHitCondition(FrozenModel):
    type: Literal["rest_limit_hit"] = "rest_limit_hit"
    days: int


class TimeOfDayCondition(FrozenModel):
    """Local hour within [start_hour, end_hour], both inclusive."""
    type: Literal["time_of_day"] = "time_of_day"
    start_hour: int
    end_hour: int


class AllActionsInDayCondition(FrozenModel):
    type: Literal["all_actions_in_day"] = "all_actions_in_day"


class AllAchievementsCondition(FrozenModel):
    type: Literal["all_achievements"] = "all_achievements"


AchievementCondition = Annotated[
    Union[
        ActionCountCondition,
        TotalActionsCondition,
        StatReachCondition,
        StatMaxCondition,
        AllStatsReachCondition,
        LevelReachCondition,
        TierReachCondition,
        MessageCountCondition,
        LoginStreakCondition,
        PlayDaysCondition,
        AchievementCountCondition,
        RestLimitHitCondition,
        TimeOfDayCondition,
        AllActionsInDayCondition,
        AllAchievementsCondition,
    ],
    Field(discriminator="type"),
]


class AchievementDefinition(FrozenModel):
    id: str
    category: AchievementCategory
    rarity: AchievementRarity
    name: str
    description: str
    title: str | None = None  # Selectable title once unlocked
    is_secret: bool = False   # Hidden until unlocked
    condition: AchievementCondition
