"""
Attribute and decay model.

Owns the numeric attribute vector: clamping, xp and level-up, mood
derivation, tier and mood classification, the daily rest limit, and
passive decay over real time.

Pure function design: (state, now) -> state. No I/O, no mutation.
"""

from __future__ import annotations

import math

from ..clock import MS_PER_MINUTE, local_date, resolve
from ..state.schema import (
    ActionType,
    GameParameters,
    GameState,
    IntelligenceTier,
    MoodType,
    RestLimitState,
)


# ─── Configuration ───────────────────────────────────────────

STAT_MIN = 0
STAT_MAX = 100
XP_PER_LEVEL = 100
MAX_LEVEL = 100
ENERGY_THRESHOLD = 20
MAX_REST_PER_DAY = 3

DECAY_CONFIG = {
    "threshold_minutes": 30,    # Idle time before decay starts, and interval length
    "penalty_per_interval": 1,  # Friendliness lost per whole interval
    "max_penalty": 50,
}

# Lower bound of intelligence for each tier, highest first
TIER_THRESHOLDS: tuple[tuple[IntelligenceTier, int], ...] = (
    (IntelligenceTier.ADULT, 75),
    (IntelligenceTier.TEEN, 50),
    (IntelligenceTier.CHILD, 25),
    (IntelligenceTier.BABY, 0),
)

MOOD_THRESHOLDS: tuple[tuple[MoodType, int], ...] = (
    (MoodType.HAPPY, 70),
    (MoodType.NORMAL, 40),
    (MoodType.TIRED, 20),
    (MoodType.SAD, 0),
)

MOOD_WEIGHTS = {"friendliness": 0.4, "energy": 0.3, "intelligence": 0.3}

BASE_XP: dict[ActionType, int] = {
    ActionType.TALK: 5,
    ActionType.STUDY: 10,
    ActionType.PLAY: 3,
    ActionType.REST: 0,
}


# ─── Numeric helpers ────────────────────────────────────────

def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return math.floor(value + 0.5)


def clamp_stat(value: float) -> int:
    """Clamp to the [0, 100] stat range."""
    return int(max(STAT_MIN, min(STAT_MAX, value)))


def xp_gain(action: ActionType, intelligence: int) -> int:
    """Base xp for the action plus one point per 20 intelligence."""
    return BASE_XP[action] + intelligence // 20


def level_up(xp: int, level: int) -> tuple[int, int]:
    """
    Grant at most one level.

    Returns (level, xp). Nothing changes below the threshold or at the cap.
    """
    if xp >= XP_PER_LEVEL and level < MAX_LEVEL:
        return level + 1, xp - XP_PER_LEVEL
    return level, xp


def grant_xp(params: GameParameters, amount: int) -> GameParameters:
    """Add xp from outside an action (mini-game rewards), one level at most."""
    if amount <= 0:
        return params
    level, xp = level_up(params.xp + amount, params.level)
    return params.model_copy(update={"level": level, "xp": xp})


def derive_mood(friendliness: int, energy: int, intelligence: int) -> int:
    return clamp_stat(round_half_up(
        friendliness * MOOD_WEIGHTS["friendliness"]
        + energy * MOOD_WEIGHTS["energy"]
        + intelligence * MOOD_WEIGHTS["intelligence"]
    ))


def with_mood(params: GameParameters) -> GameParameters:
    """Return ``params`` with mood recomputed from its other stats."""
    mood = derive_mood(params.friendliness, params.energy, params.intelligence)
    if mood == params.mood:
        return params
    return params.model_copy(update={"mood": mood})


def get_tier(intelligence: int) -> IntelligenceTier:
    for tier, minimum in TIER_THRESHOLDS:
        if intelligence >= minimum:
            return tier
    return IntelligenceTier.BABY


def get_mood_type(mood: int) -> MoodType:
    for mood_type, minimum in MOOD_THRESHOLDS:
        if mood >= minimum:
            return mood_type
    return MoodType.SAD


# ─── Daily rest limit ───────────────────────────────────────

def effective_rest_count(rest_limit: RestLimitState, now: int | None = None) -> int:
    """Rests used today; a count from an earlier date no longer applies."""
    if rest_limit.last_reset_date != local_date(resolve(now)):
        return 0
    return rest_limit.count


def remaining_rest_count(rest_limit: RestLimitState, now: int | None = None) -> int:
    return max(0, MAX_REST_PER_DAY - effective_rest_count(rest_limit, now))


def advance_rest_limit(rest_limit: RestLimitState, now: int | None = None) -> RestLimitState:
    """Count one rest, resetting first if the calendar date rolled over."""
    today = local_date(resolve(now))
    if rest_limit.last_reset_date != today:
        return RestLimitState(count=1, last_reset_date=today)
    return RestLimitState(count=rest_limit.count + 1, last_reset_date=today)


# ─── Passive decay ──────────────────────────────────────────

def decay_penalty(elapsed_ms: int, config: dict | None = None) -> int:
    """Friendliness lost after ``elapsed_ms`` idle milliseconds."""
    config = config or DECAY_CONFIG
    interval_ms = config["threshold_minutes"] * MS_PER_MINUTE
    if elapsed_ms < interval_ms:
        return 0
    intervals = elapsed_ms // interval_ms
    return min(config["max_penalty"], intervals * config["penalty_per_interval"])


def apply_passive_decay(
    state: GameState,
    now: int | None = None,
    config: dict | None = None,
) -> GameState:
    """
    Reduce friendliness for idle time since the last action.

    Below the threshold the input state is returned unchanged. Energy is
    not touched. ``last_action_time`` is left for the action to refresh.
    """
    now = resolve(now)
    penalty = decay_penalty(now - state.last_action_time, config)
    if penalty == 0:
        return state

    params = state.parameters
    decayed = with_mood(params.model_copy(update={
        "friendliness": clamp_stat(params.friendliness - penalty),
    }))
    return state.model_copy(update={"parameters": decayed})
