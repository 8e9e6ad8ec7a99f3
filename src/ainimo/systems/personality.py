"""
Personality affinity engine.

Every action adds a fixed weight vector to four affinity accumulators.
The normalized scores classify the companion as one dominant archetype,
``harmonious`` when none dominates, or ``none`` before enough actions.
A strong, long-standing personality eventually locks for good.

Pure functions over PersonalityData; PersonalityState is always derived.
"""

from __future__ import annotations

import math

from ..clock import resolve
from ..state.schema import (
    ActionType,
    AffinityKey,
    AffinityPoints,
    PersonalityData,
    PersonalityType,
)
from ..state.schemas.personality import AffinityScores, PersonalityState, StatModifiers


# ─── Configuration ───────────────────────────────────────────

MIN_ACTIONS_FOR_PERSONALITY = 50
PERSONALITY_THRESHOLD = 35.0     # Score (%) a type needs to dominate
LOCK_THRESHOLD_ACTIONS = 200
LOCK_THRESHOLD_STRENGTH = 80.0
MAX_RESISTANCE = 90.0
LOCK_ACTION_MARGIN = 200         # Actions beyond LOCK_THRESHOLD_ACTIONS to lock
LOCK_STRENGTH_MARGIN = 10.0      # Strength beyond LOCK_THRESHOLD_STRENGTH to lock

STRENGTH_CONFIG = {
    "dominant_base": 50.0,
    "dominant_range": 30.0,      # Score points above threshold for +50 strength
    "stddev_penalty": 5.0,       # Harmonious strength lost per stddev point
    "action_bonus_step": 10,     # Actions per bonus point
    "action_bonus_max": 20.0,
    "resistance_ramp": 300,      # Actions past lock threshold for full resistance
}

AFFINITY_ORDER: tuple[AffinityKey, ...] = (
    AffinityKey.SCHOLAR,
    AffinityKey.SOCIAL,
    AffinityKey.PLAYFUL,
    AffinityKey.ZEN,
)

ACTION_AFFINITY_WEIGHTS: dict[ActionType, dict[AffinityKey, int]] = {
    ActionType.STUDY: {AffinityKey.SCHOLAR: 3, AffinityKey.SOCIAL: 0, AffinityKey.PLAYFUL: 0, AffinityKey.ZEN: 1},
    ActionType.TALK: {AffinityKey.SCHOLAR: 1, AffinityKey.SOCIAL: 3, AffinityKey.PLAYFUL: 1, AffinityKey.ZEN: 0},
    ActionType.PLAY: {AffinityKey.SCHOLAR: 0, AffinityKey.SOCIAL: 1, AffinityKey.PLAYFUL: 3, AffinityKey.ZEN: 0},
    ActionType.REST: {AffinityKey.SCHOLAR: 1, AffinityKey.SOCIAL: 0, AffinityKey.PLAYFUL: 0, AffinityKey.ZEN: 3},
}

PERSONALITY_MODIFIERS: dict[PersonalityType, StatModifiers] = {
    PersonalityType.SCHOLAR: StatModifiers(intelligence=1.20, memory=1.10, friendliness=1.00, energy=0.95, xp=1.05),
    PersonalityType.SOCIAL: StatModifiers(intelligence=1.00, memory=1.10, friendliness=1.20, energy=1.00, xp=1.05),
    PersonalityType.PLAYFUL: StatModifiers(intelligence=0.95, memory=1.00, friendliness=1.10, energy=1.10, xp=1.20),
    PersonalityType.ZEN: StatModifiers(intelligence=1.05, memory=1.05, friendliness=1.05, energy=1.20, xp=1.00),
    PersonalityType.HARMONIOUS: StatModifiers(intelligence=1.08, memory=1.08, friendliness=1.08, energy=1.08, xp=1.08),
    PersonalityType.NONE: StatModifiers(),
}

PERSONALITY_NAMES: dict[PersonalityType, str] = {
    PersonalityType.SCHOLAR: "Scholar",
    PersonalityType.SOCIAL: "Social Butterfly",
    PersonalityType.PLAYFUL: "Playful Spirit",
    PersonalityType.ZEN: "Zen Master",
    PersonalityType.HARMONIOUS: "Harmonious",
    PersonalityType.NONE: "Developing",
}

PERSONALITY_DESCRIPTIONS: dict[PersonalityType, str] = {
    PersonalityType.SCHOLAR: "Loves learning and grows smarter faster.",
    PersonalityType.SOCIAL: "Thrives on conversation and makes friends easily.",
    PersonalityType.PLAYFUL: "Full of energy and learns through play.",
    PersonalityType.ZEN: "Calm and balanced, recovers energy quickly.",
    PersonalityType.HARMONIOUS: "Well-rounded, with a little bonus to everything.",
    PersonalityType.NONE: "Personality is still forming.",
}


# ─── Scores and classification ──────────────────────────────

def calculate_affinity_scores(points: AffinityPoints) -> AffinityScores:
    """Normalize points to percentages; uniform 25% before any points."""
    total = points.total
    if total == 0:
        return AffinityScores()
    return AffinityScores(**{
        key.value: getattr(points, key.value) / total * 100
        for key in AFFINITY_ORDER
    })


def _score_values(scores: AffinityScores) -> list[float]:
    return [getattr(scores, key.value) for key in AFFINITY_ORDER]


def determine_dominant_type(scores: AffinityScores, total_actions: int) -> PersonalityType:
    if total_actions < MIN_ACTIONS_FOR_PERSONALITY:
        return PersonalityType.NONE

    # max() keeps the first of equal scores, so ties resolve in AFFINITY_ORDER
    top_key = max(AFFINITY_ORDER, key=lambda key: getattr(scores, key.value))
    if getattr(scores, top_key.value) >= PERSONALITY_THRESHOLD:
        return PersonalityType(top_key.value)
    return PersonalityType.HARMONIOUS


def _action_bonus(total_actions: int) -> float:
    bonus = (total_actions - MIN_ACTIONS_FOR_PERSONALITY) / STRENGTH_CONFIG["action_bonus_step"]
    return min(STRENGTH_CONFIG["action_bonus_max"], bonus)


def calculate_personality_strength(
    personality_type: PersonalityType,
    scores: AffinityScores,
    total_actions: int,
) -> float:
    if personality_type == PersonalityType.NONE:
        return 0.0

    bonus = _action_bonus(total_actions)

    if personality_type == PersonalityType.HARMONIOUS:
        values = _score_values(scores)
        variance = sum((value - 25.0) ** 2 for value in values) / len(values)
        base = max(0.0, 100.0 - math.sqrt(variance) * STRENGTH_CONFIG["stddev_penalty"])
        return min(100.0, max(0.0, base + bonus))

    score = getattr(scores, personality_type.value)
    base = (
        STRENGTH_CONFIG["dominant_base"]
        + (score - PERSONALITY_THRESHOLD) / STRENGTH_CONFIG["dominant_range"] * 50
    )
    return min(100.0, max(0.0, base + bonus))


def calculate_resistance(total_actions: int, strength: float) -> float:
    """Resistance to change; zero until both lock thresholds are reached."""
    if total_actions < LOCK_THRESHOLD_ACTIONS or strength < LOCK_THRESHOLD_STRENGTH:
        return 0.0

    action_factor = min(1.0, (total_actions - LOCK_THRESHOLD_ACTIONS) / STRENGTH_CONFIG["resistance_ramp"])
    strength_factor = (strength - LOCK_THRESHOLD_STRENGTH) / (100.0 - LOCK_THRESHOLD_STRENGTH)
    return min(MAX_RESISTANCE, action_factor * strength_factor * MAX_RESISTANCE)


def should_lock_personality(total_actions: int, strength: float) -> bool:
    action_excess = total_actions - LOCK_THRESHOLD_ACTIONS
    strength_excess = strength - LOCK_THRESHOLD_STRENGTH
    return action_excess >= LOCK_ACTION_MARGIN and strength_excess >= LOCK_STRENGTH_MARGIN


def compute_personality_state(data: PersonalityData) -> PersonalityState:
    """Derive the full personality state from persisted data."""
    scores = calculate_affinity_scores(data.affinity_points)

    if data.locked_type is not None:
        return PersonalityState(
            type=data.locked_type,
            strength=100.0,
            resistance=MAX_RESISTANCE,
            is_locked=True,
            modifiers=PERSONALITY_MODIFIERS[data.locked_type],
            affinity_scores=scores,
        )

    personality_type = determine_dominant_type(scores, data.total_actions)
    strength = calculate_personality_strength(personality_type, scores, data.total_actions)
    return PersonalityState(
        type=personality_type,
        strength=strength,
        resistance=calculate_resistance(data.total_actions, strength),
        is_locked=should_lock_personality(data.total_actions, strength),
        modifiers=PERSONALITY_MODIFIERS[personality_type],
        affinity_scores=scores,
    )


# ─── Reducers ───────────────────────────────────────────────

def add_affinity_points(points: AffinityPoints, action: ActionType) -> AffinityPoints:
    weights = ACTION_AFFINITY_WEIGHTS[action]
    return AffinityPoints(**{
        key.value: getattr(points, key.value) + weights[key]
        for key in AFFINITY_ORDER
    })


def process_personality_action(
    data: PersonalityData,
    action: ActionType,
    now: int | None = None,
) -> PersonalityData:
    """
    Record one action and persist a lock the first time it is reached.

    Once ``locked_type`` is set, points keep accumulating but the type
    can no longer change.
    """
    updated = data.model_copy(update={
        "affinity_points": add_affinity_points(data.affinity_points, action),
        "total_actions": data.total_actions + 1,
    })
    if updated.locked_type is not None:
        return updated

    state = compute_personality_state(updated)
    if state.is_locked and state.type != PersonalityType.NONE:
        return updated.model_copy(update={
            "locked_type": state.type,
            "locked_at": resolve(now),
        })
    return updated


def apply_personality_modifier(base_value: float, modifier: float, strength: float) -> float:
    """Scale a value by ``modifier``, damped linearly by strength/100."""
    if strength <= 0:
        return base_value
    return base_value * (1 + (modifier - 1) * strength / 100)


# ─── Display helpers ────────────────────────────────────────

def get_affinity_key_for_action(action: ActionType) -> AffinityKey:
    """The archetype an action feeds most."""
    weights = ACTION_AFFINITY_WEIGHTS[action]
    return max(AFFINITY_ORDER, key=lambda key: weights[key])


def get_actions_until_personality(total_actions: int) -> int:
    return max(0, MIN_ACTIONS_FOR_PERSONALITY - total_actions)


def get_personality_percentage(state: PersonalityState, key: AffinityKey) -> int:
    return round(getattr(state.affinity_scores, key.value))


def get_personality_name(personality_type: PersonalityType) -> str:
    return PERSONALITY_NAMES[personality_type]


def get_personality_description(personality_type: PersonalityType) -> str:
    return PERSONALITY_DESCRIPTIONS[personality_type]
