"""
Action resolution for talk / study / play / rest.

``process_action`` is the single reducer. An ineligible action returns the
very same state object it was given, so callers detect rejection with
``result is state``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..clock import resolve
from ..state.schema import ActionType, GameParameters, GameState
from ..state.schemas.personality import PersonalityState
from .attributes import (
    ENERGY_THRESHOLD,
    advance_rest_limit,
    apply_passive_decay,
    clamp_stat,
    level_up,
    remaining_rest_count,
    round_half_up,
    with_mood,
    xp_gain,
)
from .personality import apply_personality_modifier


@dataclass(frozen=True)
class ActionEffect:
    """Fixed stat deltas of one action. XP comes from ``xp_gain``."""
    intelligence: int = 0
    memory: int = 0
    friendliness: int = 0
    energy: int = 0


ACTION_EFFECTS: dict[ActionType, ActionEffect] = {
    ActionType.TALK: ActionEffect(memory=3, friendliness=2, energy=-10),
    ActionType.STUDY: ActionEffect(intelligence=5, memory=1, energy=-15),
    ActionType.PLAY: ActionEffect(friendliness=8, energy=-20),
    ActionType.REST: ActionEffect(energy=50),
}

_STATS = ("intelligence", "memory", "friendliness", "energy")


def can_perform_action(state: GameState, action: ActionType, now: int | None = None) -> bool:
    """Rest needs a rest left today; everything else needs energy."""
    if action == ActionType.REST:
        return remaining_rest_count(state.rest_limit, now) > 0
    return state.parameters.energy >= ENERGY_THRESHOLD


def _modified(delta: int, modifier: float, personality: PersonalityState | None) -> int:
    # Personality only amplifies or damps gains; costs stay fixed
    if delta <= 0 or personality is None:
        return delta
    return round_half_up(apply_personality_modifier(delta, modifier, personality.strength))


def update_parameters(
    params: GameParameters,
    action: ActionType,
    personality: PersonalityState | None = None,
) -> GameParameters:
    """Apply an action's deltas, xp and at most one level-up."""
    effect = ACTION_EFFECTS[action]
    modifiers = personality.modifiers if personality is not None else None

    update: dict[str, int] = {}
    for stat in _STATS:
        delta = getattr(effect, stat)
        if modifiers is not None:
            delta = _modified(delta, getattr(modifiers, stat), personality)
        update[stat] = clamp_stat(getattr(params, stat) + delta)

    gained = xp_gain(action, params.intelligence)
    if modifiers is not None:
        gained = _modified(gained, modifiers.xp, personality)
    level, xp = level_up(params.xp + gained, params.level)
    update["level"] = level
    update["xp"] = xp

    return with_mood(params.model_copy(update=update))


def process_action(
    state: GameState,
    action: ActionType,
    personality: PersonalityState | None = None,
    now: int | None = None,
) -> GameState:
    """
    Resolve one player action.

    Order: eligibility, passive decay, deltas + xp + level-up, then the
    action time and (rest only) the daily counter. Returns ``state`` itself
    when the action is not allowed.
    """
    now = resolve(now)
    if not can_perform_action(state, action, now):
        return state

    decayed = apply_passive_decay(state, now)
    update = {
        "parameters": update_parameters(decayed.parameters, action, personality),
        "last_action_time": now,
    }
    if action == ActionType.REST:
        update["rest_limit"] = advance_rest_limit(decayed.rest_limit, now)

    return decayed.model_copy(update=update)
