"""
Shared mini-game rules: the play gate, rewards, item drops and score
bookkeeping, plus dispatch over the four session types.

Each game's own reducer lives in its module (memory_game, rhythm_game,
puzzle_game, quiz_game). Nothing here mutates its inputs.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from ..clock import MS_PER_MINUTE, resolve
from ..state.schema import IntelligenceTier, MiniGameState, MiniGameType, PersonalityType
from ..state.schemas.minigame import (
    CanPlayResult,
    GameResult,
    MemorySession,
    PuzzleSession,
    QuizSession,
    RhythmSession,
)
from ..state.schemas.personality import PersonalityState
from .attributes import round_half_up
from .items import choose_weighted_item, droppable_items
from .memory_game import calculate_memory_score, init_memory_game
from .puzzle_game import calculate_puzzle_score, init_puzzle_game
from .quiz_game import calculate_quiz_score, init_quiz_game
from .rhythm_game import calculate_rhythm_score, init_rhythm_game


@dataclass(frozen=True)
class MiniGameConfig:
    base_xp: int
    base_coins: int
    drop_chance: float
    clear_score: int
    energy_cost: int = 15
    cooldown_ms: int = 5 * MS_PER_MINUTE


MINI_GAME_CONFIGS: dict[MiniGameType, MiniGameConfig] = {
    MiniGameType.MEMORY: MiniGameConfig(base_xp=30, base_coins=10, drop_chance=0.15, clear_score=50),
    MiniGameType.RHYTHM: MiniGameConfig(base_xp=35, base_coins=12, drop_chance=0.18, clear_score=60),
    MiniGameType.PUZZLE: MiniGameConfig(base_xp=40, base_coins=15, drop_chance=0.20, clear_score=60),
    MiniGameType.QUIZ: MiniGameConfig(base_xp=25, base_coins=8, drop_chance=0.12, clear_score=60),
}

TIER_REWARD_MULTIPLIER: dict[IntelligenceTier, float] = {
    IntelligenceTier.BABY: 1.0,
    IntelligenceTier.CHILD: 1.2,
    IntelligenceTier.TEEN: 1.5,
    IntelligenceTier.ADULT: 2.0,
}

REWARD_CONFIG = {
    "personality_bonus": 0.2,  # Extra reward fraction at strength 100
    "score_drop_bonus": 0.1,   # Extra drop chance at score 100
    "tier_drop_bonus": 0.05,   # Extra drop chance per tier multiplier point
}


# ─── Gate ───────────────────────────────────────────────────

def can_play_game(
    game_type: MiniGameType,
    energy: int,
    last_played_at: int,
    now: int | None = None,
) -> CanPlayResult:
    """Cooldown is checked before energy."""
    config = MINI_GAME_CONFIGS[game_type]
    remaining = max(0, config.cooldown_ms - (resolve(now) - last_played_at))

    if remaining > 0:
        return CanPlayResult(can_play=False, reason="cooldown", cooldown_remaining=remaining)
    if energy < config.energy_cost:
        return CanPlayResult(can_play=False, reason="energy", energy_required=config.energy_cost)
    return CanPlayResult(can_play=True)


# ─── Rewards ────────────────────────────────────────────────

def calculate_rewards(
    game_type: MiniGameType,
    score: int,
    tier: IntelligenceTier,
    personality: PersonalityState | None = None,
) -> tuple[int, int]:
    """(xp, coins) for a finished game."""
    config = MINI_GAME_CONFIGS[game_type]
    scale = TIER_REWARD_MULTIPLIER[tier] * (score / 100)

    xp = round_half_up(config.base_xp * scale)
    coins = round_half_up(config.base_coins * scale)

    if personality is not None and personality.type != PersonalityType.NONE:
        bonus = 1 + (personality.strength / 100) * REWARD_CONFIG["personality_bonus"]
        xp = round_half_up(xp * bonus)
        coins = round_half_up(coins * bonus)

    return xp, coins


def item_drop_chance(game_type: MiniGameType, score: int, tier: IntelligenceTier) -> float:
    return (
        MINI_GAME_CONFIGS[game_type].drop_chance
        + score / 100 * REWARD_CONFIG["score_drop_bonus"]
        + TIER_REWARD_MULTIPLIER[tier] * REWARD_CONFIG["tier_drop_bonus"]
    )


def roll_item_drop(
    game_type: MiniGameType,
    score: int,
    tier: IntelligenceTier,
    rng: random.Random | None = None,
) -> str | None:
    """Bernoulli trial, then a weighted pick among droppable items."""
    rng = rng or random.Random()
    if rng.random() > item_drop_chance(game_type, score, tier):
        return None
    item = choose_weighted_item(droppable_items(), rng)
    return item.id if item is not None else None


def create_game_result(
    game_type: MiniGameType,
    score: int,
    tier: IntelligenceTier,
    previous_high_score: int,
    personality: PersonalityState | None = None,
    rng: random.Random | None = None,
) -> GameResult:
    xp, coins = calculate_rewards(game_type, score, tier, personality)
    return GameResult(
        game_type=game_type,
        success=score >= MINI_GAME_CONFIGS[game_type].clear_score,
        score=score,
        xp_earned=xp,
        coins_earned=coins,
        item_dropped=roll_item_drop(game_type, score, tier, rng),
        new_high_score=score > previous_high_score,
    )


def update_mini_game_state(
    state: MiniGameState,
    result: GameResult,
    now: int | None = None,
) -> MiniGameState:
    """Fold a finished game into the persisted scores and cooldown."""
    current = state.score_for(result.game_type)
    updated = current.model_copy(update={
        "high_score": result.score if result.new_high_score else current.high_score,
        "total_plays": current.total_plays + 1,
        "total_wins": current.total_wins + 1 if result.success else current.total_wins,
        "last_played_at": resolve(now),
    })
    return state.model_copy(update={"scores": {**state.scores, result.game_type: updated}})


# ─── Session dispatch ───────────────────────────────────────

def init_session(
    game_type: MiniGameType,
    tier: IntelligenceTier,
    now: int | None = None,
    rng: random.Random | None = None,
):
    """Fresh session for ``game_type`` at ``tier``'s difficulty."""
    if game_type == MiniGameType.MEMORY:
        return init_memory_game(tier, now, rng)
    if game_type == MiniGameType.RHYTHM:
        return init_rhythm_game(tier, rng)
    if game_type == MiniGameType.PUZZLE:
        return init_puzzle_game(tier, now, rng)
    return init_quiz_game(tier, now, rng)


def session_game_type(session) -> MiniGameType:
    return MiniGameType(session.type)


def score_session(session, now: int | None = None) -> int:
    """Final 0-100 score of a session, whatever its type."""
    if isinstance(session, MemorySession):
        return calculate_memory_score(session, now)
    if isinstance(session, RhythmSession):
        return calculate_rhythm_score(session)
    if isinstance(session, PuzzleSession):
        return calculate_puzzle_score(session, now)
    if isinstance(session, QuizSession):
        return calculate_quiz_score(session)
    return 0
