"""
Memory (pairs) mini-game.

At most two cards are face up. A matching second flip marks both cards
matched; a mismatch stays face up until ``reset_flipped_cards``.
"""

from __future__ import annotations

import random

from ..clock import MS_PER_SECOND, resolve
from ..state.schema import IntelligenceTier
from ..state.schemas.minigame import MemoryCard, MemorySession
from .attributes import round_half_up


# tier -> (pairs, time limit in seconds)
MEMORY_DIFFICULTY: dict[IntelligenceTier, tuple[int, int]] = {
    IntelligenceTier.BABY: (4, 60),
    IntelligenceTier.CHILD: (6, 75),
    IntelligenceTier.TEEN: (8, 90),
    IntelligenceTier.ADULT: (12, 120),
}

MEMORY_SYMBOLS: tuple[str, ...] = (
    "🌟", "🎀", "🎈", "🌈", "🍎", "🍰",
    "🌸", "🎵", "💎", "🦋", "🌙", "⭐",
    "🎁", "🍭", "🌺", "🐱",
)

TIME_BONUS_MAX = 30
EFFICIENCY_BONUS_MAX = 70


def init_memory_game(
    tier: IntelligenceTier,
    now: int | None = None,
    rng: random.Random | None = None,
) -> MemorySession:
    rng = rng or random.Random()
    pairs, time_limit = MEMORY_DIFFICULTY[tier]

    symbols = rng.sample(MEMORY_SYMBOLS, pairs)
    deck = symbols + symbols
    rng.shuffle(deck)

    return MemorySession(
        tier=tier,
        cards=tuple(MemoryCard(id=i, symbol=symbol) for i, symbol in enumerate(deck)),
        total_pairs=pairs,
        start_time=resolve(now),
        time_limit=time_limit * MS_PER_SECOND,
    )


def _replace_cards(cards: tuple[MemoryCard, ...], changes: dict[int, MemoryCard]) -> tuple[MemoryCard, ...]:
    return tuple(changes.get(i, card) for i, card in enumerate(cards))


def flip_card(session: MemorySession, index: int) -> MemorySession:
    """Turn one card face up and judge the pair on the second flip."""
    if session.is_complete or not 0 <= index < len(session.cards):
        return session
    card = session.cards[index]
    if card.is_flipped or card.is_matched or len(session.flipped_indices) >= 2:
        return session

    flipped = session.flipped_indices + (index,)
    changes = {index: card.model_copy(update={"is_flipped": True})}

    if len(flipped) < 2:
        return session.model_copy(update={
            "cards": _replace_cards(session.cards, changes),
            "flipped_indices": flipped,
        })

    first, second = flipped
    first_card = changes.get(first, session.cards[first])
    second_card = changes.get(second, session.cards[second])

    if first_card.symbol != second_card.symbol:
        return session.model_copy(update={
            "cards": _replace_cards(session.cards, changes),
            "flipped_indices": flipped,
            "moves": session.moves + 1,
        })

    changes[first] = first_card.model_copy(update={"is_matched": True})
    changes[second] = second_card.model_copy(update={"is_matched": True})
    matched = session.matched_pairs + 1
    return session.model_copy(update={
        "cards": _replace_cards(session.cards, changes),
        "flipped_indices": (),
        "matched_pairs": matched,
        "moves": session.moves + 1,
        "is_complete": matched == session.total_pairs,
    })


def reset_flipped_cards(session: MemorySession) -> MemorySession:
    """Turn a mismatched pair back face down."""
    if len(session.flipped_indices) != 2:
        return session
    changes = {
        i: session.cards[i].model_copy(update={"is_flipped": False})
        for i in session.flipped_indices
    }
    return session.model_copy(update={
        "cards": _replace_cards(session.cards, changes),
        "flipped_indices": (),
    })


def calculate_memory_score(session: MemorySession, now: int | None = None) -> int:
    """Time bonus (up to 30) plus move efficiency (up to 70); 0 if unfinished."""
    if not session.is_complete:
        return 0

    elapsed = resolve(now) - session.start_time
    time_bonus = max(0.0, (session.time_limit - elapsed) / session.time_limit) * TIME_BONUS_MAX

    pairs = session.total_pairs
    extra_moves = session.moves - pairs
    efficiency = max(0.0, 1 - extra_moves / (pairs * 2)) * EFFICIENCY_BONUS_MAX

    return round_half_up(min(time_bonus, TIME_BONUS_MAX) + min(efficiency, EFFICIENCY_BONUS_MAX))
