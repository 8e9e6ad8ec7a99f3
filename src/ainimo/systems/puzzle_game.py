"""
Sliding tile puzzle.

Tiles are stored row-major with 0 as the blank. The solved layout is
1..n*n-1 followed by the blank.
"""

from __future__ import annotations

import random

from ..clock import MS_PER_SECOND, resolve
from ..state.schema import IntelligenceTier
from ..state.schemas.minigame import PuzzleSession
from .attributes import round_half_up


# tier -> (grid size, time limit in seconds)
PUZZLE_DIFFICULTY: dict[IntelligenceTier, tuple[int, int]] = {
    IntelligenceTier.BABY: (3, 120),
    IntelligenceTier.CHILD: (3, 90),
    IntelligenceTier.TEEN: (4, 120),
    IntelligenceTier.ADULT: (4, 90),
}

TIME_BONUS_MAX = 50
EFFICIENCY_BONUS_MAX = 50


def count_inversions(tiles: tuple[int, ...] | list[int]) -> int:
    numbered = [tile for tile in tiles if tile != 0]
    return sum(
        1
        for i in range(len(numbered))
        for j in range(i + 1, len(numbered))
        if numbered[i] > numbered[j]
    )


def is_solvable(tiles: tuple[int, ...] | list[int], grid_size: int) -> bool:
    """
    Inversion parity rule.

    Odd grids need an even inversion count. Even grids also count the
    blank's row from the bottom; the sum must be odd.
    """
    inversions = count_inversions(tiles)
    if grid_size % 2 == 1:
        return inversions % 2 == 0
    blank_row = list(tiles).index(0) // grid_size
    return (inversions + (grid_size - blank_row)) % 2 == 1


def is_solved(tiles: tuple[int, ...] | list[int]) -> bool:
    return list(tiles) == list(range(1, len(tiles))) + [0]


def init_puzzle_game(
    tier: IntelligenceTier,
    now: int | None = None,
    rng: random.Random | None = None,
) -> PuzzleSession:
    rng = rng or random.Random()
    grid_size, time_limit = PUZZLE_DIFFICULTY[tier]

    tiles = list(range(grid_size * grid_size))
    rng.shuffle(tiles)
    while not is_solvable(tiles, grid_size) or is_solved(tiles):
        rng.shuffle(tiles)

    return PuzzleSession(
        tier=tier,
        tiles=tuple(tiles),
        grid_size=grid_size,
        start_time=resolve(now),
        time_limit=time_limit * MS_PER_SECOND,
    )


def is_adjacent(index: int, other: int, grid_size: int) -> bool:
    row, col = divmod(index, grid_size)
    other_row, other_col = divmod(other, grid_size)
    return abs(row - other_row) + abs(col - other_col) == 1


def move_tile(session: PuzzleSession, tile_index: int) -> PuzzleSession:
    """Slide the tile at ``tile_index`` into the blank if they touch."""
    if session.is_complete or not 0 <= tile_index < len(session.tiles):
        return session

    blank = session.tiles.index(0)
    if not is_adjacent(tile_index, blank, session.grid_size):
        return session

    tiles = list(session.tiles)
    tiles[tile_index], tiles[blank] = tiles[blank], tiles[tile_index]
    return session.model_copy(update={
        "tiles": tuple(tiles),
        "moves": session.moves + 1,
        "is_complete": is_solved(tiles),
    })


def calculate_puzzle_score(session: PuzzleSession, now: int | None = None) -> int:
    """Time bonus (up to 50) plus move efficiency (up to 50); 0 if unfinished."""
    if not session.is_complete:
        return 0

    elapsed = resolve(now) - session.start_time
    time_bonus = max(0.0, (session.time_limit - elapsed) / session.time_limit) * TIME_BONUS_MAX

    # Penalty starts above twice the n*n baseline
    allowance = session.grid_size * session.grid_size * 2
    efficiency = min(1.0, max(0.0, 1 - (session.moves - allowance) / (allowance * 2)))

    return round_half_up(min(time_bonus, TIME_BONUS_MAX) + efficiency * EFFICIENCY_BONUS_MAX)
