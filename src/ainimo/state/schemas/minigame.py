"""
Mini-game session and result shapes.

A session exists only while a game is in progress. It is discarded on
completion or cancellation and is never part of the save.
Durations and times are milliseconds.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from ..schema import FrozenModel, IntelligenceTier, MiniGameType


class NoteJudgement(str, Enum):
    MARVELOUS = "marvelous"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    MISS = "miss"


# -----------------------------------------------------------------------------
# Memory
# -----------------------------------------------------------------------------

class MemoryCard(FrozenModel):
    id: int
    symbol: str
    is_flipped: bool = False
    is_matched: bool = False


class MemorySession(FrozenModel):
    type: Literal["memory"] = "memory"
    tier: IntelligenceTier
    cards: tuple[MemoryCard, ...]
    flipped_indices: tuple[int, ...] = ()  # At most two
    matched_pairs: int = 0
    total_pairs: int
    moves: int = 0
    start_time: int
    time_limit: int
    is_complete: bool = False


# -----------------------------------------------------------------------------
# Rhythm
# -----------------------------------------------------------------------------

class RhythmNote(FrozenModel):
    id: int
    lane: int
    target_time: float  # Offset from session start
    hit_time: float | None = None  # Offset of the judged hit
    result: NoteJudgement | None = None


class RhythmSession(FrozenModel):
    type: Literal["rhythm"] = "rhythm"
    tier: IntelligenceTier
    notes: tuple[RhythmNote, ...]
    current_note_index: int = 0
    score: int = 0
    combo: int = 0
    max_combo: int = 0
    hits: int = 0
    misses: int = 0
    bpm: int
    start_time: int = 0
    is_playing: bool = False
    is_complete: bool = False

    @property
    def current_note(self) -> RhythmNote | None:
        if self.current_note_index < len(self.notes):
            return self.notes[self.current_note_index]
        return None


# -----------------------------------------------------------------------------
# Puzzle
# -----------------------------------------------------------------------------

class PuzzleSession(FrozenModel):
    """Sliding puzzle; tile 0 is the blank."""
    type: Literal["puzzle"] = "puzzle"
    tier: IntelligenceTier
    tiles: tuple[int, ...]
    grid_size: int
    moves: int = 0
    start_time: int
    time_limit: int
    is_complete: bool = False


# -----------------------------------------------------------------------------
# Quiz
# -----------------------------------------------------------------------------

class QuizQuestion(FrozenModel):
    id: str
    question: str
    options: tuple[str, ...]
    correct_index: int


class QuizSession(FrozenModel):
    type: Literal["quiz"] = "quiz"
    tier: IntelligenceTier
    questions: tuple[QuizQuestion, ...]
    current_index: int = 0
    correct_count: int = 0
    answers: tuple[int, ...] = ()  # -1 records a timeout
    time_per_question: int
    question_started_at: int
    is_complete: bool = False

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None


ActiveGame = Annotated[
    Union[MemorySession, RhythmSession, PuzzleSession, QuizSession],
    Field(discriminator="type"),
]


# -----------------------------------------------------------------------------
# Gate and results
# -----------------------------------------------------------------------------

class CanPlayResult(FrozenModel):
    can_play: bool
    reason: Literal["cooldown", "energy"] | None = None
    cooldown_remaining: int | None = None
    energy_required: int | None = None


class GameResult(FrozenModel):
    game_type: MiniGameType
    success: bool
    score: int
    max_score: int = 100
    xp_earned: int = 0
    coins_earned: int = 0
    item_dropped: str | None = None
    new_high_score: bool = False
