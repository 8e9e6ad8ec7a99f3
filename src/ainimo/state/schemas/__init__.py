"""
Derived and transient shapes.

Unlike ``state.schema`` these are never written to a save:

- PersonalityState: recomputed from PersonalityData on demand
- Achievement definitions: static catalog entries and their conditions
- Mini-game sessions: live only while a game is in progress
- CanPlayResult / GameResult: gate and completion outcomes
"""

from .personality import AffinityScores, PersonalityState, StatModifiers
from .achievement import AchievementCategory, AchievementCondition, AchievementDefinition, AchievementRarity
from .minigame import (
    ActiveGame,
    CanPlayResult,
    GameResult,
    MemoryCard,
    MemorySession,
    NoteJudgement,
    PuzzleSession,
    QuizQuestion,
    QuizSession,
    RhythmNote,
    RhythmSession,
)

__all__ = [
    # Personality
    "AffinityScores",
    "PersonalityState",
    "StatModifiers",
    # Achievements
    "AchievementCategory",
    "AchievementCondition",
    "AchievementDefinition",
    "AchievementRarity",
    # Mini-games
    "ActiveGame",
    "CanPlayResult",
    "GameResult",
    "MemoryCard",
    "MemorySession",
    "NoteJudgement",
    "PuzzleSession",
    "QuizQuestion",
    "QuizSession",
    "RhythmNote",
    "RhythmSession",
]
