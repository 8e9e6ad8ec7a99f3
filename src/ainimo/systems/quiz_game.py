"""
Quiz mini-game.

A tier-sized random subset of a static question bank, asked one at a time.
An answer index outside the options (``TIMEOUT_ANSWER``) records a timeout.
"""

from __future__ import annotations

import random

from ..clock import MS_PER_SECOND, resolve
from ..state.schema import IntelligenceTier
from ..state.schemas.minigame import QuizQuestion, QuizSession
from .attributes import round_half_up


# tier -> (question count, seconds per question)
QUIZ_DIFFICULTY: dict[IntelligenceTier, tuple[int, int]] = {
    IntelligenceTier.BABY: (5, 15),
    IntelligenceTier.CHILD: (7, 12),
    IntelligenceTier.TEEN: (8, 10),
    IntelligenceTier.ADULT: (10, 8),
}

TIMEOUT_ANSWER = -1


def _q(question_id: str, question: str, options: tuple[str, ...], correct: int) -> QuizQuestion:
    return QuizQuestion(id=question_id, question=question, options=options, correct_index=correct)


QUESTION_BANK: tuple[QuizQuestion, ...] = (
    _q("q1", "Which action raises intelligence the most?", ("Study", "Play", "Rest", "Talk"), 0),
    _q("q2", "What happens when energy drops below 20?", (
        "Only resting is possible", "The game resets", "Mood is locked", "Nothing"), 0),
    _q("q3", "Which action restores energy?", ("Talk", "Study", "Play", "Rest"), 3),
    _q("q4", "How many times can your companion rest per day?", ("1", "3", "5", "Unlimited"), 1),
    _q("q5", "How much xp does a level take?", ("50", "100", "150", "200"), 1),
    _q("q6", "Which stat does playing raise the most?", (
        "Intelligence", "Memory", "Friendliness", "Energy"), 2),
    _q("q7", "What is the highest level?", ("50", "99", "100", "No limit"), 2),
    _q("q8", "At what intelligence does a baby become a child?", ("10", "25", "50", "75"), 1),
    _q("q9", "What lowers friendliness over time?", (
        "Studying", "Being left alone", "Resting", "Playing mini-games"), 1),
    _q("q10", "Which personality recovers energy fastest?", ("Scholar", "Social", "Playful", "Zen"), 3),
    _q("q11", "Which action helps memory the most?", ("Talk", "Study", "Play", "Rest"), 0),
    _q("q12", "How many actions before a personality shows?", ("10", "25", "50", "100"), 2),
    _q("q13", "What does a full combo streak of five give in the rhythm game?", (
        "Nothing", "Bonus points", "An item", "Extra time"), 1),
    _q("q14", "What is the rarest kind of item?", ("Common", "Rare", "Epic", "Legendary"), 3),
)


def generate_quiz_questions(
    tier: IntelligenceTier,
    rng: random.Random | None = None,
    bank: tuple[QuizQuestion, ...] = QUESTION_BANK,
) -> tuple[QuizQuestion, ...]:
    """Sample without replacement; capped at the bank size."""
    rng = rng or random.Random()
    count, _ = QUIZ_DIFFICULTY[tier]
    return tuple(rng.sample(bank, min(count, len(bank))))


def init_quiz_game(
    tier: IntelligenceTier,
    now: int | None = None,
    rng: random.Random | None = None,
) -> QuizSession:
    _, seconds = QUIZ_DIFFICULTY[tier]
    return QuizSession(
        tier=tier,
        questions=generate_quiz_questions(tier, rng),
        time_per_question=seconds * MS_PER_SECOND,
        question_started_at=resolve(now),
    )


def answer_question(session: QuizSession, answer_index: int, now: int | None = None) -> QuizSession:
    """Record an answer (or timeout) and move on to the next question."""
    question = session.current_question
    if session.is_complete or question is None:
        return session

    if not 0 <= answer_index < len(question.options):
        answer_index = TIMEOUT_ANSWER
    correct = answer_index == question.correct_index
    next_index = session.current_index + 1

    return session.model_copy(update={
        "current_index": next_index,
        "correct_count": session.correct_count + 1 if correct else session.correct_count,
        "answers": session.answers + (answer_index,),
        "question_started_at": resolve(now),
        "is_complete": next_index >= len(session.questions),
    })


def is_question_expired(session: QuizSession, now: int | None = None) -> bool:
    if session.is_complete:
        return False
    return resolve(now) - session.question_started_at >= session.time_per_question


def timeout_question(session: QuizSession, now: int | None = None) -> QuizSession:
    return answer_question(session, TIMEOUT_ANSWER, now)


def calculate_quiz_score(session: QuizSession) -> int:
    if not session.questions:
        return 0
    return round_half_up(session.correct_count / len(session.questions) * 100)
