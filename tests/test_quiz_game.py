"""
Tests for the quiz game.
"""

from ainimo.clock import MS_PER_SECOND
from ainimo.state.schema import IntelligenceTier
from ainimo.systems.quiz_game import (
    QUESTION_BANK,
    TIMEOUT_ANSWER,
    answer_question,
    calculate_quiz_score,
    generate_quiz_questions,
    init_quiz_game,
    is_question_expired,
    timeout_question,
)


class TestQuestionSelection:

    def test_bank_well_formed(self):
        assert len({q.id for q in QUESTION_BANK}) == len(QUESTION_BANK)
        assert all(0 <= q.correct_index < len(q.options) for q in QUESTION_BANK)

    def test_tier_count_without_repeats(self, rng):
        questions = generate_quiz_questions(IntelligenceTier.BABY, rng)
        assert len(questions) == 5
        assert len({q.id for q in questions}) == 5

    def test_capped_at_bank_size(self, rng):
        questions = generate_quiz_questions(IntelligenceTier.ADULT, rng, bank=QUESTION_BANK[:3])
        assert len(questions) == 3


class TestAnswering:
    """Tests for answers, timeouts and scoring."""

    def test_correct_answer(self, now, rng):
        session = init_quiz_game(IntelligenceTier.BABY, now, rng)
        correct = session.current_question.correct_index
        session = answer_question(session, correct, now + 2000)

        assert session.correct_count == 1
        assert session.current_index == 1
        assert session.answers == (correct,)
        assert session.question_started_at == now + 2000

    def test_out_of_range_is_timeout(self, now, rng):
        session = answer_question(init_quiz_game(IntelligenceTier.BABY, now, rng), 9, now)
        assert session.answers == (TIMEOUT_ANSWER,)
        assert session.correct_count == 0

    def test_expiry(self, now, rng):
        session = init_quiz_game(IntelligenceTier.BABY, now, rng)
        assert session.time_per_question == 15 * MS_PER_SECOND
        assert not is_question_expired(session, now + 14_999)
        assert is_question_expired(session, now + 15_000)

        session = timeout_question(session, now + 15_000)
        assert session.answers == (TIMEOUT_ANSWER,)

    def test_completion_and_score(self, now, rng):
        session = init_quiz_game(IntelligenceTier.BABY, now, rng)
        for i in range(5):
            question = session.current_question
            answer = question.correct_index if i < 3 else TIMEOUT_ANSWER
            session = answer_question(session, answer, now)

        assert session.is_complete
        assert session.current_question is None
        assert calculate_quiz_score(session) == 60
        assert answer_question(session, 0, now) is session
        assert not is_question_expired(session, now + 60_000)
