"""
Tests for the shared mini-game rules: gate, rewards, drops and bookkeeping.
"""

import pytest

from ainimo.clock import MS_PER_SECOND
from ainimo.state.schema import IntelligenceTier, MiniGameState, MiniGameType, PersonalityType
from ainimo.state.schemas.minigame import CanPlayResult, GameResult
from ainimo.state.schemas.personality import PersonalityState
from ainimo.systems.minigames import (
    calculate_rewards,
    can_play_game,
    create_game_result,
    init_session,
    item_drop_chance,
    roll_item_drop,
    score_session,
    session_game_type,
    update_mini_game_state,
)


class TestPlayGate:
    """Tests for cooldown and energy checks."""

    def test_not_enough_energy(self, now):
        result = can_play_game(MiniGameType.MEMORY, energy=10, last_played_at=0, now=now)
        assert result == CanPlayResult(can_play=False, reason="energy", energy_required=15)

    def test_cooldown_checked_first(self, now):
        result = can_play_game(MiniGameType.QUIZ, energy=0, last_played_at=now - 60 * MS_PER_SECOND, now=now)
        assert result.reason == "cooldown"
        assert result.cooldown_remaining == 240 * MS_PER_SECOND

    def test_ready(self, now):
        result = can_play_game(MiniGameType.PUZZLE, energy=15, last_played_at=now - 300 * MS_PER_SECOND, now=now)
        assert result.can_play
        assert result.reason is None


class TestRewards:
    """Tests for xp, coins and drops."""

    def test_base_rewards(self):
        assert calculate_rewards(MiniGameType.MEMORY, 100, IntelligenceTier.BABY) == (30, 10)

    def test_tier_and_score_scaling(self):
        assert calculate_rewards(MiniGameType.MEMORY, 50, IntelligenceTier.CHILD) == (18, 6)
        assert calculate_rewards(MiniGameType.PUZZLE, 100, IntelligenceTier.ADULT) == (80, 30)

    def test_personality_bonus(self):
        scholar = PersonalityState(type=PersonalityType.SCHOLAR, strength=100)
        assert calculate_rewards(MiniGameType.MEMORY, 100, IntelligenceTier.BABY, scholar) == (36, 12)

    def test_no_bonus_without_personality(self):
        undeveloped = PersonalityState(type=PersonalityType.NONE, strength=0)
        assert calculate_rewards(MiniGameType.QUIZ, 100, IntelligenceTier.BABY, undeveloped) == (25, 8)

    def test_zero_score(self):
        assert calculate_rewards(MiniGameType.RHYTHM, 0, IntelligenceTier.TEEN) == (0, 0)

    def test_drop_chance(self):
        assert item_drop_chance(MiniGameType.MEMORY, 100, IntelligenceTier.BABY) == pytest.approx(0.30)
        assert item_drop_chance(MiniGameType.QUIZ, 0, IntelligenceTier.ADULT) == pytest.approx(0.22)

    def test_drop_roll(self, fixed_random):
        assert roll_item_drop(MiniGameType.MEMORY, 100, IntelligenceTier.BABY, fixed_random(0.99)) is None
        assert roll_item_drop(MiniGameType.MEMORY, 100, IntelligenceTier.BABY, fixed_random(0.0)) == "hat_ribbon"


class TestGameResults:

    def test_success_threshold(self, fixed_random):
        result = create_game_result(MiniGameType.MEMORY, 50, IntelligenceTier.BABY, 0, rng=fixed_random(0.99))
        assert result.success
        assert result.new_high_score
        assert result.item_dropped is None

        result = create_game_result(MiniGameType.MEMORY, 49, IntelligenceTier.BABY, 80, rng=fixed_random(0.99))
        assert not result.success
        assert not result.new_high_score

    def test_update_scores(self, now):
        state = MiniGameState()
        win = GameResult(game_type=MiniGameType.QUIZ, success=True, score=80, new_high_score=True)
        loss = GameResult(game_type=MiniGameType.QUIZ, success=False, score=20)

        state = update_mini_game_state(state, win, now)
        state = update_mini_game_state(state, loss, now + 1)

        score = state.score_for(MiniGameType.QUIZ)
        assert score.high_score == 80
        assert score.total_plays == 2
        assert score.total_wins == 1
        assert score.last_played_at == now + 1
        assert state.score_for(MiniGameType.MEMORY).total_plays == 0


class TestSessionDispatch:

    @pytest.mark.parametrize("game_type", list(MiniGameType))
    def test_init_session_matches_type(self, game_type, now, rng):
        session = init_session(game_type, IntelligenceTier.BABY, now, rng)
        assert session_game_type(session) == game_type
        assert session.tier == IntelligenceTier.BABY

    def test_unfinished_session_scores_zero(self, now, rng):
        session = init_session(MiniGameType.PUZZLE, IntelligenceTier.CHILD, now, rng)
        assert score_session(session, now) == 0
