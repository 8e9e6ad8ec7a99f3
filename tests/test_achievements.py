"""
Tests for the achievement engine.

Covers stats updates, condition evaluation, batch unlocks including the
meta conditions, notifications, titles and progress.
"""

from datetime import datetime
from types import SimpleNamespace

from ainimo.clock import MS_PER_HOUR, timestamp_for
from ainimo.state.schema import (
    AchievementState,
    AchievementStats,
    ActionType,
    GameParameters,
    IntelligenceTier,
    UnlockedAchievement,
)
from ainimo.state.schemas.achievement import (
    ActionCountCondition,
    AllAchievementsCondition,
    TierReachCondition,
    TimeOfDayCondition,
)
from ainimo.systems.achievement_catalog import ACHIEVEMENTS, get_achievement
from ainimo.systems.achievements import (
    calculate_progress,
    check_and_unlock,
    check_condition,
    consume_notification,
    detect_new_unlocks,
    is_unlocked,
    select_title,
    unlock_achievements,
    update_achievement_stats,
    update_login_streak,
    update_message_stats,
    update_rest_limit_hit_stats,
)


def _unlocked(*ids):
    return tuple(UnlockedAchievement(id=achievement_id, unlocked_at=0) for achievement_id in ids)


class TestCatalog:
    """Tests for the static catalog."""

    def test_ids_unique(self):
        ids = [a.id for a in ACHIEVEMENTS]
        assert len(ids) == len(set(ids))

    def test_meta_achievements_last(self):
        tail = [a.condition.type for a in ACHIEVEMENTS[-3:]]
        assert tail == ["achievement_count", "achievement_count", "all_achievements"]

    def test_get_achievement(self):
        assert get_achievement("action_talk_1").name == "First Words"
        assert get_achievement("nope") is None


class TestStatsUpdates:
    """Tests for the counters conditions read."""

    def test_first_talk(self, now):
        stats = update_achievement_stats(AchievementStats(), ActionType.TALK, now)
        assert stats.talk_count == 1
        assert stats.total_actions == 1
        assert stats.today_actions == (ActionType.TALK,)
        assert stats.today_actions_date == "2026-10-18"

    def test_today_actions_distinct(self, now):
        stats = AchievementStats()
        for action in (ActionType.TALK, ActionType.TALK, ActionType.REST):
            stats = update_achievement_stats(stats, action, now)
        assert stats.today_actions == (ActionType.TALK, ActionType.REST)

    def test_today_actions_reset_next_day(self, now):
        stats = update_achievement_stats(AchievementStats(), ActionType.TALK, now)
        stats = update_achievement_stats(stats, ActionType.STUDY, now + 24 * MS_PER_HOUR)
        assert stats.today_actions == (ActionType.STUDY,)
        assert stats.total_actions == 2

    def test_message_count(self):
        assert update_message_stats(AchievementStats()).messages_sent == 1

    def test_rest_limit_hit_once_per_day(self, now):
        stats = update_rest_limit_hit_stats(AchievementStats(), now)
        assert update_rest_limit_hit_stats(stats, now) is stats
        assert stats.rest_limit_hit_days == 1

        stats = update_rest_limit_hit_stats(stats, now + 24 * MS_PER_HOUR)
        assert stats.rest_limit_hit_days == 2


class TestLoginStreak:
    """Tests for daily visit tracking."""

    def test_first_visit(self, now):
        stats = update_login_streak(AchievementStats(), now)
        assert stats.current_login_streak == 1
        assert stats.total_play_days == 1
        assert stats.last_play_date == "2026-10-18"

    def test_same_day_is_noop(self, now):
        stats = update_login_streak(AchievementStats(), now)
        assert update_login_streak(stats, now + MS_PER_HOUR) is stats

    def test_consecutive_days_extend(self):
        stats = AchievementStats()
        for day in (18, 19, 20):
            stats = update_login_streak(stats, timestamp_for(datetime(2026, 10, day, 9, 0)))
        assert stats.current_login_streak == 3
        assert stats.max_login_streak == 3

    def test_gap_restarts_streak(self):
        stats = AchievementStats(
            current_login_streak=5, max_login_streak=5, total_play_days=5, last_play_date="2026-10-15",
        )
        stats = update_login_streak(stats, timestamp_for(datetime(2026, 10, 18, 9, 0)))
        assert stats.current_login_streak == 1
        assert stats.max_login_streak == 5
        assert stats.total_play_days == 6

    def test_streak_across_month_boundary(self):
        stats = AchievementStats(current_login_streak=2, max_login_streak=2, last_play_date="2026-10-31")
        stats = update_login_streak(stats, timestamp_for(datetime(2026, 11, 1, 9, 0)))
        assert stats.current_login_streak == 3


class TestConditions:
    """Tests for individual condition checks."""

    def test_tier_reach(self, now):
        condition = TierReachCondition(tier=IntelligenceTier.CHILD)
        assert not check_condition(condition, AchievementStats(), GameParameters(intelligence=24), now)
        assert check_condition(condition, AchievementStats(), GameParameters(intelligence=60), now)

    def test_time_of_day_inclusive(self):
        condition = TimeOfDayCondition(start_hour=0, end_hour=3)
        params = GameParameters()
        assert check_condition(condition, AchievementStats(), params, timestamp_for(datetime(2026, 10, 18, 3, 59)))
        assert not check_condition(condition, AchievementStats(), params, timestamp_for(datetime(2026, 10, 18, 4, 0)))

    def test_unknown_condition_is_false(self, now):
        assert not check_condition(SimpleNamespace(type="bogus"), AchievementStats(), GameParameters(), now)

    def test_meta_condition_is_false_alone(self, now):
        assert not check_condition(AllAchievementsCondition(), AchievementStats(), GameParameters(), now)


class TestUnlocking:
    """Tests for batch detection and the ledger."""

    def test_first_talk_unlocks(self, now):
        stats = update_achievement_stats(AchievementStats(), ActionType.TALK, now)
        new_ids = detect_new_unlocks(AchievementState(stats=stats), GameParameters(), now)
        assert new_ids == ["action_talk_1"]

    def test_check_and_unlock_is_idempotent(self, now):
        stats = update_achievement_stats(AchievementStats(), ActionType.TALK, now)
        state, first = check_and_unlock(AchievementState(stats=stats), GameParameters(), now)
        again, second = check_and_unlock(state, GameParameters(), now)

        assert first == ["action_talk_1"]
        assert second == []
        assert again.unlocked == state.unlocked

    def test_unlock_records_time_and_notification(self, now):
        state = unlock_achievements(AchievementState(), ["action_talk_1"], now)
        assert state.unlocked[0].unlocked_at == now
        assert state.pending_notifications == ("action_talk_1",)
        assert unlock_achievements(state, ["action_talk_1"], now) is state

    def test_count_meta_unlocks_in_same_batch(self, now):
        already = [a.id for a in ACHIEVEMENTS[1:10]]
        state = AchievementState(
            unlocked=_unlocked(*already),
            stats=AchievementStats(talk_count=1, total_actions=1),
        )
        assert detect_new_unlocks(state, GameParameters(), now) == ["action_talk_1", "collection_10"]

    def test_all_achievements(self, now):
        others = [a.id for a in ACHIEVEMENTS if a.id != "collection_all"]
        state = AchievementState(unlocked=_unlocked(*others))
        assert detect_new_unlocks(state, GameParameters(), now) == ["collection_all"]

    def test_custom_catalog(self, now):
        catalog = [a for a in ACHIEVEMENTS if a.id == "action_study_1"]
        stats = AchievementStats(study_count=3, talk_count=3)
        assert detect_new_unlocks(AchievementState(stats=stats), GameParameters(), now, catalog) == ["action_study_1"]

    def test_perfect_day(self, now):
        stats = AchievementStats()
        for action in ActionType:
            stats = update_achievement_stats(stats, action, now)
        assert "secret_perfectionist" in detect_new_unlocks(AchievementState(stats=stats), GameParameters(), now)


class TestNotificationsAndTitles:

    def test_notifications_fifo(self, now):
        state = unlock_achievements(AchievementState(), ["action_talk_1", "action_study_1"], now)
        state, first = consume_notification(state)
        state, second = consume_notification(state)
        state, third = consume_notification(state)
        assert (first, second, third) == ("action_talk_1", "action_study_1", None)
        assert is_unlocked(state, "action_talk_1")

    def test_title_requires_unlock(self, now):
        state = AchievementState(unlocked=_unlocked("action_talk_100"))
        assert select_title(state, "action_study_100") is state

        titled = select_title(state, "action_talk_100")
        assert titled.selected_title_id == "action_talk_100"
        assert select_title(titled, None).selected_title_id is None


class TestProgress:

    def test_action_progress(self):
        condition = ActionCountCondition(action=ActionType.TALK, count=10)
        assert calculate_progress(condition, AchievementStats(talk_count=5), GameParameters()) == 50

    def test_progress_capped(self):
        condition = ActionCountCondition(action=ActionType.TALK, count=10)
        assert calculate_progress(condition, AchievementStats(talk_count=25), GameParameters()) == 100

    def test_tier_progress_uses_intelligence(self):
        condition = TierReachCondition(tier=IntelligenceTier.TEEN)
        assert calculate_progress(condition, AchievementStats(), GameParameters(intelligence=25)) == 50

    def test_time_of_day_has_no_progress(self):
        condition = TimeOfDayCondition(start_hour=0, end_hour=3)
        assert calculate_progress(condition, AchievementStats(), GameParameters()) == 0

    def test_collection_progress(self):
        condition = get_achievement("collection_10").condition
        assert calculate_progress(condition, AchievementStats(), GameParameters(), unlocked_count=3) == 30
