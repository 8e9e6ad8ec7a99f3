"""
Achievement engine.

Keeps the statistics achievements are judged on, evaluates the condition
taxonomy against (stats, attributes), and maintains the append-only unlock
ledger and the FIFO notification queue.

The two meta conditions ("N unlocked", "all others unlocked") are judged
against the batch being built in the same pass, so an achievement that
completes a collection can unlock alongside it.
"""

from __future__ import annotations

from typing import Callable, Iterable

from ..clock import local_date, local_hour, previous_date, resolve
from ..state.schema import (
    TIER_ORDER,
    AchievementState,
    AchievementStats,
    ActionType,
    GameParameters,
    UnlockedAchievement,
)
from ..state.schemas.achievement import AchievementCondition, AchievementDefinition
from .achievement_catalog import ACHIEVEMENTS
from .attributes import STAT_MAX, TIER_THRESHOLDS, get_tier, round_half_up


ACTION_COUNT_FIELDS: dict[ActionType, str] = {
    ActionType.TALK: "talk_count",
    ActionType.STUDY: "study_count",
    ActionType.PLAY: "play_count",
    ActionType.REST: "rest_count",
}

ALL_STATS = ("intelligence", "memory", "friendliness", "energy")


# ─── Stats updates ──────────────────────────────────────────

def update_achievement_stats(
    stats: AchievementStats,
    action: ActionType,
    now: int | None = None,
) -> AchievementStats:
    """Count one completed action, including today's distinct action set."""
    today = local_date(resolve(now))
    today_actions = stats.today_actions if stats.today_actions_date == today else ()
    if action not in today_actions:
        today_actions = today_actions + (action,)

    count_field = ACTION_COUNT_FIELDS[action]
    return stats.model_copy(update={
        count_field: getattr(stats, count_field) + 1,
        "total_actions": stats.total_actions + 1,
        "today_actions": today_actions,
        "today_actions_date": today,
    })


def update_message_stats(stats: AchievementStats) -> AchievementStats:
    return stats.model_copy(update={"messages_sent": stats.messages_sent + 1})


def update_rest_limit_hit_stats(stats: AchievementStats, now: int | None = None) -> AchievementStats:
    """Count a day on which every rest was used. Once per calendar day."""
    today = local_date(resolve(now))
    if stats.last_rest_limit_hit_date == today:
        return stats
    return stats.model_copy(update={
        "rest_limit_hit_days": stats.rest_limit_hit_days + 1,
        "last_rest_limit_hit_date": today,
    })


def update_login_streak(stats: AchievementStats, now: int | None = None) -> AchievementStats:
    """
    Record today's visit.

    Same day is a no-op. A visit the day after the last one extends the
    streak; any longer gap restarts it at 1.
    """
    today = local_date(resolve(now))
    if stats.last_play_date == today:
        return stats

    if stats.last_play_date and stats.last_play_date == previous_date(today):
        streak = stats.current_login_streak + 1
    else:
        streak = 1

    return stats.model_copy(update={
        "current_login_streak": streak,
        "max_login_streak": max(stats.max_login_streak, streak),
        "total_play_days": stats.total_play_days + 1,
        "last_play_date": today,
    })


# ─── Condition evaluation ───────────────────────────────────

def _tier_reached(condition, stats, params, now) -> bool:
    current = TIER_ORDER.index(get_tier(params.intelligence))
    return current >= TIER_ORDER.index(condition.tier)


def _time_of_day(condition, stats, params, now) -> bool:
    hour = local_hour(now)
    return condition.start_hour <= hour <= condition.end_hour


def _all_actions_in_day(condition, stats, params, now) -> bool:
    if stats.today_actions_date != local_date(now):
        return False
    return all(action in stats.today_actions for action in ActionType)


# Each check receives (condition, stats, params, now)
_CHECKS: dict[str, Callable[..., bool]] = {
    "action_count": lambda c, s, p, n: getattr(s, ACTION_COUNT_FIELDS[c.action]) >= c.count,
    "total_actions": lambda c, s, p, n: s.total_actions >= c.count,
    "stat_reach": lambda c, s, p, n: getattr(p, c.stat) >= c.value,
    "stat_max": lambda c, s, p, n: getattr(p, c.stat) >= STAT_MAX,
    "all_stats_reach": lambda c, s, p, n: all(getattr(p, stat) >= c.value for stat in ALL_STATS),
    "level_reach": lambda c, s, p, n: p.level >= c.level,
    "tier_reach": _tier_reached,
    "message_count": lambda c, s, p, n: s.messages_sent >= c.count,
    "login_streak": lambda c, s, p, n: s.current_login_streak >= c.days,
    "play_days": lambda c, s, p, n: s.total_play_days >= c.days,
    "rest_limit_hit": lambda c, s, p, n: s.rest_limit_hit_days >= c.days,
    "time_of_day": _time_of_day,
    "all_actions_in_day": _all_actions_in_day,
}


def check_condition(
    condition: AchievementCondition,
    stats: AchievementStats,
    params: GameParameters,
    now: int | None = None,
) -> bool:
    """
    Judge a non-meta condition.

    Meta conditions need the unlock batch and are handled by
    ``detect_new_unlocks``; they and unknown kinds are False here.
    """
    check = _CHECKS.get(getattr(condition, "type", None))
    if check is None:
        return False
    return check(condition, stats, params, resolve(now))


def detect_new_unlocks(
    state: AchievementState,
    params: GameParameters,
    now: int | None = None,
    catalog: Iterable[AchievementDefinition] = ACHIEVEMENTS,
) -> list[str]:
    """Ids that qualify now and are not yet unlocked, in catalog order."""
    now = resolve(now)
    catalog = list(catalog)
    unlocked = state.unlocked_ids
    new_unlocks: list[str] = []

    for achievement in catalog:
        if achievement.id in unlocked:
            continue

        condition = achievement.condition
        if condition.type == "achievement_count":
            qualifies = len(unlocked) + len(new_unlocks) >= condition.count
        elif condition.type == "all_achievements":
            qualifies = all(
                other.id in unlocked or other.id in new_unlocks
                for other in catalog
                if other.id != achievement.id
            )
        else:
            qualifies = check_condition(condition, state.stats, params, now)

        if qualifies:
            new_unlocks.append(achievement.id)

    return new_unlocks


def unlock_achievements(
    state: AchievementState,
    achievement_ids: Iterable[str],
    now: int | None = None,
) -> AchievementState:
    """Append to the ledger and queue notifications. Known ids are skipped."""
    now = resolve(now)
    seen = state.unlocked_ids
    fresh: list[str] = []
    for achievement_id in achievement_ids:
        if achievement_id not in seen:
            seen.add(achievement_id)
            fresh.append(achievement_id)

    if not fresh:
        return state

    return state.model_copy(update={
        "unlocked": state.unlocked + tuple(
            UnlockedAchievement(id=achievement_id, unlocked_at=now) for achievement_id in fresh
        ),
        "pending_notifications": state.pending_notifications + tuple(fresh),
    })


def check_and_unlock(
    state: AchievementState,
    params: GameParameters,
    now: int | None = None,
) -> tuple[AchievementState, list[str]]:
    """Detect and unlock in one step. Returns (state, newly unlocked ids)."""
    now = resolve(now)
    new_ids = detect_new_unlocks(state, params, now)
    return unlock_achievements(state, new_ids, now), new_ids


# ─── Ledger queries ─────────────────────────────────────────

def consume_notification(state: AchievementState) -> tuple[AchievementState, str | None]:
    """Pop the oldest pending notification. Empty queue -> (state, None)."""
    if not state.pending_notifications:
        return state, None
    head, *rest = state.pending_notifications
    return state.model_copy(update={"pending_notifications": tuple(rest)}), head


def is_unlocked(state: AchievementState, achievement_id: str) -> bool:
    return achievement_id in state.unlocked_ids


def select_title(state: AchievementState, title_id: str | None) -> AchievementState:
    """Show an unlocked achievement's title; None clears it."""
    if title_id is not None and not is_unlocked(state, title_id):
        return state
    return state.model_copy(update={"selected_title_id": title_id})


# ─── Progress ───────────────────────────────────────────────

def _progress_pair(condition, stats: AchievementStats, params: GameParameters,
                   unlocked_count: int) -> tuple[float, float] | None:
    kind = condition.type
    if kind == "action_count":
        return getattr(stats, ACTION_COUNT_FIELDS[condition.action]), condition.count
    if kind == "total_actions":
        return stats.total_actions, condition.count
    if kind == "stat_reach":
        return getattr(params, condition.stat), condition.value
    if kind == "stat_max":
        return getattr(params, condition.stat), STAT_MAX
    if kind == "all_stats_reach":
        return min(getattr(params, stat) for stat in ALL_STATS), condition.value
    if kind == "level_reach":
        return params.level, condition.level
    if kind == "tier_reach":
        return params.intelligence, dict(TIER_THRESHOLDS)[condition.tier]
    if kind == "message_count":
        return stats.messages_sent, condition.count
    if kind == "login_streak":
        return stats.current_login_streak, condition.days
    if kind == "play_days":
        return stats.total_play_days, condition.days
    if kind == "rest_limit_hit":
        return stats.rest_limit_hit_days, condition.days
    if kind == "all_actions_in_day":
        return len(stats.today_actions), len(ActionType)
    if kind == "achievement_count":
        return unlocked_count, condition.count
    return None


def calculate_progress(
    condition: AchievementCondition,
    stats: AchievementStats,
    params: GameParameters,
    unlocked_count: int = 0,
) -> int:
    """Display-only percentage towards a condition (0-100)."""
    pair = _progress_pair(condition, stats, params, unlocked_count)
    if pair is None:
        return 0
    current, target = pair
    if target <= 0:
        return 100
    return round_half_up(min(100.0, current / target * 100))
