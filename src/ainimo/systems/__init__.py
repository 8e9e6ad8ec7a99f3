"""
Progression engine for Ainimo.

Pure reducers over the save models: each function takes state (and an
explicit ``now`` where time matters) and returns new state. The manager
in ``ainimo.state.manager`` commits their results.
"""

from .attributes import (
    apply_passive_decay,
    clamp_stat,
    get_mood_type,
    get_tier,
    level_up,
    remaining_rest_count,
    xp_gain,
)
from .actions import ACTION_EFFECTS, can_perform_action, process_action, update_parameters
from .personality import (
    compute_personality_state,
    process_personality_action,
    should_lock_personality,
)
from .achievements import (
    calculate_progress,
    check_and_unlock,
    consume_notification,
    detect_new_unlocks,
    unlock_achievements,
    update_achievement_stats,
    update_login_streak,
)
from .minigames import (
    MINI_GAME_CONFIGS,
    can_play_game,
    calculate_rewards,
    create_game_result,
    roll_item_drop,
    update_mini_game_state,
)

__all__ = [
    # Attributes & decay
    "apply_passive_decay",
    "clamp_stat",
    "get_mood_type",
    "get_tier",
    "level_up",
    "remaining_rest_count",
    "xp_gain",
    # Actions
    "ACTION_EFFECTS",
    "can_perform_action",
    "process_action",
    "update_parameters",
    # Personality
    "compute_personality_state",
    "process_personality_action",
    "should_lock_personality",
    # Achievements
    "calculate_progress",
    "check_and_unlock",
    "consume_notification",
    "detect_new_unlocks",
    "unlock_achievements",
    "update_achievement_stats",
    "update_login_streak",
    # Mini-games
    "MINI_GAME_CONFIGS",
    "can_play_game",
    "calculate_rewards",
    "create_game_result",
    "roll_item_drop",
    "update_mini_game_state",
]
