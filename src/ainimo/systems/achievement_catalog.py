"""
Static achievement catalog.

Order matters for the meta achievements: count-based and all-achievement
entries sit last so a single evaluation pass can count the entries that
unlock ahead of them.
"""

from ..state.schema import ActionType, IntelligenceTier
from ..state.schemas.achievement import (
    AchievementCategory as Category,
    AchievementDefinition,
    AchievementRarity as Rarity,
    AchievementCountCondition,
    ActionCountCondition,
    AllAchievementsCondition,
    AllActionsInDayCondition,
    AllStatsReachCondition,
    LevelReachCondition,
    LoginStreakCondition,
    MessageCountCondition,
    PlayDaysCondition,
    RestLimitHitCondition,
    StatMaxCondition,
    StatReachCondition,
    TierReachCondition,
    TimeOfDayCondition,
    TotalActionsCondition,
)


def _action(achievement_id: str, action: ActionType, count: int, rarity: Rarity,
            name: str, description: str, title: str | None = None) -> AchievementDefinition:
    return AchievementDefinition(
        id=achievement_id,
        category=Category.ACTION,
        rarity=rarity,
        name=name,
        description=description,
        title=title,
        condition=ActionCountCondition(action=action, count=count),
    )


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    # --- Actions -------------------------------------------------------------
    _action("action_talk_1", ActionType.TALK, 1, Rarity.COMMON, "First Words", "Talk for the first time."),
    _action("action_talk_10", ActionType.TALK, 10, Rarity.COMMON, "Getting Acquainted", "Talk 10 times."),
    _action("action_talk_50", ActionType.TALK, 50, Rarity.UNCOMMON, "Good Listener", "Talk 50 times."),
    _action("action_talk_100", ActionType.TALK, 100, Rarity.RARE, "Chatterbox", "Talk 100 times.", "Chatterbox"),
    _action("action_study_1", ActionType.STUDY, 1, Rarity.COMMON, "First Lesson", "Study for the first time."),
    _action("action_study_10", ActionType.STUDY, 10, Rarity.COMMON, "Homework Done", "Study 10 times."),
    _action("action_study_50", ActionType.STUDY, 50, Rarity.UNCOMMON, "Honor Student", "Study 50 times."),
    _action("action_study_100", ActionType.STUDY, 100, Rarity.RARE, "Bookworm", "Study 100 times.", "Bookworm"),
    _action("action_play_1", ActionType.PLAY, 1, Rarity.COMMON, "Playtime", "Play for the first time."),
    _action("action_play_10", ActionType.PLAY, 10, Rarity.COMMON, "Having Fun", "Play 10 times."),
    _action("action_play_50", ActionType.PLAY, 50, Rarity.UNCOMMON, "Game On", "Play 50 times."),
    _action("action_play_100", ActionType.PLAY, 100, Rarity.RARE, "Playmate", "Play 100 times.", "Playmate"),
    _action("action_rest_1", ActionType.REST, 1, Rarity.COMMON, "Power Nap", "Rest for the first time."),
    _action("action_rest_10", ActionType.REST, 10, Rarity.COMMON, "Well Rested", "Rest 10 times."),
    _action("action_rest_50", ActionType.REST, 50, Rarity.UNCOMMON, "Sleepyhead", "Rest 50 times.", "Sleepyhead"),
    AchievementDefinition(
        id="action_total_100", category=Category.ACTION, rarity=Rarity.UNCOMMON,
        name="Daily Routine", description="Perform 100 actions in total.",
        condition=TotalActionsCondition(count=100),
    ),
    AchievementDefinition(
        id="action_total_500", category=Category.ACTION, rarity=Rarity.RARE,
        name="Dedicated", description="Perform 500 actions in total.",
        condition=TotalActionsCondition(count=500),
    ),
    AchievementDefinition(
        id="action_total_1000", category=Category.ACTION, rarity=Rarity.EPIC,
        name="Devoted Keeper", description="Perform 1000 actions in total.", title="Devoted Keeper",
        condition=TotalActionsCondition(count=1000),
    ),

    # --- Stats ---------------------------------------------------------------
    AchievementDefinition(
        id="stat_int_25", category=Category.STATS, rarity=Rarity.COMMON,
        name="Curious Mind", description="Reach 25 intelligence.",
        condition=StatReachCondition(stat="intelligence", value=25),
    ),
    AchievementDefinition(
        id="stat_int_50", category=Category.STATS, rarity=Rarity.UNCOMMON,
        name="Quick Learner", description="Reach 50 intelligence.",
        condition=StatReachCondition(stat="intelligence", value=50),
    ),
    AchievementDefinition(
        id="stat_int_75", category=Category.STATS, rarity=Rarity.RARE,
        name="Bright Spark", description="Reach 75 intelligence.",
        condition=StatReachCondition(stat="intelligence", value=75),
    ),
    AchievementDefinition(
        id="stat_int_100", category=Category.STATS, rarity=Rarity.EPIC,
        name="Genius", description="Max out intelligence.", title="Genius",
        condition=StatMaxCondition(stat="intelligence"),
    ),
    AchievementDefinition(
        id="stat_mem_50", category=Category.STATS, rarity=Rarity.UNCOMMON,
        name="Good Memory", description="Reach 50 memory.",
        condition=StatReachCondition(stat="memory", value=50),
    ),
    AchievementDefinition(
        id="stat_mem_100", category=Category.STATS, rarity=Rarity.EPIC,
        name="Total Recall", description="Max out memory.", title="Archivist",
        condition=StatMaxCondition(stat="memory"),
    ),
    AchievementDefinition(
        id="stat_friend_80", category=Category.STATS, rarity=Rarity.UNCOMMON,
        name="Close Friends", description="Reach 80 friendliness.",
        condition=StatReachCondition(stat="friendliness", value=80),
    ),
    AchievementDefinition(
        id="stat_friend_100", category=Category.STATS, rarity=Rarity.EPIC,
        name="Best Friends Forever", description="Max out friendliness.", title="Best Friend",
        condition=StatMaxCondition(stat="friendliness"),
    ),
    AchievementDefinition(
        id="stat_all_50", category=Category.STATS, rarity=Rarity.RARE,
        name="Well Rounded", description="Reach 50 in every stat.",
        condition=AllStatsReachCondition(value=50),
    ),
    AchievementDefinition(
        id="stat_all_80", category=Category.STATS, rarity=Rarity.EPIC,
        name="Renaissance", description="Reach 80 in every stat.", title="Renaissance",
        condition=AllStatsReachCondition(value=80),
    ),

    # --- Milestones ----------------------------------------------------------
    AchievementDefinition(
        id="milestone_lv5", category=Category.MILESTONE, rarity=Rarity.COMMON,
        name="Growing Up", description="Reach level 5.",
        condition=LevelReachCondition(level=5),
    ),
    AchievementDefinition(
        id="milestone_lv10", category=Category.MILESTONE, rarity=Rarity.UNCOMMON,
        name="Double Digits", description="Reach level 10.",
        condition=LevelReachCondition(level=10),
    ),
    AchievementDefinition(
        id="milestone_lv25", category=Category.MILESTONE, rarity=Rarity.RARE,
        name="Seasoned", description="Reach level 25.",
        condition=LevelReachCondition(level=25),
    ),
    AchievementDefinition(
        id="milestone_lv50", category=Category.MILESTONE, rarity=Rarity.EPIC,
        name="Veteran", description="Reach level 50.", title="Veteran",
        condition=LevelReachCondition(level=50),
    ),
    AchievementDefinition(
        id="milestone_lv100", category=Category.MILESTONE, rarity=Rarity.LEGENDARY,
        name="Legend", description="Reach the maximum level.", title="Legend",
        condition=LevelReachCondition(level=100),
    ),
    AchievementDefinition(
        id="milestone_tier_child", category=Category.MILESTONE, rarity=Rarity.COMMON,
        name="First Steps", description="Grow into a child.",
        condition=TierReachCondition(tier=IntelligenceTier.CHILD),
    ),
    AchievementDefinition(
        id="milestone_tier_teen", category=Category.MILESTONE, rarity=Rarity.UNCOMMON,
        name="Teenage Years", description="Grow into a teen.",
        condition=TierReachCondition(tier=IntelligenceTier.TEEN),
    ),
    AchievementDefinition(
        id="milestone_tier_adult", category=Category.MILESTONE, rarity=Rarity.RARE,
        name="All Grown Up", description="Grow into an adult.", title="Mentor",
        condition=TierReachCondition(tier=IntelligenceTier.ADULT),
    ),
    AchievementDefinition(
        id="chat_messages_1", category=Category.MILESTONE, rarity=Rarity.COMMON,
        name="Hello There", description="Send your first message.",
        condition=MessageCountCondition(count=1),
    ),
    AchievementDefinition(
        id="chat_messages_50", category=Category.MILESTONE, rarity=Rarity.UNCOMMON,
        name="Pen Pal", description="Send 50 messages.",
        condition=MessageCountCondition(count=50),
    ),
    AchievementDefinition(
        id="chat_messages_200", category=Category.MILESTONE, rarity=Rarity.RARE,
        name="Storyteller", description="Send 200 messages.", title="Storyteller",
        condition=MessageCountCondition(count=200),
    ),

    # --- Streaks -------------------------------------------------------------
    AchievementDefinition(
        id="streak_login_3", category=Category.STREAK, rarity=Rarity.COMMON,
        name="Regular Visitor", description="Visit 3 days in a row.",
        condition=LoginStreakCondition(days=3),
    ),
    AchievementDefinition(
        id="streak_login_7", category=Category.STREAK, rarity=Rarity.UNCOMMON,
        name="Weekly Habit", description="Visit 7 days in a row.",
        condition=LoginStreakCondition(days=7),
    ),
    AchievementDefinition(
        id="streak_login_30", category=Category.STREAK, rarity=Rarity.EPIC,
        name="Unbreakable", description="Visit 30 days in a row.", title="Faithful",
        condition=LoginStreakCondition(days=30),
    ),
    AchievementDefinition(
        id="days_played_7", category=Category.STREAK, rarity=Rarity.COMMON,
        name="One Week Together", description="Play on 7 different days.",
        condition=PlayDaysCondition(days=7),
    ),
    AchievementDefinition(
        id="days_played_30", category=Category.STREAK, rarity=Rarity.RARE,
        name="One Month Together", description="Play on 30 different days.",
        condition=PlayDaysCondition(days=30),
    ),
    AchievementDefinition(
        id="days_played_100", category=Category.STREAK, rarity=Rarity.EPIC,
        name="Hundred Days", description="Play on 100 different days.", title="Old Friend",
        condition=PlayDaysCondition(days=100),
    ),

    # --- Secrets -------------------------------------------------------------
    AchievementDefinition(
        id="secret_night_owl", category=Category.SECRET, rarity=Rarity.RARE, is_secret=True,
        name="Night Owl", description="Keep your companion company after midnight.", title="Night Owl",
        condition=TimeOfDayCondition(start_hour=0, end_hour=3),
    ),
    AchievementDefinition(
        id="secret_early_bird", category=Category.SECRET, rarity=Rarity.RARE, is_secret=True,
        name="Early Bird", description="Say good morning before 7am.", title="Early Bird",
        condition=TimeOfDayCondition(start_hour=5, end_hour=6),
    ),
    AchievementDefinition(
        id="secret_perfectionist", category=Category.SECRET, rarity=Rarity.RARE, is_secret=True,
        name="Perfectionist", description="Talk, study, play and rest in a single day.",
        condition=AllActionsInDayCondition(),
    ),
    AchievementDefinition(
        id="secret_nap_enthusiast", category=Category.SECRET, rarity=Rarity.UNCOMMON, is_secret=True,
        name="Nap Enthusiast", description="Use up every rest on 3 different days.",
        condition=RestLimitHitCondition(days=3),
    ),

    # --- Collection (meta, keep last) ---------------------------------------
    AchievementDefinition(
        id="collection_10", category=Category.COLLECTION, rarity=Rarity.UNCOMMON,
        name="Collector", description="Unlock 10 achievements.",
        condition=AchievementCountCondition(count=10),
    ),
    AchievementDefinition(
        id="collection_25", category=Category.COLLECTION, rarity=Rarity.RARE,
        name="Trophy Case", description="Unlock 25 achievements.",
        condition=AchievementCountCondition(count=25),
    ),
    AchievementDefinition(
        id="collection_all", category=Category.COLLECTION, rarity=Rarity.LEGENDARY,
        name="Completionist", description="Unlock every other achievement.", title="Completionist",
        condition=AllAchievementsCondition(),
    ),
)

_BY_ID: dict[str, AchievementDefinition] = {a.id: a for a in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> AchievementDefinition | None:
    return _BY_ID.get(achievement_id)
