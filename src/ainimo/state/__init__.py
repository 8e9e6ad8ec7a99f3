"""State models, storage and events for Ainimo saves.

The manager lives in ``ainimo.state.manager``; it depends on the engine in
``ainimo.systems``, which in turn imports the models from here.
"""

from .schema import (
    SCHEMA_VERSION,
    AchievementState,
    AchievementStats,
    ActionType,
    AffinityKey,
    AffinityPoints,
    ChatMessage,
    GameParameters,
    GameState,
    IntelligenceTier,
    Inventory,
    ItemCategory,
    ItemRarity,
    MiniGameScore,
    MiniGameState,
    MiniGameType,
    MoodType,
    PersonalityData,
    PersonalityType,
    RestLimitState,
    new_game_state,
)
from .store import JsonSaveStore, MemorySaveStore, SaveStore, migrate_save, restore_game_state
from .event_bus import (
    EventBus,
    EventType,
    GameEvent,
    get_event_bus,
    reset_event_bus,
)

__all__ = [
    # Schema
    "SCHEMA_VERSION",
    "AchievementState",
    "AchievementStats",
    "ActionType",
    "AffinityKey",
    "AffinityPoints",
    "ChatMessage",
    "GameParameters",
    "GameState",
    "IntelligenceTier",
    "Inventory",
    "ItemCategory",
    "ItemRarity",
    "MiniGameScore",
    "MiniGameState",
    "MiniGameType",
    "MoodType",
    "PersonalityData",
    "PersonalityType",
    "RestLimitState",
    "new_game_state",
    # Store
    "SaveStore",
    "JsonSaveStore",
    "MemorySaveStore",
    "migrate_save",
    "restore_game_state",
    # Events
    "EventBus",
    "EventType",
    "GameEvent",
    "get_event_bus",
    "reset_event_bus",
]
