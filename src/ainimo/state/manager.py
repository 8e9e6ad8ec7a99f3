"""
Companion save lifecycle and orchestration.

The engine in ``ainimo.systems`` only computes new state. The manager owns
the committed ``GameState`` and the active mini-game session, runs the
reducers in order, persists the result through a SaveStore, and publishes
what changed on the event bus.
"""

import logging
import random
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ..clock import now_ms
from ..systems import items as item_system
from ..systems.achievement_catalog import get_achievement
from ..systems.achievements import (
    check_and_unlock,
    consume_notification,
    select_title,
    update_achievement_stats,
    update_login_streak,
    update_message_stats,
    update_rest_limit_hit_stats,
)
from ..systems.actions import process_action
from ..systems.attributes import (
    ENERGY_THRESHOLD,
    clamp_stat,
    get_mood_type,
    get_tier,
    grant_xp,
    remaining_rest_count,
    with_mood,
)
from ..systems.memory_game import flip_card, reset_flipped_cards
from ..systems.minigames import (
    MINI_GAME_CONFIGS,
    can_play_game,
    create_game_result,
    init_session,
    score_session,
    session_game_type,
    update_mini_game_state,
)
from ..systems.personality import compute_personality_state, process_personality_action
from ..systems.puzzle_game import move_tile
from ..systems.quiz_game import answer_question, timeout_question
from ..systems.rhythm_game import (
    expire_rhythm_notes,
    hit_rhythm_note,
    miss_rhythm_note,
    start_rhythm_game,
)
from .event_bus import EventType, get_event_bus
from .schema import (
    ActionType,
    ChatMessage,
    GameParameters,
    GameState,
    IntelligenceTier,
    ItemCategory,
    MiniGameType,
    MoodType,
    PersonalityType,
    new_game_state,
)
from .schemas.achievement import AchievementDefinition
from .schemas.minigame import (
    CanPlayResult,
    GameResult,
    MemorySession,
    PuzzleSession,
    QuizSession,
    RhythmSession,
)
from .schemas.personality import PersonalityState
from .store import JsonSaveStore, SaveStore

logger = logging.getLogger(__name__)

MAX_MESSAGES = 50
MAX_MESSAGE_LENGTH = 500

# Response-generation collaborator: (text, parameters, tier, personality) -> reply
Responder = Callable[[str, GameParameters, IntelligenceTier, PersonalityState], str]

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


class NoActiveSaveError(RuntimeError):
    """Raised when an operation needs a loaded save and none is loaded."""


@dataclass
class ActionOutcome:
    """What one player action did to the save."""
    action: ActionType
    succeeded: bool
    reason: str | None = None  # "energy" or "rest_limit" when rejected
    leveled_up: bool = False
    new_achievements: list[str] = field(default_factory=list)
    personality_locked: PersonalityType | None = None


@dataclass
class ChatResult:
    outcome: ActionOutcome
    reply: str | None = None
    new_achievements: list[str] = field(default_factory=list)


def clean_user_text(text: str) -> str:
    """Normalize chat input: NFKC, no control characters, single spaces, bounded length."""
    text = unicodedata.normalize("NFKC", text)
    text = _CONTROL_CHARS.sub("", text)
    text = " ".join(text.split())
    return text[:MAX_MESSAGE_LENGTH]


class CompanionManager:
    """
    Manages one companion save at a time.

    Storage is delegated to a SaveStore implementation:
    - JsonSaveStore for production (file-based)
    - MemorySaveStore for testing (in-memory)

    ``clock`` and ``rng`` can be injected so tests are deterministic.
    """

    def __init__(
        self,
        store: SaveStore | Path | str = "saves",
        slot: str = "default",
        clock: Callable[[], int] | None = None,
        rng: random.Random | None = None,
        auto_save: bool = True,
    ):
        if isinstance(store, (Path, str)):
            self.store = JsonSaveStore(store)
        else:
            self.store = store

        self.slot = slot
        self.clock = clock or now_ms
        self.rng = rng or random.Random()
        self.auto_save = auto_save

        self.current: GameState | None = None
        self.active_game: MemorySession | RhythmSession | PuzzleSession | QuizSession | None = None

    # -------------------------------------------------------------------------
    # Save Lifecycle
    # -------------------------------------------------------------------------

    def new_game(self, slot: str | None = None) -> GameState:
        """Start a fresh save in ``slot`` and make it current."""
        if slot is not None:
            self.slot = slot
        self.active_game = None
        self._commit(new_game_state(self.clock()))
        logger.info(f"Created new save in slot {self.slot}")
        get_event_bus().emit(EventType.SAVE_CREATED, slot=self.slot)
        self.login()
        return self.current

    def load(self, slot: str | None = None) -> GameState | None:
        """Load a save and record today's visit. None if it does not exist."""
        if slot is not None:
            self.slot = slot
        state = self.store.load(self.slot)
        if state is None:
            logger.info(f"No save found in slot {self.slot}")
            return None

        self.current = state
        self.active_game = None
        logger.info(f"Loaded save from slot {self.slot} (level {state.parameters.level})")
        get_event_bus().emit(EventType.SAVE_LOADED, slot=self.slot, level=state.parameters.level)
        self.login()
        return self.current

    def save(self) -> bool:
        """Persist the current save. False when nothing is loaded."""
        if self.current is None:
            return False
        self.store.save(self.slot, self.current)
        get_event_bus().emit(EventType.SAVE_SAVED, slot=self.slot)
        return True

    def delete(self, slot: str) -> bool:
        deleted = self.store.delete(slot)
        if deleted and slot == self.slot:
            self.current = None
            self.active_game = None
        return deleted

    def list_saves(self) -> list[dict]:
        return self.store.list_all()

    def _require(self) -> GameState:
        if self.current is None:
            raise NoActiveSaveError("No save loaded - call new_game() or load() first")
        return self.current

    def _commit(self, state: GameState) -> None:
        self.current = state
        if self.auto_save:
            self.save()

    # -------------------------------------------------------------------------
    # Derived read-outs
    # -------------------------------------------------------------------------

    @property
    def tier(self) -> IntelligenceTier:
        return get_tier(self._require().parameters.intelligence)

    @property
    def mood_type(self) -> MoodType:
        return get_mood_type(self._require().parameters.mood)

    @property
    def personality_state(self) -> PersonalityState:
        return compute_personality_state(self._require().personality)

    @property
    def remaining_rests(self) -> int:
        return remaining_rest_count(self._require().rest_limit, self.clock())

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def perform(self, action: ActionType | str) -> ActionOutcome:
        """
        Run one player action through the whole pipeline.

        decay -> action -> personality -> achievement stats -> unlocks.
        A rejected action leaves the save untouched.
        """
        action = ActionType(action)
        state = self._require()
        now = self.clock()

        personality = compute_personality_state(state.personality)
        result = process_action(state, action, personality, now)

        if result is state:
            reason = "rest_limit" if action == ActionType.REST else "energy"
            logger.debug(f"Rejected {action.value}: {reason}")
            get_event_bus().emit(EventType.ACTION_REJECTED, slot=self.slot, action=action.value, reason=reason)
            return ActionOutcome(action=action, succeeded=False, reason=reason)

        personality_data = process_personality_action(result.personality, action, now)
        newly_locked = None
        if state.personality.locked_type is None and personality_data.locked_type is not None:
            newly_locked = personality_data.locked_type

        stats = update_achievement_stats(result.achievements.stats, action, now)
        if action == ActionType.REST and remaining_rest_count(result.rest_limit, now) == 0:
            stats = update_rest_limit_hit_stats(stats, now)
        achievements, new_ids = check_and_unlock(
            result.achievements.model_copy(update={"stats": stats}),
            result.parameters,
            now,
        )

        result = result.model_copy(update={
            "personality": personality_data,
            "achievements": achievements,
        })
        self._commit(result)

        outcome = ActionOutcome(
            action=action,
            succeeded=True,
            leveled_up=result.parameters.level > state.parameters.level,
            new_achievements=new_ids,
            personality_locked=newly_locked,
        )
        self._announce_action(outcome, result)
        return outcome

    def _announce_action(self, outcome: ActionOutcome, state: GameState) -> None:
        bus = get_event_bus()
        bus.emit(
            EventType.ACTION_PERFORMED,
            slot=self.slot,
            action=outcome.action.value,
            parameters=state.parameters.model_dump(),
        )
        if outcome.leveled_up:
            logger.info(f"Level up: {state.parameters.level}")
            bus.emit(EventType.LEVEL_UP, slot=self.slot, level=state.parameters.level)
        if outcome.personality_locked is not None:
            logger.info(f"Personality locked as {outcome.personality_locked.value}")
            bus.emit(EventType.PERSONALITY_LOCKED, slot=self.slot, personality=outcome.personality_locked.value)
        self._announce_unlocks(outcome.new_achievements)

    def _announce_unlocks(self, achievement_ids: list[str]) -> None:
        for achievement_id in achievement_ids:
            logger.info(f"Achievement unlocked: {achievement_id}")
            get_event_bus().emit(EventType.ACHIEVEMENT_UNLOCKED, slot=self.slot, achievement_id=achievement_id)

    def chat(self, text: str, responder: Responder | None = None) -> ChatResult | None:
        """
        Send a chat message.

        Counts as a talk action when the companion has the energy for it.
        The reply, if a responder is given, sees the post-action snapshot.
        Returns None for empty input.
        """
        cleaned = clean_user_text(text)
        if not cleaned:
            return None

        outcome = self.perform(ActionType.TALK)
        state = self._require()
        now = self.clock()

        stats = update_message_stats(state.achievements.stats)
        achievements, new_ids = check_and_unlock(
            state.achievements.model_copy(update={"stats": stats}),
            state.parameters,
            now,
        )

        messages = state.messages + (ChatMessage(speaker="user", text=cleaned, timestamp=now),)
        reply = None
        if responder is not None:
            reply = responder(
                cleaned,
                state.parameters,
                get_tier(state.parameters.intelligence),
                compute_personality_state(state.personality),
            )
            messages += (ChatMessage(speaker="companion", text=reply, timestamp=now),)

        self._commit(state.model_copy(update={
            "achievements": achievements,
            "messages": messages[-MAX_MESSAGES:],
        }))
        self._announce_unlocks(new_ids)
        return ChatResult(outcome=outcome, reply=reply, new_achievements=new_ids)

    def login(self) -> list[str]:
        """Record today's visit for streaks. Returns newly unlocked ids."""
        state = self._require()
        now = self.clock()
        stats = update_login_streak(state.achievements.stats, now)
        if stats is state.achievements.stats:
            return []

        achievements, new_ids = check_and_unlock(
            state.achievements.model_copy(update={"stats": stats}),
            state.parameters,
            now,
        )
        self._commit(state.model_copy(update={"achievements": achievements}))
        self._announce_unlocks(new_ids)
        return new_ids

    # -------------------------------------------------------------------------
    # Achievements & titles
    # -------------------------------------------------------------------------

    def consume_notification(self) -> AchievementDefinition | None:
        """Pop the oldest unseen unlock, or None when there is nothing new."""
        state = self._require()
        achievements, achievement_id = consume_notification(state.achievements)
        if achievement_id is None:
            return None
        self._commit(state.model_copy(update={"achievements": achievements}))
        return get_achievement(achievement_id)

    def select_title(self, achievement_id: str | None) -> bool:
        state = self._require()
        achievements = select_title(state.achievements, achievement_id)
        if achievements is state.achievements:
            return False
        self._commit(state.model_copy(update={"achievements": achievements}))
        return True

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def _update_inventory(self, inventory) -> bool:
        state = self._require()
        if inventory is None or inventory is state.inventory:
            return False
        self._commit(state.model_copy(update={"inventory": inventory}))
        return True

    def equip(self, item_id: str) -> bool:
        return self._update_inventory(item_system.equip_item(self._require().inventory, item_id))

    def unequip(self, category: ItemCategory | str) -> bool:
        return self._update_inventory(
            item_system.unequip_item(self._require().inventory, ItemCategory(category))
        )

    def buy_item(self, item_id: str) -> bool:
        return self._update_inventory(
            item_system.buy_item(self._require().inventory, item_id, self.clock())
        )

    # -------------------------------------------------------------------------
    # Mini-games
    # -------------------------------------------------------------------------

    def can_play(self, game_type: MiniGameType | str) -> CanPlayResult:
        state = self._require()
        game_type = MiniGameType(game_type)
        return can_play_game(
            game_type,
            state.parameters.energy,
            state.mini_games.score_for(game_type).last_played_at,
            self.clock(),
        )

    def start_game(self, game_type: MiniGameType | str):
        """
        Spend the energy cost and open a session at the current tier.

        Returns None if the gate refuses or a game is already running.
        """
        game_type = MiniGameType(game_type)
        if self.active_game is not None:
            logger.debug(f"Cannot start {game_type.value}: a game is already running")
            return None
        gate = self.can_play(game_type)
        if not gate.can_play:
            logger.debug(f"Cannot start {game_type.value}: {gate.reason}")
            return None

        state = self._require()
        now = self.clock()
        params = state.parameters
        params = with_mood(params.model_copy(update={
            "energy": clamp_stat(params.energy - MINI_GAME_CONFIGS[game_type].energy_cost),
        }))
        self._commit(state.model_copy(update={"parameters": params}))

        self.active_game = init_session(game_type, get_tier(params.intelligence), now, self.rng)
        logger.info(f"Started {game_type.value} game at tier {self.active_game.tier.value}")
        get_event_bus().emit(EventType.MINIGAME_STARTED, slot=self.slot, game_type=game_type.value)
        return self.active_game

    def _step(self, session_type: type, reducer: Callable, *args):
        if not isinstance(self.active_game, session_type):
            return None
        self.active_game = reducer(self.active_game, *args)
        return self.active_game

    def flip_card(self, index: int) -> MemorySession | None:
        return self._step(MemorySession, flip_card, index)

    def reset_cards(self) -> MemorySession | None:
        return self._step(MemorySession, reset_flipped_cards)

    def begin_rhythm(self) -> RhythmSession | None:
        return self._step(RhythmSession, start_rhythm_game, self.clock())

    def hit_note(self, lane: int) -> RhythmSession | None:
        return self._step(RhythmSession, hit_rhythm_note, lane, self.clock())

    def miss_note(self) -> RhythmSession | None:
        return self._step(RhythmSession, miss_rhythm_note)

    def expire_notes(self) -> RhythmSession | None:
        return self._step(RhythmSession, expire_rhythm_notes, self.clock())

    def move_tile(self, tile_index: int) -> PuzzleSession | None:
        return self._step(PuzzleSession, move_tile, tile_index)

    def answer_question(self, answer_index: int) -> QuizSession | None:
        return self._step(QuizSession, answer_question, answer_index, self.clock())

    def timeout_question(self) -> QuizSession | None:
        return self._step(QuizSession, timeout_question, self.clock())

    def end_game(self) -> GameResult | None:
        """
        Score the active session and apply its rewards.

        Returns None when no game is running.
        """
        session = self.active_game
        if session is None:
            return None

        state = self._require()
        now = self.clock()
        game_type = session_game_type(session)
        previous = state.mini_games.score_for(game_type)

        result = create_game_result(
            game_type,
            score_session(session, now),
            session.tier,
            previous.high_score,
            compute_personality_state(state.personality),
            self.rng,
        )

        params = grant_xp(state.parameters, result.xp_earned)
        inventory = item_system.add_coins(state.inventory, result.coins_earned)
        if result.item_dropped is not None:
            inventory = item_system.add_item(inventory, result.item_dropped, now)

        achievements, new_ids = check_and_unlock(state.achievements, params, now)
        self.active_game = None
        self._commit(state.model_copy(update={
            "parameters": params,
            "inventory": inventory,
            "mini_games": update_mini_game_state(state.mini_games, result, now),
            "achievements": achievements,
        }))

        logger.info(
            f"Finished {game_type.value}: score {result.score}, "
            f"+{result.xp_earned} xp, +{result.coins_earned} coins"
        )
        bus = get_event_bus()
        bus.emit(EventType.MINIGAME_COMPLETED, slot=self.slot, **result.model_dump(mode="json"))
        if result.item_dropped is not None:
            bus.emit(EventType.ITEM_DROPPED, slot=self.slot, item_id=result.item_dropped)
        if params.level > state.parameters.level:
            bus.emit(EventType.LEVEL_UP, slot=self.slot, level=params.level)
        self._announce_unlocks(new_ids)
        return result

    def cancel_game(self) -> bool:
        """Discard the active session. Scores and cooldowns are untouched."""
        if self.active_game is None:
            return False
        game_type = session_game_type(self.active_game)
        self.active_game = None
        logger.info(f"Cancelled {game_type.value} game")
        get_event_bus().emit(EventType.MINIGAME_CANCELLED, slot=self.slot, game_type=game_type.value)
        return True

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def get_summary(self) -> dict:
        """Plain-data snapshot for renderers."""
        state = self._require()
        personality = self.personality_state
        return {
            "slot": self.slot,
            "parameters": state.parameters.model_dump(),
            "tier": self.tier.value,
            "mood_type": self.mood_type.value,
            "personality": personality.type.value,
            "personality_strength": round(personality.strength),
            "remaining_rests": self.remaining_rests,
            "can_act": state.parameters.energy >= ENERGY_THRESHOLD,
            "coins": state.inventory.coins,
            "achievements_unlocked": len(state.achievements.unlocked),
            "title": state.achievements.selected_title_id,
        }
