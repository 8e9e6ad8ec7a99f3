"""
Tests for CompanionManager.

Runs the whole pipeline against an in-memory store with a fixed clock.
"""

import pytest

from ainimo.clock import MS_PER_HOUR, MS_PER_MINUTE
from ainimo.state import ActionType, EventType, MemorySaveStore, MiniGameType, get_event_bus
from ainimo.state.manager import MAX_MESSAGES, CompanionManager, NoActiveSaveError, clean_user_text
from ainimo.state.schemas.minigame import QuizSession


def _answer_all(manager, session):
    while not session.is_complete:
        session = manager.answer_question(session.current_question.correct_index)
    return session


class TestLifecycle:
    """Tests for creating, loading and saving."""

    def test_new_game_saved(self, manager, memory_store):
        assert memory_store.exists("default")
        assert manager.current.parameters.level == 1
        assert manager.current.achievements.stats.current_login_streak == 1
        assert get_event_bus().get_history(EventType.SAVE_CREATED)

    def test_requires_save(self, clock):
        manager = CompanionManager(MemorySaveStore(), clock=clock)
        with pytest.raises(NoActiveSaveError):
            manager.perform(ActionType.TALK)

    def test_load_missing(self, clock):
        assert CompanionManager(MemorySaveStore(), clock=clock).load("nobody") is None

    def test_load_next_day_extends_streak(self, manager, memory_store, clock):
        clock.advance(24 * MS_PER_HOUR)
        other = CompanionManager(memory_store, clock=clock)
        state = other.load()
        assert state.achievements.stats.current_login_streak == 2
        assert state.achievements.stats.total_play_days == 2

    def test_auto_save_off(self, clock):
        store = MemorySaveStore()
        manager = CompanionManager(store, clock=clock, auto_save=False)
        manager.new_game()
        assert not store.exists("default")
        assert manager.save()
        assert store.exists("default")

    def test_delete(self, manager):
        assert manager.delete("default")
        assert manager.current is None
        assert manager.list_saves() == []


class TestActions:
    """Tests for the action pipeline."""

    def test_five_studies(self, manager):
        for _ in range(5):
            assert manager.perform(ActionType.STUDY).succeeded

        params = manager.current.parameters
        assert params.intelligence == 35
        assert params.level == 1
        assert manager.current.personality.total_actions == 5
        assert manager.current.achievements.stats.study_count == 5

    def test_first_action_unlocks(self, manager):
        outcome = manager.perform("talk")
        assert outcome.new_achievements == ["action_talk_1"]

        unlocked = get_event_bus().get_history(EventType.ACHIEVEMENT_UNLOCKED)
        assert [e.data["achievement_id"] for e in unlocked] == ["action_talk_1"]

    def test_rejected_action_changes_nothing(self, manager):
        for _ in range(5):
            manager.perform(ActionType.PLAY)  # 100 -> 0 energy
        before = manager.current

        outcome = manager.perform(ActionType.PLAY)
        assert not outcome.succeeded
        assert outcome.reason == "energy"
        assert manager.current is before
        assert get_event_bus().get_history(EventType.ACTION_REJECTED)

    def test_rest_limit(self, manager):
        for _ in range(3):
            assert manager.perform(ActionType.REST).succeeded
        assert manager.remaining_rests == 0
        assert manager.current.achievements.stats.rest_limit_hit_days == 1

        outcome = manager.perform(ActionType.REST)
        assert outcome.reason == "rest_limit"

    def test_decay_applied_on_next_action(self, manager, clock):
        clock.advance(60 * MS_PER_MINUTE)
        manager.perform(ActionType.TALK)
        assert manager.current.parameters.friendliness == 50

    def test_level_up_event(self, manager):
        params = manager.current.parameters.model_copy(update={"xp": 95})
        manager.current = manager.current.model_copy(update={"parameters": params})

        assert manager.perform(ActionType.STUDY).leveled_up
        assert get_event_bus().get_history(EventType.LEVEL_UP)[0].data == {"level": 2}

    def test_summary(self, manager):
        summary = manager.get_summary()
        assert summary["tier"] == "baby"
        assert summary["personality"] == "none"
        assert summary["remaining_rests"] == 3
        assert summary["can_act"]


class TestChat:

    def test_chat_counts_as_talk(self, manager):
        result = manager.chat("  hello\x07   there ", responder=lambda text, params, tier, personality: "hi!")

        assert result.outcome.succeeded
        assert result.reply == "hi!"
        assert result.new_achievements == ["chat_messages_1"]
        assert [m.text for m in manager.current.messages] == ["hello there", "hi!"]
        assert manager.current.achievements.stats.talk_count == 1
        assert manager.current.achievements.stats.messages_sent == 1

    def test_blank_message_ignored(self, manager):
        assert manager.chat(" \n\t ") is None
        assert manager.current.messages == ()

    def test_tired_chat_still_logged(self, manager):
        for _ in range(5):
            manager.perform(ActionType.PLAY)
        result = manager.chat("still there?")
        assert not result.outcome.succeeded
        assert manager.current.messages[-1].text == "still there?"
        assert manager.current.achievements.stats.messages_sent == 1

    def test_log_trimmed(self, manager):
        for i in range(30):
            manager.chat(f"message {i}", responder=lambda *args: "ok")
        messages = manager.current.messages
        assert len(messages) == MAX_MESSAGES
        assert messages[-2].text == "message 29"

    def test_clean_user_text(self):
        assert clean_user_text("ｈｅｌｌｏ") == "hello"
        assert len(clean_user_text("x" * 1000)) == 500


class TestNotificationsAndTitles:

    def test_consume_in_order(self, manager):
        manager.perform(ActionType.TALK)
        manager.perform(ActionType.STUDY)

        assert manager.consume_notification().id == "action_talk_1"
        assert manager.consume_notification().id == "action_study_1"
        assert manager.consume_notification() is None

    def test_select_title(self, manager):
        assert not manager.select_title("action_talk_100")
        manager.perform(ActionType.TALK)
        assert manager.select_title("action_talk_1")
        assert manager.current.achievements.selected_title_id == "action_talk_1"


class TestInventory:

    def test_buy_and_equip(self, manager):
        inventory = manager.current.inventory.model_copy(update={"coins": 100})
        manager.current = manager.current.model_copy(update={"inventory": inventory})

        assert manager.buy_item("hat_cap")
        assert manager.current.inventory.coins == 50
        assert manager.equip("hat_cap")
        assert not manager.equip("hat_crown")
        assert manager.unequip("hat")
        assert manager.current.inventory.equipped.hat is None

    def test_cannot_afford(self, manager):
        assert not manager.buy_item("hat_crown")


class TestMiniGames:
    """Tests for the mini-game session lifecycle."""

    def test_start_spends_energy(self, manager):
        session = manager.start_game(MiniGameType.QUIZ)
        assert isinstance(session, QuizSession)
        assert manager.current.parameters.energy == 85
        assert manager.start_game(MiniGameType.MEMORY) is None

    def test_wrong_reducer_for_session(self, manager):
        manager.start_game(MiniGameType.QUIZ)
        assert manager.flip_card(0) is None
        assert manager.move_tile(0) is None

    def test_finish_quiz(self, manager, clock):
        _answer_all(manager, manager.start_game("quiz"))
        result = manager.end_game()

        assert result.score == 100
        assert result.success
        assert result.new_high_score
        assert result.xp_earned == 25
        assert result.coins_earned == 8

        state = manager.current
        assert state.parameters.xp == 25
        assert state.inventory.coins == 8
        if result.item_dropped is not None:
            assert state.inventory.items[0].item_id == result.item_dropped

        score = state.mini_games.score_for(MiniGameType.QUIZ)
        assert score.total_plays == 1
        assert score.total_wins == 1
        assert score.high_score == 100
        assert score.last_played_at == clock()
        assert manager.active_game is None
        assert get_event_bus().get_history(EventType.MINIGAME_COMPLETED)

    def test_cooldown_after_play(self, manager, clock):
        _answer_all(manager, manager.start_game(MiniGameType.QUIZ))
        manager.end_game()

        assert manager.can_play(MiniGameType.QUIZ).reason == "cooldown"
        assert manager.can_play(MiniGameType.MEMORY).can_play

        clock.advance(5 * MS_PER_MINUTE)
        assert manager.can_play(MiniGameType.QUIZ).can_play

    def test_cancel_keeps_records(self, manager):
        manager.start_game(MiniGameType.PUZZLE)
        assert manager.cancel_game()
        assert not manager.cancel_game()
        assert manager.end_game() is None
        assert manager.current.mini_games.score_for(MiniGameType.PUZZLE).total_plays == 0

    def test_low_energy_refused(self, manager):
        for _ in range(5):
            manager.perform(ActionType.PLAY)
        assert manager.start_game(MiniGameType.MEMORY) is None

    def test_rhythm_through_manager(self, manager, clock):
        manager.start_game(MiniGameType.RHYTHM)
        session = manager.begin_rhythm()
        assert session.is_playing

        clock.advance(60_000)
        session = manager.expire_notes()
        assert session.is_complete

        result = manager.end_game()
        assert result.score == 0
        assert not result.success
