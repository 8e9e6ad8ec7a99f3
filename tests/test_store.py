"""
Tests for save storage and migration.
"""

import json

import pytest
from pydantic import ValidationError

from ainimo.state import (
    SCHEMA_VERSION,
    ActionType,
    JsonSaveStore,
    MemorySaveStore,
    MiniGameType,
    SaveStore,
    migrate_save,
    restore_game_state,
)
from ainimo.systems.actions import process_action


class TestMigration:
    """Tests for filling in older saves."""

    def test_empty_save(self, now):
        data = migrate_save({}, now)
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["rest_limit"] == {"last_reset_date": "2026-10-18", "count": 0}
        assert set(data["mini_games"]["scores"]) == {g.value for g in MiniGameType}

    def test_existing_values_kept(self, now):
        data = migrate_save({
            "rest_limit": {"count": 2, "last_reset_date": "2026-10-17"},
            "mini_games": {"scores": {"quiz": {"high_score": 90}}},
        }, now)
        assert data["rest_limit"] == {"count": 2, "last_reset_date": "2026-10-17"}
        assert data["mini_games"]["scores"]["quiz"] == {"high_score": 90}

    def test_input_not_mutated(self, now):
        raw = {"schema_version": "0.1.0"}
        migrate_save(raw, now)
        assert raw == {"schema_version": "0.1.0"}

    def test_restore_partial_save(self, now):
        state = restore_game_state({
            "schema_version": "0.9.0",
            "parameters": {"level": 3, "intelligence": 40, "friendliness": 60, "energy": 80, "mood": 0},
        }, now)
        assert state.parameters.level == 3
        assert state.parameters.mood == 60  # re-derived
        assert state.personality.total_actions == 0
        assert state.inventory.coins == 0
        assert state.mini_games.score_for(MiniGameType.RHYTHM).total_plays == 0

    def test_invalid_save_raises(self, now):
        with pytest.raises(ValidationError):
            restore_game_state({"parameters": {"level": 0}}, now)


class TestJsonSaveStore:
    """Tests for file-based persistence."""

    def test_protocol(self, tmp_path):
        assert isinstance(JsonSaveStore(tmp_path), SaveStore)
        assert isinstance(MemorySaveStore(), SaveStore)

    def test_save_and_load(self, tmp_path, state, now):
        store = JsonSaveStore(tmp_path)
        played = process_action(state, ActionType.STUDY, now=now)
        store.save("main", played)

        assert store.exists("main")
        assert store.load("main") == played

    def test_backup_written(self, tmp_path, state, now):
        store = JsonSaveStore(tmp_path)
        store.save("main", state)
        store.save("main", process_action(state, ActionType.PLAY, now=now))

        backup = json.loads((tmp_path / "main.json.bak").read_text(encoding="utf-8"))
        assert backup["parameters"]["friendliness"] == 50

    def test_missing_and_corrupt(self, tmp_path):
        store = JsonSaveStore(tmp_path)
        assert store.load("nobody") is None

        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        assert store.load("broken") is None

    def test_list_and_delete(self, tmp_path, state):
        store = JsonSaveStore(tmp_path)
        store.save("a", state)
        store.save("b", state)
        (tmp_path / ".ainimo_config.json").write_text("{}", encoding="utf-8")

        assert {entry["slot"] for entry in store.list_all()} == {"a", "b"}
        assert store.delete("a")
        assert not store.delete("a")
        assert [entry["slot"] for entry in store.list_all()] == ["b"]


class TestMemorySaveStore:

    def test_lifecycle(self, state):
        store = MemorySaveStore()
        store.save("slot", state)
        assert store.load("slot") == state
        assert store.list_all()[0]["level"] == 1

        store.clear()
        assert store.load("slot") is None
        assert not store.exists("slot")
