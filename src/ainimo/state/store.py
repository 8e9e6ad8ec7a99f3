"""
Save storage abstraction.

Separates persistence from the engine for testability. Stores hand back
fully migrated ``GameState`` objects, so the engine never sees a save
with missing sub-structures.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from ..clock import local_date, resolve
from .schema import SCHEMA_VERSION, GameState, MiniGameType

logger = logging.getLogger(__name__)


def _version_tuple(version: str) -> tuple[int, ...]:
    """Version string as a tuple so "1.10.0" sorts after "1.2.0"."""
    try:
        return tuple(int(x) for x in version.split("."))
    except ValueError:
        return (0, 0, 0)


def migrate_save(data: dict, now: int | None = None) -> dict:
    """
    Best-effort upgrade of raw save data.

    Absent sub-structures are left for the model defaults. This fills in
    values whose default depends on context (today's date, per-game score
    slots) and stamps the current schema version.
    """
    data = dict(data)
    version = str(data.get("schema_version", "0.0.0"))

    rest_limit = dict(data.get("rest_limit") or {})
    if not rest_limit.get("last_reset_date"):
        rest_limit["last_reset_date"] = local_date(resolve(now))
        rest_limit.setdefault("count", 0)
    data["rest_limit"] = rest_limit

    mini_games = dict(data.get("mini_games") or {})
    scores = dict(mini_games.get("scores") or {})
    for game_type in MiniGameType:
        scores.setdefault(game_type.value, {})
    mini_games["scores"] = scores
    data["mini_games"] = mini_games

    if _version_tuple(version) < _version_tuple(SCHEMA_VERSION):
        logger.info(f"Migrating save from schema {version} to {SCHEMA_VERSION}")
    data["schema_version"] = SCHEMA_VERSION
    return data


def restore_game_state(data: dict, now: int | None = None) -> GameState:
    """Migrate, validate and re-derive mood. Raises ValidationError."""
    from ..systems.attributes import with_mood

    state = GameState.model_validate(migrate_save(data, now))
    return state.model_copy(update={"parameters": with_mood(state.parameters)})


@runtime_checkable
class SaveStore(Protocol):
    """
    Storage interface for saves, keyed by slot name.

    Implementations:
    - JsonSaveStore: File-based persistence (production)
    - MemorySaveStore: In-memory storage (testing)
    """

    def save(self, slot: str, state: GameState) -> None:
        ...

    def load(self, slot: str) -> GameState | None:
        """Load a save. Returns None if missing or unreadable."""
        ...

    def delete(self, slot: str) -> bool:
        ...

    def list_all(self) -> list[dict]:
        ...

    def exists(self, slot: str) -> bool:
        ...


class JsonSaveStore:
    """
    One JSON file per slot.

    The previous file is kept as ``<slot>.json.bak`` on every save.
    """

    def __init__(self, saves_dir: Path | str = "saves"):
        self.saves_dir = Path(saves_dir)
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, slot: str) -> Path:
        return self.saves_dir / f"{slot}.json"

    def save(self, slot: str, state: GameState) -> None:
        save_file = self._path(slot)

        if save_file.exists():
            backup = save_file.with_suffix(".json.bak")
            backup.write_text(save_file.read_text(encoding="utf-8"), encoding="utf-8")

        save_file.write_text(state.model_dump_json(indent=2), encoding="utf-8")

    def load(self, slot: str) -> GameState | None:
        save_file = self._path(slot)
        if not save_file.exists():
            return None

        try:
            data = json.loads(save_file.read_text(encoding="utf-8"))
            return restore_game_state(data)
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning(f"Unreadable save {save_file}: {e}")
            return None

    def delete(self, slot: str) -> bool:
        save_file = self._path(slot)
        if save_file.exists():
            save_file.unlink()
            return True
        return False

    def list_all(self) -> list[dict]:
        """Saves sorted by modification time, newest first."""
        saves = []
        for f in sorted(
            self.saves_dir.glob("*.json"),
            key=lambda x: x.stat().st_mtime,
            reverse=True,
        ):
            if f.name.startswith("."):
                continue
            try:
                data = json.loads(f.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                continue
            if not isinstance(data, dict):
                continue
            saves.append({
                "slot": f.stem,
                "level": (data.get("parameters") or {}).get("level", 1),
                "created_at": data.get("created_at", 0),
                "updated_at": datetime.fromtimestamp(f.stat().st_mtime),
            })
        return saves

    def exists(self, slot: str) -> bool:
        return self._path(slot).exists()


class MemorySaveStore:
    """
    In-memory save storage for testing.

    Saves are kept as JSON text so loading exercises the same migration
    path as the file store.
    """

    def __init__(self):
        self.saves: dict[str, str] = {}
        self._updated: dict[str, datetime] = {}

    def save(self, slot: str, state: GameState) -> None:
        self.saves[slot] = state.model_dump_json()
        self._updated[slot] = datetime.now()

    def load(self, slot: str) -> GameState | None:
        if slot not in self.saves:
            return None
        try:
            return restore_game_state(json.loads(self.saves[slot]))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Unreadable save in slot {slot}: {e}")
            return None

    def delete(self, slot: str) -> bool:
        if slot in self.saves:
            del self.saves[slot]
            del self._updated[slot]
            return True
        return False

    def list_all(self) -> list[dict]:
        saves = []
        for slot, raw in self.saves.items():
            data = json.loads(raw)
            saves.append({
                "slot": slot,
                "level": data["parameters"]["level"],
                "created_at": data["created_at"],
                "updated_at": self._updated[slot],
            })
        saves.sort(key=lambda x: x["updated_at"], reverse=True)
        return saves

    def exists(self, slot: str) -> bool:
        return slot in self.saves

    def clear(self) -> None:
        """Clear all saves (test utility)."""
        self.saves.clear()
        self._updated.clear()
