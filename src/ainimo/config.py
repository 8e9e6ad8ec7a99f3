"""
User configuration persistence.

Stores where saves live, which slot to open and the log level in a JSON
file next to the saves.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".ainimo_config.json"


class Config(TypedDict, total=False):
    """User configuration."""
    saves_dir: str  # Directory holding <slot>.json saves
    slot: str  # Save slot opened by default
    log_level: str  # DEBUG, INFO, WARNING, ...
    show_secret_achievements: bool  # Reveal locked secret achievements


DEFAULT_CONFIG: Config = {
    "saves_dir": "saves",
    "slot": "default",
    "log_level": "WARNING",
    "show_secret_achievements": False,
}


def get_config_path(config_dir: Path | str = "saves") -> Path:
    return Path(config_dir) / CONFIG_FILENAME


def load_config(config_dir: Path | str = "saves") -> Config:
    """Load config from file, or return defaults if not found."""
    path = get_config_path(config_dir)

    if not path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return DEFAULT_CONFIG.copy()

    # Merge with defaults to handle missing keys
    config = DEFAULT_CONFIG.copy()
    if isinstance(saved, dict):
        config.update({k: v for k, v in saved.items() if k in DEFAULT_CONFIG})
    return config


def save_config(config: Config, config_dir: Path | str = "saves") -> bool:
    """Save config to file. Returns True on success."""
    path = get_config_path(config_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        logger.warning(f"Could not write config {path}: {e}")
        return False


def set_slot(slot: str, config_dir: Path | str = "saves") -> None:
    """Remember the slot to open next time."""
    config = load_config(config_dir)
    config["slot"] = slot
    save_config(config, config_dir)
