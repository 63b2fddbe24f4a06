"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Storyflow"
        return Path.home() / "Storyflow"
    return Path.home() / ".config" / "storyflow"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def default_config() -> Dict[str, Any]:
    return {"log_level": _DEFAULT_LOG_LEVEL, "show_node_ids": False}


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    level = str(raw.get("log_level", _DEFAULT_LOG_LEVEL)).upper()
    return {
        "log_level": level if level in _LOG_LEVELS else _DEFAULT_LOG_LEVEL,
        "show_node_ids": raw.get("show_node_ids") is True,
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError):
        logging.getLogger(__name__).warning("Ignoring unreadable config file %s", config_path)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(_normalize(config), indent=2, sort_keys=True), encoding="utf-8")
