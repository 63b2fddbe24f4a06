"""Low-level JSON helpers for story and character files."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def parse_json(text: str, source: str = "<string>") -> object:
    """Parse JSON text and raise DataLoadError on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {source}: {exc}") from exc


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Story file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read story file: {path}") from exc
    return parse_json(text, str(path))


def dump_json(payload: object) -> str:
    """Serialize a payload with human-readable indentation."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(payload), encoding="utf-8")
