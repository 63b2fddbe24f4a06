"""Normalization of raw story JSON into typed story documents.

Two on-disk shapes are accepted. The canonical shape keeps node records under
a ``nodes`` key next to ``characters``; the legacy shape stores node records
directly at the document root and has no characters. Both are classified
first and then parsed by the same record parser.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from storyflow.data.errors import DataValidationError
from storyflow.domain.characters import Character
from storyflow.domain.document import ChoiceRecord, NodeRecord, StoryDocument
from storyflow.domain.graph import Position


@dataclass(frozen=True, slots=True)
class CanonicalShape:
    nodes: Mapping[str, object]
    characters: object = None


@dataclass(frozen=True, slots=True)
class LegacyShape:
    nodes: Mapping[str, object] = field(default_factory=dict)


DocumentShape = CanonicalShape | LegacyShape


def classify_document(raw: object) -> DocumentShape:
    """Decide which document shape ``raw`` uses."""
    mapping = _require_mapping(raw, "story document")
    if "nodes" in mapping:
        nodes = _require_mapping(mapping["nodes"], "story document 'nodes'")
        return CanonicalShape(nodes=nodes, characters=mapping.get("characters"))
    if "characters" in mapping:
        raise DataValidationError("Story document is missing the required 'nodes' key.")
    return LegacyShape(nodes=mapping)


def parse_story_document(raw: object) -> StoryDocument:
    """Parse either document shape into a StoryDocument."""
    shape = classify_document(raw)
    if isinstance(shape, CanonicalShape):
        characters = parse_character_list(shape.characters, "story document 'characters'")
    else:
        characters = []
    nodes: Dict[str, NodeRecord] = {}
    for node_id, payload in shape.nodes.items():
        if not isinstance(node_id, str):
            raise DataValidationError("Story node ids must be strings.")
        nodes[node_id] = _parse_node(node_id, payload)
    return StoryDocument(nodes=nodes, characters=characters)


def parse_characters_file(raw: object) -> List[Character]:
    """Parse a ``characters.json`` payload."""
    mapping = _require_mapping(raw, "character file")
    if "characters" not in mapping:
        raise DataValidationError("Character file is missing the 'characters' key.")
    return parse_character_list(mapping["characters"], "character file 'characters'")


def parse_character_list(raw: object, context: str) -> List[Character]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DataValidationError(f"{context} must be a list.")
    characters: List[Character] = []
    for index, entry in enumerate(raw):
        entry_ctx = f"{context}[{index}]"
        data = _require_mapping(entry, entry_ctx)
        characters.append(
            Character(
                id=_require_str(data.get("id"), f"{entry_ctx} id"),
                name=_require_str(data.get("name"), f"{entry_ctx} name"),
            )
        )
    return characters


def _parse_node(node_id: str, payload: object) -> NodeRecord:
    context = f"story node '{node_id}'"
    data = _require_mapping(payload, context)
    return NodeRecord(
        text=_optional_str(data.get("text"), f"{context} text") or "",
        choices=_parse_choices(data.get("choices"), context),
        is_ending=_optional_bool(data.get("isEnding"), f"{context} isEnding"),
        position=_parse_position(data.get("position"), f"{context} position"),
        function_name=_optional_str(data.get("function_name"), f"{context} function_name"),
        speaker=_optional_str(data.get("speaker"), f"{context} speaker"),
        is_me=_optional_bool(data.get("is_me"), f"{context} is_me"),
        next=_optional_str(data.get("next"), f"{context} next"),
    )


def _parse_choices(raw: object, node_context: str) -> List[ChoiceRecord]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DataValidationError(f"{node_context} choices must be a list if provided.")
    choices: List[ChoiceRecord] = []
    for index, entry in enumerate(raw):
        choice_ctx = f"{node_context} choices[{index}]"
        data = _require_mapping(entry, choice_ctx)
        choices.append(
            ChoiceRecord(
                id=_optional_str(data.get("id"), f"{choice_ctx} id") or "",
                text=_optional_str(data.get("text"), f"{choice_ctx} text") or "",
                next=_optional_str(data.get("next"), f"{choice_ctx} next") or "",
                function_name=_optional_str(data.get("function_name"), f"{choice_ctx} function_name"),
            )
        )
    return choices


def _parse_position(raw: object, context: str) -> Position | None:
    if raw is None:
        return None
    data = _require_mapping(raw, context)
    x, y = data.get("x"), data.get("y")
    for axis, value in (("x", x), ("y", y)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} {axis} must be a number.")
    return Position(x=x, y=y)  # type: ignore[arg-type]


def _require_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, dict):
        raise DataValidationError(f"{context} must be an object/dict.")
    return value


def _require_str(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    return value


def _optional_str(value: object, context: str) -> str | None:
    if value is None:
        return None
    return _require_str(value, context)


def _optional_bool(value: object, context: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DataValidationError(f"{context} must be a boolean.")
    return value
