"""Extraction of translatable strings from story documents."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from storyflow.data.document_parser import classify_document
from storyflow.data.errors import DataError
from storyflow.data.json_loader import load_json
from storyflow.domain.document import StoryDocument

logger = logging.getLogger(__name__)


def choice_translation_key(node_id: str, choice_index: int) -> str:
    return f"{node_id}_choice_{choice_index}"


@dataclass(slots=True)
class TranslationBatch:
    """Outcome of extracting strings from several story files."""

    translations: Dict[str, str] = field(default_factory=dict)
    processed: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)


def extract_translations(documents: Iterable[StoryDocument]) -> Dict[str, str]:
    """Flatten node and choice texts into one ``{key: text}`` mapping.

    Node text is keyed by node id and choice text by
    ``<nodeId>_choice_<index>``. Later documents overwrite earlier keys.
    """
    translations: Dict[str, str] = {}
    for document in documents:
        for node_id, record in document.nodes.items():
            if record.text:
                translations[node_id] = record.text
            for index, choice in enumerate(record.choices):
                if choice.text:
                    translations[choice_translation_key(node_id, index)] = choice.text
    return translations


def extract_raw_translations(nodes: Mapping[str, object], translations: Dict[str, str]) -> None:
    """Add the texts of unparsed node entries to ``translations``.

    Entries are checked one by one, so a node or choice whose text is not a
    non-empty string is skipped without affecting its neighbours.
    """
    for node_id, node in nodes.items():
        if not isinstance(node, dict):
            continue
        text = node.get("text")
        if text and isinstance(text, str):
            translations[node_id] = text
        choices = node.get("choices")
        if not isinstance(choices, list):
            continue
        for index, choice in enumerate(choices):
            choice_text = choice.get("text") if isinstance(choice, dict) else None
            if choice_text and isinstance(choice_text, str):
                translations[choice_translation_key(node_id, index)] = choice_text


def extract_translations_from_files(paths: Iterable[Path | str]) -> TranslationBatch:
    """Process every JSON file; unreadable files are logged and skipped."""
    batch = TranslationBatch()
    for raw_path in paths:
        path = Path(raw_path)
        if path.suffix.lower() != ".json":
            continue
        try:
            shape = classify_document(load_json(path))
        except DataError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            batch.failed.append((path, str(exc)))
            continue
        extract_raw_translations(shape.nodes, batch.translations)
        batch.processed.append(path)
    logger.debug("Extracted %d strings from %d files", len(batch.translations), len(batch.processed))
    return batch


def collect_json_files(directory: Path | str) -> list[Path]:
    """Return the JSON files below ``directory`` in a stable order."""
    return sorted(path for path in Path(directory).rglob("*.json") if path.is_file())
