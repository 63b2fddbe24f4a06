"""Repository for story documents stored as ``story.json``."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

from storyflow.data.document_parser import parse_story_document
from storyflow.data.repositories.base import RepositoryBase
from storyflow.domain.document import NodeRecord, StoryDocument


class StoryRepository(RepositoryBase[NodeRecord]):
    """Loads a story document in either the canonical or the legacy shape."""

    def __init__(self, base_path: Path | str | None = None, filename: str = "story.json") -> None:
        super().__init__(filename, base_path)
        self._document: StoryDocument | None = None

    def _build(self, raw: dict[str, object]) -> Dict[str, NodeRecord]:
        self._document = parse_story_document(raw)
        return dict(self._document.nodes)

    def document(self) -> StoryDocument:
        """Return the full parsed document, characters included."""
        self._ensure_loaded()
        assert self._document is not None
        return self._document

    def save(self, document: StoryDocument) -> None:
        self._write_raw(document.to_payload())
        self._document = None
