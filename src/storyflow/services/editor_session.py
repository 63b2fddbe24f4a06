"""Editing session: owns the graph, cast and clipboard for one story."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from storyflow.core.ids import IdFactory, new_id
from storyflow.data.document_parser import parse_characters_file, parse_story_document
from storyflow.data.errors import DataError
from storyflow.data.json_loader import dump_json, load_json, parse_json, write_json
from storyflow.domain.characters import Character, CharacterRegistry
from storyflow.domain.document import StoryDocument
from storyflow.domain.graph import DEFAULT_SLOT, Edge, NodeSnapshot, Position, StoryGraph
from storyflow.services.errors import ImportParseError
from storyflow.services.playback_service import PlaybackSession
from storyflow.services.story_codec import from_document, parse_document_text, to_document

logger = logging.getLogger(__name__)


class EditorSession:
    """Application service the presentation layer drives by node and edge id."""

    def __init__(self, *, id_factory: IdFactory = new_id) -> None:
        self._id_factory = id_factory
        self.graph = StoryGraph(id_factory=id_factory)
        self.characters = CharacterRegistry()
        self.clipboard: NodeSnapshot | None = None

    @property
    def start_node_id(self) -> str | None:
        return self.graph.start_node_id

    # -- graph commands ----------------------------------------------------

    def add_node(self, position: Position | None = None, **fields: object) -> str:
        return self.graph.add_node(fields or None, position)

    def edit_node(self, node_id: str, **fields: object) -> None:
        self.graph.update_node(node_id, **fields)

    def delete_node(self, node_id: str) -> None:
        self.graph.delete_node(node_id)

    def connect(self, source: str, target: str, slot: str | None = DEFAULT_SLOT) -> Edge:
        return self.graph.connect(source, target, slot)

    def disconnect(self, edge_ids: Iterable[str]) -> None:
        self.graph.disconnect_edges(edge_ids)

    def set_start_node(self, node_id: str | None) -> None:
        self.graph.set_start_node(node_id)

    def copy_node(self, node_id: str) -> NodeSnapshot:
        self.clipboard = self.graph.copy_node(node_id)
        return self.clipboard

    def paste_node(self, position: Position) -> str | None:
        """Paste the clipboard at ``position``; returns None when it is empty."""
        if self.clipboard is None:
            return None
        return self.graph.paste_node(self.clipboard, position)

    # -- story export / import ---------------------------------------------

    def export_document(self, start_node_id: str | None = None) -> StoryDocument:
        return to_document(self.graph, start_node_id or self.start_node_id, self.characters)

    def export_json(self) -> str:
        return dump_json(self.export_document().to_payload())

    def save_story(self, path: Path | str) -> None:
        document = self.export_document()
        write_json(Path(path), document.to_payload())
        logger.info("Saved story with %d nodes to %s", len(document.nodes), path)

    def preview(self, start_node_id: str | None = None) -> PlaybackSession:
        """Start playback from a temporary start node or the session's own."""
        effective_start = start_node_id or self.start_node_id
        document = self.export_document(effective_start)
        assert effective_start is not None
        return PlaybackSession(document, effective_start)

    def import_document(self, document: StoryDocument) -> None:
        """Replace graph and cast with the document's contents."""
        result = from_document(document, self.start_node_id, id_factory=self._id_factory)
        self.graph = result.graph
        self.characters.replace_all(result.characters)
        logger.info(
            "Imported story with %d nodes and %d characters",
            len(result.graph),
            len(result.characters),
        )

    def import_json(self, text: str, source: str = "<string>") -> None:
        """Parse and import story JSON; prior state is kept if parsing fails."""
        document = parse_document_text(text, source)
        self.import_document(document)

    def load_story(self, path: Path | str) -> None:
        try:
            document = parse_story_document(load_json(Path(path)))
        except DataError as exc:
            raise ImportParseError(str(exc)) from exc
        self.import_document(document)

    # -- characters --------------------------------------------------------

    def add_character(self, character_id: str, name: str) -> Character:
        return self.characters.add(character_id, name)

    def rename_character(self, character_id: str, name: str) -> Character:
        return self.characters.rename(character_id, name)

    def remove_character(self, character_id: str) -> None:
        self.characters.remove(character_id)

    def export_characters_json(self) -> str:
        return dump_json(self.characters.to_payload())

    def save_characters(self, path: Path | str) -> None:
        write_json(Path(path), self.characters.to_payload())

    def import_characters_json(self, text: str, source: str = "<string>") -> None:
        try:
            characters = parse_characters_file(parse_json(text, source))
        except DataError as exc:
            raise ImportParseError(str(exc)) from exc
        self.characters.replace_all(characters)

    def load_characters(self, path: Path | str) -> None:
        try:
            characters = parse_characters_file(load_json(Path(path)))
        except DataError as exc:
            raise ImportParseError(str(exc)) from exc
        self.characters.replace_all(characters)


def session_from_document(
    document: StoryDocument,
    start_node_id: str | None = None,
    *,
    id_factory: IdFactory = new_id,
) -> EditorSession:
    """Build a session already holding ``document``."""
    session = EditorSession(id_factory=id_factory)
    session.import_document(document)
    if start_node_id is not None:
        session.set_start_node(start_node_id)
    return session
