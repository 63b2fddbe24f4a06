"""Two-way conversion between the editable graph and the story document."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from storyflow.core.ids import IdFactory, new_id
from storyflow.data.document_parser import parse_story_document
from storyflow.data.errors import DataError
from storyflow.data.json_loader import parse_json
from storyflow.domain.characters import Character
from storyflow.domain.document import ChoiceRecord, NodeRecord, StoryDocument
from storyflow.domain.graph import (
    DEFAULT_EDGE_LABEL,
    DEFAULT_SLOT,
    Choice,
    Edge,
    GraphNode,
    Position,
    StoryGraph,
    choice_slot,
)
from storyflow.services.errors import ImportParseError, NoStartNodeError

logger = logging.getLogger(__name__)

LAYOUT_ORIGIN = 100
LAYOUT_SPACING = 300
LAYOUT_MAX_Y = 600


@dataclass(slots=True)
class ImportResult:
    """Graph rebuilt from a document, plus the characters it carried."""

    graph: StoryGraph
    characters: List[Character] = field(default_factory=list)
    start_node_id: str | None = None


def to_document(
    graph: StoryGraph,
    start_node_id: str | None,
    characters: Iterable[Character] = (),
) -> StoryDocument:
    """Project the graph into a story document.

    Choice records follow the node's choice order; a choice whose slot has no
    edge gets an empty ``next``.
    """
    if not start_node_id or start_node_id not in graph:
        raise NoStartNodeError("Please set a start node before exporting the story.")

    document = StoryDocument(characters=list(characters))
    for node in graph.nodes:
        document.nodes[node.id] = NodeRecord(
            text=node.text,
            is_ending=node.is_ending,
            position=node.position,
            function_name=node.function_name or None,
            speaker=node.speaker or None,
            is_me=node.is_me,
        )

    for node in graph.nodes:
        record = document.nodes[node.id]
        if node.choices:
            for index, choice in enumerate(node.choices):
                edge = graph.edge_in_slot(node.id, choice_slot(index))
                record.choices.append(
                    ChoiceRecord(
                        id=choice.id,
                        text=choice.text,
                        next=edge.target if edge is not None else "",
                        function_name=choice.function_name or None,
                    )
                )
        else:
            edge = graph.edge_in_slot(node.id, DEFAULT_SLOT)
            if edge is not None:
                record.next = edge.target

    logger.debug(
        "Exported %d nodes and %d characters (start=%s)",
        len(document.nodes),
        len(document.characters),
        start_node_id,
    )
    return document


def from_document(
    document: StoryDocument,
    previous_start_node_id: str | None = None,
    *,
    id_factory: IdFactory = new_id,
) -> ImportResult:
    """Rebuild a fresh graph from a document, keeping node ids verbatim."""
    graph = StoryGraph(id_factory=id_factory)
    layout_x = LAYOUT_ORIGIN
    layout_y = LAYOUT_ORIGIN
    for node_id, record in document.nodes.items():
        position = record.position
        if position is None:
            position = Position(x=layout_x, y=layout_y)
            layout_y += LAYOUT_SPACING
            if layout_y > LAYOUT_MAX_Y:
                layout_y = LAYOUT_ORIGIN
                layout_x += LAYOUT_SPACING
        graph.insert_node(
            GraphNode(
                id=node_id,
                text=record.text,
                speaker=record.speaker or "",
                is_me=record.is_me,
                is_ending=record.is_ending,
                function_name=record.function_name or "",
                choices=[
                    Choice(
                        id=choice.id or id_factory(),
                        text=choice.text,
                        function_name=choice.function_name or "",
                    )
                    for choice in record.choices
                ],
                position=position,
            )
        )

    skipped = 0
    for node_id, record in document.nodes.items():
        if record.choices:
            for index, choice in enumerate(record.choices):
                if choice.next and choice.next in graph:
                    graph.insert_edge(
                        Edge(
                            id=id_factory(),
                            source=node_id,
                            target=choice.next,
                            slot=choice_slot(index),
                            label=choice.text,
                        )
                    )
                else:
                    skipped += 1
        elif record.next and record.next in graph:
            graph.insert_edge(
                Edge(
                    id=id_factory(),
                    source=node_id,
                    target=record.next,
                    slot=DEFAULT_SLOT,
                    label=DEFAULT_EDGE_LABEL,
                )
            )
        elif record.next:
            skipped += 1

    start_node_id = previous_start_node_id if previous_start_node_id in graph else None
    graph.start_node_id = start_node_id
    logger.debug(
        "Imported %d nodes and %d edges (%d unresolved targets skipped)",
        len(graph),
        len(graph.edges),
        skipped,
    )
    return ImportResult(graph=graph, characters=list(document.characters), start_node_id=start_node_id)


def parse_document_text(text: str, source: str = "<string>") -> StoryDocument:
    """Parse story JSON text, reporting any failure as ImportParseError."""
    try:
        return parse_story_document(parse_json(text, source))
    except DataError as exc:
        raise ImportParseError(str(exc)) from exc
