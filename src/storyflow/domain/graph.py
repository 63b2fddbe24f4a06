"""Editable story graph: nodes, choices and slot-tagged edges."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Sequence

from storyflow.core.ids import IdFactory, new_id
from storyflow.domain.errors import InvalidSlotError, UnknownNodeError

DEFAULT_SLOT = "default"
CHOICE_SLOT_PREFIX = "choice-"
DEFAULT_EDGE_LABEL = "Next"


def choice_slot(index: int) -> str:
    """Return the slot key binding an edge to the choice at ``index``."""
    return f"{CHOICE_SLOT_PREFIX}{index}"


def parse_choice_slot(slot: str | None) -> int | None:
    """Return the choice index encoded in ``slot`` or None for default slots."""
    if slot is None or not slot.startswith(CHOICE_SLOT_PREFIX):
        return None
    try:
        return int(slot[len(CHOICE_SLOT_PREFIX):])
    except ValueError:
        return None


def is_default_slot(slot: str | None) -> bool:
    return slot is None or slot == DEFAULT_SLOT


@dataclass(frozen=True, slots=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_payload(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(slots=True)
class Choice:
    """One branching option; its index in the node is its slot key."""

    id: str
    text: str
    function_name: str = ""


@dataclass(slots=True)
class GraphNode:
    """A unit of dialogue in the editable graph."""

    id: str
    text: str = ""
    speaker: str = ""
    is_me: bool = False
    is_ending: bool = False
    function_name: str = ""
    choices: List[Choice] = field(default_factory=list)
    position: Position = field(default_factory=Position)

    @property
    def is_branching(self) -> bool:
        return bool(self.choices)


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed connection leaving ``source`` through ``slot``."""

    id: str
    source: str
    target: str
    slot: str | None = DEFAULT_SLOT
    label: str = DEFAULT_EDGE_LABEL


@dataclass(frozen=True, slots=True)
class ChoiceDraft:
    """Author input for a choice before it is given an id."""

    text: str
    function_name: str = ""


@dataclass(frozen=True, slots=True)
class NodeSnapshot:
    """Clipboard copy of a node's field values."""

    text: str
    speaker: str
    is_me: bool
    is_ending: bool
    function_name: str
    choices: tuple[Choice, ...]


_EDITABLE_FIELDS = {"text", "speaker", "is_me", "is_ending", "function_name", "choices"}


class StoryGraph:
    """Arena of nodes and edges indexed by id.

    Node and edge dicts keep insertion order, which is the order exported to
    the story document.
    """

    def __init__(self, id_factory: IdFactory = new_id) -> None:
        self._new_id = id_factory
        self._nodes: Dict[str, GraphNode] = {}
        self._edges: Dict[str, Edge] = {}
        self.start_node_id: str | None = None

    # -- queries -----------------------------------------------------------

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, node_id: str) -> GraphNode:
        try:
            return self._nodes[node_id]
        except KeyError as exc:
            raise UnknownNodeError(node_id) from exc

    def get_edge(self, edge_id: str) -> Edge:
        return self._edges[edge_id]

    def outgoing_edges(self, node_id: str) -> list[Edge]:
        return [edge for edge in self._edges.values() if edge.source == node_id]

    def edge_in_slot(self, node_id: str, slot: str) -> Edge | None:
        """Return the edge occupying ``slot`` on ``node_id``, if any."""
        for edge in self._edges.values():
            if edge.source != node_id:
                continue
            if is_default_slot(slot) and is_default_slot(edge.slot):
                return edge
            if edge.slot == slot:
                return edge
        return None

    # -- node commands -----------------------------------------------------

    def add_node(
        self,
        data: Mapping[str, object] | None = None,
        position: Position | None = None,
    ) -> str:
        """Create a node and return its id; the first node becomes the start."""
        node = GraphNode(id=self._new_id(), position=position or Position())
        if data:
            self._apply_fields(node, data)
        was_empty = not self._nodes
        self._nodes[node.id] = node
        if was_empty:
            self.start_node_id = node.id
        return node.id

    def insert_node(self, node: GraphNode) -> None:
        """Insert a fully built node, keeping its id (used by importers)."""
        self._nodes[node.id] = node

    def insert_edge(self, edge: Edge) -> None:
        self._edges[edge.id] = edge

    def delete_node(self, node_id: str) -> None:
        """Remove a node together with every edge that touches it."""
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        del self._nodes[node_id]
        self._edges = {
            edge_id: edge
            for edge_id, edge in self._edges.items()
            if edge.source != node_id and edge.target != node_id
        }
        if self.start_node_id == node_id:
            self.start_node_id = None

    def update_node(self, node_id: str, **fields: object) -> GraphNode:
        """Replace node fields; a new choice list gets fresh choice ids.

        Shrinking the choice list drops the edges bound to removed slots.
        """
        node = self.get_node(node_id)
        self._apply_fields(node, fields)
        if "choices" in fields:
            self._drop_stale_choice_edges(node)
        return node

    def set_start_node(self, node_id: str | None) -> None:
        if node_id is not None and node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        self.start_node_id = node_id

    def copy_node(self, node_id: str) -> NodeSnapshot:
        node = self.get_node(node_id)
        return NodeSnapshot(
            text=node.text,
            speaker=node.speaker,
            is_me=node.is_me,
            is_ending=node.is_ending,
            function_name=node.function_name,
            choices=tuple(replace(choice) for choice in node.choices),
        )

    def paste_node(self, snapshot: NodeSnapshot, position: Position) -> str:
        """Create a new node from a clipboard snapshot at ``position``."""
        node = GraphNode(
            id=self._new_id(),
            text=snapshot.text,
            speaker=snapshot.speaker,
            is_me=snapshot.is_me,
            is_ending=snapshot.is_ending,
            function_name=snapshot.function_name,
            choices=[replace(choice) for choice in snapshot.choices],
            position=position,
        )
        self._nodes[node.id] = node
        return node.id

    # -- edge commands -----------------------------------------------------

    def connect(self, source: str, target: str, slot: str | None = DEFAULT_SLOT) -> Edge:
        """Bind ``slot`` of ``source`` to ``target``.

        The slot is stored in its canonical spelling. Any edge already in
        that slot is dropped, as is any edge joining the same two nodes in
        either direction.
        """
        source_node = self.get_node(source)
        self.get_node(target)
        label = DEFAULT_EDGE_LABEL
        choice_index = parse_choice_slot(slot)
        if choice_index is not None:
            if not 0 <= choice_index < len(source_node.choices):
                raise InvalidSlotError(
                    f"Node '{source}' has no choice slot '{slot}'."
                )
            label = source_node.choices[choice_index].text
            slot = choice_slot(choice_index)
        elif is_default_slot(slot):
            slot = DEFAULT_SLOT
        else:
            raise InvalidSlotError(f"Unrecognized edge slot '{slot}'.")

        occupied = self.edge_in_slot(source, slot)
        self._edges = {
            edge_id: edge
            for edge_id, edge in self._edges.items()
            if edge is not occupied
            and not (edge.source == source and edge.target == target)
            and not (edge.source == target and edge.target == source)
        }
        edge = Edge(id=self._new_id(), source=source, target=target, slot=slot, label=label)
        self._edges[edge.id] = edge
        return edge

    def disconnect_edges(self, edge_ids: Iterable[str]) -> None:
        doomed = set(edge_ids)
        self._edges = {
            edge_id: edge for edge_id, edge in self._edges.items() if edge_id not in doomed
        }

    # -- helpers -----------------------------------------------------------

    def _apply_fields(self, node: GraphNode, fields: Mapping[str, object]) -> None:
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown node field(s): {', '.join(sorted(unknown))}")
        if "text" in fields:
            node.text = str(fields["text"] or "")
        if "speaker" in fields:
            node.speaker = str(fields["speaker"] or "")
        if "function_name" in fields:
            node.function_name = str(fields["function_name"] or "")
        if "is_me" in fields:
            node.is_me = bool(fields["is_me"])
        if "is_ending" in fields:
            node.is_ending = bool(fields["is_ending"])
        if "choices" in fields:
            node.choices = self._build_choices(fields["choices"])  # type: ignore[arg-type]

    def _drop_stale_choice_edges(self, node: GraphNode) -> None:
        count = len(node.choices)
        self._edges = {
            edge_id: edge
            for edge_id, edge in self._edges.items()
            if edge.source != node.id
            or (index := parse_choice_slot(edge.slot)) is None
            or index < count
        }

    def _build_choices(self, drafts: Sequence[ChoiceDraft | Choice | str]) -> list[Choice]:
        choices: list[Choice] = []
        for draft in drafts:
            if isinstance(draft, str):
                draft = ChoiceDraft(text=draft)
            choices.append(
                Choice(
                    id=self._new_id(),
                    text=draft.text,
                    function_name=draft.function_name or "",
                )
            )
        return choices
