"""Story document structures: the persisted, tree-shaped form of a story."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from storyflow.domain.characters import Character
from storyflow.domain.graph import Position


@dataclass(slots=True)
class ChoiceRecord:
    """A resolved choice: its label and the node it leads to."""

    id: str
    text: str
    next: str = ""
    function_name: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "next": self.next,
            "function_name": self.function_name,
            "id": self.id,
        }


@dataclass(slots=True)
class NodeRecord:
    """One persisted node; either branching (choices) or linear (next)."""

    text: str
    choices: List[ChoiceRecord] = field(default_factory=list)
    is_ending: bool = False
    position: Position | None = None
    function_name: str | None = None
    speaker: str | None = None
    is_me: bool = False
    next: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "text": self.text,
            "choices": [choice.to_payload() for choice in self.choices],
            "isEnding": self.is_ending,
        }
        if self.position is not None:
            payload["position"] = self.position.to_payload()
        payload["function_name"] = self.function_name
        payload["speaker"] = self.speaker
        payload["is_me"] = self.is_me
        if self.next is not None:
            payload["next"] = self.next
        return payload


@dataclass(slots=True)
class StoryDocument:
    """Characters plus node records keyed by node id, in creation order."""

    nodes: Dict[str, NodeRecord] = field(default_factory=dict)
    characters: List[Character] = field(default_factory=list)

    def get(self, node_id: str) -> NodeRecord | None:
        return self.nodes.get(node_id)

    def first_node_id(self) -> str | None:
        return next(iter(self.nodes), None)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-serializable ``story.json`` payload."""
        return {
            "nodes": {node_id: record.to_payload() for node_id, record in self.nodes.items()},
            "characters": [character.to_payload() for character in self.characters],
        }
