"""Domain model exports."""

from .characters import Character, CharacterRegistry
from .document import ChoiceRecord, NodeRecord, StoryDocument
from .errors import CharacterError, GraphEditError, InvalidSlotError, UnknownNodeError
from .graph import (
    DEFAULT_SLOT,
    Choice,
    ChoiceDraft,
    Edge,
    GraphNode,
    NodeSnapshot,
    Position,
    StoryGraph,
    choice_slot,
)
from .placeholders import display_name, substitute

__all__ = [
    "Character",
    "CharacterRegistry",
    "CharacterError",
    "Choice",
    "ChoiceDraft",
    "ChoiceRecord",
    "DEFAULT_SLOT",
    "Edge",
    "GraphEditError",
    "GraphNode",
    "InvalidSlotError",
    "NodeRecord",
    "NodeSnapshot",
    "Position",
    "StoryDocument",
    "StoryGraph",
    "UnknownNodeError",
    "choice_slot",
    "display_name",
    "substitute",
]
