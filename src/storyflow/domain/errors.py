"""Exceptions raised by the editable domain models."""


class GraphEditError(Exception):
    """Base exception for rejected graph edits."""


class UnknownNodeError(GraphEditError, KeyError):
    """Raised when an edit references a node id that is not in the graph."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown story node '{self.node_id}'."


class InvalidSlotError(GraphEditError, ValueError):
    """Raised when an edge slot does not exist on its source node."""


class CharacterError(ValueError):
    """Raised when a character registry edit is rejected."""
