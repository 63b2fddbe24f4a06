"""Service-layer exceptions."""


class StoryflowError(Exception):
    """Base exception for story conversion and playback failures."""


class NoStartNodeError(StoryflowError):
    """Raised when a story is exported without a valid start node."""


class ImportParseError(StoryflowError):
    """Raised when story or character JSON cannot be imported."""


class NodeNotFoundError(StoryflowError, KeyError):
    """Raised when playback reaches a node id absent from the document."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Story node '{self.node_id}' not found."
