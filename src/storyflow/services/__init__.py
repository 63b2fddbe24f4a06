"""Service layer exports."""

from .editor_session import EditorSession, session_from_document
from .errors import ImportParseError, NodeNotFoundError, NoStartNodeError, StoryflowError
from .playback_service import PlaybackChoiceView, PlaybackSession, PlaybackView
from .story_codec import ImportResult, from_document, parse_document_text, to_document

__all__ = [
    "EditorSession",
    "ImportParseError",
    "ImportResult",
    "NodeNotFoundError",
    "NoStartNodeError",
    "PlaybackChoiceView",
    "PlaybackSession",
    "PlaybackView",
    "StoryflowError",
    "from_document",
    "parse_document_text",
    "session_from_document",
    "to_document",
]
