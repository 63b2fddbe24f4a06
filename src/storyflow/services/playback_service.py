"""Story playback: stateful traversal of an exported story document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from storyflow.domain.document import NodeRecord, StoryDocument
from storyflow.domain.placeholders import display_name, substitute
from storyflow.services.errors import NodeNotFoundError


@dataclass(slots=True)
class PlaybackChoiceView:
    """A selectable choice with its substituted label."""

    label: str
    target_id: str
    function_name: str | None = None


@dataclass(slots=True)
class PlaybackView:
    """Data returned to the presentation layer for rendering."""

    node_id: str
    speaker_name: str
    text: str
    is_me: bool = False
    is_ending: bool = False
    function_name: str | None = None
    choices: List[PlaybackChoiceView] = field(default_factory=list)
    next_node_id: str | None = None
    can_go_back: bool = False

    @property
    def is_dead_end(self) -> bool:
        """True when the node offers no further transition."""
        return not self.choices and not self.next_node_id


class PlaybackSession:
    """Walks a story document from a start node, remembering the path taken."""

    def __init__(self, document: StoryDocument, start_node_id: str) -> None:
        self._document = document
        self.current_node_id = start_node_id
        self.history: List[str] = [start_node_id]

    @property
    def document(self) -> StoryDocument:
        return self._document

    def choose(self, target_id: str) -> None:
        """Move to ``target_id``; the caller is trusted to pick a valid target."""
        self.current_node_id = target_id
        self.history.append(target_id)

    def choose_index(self, choice_index: int) -> str:
        """Follow the choice at ``choice_index`` of the current node."""
        record = self._current_record()
        try:
            choice = record.choices[choice_index]
        except IndexError as exc:
            raise IndexError(
                f"Choice index {choice_index} is invalid for node '{self.current_node_id}'."
            ) from exc
        self.choose(choice.next)
        return choice.next

    def advance(self) -> str:
        """Follow the current linear node's ``next`` pointer."""
        record = self._current_record()
        if record.choices or not record.next:
            raise ValueError(f"Story node '{self.current_node_id}' has no next node to continue to.")
        self.choose(record.next)
        return record.next

    def back(self) -> bool:
        """Return to the previous node; a no-op on the first node."""
        if len(self.history) <= 1:
            return False
        self.history.pop()
        self.current_node_id = self.history[-1]
        return True

    def current_view(self) -> PlaybackView:
        """Return the view model for the currently active node."""
        record = self._current_record()
        characters = self._document.characters
        choices = [
            PlaybackChoiceView(
                label=substitute(choice.text, characters),
                target_id=choice.next,
                function_name=choice.function_name,
            )
            for choice in record.choices
        ]
        return PlaybackView(
            node_id=self.current_node_id,
            speaker_name=display_name(record.speaker, characters),
            text=substitute(record.text, characters),
            is_me=record.is_me,
            is_ending=record.is_ending,
            function_name=record.function_name,
            choices=choices,
            next_node_id=None if choices else (record.next or None),
            can_go_back=len(self.history) > 1,
        )

    def _current_record(self) -> NodeRecord:
        record = self._document.get(self.current_node_id)
        if record is None:
            raise NodeNotFoundError(self.current_node_id)
        return record
