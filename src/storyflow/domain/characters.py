"""Character registry used for speaker names and text placeholders."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List

from storyflow.domain.errors import CharacterError


@dataclass(frozen=True, slots=True)
class Character:
    """A named cast member referenced by id from node text and speakers."""

    id: str
    name: str

    def to_payload(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


class CharacterRegistry:
    """Ordered collection of characters keyed by their author-chosen id."""

    def __init__(self, characters: Iterable[Character] = ()) -> None:
        self._characters: List[Character] = list(characters)

    def __iter__(self) -> Iterator[Character]:
        return iter(self._characters)

    def __len__(self) -> int:
        return len(self._characters)

    def __contains__(self, character_id: object) -> bool:
        return any(character.id == character_id for character in self._characters)

    def all(self) -> list[Character]:
        """Return the characters in registration order."""
        return list(self._characters)

    def find(self, character_id: str) -> Character | None:
        for character in self._characters:
            if character.id == character_id:
                return character
        return None

    def add(self, character_id: str, name: str) -> Character:
        """Register a new character; ids and names are trimmed."""
        character_id = character_id.strip()
        name = name.strip()
        if not character_id or not name:
            raise CharacterError("Character id and name must not be blank.")
        if character_id in self:
            raise CharacterError(f"Character id '{character_id}' is already in use.")
        character = Character(id=character_id, name=name)
        self._characters.append(character)
        return character

    def rename(self, character_id: str, name: str) -> Character:
        """Give an existing character a new display name."""
        name = name.strip()
        if not name:
            raise CharacterError("Character name must not be blank.")
        for index, character in enumerate(self._characters):
            if character.id == character_id:
                renamed = Character(id=character_id, name=name)
                self._characters[index] = renamed
                return renamed
        raise CharacterError(f"Unknown character id '{character_id}'.")

    def remove(self, character_id: str) -> None:
        """Drop a character. References in node text are left dangling."""
        self._characters = [c for c in self._characters if c.id != character_id]

    def replace_all(self, characters: Iterable[Character]) -> None:
        self._characters = list(characters)

    def to_payload(self) -> dict[str, list[dict[str, str]]]:
        """Return the ``characters.json`` payload."""
        return {"characters": [character.to_payload() for character in self._characters]}
