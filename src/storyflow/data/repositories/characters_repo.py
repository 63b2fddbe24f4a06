"""Repository for the standalone ``characters.json`` file."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable

from storyflow.data.document_parser import parse_characters_file
from storyflow.data.errors import DataValidationError
from storyflow.data.repositories.base import RepositoryBase
from storyflow.domain.characters import Character


class CharactersRepository(RepositoryBase[Character]):
    """Loads and saves the character list shared across stories."""

    def __init__(self, base_path: Path | str | None = None, filename: str = "characters.json") -> None:
        super().__init__(filename, base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, Character]:
        characters: Dict[str, Character] = {}
        for character in parse_characters_file(raw):
            if character.id in characters:
                raise DataValidationError(f"Duplicate character id '{character.id}' in {self.file_path}.")
            characters[character.id] = character
        return characters

    def save(self, characters: Iterable[Character]) -> None:
        self._write_raw({"characters": [character.to_payload() for character in characters]})
