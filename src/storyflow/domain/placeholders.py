"""Resolution of ``{characterId}`` placeholders inside dialogue text."""
from __future__ import annotations

import re
from typing import Iterable

from storyflow.domain.characters import Character

MISSING_CHARACTER_TEXT = "NULL"

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def substitute(text: str, characters: Iterable[Character]) -> str:
    """Replace every ``{id}`` token with the matching character's name.

    Unknown ids become ``"NULL"``. Replacement happens in a single
    left-to-right pass, so names containing braces are never expanded again.
    """
    if "{" not in text:
        return text
    names = {}
    for character in characters:
        names.setdefault(character.id, character.name)

    def _replace(match: re.Match[str]) -> str:
        return names.get(match.group(1), MISSING_CHARACTER_TEXT)

    return _PLACEHOLDER.sub(_replace, text)


def display_name(speaker_id: str | None, characters: Iterable[Character]) -> str:
    """Return the speaker's name, or the raw id when no character matches."""
    if not speaker_id:
        return ""
    for character in characters:
        if character.id == speaker_id:
            return character.name
    return speaker_id
