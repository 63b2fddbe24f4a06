"""Repository exports."""

from .characters_repo import CharactersRepository
from .story_repo import StoryRepository

__all__ = [
    "CharactersRepository",
    "StoryRepository",
]
