"""Utilities for creating node, choice and edge identifiers."""
from __future__ import annotations

from typing import Callable
from uuid import uuid4

IdFactory = Callable[[], str]


def new_id() -> str:
    """Return a fresh random UUID string."""
    return str(uuid4())


class SequentialIds:
    """Deterministic id factory producing ``<prefix>-1``, ``<prefix>-2``..."""

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._counter = 0

    def __call__(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter}"
