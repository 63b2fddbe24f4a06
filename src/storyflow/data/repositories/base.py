"""Base repository implementation for JSON story data."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, TypeVar

from storyflow.data import paths
from storyflow.data.errors import DataValidationError
from storyflow.data.json_loader import load_json, write_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    @property
    def file_path(self) -> Path:
        return paths.get_stories_path(self._base_path) / self._filename

    def _load_raw(self) -> dict[str, object]:
        raw = load_json(self.file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {self.file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed records keyed by id."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def _write_raw(self, payload: dict[str, object]) -> None:
        write_json(self.file_path, payload)
        self._definitions = None

    def get(self, record_id: str) -> T:
        """Return a record by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[record_id]
        except KeyError as exc:
            raise KeyError(record_id) from exc

    def all(self) -> list[T]:
        """Return all records in file order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.values())

    def ids(self) -> list[str]:
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.keys())
