"""Data layer utilities for loading and writing story JSON."""

from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_repo_root, get_stories_path

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "get_repo_root",
    "get_stories_path",
]
