from pathlib import Path

from storyflow.data import paths


def test_get_stories_path_base_path(tmp_path: Path) -> None:
    assert paths.get_stories_path(tmp_path) == tmp_path


def test_get_stories_path_source_repo_exists() -> None:
    stories_path = paths.get_stories_path()
    assert stories_path.name == "stories"
    assert (stories_path / "story.json").exists()
