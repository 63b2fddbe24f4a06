import json
from pathlib import Path

import pytest

from storyflow.data.document_parser import CanonicalShape, LegacyShape, classify_document, parse_story_document
from storyflow.data.errors import DataLoadError, DataValidationError
from storyflow.data.repositories import CharactersRepository, StoryRepository
from storyflow.domain import Character, Position


def test_sample_story_loads() -> None:
    repo = StoryRepository()
    document = repo.document()

    assert document.first_node_id() == "gate"
    assert len(repo.get("gate").choices) == 2
    assert [c.id for c in document.characters] == ["anna", "player"]


def test_story_repo_reads_canonical_file(tmp_path: Path) -> None:
    stories_dir = _make_stories_dir(tmp_path)
    _write_json(
        stories_dir / "story.json",
        {
            "nodes": {
                "start": {
                    "text": "Hello",
                    "choices": [],
                    "isEnding": False,
                    "position": {"x": 1.5, "y": 2},
                    "function_name": None,
                    "speaker": "c1",
                    "is_me": True,
                    "next": "end",
                },
                "end": {"text": "Bye", "choices": [], "isEnding": True},
            },
            "characters": [{"id": "c1", "name": "Anna"}],
        },
    )
    repo = StoryRepository(base_path=stories_dir)
    start = repo.get("start")

    assert repo.ids() == ["start", "end"]
    assert start.position == Position(1.5, 2)
    assert start.speaker == "c1"
    assert start.is_me is True
    assert start.next == "end"
    assert repo.get("end").position is None
    assert repo.document().characters == [Character(id="c1", name="Anna")]


def test_story_repo_get_missing_raises(tmp_path: Path) -> None:
    stories_dir = _make_stories_dir(tmp_path)
    _write_json(stories_dir / "story.json", {"nodes": {}})
    with pytest.raises(KeyError):
        StoryRepository(base_path=stories_dir).get("nope")


def test_story_repo_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        StoryRepository(base_path=tmp_path).document()


def test_story_repo_invalid_json_raises(tmp_path: Path) -> None:
    (tmp_path / "story.json").write_text("{", encoding="utf-8")
    with pytest.raises(DataLoadError):
        StoryRepository(base_path=tmp_path).all()


def test_story_repo_save_writes_canonical_shape(tmp_path: Path) -> None:
    source = StoryRepository()
    target = StoryRepository(base_path=tmp_path / "out")
    target.save(source.document())

    raw = json.loads((tmp_path / "out" / "story.json").read_text(encoding="utf-8"))
    assert set(raw) == {"nodes", "characters"}
    assert target.document().to_payload() == source.document().to_payload()


def test_classify_document_shapes() -> None:
    assert isinstance(classify_document({"nodes": {}, "characters": []}), CanonicalShape)
    assert isinstance(classify_document({"a": {"text": "A"}}), LegacyShape)
    with pytest.raises(DataValidationError):
        classify_document({"characters": []})
    with pytest.raises(DataValidationError):
        classify_document({"nodes": []})


def test_invalid_position_is_rejected() -> None:
    with pytest.raises(DataValidationError):
        parse_story_document({"nodes": {"a": {"text": "A", "position": {"x": "1", "y": 2}}}})


@pytest.mark.parametrize("field", ["isEnding", "is_me"])
@pytest.mark.parametrize("value", ["false", 0, 1, []])
def test_non_boolean_flags_are_rejected(field: str, value: object) -> None:
    with pytest.raises(DataValidationError):
        parse_story_document({"nodes": {"a": {"text": "A", field: value}}})


def test_missing_or_null_flags_default_to_false() -> None:
    record = parse_story_document({"nodes": {"a": {"text": "A", "isEnding": None}}}).nodes["a"]
    assert record.is_ending is False
    assert record.is_me is False


def test_characters_repo_round_trip(tmp_path: Path) -> None:
    repo = CharactersRepository(base_path=tmp_path)
    repo.save([Character(id="c1", name="Anna"), Character(id="c2", name="Ben")])

    assert [c.name for c in repo.all()] == ["Anna", "Ben"]
    assert repo.get("c2") == Character(id="c2", name="Ben")


def test_characters_repo_requires_characters_key(tmp_path: Path) -> None:
    _write_json(tmp_path / "characters.json", {"cast": []})
    with pytest.raises(DataValidationError):
        CharactersRepository(base_path=tmp_path).all()


def test_characters_repo_rejects_duplicate_ids(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "characters.json",
        {"characters": [{"id": "c1", "name": "Anna"}, {"id": "c1", "name": "Other Anna"}]},
    )
    with pytest.raises(DataValidationError, match="Duplicate character id 'c1'"):
        CharactersRepository(base_path=tmp_path).all()


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_stories_dir(tmp_path: Path) -> Path:
    stories_dir = tmp_path / "stories"
    stories_dir.mkdir()
    return stories_dir
