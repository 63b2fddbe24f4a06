import json
from pathlib import Path

import pytest

from storyflow.core.ids import SequentialIds
from storyflow.domain import Position, choice_slot
from storyflow.services import EditorSession, ImportParseError, NoStartNodeError, session_from_document
from storyflow.services.story_codec import parse_document_text


def _session() -> EditorSession:
    return EditorSession(id_factory=SequentialIds("e"))


def _two_node_session() -> tuple[EditorSession, str, str]:
    session = _session()
    session.add_character("c1", "Anna")
    first = session.add_node(Position(0, 0), text="Hello {c1}", choices=["Onward", "Wait"])
    second = session.add_node(Position(300, 0), text="Arrived", is_ending=True)
    session.connect(first, second, choice_slot(0))
    return session, first, second


def test_export_without_nodes_fails() -> None:
    session = _session()
    with pytest.raises(NoStartNodeError):
        session.export_json()


def test_export_after_deleting_start_node_fails() -> None:
    session, first, _ = _two_node_session()
    session.delete_node(first)
    with pytest.raises(NoStartNodeError):
        session.export_document()


def test_export_json_is_indented_and_complete() -> None:
    session, first, second = _two_node_session()
    text = session.export_json()
    payload = json.loads(text)

    assert text.startswith("{\n  ")
    assert payload["characters"] == [{"id": "c1", "name": "Anna"}]
    assert payload["nodes"][first]["choices"][0]["next"] == second
    assert payload["nodes"][first]["choices"][1]["next"] == ""


def test_preview_uses_temporary_start_without_changing_session() -> None:
    session, first, second = _two_node_session()
    player = session.preview(second)

    assert player.current_view().text == "Arrived"
    assert session.start_node_id == first
    assert session.preview().current_view().text == "Hello Anna"


def test_failed_import_keeps_previous_state() -> None:
    session, first, _ = _two_node_session()
    before = session.export_json()

    with pytest.raises(ImportParseError):
        session.import_json("{broken")
    with pytest.raises(ImportParseError):
        session.import_json(json.dumps({"characters": []}))

    assert session.export_json() == before
    assert session.start_node_id == first


def test_import_replaces_graph_and_keeps_matching_start() -> None:
    session, first, _ = _two_node_session()
    exported = session.export_json()

    other = EditorSession(id_factory=SequentialIds("other"))
    other.add_node(text="to be replaced")
    other.import_json(exported)
    assert other.start_node_id is None
    assert [node.id for node in other.graph.nodes] == [node.id for node in session.graph.nodes]

    session.import_json(exported)
    assert session.start_node_id == first
    assert session.export_json() == exported


def test_copy_paste_through_clipboard() -> None:
    session, first, _ = _two_node_session()
    assert session.paste_node(Position(1, 1)) is None

    session.copy_node(first)
    pasted = session.paste_node(Position(50, 50))

    assert pasted is not None
    assert session.graph.get_node(pasted).text == "Hello {c1}"


def test_edit_and_disconnect() -> None:
    session, first, second = _two_node_session()
    edge = session.graph.edge_in_slot(first, choice_slot(0))
    assert edge is not None

    session.disconnect([edge.id])
    session.edit_node(first, text="Edited", speaker="c1")
    record = session.export_document().nodes[first]

    assert record.text == "Edited"
    assert record.speaker == "c1"
    assert record.choices[0].next == ""


def test_story_and_characters_files_round_trip(tmp_path: Path) -> None:
    session, first, _ = _two_node_session()
    session.save_story(tmp_path / "story.json")
    session.save_characters(tmp_path / "characters.json")

    loaded = _session()
    loaded.load_story(tmp_path / "story.json")
    loaded.set_start_node(first)
    assert loaded.export_json() == session.export_json()

    loaded.remove_character("c1")
    loaded.load_characters(tmp_path / "characters.json")
    assert [c.name for c in loaded.characters] == ["Anna"]


def test_character_import_errors(tmp_path: Path) -> None:
    session = _session()
    with pytest.raises(ImportParseError):
        session.import_characters_json("not json")
    with pytest.raises(ImportParseError):
        session.import_characters_json(json.dumps({"people": []}))
    with pytest.raises(ImportParseError):
        session.load_story(tmp_path / "missing.json")

    session.import_characters_json(json.dumps({"characters": [{"id": "c9", "name": "Zed"}]}))
    session.rename_character("c9", "Zedd")
    assert json.loads(session.export_characters_json()) == {"characters": [{"id": "c9", "name": "Zedd"}]}


def test_session_from_document() -> None:
    document = parse_document_text(json.dumps({"nodes": {"a": {"text": "A"}}}))
    session = session_from_document(document, "a")
    assert session.preview().current_view().node_id == "a"
