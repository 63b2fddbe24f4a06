import pytest

from storyflow.data.document_parser import parse_story_document
from storyflow.services import NodeNotFoundError, PlaybackSession


_EXAMPLE = {
    "characters": [{"id": "c1", "name": "Anna"}],
    "nodes": {
        "a": {
            "text": "Hi {c1}",
            "choices": [{"text": "Go", "next": "b", "id": "1", "function_name": None}],
            "isEnding": False,
        },
        "b": {"text": "Bye", "choices": [], "isEnding": True},
    },
}


def _session(raw: dict = _EXAMPLE, start: str = "a") -> PlaybackSession:
    return PlaybackSession(parse_story_document(raw), start)


def test_example_story_plays_to_its_ending() -> None:
    session = _session()
    view = session.current_view()

    assert view.text == "Hi Anna"
    assert [(c.label, c.target_id) for c in view.choices] == [("Go", "b")]
    assert view.is_dead_end is False
    assert view.can_go_back is False

    session.choose(view.choices[0].target_id)
    end = session.current_view()

    assert end.text == "Bye"
    assert end.choices == []
    assert end.is_ending is True
    assert end.is_dead_end is True
    assert session.history == ["a", "b"]


def test_back_is_a_no_op_on_first_node() -> None:
    session = _session()
    assert session.back() is False
    assert session.current_node_id == "a"
    assert session.history == ["a"]


def test_back_returns_to_previous_node() -> None:
    session = _session()
    session.choose("b")
    assert session.current_view().can_go_back is True

    assert session.back() is True
    assert session.current_node_id == "a"
    assert session.history == ["a"]


def test_linear_node_exposes_next_target() -> None:
    raw = {
        "characters": [{"id": "c1", "name": "Anna"}],
        "nodes": {
            "a": {"text": "...", "speaker": "c1", "is_me": True, "choices": [], "next": "b"},
            "b": {"text": "end", "speaker": "ghost", "choices": []},
        },
    }
    session = _session(raw)
    view = session.current_view()

    assert view.speaker_name == "Anna"
    assert view.is_me is True
    assert view.next_node_id == "b"
    assert view.is_dead_end is False

    assert session.advance() == "b"
    assert session.current_view().speaker_name == "ghost"


def test_dead_end_without_ending_flag_is_not_an_error() -> None:
    session = _session({"nodes": {"a": {"text": "stuck", "choices": []}}})
    view = session.current_view()

    assert view.is_dead_end is True
    assert view.is_ending is False
    with pytest.raises(ValueError):
        session.advance()


def test_unknown_node_raises_node_not_found() -> None:
    session = _session()
    session.choose("")

    with pytest.raises(NodeNotFoundError):
        session.current_view()
    assert session.back() is True
    assert session.current_view().node_id == "a"


def test_choose_index_follows_choice_target() -> None:
    session = _session()
    assert session.choose_index(0) == "b"
    with pytest.raises(IndexError):
        session.choose_index(3)


def test_choice_labels_are_substituted() -> None:
    raw = {
        "characters": [{"id": "c1", "name": "Anna"}],
        "nodes": {"a": {"text": "x", "choices": [{"text": "Ask {c1} about {c2}", "next": "a", "id": "q"}]}},
    }
    view = _session(raw).current_view()
    assert view.choices[0].label == "Ask Anna about NULL"
