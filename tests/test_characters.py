import pytest

from storyflow.domain import Character, CharacterError, CharacterRegistry


def test_add_trims_and_keeps_order() -> None:
    registry = CharacterRegistry()
    registry.add(" c1 ", " Anna ")
    registry.add("c2", "Ben")

    assert registry.all() == [Character(id="c1", name="Anna"), Character(id="c2", name="Ben")]
    assert "c1" in registry
    assert len(registry) == 2


def test_add_rejects_duplicates_and_blanks() -> None:
    registry = CharacterRegistry([Character(id="c1", name="Anna")])

    with pytest.raises(CharacterError):
        registry.add("c1", "Another")
    with pytest.raises(CharacterError):
        registry.add("  ", "Nobody")
    with pytest.raises(CharacterError):
        registry.add("c3", "")


def test_rename_replaces_name_in_place() -> None:
    registry = CharacterRegistry([Character(id="c1", name="Anna"), Character(id="c2", name="Ben")])
    registry.rename("c1", "Annabel")

    assert [c.name for c in registry] == ["Annabel", "Ben"]
    with pytest.raises(CharacterError):
        registry.rename("missing", "X")


def test_remove_does_not_fail_for_unknown_ids() -> None:
    registry = CharacterRegistry([Character(id="c1", name="Anna")])
    registry.remove("c1")
    registry.remove("c1")

    assert registry.find("c1") is None
    assert registry.to_payload() == {"characters": []}
