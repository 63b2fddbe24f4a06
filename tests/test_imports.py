def test_import_storyflow_package() -> None:
    import importlib

    module = importlib.import_module("storyflow")
    assert module is not None


def test_import_ids_no_side_effects() -> None:
    from storyflow.core.ids import SequentialIds

    ids = SequentialIds("n")
    assert ids() == "n-1"
    assert ids() == "n-2"
