from storyflow.data.document_parser import parse_story_document
from storyflow.services.document_report import find_unresolved_targets, format_issue


def test_reports_unbound_choices_and_missing_targets() -> None:
    document = parse_story_document(
        {
            "nodes": {
                "a": {
                    "text": "A",
                    "choices": [
                        {"text": "ok", "next": "b", "id": "1"},
                        {"text": "loose", "next": "", "id": "2"},
                        {"text": "ghost", "next": "zzz", "id": "3"},
                    ],
                },
                "b": {"text": "B", "next": "gone"},
                "c": {"text": "C"},
            }
        }
    )
    issues = find_unresolved_targets(document)

    assert [(issue.code, issue.context["node_id"]) for issue in issues] == [
        ("UNBOUND_CHOICE", "a"),
        ("MISSING_TARGET", "a"),
        ("MISSING_TARGET", "b"),
    ]
    assert format_issue(issues[0]) == (
        "[WARN] UNBOUND_CHOICE: Choice is not connected to any node. (node_id=a choice_index=1)"
    )


def test_connected_story_has_no_issues() -> None:
    document = parse_story_document({"nodes": {"a": {"text": "A", "next": "b"}, "b": {"text": "B"}}})
    assert find_unresolved_targets(document) == []
