"""Report of unresolved choice and next targets in a story document."""
from __future__ import annotations

from dataclasses import dataclass

from storyflow.domain.document import StoryDocument

Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def find_unresolved_targets(document: StoryDocument) -> list[Issue]:
    """List choices and next pointers that lead nowhere.

    These gaps are legal in a saved story; the report only helps the author
    find them.
    """
    issues: list[Issue] = []
    node_ids = set(document.nodes)
    for node_id, record in document.nodes.items():
        for index, choice in enumerate(record.choices):
            if not choice.next:
                issues.append(
                    Issue(
                        severity="WARN",
                        code="UNBOUND_CHOICE",
                        message="Choice is not connected to any node.",
                        context={"node_id": node_id, "choice_index": str(index)},
                    )
                )
            elif choice.next not in node_ids:
                issues.append(
                    Issue(
                        severity="WARN",
                        code="MISSING_TARGET",
                        message="Choice references a missing story node.",
                        context={
                            "node_id": node_id,
                            "choice_index": str(index),
                            "referenced_id": choice.next,
                        },
                    )
                )
        if not record.choices and record.next and record.next not in node_ids:
            issues.append(
                Issue(
                    severity="WARN",
                    code="MISSING_TARGET",
                    message="Next pointer references a missing story node.",
                    context={"node_id": node_id, "referenced_id": record.next},
                )
            )
    return issues
