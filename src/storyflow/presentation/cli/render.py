"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Sequence

from storyflow.services.playback_service import PlaybackView


def debug_enabled() -> bool:
    """Return True only when STORYFLOW_DEBUG is explicitly set to '1'."""
    return os.getenv("STORYFLOW_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def format_dialogue_line(view: PlaybackView) -> str:
    """Return ``Speaker : text`` or just the text for narration."""
    if not view.speaker_name:
        return view.text
    marker = "*" if view.is_me else ""
    return f"{marker}{view.speaker_name} : {view.text}"


def render_view(view: PlaybackView, *, show_node_ids: bool = False) -> None:
    """Render the current playback node with its available actions."""
    render_heading("Story")
    if show_node_ids or debug_enabled():
        print(f"[{view.node_id}]")
    print(format_dialogue_line(view))
    if view.is_ending:
        print("(Ending)")
    if view.choices:
        render_choices([choice.label for choice in view.choices])
    elif view.next_node_id:
        print("\n1. Continue")


def render_choices(choices: Sequence[str]) -> None:
    """Display numbered story choices."""
    if not choices:
        return
    render_heading("Choices")
    for idx, label in enumerate(choices, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")
