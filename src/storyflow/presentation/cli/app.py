"""Console front end: playback, conversion, translation export and options."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Literal, Sequence, Tuple

from storyflow.data.errors import DataError
from storyflow.data.json_loader import write_json
from storyflow.data.repositories import CharactersRepository, StoryRepository
from storyflow.domain.document import StoryDocument
from storyflow.domain.errors import GraphEditError
from storyflow.presentation.cli import config
from storyflow.presentation.cli.render import render_bullet_lines, render_heading, render_view
from storyflow.services.document_report import find_unresolved_targets, format_issue
from storyflow.services.editor_session import EditorSession
from storyflow.services.errors import StoryflowError
from storyflow.services.playback_service import PlaybackSession, PlaybackView
from storyflow.services.translation_service import collect_json_files, extract_translations_from_files

logger = logging.getLogger(__name__)

PlayerAction = Tuple[Literal["choose", "back", "quit"], int]


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, configure logging and run the chosen command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    user_config = config.load_config(args.config)
    level = "DEBUG" if args.verbose else user_config["log_level"]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logger.debug("Running command %s", args.command)
    try:
        return args.handler(args, user_config)
    except (StoryflowError, DataError, GraphEditError) as exc:
        print(f"Error: {exc}")
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storyflow", description="Branching dialogue story tools.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a config.json file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Play a story in the console.")
    play.add_argument("story", type=Path)
    play.add_argument("--characters", type=Path, default=None, help="Override the story's characters.")
    play.add_argument("--start", default=None, help="Start node id (defaults to the first node).")
    play.set_defaults(handler=_cmd_play)

    convert = subparsers.add_parser("convert", help="Re-export a story in the canonical shape.")
    convert.add_argument("story", type=Path)
    convert.add_argument("-o", "--output", type=Path, required=True)
    convert.add_argument("--start", default=None, help="Start node id (defaults to the first node).")
    convert.set_defaults(handler=_cmd_convert)

    translate = subparsers.add_parser("translate", help="Extract translatable strings.")
    translate.add_argument("inputs", type=Path, nargs="+", help="Story files or folders.")
    translate.add_argument("-o", "--output", type=Path, default=Path("translations.json"))
    translate.set_defaults(handler=_cmd_translate)

    check = subparsers.add_parser("check", help="List unconnected choices and missing targets.")
    check.add_argument("story", type=Path)
    check.set_defaults(handler=_cmd_check)

    settings = subparsers.add_parser("config", help="Show or change the saved options.")
    settings.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    node_ids = settings.add_mutually_exclusive_group()
    node_ids.add_argument("--show-node-ids", dest="show_node_ids", action="store_true")
    node_ids.add_argument("--hide-node-ids", dest="show_node_ids", action="store_false")
    settings.set_defaults(handler=_cmd_config, show_node_ids=None)
    return parser


def _load_document(path: Path) -> StoryDocument:
    return StoryRepository(base_path=path.parent, filename=path.name).document()


def _resolve_start(document: StoryDocument, requested: str | None) -> str:
    start = requested or document.first_node_id()
    if start is None:
        raise StoryflowError("The story has no nodes.")
    return start


def _cmd_play(args: argparse.Namespace, user_config: dict) -> int:
    document = _load_document(args.story)
    if args.characters is not None:
        characters_repo = CharactersRepository(base_path=args.characters.parent, filename=args.characters.name)
        document.characters = characters_repo.all()
    session = PlaybackSession(document, _resolve_start(document, args.start))
    _run_playback_loop(session, show_node_ids=bool(user_config.get("show_node_ids")))
    return 0


def _cmd_convert(args: argparse.Namespace, user_config: dict) -> int:
    editor = EditorSession()
    editor.load_story(args.story)
    start = args.start or next((node.id for node in editor.graph.nodes), None)
    if start is None:
        raise StoryflowError("The story has no nodes.")
    editor.set_start_node(start)
    editor.save_story(args.output)
    print(f"Wrote {len(editor.graph)} nodes to {args.output}")
    return 0


def _cmd_translate(args: argparse.Namespace, user_config: dict) -> int:
    files: list[Path] = []
    for entry in args.inputs:
        files.extend(collect_json_files(entry) if entry.is_dir() else [entry])
    if not files:
        print("Please select at least one JSON file to process.")
        return 1
    batch = extract_translations_from_files(files)
    if not batch.translations:
        print("No data to export.")
        return 1
    write_json(args.output, batch.translations)
    print(f"Completed processing {len(batch.processed)} files; {len(batch.translations)} strings written.")
    if batch.failed:
        render_heading("Skipped")
        render_bullet_lines(f"{path}: {reason}" for path, reason in batch.failed)
    return 0


def _cmd_check(args: argparse.Namespace, user_config: dict) -> int:
    document = _load_document(args.story)
    issues = find_unresolved_targets(document)
    if not issues:
        print("All choices and next pointers are connected.")
        return 0
    render_heading("Unresolved targets")
    for issue in issues:
        print(format_issue(issue))
    return 0


def _cmd_config(args: argparse.Namespace, user_config: dict) -> int:
    updated = dict(user_config)
    if args.log_level is not None:
        updated["log_level"] = args.log_level
    if args.show_node_ids is not None:
        updated["show_node_ids"] = args.show_node_ids
    if updated != user_config:
        config.save_config(updated, args.config)
        logger.info("Saved options to %s", args.config or config.get_default_config_path())
    render_heading("Options")
    render_bullet_lines(f"{key}: {value}" for key, value in sorted(updated.items()))
    return 0


def _run_playback_loop(session: PlaybackSession, *, show_node_ids: bool = False) -> None:
    """Drive playback until the reader quits or reaches a dead end."""
    while True:
        view = session.current_view()
        render_view(view, show_node_ids=show_node_ids)
        if view.is_dead_end:
            print("\nThe End.")
            return
        action, index = _prompt_action(view)
        if action == "quit":
            return
        if action == "back":
            if not session.back():
                print("Already at the first node.")
            continue
        if view.choices:
            session.choose(view.choices[index].target_id)
        else:
            assert view.next_node_id is not None
            session.choose(view.next_node_id)


def _prompt_action(view: PlaybackView) -> PlayerAction:
    option_count = len(view.choices) or 1
    while True:
        raw = input("Select an option (b = back, q = quit): ").strip().lower()
        if raw == "q":
            return ("quit", 0)
        if raw == "b":
            return ("back", 0)
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < option_count:
            return ("choose", index)
        print(f"Please enter a value between 1 and {option_count}.")
