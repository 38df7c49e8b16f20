"""Entry point: terminal canvas editor with a streamed assistant chat."""

import shlex
import sys
from pathlib import Path

from lce.canvas import iter_lists
from lce.config import get_service_config
from lce.llm import complete, get_chat_model
from lce.session import CanvasEditor
from lce.state import Slot
from lce.transcript import TranscriptStreamMerger
from lce.utils.formatter import load_canvas, render_markdown, write_canvas
from lce.utils.validator import validate_service_config

HELP = """\
Commands (quote keys with spaces, e.g. "problem:Existing Alternatives"):
  show                      print the canvas
  add KEY                   add an empty item and fill it in
  set KEY INDEX TEXT        replace an item and commit it
  rm KEY INDEX              remove an item
  save                      write the canvas as JSON
  load PATH                 replace the canvas with a saved JSON file
  help                      show this message
  quit                      exit
KEY is a section id (solution) or section:Subsection (problem:Problem)."""


def parse_key(key: str) -> tuple[str, str | None]:
    """Split 'section' or 'section:Subsection Title' into (section_id, subsection_title)."""
    section_id, _, subsection_title = key.partition(":")
    return section_id.strip(), subsection_title.strip() or None


def _print_canvas(editor: CanvasEditor) -> None:
    for section_id, subsection_title, items in iter_lists(editor.canvas):
        key = f"{section_id}:{subsection_title}" if subsection_title else section_id
        print(f"{key} ({len(items)}/3)")
        for i, item in enumerate(items):
            print(f"  [{i}] {item}")


def _stream_reply(merger: TranscriptStreamMerger, text: str) -> None:
    """Send one notification and print the reply as it streams."""
    print(f"> {text}")
    shown = ""
    for reply in merger.send(text):
        if reply.startswith(shown):
            sys.stdout.write(reply[len(shown):])
        else:
            sys.stdout.write("\n" + reply)
        sys.stdout.flush()
        shown = reply
    print()


def handle(editor: CanvasEditor, args: list[str]) -> bool:
    """Apply one command to the editor. Returns False when the user quits."""
    command, rest = args[0].lower(), args[1:]

    if command in ("quit", "exit"):
        return False
    if command == "help":
        print(HELP)
    elif command == "show":
        _print_canvas(editor)
    elif command == "save":
        print(f"[LCE] Canvas written to: {write_canvas(editor.canvas)}")
    elif command == "load" and len(rest) == 1:
        try:
            editor.load(load_canvas(Path(rest[0]).read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            print(f"[LCE] Could not load {rest[0]}: {exc}")
            return True
        print(f"[LCE] Canvas loaded from: {rest[0]}")
    elif command == "add" and len(rest) == 1:
        slot = editor.add(*parse_key(rest[0]))
        if slot is None:
            print("[LCE] That list is full (or the key is unknown).")
            return True
        try:
            value = input(f"{rest[0]}[{slot.index}]: ")
        except EOFError:
            # Slot stays on the canvas, empty and unconfirmed
            print()
            return True
        editor.commit(slot, value)
    elif command == "set" and len(rest) >= 3 and rest[1].isdigit():
        slot = Slot(*parse_key(rest[0]), int(rest[1]))
        editor.focus(slot)
        editor.commit(slot, " ".join(rest[2:]))
    elif command == "rm" and len(rest) == 2 and rest[1].isdigit():
        editor.remove(Slot(*parse_key(rest[0]), int(rest[1])))
    else:
        print(HELP)
    return True


def run() -> None:
    """Run the interactive editor until the user quits or stdin closes."""
    try:
        service = validate_service_config(get_service_config())
    except ValueError as exc:
        print(f"[LCE] Invalid service config: {exc}", file=sys.stderr)
        sys.exit(1)

    llm = get_chat_model(service)
    merger = TranscriptStreamMerger(lambda history: complete(history, llm=llm))
    editor = CanvasEditor()

    print(f"[LCE] Chatting with {service['model_id']} via {service['service_kind']}")
    print(HELP)

    while True:
        try:
            line = input("lce> ").strip()
        except EOFError:
            break
        if not line:
            continue
        try:
            args = shlex.split(line)
        except ValueError as exc:
            print(f"[LCE] {exc}")
            continue
        if not handle(editor, args):
            break
        text = editor.next_notification()
        while text is not None:
            _stream_reply(merger, text)
            text = editor.next_notification()

    merger.close()
    print(render_markdown(editor.canvas))


def main() -> None:
    """CLI entry point."""
    run()


if __name__ == "__main__":
    main()
