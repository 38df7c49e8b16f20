"""Canvas export — JSON round-trip for download/reload and a Markdown rendering."""

import json
from pathlib import Path

from lce.canvas import INITIAL_CANVAS
from lce.config import get_config
from lce.state import Canvas


def dump_canvas(canvas: Canvas) -> str:
    """Serialize the canvas to JSON text, keeping the exact nested shape."""
    return json.dumps(canvas, indent=2, ensure_ascii=False)


def load_canvas(text: str) -> Canvas:
    """Parse a canvas previously written by dump_canvas.

    Raises ValueError if the text is not JSON or does not have exactly the
    nine known sections with the expected simple/composite shape.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ValueError("Canvas file is not valid JSON.") from exc

    if not isinstance(data, list):
        raise ValueError("Canvas must be a list of sections.")

    expected = {s["id"]: s for s in INITIAL_CANVAS}
    seen = set()
    for section in data:
        sid = section.get("id") if isinstance(section, dict) else None
        if sid not in expected:
            raise ValueError(f"Unknown section id '{sid}'.")
        if sid in seen:
            raise ValueError(f"Duplicate section id '{sid}'.")
        seen.add(sid)
        template = expected[sid]
        if "subsections" in template:
            subs = section.get("subsections")
            if not isinstance(subs, list) or not all(isinstance(sub, dict) for sub in subs):
                raise ValueError(f"Section '{sid}' subsections must be a list of objects.")
            titles = [sub.get("title") for sub in subs]
            if titles != [sub["title"] for sub in template["subsections"]]:
                raise ValueError(f"Section '{sid}' has unexpected subsections: {titles}")
            lists = [sub.get("items") for sub in subs]
        else:
            lists = [section.get("items")]
        for items in lists:
            if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
                raise ValueError(f"Section '{sid}' items must be a list of strings.")
            if len(items) > 3:
                raise ValueError(f"Section '{sid}' holds more than 3 items.")

    missing = set(expected) - seen
    if missing:
        raise ValueError(f"Canvas is missing sections: {sorted(missing)}")

    return data


def render_markdown(canvas: Canvas) -> str:
    """Render the canvas as Markdown, sections in display order."""
    lines = ["# Lean Canvas", ""]

    for section in sorted(canvas, key=lambda s: s.get("order", 0)):
        if "subsections" in section:
            for sub in section["subsections"]:
                lines.append(f"## {section['order']}. {sub['title']}")
                lines.append("")
                lines.extend(_render_items(sub["items"]))
        else:
            title = section.get("title") or section["id"]
            lines.append(f"## {section['order']}. {title}")
            lines.append("")
            lines.extend(_render_items(section.get("items", [])))

    return "\n".join(lines)


def _render_items(items: list[str]) -> list[str]:
    filled = [item for item in items if item.strip()]
    if not filled:
        return ["*(empty)*", ""]
    return [f"- {item}" for item in filled] + [""]


def write_canvas(canvas: Canvas) -> Path:
    """Write the canvas as JSON to the configured output path.

    Never overwrites: picks "name (2).json", "name (3).json"... when the
    file already exists. Returns the Path written.
    """
    config = get_config()
    base_path = Path(__file__).resolve().parent.parent.parent / config["output_path"]
    output_dir = base_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    stem = base_path.stem
    output_path = output_dir / f"{stem}.json"
    counter = 1
    while output_path.exists():
        counter += 1
        output_path = output_dir / f"{stem} ({counter}).json"

    output_path.write_text(dump_canvas(canvas), encoding="utf-8")
    return output_path
