"""Canvas document — the nine fixed Lean Canvas sections and their mutation primitives.

Every mutation returns a new canvas; the input canvas is never modified, so a
value handed to the UI or the export layer cannot change underneath it.
Unknown section ids, unknown subsection titles and out-of-range indices are
no-ops rather than errors: a slot reference can go stale between the moment
an action is queued and the moment it is applied.
"""

import copy
from collections.abc import Iterator

from lce.state import Canvas, Section

MAX_ITEMS = 3

INITIAL_CANVAS: Canvas = [
    {
        "id": "problem",
        "order": 2,
        "subsections": [
            {"title": "Problem", "items": []},
            {"title": "Existing Alternatives", "items": []},
        ],
    },
    {"id": "solution", "order": 4, "title": "Solution", "items": []},
    {"id": "key-metrics", "order": 8, "title": "Key Metrics", "items": []},
    {
        "id": "unique-value-proposition",
        "order": 3,
        "subsections": [
            {"title": "Unique Value Proposition", "items": []},
            {"title": "High Level Concept", "items": []},
        ],
    },
    {"id": "unfair-advantage", "order": 9, "title": "Unfair Advantage", "items": []},
    {"id": "channels", "order": 5, "title": "Channels", "items": []},
    {
        "id": "customer-segments",
        "order": 1,
        "subsections": [
            {"title": "Customer Segments", "items": []},
            {"title": "Early Adopter", "items": []},
        ],
    },
    {"id": "cost-structure", "order": 7, "title": "Cost Structure", "items": []},
    {"id": "revenue-streams", "order": 6, "title": "Revenue Streams", "items": []},
]


def new_canvas() -> Canvas:
    """Return a fresh, empty canvas."""
    return copy.deepcopy(INITIAL_CANVAS)


def get_section(canvas: Canvas, section_id: str) -> Section | None:
    """Find a section by id, or None if the id is unknown."""
    for section in canvas:
        if section["id"] == section_id:
            return section
    return None


def _target_list(section: Section, subsection_title: str | None) -> list[str] | None:
    """Resolve the item list a (section, subsection) key points at.

    A subsection title on a simple section, or a missing title on a composite
    section, resolves to nothing.
    """
    if subsection_title is not None:
        for sub in section.get("subsections", []):
            if sub["title"] == subsection_title:
                return sub["items"]
        return None
    if "subsections" in section:
        return None
    return section.get("items")


def lookup_items(canvas: Canvas, section_id: str, subsection_title: str | None = None) -> list[str]:
    """Return a copy of the items at a key; empty for unknown keys."""
    section = get_section(canvas, section_id)
    if section is None:
        return []
    items = _target_list(section, subsection_title)
    return list(items) if items is not None else []


def section_title(canvas: Canvas, section_id: str, subsection_title: str | None = None) -> str:
    """Display title for a key: subsection title, else section title, else the raw id."""
    if subsection_title:
        return subsection_title
    section = get_section(canvas, section_id)
    if section and section.get("title"):
        return section["title"]
    return section_id


def iter_lists(canvas: Canvas) -> Iterator[tuple[str, str | None, list[str]]]:
    """Yield (section_id, subsection_title, items) for every item list on the canvas."""
    for section in canvas:
        if "subsections" in section:
            for sub in section["subsections"]:
                yield section["id"], sub["title"], sub["items"]
        else:
            yield section["id"], None, section.get("items", [])


def _with_items(
    canvas: Canvas, section_id: str, subsection_title: str | None, items: list[str]
) -> Canvas:
    """Return a copy of canvas with the list at the given key replaced by items."""
    updated = copy.deepcopy(canvas)
    section = get_section(updated, section_id)
    if subsection_title is not None:
        for sub in section["subsections"]:
            if sub["title"] == subsection_title:
                sub["items"] = items
    else:
        section["items"] = items
    return updated


def add_item(
    canvas: Canvas, section_id: str, subsection_title: str | None = None
) -> tuple[Canvas, int | None]:
    """Append an empty item to a list.

    Returns (new_canvas, index_of_new_item). The index is the list length
    measured before the append. When the list is full or the key is unknown,
    returns (canvas, None) unchanged.
    """
    section = get_section(canvas, section_id)
    items = _target_list(section, subsection_title) if section else None
    if items is None:
        return canvas, None

    old_length = len(items)
    if old_length >= MAX_ITEMS:
        return canvas, None

    return _with_items(canvas, section_id, subsection_title, [*items, ""]), old_length


def remove_item(
    canvas: Canvas, section_id: str, index: int, subsection_title: str | None = None
) -> tuple[Canvas, str | None]:
    """Remove the item at index; later items shift down by one.

    Returns (new_canvas, removed_value). An out-of-range index or unknown key
    returns (canvas, None) unchanged.
    """
    items = lookup_items(canvas, section_id, subsection_title)
    if not 0 <= index < len(items):
        return canvas, None

    removed = items.pop(index)
    return _with_items(canvas, section_id, subsection_title, items), removed


def update_item(
    canvas: Canvas,
    section_id: str,
    index: int,
    value: str,
    subsection_title: str | None = None,
) -> Canvas:
    """Replace the value at index. Out-of-range indices leave the canvas unchanged."""
    items = lookup_items(canvas, section_id, subsection_title)
    if not 0 <= index < len(items):
        return canvas

    items[index] = value
    return _with_items(canvas, section_id, subsection_title, items)
