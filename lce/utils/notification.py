"""Notification text — turns a completed add/remove into the next user message.

The founder never tells the assistant about edits directly; each completed
edit becomes a user turn built here.
"""

from typing import Literal

EMPTY_LIST_TEXT = "(empty)"


def compose_notification(
    kind: Literal["added", "removed"],
    section_title: str,
    subsection_title: str | None,
    value: str,
    remaining_items: list[str],
) -> str:
    """Render the message for one completed edit.

    Args:
        kind: "added" or "removed".
        section_title: Section display title, or the raw section id when the
            section has no title.
        subsection_title: Subsection title; preferred over section_title.
        value: The item text that was added or removed.
        remaining_items: The list after the change. Empty items are skipped.
    """
    target = subsection_title or section_title
    listed = [f"'{item}'" for item in remaining_items if item.strip()]
    current = ", ".join(listed) if listed else EMPTY_LIST_TEXT

    if kind == "added":
        return f"Added '{value}' to {target}. Now the list is: {current}"
    return f"Removed '{value}' from {target}. Now the list is: {current}"
