"""Edit session — tracks which canvas slot is being typed into.

An EditSession holds two optional slot references:

- ``editing``: the slot currently receiving keystrokes.
- ``pending_new_item``: the slot most recently created by an add and not
  yet confirmed with a non-empty value.

Exactly one notification comes out of each completed edit: an "added"
notification when a pending slot is committed with text, a "removed"
notification when a non-empty item is deleted. Keystrokes never notify.

The session is owned by a CanvasEditor; there is no module-level state.
"""

import sys
from dataclasses import dataclass, field

from lce.canvas import add_item, lookup_items, new_canvas, remove_item, section_title, update_item
from lce.state import Canvas, Slot
from lce.utils.notification import compose_notification


@dataclass
class EditSession:
    editing: Slot | None = None
    pending_new_item: Slot | None = None


def _same_list(a: Slot, b: Slot) -> bool:
    return a.section_id == b.section_id and a.subsection_title == b.subsection_title


def _retire(ref: Slot | None, removed: Slot) -> Slot | None:
    """Return what a held reference becomes once the item at ``removed`` is gone.

    The removed slot itself is retired. A later slot in the same list follows
    its item, which has moved down one position.
    """
    if ref is None or not _same_list(ref, removed):
        return ref
    if ref.index == removed.index:
        return None
    if ref.index > removed.index:
        return ref._replace(index=ref.index - 1)
    return ref


def on_focus(session: EditSession, canvas: Canvas, slot: Slot) -> None:
    """Enter editing mode for a slot that still holds an unconfirmed empty item."""
    items = lookup_items(canvas, slot.section_id, slot.subsection_title)
    if 0 <= slot.index < len(items) and items[slot.index] == "":
        session.editing = slot


def on_add(session: EditSession, slot: Slot) -> None:
    """A new slot was created: it is pending and immediately being edited."""
    session.pending_new_item = slot
    session.editing = slot


def on_blur_or_commit(session: EditSession, slot: Slot, final_value: str) -> bool:
    """Leave a slot. Returns True when the commit completes a pending add.

    An abandoned pending slot (committed empty) does not notify and stays
    pending; its empty item remains on the canvas and counts toward the cap.
    """
    added = slot == session.pending_new_item and bool(final_value.strip())
    session.editing = None
    if added:
        session.pending_new_item = None
    return added


def on_remove(session: EditSession, slot: Slot, removed_value: str) -> bool:
    """Retire references to a slot about to be deleted.

    Must run before the list mutation is applied. Returns True when the
    removed value was non-empty and so deserves a notification.
    """
    session.editing = _retire(session.editing, slot)
    session.pending_new_item = _retire(session.pending_new_item, slot)
    return bool(removed_value.strip())


@dataclass
class CanvasEditor:
    """Drives canvas mutations and turns completed edits into notifications.

    Each public method is one UI event handled synchronously: the canvas,
    the edit session and the outbox are consistent again when it returns.
    Notification texts queue in ``outbox`` until the chat layer drains them.
    """

    canvas: Canvas = field(default_factory=new_canvas)
    session: EditSession = field(default_factory=EditSession)
    outbox: list[str] = field(default_factory=list)

    def add(self, section_id: str, subsection_title: str | None = None) -> Slot | None:
        """Append an empty item and start editing it. None when the list is full."""
        self.canvas, index = add_item(self.canvas, section_id, subsection_title)
        if index is None:
            return None
        slot = Slot(section_id, subsection_title, index)
        on_add(self.session, slot)
        return slot

    def focus(self, slot: Slot) -> None:
        on_focus(self.session, self.canvas, slot)

    def type(self, slot: Slot, value: str) -> None:
        """Keystroke: replace the slot's value. Never notifies."""
        self.canvas = update_item(
            self.canvas, slot.section_id, slot.index, value, slot.subsection_title
        )

    def commit(self, slot: Slot, final_value: str | None = None) -> str | None:
        """Blur/enter on a slot. Returns the notification text if one fired.

        ``final_value`` is written to the slot first when given; otherwise
        the slot's current value is used. A stale slot is ignored.
        """
        items = lookup_items(self.canvas, slot.section_id, slot.subsection_title)
        if not 0 <= slot.index < len(items):
            if self.session.editing == slot:
                self.session.editing = None
            return None

        if final_value is not None:
            self.type(slot, final_value)
        else:
            final_value = items[slot.index]

        if not on_blur_or_commit(self.session, slot, final_value):
            return None

        remaining = lookup_items(self.canvas, slot.section_id, slot.subsection_title)
        return self._notify("added", slot, final_value, remaining)

    def remove(self, slot: Slot) -> str | None:
        """Delete the item at a slot. Returns the notification text if one fired."""
        items = lookup_items(self.canvas, slot.section_id, slot.subsection_title)
        if not 0 <= slot.index < len(items):
            return None

        fire = on_remove(self.session, slot, items[slot.index])
        self.canvas, removed = remove_item(
            self.canvas, slot.section_id, slot.index, slot.subsection_title
        )
        if not fire:
            return None

        remaining = lookup_items(self.canvas, slot.section_id, slot.subsection_title)
        return self._notify("removed", slot, removed, remaining)

    def load(self, canvas: Canvas) -> None:
        """Replace the whole canvas. Held slots are dropped; nothing is announced."""
        self.canvas = canvas
        self.session = EditSession()

    def next_notification(self) -> str | None:
        """Pop the oldest queued notification, or None when the queue is empty."""
        return self.outbox.pop(0) if self.outbox else None

    def drain_notifications(self) -> list[str]:
        """Return queued notification texts in the order they fired, and clear the queue."""
        drained, self.outbox = self.outbox, []
        return drained

    def _notify(self, kind: str, slot: Slot, value: str, remaining: list[str]) -> str:
        text = compose_notification(
            kind,
            section_title(self.canvas, slot.section_id),
            slot.subsection_title,
            value,
            remaining,
        )
        print(f"[LCE] {text}", file=sys.stderr)
        self.outbox.append(text)
        return text
