"""Canvas and transcript state — plain dicts typed for the editor and chat."""

from typing import Literal, NamedTuple, NotRequired, TypedDict


class Subsection(TypedDict):
    title: str
    items: list[str]  # 0..3 entries, "" for a slot not yet typed into.


class Section(TypedDict):
    id: str  # Stable lookup key, e.g. "customer-segments".
    order: int  # Display number 1-9. Never recomputed.
    title: NotRequired[str]  # Simple sections only.
    items: NotRequired[list[str]]  # Simple sections only.
    subsections: NotRequired[list[Subsection]]  # Composite sections: exactly two.


Canvas = list[Section]


class Slot(NamedTuple):
    """Address of one item: positional, so it goes stale on earlier removals."""

    section_id: str
    subsection_title: str | None
    index: int


class Turn(TypedDict):
    role: Literal["user", "assistant", "bot"]
    content: str


class ServiceConfig(TypedDict):
    service_kind: str  # openai | anthropic | google
    base_url: str
    model_id: str
    api_key: str
