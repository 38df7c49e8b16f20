"""Lean Canvas Editor — Streamlit UI with an assistant that comments on every edit."""

import sys
from pathlib import Path

# Add project root to path so 'lce' package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from lce.canvas import get_section
from lce.config import get_service_config
from lce.llm import complete
from lce.session import CanvasEditor
from lce.state import Slot
from lce.transcript import TranscriptStreamMerger
from lce.utils.formatter import dump_canvas, load_canvas, render_markdown
from lce.utils.validator import validate_service_config

st.set_page_config(page_title="Lean Canvas Editor", layout="wide")
st.title("Lean Canvas Editor")
st.markdown(
    "Build your business model canvas. Every item you add or remove is sent to the "
    "assistant on the right, which reacts and suggests what to work on next."
)

if "editor" not in st.session_state:
    st.session_state["editor"] = CanvasEditor()
    # complete() builds the model lazily, so a bad config surfaces as the
    # fixed failure turn instead of crashing the page
    st.session_state["merger"] = TranscriptStreamMerger(complete)
    st.session_state["revision"] = 0

editor: CanvasEditor = st.session_state["editor"]
merger: TranscriptStreamMerger = st.session_state["merger"]


# ---------------------------------------------------------------------------
# Widget callbacks — each runs one editor event before the page re-renders
# ---------------------------------------------------------------------------


def _widget_key(slot: Slot) -> str:
    # Revision bumps on add/remove so shifted items never reuse a stale widget value
    sub = slot.subsection_title or ""
    return f"item::{st.session_state['revision']}::{slot.section_id}::{sub}::{slot.index}"


def _on_add(section_id: str, subsection_title: str | None) -> None:
    slot = editor.add(section_id, subsection_title)
    if slot is not None:
        st.session_state["revision"] += 1


def _on_commit(slot: Slot) -> None:
    value = st.session_state.get(_widget_key(slot), "")
    editor.focus(slot)
    editor.commit(slot, value)


def _on_remove(slot: Slot) -> None:
    editor.remove(slot)
    st.session_state["revision"] += 1


def _on_upload() -> None:
    uploaded = st.session_state.get("canvas_upload")
    if uploaded is None:
        return
    try:
        editor.load(load_canvas(uploaded.getvalue().decode("utf-8")))
    except (UnicodeDecodeError, ValueError) as exc:
        st.session_state["upload_error"] = f"Could not load {uploaded.name}: {exc}"
        return
    st.session_state["upload_error"] = None
    st.session_state["revision"] += 1


# ---------------------------------------------------------------------------
# Canvas renderers
# ---------------------------------------------------------------------------


def _render_items(section_id: str, subsection_title: str | None, items: list[str]) -> None:
    for index, item in enumerate(items):
        slot = Slot(section_id, subsection_title, index)
        left, right = st.columns([6, 1])
        with left:
            st.text_input(
                "Item",
                value=item,
                key=_widget_key(slot),
                placeholder="Enter item...",
                label_visibility="collapsed",
                on_change=_on_commit,
                args=(slot,),
            )
        with right:
            st.button(
                "−",
                key=f"rm::{_widget_key(slot)}",
                on_click=_on_remove,
                args=(slot,),
                help="Remove this item",
            )
    if len(items) < 3:
        st.button(
            "＋ Add",
            key=f"add::{st.session_state['revision']}::{section_id}::{subsection_title or ''}",
            on_click=_on_add,
            args=(section_id, subsection_title),
        )


def _render_section(section_id: str) -> None:
    section = get_section(editor.canvas, section_id)
    with st.container(border=True):
        if "subsections" in section:
            for sub in section["subsections"]:
                st.markdown(f"**{sub['title'].upper()}** · {len(sub['items'])}/3")
                _render_items(section_id, sub["title"], sub["items"])
        else:
            items = section.get("items", [])
            st.markdown(f"**{section['title'].upper()}** · {len(items)}/3")
            _render_items(section_id, None, items)
        st.caption(f"#{section['order']}")


def _render_canvas() -> None:
    top = st.columns(5)
    with top[0]:
        _render_section("problem")
    with top[1]:
        _render_section("solution")
        _render_section("key-metrics")
    with top[2]:
        _render_section("unique-value-proposition")
    with top[3]:
        _render_section("unfair-advantage")
        _render_section("channels")
    with top[4]:
        _render_section("customer-segments")

    bottom = st.columns(2)
    with bottom[0]:
        _render_section("cost-structure")
    with bottom[1]:
        _render_section("revenue-streams")


# ---------------------------------------------------------------------------
# Chat panel
# ---------------------------------------------------------------------------


def _render_chat() -> None:
    st.subheader("Assistant")

    try:
        service = validate_service_config(get_service_config())
        st.caption(f"{service['model_id']} via {service['service_kind']}")
    except ValueError as exc:
        st.error(f"Service config problem: {exc}")

    for turn in merger.transcript.turns:
        role = "assistant" if turn["role"] in ("assistant", "bot") else "user"
        with st.chat_message(role):
            st.markdown(turn["content"])

    # One at a time: a notification leaves the queue only as send() appends
    # its user turn, so a rerun mid-stream cannot lose the ones behind it
    text = editor.next_notification()
    while text is not None:
        stream = merger.send(text)
        with st.chat_message("user"):
            st.markdown(text)
        with st.chat_message("assistant"):
            placeholder = st.empty()
            for reply in stream:
                placeholder.markdown(reply)
        text = editor.next_notification()


# ---------------------------------------------------------------------------
# Page logic
# ---------------------------------------------------------------------------

canvas_col, chat_col = st.columns([3, 1])

with canvas_col:
    _render_canvas()

    st.divider()
    left, right = st.columns(2)
    with left:
        st.download_button(
            label="Save Canvas (JSON)",
            data=dump_canvas(editor.canvas),
            file_name="canvas.json",
            mime="application/json",
            type="primary",
        )
    with right:
        st.download_button(
            label="Download as Markdown",
            data=render_markdown(editor.canvas),
            file_name="canvas.md",
            mime="text/markdown",
        )

    st.file_uploader(
        "Load a saved canvas (JSON)",
        type=["json"],
        key="canvas_upload",
        on_change=_on_upload,
    )
    if st.session_state.get("upload_error"):
        st.error(st.session_state["upload_error"])

with chat_col:
    _render_chat()
