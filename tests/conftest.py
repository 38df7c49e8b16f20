"""Shared fixtures for the Lean Canvas Editor test suite."""

import pytest
from unittest.mock import patch

from lce.canvas import new_canvas
from lce.session import CanvasEditor


@pytest.fixture
def canvas():
    """Fresh empty nine-section canvas."""
    return new_canvas()


@pytest.fixture
def editor():
    """CanvasEditor over an empty canvas."""
    return CanvasEditor()


@pytest.fixture
def filled_editor():
    """Editor whose Solution list holds ["A", "B"] and Problem/Problem holds ["P1"]."""
    ed = CanvasEditor()
    for value in ("A", "B"):
        slot = ed.add("solution")
        ed.commit(slot, value)
    slot = ed.add("problem", "Problem")
    ed.commit(slot, "P1")
    ed.drain_notifications()
    return ed


@pytest.fixture
def scripted_completion():
    """Build a completion service that yields the given fragments, recording each history."""

    def _make(fragments, error=None):
        calls = []

        def _complete(history):
            calls.append(history)
            yield from fragments
            if error is not None:
                raise error

        _complete.calls = calls
        return _complete

    return _make


@pytest.fixture
def mock_config(tmp_path):
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "service_kind": "openai",
        "base_url": "http://localhost:11434/v1",
        "model_id": "llama3.1",
        "api_key": "",
        "temperature": 0,
        "fragment_mode": "delta",
        "system_prompt": "You are a startup coach.",
        "output_path": str(tmp_path / "output" / "canvas.json"),
    }
    with patch("lce.config._config", test_config):
        yield test_config
