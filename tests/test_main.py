"""Tests for the terminal entry point's command handling."""

from unittest.mock import patch

from lce.canvas import lookup_items
from lce.main import handle, parse_key
from lce.utils.formatter import dump_canvas


class TestParseKey:
    def test_section_only(self):
        assert parse_key("solution") == ("solution", None)

    def test_section_and_subsection(self):
        assert parse_key("problem:Existing Alternatives") == ("problem", "Existing Alternatives")


class TestHandle:
    def test_quit_returns_false(self, editor):
        assert handle(editor, ["quit"]) is False

    def test_add_prompts_and_notifies(self, editor):
        with patch("builtins.input", return_value="Faster onboarding"):
            assert handle(editor, ["add", "solution"]) is True
        assert lookup_items(editor.canvas, "solution") == ["Faster onboarding"]
        assert editor.drain_notifications() == [
            "Added 'Faster onboarding' to Solution. Now the list is: 'Faster onboarding'"
        ]

    def test_add_to_full_list_reports(self, editor, capsys):
        for value in ("a", "b", "c"):
            editor.commit(editor.add("channels"), value)
        handle(editor, ["add", "channels"])
        assert "full" in capsys.readouterr().out

    def test_set_existing_item_does_not_notify(self, filled_editor):
        handle(filled_editor, ["set", "solution", "0", "Better", "A"])
        assert lookup_items(filled_editor.canvas, "solution") == ["Better A", "B"]
        assert filled_editor.drain_notifications() == []

    def test_rm_subsection_item(self, filled_editor):
        handle(filled_editor, ["rm", "problem:Problem", "0"])
        assert filled_editor.drain_notifications() == [
            "Removed 'P1' from Problem. Now the list is: (empty)"
        ]

    def test_unknown_command_prints_help(self, editor, capsys):
        handle(editor, ["dance"])
        assert "Commands" in capsys.readouterr().out


class TestLoadCommand:
    def test_load_replaces_canvas(self, editor, filled_editor, tmp_path):
        path = tmp_path / "canvas.json"
        path.write_text(dump_canvas(filled_editor.canvas), encoding="utf-8")

        assert handle(editor, ["load", str(path)]) is True

        assert lookup_items(editor.canvas, "solution") == ["A", "B"]
        assert editor.outbox == []

    def test_load_bad_file_keeps_canvas(self, filled_editor, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text('[{"id": "solution"}]', encoding="utf-8")

        handle(filled_editor, ["load", str(path)])

        assert "Could not load" in capsys.readouterr().out
        assert lookup_items(filled_editor.canvas, "solution") == ["A", "B"]

    def test_load_missing_file_reports(self, editor, tmp_path, capsys):
        handle(editor, ["load", str(tmp_path / "nope.json")])
        assert "Could not load" in capsys.readouterr().out


class TestAddPromptEof:
    def test_eof_at_item_prompt_leaves_abandoned_slot(self, editor):
        with patch("builtins.input", side_effect=EOFError):
            assert handle(editor, ["add", "solution"]) is True
        assert lookup_items(editor.canvas, "solution") == [""]
        assert editor.outbox == []
