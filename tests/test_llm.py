"""Tests for lce.llm: model selection and fragment streaming."""

from unittest.mock import MagicMock, patch

import pytest

from lce.llm import _chunk_text, complete, get_chat_model


def _chunk(content):
    chunk = MagicMock()
    chunk.content = content
    return chunk


class TestChunkText:
    def test_plain_string(self):
        assert _chunk_text("hello") == "hello"

    def test_content_blocks(self):
        blocks = [{"type": "text", "text": "Hel"}, {"type": "tool_use", "id": "x"}, {"type": "text", "text": "lo"}]
        assert _chunk_text(blocks) == "Hello"

    def test_empty(self):
        assert _chunk_text([]) == ""
        assert _chunk_text(None) == ""


class TestComplete:
    def test_yields_non_empty_deltas(self):
        llm = MagicMock()
        llm.stream.return_value = iter([_chunk("Hel"), _chunk(""), _chunk("lo")])
        history = [{"role": "user", "content": "hi"}]

        assert list(complete(history, llm=llm)) == ["Hel", "lo"]
        llm.stream.assert_called_once_with(history)

    def test_errors_propagate(self):
        llm = MagicMock()
        llm.stream.side_effect = ConnectionError("refused")
        with pytest.raises(ConnectionError):
            list(complete([], llm=llm))

    def test_is_lazy(self):
        llm = MagicMock()
        complete([], llm=llm)
        llm.stream.assert_not_called()


class TestGetChatModel:
    @patch("lce.llm.ChatOpenAI")
    def test_openai_compatible(self, chat_openai, mock_config):
        get_chat_model()
        kwargs = chat_openai.call_args.kwargs
        assert kwargs["model"] == "llama3.1"
        assert kwargs["base_url"] == "http://localhost:11434/v1"
        assert kwargs["api_key"] == "not-needed"

    @patch("lce.llm.ChatAnthropic")
    def test_anthropic(self, chat_anthropic, mock_config):
        get_chat_model({
            "service_kind": "anthropic",
            "base_url": "",
            "model_id": "claude-sonnet-4-6",
            "api_key": "sk-test",
        })
        kwargs = chat_anthropic.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-6"
        assert kwargs["api_key"] == "sk-test"
        assert "base_url" not in kwargs

    @patch("lce.llm.ChatGoogleGenerativeAI")
    def test_google(self, chat_google, mock_config):
        get_chat_model({
            "service_kind": "google",
            "base_url": "",
            "model_id": "gemini-2.0-flash",
            "api_key": "g-test",
        })
        assert chat_google.call_args.kwargs["google_api_key"] == "g-test"

    def test_invalid_config_raises(self, mock_config):
        mock_config["model_id"] = ""
        with pytest.raises(ValueError):
            get_chat_model()
