"""Completion service — streams an assistant reply from the configured chat model.

The rest of the package only sees ``complete(history) -> Iterator[str]``.
LangChain chat models stream deltas: each yielded fragment is new text, so
the merger should run with ``fragment_mode: delta`` against this service.
"""

from collections.abc import Iterator

from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from lce.config import get_config, get_service_config
from lce.utils.validator import validate_service_config


def get_chat_model(service: dict | None = None):
    """Build the LangChain chat model selected by service_kind."""
    config = get_config()
    service = validate_service_config(service or get_service_config())
    temperature = config.get("temperature", 0.3)
    kind = service["service_kind"]

    if kind == "anthropic":
        kwargs = {}
        if service.get("base_url"):
            kwargs["base_url"] = service["base_url"]
        return ChatAnthropic(
            model=service["model_id"],
            api_key=service["api_key"],
            temperature=temperature,
            **kwargs,
        )
    if kind == "google":
        return ChatGoogleGenerativeAI(
            model=service["model_id"],
            google_api_key=service["api_key"],
            temperature=temperature,
        )
    # OpenAI-compatible servers (Ollama, LM Studio) accept any placeholder key
    return ChatOpenAI(
        model=service["model_id"],
        base_url=service["base_url"],
        api_key=service.get("api_key") or "not-needed",
        temperature=temperature,
        streaming=True,
    )


def _chunk_text(content) -> str:
    """Extract plain text from a chunk's content (a string, or a list of content blocks)."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def complete(history: list[dict], llm=None) -> Iterator[str]:
    """Stream the reply to an ordered list of {role, content} messages.

    Yields non-empty text deltas. Errors from the provider propagate to the
    caller unchanged; no retries are attempted.
    """
    llm = llm or get_chat_model()
    for chunk in llm.stream(history):
        text = _chunk_text(chunk.content)
        if text:
            yield text
