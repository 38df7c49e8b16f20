"""Transcript — the chat between the founder's edits and the assistant.

Each call to ``TranscriptStreamMerger.send`` is one exchange: a user turn is
appended, the completion service is called with the whole history, and the
streamed fragments are folded into a single assistant turn.

An exchange moves through ``idle -> streaming -> sealed``. Its accumulator is
the authoritative reply text; the transcript turn it owns is rewritten from
the accumulator after every fragment. How fragments combine is fixed per
merger by ``fragment_mode``:

- ``delta``: each fragment is new text and is appended.
- ``cumulative``: each fragment is the whole reply so far and replaces it.
"""

import sys
from collections.abc import Callable, Iterable, Iterator
from typing import Literal

from lce.config import get_config
from lce.state import Turn

FAILURE_MESSAGE = (
    "Sorry, I couldn't reach the assistant service. "
    "Check the connection settings and try again."
)

VALID_FRAGMENT_MODES = {"delta", "cumulative"}

# Transcript roles that differ from the completion service's vocabulary
_ROLE_MAP = {"bot": "assistant"}

Completion = Callable[[list[dict]], Iterable[str]]


class Transcript:
    """Ordered, append-only list of turns."""

    def __init__(self, turns: list[Turn] | None = None):
        self.turns: list[Turn] = list(turns or [])

    def append(self, role: str, content: str) -> int:
        """Append a turn and return its position."""
        self.turns.append({"role": role, "content": content})
        return len(self.turns) - 1

    def to_messages(self, system_prompt: str = "") -> list[dict]:
        """Build the outbound request: optional system message, then every turn."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        for turn in self.turns:
            role = _ROLE_MAP.get(turn["role"], turn["role"])
            messages.append({"role": role, "content": turn["content"]})
        return messages

    def __len__(self) -> int:
        return len(self.turns)


class Exchange:
    """One assistant reply: owns at most one transcript turn."""

    def __init__(self, transcript: Transcript, fragment_mode: str = "delta"):
        if fragment_mode not in VALID_FRAGMENT_MODES:
            raise ValueError(
                f"fragment_mode must be one of {sorted(VALID_FRAGMENT_MODES)}, got '{fragment_mode}'."
            )
        self.transcript = transcript
        self.fragment_mode = fragment_mode
        self.state: Literal["idle", "streaming", "sealed"] = "idle"
        self.text = ""
        self.turn_index: int | None = None

    def feed(self, fragment: str) -> str:
        """Fold one fragment into the reply and return the full text so far."""
        if self.state == "sealed":
            return self.text

        if self.fragment_mode == "cumulative":
            self.text = fragment
        else:
            self.text += fragment

        if self.turn_index is None:
            self.turn_index = self.transcript.append("assistant", self.text)
        else:
            self.transcript.turns[self.turn_index]["content"] = self.text
        self.state = "streaming"
        return self.text

    def fail(self) -> str:
        """Replace whatever streamed so far with the fixed failure text and seal."""
        self.text = FAILURE_MESSAGE
        if self.turn_index is None:
            self.turn_index = self.transcript.append("assistant", self.text)
        else:
            self.transcript.turns[self.turn_index]["content"] = self.text
        self.state = "sealed"
        return self.text

    def seal(self) -> None:
        self.state = "sealed"


class TranscriptStreamMerger:
    """Appends user turns and merges the streamed replies into the transcript.

    Callers should not send while ``is_streaming`` is True. If they do,
    each exchange still writes only to its own turn, so turn order is kept.
    """

    def __init__(
        self,
        complete: Completion,
        transcript: Transcript | None = None,
        system_prompt: str | None = None,
        fragment_mode: str | None = None,
    ):
        config = get_config()
        self._complete = complete
        self.transcript = transcript if transcript is not None else Transcript()
        self.system_prompt = (
            system_prompt if system_prompt is not None else config.get("system_prompt", "")
        )
        self.fragment_mode = fragment_mode or config.get("fragment_mode", "delta")
        self._exchanges: list[Exchange] = []
        self.closed = False

    @property
    def is_streaming(self) -> bool:
        return any(ex.state != "sealed" for ex in self._exchanges)

    def send(self, user_text: str) -> Iterator[str]:
        """Append a user turn and start the reply.

        The user turn and the request history are captured immediately; the
        reply streams as the returned iterator is consumed, yielding the
        full reply text after each fragment.
        """
        self.transcript.append("user", user_text)
        history = self.transcript.to_messages(self.system_prompt)
        exchange = Exchange(self.transcript, self.fragment_mode)
        return self._drive(exchange, history)

    def send_and_wait(self, user_text: str) -> str:
        """Send and consume the whole reply. Returns the final assistant text."""
        text = ""
        for text in self.send(user_text):
            pass
        return text

    def close(self) -> None:
        """Tear down: fragments still in flight are dropped."""
        self.closed = True
        for exchange in self._exchanges:
            exchange.seal()

    def _drive(self, exchange: Exchange, history: list[dict]) -> Iterator[str]:
        # Registered only once consumption starts; a stream closed before its
        # first next() never counts as open
        if self.closed:
            return
        self._exchanges.append(exchange)
        try:
            for fragment in self._complete(history):
                if self.closed:
                    return
                yield exchange.feed(fragment)
        except Exception as exc:
            if self.closed:
                return
            print(f"[LCE] Completion failed: {exc!r}", file=sys.stderr)
            yield exchange.fail()
        finally:
            exchange.seal()
            if exchange in self._exchanges:
                self._exchanges.remove(exchange)
