"""Ordered transcript storage.

Hides how the transcript and the transient typing placeholder are kept.
The store holds no locks: every mutation is expected on the thread that owns
the UI event loop, and mutating from another thread is refused.
"""

import json
import threading
from collections.abc import Callable

from .exceptions import InvalidStateError
from .models import TYPING, ChatMessage, Sender, TypingPlaceholder

TranscriptListener = Callable[[tuple[ChatMessage, ...]], None]


class MessageStore:
    """Append-only transcript plus at most one typing placeholder.

    Insertion order is conversation order. The placeholder, when present, is
    always the last entry: messages appended while it is shown land before it.
    """

    def __init__(self, check_thread: bool = True) -> None:
        self._messages: list[ChatMessage] = []
        self._typing = False
        self._listeners: list[TranscriptListener] = []
        self._owner_thread = threading.get_ident() if check_thread else None

    def _check_owner(self) -> None:
        if self._owner_thread is not None and threading.get_ident() != self._owner_thread:
            raise InvalidStateError("MessageStore mutated outside its owning thread")

    def add_listener(self, listener: TranscriptListener) -> None:
        """Register a callable receiving the snapshot after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TranscriptListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def append(self, message: ChatMessage) -> None:
        """Add a message to the end of the transcript."""
        self._check_owner()
        self._messages.append(message)
        self._notify()

    def append_typing_placeholder(self) -> None:
        """Show the typing placeholder.

        Raises:
            InvalidStateError: If the placeholder is already present
        """
        self._check_owner()
        if self._typing:
            raise InvalidStateError("Typing placeholder already present")
        self._typing = True
        self._notify()

    def remove_typing_placeholder(self) -> None:
        """Hide the typing placeholder; no-op when absent."""
        self._check_owner()
        if not self._typing:
            return
        self._typing = False
        self._notify()

    @property
    def has_typing_placeholder(self) -> bool:
        return self._typing

    def snapshot(self) -> tuple[ChatMessage, ...]:
        """Current transcript without the typing placeholder."""
        return tuple(self._messages)

    def entries(self) -> list[ChatMessage | TypingPlaceholder]:
        """Transcript as displayed, with the placeholder last when present."""
        result: list[ChatMessage | TypingPlaceholder] = list(self._messages)
        if self._typing:
            result.append(TYPING)
        return result

    def last_message(self, sender: Sender | None = None) -> ChatMessage | None:
        """Most recent message, optionally restricted to one sender."""
        for message in reversed(self._messages):
            if sender is None or message.sender == sender:
                return message
        return None

    def clear(self) -> None:
        """Drop all messages. A pending typing placeholder stays."""
        self._check_owner()
        self._messages.clear()
        self._notify()

    def to_json(self) -> str | None:
        """Export the transcript as JSON, or None when it is empty."""
        if not self._messages:
            return None
        return json.dumps(
            [message.model_dump(mode="json") for message in self._messages],
            indent=2,
        )

    def __len__(self) -> int:
        return len(self._messages)
