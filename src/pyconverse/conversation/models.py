"""Data models for the conversation transcript.

These models define what a message is and which state the conversation is in,
independent of how the transcript is displayed.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Which way a message travelled relative to the user."""

    OUTGOING = "outgoing"
    INCOMING = "incoming"


class Sender(str, Enum):
    """Who produced a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationState(str, Enum):
    """Controller state gating user input."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class ChatMessage(BaseModel):
    """A single entry of the transcript.

    Messages are immutable: a reply or an error notice is appended as a new
    message instead of editing an earlier one.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Raw message text")
    rendered_content: str | None = Field(
        default=None, description="Display form (HTML) or None when not computed"
    )
    direction: Direction
    sender: Sender
    uid: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_user(cls, content: str) -> "ChatMessage":
        return cls(content=content, direction=Direction.OUTGOING, sender=Sender.USER)

    @classmethod
    def from_assistant(cls, content: str, rendered_content: str | None = None) -> "ChatMessage":
        return cls(
            content=content,
            rendered_content=rendered_content,
            direction=Direction.INCOMING,
            sender=Sender.ASSISTANT,
        )

    @classmethod
    def from_system(cls, content: str) -> "ChatMessage":
        return cls(content=content, direction=Direction.INCOMING, sender=Sender.SYSTEM)

    @property
    def outgoing(self) -> bool:
        return self.direction == Direction.OUTGOING

    @property
    def best_content(self) -> str:
        """Rendered form when available, raw text otherwise."""
        return self.rendered_content if self.rendered_content else self.content


class TypingPlaceholder:
    """Marker for the transient "assistant is typing" transcript entry."""

    _instance: "TypingPlaceholder | None" = None

    def __new__(cls) -> "TypingPlaceholder":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TYPING"


TYPING = TypingPlaceholder()
