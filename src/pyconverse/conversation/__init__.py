"""Conversation module for pyconverse.

Module structure:
- models.py: Message, direction/sender and state definitions
- store.py: Ordered transcript with the transient typing placeholder
- controller.py: Input gating and the asynchronous engine round trip
- exceptions.py: Error hierarchy
"""

from .controller import FAILURE_NOTICE, ConversationController
from .exceptions import (
    ConversationError,
    EngineFailure,
    InvalidConfigurationError,
    InvalidStateError,
)
from .models import TYPING, ChatMessage, ConversationState, Direction, Sender, TypingPlaceholder
from .store import MessageStore

__all__ = [
    "FAILURE_NOTICE",
    "TYPING",
    "ChatMessage",
    "ConversationController",
    "ConversationError",
    "ConversationState",
    "Direction",
    "EngineFailure",
    "InvalidConfigurationError",
    "InvalidStateError",
    "MessageStore",
    "Sender",
    "TypingPlaceholder",
]
