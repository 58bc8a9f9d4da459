"""
pyconverse: an embeddable chat widget with an asynchronous bridge to a
pluggable chat engine.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import (
    ChatMessage,
    ConversationController,
    ConversationState,
    Direction,
    EngineFailure,
    InvalidConfigurationError,
    InvalidStateError,
    MessageStore,
    Sender,
)
from .engine import ChatEngine, FunctionEngine, create_engine
from .rendering import build_token, highlight_placeholders, insert_at, to_display_form

__all__ = [
    "ChatEngine",
    "ChatMessage",
    "ConversationController",
    "ConversationState",
    "Direction",
    "EngineFailure",
    "FunctionEngine",
    "InvalidConfigurationError",
    "InvalidStateError",
    "MessageStore",
    "Sender",
    "build_token",
    "create_engine",
    "highlight_placeholders",
    "insert_at",
    "to_display_form",
]
