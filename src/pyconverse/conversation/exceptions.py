"""Conversation error hierarchy.

Configuration and state errors are programming errors and reach the caller.
EngineFailure is the only expected runtime failure; the controller converts it
into a visible system message.
"""


class ConversationError(Exception):
    """Base class for conversation errors."""


class InvalidConfigurationError(ConversationError):
    """The controller was used without a usable chat engine."""


class InvalidStateError(ConversationError):
    """An operation is not allowed in the current store or controller state."""


class EngineFailure(ConversationError):
    """The configured chat engine raised instead of returning a reply."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause
