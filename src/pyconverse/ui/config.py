"""UI configuration.

Centralizes constants and user-facing options for the UI module.
"""

from pydantic import BaseModel, Field


class LogLevel:
    """Log level constants with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR; a lower value shows more messages.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


class ChatOptions(BaseModel):
    """Options the user can toggle while chatting."""

    render_markdown: bool = Field(default=True, description="Render assistant replies as markdown")
    clear_after_sending: bool = Field(default=True, description="Empty the input after a message is sent")
    typing_label: str = Field(default="Thinking", description="Text of the typing placeholder")
    welcome_message: str | None = Field(default=None, description="Assistant message shown on start")


# Typing placeholder animation
TYPING_INTERVAL_SECONDS = 0.75
TYPING_MAX_DOTS = 5

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Chat display configuration
MESSAGE_TIMESTAMP_FORMAT = "%H:%M:%S"
