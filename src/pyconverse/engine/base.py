"""Abstract base class for chat engines.

This module hides the design decision of what produces replies.
An engine is a synchronous function from a user message to a reply; it runs
on a background thread and may raise instead of returning.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable


class ChatEngine(ABC):
    """Pluggable reply function with optional display metadata."""

    @abstractmethod
    def send(self, message: str) -> str:
        """Turn a user message into a reply.

        Args:
            message: Text entered by the user (template already expanded)

        Returns:
            Reply text, markdown allowed

        Raises:
            Exception: Any engine-specific failure
        """

    @property
    def title(self) -> str:
        """Title shown by the host surface."""
        return "Chat"

    @property
    def variables(self) -> list[str]:
        """Variable names offered for insertion as {{name}} placeholders."""
        return []

    @property
    def system_message_template(self) -> str | None:
        """Template shown as a system message when a conversation starts.

        Expanded with {{message}} bound to the first user message; None or
        empty disables it.
        """
        return None

    def __call__(self, message: str) -> str:
        return self.send(message)


class FunctionEngine(ChatEngine):
    """Engine backed by a plain ``str -> str`` callable."""

    def __init__(
        self,
        fn: Callable[[str], str],
        title: str | None = None,
        variables: list[str] | None = None,
        system_message_template: str | None = None,
    ) -> None:
        self._fn = fn
        self._title = title or getattr(fn, "__name__", "Chat")
        self._variables = list(variables or [])
        self._system_message_template = system_message_template

    def send(self, message: str) -> str:
        return self._fn(message)

    @property
    def title(self) -> str:
        return self._title

    @property
    def variables(self) -> list[str]:
        return list(self._variables)

    @property
    def system_message_template(self) -> str | None:
        return self._system_message_template
