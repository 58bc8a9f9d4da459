"""UI actions.

Hides how commands are bound to the host surface. Every action can be
performed and can refresh its own enabled/selected state; a group fans the
refresh out to its children.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable


class UIAction(ABC):
    """Capability shared by every command the host exposes."""

    def __init__(self, name: str, description: str = "") -> None:
        self.name = name
        self.description = description or name
        self.enabled = True

    @abstractmethod
    def perform(self) -> None:
        """Execute the action."""

    @abstractmethod
    def refresh_state(self) -> None:
        """Recompute enabled (and selected) state."""


class BasicAction(UIAction):
    """Action running a handler, optionally enabled by a predicate."""

    def __init__(
        self,
        name: str,
        handler: Callable[[], None],
        enabled_when: Callable[[], bool] | None = None,
        description: str = "",
    ) -> None:
        super().__init__(name, description)
        self._handler = handler
        self._enabled_when = enabled_when
        self.refresh_state()

    def perform(self) -> None:
        self.refresh_state()
        if self.enabled:
            self._handler()

    def refresh_state(self) -> None:
        if self._enabled_when is not None:
            self.enabled = bool(self._enabled_when())


class ToggleAction(UIAction):
    """Action flipping a boolean option."""

    def __init__(
        self,
        name: str,
        getter: Callable[[], bool],
        setter: Callable[[bool], None],
        description: str = "",
    ) -> None:
        super().__init__(name, description)
        self._getter = getter
        self._setter = setter
        self.selected = bool(getter())

    def perform(self) -> None:
        self._setter(not self._getter())
        self.refresh_state()

    def refresh_state(self) -> None:
        self.selected = bool(self._getter())


class ActionGroup(UIAction):
    """Composite action; performing it has no effect of its own."""

    def __init__(self, name: str, actions: list[UIAction] | None = None, description: str = "") -> None:
        super().__init__(name, description)
        self.actions: list[UIAction] = list(actions or [])
        self.refresh_state()

    def add_action(self, action: UIAction) -> None:
        self.actions.append(action)
        self.refresh_state()

    def perform(self) -> None:
        pass

    def refresh_state(self) -> None:
        for action in self.actions:
            action.refresh_state()
        self.enabled = any(action.enabled for action in self.actions)

    def __iter__(self):
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)
