"""Conversation controller.

Hides the state machine that gates input and the round trip to the chat
engine. The event loop that runs the UI is the only context that mutates the
store or the state; the engine runs in a thread executor and only hands back
a reply or an exception.

State machine:
    IDLE --submit(valid)--> AWAITING_RESPONSE --completion--> IDLE
"""

import asyncio
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Any

from ..engine import ChatEngine, as_engine
from ..rendering import expand_template, to_display_form
from .exceptions import EngineFailure, InvalidConfigurationError, InvalidStateError
from .models import ChatMessage, ConversationState
from .store import MessageStore

FAILURE_NOTICE = "Failed to get response from chat."

StateListener = Callable[[ConversationState], None]


class ConversationController:
    """Single-request-in-flight bridge between the transcript and an engine.

    Example:
        controller = ConversationController()
        controller.configure_engine(str.upper)
        task = controller.submit("hi")   # returns immediately
        await task                       # transcript: "hi" (user), "HI" (assistant)
    """

    def __init__(
        self,
        store: MessageStore | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._store = store if store is not None else MessageStore()
        self._executor = executor
        self._engine: ChatEngine | None = None
        self._state = ConversationState.IDLE
        self._state_listeners: list[StateListener] = []
        self._debug_callback: Any = None
        self._pending: asyncio.Task[None] | None = None
        self.user_message_template: str | None = None

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def engine(self) -> ChatEngine | None:
        return self._engine

    def configure_engine(self, engine: Any) -> None:
        """Install the reply function used for dispatch.

        Args:
            engine: A ChatEngine or a plain ``str -> str`` callable

        Raises:
            InvalidConfigurationError: If engine is missing or not callable
        """
        wrapped = as_engine(engine) if engine is not None else None
        if wrapped is None:
            raise InvalidConfigurationError("A callable chat engine is required")
        self._engine = wrapped
        self._debug("info", "Controller", f"Engine configured: {wrapped.title}")

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callable notified after every state transition."""
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    def _set_state(self, state: ConversationState) -> None:
        if self._state == state:
            return
        self._state = state
        self._debug("debug", "Controller", f"State -> {state.value}")
        for listener in list(self._state_listeners):
            listener(state)

    def can_submit(self, text: str) -> bool:
        """Whether the host should allow sending text right now.

        Derived on every call from state, engine and text; never stored.
        """
        return (
            self._state == ConversationState.IDLE
            and self._engine is not None
            and bool(text.strip())
        )

    def submit(self, text: str) -> "asyncio.Task[None] | None":
        """Send a user message to the engine.

        Must be called on the event loop that owns the UI. Returns as soon as
        the outgoing message and typing placeholder are in the store.

        Args:
            text: Raw user input

        Returns:
            The task that reconciles the reply, or None for blank input

        Raises:
            InvalidStateError: If a request is already in flight
            InvalidConfigurationError: If no engine is configured
        """
        if not text.strip():
            return None
        if self._state != ConversationState.IDLE:
            raise InvalidStateError("A response is still pending")
        if self._engine is None:
            raise InvalidConfigurationError("Chat engine is not configured")

        loop = asyncio.get_running_loop()

        system_template = self._engine.system_message_template
        if system_template and len(self._store) == 0:
            self._store.append(
                ChatMessage.from_system(expand_template(system_template, {"message": text}))
            )
        self._store.append(ChatMessage.from_user(text))
        self._set_state(ConversationState.AWAITING_RESPONSE)
        self._store.append_typing_placeholder()

        request = text
        if self.user_message_template:
            request = expand_template(self.user_message_template, {"message": text})

        self._debug("info", "Controller", f"Dispatching: '{request[:50]}'")
        future = loop.run_in_executor(self._executor, self._engine.send, request)
        self._pending = loop.create_task(self._reconcile(future))
        return self._pending

    async def _reconcile(self, future: "asyncio.Future[str]") -> None:
        """Apply the engine outcome to the store, on the event loop."""
        try:
            reply = await future
        except asyncio.CancelledError:
            raise
        except BaseException as e:
            failure = EngineFailure(e)
            self._debug("error", "Engine", f"{FAILURE_NOTICE} {type(e).__name__}: {failure}")
            self._store.remove_typing_placeholder()
            self._store.append(ChatMessage.from_system(f"{FAILURE_NOTICE} {failure}"))
        else:
            reply = "" if reply is None else str(reply)
            self._debug("info", "Engine", f"Reply received ({len(reply)} chars)")
            self._store.remove_typing_placeholder()
            self._store.append(ChatMessage.from_assistant(reply, to_display_form(reply)))
        finally:
            self._pending = None
            self._store.remove_typing_placeholder()
            self._set_state(ConversationState.IDLE)

    async def wait_idle(self) -> None:
        """Wait for the in-flight request, if any, to be reconciled."""
        if self._pending is not None:
            await self._pending
