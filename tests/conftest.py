"""Pytest configuration and shared fixtures."""
import threading

import pytest

from pyconverse.conversation import ConversationController, MessageStore


@pytest.fixture
def store():
    """Return an empty message store owned by the test thread."""
    return MessageStore()


@pytest.fixture
def controller(store):
    """Return a controller with an upper-casing engine."""
    controller = ConversationController(store=store)
    controller.configure_engine(lambda text: text.upper())
    return controller


@pytest.fixture
def debug_log():
    """Collect (level, component, message) tuples from a debug callback."""
    entries: list[tuple[str, str, str]] = []

    def callback(level: str, component: str, message: str) -> None:
        entries.append((level, component, message))

    callback.entries = entries
    return callback


@pytest.fixture
def gated_engine():
    """Return an engine that blocks until its release event is set."""
    release = threading.Event()
    calls: list[str] = []

    def engine(text: str) -> str:
        calls.append(text)
        if not release.wait(timeout=5):
            raise TimeoutError("gated engine was never released")
        return f"reply to {text}"

    engine.release = release
    engine.calls = calls
    yield engine
    release.set()
