"""Factory for creating chat engines.

Engines are selected by a built-in name or imported from a
``package.module:attribute`` path.
"""

import importlib
import time
from collections.abc import Callable
from typing import Any

from .base import ChatEngine, FunctionEngine


def _echo(message: str) -> str:
    return message


def _upper(message: str) -> str:
    return message.upper()


def _reverse(message: str) -> str:
    return message[::-1]


def _markdown(message: str) -> str:
    return f"**You said:**\n\n> {message}\n\n- length: `{len(message)}`"


def _slow(message: str) -> str:
    time.sleep(2.0)
    return message


def _fail(message: str) -> str:
    raise RuntimeError(f"engine refused: {message}")


BUILTIN_ENGINES: dict[str, tuple[Callable[[str], str], str]] = {
    "echo": (_echo, "Reply with the message unchanged"),
    "upper": (_upper, "Reply with the message upper-cased"),
    "reverse": (_reverse, "Reply with the message reversed"),
    "markdown": (_markdown, "Quote the message back as markdown"),
    "slow": (_slow, "Echo after a two second delay"),
    "fail": (_fail, "Always raise, to exercise error handling"),
}


def as_engine(engine: Any, variables: list[str] | None = None) -> ChatEngine | None:
    """Wrap a callable as a ChatEngine; pass engines through.

    Returns None when the argument is neither, so callers can decide
    how to report it.
    """
    if isinstance(engine, ChatEngine):
        return engine
    if callable(engine):
        return FunctionEngine(engine, variables=variables)
    return None


def load_engine(path: str) -> ChatEngine:
    """Import an engine from ``package.module:attribute``.

    The attribute may be a ChatEngine instance, a ChatEngine subclass,
    or a plain callable.

    Raises:
        ValueError: If the path is malformed or does not name an engine
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Engine path must look like 'package.module:attribute', got: {path}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import engine module '{module_name}': {e}") from e

    try:
        target = getattr(module, attribute)
    except AttributeError as e:
        raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'") from e

    if isinstance(target, type) and issubclass(target, ChatEngine):
        target = target()

    engine = as_engine(target)
    if engine is None:
        raise ValueError(f"'{path}' is not callable")
    return engine


def create_engine(
    name: str = "echo",
    variables: list[str] | None = None,
    system_message_template: str | None = None,
) -> ChatEngine:
    """Create a chat engine.

    Args:
        name: Built-in engine name or ``package.module:attribute`` path
        variables: Variable names offered for placeholder insertion
        system_message_template: System message shown when a conversation starts

    Returns:
        ChatEngine instance

    Raises:
        ValueError: If the engine is not supported
    """
    if name in BUILTIN_ENGINES:
        fn, _ = BUILTIN_ENGINES[name]
        return FunctionEngine(
            fn,
            title=name,
            variables=variables,
            system_message_template=system_message_template,
        )

    if ":" in name:
        engine = load_engine(name)
        if (variables and not engine.variables) or (
            system_message_template and not engine.system_message_template
        ):
            return FunctionEngine(
                engine.send,
                title=engine.title,
                variables=variables or engine.variables,
                system_message_template=system_message_template or engine.system_message_template,
            )
        return engine

    raise ValueError(
        f"Unsupported engine: {name}. "
        f"Supported engines: {', '.join(BUILTIN_ENGINES)} or package.module:attribute"
    )
