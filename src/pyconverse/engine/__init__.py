"""Chat engine module for pyconverse.

Provides the pluggable reply function the conversation controller dispatches to.
"""

from .base import ChatEngine, FunctionEngine
from .factory import BUILTIN_ENGINES, as_engine, create_engine, load_engine

__all__ = [
    "BUILTIN_ENGINES",
    "ChatEngine",
    "FunctionEngine",
    "as_engine",
    "create_engine",
    "load_engine",
]
