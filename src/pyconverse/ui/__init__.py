"""Terminal UI module for pyconverse.

Provides a Textual-based chat widget around the conversation controller.

Module structure (each module hides a design decision):
- config.py: Constants, log levels and chat options
- presentation.py: Observer protocol and bubble color policy
- actions.py: Commands with perform/refresh capability
- widgets.py: Transcript, input bar and log panel widgets
- screens.py: Modal compose dialog for the user message template
- styles.py: CSS layout
- app.py: Application orchestration (user interaction flow)
"""

from .actions import ActionGroup, BasicAction, ToggleAction, UIAction
from .app import ChatWidgetApp, run_textual_tui
from .config import ChatOptions, LogLevel
from .presentation import BubbleStyle, TranscriptObserver, bubble_style
from .screens import EditMessageScreen, EditResult
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, TypingIndicator

__all__ = [
    "ActionGroup",
    "BasicAction",
    "BubbleStyle",
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatOptions",
    "ChatWidgetApp",
    "DebugPanel",
    "EditMessageScreen",
    "EditResult",
    "LogLevel",
    "ToggleAction",
    "TranscriptObserver",
    "TypingIndicator",
    "UIAction",
    "bubble_style",
    "run_textual_tui",
]
