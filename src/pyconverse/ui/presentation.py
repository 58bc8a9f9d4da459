"""Presentation adapter.

Hides how transcript state maps onto what is drawn: the observer protocol the
host implements and the bubble color policy by sender, direction and
appearance.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..conversation import ChatMessage, ConversationState, Sender


@runtime_checkable
class TranscriptObserver(Protocol):
    """Host surface notified on the UI event loop."""

    def on_transcript_changed(self, snapshot: tuple[ChatMessage, ...]) -> None: ...

    def on_state_changed(self, state: ConversationState) -> None: ...

    def render_message(self, message: ChatMessage) -> object:
        """Build whatever the surface draws for one message."""
        ...


@dataclass(frozen=True)
class BubbleStyle:
    """How one message bubble is drawn."""

    background: str
    border: str
    side: str  # "left" or "right"
    css_class: str
    label: str


USER_BUBBLE = "#007aff"
SYSTEM_BUBBLE = "#209bff"
OUTGOING_BORDER = "#0050c8"
INCOMING_DARK = ("#404040", "#808080")
INCOMING_LIGHT = ("#f0f0f0", "#c0c0c0")
ERROR_BORDER = "#f38ba8"


def bubble_style(message: ChatMessage, dark: bool = True) -> BubbleStyle:
    """Choose colors and placement for a message bubble.

    Outgoing bubbles are blue and sit on the right; incoming bubbles are grey,
    following the appearance, and sit on the left. System notices arriving
    from the engine keep the incoming shape with an error border.
    """
    if message.outgoing:
        background = USER_BUBBLE if message.sender == Sender.USER else SYSTEM_BUBBLE
        return BubbleStyle(
            background=background,
            border=OUTGOING_BORDER,
            side="right",
            css_class="user-message",
            label="You",
        )

    background, border = INCOMING_DARK if dark else INCOMING_LIGHT
    if message.sender == Sender.SYSTEM:
        return BubbleStyle(
            background=background,
            border=ERROR_BORDER,
            side="left",
            css_class="system-message",
            label="System",
        )
    return BubbleStyle(
        background=background,
        border=border,
        side="left",
        css_class="assistant-message",
        label="Assistant",
    )
