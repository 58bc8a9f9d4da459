"""Custom Textual widgets for the chat surface.

Hides widget implementation details:
- Transcript rendering (bubbles, typing placeholder)
- Input bar with history, live placeholder preview and send gating
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..conversation import ChatMessage, ConversationState, MessageStore, Sender
from ..rendering import build_token, highlight_text, insert_at
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    TYPING_INTERVAL_SECONDS,
    TYPING_MAX_DOTS,
    ChatOptions,
    LogLevel,
)
from .presentation import TranscriptObserver, bubble_style


def location_to_offset(text: str, location: tuple[int, int]) -> int:
    """Convert a TextArea (row, column) location into a character offset."""
    row, column = location
    lines = text.split("\n")
    row = min(row, len(lines) - 1)
    return sum(len(line) + 1 for line in lines[:row]) + min(column, len(lines[row]))


def offset_to_location(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a TextArea (row, column) location."""
    before = text[:offset]
    row = before.count("\n")
    return row, offset - (before.rfind("\n") + 1)


def insert_token(text_area: TextArea, name: str) -> None:
    """Replace the selection of a TextArea with a {{name}} token."""
    text = text_area.text
    start, end = text_area.selection
    new_text, caret = insert_at(
        text,
        (location_to_offset(text, start), location_to_offset(text, end)),
        build_token(name),
    )
    text_area.text = new_text
    text_area.move_cursor(offset_to_location(new_text, caret))
    text_area.focus()


class ClickableMessage(Vertical):
    """A chat message container that copies its raw content when clicked."""

    def __init__(self, message: ChatMessage, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.message = message

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.message.content)
        self.app.notify("Copied to clipboard", timeout=2)


class TypingIndicator(Static):
    """Animated placeholder shown while a reply is pending."""

    def __init__(self, label: str = "Thinking", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._label = label
        self._dots = 1

    def on_mount(self) -> None:
        self._refresh_label()
        self.set_interval(TYPING_INTERVAL_SECONDS, self._advance)

    def _advance(self) -> None:
        self._dots = self._dots + 1 if self._dots < TYPING_MAX_DOTS else 1
        self._refresh_label()

    def _refresh_label(self) -> None:
        self.update(f"{self._label}{'.' * self._dots}")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable transcript, the TranscriptObserver of the Textual host.

    Observes a MessageStore: message widgets are appended in store order and
    the typing indicator is kept after the last message while present.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, options: ChatOptions | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.options = options or ChatOptions()
        self._store: MessageStore | None = None
        self._rendered: list[ClickableMessage] = []
        self._typing: TypingIndicator | None = None

    def attach_store(self, store: MessageStore) -> None:
        """Attach to a store and render its current transcript."""
        observer: TranscriptObserver = self
        self._store = store
        store.add_listener(observer.on_transcript_changed)
        observer.on_transcript_changed(store.snapshot())

    def on_transcript_changed(self, snapshot: tuple[ChatMessage, ...]) -> None:
        """Bring the displayed bubbles in line with the store snapshot."""
        if len(snapshot) < len(self._rendered):
            for widget in self._rendered:
                widget.remove()
            self._rendered.clear()

        for message in snapshot[len(self._rendered):]:
            widget = self.render_message(message)
            self._rendered.append(widget)
            if self._typing is not None:
                self.mount(widget, before=self._typing)
            else:
                self.mount(widget)

        self._sync_typing(self._store is not None and self._store.has_typing_placeholder)

        if snapshot:
            self.border_subtitle = f"{len(snapshot)} messages"
        else:
            self.border_subtitle = "Conversation history"
        self.scroll_end(animate=False)

    def on_state_changed(self, state: ConversationState) -> None:
        self.set_class(state == ConversationState.AWAITING_RESPONSE, "awaiting")

    def _sync_typing(self, visible: bool) -> None:
        if visible and self._typing is None:
            self._typing = TypingIndicator(self.options.typing_label, classes="typing-indicator")
            self.mount(self._typing)
        elif not visible and self._typing is not None:
            self._typing.remove()
            self._typing = None

    def render_message(self, message: ChatMessage) -> ClickableMessage:
        """Build the bubble widget for one message."""
        dark = self.app.current_theme.dark if self.app.current_theme else True
        bubble = bubble_style(message, dark=dark)

        container = ClickableMessage(message, classes=f"chat-message {bubble.css_class} -{bubble.side}")
        container.styles.border_left = ("tall", bubble.border)

        timestamp = message.timestamp.strftime(MESSAGE_TIMESTAMP_FORMAT)
        container.compose_add_child(Static(f"{bubble.label} [{timestamp}]", classes="message-header", markup=False))

        if message.sender == Sender.ASSISTANT and self.options.render_markdown:
            container.compose_add_child(Markdown(message.content, classes="message-content"))
        else:
            container.compose_add_child(Static(Text(message.content), classes="message-content"))
        return container

    def rerender(self) -> None:
        """Rebuild every bubble, e.g. after the markdown option changed."""
        for widget in self._rendered:
            widget.remove()
        self._rendered.clear()
        if self._typing is not None:
            self._typing.remove()
            self._typing = None
        if self._store is not None:
            self.on_transcript_changed(self._store.snapshot())


class ChatInputBar(Vertical):
    """Input area with placeholder preview, variable buttons and Send button."""

    class Submitted(Message):
        """Posted when the user asks to send the current text."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, variables: list[str] | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._variables = list(variables or [])
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        yield Static("", id="placeholder-preview")
        with Horizontal(id="variable-buttons"):
            for index, name in enumerate(self._variables):
                yield Button(build_token(name), id=f"var-{index}", classes="variable-button")
        with Horizontal(id="input-row"):
            text_area = TextArea(id="chat-input", show_line_numbers=False)
            text_area.cursor_blink = False
            yield text_area
            yield Button("Send", id="send-btn", variant="success", disabled=True).with_tooltip(
                "Submit message (Ctrl+J)"
            )

    def on_mount(self) -> None:
        self.query_one("#chat-input", TextArea).highlight_cursor_line = False
        self.query_one("#variable-buttons").display = bool(self._variables)
        self.query_one("#placeholder-preview").display = False

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    def clear(self) -> None:
        self.query_one("#chat-input", TextArea).text = ""

    def set_send_enabled(self, enabled: bool) -> None:
        self.query_one("#send-btn", Button).disabled = not enabled

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "send-btn":
            event.stop()
            self._submit()
        elif button_id.startswith("var-"):
            event.stop()
            self.insert_variable(self._variables[int(button_id[4:])])

    def insert_variable(self, name: str) -> None:
        insert_token(self.query_one("#chat-input", TextArea), name)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Recompute the placeholder preview on every edit."""
        preview = self.query_one("#placeholder-preview", Static)
        text = event.text_area.text
        if "{{" in text:
            preview.update(highlight_text(text, "bold reverse"))
            preview.display = True
        else:
            preview.update("")
            preview.display = False

    def on_key(self, event) -> None:
        """Ctrl+J submits; Up/Down at the edges walk the input history."""
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        return self.query_one("#chat-input", TextArea).cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def remember(self, value: str) -> None:
        """Add a sent message to the input history."""
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1

    def _submit(self) -> None:
        value = self.text
        if value.strip():
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel with level filtering.

    Receives the (level, component, message) debug callback of the controller.
    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Controller": "green",
        "Engine": "magenta",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, auto_scroll=True, wrap=True, **kwargs)
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def log_message(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] [{level_color}]{LogLevel.name(level):<5}[/] [{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def callback(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: Callable(level, component, message)."""
        self.log_message(component, message, LogLevel.from_string(level))

    def debug(self, component: str, message: str) -> None:
        self.log_message(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log_message(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log_message(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log_message(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
