"""Main Textual TUI application.

Orchestrates the UI components and wires them to the conversation controller.
The app's event loop is the only context that touches the transcript; the
engine itself runs on a worker thread owned by the controller.
"""

import asyncio
from functools import partial
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, TextArea

from ..conversation import ChatMessage, ConversationController, ConversationState, Sender
from ..engine import ChatEngine
from .actions import ActionGroup, BasicAction, ToggleAction
from .config import ChatOptions, LogLevel
from .screens import RESULT_OK, RESULT_RESET, EditMessageScreen, EditResult
from .styles import APP_CSS
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel


class ChatWidgetApp(App):
    """Chat widget: transcript, input bar and engine round trip."""

    CSS = APP_CSS
    TITLE = "pyconverse"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+y", "copy_transcript", "Copy Chat"),
        Binding("ctrl+g", "toggle_markdown", "Markdown"),
        Binding("ctrl+w", "toggle_clear_after_sending", "Keep Input"),
        Binding("ctrl+t", "edit_template", "Template"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        engine: ChatEngine | Any | None = None,
        options: ChatOptions | None = None,
        log_level: str | None = None,
        controller: ConversationController | None = None,
    ) -> None:
        super().__init__()
        self.options = options or ChatOptions()
        self.controller = controller or ConversationController()
        if engine is not None:
            self.controller.configure_engine(engine)
        self._log_level = log_level
        self._ui_ready = False
        self.chat_actions = self._build_actions()

    @property
    def engine(self) -> ChatEngine | None:
        return self.controller.engine

    def compose(self) -> ComposeResult:
        variables = self.engine.variables if self.engine is not None else []
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history", options=self.options)
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar", variables=variables)
        yield Footer()

    def on_mount(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")
        self.controller.set_debug_callback(log_panel.callback)

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.attach_store(self.controller.store)
        self.controller.add_state_listener(self._on_state_changed)

        self._ui_ready = True
        self._update_subtitle()

        if self.options.welcome_message:
            self.controller.store.append(ChatMessage.from_assistant(self.options.welcome_message))

        self.refresh_actions()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def _input_text(self) -> str:
        if not self._ui_ready:
            return ""
        return self.query_one("#chat-input-bar", ChatInputBar).text

    def _insert_variable(self, name: str) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).insert_variable(name)

    def _build_actions(self) -> ActionGroup:
        self.send_action = BasicAction(
            "Send",
            lambda: self.send_message(self._input_text()),
            enabled_when=lambda: self.controller.can_submit(self._input_text()),
        )
        self.render_markdown_action = ToggleAction(
            "Render Markdown",
            lambda: self.options.render_markdown,
            partial(setattr, self.options, "render_markdown"),
        )
        self.clear_after_sending_action = ToggleAction(
            "Clear After Sending",
            lambda: self.options.clear_after_sending,
            partial(setattr, self.options, "clear_after_sending"),
        )
        variables = self.engine.variables if self.engine is not None else []
        self.insert_variable_actions = ActionGroup(
            "Insert Variable",
            [BasicAction(name, partial(self._insert_variable, name)) for name in variables],
        )
        return ActionGroup(
            "Chat",
            [
                self.send_action,
                self.render_markdown_action,
                self.clear_after_sending_action,
                self.insert_variable_actions,
            ],
        )

    def refresh_actions(self) -> None:
        """Recompute enabled state of every action and mirror it on widgets."""
        if not self._ui_ready:
            return
        self.chat_actions.refresh_state()
        self.query_one("#chat-input-bar", ChatInputBar).set_send_enabled(self.send_action.enabled)

    def _update_subtitle(self) -> None:
        title = self.engine.title if self.engine is not None else "no engine"
        parts = [title]
        if self.controller.user_message_template:
            parts.append("template")
        if not self.options.render_markdown:
            parts.append("plain text")
        self.sub_title = " | ".join(parts)

    def send_message(self, text: str) -> None:
        """Hand text to the controller if input is currently open."""
        if not self.controller.can_submit(text):
            if self.controller.state == ConversationState.AWAITING_RESPONSE:
                self.notify("Still waiting for a response", severity="warning", timeout=2)
            elif self.engine is None:
                self.notify("No chat engine configured", severity="error", timeout=3)
            return

        bar = self.query_one("#chat-input-bar", ChatInputBar)
        self.controller.submit(text)
        bar.remember(text)
        if self.options.clear_after_sending:
            bar.clear()
        self.refresh_actions()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self.send_message(event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "chat-input":
            self.refresh_actions()

    def _on_state_changed(self, state: ConversationState) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).on_state_changed(state)
        self.refresh_actions()
        if state == ConversationState.IDLE:
            self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_clear_chat(self) -> None:
        self.controller.store.clear()
        self.notify("Chat cleared", timeout=2)

    def action_copy_last_response(self) -> None:
        message = self.controller.store.last_message(Sender.ASSISTANT)
        if message is not None:
            self.copy_to_clipboard(message.content)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")

    def action_copy_transcript(self) -> None:
        content = self.controller.store.to_json()
        if content is not None:
            self.copy_to_clipboard(content)
            self.notify("Chat copied")
        else:
            self.notify("Chat is empty", severity="warning")

    def action_toggle_markdown(self) -> None:
        self.render_markdown_action.perform()
        self.query_one("#chat-history", ChatHistoryWidget).rerender()
        self._update_subtitle()

    def action_toggle_clear_after_sending(self) -> None:
        self.clear_after_sending_action.perform()
        state = "cleared" if self.options.clear_after_sending else "kept"
        self.notify(f"Input will be {state} after sending", timeout=2)

    def action_edit_template(self) -> None:
        variables = ["message"]
        if self.engine is not None:
            variables += [name for name in self.engine.variables if name != "message"]
        template = self.controller.user_message_template or "{{message}}"
        self.push_screen(EditMessageScreen(template, variables), self._on_template_edited)

    def _on_template_edited(self, result: EditResult | None) -> None:
        if result is None:
            return
        if result.modal_result == RESULT_OK:
            self.controller.user_message_template = result.user_message
            self.notify("User message template updated", timeout=2)
        elif result.modal_result == RESULT_RESET:
            self.controller.user_message_template = None
            self.notify("User message template reset", timeout=2)
        self._update_subtitle()

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(
    engine: ChatEngine | Any,
    options: ChatOptions | None = None,
    log_level: str | None = None,
) -> None:
    """Run the chat widget.

    Args:
        engine: ChatEngine or plain ``str -> str`` callable
        options: Initial chat options
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatWidgetApp(engine=engine, options=options, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
