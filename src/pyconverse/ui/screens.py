"""Modal screens for the TUI.

This module hides the design decisions about:
- How the user message template is composed and edited
- Placeholder preview and variable insertion inside the dialog
- Keyboard shortcuts for dialogs
"""

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea

from ..rendering import build_token, highlight_text
from .widgets import insert_token

RESULT_OK = "ok"
RESULT_CANCEL = "cancel"
RESULT_RESET = "reset"


@dataclass
class EditResult:
    """Outcome of the compose dialog."""

    modal_result: str
    user_message: str | None


class EditMessageScreen(ModalScreen[EditResult]):
    """Dialog for editing the user message template.

    Placeholders are highlighted in a live preview below the editor on every
    edit; variable buttons insert {{name}} at the cursor or over the selection.
    """

    CSS = """
    EditMessageScreen {
        align: center middle;
        background: $background 70%;
    }

    #edit-dialog {
        width: 70;
        height: auto;
        max-height: 30;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #edit-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    #edit-message {
        height: 8;
    }

    #edit-preview {
        height: auto;
        min-height: 1;
        padding: 0 1;
        background: $panel;
        margin: 1 0;
    }

    #edit-variables, #edit-buttons {
        width: 100%;
        height: auto;
    }

    #edit-buttons {
        align: center middle;
        margin-top: 1;
    }

    #edit-buttons Button, #edit-variables Button {
        margin: 0 1;
        min-width: 8;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("ctrl+s", "confirm", "OK", show=False),
    ]

    def __init__(self, user_message: str = "", variables: list[str] | None = None) -> None:
        super().__init__()
        self._initial = user_message
        self._variables = list(variables or [])

    def compose(self) -> ComposeResult:
        with Vertical(id="edit-dialog"):
            yield Static("Edit User Message", id="edit-title")
            yield TextArea(self._initial, id="edit-message", show_line_numbers=False)
            yield Static(highlight_text(self._initial), id="edit-preview")
            with Horizontal(id="edit-variables"):
                for index, name in enumerate(self._variables):
                    yield Button(build_token(name), id=f"insert-{index}")
            with Horizontal(id="edit-buttons"):
                yield Button("OK", id="btn-ok", variant="success")
                yield Button("Reset", id="btn-reset", variant="warning")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#edit-variables").display = bool(self._variables)
        self.query_one("#edit-message", TextArea).focus()

    @property
    def user_message(self) -> str:
        return self.query_one("#edit-message", TextArea).text

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Replace the whole preview on every edit."""
        event.stop()
        self.query_one("#edit-preview", Static).update(highlight_text(event.text_area.text))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        event.stop()
        if button_id == "btn-ok":
            self.action_confirm()
        elif button_id == "btn-reset":
            self.dismiss(EditResult(RESULT_RESET, None))
        elif button_id == "btn-cancel":
            self.action_cancel()
        elif button_id.startswith("insert-"):
            name = self._variables[int(button_id[len("insert-"):])]
            insert_token(self.query_one("#edit-message", TextArea), name)

    def can_close(self) -> bool:
        """A template must not be blank."""
        if not self.user_message.strip():
            self.app.notify("User message cannot be empty", severity="warning", timeout=3)
            self.query_one("#edit-message", TextArea).focus()
            return False
        return True

    def action_confirm(self) -> None:
        if self.can_close():
            self.dismiss(EditResult(RESULT_OK, self.user_message))

    def action_cancel(self) -> None:
        self.dismiss(EditResult(RESULT_CANCEL, None))
