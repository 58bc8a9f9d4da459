"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Bubble colors come from the presentation adapter; this sheet only decides
layout, spacing and state-dependent accents.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Transcript
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }

    &.awaiting {
        border: round $warning;
        border-title-color: $warning;
    }
}

.chat-message {
    width: 85%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 2;
    background: $surface;

    &.-right {
        margin: 0 0 1 8;
        background: $primary 15%;
    }

    &:hover {
        background: $primary 25%;
    }

    & .message-header {
        text-style: bold;
        color: $text-muted;
    }

    & .message-content {
        height: auto;
        margin: 0;
        padding: 0;
        background: transparent;
    }
}

.system-message {
    background: $error 10%;

    & .message-header {
        color: $error;
    }
}

.typing-indicator {
    height: 1;
    padding: 0 2;
    color: $text-muted;
    text-style: italic;
}

/* ============================================
   Log panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* ============================================
   Input bar
   ============================================ */
ChatInputBar {
    height: auto;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#placeholder-preview {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

#variable-buttons {
    height: auto;

    & Button {
        min-width: 8;
        margin: 0 1 0 0;
    }
}

#input-row {
    height: 5;
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
}
"""
