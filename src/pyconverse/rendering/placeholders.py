"""Template placeholder handling.

Hides the lexical form of placeholders (``{{name}}``) from the widgets:
highlighting spans, building tokens, inserting them into an edit buffer and
expanding them with values.
"""

import re

from rich.text import Text

# Non-greedy and without DOTALL: a placeholder never crosses a line break.
PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")

PLACEHOLDER_STYLE = "bold"

Span = tuple[int, int]


def highlight_placeholders(text: str) -> list[Span]:
    """Find placeholder spans in text.

    Matching is leftmost-first and non-overlapping, so the result is in
    document order. Callers replace their whole highlight state with it.

    Args:
        text: Editable text to scan

    Returns:
        Half-open (start, end) character offsets, one per placeholder
    """
    return [match.span() for match in PLACEHOLDER_PATTERN.finditer(text)]


def highlight_text(text: str, style: str = PLACEHOLDER_STYLE) -> Text:
    """Build a Rich Text with every placeholder styled."""
    result = Text(text, overflow="fold")
    for start, end in highlight_placeholders(text):
        result.stylize(style, start, end)
    return result


def placeholder_names(text: str) -> list[str]:
    """Distinct placeholder names in first-seen order."""
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name not in names:
            names.append(name)
    return names


def build_token(name: str) -> str:
    """Return the placeholder token for a variable name."""
    return "{{" + name + "}}"


def insert_at(buffer: str, selection: int | Span, token: str) -> tuple[str, int]:
    """Replace the selection (or insert at the caret) with a token.

    Args:
        buffer: Current text of the edit field
        selection: Caret offset, or (start, end) of the selected range.
            Reversed ranges are accepted and offsets are clamped to the buffer.
        token: Text to insert

    Returns:
        Tuple of (new buffer, caret offset right after the inserted token)
    """
    if isinstance(selection, int):
        start = end = selection
    else:
        start, end = selection
    if start > end:
        start, end = end, start
    start = max(0, min(start, len(buffer)))
    end = max(0, min(end, len(buffer)))

    new_buffer = buffer[:start] + token + buffer[end:]
    return new_buffer, start + len(token)


def expand_template(template: str, values: dict[str, object]) -> str:
    """Substitute known placeholders with values.

    Whitespace around a name is ignored; unknown placeholders stay as written.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name in values:
            return str(values[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, template)
