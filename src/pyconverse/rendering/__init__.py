"""Message rendering module.

Transforms message text for display:
- markdown.py: CommonMark to HTML display form
- placeholders.py: {{name}} highlighting, insertion and expansion
"""

from .markdown import to_display_form
from .placeholders import (
    build_token,
    expand_template,
    highlight_placeholders,
    highlight_text,
    insert_at,
    placeholder_names,
)

__all__ = [
    "build_token",
    "expand_template",
    "highlight_placeholders",
    "highlight_text",
    "insert_at",
    "placeholder_names",
    "to_display_form",
]
