"""Markdown rendering for chat messages.

Hides which markdown dialect and parser are used and how the display form
looks. Rendering never fails: malformed constructs come out as literal text.
"""

from functools import lru_cache

from markdown_it import MarkdownIt


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    # Raw HTML in a message is escaped rather than passed through.
    return MarkdownIt("commonmark", {"html": False})


def to_display_form(text: str) -> str:
    """Convert CommonMark text to HTML for display.

    A document consisting of a single paragraph is rendered without the
    enclosing <p> element so one-line messages take no extra vertical space.

    Args:
        text: Markdown source of the message

    Returns:
        HTML string
    """
    md = _parser()
    tokens = md.parse(text)

    if (
        len(tokens) == 3
        and tokens[0].type == "paragraph_open"
        and tokens[1].type == "inline"
        and tokens[2].type == "paragraph_close"
    ):
        return md.renderer.renderInline(tokens[1].children or [], md.options, {})

    return md.renderer.render(tokens, md.options, {})
