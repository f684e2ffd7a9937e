from typing import Optional, Tuple

from quickrefer.helpers import LineIndex
from quickrefer.models import Selection
from quickrefer.settings import FormatterSettings

from .models import (
    CommentToken,
    DoctypeToken,
    EndTagToken,
    RawTextToken,
    StartTagToken,
    TextToken,
    Token,
)
from .renderer import HtmlRenderer, render
from .tokenizer import tokenize


def format_html(html: str, settings: Optional[FormatterSettings] = None) -> str:
    """
    Re-indent *html*: tokenize, then render one construct per line.
    """
    return render(tokenize(html), settings)


def format_html_range(
    text: str,
    selection: Selection,
    settings: Optional[FormatterSettings] = None,
) -> Tuple[int, int, str]:
    """
    Format the selected part of *text*, or all of it when the selection is
    empty. Returns the (start, end) character range to replace and the
    replacement.
    """
    if selection.is_empty:
        start, end = 0, len(text)
    else:
        index = LineIndex(text)
        start = index.offset_at(selection.start)
        end = index.offset_at(selection.end)
    return start, end, format_html(text[start:end], settings)


__all__ = [
    "CommentToken",
    "DoctypeToken",
    "EndTagToken",
    "HtmlRenderer",
    "RawTextToken",
    "StartTagToken",
    "TextToken",
    "Token",
    "format_html",
    "format_html_range",
    "render",
    "tokenize",
]
