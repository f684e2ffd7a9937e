from dataclasses import dataclass
from typing import Union

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
RAW_TEXT_ELEMENTS = frozenset({"style", "script"})
PRESERVE_WHITESPACE_ELEMENTS = frozenset({"pre", "code", "textarea"})


@dataclass(frozen=True)
class StartTagToken:
    tag_name: str  # lower-cased
    attributes: str  # whitespace-normalized, may be empty
    self_closing: bool


@dataclass(frozen=True)
class EndTagToken:
    tag_name: str


@dataclass(frozen=True)
class TextToken:
    content: str


@dataclass(frozen=True)
class CommentToken:
    content: str  # includes the `<!--` / `-->` delimiters


@dataclass(frozen=True)
class DoctypeToken:
    content: str  # any `<!...>` construct, delimiters included


@dataclass(frozen=True)
class RawTextToken:
    """<script> / <style> element captured with its untouched body."""

    tag_name: str
    attributes: str
    content: str


Token = Union[
    StartTagToken,
    EndTagToken,
    TextToken,
    CommentToken,
    DoctypeToken,
    RawTextToken,
]
