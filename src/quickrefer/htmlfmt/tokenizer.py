import re
from typing import List, Pattern

from .models import (
    RAW_TEXT_ELEMENTS,
    VOID_ELEMENTS,
    CommentToken,
    DoctypeToken,
    EndTagToken,
    RawTextToken,
    StartTagToken,
    TextToken,
    Token,
)

END_TAG_RE: Pattern = re.compile(r"</([A-Za-z][\w:-]*)\s*>", re.ASCII)
START_TAG_RE: Pattern = re.compile(r"<([A-Za-z][\w:-]*)([^>]*?)(/?)>", re.ASCII)
WHITESPACE_RE: Pattern = re.compile(r"\s+")


def normalize_attributes(attrs: str) -> str:
    return WHITESPACE_RE.sub(" ", attrs).strip()


def _raw_text_end(tag_name: str) -> Pattern:
    return re.compile(rf"</{re.escape(tag_name)}\s*>", re.IGNORECASE)


def tokenize(html: str) -> List[Token]:
    """
    Split *html* into a flat token list in one left-to-right pass.

    Never fails: markup that matches no rule degrades to text. Bodies of
    <script> and <style> are captured verbatim as a single raw-text token
    when their closing tag exists.
    """
    tokens: List[Token] = []
    pos = 0
    size = len(html)

    while pos < size:
        if html.startswith("<!--", pos):
            end = html.find("-->", pos + 4)
            if end == -1:
                tokens.append(CommentToken(html[pos:]))
                break
            tokens.append(CommentToken(html[pos : end + 3]))
            pos = end + 3
            continue

        # Also catches <![CDATA[...]]> up to its first '>'
        if html.startswith("<!", pos):
            end = html.find(">", pos)
            if end == -1:
                tokens.append(DoctypeToken(html[pos:]))
                break
            tokens.append(DoctypeToken(html[pos : end + 1]))
            pos = end + 1
            continue

        if html.startswith("</", pos):
            m = END_TAG_RE.match(html, pos)
            if m:
                tag_name = m.group(1).lower()
                # Void elements have no content to close
                if tag_name not in VOID_ELEMENTS:
                    tokens.append(EndTagToken(tag_name))
                pos = m.end()
                continue

        if html[pos] == "<":
            m = START_TAG_RE.match(html, pos)
            if m is None:
                tokens.append(TextToken("<"))
                pos += 1
                continue

            tag_name = m.group(1).lower()
            attributes = normalize_attributes(m.group(2))
            self_closing = m.group(3) == "/" or tag_name in VOID_ELEMENTS

            if tag_name in RAW_TEXT_ELEMENTS and not self_closing:
                close = _raw_text_end(tag_name).search(html, m.end())
                if close:
                    tokens.append(
                        RawTextToken(
                            tag_name, attributes, html[m.end() : close.start()]
                        )
                    )
                    pos = close.end()
                    continue

            tokens.append(StartTagToken(tag_name, attributes, self_closing))
            pos = m.end()
            continue

        end = html.find("<", pos)
        if end == -1:
            end = size
        tokens.append(TextToken(html[pos:end]))
        pos = end

    return tokens
