from typing import List, Optional, Sequence

from quickrefer.settings import FormatterSettings

from .models import (
    PRESERVE_WHITESPACE_ELEMENTS,
    CommentToken,
    DoctypeToken,
    EndTagToken,
    RawTextToken,
    StartTagToken,
    TextToken,
    Token,
)


def escape_newlines(text: str) -> str:
    return text.replace("\n", "&#10;").replace("\r", "&#13;")


def _open_tag(tag_name: str, attributes: str, self_closing: bool = False) -> str:
    slash = " /" if self_closing else ""
    if attributes:
        return f"<{tag_name} {attributes}{slash}>"
    return f"<{tag_name}{slash}>"


def _strip_blank_margin(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _common_indent(lines: List[str]) -> int:
    widths = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    return min(widths) if widths else 0


def _preserves_whitespace(open_tags: List[str]) -> bool:
    return any(tag in PRESERVE_WHITESPACE_ELEMENTS for tag in open_tags)


class HtmlRenderer:
    """
    Rebuilds indented, line-oriented HTML from a token list.

    One line per tag, text run, comment or doctype; nesting depth drives the
    indentation. An element holding only a short single-line text is kept on
    one line. Unmatched end tags never push the depth below zero.
    """

    def __init__(self, settings: Optional[FormatterSettings] = None) -> None:
        self.settings = settings or FormatterSettings()

    def render(self, tokens: Sequence[Token]) -> str:
        lines: List[str] = []
        depth = 0
        stack: List[str] = []
        i = 0

        while i < len(tokens):
            token = tokens[i]
            i += 1

            if isinstance(token, (DoctypeToken, CommentToken)):
                lines.append(self._indent(depth) + token.content)

            elif isinstance(token, RawTextToken):
                lines.extend(self._render_raw_text(token, depth))

            elif isinstance(token, StartTagToken):
                tag = _open_tag(token.tag_name, token.attributes, token.self_closing)
                if token.self_closing:
                    lines.append(self._indent(depth) + tag)
                    continue

                preserve = _preserves_whitespace(stack + [token.tag_name])
                inline = self._inline_text(token, tokens, i, preserve)
                if inline is not None:
                    lines.append(
                        f"{self._indent(depth)}{tag}{inline}</{token.tag_name}>"
                    )
                    i += 2
                    continue

                lines.append(self._indent(depth) + tag)
                stack.append(token.tag_name)
                depth += 1

            elif isinstance(token, EndTagToken):
                depth = max(0, depth - 1)
                if stack:
                    stack.pop()
                lines.append(f"{self._indent(depth)}</{token.tag_name}>")

            elif isinstance(token, TextToken):
                text = token.content.strip()
                if not text:
                    continue
                if not _preserves_whitespace(stack):
                    text = escape_newlines(text)
                lines.append(self._indent(depth) + text)

        return "\n".join(lines)

    def _indent(self, depth: int) -> str:
        return self.settings.indent * depth

    def _inline_text(
        self,
        token: StartTagToken,
        tokens: Sequence[Token],
        i: int,
        preserve: bool,
    ) -> Optional[str]:
        """
        Text to collapse `<tag>text</tag>` onto one line, or None when the
        next two tokens are not a text and the matching end tag, or the text
        would still span lines. Outside whitespace-preserving elements line
        breaks are escaped first, so the collapsed form is also what a second
        pass produces.
        """
        if i + 1 >= len(tokens):
            return None
        text_token, end_token = tokens[i], tokens[i + 1]
        if not isinstance(text_token, TextToken):
            return None
        if not isinstance(end_token, EndTagToken):
            return None
        if end_token.tag_name != token.tag_name:
            return None

        text = text_token.content.strip()
        if not preserve:
            text = escape_newlines(text)
        if not text or "\n" in text:
            return None
        return text

    def _render_raw_text(self, token: RawTextToken, depth: int) -> List[str]:
        indent = self._indent(depth)
        open_tag = _open_tag(token.tag_name, token.attributes)
        close_tag = f"</{token.tag_name}>"
        body = _strip_blank_margin(token.content.split("\n"))

        if not body:
            return [f"{indent}{open_tag}{close_tag}"]

        if len(body) == 1:
            single = body[0].strip()
            if len(single) < self.settings.inline_raw_text_limit:
                return [f"{indent}{open_tag}{single}{close_tag}"]

        inner = self._indent(depth + 1)
        common = _common_indent(body)
        out = [indent + open_tag]
        for line in body:
            if line.strip():
                out.append(inner + line[common:].rstrip("\r"))
            else:
                out.append("")
        out.append(indent + close_tag)
        return out


def render(tokens: Sequence[Token], settings: Optional[FormatterSettings] = None) -> str:
    return HtmlRenderer(settings).render(tokens)
