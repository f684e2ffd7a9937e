import re
from typing import Optional, List

from quickrefer.parsers import AbstractLabelStrategy
from quickrefer.models import LanguageKind, ReferenceEntry, SelectionRange

_OPEN_TAG_RE = re.compile(r"^<\s*([A-Za-z][\w:-]*)", re.ASCII)
_NOT_OPEN_TAG = ("</", "<!", "<?")


def find_enclosing_tag_name(
    text: str, offset: int, snippet_length: int = 200
) -> Optional[str]:
    """
    Name of the nearest opening tag starting before *offset*.

    This walks backwards over `<` characters, skipping closing tags,
    comments, doctypes and processing instructions. Tags are not balanced:
    a tag closed before *offset* can still be returned.
    """
    if offset <= 0:
        return None

    index = min(offset, len(text))
    while index >= 0:
        lt = text.rfind("<", 0, index + 1)
        if lt == -1:
            return None

        snippet = text[lt : lt + snippet_length]
        if snippet.startswith(_NOT_OPEN_TAG):
            index = lt - 1
            continue

        m = _OPEN_TAG_RE.match(snippet)
        if m:
            return m.group(1)

        index = lt - 1

    return None


class HtmlLabelStrategy(AbstractLabelStrategy):
    language = LanguageKind.HTML
    extensions = [".html", ".htm"]

    def resolve(
        self,
        relative_path: str,
        text: str,
        selection: SelectionRange,
        extension: str,
    ) -> List[ReferenceEntry]:
        tag = find_enclosing_tag_name(
            text, selection.focus, self.settings.locator.snippet_length
        )
        return [self._entry(relative_path, selection.line_text, tag)]
