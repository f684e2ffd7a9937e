from bisect import bisect_right
from typing import List, Optional, Tuple

from quickrefer.models import Position, Selection, SelectionRange


class LineIndex:
    """
    Maps between character offsets and zero-based line / character positions
    of a text buffer. Lines are split on "\\n"; a trailing "\\r" stays part of
    its line, as editors report it.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.line_starts: List[int] = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.line_starts.append(i + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_length(self, line: int) -> int:
        start = self.line_starts[line]
        if line + 1 < len(self.line_starts):
            end = self.line_starts[line + 1] - 1
        else:
            end = len(self.text)
        if end > start and self.text[end - 1] == "\r":
            end -= 1
        return end - start

    def offset_at(self, pos: Position) -> int:
        """
        Character offset of *pos*. Characters past the end of the line are
        clamped to the line end; lines past the end of the document raise.
        """
        if pos.line >= len(self.line_starts):
            raise ValueError(
                f"line {pos.line + 1} is past the end of the document "
                f"({len(self.line_starts)} lines)"
            )
        return self.line_starts[pos.line] + min(
            pos.character, self.line_length(pos.line)
        )

    def position_at(self, offset: int) -> Position:
        if offset < 0:
            raise ValueError("offset must not be negative")
        offset = min(offset, len(self.text))
        line = bisect_right(self.line_starts, offset) - 1
        return Position(line=line, character=offset - self.line_starts[line])

    def line_at(self, offset: int) -> int:
        return self.position_at(offset).line


def selection_line_range(selection: Selection) -> Tuple[int, int]:
    """
    Zero-based (start_line, end_line) covered by *selection*. An empty
    selection covers the cursor line; a selection ending at column 0 of a
    later line does not count that last line.
    """
    if selection.is_empty:
        return selection.active.line, selection.active.line

    start_line = selection.start.line
    end_line = selection.end.line
    if selection.end.character == 0 and end_line > start_line:
        end_line -= 1
    return start_line, end_line


def normalize_selection(
    text: str, selection: Selection, index: Optional[LineIndex] = None
) -> SelectionRange:
    index = index or LineIndex(text)
    anchor = index.offset_at(selection.anchor)
    active = index.offset_at(selection.active)
    start, end = min(anchor, active), max(anchor, active)
    start_line, end_line = selection_line_range(selection)
    return SelectionRange(
        start=start,
        end=end,
        start_line=start_line,
        end_line=end_line,
        text="" if selection.is_empty else text[start:end],
    )


def byte_offset(text: str, offset: int) -> int:
    """
    UTF-8 byte offset of character *offset* in *text*, as used by tree-sitter.
    """
    return len(text[:offset].encode("utf-8"))
