import pytest

from quickrefer.helpers import (
    LineIndex,
    byte_offset,
    normalize_selection,
    selection_line_range,
)
from quickrefer.models import Position, Selection, SelectionRange, format_line_text


def test_line_index_offsets():
    text = "ab\r\ncde\n\nf"
    index = LineIndex(text)

    assert index.line_starts == [0, 4, 8, 9]
    assert index.line_count == 4
    assert index.line_length(0) == 2
    assert index.line_length(2) == 0
    assert index.offset_at(Position(line=1, character=2)) == 6
    # characters past the line end clamp to it
    assert index.offset_at(Position(line=0, character=50)) == 2
    assert index.position_at(6) == Position(line=1, character=2)
    assert index.position_at(len(text)) == Position(line=3, character=1)
    assert index.line_at(8) == 2


def test_line_index_rejects_bad_positions():
    index = LineIndex("one\ntwo")

    with pytest.raises(ValueError):
        index.offset_at(Position(line=2, character=0))
    with pytest.raises(ValueError):
        index.position_at(-1)


def test_selection_line_range():
    assert selection_line_range(Selection.cursor(3, 7)) == (3, 3)
    backwards = Selection(
        anchor=Position(line=5, character=0), active=Position(line=2, character=4)
    )
    collapsed = Selection(
        anchor=Position(line=1, character=0), active=Position(line=1, character=0)
    )

    assert selection_line_range(backwards) == (2, 4)
    assert selection_line_range(collapsed) == (1, 1)


def test_normalize_selection_orders_offsets():
    text = "first\nsecond\nthird"
    selection = Selection(
        anchor=Position(line=2, character=3), active=Position(line=1, character=1)
    )
    sel = normalize_selection(text, selection)

    assert (sel.start, sel.end) == (7, 16)
    assert (sel.start_line, sel.end_line) == (1, 2)
    assert sel.text == "econd\nthi"
    assert sel.focus == 7
    assert sel.line_text == "2-3"


def test_selection_range_validates_order():
    with pytest.raises(ValueError):
        SelectionRange(start=5, end=2, start_line=0, end_line=0)


def test_byte_offset_counts_utf8():
    assert byte_offset("héllo", 2) == 3
    assert byte_offset("abc", 3) == 3


def test_format_line_text():
    assert format_line_text(0, 0) == "1"
    assert format_line_text(2, 9) == "3-10"
