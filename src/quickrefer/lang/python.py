import re
from typing import Optional, List

from quickrefer.parsers import AbstractLabelStrategy
from quickrefer.models import (
    BlockKind,
    LanguageKind,
    PythonBlock,
    ReferenceEntry,
    SelectionRange,
)
from quickrefer.logger import logger

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_CLASS_RE = re.compile(r"^class\s+([A-Za-z_]\w*)\b", re.ASCII)
_DEF_RE = re.compile(r"^def\s+([A-Za-z_]\w*)\s*\(", re.ASCII)

_DOTTED_RE = re.compile(r"^([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+)$", re.ASCII)
_IDENTIFIER_RE = re.compile(r"^([A-Za-z_]\w*)$", re.ASCII)
_CONTINUATION_RE = re.compile(r"\\\s*\r?\n\s*")
_DOT_SPACING_RE = re.compile(r"\s*\.\s*")


def get_indent(line: str, tab_width: int = 4) -> int:
    """
    Indentation width of *line*: one per leading space, *tab_width* per
    leading tab.
    """
    indent = 0
    for ch in line:
        if ch == " ":
            indent += 1
        elif ch == "\t":
            indent += tab_width
        else:
            break
    return indent


def parse_python_blocks(text: str, tab_width: int = 4) -> List[PythonBlock]:
    """
    Scan *text* once and return every `class` / `def` block in source order,
    with its line range derived from indentation alone.
    """
    lines = _LINE_SPLIT_RE.split(text)
    last_line = len(lines) - 1
    blocks: List[PythonBlock] = []
    stack: List[PythonBlock] = []

    for idx, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        indent = get_indent(line, tab_width)
        while stack and indent <= stack[-1].indent:
            stack.pop().end_line = idx - 1

        m = _CLASS_RE.match(stripped)
        if m:
            name = m.group(1)
            block = PythonBlock(
                kind=BlockKind.CLASS,
                name=name,
                label=name,
                indent=indent,
                start_line=idx,
                end_line=last_line,
            )
            blocks.append(block)
            stack.append(block)
            continue

        m = _DEF_RE.match(stripped)
        if m:
            name = m.group(1)
            owner = _nearest_class(stack)
            block = PythonBlock(
                kind=BlockKind.DEF,
                name=name,
                label=f"{owner}.{name}" if owner else name,
                indent=indent,
                start_line=idx,
                end_line=last_line,
            )
            blocks.append(block)
            stack.append(block)

    while stack:
        stack.pop().end_line = last_line

    return blocks


def _nearest_class(stack: List[PythonBlock]) -> Optional[str]:
    for block in reversed(stack):
        if block.kind == BlockKind.CLASS:
            return block.name
    return None


def find_enclosing_block(
    blocks: List[PythonBlock], line: int, kind: BlockKind
) -> Optional[PythonBlock]:
    """
    Narrowest block of *kind* whose line range contains *line*. The first
    one wins on equal width.
    """
    best: Optional[PythonBlock] = None
    for block in blocks:
        if block.kind != kind or not block.contains(line):
            continue
        if best is None or block.width < best.width:
            best = block
    return best


def normalize_selection_text(text: str) -> str:
    text = _CONTINUATION_RE.sub("", text)
    text = _DOT_SPACING_RE.sub(".", text)
    return text.strip()


def find_selection_label(selection_text: str) -> Optional[str]:
    """
    Label for a selection that is itself a name: a dotted chain
    (`pkg.mod.attr`), a `class Name` header or a bare identifier.
    """
    trimmed = selection_text.strip()
    if not trimmed:
        return None

    normalized = normalize_selection_text(trimmed)

    m = _DOTTED_RE.match(normalized)
    if m:
        return m.group(1)

    m = _CLASS_RE.match(normalized)
    if m:
        return m.group(1)

    m = _IDENTIFIER_RE.match(normalized)
    if m:
        return m.group(1)
    return None


class PythonLabelStrategy(AbstractLabelStrategy):
    language = LanguageKind.PYTHON
    extensions = [".py"]

    def resolve(
        self,
        relative_path: str,
        text: str,
        selection: SelectionRange,
        extension: str,
    ) -> List[ReferenceEntry]:
        """
        Every entry carries the selected line range. Unlike the TypeScript
        walk, definitions found inside a multi-line selection are not moved
        to their own header lines.
        """
        blocks = parse_python_blocks(text, self.settings.python.tab_width)
        line_text = selection.line_text

        # Definitions starting inside the selection
        entries = [
            self._entry(relative_path, line_text, block.label)
            for block in blocks
            if block.kind == BlockKind.DEF
            and selection.start_line <= block.start_line <= selection.end_line
        ]
        if entries:
            return entries

        label = find_selection_label(selection.text)
        if label:
            return [self._entry(relative_path, line_text, label)]

        cursor_line = selection.start_line
        enclosing = find_enclosing_block(blocks, cursor_line, BlockKind.DEF)
        if enclosing is None:
            enclosing = find_enclosing_block(blocks, cursor_line, BlockKind.CLASS)

        logger.debug(
            "Python selection resolved by enclosing block",
            path=relative_path,
            line=cursor_line + 1,
            block=enclosing.label if enclosing else None,
        )
        return [
            self._entry(relative_path, line_text, enclosing.label if enclosing else None)
        ]
