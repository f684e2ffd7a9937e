from pydantic import BaseModel, Field, model_validator
from enum import Enum
from typing import Optional

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class LanguageKind(str, Enum):
    PYTHON = "python"
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    HTML = "html"


class BlockKind(str, Enum):
    CLASS = "class"
    DEF = "def"


# ---------------------------------------------------------------------------
# Editor-facing containers
# ---------------------------------------------------------------------------


class Position(BaseModel):
    """Zero-based line / character position inside a document."""

    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)

    def __lt__(self, other: "Position") -> bool:
        return (self.line, self.character) < (other.line, other.character)

    def __le__(self, other: "Position") -> bool:
        return (self.line, self.character) <= (other.line, other.character)


class Selection(BaseModel):
    """
    Editor selection. `anchor` is where the drag started, `active` is where
    the cursor currently is; either may come first in the document.
    """

    anchor: Position
    active: Position

    @classmethod
    def cursor(cls, line: int, character: int = 0) -> "Selection":
        pos = Position(line=line, character=character)
        return cls(anchor=pos, active=pos)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    @property
    def start(self) -> Position:
        return self.anchor if self.anchor <= self.active else self.active

    @property
    def end(self) -> Position:
        return self.active if self.anchor <= self.active else self.anchor


class SelectionRange(BaseModel):
    """
    Normalized selection: character offsets with start <= end, the 0-based
    line range it covers and the selected text.
    """

    start: int
    end: int
    start_line: int
    end_line: int
    text: str = ""

    @model_validator(mode="after")
    def _check_order(self) -> "SelectionRange":
        if self.start > self.end:
            raise ValueError("selection start must not exceed selection end")
        if self.start_line > self.end_line:
            raise ValueError("selection start_line must not exceed end_line")
        return self

    @property
    def focus(self) -> int:
        return self.start

    @property
    def line_text(self) -> str:
        return format_line_text(self.start_line, self.end_line)


class ReferenceEntry(BaseModel):
    relative_path: str
    line_text: str  # "N" or "start-end", 1-based
    label: Optional[str] = None

    def render(self) -> str:
        suffix = f" {self.label}" if self.label else ""
        return f"{self.relative_path}:{self.line_text}{suffix}"


class PythonBlock(BaseModel):
    kind: BlockKind
    name: str
    label: str  # qualified label, e.g. "Class.method"
    indent: int
    start_line: int  # 0-based
    end_line: int  # 0-based, inclusive

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    @property
    def width(self) -> int:
        return self.end_line - self.start_line


def format_line_text(start_line: int, end_line: int) -> str:
    """
    Render a 0-based line range as the 1-based `N` / `start-end` text used in
    references.
    """
    if start_line == end_line:
        return f"{start_line + 1}"
    return f"{start_line + 1}-{end_line + 1}"
