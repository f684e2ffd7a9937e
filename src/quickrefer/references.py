import os
from typing import Iterable, List, Optional

from quickrefer.helpers import normalize_selection, selection_line_range
from quickrefer.logger import logger
from quickrefer.models import ReferenceEntry, Selection, format_line_text
from quickrefer.parsers import LabelStrategyRegistry
from quickrefer.settings import ReferSettings

# Registers the built-in label strategies
import quickrefer.lang  # noqa: F401


def build_reference_entries(
    relative_path: str,
    text: str,
    selection: Selection,
    extension: Optional[str] = None,
    settings: Optional[ReferSettings] = None,
) -> List[ReferenceEntry]:
    """
    Resolve *selection* in *text* to reference entries.

    The strategy is picked by file extension (taken from *relative_path* when
    not given). Always returns at least one entry: when no strategy applies
    or it finds nothing, a single entry without label covers the selected
    lines.
    """
    settings = settings or ReferSettings()
    if extension is None:
        extension = os.path.splitext(relative_path)[1]
    extension = extension.lower()

    sel = normalize_selection(text, selection)
    entries: List[ReferenceEntry] = []

    strategy_cls = LabelStrategyRegistry.get_strategy_class(extension, settings)
    if strategy_cls is not None:
        strategy = strategy_cls(settings)
        logger.debug(
            "Resolving references",
            path=relative_path,
            strategy=strategy_cls.__name__,
            start=sel.start,
            end=sel.end,
        )
        entries.extend(strategy.resolve(relative_path, text, sel, extension))

    if not entries:
        logger.debug(
            "No labelled entries; emitting line reference",
            path=relative_path,
            lines=sel.line_text,
        )
        entries.append(
            ReferenceEntry(relative_path=relative_path, line_text=sel.line_text)
        )

    return entries


def format_entries(entries: Iterable[ReferenceEntry]) -> str:
    """
    One `path:lines [label]` line per entry, duplicates dropped in order.
    """
    lines: List[str] = []
    seen = set()
    for entry in entries:
        line = entry.render()
        if line in seen:
            continue
        seen.add(line)
        lines.append(line)
    return "\n".join(lines)


def build_references_text(
    relative_path: str,
    text: str,
    selection: Selection,
    extension: Optional[str] = None,
    settings: Optional[ReferSettings] = None,
) -> str:
    return format_entries(
        build_reference_entries(relative_path, text, selection, extension, settings)
    )


def build_line_reference(relative_path: str, selection: Selection) -> str:
    """
    Plain `path:lines` reference for the selected lines, without a label.
    """
    start_line, end_line = selection_line_range(selection)
    return f"{relative_path}:{format_line_text(start_line, end_line)}"
