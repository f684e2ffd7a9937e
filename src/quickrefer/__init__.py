from quickrefer.references import (
    build_line_reference,
    build_reference_entries,
    build_references_text,
    format_entries,
)
from quickrefer.htmlfmt import format_html, format_html_range
from quickrefer.models import Position, ReferenceEntry, Selection
from quickrefer.settings import ReferSettings, load_settings

__all__ = [
    "Position",
    "ReferSettings",
    "ReferenceEntry",
    "Selection",
    "build_line_reference",
    "build_reference_entries",
    "build_references_text",
    "format_entries",
    "format_html",
    "format_html_range",
    "load_settings",
]
