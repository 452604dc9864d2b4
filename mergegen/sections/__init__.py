"""Marker-delimited section scanning."""

from .markers import (
    DEFAULT_STYLE,
    STYLES,
    MarkerStyle,
    begin_marker,
    contains_manual_section,
    end_marker,
)
from .scanner import Section, iter_sections, manual_section_index, scan_sections

__all__ = [
    "DEFAULT_STYLE",
    "STYLES",
    "MarkerStyle",
    "Section",
    "begin_marker",
    "contains_manual_section",
    "end_marker",
    "iter_sections",
    "manual_section_index",
    "scan_sections",
]
