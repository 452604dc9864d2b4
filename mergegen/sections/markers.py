"""Marker line helpers shared by generators and the section scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict

BEGIN_TOKEN = "BEGIN-MANUAL-SECTION"
END_TOKEN = "END-MANUAL-SECTION"

SECTION_ID_PATTERN = re.compile(r"[A-Za-z0-9:_]+")


@dataclass(frozen=True)
class MarkerStyle:
    """Comment dressing placed around marker tokens.

    The default style has no dressing: the begin marker is the line
    ``BEGIN-MANUAL-SECTION {id}`` and the end marker ``END-MANUAL-SECTION``.
    Other styles render ``{prefix} BEGIN-MANUAL-SECTION {id} {suffix}``.
    """

    prefix: str = ""
    suffix: str = ""

    def begin_marker(self, section_id: str) -> str:
        return f"{self._lead()}{BEGIN_TOKEN} {section_id}{self._tail()}"

    def end_marker(self) -> str:
        return f"{self._lead()}{END_TOKEN}{self._tail()}"

    def begin_pattern(self) -> re.Pattern[str]:
        """Return the full-line pattern recognising begin markers of this style."""
        prefix = re.escape(self.prefix.strip())
        suffix = re.escape(self.suffix.strip())
        return re.compile(
            rf"{prefix}\s*{BEGIN_TOKEN}(?:\s+(?P<id>.*?))?\s*{suffix}"
        )

    def _lead(self) -> str:
        prefix = self.prefix.strip()
        return f"{prefix} " if prefix else ""

    def _tail(self) -> str:
        suffix = self.suffix.strip()
        return f" {suffix}" if suffix else ""


DEFAULT_STYLE = MarkerStyle()

STYLES: Dict[str, MarkerStyle] = {
    "bare": DEFAULT_STYLE,
    "slash": MarkerStyle(prefix="//"),
    "hash": MarkerStyle(prefix="#"),
    "block": MarkerStyle(prefix="/*", suffix="*/"),
    "xml": MarkerStyle(prefix="<!--", suffix="-->"),
}


def begin_marker(section_id: str, style: MarkerStyle = DEFAULT_STYLE) -> str:
    """Render the canonical begin-marker line for ``section_id``."""
    return style.begin_marker(section_id)


def end_marker(style: MarkerStyle = DEFAULT_STYLE) -> str:
    """Render the canonical end-marker line."""
    return style.end_marker()


def contains_manual_section(code: str) -> bool:
    """Quick check used to skip a full scan when no end marker is present."""
    return END_TOKEN in code


def is_valid_section_id(section_id: str) -> bool:
    return SECTION_ID_PATTERN.fullmatch(section_id) is not None


__all__ = [
    "BEGIN_TOKEN",
    "DEFAULT_STYLE",
    "END_TOKEN",
    "MarkerStyle",
    "SECTION_ID_PATTERN",
    "STYLES",
    "begin_marker",
    "contains_manual_section",
    "end_marker",
    "is_valid_section_id",
]
