"""Split a code blob into autogenerated and manual sections.

A blob is read line by line. Begin and end marker lines stay with the
autogenerated chunk next to them, so the content of a manual section is only
the text strictly between its markers::

    header
    BEGIN-MANUAL-SECTION imports        <- ends autogenerated chunk 1
    import custom                       <- manual chunk "imports"
    END-MANUAL-SECTION                  <- starts autogenerated chunk 2
    footer

Scanning fails loudly on malformed structure; see :mod:`mergegen.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set

from ..errors import (
    DuplicateSectionIdError,
    InvalidSectionIdError,
    UnmatchedOpenError,
    UnterminatedSectionError,
)
from .markers import DEFAULT_STYLE, END_TOKEN, MarkerStyle, is_valid_section_id


@dataclass(frozen=True)
class Section:
    """One chunk of a blob. ``section_id`` is ``None`` for autogenerated text."""

    section_id: Optional[str]
    content: str

    @property
    def is_manual(self) -> bool:
        return self.section_id is not None


def split_lines(code: str) -> List[str]:
    """Split on ``\\n`` only so trailing newlines and ``\\r`` survive a rejoin."""
    if not code:
        return []
    return code.split("\n")


def iter_sections(code: str, style: MarkerStyle = DEFAULT_STYLE) -> Iterator[Section]:
    """Yield the sections of ``code`` in line order.

    Every call starts a fresh scan. Errors surface when the offending line is
    reached, so callers that need an all-or-nothing result should drain the
    iterator before acting on it (see :func:`scan_sections`).
    """
    begin_pattern = style.begin_pattern()
    chunk: List[str] = []
    current_id: Optional[str] = None
    seen: Set[str] = set()

    lines = split_lines(code)
    for line_number, line in enumerate(lines, start=1):
        if END_TOKEN in line:
            yield Section(current_id, "\n".join(chunk))
            chunk = [line]
            current_id = None
            continue

        match = begin_pattern.fullmatch(line.strip())
        if match is None:
            chunk.append(line)
            continue

        raw_id = match.group("id") or ""
        if current_id is not None:
            raise UnmatchedOpenError(
                f"begin marker for {raw_id!r} while section {current_id!r} is still open",
                line_number=line_number,
                section_id=current_id,
            )
        if not is_valid_section_id(raw_id):
            raise InvalidSectionIdError(
                f"invalid manual section id {raw_id!r}",
                line_number=line_number,
                section_id=raw_id,
            )
        chunk.append(line)
        yield Section(None, "\n".join(chunk))
        chunk = []
        current_id = raw_id.strip()
        if current_id in seen:
            raise DuplicateSectionIdError(
                f"duplicate manual section id {current_id!r}",
                line_number=line_number,
                section_id=current_id,
            )
        seen.add(current_id)

    if current_id is not None:
        raise UnterminatedSectionError(
            f"manual section {current_id!r} is missing its end marker",
            section_id=current_id,
        )
    if lines:
        yield Section(None, "\n".join(chunk))


def scan_sections(code: str, style: MarkerStyle = DEFAULT_STYLE) -> List[Section]:
    """Return every section of ``code``, or raise before returning any."""
    return list(iter_sections(code, style))


def manual_section_index(code: str, style: MarkerStyle = DEFAULT_STYLE) -> Dict[str, str]:
    """Map each manual section id in ``code`` to its interior content."""
    return {
        section.section_id: section.content
        for section in iter_sections(code, style)
        if section.section_id is not None
    }


__all__ = [
    "Section",
    "iter_sections",
    "manual_section_index",
    "scan_sections",
    "split_lines",
]
