"""Merge freshly generated code with hand-edited manual sections."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .logging import get_logger
from .sections.markers import DEFAULT_STYLE, MarkerStyle
from .sections.scanner import Section, iter_sections, manual_section_index, scan_sections

Rekeys = Mapping[str, Sequence[str]]

_LOGGER = get_logger("merge")


class GeneratedCode:
    """Wraps one generated blob and reconciles it with prior output.

    The wrapped text is never modified. Each operation rescans it, so the
    handle is safe to share between threads.
    """

    def __init__(self, code: str, *, style: MarkerStyle = DEFAULT_STYLE) -> None:
        self._code = code
        self._style = style

    @property
    def code(self) -> str:
        return self._code

    @property
    def style(self) -> MarkerStyle:
        return self._style

    def merge(self, existing_code: str, rekeys: Optional[Rekeys] = None) -> str:
        """Return the generated text with manual sections taken from ``existing_code``.

        Manual content is matched by section id. When the generated blob
        introduces an id that ``existing_code`` lacks, ``rekeys`` may name the
        legacy ids whose content should move into it; their contents are
        joined with a blank line. Sections with no prior content keep the
        generated placeholder.
        """
        existing = manual_section_index(existing_code, self._style)
        sections = scan_sections(self._code, self._style)
        _LOGGER.debug(
            "Merging %d generated sections against %d existing manual sections",
            len(sections),
            len(existing),
        )

        pieces: List[str] = []
        for section in sections:
            pieces.append(self._resolve(section, existing, rekeys))
        return "\n".join(piece for piece in pieces if piece)

    def manual_sections(self) -> Dict[str, str]:
        """Return ``id -> content`` for the manual sections of the wrapped blob."""
        return manual_section_index(self._code, self._style)

    def extract_generated_code(self) -> str:
        """Return only the autogenerated chunks, joined by line breaks."""
        return "\n".join(
            section.content
            for section in iter_sections(self._code, self._style)
            if section.section_id is None
        )

    def assert_valid_manual_sections(self) -> None:
        """Raise :class:`~mergegen.errors.ParseError` if the markers are malformed."""
        for _ in iter_sections(self._code, self._style):
            pass

    def _resolve(
        self,
        section: Section,
        existing: Mapping[str, str],
        rekeys: Optional[Rekeys],
    ) -> str:
        section_id = section.section_id
        if section_id is None:
            return section.content
        if section_id in existing:
            return existing[section_id]
        if rekeys and section_id in rekeys:
            recovered = _collect_legacy(existing, rekeys[section_id])
            if recovered:
                _LOGGER.debug(
                    "Recovered manual section %s from %s",
                    section_id,
                    ", ".join(rekeys[section_id]),
                )
                return recovered
        return section.content

    def __repr__(self) -> str:
        return f"GeneratedCode({len(self._code)} chars, style={self._style!r})"


def combine_rekeys(
    base: Optional[Rekeys], override: Optional[Rekeys] = None
) -> Dict[str, List[str]]:
    """Overlay ``override`` on ``base``; a key present in both takes ``override``'s list."""
    combined: Dict[str, List[str]] = {}
    for source in (base, override):
        if source:
            combined.update({key: list(value) for key, value in source.items()})
    return combined


def _collect_legacy(existing: Mapping[str, str], legacy_ids: Sequence[str]) -> str:
    accumulated = ""
    for legacy_id in legacy_ids:
        if legacy_id not in existing:
            continue
        if accumulated:
            accumulated += "\n\n"
        accumulated += existing[legacy_id]
    return accumulated


__all__ = ["GeneratedCode", "Rekeys", "combine_rekeys"]
