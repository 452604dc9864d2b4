"""Parse failures raised while scanning manual-section markers."""

from __future__ import annotations

from typing import Optional


class ParseError(RuntimeError):
    """Raised when a code blob has malformed manual-section markers."""

    kind = "parse_error"

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        section_id: Optional[str] = None,
    ) -> None:
        self.line_number = line_number
        self.section_id = section_id
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class UnmatchedOpenError(ParseError):
    """A begin marker appeared while another manual section was still open."""

    kind = "unmatched_open"


class InvalidSectionIdError(ParseError):
    """A begin marker carried an id outside ``[A-Za-z0-9:_]+``."""

    kind = "invalid_section_id"


class DuplicateSectionIdError(ParseError):
    """A manual section id was used twice in the same blob."""

    kind = "duplicate_section_id"


class UnterminatedSectionError(ParseError):
    """Input ended before the open manual section was closed."""

    kind = "unterminated_section"


class SigningError(RuntimeError):
    """Raised when a blob cannot be signed."""


__all__ = [
    "DuplicateSectionIdError",
    "InvalidSectionIdError",
    "ParseError",
    "SigningError",
    "UnmatchedOpenError",
    "UnterminatedSectionError",
]
