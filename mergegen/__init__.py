"""Merge regenerated code with hand-edited manual sections."""

from .errors import (
    DuplicateSectionIdError,
    InvalidSectionIdError,
    ParseError,
    SigningError,
    UnmatchedOpenError,
    UnterminatedSectionError,
)
from .merge import GeneratedCode
from .sections import (
    MarkerStyle,
    Section,
    begin_marker,
    contains_manual_section,
    end_marker,
    manual_section_index,
    scan_sections,
)
from .signing import SIGNATURE_PLACEHOLDER, sign, verify

__version__ = "0.1.0"

__all__ = [
    "DuplicateSectionIdError",
    "GeneratedCode",
    "InvalidSectionIdError",
    "MarkerStyle",
    "ParseError",
    "SIGNATURE_PLACEHOLDER",
    "Section",
    "SigningError",
    "UnmatchedOpenError",
    "UnterminatedSectionError",
    "begin_marker",
    "contains_manual_section",
    "end_marker",
    "manual_section_index",
    "scan_sections",
    "sign",
    "verify",
]
