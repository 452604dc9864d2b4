"""Signatures over the generated part of a file.

A generator writes :data:`SIGNATURE_PLACEHOLDER` once in its autogenerated
text, usually in a header comment. :func:`sign` swaps it for a digest of the
file's generated-only content, i.e. what
:meth:`GeneratedCode.extract_generated_code` returns. Manual sections are left
out of the digest, so developers may edit them freely, while any edit to the
generated text makes :func:`verify` report ``invalid``.

Signing the freshly generated blob before a merge gives the same signature as
signing the merged file, since both share their autogenerated chunks.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Optional

from .errors import SigningError
from .merge import GeneratedCode
from .sections.markers import DEFAULT_STYLE, MarkerStyle

SIGNATURE_PLACEHOLDER = "mergegen-signature:unsigned"

_SIGNATURE_PATTERN = re.compile(r"mergegen-signature:(?:unsigned|sha256:(?P<digest>[0-9a-f]{64}))")

VALID = "valid"
INVALID = "invalid"
UNSIGNED = "unsigned"


@dataclass
class VerificationResult:
    """Outcome of checking a blob's recorded signature."""

    status: str
    recorded: Optional[str]
    computed: str

    @property
    def ok(self) -> bool:
        return self.status == VALID


def signature_token(digest: str) -> str:
    return f"mergegen-signature:sha256:{digest}"


def sign(code: str, style: MarkerStyle = DEFAULT_STYLE) -> str:
    """Return ``code`` with its single signature token set to the current digest.

    Already-signed blobs are re-signed. Raises :class:`SigningError` unless the
    blob holds exactly one placeholder or signature token, and
    :class:`~mergegen.errors.ParseError` if its markers are malformed.
    """
    count = len(_SIGNATURE_PATTERN.findall(code))
    if count != 1:
        raise SigningError(f"expected exactly one signature token, found {count}")
    unsigned = _SIGNATURE_PATTERN.sub(SIGNATURE_PLACEHOLDER, code)
    digest = compute_digest(unsigned, style)
    return unsigned.replace(SIGNATURE_PLACEHOLDER, signature_token(digest))


def verify(code: str, style: MarkerStyle = DEFAULT_STYLE) -> VerificationResult:
    """Compare the recorded signature of ``code`` with its generated content."""
    matches = list(_SIGNATURE_PATTERN.finditer(code))
    unsigned = _SIGNATURE_PATTERN.sub(SIGNATURE_PLACEHOLDER, code)
    computed = compute_digest(unsigned, style)

    recorded = matches[0].group("digest") if len(matches) == 1 else None
    if not matches or (len(matches) == 1 and recorded is None):
        return VerificationResult(status=UNSIGNED, recorded=None, computed=computed)
    if recorded != computed:
        return VerificationResult(status=INVALID, recorded=recorded, computed=computed)
    return VerificationResult(status=VALID, recorded=recorded, computed=computed)


def compute_digest(code: str, style: MarkerStyle = DEFAULT_STYLE) -> str:
    generated = GeneratedCode(code, style=style).extract_generated_code()
    return hashlib.sha256(generated.encode("utf-8")).hexdigest()


__all__ = [
    "INVALID",
    "SIGNATURE_PLACEHOLDER",
    "UNSIGNED",
    "VALID",
    "VerificationResult",
    "compute_digest",
    "sign",
    "verify",
]
