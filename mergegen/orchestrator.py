"""File-level driver: read prior output, merge, and write the result."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .config import MergeGenConfig
from .logging import for_target, get_logger
from .merge import GeneratedCode, combine_rekeys
from .sections.markers import MarkerStyle
from .signing import VerificationResult, sign, verify


@dataclass
class MergeOutcome:
    """Result of merging generated code into a target file."""

    path: Path
    action: str
    diff: str
    dry_run: bool

    @property
    def changed(self) -> bool:
        return self.action != "unchanged"


class Orchestrator:
    """Coordinates merge, sign, verify, extract and validate runs on files."""

    def __init__(self, config: MergeGenConfig | None = None) -> None:
        self.config = config
        self.logger = get_logger("orchestrator")

    @property
    def style(self) -> MarkerStyle:
        if self.config is None:
            return MarkerStyle()
        return self.config.marker_style()

    def run_merge(
        self,
        target: Path | str,
        generated: str,
        *,
        rekeys: Optional[Mapping[str, Sequence[str]]] = None,
        dry_run: bool = False,
    ) -> MergeOutcome:
        """Merge ``generated`` into ``target``, preserving its manual sections."""
        target_path = Path(target)
        log = for_target(self.logger, target_path)
        exists = target_path.exists()
        original = target_path.read_text(encoding="utf-8") if exists else ""

        code = GeneratedCode(generated, style=self.style)
        merged = code.merge(original, self.effective_rekeys(rekeys))

        if exists and merged == original:
            log.info("already up to date; skipping write")
            return MergeOutcome(path=target_path, action="unchanged", diff="", dry_run=dry_run)

        action = "updated" if exists else "created"
        diff_text = self._render_diff(original, merged, target_path.name)

        if dry_run:
            log.info("dry-run; %s file not written", action)
            return MergeOutcome(path=target_path, action=action, diff=diff_text, dry_run=True)

        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(merged, encoding="utf-8")
        log.info("%s", action)
        return MergeOutcome(path=target_path, action=action, diff=diff_text, dry_run=False)

    def run_check(
        self,
        target: Path | str,
        generated: str,
        *,
        rekeys: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> bool:
        """Return True when merging would leave ``target`` untouched."""
        outcome = self.run_merge(target, generated, rekeys=rekeys, dry_run=True)
        return not outcome.changed

    def run_sign(self, path: Path | str) -> bool:
        """Sign ``path`` in place; return True when its content changed."""
        target_path = Path(path)
        original = target_path.read_text(encoding="utf-8")
        signed = sign(original, self.style)
        if signed == original:
            for_target(self.logger, target_path).debug("signature already current")
            return False
        target_path.write_text(signed, encoding="utf-8")
        for_target(self.logger, target_path).info("signed")
        return True

    def run_verify(self, path: Path | str) -> VerificationResult:
        """Check the signature recorded in ``path`` against its generated content."""
        target_path = Path(path)
        result = verify(target_path.read_text(encoding="utf-8"), self.style)
        if not result.ok:
            for_target(self.logger, target_path).warning(
                "signature %s (recorded %s, computed %s)",
                result.status,
                result.recorded,
                result.computed,
            )
        return result

    def run_extract(self, path: Path | str) -> str:
        """Return the generated-only text of ``path``."""
        code = Path(path).read_text(encoding="utf-8")
        return GeneratedCode(code, style=self.style).extract_generated_code()

    def run_validate(self, path: Path | str) -> None:
        """Raise :class:`~mergegen.errors.ParseError` if ``path`` has malformed markers."""
        code = Path(path).read_text(encoding="utf-8")
        GeneratedCode(code, style=self.style).assert_valid_manual_sections()
        for_target(self.logger, path).debug("manual sections well formed")

    def effective_rekeys(
        self, rekeys: Optional[Mapping[str, Sequence[str]]] = None
    ) -> Dict[str, List[str]]:
        """Combine configured rekeys with call-level ones; the call wins per key."""
        return combine_rekeys(self.config.rekeys if self.config else None, rekeys)

    @staticmethod
    def _render_diff(original: str, updated: str, name: str) -> str:
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{name} (original)",
            tofile=f"{name} (merged)",
        )
        return "".join(diff)


__all__ = ["MergeOutcome", "Orchestrator"]
