"""Run outcome and per-asset reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import MergeError
from .timebase import ZERO

INSERTED = "inserted"
SKIPPED = "skipped"  # nothing usable (too short)
FAILED = "failed"


@dataclass
class AssetReport:
    index: int
    source: str
    status: str = INSERTED
    offset: Fraction = ZERO
    duration: Fraction = ZERO
    tracks: List[str] = field(default_factory=list)  # kinds actually inserted
    errors: List[MergeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != FAILED

    def describe(self) -> str:
        if self.status == INSERTED:
            kinds = "+".join(self.tracks) or "no tracks"
            text = f"#{self.index} {self.source}: {kinds} at {float(self.offset):.3f}s ({float(self.duration):.3f}s)"
        elif self.status == SKIPPED:
            text = f"#{self.index} {self.source}: skipped (too short)"
        else:
            text = f"#{self.index} {self.source}: failed"
        for err in self.errors:
            text += f"\n    {err.kind}: {err}"
        return text


@dataclass(frozen=True)
class RunResult:
    output: Optional[Path] = None
    error: Optional[MergeError] = None
    reports: Tuple[AssetReport, ...] = ()
    duration: Fraction = ZERO

    @property
    def ok(self) -> bool:
        return self.error is None and self.output is not None

    @property
    def diagnostics(self) -> List[MergeError]:
        """Every per-asset error collected during the run, in source order."""
        return [err for report in self.reports for err in report.errors]

    @classmethod
    def success(cls, output: Path, reports=(), duration: Fraction = ZERO) -> "RunResult":
        return cls(output=Path(output), reports=tuple(reports), duration=duration)

    @classmethod
    def failure(cls, error: MergeError, reports=()) -> "RunResult":
        return cls(error=error, reports=tuple(reports))

    def summary(self) -> str:
        if self.ok:
            head = f"merged into {self.output} ({float(self.duration):.3f}s)"
        else:
            head = f"merge failed [{self.error.kind}]: {self.error}"
        lines = [head] + [r.describe() for r in self.reports]
        return "\n".join(lines)


__all__ = ["AssetReport", "RunResult", "INSERTED", "SKIPPED", "FAILED"]
