"""Output timeline model.

The timeline holds at most one track per media kind. Tracks are created on the
first successful insertion of that kind. Each track is an ordered list of
segments that never overlap; a segment records which source range it plays and
where it sits on the output timeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Optional

from .errors import TrackInsertionFailure
from .timebase import ZERO, TimeRange


@dataclass(frozen=True)
class Segment:
    source: str  # asset location handed to the exporter
    source_range: TimeRange
    at: Fraction  # start on the output timeline
    rotation: int = 0  # display rotation of the source
    source_index: int = 0

    @property
    def duration(self) -> Fraction:
        return self.source_range.duration

    @property
    def output_range(self) -> TimeRange:
        return TimeRange(self.at, self.duration)


@dataclass
class OutputTrack:
    kind: str
    segments: List[Segment] = field(default_factory=list)
    rotation: int = 0  # track-level display transform (video only)

    @property
    def end(self) -> Fraction:
        return self.segments[-1].output_range.end if self.segments else ZERO

    @property
    def duration(self) -> Fraction:
        return sum((s.duration for s in self.segments), ZERO)

    def insert_time_range(
        self,
        source_range: TimeRange,
        source: str,
        at: Fraction,
        *,
        source_duration: Optional[Fraction] = None,
        rotation: int = 0,
        source_index: int = 0,
    ) -> Segment:
        """Append ``source_range`` of ``source`` at output time ``at``.

        Raises TrackInsertionFailure if the range is empty, reaches past the
        source's duration or would overlap what the track already holds.
        """
        if source_range.is_empty:
            raise TrackInsertionFailure(
                "cannot insert an empty range", source=source, track_kind=self.kind
            )
        if source_duration is not None and source_range.end > source_duration:
            raise TrackInsertionFailure(
                f"range ends at {float(source_range.end):.3f}s, past source duration "
                f"{float(source_duration):.3f}s",
                source=source,
                track_kind=self.kind,
            )
        if at < self.end:
            raise TrackInsertionFailure(
                f"insertion at {float(at):.3f}s overlaps {self.kind} track ending at "
                f"{float(self.end):.3f}s",
                source=source,
                track_kind=self.kind,
            )
        segment = Segment(source, source_range, at, rotation, source_index)
        self.segments.append(segment)
        return segment

    def is_contiguous(self) -> bool:
        expected = ZERO
        for seg in self.segments:
            if seg.at != expected:
                return False
            expected = seg.output_range.end
        return True


class OutputTimeline:
    def __init__(self):
        self._tracks: Dict[str, OutputTrack] = {}
        self._frozen = False

    def track(self, kind: str, create: bool = False) -> Optional[OutputTrack]:
        if kind not in self._tracks and create:
            self._check_mutable()
            self._tracks[kind] = OutputTrack(kind)
        return self._tracks.get(kind)

    def insert(
        self,
        kind: str,
        source_range: TimeRange,
        source: str,
        at: Fraction,
        **kwargs,
    ) -> Segment:
        self._check_mutable()
        existing = self._tracks.get(kind)
        track = existing or OutputTrack(kind)
        segment = track.insert_time_range(source_range, source, at, **kwargs)
        # Only keep a lazily created track once something landed in it
        if existing is None:
            self._tracks[kind] = track
        return segment

    @property
    def tracks(self) -> List[OutputTrack]:
        return list(self._tracks.values())

    @property
    def video(self) -> Optional[OutputTrack]:
        return self._tracks.get("video")

    @property
    def audio(self) -> Optional[OutputTrack]:
        return self._tracks.get("audio")

    @property
    def duration(self) -> Fraction:
        return max((t.end for t in self._tracks.values()), default=ZERO)

    @property
    def is_empty(self) -> bool:
        return not any(t.segments for t in self._tracks.values())

    def freeze(self) -> "OutputTimeline":
        """Mark the timeline read-only before it is handed to an exporter."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self):
        if self._frozen:
            raise RuntimeError("timeline is frozen")

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{t.kind}={len(t.segments)} seg/{float(t.end):.3f}s" for t in self.tracks
        )
        return f"OutputTimeline({parts})"


__all__ = ["Segment", "OutputTrack", "OutputTimeline"]
