"""Timeline composer.

Places every inspected source back-to-back on one output timeline. The
composer keeps a running ``offset``: each source's trimmed video and audio
are inserted at the same offset, then the offset advances once by the
trimmed duration. Sources that fail, or are too short, leave the offset
untouched so later sources close the gap.

Composition is synchronous; it must be fed inspections in source order.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Iterable, List, Optional

from .. import config
from ..media.asset import AUDIO, VIDEO
from ..utils.timefmt import format_range, format_time
from .errors import EmptyTimeline, OrientationMismatch, TrackInsertionFailure
from .inspector import Inspection
from .result import FAILED, INSERTED, SKIPPED, AssetReport
from .timebase import ZERO, TimeLike, to_time
from .timeline import OutputTimeline
from .trim import trim_range

logger = logging.getLogger(__name__)


class TimelineComposer:
    def __init__(
        self,
        trailing_window: Optional[TimeLike] = None,
        strict_orientation: Optional[bool] = None,
    ):
        self.trailing_window = (
            config.TRAILING_WINDOW if trailing_window is None else to_time(trailing_window)
        )
        self.strict_orientation = (
            config.STRICT_ORIENTATION if strict_orientation is None else strict_orientation
        )
        self.timeline = OutputTimeline()
        self.offset: Fraction = ZERO
        self.reports: List[AssetReport] = []
        self._orientation: Optional[int] = None  # rotation of first inserted video

    def add(self, inspection: Inspection) -> AssetReport:
        """Insert one source at the current offset and return its report."""
        asset = inspection.asset
        index = len(self.reports)
        report = AssetReport(index=index, source=asset.identifier, offset=self.offset)
        self.reports.append(report)
        extra = {"source_index": index, "source": asset.identifier}

        if not inspection.ok:
            report.status = FAILED
            report.errors.append(inspection.error)
            logger.warning("skipping source: %s", inspection.error, extra=extra)
            return report

        usable = trim_range(inspection.duration, self.trailing_window)
        if usable.is_empty:
            report.status = SKIPPED
            logger.info(
                "source shorter than trailing window (%s), nothing to insert",
                format_time(inspection.duration),
                extra=extra,
            )
            return report

        rotation = inspection.transform.rotation
        if (
            self.strict_orientation
            and inspection.video is not None
            and self._orientation is not None
            and rotation != self._orientation
        ):
            mismatch = OrientationMismatch(
                f"rotation {rotation} differs from {self._orientation}",
                source=asset.identifier,
                track_kind=VIDEO,
            )
            report.status = FAILED
            report.errors.append(mismatch)
            logger.warning("skipping source: %s", mismatch, extra=extra)
            return report

        location = getattr(asset, "location", asset.identifier)
        attempted = 0
        for kind, track in ((VIDEO, inspection.video), (AUDIO, inspection.audio)):
            if track is None:
                continue
            attempted += 1
            try:
                self.timeline.insert(
                    kind,
                    usable,
                    location,
                    self.offset,
                    source_duration=inspection.duration,
                    rotation=rotation,
                    source_index=index,
                )
            except TrackInsertionFailure as e:
                e.source = asset.identifier
                report.errors.append(e)
                logger.warning("%s track not inserted: %s", kind, e, extra=extra)
                continue
            report.tracks.append(kind)
            if kind == VIDEO:
                # Track-level property: the last inserted source decides
                self.timeline.video.rotation = rotation
                if self._orientation is None:
                    self._orientation = rotation

        if attempted and not report.tracks:
            report.status = FAILED
            return report

        report.status = INSERTED
        report.duration = usable.duration
        logger.debug(
            "inserted %s at %s",
            "+".join(report.tracks) or "no tracks",
            format_range(self.offset, usable.duration),
            extra={**extra, "offset": float(self.offset)},
        )
        self.offset += usable.duration
        return report

    def compose(self, inspections: Iterable[Inspection]) -> OutputTimeline:
        for inspection in inspections:
            self.add(inspection)
        return self.finish()

    def finish(self) -> OutputTimeline:
        """Return the finished, read-only timeline; fail if nothing was inserted."""
        if self.timeline.is_empty:
            raise EmptyTimeline("no source contributed any media")
        return self.timeline.freeze()


__all__ = ["TimelineComposer"]
