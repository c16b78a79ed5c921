"""Merge orchestration.

``merge`` turns an ordered list of source identifiers into one output file:

    resolve -> destination -> inspect (concurrent) -> compose (in order) -> export

Per-source problems are collected into the returned ``RunResult``; only an
unusable source list, an unavailable destination, an empty timeline or a
failed export end the run. Cancelling the awaiting task discards the partial
timeline and nothing is exported.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .. import config
from ..core.composer import TimelineComposer
from ..core.errors import (
    DestinationUnavailable,
    EmptyTimeline,
    ExportFailure,
    ResolutionEmpty,
)
from ..core.inspector import inspect_all
from ..core.result import RunResult
from ..core.sources import Candidate, SourceSpec, resolve_sources
from ..core.timebase import TimeLike
from ..media.asset import FileAsset, MediaAsset
from .export import Exporter, ExportSettings, MoviePyExporter, ProgressCallback
from .output import OutputLocationPolicy, TimestampedOutputPolicy, same_file

logger = logging.getLogger(__name__)


class Merger:
    def __init__(
        self,
        output_policy: Optional[OutputLocationPolicy] = None,
        exporter: Optional[Exporter] = None,
        settings: Optional[ExportSettings] = None,
        opener: Optional[Callable[[SourceSpec], MediaAsset]] = None,
        trailing_window: Optional[TimeLike] = None,
        strict_orientation: Optional[bool] = None,
        concurrency: Optional[int] = None,
    ):
        self.settings = settings or ExportSettings()
        self.output_policy = output_policy or TimestampedOutputPolicy(
            container=self.settings.container
        )
        self.exporter = exporter or MoviePyExporter()
        self.opener = opener or FileAsset.from_spec
        self.trailing_window = trailing_window
        self.strict_orientation = strict_orientation
        self.concurrency = concurrency

    async def run(
        self,
        sources: Iterable[Candidate],
        progress: Optional[ProgressCallback] = None,
    ) -> RunResult:
        assets: List[MediaAsset] = resolve_sources(sources, self.opener)
        try:
            if len(assets) < config.MIN_SOURCES:
                error = ResolutionEmpty(
                    f"need at least {config.MIN_SOURCES} usable sources, got {len(assets)}"
                )
                logger.error("%s", error)
                return RunResult.failure(error)

            destination = self._destination(assets)
            if isinstance(destination, DestinationUnavailable):
                logger.error("%s", destination)
                return RunResult.failure(destination)

            inspections = await inspect_all(assets, self.concurrency)
            composer = TimelineComposer(self.trailing_window, self.strict_orientation)
            try:
                timeline = composer.compose(inspections)
            except EmptyTimeline as e:
                logger.error("%s", e)
                return RunResult.failure(e, composer.reports)
            reports = composer.reports
        finally:
            for asset in assets:
                asset.release()

        skipped = sum(1 for r in reports if not r.ok)
        if skipped:
            logger.warning("%d of %d source(s) failed and were skipped", skipped, len(reports))
        logger.info("composed %r, exporting to %s", timeline, destination)
        try:
            output = await self.exporter.export(
                timeline, Path(destination), self.settings, progress
            )
        except ExportFailure as e:
            logger.error("%s", e)
            return RunResult.failure(e, reports)
        except Exception as e:
            failure = ExportFailure(f"export failed: {e}", source=str(destination))
            failure.__cause__ = e
            logger.error("%s", failure)
            return RunResult.failure(failure, reports)
        return RunResult.success(output, reports, timeline.duration)

    def _destination(self, assets: List[MediaAsset]):
        """Destination path from the policy, or the reason there is none."""
        inputs = [getattr(a, "location", a.identifier) for a in assets]
        try:
            destination = self.output_policy.destination(inputs)
        except OSError as e:
            error = DestinationUnavailable(
                f"output location unavailable: {e}",
                source=str(e.filename) if e.filename is not None else None,
            )
            error.__cause__ = e
            return error
        if destination is None:
            return DestinationUnavailable("no output location available")
        if any(same_file(destination, src) for src in inputs):
            return DestinationUnavailable(
                f"output {destination} is one of the sources", source=str(destination)
            )
        return Path(destination)


async def merge(
    sources: Iterable[Candidate],
    *,
    output_policy: Optional[OutputLocationPolicy] = None,
    exporter: Optional[Exporter] = None,
    settings: Optional[ExportSettings] = None,
    progress: Optional[ProgressCallback] = None,
    **options,
) -> RunResult:
    """Merge ``sources`` in order into one file and report the outcome.

    Parameters
    ----------
    sources: Ordered paths/URIs (or SourceSpecs) of the clips to join.
    output_policy: Supplies the destination; defaults to a timestamped file in
        the configured output directory.
    exporter: Export stage; defaults to MoviePyExporter.
    settings: Quality preset and container for the export.
    progress: Optional callback receiving the export progress fraction.
    options: ``opener``, ``trailing_window``, ``strict_orientation``,
        ``concurrency`` forwarded to Merger.
    """
    merger = Merger(output_policy, exporter, settings, **options)
    return await merger.run(sources, progress)


__all__ = ["Merger", "merge"]
