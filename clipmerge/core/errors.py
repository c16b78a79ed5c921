"""Error taxonomy for a merge run.

Fatal errors end the run and are reported through ``RunResult``; per-asset
errors are recovered locally and collected as diagnostics.
"""

from __future__ import annotations

from typing import Optional


class MergeError(Exception):
    kind = "merge_error"
    fatal = True

    def __init__(self, message: str, *, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ResolutionEmpty(MergeError):
    kind = "resolution_empty"


class DestinationUnavailable(MergeError):
    kind = "destination_unavailable"


class EmptyTimeline(MergeError):
    kind = "empty_timeline"


class ExportFailure(MergeError):
    kind = "export_failure"


class AssetMetadataFailure(MergeError):
    kind = "asset_metadata_failure"
    fatal = False


class TrackInsertionFailure(MergeError):
    kind = "track_insertion_failure"
    fatal = False

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        track_kind: Optional[str] = None,
    ):
        super().__init__(message, source=source)
        self.track_kind = track_kind


class OrientationMismatch(TrackInsertionFailure):
    kind = "orientation_mismatch"


__all__ = [
    "MergeError",
    "ResolutionEmpty",
    "DestinationUnavailable",
    "EmptyTimeline",
    "ExportFailure",
    "AssetMetadataFailure",
    "TrackInsertionFailure",
    "OrientationMismatch",
]
