"""Media asset handles backed by ffmpeg probing.

``MediaAsset`` is the contract the merge pipeline needs from an opened source:
an asynchronous duration/transform fetch and asynchronous per-kind track
enumeration. ``FileAsset`` implements it with MoviePy's ffmpeg probe. The probe
runs on a worker thread and its result is cached behind a mutex so concurrent
queries against the same asset only hit ffmpeg once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, List, Optional, Protocol, Tuple

from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos
from PySide6.QtCore import QMutex, QMutexLocker

from ..core.sources import SourceSpec
from ..core.timebase import to_time

VIDEO = "video"
AUDIO = "audio"
TRACK_KINDS = (VIDEO, AUDIO)


@dataclass(frozen=True)
class Transform:
    """Display transform; only quarter-turn rotations occur in practice."""

    rotation: int = 0  # degrees, clockwise, normalized to [0, 360)

    def __post_init__(self):
        object.__setattr__(self, "rotation", int(self.rotation) % 360)

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0


IDENTITY = Transform()


@dataclass(frozen=True)
class TrackInfo:
    kind: str
    index: int = 0
    fps: Optional[float] = None
    size: Optional[Tuple[int, int]] = None


class MediaAsset(Protocol):
    spec: SourceSpec

    @property
    def identifier(self) -> str: ...

    async def load_properties(self) -> Tuple[Fraction, Transform]: ...

    async def load_tracks(self, kind: str) -> List[TrackInfo]: ...

    def release(self) -> None: ...


class FileAsset:
    def __init__(self, spec: SourceSpec):
        self.spec = spec
        self._mutex = QMutex()
        self._infos: Optional[dict[str, Any]] = None

    @classmethod
    def from_spec(cls, spec: SourceSpec) -> "FileAsset":
        return cls(spec)

    @classmethod
    def from_path(cls, path: str, position: int = 0) -> "FileAsset":
        return cls(SourceSpec(str(path), position))

    @property
    def identifier(self) -> str:
        return self.spec.identifier

    @property
    def location(self) -> str:
        return self.spec.location or self.spec.identifier

    def _probe(self) -> dict[str, Any]:  # executed in worker thread
        with QMutexLocker(self._mutex):
            if self._infos is None:
                self._infos = ffmpeg_parse_infos(self.location)
            return self._infos

    async def _infos_async(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._probe)

    async def load_properties(self) -> Tuple[Fraction, Transform]:
        """Duration and display transform, fetched together."""
        infos = await self._infos_async()
        duration = infos.get("duration")
        if duration is None:
            raise ValueError(f"no duration reported for {self.identifier}")
        rotation = infos.get("video_rotation", 0) or 0
        return to_time(float(duration)), Transform(rotation)

    async def load_tracks(self, kind: str) -> List[TrackInfo]:
        if kind not in TRACK_KINDS:
            raise ValueError(f"unknown track kind: {kind}")
        infos = await self._infos_async()
        if kind == VIDEO:
            if not infos.get("video_found"):
                return []
            size = infos.get("video_size")
            return [
                TrackInfo(
                    VIDEO,
                    fps=infos.get("video_fps"),
                    size=tuple(size) if size else None,
                )
            ]
        if not infos.get("audio_found"):
            return []
        return [TrackInfo(AUDIO)]

    def release(self) -> None:
        with QMutexLocker(self._mutex):
            self._infos = None

    def __repr__(self) -> str:
        return f"FileAsset({self.identifier!r})"


__all__ = [
    "MediaAsset",
    "FileAsset",
    "TrackInfo",
    "Transform",
    "IDENTITY",
    "VIDEO",
    "AUDIO",
    "TRACK_KINDS",
]
