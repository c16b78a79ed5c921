"""Export stage: render a finished timeline to a video file.

The merge hands over a frozen ``OutputTimeline`` once every source has been
placed. ``MoviePyExporter`` rebuilds the timeline from MoviePy clips:
 - video segments are cut from their sources and concatenated (or laid over
   black when the video track has holes)
 - audio segments are positioned on a composite clip, silence fills gaps
 - encoding runs on a worker thread; a cancelled or failed export removes the
   partially written file
"""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from moviepy import (
    AudioFileClip,
    CompositeAudioClip,
    CompositeVideoClip,
    VideoFileClip,
    concatenate_videoclips,
)
from proglog import ProgressBarLogger

from .. import config
from ..core.errors import ExportFailure
from ..core.timeline import OutputTimeline
from ..utils.timefmt import format_time

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]  # 0.0 - 1.0

DEFAULT_FPS = 30.0


class ExportSettings:
    def __init__(
        self,
        quality_preset: str = config.QUALITY_PRESET,
        container: str = config.CONTAINER_TYPE,
        fps: float | None = None,
        threads: int = config.EXPORT_THREADS,
    ):
        if quality_preset not in config.QUALITY_PRESETS:
            raise ValueError(f"unknown quality preset: {quality_preset}")
        if container not in config.CONTAINERS:
            raise ValueError(f"unknown container type: {container}")
        self.quality_preset = quality_preset
        self.container = container
        self.fps = fps
        self.threads = threads

    @property
    def extension(self) -> str:
        return config.CONTAINERS[self.container][0]

    def encoder_args(self) -> dict:
        """Keyword arguments for ``write_videofile``."""
        x264_preset, crf = config.QUALITY_PRESETS[self.quality_preset]
        _, vcodec, acodec = config.CONTAINERS[self.container]
        return {
            "codec": vcodec,
            "audio_codec": acodec,
            "preset": x264_preset,
            "ffmpeg_params": ["-crf", str(crf)],
            "threads": self.threads,
        }

    def __repr__(self) -> str:
        return (
            f"ExportSettings(quality_preset={self.quality_preset!r}, "
            f"container={self.container!r}, fps={self.fps!r})"
        )


class Exporter(Protocol):
    async def export(
        self,
        timeline: OutputTimeline,
        destination: Path,
        settings: ExportSettings,
        progress: Optional[ProgressCallback] = None,
    ) -> Path: ...


class ExportCancelled(Exception):
    pass


class _ProgressLogger(ProgressBarLogger):
    """Forwards MoviePy frame progress and aborts the render when cancelled."""

    def __init__(self, cancel: threading.Event, progress: Optional[ProgressCallback]):
        super().__init__()
        self._cancel = cancel
        self._progress = progress

    def bars_callback(self, bar, attr, value, old_value=None):
        if self._cancel.is_set():
            raise ExportCancelled("export cancelled")
        if self._progress is None or bar != "frame_index" or attr != "index":
            return
        total = self.bars[bar].get("total") or 0
        if total > 0:
            self._progress(min(1.0, (value + 1) / total))


def _cut(source, segment):
    """Sub-clip of ``source`` covering the segment, bounded by the decoded stream length."""
    start = float(segment.source_range.start)
    end = float(segment.source_range.end)
    if source.duration is not None:
        end = min(end, source.duration)
    return source.subclipped(start, end)


def canvas_size(clips) -> tuple:
    """Frame size that holds every clip, rotated ones included."""
    return (max(c.size[0] for c in clips), max(c.size[1] for c in clips))


class MoviePyExporter:
    async def export(
        self,
        timeline: OutputTimeline,
        destination: Path,
        settings: ExportSettings,
        progress: Optional[ProgressCallback] = None,
    ) -> Path:
        destination = Path(destination)
        cancel = threading.Event()
        try:
            await asyncio.to_thread(
                self._render, timeline, destination, settings, cancel, progress
            )
        except asyncio.CancelledError:
            cancel.set()
            raise
        except ExportFailure:
            raise
        except Exception as e:
            raise ExportFailure(f"export failed: {e}", source=str(destination)) from e
        if progress:
            progress(1.0)
        return destination

    def _render(
        self,
        timeline: OutputTimeline,
        destination: Path,
        settings: ExportSettings,
        cancel: threading.Event,
        progress: Optional[ProgressCallback],
    ) -> None:  # executed in worker thread
        video_track = timeline.video
        if video_track is None or not video_track.segments:
            raise ExportFailure(
                "timeline has no video track to export", source=str(destination)
            )
        total = float(timeline.duration)
        opened: List = []
        try:
            parts = []
            for seg in video_track.segments:
                source = VideoFileClip(seg.source, audio=False)
                opened.append(source)
                part = _cut(source, seg)
                if part.duration < float(seg.duration):
                    # Stream slightly shorter than the container: hold the last frame
                    part = part.with_duration(float(seg.duration))
                # Frames decode display-oriented; turn them to the track's orientation
                relative = (video_track.rotation - seg.rotation) % 360
                if relative:
                    part = part.rotated(relative)
                parts.append((seg, part))

            fps = settings.fps or max((c.fps or 0 for c in opened), default=0) or DEFAULT_FPS
            size = canvas_size([p for _, p in parts])
            if video_track.is_contiguous() and float(video_track.end) == total:
                uniform = all(tuple(p.size) == size for _, p in parts)
                video = concatenate_videoclips(
                    [p for _, p in parts], method="chain" if uniform else "compose"
                )
            else:
                video = CompositeVideoClip(
                    [p.with_start(float(s.at)) for s, p in parts],
                    size=size,
                    bg_color=(0, 0, 0),
                ).with_duration(total)

            audio = None
            audio_track = timeline.audio
            if audio_track is not None and audio_track.segments:
                audio_parts = []
                for seg in audio_track.segments:
                    source = AudioFileClip(seg.source)
                    opened.append(source)
                    audio_parts.append(_cut(source, seg).with_start(float(seg.at)))
                audio = CompositeAudioClip(audio_parts).with_duration(total)
                video = video.with_audio(audio)

            logger.info(
                "exporting %s (%s, %s) to %s",
                format_time(timeline.duration),
                settings.quality_preset,
                settings.container,
                destination,
            )
            try:
                video.write_videofile(
                    str(destination),
                    fps=fps,
                    audio=audio is not None,
                    temp_audiofile_path=str(destination.parent),
                    logger=_ProgressLogger(cancel, progress),
                    **settings.encoder_args(),
                )
            except BaseException:
                # Never leave a partial output behind
                destination.unlink(missing_ok=True)
                raise
        finally:
            for clip in opened:
                try:
                    clip.close()
                except Exception:  # pragma: no cover
                    logger.debug("failed to close %r", clip, exc_info=True)


__all__ = [
    "ExportSettings",
    "Exporter",
    "ExportCancelled",
    "MoviePyExporter",
    "ProgressCallback",
    "canvas_size",
]
