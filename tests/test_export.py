import asyncio
from fractions import Fraction

import pytest
from moviepy import ColorClip
from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos

from clipmerge.core.errors import ExportFailure
from clipmerge.core.timebase import TimeRange
from clipmerge.core.timeline import OutputTimeline
from clipmerge.services.export import ExportSettings, MoviePyExporter, canvas_size
from clipmerge.services.merge import merge
from clipmerge.services.output import FixedOutputPolicy

from clips import write_clip


def test_settings_map_to_encoder_arguments():
    args = ExportSettings().encoder_args()
    assert args["codec"] == "libx264"
    assert args["audio_codec"] == "aac"
    assert args["preset"] == "slow"
    assert args["ffmpeg_params"] == ["-crf", "17"]
    assert ExportSettings(container="mov").extension == ".mov"
    with pytest.raises(ValueError):
        ExportSettings(quality_preset="ultra")
    with pytest.raises(ValueError):
        ExportSettings(container="avi")


def test_merge_three_rendered_clips(tmp_path):
    sources = [
        write_clip(tmp_path / f"cam{i}.mp4", duration=0.5, color=(80 * i, 0, 0))
        for i in range(3)
    ]
    out = tmp_path / "merged.mp4"
    progress = []
    result = asyncio.run(
        merge(
            [str(p) for p in sources],
            output_policy=FixedOutputPolicy(out),
            settings=ExportSettings("fast"),
            progress=progress.append,
        )
    )
    assert result.ok, result.summary()
    assert result.output == out
    assert out.exists()
    infos = ffmpeg_parse_infos(str(out))
    assert infos["video_found"] and infos["audio_found"]
    assert infos["duration"] == pytest.approx(float(result.duration), abs=0.1)
    assert progress and progress[-1] == 1.0


def test_merge_with_video_only_and_unreadable_sources(tmp_path):
    with_audio = write_clip(tmp_path / "a.mp4", duration=0.5)
    silent = write_clip(tmp_path / "b.mov", duration=0.5, audio=False)
    broken = tmp_path / "broken.m4v"
    broken.write_bytes(b"not a movie")
    out = tmp_path / "merged.mp4"
    result = asyncio.run(
        merge(
            [str(with_audio), str(broken), str(silent)],
            output_policy=FixedOutputPolicy(out),
            settings=ExportSettings("fast"),
        )
    )
    assert result.ok, result.summary()
    assert [r.ok for r in result.reports] == [True, False, True]
    assert result.reports[2].tracks == ["video"]
    infos = ffmpeg_parse_infos(str(out))
    assert infos["duration"] == pytest.approx(float(result.duration), abs=0.1)


def test_timeline_without_video_cannot_be_exported(tmp_path):
    tl = OutputTimeline()
    tl.insert("audio", TimeRange(0, Fraction(1, 2)), "a.mp4", Fraction(0))
    out = tmp_path / "audio-only.mp4"
    with pytest.raises(ExportFailure):
        asyncio.run(MoviePyExporter().export(tl.freeze(), out, ExportSettings()))
    assert not out.exists()


def test_unreadable_segment_source_fails_and_leaves_no_file(tmp_path):
    bogus = tmp_path / "gone.mp4"
    tl = OutputTimeline()
    tl.insert("video", TimeRange(0, 1), str(bogus), Fraction(0))
    out = tmp_path / "out.mp4"
    with pytest.raises(ExportFailure):
        asyncio.run(MoviePyExporter().export(tl.freeze(), out, ExportSettings("fast")))
    assert not out.exists()


def test_canvas_holds_rotated_segments():
    landscape = ColorClip(size=(32, 18), color=(0, 0, 0), duration=0.1)
    portrait = landscape.rotated(90)
    assert tuple(portrait.size) == (18, 32)
    assert canvas_size([landscape, portrait]) == (32, 32)
    assert canvas_size([portrait]) == (18, 32)


def test_merge_clips_of_different_sizes(tmp_path):
    wide = write_clip(tmp_path / "wide.mp4", duration=0.5, size=(32, 18))
    tall = write_clip(tmp_path / "tall.mp4", duration=0.5, size=(18, 32))
    out = tmp_path / "merged.mp4"
    result = asyncio.run(
        merge(
            [str(wide), str(tall)],
            output_policy=FixedOutputPolicy(out),
            settings=ExportSettings("fast"),
        )
    )
    assert result.ok, result.summary()
    infos = ffmpeg_parse_infos(str(out))
    assert list(infos["video_size"]) == [32, 32]
