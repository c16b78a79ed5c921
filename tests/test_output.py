from datetime import datetime

import pytest

from clipmerge.services.output import (
    FixedOutputPolicy,
    TimestampedOutputPolicy,
    container_extension,
    same_file,
)


def _clock():
    return datetime(2024, 8, 5, 14, 3, 9)


def test_timestamped_policy_names_file_after_clock(tmp_path):
    policy = TimestampedOutputPolicy(tmp_path, "mp4", clock=_clock)
    assert policy.destination(["a.mp4"]) == tmp_path / "2024-08-05-14-03-09.mp4"


def test_timestamped_policy_declines_existing_file(tmp_path):
    (tmp_path / "2024-08-05-14-03-09.mov").write_bytes(b"")
    policy = TimestampedOutputPolicy(tmp_path, "mov", clock=_clock)
    assert policy.destination([]) is None


def test_fixed_policy(tmp_path):
    target = tmp_path / "out.mp4"
    policy = FixedOutputPolicy(target)
    assert policy.destination([]) == target
    target.write_bytes(b"x")
    assert policy.destination([]) is None


def test_unknown_container_is_rejected():
    assert container_extension("m4v") == ".m4v"
    with pytest.raises(ValueError):
        TimestampedOutputPolicy(container="avi")


def test_same_file_resolves_relative_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert same_file("clip.mp4", tmp_path / "clip.mp4")
    assert not same_file("clip.mp4", tmp_path / "other.mp4")
