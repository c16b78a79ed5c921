import asyncio
from fractions import Fraction

from clipmerge.core.errors import AssetMetadataFailure
from clipmerge.core.inspector import inspect_all, inspect_asset

from fakes import FakeAsset


def test_inspect_asset_collects_tracks_and_transform():
    asset = FakeAsset("a.mov", duration=Fraction(21, 2), rotation=270, audio=False)
    result = asyncio.run(inspect_asset(asset))
    assert result.ok
    assert result.duration == Fraction(21, 2)
    assert result.transform.rotation == 270
    assert result.video is not None and result.audio is None
    assert result.kinds == ["video"]
    assert asset.property_loads == 1


def test_metadata_failure_is_reported_not_raised():
    asset = FakeAsset("broken.mp4", error=OSError("truncated"))
    result = asyncio.run(inspect_asset(asset))
    assert not result.ok
    assert isinstance(result.error, AssetMetadataFailure)
    assert result.error.kind == "asset_metadata_failure"
    assert not result.error.fatal
    assert "truncated" in str(result.error)


def test_results_keep_input_order_regardless_of_completion_order():
    assets = [
        FakeAsset("slow.mp4", delay=0.05),
        FakeAsset("fast.mp4"),
        FakeAsset("medium.mp4", delay=0.02),
    ]
    results = asyncio.run(inspect_all(assets, concurrency=3))
    assert [r.asset.identifier for r in results] == ["slow.mp4", "fast.mp4", "medium.mp4"]


def test_fan_out_is_bounded():
    active = {"now": 0, "peak": 0}

    class CountingAsset(FakeAsset):
        async def load_properties(self):
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
            try:
                await asyncio.sleep(0.01)
                return await super().load_properties()
            finally:
                active["now"] -= 1

    assets = [CountingAsset(f"{i}.mp4") for i in range(8)]
    results = asyncio.run(inspect_all(assets, concurrency=2))
    assert len(results) == 8
    assert active["peak"] == 2


def test_one_failure_does_not_affect_other_assets():
    assets = [FakeAsset("a.mp4"), FakeAsset("b.mp4", error=RuntimeError("x")), FakeAsset("c.mp4")]
    results = asyncio.run(inspect_all(assets))
    assert [r.ok for r in results] == [True, False, True]
