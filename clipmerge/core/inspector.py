"""Asset inspection: duration, transform and track discovery.

Inspection is the only phase allowed to run concurrently. ``inspect_all``
fans out over a bounded number of assets at once and returns results in the
same order as its input, so the composer downstream sees source order no
matter which probe finishes first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Sequence

from .. import config
from ..media.asset import AUDIO, IDENTITY, VIDEO, MediaAsset, TrackInfo, Transform
from .errors import AssetMetadataFailure
from .timebase import ZERO

logger = logging.getLogger(__name__)


@dataclass
class Inspection:
    asset: MediaAsset
    duration: Fraction = ZERO
    transform: Transform = IDENTITY
    video: Optional[TrackInfo] = None
    audio: Optional[TrackInfo] = None
    error: Optional[AssetMetadataFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kinds(self) -> List[str]:
        return [k for k, t in ((VIDEO, self.video), (AUDIO, self.audio)) if t is not None]


async def inspect_asset(asset: MediaAsset) -> Inspection:
    """Load everything needed to place ``asset``; failures become part of the result."""
    try:
        duration, transform = await asset.load_properties()
        video_tracks = await asset.load_tracks(VIDEO)
        audio_tracks = await asset.load_tracks(AUDIO)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        failure = AssetMetadataFailure(
            f"could not load metadata: {e}", source=asset.identifier
        )
        failure.__cause__ = e
        return Inspection(asset, error=failure)
    if duration < 0:
        failure = AssetMetadataFailure(
            f"negative duration {float(duration)}", source=asset.identifier
        )
        return Inspection(asset, error=failure)
    return Inspection(
        asset,
        duration=duration,
        transform=transform,
        video=video_tracks[0] if video_tracks else None,
        audio=audio_tracks[0] if audio_tracks else None,
    )


async def inspect_all(
    assets: Sequence[MediaAsset], concurrency: Optional[int] = None
) -> List[Inspection]:
    limit = max(1, concurrency or config.INSPECT_CONCURRENCY)
    semaphore = asyncio.Semaphore(limit)

    async def bounded(asset: MediaAsset) -> Inspection:
        async with semaphore:
            return await inspect_asset(asset)

    logger.debug("inspecting %d asset(s), concurrency=%d", len(assets), limit)
    return list(await asyncio.gather(*(bounded(a) for a in assets)))


__all__ = ["Inspection", "inspect_asset", "inspect_all"]
