"""
Merge configuration.

Centralized constants for source filtering, trimming, inspection concurrency
and export parameters. A few values can be overridden from the environment;
unusable overrides fall back to the default with a warning.
"""
import logging
import os
from fractions import Fraction
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def env_int(name: str, default: int, minimum: int = 0) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, value, default)
        return default
    if parsed < minimum:
        logger.warning("%s=%d is below %d, using %d", name, parsed, minimum, default)
        return default
    return parsed


# Source filtering (compared case-insensitively against the path suffix)
ACCEPTED_EXTENSIONS = ("mov", "mp4", "m4v")

# A merge needs at least this many usable sources
MIN_SOURCES = 2

# Trailing artifact window removed from the end of every source.
# Camera test footage carries one black frame at the end, at 30 fps.
TRAILING_FRAMES = env_int("CLIPMERGE_TRAILING_FRAMES", 1, minimum=0)
TRAILING_FPS = env_int("CLIPMERGE_TRAILING_FPS", 30, minimum=1)
TRAILING_WINDOW = Fraction(TRAILING_FRAMES, TRAILING_FPS)

# Metadata probing fan-out
INSPECT_CONCURRENCY = env_int("CLIPMERGE_INSPECT_CONCURRENCY", 4, minimum=1)

# Orientation policy: False lets the last inserted transform win
STRICT_ORIENTATION = env_flag("CLIPMERGE_STRICT_ORIENTATION")

# Export knobs
QUALITY_PRESET = "highest"
CONTAINER_TYPE = "mp4"
EXPORT_THREADS = 4

# preset name -> (x264 preset, crf)
QUALITY_PRESETS = {
    "highest": ("slow", 17),
    "balanced": ("medium", 23),
    "fast": ("veryfast", 28),
}

# container name -> (file extension, video codec, audio codec)
CONTAINERS = {
    "mp4": (".mp4", "libx264", "aac"),
    "mov": (".mov", "libx264", "aac"),
    "m4v": (".m4v", "libx264", "aac"),
}

# Default destination directory for timestamped output files
OUTPUT_DIR = Path(os.getenv("CLIPMERGE_OUTPUT_DIR", str(Path.home() / "Movies")))
