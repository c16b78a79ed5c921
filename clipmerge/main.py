"""Command line and GUI entry points.

With source arguments (or ``--list``) a single merge runs headless and the
report is printed; without any, the desktop window opens.
"""

from __future__ import annotations

import argparse
import asyncio
from fractions import Fraction
from typing import List, Optional

from . import config
from .core.project import MergeList
from .services.export import ExportSettings
from .services.merge import Merger
from .services.output import FixedOutputPolicy, TimestampedOutputPolicy
from .utils.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipmerge",
        description="Join video clips end to end into a single file.",
    )
    parser.add_argument("sources", nargs="*", help="clips to merge, in order")
    parser.add_argument("--list", dest="merge_list", help="JSON merge list to read sources from")
    out = parser.add_mutually_exclusive_group()
    out.add_argument("-o", "--output-dir", help="directory for a timestamped output file")
    out.add_argument("--output", help="exact output file path (must not exist)")
    parser.add_argument(
        "--trailing-frames",
        type=int,
        default=config.TRAILING_FRAMES,
        help="frames dropped from the end of every clip (default: %(default)s)",
    )
    parser.add_argument(
        "--trailing-fps",
        type=int,
        default=config.TRAILING_FPS,
        help="frame rate used for --trailing-frames (default: %(default)s)",
    )
    parser.add_argument("--fps", type=float, help="output frame rate (default: source rate)")
    parser.add_argument(
        "--quality",
        choices=sorted(config.QUALITY_PRESETS),
        default=config.QUALITY_PRESET,
    )
    parser.add_argument(
        "--container",
        choices=sorted(config.CONTAINERS),
        default=config.CONTAINER_TYPE,
    )
    parser.add_argument(
        "--strict-orientation",
        action="store_true",
        default=config.STRICT_ORIENTATION,
        help="skip clips whose rotation differs from the first clip",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def merger_from_args(args: argparse.Namespace) -> Merger:
    if args.trailing_frames < 0 or args.trailing_fps <= 0:
        raise ValueError("--trailing-frames must be >= 0 and --trailing-fps > 0")
    settings = ExportSettings(args.quality, args.container, fps=args.fps)
    if args.output:
        policy = FixedOutputPolicy(args.output)
    else:
        policy = TimestampedOutputPolicy(args.output_dir, settings.container)
    return Merger(
        policy,
        settings=settings,
        trailing_window=Fraction(args.trailing_frames, args.trailing_fps),
        strict_orientation=args.strict_orientation,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    sources = list(args.sources)
    if args.merge_list:
        try:
            merge_list = MergeList.load(args.merge_list)
        except (OSError, ValueError, KeyError, TypeError) as e:
            parser.error(f"cannot read merge list {args.merge_list}: {e}")
        sources = merge_list.identifiers() + sources
    if not sources:
        run()
        return 0
    configure_logging("DEBUG" if args.verbose else None)
    try:
        merger = merger_from_args(args)
    except ValueError as e:
        parser.error(str(e))
    result = asyncio.run(merger.run(sources))
    print(result.summary())
    return 0 if result.ok else 1


def run():
    from .ui.main_window import run as run_window

    configure_logging()
    run_window()
