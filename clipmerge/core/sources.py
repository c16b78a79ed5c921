"""Source specifications and the source resolver.

The resolver is a pure filter: it keeps candidates whose identifier parses and
carries an accepted extension, opens a handle for each survivor and preserves
their relative order. It never checks that a file exists or is readable; that
surfaces later when the asset is inspected.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from .. import config

logger = logging.getLogger(__name__)

Candidate = Union["SourceSpec", str, Path, None]


@dataclass(frozen=True)
class SourceSpec:
    identifier: str  # path or URI
    position: int = 0  # declared merge order

    @property
    def location(self) -> Optional[str]:
        """Local path (or remote URL) the access layer should open, None if unparseable."""
        return parse_identifier(self.identifier)

    @property
    def extension(self) -> str:
        loc = self.location
        if not loc:
            return ""
        path = urlsplit(loc).path if _has_scheme(loc) else loc
        return posixpath.splitext(path.replace("\\", "/"))[1].lstrip(".").lower()


def _has_scheme(identifier: str) -> bool:
    # Single letter schemes are Windows drive letters ("C:\clips\a.mov")
    scheme = urlsplit(identifier).scheme
    return len(scheme) > 1


def parse_identifier(identifier) -> Optional[str]:
    if identifier is None:
        return None
    if isinstance(identifier, Path):
        identifier = str(identifier)
    if not isinstance(identifier, str):
        return None
    identifier = identifier.strip()
    if not identifier or "\x00" in identifier:
        return None
    try:
        parts = urlsplit(identifier)
    except ValueError:
        return None
    if len(parts.scheme) <= 1:
        return identifier
    if parts.scheme == "file":
        if not parts.path:
            return None
        return url2pathname(unquote(parts.path))
    # Remote locations are handed to the decoder untouched
    return identifier if parts.path else None


def is_accepted(spec: SourceSpec, accepted: Sequence[str] = config.ACCEPTED_EXTENSIONS) -> bool:
    if spec.location is None:
        return False
    return spec.extension in {ext.lower() for ext in accepted}


def as_specs(candidates: Iterable[Candidate]) -> List[SourceSpec]:
    """Normalize raw identifiers into SourceSpecs ordered by declared position.

    Plain identifiers take their list index as position; explicit specs keep
    theirs. Sorting is stable, so equal positions keep list order.
    """
    specs: List[Optional[SourceSpec]] = []
    for index, candidate in enumerate(candidates):
        if isinstance(candidate, SourceSpec):
            specs.append(candidate)
        elif isinstance(candidate, (str, Path)):
            specs.append(SourceSpec(str(candidate), index))
        else:
            specs.append(None)
    valid = [s for s in specs if s is not None]
    dropped = len(specs) - len(valid)
    if dropped:
        logger.debug("dropped %d non-identifier candidate(s)", dropped)
    return sorted(valid, key=lambda s: s.position)


def filter_sources(
    candidates: Iterable[Candidate],
    accepted: Sequence[str] = config.ACCEPTED_EXTENSIONS,
) -> List[SourceSpec]:
    kept: List[SourceSpec] = []
    for spec in as_specs(candidates):
        if is_accepted(spec, accepted):
            kept.append(spec)
        else:
            logger.info("skipping source %r: not an accepted video file", spec.identifier)
    return kept


def resolve_sources(
    candidates: Iterable[Candidate],
    opener: Optional[Callable[[SourceSpec], Any]] = None,
    accepted: Sequence[str] = config.ACCEPTED_EXTENSIONS,
) -> list:
    """Return opened assets for every accepted candidate, in merge order."""
    if opener is None:
        from ..media.asset import FileAsset

        opener = FileAsset.from_spec
    return [opener(spec) for spec in filter_sources(candidates, accepted)]


__all__ = [
    "SourceSpec",
    "parse_identifier",
    "is_accepted",
    "as_specs",
    "filter_sources",
    "resolve_sources",
]
