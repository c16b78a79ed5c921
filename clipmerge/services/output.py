"""Output location policies.

A policy hands the merge a destination that does not exist yet, or ``None``
when it cannot offer one. Declining is a run failure, never something the
merge tries to work around.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from .. import config

logger = logging.getLogger(__name__)


class OutputLocationPolicy(Protocol):
    def destination(self, inputs: Sequence[str]) -> Optional[Path]: ...


def container_extension(container: str) -> str:
    try:
        return config.CONTAINERS[container][0]
    except KeyError:
        raise ValueError(f"unknown container type: {container}") from None


class TimestampedOutputPolicy:
    """Name the output after the current time inside ``directory``."""

    def __init__(
        self,
        directory: str | Path | None = None,
        container: str = config.CONTAINER_TYPE,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.directory = Path(directory) if directory is not None else config.OUTPUT_DIR
        self.extension = container_extension(container)
        self._clock = clock

    def destination(self, inputs: Sequence[str]) -> Optional[Path]:
        name = self._clock().strftime("%Y-%m-%d-%H-%M-%S")
        path = self.directory / f"{name}{self.extension}"
        if path.exists():
            logger.info("output %s already exists", path)
            return None
        return path


class FixedOutputPolicy:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def destination(self, inputs: Sequence[str]) -> Optional[Path]:
        if self.path.exists():
            logger.info("output %s already exists", self.path)
            return None
        return self.path


def same_file(a: str | Path, b: str | Path) -> bool:
    try:
        return Path(a).expanduser().resolve() == Path(b).expanduser().resolve()
    except (OSError, RuntimeError, ValueError):
        return str(a) == str(b)


__all__ = [
    "OutputLocationPolicy",
    "TimestampedOutputPolicy",
    "FixedOutputPolicy",
    "container_extension",
    "same_file",
]
