"""Top-level package exports.

Public API surface (keep minimal):
 - merge / Merger (one merge run)
 - RunResult (terminal outcome plus per-source reports)
 - output location policies and ExportSettings
"""

from .core.result import RunResult  # noqa: F401
from .services.export import ExportSettings  # noqa: F401
from .services.merge import Merger, merge  # noqa: F401
from .services.output import FixedOutputPolicy, TimestampedOutputPolicy  # noqa: F401

__all__ = [
    "merge",
    "Merger",
    "RunResult",
    "ExportSettings",
    "FixedOutputPolicy",
    "TimestampedOutputPolicy",
]
