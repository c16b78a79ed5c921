"""Merge list: an ordered, persistable list of source clips.

Stored as JSON so a merge can be repeated from the command line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Any
import json
from pathlib import Path

from .sources import SourceSpec


@dataclass
class MergeList:
    name: str = "Untitled"
    sources: List[SourceSpec] = field(default_factory=list)
    version: int = 1

    def add(self, identifier: str | Path, position: int | None = None) -> SourceSpec:
        if position is None:
            position = max((s.position for s in self.sources), default=-1) + 1
        spec = SourceSpec(str(identifier), position)
        self.sources.append(spec)
        return spec

    def remove(self, index: int) -> SourceSpec:
        if index < 0 or index >= len(self.sources):
            raise IndexError("source index out of range")
        return self.sources.pop(index)

    def ordered(self) -> List[SourceSpec]:
        return sorted(self.sources, key=lambda s: s.position)

    def identifiers(self) -> List[str]:
        return [s.identifier for s in self.ordered()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "sources": [
                {"identifier": s.identifier, "position": s.position}
                for s in self.sources
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MergeList":
        sources = []
        for index, entry in enumerate(data.get("sources", [])):
            if isinstance(entry, str):
                sources.append(SourceSpec(entry, index))
            else:
                sources.append(
                    SourceSpec(str(entry["identifier"]), int(entry.get("position", index)))
                )
        return cls(
            name=data.get("name", "Untitled"),
            sources=sources,
            version=data.get("version", 1),
        )

    def save(self, path: str | Path) -> None:
        p = Path(path)
        p.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: str | Path) -> "MergeList":
        p = Path(path)
        data = json.loads(p.read_text())
        return cls.from_dict(data)


__all__ = ["MergeList"]
