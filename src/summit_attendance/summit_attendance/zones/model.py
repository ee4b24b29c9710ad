from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ZoneSet:
    """Admin-managed zone labels. ``version`` increments on every change."""

    version: int
    labels: Tuple[str, ...]

    def __contains__(self, label: object) -> bool:
        return label in self.labels

    def to_dict(self) -> dict:
        return {"version": self.version, "zones": list(self.labels)}
