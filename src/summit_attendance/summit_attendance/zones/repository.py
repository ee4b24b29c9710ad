from __future__ import annotations

from typing import Protocol, Sequence

from .model import ZoneSet


class ZoneRepository(Protocol):
    def load(self) -> ZoneSet:
        raise NotImplementedError

    def save(self, labels: Sequence[str], *, expected_version: int) -> bool:
        """Replace the labels if the stored version still equals ``expected_version``.

        Returns False when another writer got there first.
        """

        raise NotImplementedError
