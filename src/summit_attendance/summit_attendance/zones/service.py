from __future__ import annotations

import logging

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from .model import ZoneSet
from .repository import ZoneRepository

logger = logging.getLogger(__name__)


class ZoneService:
    """Use case: maintain the zone list (admin) and validate zone labels."""

    def __init__(self, zones: ZoneRepository):
        self._zones = zones

    def list_zones(self) -> ZoneSet:
        return self._zones.load()

    def require_known(self, label: str) -> str:
        label = require_non_empty(label, "Zone")
        if label not in self._zones.load():
            raise ValidationError(f"Unknown zone: {label}")
        return label

    def add_zone(self, label: str) -> ZoneSet:
        label = require_non_empty(label, "Zone name")
        current = self._zones.load()
        if label in current:
            raise ValidationError(f"Zone already exists: {label}")

        self._save(current, current.labels + (label,))
        logger.info("Zone added: %s", label)
        return self._zones.load()

    def remove_zone(self, label: str) -> ZoneSet:
        label = (label or "").strip()
        current = self._zones.load()
        if label not in current:
            raise NotFoundError(f"Zone not found: {label}")

        self._save(current, tuple(z for z in current.labels if z != label))
        logger.info("Zone removed: %s", label)
        return self._zones.load()

    def _save(self, current: ZoneSet, labels: tuple) -> None:
        if not self._zones.save(labels, expected_version=current.version):
            raise PreconditionFailed("The zone list was changed by someone else. Please reload and try again.")
