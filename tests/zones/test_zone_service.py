import pytest

from src.summit_attendance.summit_attendance.core.constants import DEFAULT_ZONES
from src.summit_attendance.summit_attendance.core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from src.summit_attendance.summit_attendance.zones.model import ZoneSet
from src.summit_attendance.summit_attendance.zones.service import ZoneService


class StaleZones:
    """Always loses the optimistic write, as if another admin saved first."""

    def load(self) -> ZoneSet:
        return ZoneSet(version=3, labels=("Poonch",))

    def save(self, labels, *, expected_version: int) -> bool:
        return False


def test_default_zones(container):
    zones = container.zone_service.list_zones()

    assert zones.labels == DEFAULT_ZONES
    assert zones.to_dict()["version"] == 1


def test_add_and_remove_zone(container):
    added = container.zone_service.add_zone("  Kathua ")

    assert added.labels[-1] == "Kathua"
    assert added.version == 2

    removed = container.zone_service.remove_zone("Kathua")
    assert "Kathua" not in removed
    assert removed.version == 3


def test_add_zone_validation(container):
    with pytest.raises(ValidationError, match="Zone already exists: Poonch"):
        container.zone_service.add_zone("Poonch")
    with pytest.raises(ValidationError):
        container.zone_service.add_zone("   ")


def test_remove_unknown_zone(container):
    with pytest.raises(NotFoundError, match="Zone not found: Atlantis"):
        container.zone_service.remove_zone("Atlantis")


def test_concurrent_change_is_reported():
    svc = ZoneService(StaleZones())

    with pytest.raises(PreconditionFailed):
        svc.add_zone("Kathua")


def test_require_known(container):
    assert container.zone_service.require_known(" Jammu ") == "Jammu"
    with pytest.raises(ValidationError, match="Unknown zone"):
        container.zone_service.require_known("Atlantis")
