import pytest

from src.summit_attendance.summit_attendance.attendance.factory import RecordingStrategyFactory
from src.summit_attendance.summit_attendance.attendance.strategies.manual_strategy import ManualStrategy
from src.summit_attendance.summit_attendance.attendance.strategies.self_service_strategy import SelfServiceStrategy
from src.summit_attendance.summit_attendance.core.enums import RecordingMode
from src.summit_attendance.summit_attendance.core.exceptions import ValidationError


def test_factory_self_service_mode():
    strategy = RecordingStrategyFactory().for_mode(RecordingMode.SELF_SERVICE)

    assert isinstance(strategy, SelfServiceStrategy)


def test_factory_manual_mode_from_string():
    strategy = RecordingStrategyFactory().for_mode("manual")

    assert isinstance(strategy, ManualStrategy)
    assert strategy.mode == RecordingMode.MANUAL


def test_factory_unknown_mode():
    with pytest.raises(ValidationError):
        RecordingStrategyFactory().for_mode("bulk")
