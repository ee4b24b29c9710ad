from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import RecordingMode
from ..core.exceptions import ValidationError
from .strategies.base import RecordingStrategy
from .strategies.manual_strategy import ManualStrategy
from .strategies.self_service_strategy import SelfServiceStrategy


@dataclass
class RecordingStrategyFactory:
    """Factory Pattern: choose the strategy for a recording mode."""

    def for_mode(self, mode: RecordingMode | str) -> RecordingStrategy:
        try:
            mode = RecordingMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown recording mode: {mode}")

        if mode == RecordingMode.MANUAL:
            return ManualStrategy()
        return SelfServiceStrategy()
