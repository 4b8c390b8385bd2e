from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from src.application.errors import MissingConstant

PD_CHECK_OFFSET_DAYS = 55
GESTATION_DAYS = 280
HEAT_CHECK_OFFSET_DAYS = 21
CALVING_GRACE_DAYS = 14
FRESH_WINDOW_DAYS = 48
HEAT_DETECTION_WINDOW_DAYS = 365
POST_PD_TREATMENT_DAYS = 29
REOPEN_AFTER_NEGATIVE_PD_DAYS = 60


@dataclass(frozen=True, slots=True)
class ReproductionConstants:
    """Day offsets driving status windows and due dates. Single source for all call sites."""

    pd_check_offset_days: int = PD_CHECK_OFFSET_DAYS
    gestation_days: int = GESTATION_DAYS
    heat_check_offset_days: int = HEAT_CHECK_OFFSET_DAYS
    calving_grace_days: int = CALVING_GRACE_DAYS
    fresh_window_days: int = FRESH_WINDOW_DAYS
    heat_detection_window_days: int = HEAT_DETECTION_WINDOW_DAYS
    post_pd_treatment_days: int = POST_PD_TREATMENT_DAYS
    reopen_after_negative_pd_days: int = REOPEN_AFTER_NEGATIVE_PD_DAYS

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                raise MissingConstant(f"Reproduction constant '{f.name}' is not configured")
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise MissingConstant(
                    f"Reproduction constant '{f.name}' must be a positive integer",
                    details={"name": f.name, "value": value},
                )
        if self.heat_detection_window_days <= self.fresh_window_days:
            raise MissingConstant(
                "heat_detection_window_days must be greater than fresh_window_days"
            )

    @classmethod
    def from_settings(cls, settings: Any) -> ReproductionConstants:
        return cls(**{f.name: getattr(settings, f.name, None) for f in fields(cls)})


DEFAULT_CONSTANTS = ReproductionConstants()
