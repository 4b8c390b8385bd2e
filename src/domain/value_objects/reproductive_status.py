from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StatusLabel(str, Enum):
    OPEN = "Open"
    EMPTY = "Empty"
    PREGNANT = "Pregnant"
    FRESH = "Fresh"
    HEAT_DETECTION_DUE = "Heat-Detection-Due"
    NOT_APPLICABLE = "N/A"


class StatusCategory(str, Enum):
    """Display category consumed by the UI badge."""

    DEFAULT = "default"
    SECONDARY = "secondary"
    DESTRUCTIVE = "destructive"
    OUTLINE = "outline"


class StatusOrigin(str, Enum):
    OVERRIDE = "override"
    COMPUTED = "computed"


class ManualOverride(str, Enum):
    """Manual reproductive status set by staff. NONE means "compute it"."""

    NONE = "None"
    PREGNANT = "Pregnant"
    EMPTY = "Empty"
    OPEN = "Open"

    @classmethod
    def parse(cls, value: ManualOverride | str | None) -> ManualOverride:
        if value is None or value == "":
            return cls.NONE
        if isinstance(value, cls):
            return value
        return cls(value)


class CyclePhase(str, Enum):
    NONE = "None"
    BRED_UNCONFIRMED = "Bred-Unconfirmed"
    PD_DUE = "PD-Due"
    PREGNANT = "Pregnant"
    NOT_PREGNANT = "Not-Pregnant"


CATEGORY_BY_LABEL: dict[StatusLabel, StatusCategory] = {
    StatusLabel.OPEN: StatusCategory.OUTLINE,
    StatusLabel.EMPTY: StatusCategory.DESTRUCTIVE,
    StatusLabel.PREGNANT: StatusCategory.DEFAULT,
    StatusLabel.FRESH: StatusCategory.DEFAULT,
    StatusLabel.HEAT_DETECTION_DUE: StatusCategory.DESTRUCTIVE,
    StatusLabel.NOT_APPLICABLE: StatusCategory.OUTLINE,
}


@dataclass(frozen=True, slots=True)
class ReproductiveStatus:
    label: StatusLabel
    category: StatusCategory
    origin: StatusOrigin = StatusOrigin.COMPUTED
    days_since_calving: int | None = None

    @classmethod
    def of(
        cls,
        label: StatusLabel,
        *,
        origin: StatusOrigin = StatusOrigin.COMPUTED,
        days_since_calving: int | None = None,
    ) -> ReproductiveStatus:
        return cls(
            label=label,
            category=CATEGORY_BY_LABEL[label],
            origin=origin,
            days_since_calving=days_since_calving,
        )
