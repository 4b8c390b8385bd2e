from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.utils.dates import format_day_date

from .types import NotificationType


@dataclass
class BuiltNotification:
    type: str
    title: str
    body: str
    metadata: dict[str, Any]


def _animal_label(tag: str | None, name: str | None, *, max_len: int = 16) -> str:
    """'#A-100 Bella', falling back to 'animal' when the tag is unknown."""
    label = f"#{tag}" if tag else "animal"
    if name:
        name = name if len(name) <= max_len else (name[: max(0, max_len - 1)] + "…")
        label += f" {name}"
    return label


def build_notification(ntype: str, **kwargs: Any) -> BuiltNotification:
    """
    Central place to build notification title/body/metadata from templates.
    Keep strings easy to find and translate.
    """
    tag: str | None = kwargs.get("tag")
    name: str | None = kwargs.get("name")
    animal = _animal_label(tag, name)
    due = kwargs.get("due_date")
    metadata = {
        "breeding_record_id": (
            str(kwargs["breeding_record_id"]) if kwargs.get("breeding_record_id") else None
        ),
        "animal_id": str(kwargs["animal_id"]) if kwargs.get("animal_id") else None,
        "ear_tag": tag,
        "breeding_date": str(kwargs["breeding_date"]) if kwargs.get("breeding_date") else None,
        "due_date": str(due) if due is not None else None,
    }

    if ntype == NotificationType.PD_CHECK:
        title = "Expected PD check soon"
        body = f"Pregnancy diagnosis for {animal} is due on {format_day_date(due)}."
        return BuiltNotification(ntype, title, body, metadata)

    if ntype == NotificationType.EXPECTED_CALVING:
        title = "Expected calving soon"
        body = f"{animal} is expected to calve on {format_day_date(due)}."
        return BuiltNotification(ntype, title, body, metadata)

    if ntype == NotificationType.REOPEN_BREEDING:
        expected = kwargs.get("expected_calving_date")
        grace_days = int(kwargs.get("grace_days", 0) or 0)
        title = "Breeding cycle overdue"
        body = (
            f"No calving recorded for {animal}, expected on {format_day_date(expected)} "
            f"(grace period of {grace_days} days exceeded). Re-evaluate and reopen breeding."
        )
        metadata["expected_calving_date"] = str(expected) if expected is not None else None
        return BuiltNotification(ntype, title, body, metadata)

    # Fallback to pass-through
    return BuiltNotification(
        ntype,
        title=str(kwargs.get("title", "Notification")),
        body=str(kwargs.get("body", "")),
        metadata=dict(kwargs.get("metadata", {})),
    )
