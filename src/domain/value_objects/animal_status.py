from __future__ import annotations

from enum import Enum


class AnimalLifecycle(str, Enum):
    ACTIVE = "Active"
    SOLD = "Sold"
    DECEASED = "Deceased"


class Sex(str, Enum):
    FEMALE = "Female"
    MALE = "Male"
