"""Pydantic schema definitions for profiles, queries and requests."""

from __future__ import annotations

from .profile import (
    GuestFrequency,
    LeaseDuration,
    NoiseTolerance,
    PetAllergy,
    Profile,
    SleepSchedule,
    SubstanceEnv,
)
from .query import ANY, SORT_KEYS, QuerySpec, SortKey
from .request import RoommateRequest

__all__ = [
    "ANY",
    "SORT_KEYS",
    "GuestFrequency",
    "LeaseDuration",
    "NoiseTolerance",
    "PetAllergy",
    "Profile",
    "QuerySpec",
    "RoommateRequest",
    "SleepSchedule",
    "SortKey",
    "SubstanceEnv",
]
