from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SleepSchedule(str, Enum):
    EARLY = "early"
    NORMAL = "normal"
    NIGHT_OWL = "night-owl"
    SHIFT = "shift"


class GuestFrequency(str, Enum):
    RARELY = "rarely"
    OCCASIONALLY = "occasionally"
    FREQUENTLY = "frequently"


class SubstanceEnv(str, Enum):
    SMOKE_FREE = "smoke-free"
    ALCOHOL_OK = "alcohol-ok"
    FRIENDLY_420 = "420-friendly"
    NO_SUBSTANCES = "no-substances"


class NoiseTolerance(str, Enum):
    QUIET = "quiet"
    MODERATE = "moderate"
    BACKGROUND_OK = "background-ok"


class PetAllergy(str, Enum):
    NONE = "none"
    DOG = "dog"
    CAT = "cat"
    BOTH = "both"


class LeaseDuration(str, Enum):
    """Lease lengths, declared shortest first."""

    FOUR_MONTHS = "4-months"
    EIGHT_MONTHS = "8-months"
    TWELVE_MONTHS = "12-months"
    SIXTEEN_MONTHS = "16-months"
    SIXTEEN_PLUS = "16-plus"
    INDEFINITE = "indefinite"


LIFESTYLE_FIELDS: frozenset[str] = frozenset(
    {
        "sleep_schedule",
        "cleanliness",
        "social_energy",
        "guests_frequency",
        "substance_env",
        "noise_tolerance",
        "has_dog",
        "has_cat",
    }
)


class Profile(BaseModel):
    """Lifestyle and preference record for one person.

    Categorical fields hold plain strings rather than the enums above so that
    documents carrying values outside the known vocabulary still load; the
    scoring code maps them onto the enums and treats unknown values as neutral.
    """

    id: str
    first_name: str = ""
    age: int | None = None
    program: str = ""
    bio: str = ""
    gender: str | None = None
    photo_url: str | None = None

    sleep_schedule: str = SleepSchedule.NORMAL.value
    cleanliness: int = 3
    social_energy: int = 3
    guests_frequency: str = GuestFrequency.OCCASIONALLY.value
    substance_env: str = SubstanceEnv.SMOKE_FREE.value
    noise_tolerance: str = NoiseTolerance.MODERATE.value
    has_dog: bool = False
    has_cat: bool = False

    pref_cleanliness: int = 3
    pref_social_energy: int = 3
    pref_guests_frequency: str = GuestFrequency.OCCASIONALLY.value
    pet_allergy: str = PetAllergy.NONE.value
    open_to_pets: bool = True

    lease_duration: str = LeaseDuration.EIGHT_MONTHS.value
    move_in_date: str | None = None
    budget_min: int | None = None
    budget_max: int | None = None

    hobbies: list[str] = Field(default_factory=list)

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("first_name", "program", "bio", mode="before")
    @classmethod
    def _null_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def has_pets(self) -> bool:
        return self.has_dog or self.has_cat

    @property
    def search_text(self) -> str:
        return f"{self.first_name} {self.program} {self.bio}"

    def is_complete(self) -> bool:
        """Return True once a name and at least one lifestyle field are set."""
        if not self.first_name:
            return False
        return bool(LIFESTYLE_FIELDS & self.model_fields_set)

    def budget_label(self) -> str | None:
        if self.budget_min and self.budget_max:
            return f"${self.budget_min}–${self.budget_max}/mo"
        if self.budget_min:
            return f"${self.budget_min}+/mo"
        if self.budget_max:
            return f"Up to ${self.budget_max}/mo"
        return None

    @classmethod
    def with_defaults(cls, data: dict[str, Any] | None, *, profile_id: str | None = None) -> "Profile":
        """Overlay stored profile data on the fallback viewer profile."""
        payload: dict[str, Any] = {"id": "me"}
        payload.update(data or {})
        if profile_id is not None:
            payload["id"] = profile_id
        return cls.model_validate(payload)
