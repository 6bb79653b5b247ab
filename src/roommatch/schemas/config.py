"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .query import SortKey


class ScoringSettings(BaseModel):
    base_score: float | None = None
    sleep_step: float | None = None
    cleanliness_step: float | None = None
    cleanliness_cap: float | None = None
    social_step: float | None = None
    social_cap: float | None = None
    guests_step: float | None = None
    no_substances_penalty: float | None = None
    smoke_free_420_penalty: float | None = None
    single_pet_allergy_penalty: float | None = None
    both_pet_allergy_penalty: float | None = None
    pet_tolerance_penalty: float | None = None

    model_config = ConfigDict(extra="forbid")


class QueryDefaults(BaseModel):
    sort: SortKey | None = None
    include_score: bool | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    query: QueryDefaults = Field(default_factory=QueryDefaults)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        scoring = self.scoring.model_dump(exclude_none=True)
        if scoring:
            settings["scoring"] = scoring
        query = self.query.model_dump(exclude_none=True)
        if query:
            settings["query"] = query
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
