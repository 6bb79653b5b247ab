"""Roommate compatibility scoring."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Protocol, TypeVar, runtime_checkable

from ..schemas import GuestFrequency, PetAllergy, Profile, SleepSchedule, SubstanceEnv

MatchTier = Literal["strong", "fair", "weak"]

NEUTRAL_ORDINAL = 1

SLEEP_ORDINALS: dict[SleepSchedule, int] = {
    SleepSchedule.EARLY: 0,
    SleepSchedule.NORMAL: 1,
    SleepSchedule.NIGHT_OWL: 2,
    SleepSchedule.SHIFT: 3,
}

GUEST_ORDINALS: dict[GuestFrequency, int] = {
    GuestFrequency.RARELY: 0,
    GuestFrequency.OCCASIONALLY: 1,
    GuestFrequency.FREQUENTLY: 2,
}

_E = TypeVar("_E", bound=Enum)


def ordinal(value: str | None, table: dict[_E, int]) -> int:
    """Ordinal position of ``value`` in ``table``; unrecognized values are neutral."""
    for member, position in table.items():
        if member.value == value:
            return position
    return NEUTRAL_ORDINAL


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def match_tier(score: int | None) -> MatchTier | None:
    if score is None:
        return None
    if score >= 75:
        return "strong"
    if score >= 50:
        return "fair"
    return "weak"


@runtime_checkable
class Scorer(Protocol):
    """Scorer contract for compatibility between a viewer and a candidate."""

    def score(self, viewer: Profile, candidate: Profile) -> int:
        """Return a 0-100 compatibility score of ``candidate`` for ``viewer``."""


@dataclass
class ScoringConfig:
    """Penalty weights for the additive compatibility model."""

    base_score: float = 100.0
    sleep_step: float = 10.0
    cleanliness_step: float = 5.0
    cleanliness_cap: float = 20.0
    social_step: float = 5.0
    social_cap: float = 20.0
    guests_step: float = 8.0
    no_substances_penalty: float = 20.0
    smoke_free_420_penalty: float = 15.0
    single_pet_allergy_penalty: float = 40.0
    both_pet_allergy_penalty: float = 50.0
    pet_tolerance_penalty: float = 25.0


@dataclass(slots=True)
class ScoreBreakdown:
    """Per-rule penalties behind a compatibility score."""

    viewer_id: str
    candidate_id: str
    penalties: dict[str, float] = field(default_factory=dict)
    raw_score: float = 0.0
    score: int = 0

    @property
    def total_penalty(self) -> float:
        return sum(self.penalties.values())


class ScoreEngine:
    """Score how well a candidate suits the viewer's stated preferences.

    Only the viewer's preferences are compared against the candidate's actual
    habits, so ``score(a, b)`` and ``score(b, a)`` generally differ.
    """

    method = "compatibility"

    def __init__(self, *, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()

    def score(self, viewer: Profile, candidate: Profile) -> int:
        return self.breakdown(viewer, candidate).score

    def breakdown(self, viewer: Profile, candidate: Profile) -> ScoreBreakdown:
        cfg = self._config
        penalties = {
            "sleep": self._sleep_penalty(viewer, candidate),
            "cleanliness": self._capped_delta(
                viewer.pref_cleanliness, candidate.cleanliness, cfg.cleanliness_step, cfg.cleanliness_cap
            ),
            "social": self._capped_delta(
                viewer.pref_social_energy, candidate.social_energy, cfg.social_step, cfg.social_cap
            ),
            "guests": self._guests_penalty(viewer, candidate),
            "substance": self._substance_penalty(viewer, candidate),
            "pet_allergy": self._pet_allergy_penalty(viewer, candidate),
            "pet_tolerance": self._pet_tolerance_penalty(viewer, candidate),
        }
        raw_score = cfg.base_score - sum(penalties.values())
        return ScoreBreakdown(
            viewer_id=viewer.id,
            candidate_id=candidate.id,
            penalties=penalties,
            raw_score=raw_score,
            score=max(0, min(100, _round_half_up(raw_score))),
        )

    def _sleep_penalty(self, viewer: Profile, candidate: Profile) -> float:
        diff = abs(
            ordinal(viewer.sleep_schedule, SLEEP_ORDINALS)
            - ordinal(candidate.sleep_schedule, SLEEP_ORDINALS)
        )
        return diff * self._config.sleep_step

    @staticmethod
    def _capped_delta(preferred: int | None, actual: int | None, step: float, cap: float) -> float:
        return min(cap, abs((preferred or 0) - (actual or 0)) * step)

    def _guests_penalty(self, viewer: Profile, candidate: Profile) -> float:
        if viewer.pref_guests_frequency == candidate.guests_frequency:
            return 0.0
        diff = abs(
            ordinal(viewer.pref_guests_frequency, GUEST_ORDINALS)
            - ordinal(candidate.guests_frequency, GUEST_ORDINALS)
        )
        return diff * self._config.guests_step

    def _substance_penalty(self, viewer: Profile, candidate: Profile) -> float:
        # Only these two rules exist; other combinations are not penalized.
        penalty = 0.0
        if (
            viewer.substance_env == SubstanceEnv.NO_SUBSTANCES.value
            and candidate.substance_env != SubstanceEnv.NO_SUBSTANCES.value
        ):
            penalty += self._config.no_substances_penalty
        if (
            viewer.substance_env == SubstanceEnv.SMOKE_FREE.value
            and candidate.substance_env == SubstanceEnv.FRIENDLY_420.value
        ):
            penalty += self._config.smoke_free_420_penalty
        return penalty

    def _pet_allergy_penalty(self, viewer: Profile, candidate: Profile) -> float:
        cfg = self._config
        penalty = 0.0
        if viewer.pet_allergy == PetAllergy.DOG.value and candidate.has_dog:
            penalty += cfg.single_pet_allergy_penalty
        if viewer.pet_allergy == PetAllergy.CAT.value and candidate.has_cat:
            penalty += cfg.single_pet_allergy_penalty
        if viewer.pet_allergy == PetAllergy.BOTH.value and candidate.has_pets:
            penalty += cfg.both_pet_allergy_penalty
        return penalty

    def _pet_tolerance_penalty(self, viewer: Profile, candidate: Profile) -> float:
        if not viewer.open_to_pets and candidate.has_pets:
            return self._config.pet_tolerance_penalty
        return 0.0
