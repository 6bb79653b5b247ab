"""Search, filter and sort over an in-memory candidate list."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

import structlog

from ..schemas import ANY, Profile, QuerySpec
from .scoring import MatchTier, ScoreEngine, Scorer, match_tier

MISSING_AGE_ASC = 99
MISSING_AGE_DESC = 0


@dataclass(slots=True)
class MatchEntry:
    """One candidate in a query result, with its score when it was requested."""

    profile: Profile
    score: int | None = None

    @property
    def tier(self) -> MatchTier | None:
        return match_tier(self.score)

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.profile.id,
            "first_name": self.profile.first_name,
            "age": self.profile.age,
            "program": self.profile.program,
            "lease_duration": self.profile.lease_duration,
            "score": self.score,
            "tier": self.tier,
        }


class CandidateQuery:
    """Apply a ``QuerySpec`` to a candidate snapshot."""

    def __init__(self, *, engine: Scorer | None = None) -> None:
        self._engine = engine or ScoreEngine()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        candidates: Iterable[Profile],
        viewer: Profile,
        spec: QuerySpec,
    ) -> list[MatchEntry]:
        snapshot = tuple(candidates)
        passing = self.filter(snapshot, spec)
        entries = [
            MatchEntry(
                profile=profile,
                score=self._engine.score(viewer, profile) if spec.needs_scores else None,
            )
            for profile in passing
        ]
        ordered = self.sort(entries, spec, viewer)
        self._logger.debug(
            "query.completed",
            viewer_id=viewer.id,
            candidate_count=len(snapshot),
            result_count=len(ordered),
            sort=spec.sort,
        )
        return ordered

    def filter(self, candidates: Sequence[Profile], spec: QuerySpec) -> list[Profile]:
        needle = spec.text.strip().lower()
        return [
            profile
            for profile in candidates
            if self._matches_text(profile, needle)
            and self._within_age(profile, spec.min_age, spec.max_age)
            and self._matches_lease(profile, spec.lease_duration)
        ]

    def sort(
        self,
        entries: Sequence[MatchEntry],
        spec: QuerySpec,
        viewer: Profile,
    ) -> list[MatchEntry]:
        key = self._sort_key(spec, viewer)
        if key is None:
            return list(entries)
        # sorted() is stable, ties keep filter order.
        return sorted(entries, key=key)

    def _sort_key(
        self,
        spec: QuerySpec,
        viewer: Profile,
    ) -> Callable[[MatchEntry], Any] | None:
        if spec.sort == "match":
            engine = self._engine
            return lambda entry: -(
                entry.score if entry.score is not None else engine.score(viewer, entry.profile)
            )
        if spec.sort == "name":
            return lambda entry: collation_key(entry.profile.first_name)
        if spec.sort == "age-asc":
            return lambda entry: _age_or(entry.profile, MISSING_AGE_ASC)
        if spec.sort == "age-desc":
            return lambda entry: -_age_or(entry.profile, MISSING_AGE_DESC)
        if spec.sort == "hobbies":
            mine = set(viewer.hobbies or ())
            return lambda entry: -shared_hobby_count(mine, entry.profile)
        return None

    @staticmethod
    def _matches_text(profile: Profile, needle: str) -> bool:
        if not needle:
            return True
        return needle in profile.search_text.lower()

    @staticmethod
    def _within_age(profile: Profile, minimum: int | None, maximum: int | None) -> bool:
        if minimum is not None and (profile.age is None or profile.age < minimum):
            return False
        if maximum is not None and (profile.age is None or profile.age > maximum):
            return False
        return True

    @staticmethod
    def _matches_lease(profile: Profile, lease_duration: str) -> bool:
        return lease_duration == ANY or profile.lease_duration == lease_duration


def shared_hobby_count(viewer_hobbies: set[str], candidate: Profile) -> int:
    return len(viewer_hobbies.intersection(candidate.hobbies or ()))


def collation_key(value: str | None) -> str:
    """Accent- and case-insensitive ordering key for display names."""
    text = value or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold()


def _age_or(profile: Profile, fallback: int) -> int:
    return profile.age if profile.age is not None else fallback


def compute_results(
    candidates: Iterable[Profile],
    viewer: Profile,
    spec: QuerySpec,
    *,
    engine: Scorer | None = None,
) -> list[MatchEntry]:
    """Filter, score and order ``candidates`` for ``viewer``."""
    return CandidateQuery(engine=engine).run(candidates, viewer, spec)
