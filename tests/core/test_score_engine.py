from __future__ import annotations

import itertools
from typing import Any

import pytest

from roommatch.core import ScoreEngine, ScoringConfig, match_tier
from roommatch.core.scoring import NEUTRAL_ORDINAL, SLEEP_ORDINALS, ordinal
from roommatch.schemas import Profile


def build_profile(**kwargs: Any) -> Profile:
    defaults: dict[str, Any] = {"id": "P-001", "first_name": "Test"}
    defaults.update(kwargs)
    return Profile(**defaults)


SAMPLE_PROFILES = [
    build_profile(id="alex", sleep_schedule="early", cleanliness=4, pref_cleanliness=3),
    build_profile(
        id="priya",
        sleep_schedule="early",
        cleanliness=5,
        pref_cleanliness=4,
        social_energy=2,
        pref_social_energy=2,
        guests_frequency="rarely",
        pref_guests_frequency="rarely",
        substance_env="no-substances",
        pet_allergy="dog",
        open_to_pets=False,
    ),
    build_profile(
        id="mike",
        sleep_schedule="shift",
        cleanliness=2,
        pref_cleanliness=2,
        social_energy=5,
        pref_social_energy=4,
        guests_frequency="frequently",
        substance_env="420-friendly",
        has_dog=True,
    ),
    build_profile(id="zara", sleep_schedule="shift", has_cat=True, pet_allergy="both"),
    build_profile(id="odd", sleep_schedule="siesta", guests_frequency="always", cleanliness=9, pref_social_energy=0),
]


def test_worked_example_scores_zero():
    viewer = build_profile(
        id="a",
        sleep_schedule="early",
        pref_cleanliness=5,
        pref_social_energy=2,
        pref_guests_frequency="rarely",
        substance_env="no-substances",
        pet_allergy="dog",
        open_to_pets=False,
    )
    candidate = build_profile(
        id="b",
        sleep_schedule="shift",
        cleanliness=2,
        social_energy=5,
        guests_frequency="frequently",
        substance_env="420-friendly",
        has_dog=True,
    )
    engine = ScoreEngine()

    breakdown = engine.breakdown(viewer, candidate)

    assert breakdown.penalties == {
        "sleep": 30,
        "cleanliness": 15,
        "social": 15,
        "guests": 16,
        "substance": 20,
        "pet_allergy": 40,
        "pet_tolerance": 25,
    }
    assert breakdown.total_penalty == pytest.approx(161)
    assert breakdown.raw_score == pytest.approx(-61)
    assert breakdown.score == 0
    assert engine.score(viewer, candidate) == 0


def test_matching_lifestyles_score_perfect():
    viewer = build_profile(id="a")
    candidate = build_profile(id="b")

    assert ScoreEngine().score(viewer, candidate) == 100


def test_score_is_directional_for_pet_allergy():
    allergic = build_profile(id="a", pet_allergy="dog")
    dog_owner = build_profile(id="b", has_dog=True)
    engine = ScoreEngine()

    assert engine.score(allergic, dog_owner) == 60
    assert engine.score(dog_owner, allergic) == 100
    assert engine.score(allergic, dog_owner) < engine.score(dog_owner, allergic)


@pytest.mark.parametrize(
    ("viewer", "candidate"),
    list(itertools.product(SAMPLE_PROFILES, repeat=2)),
)
def test_score_stays_within_range(viewer: Profile, candidate: Profile):
    assert 0 <= ScoreEngine().score(viewer, candidate) <= 100


def test_unknown_sleep_schedule_is_treated_as_neutral():
    engine = ScoreEngine()
    viewer = build_profile(id="a", sleep_schedule="early")

    unknown = engine.score(viewer, build_profile(id="b", sleep_schedule="vampire"))
    normal = engine.score(viewer, build_profile(id="c", sleep_schedule="normal"))

    assert unknown == normal == 90
    assert ordinal("vampire", SLEEP_ORDINALS) == NEUTRAL_ORDINAL
    assert ordinal(None, SLEEP_ORDINALS) == NEUTRAL_ORDINAL


def test_guest_penalty_uses_viewer_preference_against_candidate_habit():
    engine = ScoreEngine()
    viewer = build_profile(id="a", guests_frequency="frequently", pref_guests_frequency="rarely")

    assert engine.score(viewer, build_profile(id="b", guests_frequency="frequently")) == 84
    assert engine.score(viewer, build_profile(id="c", guests_frequency="rarely")) == 100
    # unknown frequency sits in the middle of the scale
    assert engine.score(viewer, build_profile(id="d", guests_frequency="weekly")) == 92


@pytest.mark.parametrize(
    ("viewer_env", "candidate_env", "expected"),
    [
        ("no-substances", "no-substances", 100),
        ("no-substances", "alcohol-ok", 80),
        ("no-substances", "420-friendly", 80),
        ("smoke-free", "420-friendly", 85),
        ("smoke-free", "alcohol-ok", 100),
        ("alcohol-ok", "420-friendly", 100),
        ("420-friendly", "no-substances", 100),
    ],
)
def test_substance_rules_are_asymmetric(viewer_env: str, candidate_env: str, expected: int):
    viewer = build_profile(id="a", substance_env=viewer_env)
    candidate = build_profile(id="b", substance_env=candidate_env)

    assert ScoreEngine().score(viewer, candidate) == expected


@pytest.mark.parametrize(
    ("allergy", "has_dog", "has_cat", "expected"),
    [
        ("none", True, True, 100),
        ("dog", False, True, 100),
        ("cat", False, True, 60),
        ("cat", True, False, 100),
        ("both", True, False, 50),
        ("both", False, True, 50),
        ("both", True, True, 50),
    ],
)
def test_pet_allergy_penalties(allergy: str, has_dog: bool, has_cat: bool, expected: int):
    viewer = build_profile(id="a", pet_allergy=allergy)
    candidate = build_profile(id="b", has_dog=has_dog, has_cat=has_cat)

    assert ScoreEngine().score(viewer, candidate) == expected


def test_pet_tolerance_penalty_stacks_with_allergy():
    viewer = build_profile(id="a", pet_allergy="both", open_to_pets=False)
    candidate = build_profile(id="b", has_cat=True)

    breakdown = ScoreEngine().breakdown(viewer, candidate)

    assert breakdown.penalties["pet_allergy"] == 50
    assert breakdown.penalties["pet_tolerance"] == 25
    assert breakdown.score == 25


def test_cleanliness_and_social_penalties_are_capped():
    viewer = build_profile(id="a", pref_cleanliness=5, pref_social_energy=10)
    candidate = build_profile(id="b", cleanliness=1, social_energy=1)

    breakdown = ScoreEngine().breakdown(viewer, candidate)

    assert breakdown.penalties["cleanliness"] == 20
    assert breakdown.penalties["social"] == 20
    assert breakdown.score == 60


def test_scoring_config_defaults():
    config = ScoringConfig()

    assert config.base_score == 100
    assert config.sleep_step == 10
    assert (config.cleanliness_step, config.cleanliness_cap) == (5, 20)
    assert (config.social_step, config.social_cap) == (5, 20)
    assert config.guests_step == 8
    assert config.no_substances_penalty == 20
    assert config.smoke_free_420_penalty == 15
    assert config.single_pet_allergy_penalty == 40
    assert config.both_pet_allergy_penalty == 50
    assert config.pet_tolerance_penalty == 25


def test_config_override_changes_weights_and_rounds_half_up():
    viewer = build_profile(id="a", sleep_schedule="early")
    candidate = build_profile(id="b", sleep_schedule="normal")

    engine = ScoreEngine(config=ScoringConfig(sleep_step=9.5))

    breakdown = engine.breakdown(viewer, candidate)
    assert breakdown.raw_score == pytest.approx(90.5)
    assert breakdown.score == 91


@pytest.mark.parametrize(
    ("score", "tier"),
    [(100, "strong"), (75, "strong"), (74, "fair"), (50, "fair"), (49, "weak"), (0, "weak"), (None, None)],
)
def test_match_tier_bands(score: int | None, tier: str | None):
    assert match_tier(score) == tier
