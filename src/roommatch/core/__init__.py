"""Core matching components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .query import CandidateQuery, MatchEntry, compute_results
from .requests import RequestBook, RequestNotFoundError
from .scoring import ScoreBreakdown, ScoreEngine, Scorer, ScoringConfig, match_tier

__all__ = [
    "CandidateQuery",
    "MatchEntry",
    "compute_results",
    "RequestBook",
    "RequestNotFoundError",
    "ScoreBreakdown",
    "ScoreEngine",
    "Scorer",
    "ScoringConfig",
    "match_tier",
]
