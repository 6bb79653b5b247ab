"""Dependency injection container for the matching system."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import CandidateQuery, RequestBook, ScoreEngine, ScoringConfig
from .pipeline import MatchPipeline, OutputWriter, ProfileLoader, ViewerLoader


class MatchContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    score_engine = providers.Singleton(ScoreEngine)

    candidate_query = providers.Singleton(CandidateQuery, engine=score_engine)

    request_book = providers.Singleton(RequestBook)

    profile_loader = providers.Singleton(ProfileLoader)
    viewer_loader = providers.Singleton(ViewerLoader)
    writer = providers.Singleton(OutputWriter)

    pipeline = providers.Factory(
        MatchPipeline,
        query=candidate_query,
        profile_loader=profile_loader,
        viewer_loader=viewer_loader,
        writer=writer,
    )


def create_container(*, settings: dict | None = None) -> MatchContainer:
    """Instantiate container with optional overrides."""

    container = MatchContainer()

    if not settings:
        return container

    container.config.from_dict(settings)

    scoring_settings = settings.get("scoring", {}) if isinstance(settings, dict) else {}
    if scoring_settings:
        scoring_config = ScoringConfig(**scoring_settings)
        container.score_engine.override(
            providers.Singleton(ScoreEngine, config=scoring_config)
        )

    return container
