"""Typer CLI entrypoint for roommate matching."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .logging import configure_logging
from .schemas import SORT_KEYS, QuerySpec
from .schemas.config import load_config

app = typer.Typer(help="Roommate compatibility scoring CLI.")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}", param_hint="config") from exc


@app.command()
def rank(
    candidates: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate profiles JSONL path."),
    viewer: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Viewer profile JSON path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    query: str = typer.Option("", help="Free-text search over name, program and bio."),
    min_age: Optional[int] = typer.Option(None, help="Minimum candidate age (inclusive)."),
    max_age: Optional[int] = typer.Option(None, help="Maximum candidate age (inclusive)."),
    lease: str = typer.Option("any", help="Lease duration filter, or 'any'."),
    sort: Optional[str] = typer.Option(None, help=f"Sort key: {', '.join(SORT_KEYS)}."),
    show_score: Optional[bool] = typer.Option(None, "--show-score/--hide-score", help="Include match scores."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Filter, score and order candidates for a viewer."""
    settings = _load_settings(config)

    configure_logging(log_level)

    container = create_container(settings=settings)
    sort_key = sort or container.config.query.sort() or "default"
    if sort_key not in SORT_KEYS:
        raise typer.BadParameter(f"Unknown sort key {sort_key!r}", param_hint="sort")
    include_score = show_score if show_score is not None else bool(container.config.query.include_score())

    spec = QuerySpec.from_inputs(
        text=query,
        min_age=min_age,
        max_age=max_age,
        lease_duration=lease,
        sort=sort_key,
        include_score=include_score,
    )
    pipeline = container.pipeline()
    try:
        results = pipeline.run(
            candidates_path=candidates,
            viewer_path=viewer,
            output_path=output,
            spec=spec,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="viewer") from exc
    typer.echo(f"Ranked {len(results)} candidates. Results saved to {output}.")


@app.command()
def score(
    viewer: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Viewer profile JSON path."),
    candidate: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate profile JSON path."),
    explain: bool = typer.Option(False, "--explain", help="Print the per-rule penalty breakdown."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Print the compatibility of one candidate for the viewer."""
    settings = _load_settings(config)

    configure_logging(log_level)

    container = create_container(settings=settings)
    loader = container.viewer_loader()
    try:
        viewer_profile = loader.load(viewer)
        candidate_profile = loader.load(candidate)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    breakdown = container.score_engine().breakdown(viewer_profile, candidate_profile)
    if explain:
        typer.echo(json.dumps(asdict(breakdown), ensure_ascii=False, indent=2))
    else:
        typer.echo(str(breakdown.score))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
