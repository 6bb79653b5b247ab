"""Batch matching pipeline assembly and execution."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import pendulum
import structlog
from pydantic import ValidationError

from .core import CandidateQuery
from .schemas import Profile, QuerySpec
from . import __version__


class ProfileLoadError(ValueError):
    """Raised when profile loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Profile]):
        super().__init__("Profile loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Profile loading failed: {self.errors}"


class ProfileLoader:
    """Load candidate profile documents from JSON lines."""

    def load(self, path: Path) -> list[Profile]:
        profiles: list[Profile] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                payload = record.get("payload", record)
                try:
                    profiles.append(Profile.model_validate(payload))
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc}")
        if errors:
            raise ProfileLoadError(errors, profiles)
        return profiles

    @staticmethod
    def eligible(profiles: Iterable[Profile], exclude_id: str | None = None) -> list[Profile]:
        """Keep complete profiles other than the viewer's own."""
        return [
            profile
            for profile in profiles
            if profile.id and profile.id != exclude_id and profile.is_complete()
        ]


class ViewerLoader:
    """Load the viewer's own profile, filling gaps from the fallback profile."""

    def load(self, path: Path) -> Profile:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid profile JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("Profile JSON must be an object")
        return Profile.with_defaults(data.get("payload", data))


class OutputWriter:
    """Persist match results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class MatchPipeline:
    """End-to-end ranking of a candidate file for one viewer."""

    def __init__(
        self,
        *,
        query: CandidateQuery,
        profile_loader: ProfileLoader | None = None,
        viewer_loader: ViewerLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._query = query
        self._profiles = profile_loader or ProfileLoader()
        self._viewers = viewer_loader or ViewerLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        candidates_path: Path,
        viewer_path: Path,
        output_path: Path,
        spec: QuerySpec,
    ) -> list[dict]:
        viewer = self._viewers.load(viewer_path)
        load_errors: list[str] = []
        try:
            loaded = self._profiles.load(candidates_path)
        except ProfileLoadError as exc:
            loaded = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("profiles.partial_load", errors=exc.errors)

        candidates = self._profiles.eligible(loaded, exclude_id=viewer.id)
        skipped = len(loaded) - len(candidates)
        if skipped:
            self._logger.info("profiles.ineligible", skipped=skipped)

        entries = self._query.run(candidates, viewer, spec)
        results = [entry.to_summary() for entry in entries]
        for summary in results:
            self._logger.info(
                "match.result",
                viewer_id=viewer.id,
                candidate_id=summary["id"],
                score=summary["score"],
                tier=summary["tier"],
            )

        metadata = {
            "viewer_id": viewer.id,
            "candidate_count": len(candidates),
            "result_count": len(results),
            "query": spec.model_dump(mode="json"),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})
        return results
