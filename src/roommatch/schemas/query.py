from __future__ import annotations

import re
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict

SortKey = Literal["default", "match", "name", "age-asc", "age-desc", "hobbies"]

SORT_KEYS: tuple[str, ...] = get_args(SortKey)

ANY = "any"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class QuerySpec(BaseModel):
    """Active search, filter and sort parameters for one query."""

    text: str = ""
    min_age: int | None = None
    max_age: int | None = None
    lease_duration: str = ANY
    sort: SortKey = "default"
    include_score: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def needs_scores(self) -> bool:
        return self.include_score or self.sort == "match"

    @classmethod
    def from_inputs(
        cls,
        *,
        text: str = "",
        min_age: str | int | None = None,
        max_age: str | int | None = None,
        lease_duration: str | None = None,
        sort: str = "default",
        include_score: bool = False,
    ) -> "QuerySpec":
        """Build a spec from raw form input; blank or non-numeric ages are unset."""
        return cls(
            text=text or "",
            min_age=_parse_age(min_age),
            max_age=_parse_age(max_age),
            lease_duration=lease_duration or ANY,
            sort=sort,
            include_score=include_score,
        )


def _parse_age(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    # Leading digits are kept: "22abc" and "22.5" give 22.
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None
