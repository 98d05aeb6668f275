# app/domain/analysis.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .types import DIMENSION_ORDER, Dimension, ScoreModel

# (lower bound, rating), checked top-down
_BANDS: tuple[tuple[int, str], ...] = (
    (90, "excellent"),
    (70, "good"),
    (50, "fair"),
)
_NEEDS_IMPROVEMENT = "needs-improvement"
_NOT_AVAILABLE = "n/a"

_NOTES: dict[str, str] = {
    "excellent": "{label} is a strong point of your profile.",
    "good": "{label} meets most landlords' expectations.",
    "fair": "{label} is acceptable but has room to improve.",
    _NEEDS_IMPROVEMENT: "{label} is likely to concern landlords.",
    _NOT_AVAILABLE: "{label} has not been verified yet.",
}


def rate(value: int | None) -> str:
    if value is None:
        return _NOT_AVAILABLE
    for floor, rating in _BANDS:
        if value >= floor:
            return rating
    return _NEEDS_IMPROVEMENT


def _label(dim: Dimension) -> str:
    return dim.value.replace("_", " ").capitalize()


@dataclass(frozen=True)
class DimensionRating:
    score: int | None
    rating: str
    notes: str


@dataclass(frozen=True)
class ScoreAnalysis:
    overall: int
    status: str
    breakdown: dict[Dimension, DimensionRating] = field(default_factory=dict)
    improvement_areas: tuple[Dimension, ...] = ()
    last_updated: datetime | None = None


def analyze_score(score: ScoreModel) -> ScoreAnalysis:
    breakdown: dict[Dimension, DimensionRating] = {}
    for dim in DIMENSION_ORDER:
        value = score.sub_scores.get(dim)
        rating = rate(value)
        breakdown[dim] = DimensionRating(
            score=value,
            rating=rating,
            notes=_NOTES[rating].format(label=_label(dim)),
        )

    return ScoreAnalysis(
        overall=score.overall,
        status=rate(score.overall),
        breakdown=breakdown,
        improvement_areas=tuple(
            dim for dim in DIMENSION_ORDER if breakdown[dim].rating in ("fair", _NEEDS_IMPROVEMENT)
        ),
        last_updated=score.scored_at,
    )
