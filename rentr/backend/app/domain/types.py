# app/domain/types.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .errors import ValidationError

NEUTRAL_SUB_SCORE = 50


class Dimension(str, Enum):
    """Tenant sub-score dimensions, in their fixed order."""

    payment_history = "payment_history"
    credit_score = "credit_score"
    income_stability = "income_stability"
    rental_history = "rental_history"
    employment_stability = "employment_stability"
    identity_verification = "identity_verification"
    references = "references"
    application_quality = "application_quality"
    promptness = "promptness"
    eviction_history = "eviction_history"
    criminal_check = "criminal_check"

    @property
    def json_key(self) -> str:
        head, *rest = self.value.split("_")
        return head + "".join(p.capitalize() for p in rest)


DIMENSION_ORDER: tuple[Dimension, ...] = tuple(Dimension)


class MatchDimension(str, Enum):
    price = "price"
    location = "location"
    amenities = "amenities"
    size = "size"
    availability = "availability"


class Priority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


PRIORITY_RANK: dict[Priority, int] = {Priority.high: 0, Priority.medium: 1, Priority.low: 2}


class ItemStatus(str, Enum):
    complete = "complete"
    incomplete = "incomplete"


@dataclass(frozen=True)
class SubScores:
    payment_history: int | None = None
    credit_score: int | None = None
    income_stability: int | None = None
    rental_history: int | None = None
    employment_stability: int | None = None
    identity_verification: int | None = None
    references: int | None = None
    application_quality: int | None = None
    promptness: int | None = None
    eviction_history: int | None = None
    criminal_check: int | None = None

    def __post_init__(self) -> None:
        for dim in DIMENSION_ORDER:
            v = getattr(self, dim.value)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValidationError(f"{dim.json_key} must be an integer, got {v!r}")
            if not 0 <= v <= 100:
                raise ValidationError(f"{dim.json_key} must be within 0-100, got {v}")

    @classmethod
    def uniform(cls, value: int) -> "SubScores":
        return cls(**{dim.value: value for dim in DIMENSION_ORDER})

    def get(self, dim: Dimension) -> int | None:
        return getattr(self, dim.value)

    def effective(self, dim: Dimension, neutral: int = NEUTRAL_SUB_SCORE) -> int:
        v = self.get(dim)
        return neutral if v is None else v

    def merged(self, changes: dict[Dimension, int | None]) -> "SubScores":
        """Overlay `changes`; an explicit None resets the sub-score to unverified."""
        return dataclasses.replace(self, **{dim.value: v for dim, v in changes.items()})


@dataclass(frozen=True)
class ScoreModel:
    """
    A tenant's sub-scores plus the derived overall score.

    Build it through app.domain.scoring.derive_score_model so that `overall`
    always comes from the weight table.
    """

    tenant_id: int
    sub_scores: SubScores
    overall: int
    id: int | None = None
    active: bool = True
    scoring_method: str = "standard"
    scored_at: datetime | None = None


@dataclass(frozen=True)
class PropertySnapshot:
    id: int
    rent: int  # monthly, minor currency units
    city: str
    region: str
    amenities: frozenset[str] = frozenset()
    bedrooms: int | None = None
    square_feet: int | None = None
    available_date: date | None = None  # None = available now


@dataclass(frozen=True)
class TenantPreferences:
    budget: int | None = None  # monthly, minor currency units
    city: str | None = None
    region: str | None = None
    amenities: frozenset[str] = frozenset()
    min_bedrooms: int | None = None
    min_square_feet: int | None = None
    move_in: date | None = None

    def __post_init__(self) -> None:
        if self.budget is not None and self.budget <= 0:
            raise ValidationError(f"budget must be positive, got {self.budget}")
        if self.min_bedrooms is not None and self.min_bedrooms < 0:
            raise ValidationError(f"minBedrooms must be >= 0, got {self.min_bedrooms}")
        if self.min_square_feet is not None and self.min_square_feet <= 0:
            raise ValidationError(f"minSquareFeet must be positive, got {self.min_square_feet}")


@dataclass(frozen=True)
class MatchBreakdown:
    price_match: int
    location_match: int
    amenities_match: int
    size_match: int
    availability_match: int

    def get(self, dim: MatchDimension) -> int:
        return getattr(self, f"{dim.value}_match")


@dataclass(frozen=True)
class PropertyMatch:
    property_id: int
    match_percentage: int
    breakdown: MatchBreakdown
    explanation: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationItem:
    type: Priority
    dimension: Dimension
    message: str
    action_items: tuple[str, ...]
    impact: int


@dataclass(frozen=True)
class ImprovementPlan:
    title: str
    description: str
    timeframe: str
    difficulty: str
    steps: tuple[str, ...]
    potential_increase: int


@dataclass(frozen=True)
class ActionableItem:
    name: str
    status: ItemStatus
    priority: Priority
    impact: int
    description: str
    estimated_time: str
    link: str


@dataclass(frozen=True)
class ScoreImprovements:
    recommendations: list[RecommendationItem] = field(default_factory=list)
    improvement_plans: list[ImprovementPlan] = field(default_factory=list)
    actionable_items: list[ActionableItem] = field(default_factory=list)
