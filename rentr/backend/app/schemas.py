from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .domain.analysis import ScoreAnalysis
from .domain.scoring import credit_score_to_sub_score, income_ratio_to_sub_score
from .domain.types import (
    DIMENSION_ORDER,
    ActionableItem,
    Dimension,
    ImprovementPlan,
    PropertyMatch,
    RecommendationItem,
    ScoreModel,
)

SubScore = Annotated[int | None, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----- Tenant scores -----

class SubScoresIn(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    payment_history: SubScore = None
    credit_score: SubScore = None
    income_stability: SubScore = None
    # legacy name for income_stability
    income_to_rent_ratio: SubScore = None
    rental_history: SubScore = None
    employment_stability: SubScore = None
    identity_verification: SubScore = None
    references: SubScore = None
    application_quality: SubScore = None
    promptness: SubScore = None
    eviction_history: SubScore = None
    criminal_check: SubScore = None

    def changes(self) -> dict[Dimension, int | None]:
        """Only the sub-scores the client sent; an explicit null is kept."""
        sent = self.model_fields_set
        out = {dim: getattr(self, dim.value) for dim in DIMENSION_ORDER if dim.value in sent}
        if Dimension.income_stability not in out and "income_to_rent_ratio" in sent:
            out[Dimension.income_stability] = self.income_to_rent_ratio
        return out


class TenantScoreCreate(SubScoresIn):
    tenant_id: int
    landlord_id: int | None = None
    property_id: int | None = None
    application_id: int | None = None
    scoring_method: str = "standard"

    # raw signals, used when the matching sub-score is not given
    raw_credit_score: int | None = Field(default=None, ge=0, description="Bureau score, 300-900")
    monthly_income: int | None = Field(default=None, gt=0, description="Cents")
    monthly_rent: int | None = Field(default=None, gt=0, description="Cents")

    def changes(self) -> dict[Dimension, int | None]:
        out = super().changes()
        if out.get(Dimension.credit_score) is None and self.raw_credit_score is not None:
            out[Dimension.credit_score] = credit_score_to_sub_score(self.raw_credit_score)
        if out.get(Dimension.income_stability) is None:
            from_ratio = income_ratio_to_sub_score(self.monthly_income, self.monthly_rent)
            if from_ratio is not None:
                out[Dimension.income_stability] = from_ratio
        return out


class TenantScoreUpdate(SubScoresIn):
    pass


class TenantScoreOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    tenant_id: int
    landlord_id: int | None = None
    property_id: int | None = None
    application_id: int | None = None

    overall_score: int

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

    scoring_method: str
    active: bool
    scored_at: datetime
    created_at: datetime
    updated_at: datetime


class ScoreDataOut(CamelModel):
    """Overall plus every sub-score, with missing ones shown at neutral."""

    overall: int
    payment_history: int
    credit_score: int
    income_stability: int
    rental_history: int
    employment_stability: int
    identity_verification: int
    references: int
    application_quality: int
    promptness: int
    eviction_history: int
    criminal_check: int

    @classmethod
    def from_domain(cls, score: ScoreModel, neutral: int) -> "ScoreDataOut":
        return cls(
            overall=score.overall,
            **{dim.value: score.sub_scores.effective(dim, neutral) for dim in DIMENSION_ORDER},
        )


# ----- Property matches -----

class MatchBreakdownOut(CamelModel):
    price_match: int = Field(..., ge=0, le=100)
    location_match: int = Field(..., ge=0, le=100)
    amenities_match: int = Field(..., ge=0, le=100)
    size_match: int = Field(..., ge=0, le=100)
    availability_match: int = Field(..., ge=0, le=100)


class PropertyMatchOut(CamelModel):
    property_id: int
    match_percentage: int = Field(..., ge=0, le=100)
    match_breakdown: MatchBreakdownOut
    explanation: list[str]

    @classmethod
    def from_domain(cls, m: PropertyMatch) -> "PropertyMatchOut":
        b = m.breakdown
        return cls(
            property_id=m.property_id,
            match_percentage=m.match_percentage,
            match_breakdown=MatchBreakdownOut(
                price_match=b.price_match,
                location_match=b.location_match,
                amenities_match=b.amenities_match,
                size_match=b.size_match,
                availability_match=b.availability_match,
            ),
            explanation=list(m.explanation),
        )


class PropertyMatchesOut(BaseModel):
    matches: list[PropertyMatchOut]
    message: str


# ----- Score improvements -----

class RecommendationItemOut(CamelModel):
    type: Literal["high", "medium", "low"]
    dimension: str
    message: str
    action_items: list[str]
    impact: int

    @classmethod
    def from_domain(cls, r: RecommendationItem) -> "RecommendationItemOut":
        return cls(
            type=r.type.value,
            dimension=r.dimension.json_key,
            message=r.message,
            action_items=list(r.action_items),
            impact=r.impact,
        )


class ImprovementPlanOut(CamelModel):
    title: str
    description: str
    timeframe: str
    difficulty: str
    steps: list[str]
    potential_increase: int

    @classmethod
    def from_domain(cls, p: ImprovementPlan) -> "ImprovementPlanOut":
        return cls(
            title=p.title,
            description=p.description,
            timeframe=p.timeframe,
            difficulty=p.difficulty,
            steps=list(p.steps),
            potential_increase=p.potential_increase,
        )


class ActionableItemOut(CamelModel):
    name: str
    status: Literal["complete", "incomplete"]
    priority: Literal["high", "medium", "low"]
    impact: int
    description: str
    estimated_time: str
    link: str

    @classmethod
    def from_domain(cls, a: ActionableItem) -> "ActionableItemOut":
        return cls(
            name=a.name,
            status=a.status.value,
            priority=a.priority.value,
            impact=a.impact,
            description=a.description,
            estimated_time=a.estimated_time,
            link=a.link,
        )


class ScoreImprovementsOut(CamelModel):
    score: ScoreDataOut
    recommendations: list[RecommendationItemOut]
    improvement_plans: list[ImprovementPlanOut]
    actionable_items: list[ActionableItemOut]


# ----- Score analysis -----

class DimensionRatingOut(BaseModel):
    score: int | None = None
    rating: str
    notes: str


class ScoreAnalysisOut(CamelModel):
    overall: int
    status: str
    breakdown: dict[str, DimensionRatingOut]
    improvement_areas: list[str]
    last_updated: datetime | None = None

    @classmethod
    def from_domain(cls, a: ScoreAnalysis) -> "ScoreAnalysisOut":
        return cls(
            overall=a.overall,
            status=a.status,
            breakdown={
                dim.json_key: DimensionRatingOut(score=r.score, rating=r.rating, notes=r.notes)
                for dim, r in a.breakdown.items()
            },
            improvement_areas=[dim.json_key for dim in a.improvement_areas],
            last_updated=a.last_updated,
        )


# ----- Properties -----

class PropertyCreate(CamelModel):
    landlord_id: int | None = None
    title: str = Field(..., min_length=1)
    description: str | None = None
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    rent: int = Field(..., ge=0, description="Monthly rent in cents")
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(1, ge=0)
    square_feet: int | None = Field(default=None, gt=0)
    amenities: list[str] = Field(default_factory=list)
    available: bool = True
    available_date: date | None = None


class PropertyOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    landlord_id: int | None = None
    title: str
    description: str | None = None
    address: str
    city: str
    state: str
    zip_code: str
    rent: int
    bedrooms: int
    bathrooms: int
    square_feet: int | None = None
    amenities: list[str]
    available: bool
    available_date: date | None = None
    created_at: datetime
