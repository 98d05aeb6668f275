# app/domain/policies.py
from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ValidationError
from .types import DIMENSION_ORDER, NEUTRAL_SUB_SCORE, Dimension, MatchDimension, Priority

STANDARD_METHOD = "standard"
DEFAULT_METHOD = "default"
# both use ScoringPolicy.score_weights
BASE_METHODS: tuple[str, ...] = (STANDARD_METHOD, DEFAULT_METHOD)


def _default_score_weights() -> dict[Dimension, int]:
    # percent; must sum to 100
    return {
        Dimension.payment_history: 20,
        Dimension.credit_score: 15,
        Dimension.income_stability: 15,
        Dimension.rental_history: 10,
        Dimension.employment_stability: 10,
        Dimension.identity_verification: 5,
        Dimension.references: 5,
        Dimension.application_quality: 5,
        Dimension.promptness: 5,
        Dimension.eviction_history: 5,
        Dimension.criminal_check: 5,
    }


def _default_method_weights() -> dict[str, dict[Dimension, int]]:
    # alternate weightings selectable per score record; percent, must sum to 100
    zero = {dim: 0 for dim in DIMENSION_ORDER}
    return {
        "comprehensive": {
            **zero,
            Dimension.credit_score: 25,
            Dimension.income_stability: 20,
            Dimension.rental_history: 15,
            Dimension.employment_stability: 10,
            Dimension.identity_verification: 5,
            Dimension.references: 10,
            Dimension.application_quality: 5,
            Dimension.payment_history: 5,
            Dimension.promptness: 3,
            Dimension.eviction_history: 2,
        },
        "basic": {
            **zero,
            Dimension.credit_score: 40,
            Dimension.income_stability: 30,
            Dimension.rental_history: 20,
            Dimension.employment_stability: 10,
        },
        "credit-only": {**zero, Dimension.credit_score: 100},
    }


def _default_recommendation_thresholds() -> dict[Dimension, int]:
    out = {dim: 70 for dim in DIMENSION_ORDER}
    out[Dimension.identity_verification] = 90
    out[Dimension.eviction_history] = 80
    out[Dimension.criminal_check] = 80
    return out


def _default_match_weights() -> dict[MatchDimension, int]:
    # percent; must sum to 100
    return {
        MatchDimension.price: 30,
        MatchDimension.location: 25,
        MatchDimension.amenities: 20,
        MatchDimension.size: 15,
        MatchDimension.availability: 10,
    }


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Every weight and threshold the scoring engines use.

    Weights are integer percentages so that sums and rounding stay exact.
    """

    # weights for the "standard" and "default" methods
    score_weights: dict[Dimension, int] = field(default_factory=_default_score_weights)
    method_weights: dict[str, dict[Dimension, int]] = field(default_factory=_default_method_weights)
    neutral_sub_score: int = NEUTRAL_SUB_SCORE

    # recommendations
    recommendation_thresholds: dict[Dimension, int] = field(default_factory=_default_recommendation_thresholds)
    high_priority_below: int = 40
    medium_priority_below: int = 60

    # property matching
    match_weights: dict[MatchDimension, int] = field(default_factory=_default_match_weights)
    good_match_threshold: int = 60
    no_budget_score: int = 70
    no_location_preference_score: int = 70
    same_region_score: int = 50
    max_overage_pct: int = 50
    bedroom_shortfall_penalty: int = 35
    sqft_shortfall_penalty: int = 10  # per started 100 sqft
    weekly_delay_penalty: int = 10

    def __post_init__(self) -> None:
        _check_weights("score_weights", self.score_weights, DIMENSION_ORDER)
        for method, weights in self.method_weights.items():
            if method in BASE_METHODS:
                raise ValidationError(f"method_weights may not redefine {method!r}")
            _check_weights(f"method_weights[{method!r}]", weights, DIMENSION_ORDER)
        _check_weights("match_weights", self.match_weights, tuple(MatchDimension))
        if self.max_overage_pct <= 0:
            raise ValidationError("max_overage_pct must be positive")
        missing = [d.value for d in DIMENSION_ORDER if d not in self.recommendation_thresholds]
        if missing:
            raise ValidationError(f"recommendation_thresholds missing {missing}")

    @property
    def scoring_methods(self) -> tuple[str, ...]:
        return BASE_METHODS + tuple(self.method_weights)

    def weights_for(self, method: str = STANDARD_METHOD) -> dict[Dimension, int]:
        if method in BASE_METHODS:
            return self.score_weights
        try:
            return self.method_weights[method]
        except KeyError:
            raise ValidationError(
                f"unknown scoring method {method!r}, expected one of {list(self.scoring_methods)}"
            ) from None

    def weight(self, dim: Dimension, method: str = STANDARD_METHOD) -> int:
        return self.weights_for(method)[dim]

    def recommendation_threshold(self, dim: Dimension) -> int:
        return self.recommendation_thresholds[dim]

    def priority_for(self, value: int) -> Priority:
        if value < self.high_priority_below:
            return Priority.high
        if value < self.medium_priority_below:
            return Priority.medium
        return Priority.low


def _check_weights(name: str, weights: dict, keys: tuple) -> None:
    missing = [k.value for k in keys if k not in weights]
    if missing:
        raise ValidationError(f"{name} missing {missing}")
    if any(w < 0 for w in weights.values()):
        raise ValidationError(f"{name} must be non-negative")
    total = sum(weights[k] for k in keys)
    if total != 100:
        raise ValidationError(f"{name} must sum to 100 (percent), got {total}")


DEFAULT_POLICY = ScoringPolicy()
