# app/domain/scoring.py
from __future__ import annotations

from datetime import datetime

from .errors import ValidationError
from .parsing import div_round_half_up
from .policies import DEFAULT_METHOD, DEFAULT_POLICY, STANDARD_METHOD, ScoringPolicy
from .types import DIMENSION_ORDER, ScoreModel, SubScores

# Canadian bureau range
CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 900

# (income / rent at or above, sub-score), checked top-down; ratios in tenths
_INCOME_RATIO_BANDS: tuple[tuple[int, int], ...] = (
    (35, 100),
    (30, 90),
    (25, 75),
    (20, 60),
    (15, 40),
)


def credit_score_to_sub_score(credit_score: int) -> int:
    """Map a bureau credit score (300-900, clamped) onto 0-100."""
    clamped = max(CREDIT_SCORE_MIN, min(int(credit_score), CREDIT_SCORE_MAX))
    return div_round_half_up(100 * (clamped - CREDIT_SCORE_MIN), CREDIT_SCORE_MAX - CREDIT_SCORE_MIN)


def income_ratio_to_sub_score(monthly_income: int | None, monthly_rent: int | None) -> int | None:
    """
    Income-stability sub-score from monthly income vs rent (same currency units).

    3x rent is the usual landlord bar; below 1.5x the score scales as ratio * 25.
    Returns None when either side is missing.
    """
    if not monthly_income or not monthly_rent or monthly_income <= 0 or monthly_rent <= 0:
        return None
    for tenths, score in _INCOME_RATIO_BANDS:
        if 10 * monthly_income >= tenths * monthly_rent:
            return score
    return div_round_half_up(25 * monthly_income, monthly_rent)


def compute_overall(
    sub_scores: SubScores,
    policy: ScoringPolicy = DEFAULT_POLICY,
    method: str = STANDARD_METHOD,
) -> int:
    """
    Weighted aggregate of the sub-scores, 0-100, under the weights of `method`.

    Missing sub-scores count as the neutral midpoint with their normal weight,
    so a partial profile is pulled toward 50 rather than rejected.
    """
    weights = policy.weights_for(method)
    total = 0
    for dim in DIMENSION_ORDER:
        total += weights[dim] * sub_scores.effective(dim, policy.neutral_sub_score)
    # weights are percent: total / 100
    return div_round_half_up(total, 100)


def derive_score_model(
    tenant_id: int,
    sub_scores: SubScores,
    *,
    policy: ScoringPolicy = DEFAULT_POLICY,
    id: int | None = None,
    active: bool = True,
    scoring_method: str = STANDARD_METHOD,
    scored_at: datetime | None = None,
) -> ScoreModel:
    if tenant_id is None:
        raise ValidationError("tenant_id is required")
    return ScoreModel(
        tenant_id=tenant_id,
        sub_scores=sub_scores,
        overall=compute_overall(sub_scores, policy, scoring_method),
        id=id,
        active=active,
        scoring_method=scoring_method,
        scored_at=scored_at,
    )


def default_score_model(tenant_id: int, *, policy: ScoringPolicy = DEFAULT_POLICY) -> ScoreModel:
    """Baseline record for a tenant with no score yet: everything neutral."""
    return derive_score_model(
        tenant_id,
        SubScores.uniform(policy.neutral_sub_score),
        policy=policy,
        scoring_method=DEFAULT_METHOD,
    )
