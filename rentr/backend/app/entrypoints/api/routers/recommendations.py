# app/entrypoints/api/routers/recommendations.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import Caller, authorize_tenant_read, get_scoring_service, require_api_key, require_caller
from ....db import get_session
from ....domain.errors import ValidationError
from ....schemas import (
    ActionableItemOut,
    ImprovementPlanOut,
    RecommendationItemOut,
    ScoreAnalysisOut,
    ScoreDataOut,
    ScoreImprovementsOut,
)
from ....service_layer.scoring import ScoringService

router = APIRouter(prefix="/api", tags=["recommendations"], dependencies=[Depends(require_api_key)])


@router.get("/score-improvement-recommendations/{user_id}", response_model=ScoreImprovementsOut)
async def score_improvements(
    user_id: int,
    create_default: bool = Query(False, alias="createDefault"),
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> ScoreImprovementsOut:
    authorize_tenant_read(caller, user_id)
    if create_default and (caller.role != "tenant" or caller.user_id != user_id):
        raise ValidationError("Only tenants can create their own default score")

    score, improvements = await scoring.score_improvements(session, user_id, create_default=create_default)
    if create_default:
        await session.commit()

    return ScoreImprovementsOut(
        score=ScoreDataOut.from_domain(score, scoring.policy.neutral_sub_score),
        recommendations=[RecommendationItemOut.from_domain(r) for r in improvements.recommendations],
        improvement_plans=[ImprovementPlanOut.from_domain(p) for p in improvements.improvement_plans],
        actionable_items=[ActionableItemOut.from_domain(a) for a in improvements.actionable_items],
    )


@router.get("/tenant-score-analysis/{user_id}", response_model=ScoreAnalysisOut)
async def score_analysis(
    user_id: int,
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> ScoreAnalysisOut:
    authorize_tenant_read(caller, user_id)
    return ScoreAnalysisOut.from_domain(await scoring.score_analysis(session, user_id))
