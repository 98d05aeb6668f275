# app/entrypoints/api/routers/tenant_scores.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import (
    Caller,
    authorize_tenant_read,
    get_scoring_service,
    require_api_key,
    require_caller,
    require_staff,
)
from ....config import settings
from ....db import get_session
from ....domain.errors import ValidationError
from ....domain.parsing import parse_tags
from ....domain.types import SubScores, TenantPreferences
from ....schemas import (
    PropertyMatchesOut,
    PropertyMatchOut,
    TenantScoreCreate,
    TenantScoreOut,
    TenantScoreUpdate,
)
from ....service_layer.scoring import ScoringService

router = APIRouter(prefix="/api", tags=["tenant-scores"], dependencies=[Depends(require_api_key)])


@router.get("/tenant-scores/{tenant_id}/property-matches", response_model=PropertyMatchesOut)
async def property_matches(
    tenant_id: int,
    budget: int | None = Query(None, description="Monthly budget in cents"),
    city: str | None = Query(None),
    region: str | None = Query(None),
    amenities: str | None = Query(None, description="Comma-separated amenity tags"),
    min_bedrooms: int | None = Query(None, alias="minBedrooms"),
    min_square_feet: int | None = Query(None, alias="minSquareFeet"),
    move_in: date | None = Query(None, alias="moveIn"),
    limit: int = Query(settings.MATCH_LIMIT_DEFAULT, ge=1, le=settings.MATCH_LIMIT_MAX),
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> PropertyMatchesOut:
    authorize_tenant_read(caller, tenant_id)

    prefs = TenantPreferences(
        budget=budget,
        city=(city or "").strip() or None,
        region=(region or "").strip() or None,
        amenities=parse_tags(amenities),
        min_bedrooms=min_bedrooms,
        min_square_feet=min_square_feet,
        move_in=move_in,
    )
    result = await scoring.property_matches(session, tenant_id, prefs, limit=limit)
    return PropertyMatchesOut(
        matches=[PropertyMatchOut.from_domain(m) for m in result.matches],
        message=result.message,
    )


@router.post("/tenant-scores/me/default", response_model=TenantScoreOut)
async def create_default_score(
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> TenantScoreOut:
    if caller.role != "tenant":
        raise ValidationError("Only tenants have tenant scores")

    row = await scoring.ensure_default_score(session, caller.user_id)
    await session.commit()
    return TenantScoreOut.model_validate(row)


@router.get("/tenant-scores/me", response_model=TenantScoreOut)
async def my_score(
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> TenantScoreOut:
    row = await scoring.get_active_row(session, caller.user_id)
    return TenantScoreOut.model_validate(row)


@router.get("/tenant-scores", response_model=list[TenantScoreOut])
async def score_history(
    tenant_id: int = Query(..., alias="tenantId"),
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> list[TenantScoreOut]:
    authorize_tenant_read(caller, tenant_id)
    rows = await scoring.list_scores(session, tenant_id)
    return [TenantScoreOut.model_validate(r) for r in rows]


@router.get("/tenant-score/{score_id}", response_model=TenantScoreOut)
async def get_score(
    score_id: int,
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> TenantScoreOut:
    row = await scoring.get_score_row(session, score_id)
    authorize_tenant_read(caller, row.tenant_id)
    return TenantScoreOut.model_validate(row)


@router.post("/tenant-score", response_model=TenantScoreOut, status_code=201)
async def record_score(
    body: TenantScoreCreate,
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> TenantScoreOut:
    require_staff(caller)

    row = await scoring.record_score(
        session,
        body.tenant_id,
        SubScores().merged(body.changes()),
        scoring_method=body.scoring_method,
        landlord_id=body.landlord_id,
        property_id=body.property_id,
        application_id=body.application_id,
    )
    await session.commit()
    return TenantScoreOut.model_validate(row)


@router.patch("/tenant-score/{score_id}", response_model=TenantScoreOut)
async def correct_score(
    score_id: int,
    body: TenantScoreUpdate,
    caller: Caller = Depends(require_caller),
    scoring: ScoringService = Depends(get_scoring_service),
    session: AsyncSession = Depends(get_session),
) -> TenantScoreOut:
    require_staff(caller)

    row = await scoring.correct_score(session, score_id, body.changes())
    await session.commit()
    return TenantScoreOut.model_validate(row)
