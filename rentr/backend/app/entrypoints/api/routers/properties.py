# app/entrypoints/api/routers/properties.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import Caller, require_api_key, require_caller, require_staff
from ....adapters.repos.properties import PropertyRepository
from ....db import get_session
from ....domain.errors import NotFoundError
from ....schemas import PropertyCreate, PropertyOut

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["properties"], dependencies=[Depends(require_api_key)])


@router.post("/properties", response_model=PropertyOut, status_code=201)
async def create_property(
    body: PropertyCreate,
    caller: Caller = Depends(require_caller),
    session: AsyncSession = Depends(get_session),
) -> PropertyOut:
    require_staff(caller)

    payload = body.model_dump()
    if payload.get("landlord_id") is None and caller.role == "landlord":
        payload["landlord_id"] = caller.user_id

    prop = await PropertyRepository(session).create(payload)
    await session.commit()
    log.info("created property=%s city=%s rent=%s", prop.id, prop.city, prop.rent)
    return PropertyOut.model_validate(prop)


@router.get("/properties", response_model=list[PropertyOut])
async def list_properties(
    available: bool | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> list[PropertyOut]:
    rows = await PropertyRepository(session).list_properties(available=available)
    return [PropertyOut.model_validate(r) for r in rows]


@router.get("/properties/{property_id}", response_model=PropertyOut)
async def get_property(
    property_id: int,
    session: AsyncSession = Depends(get_session),
) -> PropertyOut:
    prop = await PropertyRepository(session).get(property_id)
    if prop is None:
        raise NotFoundError(f"Property {property_id} not found")
    return PropertyOut.model_validate(prop)
