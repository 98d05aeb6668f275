from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.repos.properties import PropertyRepository
from app.domain.types import SubScores
from app.service_layer.scoring import ScoringService

log = logging.getLogger(__name__)

DEMO_LANDLORD_ID = 1

DEMO_PROPERTIES: list[dict[str, Any]] = [
    {
        "title": "Bright 2BR near King West",
        "address": "120 Portland St",
        "city": "Toronto",
        "state": "ON",
        "zip_code": "M5V 2N2",
        "rent": 200000,
        "bedrooms": 2,
        "bathrooms": 1,
        "square_feet": 850,
        "amenities": ["parking", "laundry", "dishwasher"],
        "available_date": date(2024, 5, 1),
    },
    {
        "title": "Annex 1BR with balcony",
        "address": "45 Bernard Ave",
        "city": "Toronto",
        "state": "ON",
        "zip_code": "M5R 1R3",
        "rent": 320000,
        "bedrooms": 1,
        "bathrooms": 1,
        "square_feet": 600,
        "amenities": ["balcony"],
        "available_date": date(2024, 7, 15),
    },
    {
        "title": "Family home in Mississauga",
        "address": "3300 Hurontario St",
        "city": "Mississauga",
        "state": "ON",
        "zip_code": "L5B 4A6",
        "rent": 260000,
        "bedrooms": 3,
        "bathrooms": 2,
        "square_feet": 1400,
        "amenities": ["parking", "yard", "laundry"],
        "available_date": None,
    },
    {
        "title": "Downtown Montreal studio",
        "address": "1200 Rue Sainte-Catherine O",
        "city": "Montreal",
        "state": "QC",
        "zip_code": "H3B 1K1",
        "rent": 140000,
        "bedrooms": 0,
        "bathrooms": 1,
        "square_feet": 420,
        "amenities": ["gym"],
        "available_date": None,
    },
]

# a tenant with a solid payment record but little verification
DEMO_SUB_SCORES = SubScores(
    payment_history=85,
    credit_score=72,
    income_stability=65,
    rental_history=60,
    employment_stability=70,
    identity_verification=40,
    references=55,
    application_quality=80,
    promptness=90,
    eviction_history=100,
    criminal_check=None,
)


async def seed_demo(
    session: AsyncSession,
    *,
    tenant_id: int | None = None,
    scoring: ScoringService | None = None,
) -> dict[str, Any]:
    """
    Idempotent demo seed:
    - upserts the demo listings keyed on their address
    - when tenant_id is given, records the demo score once (an existing
      active score is left alone)
    """
    repo = PropertyRepository(session)
    created = 0
    for payload in DEMO_PROPERTIES:
        _, was_created = await repo.upsert({**payload, "landlord_id": DEMO_LANDLORD_ID})
        created += int(was_created)

    score_id = None
    if tenant_id is not None:
        scoring = scoring or ScoringService()
        row = await scoring.find_active_row(session, tenant_id)
        if row is None:
            row = await scoring.record_score(
                session,
                tenant_id,
                DEMO_SUB_SCORES,
                scoring_method="standard",
                landlord_id=DEMO_LANDLORD_ID,
            )
        score_id = row.id

    log.info("demo seed: properties=%s created=%s tenant=%s score=%s", len(DEMO_PROPERTIES), created, tenant_id, score_id)
    return {
        "properties": len(DEMO_PROPERTIES),
        "created": created,
        "tenant_id": tenant_id,
        "score_id": score_id,
    }
