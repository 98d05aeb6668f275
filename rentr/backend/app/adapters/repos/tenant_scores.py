# app/adapters/repos/tenant_scores.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.errors import ConflictError
from ...domain.policies import DEFAULT_POLICY, ScoringPolicy
from ...domain.scoring import derive_score_model
from ...domain.types import DIMENSION_ORDER, ScoreModel, SubScores
from ...models import TenantScore


def score_model_from_row(row: TenantScore, policy: ScoringPolicy = DEFAULT_POLICY) -> ScoreModel:
    """Rebuild the domain snapshot; overall is re-derived, never trusted from the row."""
    sub_scores = SubScores(**{dim.value: getattr(row, dim.value) for dim in DIMENSION_ORDER})
    return derive_score_model(
        row.tenant_id,
        sub_scores,
        policy=policy,
        id=row.id,
        active=row.active,
        scoring_method=row.scoring_method,
        scored_at=row.scored_at,
    )


class TenantScoreRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, score_id: int) -> TenantScore | None:
        q = select(TenantScore).where(TenantScore.id == score_id)
        return (await self.session.execute(q)).scalars().first()

    async def get_active(self, tenant_id: int) -> TenantScore | None:
        q = (
            select(TenantScore)
            .where(TenantScore.tenant_id == tenant_id)
            .where(TenantScore.active.is_(True))
        )
        return (await self.session.execute(q)).scalars().first()

    async def list_for_tenant(self, tenant_id: int) -> list[TenantScore]:
        q = (
            select(TenantScore)
            .where(TenantScore.tenant_id == tenant_id)
            .order_by(TenantScore.created_at.desc(), TenantScore.id.desc())
        )
        return list((await self.session.execute(q)).scalars().all())

    async def add_active(
        self,
        score: ScoreModel,
        *,
        landlord_id: int | None = None,
        property_id: int | None = None,
        application_id: int | None = None,
    ) -> TenantScore:
        """
        Insert `score` as the tenant's active row.

        Raises ConflictError when another active row already exists
        (unique partial index); the session must then be rolled back.
        """
        now = datetime.utcnow()
        row = TenantScore(
            tenant_id=score.tenant_id,
            landlord_id=landlord_id,
            property_id=property_id,
            application_id=application_id,
            overall_score=score.overall,
            scoring_method=score.scoring_method,
            active=True,
            scored_at=score.scored_at or now,
            created_at=now,
            updated_at=now,
        )
        self._write_sub_scores(row, score)
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f"tenant {score.tenant_id} already has an active score") from e
        return row

    async def archive(self, row: TenantScore) -> None:
        row.active = False
        row.updated_at = datetime.utcnow()
        await self.session.flush()

    async def overwrite(self, row: TenantScore, score: ScoreModel) -> TenantScore:
        self._write_sub_scores(row, score)
        row.overall_score = score.overall
        row.updated_at = datetime.utcnow()
        await self.session.flush()
        return row

    @staticmethod
    def _write_sub_scores(row: TenantScore, score: ScoreModel) -> None:
        for dim in DIMENSION_ORDER:
            setattr(row, dim.value, score.sub_scores.get(dim))
