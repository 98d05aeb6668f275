from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.properties import PropertyRepository, snapshot_from_row
from ..adapters.repos.tenant_scores import TenantScoreRepository, score_model_from_row
from ..domain.analysis import ScoreAnalysis, analyze_score
from ..domain.errors import ConflictError, NotFoundError, ValidationError
from ..domain.matching import CompatibilityEngine
from ..domain.policies import DEFAULT_POLICY, ScoringPolicy
from ..domain.recommendations import RecommendationEngine
from ..domain.scoring import default_score_model, derive_score_model
from ..domain.types import (
    Dimension,
    PropertyMatch,
    ScoreImprovements,
    ScoreModel,
    SubScores,
    TenantPreferences,
)
from ..models import TenantScore

log = logging.getLogger(__name__)

NO_PROPERTIES_MESSAGE = "No available properties to match"


@dataclass(frozen=True)
class MatchResult:
    matches: list[PropertyMatch]
    message: str


class ScoringService:
    """
    Tenant-score use cases.

    Holds no per-request state: one instance per process, shared by all
    requests, with the session passed into every call.
    """

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy
        self.compatibility = CompatibilityEngine(policy)
        self.recommender = RecommendationEngine(policy)

    def to_model(self, row: TenantScore) -> ScoreModel:
        return score_model_from_row(row, self.policy)

    # ----- score records -----

    async def find_active_row(self, session: AsyncSession, tenant_id: int) -> TenantScore | None:
        return await TenantScoreRepository(session).get_active(tenant_id)

    async def get_active_row(self, session: AsyncSession, tenant_id: int) -> TenantScore:
        row = await self.find_active_row(session, tenant_id)
        if row is None:
            raise NotFoundError(f"No tenant score found for tenant {tenant_id}")
        return row

    async def get_active_score(self, session: AsyncSession, tenant_id: int) -> ScoreModel:
        return self.to_model(await self.get_active_row(session, tenant_id))

    async def get_score_row(self, session: AsyncSession, score_id: int) -> TenantScore:
        row = await TenantScoreRepository(session).get(score_id)
        if row is None:
            raise NotFoundError(f"Tenant score {score_id} not found")
        return row

    async def list_scores(self, session: AsyncSession, tenant_id: int) -> list[TenantScore]:
        return await TenantScoreRepository(session).list_for_tenant(tenant_id)

    async def ensure_default_score(self, session: AsyncSession, tenant_id: int) -> TenantScore:
        """
        Return the tenant's active score, creating a neutral default if none
        exists. Safe under concurrent calls: the loser of an insert race gets
        the winner's row.
        """
        repo = TenantScoreRepository(session)
        existing = await repo.get_active(tenant_id)
        if existing is not None:
            return existing

        try:
            row = await repo.add_active(default_score_model(tenant_id, policy=self.policy))
        except ConflictError:
            await session.rollback()
            winner = await repo.get_active(tenant_id)
            if winner is None:
                raise
            log.info("default score race for tenant=%s resolved to score=%s", tenant_id, winner.id)
            return winner

        log.info("created default score=%s for tenant=%s", row.id, tenant_id)
        return row

    async def record_score(
        self,
        session: AsyncSession,
        tenant_id: int,
        sub_scores: SubScores,
        *,
        scoring_method: str = "standard",
        landlord_id: int | None = None,
        property_id: int | None = None,
        application_id: int | None = None,
    ) -> TenantScore:
        """New scoring event: archive the active row and insert a new active one."""
        repo = TenantScoreRepository(session)
        model = derive_score_model(tenant_id, sub_scores, policy=self.policy, scoring_method=scoring_method)

        current = await repo.get_active(tenant_id)
        if current is not None:
            await repo.archive(current)

        row = await repo.add_active(
            model,
            landlord_id=landlord_id,
            property_id=property_id,
            application_id=application_id,
        )
        log.info(
            "recorded score=%s for tenant=%s overall=%s superseded=%s",
            row.id,
            tenant_id,
            row.overall_score,
            current.id if current is not None else None,
        )
        return row

    async def correct_score(
        self,
        session: AsyncSession,
        score_id: int,
        changes: dict[Dimension, int | None],
    ) -> TenantScore:
        """Fix sub-scores on an active row in place; overall is re-derived."""
        repo = TenantScoreRepository(session)
        row = await self.get_score_row(session, score_id)
        if not row.active:
            raise ValidationError(f"Tenant score {score_id} is archived and read-only")

        current = self.to_model(row)
        model = derive_score_model(
            row.tenant_id,
            current.sub_scores.merged(changes),
            policy=self.policy,
            id=row.id,
            scoring_method=row.scoring_method,
            scored_at=row.scored_at,
        )
        return await repo.overwrite(row, model)

    # ----- derived views -----

    async def property_matches(
        self,
        session: AsyncSession,
        tenant_id: int,
        preferences: TenantPreferences,
        *,
        limit: int,
    ) -> MatchResult:
        score = await self.get_active_score(session, tenant_id)

        rows = await PropertyRepository(session).list_properties(available=True)
        if not rows:
            return MatchResult(matches=[], message=NO_PROPERTIES_MESSAGE)

        ranked = self.compatibility.match_properties(score, preferences, [snapshot_from_row(r) for r in rows])
        top = ranked[:limit]
        noun = "match" if len(top) == 1 else "matches"
        return MatchResult(matches=top, message=f"Found {len(top)} property {noun}")

    async def score_improvements(
        self,
        session: AsyncSession,
        tenant_id: int,
        *,
        create_default: bool = False,
    ) -> tuple[ScoreModel, ScoreImprovements]:
        if create_default:
            score = self.to_model(await self.ensure_default_score(session, tenant_id))
        else:
            score = await self.get_active_score(session, tenant_id)
        return score, self.recommender.analyze(score)

    async def score_analysis(self, session: AsyncSession, tenant_id: int) -> ScoreAnalysis:
        return analyze_score(await self.get_active_score(session, tenant_id))
