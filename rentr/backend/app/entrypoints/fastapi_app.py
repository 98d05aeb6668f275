# app/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..config import settings
from ..db import engine
from ..domain.policies import DEFAULT_POLICY, ScoringPolicy
from ..logging_config import configure_logging
from ..models import Base
from ..service_layer.scoring import ScoringService
from .api.errors import register_error_handlers
from .api.routers import health, properties, recommendations, tenant_scores


def create_app(policy: ScoringPolicy = DEFAULT_POLICY) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Rentr - Tenant Scores")
    app.state.scoring = ScoringService(policy)

    @app.on_event("startup")
    async def _startup() -> None:
        # Single place where DB tables are created in dev.
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    register_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(tenant_scores.router)
    app.include_router(recommendations.router)
    app.include_router(properties.router)

    return app
