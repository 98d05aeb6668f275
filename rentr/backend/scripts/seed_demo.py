from __future__ import annotations

import argparse
import asyncio

from app.config import settings
from app.db import async_session_maker, engine
from app.logging_config import configure_logging
from app.models import Base
from app.services.demo_seed import seed_demo


async def _ensure_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tenant-id", type=int, default=None, help="Also give this tenant the demo score")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    await _ensure_schema()

    async with async_session_maker() as session:
        result = await seed_demo(session, tenant_id=args.tenant_id)
        await session.commit()

    await engine.dispose()
    print(
        f"Seeded demo listings. properties={result['properties']} created={result['created']} "
        f"tenant={result['tenant_id']} score={result['score_id']}"
    )


if __name__ == "__main__":
    asyncio.run(main())
