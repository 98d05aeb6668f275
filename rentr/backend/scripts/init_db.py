# scripts/init_db.py
import asyncio

from app.config import settings
from app.db import engine
from app.logging_config import configure_logging
from app.models import Base


async def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"OK: created all tables (idempotent) on {settings.RENTR_DB_URL}")


if __name__ == "__main__":
    asyncio.run(main())
