import asyncio
import os
import sys

from sqlalchemy import text

sys.path.append(os.getcwd())

from fittrack.db.base import Base
from fittrack.db.session import engine
from fittrack.models import *  # noqa: F401, F403


async def drop_tables():
    print("Dropping all FitTrack tables...")
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        await conn.run_sync(Base.metadata.drop_all)
    print("Tables dropped.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(drop_tables())
