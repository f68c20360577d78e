import asyncio
import os
import sys

from sqlalchemy import func, select

sys.path.append(os.getcwd())

from fittrack.db.base import Base
from fittrack.db.session import async_session_maker, engine
from fittrack.models import *  # noqa: F401, F403


async def check_data():
    tables = sorted(Base.metadata.tables.values(), key=lambda t: t.name)
    print(f"Checking {len(tables)} tables")
    async with async_session_maker() as session:
        for table in tables:
            try:
                count = (await session.execute(select(func.count()).select_from(table))).scalar()
                print(f"Table '{table.name}' row count: {count}")
                if count:
                    sample_id = (await session.execute(select(table.c.id).limit(1))).scalar()
                    print(f"  Sample ID from {table.name}: {sample_id}")
            except Exception as e:
                print(f"Error querying {table.name}: {e}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
