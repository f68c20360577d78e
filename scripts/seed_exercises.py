import asyncio
import os
import sys

# Add parent directory to path so we can import fittrack modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from fittrack.db.session import async_session_maker, engine
from fittrack.services.exercises import seed_exercise_library


async def main():
    print("Seeding built-in exercise library...")
    async with async_session_maker() as session:
        added = await seed_exercise_library(session)
        await session.commit()
    if added:
        print(f"Inserted {added} exercises.")
    else:
        print("Library already up to date.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
