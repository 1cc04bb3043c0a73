"""
Seed the achievement catalog.

Safe to run repeatedly: existing (name, type) rows are left untouched.

    python -m tastebuddy.scripts.seed_achievements
"""

import asyncio
from dotenv import load_dotenv

load_dotenv()

from tastebuddy.db.database import AsyncSessionLocal, init_db
from tastebuddy.crud.achievement import get_achievement, get_or_create_achievement
from tastebuddy.utils.achievement_catalog import ACHIEVEMENT_CATALOG


async def seed_achievements() -> int:
    """Insert missing catalog entries and return how many were created"""
    await init_db()
    created = 0
    async with AsyncSessionLocal() as session:
        for descriptor in ACHIEVEMENT_CATALOG:
            if await get_achievement(session, descriptor.name, descriptor.type) is None:
                created += 1
            await get_or_create_achievement(session, descriptor)
            print(f"  - {descriptor.icon} {descriptor.name}")

    print(f"Seeded {created} new achievement(s); {len(ACHIEVEMENT_CATALOG) - created} already present.")
    return created


if __name__ == "__main__":
    asyncio.run(seed_achievements())
