"""Migration script to add the email_visibility column to the user table"""

import asyncio
from dotenv import load_dotenv
from sqlalchemy import inspect, text

# Load environment variables from .env file
load_dotenv()

from tastebuddy.db.database import async_engine


def _has_column(sync_conn, table: str, column: str) -> bool:
    return any(col["name"] == column for col in inspect(sync_conn).get_columns(table))


async def migrate():
    """Add email_visibility to "user" if it doesn't exist; existing users stay HIDDEN"""
    async with async_engine.begin() as conn:
        if not await conn.run_sync(lambda c: inspect(c).has_table("user")):
            print("Table user does not exist yet. Run init_db or alembic first.")
            return

        if await conn.run_sync(_has_column, "user", "email_visibility"):
            print("Column email_visibility already exists. No migration needed.")
            return

        print("Adding email_visibility column to user table...")
        if conn.dialect.name == "postgresql":
            await conn.execute(text(
                "DO $$ BEGIN "
                "CREATE TYPE emailvisibility AS ENUM ('HIDDEN', 'FOLLOWING_ONLY', 'PUBLIC'); "
                "EXCEPTION WHEN duplicate_object THEN NULL; END $$"
            ))
            await conn.execute(text(
                'ALTER TABLE "user" ADD COLUMN email_visibility emailvisibility NOT NULL DEFAULT \'HIDDEN\''
            ))
        else:
            await conn.execute(text(
                'ALTER TABLE "user" ADD COLUMN email_visibility VARCHAR(14) NOT NULL DEFAULT \'HIDDEN\''
            ))
        print("Migration completed successfully.")


async def main():
    try:
        await migrate()
    finally:
        await async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
