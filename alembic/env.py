import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context

import tastebuddy.models  # noqa: F401  registers every table on the metadata
from tastebuddy.core.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

# Passed straight to the engine; setting it on the ini config would trip interpolation on "%"
db_url = settings.ASYNC_DATABASE_URL


def include_object(obj, name, type_, reflected, compare_to):
    """Limit autogenerate to tastebuddy tables and never emit drops."""
    if type_ == "table":
        return name in target_metadata.tables and obj is not None
    if obj is None:
        return False
    table = getattr(obj, "table", None)
    return table is None or table.name in target_metadata.tables


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        include_object=include_object,
        **kwargs
    )


def run_migrations_offline() -> None:
    _configure(url=db_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = db_url

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
