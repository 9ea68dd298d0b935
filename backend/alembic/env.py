"""
Alembic migrations for the chances schema.

Only the two tables the calculator reads are managed here: ``schools`` and
``admission_submissions``. Supabase-owned schemas are left alone by
autogenerate. The target database comes from ``-x database_url=...`` when
given, otherwise from the DATABASE_URL setting.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

from chances.config.settings import get_settings
from chances.infrastructure.db.database import normalize_database_url
from chances.infrastructure.db.models import AdmissionSubmission, School

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

MANAGED_TABLES = {School.__tablename__, AdmissionSubmission.__tablename__}
SUPABASE_SCHEMAS = {"auth", "storage", "realtime", "extensions", "graphql", "graphql_public"}


def include_object(object, name, type_, reflected, compare_to):
    """Keep autogenerate to the calculator's tables and their indexes."""
    if type_ == "table":
        if getattr(object, "schema", None) in SUPABASE_SCHEMAS:
            return False
        # Reflected tables created outside these models are not ours to drop
        return not reflected or name in MANAGED_TABLES
    return True


def database_url() -> str:
    url = context.get_x_argument(as_dictionary=True).get("database_url")
    url = url or get_settings().database_url
    if not url:
        raise ValueError("DATABASE_URL is required to run migrations")
    return normalize_database_url(url)


def migration_options() -> dict:
    return {
        "target_metadata": SQLModel.metadata,
        "include_object": include_object,
        "compare_type": True,
        "compare_server_default": True,
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection) -> None:
    context.configure(connection=connection, **migration_options())
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
