"""Database connection and queries."""

import logging
from pathlib import Path

import asyncpg

from hooktrigger.config import settings
from hooktrigger.models import Job

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


async def init_db(database_url: str | None = None):
    """Initialize database connection pool and run migrations."""
    global _pool
    _pool = await asyncpg.create_pool(database_url or settings.database_url)
    await run_migrations()


async def run_migrations():
    """Run SQL migrations."""
    migrations_dir = Path(__file__).parent / "migrations"

    async with _pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                name VARCHAR(255) PRIMARY KEY,
                applied_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            )
        """)

        rows = await conn.fetch("SELECT name FROM _migrations")
        applied = {row["name"] for row in rows}

        for migration_file in sorted(migrations_dir.glob("*.sql")):
            if migration_file.name.endswith(".down.sql"):
                continue
            if migration_file.name in applied:
                continue

            logger.info("Applying migration: %s", migration_file.name)
            sql = migration_file.read_text()
            await conn.execute(sql)
            await conn.execute(
                "INSERT INTO _migrations (name) VALUES ($1)",
                migration_file.name
            )


async def close_db():
    """Close database connection pool."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None


# Job queries

async def list_registered_jobs() -> list[tuple[Job, str]]:
    """Return every job with a webhook trigger, paired with its User-Agent pattern."""
    async with _pool.acquire() as conn:
        rows = await conn.fetch(
            "SELECT * FROM jobs WHERE user_agent_pattern IS NOT NULL ORDER BY name"
        )
        return [(Job.from_row(dict(row)), row["user_agent_pattern"]) for row in rows]


async def create_job(
    name: str,
    command: str,
    user_agent_pattern: str | None = None,
    enabled: bool = True,
) -> Job:
    async with _pool.acquire() as conn:
        row = await conn.fetchrow(
            """
            INSERT INTO jobs (name, command, user_agent_pattern, enabled)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (name) DO UPDATE
            SET command = EXCLUDED.command,
                user_agent_pattern = EXCLUDED.user_agent_pattern,
                enabled = EXCLUDED.enabled
            RETURNING *
            """,
            name, command, user_agent_pattern, enabled
        )
        return Job.from_row(dict(row))
