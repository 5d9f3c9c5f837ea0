"""
Database adapter for ticker matching.

Handles PostgreSQL connection pool management, registry reads and alias
seeding.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from src.common.logging import get_sanitized_logger, redact_dsn

from ..core.alias_generator import GeneratedAlias
from ..core.models import Alias, Entity

if TYPE_CHECKING:
    import asyncpg

logger = get_sanitized_logger(__name__)


async def create_db_pool(
    postgres_url: str,
    min_size: int = 1,
    max_size: int = 4,
) -> asyncpg.Pool:
    """
    Create a PostgreSQL connection pool.

    Args:
        postgres_url: Connection URL
        min_size: Minimum connections
        max_size: Maximum connections

    Returns:
        asyncpg connection pool
    """
    import asyncpg

    logger.info(
        f"Creating database pool for {redact_dsn(postgres_url)} (min={min_size}, max={max_size})"
    )
    pool = await asyncpg.create_pool(
        postgres_url,
        min_size=min_size,
        max_size=max_size,
    )
    logger.info("Database pool created")
    return pool


async def check_db_health(pool: asyncpg.Pool) -> dict:
    """
    Check that the registry tables are reachable and report their sizes.

    Run before populating a cache: a failed population only leaves an empty
    snapshot behind, so this is where an unreachable database shows up.

    Returns:
        ``{"connected": True, "companies": n, "aliases": m}`` or
        ``{"connected": False, "error": "..."}``
    """
    try:
        async with pool.acquire() as conn:
            companies = await conn.fetchval("SELECT count(*) FROM companies")
            aliases = await conn.fetchval("SELECT count(*) FROM ticker_aliases")
    except Exception as e:
        logger.error(f"Registry database unreachable: {e}")
        return {"connected": False, "error": str(e)}

    if not companies:
        logger.warning("Registry database has no companies; every text will need AI resolution")
    return {"connected": True, "companies": companies, "aliases": aliases}


class PostgresRegistrySource:
    """
    Registry source reading the ``companies`` and ``ticker_aliases`` tables.

    Errors propagate; ``RegistryCache`` decides how to degrade.
    """

    def __init__(self, pool: asyncpg.Pool, alias_limit: int = 5000):
        self._pool = pool
        self._alias_limit = alias_limit

    async def fetch_entities(self) -> list[Entity]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT ticker, name, official_name
                FROM companies
                """
            )
        return [
            Entity(
                ticker=row["ticker"],
                name=row["name"],
                official_name=row["official_name"],
            )
            for row in rows
        ]

    async def fetch_aliases(self) -> list[Alias]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT ticker, alias
                FROM ticker_aliases
                LIMIT $1
                """,
                self._alias_limit,
            )
        if len(rows) >= self._alias_limit:
            logger.warning(f"Alias fetch hit limit of {self._alias_limit} rows")
        return [Alias(ticker=row["ticker"], alias=row["alias"]) for row in rows]


async def insert_aliases(
    pool: asyncpg.Pool,
    aliases: Sequence[GeneratedAlias],
    batch_size: int = 500,
) -> int:
    """
    Insert generated aliases, skipping ones that already exist.

    Args:
        pool: asyncpg connection pool
        aliases: Rows from ``generate_aliases``
        batch_size: Rows per executemany call

    Returns:
        Number of rows sent (new and skipped duplicates)
    """
    sent = 0
    async with pool.acquire() as conn:
        for start in range(0, len(aliases), batch_size):
            batch = aliases[start : start + batch_size]
            async with conn.transaction():
                await conn.executemany(
                    """
                    INSERT INTO ticker_aliases (ticker, alias, alias_type, language)
                    VALUES ($1, $2, $3, $4)
                    ON CONFLICT (alias) DO NOTHING
                    """,
                    [(a.ticker, a.alias, a.alias_type, a.language) for a in batch],
                )
            sent += len(batch)
            logger.info(f"Alias batch {start}-{start + len(batch)} written")
    return sent
