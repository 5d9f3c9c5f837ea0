"""
Ticker Matching - CLI Entry Point

Usage:
    python -m src.services.ticker_matching resolve --title TITLE [--body BODY] [source options]
    python -m src.services.ticker_matching aliases --registry-file FILE [--write]

Examples:
    # Resolve against a JSON registry
    python -m src.services.ticker_matching resolve --title "(CDR) podpisał umowę" \\
        --registry-file registry.json

    # Resolve against PostgreSQL (URL from TICKER_MATCHER_POSTGRES_URL if omitted)
    python -m src.services.ticker_matching resolve --title "Orlen ogłosił wyniki"

    # Generate aliases for every company and write them to PostgreSQL
    python -m src.services.ticker_matching aliases --registry-file registry.json --write
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from src.common.logging import configure_sanitized_logging

from .adapters.database import (
    PostgresRegistrySource,
    check_db_health,
    create_db_pool,
    insert_aliases,
)
from .adapters.memory import load_registry_file
from .config import MatcherConfig, load_config
from .core.alias_generator import generate_aliases
from .matcher import TickerMatcher

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ticker-matcher",
        description="Deterministic ticker matching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: from config or info)",
    )

    source = argparse.ArgumentParser(add_help=False)
    source.add_argument(
        "--registry-file",
        default=None,
        help="JSON registry file (default: from config, else PostgreSQL)",
    )
    source.add_argument(
        "--postgres-url",
        default=None,
        help="PostgreSQL connection URL",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser(
        "resolve", parents=[source], help="Resolve tickers mentioned in a text"
    )
    resolve.add_argument("--title", required=True, help="Headline or filing title")
    resolve.add_argument("--body", default="", help="Article body")

    aliases = subparsers.add_parser(
        "aliases", parents=[source], help="Generate alias rows for registry companies"
    )
    aliases.add_argument(
        "--write",
        action="store_true",
        help="Insert generated aliases into PostgreSQL instead of printing them",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> MatcherConfig:
    """Build configuration from args and environment."""
    overrides = {}

    if args.registry_file:
        overrides["registry_file"] = args.registry_file
    if args.postgres_url:
        overrides["postgres_url"] = args.postgres_url
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()

    return load_config(**overrides)


async def run_resolve(args: argparse.Namespace, config: MatcherConfig) -> dict:
    """Resolve one text and return the result as a dict."""
    pool = None
    if config.registry_file:
        source = load_registry_file(config.registry_file)
    else:
        pool = await create_db_pool(
            config.postgres_url,
            min_size=config.postgres_pool_min,
            max_size=config.postgres_pool_max,
        )
        source = PostgresRegistrySource(pool, alias_limit=config.alias_fetch_limit)

    try:
        if pool is not None:
            health = await check_db_health(pool)
            logger.info(f"Registry database: {health}")
        matcher = TickerMatcher(source, config)
        await matcher.populate_cache()
        result = await matcher.resolve(args.title, args.body)
        return result.to_dict()
    finally:
        if pool is not None:
            await pool.close()


async def run_aliases(args: argparse.Namespace, config: MatcherConfig) -> dict:
    """Generate aliases from a registry file, optionally writing them."""
    if not config.registry_file:
        raise ValueError("aliases requires --registry-file")

    source = load_registry_file(config.registry_file)
    rows = []
    for entity in await source.fetch_entities():
        rows.extend(generate_aliases(entity.ticker, entity.name))
    logger.info(f"Generated {len(rows)} aliases")

    if not args.write:
        return {"aliases": [asdict(r) for r in rows], "count": len(rows)}

    pool = await create_db_pool(
        config.postgres_url,
        min_size=config.postgres_pool_min,
        max_size=config.postgres_pool_max,
    )
    try:
        sent = await insert_aliases(pool, rows)
    finally:
        await pool.close()
    return {"written": sent}


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)
    configure_sanitized_logging(config.log_level)

    try:
        if args.command == "resolve":
            output = asyncio.run(run_resolve(args, config))
        else:
            output = asyncio.run(run_aliases(args, config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
