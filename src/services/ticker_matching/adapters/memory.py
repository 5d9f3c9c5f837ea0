"""
In-memory registry source.

Used by tests and by the CLI when the registry comes from a JSON file:

    {
        "entities": [{"ticker": "PKN", "name": "Orlen", "official_name": "Orlen S.A."}],
        "aliases":  [{"ticker": "PKN", "alias": "orlen"}]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from ..core.models import Alias, Entity

logger = logging.getLogger(__name__)


class InMemoryRegistrySource:
    """Registry source backed by plain lists."""

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        aliases: Iterable[Alias] = (),
    ):
        self._entities = list(entities)
        self._aliases = list(aliases)
        self.fetch_count = 0

    async def fetch_entities(self) -> list[Entity]:
        self.fetch_count += 1
        return list(self._entities)

    async def fetch_aliases(self) -> list[Alias]:
        return list(self._aliases)


def load_registry_file(path: str | Path) -> InMemoryRegistrySource:
    """
    Load a JSON registry file.

    Rows missing ``ticker`` are skipped; everything else is cleaned when the
    cache builds its snapshot.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))

    entities = [
        Entity(
            ticker=row["ticker"],
            name=row.get("name") or "",
            official_name=row.get("official_name"),
        )
        for row in data.get("entities", [])
        if row.get("ticker")
    ]
    aliases = [
        Alias(ticker=row["ticker"], alias=row.get("alias") or "")
        for row in data.get("aliases", [])
        if row.get("ticker")
    ]

    logger.info(f"Loaded registry file {path}: {len(entities)} entities, {len(aliases)} aliases")
    return InMemoryRegistrySource(entities, aliases)
