"""
Registry Cache

Holds the entity and alias registry in memory for one processing session.

The cache is loaded once (explicitly via ``populate`` or lazily on first
``ensure_loaded``) and never invalidated; callers needing fresh data create
a new cache. A failed load leaves an empty snapshot in place, so matching
degrades to "nothing found" instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .aliases import MIN_ALIAS_LENGTH, CompiledAlias, compile_aliases
from .models import Alias, Entity

logger = logging.getLogger(__name__)


@runtime_checkable
class RegistrySource(Protocol):
    """
    Protocol for the backing entity/alias store.

    Implementations perform I/O; the cache calls each method once per
    session.
    """

    async def fetch_entities(self) -> list[Entity]:
        """Return every known entity."""
        ...

    async def fetch_aliases(self) -> list[Alias]:
        """Return every known alias."""
        ...


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    Immutable view of the registry used by the matching layers.
    """

    entities: tuple[Entity, ...] = ()
    valid_tickers: frozenset[str] = frozenset()
    aliases: tuple[Alias, ...] = ()
    compiled_aliases: tuple[CompiledAlias, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.entities

    @classmethod
    def build(
        cls,
        entities: Iterable[Entity],
        aliases: Iterable[Alias],
        min_alias_length: int = MIN_ALIAS_LENGTH,
    ) -> RegistrySnapshot:
        """
        Clean raw registry rows and precompute lookup structures.

        Rows with an empty ticker or name, empty aliases, aliases pointing at
        unknown tickers and case-insensitive duplicate aliases are dropped.
        """
        clean_entities: dict[str, Entity] = {}
        for entity in entities:
            ticker = (entity.ticker or "").strip().upper()
            name = (entity.name or "").strip()
            if not ticker or not name:
                logger.debug(f"Dropping malformed entity: {entity!r}")
                continue
            if ticker in clean_entities:
                continue
            official = (entity.official_name or "").strip() or None
            clean_entities[ticker] = Entity(ticker=ticker, name=name, official_name=official)

        valid = frozenset(clean_entities)

        seen: set[tuple[str, str]] = set()
        clean_aliases: list[Alias] = []
        dropped = 0
        for alias in aliases:
            ticker = (alias.ticker or "").strip().upper()
            text = (alias.alias or "").strip()
            key = (ticker, text.lower())
            if not text or ticker not in valid or key in seen:
                dropped += 1
                continue
            seen.add(key)
            clean_aliases.append(Alias(ticker=ticker, alias=text))

        if dropped:
            logger.debug(f"Dropped {dropped} unusable alias rows")

        return cls(
            entities=tuple(clean_entities.values()),
            valid_tickers=valid,
            aliases=tuple(clean_aliases),
            compiled_aliases=compile_aliases(clean_aliases, valid, min_alias_length),
        )


EMPTY_SNAPSHOT = RegistrySnapshot()


class RegistryCache:
    """
    Session-scoped, write-once cache over a ``RegistrySource``.

    Safe under concurrent ``ensure_loaded`` calls: one load runs, other
    callers wait for it, and the snapshot is published by a single
    assignment so readers never see a partial registry.
    """

    def __init__(
        self,
        source: RegistrySource,
        min_alias_length: int = MIN_ALIAS_LENGTH,
    ):
        self._source = source
        self._min_alias_length = min_alias_length
        self._snapshot: RegistrySnapshot | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> RegistrySnapshot:
        """Current snapshot (empty if not loaded yet)."""
        return self._snapshot or EMPTY_SNAPSHOT

    async def populate(self) -> None:
        """
        Load the registry if not already loaded.

        Never raises: a source failure is logged and an empty snapshot is
        kept for the rest of the session.
        """
        if self._snapshot is not None:
            return

        async with self._lock:
            if self._snapshot is not None:
                return

            try:
                # Both fetches are awaited even if one fails
                entities, aliases = await asyncio.gather(
                    self._source.fetch_entities(),
                    self._source.fetch_aliases(),
                    return_exceptions=True,
                )
                for outcome in (entities, aliases):
                    if isinstance(outcome, BaseException):
                        raise outcome
                snapshot = RegistrySnapshot.build(
                    entities, aliases, min_alias_length=self._min_alias_length
                )
            except Exception as e:
                logger.warning(f"Registry unavailable, matching with empty cache: {e}")
                snapshot = EMPTY_SNAPSHOT

            self._snapshot = snapshot
            logger.info(
                f"Registry cache: {len(snapshot.aliases)} aliases, "
                f"{len(snapshot.entities)} companies"
            )

    async def ensure_loaded(self) -> RegistrySnapshot:
        """Populate on first use and return the snapshot."""
        if self._snapshot is None:
            await self.populate()
        return self.snapshot
