"""Tests for the registry snapshot and cache."""

from __future__ import annotations

import asyncio
import logging

import pytest

from src.services.ticker_matching.adapters.memory import InMemoryRegistrySource
from src.services.ticker_matching.core.models import Alias, Entity
from src.services.ticker_matching.core.registry import (
    EMPTY_SNAPSHOT,
    RegistryCache,
    RegistrySnapshot,
    RegistrySource,
)


class FailingSource:
    """Source whose store is unreachable."""

    def __init__(self):
        self.calls = 0

    async def fetch_entities(self) -> list[Entity]:
        self.calls += 1
        raise ConnectionError("connection refused")

    async def fetch_aliases(self) -> list[Alias]:
        return []


class BothFailingSource:
    """Source where the alias query fails after the entity query."""

    def __init__(self):
        self.aliases_done = False

    async def fetch_entities(self) -> list[Entity]:
        raise ConnectionError("entities unavailable")

    async def fetch_aliases(self) -> list[Alias]:
        await asyncio.sleep(0.01)
        self.aliases_done = True
        raise ConnectionError("aliases unavailable")


class SlowSource(InMemoryRegistrySource):
    """Source that yields to the event loop before answering."""

    async def fetch_entities(self) -> list[Entity]:
        await asyncio.sleep(0.01)
        return await super().fetch_entities()


class TestRegistrySnapshot:
    """Tests for snapshot construction."""

    def test_build(self, entities, aliases) -> None:
        """All usable rows are kept and tickers indexed."""
        snapshot = RegistrySnapshot.build(entities, aliases)

        assert snapshot.valid_tickers == {"PKN", "CDR", "KGH", "ALE", "PZU", "LPP"}
        assert len(snapshot.entities) == 6
        assert len(snapshot.aliases) == 7
        assert not snapshot.is_empty

    def test_compiled_aliases_exclude_short(self, snapshot) -> None:
        """Short aliases stay in the registry but are not compiled."""
        assert "pzu" in [a.alias for a in snapshot.aliases]
        assert "pzu" not in [c.alias for c in snapshot.compiled_aliases]

    def test_malformed_rows_dropped(self) -> None:
        """Empty tickers, empty names and orphan aliases are removed."""
        snapshot = RegistrySnapshot.build(
            [
                Entity(ticker="", name="Bez tickera"),
                Entity(ticker="XYZ", name="  "),
                Entity(ticker="PKN", name="Orlen"),
            ],
            [
                Alias(ticker="PKN", alias=""),
                Alias(ticker="XYZ", alias="xyzcorp"),
                Alias(ticker="PKN", alias="orlen"),
            ],
        )

        assert snapshot.valid_tickers == {"PKN"}
        assert snapshot.aliases == (Alias(ticker="PKN", alias="orlen"),)

    def test_normalization(self) -> None:
        """Tickers are upper-cased and whitespace trimmed."""
        snapshot = RegistrySnapshot.build(
            [Entity(ticker=" pkn ", name=" Orlen ", official_name="")],
            [Alias(ticker="pkn", alias=" Orlen ")],
        )

        assert snapshot.entities == (Entity(ticker="PKN", name="Orlen", official_name=None),)
        assert snapshot.aliases == (Alias(ticker="PKN", alias="Orlen"),)

    def test_duplicates_dropped(self) -> None:
        """Duplicate tickers and case-insensitive duplicate aliases are removed."""
        snapshot = RegistrySnapshot.build(
            [Entity(ticker="PKN", name="Orlen"), Entity(ticker="PKN", name="PKN Orlen")],
            [Alias(ticker="PKN", alias="orlen"), Alias(ticker="PKN", alias="ORLEN")],
        )

        assert snapshot.entities == (Entity(ticker="PKN", name="Orlen"),)
        assert len(snapshot.aliases) == 1

    def test_empty(self) -> None:
        """The empty snapshot matches nothing."""
        assert EMPTY_SNAPSHOT.is_empty
        assert EMPTY_SNAPSHOT.valid_tickers == frozenset()


class TestRegistryCache:
    """Tests for session-scoped loading."""

    def test_source_protocol(self, source) -> None:
        """The in-memory source satisfies the source protocol."""
        assert isinstance(source, RegistrySource)

    def test_not_loaded_initially(self, source) -> None:
        """A new cache reports the empty snapshot."""
        cache = RegistryCache(source)

        assert not cache.is_loaded
        assert cache.snapshot is EMPTY_SNAPSHOT
        assert source.fetch_count == 0

    @pytest.mark.asyncio
    async def test_populate(self, source) -> None:
        """populate loads the registry."""
        cache = RegistryCache(source)

        await cache.populate()

        assert cache.is_loaded
        assert "PKN" in cache.snapshot.valid_tickers

    @pytest.mark.asyncio
    async def test_populate_idempotent(self, source) -> None:
        """Repeated populate calls query the source once."""
        cache = RegistryCache(source)

        await cache.populate()
        first = cache.snapshot
        await cache.populate()
        await cache.ensure_loaded()

        assert source.fetch_count == 1
        assert cache.snapshot is first

    @pytest.mark.asyncio
    async def test_concurrent_populate(self, entities, aliases) -> None:
        """Concurrent loads share one fetch."""
        source = SlowSource(entities, aliases)
        cache = RegistryCache(source)

        snapshots = await asyncio.gather(*(cache.ensure_loaded() for _ in range(5)))

        assert source.fetch_count == 1
        assert all(s is snapshots[0] for s in snapshots)
        assert not snapshots[0].is_empty

    @pytest.mark.asyncio
    async def test_failure_leaves_empty_snapshot(self, caplog) -> None:
        """A failing source is logged and not retried."""
        source = FailingSource()
        cache = RegistryCache(source)

        with caplog.at_level(logging.WARNING):
            await cache.populate()

        assert cache.is_loaded
        assert cache.snapshot.is_empty
        assert "Registry unavailable" in caplog.text

        await cache.populate()
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_min_alias_length(self, source) -> None:
        """The alias length floor is configurable."""
        cache = RegistryCache(source, min_alias_length=3)

        snapshot = await cache.ensure_loaded()

        assert "pzu" in [c.alias for c in snapshot.compiled_aliases]

    @pytest.mark.asyncio
    async def test_failure_awaits_both_fetches(self, caplog) -> None:
        """When both queries fail, both are awaited and the first error is logged."""
        source = BothFailingSource()
        cache = RegistryCache(source)

        with caplog.at_level(logging.WARNING):
            await cache.populate()

        assert source.aliases_done
        assert cache.snapshot.is_empty
        assert "entities unavailable" in caplog.text
        assert "never retrieved" not in caplog.text
