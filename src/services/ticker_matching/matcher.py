"""
Ticker Matcher

Entry point combining the registry cache and the three matching layers:

1. Symbol patterns  ($PKN, (CDR), GPW:PKN, "spółka PKN")  0.90-0.95
2. Aliases          (word-boundary, longest first)        0.70-0.95
3. Company names    (display / official name substring)   0.70-0.80

A result with method ``ai_needed`` means nothing reached the threshold and the
caller should fall back to a more expensive resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from opentelemetry import trace

from .config import MatcherConfig
from .core.aliases import match_aliases
from .core.models import MatchResult
from .core.names import match_company_names
from .core.patterns import compile_patterns, match_patterns
from .core.ranking import merge_layers, rank
from .core.registry import RegistryCache, RegistrySnapshot, RegistrySource

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class TickerMatcher:
    """
    Deterministic ticker resolver owning one session's registry snapshot.

    Create one per processing session (e.g. per ingestion batch), call
    ``populate_cache()`` once, then ``resolve()`` per document. Resolution
    after population is pure and safe to run concurrently.
    """

    def __init__(
        self,
        source: RegistrySource,
        config: MatcherConfig | None = None,
    ):
        self._config = config or MatcherConfig()
        self._cache = RegistryCache(source, min_alias_length=self._config.min_alias_length)
        self._patterns = compile_patterns(
            self._config.context_words,
            self._config.exchange_prefixes,
        )

    @property
    def config(self) -> MatcherConfig:
        return self._config

    @property
    def cache(self) -> RegistryCache:
        return self._cache

    async def populate_cache(self) -> None:
        """Load the registry once; no-op afterwards. Never raises."""
        await self._cache.populate()

    async def resolve(self, title: str, body: str = "") -> MatchResult:
        """
        Resolve ticker mentions in a document.

        Loads the registry on first use if ``populate_cache`` was not called.

        Args:
            title: Headline or filing title
            body: Article body or summary

        Returns:
            MatchResult (``ai_needed`` when nothing qualified)
        """
        snapshot = await self._cache.ensure_loaded()
        return self.match_text(snapshot, title, body)

    async def resolve_batch(
        self,
        items: Iterable[tuple[str, str]],
    ) -> list[MatchResult]:
        """Populate once, then resolve each (title, body) pair."""
        await self.populate_cache()
        snapshot = self._cache.snapshot
        return [self.match_text(snapshot, title, body) for title, body in items]

    def match_text(
        self,
        snapshot: RegistrySnapshot,
        title: str,
        body: str = "",
    ) -> MatchResult:
        """
        Run all layers against a snapshot. Pure and synchronous.
        """
        title = title or ""
        body = body or ""
        cfg = self._config

        with tracer.start_as_current_span("ticker_matcher.resolve") as span:
            span.set_attribute("ticker_matcher.title_length", len(title))
            span.set_attribute("ticker_matcher.body_length", len(body))

            by_pattern = match_patterns(
                title,
                body,
                snapshot.valid_tickers,
                patterns=self._patterns,
                symbol_confidence=cfg.symbol_confidence,
                context_confidence=cfg.context_confidence,
            )
            by_alias = match_aliases(
                title,
                body,
                snapshot.compiled_aliases,
                max_tickers=cfg.max_alias_tickers,
                title_bonus=cfg.title_bonus,
                ceiling=cfg.alias_confidence_ceiling,
            )
            by_name = match_company_names(
                title,
                body,
                snapshot.entities,
                min_length=cfg.min_name_length,
                name_confidence=cfg.name_confidence,
                official_name_confidence=cfg.official_name_confidence,
                title_bonus=cfg.title_bonus,
            )

            # Patterns last: on a confidence tie the earlier layer's evidence stays
            merged = merge_layers(by_name, by_alias, by_pattern)
            result = rank(
                merged,
                threshold=cfg.confidence_threshold,
                max_tickers=cfg.max_tickers,
                sort_ties_by_ticker=cfg.sort_ties_by_ticker,
            )

            span.set_attribute("ticker_matcher.method", result.method.value)
            span.set_attribute("ticker_matcher.ticker_count", len(result.tickers))

        logger.debug(
            f"Matched {len(result.tickers)} tickers ({result.method.value}): "
            f"{', '.join(result.tickers) or 'none'}"
        )
        return result
