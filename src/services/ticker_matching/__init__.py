"""
Ticker Matching Service

Deterministic resolution of company mentions in news headlines, article
bodies and filing titles to registry tickers, with confidence and evidence.

Usage:
    # As a CLI
    python -m src.services.ticker_matching resolve --title "..." --registry-file registry.json

    # Programmatic
    from src.services.ticker_matching import TickerMatcher, InMemoryRegistrySource

    matcher = TickerMatcher(source)
    await matcher.populate_cache()
    result = await matcher.resolve(title, body)
"""

__version__ = "0.1.0"

from .adapters.memory import InMemoryRegistrySource
from .config import MatcherConfig
from .core.models import (
    MATCHER_VERSION,
    Alias,
    Entity,
    MatchEvidence,
    MatchMethod,
    MatchResult,
    ResolutionMethod,
)
from .matcher import TickerMatcher

__all__ = [
    "MATCHER_VERSION",
    "Alias",
    "Entity",
    "InMemoryRegistrySource",
    "MatchEvidence",
    "MatchMethod",
    "MatchResult",
    "MatcherConfig",
    "ResolutionMethod",
    "TickerMatcher",
]
