"""
Shared fixtures for ticker matching tests.

A small Warsaw Stock Exchange registry: display names, legal names and the
kind of aliases the seeding tool produces.
"""

import pytest

from src.services.ticker_matching import MatcherConfig, TickerMatcher
from src.services.ticker_matching.adapters.memory import InMemoryRegistrySource
from src.services.ticker_matching.core.models import Alias, Entity
from src.services.ticker_matching.core.registry import RegistrySnapshot


@pytest.fixture
def entities():
    """Registry companies."""
    return [
        Entity(ticker="PKN", name="Orlen", official_name="Orlen S.A."),
        Entity(ticker="CDR", name="CD Projekt", official_name="CD Projekt S.A."),
        Entity(ticker="KGH", name="KGHM Polska Miedź", official_name="KGHM Polska Miedź S.A."),
        Entity(ticker="ALE", name="Allegro.eu"),
        Entity(ticker="PZU", name="PZU", official_name="Powszechny Zakład Ubezpieczeń S.A."),
        Entity(ticker="LPP", name="LPP"),
    ]


@pytest.fixture
def aliases():
    """Registry aliases (mixed case, as stored upstream)."""
    return [
        Alias(ticker="PKN", alias="orlen"),
        Alias(ticker="CDR", alias="cd projekt red"),
        Alias(ticker="CDR", alias="cdprojekt"),
        Alias(ticker="KGH", alias="kghm"),
        Alias(ticker="ALE", alias="allegro"),
        Alias(ticker="PZU", alias="pzu"),
        Alias(ticker="LPP", alias="reserved"),
    ]


@pytest.fixture
def source(entities, aliases):
    """In-memory registry source."""
    return InMemoryRegistrySource(entities, aliases)


@pytest.fixture
def snapshot(entities, aliases):
    """Prebuilt registry snapshot."""
    return RegistrySnapshot.build(entities, aliases)


@pytest.fixture
def config():
    """Default matcher configuration, isolated from the environment."""
    return MatcherConfig(_env_file=None)


@pytest.fixture
def matcher(source, config):
    """Matcher over the sample registry."""
    return TickerMatcher(source, config)
