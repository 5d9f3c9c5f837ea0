"""
Ticker Matching Models

Data classes for registry rows, match evidence and match results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Bump when matching rules change so stored results can be re-processed.
MATCHER_VERSION = 1


class MatchMethod(str, Enum):
    """Layer that produced a piece of evidence."""

    PATTERN = "pattern"
    ALIAS = "alias"
    COMPANY_NAME = "company_name"


class ResolutionMethod(str, Enum):
    """Overall outcome of a resolution call."""

    DETERMINISTIC = "deterministic"
    AI_NEEDED = "ai_needed"


@dataclass(frozen=True)
class Entity:
    """
    A tradable company from the registry.
    """

    ticker: str  # Primary key, e.g. "PKN"
    name: str  # Display name, e.g. "Orlen"
    official_name: str | None = None  # Legal name, e.g. "Orlen S.A."


@dataclass(frozen=True)
class Alias:
    """Alternate surface form for a ticker (brand, short name, acronym)."""

    ticker: str
    alias: str


@dataclass(frozen=True)
class MatchEvidence:
    """
    One matcher's record of why and where a ticker was found.
    """

    method: MatchMethod
    matched: str  # Substring or registry string that triggered the match
    ticker: str
    position: int  # Character offset in the text where it was found
    in_title: bool

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "method": self.method.value,
            "matched": self.matched,
            "ticker": self.ticker,
            "position": self.position,
            "in_title": self.in_title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MatchEvidence:
        """Create from dictionary."""
        return cls(
            method=MatchMethod(data["method"]),
            matched=data["matched"],
            ticker=data["ticker"],
            position=data.get("position", 0),
            in_title=data.get("in_title", False),
        )


@dataclass(frozen=True)
class Hit:
    """Best finding of a single layer for a single ticker."""

    confidence: float
    evidence: MatchEvidence


@dataclass(frozen=True)
class MatchResult:
    """
    Ranked outcome of resolving one text.

    ``tickers``, ``confidence`` and ``evidence`` are aligned: the i-th
    evidence record belongs to the i-th ticker.
    """

    tickers: tuple[str, ...] = ()
    confidence: dict[str, float] = field(default_factory=dict)
    method: ResolutionMethod = ResolutionMethod.AI_NEEDED
    evidence: tuple[MatchEvidence, ...] = ()

    @classmethod
    def ai_needed(cls) -> MatchResult:
        """Empty result telling the caller to escalate."""
        return cls()

    @property
    def is_deterministic(self) -> bool:
        return self.method == ResolutionMethod.DETERMINISTIC

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tickers": list(self.tickers),
            "confidence": dict(self.confidence),
            "method": self.method.value,
            "evidence": [e.to_dict() for e in self.evidence],
            "version": MATCHER_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MatchResult:
        """Create from dictionary."""
        return cls(
            tickers=tuple(data.get("tickers", [])),
            confidence=dict(data.get("confidence", {})),
            method=ResolutionMethod(data.get("method", ResolutionMethod.AI_NEEDED.value)),
            evidence=tuple(MatchEvidence.from_dict(e) for e in data.get("evidence", [])),
        )
