"""
Evidence Merging and Ranking

Combines per-layer findings into one thresholded, bounded result.

Merge rule: per ticker, a hit replaces the current one only if its
confidence is strictly higher. On an exact tie the hit merged first is kept,
so the order in which layers are passed to ``merge_layers`` decides which
evidence record is visible. The matcher merges names, then aliases, then
patterns.
"""

from __future__ import annotations

from collections.abc import Mapping

from .models import Hit, MatchResult, ResolutionMethod

CONFIDENCE_THRESHOLD = 0.60
MAX_TICKERS = 5


def merge_hits(target: dict[str, Hit], ticker: str, hit: Hit) -> None:
    """Keep ``hit`` for ``ticker`` if it beats the current one."""
    existing = target.get(ticker)
    if existing is None or hit.confidence > existing.confidence:
        target[ticker] = hit


def merge_layers(*layers: Mapping[str, Hit]) -> dict[str, Hit]:
    """Reduce layer outputs, in the given order, into one map."""
    merged: dict[str, Hit] = {}
    for layer in layers:
        for ticker, hit in layer.items():
            merge_hits(merged, ticker, hit)
    return merged


def rank(
    merged: Mapping[str, Hit],
    threshold: float = CONFIDENCE_THRESHOLD,
    max_tickers: int = MAX_TICKERS,
    sort_ties_by_ticker: bool = False,
) -> MatchResult:
    """
    Filter, sort and truncate merged hits.

    Args:
        merged: Best hit per ticker
        threshold: Minimum confidence to keep a ticker
        max_tickers: Maximum number of tickers returned
        sort_ties_by_ticker: Order equal-confidence tickers alphabetically
            instead of by merge order

    Returns:
        ``deterministic`` result, or the ``ai_needed`` sentinel when nothing
        passes the threshold
    """
    qualified = [(t, h) for t, h in merged.items() if h.confidence >= threshold]

    if sort_ties_by_ticker:
        qualified.sort(key=lambda item: (-item[1].confidence, item[0]))
    else:
        # Stable: equal confidences keep merge insertion order
        qualified.sort(key=lambda item: item[1].confidence, reverse=True)

    qualified = qualified[:max_tickers]

    if not qualified:
        return MatchResult.ai_needed()

    return MatchResult(
        tickers=tuple(t for t, _ in qualified),
        confidence={t: h.confidence for t, h in qualified},
        method=ResolutionMethod.DETERMINISTIC,
        evidence=tuple(h.evidence for _, h in qualified),
    )
