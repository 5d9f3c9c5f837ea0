"""
Symbol Pattern Matching (Layer 1)

Recognizes explicit ticker mentions:
- ``$PKN``            dollar-prefixed symbol
- ``(CDR)``           parenthesized uppercase symbol
- ``GPW:PKN``         exchange-qualified symbol
- ``spółka PKN``      context word followed by an uppercase token

Every candidate is checked against the registry; this layer never returns a
ticker that is not in ``valid_tickers``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Set
from dataclasses import dataclass
from re import Pattern

from .models import Hit, MatchEvidence, MatchMethod
from .ranking import merge_hits

SYMBOL_CONFIDENCE = 0.95
CONTEXT_CONFIDENCE = 0.90

# Polish for ticker, company, share(s), price, securities, shareholder
DEFAULT_CONTEXT_WORDS: tuple[str, ...] = (
    "ticker",
    "spółka",
    "spólka",
    "akcje",
    "akcja",
    "kurs",
    "walory",
    "akcjonariusz",
)
DEFAULT_EXCHANGE_PREFIXES: tuple[str, ...] = ("GPW",)

_DOLLAR_RE = re.compile(r"\$([A-Za-z]{2,10})\b")
_PAREN_RE = re.compile(r"\(([A-Z]{2,10})\)")


@dataclass(frozen=True)
class PatternSet:
    """Compiled exchange and context-word patterns."""

    exchanges: tuple[tuple[str, Pattern[str]], ...]
    contexts: tuple[tuple[str, Pattern[str]], ...]


def compile_patterns(
    context_words: Iterable[str] = DEFAULT_CONTEXT_WORDS,
    exchange_prefixes: Iterable[str] = DEFAULT_EXCHANGE_PREFIXES,
) -> PatternSet:
    """
    Compile the configurable vocabularies into regexes.

    Exchange prefixes and context words match case-insensitively; the symbol
    after a context word must be uppercase.
    """
    exchanges = tuple(
        (
            prefix.upper(),
            re.compile(rf"{re.escape(prefix)}:([A-Za-z]{{2,10}})\b", re.IGNORECASE),
        )
        for prefix in exchange_prefixes
        if prefix
    )
    contexts = tuple(
        (
            word.lower(),
            re.compile(rf"(?i:\b{re.escape(word)})\s+([A-Z]{{2,10}})\b"),
        )
        for word in context_words
        if word
    )
    return PatternSet(exchanges=exchanges, contexts=contexts)


DEFAULT_PATTERNS = compile_patterns()


def match_patterns(
    title: str,
    body: str,
    valid_tickers: Set[str],
    patterns: PatternSet = DEFAULT_PATTERNS,
    symbol_confidence: float = SYMBOL_CONFIDENCE,
    context_confidence: float = CONTEXT_CONFIDENCE,
) -> dict[str, Hit]:
    """
    Find explicit ticker mentions in title and body.

    Args:
        title: Headline text
        body: Body text
        valid_tickers: Tickers known to the registry
        patterns: Compiled exchange/context vocabularies
        symbol_confidence: Confidence for $SYM, (SYM) and EXCHANGE:SYM
        context_confidence: Confidence for context-word matches

    Returns:
        Best hit per ticker
    """
    result: dict[str, Hit] = {}

    def add(ticker: str, matched: str, position: int, in_title: bool, conf: float) -> None:
        if ticker not in valid_tickers:
            return
        evidence = MatchEvidence(
            method=MatchMethod.PATTERN,
            matched=matched,
            ticker=ticker,
            position=position,
            in_title=in_title,
        )
        merge_hits(result, ticker, Hit(confidence=conf, evidence=evidence))

    for text, in_title in ((title, True), (body, False)):
        if not text:
            continue

        for m in _DOLLAR_RE.finditer(text):
            tk = m.group(1).upper()
            add(tk, f"${tk}", m.start(), in_title, symbol_confidence)

        for m in _PAREN_RE.finditer(text):
            tk = m.group(1)
            add(tk, f"({tk})", m.start(), in_title, symbol_confidence)

        for prefix, regex in patterns.exchanges:
            for m in regex.finditer(text):
                tk = m.group(1).upper()
                add(tk, f"{prefix}:{tk}", m.start(), in_title, symbol_confidence)

        for word, regex in patterns.contexts:
            for m in regex.finditer(text):
                tk = m.group(1)
                add(tk, f"{word} {tk}", m.start(), in_title, context_confidence)

    return result
