"""
Alias Matching (Layer 2)

Whole-word matching of the alias dictionary against title and body.
Aliases are tried longest-first so specific strings are evaluated before
short, ambiguous ones.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence, Set
from dataclasses import dataclass
from re import Pattern

from .models import Alias, Hit, MatchEvidence, MatchMethod
from .ranking import merge_hits

logger = logging.getLogger(__name__)

MIN_ALIAS_LENGTH = 4
MAX_ALIAS_TICKERS = 8
TITLE_BONUS = 0.05
CONFIDENCE_CEILING = 0.95


@dataclass(frozen=True)
class CompiledAlias:
    """Alias with its precompiled word-boundary regex."""

    ticker: str
    alias: str
    pattern: Pattern[str]


def compile_aliases(
    aliases: Iterable[Alias],
    valid_tickers: Set[str],
    min_length: int = MIN_ALIAS_LENGTH,
) -> tuple[CompiledAlias, ...]:
    """
    Filter, order and compile aliases for matching.

    Drops aliases shorter than ``min_length`` (those are only trusted via
    explicit symbol patterns) and aliases whose ticker is unknown.
    An alias matches only where it is not glued to a neighbouring word
    character, so aliases ending in punctuation ("orlen s.a.") still match
    before a space, a comma or the end of the text.

    Returns:
        Compiled aliases, longest first
    """
    usable = [
        a for a in aliases if len(a.alias) >= min_length and a.ticker in valid_tickers
    ]
    usable.sort(key=lambda a: len(a.alias), reverse=True)

    return tuple(
        CompiledAlias(
            ticker=a.ticker,
            alias=a.alias,
            pattern=re.compile(rf"(?<!\w){re.escape(a.alias.lower())}(?!\w)", re.IGNORECASE),
        )
        for a in usable
    )


def alias_confidence(
    alias: str,
    in_title: bool,
    title_bonus: float = TITLE_BONUS,
    ceiling: float = CONFIDENCE_CEILING,
) -> float:
    """
    Confidence for an alias hit, scaled by alias length.

    > 8 chars: 0.90, 6-8 chars: 0.80, shorter: 0.70. Title hits get a bonus,
    capped at ``ceiling``.
    """
    length = len(alias)
    if length > 8:
        base = 0.90
    elif length > 5:
        base = 0.80
    else:
        base = 0.70

    if in_title:
        base += title_bonus
    return round(min(base, ceiling), 4)


def match_aliases(
    title: str,
    body: str,
    compiled: Sequence[CompiledAlias],
    max_tickers: int = MAX_ALIAS_TICKERS,
    title_bonus: float = TITLE_BONUS,
    ceiling: float = CONFIDENCE_CEILING,
) -> dict[str, Hit]:
    """
    Find alias mentions in title and body.

    Args:
        title: Headline text
        body: Body text
        compiled: Output of ``compile_aliases``
        max_tickers: Stop scanning once this many distinct tickers matched
        title_bonus: Added when the alias occurs in the title
        ceiling: Upper bound on alias confidence

    Returns:
        Best hit per ticker
    """
    result: dict[str, Hit] = {}

    for entry in compiled:
        title_match = entry.pattern.search(title) if title else None
        body_match = entry.pattern.search(body) if body else None
        if title_match is None and body_match is None:
            continue

        in_title = title_match is not None
        position = (title_match or body_match).start()

        evidence = MatchEvidence(
            method=MatchMethod.ALIAS,
            matched=entry.alias,
            ticker=entry.ticker,
            position=position,
            in_title=in_title,
        )
        conf = alias_confidence(entry.alias, in_title, title_bonus, ceiling)
        merge_hits(result, entry.ticker, Hit(confidence=conf, evidence=evidence))

        if len(result) >= max_tickers:
            logger.debug(f"Alias scan stopped after {len(result)} tickers")
            break

    return result
