"""
Company Name Matching (Layer 3)

Plain substring search for display names and official (legal) names.
Catches mentions written out in full where no alias or symbol is present.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Entity, Hit, MatchEvidence, MatchMethod
from .ranking import merge_hits

MIN_NAME_LENGTH = 5
NAME_CONFIDENCE = 0.70
OFFICIAL_NAME_CONFIDENCE = 0.75
TITLE_BONUS = 0.05


def match_company_names(
    title: str,
    body: str,
    entities: Iterable[Entity],
    min_length: int = MIN_NAME_LENGTH,
    name_confidence: float = NAME_CONFIDENCE,
    official_name_confidence: float = OFFICIAL_NAME_CONFIDENCE,
    title_bonus: float = TITLE_BONUS,
) -> dict[str, Hit]:
    """
    Find registered company names in title and body.

    Names shorter than ``min_length`` are skipped as too ambiguous. Official
    names score higher than display names.

    Returns:
        Best hit per ticker
    """
    title_lower = title.lower()
    body_lower = body.lower()
    result: dict[str, Hit] = {}

    for entity in entities:
        checks = [(entity.name.lower(), name_confidence)]
        if entity.official_name:
            checks.append((entity.official_name.lower(), official_name_confidence))

        for name, base in checks:
            if len(name) < min_length:
                continue

            title_pos = title_lower.find(name)
            body_pos = body_lower.find(name)
            if title_pos < 0 and body_pos < 0:
                continue

            in_title = title_pos >= 0
            conf = round(base + (title_bonus if in_title else 0.0), 4)
            evidence = MatchEvidence(
                method=MatchMethod.COMPANY_NAME,
                matched=name,
                ticker=entity.ticker,
                position=title_pos if in_title else body_pos,
                in_title=in_title,
            )
            merge_hits(result, entity.ticker, Hit(confidence=conf, evidence=evidence))

    return result
