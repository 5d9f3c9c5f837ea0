"""Tests for company name matching."""

from __future__ import annotations

from src.services.ticker_matching.core.models import Entity, MatchMethod
from src.services.ticker_matching.core.names import match_company_names


class TestMatchCompanyNames:
    """Tests for display and official name substring search."""

    def test_display_name_in_title(self, entities) -> None:
        """A display name in the title gets base confidence plus bonus."""
        result = match_company_names("PKN Orlen ogłosił wyniki Q4", "", entities)

        hit = result["PKN"]
        assert hit.confidence == 0.75
        assert hit.evidence.method == MatchMethod.COMPANY_NAME
        assert hit.evidence.matched == "orlen"
        assert hit.evidence.position == 4
        assert hit.evidence.in_title is True

    def test_display_name_in_body(self, entities) -> None:
        """Body-only mentions get no title bonus."""
        result = match_company_names("Rynek", "Zarząd CD Projekt potwierdził", entities)

        assert result["CDR"].confidence == 0.70
        assert result["CDR"].evidence.in_title is False
        assert result["CDR"].evidence.position == 7

    def test_official_name_scores_higher(self, entities) -> None:
        """An official name match beats the display name match."""
        result = match_company_names("CD Projekt S.A. publikuje raport", "", entities)

        assert result["CDR"].confidence == 0.80
        assert result["CDR"].evidence.matched == "cd projekt s.a."

    def test_official_name_only(self, entities) -> None:
        """An official name can match when the display name is too short."""
        result = match_company_names(
            "", "Powszechny Zakład Ubezpieczeń S.A. wypłaci dywidendę", entities
        )

        assert result["PZU"].confidence == 0.75

    def test_short_names_skipped(self, entities) -> None:
        """Names under five characters are never matched."""
        result = match_company_names("PZU i LPP rosną", "", entities)

        assert result == {}

    def test_case_insensitive(self, entities) -> None:
        """Matching ignores case."""
        result = match_company_names("KGHM POLSKA MIEDŹ tnie koszty", "", entities)

        assert "KGH" in result

    def test_substring_without_word_boundary(self) -> None:
        """Names are matched as plain substrings."""
        entities = [Entity(ticker="DNP", name="Dino Polska")]

        result = match_company_names("", "superdino polska", entities)

        assert "DNP" in result

    def test_custom_confidences(self, entities) -> None:
        """Configured confidences are applied."""
        result = match_company_names(
            "Orlen",
            "",
            entities,
            name_confidence=0.5,
            title_bonus=0.2,
        )

        assert result["PKN"].confidence == 0.7

    def test_no_match(self, entities) -> None:
        """Unrelated text yields nothing."""
        assert match_company_names("Pogoda na weekend", "Słonecznie", entities) == {}
