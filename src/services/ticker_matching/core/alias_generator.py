"""
Alias Generation

Builds alias rows for a company from its ticker and registered name, used to
seed the ``ticker_aliases`` table. Common words, currencies, indices and
ambiguous abbreviations are never emitted.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

# Aliases that match unrelated articles far more often than the company
# fmt: off
BLACKLIST: frozenset[str] = frozenset(
    {
        # Common Polish words
        "text", "bank", "dom", "art", "eco", "net", "bit", "pro", "med",
        "lab", "era", "one", "now", "act", "fast", "data", "tech",
        "soft", "work", "fund", "star", "idea", "nova", "agro", "auto",
        "home", "life", "care", "time", "link", "line", "next",
        # Common English words
        "group", "capital", "energy", "power", "global", "trade", "first",
        "best", "real", "open", "core", "plus",
        # Generic corporate words
        "holding", "finance", "invest", "inwest", "euro",
        "polska", "polish", "polskie", "national", "towarzystwo",
        "spolka", "spólka", "spółka", "akcyjna", "limited", "investments",
        # Currencies, indices, institutions
        "msz", "nbp", "eur", "usd", "pln", "gbp", "chf", "jpy",
        "wig", "wig20", "mwig40", "swig80",
        # Ambiguous abbreviations
        "gs", "ab", "pcc", "ons", "ono",
    }
)
# fmt: on

# Leading words too generic to stand alone as a short name
SKIP_FIRST_WORDS: frozenset[str] = frozenset(
    {"bank", "grupa", "polska", "polskie", "towarzystwo", "fundusz", "first", "best"}
)

# Hand-maintained brand names for well-known companies
BRAND_OVERRIDES: dict[str, tuple[str, ...]] = {
    "PKN": ("orlen", "pkn orlen", "orlen sa"),
    "CDR": ("cd projekt", "cd projekt red", "cdprojekt"),
    "ALE": ("allegro", "allegro.eu"),
    "KGH": ("kghm", "kghm polska miedz", "kghm polska miedź"),
    "PZU": ("pzu sa", "powszechny zaklad ubezpieczen"),
    "PKO": ("pko bp", "pko bank polski"),
    "SPL": ("santander", "santander bank polska", "santander polska"),
    "MBK": ("mbank", "mbank sa", "bre bank"),
    "PEO": ("pekao", "bank pekao", "pekao sa"),
    "DNP": ("dino", "dino polska"),
    "LPP": ("reserved", "cropp", "mohito"),
    "CPS": ("cyfrowy polsat", "polsat", "cyfrowy polsat sa"),
    "ALR": ("amrest", "amrest holdings"),
    "JSW": ("jastrzebska spolka weglowa", "jastrzębska spółka węglowa"),
    "PCO": ("azoty police",),
    "ATT": ("azoty tarnów", "azoty tarno"),
    "INK": ("inpost", "inpost sa"),
    "XTB": ("x-trade brokers",),
    "TEN": ("ten square games", "tensquare"),
    "PLW": ("play communications", "play polska"),
    "VGO": ("vigo photonics", "vigo system"),
    "OPL": ("orange polska", "telekomunikacja polska"),
    "GTC": ("globe trade centre", "globe trade center"),
    "EMC": ("emc instytut medyczny",),
    "MRC": ("mercator medical",),
    "PKP": ("pkp cargo",),
    "GPW": ("giełda papierów wartościowych", "warsaw stock exchange"),
    "PGE": ("polska grupa energetyczna",),
    "TPE": ("tauron polska energia",),
    "BDX": ("budimex",),
    "DOM": ("dom development",),
    "ECH": ("echo investment",),
    "SNK": ("sanok rubber",),
}

_LETTERS_RE = re.compile(r"[a-zA-ZąćęłńóśźżĄĆĘŁŃÓŚŹŻ]{3,}")
_LEGAL_SUFFIX_RE = re.compile(
    r"\s+(S\.A\.|SA|S\.A|Spółka Akcyjna|Spolka Akcyjna|sp\. z o\.o\.|S\.K\.A\.|"
    r"ASI|SE|NV|PLC|Ltd\.?|GmbH|Inc\.?|Corp\.?|Co\.?)\.?\s*$",
    re.IGNORECASE,
)
_ACRONYM_SPLIT_RE = re.compile(r"[\s\-.]+")


@dataclass(frozen=True)
class GeneratedAlias:
    """Alias row ready for insertion into the registry."""

    ticker: str
    alias: str
    alias_type: str  # official_name | short_name | brand | abbreviation
    language: str = "pl"


def is_valid_alias(alias: str, ticker: str) -> bool:
    """
    Check whether a string is safe to use as an alias.

    Aliases of three characters or fewer are only allowed when they equal
    the ticker itself.
    """
    a = alias.strip().lower()
    if len(a) < 2:
        return False
    if a in BLACKLIST:
        return False
    if not _LETTERS_RE.search(a):
        return False
    if len(a) <= 3 and a != ticker.lower():
        return False
    return True


def strip_legal_suffix(name: str) -> str:
    """Remove a trailing legal form such as "S.A." or "sp. z o.o."."""
    return _LEGAL_SUFFIX_RE.sub("", name).strip()


def generate_aliases(
    ticker: str,
    name: str,
    overrides: Mapping[str, Sequence[str]] = BRAND_OVERRIDES,
) -> list[GeneratedAlias]:
    """
    Generate alias variants for one company.

    Order: ticker, full name, name without legal suffix, first significant
    word, name without leading "Grupa", acronym, brand overrides.

    Args:
        ticker: Company ticker
        name: Registered company name
        overrides: Brand names keyed by ticker

    Returns:
        Deduplicated, lower-cased alias rows
    """
    ticker = ticker.strip().upper()
    ticker_lower = ticker.lower()
    seen = {ticker_lower}
    aliases = [GeneratedAlias(ticker=ticker, alias=ticker_lower, alias_type="abbreviation")]

    def add(raw: str, alias_type: str) -> None:
        cleaned = raw.strip().lower()
        if not is_valid_alias(cleaned, ticker) or cleaned in seen:
            return
        seen.add(cleaned)
        aliases.append(GeneratedAlias(ticker=ticker, alias=cleaned, alias_type=alias_type))

    name = name.strip()
    add(name, "official_name")

    stripped = strip_legal_suffix(name)
    if stripped and stripped != name:
        add(stripped, "short_name")

    base_name = stripped or name

    words = base_name.split()
    if words and len(words[0]) >= 5 and words[0].lower() not in SKIP_FIRST_WORDS:
        add(words[0], "short_name")

    if base_name.lower().startswith("grupa "):
        without_grupa = base_name[6:]
        if len(without_grupa) >= 5:
            add(without_grupa, "short_name")

    parts = [w for w in _ACRONYM_SPLIT_RE.split(base_name) if len(w) > 1]
    if 2 <= len(parts) <= 4:
        acronym = "".join(w[0] for w in parts).lower()
        if len(acronym) >= 3 and acronym != ticker_lower:
            add(acronym, "abbreviation")

    for brand in overrides.get(ticker, ()):
        add(brand, "brand")

    return aliases
