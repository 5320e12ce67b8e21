"""
Search-string rewriting.

Stored addresses mix "Westerfield Dr" and "Westerfield Drive", so a query is
tried in every spelling its street-type and directional words allow. This
module produces those spellings, plus two smaller rewrites the search layer
falls back on: expanding the street type in place and dropping the house
number.
"""

import logging
import string
from typing import List

from address_query.config.settings import SEARCH_CONFIG
from address_query.normalization.abbreviations import DEFAULT_TABLE, AbbreviationTable

logger = logging.getLogger(__name__)

DIRECTIONAL_PREFIX_WINDOW = SEARCH_CONFIG.get("directional_prefix_window", 3)


def _substitutions(words: List[str], index: int, forms: List[str]) -> List[str]:
    out = []
    for form in forms:
        new_words = list(words)
        new_words[index] = form
        out.append(" ".join(new_words))
    return out


def expand_variants(query: str, table: AbbreviationTable = DEFAULT_TABLE) -> List[str]:
    """
    Every spelling of ``query`` worth searching for.

    The last and second-to-last words are swapped for each spelling of their
    street type ("123 main st unit 5" has the type second from the end), and
    directionals among the first three words are swapped the same way
    ("n main st" -> "north main st").

    Returns:
        Distinct lower-cased strings, the original query first, then in the
        order they were generated. Never empty.
    """
    lowered = query.lower()
    words = lowered.split()
    if not words:
        return [lowered]

    variants = {lowered: None}

    positions = [len(words) - 1]
    if len(words) >= 2:
        positions.append(len(words) - 2)
    for i in positions:
        forms = table.variants_of(words[i])
        if len(forms) > 1:
            variants.update(dict.fromkeys(_substitutions(words, i, forms)))

    for i in range(min(len(words), DIRECTIONAL_PREFIX_WINDOW)):
        canonical = table.canonical_of(words[i])
        if canonical is not None and table.is_directional(canonical):
            forms = table.variants_of(canonical)
            if len(forms) > 1:
                variants.update(dict.fromkeys(_substitutions(words, i, forms)))

    logger.debug(f"{len(variants)} variants for {query!r}")
    return list(variants)


def expand_query(query: str, table: AbbreviationTable = DEFAULT_TABLE) -> str:
    """
    Spell out the street type: "7 westerfield dr" -> "7 westerfield drive".

    Only the last word, or failing that the second-to-last, is expanded.
    The query is returned untouched when neither is a known abbreviation.
    """
    words = query.lower().split()
    if not words:
        return query

    positions = [len(words) - 1]
    if len(words) >= 2:
        positions.append(len(words) - 2)
    for i in positions:
        canonical = table.canonical_of(words[i])
        if canonical is not None:
            words[i] = canonical
            return " ".join(words)
    return query


def street_only_query(query: str) -> str:
    """
    Drop a leading house number so the street can be searched on its own.

    "8 Prestige Plaza, Miamisburg OH" -> "Prestige Plaza, Miamisburg OH"

    A first word counts as a house number when it starts with a digit and at
    least half its characters are digits ("123", "456B", "100-102").
    """
    words = query.strip().split()
    if len(words) < 2:
        return query.strip()

    first = words[0]
    digits = sum(c in string.digits for c in first)
    if first[0] in string.digits and digits >= len(first) // 2:
        return " ".join(words[1:])
    return query.strip()
