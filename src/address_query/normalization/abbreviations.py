"""
Street-type and directional abbreviation lookups.

The table maps a canonical word ("drive") to every recognised spelling of it
("drive", "dr", "dr.") and keeps the inverse index for abbreviation → canonical
lookups. One instance, ``DEFAULT_TABLE``, is built at import time from the
static mappings and shared read-only by the parser, the variant expander and
the search layer. Tests and callers may construct their own table and pass it
in through the ``table`` argument those functions accept.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from address_query.config.mappings.street_abbreviations import (
    direction_variants,
    street_type_variants,
)


class AbbreviationConflictError(ValueError):
    """A surface form is claimed by two canonical words."""


def normalize_word(word: str) -> str:
    """Lower-case, trim and drop a single trailing period: 'Dr.' -> 'dr'."""
    word = word.strip().lower()
    if word.endswith("."):
        word = word[:-1]
    return word


class AbbreviationTable:
    def __init__(
        self,
        street_types: Mapping[str, Iterable[str]],
        directionals: Mapping[str, Iterable[str]],
    ):
        overlap = set(map(normalize_word, street_types)) & set(
            map(normalize_word, directionals)
        )
        if overlap:
            raise AbbreviationConflictError(
                f"Words registered as both street type and directional: {sorted(overlap)}"
            )

        variants: Dict[str, Tuple[str, ...]] = {}
        reverse: Dict[str, str] = {}

        for canonical, forms in list(street_types.items()) + list(directionals.items()):
            canonical = normalize_word(canonical)
            forms = tuple(f.lower() for f in forms)
            if canonical not in forms:
                forms = (canonical,) + forms
            variants[canonical] = forms

            for form in forms:
                key = normalize_word(form)
                owner = reverse.setdefault(key, canonical)
                if owner != canonical:
                    raise AbbreviationConflictError(
                        f"'{form}' maps to both '{owner}' and '{canonical}'"
                    )

        self._variants = MappingProxyType(variants)
        self._reverse = MappingProxyType(reverse)
        self._directionals = frozenset(normalize_word(w) for w in directionals)

    def variants_of(self, word: str) -> List[str]:
        """
        All surface forms of the canonical word behind ``word``.

        Unknown words come back unchanged as a one-element list.
        """
        canonical = self.canonical_of(word)
        if canonical is None:
            return [word]
        return list(self._variants[canonical])

    def canonical_of(self, word: str) -> Optional[str]:
        return self._reverse.get(normalize_word(word))

    def is_street_type_word(self, word: str) -> bool:
        # Directionals count too; the parser uses this as the street/city boundary.
        return normalize_word(word) in self._reverse

    def is_directional(self, canonical_word: str) -> bool:
        return normalize_word(canonical_word) in self._directionals

    def __contains__(self, word: str) -> bool:
        return self.is_street_type_word(word)

    @property
    def canonical_words(self) -> Tuple[str, ...]:
        return tuple(self._variants)


DEFAULT_TABLE = AbbreviationTable(street_type_variants, direction_variants)
