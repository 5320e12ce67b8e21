"""
Token-conjunctive, field-disjunctive match predicates.

Every whitespace-separated word of a query must appear somewhere in a record,
but each word may be found in a different column: "Oakley 2525" matches a
record whose city is Oakley and whose house number is 2525. The predicate is
data (patterns + column list); ``to_sql`` renders it with placeholders so the
words only ever travel as bound parameters.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from address_query.config.settings import RELEVANCE_WEIGHTS, TARGET_FIELDS

# Concatenated house number + street, as named in TARGET_FIELDS.
HOUSE_AND_STREET = "house_number || ' ' || street"


def _wildcard(word: str) -> str:
    return f"%{word}%"


@dataclass(frozen=True)
class SearchPredicate:
    patterns: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = field(default=TARGET_FIELDS)

    @property
    def matches_everything(self) -> bool:
        return not self.patterns

    @property
    def words(self) -> Tuple[str, ...]:
        return tuple(p[1:-1] for p in self.patterns)

    def to_sql(self) -> Tuple[str, List[str]]:
        """
        Render as a WHERE fragment with psycopg2 '%s' placeholders.

        Returns:
            (sql, params): one parenthesised OR group per word, joined by AND.
            An empty predicate renders as 'TRUE' with no params.
        """
        if self.matches_everything:
            return "TRUE", []

        groups = []
        params: List[str] = []
        for pattern in self.patterns:
            ors = " OR ".join(f"({col}) ILIKE %s" for col in self.fields)
            groups.append(f"({ors})")
            params.extend([pattern] * len(self.fields))
        return " AND ".join(groups), params

    def relevance_sql(self, weights: Optional[Mapping[str, int]] = None) -> Tuple[str, List[str]]:
        """
        Ranking expression: per word, the weight of the best column it hits.

        The first matching column in ``weights`` order wins for each word and
        the per-word scores are summed.
        """
        weights = weights or RELEVANCE_WEIGHTS
        if self.matches_everything:
            return "0", []

        cases = []
        params: List[str] = []
        for pattern in self.patterns:
            whens = " ".join(f"WHEN ({col}) ILIKE %s THEN {int(w)}" for col, w in weights.items())
            cases.append(f"(CASE {whens} ELSE 0 END)")
            params.extend([pattern] * len(weights))
        return " + ".join(cases), params

    def matches(self, record: Mapping[str, Any]) -> bool:
        """Evaluate in memory against a row dict keyed by column name."""
        values = [_field_value(record, col).lower() for col in self.fields]
        return all(
            any(word.lower() in v for v in values)
            for word in self.words
        )


def _field_value(record: Mapping[str, Any], column: str) -> str:
    if column == HOUSE_AND_STREET:
        return f"{record.get('house_number') or ''} {record.get('street') or ''}"
    value = record.get(column)
    return "" if value is None else str(value)


def build_predicate(query: str, fields: Tuple[str, ...] = TARGET_FIELDS) -> SearchPredicate:
    """
    One wildcard pattern per whitespace-separated word of ``query``.

    An empty or blank query yields a predicate that matches every record.
    """
    words = query.split() if isinstance(query, str) else []
    return SearchPredicate(
        patterns=tuple(_wildcard(w) for w in words),
        fields=tuple(fields),
    )
