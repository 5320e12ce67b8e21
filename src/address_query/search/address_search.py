"""
Address search against a PostgreSQL address table.

This is the only part of the package that talks to a database. It strings the
pure pieces together the way a lookup endpoint uses them:

1. strip unit designators ('#F', 'Apt 2B') from the query,
2. decompose it and try progressively looser component matches
   (house + street + city + zip down to street only),
3. if nothing matched, search ``full_address`` for every spelling variant,
   with a street-only fallback when the query starts with a house number.

All SQL is built with '%s' placeholders; user text is only ever a parameter.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import logging

import psycopg2

from address_query.config.settings import SEARCH_CONFIG
from address_query.normalization.abbreviations import DEFAULT_TABLE, AbbreviationTable
from address_query.normalization.address_parser import ParsedAddress, decompose
from address_query.normalization.query_variants import expand_variants, street_only_query
from address_query.normalization.unit_designators import strip_unit_designator
from address_query.search.predicate import build_predicate

logger = logging.getLogger(__name__)

ADDRESS_COLUMNS = (
    "id",
    "house_number",
    "street",
    "unit",
    "city",
    "district",
    "region",
    "postcode",
    "county",
    "full_address",
)
SELECT_COLUMNS = ", ".join(ADDRESS_COLUMNS)

DEFAULT_LIMIT = SEARCH_CONFIG.get("default_limit", 50)
MAX_LIMIT = SEARCH_CONFIG.get("max_limit", 500)
TABLE_NAME = SEARCH_CONFIG.get("table_name", "addresses")


class AddressSearchError(RuntimeError):
    """A database call made by the search layer failed."""


@dataclass(frozen=True)
class SearchTier:
    name: str
    where_sql: str
    params: Tuple[Any, ...]
    exact: bool


@dataclass
class AddressSearchResult:
    original_query: str
    addresses: List[Dict[str, Any]] = field(default_factory=list)
    exact_count: int = 0
    fallback_count: int = 0
    fallback_query: str = ""
    parsed: Optional[ParsedAddress] = None
    search_method: str = ""


def clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit <= 0:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def _any_ilike(column: str, values: Sequence[str]) -> Tuple[str, List[str]]:
    clause = " OR ".join(f"{column} ILIKE %s" for _ in values)
    return f"({clause})", [f"%{v}%" for v in values]


# ─────────────────────────────────────────────────────────────────────────────
# Tier construction (pure)
# ─────────────────────────────────────────────────────────────────────────────


def build_component_tiers(
    parsed: ParsedAddress,
    table: AbbreviationTable = DEFAULT_TABLE,
) -> List[SearchTier]:
    """
    Ordered component queries, most specific first.

    Tiers that still require the house number are 'exact'; the rest find
    nearby addresses on the same street or in the same city.
    """
    tiers: List[SearchTier] = []
    house, city, zip_code = parsed.house_number, parsed.city, parsed.zip

    if parsed.street:
        street_sql, street_params = _any_ilike("street", expand_variants(parsed.street, table))

        def add(name: str, with_house: bool, extra: List[Tuple[str, Any]]) -> None:
            clauses, params = [street_sql], list(street_params)
            if with_house:
                clauses.insert(0, "house_number = %s")
                params.insert(0, house)
            for clause, value in extra:
                clauses.append(clause)
                params.append(value)
            tiers.append(SearchTier(name, " AND ".join(clauses), tuple(params), with_house))

        city_c = ("city ILIKE %s", city)
        zip_c = ("postcode = %s", zip_code)

        if house and city and zip_code:
            add("house_street_city_zip", True, [city_c, zip_c])
        if house and city:
            add("house_street_city", True, [city_c])
        if house:
            add("house_street", True, [])
        if city:
            add("street_city", False, [city_c])
        if zip_code:
            add("street_zip", False, [zip_c])
        add("street", False, [])

    if city and zip_code:
        tiers.append(
            SearchTier("city_zip", "city ILIKE %s AND postcode = %s", (city, zip_code), False)
        )

    return tiers


def compile_tier_query(tiers: Sequence[SearchTier], limit: int) -> Tuple[str, List[Any]]:
    """
    One statement: each tier as a CTE excluding ids found by earlier tiers,
    unioned and ordered by tier.
    """
    ctes = []
    selects = []
    exclusions: List[str] = []
    params: List[Any] = []

    for n, tier in enumerate(tiers, start=1):
        name = f"tier{n}"
        where = tier.where_sql
        if exclusions:
            where = f"{where} AND " + " AND ".join(exclusions)
        ctes.append(
            f"{name} AS (SELECT {SELECT_COLUMNS}, {n} AS tier FROM {TABLE_NAME} "
            f"WHERE {where} LIMIT {int(limit)})"
        )
        selects.append(f"SELECT * FROM {name}")
        exclusions.append(f"id NOT IN (SELECT id FROM {name})")
        params.extend(tier.params)

    sql = (
        f"WITH {', '.join(ctes)} "
        f"SELECT {SELECT_COLUMNS}, tier FROM ({' UNION ALL '.join(selects)}) combined "
        f"ORDER BY tier, full_address LIMIT %s"
    )
    params.append(int(limit))
    return sql, params


# ─────────────────────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────────────────────


class AddressSearchService:
    def __init__(self, conn, table: AbbreviationTable = DEFAULT_TABLE):
        self.conn = conn
        self.table = table

    def _fetch(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                names = [d[0] for d in cur.description]
                return [dict(zip(names, row)) for row in cur.fetchall()]
        except psycopg2.Error as err:
            logger.error(f"Address query failed: {err}")
            raise AddressSearchError(f"failed to execute address query: {err}") from err

    def search(self, query: str, limit: Optional[int] = None) -> AddressSearchResult:
        """
        Component search first, full-address variant search as the fallback.

        A failed component query is logged and treated as no match. Only a
        failure of the full-address search raises ``AddressSearchError``.
        """
        limit = clamp_limit(limit)
        result = AddressSearchResult(original_query=query)

        query = query.strip() if isinstance(query, str) else ""
        if not query:
            return result

        query = strip_unit_designator(query)
        parsed = decompose(query, self.table)
        result.parsed = parsed

        if parsed.street or parsed.city or parsed.zip:
            tiers = build_component_tiers(parsed, self.table)
            if tiers:
                sql, params = compile_tier_query(tiers, limit)
                try:
                    rows = self._fetch(sql, params)
                except AddressSearchError:
                    logger.warning(f"Component search failed for {query!r}; using full-address search")
                    rows = []
                if rows:
                    exact = {n for n, t in enumerate(tiers, start=1) if t.exact}
                    for row in rows:
                        if row.pop("tier", None) in exact:
                            result.exact_count += 1
                        else:
                            result.fallback_count += 1
                    result.addresses = rows
                    result.search_method = "component"
                    if result.fallback_count:
                        result.fallback_query = "nearby addresses (street/city match)"
                    logger.debug(
                        f"Component search for {query!r}: "
                        f"{result.exact_count} exact, {result.fallback_count} nearby"
                    )
                    return result

        result.search_method = "fulltext"
        fallback = street_only_query(query)

        if not fallback or fallback == query:
            rows = self._variant_search(query, limit)
            result.addresses = rows
            result.exact_count = len(rows)
            return result

        rows = self._search_with_fallback(query, fallback, limit)
        for row in rows:
            if row.pop("priority", 1) == 1:
                result.exact_count += 1
            else:
                result.fallback_count += 1
        result.addresses = rows
        if result.fallback_count:
            result.fallback_query = fallback
        return result

    def _variant_search(self, query: str, limit: int) -> List[Dict[str, Any]]:
        where, params = _any_ilike("full_address", expand_variants(query, self.table))
        sql = (
            f"SELECT {SELECT_COLUMNS} FROM {TABLE_NAME} WHERE {where} "
            f"ORDER BY CASE WHEN full_address ILIKE %s THEN 1 ELSE 2 END, full_address "
            f"LIMIT %s"
        )
        return self._fetch(sql, params + [f"%{query}%", limit])

    def _search_with_fallback(self, query: str, fallback: str, limit: int) -> List[Dict[str, Any]]:
        exact_where, exact_params = _any_ilike("full_address", expand_variants(query, self.table))
        fb_where, fb_params = _any_ilike("full_address", expand_variants(fallback, self.table))
        sql = (
            f"WITH exact_matches AS ("
            f"SELECT {SELECT_COLUMNS}, 1 AS priority FROM {TABLE_NAME} WHERE {exact_where}), "
            f"fallback_matches AS ("
            f"SELECT {SELECT_COLUMNS}, 2 AS priority FROM {TABLE_NAME} WHERE {fb_where} "
            f"AND id NOT IN (SELECT id FROM exact_matches)) "
            f"SELECT * FROM (SELECT * FROM exact_matches UNION ALL SELECT * FROM fallback_matches) combined "
            f"ORDER BY priority, full_address LIMIT %s"
        )
        return self._fetch(sql, exact_params + fb_params + [limit])

    def filter_search(
        self,
        query: str = "",
        county: str = "",
        city: str = "",
        postcode: str = "",
        street: str = "",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Multi-field word search plus optional column filters.

        Returns:
            (page of rows ordered by relevance, total matching rows)
        """
        limit = clamp_limit(limit)
        predicate = build_predicate(strip_unit_designator(query or ""))

        conditions: List[str] = []
        params: List[Any] = []
        if not predicate.matches_everything:
            where, where_params = predicate.to_sql()
            conditions.append(where)
            params.extend(where_params)
        for column, value, exact in (
            ("county", county, False),
            ("city", city, False),
            ("postcode", postcode, True),
            ("street", street, False),
        ):
            if value:
                if exact:
                    conditions.append(f"{column} = %s")
                    params.append(value)
                else:
                    conditions.append(f"{column} ILIKE %s")
                    params.append(f"%{value}%")

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        total_rows = self._fetch(f"SELECT COUNT(*) AS total FROM {TABLE_NAME} {where_clause}", params)
        total = total_rows[0]["total"] if total_rows else 0

        score_sql, score_params = predicate.relevance_sql()
        order = "ORDER BY relevance_score DESC, county, city, street, house_number"
        sql = (
            f"SELECT {SELECT_COLUMNS}, {score_sql} AS relevance_score FROM {TABLE_NAME} "
            f"{where_clause} {order} LIMIT %s OFFSET %s"
        )
        rows = self._fetch(sql, score_params + params + [limit, max(int(offset), 0)])
        return rows, total
