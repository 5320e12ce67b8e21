import psycopg2
import pytest

from address_query.normalization.address_parser import decompose
from address_query.search.address_search import (
    ADDRESS_COLUMNS,
    AddressSearchError,
    AddressSearchService,
    build_component_tiers,
    clamp_limit,
    compile_tier_query,
)

# ─────────────────────────────────────────────────────────
# Fake DB-API connection
# ─────────────────────────────────────────────────────────


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params):
        self.conn.executed.append((sql, params))
        error = self.conn.errors.pop(0) if self.conn.errors else self.conn.error
        if error is not None:
            raise error
        columns, rows = self.conn.results.pop(0) if self.conn.results else (ADDRESS_COLUMNS, [])
        self.description = [(c,) for c in columns]
        self._rows = rows

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, results=None, error=None, errors=None):
        self.results = list(results or [])
        self.error = error
        self.errors = list(errors or [])
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


def address_row(id_, full_address, extra=()):
    return (id_, "20", "OVERBROOK CT", None, "MONROE", "BU", "OH", "45050", "BUTLER", full_address) + tuple(extra)


# ─────────────────────────────────────────────────────────
# Pure helpers
# ─────────────────────────────────────────────────────────


def test_clamp_limit():
    assert clamp_limit(None) == 50
    assert clamp_limit(0) == 50
    assert clamp_limit(-3) == 50
    assert clamp_limit(20) == 20
    assert clamp_limit(1000) == 500


def test_component_tiers_for_full_address():
    tiers = build_component_tiers(decompose("20 Overbrook Ct, Monroe, OH 45050"))

    assert [t.name for t in tiers] == [
        "house_street_city_zip",
        "house_street_city",
        "house_street",
        "street_city",
        "street_zip",
        "street",
        "city_zip",
    ]
    assert [t.exact for t in tiers] == [True, True, True, False, False, False, False]
    assert tiers[0].params == (
        "20",
        "%overbrook ct%",
        "%overbrook court%",
        "%overbrook ct.%",
        "Monroe",
        "45050",
    )
    for tier in tiers:
        assert tier.where_sql.count("%s") == len(tier.params)


def test_component_tiers_need_street_or_city_and_zip():
    assert build_component_tiers(decompose("Monroe")) == []
    tiers = build_component_tiers(decompose("Monroe OH 45050"))
    assert [t.name for t in tiers] == ["city_zip"]


def test_compile_tier_query_excludes_earlier_tiers():
    tiers = build_component_tiers(decompose("7 westerfield dr"))
    sql, params = compile_tier_query(tiers, 25)

    assert "id NOT IN (SELECT id FROM tier1)" in sql
    assert sql.count("%s") == len(params)
    assert params[-1] == 25
    assert "westerfield" not in sql


# ─────────────────────────────────────────────────────────
# AddressSearchService.search
# ─────────────────────────────────────────────────────────


def test_search_returns_component_matches():
    conn = FakeConnection(
        results=[
            (
                ADDRESS_COLUMNS + ("tier",),
                [
                    address_row(1, "20 Overbrook Court, Monroe, OH 45050", (1,)),
                    address_row(2, "22 Overbrook Court, Monroe, OH 45050", (4,)),
                ],
            )
        ]
    )
    result = AddressSearchService(conn).search("20 Overbrook Ct #F, Monroe, OH 45050")

    assert result.search_method == "component"
    assert result.exact_count == 1
    assert result.fallback_count == 1
    assert result.fallback_query == "nearby addresses (street/city match)"
    assert result.parsed.street == "Overbrook Ct"
    assert all("tier" not in row for row in result.addresses)
    assert result.addresses[0]["full_address"] == "20 Overbrook Court, Monroe, OH 45050"
    assert len(conn.executed) == 1


def test_search_falls_back_to_full_address_variants():
    conn = FakeConnection(
        results=[
            (ADDRESS_COLUMNS + ("tier",), []),
            (
                ADDRESS_COLUMNS + ("priority",),
                [
                    address_row(1, "7 Westerfield Drive, Monroe, OH 45050", (1,)),
                    address_row(2, "9 Westerfield Drive, Monroe, OH 45050", (2,)),
                    address_row(3, "11 Westerfield Drive, Monroe, OH 45050", (2,)),
                ],
            ),
        ]
    )
    result = AddressSearchService(conn).search("7 westerfield dr")

    assert result.search_method == "fulltext"
    assert result.exact_count == 1
    assert result.fallback_count == 2
    assert result.fallback_query == "westerfield dr"

    sql, params = conn.executed[1]
    assert sql.count("%s") == len(params) == 7
    assert "%7 westerfield drive%" in params
    assert "%westerfield drive%" in params
    assert params[-1] == 50


def test_search_without_house_number_uses_variant_search():
    conn = FakeConnection(results=[(ADDRESS_COLUMNS, [address_row(1, "1 Main St, Monroe, OH")])])
    result = AddressSearchService(conn).search("Monroe", limit=10)

    assert result.search_method == "fulltext"
    assert result.exact_count == 1
    assert conn.executed[0][1] == ("%monroe%", "%Monroe%", 10)


def test_blank_search_does_not_touch_the_database():
    conn = FakeConnection()
    result = AddressSearchService(conn).search("   ")
    assert result.addresses == []
    assert conn.executed == []


def test_database_errors_are_wrapped():
    conn = FakeConnection(error=psycopg2.Error("connection lost"))
    with pytest.raises(AddressSearchError):
        AddressSearchService(conn).search("7 westerfield dr")


def test_failed_component_query_falls_back_to_full_address_search():
    conn = FakeConnection(
        results=[(ADDRESS_COLUMNS + ("priority",), [address_row(1, "7 Westerfield Drive, Monroe, OH 45050", (1,))])],
        errors=[psycopg2.Error("statement timeout")],
    )
    result = AddressSearchService(conn).search("7 westerfield dr")

    assert result.search_method == "fulltext"
    assert result.exact_count == 1
    assert result.addresses[0]["full_address"] == "7 Westerfield Drive, Monroe, OH 45050"
    assert len(conn.executed) == 2


# ─────────────────────────────────────────────────────────
# AddressSearchService.filter_search
# ─────────────────────────────────────────────────────────


def test_filter_search_counts_and_pages():
    conn = FakeConnection(
        results=[
            (("total",), [(3,)]),
            (ADDRESS_COLUMNS + ("relevance_score",), [address_row(1, "2525 Oakley Ave", (180,))]),
        ]
    )
    rows, total = AddressSearchService(conn).filter_search(
        "Oakley 2525 Apt 4", city="Cincinnati", postcode="45209", offset=5
    )

    assert total == 3
    assert rows[0]["relevance_score"] == 180

    count_sql, count_params = conn.executed[0]
    assert count_sql.startswith("SELECT COUNT(*)")
    assert count_sql.count("%s") == len(count_params) == 14
    assert count_params[-2:] == ("%Cincinnati%", "45209")

    page_sql, page_params = conn.executed[1]
    assert page_sql.count("%s") == len(page_params) == 2 * 7 + 14 + 2
    assert page_params[-2:] == (50, 5)
    assert "Oakley" not in page_sql


def test_filter_search_without_query_has_no_word_conditions():
    conn = FakeConnection(results=[(("total",), [(0,)]), (ADDRESS_COLUMNS + ("relevance_score",), [])])
    rows, total = AddressSearchService(conn).filter_search(county="Butler")

    assert (rows, total) == ([], 0)
    assert conn.executed[0][1] == ("%Butler%",)
