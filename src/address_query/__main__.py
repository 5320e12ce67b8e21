"""
Command-line entry point for the address query engine.

Examples:
  python -m address_query parse "20 Overbrook Ct, Monroe, OH 45050"
  python -m address_query variants "7 westerfield dr"
  python -m address_query strip "123 Main St Apt 2B, Columbus, OH 43215"
  python -m address_query predicate "Oakley 2525"
  python -m address_query search "7 westerfield dr" --limit 10
  python -m address_query batch in.csv out.csv --column address
"""

import argparse
import json
import sys
from typing import List, Optional

from address_query.normalization.address_parser import decompose
from address_query.normalization.query_variants import expand_variants
from address_query.normalization.unit_designators import strip_unit_designator
from address_query.search.predicate import build_predicate


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Free-form address query tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("parse", "Split an address into components"),
        ("variants", "List abbreviation variants of a query"),
        ("strip", "Remove unit designators from an address"),
        ("predicate", "Show the multi-field match predicate as SQL"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("query")

    search = subparsers.add_parser("search", help="Search the address table (needs DATABASE_URL)")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None)

    batch = subparsers.add_parser("batch", help="Decompose an address column of a CSV")
    batch.add_argument("input_csv")
    batch.add_argument("output_csv")
    batch.add_argument("--column", default="address")

    return parser.parse_args(argv)


def _run_search(query: str, limit: Optional[int]) -> dict:
    from address_query.io.db_client import get_connection
    from address_query.search.address_search import AddressSearchService

    conn = get_connection()
    try:
        result = AddressSearchService(conn).search(query, limit)
    finally:
        conn.close()

    return {
        "query": result.original_query,
        "method": result.search_method,
        "exact_count": result.exact_count,
        "fallback_count": result.fallback_count,
        "fallback_query": result.fallback_query,
        "parsed": result.parsed.to_dict() if result.parsed else None,
        "addresses": result.addresses,
    }


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    if args.command == "parse":
        out = decompose(args.query).to_dict()
    elif args.command == "variants":
        out = expand_variants(args.query)
    elif args.command == "strip":
        out = strip_unit_designator(args.query)
    elif args.command == "predicate":
        sql, params = build_predicate(args.query).to_sql()
        out = {"sql": sql, "params": params}
    elif args.command == "search":
        out = _run_search(args.query, args.limit)
    elif args.command == "batch":
        # Pulls in pandas and the file log handler; only needed here.
        from address_query.pipelines import batch_decompose

        df = batch_decompose.run(args.input_csv, args.output_csv, args.column)
        out = {"rows": len(df), "output": args.output_csv}

    json.dump(out, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
