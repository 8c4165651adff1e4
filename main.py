#!/usr/bin/env python3
"""
Bottle Price Compare - Command Line Entry Point

Compares one product against a catalog payload saved to disk.

Usage:
  python main.py --name "Blue Bottle Rum 700ml" --price 49.99 --catalog listings.json
  python main.py --name "Blue Bottle Rum" --catalog listings.json --json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from bottlematch.config import MatchConfig
from bottlematch.errors import InvalidPrice, MalformedCatalogEntry
from bottlematch.logging_config import get_logger
from bottlematch.models import ComparisonResult, ComparisonStatus, RawProduct
from bottlematch.pipeline import PriceComparisonPipeline

logger = get_logger("bottlematch.cli")

EXIT_OK = 0
EXIT_REJECTED = 2


def load_catalog(path: Path) -> list[Any]:
    """Read listings from a JSON file: a list, or a search response with hits.hits."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        hits = payload.get("hits")
        if isinstance(hits, dict):
            return list(hits.get("hits", []))
        return list(payload.get("listings", []))
    return list(payload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare a product with catalog listings.")
    parser.add_argument("--name", required=True, help="Product name as shown on the page")
    parser.add_argument("--price", default=None, help="Current price, e.g. 49.99 or '$49.99'")
    parser.add_argument("--catalog", required=True, type=Path, help="Catalog JSON file")
    parser.add_argument("--min-match-ratio", type=float, default=None)
    parser.add_argument("--max-keywords", type=int, default=None)
    parser.add_argument("--strict", action="store_true", help="Fail on malformed listings")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def format_result(result: ComparisonResult) -> str:
    lines = [f"Searching for: {result.query.text or '(no keywords)'}"]
    if result.product.price is not None:
        lines[0] += f" | Current price: ${result.product.price:.2f}"

    if result.status == ComparisonStatus.EMPTY_QUERY:
        lines.append("No usable product name.")
    elif result.status == ComparisonStatus.NO_MATCHES:
        lines.append("No similar products found.")

    for m in result.matches:
        line = f"- {m.entry.name}  ${m.entry.price:.2f}  {m.product_url}"
        if m.savings is not None:
            s = m.savings.rounded(2)
            line += f"  [{s.sign.value}: {s.delta:+.2f} ({s.percentage:+.2f}%)]"
        lines.append(line)

    if result.skipped_count:
        lines.append(f"({result.skipped_count} malformed listings skipped)")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = MatchConfig().with_overrides(
        min_match_ratio=args.min_match_ratio,
        max_keywords=args.max_keywords,
        strict_catalog=args.strict or None,
    )
    pipeline = PriceComparisonPipeline(config)

    try:
        catalog = load_catalog(args.catalog)
        result = pipeline.run(RawProduct(name=args.name, price=args.price), catalog)
    except (InvalidPrice, MalformedCatalogEntry) as e:
        logger.error("Comparison rejected", error=e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_REJECTED

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_result(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
