#!/usr/bin/env python3
"""
Command-line script to infer a scraping schema from a page.

Loads a URL or a saved HTML file, finds the repeated container pattern and
prints the inferred schema as YAML (or JSON).

Usage:
    python run_sniffer.py https://books.toscrape.com/
    python run_sniffer.py page.html --min-items 5 --type text,price
    python run_sniffer.py page.html -c "article.product_pod" -o schema.yaml
    python run_sniffer.py page.html --list-patterns --debug
"""

import argparse
import json
import logging
import os
import sys

# Load .env file automatically
from dotenv import load_dotenv
load_dotenv()

from schemasniff.exceptions import SchemaSniffError
from schemasniff.exporter import FORMATS, export_schema
from schemasniff.logger import setup_logger
from schemasniff.main import SchemaSniffer
from schemasniff.review import format_pattern_table, review_schema
from schemasniff.schemas import AnalyzerOptions, FieldType

VALID_FIELD_TYPES = [t.value for t in FieldType]


def parse_field_types(value: str, logger: logging.Logger) -> list[FieldType]:
    """Comma-separated types; unknown entries are warned about and dropped."""
    types = [t.strip().lower() for t in value.split(",") if t.strip()]
    invalid = [t for t in types if t not in VALID_FIELD_TYPES]
    if invalid:
        logger.warning(f"Invalid field types ignored: {', '.join(invalid)}")
        logger.warning(f"Valid types: {', '.join(VALID_FIELD_TYPES)}")
    return [FieldType(t) for t in types if t in VALID_FIELD_TYPES]


def parse_selectors(values: list[str]) -> list[str]:
    """--exclude may be repeated and each value may be comma-separated."""
    selectors = []
    for value in values or []:
        selectors.extend(s.strip() for s in value.split(",") if s.strip())
    return selectors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemasniff",
        description="Auto-infer scraping schemas from pages with repeated content"
    )
    parser.add_argument("target", help="URL or HTML file to analyze")
    parser.add_argument("--min-items", type=int, default=3,
                        help="Minimum repeated items to detect (default: 3)")
    parser.add_argument("--depth", type=int, default=10,
                        help="Maximum DOM depth to analyze (default: 10)")
    parser.add_argument("--type", default="",
                        help=f"Field types to keep, comma-separated ({','.join(VALID_FIELD_TYPES)})")
    parser.add_argument("--include-empty", action="store_true",
                        help="Include empty fields in schema")
    parser.add_argument("--confidence", type=float, default=0.7,
                        help="Minimum field confidence threshold 0-1 (default: 0.7)")
    parser.add_argument("--container", "-c",
                        help="Manual container selector (skip auto-detection)")
    parser.add_argument("--exclude", "-x", action="append", default=[],
                        help="Selector whose subtree is ignored while mining (repeatable)")
    parser.add_argument("--ignore-nav", action="store_true",
                        help="Ignore nav/header/footer/aside landmarks while mining")
    parser.add_argument("--min-children", type=int, default=0,
                        help="Minimum child elements for a candidate container")
    parser.add_argument("--min-text-length", type=int, default=0,
                        help="Minimum trimmed text length for a candidate container")
    parser.add_argument("--prefer-table", action="store_true",
                        help="Boost table rows when scoring patterns")
    parser.add_argument("--list-patterns", action="store_true",
                        help="Print the ranked candidate patterns and exit")
    parser.add_argument("--debug", action="store_true",
                        help="Show score breakdowns")
    parser.add_argument("--interactive", "-i", action="store_true",
                        help="Review the schema and rename fields before export")
    parser.add_argument("--output", "-o",
                        help="Output file path (default: stdout)")
    parser.add_argument("--format", "-f", choices=FORMATS,
                        help="Output format (default: from output extension, else yaml)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose logging")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log warnings and errors")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Setup logging
    if args.verbose or args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logger = setup_logger(level=log_level, log_file=os.getenv("SCHEMASNIFF_LOG_FILE"))

    if args.list_patterns and args.container:
        logger.error("--list-patterns cannot be combined with --container (a manual container skips mining)")
        return 2

    try:
        options = AnalyzerOptions(
            min_items=args.min_items,
            max_depth=args.depth,
            container_selector=args.container,
            exclude_selectors=parse_selectors(args.exclude),
            ignore_nav=args.ignore_nav,
            min_children=args.min_children,
            min_text_length=args.min_text_length,
            prefer_table=args.prefer_table,
            field_types=parse_field_types(args.type, logger) if args.type else [],
            include_empty=args.include_empty,
            confidence_threshold=args.confidence,
            debug=args.debug,
            list_patterns=args.list_patterns
        )
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        logger.error(f"Invalid options: {e}")
        return 2

    sniffer = SchemaSniffer(logger=logger)

    try:
        if args.list_patterns:
            document = sniffer.provider.load(args.target)
            ranked = sniffer.analyzer.rank_patterns(document, options)
            print(format_pattern_table(ranked, debug=args.debug))
            return 0

        result = sniffer.sniff(args.target, options)
        schema = result.inferred_schema

        if args.debug and result.ranked:
            print(format_pattern_table(result.ranked, debug=True), file=sys.stderr)

        if args.interactive:
            schema = review_schema(schema, rename=True)

        text = export_schema(schema, args.output, fmt=args.format)
        if not args.output:
            sys.stdout.write(text)

        logger.info("Schema generated successfully")
        return 0

    except SchemaSniffError as e:
        logger.error(f"[{e.code}] {e.message}")
        if args.verbose:
            print(json.dumps(e.to_response(), indent=2), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
