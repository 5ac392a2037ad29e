# ABOUTME: CLI entry point for opml-doc.
# ABOUTME: Reads an OPML file and prints it as JSON, pretty JSON, or feed text/URL pairs.

import argparse
import logging
import sys

import structlog

from opml_doc.config import get_settings
from opml_doc.errors import OPMLError
from opml_doc.models import Document
from opml_doc.services.feeds import iter_feeds, to_json
from opml_doc.services.opml import parse_file

log = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Send structlog output to stderr so stdout only carries the document."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def print_rss(document: Document, verbose: bool = False) -> None:
    """Print text and xmlUrl for every outline that has a feed URL."""

    def report_skip(outline):
        print(f'Skipping "{outline.text}" because it did not have an xmlUrl attribute.')

    for text, xml_url in iter_feeds(document, on_skip=report_skip if verbose else None):
        print(text)
        print(xml_url)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="opml-doc", description="Parse OPML documents")
    parser.add_argument("-f", "--file", required=True, help="The OPML file to parse.")
    parser.add_argument(
        "--verbose", action="store_true", help="Print extra information while running."
    )

    # output format
    fmt = parser.add_mutually_exclusive_group(required=True)
    fmt.add_argument("--json", action="store_true", help="Output the OPML as JSON.")
    fmt.add_argument(
        "--json-pretty", action="store_true", help="Output the OPML as pretty-printed JSON."
    )
    fmt.add_argument(
        "--rss",
        action="store_true",
        help="Only output the outline text and xmlUrl attributes when both are present.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        document = parse_file(args.file)
    except OPMLError as e:
        print(f"opml-doc: {e}", file=sys.stderr)
        sys.exit(1)

    if args.rss:
        print_rss(document, verbose=args.verbose)
    elif args.json:
        print(to_json(document))
    elif args.json_pretty:
        print(to_json(document, indent=settings.json_indent))


if __name__ == "__main__":
    main()
