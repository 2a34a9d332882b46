# tax_lookup/cli.py
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .errors import DataFetchError, MissingApiKeyError
from .insights import get_tax_insight
from .loader import DatasetStore
from .report import format_currency, format_number, render_json_report, render_text_report
from .search import search
from .session import SessionGate

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CONFIG_ERROR = 2
EXIT_AUTH_FAILED = 3


def _store(args: argparse.Namespace) -> DatasetStore:
    store = DatasetStore(url=args.url, timeout=args.timeout)
    store.reload()
    return store


def cmd_stats(args: argparse.Namespace) -> int:
    stats = _store(args).stats()
    print(f"Records: {format_number(stats.total_records)}")
    print(f"Invoices: {format_number(stats.total_invoices)}")
    return EXIT_OK


def cmd_lookup(args: argparse.Namespace) -> int:
    outcome = search(_store(args).records, args.tax_id)
    if outcome is None:
        print("Please enter a tax ID.", file=sys.stderr)
        return EXIT_NOT_FOUND
    if not outcome.found:
        print(outcome.message.text, file=sys.stderr)
        return EXIT_NOT_FOUND

    insight = get_tax_insight(outcome.record) if args.insight else None
    if args.json:
        print(render_json_report(outcome.record, insight))
        return EXIT_OK

    record = outcome.record
    print(outcome.message.text)
    print(f"  Name:          {record.name}")
    print(f"  Tax office:    {record.authority_code}")
    print(f"  Invoices:      {format_number(record.invoice_count)}")
    print(f"  Tax amount:    {format_currency(record.tax_amount)}")
    print(f"  Gross amount:  {format_currency(record.total_amount)}")
    if insight:
        print()
        print(insight)
    return EXIT_OK


def cmd_export(args: argparse.Namespace) -> int:
    outcome = search(_store(args).records, args.tax_id)
    if outcome is None or not outcome.found:
        msg = outcome.message.text if outcome else "Please enter a tax ID."
        print(msg, file=sys.stderr)
        return EXIT_NOT_FOUND

    insight = get_tax_insight(outcome.record) if args.insight else None
    if args.format == "json":
        text = render_json_report(outcome.record, insight)
    else:
        text = render_text_report(outcome.record, insight)

    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"Report for {outcome.record.tax_id} written to {args.output}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tax-lookup")
    parser.add_argument("--url", default=None, help="CSV export URL (default: TAX_LOOKUP_DATA_URL)")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--password", default=None, help="Access password (prompted for when omitted)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_stats = sub.add_parser("stats", help="Show dataset totals")
    p_stats.set_defaults(func=cmd_stats)

    p_lookup = sub.add_parser("lookup", help="Look up one tax ID")
    p_lookup.add_argument("tax_id", help="Tax ID; hyphens, spaces and quotes are ignored")
    p_lookup.add_argument("--insight", action="store_true", help="Ask Gemini for commentary")
    p_lookup.add_argument("--json", action="store_true", help="Print the record as JSON")
    p_lookup.set_defaults(func=cmd_lookup)

    p_export = sub.add_parser("export", help="Write a report for one tax ID")
    p_export.add_argument("tax_id", help="Tax ID to report on")
    p_export.add_argument("--output", required=True, help="Output report file")
    p_export.add_argument("--format", choices=["text", "json"], default="text")
    p_export.add_argument("--insight", action="store_true", help="Include Gemini commentary")
    p_export.set_defaults(func=cmd_export)

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    gate = SessionGate({})
    password = args.password
    if password is None:
        password = getpass.getpass("Access password: ")
    if not gate.authenticate(password):
        print("Wrong password.", file=sys.stderr)
        return EXIT_AUTH_FAILED

    try:
        return args.func(args)
    except DataFetchError:
        print("Could not connect to the CSV data server.", file=sys.stderr)
        return EXIT_NOT_FOUND
    except MissingApiKeyError:
        print(f"{config.GEMINI_API_KEY_ENV} is not set; AI insight is unavailable.", file=sys.stderr)
        return EXIT_CONFIG_ERROR


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
