"""Simple CLI entry to quote travel insurance for a trip."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from travel_quote import TripRequest, build_trip_request, generate_quotes
from travel_quote.catalog import load_catalog
from travel_quote.config import Settings, get_settings
from travel_quote.logging_setup import configure_logging
from travel_quote.models import QuoteResponse, quote_response_to_dict
from travel_quote.utils import format_price


def parse_ages(values: List[str]) -> List[str]:
    """Accept ``--ages 30 45`` as well as ``--ages 30,45``."""

    ages: List[str] = []
    for value in values:
        ages.extend(part for part in value.split(",") if part.strip())
    return ages


def load_request_file(path: Path, settings: Optional[Settings] = None) -> TripRequest:
    data = json.loads(path.read_text())
    return build_trip_request(
        data.get("ages", []),
        days=data.get("days"),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        settings=settings,
    )


def render_text(response: QuoteResponse) -> str:
    req = response.request
    lines = [f"{req.traveler_count} traveler(s), {req.days} day(s)"]
    if response.notice:
        lines.append(response.notice)
    for quote in response.quotes:
        marker = "*" if quote is response.featured else " "
        lines.append(
            f"{marker} {quote.provider_name} - {quote.plan_name}: {format_price(quote.total_price)}"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quote travel insurance plans for a trip.")
    parser.add_argument("request_file", type=Path, nargs="?", help="Optional JSON file describing the trip request")
    parser.add_argument("--ages", nargs="+", default=[], help="Traveler ages, e.g. --ages 30 45 or --ages 30,45")
    parser.add_argument("--days", type=int, help="Number of covered days")
    parser.add_argument("--start-date", help="Trip start date (YYYY-MM-DD)")
    parser.add_argument("--end-date", help="Trip end date (YYYY-MM-DD)")
    parser.add_argument("--catalog", type=Path, help="Path to a JSON insurance catalog")
    parser.add_argument("--text", action="store_true", help="Print a short summary instead of JSON")
    parser.add_argument("--output", type=Path, help="Optional path to save the quotes JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 2
    configure_logging(settings.log_level)

    try:
        if args.request_file:
            trip_request = load_request_file(args.request_file, settings)
        else:
            trip_request = build_trip_request(
                parse_ages(args.ages),
                days=args.days,
                start_date=args.start_date,
                end_date=args.end_date,
                settings=settings,
            )
        catalog_path = args.catalog or settings.catalog_path
        catalog = load_catalog(catalog_path, strict=settings.strict_catalog)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    response = generate_quotes(trip_request, catalog=catalog)
    if args.text:
        result = render_text(response)
    else:
        result = json.dumps(quote_response_to_dict(response), indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(result)
        print(f"Quotes saved to {args.output}")
    else:
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
