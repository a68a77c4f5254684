"""Command line entry point: search flights, filter them and write an HTML results page.

Usage patterns:

1. All schedules leaving SFO on a date, arriving in the morning:
   route-intel --origin SFO --date 2026-11-02 --arr-start 06:00 --arr-end 12:00

2. Priced offers on a route, cheapest first, United only:
   route-intel --mode offers --origin EWR --destination SFO --date 2026-11-02 --united-only
"""
import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from routeintel.config import Settings, settings as default_settings
from routeintel.data_service import DataServiceError, LiveModeNotImplementedError, fetch_offers, fetch_schedules
from routeintel.logging_config import setup_logging
from routeintel.models import SearchMode, SortKey, TimeRange
from routeintel.rendering import build_map_view, render_results_page
from routeintel.search import (
    DestinationSelected,
    FiltersChanged,
    ModeChanged,
    SearchFailed,
    SearchFilters,
    SearchRequest,
    SearchState,
    SearchSucceeded,
    SearchValidationError,
    SortChanged,
    reduce,
    validate_search_request,
    visible_results,
)


def run_search(
        mode: SearchMode,
        origin: str,
        date_str: str,
        destination: str | None = None,
        filters: SearchFilters | None = None,
        sort_by: SortKey = 'price',
        select_destination: str | None = None,
        output: Path | None = None,
        today: date | None = None,
        settings: Settings = default_settings,
) -> SearchState:
    request = validate_search_request(SearchRequest(mode, origin, destination, date_str), today=today)

    state = reduce(SearchState(), ModeChanged(mode))
    state = reduce(state, FiltersChanged(filters or SearchFilters()))
    state = reduce(state, SortChanged(sort_by))

    try:
        if mode == 'schedules':
            results = fetch_schedules(request.origin, request.destination, request.date, settings=settings)
        else:
            results = fetch_offers(request.origin, request.destination, request.date, adults=1, settings=settings)
    except (DataServiceError, LiveModeNotImplementedError) as e:
        logging.error(f"Search error: {e}")
        state = reduce(state, SearchFailed(str(e)))
    else:
        state = reduce(state, SearchSucceeded(request, tuple(results)))
        logging.info(f"Found {len(results)} results for {request.origin} to {request.destination or 'all destinations'}")

    if select_destination:
        state = reduce(state, DestinationSelected(select_destination))

    map_view = build_map_view(request.origin, request.destination, state.results, mode)
    html = render_results_page(state, map_view)
    output = output or settings.output_html
    output.write_text(html, encoding='utf-8')
    logging.info(f"{len(visible_results(state))} results written to {output}")
    return state


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Flight route search with time-of-day filters")
    p.add_argument("--mode", choices=["schedules", "offers"], default="schedules")
    p.add_argument("--origin", required=True, help="Origin airport IATA code")
    p.add_argument("--destination", help="Destination airport IATA code (required in offers mode)")
    p.add_argument("--date", required=True, help="YYYY-MM-DD")
    # Time windows; start later than end wraps past midnight (e.g. 22:00-06:00)
    p.add_argument("--dep-start", metavar="HH:MM")
    p.add_argument("--dep-end", metavar="HH:MM")
    p.add_argument("--arr-start", metavar="HH:MM", help="Arrival window start, matched on clock time only")
    p.add_argument("--arr-end", metavar="HH:MM")
    p.add_argument("--united-only", action="store_true", help="Only flights operated entirely by UA")
    # Offers mode specific
    p.add_argument("--sort", choices=["price", "departure", "duration"], default="price")
    # Schedules mode specific
    p.add_argument("--select-destination", metavar="IATA", help="Show only results to this destination")
    # Misc
    p.add_argument("--output", type=Path, default=None, help=f"Output HTML (default {default_settings.output_html})")
    p.add_argument("--log-level", default=default_settings.log_level)
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    filters = SearchFilters(
        departure=TimeRange.from_inputs(args.dep_start, args.dep_end),
        arrival=TimeRange.from_inputs(args.arr_start, args.arr_end),
        united_only=args.united_only,
    )
    try:
        state = run_search(
            mode=args.mode,
            origin=args.origin,
            date_str=args.date,
            destination=args.destination,
            filters=filters,
            sort_by=args.sort,
            select_destination=args.select_destination,
            output=args.output,
        )
    except SearchValidationError as e:
        logging.error(str(e))
        return 2
    except Exception:  # noqa: BLE001
        logging.exception("Search failed")
        return 1
    return 1 if state.error else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
