"""Search orchestration: request validation, result filtering/sorting and UI state.

State changes go through ``reduce(state, event)``; what the results page shows
is always ``visible_results(state)``, a pure projection of the current state.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Sequence, TypeAlias

from .airports import is_valid_airport
from .models import FlightOffer, FlightResult, SearchMode, SortKey, TimeRange
from .timewindow import is_arrival_time_in_range, is_time_in_range, to_minute_of_day

logger = logging.getLogger(__name__)

UNITED_CARRIER = 'UA'


class SearchValidationError(ValueError):
    """User-facing problem with the search form input."""


@dataclass(frozen=True, slots=True)
class SearchRequest:
    mode: SearchMode
    origin: str
    destination: str | None
    date: str


@dataclass(frozen=True, slots=True)
class SearchFilters:
    departure: TimeRange = field(default_factory=TimeRange)
    arrival: TimeRange = field(default_factory=TimeRange)
    united_only: bool = False


# ---------------- validation -----------------
def validate_search_request(request: SearchRequest, today: date | None = None) -> SearchRequest:
    """Return a cleaned copy of the request or raise SearchValidationError."""
    origin = (request.origin or '').strip().upper()
    destination = (request.destination or '').strip().upper()
    today = today or date.today()

    if not origin:
        raise SearchValidationError('Please enter an origin airport.')
    if len(origin) != 3:
        raise SearchValidationError('Origin airport code must be 3 letters.')
    if not is_valid_airport(origin):
        raise SearchValidationError(f'Invalid origin airport code: {origin}. Please check the code and try again.')
    if request.mode == 'offers' and not destination:
        raise SearchValidationError('Destination is required for Offers mode.')
    if destination and len(destination) != 3:
        raise SearchValidationError('Destination airport code must be 3 letters.')
    if destination and not is_valid_airport(destination):
        raise SearchValidationError(
            f'Invalid destination airport code: {destination}. Please check the code and try again.'
        )
    if destination and origin == destination:
        raise SearchValidationError('Origin and destination cannot be the same.')
    if not request.date:
        raise SearchValidationError('Please select a date.')
    try:
        selected = date.fromisoformat(request.date)
    except ValueError as e:
        raise SearchValidationError(f'Invalid date: {request.date}. Use YYYY-MM-DD.') from e
    if selected < today:
        raise SearchValidationError('Please select a date that is today or in the future.')

    return replace(request, origin=origin, destination=destination or None)


# ---------------- filtering / sorting -----------------
def _is_united(item: FlightResult) -> bool:
    if isinstance(item, FlightOffer):
        return bool(item.carrier_codes) and all(code == UNITED_CARRIER for code in item.carrier_codes)
    return item.carrier_code == UNITED_CARRIER


def apply_filters(results: Iterable[FlightResult], filters: SearchFilters) -> list[FlightResult]:
    """Filter results by departure window, arrival window and carrier, keeping input order."""
    filtered = list(results)
    original_count = len(filtered)

    if not filters.departure.is_unbounded:
        filtered = [
            item for item in filtered
            if is_time_in_range(item.departure_time, filters.departure.start, filters.departure.end)
        ]
    if not filters.arrival.is_unbounded:
        filtered = [
            item for item in filtered
            if is_arrival_time_in_range(item.departure_time, item.arrival_time,
                                        filters.arrival.start, filters.arrival.end)
        ]
    if filters.united_only:
        filtered = [item for item in filtered if _is_united(item)]

    if not filtered and original_count > 0:
        logger.info('Filters eliminated all %d results', original_count)
    return filtered


def _departure_sort_key(item: FlightResult) -> int:
    return to_minute_of_day(item.departure_time) or 0


def _duration_sort_key(item: FlightResult) -> tuple[bool, int]:
    return item.duration_minutes is None, item.duration_minutes or 0


def sort_results(results: Sequence[FlightResult], sort_by: SortKey) -> list[FlightResult]:
    if sort_by == 'price':
        return sorted(results, key=lambda item: getattr(item, 'total_price', 0.0))
    if sort_by == 'departure':
        return sorted(results, key=_departure_sort_key)
    if sort_by == 'duration':
        return sorted(results, key=_duration_sort_key)
    raise ValueError(f'Unknown sort key: {sort_by}')


def filter_by_destination(results: Iterable[FlightResult], destination_code: str) -> list[FlightResult]:
    code = destination_code.upper()
    return [item for item in results if item.destination.upper() == code]


# ---------------- state -----------------
@dataclass(frozen=True, slots=True)
class SearchState:
    mode: SearchMode = 'schedules'
    request: SearchRequest | None = None
    results: tuple[FlightResult, ...] = ()
    filters: SearchFilters = field(default_factory=SearchFilters)
    sort_by: SortKey = 'price'
    selected_destination: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ModeChanged:
    mode: SearchMode


@dataclass(frozen=True, slots=True)
class SearchSucceeded:
    request: SearchRequest
    results: tuple[FlightResult, ...]


@dataclass(frozen=True, slots=True)
class SearchFailed:
    message: str


@dataclass(frozen=True, slots=True)
class FiltersChanged:
    filters: SearchFilters


@dataclass(frozen=True, slots=True)
class SortChanged:
    sort_by: SortKey


@dataclass(frozen=True, slots=True)
class DestinationSelected:
    destination: str | None


SearchEvent: TypeAlias = (
    ModeChanged | SearchSucceeded | SearchFailed | FiltersChanged | SortChanged | DestinationSelected
)


def reduce(state: SearchState, event: SearchEvent) -> SearchState:
    if isinstance(event, ModeChanged):
        if event.mode == state.mode:
            return state
        return replace(state, mode=event.mode, request=None, results=(), selected_destination=None, error=None)
    if isinstance(event, SearchSucceeded):
        return replace(state, request=event.request, results=tuple(event.results), selected_destination=None,
                       error=None)
    if isinstance(event, SearchFailed):
        return replace(state, results=(), selected_destination=None, error=event.message)
    if isinstance(event, FiltersChanged):
        return replace(state, filters=event.filters)
    if isinstance(event, SortChanged):
        return replace(state, sort_by=event.sort_by)
    if isinstance(event, DestinationSelected):
        if state.mode != 'schedules':
            return state
        return replace(state, selected_destination=event.destination.upper() if event.destination else None)
    raise TypeError(f'Unknown search event: {event!r}')


def visible_results(state: SearchState) -> list[FlightResult]:
    shown = apply_filters(state.results, state.filters)
    if state.mode == 'offers':
        shown = sort_results(shown, state.sort_by)
    elif state.selected_destination:
        shown = filter_by_destination(shown, state.selected_destination)
    return shown
