import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Sequence

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .airports import format_airport_display, get_airport
from .models import Airport, FlightOffer, FlightResult, SearchMode
from .search import SearchState, visible_results
from .timewindow import day_offset, format_duration

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / 'templates'
DEFAULT_ZOOM = 6
ROUTE_COLOR = '#0033A1'
AIRLINE_LOGOS = {
    'UA': 'https://images.kiwi.com/airlines/64/UA.png',
    'AA': 'https://images.kiwi.com/airlines/64/AA.png',
    'DL': 'https://images.kiwi.com/airlines/64/DL.png',
    'WN': 'https://images.kiwi.com/airlines/64/WN.png',
    'AS': 'https://images.kiwi.com/airlines/64/AS.png',
    'B6': 'https://images.kiwi.com/airlines/64/B6.png',
}


@dataclass(frozen=True, slots=True)
class MapMarker:
    iata: str
    name: str
    city: str
    state: str
    lat: float
    lon: float
    color: str
    clickable: bool = False


@dataclass(frozen=True, slots=True)
class RouteLine:
    start: tuple[float, float]
    end: tuple[float, float]
    color: str = ROUTE_COLOR


@dataclass(frozen=True, slots=True)
class MapView:
    """Markers, route lines and viewport for the results map.

    Either ``bounds`` is set (fit the map to it) or ``center`` and ``zoom`` are.
    """
    markers: list[MapMarker] = field(default_factory=list)
    route_lines: list[RouteLine] = field(default_factory=list)
    bounds: list[tuple[float, float]] | None = None
    center: tuple[float, float] | None = None
    zoom: int | None = None


def _marker(airport: Airport, color: str, clickable: bool = False) -> MapMarker:
    return MapMarker(airport.iata, airport.name, airport.city, airport.state, airport.lat, airport.lon,
                     color, clickable)


def build_map_view(
        origin: str,
        destination: str | None,
        results: Sequence[FlightResult],
        mode: SearchMode,
) -> MapView:
    origin_airport = get_airport(origin)
    if origin_airport is None:
        logger.warning('Origin airport %s not found in database', origin)
        return MapView()

    clickable = False
    if destination:
        dest_codes = [destination]
    elif mode == 'schedules':
        dest_codes = list(dict.fromkeys(r.destination for r in results))
        clickable = True
    else:
        dest_codes = []

    dest_airports = [a for a in (get_airport(code) for code in dest_codes) if a is not None]
    origin_point = (origin_airport.lat, origin_airport.lon)
    markers = [_marker(origin_airport, 'green')]
    markers.extend(_marker(a, 'blue', clickable) for a in dest_airports)
    route_lines = [RouteLine(origin_point, (a.lat, a.lon)) for a in dest_airports]

    if dest_airports:
        bounds = [origin_point] + [(a.lat, a.lon) for a in dest_airports]
        return MapView(markers, route_lines, bounds=bounds)
    return MapView(markers, route_lines, center=origin_point, zoom=DEFAULT_ZOOM)


# ---------------- cards -----------------
def _carrier_badge(carrier: str | None) -> dict:
    return {'primary_carrier': carrier or '', 'logo_url': AIRLINE_LOGOS.get(carrier or '')}


def _card(item: FlightResult) -> dict:
    offset = day_offset(item.departure_time, item.arrival_time)
    card = {
        'origin': format_airport_display(item.origin),
        'destination': format_airport_display(item.destination),
        'destination_code': item.destination,
        'departure_time': item.departure_time,
        'arrival_time': item.arrival_time,
        'next_day_badge': offset.badge,
        'duration': format_duration(item.duration_minutes),
        'stops': item.stops,
    }
    if isinstance(item, FlightOffer):
        flight_type = 'Connecting' if item.stops > 0 else 'Nonstop'
        card.update(
            _carrier_badge(item.carrier_codes[0] if item.carrier_codes else None),
            record_id=item.offer_id,
            title=flight_type,
            flight_type=flight_type,
            multi_carrier='/'.join(item.carrier_codes) if len(item.carrier_codes) > 1 else None,
            price=f'{item.total_price:.2f} {item.currency}',
            segments=len(item.segments) if item.stops > 0 else None,
        )
    else:
        card.update(
            _carrier_badge(item.carrier_code),
            record_id=item.flight_id,
            title=f'Flight {item.flight_number}',
            flight_type=None,
            aircraft=item.aircraft,
        )
    return card



def _results_count_label(count: int, mode: SearchMode) -> str:
    noun = 'flight' if mode == 'schedules' else 'offer'
    return f"{count} {noun}{'' if count == 1 else 's'} found"


def render_results_page(state: SearchState, map_view: MapView | None = None) -> str:
    shown = visible_results(state)
    if map_view is None:
        if state.request is not None:
            map_view = build_map_view(state.request.origin, state.request.destination, state.results, state.mode)
        else:
            map_view = MapView()

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(['html', 'xml', 'j2']),
    )
    tpl = env.get_template('results.html.j2')
    rendered = tpl.render(
        mode=state.mode,
        request=state.request,
        error=state.error,
        cards=[_card(item) for item in shown],
        count_label=_results_count_label(len(shown), state.mode),
        has_searched=state.request is not None,
        map_view=asdict(map_view),
        generated_at=datetime.now().strftime('%d.%m.%Y %H:%M'),
    )
    soup = BeautifulSoup(rendered, 'lxml')
    return soup.prettify()
