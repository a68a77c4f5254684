"""Static airport database used for search validation, display names and map markers."""
import json
import math
from functools import lru_cache
from pathlib import Path

import dacite

from .models import Airport

AIRPORTS_FILE = Path(__file__).resolve().parent / 'data' / 'airports.json'
EARTH_RADIUS_MILES = 3959


@lru_cache(maxsize=1)
def load_airports() -> dict[str, Airport]:
    with open(AIRPORTS_FILE, 'rt', encoding='utf-8') as f:
        loaded_data = json.load(f)
    return {
        iata: dacite.from_dict(data=airport, data_class=Airport, config=dacite.Config(cast=[float]))
        for iata, airport in loaded_data.items()
    }


def get_airport(iata: str | None) -> Airport | None:
    if not iata:
        return None
    return load_airports().get(iata.strip().upper())


def is_valid_airport(iata: str | None) -> bool:
    return get_airport(iata) is not None


def all_airport_codes() -> list[str]:
    return list(load_airports())


def search_airports(query: str | None) -> list[Airport]:
    """Substring search over code, name, city and state (case-insensitive)."""
    if not query or not query.strip():
        return []
    term = query.strip().lower()
    return [
        airport for iata, airport in load_airports().items()
        if term in iata.lower()
        or term in airport.name.lower()
        or term in airport.city.lower()
        or term in airport.state.lower()
    ]


def format_airport_display(iata: str) -> str:
    airport = get_airport(iata)
    if airport is None:
        return iata
    return f"{airport.iata} - {airport.city}, {airport.state}"


def calculate_distance(iata1: str, iata2: str) -> int | None:
    """Great-circle distance in miles (haversine), None if either airport is unknown."""
    a1 = get_airport(iata1)
    a2 = get_airport(iata2)
    if a1 is None or a2 is None:
        return None
    lat1, lat2 = math.radians(a1.lat), math.radians(a2.lat)
    d_lat = math.radians(a2.lat - a1.lat)
    d_lon = math.radians(a2.lon - a1.lon)
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_MILES * c)
