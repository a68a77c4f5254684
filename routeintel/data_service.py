"""Flight data access.

MOCK mode (default) serves schedules and offers from JSON files in the mock data
directory and normalizes them into FlightSchedule / FlightOffer records.
LIVE mode is a placeholder for a real provider behind a backend proxy.
"""
import json
import logging
import time
from pathlib import Path
from typing import Any

import dacite

from .config import Settings, settings as default_settings
from .models import FlightOffer, FlightSchedule
from .timewindow import calculate_duration

logger = logging.getLogger(__name__)

_DACITE_CONFIG = dacite.Config(cast=[str, int, float])


class DataServiceError(RuntimeError):
    """Flight data could not be loaded or parsed."""


class LiveModeNotImplementedError(NotImplementedError):
    pass


# ---------------- public API -----------------
def fetch_schedules(
        origin: str | None,
        destination: str | None = None,
        date: str | None = None,
        settings: Settings = default_settings,
) -> list[FlightSchedule]:
    if not settings.is_mock():
        raise LiveModeNotImplementedError('LIVE mode not yet implemented. Please use MOCK mode.')
    try:
        schedules = _load_mock_records(settings, 'schedules.json', 'schedules')
        if origin:
            schedules = [s for s in schedules if s['origin'].upper() == origin.upper()]
        if destination:
            schedules = [s for s in schedules if s['destination'].upper() == destination.upper()]
        if date:
            schedules = [s for s in schedules if s['date'] == date]
        return [normalize_schedule(s) for s in schedules]
    except (OSError, ValueError, KeyError, TypeError, AttributeError, dacite.DaciteError) as e:
        logger.error('Error fetching mock schedules: %s', e)
        raise DataServiceError('Failed to load schedule data. Please try again.') from e


def fetch_offers(
        origin: str | None,
        destination: str | None,
        date: str | None,
        adults: int = 1,
        settings: Settings = default_settings,
) -> list[FlightOffer]:
    if not settings.is_mock():
        raise LiveModeNotImplementedError('LIVE mode not yet implemented. Please use MOCK mode.')
    logger.debug('Fetching offers %s -> %s on %s for %d adult(s)', origin, destination, date, adults)
    try:
        offers = _load_mock_records(settings, 'offers.json', 'offers')
        if origin and destination:
            offers = [
                o for o in offers
                if o['origin'].upper() == origin.upper() and o['destination'].upper() == destination.upper()
            ]
        if date:
            offers = [o for o in offers if o['date'] == date]
        return [normalize_offer(o) for o in offers]
    except (OSError, ValueError, KeyError, TypeError, AttributeError, dacite.DaciteError) as e:
        logger.error('Error fetching mock offers: %s', e)
        raise DataServiceError('Failed to load offer data. Please try again.') from e


# ---------------- normalization -----------------
def normalize_schedule(raw: dict[str, Any]) -> FlightSchedule:
    duration = raw.get('durationMinutes')
    if not duration and raw.get('departureTime') and raw.get('arrivalTime'):
        duration = calculate_duration(raw['departureTime'], raw['arrivalTime'])

    data_to_parse = dict(
        flight_id=raw.get('flightId') or f"{raw['carrierCode']}{raw['flightNumber']}",
        carrier_code=raw['carrierCode'],
        flight_number=raw['flightNumber'],
        origin=raw['origin'].upper(),
        destination=raw['destination'].upper(),
        departure_time=raw['departureTime'],
        arrival_time=raw['arrivalTime'],
        duration_minutes=duration,
        date=raw['date'],
        aircraft=raw.get('aircraft') or None,
        stops=raw.get('stops') or 0,
    )
    return dacite.from_dict(data=data_to_parse, data_class=FlightSchedule, config=_DACITE_CONFIG)


def normalize_offer(raw: dict[str, Any]) -> FlightOffer:
    segments = raw.get('segments') or []
    first = segments[0] if segments else None
    last = segments[-1] if segments else None

    duration = raw.get('durationMinutes')
    if not duration and first and last:
        duration = calculate_duration(first['departureTime'], last['arrivalTime'])

    if segments:
        carrier_codes = list(dict.fromkeys(s['carrierCode'] for s in segments))
    else:
        carrier_codes = [raw['carrierCode']] if raw.get('carrierCode') else []

    data_to_parse = dict(
        offer_id=raw['offerId'],
        total_price=float(raw['totalPrice']),
        currency=raw.get('currency') or 'USD',
        carrier_codes=carrier_codes,
        segments=[_segment_fields(s) for s in segments],
        departure_time=first['departureTime'] if first else raw['departureTime'],
        arrival_time=last['arrivalTime'] if last else raw['arrivalTime'],
        duration_minutes=duration,
        origin=raw['origin'].upper(),
        destination=raw['destination'].upper(),
        date=raw['date'],
        stops=len(segments) - 1 if segments else 0,
    )
    return dacite.from_dict(data=data_to_parse, data_class=FlightOffer, config=_DACITE_CONFIG)


def _segment_fields(segment: dict[str, Any]) -> dict[str, Any]:
    return dict(
        carrier_code=segment['carrierCode'],
        flight_number=segment.get('flightNumber', ''),
        origin=segment.get('origin', '').upper(),
        destination=segment.get('destination', '').upper(),
        departure_time=segment['departureTime'],
        arrival_time=segment['arrivalTime'],
    )


# ---------------- helpers -----------------
def _load_mock_records(settings: Settings, filename: str, key: str) -> list[dict[str, Any]]:
    if settings.mock_delay_ms > 0:
        time.sleep(settings.mock_delay_ms / 1000)
    mock_file = Path(settings.mock_data_dir) / filename
    with open(mock_file, 'rt', encoding='utf-8') as f:
        loaded_data = json.load(f)
    records = loaded_data.get(key) or []
    logger.info('Loaded %d mock %s from %s', len(records), key, mock_file)
    return records


def get_data_mode(settings: Settings = default_settings) -> str:
    return settings.data_mode
