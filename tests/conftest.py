import json

import pytest

from routeintel.config import Settings
from routeintel.models import FlightOffer, FlightSchedule, Segment

SCHEDULES = [
    {"carrierCode": "UA", "flightNumber": "100", "origin": "sfo", "destination": "EWR",
     "departureTime": "08:00", "arrivalTime": "10:30", "date": "2030-05-01", "aircraft": "Boeing 737-800"},
    {"carrierCode": "UA", "flightNumber": 200, "origin": "SFO", "destination": "ORD",
     "departureTime": "23:00", "arrivalTime": "02:00", "date": "2030-05-01", "durationMinutes": 240},
    {"flightId": "AA300", "carrierCode": "AA", "flightNumber": "300", "origin": "SFO", "destination": "DFW",
     "departureTime": "14:00", "arrivalTime": "13:55", "date": "2030-05-01"},
    {"carrierCode": "UA", "flightNumber": "400", "origin": "EWR", "destination": "SFO",
     "departureTime": "07:00", "arrivalTime": "10:35", "date": "2030-05-01"},
    {"carrierCode": "UA", "flightNumber": "100", "origin": "SFO", "destination": "EWR",
     "departureTime": "08:00", "arrivalTime": "10:30", "date": "2030-05-02"},
]

OFFERS = [
    {"offerId": "O1", "totalPrice": "389.40", "currency": "USD", "origin": "ewr", "destination": "sfo",
     "date": "2030-05-01",
     "segments": [{"carrierCode": "UA", "flightNumber": "1", "origin": "EWR", "destination": "SFO",
                   "departureTime": "07:00", "arrivalTime": "10:35"}]},
    {"offerId": "O2", "totalPrice": 219, "origin": "EWR", "destination": "SFO", "date": "2030-05-01",
     "segments": [{"carrierCode": "AA", "flightNumber": "2", "origin": "EWR", "destination": "DFW",
                   "departureTime": "19:40", "arrivalTime": "22:50"},
                  {"carrierCode": "UA", "flightNumber": "3", "origin": "DFW", "destination": "SFO",
                   "departureTime": "23:45", "arrivalTime": "01:30"}]},
    {"offerId": "O3", "totalPrice": "274.10", "currency": "USD", "origin": "EWR", "destination": "SFO",
     "date": "2030-05-01", "durationMinutes": 300,
     "segments": [{"carrierCode": "UA", "flightNumber": "4", "origin": "EWR", "destination": "ORD",
                   "departureTime": "15:10", "arrivalTime": "16:45"},
                  {"carrierCode": "UA", "flightNumber": "5", "origin": "ORD", "destination": "SFO",
                   "departureTime": "18:05", "arrivalTime": "20:55"}]},
    {"offerId": "O4", "totalPrice": "150.00", "origin": "SFO", "destination": "EWR", "date": "2030-05-01",
     "carrierCode": "UA", "departureTime": "22:30", "arrivalTime": "06:55"},
]


@pytest.fixture
def mock_settings(tmp_path):
    """Settings pointing at a temporary mock-data directory."""
    (tmp_path / "schedules.json").write_text(json.dumps({"schedules": SCHEDULES}), encoding="utf-8")
    (tmp_path / "offers.json").write_text(json.dumps({"offers": OFFERS}), encoding="utf-8")
    return Settings(
        data_mode="MOCK",
        mock_data_dir=tmp_path,
        mock_delay_ms=0,
        output_html=tmp_path / "flights.html",
        log_level="INFO",
    )


def make_schedule(flight_id: str, departure: str, arrival: str, destination: str = "EWR",
                  carrier: str = "UA", duration: int | None = None) -> FlightSchedule:
    return FlightSchedule(
        flight_id=flight_id,
        carrier_code=carrier,
        flight_number=flight_id[2:],
        origin="SFO",
        destination=destination,
        departure_time=departure,
        arrival_time=arrival,
        duration_minutes=duration,
        date="2030-05-01",
    )


def make_offer(offer_id: str, price: float, departure: str, arrival: str,
               carriers: list[str] | None = None, duration: int | None = None) -> FlightOffer:
    carriers = carriers if carriers is not None else ["UA"]
    segments = [Segment(code, "1", "EWR", "SFO", departure, arrival) for code in carriers]
    return FlightOffer(
        offer_id=offer_id,
        total_price=price,
        currency="USD",
        carrier_codes=carriers,
        departure_time=departure,
        arrival_time=arrival,
        duration_minutes=duration,
        origin="EWR",
        destination="SFO",
        date="2030-05-01",
        segments=segments,
        stops=max(len(segments) - 1, 0),
    )
