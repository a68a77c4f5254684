from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from .timewindow import DayOffset, calculate_duration, day_offset, is_time_in_range

SearchMode = Literal["schedules", "offers"]
SortKey = Literal["price", "departure", "duration"]


@dataclass(frozen=True, slots=True)
class TimeRange:
    """User-entered time-of-day window.

    A missing bound is stored as None rather than an empty string, so that
    "no filter" is never confused with a malformed value.
    start > end means the window wraps through midnight.
    """
    start: str | None = None
    end: str | None = None

    @classmethod
    def from_inputs(cls, start: str | None, end: str | None) -> "TimeRange":
        def clean(value: str | None) -> str | None:
            if value is None:
                return None
            value = value.strip()
            return value or None
        return cls(clean(start), clean(end))

    @property
    def is_unbounded(self) -> bool:
        return self.start is None or self.end is None

    def contains(self, time: str | None) -> bool:
        return is_time_in_range(time, self.start, self.end)


@dataclass(frozen=True, slots=True)
class FlightTiming:
    departure: str
    arrival: str

    @property
    def day_offset(self) -> DayOffset:
        return day_offset(self.departure, self.arrival)

    @property
    def is_overnight(self) -> bool:
        return self.day_offset is DayOffset.NEXT_DAY

    @property
    def duration_minutes(self) -> int | None:
        return calculate_duration(self.departure, self.arrival)


@dataclass(frozen=True, slots=True)
class Airport:
    iata: str
    name: str
    city: str
    state: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class Segment:
    carrier_code: str
    flight_number: str
    origin: str
    destination: str
    departure_time: str
    arrival_time: str


@dataclass(slots=True)
class FlightSchedule:
    """Single scheduled flight, already normalized from the raw data feed.

    departure_time / arrival_time are local HH:MM strings; duration_minutes is
    taken from the feed or computed from the clock times.
    """
    flight_id: str
    carrier_code: str
    flight_number: str
    origin: str
    destination: str
    departure_time: str
    arrival_time: str
    duration_minutes: int | None
    date: str
    aircraft: str | None = None
    stops: int = 0

    @property
    def timing(self) -> FlightTiming:
        return FlightTiming(self.departure_time, self.arrival_time)


@dataclass(slots=True)
class FlightOffer:
    """Priced itinerary; times come from the first and last segment."""
    offer_id: str
    total_price: float
    currency: str
    carrier_codes: list[str]
    departure_time: str
    arrival_time: str
    duration_minutes: int | None
    origin: str
    destination: str
    date: str
    segments: list[Segment] = field(default_factory=list)
    stops: int = 0

    @property
    def timing(self) -> FlightTiming:
        return FlightTiming(self.departure_time, self.arrival_time)


FlightResult: TypeAlias = FlightSchedule | FlightOffer
