"""Clock-time arithmetic and time-of-day filtering for flight results.

All inputs are local wall-clock ``HH:MM`` strings. Nothing here knows about
calendar dates: a flight whose arrival clock time is earlier than its departure
clock time is assumed to land on the following day.

None of these functions raise. Malformed clock strings become ``None`` and
every range test involving them evaluates to ``False``, so a single bad record
never aborts a filtering pass over a result set.
"""
import logging
from enum import Enum

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


class DayOffset(Enum):
    """Calendar-day shift of an arrival relative to its departure."""
    SAME_DAY = 0
    NEXT_DAY = 1

    @property
    def badge(self) -> str:
        return f"+{self.value}" if self.value else ""


def _is_absent(value: str | None) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_clock_part(part: str) -> int | None:
    # ASCII digits with an optional sign only
    part = part.strip()
    digits = part[1:] if part.startswith(('+', '-')) else part
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(part)


def to_minute_of_day(time: str | None) -> int | None:
    """Convert ``HH:MM`` to minutes since local midnight.

    Hour and minute are not bounds-checked, so ``"25:99"`` gives 1599.
    Returns None when the value cannot be parsed.
    """
    if not isinstance(time, str):
        return None
    parts = time.split(':')
    if len(parts) < 2:
        return None
    hours = _parse_clock_part(parts[0])
    minutes = _parse_clock_part(parts[1])
    if hours is None or minutes is None:
        return None
    return hours * 60 + minutes



def day_offset(departure: str | None, arrival: str | None) -> DayOffset:
    # Heuristic: equal clock times are same-day, so a flight of exactly 24h is misclassified.
    dep = to_minute_of_day(departure)
    arr = to_minute_of_day(arrival)
    if dep is None or arr is None:
        return DayOffset.SAME_DAY
    return DayOffset.NEXT_DAY if arr < dep else DayOffset.SAME_DAY


def is_overnight_flight(departure: str | None, arrival: str | None) -> bool:
    return day_offset(departure, arrival) is DayOffset.NEXT_DAY


def is_time_in_range(time: str | None, range_start: str | None, range_end: str | None) -> bool:
    """Check whether ``time`` falls inside the closed window ``[range_start, range_end]``.

    A window whose start is later than its end wraps through midnight, so
    22:00-06:00 matches 23:30 and 05:59 but not 12:00. Any absent argument
    imposes no constraint and the check passes.
    """
    if _is_absent(time) or _is_absent(range_start) or _is_absent(range_end):
        return True

    t = to_minute_of_day(time)
    start = to_minute_of_day(range_start)
    end = to_minute_of_day(range_end)
    if t is None or start is None or end is None:
        logger.debug('Malformed time in range check: %r in %r-%r', time, range_start, range_end)
        return False

    if start <= end:
        return start <= t <= end
    return t >= start or t <= end


def is_arrival_time_in_range(
        departure: str | None,
        arrival: str | None,
        filter_start: str | None,
        filter_end: str | None,
) -> bool:
    """Apply an arrival time-of-day filter to a flight.

    The window is matched against the arrival clock time only. A flight leaving
    at 23:00 and landing at 01:00 the next day counts as a 00:00-02:00 arrival:
    users asking for morning arrivals want to land in the morning, whichever
    day that morning is.
    """
    if _is_absent(arrival) or _is_absent(filter_start) or _is_absent(filter_end):
        return True

    offset = day_offset(departure, arrival)
    logger.debug('Arrival %s (%s) checked against %s-%s', arrival, offset.name, filter_start, filter_end)
    return is_time_in_range(arrival, filter_start, filter_end)


def calculate_duration(departure: str | None, arrival: str | None) -> int | None:
    dep = to_minute_of_day(departure)
    arr = to_minute_of_day(arrival)
    if dep is None or arr is None:
        return None
    duration = arr - dep
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def format_duration(minutes: int | None) -> str:
    if not minutes:
        return 'N/A'
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f'{mins}m'
    if mins == 0:
        return f'{hours}h'
    return f'{hours}h {mins}m'
