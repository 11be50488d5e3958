"""
Period table.

Teaching days are split into numbered periods. This module maps a period index
to its wall-clock start/end time and parses period ranges such as "6-9".

Periods 5 and 13 are reserve slots; they still have fixed times.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from teachload.model import LECTURE, CourseSession


PERIOD_TIMES: dict[int, tuple[time, time]] = {
    # morning
    1: (time(7, 0), time(7, 45)),
    2: (time(7, 55), time(8, 40)),
    3: (time(8, 50), time(9, 35)),
    4: (time(9, 45), time(10, 30)),
    5: (time(10, 40), time(11, 25)),
    # afternoon
    6: (time(13, 30), time(14, 15)),
    7: (time(14, 25), time(15, 10)),
    8: (time(15, 20), time(16, 5)),
    9: (time(16, 15), time(17, 0)),
    # evening
    10: (time(17, 10), time(17, 55)),
    11: (time(18, 0), time(18, 45)),
    12: (time(18, 50), time(19, 35)),
    13: (time(19, 45), time(20, 30)),
}

LECTURE_PERIOD_MINUTES = 45
PRACTICUM_PERIOD_MINUTES = 60


def parse_period_range(time_slot: str) -> Optional[Tuple[int, int]]:
    """
    Parse "6-9" -> (6, 9). A single index "5" is read as (5, 5).

    Returns None for anything that is not one or two integers.
    """
    parts = [p.strip() for p in str(time_slot).split("-")]
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2:
        return None
    try:
        first, last = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    return first, last


def period_count(time_slot: str) -> int:
    """Number of periods covered by a range, 0 if it cannot be parsed."""
    bounds = parse_period_range(time_slot)
    if bounds is None:
        return 0
    first, last = bounds
    return max(last - first + 1, 0)


def slot_times(time_slot: str) -> Optional[Tuple[time, time]]:
    """
    Wall-clock (start, end) of a range: start of its first period and end of
    its last one. None if either period has no table entry.
    """
    bounds = parse_period_range(time_slot)
    if bounds is None:
        return None
    first, last = bounds
    if first not in PERIOD_TIMES or last not in PERIOD_TIMES:
        return None
    return PERIOD_TIMES[first][0], PERIOD_TIMES[last][1]


def is_session_in_progress(session: CourseSession, session_date: date, now: datetime) -> bool:
    """
    True if `now` lies inside the session on `session_date`.

    The session runs from the start of its first period until the start of its
    last period plus one period length (45 min for LT, 60 min for TH).
    """
    if now.date() != session_date:
        return False

    bounds = parse_period_range(session.time_slot)
    if bounds is None or bounds[0] not in PERIOD_TIMES:
        return False
    first, last = bounds

    start = datetime.combine(session_date, PERIOD_TIMES[first][0])
    last_start = PERIOD_TIMES[last][0] if last in PERIOD_TIMES else PERIOD_TIMES[first][0]
    minutes = LECTURE_PERIOD_MINUTES if session.type == LECTURE else PRACTICUM_PERIOD_MINUTES
    end = datetime.combine(session_date, last_start) + timedelta(minutes=minutes)

    current = now.replace(second=0, microsecond=0, tzinfo=None)
    return start <= current <= end
