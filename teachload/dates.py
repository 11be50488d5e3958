"""
Week date ranges.

Every week carries a free-text range such as
"Từ ngày: 12/01/2026 đến ngày 18/01/2026". The first dd/mm/yyyy token is the
start, the second one the end (positional, never sorted).

All functions take the reference date explicitly instead of reading the clock.
"""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import NamedTuple, Optional, Sequence

from teachload.model import DAYS_OF_WEEK, WeekSchedule

logger = logging.getLogger(__name__)

_DATE_TOKEN = re.compile(r"(\d{2})/(\d{2})/(\d{4})")


class WeekRange(NamedTuple):
    start: date
    end: date


def parse_week_range(text: str) -> Optional[WeekRange]:
    """
    Extract (start, end) from a range string.

    Returns None ("unresolvable") when fewer than two date tokens are present
    or a token is not a real calendar date.
    """
    tokens = _DATE_TOKEN.findall(text or "")
    if len(tokens) < 2:
        return None
    try:
        start, end = (date(int(y), int(m), int(d)) for d, m, y in tokens[:2])
    except ValueError:
        return None
    return WeekRange(start, end)


def week_contains(week: WeekSchedule, reference_date: date) -> bool:
    """Inclusive test; an unresolvable week is never current."""
    rng = parse_week_range(week.date_range)
    if rng is None:
        return False
    return rng.start <= reference_date <= rng.end


def resolve_current_week(weeks: Sequence[WeekSchedule], reference_date: date) -> int:
    """
    Index of the week to show for `reference_date`.

    - first week whose range contains the date
    - 0 if the date is before the first resolvable week (semester not started)
    - last index if it is after the last resolvable week (semester over)
    - in a gap between weeks: the next week that starts after the date
    - 0 if no week has a usable range
    """
    if not weeks:
        raise ValueError("Cannot resolve the current week of an empty schedule")

    ranges: list[tuple[int, WeekRange]] = []
    for idx, week in enumerate(weeks):
        rng = parse_week_range(week.date_range)
        if rng is None:
            logger.warning("Week %s has an unresolvable date range: %r", week.week_number, week.date_range)
            continue
        if rng.start <= reference_date <= rng.end:
            return idx
        ranges.append((idx, rng))

    if not ranges:
        return 0

    if reference_date < ranges[0][1].start:
        return 0
    if reference_date > ranges[-1][1].end:
        return len(weeks) - 1

    for idx, rng in ranges:
        if rng.start > reference_date:
            return idx
    return len(weeks) - 1


def day_date(week: WeekSchedule, weekday: str) -> Optional[date]:
    """
    Calendar date of `weekday` (e.g. "Wednesday") in `week`, derived from the
    week's start date. None if the range cannot be parsed.
    """
    rng = parse_week_range(week.date_range)
    if rng is None:
        return None
    return rng.start + timedelta(days=DAYS_OF_WEEK.index(weekday))
