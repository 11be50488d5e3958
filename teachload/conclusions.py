"""
Qualitative conclusions derived from Metrics (no re-scan of sessions).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from teachload.model import DAYS_OF_WEEK, LECTURE, PRACTICUM, SHIFTS, SINGLE_PERIOD, WEEKEND_CLASS

if TYPE_CHECKING:
    from teachload.model import Metrics


SHIFT_LABELS = {"morning": "Morning", "afternoon": "Afternoon", "evening": "Evening"}


def percent(part: int, total: int) -> int:
    """Rounded (half up) percentage; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(part * 100 / total + 0.5)


def synthesize_conclusions(metrics: Metrics) -> list[str]:
    conclusions: list[str] = []
    total = metrics.total_hours

    # 1. where in the semester the load sits
    half = metrics.total_weeks // 2
    first_half = sum(h for week, h in metrics.hours_by_week.items() if week <= half)
    if first_half > total * 0.6:
        conclusions.append("Load concentrated at the start of the semester")
    elif first_half < total * 0.4:
        conclusions.append("Load concentrated at the end of the semester")
    else:
        conclusions.append("Load evenly distributed across the semester")

    # 2. lecture vs practicum
    lt = metrics.type_distribution.get(LECTURE, 0)
    th = metrics.type_distribution.get(PRACTICUM, 0)
    if th > lt:
        conclusions.append(f"Practicum dominates ({percent(th, total)}%)")
    else:
        conclusions.append(f"Lecture dominates ({percent(lt, total)}%)")

    # 3. peak time
    peak_shift = SHIFTS[0]
    for shift in SHIFTS:
        if metrics.shift_stats[shift].hours > metrics.shift_stats[peak_shift].hours:
            peak_shift = shift
    busy_day = metrics.busiest_day.day if metrics.busiest_day.day in DAYS_OF_WEEK else DAYS_OF_WEEK[0]
    conclusions.append(f"{SHIFT_LABELS[peak_shift]} and {busy_day} are the peak times")

    # 4. efficiency
    counts = metrics.warning_counts
    if counts.get(SINGLE_PERIOD, 0) > 0 or counts.get(WEEKEND_CLASS, 0) > 0:
        conclusions.append("Single-period and weekend sessions could be optimised")

    return conclusions
