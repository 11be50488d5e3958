"""
Load metrics.

calculate_metrics() walks every week / weekday / shift / session once and
derives the primary teacher's load profile:

- totals (periods, sessions), histograms per day, week, type, room, class, shift
- co-teacher tallies (sessions attributed to other instructors)
- warnings (evening, weekend, single-period, overloaded weeks)
- the busiest week with its per-day heat values and per-shift session counts
- double-booking slot keys (see conflicts.py)

All "hours" are counted in periods. The result is recomputed wholesale for
every schedule / overlay change; nothing is patched incrementally.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Optional

from teachload.conclusions import synthesize_conclusions
from teachload.conflicts import week_conflicts
from teachload.model import (
    COURSE_TYPES,
    DAYS_OF_WEEK,
    EVENING_CLASS,
    OVERLOAD_WEEK,
    SHIFTS,
    SINGLE_PERIOD,
    WEEKEND_CLASS,
    WEEKEND_DAYS,
    BusiestWeek,
    ClassLoad,
    CoTeacher,
    DayLoad,
    Metrics,
    RoomLoad,
    ScheduleData,
    ShiftStat,
)
from teachload.overlays import resolve_type
from teachload.ownership import OwnershipPolicy, substring_ownership

logger = logging.getLogger(__name__)

# Fixed overload check of the aggregator; Thresholds.weekly is not
# consulted here.
WEEKLY_OVERLOAD_PERIODS = 25
TOP_ROOMS = 10


def subject_code(course_code: str) -> str:
    """
    Course code without its group suffix: "MHCĐO1092.001" -> "MHCĐO1092".
    """
    head, dot, _ = course_code.rpartition(".")
    return head if dot else course_code


def _warning_messages(counts: Counter, total_weeks: int) -> list[str]:
    messages: list[str] = []
    if counts[OVERLOAD_WEEK]:
        messages.append(
            f"{counts[OVERLOAD_WEEK]}/{total_weeks} weeks > {WEEKLY_OVERLOAD_PERIODS} periods (warning threshold)"
        )
    if counts[EVENING_CLASS]:
        messages.append(f"{counts[EVENING_CLASS]} evening sessions")
    if counts[WEEKEND_CLASS]:
        messages.append(f"{counts[WEEKEND_CLASS]} weekend sessions (Sat, Sun)")
    if counts[SINGLE_PERIOD]:
        messages.append(f"{counts[SINGLE_PERIOD]} single-period sessions (low efficiency)")
    return messages


def calculate_metrics(
    data: ScheduleData,
    ownership: Optional[OwnershipPolicy] = None,
) -> Metrics:
    """
    Aggregate the primary teacher's load over the whole schedule.

    `ownership` builds the predicate deciding who the primary teacher is;
    defaults to substring matching against metadata.teacher.
    """
    if data.weeks is None:
        raise ValueError("Schedule has no weeks to analyze")

    policy = ownership or substring_ownership
    is_main = policy(data.metadata.teacher or "")

    total_hours = 0
    total_sessions = 0
    hours_by_day = {day: 0 for day in DAYS_OF_WEEK}
    hours_by_week: dict[int, int] = {}
    type_distribution = {t: 0 for t in COURSE_TYPES}
    room_metrics: dict[str, int] = {}
    class_metrics: dict[str, int] = {}
    co_teacher_map: dict[str, CoTeacher] = {}
    shift_stats = {shift: ShiftStat() for shift in SHIFTS}
    tokens: Counter = Counter()
    overload_weeks: list[int] = []
    conflicts: set = set()

    busiest_week = BusiestWeek(week=1, hours=0, range="")
    peak_week_heatmap: list[DayLoad] = []
    peak_week_shift_stats = {shift: 0 for shift in SHIFTS}

    for week in data.weeks:
        conflicts |= week_conflicts(week)

        week_total = 0
        week_heatmap = {day: 0 for day in DAYS_OF_WEEK}
        week_shifts = {shift: 0 for shift in SHIFTS}

        for day in DAYS_OF_WEEK:
            parts = week.day(day)
            for shift in SHIFTS:
                for s in parts.shift_sessions(shift):
                    if not is_main(s.teacher):
                        co = co_teacher_map.setdefault(s.teacher, CoTeacher(name=s.teacher, periods=0, subjects=[]))
                        co.periods += s.period_count
                        if s.course_name not in co.subjects:
                            co.subjects.append(s.course_name)
                        continue

                    periods = s.period_count
                    shift_stats[shift].sessions += 1
                    shift_stats[shift].hours += periods
                    total_sessions += 1
                    total_hours += periods

                    session_type = resolve_type(s, data.overrides)
                    type_distribution[session_type] = type_distribution.get(session_type, 0) + periods
                    room_metrics[s.room] = room_metrics.get(s.room, 0) + periods
                    if s.class_name:
                        class_metrics[s.class_name] = class_metrics.get(s.class_name, 0) + periods

                    hours_by_day[day] += periods
                    week_total += periods
                    week_heatmap[day] += periods
                    week_shifts[shift] += 1

                    if shift == "evening":
                        tokens[EVENING_CLASS] += 1
                    # weekday bucket, not s.day_of_week; they differ only in inconsistent input
                    if day in WEEKEND_DAYS:
                        tokens[WEEKEND_CLASS] += 1
                    if periods == 1:
                        tokens[SINGLE_PERIOD] += 1

        hours_by_week[week.week_number] = week_total
        if week_total > WEEKLY_OVERLOAD_PERIODS:
            tokens[OVERLOAD_WEEK] += 1
            overload_weeks.append(week.week_number)

        # strict > keeps the earliest week on ties
        if week_total > busiest_week.hours:
            busiest_week = BusiestWeek(week=week.week_number, hours=week_total, range=week.date_range)
            peak_week_heatmap = [DayLoad(day=d, hours=h) for d, h in week_heatmap.items()]
            peak_week_shift_stats = week_shifts

    busiest_day = DayLoad(day=DAYS_OF_WEEK[0], hours=0)
    for day, hours in hours_by_day.items():
        if hours > busiest_day.hours:
            busiest_day = DayLoad(day=day, hours=hours)

    unique_subjects = {subject_code(c.code) for c in data.all_courses}

    # sorted() is stable: ties keep first-seen order
    top_rooms = [
        RoomLoad(room=room, periods=periods)
        for room, periods in sorted(room_metrics.items(), key=lambda kv: kv[1], reverse=True)[:TOP_ROOMS]
    ]
    class_distribution = [
        ClassLoad(class_name=name, periods=periods)
        for name, periods in sorted(class_metrics.items(), key=lambda kv: kv[1], reverse=True)
    ]

    logger.debug(
        "Aggregated %d weeks: %d periods in %d sessions, %d co-teachers, %d conflicting slots",
        len(data.weeks),
        total_hours,
        total_sessions,
        len(co_teacher_map),
        len(conflicts),
    )

    metrics = Metrics(
        total_weeks=len(data.weeks),
        total_hours=total_hours,
        total_sessions=total_sessions,
        total_courses=len(unique_subjects),
        total_groups=len(data.all_courses),
        total_rooms=len(room_metrics),
        busiest_day=busiest_day,
        busiest_week=busiest_week,
        hours_by_day=hours_by_day,
        hours_by_week=hours_by_week,
        type_distribution=type_distribution,
        shift_stats=shift_stats,
        top_rooms=top_rooms,
        class_distribution=class_distribution,
        co_teachers=list(co_teacher_map.values()),
        warning_counts=dict(tokens),
        warnings=_warning_messages(tokens, len(data.weeks)),
        overload_weeks=overload_weeks,
        peak_week_heatmap=peak_week_heatmap,
        peak_week_shift_stats=peak_week_shift_stats,
        conflicts=sorted(conflicts),
    )
    return replace(metrics, conclusions=synthesize_conclusions(metrics))
