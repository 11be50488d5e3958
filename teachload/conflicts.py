"""
Conflict detection.

Finds double-bookings within one calendar day (all shifts pooled):
an instructor cannot be in two rooms during the same periods.

Conflict rule:
    same teacher AND same time_slot AND different room

Same-room duplicates are not conflicts. Detection never mutates sessions;
annotate_conflicts() builds a flagged copy of the schedule instead.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from teachload.model import (
    DAYS_OF_WEEK,
    SHIFTS,
    CourseSession,
    DaySchedule,
    ScheduleData,
    SlotKey,
    WeekSchedule,
)


def _double_booked(a: CourseSession, b: CourseSession) -> bool:
    return a.teacher == b.teacher and a.time_slot == b.time_slot and a.room != b.room


def find_day_conflicts(sessions: list[CourseSession]) -> list[tuple[CourseSession, CourseSession]]:
    """
    Find double-booked session pairs (A,B) of one day, each pair once (i<j).
    """
    conflicts: list[tuple[CourseSession, CourseSession]] = []

    # O(n^2) is fine, a day holds a handful of sessions
    for i in range(len(sessions)):
        s1 = sessions[i]
        for j in range(i + 1, len(sessions)):
            s2 = sessions[j]
            if _double_booked(s1, s2):
                conflicts.append((s1, s2))

    return conflicts


def slot_key(week_number: int, day: str, session: CourseSession) -> SlotKey:
    return (week_number, day, session.time_slot, session.teacher, session.room)


def week_conflicts(week: WeekSchedule) -> set[SlotKey]:
    keys: set[SlotKey] = set()
    for day in DAYS_OF_WEEK:
        for a, b in find_day_conflicts(week.day(day).all_sessions()):
            # both sides are flagged
            keys.add(slot_key(week.week_number, day, a))
            keys.add(slot_key(week.week_number, day, b))
    return keys


def detect_conflicts(schedule: ScheduleData) -> set[SlotKey]:
    """
    Slot keys of every double-booked session in the schedule.
    """
    keys: set[SlotKey] = set()
    for week in schedule.weeks:
        keys |= week_conflicts(week)
    return keys


def _annotate_day(week_number: int, day: str, parts: DaySchedule, keys: set[SlotKey]) -> DaySchedule:
    flagged = {
        shift: [
            replace(s, has_conflict=slot_key(week_number, day, s) in keys)
            for s in parts.shift_sessions(shift)
        ]
        for shift in SHIFTS
    }
    return DaySchedule(**flagged)


def annotate_conflicts(schedule: ScheduleData, keys: Optional[Iterable[SlotKey]] = None) -> ScheduleData:
    """
    Return a copy of `schedule` whose sessions carry has_conflict.

    Flags are recomputed from scratch, so stale flags in the input are
    overwritten rather than accumulated.
    """
    key_set = set(keys) if keys is not None else detect_conflicts(schedule)
    weeks = [
        replace(
            week,
            days={day: _annotate_day(week.week_number, day, week.day(day), key_set) for day in DAYS_OF_WEEK},
        )
        for week in schedule.weeks
    ]
    return replace(schedule, weeks=weeks)
