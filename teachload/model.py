"""
Central data model definitions used across the project.

This module defines the canonical structure of a multi-week teaching timetable
so that:
- all modules share the same field names
- the engine (metrics, conflicts, export) and the CLI agree on one shape
- derived results (Metrics) stay separate from the schedule they came from
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKEND_DAYS = ("Saturday", "Sunday")
SHIFTS = ("morning", "afternoon", "evening")

LECTURE = "LT"
PRACTICUM = "TH"
COURSE_TYPES = (LECTURE, PRACTICUM)

# raw warning tokens collected by the aggregator
EVENING_CLASS = "EVENING_CLASS"
WEEKEND_CLASS = "WEEKEND_CLASS"
SINGLE_PERIOD = "SINGLE_PERIOD"
OVERLOAD_WEEK = "OVERLOAD_WEEK"


@dataclass(frozen=True)
class CourseSession:
    """
    One scheduled meeting of a course group in one shift of one day.

    Sessions are immutable; conflict flags are applied by building annotated
    copies (see conflicts.annotate_conflicts).
    """

    course_code: str
    course_name: str
    group: str
    class_name: str
    time_slot: str
    period_count: int
    room: str
    teacher: str
    day_of_week: str
    shift: str
    type: str
    has_conflict: bool = False


@dataclass
class DaySchedule:
    morning: List[CourseSession] = field(default_factory=list)
    afternoon: List[CourseSession] = field(default_factory=list)
    evening: List[CourseSession] = field(default_factory=list)

    def shift_sessions(self, shift: str) -> List[CourseSession]:
        return getattr(self, shift)

    def all_sessions(self) -> List[CourseSession]:
        """All sessions of the day, pooled in morning/afternoon/evening order."""
        return [*self.morning, *self.afternoon, *self.evening]


def empty_days() -> Dict[str, DaySchedule]:
    return {day: DaySchedule() for day in DAYS_OF_WEEK}


@dataclass
class WeekSchedule:
    """
    One teaching week.

    date_range is free text containing two dd/mm/yyyy dates, e.g.
    "Từ ngày: 12/01/2026 đến ngày 18/01/2026". days always holds all seven
    weekdays (Monday..Sunday).
    """

    week_number: int
    date_range: str
    days: Dict[str, DaySchedule] = field(default_factory=empty_days)

    def day(self, name: str) -> DaySchedule:
        return self.days.get(name) or DaySchedule()


@dataclass
class ScheduleMetadata:
    teacher: str
    semester: str = ""
    academic_year: str = ""
    extracted_date: Optional[str] = None


@dataclass
class CourseInfo:
    """
    One course/group identity from the catalog (allCourses).
    """

    code: str
    name: str
    groups: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    total_periods: int = 0
    total_sessions: int = 0


@dataclass
class ScheduleData:
    """
    A complete timetable snapshot plus its read-time overlays.

    overrides maps course code -> corrected type (LT/TH).
    abbreviations maps course name -> short display label.
    """

    metadata: ScheduleMetadata
    weeks: List[WeekSchedule]
    all_courses: List[CourseInfo] = field(default_factory=list)
    overrides: Dict[str, str] = field(default_factory=dict)
    abbreviations: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LoadLevel:
    warning: int
    danger: int


@dataclass(frozen=True)
class Thresholds:
    """
    User-configurable load levels. Used for presentation colouring only.
    """

    daily: LoadLevel = LoadLevel(warning=8, danger=10)
    weekly: LoadLevel = LoadLevel(warning=25, danger=35)


# ---------------------------------------------------------------------------
# Aggregated results
# ---------------------------------------------------------------------------


# (week_number, day, time_slot, teacher, room)
SlotKey = Tuple[int, str, str, str, str]


@dataclass
class ShiftStat:
    hours: int = 0
    sessions: int = 0


@dataclass
class DayLoad:
    day: str
    hours: int


@dataclass
class BusiestWeek:
    week: int
    hours: int
    range: str


@dataclass
class RoomLoad:
    room: str
    periods: int


@dataclass
class ClassLoad:
    class_name: str
    periods: int


@dataclass
class CoTeacher:
    name: str
    periods: int
    subjects: List[str]


@dataclass
class Metrics:
    """
    Everything the aggregator derives from one ScheduleData.

    Hours are counted in periods. Metrics holds no reference back to the
    schedule, so it can be compared, cached or discarded freely.
    """

    total_weeks: int
    total_hours: int
    total_sessions: int
    total_courses: int
    total_groups: int
    total_rooms: int
    busiest_day: DayLoad
    busiest_week: BusiestWeek
    hours_by_day: Dict[str, int]
    hours_by_week: Dict[int, int]
    type_distribution: Dict[str, int]
    shift_stats: Dict[str, ShiftStat]
    top_rooms: List[RoomLoad]
    class_distribution: List[ClassLoad]
    co_teachers: List[CoTeacher]
    warning_counts: Dict[str, int]
    warnings: List[str]
    overload_weeks: List[int]
    peak_week_heatmap: List[DayLoad]
    peak_week_shift_stats: Dict[str, int]
    conflicts: List[SlotKey] = field(default_factory=list)
    conclusions: List[str] = field(default_factory=list)
