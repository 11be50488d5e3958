"""
Session filters.

A SessionFilter narrows a list of sessions the way a timetable view does:
free-text search over course name / code (case-insensitive substring), plus
exact matches on class, room, teacher and shift. Empty criteria match all.

filter_options() lists the values available for the exact-match criteria.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from teachload.model import DAYS_OF_WEEK, CourseSession, WeekSchedule


@dataclass(frozen=True)
class SessionFilter:
    search: str = ""
    class_name: str = ""
    room: str = ""
    teacher: str = ""
    shift: str = ""

    def is_empty(self) -> bool:
        return not (self.search or self.class_name or self.room or self.teacher or self.shift)

    def matches(self, s: CourseSession) -> bool:
        query = self.search.strip().lower()
        if query and query not in s.course_name.lower() and query not in s.course_code.lower():
            return False
        if self.class_name and s.class_name != self.class_name:
            return False
        if self.room and s.room != self.room:
            return False
        if self.teacher and s.teacher != self.teacher:
            return False
        if self.shift and s.shift != self.shift:
            return False
        return True


@dataclass
class FilterOptions:
    rooms: list[str] = field(default_factory=list)
    teachers: list[str] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)


def filter_sessions(sessions: Iterable[CourseSession], criteria: SessionFilter) -> list[CourseSession]:
    """Keep the sessions matching `criteria`, in their original order."""
    return [s for s in sessions if criteria.matches(s)]


def filter_options(weeks: Iterable[WeekSchedule]) -> FilterOptions:
    """Sorted distinct rooms, teachers and (non-empty) class names."""
    rooms: set[str] = set()
    teachers: set[str] = set()
    classes: set[str] = set()
    for week in weeks:
        for day in DAYS_OF_WEEK:
            for s in week.day(day).all_sessions():
                rooms.add(s.room)
                teachers.add(s.teacher)
                if s.class_name:
                    classes.add(s.class_name)
    return FilterOptions(rooms=sorted(rooms), teachers=sorted(teachers), classes=sorted(classes))
