"""
Course catalog report.

One row per catalog entry (allCourses) with its resolved type, the totals
recorded in the catalog itself, and how many periods / sessions the
timetable actually holds for that course code.
"""

from __future__ import annotations

import csv
import io
from collections import defaultdict
from dataclasses import dataclass

from teachload.model import DAYS_OF_WEEK, ScheduleData
from teachload.overlays import default_course_type

CSV_HEADER = [
    "Code",
    "Name",
    "Classes",
    "Groups",
    "Type",
    "Total periods",
    "Total sessions",
    "Scheduled periods",
    "Scheduled sessions",
]


@dataclass
class CourseRow:
    code: str
    name: str
    classes: list[str]
    groups: list[str]
    type: str
    total_periods: int
    total_sessions: int
    scheduled_periods: int
    scheduled_sessions: int


def course_rows(schedule: ScheduleData) -> list[CourseRow]:
    """
    Catalog rows in catalog order. total_* are the catalog's own figures;
    scheduled_* count every session of the code in the timetable, whoever
    teaches it.
    """
    periods: dict[str, int] = defaultdict(int)
    sessions: dict[str, int] = defaultdict(int)
    for week in schedule.weeks:
        for day in DAYS_OF_WEEK:
            for s in week.day(day).all_sessions():
                periods[s.course_code] += s.period_count
                sessions[s.course_code] += 1

    rows: list[CourseRow] = []
    for c in schedule.all_courses:
        rows.append(
            CourseRow(
                code=c.code,
                name=c.name,
                classes=list(c.classes),
                groups=list(c.groups),
                type=schedule.overrides.get(c.code) or default_course_type(c.code),
                total_periods=c.total_periods,
                total_sessions=c.total_sessions,
                scheduled_periods=periods.get(c.code, 0),
                scheduled_sessions=sessions.get(c.code, 0),
            )
        )
    return rows


def catalog_csv(schedule: ScheduleData) -> str:
    """
    CSV text with a UTF-8 BOM so spreadsheet tools pick the right encoding.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC)
    writer.writerow(CSV_HEADER)
    for row in course_rows(schedule):
        writer.writerow(
            [
                row.code,
                row.name,
                ", ".join(row.classes),
                ", ".join(row.groups),
                row.type,
                row.total_periods,
                row.total_sessions,
                row.scheduled_periods,
                row.scheduled_sessions,
            ]
        )
    return "\ufeff" + buf.getvalue()
