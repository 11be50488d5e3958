"""
JSON snapshots of a schedule.

A snapshot is the JSON form of ScheduleData as produced by the timetable
scraper or by a previous backup, e.g.:

    {
      "metadata": {"teacher": "...", "semester": "2", "academicYear": "2025-2026"},
      "weeks": [{"weekNumber": 1, "dateRange": "...", "days": {"Monday": {...}}}],
      "allCourses": [...],
      "overrides": {"MHCĐO1092.001": "LT"},
      "abbreviations": {"TH NCKH": "NCKH"}
    }

Design rationale:
- schedule_from_dict / schedule_to_dict are pure and do all the validation
- load_snapshot / save_snapshot are the only functions touching files

Structural problems (no weeks, wrong container types) raise ScheduleFormatError.
Small gaps (missing periodCount, missing weekdays) are filled in instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from teachload.model import (
    COURSE_TYPES,
    DAYS_OF_WEEK,
    SHIFTS,
    CourseInfo,
    CourseSession,
    DaySchedule,
    ScheduleData,
    ScheduleMetadata,
    WeekSchedule,
)
from teachload.overlays import default_course_type
from teachload.periods import period_count

logger = logging.getLogger(__name__)


class ScheduleFormatError(ValueError):
    """The input does not have the ScheduleData shape."""


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _expect_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ScheduleFormatError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _expect_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ScheduleFormatError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _session_from_dict(raw: Any, day: str, shift: str) -> CourseSession:
    d = _expect_dict(raw, f"session on {day} ({shift})")
    course_code = _safe_str(d.get("courseCode")).strip()
    time_slot = _safe_str(d.get("timeSlot")).strip()

    session_type = _safe_str(d.get("type")).strip().upper() or default_course_type(course_code)
    if session_type not in COURSE_TYPES:
        raise ScheduleFormatError(f"Invalid session type {session_type!r} for {course_code}")

    count = d.get("periodCount")
    if not isinstance(count, int) or isinstance(count, bool):
        count = period_count(time_slot)

    return CourseSession(
        course_code=course_code,
        course_name=_safe_str(d.get("courseName")).strip(),
        group=_safe_str(d.get("group")).strip(),
        class_name=_safe_str(d.get("className")).strip(),
        time_slot=time_slot,
        period_count=count,
        room=_safe_str(d.get("room")).strip(),
        teacher=_safe_str(d.get("teacher")).strip(),
        day_of_week=_safe_str(d.get("dayOfWeek")).strip() or day,
        shift=_safe_str(d.get("sessionTime")).strip() or shift,
        type=session_type,
        has_conflict=bool(d.get("hasConflict", False)),
    )


def _week_from_dict(raw: Any, position: int) -> WeekSchedule:
    w = _expect_dict(raw, f"week #{position}")
    days_raw = _expect_dict(w.get("days") or {}, f"week #{position} days")

    unknown = sorted(set(days_raw) - set(DAYS_OF_WEEK))
    if unknown:
        logger.warning("Week #%d: ignoring unknown weekdays %s", position, ", ".join(unknown))

    days: dict[str, DaySchedule] = {}
    for day in DAYS_OF_WEEK:
        parts = _expect_dict(days_raw.get(day) or {}, f"week #{position} {day}")
        days[day] = DaySchedule(
            **{
                shift: [
                    _session_from_dict(s, day, shift) for s in _expect_list(parts.get(shift) or [], f"{day} {shift}")
                ]
                for shift in SHIFTS
            }
        )

    number = w.get("weekNumber")
    if not isinstance(number, int) or isinstance(number, bool):
        number = position

    return WeekSchedule(week_number=number, date_range=_safe_str(w.get("dateRange")), days=days)


def _count(value: Any, what: str) -> int:
    if value is None:
        return 0
    if not isinstance(value, bool):
        try:
            return int(value)
        except (TypeError, ValueError):
            pass
    logger.warning("%s: expected a number, got %r; using 0", what, value)
    return 0


def _course_from_dict(raw: Any) -> CourseInfo:
    c = _expect_dict(raw, "course")
    code = _safe_str(c.get("code")).strip()
    return CourseInfo(
        code=code,
        name=_safe_str(c.get("name")).strip(),
        groups=[_safe_str(x) for x in _expect_list(c.get("groups") or [], f"{code} groups")],
        classes=[_safe_str(x) for x in _expect_list(c.get("classes") or [], f"{code} classes")],
        types=[_safe_str(x) for x in _expect_list(c.get("types") or [], f"{code} types")],
        total_periods=_count(c.get("totalPeriods"), f"{code} totalPeriods"),
        total_sessions=_count(c.get("totalSessions"), f"{code} totalSessions"),
    )


def schedule_from_dict(data: Any) -> ScheduleData:
    """
    Convert a parsed JSON snapshot into ScheduleData.

    Raises ScheduleFormatError if `weeks` or `metadata` are missing or malformed.
    """
    root = _expect_dict(data, "snapshot")
    if "weeks" not in root:
        raise ScheduleFormatError("snapshot has no 'weeks'")

    meta = _expect_dict(root.get("metadata") or {}, "metadata")
    metadata = ScheduleMetadata(
        teacher=_safe_str(meta.get("teacher")).strip(),
        semester=_safe_str(meta.get("semester")),
        academic_year=_safe_str(meta.get("academicYear")),
        extracted_date=meta.get("extractedDate"),
    )

    weeks = [_week_from_dict(w, i) for i, w in enumerate(_expect_list(root["weeks"], "weeks"), start=1)]
    courses = [_course_from_dict(c) for c in _expect_list(root.get("allCourses") or [], "allCourses")]

    overrides: dict[str, str] = {}
    for code, value in _expect_dict(root.get("overrides") or {}, "overrides").items():
        value = _safe_str(value).strip().upper()
        if value not in COURSE_TYPES:
            raise ScheduleFormatError(f"Invalid override {value!r} for {code}")
        overrides[str(code)] = value

    abbreviations = {
        str(name): _safe_str(label)
        for name, label in _expect_dict(root.get("abbreviations") or {}, "abbreviations").items()
        if _safe_str(label).strip()
    }

    return ScheduleData(
        metadata=metadata,
        weeks=weeks,
        all_courses=courses,
        overrides=overrides,
        abbreviations=abbreviations,
    )


def _session_to_dict(s: CourseSession) -> dict[str, Any]:
    return {
        "courseCode": s.course_code,
        "courseName": s.course_name,
        "group": s.group,
        "className": s.class_name,
        "timeSlot": s.time_slot,
        "periodCount": s.period_count,
        "room": s.room,
        "teacher": s.teacher,
        "type": s.type,
        "dayOfWeek": s.day_of_week,
        "sessionTime": s.shift,
        "hasConflict": s.has_conflict,
    }


def schedule_to_dict(schedule: ScheduleData) -> dict[str, Any]:
    """
    Inverse of schedule_from_dict; overlays are included so a backup restores
    the user's corrections too.
    """
    meta: dict[str, Any] = {
        "teacher": schedule.metadata.teacher,
        "semester": schedule.metadata.semester,
        "academicYear": schedule.metadata.academic_year,
    }
    if schedule.metadata.extracted_date:
        meta["extractedDate"] = schedule.metadata.extracted_date

    return {
        "metadata": meta,
        "weeks": [
            {
                "weekNumber": w.week_number,
                "dateRange": w.date_range,
                "days": {
                    day: {shift: [_session_to_dict(s) for s in w.day(day).shift_sessions(shift)] for shift in SHIFTS}
                    for day in DAYS_OF_WEEK
                },
            }
            for w in schedule.weeks
        ],
        "allCourses": [
            {
                "code": c.code,
                "name": c.name,
                "groups": list(c.groups),
                "classes": list(c.classes),
                "types": list(c.types),
                "totalPeriods": c.total_periods,
                "totalSessions": c.total_sessions,
            }
            for c in schedule.all_courses
        ],
        "overrides": dict(schedule.overrides),
        "abbreviations": dict(schedule.abbreviations),
    }


def load_snapshot(path: str | Path) -> ScheduleData:
    """
    Read a snapshot file. Unreadable JSON is reported as ScheduleFormatError.
    """
    snapshot_path = Path(path)
    try:
        data = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ScheduleFormatError(f"{snapshot_path} is not a valid JSON snapshot: {exc}") from exc
    return schedule_from_dict(data)


def save_snapshot(schedule: ScheduleData, path: str | Path) -> None:
    """
    Write a snapshot file (creates parent directories if needed).
    """
    snapshot_path = Path(path)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_path.write_text(
        json.dumps(schedule_to_dict(schedule), indent=2, ensure_ascii=False), encoding="utf-8"
    )
