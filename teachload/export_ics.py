"""
iCalendar (.ics) export.

We convert the selected instructors' sessions of one week into a calendar file
that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Times are floating local times (no timezone), taken from the period table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterable, Mapping, Optional

from teachload.dates import day_date
from teachload.model import DAYS_OF_WEEK, WeekSchedule
from teachload.overlays import display_name, resolve_type
from teachload.periods import slot_times

logger = logging.getLogger(__name__)

PRODID = "-//teachload//Timetable//EN"
DESCRIPTION_SEPARATOR = " / "


@dataclass
class CalendarExport:
    """
    Result of one export: the document text, the generated event records and
    the number of sessions skipped because their periods have no known times.
    """

    text: str
    events: list[dict[str, str]] = field(default_factory=list)
    skipped: int = 0


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, at: time) -> str:
    """
    Floating local datetime 'YYYYMMDDTHHMMSS'.
    """
    return datetime.combine(day, at).strftime("%Y%m%dT%H%M%S")


def week_teachers(week: WeekSchedule) -> list[str]:
    """
    Distinct instructors of a week, sorted (the default export selection).
    """
    names = {s.teacher for day in DAYS_OF_WEEK for s in week.day(day).all_sessions()}
    return sorted(names)


def _unique_uid(base: str, seen: set[str]) -> str:
    uid = f"{base}@teachload"
    n = 1
    while uid in seen:
        n += 1
        uid = f"{base}-{n}@teachload"
    seen.add(uid)
    return uid


def build_week_events(
    week: WeekSchedule,
    teachers: Iterable[str],
    abbreviations: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> tuple[list[dict[str, str]], int]:
    """
    Build one event record per session of the week whose instructor is in
    `teachers`. Returns (events, skipped).

    UIDs include teacher and room and are unique within the document;
    exact duplicates get a numeric suffix.
    """
    selected = set(teachers)
    events: list[dict[str, str]] = []
    seen_uids: set[str] = set()
    skipped = 0

    for day in DAYS_OF_WEEK:
        sessions = week.day(day).all_sessions()
        if not sessions:
            continue

        on = day_date(week, day)
        if on is None:
            logger.warning(
                "Week %s: unresolvable date range %r, skipping %s", week.week_number, week.date_range, day
            )
            continue

        for s in sessions:
            if s.teacher not in selected:
                continue

            times = slot_times(s.time_slot)
            if times is None:
                logger.debug("No period times for %s %s (%s), skipped", s.course_code, s.time_slot, day)
                skipped += 1
                continue
            start, end = times

            session_type = resolve_type(s, overrides)
            description = DESCRIPTION_SEPARATOR.join(
                [
                    f"Instructor: {s.teacher}",
                    f"Class: {s.class_name}",
                    f"Periods: {s.time_slot} ({session_type})",
                    f"Group: {s.group}",
                    f"Room: {s.room}",
                ]
            )
            dtstart = _dt_local(on, start)
            uid = _unique_uid(f"{s.course_code}-{s.group}-{s.teacher}-{s.room}-{dtstart}", seen_uids)

            events.append(
                {
                    "uid": uid,
                    "summary": f"{display_name(s.course_name, abbreviations)} - {s.class_name}",
                    "location": s.room,
                    "description": description,
                    "start": dtstart,
                    "end": _dt_local(on, end),
                }
            )

    return events, skipped


def render_calendar(events: list[dict[str, str]]) -> str:
    """
    Wrap event records into one VCALENDAR document (CRLF line endings).
    The envelope is written even when there are no events.
    """
    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append(f"PRODID:{PRODID}")
    lines.append("CALSCALE:GREGORIAN")

    for ev in events:
        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(ev['uid'])}")
        lines.append(f"SUMMARY:{_ics_escape(ev['summary'])}")
        lines.append(f"LOCATION:{_ics_escape(ev['location'])}")
        lines.append(f"DESCRIPTION:{_ics_escape(ev['description'])}")
        lines.append(f"DTSTART:{ev['start']}")
        lines.append(f"DTEND:{ev['end']}")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    return "\r\n".join(lines) + "\r\n"


def build_week_calendar(
    week: WeekSchedule,
    teachers: Iterable[str],
    abbreviations: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> CalendarExport:
    events, skipped = build_week_events(week, teachers, abbreviations, overrides)
    if skipped:
        logger.info("Week %s export: %d sessions skipped (unknown periods)", week.week_number, skipped)
    return CalendarExport(text=render_calendar(events), events=events, skipped=skipped)


def export_week_to_ics(
    week: WeekSchedule,
    teachers: Iterable[str],
    out_path: str | Path,
    abbreviations: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> CalendarExport:
    """
    Export one week to an .ics file. Returns the CalendarExport written.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    export = build_week_calendar(week, teachers, abbreviations, overrides)
    out.write_text(export.text, encoding="utf-8")
    return export
