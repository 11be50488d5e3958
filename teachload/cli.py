"""
CLI (Command Line Interface).

This module provides terminal commands on top of a JSON schedule snapshot, e.g.:

    teachload report <snapshot.json>
    teachload conflicts <snapshot.json>
    teachload current-week <snapshot.json> [--today 2026-01-14] [--search TEXT] [--room R] [--shift S]
    teachload options <snapshot.json>
    teachload export <snapshot.json> <file.ics> [--week 2] [--teacher NAME ...]
    teachload catalog <snapshot.json> <file.csv>
    teachload override <snapshot.json> <course_code> LT|TH
    teachload override <snapshot.json> --all LT|TH
    teachload abbreviate <snapshot.json> <course_name> <label>

Note:
- All analysis lives in the engine modules (metrics, conflicts, export_ics, ...)
- This CLI only loads files, calls the engine and renders with rich
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from teachload.catalog import catalog_csv
from teachload.config import DANGER, WARNING, classify_load, load_thresholds
from teachload.conflicts import annotate_conflicts, detect_conflicts
from teachload.dates import day_date, resolve_current_week
from teachload.export_ics import export_week_to_ics, week_teachers
from teachload.filters import SessionFilter, filter_options, filter_sessions
from teachload.metrics import calculate_metrics
from teachload.model import COURSE_TYPES, DAYS_OF_WEEK, SHIFTS, ScheduleData
from teachload.overlays import display_name
from teachload.periods import is_session_in_progress
from teachload.snapshot import ScheduleFormatError, load_snapshot, save_snapshot

console = Console()

LEVEL_STYLES = {WARNING: "yellow", DANGER: "bold red"}


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def _styled(value: int, level: str) -> str:
    style = LEVEL_STYLES.get(level)
    return f"[{style}]{value}[/]" if style else str(value)


def _reference_date(args: argparse.Namespace) -> date:
    return date.fromisoformat(args.today) if args.today else date.today()


def _cmd_report(args: argparse.Namespace, schedule: ScheduleData) -> int:
    """
    Print totals, per-week loads, the busiest week, rooms, classes,
    co-teachers, warnings and conclusions.
    """
    thresholds = load_thresholds(args.thresholds)
    m = calculate_metrics(schedule)
    meta = schedule.metadata

    console.print(f"\n=== Teaching load: [bold cyan]{escape(meta.teacher or '(unknown)')}[/] ===")
    console.print(f"Semester {escape(meta.semester or '-')} | {escape(meta.academic_year or '-')}")
    console.print(
        f"Weeks: {m.total_weeks} | Sessions: {m.total_sessions} | Periods: {m.total_hours} | "
        f"Subjects: {m.total_courses} | Groups: {m.total_groups} | Classes: {len(m.class_distribution)} | "
        f"Rooms: {m.total_rooms}"
    )
    console.print(" | ".join(f"{t}: {m.type_distribution.get(t, 0)}" for t in COURSE_TYPES))

    table = Table(title="Periods per week", box=box.SIMPLE)
    table.add_column("Week", justify="right")
    table.add_column("Periods", justify="right")
    for week, hours in m.hours_by_week.items():
        table.add_row(str(week), _styled(hours, classify_load(hours, thresholds.weekly)))
    console.print(table)

    table = Table(title="Periods per weekday", box=box.SIMPLE)
    for day in DAYS_OF_WEEK:
        table.add_column(day[:3], justify="right")
    table.add_row(*[str(m.hours_by_day[day]) for day in DAYS_OF_WEEK])
    console.print(table)

    bw = m.busiest_week
    console.print(f"Busiest week: [bold]{bw.week}[/] ({escape(bw.range or '-')}) with [red]{bw.hours}[/] periods")
    if m.peak_week_heatmap:
        table = Table(box=box.SIMPLE)
        for d in m.peak_week_heatmap:
            table.add_column(d.day[:3], justify="right")
        table.add_row(*[_styled(d.hours, classify_load(d.hours, thresholds.daily)) for d in m.peak_week_heatmap])
        console.print(table)
        console.print(" | ".join(f"{shift}: {m.peak_week_shift_stats[shift]} sessions" for shift in SHIFTS))

    table = Table(title="Shifts", box=box.SIMPLE)
    table.add_column("Shift")
    table.add_column("Periods", justify="right")
    table.add_column("Sessions", justify="right")
    for shift in SHIFTS:
        stat = m.shift_stats[shift]
        table.add_row(shift, str(stat.hours), str(stat.sessions))
    console.print(table)

    if m.top_rooms:
        table = Table(title="Top rooms", box=box.SIMPLE)
        table.add_column("Room")
        table.add_column("Periods", justify="right")
        for r in m.top_rooms:
            table.add_row(escape(r.room), str(r.periods))
        console.print(table)

    if m.class_distribution:
        table = Table(title="Classes", box=box.SIMPLE)
        table.add_column("Class")
        table.add_column("Periods", justify="right")
        for c in m.class_distribution:
            table.add_row(escape(c.class_name), str(c.periods))
        console.print(table)

    if m.co_teachers:
        table = Table(title="Co-teachers", box=box.SIMPLE)
        table.add_column("Name")
        table.add_column("Periods", justify="right")
        table.add_column("Subjects")
        for t in m.co_teachers:
            table.add_row(f"[magenta]{escape(t.name)}[/]", str(t.periods), escape(", ".join(t.subjects)))
        console.print(table)

    if m.conflicts:
        console.print(f"[yellow]{len(m.conflicts)} double-booked sessions[/] (see: teachload conflicts)")

    console.print("\nWarnings:")
    if m.warnings:
        for w in m.warnings:
            console.print(f"- [yellow]{w}[/]")
    else:
        console.print("- none")

    console.print("\nConclusions:")
    for c in m.conclusions:
        console.print(f"- {c}")

    return 0


def _cmd_conflicts(args: argparse.Namespace, schedule: ScheduleData) -> int:
    """
    Print all double-booked sessions (same teacher and periods, different room).
    """
    keys = sorted(detect_conflicts(schedule))
    if not keys:
        console.print("No conflicts found.")
        return 0

    console.print(f"Conflicts found: {len(keys)}")
    table = Table(box=box.SIMPLE, title="Double-booked sessions")
    table.add_column("Week", justify="right")
    table.add_column("Day")
    table.add_column("Periods")
    table.add_column("Teacher")
    table.add_column("Room")
    for week, day, slot, teacher, room in keys:
        table.add_row(str(week), day, escape(slot), escape(teacher), f"[yellow]{escape(room)}[/]")
    console.print(table)
    return 0


def _cmd_current_week(args: argparse.Namespace, schedule: ScheduleData) -> int:
    if not schedule.weeks:
        console.print("Schedule has no weeks.")
        return 1

    criteria = SessionFilter(
        search=args.search or "",
        class_name=args.class_name or "",
        room=args.room or "",
        teacher=args.teacher or "",
        shift=args.shift or "",
    )

    idx = resolve_current_week(schedule.weeks, _reference_date(args))
    week = annotate_conflicts(schedule).weeks[idx]
    console.print(f"Current week: [bold]{week.week_number}[/] ({escape(week.date_range)})")

    now = datetime.now()
    table = Table(box=box.SIMPLE)
    table.add_column("Day")
    table.add_column("Periods")
    table.add_column("Course")
    table.add_column("Class")
    table.add_column("Room")
    table.add_column("Teacher")
    shown = 0
    for day in DAYS_OF_WEEK:
        on = day_date(week, day)
        for s in filter_sessions(week.day(day).all_sessions(), criteria):
            name = escape(display_name(s.course_name, schedule.abbreviations))
            room = f"[yellow]{escape(s.room)} (conflict)[/]" if s.has_conflict else escape(s.room)
            live = on is not None and is_session_in_progress(s, on, now)
            slot = f"[bold green]{escape(s.time_slot)} (now)[/]" if live else escape(s.time_slot)
            table.add_row(day, slot, name, escape(s.class_name), room, escape(s.teacher))
            shown += 1

    if not shown and not criteria.is_empty():
        console.print("No sessions match the filters.")
        return 0
    console.print(table)
    return 0


def _cmd_options(args: argparse.Namespace, schedule: ScheduleData) -> int:
    """
    List the rooms, teachers and classes available as current-week filters.
    """
    options = filter_options(schedule.weeks)
    for title, values in (("Rooms", options.rooms), ("Teachers", options.teachers), ("Classes", options.classes)):
        console.print(f"[bold]{title}[/] ({len(values)})")
        for v in values:
            console.print(f"- {escape(v)}")
    return 0


def _cmd_export(args: argparse.Namespace, schedule: ScheduleData) -> int:
    """
    Export one week (default: the current one) into an iCalendar (.ics) file.
    """
    if not schedule.weeks:
        console.print("Schedule has no weeks.")
        return 1

    if args.week is not None:
        matches = [w for w in schedule.weeks if w.week_number == args.week]
        if not matches:
            console.print(f"Week {args.week} not found.")
            return 1
        week = matches[0]
    else:
        week = schedule.weeks[resolve_current_week(schedule.weeks, _reference_date(args))]

    teachers = args.teacher if args.teacher else week_teachers(week)
    export = export_week_to_ics(
        week,
        teachers,
        args.out,
        abbreviations=schedule.abbreviations,
        overrides=schedule.overrides,
    )
    console.print(f"Exported {len(export.events)} events of week {week.week_number} to: {escape(str(args.out))}")
    if export.skipped:
        console.print(f"[yellow]Skipped {export.skipped} sessions with unknown period times.[/]")
    return 0


def _cmd_catalog(args: argparse.Namespace, schedule: ScheduleData) -> int:
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(catalog_csv(schedule), encoding="utf-8")
    console.print(f"Wrote {len(schedule.all_courses)} courses to: {escape(str(out))}")
    return 0


def _cmd_override(args: argparse.Namespace, schedule: ScheduleData) -> int:
    """
    Set (or with --clear, remove) the type override of one course code.
    With --all TYPE, every catalog course gets the same override.
    """
    if args.all:
        kind = args.all.strip().upper()
        if kind not in COURSE_TYPES:
            console.print(f"Type must be one of {', '.join(COURSE_TYPES)}.")
            return 1
        for c in schedule.all_courses:
            schedule.overrides[c.code] = kind
        save_snapshot(schedule, args.snapshot)
        console.print(f"Override saved for {len(schedule.all_courses)} courses -> {kind}")
        return 0

    code = (args.course_code or "").strip()
    if not code:
        console.print("Please provide a course code (or --all LT|TH).")
        return 1

    if args.clear:
        if schedule.overrides.pop(code, None) is None:
            console.print(f"No override for: {escape(code)}")
            return 0
        save_snapshot(schedule, args.snapshot)
        console.print(f"Removed override: {escape(code)}")
        return 0

    kind = (args.type or "").strip().upper()
    if kind not in COURSE_TYPES:
        console.print(f"Type must be one of {', '.join(COURSE_TYPES)}.")
        return 1

    known = {c.code for c in schedule.all_courses}
    if code not in known:
        console.print(f"Warning: course code '{escape(code)}' not found in the catalog (setting anyway).")

    schedule.overrides[code] = kind
    save_snapshot(schedule, args.snapshot)
    console.print(f"Override saved: {escape(code)} -> {kind}")
    return 0


def _cmd_abbreviate(args: argparse.Namespace, schedule: ScheduleData) -> int:
    name = (args.course_name or "").strip()
    label = (args.label or "").strip()
    if not name:
        console.print("Please provide a course name.")
        return 1

    if label:
        schedule.abbreviations[name] = label
        console.print(f"Abbreviation saved: {escape(name)} -> {escape(label)}")
    else:
        schedule.abbreviations.pop(name, None)
        console.print(f"Abbreviation removed: {escape(name)}")
    save_snapshot(schedule, args.snapshot)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="teachload", description="Teaching load analytics")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_report = sub.add_parser("report", help="Show load metrics, warnings and conclusions")
    p_report.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_report.add_argument("--thresholds", type=str, default=None, help="Thresholds file (.json)")

    p_conf = sub.add_parser("conflicts", help="Show double-booked sessions")
    p_conf.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")

    p_cur = sub.add_parser("current-week", help="Show the week containing today")
    p_cur.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_cur.add_argument("--today", type=str, default=None, help="Reference date (YYYY-MM-DD)")
    p_cur.add_argument("--search", type=str, default=None, help="Course name or code contains (case-insensitive)")
    p_cur.add_argument("--class", dest="class_name", type=str, default=None, help="Only this class")
    p_cur.add_argument("--room", type=str, default=None, help="Only this room")
    p_cur.add_argument("--teacher", type=str, default=None, help="Only this instructor")
    p_cur.add_argument("--shift", type=str, choices=SHIFTS, default=None, help="Only this shift")

    p_opt = sub.add_parser("options", help="List rooms, teachers and classes usable as filters")
    p_opt.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")

    p_export = sub.add_parser("export", help="Export one week to .ics")
    p_export.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_export.add_argument("out", type=str, help="Output file path (e.g. week.ics)")
    p_export.add_argument("--week", type=int, default=None, help="Week number (default: current week)")
    p_export.add_argument("--teacher", action="append", help="Instructor to include (repeatable, default: all)")
    p_export.add_argument("--today", type=str, default=None, help="Reference date (YYYY-MM-DD)")

    p_cat = sub.add_parser("catalog", help="Write the course catalog as .csv")
    p_cat.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_cat.add_argument("out", type=str, help="Output file path (e.g. courses.csv)")

    p_ovr = sub.add_parser("override", help="Correct the LT/TH type of a course code")
    p_ovr.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_ovr.add_argument("course_code", type=str, nargs="?", default="", help="Course code (e.g. MHCĐO1092.001)")
    p_ovr.add_argument("type", type=str, nargs="?", default="", help="LT or TH")
    p_ovr.add_argument("--clear", action="store_true", help="Remove the override instead")
    p_ovr.add_argument("--all", type=str, default=None, metavar="TYPE", help="Set LT or TH for every catalog course")

    p_abbr = sub.add_parser("abbreviate", help="Set a short display name for a course")
    p_abbr.add_argument("snapshot", type=str, help="Schedule snapshot (.json)")
    p_abbr.add_argument("course_name", type=str, help="Full course name")
    p_abbr.add_argument("label", type=str, nargs="?", default="", help="Short label (empty = remove)")

    return parser


COMMANDS = {
    "report": _cmd_report,
    "conflicts": _cmd_conflicts,
    "current-week": _cmd_current_week,
    "options": _cmd_options,
    "export": _cmd_export,
    "catalog": _cmd_catalog,
    "override": _cmd_override,
    "abbreviate": _cmd_abbreviate,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, loads the snapshot, dispatches to the
    command handler and exits via SystemExit with its return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        schedule = load_snapshot(args.snapshot)
    except FileNotFoundError:
        console.print(f"Snapshot not found: {args.snapshot}")
        raise SystemExit(1)
    except ScheduleFormatError as exc:
        console.print(f"Invalid snapshot: {exc}")
        raise SystemExit(1)

    try:
        raise SystemExit(COMMANDS[args.command](args, schedule))
    except ValueError as exc:
        # e.g. a malformed --today date
        console.print(f"Error: {exc}")
        raise SystemExit(1)
