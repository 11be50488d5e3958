"""
Read-time overlays.

Type overrides and display abbreviations are kept next to the schedule and
resolved on every read. The canonical session fields are never changed.
"""

from __future__ import annotations

from typing import Mapping, Optional

from teachload.model import LECTURE, PRACTICUM, CourseSession


def resolve_type(session: CourseSession, overrides: Optional[Mapping[str, str]] = None) -> str:
    """Overridden type for the session's course code, else its own type."""
    if overrides:
        return overrides.get(session.course_code) or session.type
    return session.type


def display_name(course_name: str, abbreviations: Optional[Mapping[str, str]] = None) -> str:
    if abbreviations:
        return abbreviations.get(course_name) or course_name
    return course_name


def default_course_type(course_code: str) -> str:
    """
    Type guessed from a catalog code: codes tagged "-LT" are lectures,
    everything else is practicum.
    """
    return LECTURE if "-LT" in course_code else PRACTICUM
