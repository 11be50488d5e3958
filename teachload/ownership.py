"""
Session ownership.

Decides whether a session belongs to the profile owner (primary teacher) or to
a co-teacher. The policy is a plain predicate `Callable[[str], bool]` built
from the primary teacher's name, so the aggregator never hard-codes one rule.

Default policy (substring_ownership):
- missing instructor ("", "Unknown", "Chưa rõ") -> primary teacher
  (source pages often omit the owner's own name)
- otherwise primary if either name contains the other, case-insensitively
"""

from __future__ import annotations

from typing import Callable

OwnershipPredicate = Callable[[str], bool]
OwnershipPolicy = Callable[[str], OwnershipPredicate]

PLACEHOLDER_TEACHERS = frozenset({"", "unknown", "chưa rõ"})


def _norm(name: str | None) -> str:
    return (name or "").strip().casefold()


def is_primary_teacher(instructor: str | None, primary_name: str | None) -> bool:
    teacher = _norm(instructor)
    if teacher in PLACEHOLDER_TEACHERS:
        return True
    main = _norm(primary_name)
    return main in teacher or teacher in main


def substring_ownership(primary_name: str) -> OwnershipPredicate:
    return lambda instructor: is_primary_teacher(instructor, primary_name)


def exact_ownership(primary_name: str) -> OwnershipPredicate:
    """Strict alternative: only placeholders and the exact (case-folded) name match."""
    main = _norm(primary_name)

    def predicate(instructor: str) -> bool:
        teacher = _norm(instructor)
        return teacher in PLACEHOLDER_TEACHERS or teacher == main

    return predicate
