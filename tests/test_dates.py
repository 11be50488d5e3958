import unittest
from datetime import date

from teachload.dates import WeekRange, day_date, parse_week_range, resolve_current_week, week_contains
from tests.factory import make_week, week_range


def _weeks(*ranges):
    return [make_week(i, r, []) for i, r in enumerate(ranges, start=1)]


class TestParseWeekRange(unittest.TestCase):
    def test_two_tokens(self) -> None:
        rng = parse_week_range("Từ ngày: 12/01/2026 đến ngày 18/01/2026")
        self.assertEqual(rng, WeekRange(date(2026, 1, 12), date(2026, 1, 18)))

    def test_order_is_positional(self) -> None:
        rng = parse_week_range("18/01/2026 - 12/01/2026")
        assert rng is not None
        self.assertEqual(rng.start, date(2026, 1, 18))

    def test_single_token_is_unresolvable(self) -> None:
        self.assertIsNone(parse_week_range("Tuần 1: 12/01/2026"))
        self.assertIsNone(parse_week_range(""))

    def test_impossible_date_is_unresolvable(self) -> None:
        self.assertIsNone(parse_week_range("32/13/2026 - 18/01/2026"))


class TestCurrentWeek(unittest.TestCase):
    def setUp(self) -> None:
        self.weeks = _weeks(
            week_range("01/01/2025", "07/01/2025"),
            week_range("08/01/2025", "14/01/2025"),
        )

    def test_inside_first_week(self) -> None:
        self.assertEqual(resolve_current_week(self.weeks, date(2025, 1, 5)), 0)

    def test_inside_second_week_inclusive_bounds(self) -> None:
        self.assertEqual(resolve_current_week(self.weeks, date(2025, 1, 8)), 1)
        self.assertEqual(resolve_current_week(self.weeks, date(2025, 1, 14)), 1)

    def test_after_semester_is_last_week(self) -> None:
        self.assertEqual(resolve_current_week(self.weeks, date(2025, 1, 20)), 1)

    def test_before_semester_is_first_week(self) -> None:
        self.assertEqual(resolve_current_week(self.weeks, date(2024, 12, 20)), 0)

    def test_gap_resolves_to_next_week(self) -> None:
        weeks = _weeks(
            week_range("01/01/2025", "07/01/2025"),
            week_range("15/01/2025", "21/01/2025"),
            week_range("22/01/2025", "28/01/2025"),
        )
        self.assertEqual(resolve_current_week(weeks, date(2025, 1, 10)), 1)

    def test_unresolvable_week_is_never_current(self) -> None:
        weeks = _weeks("no dates here", week_range("08/01/2025", "14/01/2025"))
        self.assertFalse(week_contains(weeks[0], date(2025, 1, 5)))
        self.assertEqual(resolve_current_week(weeks, date(2025, 1, 10)), 1)

    def test_nothing_resolvable_returns_first(self) -> None:
        self.assertEqual(resolve_current_week(_weeks("?", "??"), date(2025, 1, 10)), 0)

    def test_empty_schedule_raises(self) -> None:
        with self.assertRaises(ValueError):
            resolve_current_week([], date(2025, 1, 10))


class TestDayDate(unittest.TestCase):
    def test_offset_from_week_start(self) -> None:
        week = make_week(1, week_range("12/01/2026", "18/01/2026"), [])
        self.assertEqual(day_date(week, "Monday"), date(2026, 1, 12))
        self.assertEqual(day_date(week, "Wednesday"), date(2026, 1, 14))
        self.assertEqual(day_date(week, "Sunday"), date(2026, 1, 18))

    def test_unresolvable_week(self) -> None:
        self.assertIsNone(day_date(make_week(1, "n/a", []), "Monday"))


if __name__ == "__main__":
    unittest.main()
