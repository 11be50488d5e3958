"""
Unit tests for the load aggregator.

Invariants checked here:
- sum(hours_by_day) == sum(hours_by_week) == total_hours (primary teacher only)
- co-taught sessions never count towards the primary teacher's load
- the fixed 25-period overload warning ignores Thresholds
- repeated runs give equal Metrics
"""

import unittest

from teachload.metrics import WEEKLY_OVERLOAD_PERIODS, calculate_metrics, subject_code
from teachload.model import WEEKEND_CLASS, CourseInfo
from teachload.ownership import exact_ownership
from tests.factory import make_schedule, make_session, make_week, week_range

W1 = week_range("12/01/2026", "18/01/2026")
W2 = week_range("19/01/2026", "25/01/2026")
W3 = week_range("26/01/2026", "01/02/2026")


def _demo_schedule():
    week1 = make_week(
        1,
        W1,
        [
            make_session("1-4", day="Monday", room=".B.102", class_name="ĐD 1E"),
            make_session("6-9", day="Monday", shift="afternoon", teacher="Trần B", room=".B.106",
                         code="MHCĐO1092.002", name="TH NCKH", class_name="DS 1B", kind="TH"),
            make_session("6-9", day="Thursday", shift="afternoon", room=".B.102", class_name="ĐD 1D"),
            make_session("11-13", day="Thursday", shift="evening", room=".B.101",
                         code="MHCĐO1092.001", name="TH NCKH", class_name="DS 1A", kind="TH"),
            make_session("1-4", day="Saturday", room=".B.102",
                         code="MHCĐO1092.001", name="TH NCKH", class_name="DS 1A", kind="TH"),
        ],
    )
    week2 = make_week(
        2,
        W2,
        [
            make_session("1-3", day="Tuesday", room=".B.105", class_name="ĐD 1B"),
            make_session("5", day="Wednesday", room=".B.105", class_name="ĐD 1B"),
            make_session("6-9", day="Wednesday", shift="afternoon", teacher="Trần B", room=".B.105",
                         code="MHLSG1292.001", name="QL HS", class_name="HS 1", kind="TH"),
        ],
    )
    courses = [
        CourseInfo(code="MHCĐO1052-LT.005", name="CSSKCĐ"),
        CourseInfo(code="MHCĐO1052-LT.002", name="CSSKCĐ"),
        CourseInfo(code="MHCĐO1092.001", name="TH NCKH"),
        CourseInfo(code="MHCĐO1092.002", name="TH NCKH"),
        CourseInfo(code="MHLSG1292.001", name="QL HS"),
    ]
    return make_schedule([week1, week2], teacher="Demo", courses=courses)


class TestMetrics(unittest.TestCase):
    def setUp(self) -> None:
        self.m = calculate_metrics(_demo_schedule())

    def test_totals(self) -> None:
        # week 1: 4 + 4 + 3 + 4 = 15, week 2: 3 + 1 = 4
        self.assertEqual(self.m.total_hours, 19)
        self.assertEqual(self.m.total_sessions, 6)
        self.assertEqual(self.m.total_weeks, 2)

    def test_histograms_sum_to_total(self) -> None:
        self.assertEqual(sum(self.m.hours_by_day.values()), self.m.total_hours)
        self.assertEqual(sum(self.m.hours_by_week.values()), self.m.total_hours)
        self.assertEqual(self.m.hours_by_week, {1: 15, 2: 4})
        self.assertEqual(list(self.m.hours_by_day), ["Monday", "Tuesday", "Wednesday", "Thursday",
                                                      "Friday", "Saturday", "Sunday"])
        self.assertEqual(self.m.hours_by_day["Thursday"], 7)
        self.assertEqual(self.m.hours_by_day["Friday"], 0)

    def test_catalog_totals(self) -> None:
        # prefixes: MHCĐO1052-LT, MHCĐO1092, MHLSG1292
        self.assertEqual(self.m.total_courses, 3)
        self.assertEqual(self.m.total_groups, 5)
        self.assertEqual(self.m.total_rooms, 3)

    def test_type_and_shift_distribution(self) -> None:
        self.assertEqual(self.m.type_distribution, {"LT": 12, "TH": 7})
        self.assertEqual(self.m.shift_stats["morning"].hours, 12)
        self.assertEqual(self.m.shift_stats["morning"].sessions, 4)
        self.assertEqual(self.m.shift_stats["afternoon"].hours, 4)
        self.assertEqual(self.m.shift_stats["evening"].sessions, 1)

    def test_co_teachers_tracked_separately(self) -> None:
        self.assertEqual(len(self.m.co_teachers), 1)
        co = self.m.co_teachers[0]
        self.assertEqual(co.name, "Trần B")
        self.assertEqual(co.periods, 8)
        self.assertEqual(co.subjects, ["TH NCKH", "QL HS"])

    def test_rooms_and_classes_ranked(self) -> None:
        self.assertEqual([(r.room, r.periods) for r in self.m.top_rooms],
                         [(".B.102", 12), (".B.105", 4), (".B.101", 3)])
        self.assertEqual(self.m.class_distribution[0].class_name, "DS 1A")
        self.assertEqual(self.m.class_distribution[0].periods, 7)

    def test_busiest_week_snapshot(self) -> None:
        self.assertEqual(self.m.busiest_week.week, 1)
        self.assertEqual(self.m.busiest_week.hours, 15)
        self.assertEqual(self.m.busiest_week.range, W1)
        heat = {d.day: d.hours for d in self.m.peak_week_heatmap}
        self.assertEqual(heat["Monday"], 4)
        self.assertEqual(heat["Thursday"], 7)
        self.assertEqual(heat["Saturday"], 4)
        self.assertEqual(self.m.peak_week_shift_stats, {"morning": 2, "afternoon": 1, "evening": 1})
        self.assertEqual(self.m.busiest_day.day, "Thursday")

    def test_warnings(self) -> None:
        self.assertEqual(
            self.m.warnings,
            [
                "1 evening sessions",
                "1 weekend sessions (Sat, Sun)",
                "1 single-period sessions (low efficiency)",
            ],
        )
        self.assertEqual(self.m.overload_weeks, [])

    def test_idempotent(self) -> None:
        schedule = _demo_schedule()
        self.assertEqual(calculate_metrics(schedule), calculate_metrics(schedule))

    def test_type_override_applied_without_mutation(self) -> None:
        schedule = _demo_schedule()
        schedule.overrides["MHCĐO1092.001"] = "LT"
        m = calculate_metrics(schedule)
        self.assertEqual(m.type_distribution, {"LT": 19, "TH": 0})
        thursday_evening = schedule.weeks[0].days["Thursday"].evening[0]
        self.assertEqual(thursday_evening.type, "TH")

    def test_pluggable_ownership(self) -> None:
        schedule = _demo_schedule()
        schedule.metadata.teacher = "Demo"
        m = calculate_metrics(schedule, ownership=exact_ownership)
        self.assertEqual(m.total_hours, 19)


class TestOverloadAndPeaks(unittest.TestCase):
    def _week_with(self, number, date_range, periods_per_day):
        sessions = []
        for day, slot in periods_per_day.items():
            sessions.append(make_session(slot, day=day))
        return make_week(number, date_range, sessions)

    def test_overload_fires_only_above_25(self) -> None:
        # 5 days x 5 periods = 25 (not overloaded), 26 with one extra period
        full = {d: "1-5" for d in ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]}
        week1 = self._week_with(1, W1, full)
        week2 = self._week_with(2, W2, {**full, "Saturday": "1"})
        m = calculate_metrics(make_schedule([week1, week2]))

        self.assertEqual(m.hours_by_week, {1: 25, 2: 26})
        self.assertEqual(m.overload_weeks, [2])
        self.assertEqual(m.warnings[0], f"1/2 weeks > {WEEKLY_OVERLOAD_PERIODS} periods (warning threshold)")

    def test_busiest_week_tie_keeps_earliest(self) -> None:
        week1 = self._week_with(1, W1, {"Monday": "1-4"})
        week2 = self._week_with(2, W2, {"Tuesday": "1-4"})
        m = calculate_metrics(make_schedule([week1, week2]))
        self.assertEqual(m.busiest_week.week, 1)

    def test_empty_schedule_degrades(self) -> None:
        m = calculate_metrics(make_schedule([make_week(1, W1, []), make_week(2, W2, []), make_week(3, W3, [])]))
        self.assertEqual(m.total_hours, 0)
        self.assertEqual(m.total_courses, 0)
        self.assertEqual(m.peak_week_heatmap, [])
        self.assertEqual(m.busiest_week.week, 1)
        self.assertEqual(m.busiest_day.day, "Monday")
        self.assertEqual(m.warnings, [])

    def test_top_rooms_capped_with_first_seen_ties(self) -> None:
        slots = ["1-2", "1-4", "1-2", "1-3", "1", "1-4", "1-2", "1-3", "1", "1-2", "1", "1-5"]
        sessions = [make_session(slot, room=f"R{i}") for i, slot in enumerate(slots, start=1)]
        m = calculate_metrics(make_schedule([make_week(1, W1, sessions)]))
        self.assertEqual(m.total_rooms, 12)
        self.assertEqual(len(m.top_rooms), 10)
        self.assertEqual(
            [(r.room, r.periods) for r in m.top_rooms],
            [
                ("R12", 5),
                ("R2", 4),
                ("R6", 4),
                ("R4", 3),
                ("R8", 3),
                ("R1", 2),
                ("R3", 2),
                ("R7", 2),
                ("R10", 2),
                ("R5", 1),
            ],
        )

    def test_weekend_follows_weekday_bucket(self) -> None:
        week = make_week(1, W1, [])
        week.days["Saturday"].morning.append(make_session("1-4", day="Monday"))
        m = calculate_metrics(make_schedule([week]))
        self.assertEqual(m.warning_counts.get(WEEKEND_CLASS), 1)
        self.assertEqual(m.hours_by_day["Saturday"], 4)

    def test_class_ranking_is_stable(self) -> None:
        sessions = [
            make_session("1-2", class_name="DS 1B"),
            make_session("1-2", day="Tuesday", class_name="DS 1A"),
            make_session("1-4", day="Wednesday", class_name="DS 1C"),
            make_session("1-4", day="Thursday", class_name=""),
        ]
        m = calculate_metrics(make_schedule([make_week(1, W1, sessions)]))
        self.assertEqual(
            [(c.class_name, c.periods) for c in m.class_distribution],
            [("DS 1C", 4), ("DS 1B", 2), ("DS 1A", 2)],
        )

    def test_conflicts_reported(self) -> None:
        week = make_week(1, W1, [make_session("6-9", room="A"), make_session("6-9", room="B")])
        m = calculate_metrics(make_schedule([week]))
        self.assertEqual(m.conflicts, [(1, "Monday", "6-9", "Demo", "A"), (1, "Monday", "6-9", "Demo", "B")])


class TestSubjectCode(unittest.TestCase):
    def test_strips_group_suffix(self) -> None:
        self.assertEqual(subject_code("MHCĐO1092.001"), "MHCĐO1092")
        self.assertEqual(subject_code("A.B.C"), "A.B")
        self.assertEqual(subject_code("PLAIN"), "PLAIN")


if __name__ == "__main__":
    unittest.main()
