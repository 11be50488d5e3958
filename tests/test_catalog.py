import csv
import io
import unittest

from teachload.catalog import CSV_HEADER, catalog_csv, course_rows
from teachload.model import CourseInfo
from tests.factory import make_schedule, make_session, make_week, week_range


def _schedule():
    week = make_week(
        1,
        week_range("12/01/2026", "18/01/2026"),
        [
            make_session("1-4", code="MHCĐO1052-LT.005"),
            make_session("6-9", day="Tuesday", shift="afternoon", teacher="Demo 2", code="MHCĐO1092.002",
                         name="TH NCKH", kind="TH"),
            make_session("6-8", day="Friday", shift="afternoon", code="MHCĐO1092.002", name="TH NCKH", kind="TH"),
        ],
    )
    courses = [
        CourseInfo(code="MHCĐO1052-LT.005", name="CSSKCĐ", groups=["Nhóm 5"], classes=["ĐD 1E"]),
        CourseInfo(
            code="MHCĐO1092.002",
            name="TH NCKH",
            groups=["Nhóm 2"],
            classes=["DS 1B", "DS 1C"],
            total_periods=30,
            total_sessions=8,
        ),
        CourseInfo(code="MHLSG1292.001", name="QL HS", groups=["Nhóm 1"], classes=["HS 1"]),
    ]
    return make_schedule([week], courses=courses, overrides={"MHLSG1292.001": "LT"})


class TestCatalog(unittest.TestCase):
    def test_rows(self) -> None:
        rows = course_rows(_schedule())
        got = [
            (r.code, r.type, r.total_periods, r.total_sessions, r.scheduled_periods, r.scheduled_sessions)
            for r in rows
        ]
        self.assertEqual(got, [
            ("MHCĐO1052-LT.005", "LT", 0, 0, 4, 1),
            ("MHCĐO1092.002", "TH", 30, 8, 7, 2),
            ("MHLSG1292.001", "LT", 0, 0, 0, 0),
        ])

    def test_csv_text(self) -> None:
        text = catalog_csv(_schedule())
        self.assertTrue(text.startswith("\ufeff"))
        rows = list(csv.reader(io.StringIO(text[1:])))
        self.assertEqual(rows[0], CSV_HEADER)
        self.assertEqual(rows[2], ["MHCĐO1092.002", "TH NCKH", "DS 1B, DS 1C", "Nhóm 2", "TH", "30", "8", "7", "2"])


if __name__ == "__main__":
    unittest.main()
