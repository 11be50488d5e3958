import unittest

from teachload.overlays import default_course_type, display_name, resolve_type
from tests.factory import make_session


class TestOverlays(unittest.TestCase):
    def test_override_wins_over_session_type(self) -> None:
        s = make_session(code="MHCĐO1092.002", kind="TH")
        self.assertEqual(resolve_type(s, {"MHCĐO1092.002": "LT"}), "LT")
        self.assertEqual(resolve_type(s, {"OTHER.001": "LT"}), "TH")
        self.assertEqual(resolve_type(s), "TH")

    def test_abbreviation(self) -> None:
        self.assertEqual(display_name("TH NCKH", {"TH NCKH": "NCKH"}), "NCKH")
        self.assertEqual(display_name("TH NCKH", {"TH NCKH": ""}), "TH NCKH")
        self.assertEqual(display_name("CSSKCĐ"), "CSSKCĐ")

    def test_type_from_code(self) -> None:
        self.assertEqual(default_course_type("MHCĐO1052-LT.005"), "LT")
        self.assertEqual(default_course_type("MHCĐO1092.002"), "TH")


if __name__ == "__main__":
    unittest.main()
