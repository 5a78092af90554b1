import unittest

from vertretungsplan.grades import Grade


class TestGrade(unittest.TestCase):
    def test_web_codes_are_two_digits_in_order(self) -> None:
        codes = [g.web_code for g in Grade]
        self.assertEqual(codes, sorted(codes))
        self.assertTrue(all(len(c) == 2 for c in codes))
        self.assertEqual(Grade.GRADE_5.web_code, "01")

    def test_parse(self) -> None:
        self.assertIs(Grade.parse("7"), Grade.GRADE_7)
        self.assertIs(Grade.parse(" grade_10 "), Grade.GRADE_10)
        self.assertIs(Grade.parse("GRADE_12"), Grade.GRADE_12)
        self.assertEqual(Grade.GRADE_11.number, 11)

    def test_parse_unknown(self) -> None:
        with self.assertRaises(ValueError):
            Grade.parse("13")
        with self.assertRaises(ValueError):
            Grade.parse("seven")


if __name__ == "__main__":
    unittest.main()
