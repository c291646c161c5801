"""
Unit tests for fuzzy course matching.

Scoring contract:
- identical strings (ignoring case and whitespace) score 1.0
- strings without common characters score 0.0
- empty catalog entries never match
"""

import unittest

from tutorschedule.matching import CourseInfo, best_match, best_match_index, match_score, normalize_tag


class TestMatchScore(unittest.TestCase):
    def test_identical_modulo_case_and_whitespace(self) -> None:
        course = CourseInfo("CS101")
        self.assertEqual(match_score(course, "cs 101"), 1.0)
        self.assertEqual(match_score(course, "  Cs101\t"), 1.0)
        self.assertEqual(course.match_score("CS101"), 1.0)

    def test_disjoint_strings_score_zero(self) -> None:
        self.assertEqual(match_score(CourseInfo("CS101"), "Biology"), 0.0)

    def test_one_digit_off_stays_below_threshold(self) -> None:
        self.assertAlmostEqual(match_score(CourseInfo("CS101"), "CS102"), 0.8)
        self.assertLess(match_score(CourseInfo("MATH121"), "MATH122"), 0.9)

    def test_score_in_unit_range(self) -> None:
        for tag in ["", "C", "CS", "CS10", "CS1011", "Computer Science 101"]:
            score = match_score(CourseInfo("CS101"), tag)
            self.assertGreaterEqual(score, 0.0)
            self.assertLessEqual(score, 1.0)

    def test_more_similar_scores_higher(self) -> None:
        course = CourseInfo("ECON-UA1")
        self.assertGreater(match_score(course, "ECON UA1"), match_score(course, "ECON"))
        self.assertGreater(match_score(course, "ECON"), match_score(course, "PHYS"))

    def test_deterministic(self) -> None:
        course = CourseInfo("PHYS-UA11")
        scores = {match_score(course, "phys ua 11 ") for _ in range(5)}
        self.assertEqual(len(scores), 1)

    def test_degenerate_entry_never_matches(self) -> None:
        course = CourseInfo("   ")
        self.assertEqual(course.abbreviation, "")
        self.assertTrue(course.is_degenerate)
        self.assertEqual(match_score(course, ""), 0.0)
        self.assertEqual(match_score(course, "CS101"), 0.0)

    def test_empty_tag_never_matches(self) -> None:
        self.assertEqual(match_score(CourseInfo("CS101"), "   "), 0.0)


class TestCourseInfo(unittest.TestCase):
    def test_construction_trims(self) -> None:
        self.assertEqual(CourseInfo("  CS101 \n").abbreviation, "CS101")

    def test_equality_by_abbreviation(self) -> None:
        self.assertEqual(CourseInfo("CS101"), CourseInfo(" CS101"))

    def test_non_string_rejected(self) -> None:
        with self.assertRaises(TypeError):
            CourseInfo(101)  # type: ignore[arg-type]

    def test_normalize_tag(self) -> None:
        self.assertEqual(normalize_tag(" Math 121 "), "math121")


class TestBestMatch(unittest.TestCase):
    def test_first_match_in_catalog_order_wins(self) -> None:
        catalog = [CourseInfo("CS 101"), CourseInfo("CS101")]
        self.assertEqual(best_match_index(catalog, "cs101"), 0)

    def test_threshold_is_strict(self) -> None:
        catalog = [CourseInfo("ABCDEFGHIJ")]
        # 9 of 10 characters in common: ratio exactly 0.9
        self.assertAlmostEqual(match_score(catalog[0], "ABCDEFGHIX"), 0.9)
        self.assertIsNone(best_match(catalog, "ABCDEFGHIX", threshold=0.9))
        self.assertIsNotNone(best_match(catalog, "ABCDEFGHIX", threshold=0.85))

    def test_no_match(self) -> None:
        self.assertIsNone(best_match([CourseInfo("CS101"), CourseInfo("MATH121")], "Office hours"))


if __name__ == "__main__":
    unittest.main()
