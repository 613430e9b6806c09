"""
Unit tests for course and semester identifier normalization.

Identifier contract:
- segments are stripped, department uppercased, numbers padded to 3 digits
- the same course from different scrape passes compares equal
- anything unusable raises MalformedIdentifier with the raw value attached
"""

import unittest

from src.srs.errors import MalformedIdentifier
from src.srs.identifiers import (
    Course,
    CourseDefinition,
    Semester,
    SemesterType,
    parse_course,
    parse_course_code,
    parse_semester,
    parse_semester_label,
)


class TestCourseNormalization(unittest.TestCase):
    def test_same_course_compares_equal_across_passes(self) -> None:
        a = parse_course(" cs", "0101", "01")
        b = parse_course("CS", "101", "1")
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(a.code, "CS101-1")

    def test_number_is_left_padded(self) -> None:
        course = parse_course("math", "7", "2")
        self.assertEqual(course.number, "007")
        self.assertEqual(course.department, "MATH")

    def test_number_letter_suffix_is_uppercased(self) -> None:
        course = parse_course("PHYS", "102l", "3")
        self.assertEqual(course.number, "102L")

    def test_missing_section_gives_definition(self) -> None:
        course = parse_course("CS", "101")
        self.assertIsInstance(course, CourseDefinition)
        self.assertNotIsInstance(course, Course)
        self.assertEqual(course.code, "CS101")

    def test_definition_drops_section(self) -> None:
        course = parse_course("CS", "101", "2")
        self.assertEqual(course.definition, CourseDefinition(department="CS", number="101"))
        # a section and its definition are different identifiers
        self.assertNotEqual(course, course.definition)

    def test_direct_construction_normalizes_too(self) -> None:
        self.assertEqual(
            Course(department="ee", number="0212", section="004"),
            parse_course("EE", "212", "4"),
        )

    def test_ordering(self) -> None:
        courses = [
            parse_course("MATH", "101", "1"),
            parse_course("CS", "102", "1"),
            parse_course("CS", "101", "10"),
            parse_course("CS", "101", "2"),
        ]
        self.assertEqual(
            [c.code for c in sorted(courses)],
            ["CS101-2", "CS101-10", "CS102-1", "MATH101-1"],
        )

    def test_empty_segment_rejected(self) -> None:
        with self.assertRaises(MalformedIdentifier) as ctx:
            parse_course("  ", "101", "1")
        self.assertEqual(ctx.exception.raw, "  ")

    def test_disallowed_characters_rejected(self) -> None:
        for department, number, section in [
            ("C$", "101", "1"),
            ("CS", "10-1", "1"),
            ("CS", "101", "A"),
            ("CS1", "101", "1"),
        ]:
            with self.subTest(department=department, number=number, section=section):
                with self.assertRaises(MalformedIdentifier):
                    parse_course(department, number, section)


class TestCourseCodes(unittest.TestCase):
    def test_parse_full_code(self) -> None:
        self.assertEqual(parse_course_code("CS 101-1"), parse_course("CS", "101", "1"))

    def test_parse_compact_code(self) -> None:
        self.assertEqual(parse_course_code("cs101 - 01"), parse_course("CS", "101", "1"))

    def test_parse_code_without_section(self) -> None:
        course = parse_course_code("HUM 111")
        self.assertEqual(course, CourseDefinition(department="HUM", number="111"))

    def test_garbage_code_rejected(self) -> None:
        with self.assertRaises(MalformedIdentifier) as ctx:
            parse_course_code("101 CS")
        self.assertEqual(ctx.exception.raw, "101 CS")


class TestSemesters(unittest.TestCase):
    def test_parse_label(self) -> None:
        semester = parse_semester_label("2020-2021 Fall")
        self.assertEqual(semester, Semester(year="2020-2021", season=SemesterType.FALL))
        self.assertEqual(semester.label, "2020-2021 Fall")

    def test_season_is_case_insensitive(self) -> None:
        self.assertEqual(parse_semester(" 2020 - 2021 ", "spring").season, SemesterType.SPRING)

    def test_ordering_by_year_then_season(self) -> None:
        fall = parse_semester("2020-2021", "Fall")
        spring = parse_semester("2020-2021", "Spring")
        next_fall = parse_semester("2021-2022", "Fall")
        summer = parse_semester("2020-2021", "Summer")
        self.assertLess(fall, spring)
        self.assertLess(spring, next_fall)
        self.assertEqual(sorted([next_fall, summer, spring, fall]), [fall, spring, summer, next_fall])

    def test_unknown_season_rejected(self) -> None:
        with self.assertRaises(MalformedIdentifier) as ctx:
            parse_semester("2020-2021", "Autumn")
        self.assertEqual(ctx.exception.raw, "Autumn")

    def test_year_must_span_consecutive_years(self) -> None:
        for year in ["2020-2022", "2020", "20-21", ""]:
            with self.subTest(year=year):
                with self.assertRaises(MalformedIdentifier):
                    parse_semester(year, "Fall")

    def test_label_without_season_rejected(self) -> None:
        with self.assertRaises(MalformedIdentifier):
            parse_semester_label("2020-2021")


if __name__ == "__main__":
    unittest.main()
