"""
Unit tests for GPA/CGPA aggregation.

Aggregation contract:
- gpa/cgpa are points / credits at full precision, 0 when credits are 0
- grand total = previous total + semester total
- unknown grades abort the call with UnknownGrade
- identical inputs give identical results
"""

import math
import unittest

from pydantic import ValidationError

from src.srs.aggregator import CGPACalculator
from src.srs.config import SRSConfig
from src.srs.errors import UnknownGrade
from src.srs.grades import GradePointTable, StandingTable
from src.srs.identifiers import parse_course
from src.srs.models import GradedCourse, Totals
from src.srs.records import normalize_transcript


def _calculator() -> CGPACalculator:
    return CGPACalculator(GradePointTable.default(), StandingTable.default())


class TestCGPACalculation(unittest.TestCase):
    def test_semester_on_top_of_previous_totals(self) -> None:
        entries = [
            GradedCourse(course="CS 101-1", grade="A", credits=3),
            GradedCourse(course="MATH 101-2", grade="B+", credits=4),
        ]
        result = _calculator().calculate(entries, Totals(credits=60, points=210.0))

        self.assertEqual(result.semester_total.credits, 7)
        self.assertAlmostEqual(result.semester_total.points, 25.20)
        self.assertAlmostEqual(result.gpa, 3.6)
        self.assertEqual(result.previous_total, Totals(credits=60, points=210.0))
        self.assertEqual(result.grand_total.credits, 67)
        self.assertAlmostEqual(result.grand_total.points, 235.20)
        self.assertAlmostEqual(result.cgpa, 235.20 / 67)
        self.assertAlmostEqual(result.cgpa, 3.5104, places=4)
        self.assertEqual(result.standing, "High Honor")

    def test_results_are_not_rounded(self) -> None:
        entries = [
            GradedCourse(course="CS 101", grade="A-", credits=3),
            GradedCourse(course="CS 102", grade="B+", credits=4),
            GradedCourse(course="CS 103", grade="C", credits=2),
        ]
        result = _calculator().calculate(entries)
        self.assertAlmostEqual(result.gpa, (3 * 3.70 + 4 * 3.30 + 2 * 2.00) / 9, places=12)
        self.assertNotEqual(result.gpa, round(result.gpa, 2))

    def test_zero_credits_gives_zero_not_nan(self) -> None:
        result = _calculator().calculate([])
        self.assertEqual(result.gpa, 0)
        self.assertEqual(result.cgpa, 0)
        self.assertFalse(math.isnan(result.gpa))
        self.assertEqual(result.standing, "Unsatisfactory")

    def test_infinite_values_are_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            GradedCourse(course="CS 101", grade="A", credits=float("inf"))
        with self.assertRaises(ValidationError):
            Totals(credits=float("inf"), points=float("inf"))
        with self.assertRaises(ValidationError):
            GradePointTable(points={"A": float("inf")})
        with self.assertRaises(ValidationError):
            _calculator().calculate([{"course": "CS 101", "grade": "A", "credits": "inf"}])

    def test_zero_credit_course_keeps_gpa_defined(self) -> None:
        result = _calculator().calculate(
            [GradedCourse(course="GE 100", grade="A", credits=0)],
            Totals(credits=10, points=30.0),
        )
        self.assertEqual(result.gpa, 0)
        self.assertEqual(result.cgpa, 3.0)

    def test_unknown_grade_aborts_calculation(self) -> None:
        entries = [
            GradedCourse(course="CS 101-1", grade="A", credits=3),
            GradedCourse(course="CS 102-1", grade="NA", credits=3),
        ]
        with self.assertRaises(UnknownGrade) as ctx:
            _calculator().calculate(entries)
        self.assertEqual(ctx.exception.grade, "NA")
        self.assertEqual(ctx.exception.course, parse_course("CS", "102", "1"))
        self.assertIn("CS102-1", str(ctx.exception))

    def test_not_available_grade_is_not_treated_as_zero(self) -> None:
        with self.assertRaises(UnknownGrade):
            _calculator().calculate([GradedCourse(course="CS 101", grade="N/A", credits=3)])

    def test_idempotent(self) -> None:
        calculator = _calculator()
        entries = [
            GradedCourse(course="CS 101-1", grade="B-", credits=3),
            GradedCourse(course="HUM 111-5", grade="C", credits=3.5),
        ]
        previous = Totals(credits=45, points=123.4)
        first = calculator.calculate(entries, previous)
        second = calculator.calculate(entries, previous)
        self.assertEqual(first, second)
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_raw_mappings_are_accepted(self) -> None:
        result = _calculator().calculate([{"course": "CS 101", "grade": "b", "credits": "2"}])
        self.assertEqual(result.semester_total, Totals(credits=2, points=6.0))

    def test_custom_tables_are_used(self) -> None:
        calculator = CGPACalculator(
            GradePointTable(points={"A": 5.0, "B": 4.0, "F": 0.0}),
            StandingTable.from_pairs([(4.5, "Dean's List"), (0.0, "Good Standing")]),
        )
        result = calculator.calculate([GradedCourse(course="CS 101", grade="A", credits=4)])
        self.assertEqual(result.gpa, 5.0)
        self.assertEqual(result.standing, "Dean's List")
        with self.assertRaises(UnknownGrade):
            calculator.calculate([GradedCourse(course="CS 101", grade="B+", credits=4)])

    def test_from_config(self) -> None:
        config = SRSConfig(
            grade_points={"A": 10.0, "F": 0.0},
            standing_bands=[{"minimum": 0.0, "label": "Enrolled"}],
        )
        result = CGPACalculator.from_config(config).calculate(
            [GradedCourse(course="CS 101", grade="A", credits=2)]
        )
        self.assertEqual(result.cgpa, 10.0)
        self.assertEqual(result.standing, "Enrolled")

    def test_camel_case_dump(self) -> None:
        result = _calculator().calculate([GradedCourse(course="CS 101", grade="A", credits=3)])
        data = result.model_dump(mode="json", by_alias=True)
        self.assertEqual(
            set(data),
            {"gpa", "cgpa", "standing", "semesterTotal", "previousTotal", "grandTotal"},
        )
        self.assertEqual(data["grandTotal"], {"credits": 3.0, "points": 12.0})


class TestTranscriptReplay(unittest.TestCase):
    def test_semesters_are_chained_in_order(self) -> None:
        transcript = normalize_transcript(
            [
                {
                    "semester": "2021-2022 Fall",
                    "courses": [{"course": "CS 201", "name": "Fundamental Structures", "grade": "B", "credits": "4"}],
                },
                {
                    "semester": "2020-2021 Fall",
                    "courses": [
                        {"course": "CS 101", "name": "Algorithms and Programming I", "grade": "A", "credits": "4"},
                        {"course": "ENG 101", "name": "English and Composition I", "grade": "N/A", "credits": "3"},
                    ],
                },
            ]
        )
        results = _calculator().replay_transcript(transcript)

        self.assertEqual(len(results), 2)
        first, second = results
        self.assertEqual(first.semester_total, Totals(credits=4, points=16.0))
        self.assertEqual(first.cgpa, 4.0)
        self.assertEqual(second.previous_total, first.grand_total)
        self.assertEqual(second.gpa, 3.0)
        self.assertEqual(second.cgpa, 3.5)
        self.assertEqual(second.grand_total, Totals(credits=8, points=28.0))


if __name__ == "__main__":
    unittest.main()
