"""GPA / CGPA calculation.

CGPACalculator combines one semester's graded courses with the totals carried
in from earlier semesters:

    semester points = sum(credits * grade point)
    gpa             = semester points / semester credits
    cgpa            = (previous + semester) points / (previous + semester) credits

A ratio with zero credits is 0. Values are kept at full precision; rounding
for display is left to the caller so chained semesters do not accumulate
rounding error. The calculator holds only its two tables, so one instance can
serve any number of concurrent calls.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from src.srs.config import SRSConfig, get_config
from src.srs.grades import GradePointTable, StandingTable
from src.srs.logging import get_logger
from src.srs.models import CGPACalculation, GradedCourse, Totals, TranscriptSemester
from src.srs.records import graded_courses

log = get_logger(__name__)


class CGPACalculator:
    """Computes GPA, CGPA, totals and standing from graded courses.

    Args:
        grade_points: Letter grade to grade point table.
        standings: Standing bands used to classify the cgpa.
    """

    def __init__(self, grade_points: GradePointTable, standings: StandingTable) -> None:
        self.grade_points = grade_points
        self.standings = standings

    @classmethod
    def from_config(cls, config: SRSConfig | None = None) -> "CGPACalculator":
        """Calculator using the tables from settings (get_config() by default)."""
        config = config if config is not None else get_config()
        return cls(config.grade_point_table(), config.standing_table())

    def semester_totals(self, entries: Iterable[GradedCourse | Mapping[str, Any]]) -> Totals:
        """Credit and point sums of the given courses, in input order.

        Raises:
            UnknownGrade: If a course's grade has no value in the table.
        """
        credits = 0.0
        points = 0.0
        for raw in entries:
            entry = raw if isinstance(raw, GradedCourse) else GradedCourse.model_validate(raw)
            value = self.grade_points.value_of(entry.grade, entry.course)
            credits += entry.credits
            points += entry.credits * value
        return Totals(credits=credits, points=points)

    def calculate(
        self,
        entries: Iterable[GradedCourse | Mapping[str, Any]],
        previous: Totals | None = None,
    ) -> CGPACalculation:
        """Calculate GPA and CGPA for one semester.

        Args:
            entries: Graded courses of the semester. Placeholder grades such
                as "N/A" must already be filtered out.
            previous: Cumulative totals before this semester.

        Raises:
            UnknownGrade: If any grade is outside the grade-point table.
        """
        previous = previous if previous is not None else Totals()
        semester_total = self.semester_totals(entries)
        grand_total = previous + semester_total

        gpa = semester_total.average
        cgpa = grand_total.average
        standing = self.standings.classify(cgpa)

        log.debug(
            "cgpa_calculated",
            credits=semester_total.credits,
            gpa=gpa,
            cgpa=cgpa,
            standing=standing,
        )
        return CGPACalculation(
            gpa=gpa,
            cgpa=cgpa,
            standing=standing,
            semester_total=semester_total,
            previous_total=previous,
            grand_total=grand_total,
        )

    def replay_transcript(
        self,
        transcript: Iterable[TranscriptSemester],
        previous: Totals | None = None,
    ) -> list[CGPACalculation]:
        """Recompute every transcript semester in semester order.

        Each semester's grand total becomes the next semester's previous total.
        Rows graded N/A are left out (see graded_courses).
        """
        carried = previous if previous is not None else Totals()
        results: list[CGPACalculation] = []
        for semester in sorted(transcript, key=lambda item: item.semester):
            result = self.calculate(graded_courses(semester), carried)
            results.append(result)
            carried = result.grand_total
        return results
