"""SRS core: data model and academic computations for Student Registration System records.

Normalizes scraped course, semester, transcript and curriculum rows, builds the
conflict-aware weekly schedule grid and calculates GPA/CGPA and standing.
Scraping, login and HTML parsing happen elsewhere; this package only consumes
their decoded output.
"""

from src.srs.aggregator import CGPACalculator
from src.srs.errors import (
    InvalidScheduleEntry,
    MalformedIdentifier,
    MalformedRecord,
    SRSError,
    UnknownGrade,
)
from src.srs.grades import GradePointTable, LetterGrade, StandingTable
from src.srs.grid import ScheduleBuildResult, build_weekly_schedule
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
from src.srs.models import (
    CGPACalculation,
    Day,
    GradedCourse,
    MeetingEntry,
    TimeSlot,
    Totals,
    WeeklySchedule,
)

__all__ = [
    "CGPACalculation",
    "CGPACalculator",
    "Course",
    "CourseDefinition",
    "Day",
    "GradePointTable",
    "GradedCourse",
    "InvalidScheduleEntry",
    "LetterGrade",
    "MalformedIdentifier",
    "MalformedRecord",
    "MeetingEntry",
    "SRSError",
    "ScheduleBuildResult",
    "Semester",
    "SemesterType",
    "StandingTable",
    "TimeSlot",
    "Totals",
    "UnknownGrade",
    "WeeklySchedule",
    "build_weekly_schedule",
    "parse_course",
    "parse_course_code",
    "parse_semester",
    "parse_semester_label",
]
