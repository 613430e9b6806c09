"""Normalization of raw scraped rows into typed SRS records.

The scraping collaborator hands over already-decoded rows (dicts of strings,
as read from the SRS tables). The functions here canonicalize identifiers,
turn "N/A" cells into None and build the frozen models from src.srs.models.

Rows use snake_case keys matching the model fields; identifiers may be given
either as display strings ("CS 101-1", "2020-2021 Fall") or as mappings of
their segments ({"department": "CS", "number": "101", "section": "1"}).
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from src.srs.errors import MalformedIdentifier, MalformedRecord
from src.srs.grades import LetterGrade
from src.srs.identifiers import (
    Course,
    CourseDefinition,
    Semester,
    parse_course,
    parse_course_code,
    parse_semester,
    parse_semester_label,
)
from src.srs.logging import get_logger
from src.srs.models import (
    CurriculumCourse,
    CurriculumStatus,
    Exam,
    GradedCourse,
    LetterGradeResult,
    RegisteredCourse,
    Replacement,
    SemesterCourses,
    TranscriptCourse,
    TranscriptSemester,
)

log = get_logger(__name__)

NOT_AVAILABLE = "N/A"


def is_not_available(raw: Any) -> bool:
    """True for cells the SRS leaves blank or marks N/A."""
    if raw is None:
        return True
    return isinstance(raw, str) and raw.strip().upper() in ("", NOT_AVAILABLE)


# ---------------------------------------------------------------------------
# Cell parsers
# ---------------------------------------------------------------------------


def parse_letter_grade(raw: Any, course: Any = None) -> LetterGrade | None:
    """Decode a grade cell. N/A or blank gives None; anything else must be a LetterGrade.

    Raises:
        UnknownGrade: For values such as "W", "NA" or "I".
    """
    if is_not_available(raw):
        return None
    return LetterGrade.parse(raw, course)


def parse_decimal(raw: Any, field: str = "value") -> float | None:
    """Decode a numeric cell ("3.21", "3,21", 3). N/A or blank gives None."""
    if is_not_available(raw):
        return None
    if isinstance(raw, bool):
        raise MalformedRecord(field, raw, "not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip().replace(",", "."))
        except ValueError:
            raise MalformedRecord(field, raw, "not a number") from None
    else:
        raise MalformedRecord(field, raw, "not a number")
    if not math.isfinite(value):
        raise MalformedRecord(field, raw, "must be a finite number")
    return value


def parse_credits(raw: Any) -> float | None:
    value = parse_decimal(raw, "credits")
    if value is not None and value < 0:
        raise MalformedRecord("credits", raw, "credits cannot be negative")
    return value


def parse_status(raw: Any) -> CurriculumStatus:
    if isinstance(raw, CurriculumStatus):
        return raw
    if isinstance(raw, str):
        value = raw.strip().lower()
        for status in CurriculumStatus:
            if status.value.lower() == value:
                return status
    valid = ", ".join(status.value for status in CurriculumStatus)
    raise MalformedRecord("status", raw, f"expected one of {valid}")


def coerce_semester(raw: Any) -> Semester:
    if isinstance(raw, Semester):
        return raw
    if isinstance(raw, Mapping):
        return parse_semester(raw.get("year"), raw.get("season"))
    return parse_semester_label(raw)


def coerce_definition(raw: Any) -> CourseDefinition:
    """Course definition from a code string, a mapping or a Course (section dropped)."""
    if isinstance(raw, Course):
        return raw.definition
    if isinstance(raw, CourseDefinition):
        return raw
    if isinstance(raw, Mapping):
        course = parse_course(raw.get("department"), raw.get("number"))
    else:
        course = parse_course_code(raw)
    if isinstance(course, Course):
        return course.definition
    return course


def coerce_course(raw: Any) -> Course:
    """Registered section from a code string or a mapping; the section is required."""
    if isinstance(raw, Course):
        return raw
    if isinstance(raw, Mapping):
        return Course(
            department=raw.get("department"),
            number=raw.get("number"),
            section=raw.get("section"),
        )
    course = parse_course_code(raw)
    if not isinstance(course, Course):
        raise MalformedIdentifier(raw, "section is required")
    return course


def _split_classrooms(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts: Iterable[Any] = raw.split(",")
    else:
        parts = raw
    return tuple(str(part).strip() for part in parts if str(part).strip())


# ---------------------------------------------------------------------------
# Row normalizers
# ---------------------------------------------------------------------------


def normalize_transcript(rows: Iterable[Mapping[str, Any]]) -> list[TranscriptSemester]:
    """Build transcript semesters, sorted by semester."""
    semesters: list[TranscriptSemester] = []
    for row in rows:
        courses = []
        for course_row in row.get("courses", ()):
            course = coerce_definition(course_row.get("course"))
            courses.append(
                TranscriptCourse(
                    course=course,
                    name=str(course_row.get("name", "")).strip(),
                    grade=parse_letter_grade(course_row.get("grade"), course),
                    credits=parse_credits(course_row.get("credits")),
                )
            )
        semesters.append(
            TranscriptSemester(
                semester=coerce_semester(row.get("semester")),
                gpa=parse_decimal(row.get("gpa"), "gpa"),
                cgpa=parse_decimal(row.get("cgpa"), "cgpa"),
                standing=str(row.get("standing") or "").strip(),
                courses=tuple(courses),
            )
        )
    semesters.sort(key=lambda item: item.semester)
    return semesters


def _normalize_curriculum_row(row: Mapping[str, Any]) -> CurriculumCourse:
    raw_course = row.get("course")
    course = None if is_not_available(raw_course) else coerce_definition(raw_course)
    raw_semester = row.get("semester")
    semester = None if is_not_available(raw_semester) else coerce_semester(raw_semester)

    replacement = None
    raw_replacement = row.get("replacement")
    if not is_not_available(raw_replacement):
        if not isinstance(raw_replacement, Mapping):
            raise MalformedRecord("replacement", raw_replacement, "expected course and name")
        replacement = Replacement(
            course=coerce_definition(raw_replacement.get("course")),
            name=str(raw_replacement.get("name", "")).strip(),
        )

    return CurriculumCourse(
        course=course,
        name=str(row.get("name", "")).strip(),
        status=parse_status(row.get("status")),
        grade=parse_letter_grade(row.get("grade"), course),
        credits=parse_credits(row.get("credits")),
        semester=semester,
        replacement=replacement,
    )


def normalize_curriculum(
    semesters: Iterable[Iterable[Mapping[str, Any]]],
) -> list[list[CurriculumCourse]]:
    """Build the curriculum, one list of rows per curriculum semester, order kept."""
    return [[_normalize_curriculum_row(row) for row in rows] for rows in semesters]


def normalize_semester_courses(raw: Mapping[str, Any]) -> SemesterCourses:
    return SemesterCourses(
        semester=coerce_semester(raw.get("semester")),
        courses=tuple(
            RegisteredCourse(
                course=coerce_course(row.get("course")),
                name=str(row.get("name", "")).strip(),
                instructor=str(row.get("instructor") or "").strip(),
                credits=parse_credits(row.get("credits")),
                type=str(row.get("type") or "").strip(),
            )
            for row in raw.get("courses", ())
        ),
    )


def normalize_exams(rows: Iterable[Mapping[str, Any]]) -> list[Exam]:
    """Build exam records, sorted by starting time."""
    exams = [
        Exam(
            course_name=str(row.get("course_name", "")).strip(),
            exam_type=str(row.get("exam_type", "")).strip(),
            starting_time=row.get("starting_time"),
            time_block=str(row.get("time_block", "")).strip(),
            classrooms=_split_classrooms(row.get("classrooms")),
        )
        for row in rows
    ]
    exams.sort(key=lambda exam: exam.starting_time)
    return exams


def normalize_letter_grade_results(rows: Iterable[Mapping[str, Any]]) -> list[LetterGradeResult]:
    """Build announced letter grades. Rows still showing N/A are left out."""
    results: list[LetterGradeResult] = []
    for row in rows:
        course = str(row.get("course", "")).strip()
        grade = parse_letter_grade(row.get("grade"), course)
        if grade is None:
            log.debug("letter_grade_not_announced", course=course)
            continue
        results.append(LetterGradeResult(course=course, grade=grade))
    return results


# ---------------------------------------------------------------------------
# Extraction for aggregation
# ---------------------------------------------------------------------------


def graded_courses(semester: TranscriptSemester) -> list[GradedCourse]:
    """Graded courses of a transcript semester, ready for CGPACalculator.

    Rows whose grade or credits are N/A carry no grade points and are left out.
    """
    entries: list[GradedCourse] = []
    for row in semester.courses:
        if row.grade is None or row.credits is None:
            log.debug(
                "transcript_row_skipped",
                semester=semester.semester.label,
                course=row.course.code,
                reason="grade or credits not available",
            )
            continue
        entries.append(GradedCourse(course=row.course, grade=row.grade.value, credits=row.credits))
    return entries


def graded_courses_from_registration(
    registration: SemesterCourses,
    grades: Mapping[Any, Any],
) -> list[GradedCourse]:
    """Pair registered sections with their announced grades.

    grades maps a Course (or its code string) to a raw grade. Credits come from
    the registration. Courses without a grade yet, or graded N/A, are left out;
    a grade outside the letter grade set is passed on unchanged so that the
    calculator rejects it.
    """
    by_course: dict[Course, Any] = {coerce_course(key): value for key, value in grades.items()}
    entries: list[GradedCourse] = []
    for registered in registration.courses:
        raw_grade = by_course.get(registered.course)
        if is_not_available(raw_grade) or registered.credits is None:
            log.debug(
                "registered_course_skipped",
                semester=registration.semester.label,
                course=registered.course.code,
            )
            continue
        entries.append(
            GradedCourse(course=registered.course, grade=raw_grade, credits=registered.credits)
        )
    return entries
