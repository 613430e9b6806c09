"""Pydantic models for SRS data.

All data structures use Pydantic v2 for validation, serialization, and type
safety. Every model is frozen: records are built once from a scrape and handed
to the caller, never updated in place.

Identifiers (Course, Semester) live in src.srs.identifiers, grade tables in
src.srs.grades.
"""

import re
from datetime import datetime, time
from enum import Enum
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeFloat,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from src.srs.errors import MalformedIdentifier
from src.srs.grades import LetterGrade
from src.srs.identifiers import Course, CourseDefinition, Semester, parse_course_code

# Credits, points and averages must stay finite so no ratio can come out NaN
_FROZEN = ConfigDict(frozen=True, allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Weekly schedule
# ---------------------------------------------------------------------------


class TimeSlot(str, Enum):
    """The 14 daily teaching slots, 50 minutes each with a 10 minute break."""

    H8 = "08:30 - 09:20"
    H9 = "09:30 - 10:20"
    H10 = "10:30 - 11:20"
    H11 = "11:30 - 12:20"
    H12 = "12:30 - 13:20"
    H13 = "13:30 - 14:20"
    H14 = "14:30 - 15:20"
    H15 = "15:30 - 16:20"
    H16 = "16:30 - 17:20"
    H17 = "17:30 - 18:20"
    H18 = "18:30 - 19:20"
    H19 = "19:30 - 20:20"
    H20 = "20:30 - 21:20"
    H21 = "21:30 - 22:20"

    @property
    def position(self) -> int:
        """Zero-based position of the slot within the day."""
        return list(TimeSlot).index(self)

    @property
    def start(self) -> time:
        return time.fromisoformat(self.value[:5])

    @property
    def end(self) -> time:
        return time.fromisoformat(self.value[-5:])

    @classmethod
    def from_label(cls, raw: Any) -> "TimeSlot | None":
        """Resolve "H8", "08:30 - 09:20" or "08:30" (also "8:30") to a slot.

        Returns None when nothing matches.
        """
        if isinstance(raw, TimeSlot):
            return raw
        if not isinstance(raw, str):
            return None
        value = raw.strip()
        for slot in cls:
            if value.upper() == slot.name or value == slot.value:
                return slot
        if re.fullmatch(r"\d{1,2}:\d{2}", value):
            value = value.zfill(5)
            for slot in cls:
                if slot.value.startswith(value):
                    return slot
        return None


class Day(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def position(self) -> int:
        """Zero-based position, Monday first."""
        return list(Day).index(self)

    @classmethod
    def from_label(cls, raw: Any) -> "Day | None":
        """Resolve a full or three-letter day name, case-insensitively."""
        if isinstance(raw, Day):
            return raw
        if not isinstance(raw, str):
            return None
        value = raw.strip().lower()
        if not value:
            return None
        for day in cls:
            name = day.value.lower()
            if value == name or (len(value) == 3 and name.startswith(value)):
                return day
        return None


class ScheduleCell(BaseModel):
    """One day/slot cell. details is None when the slot is free.

    More than one detail means the registered sections overlap; the entries are
    kept side by side in source order.
    """

    model_config = _FROZEN

    time_slot: TimeSlot
    details: tuple[str, ...] | None = None

    @field_validator("details")
    @classmethod
    def _non_empty(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if value is not None and len(value) == 0:
            raise ValueError("occupied cell needs at least one detail; use None for a free slot")
        return value

    @property
    def is_free(self) -> bool:
        return self.details is None

    @property
    def has_conflict(self) -> bool:
        return self.details is not None and len(self.details) > 1


class DailySchedule(BaseModel):
    model_config = _FROZEN

    day: Day
    slots: tuple[ScheduleCell, ...]

    @model_validator(mode="after")
    def _full_day(self) -> "DailySchedule":
        if tuple(cell.time_slot for cell in self.slots) != tuple(TimeSlot):
            raise ValueError(f"{self.day.value} must list all {len(TimeSlot)} time slots in order")
        return self

    @classmethod
    def free(cls, day: Day) -> "DailySchedule":
        return cls(day=day, slots=tuple(ScheduleCell(time_slot=slot) for slot in TimeSlot))


class WeeklySchedule(BaseModel):
    """Fixed 7 x 14 grid, Monday first, every cell present."""

    model_config = _FROZEN

    days: tuple[DailySchedule, ...]

    @model_validator(mode="after")
    def _full_week(self) -> "WeeklySchedule":
        if tuple(daily.day for daily in self.days) != tuple(Day):
            raise ValueError(f"weekly schedule must list all {len(Day)} days in order")
        return self

    @classmethod
    def free(cls) -> "WeeklySchedule":
        return cls(days=tuple(DailySchedule.free(day) for day in Day))

    def cell(self, day: Day, slot: TimeSlot) -> ScheduleCell:
        return self.days[day.position].slots[slot.position]

    def conflicts(self) -> list[tuple[Day, ScheduleCell]]:
        """Cells holding more than one detail, in day then slot order."""
        return [
            (daily.day, cell)
            for daily in self.days
            for cell in daily.slots
            if cell.has_conflict
        ]


def _coerce_section(value: Any) -> Any:
    """Accept "CS 101-1" for fields typed as a registered Course."""
    if isinstance(value, str):
        course = parse_course_code(value)
        if not isinstance(course, Course):
            raise MalformedIdentifier(value, "section is required")
        return course
    return value


class MeetingEntry(BaseModel):
    """A raw weekly meeting of a registered section.

    day and start stay raw here; the grid builder resolves them and skips the
    entry when they fall outside the grid.
    """

    model_config = _FROZEN

    course: Course
    day: Day | str
    start: TimeSlot | str
    duration: int = 1  # consecutive slots
    classrooms: tuple[str, ...] = ()

    @field_validator("course", mode="before")
    @classmethod
    def _require_section(cls, value: Any) -> Any:
        return _coerce_section(value)


# ---------------------------------------------------------------------------
# CGPA calculation
# ---------------------------------------------------------------------------


class Totals(BaseModel):
    """Credit and grade point sums."""

    model_config = _FROZEN

    credits: NonNegativeFloat = 0.0
    points: NonNegativeFloat = 0.0

    def __add__(self, other: "Totals") -> "Totals":
        if not isinstance(other, Totals):
            return NotImplemented
        return Totals(credits=self.credits + other.credits, points=self.points + other.points)

    @property
    def average(self) -> float:
        """points / credits, defined as 0 when there are no credits."""
        if self.credits == 0:
            return 0.0
        return self.points / self.credits


class GradedCourse(BaseModel):
    """A course with its letter grade and credit weight.

    grade stays a string until aggregation so an unknown value is reported
    together with the course it belongs to.
    """

    model_config = _FROZEN

    course: Course | CourseDefinition
    grade: str
    credits: NonNegativeFloat

    @field_validator("course", mode="before")
    @classmethod
    def _parse_code(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_course_code(value)
        return value

    @field_validator("grade", mode="before")
    @classmethod
    def _canonical_grade(cls, value: Any) -> Any:
        if isinstance(value, LetterGrade):
            return value.value
        if isinstance(value, str):
            return value.strip().upper()
        return value


class CGPACalculation(BaseModel):
    """Result of one CGPA calculation. gpa and cgpa are not rounded.

    Dump with by_alias=True for camelCase keys (semesterTotal, ...).
    """

    model_config = ConfigDict(
        frozen=True, allow_inf_nan=False, alias_generator=to_camel, populate_by_name=True
    )

    gpa: float
    cgpa: float
    standing: str
    semester_total: Totals
    previous_total: Totals
    grand_total: Totals


# ---------------------------------------------------------------------------
# Registration, transcript and curriculum records
# ---------------------------------------------------------------------------


class RegisteredCourse(BaseModel):
    model_config = _FROZEN

    course: Course
    name: str
    instructor: str = ""
    credits: NonNegativeFloat | None = None
    type: str = ""

    @field_validator("course", mode="before")
    @classmethod
    def _require_section(cls, value: Any) -> Any:
        return _coerce_section(value)


class SemesterCourses(BaseModel):
    """Courses registered for one semester."""

    model_config = _FROZEN

    semester: Semester
    courses: tuple[RegisteredCourse, ...] = ()


class TranscriptCourse(BaseModel):
    """One transcript row. grade and credits are None where the SRS shows N/A."""

    model_config = _FROZEN

    course: CourseDefinition
    name: str
    grade: LetterGrade | None = None
    credits: NonNegativeFloat | None = None


class TranscriptSemester(BaseModel):
    model_config = _FROZEN

    semester: Semester
    gpa: float | None = None
    cgpa: float | None = None
    standing: str = ""
    courses: tuple[TranscriptCourse, ...] = ()


class CurriculumStatus(str, Enum):
    SUCCESSFUL = "Successful"
    NOT_TAKEN = "Not taken"
    FAILED = "Failed"


class Replacement(BaseModel):
    """Equivalent course that was taken in place of the curriculum course."""

    model_config = _FROZEN

    course: CourseDefinition
    name: str


class CurriculumCourse(BaseModel):
    """One curriculum row.

    course is None for open slots (e.g. an unassigned elective).
    """

    model_config = _FROZEN

    course: CourseDefinition | None
    name: str
    status: CurriculumStatus
    grade: LetterGrade | None = None
    credits: NonNegativeFloat | None = None
    semester: Semester | None = None
    replacement: Replacement | None = None


class Exam(BaseModel):
    model_config = _FROZEN

    course_name: str
    exam_type: str
    starting_time: datetime
    time_block: str
    classrooms: tuple[str, ...] = ()


class GradeItem(BaseModel):
    """A single assessment row on a course's grade page."""

    model_config = _FROZEN

    title: str
    date: str = ""
    grade: str = ""
    comment: str = ""


class GradeCategory(BaseModel):
    model_config = _FROZEN

    type: str
    items: tuple[GradeItem, ...] = ()


class CourseGrades(BaseModel):
    model_config = _FROZEN

    title: str
    categories: tuple[GradeCategory, ...] = ()


class AttendanceItem(BaseModel):
    model_config = _FROZEN

    title: str
    date: str = ""
    attendance: str = ""


class CourseAttendance(BaseModel):
    model_config = _FROZEN

    title: str
    data: tuple[AttendanceItem, ...] = ()
    ratio: str = ""  # as shown by the SRS, e.g. "92.86%"

    @property
    def percentage(self) -> float | None:
        match = re.search(r"(\d+(?:[.,]\d+)?)\s*%", self.ratio)
        if not match:
            return None
        return float(match.group(1).replace(",", "."))


class LetterGradeResult(BaseModel):
    """One row of a letter grade announcement."""

    model_config = _FROZEN

    course: str
    grade: LetterGrade


class AcademicCalendarItem(BaseModel):
    model_config = _FROZEN

    date: str
    event: str
    type: Literal["studentaffairs", "vacation", "englishprep"] | None = None
