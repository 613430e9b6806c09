"""Course and semester identifiers.

Every other module keys its data on these models: grid details are labelled
with Course.code, transcripts and curricula are keyed by CourseDefinition and
Semester. Construction always canonicalizes the raw segments, so the same
course scraped twice with different spacing or casing compares equal:

    >>> parse_course(" cs", "0101", "01") == parse_course("CS", "101", "1")
    True

Semesters sort by academic year, then by SEASON_ORDER within the year.
"""

import re
from enum import Enum
from functools import total_ordering
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from src.srs.errors import MalformedIdentifier

# Course numbers are left-padded to this many digits ("7" -> "007")
NUMBER_WIDTH = 3

_DEPARTMENT_RE = re.compile(r"^[A-Z]{1,8}$")
_NUMBER_RE = re.compile(r"^(\d{1,6})([A-Z]?)$")
_SECTION_RE = re.compile(r"^\d{1,3}$")
_YEAR_RE = re.compile(r"^(\d{4})\s*-\s*(\d{4})$")
_COURSE_CODE_RE = re.compile(
    r"^([A-Za-z]{1,8})\s*(\d{1,6}[A-Za-z]?)(?:\s*-\s*(\d{1,3}))?$"
)
_SEMESTER_LABEL_RE = re.compile(r"^(\d{4}\s*-\s*\d{4})\s+(\S+)$")


class SemesterType(str, Enum):
    """Season segment of a semester: 2020-2021 **Fall**."""

    FALL = "Fall"
    SPRING = "Spring"
    SUMMER = "Summer"


# Order of seasons inside one academic year
SEASON_ORDER: tuple[SemesterType, ...] = (
    SemesterType.FALL,
    SemesterType.SPRING,
    SemesterType.SUMMER,
)


def _require_text(raw: Any, what: str) -> str:
    # JSON producers sometimes hand over numeric segments as ints
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = str(raw)
    if not isinstance(raw, str):
        raise MalformedIdentifier(raw, f"{what} must be a string")
    value = raw.strip()
    if not value:
        raise MalformedIdentifier(raw, f"{what} is empty")
    return value


def normalize_department(raw: Any) -> str:
    """Strip and uppercase a department code ("cs " -> "CS")."""
    value = _require_text(raw, "department").upper()
    if not _DEPARTMENT_RE.match(value):
        raise MalformedIdentifier(raw, "department must be 1 to 8 letters")
    return value


def normalize_number(raw: Any) -> str:
    """Canonicalize a course number ("0101" -> "101", "7" -> "007", "102l" -> "102L")."""
    value = _require_text(raw, "course number").upper()
    match = _NUMBER_RE.match(value)
    if not match:
        raise MalformedIdentifier(
            raw, "course number must be digits with an optional letter suffix"
        )
    digits, suffix = match.groups()
    return str(int(digits)).zfill(NUMBER_WIDTH) + suffix


def normalize_section(raw: Any) -> str:
    """Drop leading zeros from a section number ("01" -> "1")."""
    value = _require_text(raw, "section")
    if not _SECTION_RE.match(value):
        raise MalformedIdentifier(raw, "section must be 1 to 3 digits")
    return str(int(value))


def normalize_year(raw: Any) -> str:
    """Canonicalize an academic year ("2020 - 2021" -> "2020-2021")."""
    value = _require_text(raw, "year")
    match = _YEAR_RE.match(value)
    if not match:
        raise MalformedIdentifier(raw, "year must look like YYYY-YYYY")
    first, second = (int(part) for part in match.groups())
    if second != first + 1:
        raise MalformedIdentifier(raw, "academic year must span two consecutive years")
    return f"{first}-{second}"


def normalize_season(raw: Any) -> SemesterType:
    """Match a season case-insensitively against SemesterType."""
    if isinstance(raw, SemesterType):
        return raw
    value = _require_text(raw, "season")
    for season in SemesterType:
        if season.value.lower() == value.lower():
            return season
    valid = ", ".join(season.value for season in SemesterType)
    raise MalformedIdentifier(raw, f"season must be one of {valid}")


@total_ordering
class CourseDefinition(BaseModel):
    """A course independent of section: CS 101.

    Used wherever records are grouped by subject and number across sections
    and semesters (transcript, curriculum).
    """

    model_config = ConfigDict(frozen=True)

    department: str
    number: str

    @field_validator("department", mode="before")
    @classmethod
    def _canonical_department(cls, value: Any) -> str:
        return normalize_department(value)

    @field_validator("number", mode="before")
    @classmethod
    def _canonical_number(cls, value: Any) -> str:
        return normalize_number(value)

    @property
    def code(self) -> str:
        return f"{self.department}{self.number}"

    @property
    def sort_key(self) -> tuple:
        return (self.department, self.number)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CourseDefinition):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.code


class Course(CourseDefinition):
    """One registered section of a course: CS 101-1."""

    section: str

    @field_validator("section", mode="before")
    @classmethod
    def _canonical_section(cls, value: Any) -> str:
        return normalize_section(value)

    @property
    def code(self) -> str:
        return f"{self.department}{self.number}-{self.section}"

    @property
    def definition(self) -> CourseDefinition:
        return CourseDefinition(department=self.department, number=self.number)

    @property
    def sort_key(self) -> tuple:
        return (self.department, self.number, int(self.section))


@total_ordering
class Semester(BaseModel):
    """An academic semester: 2020-2021 Fall."""

    model_config = ConfigDict(frozen=True)

    year: str
    season: SemesterType

    @field_validator("year", mode="before")
    @classmethod
    def _canonical_year(cls, value: Any) -> str:
        return normalize_year(value)

    @field_validator("season", mode="before")
    @classmethod
    def _canonical_season(cls, value: Any) -> SemesterType:
        return normalize_season(value)

    @property
    def start_year(self) -> int:
        return int(self.year[:4])

    @property
    def label(self) -> str:
        return f"{self.year} {self.season.value}"

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.start_year, SEASON_ORDER.index(self.season))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Semester):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.label


def parse_course(
    department: Any, number: Any, section: Any = None
) -> Course | CourseDefinition:
    """Build a Course, or a CourseDefinition when no section is given.

    Raises:
        MalformedIdentifier: If any segment cannot be canonicalized.
    """
    if section is None:
        return CourseDefinition(
            department=normalize_department(department),
            number=normalize_number(number),
        )
    return Course(
        department=normalize_department(department),
        number=normalize_number(number),
        section=normalize_section(section),
    )


def parse_course_code(raw: Any) -> Course | CourseDefinition:
    """Parse "CS 101-1" into a Course and "CS 101" into a CourseDefinition.

    Spacing between segments is optional ("CS101-01" works too).
    """
    value = _require_text(raw, "course code")
    match = _COURSE_CODE_RE.match(value)
    if not match:
        raise MalformedIdentifier(raw, "expected '<DEPT> <NUMBER>[-<SECTION>]'")
    return parse_course(*match.groups())


def parse_semester(year: Any, season: Any) -> Semester:
    """Build a Semester from its raw year and season segments."""
    return Semester(year=normalize_year(year), season=normalize_season(season))


def parse_semester_label(raw: Any) -> Semester:
    """Parse "2020-2021 Fall" into a Semester."""
    value = _require_text(raw, "semester")
    match = _SEMESTER_LABEL_RE.match(value)
    if not match:
        raise MalformedIdentifier(raw, "expected 'YYYY-YYYY <Season>'")
    return parse_semester(*match.groups())
