"""Error hierarchy for SRS record normalization and academic calculations.

Identifier and grade errors are precondition failures raised synchronously to
the caller with the offending raw value attached. Schedule entry errors are
recoverable: the grid builder collects them next to the best-effort grid.

None of these subclass ValueError, so raising them from a pydantic validator
propagates the original exception instead of a ValidationError.

Example usage:
    try:
        course = parse_course_code(raw)
    except MalformedIdentifier as exc:
        log.warning("bad_course_code", raw=exc.raw, reason=exc.reason)
"""

from typing import Any


class SRSError(Exception):
    """Base exception for all SRS core errors."""

    pass


class MalformedIdentifier(SRSError):
    """A course or semester identifier segment could not be canonicalized.

    Examples: empty department, "CS!" as a department, "2020-2022" as an
    academic year, "Autumn" as a season.
    """

    def __init__(self, raw: Any, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"malformed identifier {raw!r}: {reason}")


class MalformedRecord(SRSError):
    """A scraped row field other than an identifier is unusable.

    Examples: credits "three", curriculum status "Passed".
    """

    def __init__(self, field: str, raw: Any, reason: str) -> None:
        self.field = field
        self.raw = raw
        self.reason = reason
        super().__init__(f"malformed {field} {raw!r}: {reason}")


class InvalidScheduleEntry(SRSError):
    """A meeting entry references a day or time slot outside the weekly grid.

    Recoverable - the entry is skipped and the build continues.
    """

    def __init__(self, entry: Any, reason: str) -> None:
        self.entry = entry
        self.reason = reason
        super().__init__(f"invalid schedule entry: {reason}")


class UnknownGrade(SRSError):
    """A grade is not part of the letter grade table.

    Fatal to a single aggregation call. Callers must filter placeholder
    grades such as "N/A" or "W" before aggregating.
    """

    def __init__(self, grade: Any, course: Any = None) -> None:
        self.grade = grade
        self.course = course
        if course is None:
            message = f"unknown grade {grade!r}"
        else:
            code = getattr(course, "code", course)
            message = f"unknown grade {grade!r} for {code}"
        super().__init__(message)
