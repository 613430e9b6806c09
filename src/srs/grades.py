"""Letter grades, grade-point table and standing bands.

Both tables are configuration: SRSConfig carries them (overridable through the
environment) and CGPACalculator receives them as constructor arguments, so a
different institution's scale only needs different settings.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, model_validator

from src.srs.errors import UnknownGrade


class LetterGrade(str, Enum):
    """Closed set of letter grades that carry grade points."""

    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    F = "F"

    @classmethod
    def parse(cls, raw: Any, course: Any = None) -> "LetterGrade":
        """Decode a raw grade, raising UnknownGrade for anything outside the set."""
        if isinstance(raw, LetterGrade):
            return raw
        if not isinstance(raw, str):
            raise UnknownGrade(raw, course)
        try:
            return cls(raw.strip().upper())
        except ValueError:
            raise UnknownGrade(raw, course) from None


DEFAULT_GRADE_POINTS: dict[LetterGrade, float] = {
    LetterGrade.A: 4.00,
    LetterGrade.A_MINUS: 3.70,
    LetterGrade.B_PLUS: 3.30,
    LetterGrade.B: 3.00,
    LetterGrade.B_MINUS: 2.70,
    LetterGrade.C_PLUS: 2.30,
    LetterGrade.C: 2.00,
    LetterGrade.C_MINUS: 1.70,
    LetterGrade.D_PLUS: 1.30,
    LetterGrade.D: 1.00,
    LetterGrade.F: 0.00,
}

# (minimum cgpa, label), highest band first
DEFAULT_STANDING_BANDS: tuple[tuple[float, str], ...] = (
    (3.50, "High Honor"),
    (3.00, "Honor"),
    (2.00, "Satisfactory"),
    (1.80, "Probation"),
    (0.00, "Unsatisfactory"),
)


class GradePointTable(BaseModel):
    """Mapping from letter grade to grade point value."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    points: dict[LetterGrade, NonNegativeFloat]

    @classmethod
    def default(cls) -> "GradePointTable":
        return cls(points=dict(DEFAULT_GRADE_POINTS))

    def value_of(self, grade: Any, course: Any = None) -> float:
        """Grade point value of a raw or decoded grade.

        Raises:
            UnknownGrade: If the grade is not a LetterGrade, or the table has
                no value for it.
        """
        letter = LetterGrade.parse(grade, course)
        try:
            return self.points[letter]
        except KeyError:
            raise UnknownGrade(grade, course) from None


class StandingBand(BaseModel):
    """A CGPA band: every cgpa >= minimum (and below the next band) gets label."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    minimum: NonNegativeFloat
    label: str = Field(min_length=1)


class StandingTable(BaseModel):
    """Ordered standing bands, highest minimum first.

    The last band must start at 0 so every cgpa maps to exactly one label.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    bands: tuple[StandingBand, ...]

    @model_validator(mode="after")
    def _check_bands(self) -> "StandingTable":
        if not self.bands:
            raise ValueError("standing table needs at least one band")
        minimums = [band.minimum for band in self.bands]
        for higher, lower in zip(minimums, minimums[1:]):
            if lower >= higher:
                raise ValueError("standing bands must be ordered by strictly decreasing minimum")
        if minimums[-1] != 0:
            raise ValueError("lowest standing band must start at 0")
        return self

    @classmethod
    def from_pairs(cls, pairs: Any) -> "StandingTable":
        """Build from (minimum, label) pairs."""
        return cls(
            bands=tuple(StandingBand(minimum=minimum, label=label) for minimum, label in pairs)
        )

    @classmethod
    def default(cls) -> "StandingTable":
        return cls.from_pairs(DEFAULT_STANDING_BANDS)

    def classify(self, cgpa: float) -> str:
        """Label of the first band whose minimum the cgpa reaches."""
        for band in self.bands:
            if cgpa >= band.minimum:
                return band.label
        # Only reachable for negative input
        return self.bands[-1].label
