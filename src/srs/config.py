"""SRS core configuration loaded from environment variables.

Grade-point values and standing bands are institution specific, so they are
settings rather than constants. Complex values are read as JSON, e.g.:

    SRS_GRADE_POINTS='{"A": 4.0, "B": 3.0, "C": 2.0, "D": 1.0, "F": 0.0}'
    SRS_STANDING_BANDS='[{"minimum": 2.0, "label": "Good"}, {"minimum": 0, "label": "Probation"}]'
"""

from pydantic import Field, NonNegativeFloat
from pydantic_settings import BaseSettings

from src.srs.grades import (
    DEFAULT_GRADE_POINTS,
    DEFAULT_STANDING_BANDS,
    GradePointTable,
    LetterGrade,
    StandingBand,
    StandingTable,
)


def _default_standing_bands() -> list[StandingBand]:
    return [StandingBand(minimum=minimum, label=label) for minimum, label in DEFAULT_STANDING_BANDS]


class SRSConfig(BaseSettings):
    """SRS core configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Academic tables
    grade_points: dict[LetterGrade, NonNegativeFloat] = Field(
        default_factory=lambda: dict(DEFAULT_GRADE_POINTS),
        description="Grade point value per letter grade",
    )
    standing_bands: list[StandingBand] = Field(
        default_factory=_default_standing_bands,
        description="Standing bands ordered by decreasing minimum CGPA; last must start at 0",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "SRS_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "allow_inf_nan": False,
    }

    def grade_point_table(self) -> GradePointTable:
        return GradePointTable(points=self.grade_points)

    def standing_table(self) -> StandingTable:
        return StandingTable(bands=tuple(self.standing_bands))


# Singleton pattern
_config: SRSConfig | None = None


def get_config() -> SRSConfig:
    """Get the SRS configuration singleton.

    Returns:
        SRSConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = SRSConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
