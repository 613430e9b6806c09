"""
Unit tests for SRSConfig environment loading.
"""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from src.srs.config import SRSConfig, get_config, reset_config
from src.srs.grades import GradePointTable, LetterGrade, StandingTable


class TestSRSConfig(unittest.TestCase):
    def setUp(self) -> None:
        reset_config()

    def tearDown(self) -> None:
        reset_config()

    def test_defaults_match_default_tables(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = SRSConfig(_env_file=None)
        self.assertEqual(config.grade_point_table(), GradePointTable.default())
        self.assertEqual(config.standing_table(), StandingTable.default())
        self.assertFalse(config.log_json)
        self.assertEqual(config.log_level, "INFO")

    def test_tables_from_environment(self) -> None:
        env = {
            "SRS_GRADE_POINTS": '{"A": 5.0, "B": 4.0, "F": 0.0}',
            "SRS_STANDING_BANDS": '[{"minimum": 4.0, "label": "Top"}, {"minimum": 0, "label": "Rest"}]',
            "SRS_LOG_JSON": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = SRSConfig(_env_file=None)
        self.assertEqual(config.grade_points[LetterGrade.A], 5.0)
        self.assertEqual(config.standing_table().classify(4.2), "Top")
        self.assertEqual(config.standing_table().classify(3.9), "Rest")
        self.assertTrue(config.log_json)

    def test_negative_grade_points_rejected_on_load(self) -> None:
        env = {"SRS_GRADE_POINTS": '{"A": 4.0, "F": -1.0}'}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValidationError):
                SRSConfig(_env_file=None)

    def test_invalid_standing_bands_rejected_when_table_is_built(self) -> None:
        env = {"SRS_STANDING_BANDS": '[{"minimum": 2.0, "label": "Good"}]'}
        with patch.dict(os.environ, env, clear=True):
            config = SRSConfig(_env_file=None)
        with self.assertRaises(ValidationError):
            config.standing_table()

    def test_get_config_is_cached_until_reset(self) -> None:
        with patch.dict(os.environ, {"SRS_LOG_LEVEL": "DEBUG"}, clear=True):
            first = get_config()
            self.assertIs(get_config(), first)
            self.assertEqual(first.log_level, "DEBUG")
            reset_config()
            self.assertIsNot(get_config(), first)


if __name__ == "__main__":
    unittest.main()
