"""
Unit tests for configuration validation.

Tests environment parsing and fail-fast behavior of Settings.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config import Settings
from src.models.baseline import ScoringPolicy
from src.models.shared import Dimension, PriorityTier


class TestSettingsValidation:
    """Test cases for Settings validation."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings()
            assert settings.ENVIRONMENT == "development"
            assert not settings.is_production()
            assert settings.STRICT_CONSEQUENCE_SIGNS is False
            assert settings.FATIGUE_MEDIUM_MINUTES == 360
            assert settings.FATIGUE_HIGH_MINUTES == 720
            assert settings.DISCREPANCY_THRESHOLD == 5.0

    def test_production_environment_detection(self):
        with patch.dict("os.environ", {"ENVIRONMENT": "production"}):
            assert Settings().is_production()

    def test_cors_origins_list_with_whitespace(self):
        with patch.dict("os.environ", {"CORS_ORIGINS": " http://a.com , http://b.com ,"}):
            assert Settings().get_cors_origins_list() == ["http://a.com", "http://b.com"]

    def test_log_level_normalized(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "debug"}):
            assert Settings().LOG_LEVEL == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "chatty"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_fatigue_bands_must_be_ordered(self):
        with patch.dict("os.environ", {"FATIGUE_MEDIUM_MINUTES": "800"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_strict_signs_from_environment(self):
        with patch.dict("os.environ", {"STRICT_CONSEQUENCE_SIGNS": "true"}):
            assert Settings().STRICT_CONSEQUENCE_SIGNS is True


class TestScoringPolicyFromSettings:
    """Test the policy built from settings."""

    def test_reference_policy(self):
        with patch.dict("os.environ", {}, clear=True):
            policy = ScoringPolicy.from_settings(Settings())

        assert policy == ScoringPolicy()
        assert policy.weight_for(Dimension.LEGAL) == 2.0
        assert policy.weight_for(Dimension.ENVIRONMENTAL) == 0.5

    def test_priorities_from_environment(self):
        priorities = (
            '{"operational": "critical", "political": "critical", "personnel": "medium", '
            '"budget": "medium", "environmental": "low", "legal": "critical"}'
        )
        with patch.dict("os.environ", {"DIMENSION_PRIORITIES": priorities}):
            policy = ScoringPolicy.from_settings(Settings())

        assert policy.priorities[Dimension.POLITICAL] == PriorityTier.CRITICAL

    def test_incomplete_priorities_rejected(self):
        with patch.dict("os.environ", {"DIMENSION_PRIORITIES": '{"legal": "critical"}'}):
            with pytest.raises(ValidationError):
                Settings()

    def test_weights_from_environment(self):
        with patch.dict("os.environ", {"PRIORITY_WEIGHT_LOW": "0", "WEIGHT_BY_PRIORITY": "false"}):
            policy = ScoringPolicy.from_settings(Settings())

        assert policy.priority_weights[PriorityTier.LOW] == 0.0
        assert policy.weight_for(Dimension.LEGAL) == 1.0
