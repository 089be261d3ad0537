"""
Configuration management for the Decision Cascade Engine.

Handles all environment variables and application settings.
"""

import logging
import sys
from functools import lru_cache
from typing import Dict, List

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from src.__version__ import __version__
from src.constants import (
    DEFAULT_DIMENSION_PRIORITIES,
    DEFAULT_DISCREPANCY_THRESHOLD,
    FATIGUE_HIGH_MINUTES as DEFAULT_FATIGUE_HIGH_MINUTES,
    FATIGUE_MEDIUM_MINUTES as DEFAULT_FATIGUE_MEDIUM_MINUTES,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, or production"
    )

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Decision Cascade Engine"
    VERSION: str = __version__
    DESCRIPTION: str = "Deterministic consequence projection and option ranking for pending decisions"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS Configuration
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = Field(
        default=True,
        description="Emit JSON logs (disable for human-readable development output)"
    )

    # Scoring Policy Defaults
    PRIORITY_WEIGHT_CRITICAL: float = Field(default=2.0, ge=0.0)
    PRIORITY_WEIGHT_HIGH: float = Field(default=1.5, ge=0.0)
    PRIORITY_WEIGHT_MEDIUM: float = Field(default=1.0, ge=0.0)
    PRIORITY_WEIGHT_LOW: float = Field(default=0.5, ge=0.0)
    WEIGHT_BY_PRIORITY: bool = Field(
        default=True,
        description="Weight projected impacts by dimension priority in the overall score"
    )
    DIMENSION_PRIORITIES: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DIMENSION_PRIORITIES),
        description="Dimension -> priority tier (JSON object in the environment)"
    )

    # Engine Behaviour
    STRICT_CONSEQUENCE_SIGNS: bool = Field(
        default=False,
        description="Fail on consequence sign/type mismatch instead of correcting it"
    )

    # Cognitive Load
    FATIGUE_MEDIUM_MINUTES: int = Field(default=DEFAULT_FATIGUE_MEDIUM_MINUTES, ge=0)
    FATIGUE_HIGH_MINUTES: int = Field(default=DEFAULT_FATIGUE_HIGH_MINUTES, ge=0)

    # Outcome Tracking
    DISCREPANCY_THRESHOLD: float = Field(default=DEFAULT_DISCREPANCY_THRESHOLD, ge=0.0)

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only standard logging level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("DIMENSION_PRIORITIES")
    @classmethod
    def validate_dimension_priorities(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Priorities must cover the six dimensions with known tiers."""
        missing = sorted(set(DEFAULT_DIMENSION_PRIORITIES) - set(v))
        if missing:
            raise ValueError(f"DIMENSION_PRIORITIES missing: {missing}")

        unknown = {k: t for k, t in v.items() if t not in ("critical", "high", "medium", "low")}
        if unknown:
            raise ValueError(f"Unknown priority tiers: {unknown}")

        return v

    @model_validator(mode="after")
    def validate_fatigue_bands(self) -> "Settings":
        """The medium fatigue band must start before the high band."""
        if self.FATIGUE_MEDIUM_MINUTES >= self.FATIGUE_HIGH_MINUTES:
            raise ValueError(
                "FATIGUE_MEDIUM_MINUTES must be lower than FATIGUE_HIGH_MINUTES"
            )
        return self

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def get_priority_weights(self) -> Dict[str, float]:
        """Get the priority tier multipliers as a mapping."""
        return {
            "critical": self.PRIORITY_WEIGHT_CRITICAL,
            "high": self.PRIORITY_WEIGHT_HIGH,
            "medium": self.PRIORITY_WEIGHT_MEDIUM,
            "low": self.PRIORITY_WEIGHT_LOW,
        }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration
    """
    return Settings()


def setup_logging() -> logging.Logger:
    """
    Configure structured JSON logging with correlation ID injection.

    Returns:
        logging.Logger: Configured root logger
    """
    # Deferred import: secure_logging pulls in the tracing middleware
    from src.utils.secure_logging import CorrelationIDFormatter

    settings = get_settings()

    logger = logging.getLogger()
    logger.setLevel(settings.LOG_LEVEL)

    # Remove existing handlers
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        formatter = CorrelationIDFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
