"""
Dependency injection providers for FastAPI endpoints.

Services hold only immutable configuration, so one cached instance per
process is shared by all requests. Tests override these through
``app.dependency_overrides``.
"""

from functools import lru_cache

from src.config import get_settings
from src.services.decision_analyzer import DecisionAnalyzer
from src.services.outcome_tracker import OutcomeTracker


@lru_cache()
def get_decision_analyzer() -> DecisionAnalyzer:
    """
    Get DecisionAnalyzer service instance.

    Returns:
        DecisionAnalyzer: Engine configured from application settings
    """
    return DecisionAnalyzer.from_settings(get_settings())


@lru_cache()
def get_outcome_tracker() -> OutcomeTracker:
    """
    Get OutcomeTracker service instance.

    Returns:
        OutcomeTracker: Service comparing predicted and actual outcomes
    """
    return OutcomeTracker(discrepancy_threshold=get_settings().DISCREPANCY_THRESHOLD)


def clear_service_caches() -> None:
    """Drop cached service instances (after settings change in tests)."""
    get_decision_analyzer.cache_clear()
    get_outcome_tracker.cache_clear()
