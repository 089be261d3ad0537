"""
Call-time configuration for the engine.

Baselines, priorities, weights and consequence templates are supplied by
external collaborators and passed into each analysis; none of them is held
as module state.
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator

from src.constants import DEFAULT_DIMENSION_PRIORITIES, DEFAULT_PRIORITY_WEIGHTS
from src.models.decision import Consequence
from src.models.shared import CamelModel, Dimension, PriorityTier


class DimensionBaseline(CamelModel):
    """
    Readiness/posture baseline of one dimension.

    Both values are nullable so that partially supplied baselines reach the
    scorer and fail there with a precise error instead of a schema error.
    """

    current_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    threshold: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    def is_complete(self) -> bool:
        """Both the score and the threshold are present."""
        return self.current_score is not None and self.threshold is not None


class ScoringPolicy(CamelModel):
    """Institutional weighting applied by the trade-off scorer."""

    priorities: Dict[Dimension, PriorityTier] = Field(
        default_factory=lambda: {
            Dimension(d): PriorityTier(t) for d, t in DEFAULT_DIMENSION_PRIORITIES.items()
        }
    )
    priority_weights: Dict[PriorityTier, float] = Field(
        default_factory=lambda: {
            PriorityTier(t): w for t, w in DEFAULT_PRIORITY_WEIGHTS.items()
        }
    )
    weight_by_priority: bool = True

    @field_validator("priorities")
    @classmethod
    def validate_priorities(cls, v: Dict[Dimension, PriorityTier]) -> Dict[Dimension, PriorityTier]:
        """Every dimension needs a priority tier."""
        missing = [d.value for d in Dimension if d not in v]
        if missing:
            raise ValueError(f"Priorities missing for dimension(s): {missing}")
        return v

    @field_validator("priority_weights")
    @classmethod
    def validate_weights(cls, v: Dict[PriorityTier, float]) -> Dict[PriorityTier, float]:
        """Every tier needs a non-negative weight."""
        missing = [t.value for t in PriorityTier if t not in v]
        if missing:
            raise ValueError(f"Weights missing for tier(s): {missing}")
        negative = [t.value for t, w in v.items() if w < 0]
        if negative:
            raise ValueError(f"Weights must be non-negative: {negative}")
        return v

    @classmethod
    def from_settings(cls, settings) -> "ScoringPolicy":
        """Build the default policy from application settings."""
        return cls(
            priorities={
                Dimension(d): PriorityTier(t) for d, t in settings.DIMENSION_PRIORITIES.items()
            },
            priority_weights={
                PriorityTier(t): w for t, w in settings.get_priority_weights().items()
            },
            weight_by_priority=settings.WEIGHT_BY_PRIORITY,
        )

    def weight_for(self, dimension: Dimension) -> float:
        """Overall-score multiplier of a dimension."""
        if not self.weight_by_priority:
            return 1.0
        return self.priority_weights[self.priorities[dimension]]


class ConsequenceTemplate(CamelModel):
    """Consequences projected for one option by the template supplier."""

    immediate: List[Consequence] = Field(default_factory=list)
    secondary: List[Consequence] = Field(default_factory=list)


class Precedent(CamelModel):
    """Historical decision similar to the one under analysis."""

    decision_id: str
    title: str
    date: str
    chosen_option: str
    outcome: str
