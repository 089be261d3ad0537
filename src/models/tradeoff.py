"""
Trade-off analysis models.

The six dimensions are named fields rather than a free-form mapping, so a
scored analysis cannot omit one.
"""

from typing import Iterator, List, Optional, Tuple

from pydantic import Field

from src.models.shared import CamelModel, Dimension, PriorityTier


class DimensionImpact(CamelModel):
    """Projected effect of one option on one trade-off dimension."""

    current_score: float = Field(..., ge=0.0, le=100.0, description="Baseline before the option")
    projected_impact: float = Field(..., description="Likelihood-weighted sum of impacts")
    new_score: float = Field(..., ge=0.0, le=100.0, description="Clamped baseline + impact")
    threshold: float = Field(..., ge=0.0, le=100.0, description="Minimum acceptable score")
    breaches_threshold: bool
    priority: PriorityTier


class TradeOffDimensions(CamelModel):
    """All six scored dimensions of an option."""

    operational: DimensionImpact
    political: DimensionImpact
    personnel: DimensionImpact
    budget: DimensionImpact
    environmental: DimensionImpact
    legal: DimensionImpact

    def items(self) -> Iterator[Tuple[Dimension, DimensionImpact]]:
        """Iterate dimensions in declaration order."""
        for dimension in Dimension:
            yield dimension, getattr(self, dimension.value)

    def critical_breaches(self) -> List[Dimension]:
        """Critical-priority dimensions whose new score falls below threshold."""
        return [
            dimension for dimension, impact in self.items()
            if impact.priority == PriorityTier.CRITICAL and impact.breaches_threshold
        ]


class TradeOffAnalysis(CamelModel):
    """Per-option scoring result."""

    dimensions: TradeOffDimensions
    overall_score: float
    recommended_option: Optional[str] = Field(
        default=None,
        description="Decision-level recommendation, repeated on every option"
    )
