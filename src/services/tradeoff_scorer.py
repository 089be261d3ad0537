"""
Trade-off Scoring Service.

Converts an option's consequences into the fixed six-dimension trade-off
analysis:

    projected_impact[d] = Σ impact_score × likelihood   (domain → d, likelihood > 0)
    new_score[d]        = clamp(current_score[d] + projected_impact[d], 0, 100)
    breaches[d]         = new_score[d] < threshold[d]
    overall_score       = Σ projected_impact[d] × weight(priority[d])

Likelihood-zero consequences stay visible in the consequence lists but never
contribute to a score.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from src.constants import (
    DOMAIN_TO_DIMENSION,
    MAX_DIMENSION_SCORE,
    MIN_DIMENSION_SCORE,
    SCORE_PRECISION,
)
from src.models.baseline import DimensionBaseline, ScoringPolicy
from src.models.decision import Consequence
from src.models.shared import Dimension
from src.models.tradeoff import DimensionImpact, TradeOffAnalysis, TradeOffDimensions
from src.utils.errors import MissingBaselineError

logger = logging.getLogger(__name__)

BaselineSource = Mapping[Dimension, Optional[DimensionBaseline]]


def clamp_score(value: float) -> float:
    """Clamp a dimension score to the 0-100 scale."""
    return max(MIN_DIMENSION_SCORE, min(MAX_DIMENSION_SCORE, value))


class TradeOffScorer:
    """Service for scoring options on the trade-off dimensions."""

    def __init__(self, policy: Optional[ScoringPolicy] = None) -> None:
        """
        Initialize the scorer.

        Args:
            policy: Priorities and weights; reference policy if omitted
        """
        self.policy = policy or ScoringPolicy()

    def score(
        self,
        immediate: List[Consequence],
        secondary: List[Consequence],
        baselines: BaselineSource
    ) -> TradeOffAnalysis:
        """
        Score one option.

        Args:
            immediate: First-order consequences (their cascades are expected
                to already be flattened into ``secondary``)
            secondary: Flattened second-order consequences
            baselines: Dimension -> baseline score and threshold

        Returns:
            TradeOffAnalysis without a recommended option set

        Raises:
            MissingBaselineError: If any dimension baseline is incomplete
        """
        resolved = self.require_baselines(baselines)
        projected = self.project_impacts(immediate + secondary)

        impacts: Dict[str, DimensionImpact] = {}
        overall = 0.0

        for dimension in Dimension:
            baseline = resolved[dimension]
            impact = projected[dimension]
            new_score = round(clamp_score(baseline.current_score + impact), SCORE_PRECISION)

            impacts[dimension.value] = DimensionImpact(
                current_score=baseline.current_score,
                projected_impact=round(impact, SCORE_PRECISION),
                new_score=new_score,
                threshold=baseline.threshold,
                breaches_threshold=new_score < baseline.threshold,
                priority=self.policy.priorities[dimension],
            )
            overall += impact * self.policy.weight_for(dimension)

        analysis = TradeOffAnalysis(
            dimensions=TradeOffDimensions(**impacts),
            overall_score=round(overall, SCORE_PRECISION),
        )

        logger.debug(
            "tradeoff_scoring_complete",
            extra={
                "overall_score": analysis.overall_score,
                "critical_breaches": [d.value for d in analysis.dimensions.critical_breaches()],
            }
        )

        return analysis

    def project_impacts(self, consequences: Iterable[Consequence]) -> Dict[Dimension, float]:
        """
        Sum likelihood-weighted impacts per dimension.

        Each consequence is counted on its own; nested cascades are ignored
        here because callers pass the flattened view.
        """
        totals = {dimension: 0.0 for dimension in Dimension}
        for consequence in consequences:
            if consequence.likelihood == 0:
                continue
            dimension = Dimension(DOMAIN_TO_DIMENSION[consequence.domain.value])
            totals[dimension] += consequence.impact_score * consequence.likelihood
        return totals

    @staticmethod
    def require_baselines(baselines: BaselineSource) -> Dict[Dimension, DimensionBaseline]:
        """
        Ensure every dimension has a complete baseline.

        Raises:
            MissingBaselineError: Listing every incomplete dimension
        """
        resolved: Dict[Dimension, DimensionBaseline] = {}
        missing: List[str] = []

        for dimension in Dimension:
            baseline = baselines.get(dimension)
            if baseline is None:
                baseline = baselines.get(dimension.value)
            if baseline is None or not baseline.is_complete():
                missing.append(dimension.value)
                continue
            resolved[dimension] = baseline

        if missing:
            logger.error("missing_dimension_baseline", extra={"missing_dimensions": missing})
            raise MissingBaselineError(missing)

        return resolved
