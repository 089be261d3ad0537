"""
Outcome Tracking Service.

Compares an approved option's predicted consequences with observed outcomes
and flags the gaps worth reviewing.
"""

import logging
from typing import List, Optional, Tuple

from src.constants import DEFAULT_DISCREPANCY_THRESHOLD, DOMAIN_TO_DIMENSION, SCORE_PRECISION
from src.models.shared import Dimension
from src.models.tracking import (
    ConsequenceOutcome,
    DecisionTracking,
    Discrepancy,
    DiscrepancyType,
    OutcomeObservation,
    OutcomeStatus,
    TrackingRequest,
    TrackingStatus,
)

logger = logging.getLogger(__name__)

UNRESOLVED = frozenset({OutcomeStatus.PENDING, OutcomeStatus.ON_TRACK})


def score_accuracy(predicted: float, actual: float) -> float:
    """
    Ratio of the smaller to the larger magnitude when signs agree.

    Returns 1.0 when both are zero and 0.0 when the signs disagree.
    """
    if predicted == 0 and actual == 0:
        return 1.0
    if predicted * actual <= 0:
        return 0.0
    low, high = sorted((abs(predicted), abs(actual)))
    return low / high


class OutcomeTracker:
    """Service for tracking outcomes of approved decisions."""

    def __init__(self, discrepancy_threshold: float = DEFAULT_DISCREPANCY_THRESHOLD) -> None:
        if discrepancy_threshold < 0:
            raise ValueError(
                f"discrepancy_threshold must be non-negative, got {discrepancy_threshold}"
            )
        self.discrepancy_threshold = discrepancy_threshold

    def track(self, request: TrackingRequest) -> DecisionTracking:
        """
        Summarize predicted versus actual outcomes.

        Args:
            request: Prediction and observations of an approved decision

        Returns:
            DecisionTracking with per-consequence status and discrepancies
        """
        tracked: List[ConsequenceOutcome] = []
        discrepancies: List[Discrepancy] = []
        dimensions: List[Dimension] = []

        for observation in request.outcomes:
            outcome = self._resolve(observation, request.days_elapsed)
            tracked.append(outcome)

            discrepancy = self._discrepancy(observation, outcome)
            if discrepancy is not None:
                discrepancies.append(discrepancy)

            if observation.domain is not None and observation.predicted is not None:
                dimension = Dimension(DOMAIN_TO_DIMENSION[observation.domain.value])
                if dimension not in dimensions:
                    dimensions.append(dimension)

        actual_score = sum(
            o.actual_impact for o in tracked
            if o.status not in UNRESOLVED and o.actual_impact is not None
        )

        if discrepancies:
            status = TrackingStatus.NEEDS_REVIEW
        elif tracked and all(o.status not in UNRESOLVED for o in tracked):
            status = TrackingStatus.COMPLETE
        else:
            status = TrackingStatus.UNFOLDING

        tracking = DecisionTracking(
            decision_id=request.decision_id,
            decision_title=request.decision_title,
            selected_option_id=request.selected_option_id,
            status=status,
            days_elapsed=request.days_elapsed,
            expected_duration_days=request.expected_duration_days,
            predicted_score=request.predicted_score,
            actual_score=round(actual_score, SCORE_PRECISION),
            accuracy=round(score_accuracy(request.predicted_score, actual_score), SCORE_PRECISION),
            consequence_tracking=tracked,
            discrepancies=discrepancies,
            affected_dimensions=dimensions,
        )

        logger.info(
            "decision_tracking_complete",
            extra={
                "decision_id": request.decision_id,
                "status": status.value,
                "num_outcomes": len(tracked),
                "num_discrepancies": len(discrepancies),
            }
        )

        return tracking

    @staticmethod
    def _resolve(observation: OutcomeObservation, days_elapsed: int) -> ConsequenceOutcome:
        """Derive the status and actual impact of one observation."""
        predicted = observation.predicted.impact_score if observation.predicted else None
        status, actual = OutcomeTracker._classify(observation, predicted, days_elapsed)

        variance = 0.0
        if status not in UNRESOLVED:
            variance = round(actual - (predicted or 0.0), SCORE_PRECISION)

        return ConsequenceOutcome(
            consequence_id=observation.consequence_id,
            description=observation.description,
            predicted_impact=predicted,
            actual_impact=actual,
            status=status,
            variance=variance,
            notes=observation.notes,
        )

    @staticmethod
    def _classify(
        observation: OutcomeObservation,
        predicted: Optional[float],
        days_elapsed: int
    ) -> Tuple[OutcomeStatus, Optional[float]]:
        if predicted is None:
            if observation.occurred:
                return OutcomeStatus.UNEXPECTED, observation.actual_impact or 0.0
            # Nothing predicted and nothing happened
            return OutcomeStatus.COMPLETE, 0.0

        if observation.occurred:
            actual = observation.actual_impact
            return OutcomeStatus.COMPLETE, predicted if actual is None else actual

        if observation.closed:
            if predicted < 0:
                return OutcomeStatus.RISK_AVOIDED, 0.0
            return OutcomeStatus.COMPLETE, 0.0

        if days_elapsed > 0:
            return OutcomeStatus.ON_TRACK, None
        return OutcomeStatus.PENDING, None

    def _discrepancy(
        self,
        observation: OutcomeObservation,
        outcome: ConsequenceOutcome
    ) -> Optional[Discrepancy]:
        if outcome.status in UNRESOLVED or outcome.status == OutcomeStatus.RISK_AVOIDED:
            return None
        if abs(outcome.variance) < self.discrepancy_threshold:
            return None

        predicted = outcome.predicted_impact or 0.0

        if outcome.status == OutcomeStatus.UNEXPECTED:
            kind = DiscrepancyType.UNEXPECTED_CONSEQUENCE
        elif predicted < 0 and observation.occurred and outcome.variance < 0:
            kind = DiscrepancyType.RISK_MATERIALIZED
        elif outcome.variance < 0:
            kind = DiscrepancyType.OVER_PREDICTED
        else:
            kind = DiscrepancyType.UNDER_PREDICTED

        return Discrepancy(
            type=kind,
            consequence_id=outcome.consequence_id,
            description=outcome.description,
            predicted_impact=predicted,
            actual_impact=outcome.actual_impact,
        )
