"""
Outcome tracking models.

Compare an approved option's predicted consequences with what actually
happened once the decision is executed.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from src.models.shared import CamelModel, ConsequenceDomain, Dimension, Timeframe


class TrackingStatus(str, Enum):
    """Overall state of a tracked decision."""

    UNFOLDING = "unfolding"
    COMPLETE = "complete"
    NEEDS_REVIEW = "needs_review"


class OutcomeStatus(str, Enum):
    """State of one tracked consequence."""

    PENDING = "pending"
    ON_TRACK = "on_track"
    COMPLETE = "complete"
    RISK_AVOIDED = "risk_avoided"
    UNEXPECTED = "unexpected"


class DiscrepancyType(str, Enum):
    """How an outcome diverged from its prediction."""

    OVER_PREDICTED = "over_predicted"
    UNDER_PREDICTED = "under_predicted"
    UNEXPECTED_CONSEQUENCE = "unexpected_consequence"
    RISK_MATERIALIZED = "risk_materialized"


class PredictedImpact(CamelModel):
    """What the analysis predicted for a consequence."""

    impact_score: float
    likelihood: float = Field(..., ge=0.0, le=1.0)
    timeframe: Timeframe


class OutcomeObservation(CamelModel):
    """Observed state of one consequence."""

    consequence_id: str
    description: str
    domain: Optional[ConsequenceDomain] = None
    predicted: Optional[PredictedImpact] = Field(
        default=None,
        description="Absent when the outcome was not predicted"
    )
    occurred: bool = False
    actual_impact: Optional[float] = None
    occurred_at: Optional[datetime] = None
    notes: Optional[str] = None
    closed: bool = Field(
        default=False,
        description="No further change expected for this consequence"
    )


class TrackingRequest(CamelModel):
    """Prediction and observations for an approved decision."""

    decision_id: str
    decision_title: str = ""
    selected_option_id: str
    predicted_score: float
    days_elapsed: int = Field(default=0, ge=0)
    expected_duration_days: Optional[int] = Field(default=None, ge=0)
    outcomes: List[OutcomeObservation] = Field(default_factory=list)


class ConsequenceOutcome(CamelModel):
    """Tracked result of one consequence."""

    consequence_id: str
    description: str
    predicted_impact: Optional[float] = None
    actual_impact: Optional[float] = None
    status: OutcomeStatus
    variance: float = 0.0
    notes: Optional[str] = None


class Discrepancy(CamelModel):
    """Significant gap between prediction and outcome."""

    type: DiscrepancyType
    consequence_id: str
    description: str
    predicted_impact: float
    actual_impact: float


class DecisionTracking(CamelModel):
    """Predicted-versus-actual summary of an approved decision."""

    decision_id: str
    decision_title: str = ""
    selected_option_id: str
    status: TrackingStatus
    days_elapsed: int
    expected_duration_days: Optional[int] = None
    predicted_score: float
    actual_score: float
    accuracy: float = Field(..., ge=0.0, le=1.0)
    consequence_tracking: List[ConsequenceOutcome] = Field(default_factory=list)
    discrepancies: List[Discrepancy] = Field(default_factory=list)
    affected_dimensions: List[Dimension] = Field(default_factory=list)
