"""
Shared Pydantic models and enumerations used across the decision engine.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model for the JSON wire contract.

    Attributes are snake_case in Python and camelCase on the wire. Both
    spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_wire(self) -> dict:
        """Serialize with camelCase aliases and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class Urgency(str, Enum):
    """How soon a decision must be taken."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Complexity(str, Enum):
    """Analytical complexity of a decision."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DecisionStatus(str, Enum):
    """Lifecycle status of a decision."""

    PENDING = "pending"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEFERRED = "deferred"


class ROEStatus(str, Enum):
    """Rules-of-engagement gating state."""

    WITHIN_APPROVED_ROE = "within_approved_roe"
    REQUIRES_ROE_RELEASE = "requires_roe_release"
    ROE_PENDING_APPROVAL = "roe_pending_approval"
    ROE_APPROVED = "roe_approved"
    ROE_REJECTED = "roe_rejected"
    RELEASED = "Released"
    DRAFT = "Draft"


class ConsequenceDomain(str, Enum):
    """Impact domain of a consequence."""

    OPERATIONAL = "operational"
    POLITICAL = "political"
    PERSONNEL = "personnel"
    ECONOMIC = "economic"
    ENVIRONMENTAL = "environmental"
    LEGAL = "legal"


class ConsequenceType(str, Enum):
    """Direction of a consequence."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Severity(str, Enum):
    """Severity of a consequence or risk factor."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Timeframe(str, Enum):
    """When a consequence manifests."""

    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


class ResourceType(str, Enum):
    """Kind of resource an option consumes."""

    PERSONNEL = "personnel"
    EQUIPMENT = "equipment"
    BUDGET = "budget"
    TIME = "time"


class ResourceAvailability(str, Enum):
    """Availability state of a required resource."""

    AVAILABLE = "available"
    CONSTRAINED = "constrained"
    UNAVAILABLE = "unavailable"


class DetectedBy(str, Enum):
    """Who flagged a risk factor."""

    SYSTEM = "system"
    AI = "ai"
    HUMAN = "human"


class Sensitivity(str, Enum):
    """Political sensitivity or media visibility level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriorityTier(str, Enum):
    """Institutional weighting of a trade-off dimension."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Dimension(str, Enum):
    """Scored trade-off dimension."""

    OPERATIONAL = "operational"
    POLITICAL = "political"
    PERSONNEL = "personnel"
    BUDGET = "budget"
    ENVIRONMENTAL = "environmental"
    LEGAL = "legal"


class FatigueLevel(str, Enum):
    """Decision-maker fatigue band."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisWarning(CamelModel):
    """Non-fatal note attached to an analysis."""

    code: str = Field(..., description="Warning code")
    message: str = Field(..., description="Human-readable warning")
    affected_items: List[str] = Field(
        default_factory=list,
        description="Option ids or consequence descriptions affected"
    )
