"""
Input data model: decisions, options, consequences and risk factors.

A Decision arrives from the upstream planning process with its options
already declared. Consequence lists and trade-off fields on each option are
derived data: empty on input and filled on copies by the engine.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from src.constants import MAX_IMPACT_SCORE, MIN_IMPACT_SCORE
from src.models.shared import (
    CamelModel,
    Complexity,
    ConsequenceDomain,
    ConsequenceType,
    DecisionStatus,
    DetectedBy,
    ResourceAvailability,
    ResourceType,
    ROEStatus,
    Sensitivity,
    Severity,
    Timeframe,
    Urgency,
)
from src.models.tradeoff import TradeOffAnalysis


class Stakeholder(CamelModel):
    """Person or cell affected by or involved in a decision."""

    name: str
    role: str = ""
    impact: Literal["direct", "indirect"] = "indirect"
    must_consult: bool = False


class DecisionContext(CamelModel):
    """What a decision is about and who has a say in it."""

    category: str = Field(default="general", description="e.g. strike, maneuver, policy")
    stakeholders: List[Stakeholder] = Field(default_factory=list)
    political_sensitivity: Sensitivity = Sensitivity.LOW
    media_visibility: Sensitivity = Sensitivity.LOW
    triggering_event: Optional[str] = None
    related_entity_ids: List[str] = Field(default_factory=list)
    background_brief_id: Optional[str] = None


class ResourceRequirement(CamelModel):
    """Resource an option needs to execute."""

    resource_type: ResourceType
    quantity: float = Field(..., ge=0)
    unit: str
    availability: ResourceAvailability = ResourceAvailability.AVAILABLE
    conflict: Optional[str] = None


class OptionTimeline(CamelModel):
    """Execution and impact timing of an option (free text durations)."""

    execution_duration: str
    first_impact_time: str
    full_impact_time: str
    reversibility_window: Optional[str] = None


class Consequence(CamelModel):
    """
    One projected effect of choosing an option.

    ``impact_score`` is signed: positive favors the option, negative
    disfavors it. ``cascades`` holds second-order effects triggered by this
    one and must form an acyclic forest.
    """

    domain: ConsequenceDomain
    type: ConsequenceType
    severity: Severity
    description: str
    likelihood: float = Field(..., ge=0.0, le=1.0)
    impact_score: int = Field(..., ge=MIN_IMPACT_SCORE, le=MAX_IMPACT_SCORE)
    timeframe: Timeframe
    affected_metrics: List[str] = Field(default_factory=list)
    cascades: List["Consequence"] = Field(default_factory=list)

    @field_validator("affected_metrics")
    @classmethod
    def dedupe_metrics(cls, v: List[str]) -> List[str]:
        """Affected metrics are a set; keep first-seen order."""
        return list(dict.fromkeys(v))

    def sign_matches_type(self) -> bool:
        """Check the impact score sign against the declared type."""
        if self.type == ConsequenceType.POSITIVE:
            return self.impact_score >= 0
        if self.type == ConsequenceType.NEGATIVE:
            return self.impact_score <= 0
        return self.impact_score == 0

    def count_nodes(self) -> int:
        """Number of consequences in this subtree, self included."""
        return 1 + sum(child.count_nodes() for child in self.cascades)


class RiskFactor(CamelModel):
    """Standing hazard associated with a decision."""

    id: str
    description: str
    severity: Severity
    category: str = Field(..., description="political, operational, legal, environmental, safety, ...")
    mitigation: Optional[str] = None
    detected_by: DetectedBy = DetectedBy.SYSTEM
    option_ids: List[str] = Field(
        default_factory=list,
        description="Options this risk is tied to; empty means every option"
    )

    def applies_to(self, option_id: str) -> bool:
        """Whether this risk counts against the given option."""
        return not self.option_ids or option_id in self.option_ids


class DecisionOption(CamelModel):
    """One candidate course of action."""

    id: str
    label: str
    description: str = ""
    recommended: bool = Field(
        default=False,
        description="Upstream flag; ignored by the engine's own recommendation"
    )
    immediate_consequences: List[Consequence] = Field(default_factory=list)
    secondary_consequences: List[Consequence] = Field(default_factory=list)
    resource_requirements: List[ResourceRequirement] = Field(default_factory=list)
    timeline: Optional[OptionTimeline] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    precedents: List[str] = Field(default_factory=list)
    trade_off_analysis: Optional[TradeOffAnalysis] = None
    overall_score: Optional[float] = None

    def unavailable_resources(self) -> List[ResourceRequirement]:
        """Requirements that cannot currently be met."""
        return [
            r for r in self.resource_requirements
            if r.availability == ResourceAvailability.UNAVAILABLE
        ]


class Decision(CamelModel):
    """A pending choice requiring human authorization."""

    id: str
    title: str
    description: str = ""
    urgency: Urgency = Urgency.MEDIUM
    complexity: Complexity = Complexity.MEDIUM
    deadline: Optional[datetime] = None
    context: DecisionContext = Field(default_factory=DecisionContext)
    options: List[DecisionOption] = Field(default_factory=list)
    risk_factors: List[RiskFactor] = Field(default_factory=list)
    required_approvers: List[str] = Field(default_factory=list)
    status: DecisionStatus = DecisionStatus.PENDING
    roe_status: Optional[ROEStatus] = None
    roe_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    selected_option_id: Optional[str] = None
    justification: Optional[str] = None
    operation_id: Optional[str] = None
    campaign_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_unique_option_ids(self) -> "Decision":
        """Option ids identify options within a decision."""
        seen = set()
        duplicates = []
        for option in self.options:
            if option.id in seen:
                duplicates.append(option.id)
            seen.add(option.id)
        if duplicates:
            raise ValueError(f"Duplicate option ids: {sorted(set(duplicates))}")
        return self

    def get_option(self, option_id: str) -> Optional[DecisionOption]:
        """Look up an option by id."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def critical_risk_count(self, option_id: str) -> int:
        """Critical-severity risk factors that count against an option."""
        return sum(
            1 for risk in self.risk_factors
            if risk.severity == Severity.CRITICAL and risk.applies_to(option_id)
        )

