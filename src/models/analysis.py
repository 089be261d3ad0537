"""
Output data model: the engine's full analysis of one decision.
"""

from typing import List, Optional

from pydantic import Field

from src.models.baseline import Precedent
from src.models.decision import Consequence, DecisionOption, ResourceRequirement, RiskFactor
from src.models.shared import AnalysisWarning, CamelModel, Dimension, FatigueLevel
from src.models.tradeoff import TradeOffAnalysis


class AnalyzedOption(CamelModel):
    """An option together with its projected consequences and scoring."""

    option: DecisionOption = Field(..., description="Option copy with derived fields attached")
    immediate_consequences: List[Consequence] = Field(
        default_factory=list,
        description="First-order consequences, cascades nested"
    )
    secondary_consequences: List[Consequence] = Field(
        default_factory=list,
        description="Every second-order consequence, flattened"
    )
    consequence_chains: List[Consequence] = Field(
        default_factory=list,
        description="Causal forest: immediate and template-secondary roots with nested cascades"
    )
    trade_off_analysis: TradeOffAnalysis
    resource_availability: List[ResourceRequirement] = Field(default_factory=list)
    overall_score: float
    eligible: bool = Field(..., description="No critical-priority dimension breached")
    critical_breaches: List[Dimension] = Field(default_factory=list)
    rank: int = Field(default=0, ge=0, description="1-based position in the ranking")


class CognitiveLoadWarning(CamelModel):
    """Advisory on decision-maker fatigue."""

    time_on_duty: int = Field(..., ge=0, description="Minutes on duty")
    fatigue_level: FatigueLevel
    recommend_consultation: bool
    recommend_break: bool


class DecisionAnalysis(CamelModel):
    """Engine output for one decision."""

    decision_id: str
    analyzed_options: List[AnalyzedOption]
    risk_factors: List[RiskFactor] = Field(default_factory=list)
    precedents: List[Precedent] = Field(default_factory=list)
    recommendation: str = Field(..., description="Recommended option id (never empty)")
    ai_confidence: float = Field(..., ge=0.0, le=1.0)
    cognitive_load_warning: Optional[CognitiveLoadWarning] = None
    ranking: List[str] = Field(default_factory=list, description="Option ids, best first")
    fallback_recommendation: bool = Field(
        default=False,
        description="Every option breached a critical dimension"
    )
    caveats: List[str] = Field(default_factory=list)
    warnings: List[AnalysisWarning] = Field(default_factory=list)

    def get_analyzed_option(self, option_id: str) -> Optional[AnalyzedOption]:
        """Look up an analyzed option by option id."""
        for analyzed in self.analyzed_options:
            if analyzed.option.id == option_id:
                return analyzed
        return None
