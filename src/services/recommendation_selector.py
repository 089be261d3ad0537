"""
Recommendation Selection Service.

Ranks analyzed options and picks the single recommended option.

Policy:
- An option that breaches a critical-priority dimension is never
  recommended while any option without such a breach exists.
- Within each group options rank by overall score, then confidence, then
  fewer critical risk factors, then declaration order.
- If every option breaches, the least damaging one is recommended and the
  analysis is flagged as a fallback. There is always a recommendation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from src.constants import (
    FATIGUE_HIGH_MINUTES,
    FATIGUE_MEDIUM_MINUTES,
    HIGH_STAKES_URGENCIES,
    WARNING_NO_ELIGIBLE_OPTION,
)
from src.models.analysis import AnalyzedOption, CognitiveLoadWarning
from src.models.decision import Decision
from src.models.shared import AnalysisWarning, FatigueLevel, Urgency

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """Outcome of ranking the options of one decision."""

    recommendation: AnalyzedOption
    ranked: List[AnalyzedOption]
    fallback: bool
    caveats: List[str] = field(default_factory=list)
    warnings: List[AnalysisWarning] = field(default_factory=list)

    @property
    def ranking(self) -> List[str]:
        """Option ids, best first."""
        return [analyzed.option.id for analyzed in self.ranked]


class RecommendationSelector:
    """Service for selecting the recommended option and advising on fatigue."""

    def __init__(
        self,
        fatigue_medium_minutes: int = FATIGUE_MEDIUM_MINUTES,
        fatigue_high_minutes: int = FATIGUE_HIGH_MINUTES
    ) -> None:
        """
        Initialize the selector.

        Args:
            fatigue_medium_minutes: Time on duty at which fatigue becomes medium
            fatigue_high_minutes: Time on duty above which fatigue becomes high
        """
        if fatigue_medium_minutes >= fatigue_high_minutes:
            raise ValueError("Medium fatigue band must start before the high band")
        self.fatigue_medium_minutes = fatigue_medium_minutes
        self.fatigue_high_minutes = fatigue_high_minutes

    def select(self, decision: Decision, analyzed_options: List[AnalyzedOption]) -> Selection:
        """
        Rank options and select the recommendation.

        Args:
            decision: Decision the options belong to (for risk factors)
            analyzed_options: Scored options in declaration order

        Returns:
            Selection with the recommended option and full ranking

        Raises:
            ValueError: If there are no options to choose from
        """
        if not analyzed_options:
            raise ValueError(f"Decision '{decision.id}' has no analyzed options")

        eligible = [a for a in analyzed_options if a.eligible]
        ineligible = [a for a in analyzed_options if not a.eligible]

        ranked_eligible = self._rank(decision, analyzed_options, eligible)
        ranked_ineligible = self._rank(decision, analyzed_options, ineligible)
        ranked = ranked_eligible + ranked_ineligible

        fallback = not ranked_eligible
        recommendation = ranked[0]
        caveats = self._caveats(recommendation)
        warnings = []

        if fallback:
            logger.warning(
                "no_eligible_option",
                extra={
                    "decision_id": decision.id,
                    "num_options": len(analyzed_options),
                    "fallback_option": recommendation.option.id,
                }
            )
            warnings.append(
                AnalysisWarning(
                    code=WARNING_NO_ELIGIBLE_OPTION,
                    message=(
                        "Every option breaches a critical dimension; recommending the "
                        "option with the least negative overall score"
                    ),
                    affected_items=[a.option.id for a in ranked],
                )
            )

        return Selection(
            recommendation=recommendation,
            ranked=ranked,
            fallback=fallback,
            caveats=caveats,
            warnings=warnings,
        )

    def assess_cognitive_load(
        self,
        time_on_duty: Optional[int],
        urgency: Urgency
    ) -> Optional[CognitiveLoadWarning]:
        """
        Derive the fatigue advisory.

        Consultation and a break are recommended only when fatigue is high
        and the decision is high-stakes; neither condition alone suffices.

        Args:
            time_on_duty: Minutes on duty, or None when unknown
            urgency: Urgency of the decision

        Returns:
            CognitiveLoadWarning, or None when time on duty is unknown
        """
        if time_on_duty is None:
            return None
        if time_on_duty < 0:
            raise ValueError(f"time_on_duty must be non-negative, got {time_on_duty}")

        if time_on_duty < self.fatigue_medium_minutes:
            fatigue = FatigueLevel.LOW
        elif time_on_duty <= self.fatigue_high_minutes:
            fatigue = FatigueLevel.MEDIUM
        else:
            fatigue = FatigueLevel.HIGH

        advise = fatigue == FatigueLevel.HIGH and urgency.value in HIGH_STAKES_URGENCIES

        return CognitiveLoadWarning(
            time_on_duty=time_on_duty,
            fatigue_level=fatigue,
            recommend_consultation=advise,
            recommend_break=advise,
        )

    @staticmethod
    def _rank(
        decision: Decision,
        all_options: List[AnalyzedOption],
        group: List[AnalyzedOption]
    ) -> List[AnalyzedOption]:
        """Sort a group deterministically."""
        order = {a.option.id: index for index, a in enumerate(all_options)}

        def rank_key(analyzed: AnalyzedOption) -> Tuple[float, float, int, int]:
            option_id = analyzed.option.id
            return (
                -analyzed.overall_score,
                -analyzed.option.confidence,
                decision.critical_risk_count(option_id),
                order[option_id],
            )

        return sorted(group, key=rank_key)

    @staticmethod
    def _caveats(recommendation: AnalyzedOption) -> List[str]:
        """Describe every breached dimension of the recommended option."""
        caveats = []
        for dimension, impact in recommendation.trade_off_analysis.dimensions.items():
            if not impact.breaches_threshold:
                continue
            caveats.append(
                f"{dimension.value} ({impact.priority.value} priority) falls to "
                f"{impact.new_score:g}, below threshold {impact.threshold:g}"
            )
        return caveats
