"""
Decision Analysis Service.

Single entry point of the engine: Decision in, DecisionAnalysis out.

    Decision → ConsequenceProjector → (immediate, secondary) per option
             → TradeOffScorer       → TradeOffAnalysis per option
             → RecommendationSelector → DecisionAnalysis

The computation is pure. Inputs are never mutated; options are copied with
their derived fields attached.
"""

import logging
from typing import Iterable, List, Optional

from src.constants import WARNING_UNAVAILABLE_RESOURCES
from src.models.analysis import AnalyzedOption, DecisionAnalysis
from src.models.baseline import Precedent, ScoringPolicy
from src.models.decision import Decision
from src.models.shared import AnalysisWarning
from src.services.consequence_projector import ConsequenceProjector, TemplateSource
from src.services.recommendation_selector import RecommendationSelector
from src.services.tradeoff_scorer import BaselineSource, TradeOffScorer
from src.utils.errors import EmptyOptionSetError

logger = logging.getLogger(__name__)


class DecisionAnalyzer:
    """Service for the full consequence-cascade analysis of a decision."""

    def __init__(
        self,
        policy: Optional[ScoringPolicy] = None,
        selector: Optional[RecommendationSelector] = None,
        strict_signs: bool = False
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            policy: Default scoring policy (reference policy if omitted)
            selector: Recommendation selector (default fatigue bands if omitted)
            strict_signs: Fail on consequence sign mismatches
        """
        self.policy = policy or ScoringPolicy()
        self.selector = selector or RecommendationSelector()
        self.strict_signs = strict_signs

    @classmethod
    def from_settings(cls, settings) -> "DecisionAnalyzer":
        """Build an analyzer from application settings."""
        return cls(
            policy=ScoringPolicy.from_settings(settings),
            selector=RecommendationSelector(
                fatigue_medium_minutes=settings.FATIGUE_MEDIUM_MINUTES,
                fatigue_high_minutes=settings.FATIGUE_HIGH_MINUTES,
            ),
            strict_signs=settings.STRICT_CONSEQUENCE_SIGNS,
        )

    def analyze(
        self,
        decision: Decision,
        templates: TemplateSource,
        baselines: BaselineSource,
        precedents: Iterable[Precedent] = (),
        time_on_duty: Optional[int] = None,
        policy: Optional[ScoringPolicy] = None
    ) -> DecisionAnalysis:
        """
        Analyze a decision.

        Args:
            decision: Pending decision with at least one option
            templates: Option id -> consequence template
            baselines: Dimension -> baseline score and threshold
            precedents: Historical similar decisions, attached as given
            time_on_duty: Decision-maker minutes on duty, if known
            policy: Scoring policy override for this call

        Returns:
            DecisionAnalysis with a recommendation

        Raises:
            EmptyOptionSetError: If the decision has no options
            MissingBaselineError: If any dimension baseline is incomplete
            IncompleteConsequenceError: If a template cannot be validated
            DataIntegrityError: On sign mismatch when strict
        """
        if not decision.options:
            raise EmptyOptionSetError(decision.id)

        logger.info(
            "decision_analysis_start",
            extra={
                "decision_id": decision.id,
                "num_options": len(decision.options),
                "urgency": decision.urgency.value,
            }
        )

        projector = ConsequenceProjector(templates, strict=self.strict_signs)
        scorer = TradeOffScorer(policy or self.policy)

        # Fail on missing baselines before projecting anything
        scorer.require_baselines(baselines)

        warnings: List[AnalysisWarning] = []
        analyzed: List[AnalyzedOption] = []

        for option in decision.options:
            projection = projector.project_option(decision, option)
            warnings.extend(projection.warnings)

            trade_off = scorer.score(projection.immediate, projection.secondary, baselines)
            breaches = trade_off.dimensions.critical_breaches()

            unavailable = option.unavailable_resources()
            if unavailable:
                warnings.append(
                    AnalysisWarning(
                        code=WARNING_UNAVAILABLE_RESOURCES,
                        message=(
                            f"Option '{option.id}' depends on {len(unavailable)} "
                            "unavailable resource(s)"
                        ),
                        affected_items=[f"{r.resource_type.value}:{r.unit}" for r in unavailable],
                    )
                )

            analyzed.append(
                AnalyzedOption(
                    option=option,
                    immediate_consequences=projection.immediate,
                    secondary_consequences=projection.secondary,
                    consequence_chains=projection.chains,
                    trade_off_analysis=trade_off,
                    resource_availability=list(option.resource_requirements),
                    overall_score=trade_off.overall_score,
                    eligible=not breaches,
                    critical_breaches=breaches,
                )
            )

        selection = self.selector.select(decision, analyzed)
        recommendation_id = selection.recommendation.option.id
        ranks = {option_id: index + 1 for index, option_id in enumerate(selection.ranking)}

        finalized = [self._finalize(a, recommendation_id, ranks) for a in analyzed]

        analysis = DecisionAnalysis(
            decision_id=decision.id,
            analyzed_options=finalized,
            risk_factors=list(decision.risk_factors),
            precedents=list(precedents),
            recommendation=recommendation_id,
            ai_confidence=selection.recommendation.option.confidence,
            cognitive_load_warning=self.selector.assess_cognitive_load(
                time_on_duty, decision.urgency
            ),
            ranking=selection.ranking,
            fallback_recommendation=selection.fallback,
            caveats=selection.caveats,
            warnings=warnings + selection.warnings,
        )

        logger.info(
            "decision_analysis_complete",
            extra={
                "decision_id": decision.id,
                "recommendation": recommendation_id,
                "fallback": selection.fallback,
                "num_warnings": len(analysis.warnings),
            }
        )

        return analysis

    @staticmethod
    def _finalize(analyzed: AnalyzedOption, recommendation_id: str, ranks: dict) -> AnalyzedOption:
        """Attach the decision-level recommendation and derived fields."""
        trade_off = analyzed.trade_off_analysis.model_copy(
            update={"recommended_option": recommendation_id}
        )
        option = analyzed.option.model_copy(
            update={
                "immediate_consequences": analyzed.immediate_consequences,
                "secondary_consequences": analyzed.secondary_consequences,
                "trade_off_analysis": trade_off,
                "overall_score": analyzed.overall_score,
            }
        )
        return analyzed.model_copy(
            update={
                "option": option,
                "trade_off_analysis": trade_off,
                "rank": ranks[analyzed.option.id],
            }
        )
