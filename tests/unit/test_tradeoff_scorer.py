"""
Unit tests for TradeOffScorer.
"""

import pytest

from src.models.baseline import DimensionBaseline, ScoringPolicy
from src.models.decision import Consequence
from src.models.shared import Dimension, PriorityTier
from src.services.consequence_projector import ConsequenceProjector
from src.services.tradeoff_scorer import TradeOffScorer, clamp_score
from src.utils.errors import MissingBaselineError


def consequence(domain, impact, likelihood=1.0):
    return Consequence(
        domain=domain,
        type="positive" if impact >= 0 else "negative",
        severity="medium",
        description=f"{domain} {impact}",
        likelihood=likelihood,
        impact_score=impact,
        timeframe="immediate",
    )


@pytest.fixture
def scorer():
    return TradeOffScorer()


class TestClamp:
    """Test score clamping."""

    @pytest.mark.parametrize("value,expected", [(-12.9, 0), (0, 0), (55.5, 55.5), (100, 100), (123, 100)])
    def test_clamp(self, value, expected):
        assert clamp_score(value) == expected


class TestProjectImpacts:
    """Test likelihood-weighted impact sums."""

    def test_weighted_sum_per_dimension(self, scorer):
        totals = scorer.project_impacts([
            consequence("political", -30, 0.6),
            consequence("political", 20, 0.5),
            consequence("operational", 40, 0.8),
        ])
        assert totals[Dimension.POLITICAL] == pytest.approx(-8.0)
        assert totals[Dimension.OPERATIONAL] == pytest.approx(32.0)
        assert totals[Dimension.LEGAL] == 0.0

    def test_economic_maps_to_budget(self, scorer):
        totals = scorer.project_impacts([consequence("economic", -10, 0.5)])
        assert totals[Dimension.BUDGET] == pytest.approx(-5.0)

    def test_likelihood_zero_ignored(self, scorer):
        totals = scorer.project_impacts([consequence("legal", -90, 0.0)])
        assert totals[Dimension.LEGAL] == 0.0


class TestScore:
    """Test full option scoring."""

    def test_strike_scores(self, strike_decision, strike_templates, strike_baselines, scorer):
        """Reference decision reproduces the documented impacts."""
        projector = ConsequenceProjector(strike_templates)
        option = strike_decision.get_option("option-approve-as-planned")
        immediate, secondary = projector.project(strike_decision, option)

        analysis = scorer.score(immediate, secondary, strike_baselines)
        dims = analysis.dimensions

        assert dims.operational.projected_impact == pytest.approx(36.0)
        assert dims.operational.new_score == 100.0
        assert dims.political.projected_impact == pytest.approx(-79.5)
        assert dims.political.new_score == 0.0
        assert dims.political.breaches_threshold is True
        assert dims.personnel.projected_impact == pytest.approx(-2.9)
        assert dims.legal.breaches_threshold is False
        assert analysis.overall_score == pytest.approx(-50.15)
        assert analysis.recommended_option is None

    def test_priorities_from_policy(self, strike_baselines, scorer):
        analysis = scorer.score([], [], strike_baselines)
        dims = analysis.dimensions

        assert dims.operational.priority == PriorityTier.CRITICAL
        assert dims.legal.priority == PriorityTier.CRITICAL
        assert dims.political.priority == PriorityTier.HIGH
        assert dims.environmental.priority == PriorityTier.LOW
        assert analysis.overall_score == 0.0

    def test_breach_is_strict_less_than(self, strike_baselines, scorer):
        """A new score equal to the threshold is not a breach."""
        analysis = scorer.score([], [], strike_baselines)
        assert analysis.dimensions.legal.new_score == analysis.dimensions.legal.threshold
        assert analysis.dimensions.legal.breaches_threshold is False

    def test_unweighted_policy(self, strike_baselines):
        """With weighting disabled the overall score is the plain sum."""
        scorer = TradeOffScorer(ScoringPolicy(weight_by_priority=False))
        analysis = scorer.score(
            [consequence("operational", 10), consequence("environmental", -4)],
            [],
            strike_baselines,
        )
        assert analysis.overall_score == pytest.approx(6.0)

    def test_custom_weights(self, strike_baselines):
        policy = ScoringPolicy(priority_weights={
            PriorityTier.CRITICAL: 10.0,
            PriorityTier.HIGH: 1.0,
            PriorityTier.MEDIUM: 1.0,
            PriorityTier.LOW: 0.0,
        })
        analysis = TradeOffScorer(policy).score(
            [consequence("legal", -1), consequence("environmental", -50)],
            [],
            strike_baselines,
        )
        assert analysis.overall_score == pytest.approx(-10.0)

    def test_likelihood_zero_never_scores(self, strike_baselines, scorer):
        analysis = scorer.score([consequence("legal", -100, 0.0)], [], strike_baselines)
        assert analysis.dimensions.legal.projected_impact == 0.0
        assert analysis.dimensions.legal.breaches_threshold is False


class TestBaselines:
    """Test baseline completeness checks."""

    def test_missing_dimension(self, strike_baselines, scorer):
        del strike_baselines[Dimension.LEGAL]
        del strike_baselines[Dimension.BUDGET]

        with pytest.raises(MissingBaselineError) as exc_info:
            scorer.score([], [], strike_baselines)

        assert exc_info.value.code == "DCE_MISSING_BASELINE"
        assert exc_info.value.context["missing_dimensions"] == ["budget", "legal"]

    def test_incomplete_baseline(self, strike_baselines, scorer):
        strike_baselines[Dimension.POLITICAL] = DimensionBaseline(current_score=75)

        with pytest.raises(MissingBaselineError, match="political"):
            scorer.score([], [], strike_baselines)

    def test_string_keys_accepted(self, strike_baselines, scorer):
        by_name = {d.value: b for d, b in strike_baselines.items()}
        analysis = scorer.score([], [], by_name)
        assert analysis.dimensions.operational.current_score == 87
