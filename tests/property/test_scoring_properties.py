"""
Property-based tests for consequence projection and scoring.

Uses Hypothesis to generate random consequence sets and validate the
invariants of the trade-off model.
"""

from hypothesis import given, settings, strategies as st

from src.models.analysis import AnalyzedOption
from src.models.baseline import DimensionBaseline
from src.models.decision import Consequence, Decision
from src.models.shared import ConsequenceDomain, Dimension
from src.services.consequence_projector import flatten_cascades
from src.services.recommendation_selector import RecommendationSelector
from src.services.tradeoff_scorer import TradeOffScorer

domains = st.sampled_from([d.value for d in ConsequenceDomain])
impacts = st.integers(min_value=-100, max_value=100)
likelihoods = st.floats(min_value=0.0, max_value=1.0, allow_nan=False, allow_infinity=False)
scores = st.floats(min_value=0.0, max_value=100.0, allow_nan=False, allow_infinity=False)


def make_consequence(domain, impact, likelihood, cascades=()):
    return Consequence(
        domain=domain,
        type="positive" if impact > 0 else "negative" if impact < 0 else "neutral",
        severity="medium",
        description=f"{domain} {impact}",
        likelihood=likelihood,
        impact_score=impact,
        timeframe="short_term",
        cascades=list(cascades),
    )


consequences = st.builds(make_consequence, domains, impacts, likelihoods)
consequence_lists = st.lists(consequences, max_size=12)

consequence_trees = st.recursive(
    consequences,
    lambda children: st.builds(
        make_consequence, domains, impacts, likelihoods, st.lists(children, max_size=3)
    ),
    max_leaves=15,
)

baselines = st.fixed_dictionaries({
    d: st.builds(DimensionBaseline, current_score=scores, threshold=scores) for d in Dimension
})


class TestScoringProperties:
    """Property-based tests for TradeOffScorer."""

    @given(immediate=consequence_lists, secondary=consequence_lists, baseline=baselines)
    @settings(max_examples=100)
    def test_new_scores_clamped(self, immediate, secondary, baseline):
        """Property: every new score stays within 0-100."""
        analysis = TradeOffScorer().score(immediate, secondary, baseline)

        for _, impact in analysis.dimensions.items():
            assert 0.0 <= impact.new_score <= 100.0

    @given(immediate=consequence_lists, baseline=baselines)
    @settings(max_examples=100)
    def test_breach_iff_below_threshold(self, immediate, baseline):
        """Property: a breach is exactly a new score strictly below threshold."""
        analysis = TradeOffScorer().score(immediate, [], baseline)

        for _, impact in analysis.dimensions.items():
            assert impact.breaches_threshold == (impact.new_score < impact.threshold)

    @given(immediate=consequence_lists, extra=consequence_lists, baseline=baselines)
    @settings(max_examples=100)
    def test_zero_likelihood_contributes_nothing(self, immediate, extra, baseline):
        """Property: consequences with likelihood 0 never change the analysis."""
        scorer = TradeOffScorer()
        silenced = [c.model_copy(update={"likelihood": 0.0}) for c in extra]

        plain = scorer.score(immediate, [], baseline)
        padded = scorer.score(immediate, silenced, baseline)

        assert plain.model_dump() == padded.model_dump()

    @given(immediate=consequence_lists, secondary=consequence_lists, baseline=baselines)
    @settings(max_examples=50)
    def test_scoring_is_deterministic(self, immediate, secondary, baseline):
        scorer = TradeOffScorer()
        first = scorer.score(immediate, secondary, baseline)
        second = scorer.score(immediate, secondary, baseline)

        assert first.model_dump() == second.model_dump()


class TestProjectionProperties:
    """Property-based tests for cascade flattening."""

    @given(trees=st.lists(consequence_trees, max_size=5))
    @settings(max_examples=100)
    def test_flattening_is_lossless(self, trees):
        """Property: every node appears exactly once, with no nested cascades."""
        flat = flatten_cascades(trees)

        assert len(flat) == sum(t.count_nodes() for t in trees)
        assert all(c.cascades == [] for c in flat)


class TestSelectionProperties:
    """Property-based tests for RecommendationSelector."""

    @given(
        option_impacts=st.lists(consequence_lists, min_size=1, max_size=5),
        baseline=baselines,
    )
    @settings(max_examples=100)
    def test_breaching_option_never_beats_eligible(self, option_impacts, baseline):
        """Property: the recommendation is eligible whenever any option is."""
        decision = Decision.model_validate({
            "id": "d-prop",
            "title": "Generated",
            "options": [{"id": f"opt-{i}", "label": f"Option {i}"} for i in range(len(option_impacts))],
        })
        scorer = TradeOffScorer()

        analyzed = []
        for option, immediate in zip(decision.options, option_impacts):
            trade_off = scorer.score(immediate, [], baseline)
            breaches = trade_off.dimensions.critical_breaches()
            analyzed.append(AnalyzedOption(
                option=option,
                immediate_consequences=immediate,
                trade_off_analysis=trade_off,
                overall_score=trade_off.overall_score,
                eligible=not breaches,
                critical_breaches=breaches,
            ))

        selection = RecommendationSelector().select(decision, analyzed)

        assert selection.fallback == (not any(a.eligible for a in analyzed))
        if not selection.fallback:
            assert selection.recommendation.eligible
        assert sorted(selection.ranking) == sorted(o.id for o in decision.options)
