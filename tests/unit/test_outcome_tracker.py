"""
Unit tests for OutcomeTracker.
"""

import copy

import pytest

from src.models.shared import Dimension
from src.models.tracking import DiscrepancyType, OutcomeStatus, TrackingRequest, TrackingStatus
from src.services.outcome_tracker import OutcomeTracker, score_accuracy
from tests.fixtures.sample_decisions import SAMPLE_TRACKING


def observation(consequence_id, predicted=None, **fields):
    data = {"consequenceId": consequence_id, "description": consequence_id, **fields}
    if predicted is not None:
        data["predicted"] = {"impactScore": predicted, "likelihood": 0.5, "timeframe": "short_term"}
    return data


def request(*outcomes, days_elapsed=2, predicted_score=10):
    return TrackingRequest.model_validate({
        "decisionId": "d-track",
        "selectedOptionId": "opt-1",
        "predictedScore": predicted_score,
        "daysElapsed": days_elapsed,
        "outcomes": list(outcomes),
    })


@pytest.fixture
def tracker():
    return OutcomeTracker()


class TestScoreAccuracy:
    """Test the predicted-versus-actual accuracy ratio."""

    @pytest.mark.parametrize("predicted,actual,expected", [
        (0, 0, 1.0),
        (45, 30, 30 / 45),
        (30, 45, 30 / 45),
        (-20, -10, 0.5),
        (10, -10, 0.0),
        (10, 0, 0.0),
    ])
    def test_accuracy(self, predicted, actual, expected):
        assert score_accuracy(predicted, actual) == pytest.approx(expected)


class TestSampleTracking:
    """Test the reference tracking scenario."""

    def test_summary(self, tracker):
        tracking = tracker.track(TrackingRequest.model_validate(copy.deepcopy(SAMPLE_TRACKING)))

        assert tracking.decision_id == "decision-auth-445"
        assert tracking.actual_score == 30
        assert tracking.accuracy == pytest.approx(0.6667)
        assert tracking.status == TrackingStatus.NEEDS_REVIEW
        assert tracking.affected_dimensions == [
            Dimension.POLITICAL,
            Dimension.OPERATIONAL,
            Dimension.BUDGET,
        ]

    def test_consequence_statuses(self, tracker):
        tracking = tracker.track(TrackingRequest.model_validate(copy.deepcopy(SAMPLE_TRACKING)))
        by_id = {o.consequence_id: o for o in tracking.consequence_tracking}

        assert by_id["c-1"].status == OutcomeStatus.COMPLETE
        assert by_id["c-1"].actual_impact == 18
        assert by_id["c-1"].variance == 3
        assert by_id["c-2"].status == OutcomeStatus.RISK_AVOIDED
        assert by_id["c-2"].actual_impact == 0
        assert by_id["c-3"].status == OutcomeStatus.ON_TRACK
        assert by_id["c-3"].actual_impact is None
        assert by_id["c-3"].variance == 0
        assert by_id["c-4"].status == OutcomeStatus.UNEXPECTED
        assert by_id["c-4"].actual_impact == 12

    def test_only_unexpected_is_flagged(self, tracker):
        tracking = tracker.track(TrackingRequest.model_validate(copy.deepcopy(SAMPLE_TRACKING)))

        assert len(tracking.discrepancies) == 1
        assert tracking.discrepancies[0].type == DiscrepancyType.UNEXPECTED_CONSEQUENCE
        assert tracking.discrepancies[0].consequence_id == "c-4"


class TestClassification:
    """Test per-observation status rules."""

    def test_pending_before_execution(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=10), days_elapsed=0))

        assert tracking.consequence_tracking[0].status == OutcomeStatus.PENDING
        assert tracking.status == TrackingStatus.UNFOLDING
        assert tracking.actual_score == 0

    def test_occurred_without_actual_uses_prediction(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=10, occurred=True)))
        outcome = tracking.consequence_tracking[0]

        assert outcome.actual_impact == 10
        assert outcome.variance == 0
        assert tracking.status == TrackingStatus.COMPLETE
        assert tracking.accuracy == 1.0

    def test_closed_positive_did_not_happen(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=8, closed=True)))
        outcome = tracking.consequence_tracking[0]

        assert outcome.status == OutcomeStatus.COMPLETE
        assert outcome.actual_impact == 0
        assert outcome.variance == -8
        assert tracking.discrepancies[0].type == DiscrepancyType.OVER_PREDICTED

    def test_unpredicted_non_event(self, tracker):
        tracking = tracker.track(request(observation("c")))
        outcome = tracking.consequence_tracking[0]

        assert outcome.status == OutcomeStatus.COMPLETE
        assert outcome.actual_impact == 0
        assert tracking.discrepancies == []

    def test_empty_outcomes_unfolding(self, tracker):
        tracking = tracker.track(request())

        assert tracking.status == TrackingStatus.UNFOLDING
        assert tracking.consequence_tracking == []


class TestDiscrepancies:
    """Test discrepancy classification."""

    def test_risk_materialized(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=-10, occurred=True, actualImpact=-25)))
        assert tracking.discrepancies[0].type == DiscrepancyType.RISK_MATERIALIZED

    def test_under_predicted(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=10, occurred=True, actualImpact=20)))
        assert tracking.discrepancies[0].type == DiscrepancyType.UNDER_PREDICTED

    def test_over_predicted(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=20, occurred=True, actualImpact=5)))
        assert tracking.discrepancies[0].type == DiscrepancyType.OVER_PREDICTED

    def test_below_threshold_not_flagged(self, tracker):
        tracking = tracker.track(request(observation("c", predicted=20, occurred=True, actualImpact=16)))

        assert tracking.discrepancies == []
        assert tracking.status == TrackingStatus.COMPLETE

    def test_custom_threshold(self):
        tracker = OutcomeTracker(discrepancy_threshold=1.0)
        tracking = tracker.track(request(observation("c", predicted=20, occurred=True, actualImpact=18)))
        assert len(tracking.discrepancies) == 1

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            OutcomeTracker(discrepancy_threshold=-1)
