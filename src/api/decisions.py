"""
Decision Analysis API Endpoints.

Exposes the consequence-cascade engine and the outcome tracker.
Engine errors propagate to the application's exception handlers, which map
them onto the uniform error response.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header

from src.api.dependencies import get_decision_analyzer, get_outcome_tracker
from src.models.metadata import MetadataBuilder
from src.models.requests import DecisionAnalysisRequest
from src.models.responses import DecisionAnalysisResponse, ErrorResponse
from src.models.tracking import DecisionTracking, TrackingRequest
from src.services.decision_analyzer import DecisionAnalyzer
from src.services.outcome_tracker import OutcomeTracker
from src.utils.canonical_hash import input_fingerprint
from src.utils.tracing import trace_operation

router = APIRouter()
logger = logging.getLogger(__name__)

ALGORITHM = "consequence_cascade"


@router.post(
    "/analyze",
    response_model=DecisionAnalysisResponse,
    response_model_by_alias=True,
    summary="Analyze a pending decision",
    description="""
    Projects each option's immediate and second-order consequences, scores
    the options on the six trade-off dimensions and recommends one.

    **Policy:**
    - An option that breaches a critical-priority dimension threshold is
      never recommended while another option avoids every such breach
    - If every option breaches, the least damaging option is recommended
      and `fallbackRecommendation` is set

    **Returns:**
    - Analyzed options with consequences, trade-off analysis and rank
    - Recommendation, full ranking and caveats
    - Cognitive load advisory when `timeOnDuty` is supplied
    - Warnings for corrected data and unavailable resources
    """,
    responses={
        200: {"description": "Analysis completed successfully"},
        422: {"description": "Invalid or incomplete input", "model": ErrorResponse},
        500: {"description": "Internal computation error", "model": ErrorResponse},
    },
)
async def analyze_decision(
    request: DecisionAnalysisRequest,
    x_request_id: Optional[str] = Header(None, alias="X-Request-Id"),
    analyzer: DecisionAnalyzer = Depends(get_decision_analyzer)
) -> DecisionAnalysisResponse:
    """
    Analyze a decision and recommend an option.

    Args:
        request: Decision with templates, baselines and optional context
        x_request_id: Optional request ID for tracing

    Returns:
        DecisionAnalysisResponse: Analysis and metadata
    """
    request_id = request.request_id or x_request_id or f"req_{uuid.uuid4().hex[:12]}"
    metadata_builder = MetadataBuilder(request_id)

    logger.info(
        "decision_analysis_request",
        extra={
            "request_id": request_id,
            "decision_id": request.decision.id,
            "num_options": len(request.decision.options),
            "num_templates": len(request.consequence_templates),
            "time_on_duty": request.time_on_duty,
        },
    )

    with trace_operation("decision_analysis", request_id):
        analysis = analyzer.analyze(
            request.decision,
            request.consequence_templates,
            request.baselines,
            precedents=request.precedents,
            time_on_duty=request.time_on_duty,
            policy=request.scoring_policy,
        )

    fingerprint = input_fingerprint(request.model_dump(mode="json", exclude={"request_id"}))

    return DecisionAnalysisResponse(
        analysis=analysis,
        metadata=metadata_builder.build(algorithm=ALGORITHM, input_fingerprint=fingerprint),
    )


@router.post(
    "/track",
    response_model=DecisionTracking,
    response_model_by_alias=True,
    summary="Track outcomes of an approved decision",
    description="""
    Compares the predicted consequences of the selected option with what
    was observed and flags significant discrepancies for review.
    """,
    responses={
        200: {"description": "Tracking summary computed"},
        422: {"description": "Invalid input", "model": ErrorResponse},
    },
)
async def track_decision(
    request: TrackingRequest,
    x_request_id: Optional[str] = Header(None, alias="X-Request-Id"),
    tracker: OutcomeTracker = Depends(get_outcome_tracker)
) -> DecisionTracking:
    """
    Summarize predicted versus actual outcomes.

    Args:
        request: Prediction and observations
        x_request_id: Optional request ID for tracing

    Returns:
        DecisionTracking: Per-consequence status, accuracy and discrepancies
    """
    request_id = x_request_id or f"req_{uuid.uuid4().hex[:12]}"

    logger.info(
        "decision_tracking_request",
        extra={
            "request_id": request_id,
            "decision_id": request.decision_id,
            "num_outcomes": len(request.outcomes),
        },
    )

    return tracker.track(request)
