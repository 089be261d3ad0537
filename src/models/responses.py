"""
Response Pydantic models for API endpoints.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from src.models.analysis import DecisionAnalysis
from src.models.metadata import ResponseMetadata
from src.models.shared import CamelModel


class ErrorCode(str, Enum):
    """
    Engine error codes.

    All codes use the DCE_ prefix.
    """

    # Input data errors
    DATA_INTEGRITY = "DCE_DATA_INTEGRITY"
    INCOMPLETE_CONSEQUENCE = "DCE_INCOMPLETE_CONSEQUENCE"
    MISSING_BASELINE = "DCE_MISSING_BASELINE"
    EMPTY_OPTION_SET = "DCE_EMPTY_OPTION_SET"

    # Request errors
    VALIDATION_ERROR = "DCE_VALIDATION_ERROR"

    # Computation errors
    COMPUTATION_ERROR = "DCE_COMPUTATION_ERROR"


class RecoveryHints(BaseModel):
    """Recovery hints for error resolution."""

    hints: List[str] = Field(..., description="List of actionable hints")
    suggestion: str = Field(..., description="Primary suggestion")
    example: Optional[str] = Field(default=None, description="Example fix")


class ErrorResponse(BaseModel):
    """
    Uniform error response for every endpoint.
    """

    code: str = Field(..., description="Error code (e.g., 'DCE_MISSING_BASELINE')")
    message: str = Field(..., description="Human-readable error message")
    reason: Optional[str] = Field(
        default=None,
        description="Fine-grained reason code for the error"
    )
    recovery: Optional[RecoveryHints] = Field(
        default=None,
        description="Recovery suggestions and hints"
    )
    validation_failures: Optional[List[str]] = Field(
        default=None,
        description="List of request validation failures"
    )
    retryable: bool = Field(..., description="Can client retry this request?")
    source: str = Field(default="dce", description="Service that generated error")
    request_id: str = Field(
        default_factory=lambda: f"req_{uuid4().hex[:16]}",
        description="Request ID for correlation (from X-Request-Id header)"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Missing Baseline",
                    "value": {
                        "code": "DCE_MISSING_BASELINE",
                        "reason": "missing_baseline",
                        "message": "Baseline missing or incomplete for dimension(s): legal",
                        "recovery": {
                            "hints": [
                                "Supply currentScore and threshold for every dimension",
                            ],
                            "suggestion": "Supply currentScore and threshold for every dimension",
                        },
                        "retryable": False,
                        "source": "dce",
                        "request_id": "req_abc123def456",
                    }
                },
                {
                    "title": "Request Validation Error",
                    "value": {
                        "code": "DCE_VALIDATION_ERROR",
                        "message": "Request validation failed",
                        "validation_failures": ["decision.options.0.label: Field required"],
                        "retryable": False,
                        "source": "dce",
                        "request_id": "req_xyz789",
                    }
                },
            ]
        }
    }


class DecisionAnalysisResponse(CamelModel):
    """Response model for the decision analysis endpoint."""

    analysis: DecisionAnalysis = Field(..., description="Ranked options and recommendation")
    metadata: ResponseMetadata = Field(..., description="Tracing and reproducibility metadata")


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(default="healthy", description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="Current timestamp")

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "version": "0.1.0",
                "timestamp": "2026-01-15T10:30:00Z",
            }
        }
    }
