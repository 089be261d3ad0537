"""
Request Pydantic models for API endpoints.
"""

from typing import Dict, List, Optional

from pydantic import Field

from src.models.baseline import ConsequenceTemplate, DimensionBaseline, Precedent, ScoringPolicy
from src.models.decision import Decision
from src.models.shared import CamelModel, Dimension


class DecisionAnalysisRequest(CamelModel):
    """
    Request model for the decision analysis endpoint.

    Also the shape of the bundle files read by the command-line tool.
    """

    decision: Decision = Field(..., description="Pending decision to analyze")
    consequence_templates: Dict[str, ConsequenceTemplate] = Field(
        default_factory=dict,
        description="Option id -> consequence template"
    )
    baselines: Dict[Dimension, DimensionBaseline] = Field(
        ...,
        description="Dimension -> current score and threshold"
    )
    precedents: List[Precedent] = Field(
        default_factory=list,
        description="Historical similar decisions"
    )
    time_on_duty: Optional[int] = Field(
        default=None,
        description="Decision-maker minutes on duty",
        ge=0
    )
    scoring_policy: Optional[ScoringPolicy] = Field(
        default=None,
        description="Priority and weight override for this request"
    )
    request_id: Optional[str] = Field(
        default=None,
        description="Optional request ID for tracing",
        max_length=100
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "decision": {
                    "id": "T-1002",
                    "title": "Strike authorization",
                    "urgency": "critical",
                    "options": [{"id": "A", "label": "Strike now"}],
                },
                "consequenceTemplates": {
                    "A": {
                        "immediate": [
                            {
                                "description": "Collateral damage risk",
                                "domain": "legal",
                                "type": "negative",
                                "severity": "high",
                                "impactScore": -60,
                                "likelihood": 1.0,
                                "timeframe": "immediate",
                            }
                        ]
                    }
                },
                "baselines": {
                    "operational": {"currentScore": 70, "threshold": 50},
                    "political": {"currentScore": 60, "threshold": 40},
                    "personnel": {"currentScore": 80, "threshold": 60},
                    "budget": {"currentScore": 65, "threshold": 30},
                    "environmental": {"currentScore": 75, "threshold": 40},
                    "legal": {"currentScore": 100, "threshold": 60},
                },
                "timeOnDuty": 800,
            }
        }
    }
