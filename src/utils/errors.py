"""
Decision engine errors with actionable suggestions.

Every engine failure is a data-quality problem on the caller's side, so each
error carries a stable code, a human-readable message, suggestions for fixing
the input and enough context to find the offending record.
"""

from typing import Any, Dict, List, Optional


class DecisionEngineError(Exception):
    """Base class for errors raised by the decision analysis engine."""

    def __init__(
        self,
        code: str,
        message: str,
        suggestions: List[str],
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize engine error.

        Args:
            code: Error code (e.g., "DCE_MISSING_BASELINE")
            message: Human-readable error message
            suggestions: List of actionable suggestions
            context: Additional context information
        """
        self.code = code
        self.message = message
        self.suggestions = suggestions
        self.context = context or {}

        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        """
        Convert to API error response format.

        Returns:
            Dict suitable for JSON response
        """
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestions": self.suggestions,
                "context": self.context
            }
        }


class DataIntegrityError(DecisionEngineError):
    """Consequence impact score sign contradicts its declared type."""

    def __init__(self, description: str, consequence_type: str, impact_score: int):
        super().__init__(
            code="DCE_DATA_INTEGRITY",
            message=(
                f"Consequence '{description}' is {consequence_type} "
                f"but has impact score {impact_score}"
            ),
            suggestions=[
                "Positive consequences need impactScore >= 0",
                "Negative consequences need impactScore <= 0",
                "Neutral consequences need impactScore == 0",
                "Fix the consequence template at its source",
            ],
            context={
                "description": description,
                "type": consequence_type,
                "impact_score": impact_score,
            }
        )


class IncompleteConsequenceError(DataIntegrityError):
    """Consequence template record is missing required fields."""

    def __init__(self, option_id: str, failures: List[str]):
        DecisionEngineError.__init__(
            self,
            code="DCE_INCOMPLETE_CONSEQUENCE",
            message=f"Consequence template for option '{option_id}' is incomplete",
            suggestions=[
                "Every consequence needs domain, type, severity, likelihood, "
                "impactScore and timeframe",
                "Check the template supplier for dropped fields",
            ],
            context={"option_id": option_id, "failures": failures}
        )


class MissingBaselineError(DecisionEngineError):
    """One or more dimension baselines are absent."""

    def __init__(self, missing: List[str]):
        super().__init__(
            code="DCE_MISSING_BASELINE",
            message=f"Missing baseline for dimension(s): {', '.join(missing)}",
            suggestions=[
                "Supply currentScore and threshold for all six dimensions",
                "Re-fetch readiness/posture data before retrying",
            ],
            context={"missing_dimensions": missing}
        )


class EmptyOptionSetError(DecisionEngineError):
    """Decision has no options to analyze."""

    def __init__(self, decision_id: str):
        super().__init__(
            code="DCE_EMPTY_OPTION_SET",
            message=f"Decision '{decision_id}' has no options to analyze",
            suggestions=[
                "A decision needs at least one candidate option",
                "Check that the planning process attached its options",
            ],
            context={"decision_id": decision_id}
        )
