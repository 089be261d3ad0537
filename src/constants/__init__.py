"""
Shared constants for decision analysis.

These values describe the reference configuration of the trade-off model.
Anything that is policy (priorities, weights, fatigue bands) is only a
default here: the live values come from Settings or the caller.
"""

# =============================================================================
# Score Bounds
# =============================================================================

# Dimension scores live on a 0-100 scale
MIN_DIMENSION_SCORE = 0.0
MAX_DIMENSION_SCORE = 100.0

# Consequence impact scores are signed, -100 to +100
MIN_IMPACT_SCORE = -100
MAX_IMPACT_SCORE = 100

# Decimal places kept on projected impacts, new scores and overall scores
SCORE_PRECISION = 4


# =============================================================================
# Trade-off Dimensions
# =============================================================================

# Consequence domain -> scored dimension. "economic" effects are scored on
# the budget dimension.
DOMAIN_TO_DIMENSION = {
    "operational": "operational",
    "political": "political",
    "personnel": "personnel",
    "economic": "budget",
    "environmental": "environmental",
    "legal": "legal",
}

# Reference institutional weighting of each dimension
DEFAULT_DIMENSION_PRIORITIES = {
    "operational": "critical",
    "political": "high",
    "personnel": "medium",
    "budget": "medium",
    "environmental": "low",
    "legal": "critical",
}

# Provisional multiplier per priority tier for the overall score
DEFAULT_PRIORITY_WEIGHTS = {
    "critical": 2.0,
    "high": 1.5,
    "medium": 1.0,
    "low": 0.5,
}


# =============================================================================
# Cognitive Load
# =============================================================================

# Minutes on duty at which fatigue becomes medium (inclusive)
FATIGUE_MEDIUM_MINUTES = 360

# Minutes on duty above which fatigue becomes high (exclusive)
FATIGUE_HIGH_MINUTES = 720

# Decision urgencies that, combined with high fatigue, trigger the advisory
HIGH_STAKES_URGENCIES = frozenset({"high", "critical"})


# =============================================================================
# Outcome Tracking
# =============================================================================

# Absolute variance at which a resolved outcome is reported as a discrepancy
DEFAULT_DISCREPANCY_THRESHOLD = 5.0


# =============================================================================
# Warning Codes
# =============================================================================

WARNING_SIGN_CORRECTED = "CONSEQUENCE_SIGN_CORRECTED"
WARNING_NO_ELIGIBLE_OPTION = "NO_ELIGIBLE_OPTION"
WARNING_UNAVAILABLE_RESOURCES = "UNAVAILABLE_RESOURCES"
