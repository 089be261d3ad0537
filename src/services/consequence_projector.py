"""
Consequence Projection Service.

Expands each decision option into its immediate and secondary consequences.

The consequences themselves come from an external template supplier keyed
by option id. This service owns the structure:
- every consequence is fully populated
- impact score signs agree with consequence types
- cascades are flattened into the secondary list, while the nested form is
  kept for callers that walk causal chains
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from src.constants import WARNING_SIGN_CORRECTED
from src.models.baseline import ConsequenceTemplate
from src.models.decision import Consequence, Decision, DecisionOption
from src.models.shared import AnalysisWarning, ConsequenceType
from src.utils.errors import DataIntegrityError, IncompleteConsequenceError

logger = logging.getLogger(__name__)

TemplateSource = Mapping[str, Union[ConsequenceTemplate, Mapping[str, Any]]]


@dataclass
class OptionProjection:
    """Projected consequences of one option."""

    immediate: List[Consequence] = field(default_factory=list)
    secondary: List[Consequence] = field(default_factory=list)
    chains: List[Consequence] = field(default_factory=list)
    warnings: List[AnalysisWarning] = field(default_factory=list)


def flatten_cascades(consequences: Iterable[Consequence]) -> List[Consequence]:
    """
    Flatten consequence trees depth-first, pre-order.

    Every node appears exactly once with its cascades emptied.
    """
    flat: List[Consequence] = []
    for consequence in consequences:
        flat.append(consequence.model_copy(update={"cascades": []}))
        flat.extend(flatten_cascades(consequence.cascades))
    return flat


def correct_sign(consequence: Consequence) -> Consequence:
    """Return a copy whose impact score sign matches its type."""
    if consequence.type == ConsequenceType.POSITIVE:
        score = abs(consequence.impact_score)
    elif consequence.type == ConsequenceType.NEGATIVE:
        score = -abs(consequence.impact_score)
    else:
        score = 0
    return consequence.model_copy(update={"impact_score": score})


class ConsequenceProjector:
    """Service for projecting option consequences from templates."""

    def __init__(self, templates: Optional[TemplateSource] = None, strict: bool = False) -> None:
        """
        Initialize the projector.

        Args:
            templates: Option id -> consequence template (model or raw dict)
            strict: Propagate sign mismatches instead of correcting them
        """
        self.templates = templates or {}
        self.strict = strict

    def project(
        self,
        decision: Decision,
        option: DecisionOption
    ) -> Tuple[List[Consequence], List[Consequence]]:
        """
        Project an option's consequences.

        Args:
            decision: Parent decision
            option: Option to project

        Returns:
            Tuple of (immediate, secondary)
            - immediate: first-order consequences with nested cascades
            - secondary: every second-order consequence, flattened
        """
        projection = self.project_option(decision, option)
        return projection.immediate, projection.secondary

    def project_option(self, decision: Decision, option: DecisionOption) -> OptionProjection:
        """
        Project an option and keep the causal chains and warnings.

        Raises:
            ValueError: If the option does not belong to the decision
            IncompleteConsequenceError: If the template cannot be validated
            DataIntegrityError: On sign mismatch in strict mode
        """
        if decision.get_option(option.id) is None:
            raise ValueError(f"Option '{option.id}' does not belong to decision '{decision.id}'")

        template = self._lookup(option.id)
        if template is None:
            logger.debug(
                "consequence_template_missing",
                extra={"decision_id": decision.id, "option_id": option.id}
            )
            return OptionProjection()

        corrected: List[str] = []
        immediate = [self._verify(c, corrected) for c in template.immediate]
        template_secondary = [self._verify(c, corrected) for c in template.secondary]

        # Cascades of immediate consequences are second-order effects too
        secondary = flatten_cascades(
            child for consequence in immediate for child in consequence.cascades
        )
        secondary.extend(flatten_cascades(template_secondary))

        warnings = []
        if corrected:
            logger.warning(
                "consequence_sign_corrected",
                extra={
                    "decision_id": decision.id,
                    "option_id": option.id,
                    "num_corrected": len(corrected),
                }
            )
            warnings.append(
                AnalysisWarning(
                    code=WARNING_SIGN_CORRECTED,
                    message=(
                        f"{len(corrected)} consequence(s) of option '{option.id}' had an "
                        "impact score contradicting their type; sign was corrected"
                    ),
                    affected_items=corrected,
                )
            )

        logger.debug(
            "consequence_projection_complete",
            extra={
                "decision_id": decision.id,
                "option_id": option.id,
                "num_immediate": len(immediate),
                "num_secondary": len(secondary),
            }
        )

        return OptionProjection(
            immediate=immediate,
            secondary=secondary,
            chains=immediate + template_secondary,
            warnings=warnings,
        )

    def _lookup(self, option_id: str) -> Optional[ConsequenceTemplate]:
        """Fetch and validate the template for an option."""
        raw = self.templates.get(option_id)
        if raw is None:
            return None
        if isinstance(raw, ConsequenceTemplate):
            return raw

        try:
            return ConsequenceTemplate.model_validate(raw)
        except ValidationError as e:
            failures = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise IncompleteConsequenceError(option_id, failures) from e

    def _verify(self, consequence: Consequence, corrected: List[str]) -> Consequence:
        """
        Check signs through a consequence tree.

        Mismatches raise DataIntegrityError; outside strict mode the error is
        recovered by clamping the sign and the description is recorded.
        """
        try:
            self._check_sign(consequence)
        except DataIntegrityError:
            if self.strict:
                raise
            corrected.append(consequence.description)
            consequence = correct_sign(consequence)

        if consequence.cascades:
            consequence = consequence.model_copy(
                update={"cascades": [self._verify(c, corrected) for c in consequence.cascades]}
            )
        return consequence

    @staticmethod
    def _check_sign(consequence: Consequence) -> None:
        if not consequence.sign_matches_type():
            raise DataIntegrityError(
                consequence.description,
                consequence.type.value,
                consequence.impact_score,
            )
