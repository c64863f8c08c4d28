"""Infill façade: pattern dispatch and the rotate-sweep-unrotate sequence.

Key components:
- resolve_params: Turn caller parameters into a validated InfillParams
- InfillGenerator: Configured, stateless generator
- generate: Module-level convenience wrapper
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from sweepfill.config import InfillParams
from sweepfill.core.operations import OperationRegistry, OperationRequest, default_registry
from sweepfill.core.sweep import SweepEngine
from sweepfill.domain import Contour, FillRule, InfillPattern, InfillResult, PrecisionContext
from sweepfill.exceptions import ContextMismatchError, InvalidParametersError

logger = structlog.get_logger(__name__)


def resolve_params(params: InfillParams | Mapping[str, Any] | None) -> InfillParams:
    """Validate caller parameters, filling in defaults.

    Keys set to None are treated as omitted.

    Args:
        params: InfillParams, a mapping of parameter names, or None

    Returns:
        Validated parameters

    Raises:
        InvalidParametersError: If a supplied value is out of range
    """
    if params is None:
        return InfillParams()
    if isinstance(params, InfillParams):
        return params
    supplied = {key: value for key, value in params.items() if value is not None}
    try:
        return InfillParams(**supplied)
    except ValidationError as e:
        raise InvalidParametersError(str(e)) from e


class InfillGenerator:
    """Generates infill for contours.

    The generator keeps no per-call state; a single instance may serve
    concurrent calls on independent contours.

    Example:
        context = PrecisionContext(p=1000)
        generator = InfillGenerator(context)
        infill = generator.generate(contour, InfillPattern.TRIANGLE, {"spacing": 5})
    """

    def __init__(
        self,
        context: PrecisionContext | None = None,
        fill_rule: FillRule = FillRule.NONZERO,
        registry: OperationRegistry | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            context: Expected precision context of input contours (None = accept any)
            fill_rule: Interior rule for overlapping loops
            registry: Pattern-to-operation registry (default: built-in patterns)
        """
        self.context = context
        self.engine = SweepEngine(fill_rule)
        self.registry = registry if registry is not None else default_registry

    def generate(
        self,
        contour: Contour,
        pattern: InfillPattern | int | str | None,
        params: InfillParams | Mapping[str, Any] | None = None,
    ) -> InfillResult:
        """Generate infill for a contour.

        The contour is cloned and rotated so the fill direction lies along the
        sweep line, swept with the pattern's operation, and the result rotated
        back. The caller's contour is never modified.

        Args:
            contour: Region to fill
            pattern: Pattern member, numeric code, or name
            params: Optional angle, spacing, parity and linewidth

        Returns:
            InfillResult in the contour's frame; empty for NONE, unknown
            patterns, or contours without area

        Raises:
            ContextMismatchError: If the contour's context differs from the
                generator's
            InvalidParametersError: If a parameter is out of range
        """
        if self.context is not None and contour.context != self.context:
            raise ContextMismatchError(self.context, contour.context)

        resolved = InfillPattern.parse(pattern)
        if resolved is InfillPattern.NONE or resolved not in self.registry:
            logger.debug("No infill for pattern", pattern=repr(pattern))
            return InfillResult.empty(contour.context)

        options = resolve_params(params)

        if contour.is_degenerate():
            logger.debug(
                "Degenerate contour, no infill",
                loops=len(contour.loops),
                vertices=contour.vertex_count,
            )
            return InfillResult.empty(contour.context, resolved)

        context = contour.context
        try:
            if options.spacing is None:
                spacing = context.default_spacing
            else:
                spacing = context.to_lattice_length(options.spacing)
            linewidth = context.to_lattice(options.linewidth)
        except OverflowError as e:
            raise InvalidParametersError(f"value out of lattice range: {e}") from e

        operation = self.registry.create(
            resolved, OperationRequest(spacing=spacing, linewidth=linewidth)
        )

        angle = options.effective_angle()
        rotated = contour.clone(deep=True).rotate(angle)
        result = operation.apply(rotated, self.engine).rotate(-angle)

        logger.debug(
            "Infill generated",
            pattern=resolved.name,
            spacing=spacing,
            angle=round(angle, 6),
            segments=len(result),
        )
        return result


def generate(
    contour: Contour,
    pattern: InfillPattern | int | str | None,
    params: InfillParams | Mapping[str, Any] | None = None,
    context: PrecisionContext | None = None,
    fill_rule: FillRule = FillRule.NONZERO,
) -> InfillResult:
    """Generate infill for a contour with a one-off generator.

    See InfillGenerator.generate for details.
    """
    return InfillGenerator(context=context, fill_rule=fill_rule).generate(
        contour, pattern, params
    )
