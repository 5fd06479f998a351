"""Single entry point routing a request to its domain module."""

from __future__ import annotations

# Domain modules register their operations on import
from . import algebra, geometry, number_theory, trigonometry  # noqa: F401
from .engine import lookup, operations
from .geometry import shapes
from .logging_config import get_logger
from .types import ComputationRequest, ComputationResult

logger = get_logger("dispatch")

__all__ = ["compute", "operations", "shapes"]


def compute(request: ComputationRequest) -> ComputationResult:
    """Run one engine operation.

    Raises:
        UnknownOperationError: if the domain has no operation of that name.
    """
    spec = lookup(request.domain, request.operation)
    logger.debug(
        "Dispatching %s/%s with %s", spec.domain.value, spec.name, sorted(request.inputs)
    )
    return spec.run(request.inputs)
