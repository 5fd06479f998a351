"""Operation registry and the result-building wrapper shared by all domains.

Domain modules declare their operations with :func:`operation`; the
decorator validates the declared parameter set up front, hands the wrapped
function a fresh :class:`TraceBuilder`, and turns ``ValidationError`` /
``MathDomainError`` into non-Ok results. Anything else is an internal fault
and propagates.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .logging_config import get_logger
from .trace import TraceBuilder
from .types import (
    ComputationResult,
    Domain,
    MathDomainError,
    Status,
    UnknownOperationError,
    ValidationError,
)

logger = get_logger("engine")

OperationFunc = Callable[[Mapping[str, Any], TraceBuilder], Any]


@dataclass(frozen=True)
class OperationSpec:
    domain: Domain
    name: str
    required: tuple[str, ...]
    optional: tuple[str, ...]
    strict: bool
    summary: str
    run: Callable[[Mapping[str, Any]], ComputationResult]


REGISTRY: dict[tuple[Domain, str], OperationSpec] = {}


def lookup(domain: Domain | str, name: str) -> OperationSpec:
    domain = Domain.parse(domain)
    try:
        return REGISTRY[(domain, name)]
    except KeyError:
        raise UnknownOperationError(domain, name) from None


def operations(domain: Domain | None = None) -> list[OperationSpec]:
    """Registered operations, optionally filtered by domain, in a stable order."""
    specs = [s for s in REGISTRY.values() if domain is None or s.domain is domain]
    return sorted(specs, key=lambda s: (s.domain.value, s.name))


def _check_parameters(spec: OperationSpec, inputs: Mapping[str, Any]) -> None:
    missing = [
        name for name in spec.required
        if inputs.get(name) is None or (isinstance(inputs[name], str) and not inputs[name].strip())
    ]
    if missing:
        raise ValidationError(
            f"Missing required parameter(s): {', '.join(missing)}", "MISSING_PARAMETER"
        )
    if spec.strict:
        allowed = set(spec.required) | set(spec.optional)
        unexpected = sorted(k for k in inputs if k not in allowed)
        if unexpected:
            raise ValidationError(
                f"Unexpected parameter(s) for {spec.name}: {', '.join(unexpected)}",
                "UNEXPECTED_PARAMETER",
            )


def _values_equal(a: Any, b: Any) -> bool:
    try:
        return bool(a == b) and type(a) is type(b)
    except (TypeError, ValueError):
        return False


def operation(
    domain: Domain,
    name: str,
    required: tuple[str, ...] = (),
    optional: tuple[str, ...] = (),
    strict: bool = True,
) -> Callable[[OperationFunc], Callable[[Mapping[str, Any]], ComputationResult]]:
    """Register ``func(inputs, trace) -> value`` as an engine operation."""

    def decorator(func: OperationFunc) -> Callable[[Mapping[str, Any]], ComputationResult]:
        summary = (func.__doc__ or "").strip().splitlines()[0] if func.__doc__ else ""

        @functools.wraps(func)
        def run(inputs: Mapping[str, Any] | None = None) -> ComputationResult:
            inputs = dict(inputs or {})
            trace = TraceBuilder()
            try:
                _check_parameters(spec, inputs)
                value = func(inputs, trace)
            except ValidationError as e:
                logger.info("%s/%s rejected input: %s", domain.value, name, e.message)
                return ComputationResult(
                    status=Status.INVALID_INPUT,
                    trace=trace.steps,
                    error_message=e.message,
                    error_code=e.code,
                    degenerate_case=trace.degenerate_case,
                    domain=domain,
                    operation=name,
                )
            except MathDomainError as e:
                logger.info("%s/%s domain error: %s", domain.value, name, e.message)
                return ComputationResult(
                    status=Status.DOMAIN_ERROR,
                    trace=trace.steps,
                    error_message=e.message,
                    error_code=e.code,
                    degenerate_case=trace.degenerate_case,
                    domain=domain,
                    operation=name,
                )
            except Exception:
                logger.exception("Unexpected fault in %s/%s", domain.value, name)
                raise

            last = trace.last
            if last is None or not _values_equal(last.partial_result, value):
                trace.add("Final result.", partial_result=value)
            return ComputationResult(
                status=Status.OK,
                value=value,
                trace=trace.steps,
                degenerate_case=trace.degenerate_case,
                domain=domain,
                operation=name,
            )

        spec = OperationSpec(
            domain=domain,
            name=name,
            required=required,
            optional=optional,
            strict=strict,
            summary=summary,
            run=run,
        )
        if (domain, name) in REGISTRY:
            raise ValueError(f"Operation {domain.value}/{name} registered twice")
        REGISTRY[(domain, name)] = spec
        run.spec = spec
        return run

    return decorator
