"""Type definitions and result dataclasses for consistent engine responses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple


class Domain(str, Enum):
    """Calculator families served by the engine."""

    NUMBER_THEORY = "number-theory"
    ALGEBRA = "algebra"
    GEOMETRY = "geometry"
    TRIGONOMETRY = "trigonometry"

    @classmethod
    def parse(cls, text: str | Domain) -> Domain:
        """Resolve a domain from its value or member name (case-insensitive)."""
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower().replace("_", "-")
        for member in cls:
            if key == member.value:
                return member
        raise ValueError(f"Unknown domain: {text!r}")


class Status(str, Enum):
    OK = "ok"
    INVALID_INPUT = "invalid_input"
    DOMAIN_ERROR = "domain_error"


# --- Tagged value types -------------------------------------------------


class ComplexPair(NamedTuple):
    """Complex-conjugate roots ``real ± imaginary·i``."""

    real: Any
    imaginary: Any

    def conjugates(self) -> tuple[complex, complex]:
        re_part, im_part = float(self.real), float(self.imaginary)
        return complex(re_part, im_part), complex(re_part, -im_part)


class PrimalityReport(NamedTuple):
    n: int
    is_prime: bool
    factors: tuple[tuple[int, int], ...]  # (prime, exponent), ascending


class RootForm(NamedTuple):
    """``coefficient·√radicand`` with a square-free radicand."""

    coefficient: int
    radicand: int


class InequalitySolution(NamedTuple):
    variable: str
    operator: str
    boundary: Any

    def __str__(self) -> str:
        return f"{self.variable} {self.operator} {_plain(self.boundary)}"


class SolidMeasures(NamedTuple):
    volume: float
    lateral_surface_area: float
    total_surface_area: float
    slant_height: float | None = None


class IdentityCheck(NamedTuple):
    name: str
    lhs: float
    rhs: float
    holds: bool


class AngleReading(NamedTuple):
    degrees: float
    radians: float


class NormalizedAngle(NamedTuple):
    degrees: float
    quadrant: int


class TrigValues(NamedTuple):
    """sin, cos and tan of one angle; ``tan`` is None where it is undefined."""

    sin: float
    cos: float
    tan: float | None


class TriangleSolution(NamedTuple):
    a: float
    b: float
    c: float
    angle_a: float
    angle_b: float
    angle_c: float
    area: float
    perimeter: float


# --- Request / trace / result --------------------------------------------


@dataclass(frozen=True)
class ComputationRequest:
    """One call into the engine: which operation to run and with what inputs."""

    domain: Domain
    operation: str
    inputs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ for normalisation
        object.__setattr__(self, "domain", Domain.parse(self.domain))
        object.__setattr__(self, "operation", self.operation.strip().lower())
        object.__setattr__(self, "inputs", MappingProxyType(dict(self.inputs)))


@dataclass(frozen=True)
class DerivationStep:
    """A single justification step of a derivation trace."""

    ordinal: int
    narrative: str
    formula: str = ""
    substitution: str = ""
    partial_result: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        step_dict: dict[str, Any] = {"ordinal": self.ordinal, "narrative": self.narrative}
        if self.formula:
            step_dict["formula"] = self.formula
        if self.substitution:
            step_dict["substitution"] = self.substitution
        if self.partial_result is not None:
            step_dict["partial_result"] = to_jsonable(self.partial_result)
        return step_dict


@dataclass(frozen=True)
class ComputationResult:
    """Outcome of one engine operation."""

    status: Status
    value: Any = None
    trace: tuple[DerivationStep, ...] = ()
    error_message: str | None = None
    error_code: str | None = None
    degenerate_case: str | None = None
    domain: Domain | None = None
    operation: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "status": self.status.value}
        if self.domain is not None:
            result_dict["domain"] = self.domain.value
        if self.operation is not None:
            result_dict["operation"] = self.operation
        if self.ok:
            result_dict["value"] = to_jsonable(self.value)
        if self.error_message is not None:
            result_dict["error"] = self.error_message
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.degenerate_case is not None:
            result_dict["degenerate_case"] = self.degenerate_case
        result_dict["trace"] = [step.to_dict() for step in self.trace]
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return (
                f"ComputationResult(status={self.status.value!r}, "
                f"error={self.error_message!r}, steps={len(self.trace)})"
            )
        parts = [f"status={self.status.value!r}", f"value={self.value!r}"]
        if self.degenerate_case is not None:
            parts.append(f"degenerate_case={self.degenerate_case!r}")
        parts.append(f"steps={len(self.trace)}")
        return f"ComputationResult({', '.join(parts)})"


# --- Exceptions -----------------------------------------------------------


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class MathDomainError(Exception):
    """Raised when well-typed input lies outside an operation's mathematical domain."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class UnknownOperationError(LookupError):
    """Raised for a domain/operation pair the engine does not provide."""

    def __init__(self, domain: Domain | str, operation: str):
        self.domain = domain
        self.operation = operation
        label = domain.value if isinstance(domain, Domain) else domain
        super().__init__(f"Unknown operation {operation!r} in domain {label!r}")


# --- Serialization helpers -----------------------------------------------


def _plain(value: Any) -> str:
    if isinstance(value, Fraction):
        return str(value) if value.denominator != 1 else str(value.numerator)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_jsonable(value: Any) -> Any:
    """Convert engine values to JSON-compatible structures."""
    if isinstance(value, bool) or value is None or isinstance(value, (int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, Fraction):
        return str(value)
    if isinstance(value, InequalitySolution):
        return {**{k: to_jsonable(v) for k, v in value._asdict().items()}, "text": str(value)}
    if hasattr(value, "_asdict"):
        return {k: to_jsonable(v) for k, v in value._asdict().items()}
    if isinstance(value, (tuple, list)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return str(value)
