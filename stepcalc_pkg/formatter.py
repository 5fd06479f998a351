"""Presentation helpers for engine results.

The engine returns unformatted exact values; everything here is for the
CLI and other display layers only.
"""

from __future__ import annotations

import json
from fractions import Fraction
from typing import Any, Iterable

from .number_theory import format_factorization
from .trace import show
from .types import (
    AngleReading,
    ComplexPair,
    ComputationResult,
    DerivationStep,
    IdentityCheck,
    InequalitySolution,
    NormalizedAngle,
    PrimalityReport,
    RootForm,
    SolidMeasures,
    TriangleSolution,
    TrigValues,
)

THOUSANDS_THRESHOLD = 10_000


def format_number(value: Any, precision: int | None = None) -> str:
    """Format a single number: thousands separators for large ints, ``p/q`` for fractions."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return f"{value:,}" if abs(value) >= THOUSANDS_THRESHOLD else str(value)
    if isinstance(value, Fraction):
        return f"{value.numerator}/{value.denominator}" if value.denominator != 1 else str(
            value.numerator
        )
    return show(value, precision)


def format_value(value: Any, precision: int | None = None) -> str:
    """Format any engine value for display.

    Args:
        value: Value carried by a ComputationResult or a trace step
        precision: Fractional digits for floats (default: OUTPUT_PRECISION)

    Returns:
        Human-readable string
    """
    def fmt(v: Any) -> str:
        return format_number(v, precision)

    if value is None:
        return "undefined"
    if isinstance(value, ComplexPair):
        return f"{fmt(value.real)} ± {fmt(value.imaginary)}i"
    if isinstance(value, InequalitySolution):
        return f"{value.variable} {value.operator} {fmt(value.boundary)}"
    if isinstance(value, PrimalityReport):
        if value.n == 1:
            return "1 is neither prime nor composite"
        if value.is_prime:
            return f"{fmt(value.n)} is prime"
        return f"{fmt(value.n)} = {format_factorization(value.factors)} (composite)"
    if isinstance(value, RootForm):
        if value.radicand in (0, 1):
            return fmt(value.coefficient * value.radicand)
        prefix = "" if value.coefficient == 1 else fmt(value.coefficient)
        return f"{prefix}√{value.radicand}"
    if isinstance(value, SolidMeasures):
        text = (
            f"V = {fmt(value.volume)}, lateral = {fmt(value.lateral_surface_area)}, "
            f"total = {fmt(value.total_surface_area)}"
        )
        if value.slant_height is not None:
            text += f", slant = {fmt(value.slant_height)}"
        return text
    if isinstance(value, AngleReading):
        return f"{fmt(value.degrees)}° ({fmt(value.radians)} rad)"
    if isinstance(value, NormalizedAngle):
        return f"{fmt(value.degrees)}° (quadrant {value.quadrant})"
    if isinstance(value, IdentityCheck):
        verdict = "holds" if value.holds else "fails"
        return f"{value.name}: {fmt(value.lhs)} vs {fmt(value.rhs)} ({verdict})"
    if isinstance(value, TrigValues):
        return f"sin = {fmt(value.sin)}, cos = {fmt(value.cos)}, tan = " + (
            "undefined" if value.tan is None else fmt(value.tan)
        )
    if isinstance(value, TriangleSolution):
        return (
            f"a = {fmt(value.a)}, b = {fmt(value.b)}, c = {fmt(value.c)}; "
            f"A = {fmt(value.angle_a)}°, B = {fmt(value.angle_b)}°, C = {fmt(value.angle_c)}°; "
            f"area = {fmt(value.area)}, perimeter = {fmt(value.perimeter)}"
        )
    if isinstance(value, (tuple, list)):
        if value and all(isinstance(v, IdentityCheck) for v in value):
            return "; ".join(format_value(v, precision) for v in value)
        return "(" + ", ".join(format_value(v, precision) for v in value) + ")"
    if isinstance(value, str):
        return value
    return fmt(value)


def format_step(step: DerivationStep, precision: int | None = None, markdown: bool = False) -> str:
    """One trace step as a short block of lines."""
    head = f"{step.ordinal}. {step.narrative}"
    lines = [head]
    code = (lambda s: f"`{s}`") if markdown else (lambda s: s)
    if step.formula:
        lines.append(f"   {code(step.formula)}")
    if step.substitution and step.substitution != step.formula:
        lines.append(f"   {code(step.substitution)}")
    if step.partial_result is not None:
        shown = format_value(step.partial_result, precision)
        lines.append(f"   = **{shown}**" if markdown else f"   = {shown}")
    return "\n".join(lines)


def format_trace(
    steps: Iterable[DerivationStep], precision: int | None = None, style: str = "text"
) -> str:
    """Format a whole trace as plain text or Markdown."""
    if style not in ("text", "markdown"):
        raise ValueError(f"Unknown trace style: {style!r}")
    return "\n".join(format_step(s, precision, markdown=style == "markdown") for s in steps)


def render_result(
    result: ComputationResult, output_format: str = "human", precision: int | None = None
) -> str:
    """Render a result for the terminal.

    Args:
        result: Result to render
        output_format: "json" for JSON output, "human" for human-readable

    Returns:
        Text ready to print
    """
    if output_format == "json":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    lines = []
    if result.ok:
        lines.append(f"Result: {format_value(result.value, precision)}")
    else:
        lines.append(f"Error [{result.error_code}]: {result.error_message}")
    if result.degenerate_case:
        lines.append(f"Special case: {result.degenerate_case}")
    if result.trace:
        lines.append("Steps:")
        lines.append(format_trace(result.trace, precision))
    return "\n".join(lines)
