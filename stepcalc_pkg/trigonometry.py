"""Trigonometry operations.

This module provides:
- Angle normalization and quadrant lookup
- Degree/radian conversion
- The six trigonometric functions with undefined values reported, not inf
- Numeric confirmation of the Pythagorean identities
- Double-angle and half-angle values
- Inverse sin/cos/tan in degrees and radians
- Right-triangle and oblique-triangle solvers (Pythagoras, SOH-CAH-TOA,
  law of cosines, law of sines)

Sine and cosine values within ``NUMERIC_TOLERANCE`` of zero are snapped to
exactly zero before they are used as denominators, so sin(180°) is 0 and
tan(90°) is undefined rather than a huge float.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

import sympy as sp

from . import config
from .engine import operation
from .parser import (
    finite_float,
    parse_choice,
    parse_exact,
    parse_number,
    parse_real,
    to_exact,
)
from .trace import TraceBuilder
from .types import (
    AngleReading,
    Domain,
    IdentityCheck,
    MathDomainError,
    NormalizedAngle,
    TriangleSolution,
    TrigValues,
    ValidationError,
)

FUNCTIONS = ("sin", "cos", "tan", "csc", "sec", "cot")
INVERSE_FUNCTIONS = ("asin", "acos", "atan")
UNITS = ("degrees", "radians")
RANGES = ("unsigned", "signed")


def _snap(x: float) -> float:
    return 0.0 if abs(x) < config.NUMERIC_TOLERANCE else x


def _close(lhs: float, rhs: float) -> bool:
    return abs(lhs - rhs) <= config.VERIFY_TOLERANCE * max(1.0, abs(rhs))


def _quadrant(degrees: Any) -> int:
    """Quadrant of an angle already reduced to [0, 360); 0° counts as quadrant 1."""
    return max(1, math.ceil(degrees / 90))


def _angle(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    """Read ``angle`` in the requested ``unit`` and return it in radians."""
    unit = parse_choice(inputs.get("unit") or "degrees", UNITS, "unit")
    angle = parse_real(inputs["angle"], "angle")
    if unit == "radians":
        trace.add(f"θ = {trace.show(angle)} rad.")
        return angle
    radians = math.radians(angle)
    trace.add(
        "Convert the angle to radians.",
        formula="θ_rad = θ·π/180",
        values={"θ": angle},
        partial_result=radians,
    )
    return radians


def _sin_cos(theta: float, trace: TraceBuilder) -> tuple[float, float]:
    s, c = _snap(math.sin(theta)), _snap(math.cos(theta))
    trace.add("Evaluate sine.", formula="sin θ", partial_result=s)
    trace.add("Evaluate cosine.", formula="cos θ", partial_result=c)
    return s, c


@operation(Domain.TRIGONOMETRY, "normalize", required=("angle",), optional=("range",))
def normalize(inputs: Mapping[str, Any], trace: TraceBuilder) -> NormalizedAngle:
    """Reduce an angle in degrees to [0°, 360°) or [−180°, 180°) and find its quadrant."""
    kind = parse_choice(inputs.get("range") or "unsigned", RANGES, "range")
    angle = parse_exact(inputs["angle"], "angle")
    unsigned = angle % 360
    if unsigned == 360:  # float rounding of a tiny negative angle
        unsigned = 0.0
    trace.add(
        "Reduce modulo 360°.",
        formula="θ mod 360",
        substitution=f"{trace.show(angle)} mod 360 = {trace.show(unsigned)}",
        partial_result=unsigned,
    )
    quadrant = _quadrant(unsigned)
    if unsigned == 0:
        trace.mark_degenerate(
            "zero-angle", "The angle lies on the positive x-axis; it is counted in quadrant 1.",
            partial_result=quadrant,
        )
    else:
        trace.add(
            "Find the quadrant.",
            formula="q = ⌈θ / 90⌉",
            substitution=f"q = ⌈{trace.show(unsigned)} / 90⌉",
            partial_result=quadrant,
        )
    degrees = unsigned
    if kind == "signed":
        degrees = unsigned - 360 if unsigned >= 180 else unsigned
        trace.add(
            "Shift into the signed range [−180°, 180°).",
            formula="θ − 360 if θ ≥ 180",
            partial_result=degrees,
        )
    result = NormalizedAngle(degrees, quadrant)
    trace.add(f"{trace.show(degrees)}° in quadrant {quadrant}.", partial_result=result)
    return result


@operation(Domain.TRIGONOMETRY, "to-radians", required=("degrees",))
def to_radians(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    degrees = parse_real(inputs["degrees"], "degrees")
    trace.note_rounding()
    result = degrees * math.pi / 180
    trace.add("Multiply by π/180.", formula="rad = deg·π/180", values={"deg": degrees},
              partial_result=result)
    return result


@operation(Domain.TRIGONOMETRY, "to-degrees", required=("radians",))
def to_degrees(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    radians = parse_real(inputs["radians"], "radians")
    trace.note_rounding()
    result = radians * 180 / math.pi
    trace.add("Multiply by 180/π.", formula="deg = rad·180/π", values={"rad": radians},
              partial_result=result)
    return result


def _undefined(name: str, denominator: str, trace: TraceBuilder) -> MathDomainError:
    trace.add(f"{denominator} = 0, so {name} θ is undefined at this angle.")
    return MathDomainError(f"{name} is undefined at this angle ({denominator} = 0)", "UNDEFINED")


@operation(Domain.TRIGONOMETRY, "function", required=("function", "angle"), optional=("unit",))
def function(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    """Evaluate sin, cos, tan, csc, sec or cot."""
    name = parse_choice(inputs["function"], FUNCTIONS, "function")
    trace.note_rounding()
    theta = _angle(inputs, trace)
    s, c = _sin_cos(theta, trace)

    if name == "sin":
        return s
    if name == "cos":
        return c
    if name == "tan":
        if c == 0:
            raise _undefined("tan", "cos θ", trace)
        result = s / c
        trace.add("Divide sine by cosine.", formula="tan θ = sin θ / cos θ",
                  values={"sin θ": s, "cos θ": c}, partial_result=result)
    elif name == "csc":
        if s == 0:
            raise _undefined("csc", "sin θ", trace)
        result = 1 / s
        trace.add("Take the reciprocal of sine.", formula="csc θ = 1 / sin θ",
                  values={"sin θ": s}, partial_result=result)
    elif name == "sec":
        if c == 0:
            raise _undefined("sec", "cos θ", trace)
        result = 1 / c
        trace.add("Take the reciprocal of cosine.", formula="sec θ = 1 / cos θ",
                  values={"cos θ": c}, partial_result=result)
    else:
        if s == 0:
            raise _undefined("cot", "sin θ", trace)
        result = c / s
        trace.add("Take the reciprocal of tangent.", formula="cot θ = cos θ / sin θ",
                  values={"cos θ": c, "sin θ": s}, partial_result=result)
    return result


@operation(Domain.TRIGONOMETRY, "pythagorean-identities", required=("angle",), optional=("unit",))
def pythagorean_identities(inputs: Mapping[str, Any], trace: TraceBuilder) -> tuple[IdentityCheck, ...]:
    """Confirm sin²+cos²=1, 1+tan²=sec² and 1+cot²=csc² numerically."""
    trace.note_rounding()
    theta = _angle(inputs, trace)
    s, c = _sin_cos(theta, trace)
    checks = []

    lhs = s * s + c * c
    checks.append(IdentityCheck("sin²θ + cos²θ = 1", lhs, 1.0, _close(lhs, 1.0)))
    trace.add("First identity.", formula="sin²θ + cos²θ = 1",
              substitution=f"{trace.show(s)}² + {trace.show(c)}² = {trace.show(lhs)}",
              partial_result=checks[-1])

    if c == 0:
        trace.add("cos θ = 0: tan θ and sec θ are undefined, so 1 + tan²θ = sec²θ is skipped.")
    else:
        t, sec = s / c, 1 / c
        lhs, rhs = 1 + t * t, sec * sec
        checks.append(IdentityCheck("1 + tan²θ = sec²θ", lhs, rhs, _close(lhs, rhs)))
        trace.add("Second identity.", formula="1 + tan²θ = sec²θ",
                  substitution=f"1 + {trace.show(t)}² = {trace.show(lhs)}, "
                  f"{trace.show(sec)}² = {trace.show(rhs)}",
                  partial_result=checks[-1])

    if s == 0:
        trace.add("sin θ = 0: cot θ and csc θ are undefined, so 1 + cot²θ = csc²θ is skipped.")
    else:
        cot, csc = c / s, 1 / s
        lhs, rhs = 1 + cot * cot, csc * csc
        checks.append(IdentityCheck("1 + cot²θ = csc²θ", lhs, rhs, _close(lhs, rhs)))
        trace.add("Third identity.", formula="1 + cot²θ = csc²θ",
                  substitution=f"1 + {trace.show(cot)}² = {trace.show(lhs)}, "
                  f"{trace.show(csc)}² = {trace.show(rhs)}",
                  partial_result=checks[-1])
    return tuple(checks)


@operation(Domain.TRIGONOMETRY, "double-angle", required=("angle",), optional=("unit",))
def double_angle(inputs: Mapping[str, Any], trace: TraceBuilder) -> TrigValues:
    """sin 2θ, cos 2θ (three equivalent forms) and tan 2θ."""
    trace.note_rounding()
    theta = _angle(inputs, trace)
    s, c = _sin_cos(theta, trace)

    sin2 = _snap(2 * s * c)
    trace.add("Double-angle sine.", formula="sin 2θ = 2·sin θ·cos θ",
              substitution=f"sin 2θ = 2·{trace.show(s)}·{trace.show(c)}", partial_result=sin2)
    forms = (
        ("cos 2θ = cos²θ − sin²θ", c * c - s * s),
        ("cos 2θ = 2·cos²θ − 1", 2 * c * c - 1),
        ("cos 2θ = 1 − 2·sin²θ", 1 - 2 * s * s),
    )
    for formula, value in forms:
        trace.add("Double-angle cosine.", formula=formula, partial_result=_snap(value))
    cos2 = _snap(forms[0][1])
    if all(_close(value, forms[0][1]) for _, value in forms):
        trace.add("All three forms of cos 2θ agree.", partial_result=cos2)

    if cos2 == 0:
        tan2 = None
        trace.add("cos 2θ = 0, so tan 2θ is undefined.")
    else:
        tan2 = sin2 / cos2
        trace.add("Double-angle tangent.", formula="tan 2θ = sin 2θ / cos 2θ",
                  substitution=f"tan 2θ = {trace.show(sin2)} / {trace.show(cos2)}",
                  partial_result=tan2)
    result = TrigValues(sin2, cos2, tan2)
    trace.add(
        "Verify against direct evaluation at 2θ.",
        formula="sin(2θ), cos(2θ)",
        substitution=f"sin(2θ) = {trace.show(math.sin(2 * theta))}, "
        f"cos(2θ) = {trace.show(math.cos(2 * theta))}",
        partial_result=result,
    )
    return result


@operation(Domain.TRIGONOMETRY, "half-angle", required=("angle",), optional=("unit",))
def half_angle(inputs: Mapping[str, Any], trace: TraceBuilder) -> TrigValues:
    """sin(θ/2), cos(θ/2) as principal roots and tan(θ/2) = sin θ / (1 + cos θ)."""
    trace.note_rounding()
    theta = _angle(inputs, trace)
    s, c = _sin_cos(theta, trace)

    sin_half = math.sqrt(max(0.0, (1 - c) / 2))
    trace.add("Half-angle sine (principal root).", formula="sin(θ/2) = ±√((1 − cos θ)/2)",
              values={"cos θ": c}, partial_result=sin_half)
    cos_half = math.sqrt(max(0.0, (1 + c) / 2))
    trace.add("Half-angle cosine (principal root).", formula="cos(θ/2) = ±√((1 + cos θ)/2)",
              values={"cos θ": c}, partial_result=cos_half)
    trace.add(
        "The sign of each root depends on the quadrant of θ/2; the non-negative root is "
        "reported and choosing the sign is left to the caller."
    )
    if _snap(1 + c) == 0:
        tan_half = None
        trace.add("1 + cos θ = 0, so tan(θ/2) is undefined.")
    else:
        tan_half = s / (1 + c)
        trace.add("Half-angle tangent.", formula="tan(θ/2) = sin θ / (1 + cos θ)",
                  values={"sin θ": s, "cos θ": c}, partial_result=tan_half)
    return TrigValues(sin_half, cos_half, tan_half)


@operation(Domain.TRIGONOMETRY, "inverse", required=("function", "value"))
def inverse(inputs: Mapping[str, Any], trace: TraceBuilder) -> AngleReading:
    """arcsin, arccos or arctan in both degrees and radians."""
    name = parse_choice(inputs["function"], INVERSE_FUNCTIONS, "function")
    value = parse_real(inputs["value"], "value")
    if name in ("asin", "acos") and not -1 <= value <= 1:
        raise MathDomainError(
            f"{name} is only defined on [-1, 1] (got {value})", "INVERSE_DOMAIN"
        )
    trace.note_rounding()
    forward = {"asin": math.sin, "acos": math.cos, "atan": math.tan}[name]
    inverse_func = {"asin": math.asin, "acos": math.acos, "atan": math.atan}[name]
    label = name[1:]

    radians = inverse_func(value)
    trace.add(f"Evaluate arc{label}.", formula=f"θ = arc{label}(x)", values={"x": value},
              partial_result=radians)
    degrees = math.degrees(radians)
    trace.add("Convert to degrees.", formula="θ_deg = θ·180/π", values={"θ": radians},
              partial_result=degrees)
    check = forward(radians)
    trace.add(
        f"Verify: {label}(θ) ≈ x.",
        formula=f"{label}(θ) ≈ x",
        substitution=f"{label}({trace.show(radians)}) = {trace.show(check)}",
        partial_result=check,
    )
    return AngleReading(degrees, radians)


# --- Triangles (angles in degrees) -----------------------------------------


def _side(raw: Any, name: str) -> sp.Expr:
    side = parse_number(raw, name)
    if side <= 0:
        raise MathDomainError(f"Side {name} must be positive", "NON_POSITIVE_DIMENSION")
    return side


def _exact_or_float(expr: sp.Expr, name: str) -> Any:
    return to_exact(expr) if expr.is_Rational else finite_float(expr, name)


def _given(inputs: Mapping[str, Any], name: str) -> bool:
    raw = inputs.get(name)
    return raw is not None and not (isinstance(raw, str) and not raw.strip())


@operation(Domain.TRIGONOMETRY, "pythagorean", optional=("a", "b", "c"))
def pythagorean(inputs: Mapping[str, Any], trace: TraceBuilder) -> Any:
    """Missing side of a right triangle from the other two (c is the hypotenuse)."""
    given = [name for name in ("a", "b", "c") if _given(inputs, name)]
    if len(given) != 2:
        code = "MISSING_PARAMETER" if len(given) < 2 else "UNEXPECTED_PARAMETER"
        raise ValidationError("Give exactly two of the sides a, b, c", code)
    sides = {name: _side(inputs[name], name) for name in given}

    if "c" not in sides:
        a, b = sides["a"], sides["b"]
        result = sp.sqrt(a**2 + b**2)
        trace.add("Find the hypotenuse.", formula="c = √(a² + b²)", values=sides,
                  partial_result=_exact_or_float(result, "c"))
        return _exact_or_float(result, "c")

    leg_name = "a" if "a" in sides else "b"
    missing = "b" if leg_name == "a" else "a"
    leg, hyp = sides[leg_name], sides["c"]
    if leg >= hyp:
        trace.add(f"The leg {leg_name} = {trace.show(leg)} is not shorter than the hypotenuse "
                  f"c = {trace.show(hyp)}.")
        raise MathDomainError("A leg must be shorter than the hypotenuse", "TRIANGLE_DOMAIN")
    result = sp.sqrt(hyp**2 - leg**2)
    trace.add(f"Find the leg {missing}.", formula=f"{missing} = √(c² − {leg_name}²)",
              values=sides, partial_result=_exact_or_float(result, missing))
    return _exact_or_float(result, missing)


def _positive_angle(raw: Any, name: str, upper: float) -> float:
    angle = parse_real(raw, name)
    if not 0 < angle < upper:
        raise MathDomainError(
            f"Angle {name} must lie strictly between 0° and {upper:g}°", "TRIANGLE_DOMAIN"
        )
    return angle


def _sin_deg(degrees: float) -> float:
    return math.sin(math.radians(degrees))


@operation(Domain.TRIGONOMETRY, "right-triangle", required=("adjacent", "angle"))
def right_triangle(inputs: Mapping[str, Any], trace: TraceBuilder) -> TriangleSolution:
    """Solve a right triangle from one leg and its adjacent acute angle."""
    adjacent = finite_float(_side(inputs["adjacent"], "adjacent"), "adjacent")
    theta = _positive_angle(inputs["angle"], "angle", 90)
    trace.note_rounding()
    rad = math.radians(theta)
    opposite = adjacent * math.tan(rad)
    trace.add("Opposite side (TOA).", formula="opposite = adjacent·tan θ",
              values={"adjacent": adjacent, "θ": theta}, partial_result=opposite)
    hypotenuse = adjacent / math.cos(rad)
    trace.add("Hypotenuse (CAH).", formula="hypotenuse = adjacent / cos θ",
              values={"adjacent": adjacent, "θ": theta}, partial_result=hypotenuse)
    other = 90 - theta
    trace.add("The other acute angle.", formula="β = 90° − θ", values={"θ": theta},
              partial_result=other)
    area = opposite * adjacent / 2
    trace.add("Area.", formula="area = ½·opposite·adjacent",
              values={"opposite": opposite, "adjacent": adjacent}, partial_result=area)
    perimeter = opposite + adjacent + hypotenuse
    trace.add("Perimeter.", partial_result=perimeter)
    return TriangleSolution(opposite, adjacent, hypotenuse, theta, other, 90.0, area, perimeter)


@operation(Domain.TRIGONOMETRY, "triangle-sas", required=("a", "b", "angle_c"))
def triangle_sas(inputs: Mapping[str, Any], trace: TraceBuilder) -> TriangleSolution:
    """Two sides and the included angle: law of cosines, then law of sines."""
    a = finite_float(_side(inputs["a"], "a"), "a")
    b = finite_float(_side(inputs["b"], "b"), "b")
    angle_c = _positive_angle(inputs["angle_c"], "angle_c", 180)
    trace.note_rounding()

    square = a * a + b * b - 2 * a * b * math.cos(math.radians(angle_c))
    if not math.isfinite(square):
        raise ValidationError("Sides a and b are too large to evaluate numerically", "TOO_LARGE")
    c = math.sqrt(max(0.0, square))
    trace.add("Third side by the law of cosines.", formula="c = √(a² + b² − 2ab·cos C)",
              values={"a": a, "b": b, "C": angle_c}, partial_result=c)
    if c <= 0:
        trace.add(f"c = {trace.show(c)}: the included angle is too small to separate the "
                  "sides, so the triangle collapses to a segment.")
        raise MathDomainError("The triangle is degenerate (third side is 0)", "TRIANGLE_DOMAIN")
    ratio = max(-1.0, min(1.0, a * _sin_deg(angle_c) / c))
    angle_a = math.degrees(math.asin(ratio))
    trace.add("Angle A by the law of sines.", formula="A = arcsin(a·sin C / c)",
              values={"a": a, "C": angle_c, "c": c}, partial_result=angle_a)
    if a * a > b * b + c * c:
        angle_a = 180 - angle_a
        trace.add("a is opposite an obtuse angle (a² > b² + c²), so take the obtuse solution.",
                  formula="A = 180° − A", partial_result=angle_a)
    angle_b = 180 - angle_a - angle_c
    trace.add("Angles sum to 180°.", formula="B = 180° − A − C",
              values={"A": angle_a, "C": angle_c}, partial_result=angle_b)
    area = 0.5 * a * b * _sin_deg(angle_c)
    trace.add("Area.", formula="area = ½·a·b·sin C", values={"a": a, "b": b, "C": angle_c},
              partial_result=area)
    perimeter = a + b + c
    trace.add("Perimeter.", formula="P = a + b + c", values={"a": a, "b": b, "c": c},
              partial_result=perimeter)
    return TriangleSolution(a, b, c, angle_a, angle_b, angle_c, area, perimeter)


@operation(Domain.TRIGONOMETRY, "triangle-aas", required=("a", "angle_a", "angle_b"))
def triangle_aas(inputs: Mapping[str, Any], trace: TraceBuilder) -> TriangleSolution:
    """Two angles and a side opposite one of them: law of sines."""
    a = finite_float(_side(inputs["a"], "a"), "a")
    angle_a = _positive_angle(inputs["angle_a"], "angle_a", 180)
    angle_b = _positive_angle(inputs["angle_b"], "angle_b", 180)
    angle_c = 180 - angle_a - angle_b
    trace.add("Angles sum to 180°.", formula="C = 180° − A − B",
              values={"A": angle_a, "B": angle_b}, partial_result=angle_c)
    if angle_c <= 0:
        raise MathDomainError("Angles A and B must sum to less than 180°", "TRIANGLE_DOMAIN")
    trace.note_rounding()

    sin_a = _sin_deg(angle_a)
    b = a * _sin_deg(angle_b) / sin_a
    trace.add("Side b by the law of sines.", formula="b = a·sin B / sin A",
              values={"a": a, "B": angle_b, "A": angle_a}, partial_result=b)
    c = a * _sin_deg(angle_c) / sin_a
    trace.add("Side c by the law of sines.", formula="c = a·sin C / sin A",
              values={"a": a, "C": angle_c, "A": angle_a}, partial_result=c)
    area = 0.5 * a * b * _sin_deg(angle_c)
    trace.add("Area.", formula="area = ½·a·b·sin C", values={"a": a, "b": b, "C": angle_c},
              partial_result=area)
    perimeter = a + b + c
    trace.add("Perimeter.", formula="P = a + b + c", values={"a": a, "b": b, "c": c},
              partial_result=perimeter)
    return TriangleSolution(a, b, c, angle_a, angle_b, angle_c, area, perimeter)
