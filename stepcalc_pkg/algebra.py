"""Algebra operations.

This module provides:
- Quadratic solver with real / repeated / complex branches
- Logarithm and exponential solvers (change of base)
- Exact factorial, permutations and combinations
- Single-variable linear inequality solver with sign-flip handling
- Boolean logic gates (AND, OR, NOT, NAND, NOR, XOR)

Coefficients are kept as exact SymPy numbers for as long as possible, so
rational roots and inequality boundaries come back as int/Fraction and only
genuinely irrational values are converted to float.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

import sympy as sp

from . import config
from .engine import operation
from .parser import (
    is_integral,
    parse_bool,
    parse_choice,
    parse_linear_inequality,
    parse_number,
    parse_real,
    to_exact,
)
from .primitives import factorial as exact_factorial
from .primitives import falling_factorial
from .trace import TraceBuilder
from .types import ComplexPair, Domain, InequalitySolution, MathDomainError, ValidationError

FLIPPED = {"<": ">", ">": "<", "<=": ">=", ">=": "<="}


@operation(Domain.ALGEBRA, "quadratic", required=("a", "b", "c"))
def quadratic(inputs: Mapping[str, Any], trace: TraceBuilder) -> Any:
    """Solve ax² + bx + c = 0 through the discriminant."""
    a = parse_number(inputs["a"], "a")
    b = parse_number(inputs["b"], "b")
    c = parse_number(inputs["c"], "c")
    if a == 0:
        raise MathDomainError(
            "a must be non-zero: with a = 0 the equation is not quadratic",
            "DEGENERATE_QUADRATIC",
        )
    coeffs = {"a": a, "b": b, "c": c}
    exact = all(v.is_Rational for v in coeffs.values())
    if not exact:
        trace.note_rounding()

    trace.add(
        f"Equation: ({trace.show(a)})x² + ({trace.show(b)})x + ({trace.show(c)}) = 0.",
        formula="a·x² + b·x + c = 0",
        values=coeffs,
    )
    discriminant = b**2 - 4 * a * c
    trace.add(
        "Compute the discriminant.",
        formula="Δ = b² − 4·a·c",
        values=coeffs,
        partial_result=to_exact(discriminant),
    )
    two_a = 2 * a

    if discriminant.is_positive:
        trace.add("Δ > 0: two distinct real roots.", formula="x = (−b ± √Δ) / (2·a)")
        sqrt_d = sp.sqrt(discriminant)
        roots = sorted(((-b - sqrt_d) / two_a, (-b + sqrt_d) / two_a), key=lambda r: float(r))
        values = tuple(_root_value(r) for r in roots)
        for label, sign, value in (("x₁", "−", values[0]), ("x₂", "+", values[1])):
            trace.add(
                f"Root {label}.",
                formula=f"x = (−b {sign} √Δ) / (2·a)",
                substitution=f"{label} = (−({trace.show(b)}) {sign} √{trace.show(_root_value(discriminant))})"
                f" / (2·{trace.show(a)})",
                partial_result=value,
            )
        trace.add(f"Roots: {trace.show(values[0])} and {trace.show(values[1])}.", partial_result=values)
        return values

    if discriminant.is_zero:
        trace.mark_degenerate(
            "zero-discriminant",
            "Δ = 0: one repeated real root.",
            formula="x = −b / (2·a)",
        )
        root = _root_value(-b / two_a)
        trace.add(
            "Repeated root.",
            formula="x = −b / (2·a)",
            values=coeffs,
            partial_result=root,
        )
        return root

    trace.add(
        "Δ < 0: no real roots; the roots are a complex-conjugate pair.",
        formula="x = −b/(2·a) ± i·√(−Δ)/(2·a)",
    )
    real = _root_value(-b / two_a)
    imaginary = _root_value(sp.Abs(sp.sqrt(-discriminant) / two_a))
    trace.add("Real part.", formula="Re = −b / (2·a)", values=coeffs, partial_result=real)
    trace.add(
        "Imaginary part.",
        formula="Im = √(−Δ) / |2·a|",
        substitution=f"Im = √({trace.show(_root_value(-discriminant))}) / |2·{trace.show(a)}|",
        partial_result=imaginary,
    )
    pair = ComplexPair(real, imaginary)
    trace.add(
        f"Roots: {trace.show(real)} ± {trace.show(imaginary)}i.", partial_result=pair
    )
    return pair


def _root_value(expr: sp.Expr) -> Any:
    """Exact int/Fraction for rational values, float otherwise."""
    if expr.is_Rational:
        return to_exact(expr)
    return float(expr)


def _check_log_domain(base: float, argument: float, argument_name: str) -> None:
    if base <= 0 or base == 1:
        raise MathDomainError(
            f"Logarithm base must be positive and not equal to 1 (got {base})", "LOG_DOMAIN"
        )
    if argument <= 0:
        raise MathDomainError(
            f"{argument_name} must be positive for a real logarithm (got {argument})",
            "LOG_DOMAIN",
        )


@operation(Domain.ALGEBRA, "logarithm", required=("base", "value"))
def logarithm(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    """log_base(value) by change of base."""
    base = parse_real(inputs["base"], "base")
    value = parse_real(inputs["value"], "value")
    _check_log_domain(base, value, "value")
    trace.note_rounding()

    ln_value = math.log(value)
    ln_base = math.log(base)
    trace.add(
        "Take the natural logarithm of the value.",
        formula="ln(value)",
        values={"value": value},
        partial_result=ln_value,
    )
    trace.add(
        "Take the natural logarithm of the base.",
        formula="ln(base)",
        values={"base": base},
        partial_result=ln_base,
    )
    result = ln_value / ln_base
    trace.add(
        "Apply the change-of-base identity.",
        formula="log_b(v) = ln(v) / ln(b)",
        substitution=f"log_{trace.show(base)}({trace.show(value)}) = "
        f"{trace.show(ln_value)} / {trace.show(ln_base)}",
        partial_result=result,
    )
    trace.add(
        "Verify by raising the base to the result.",
        formula="b^x ≈ v",
        substitution=f"{trace.show(base)}^{trace.show(result)} = {trace.show(base ** result)}",
        partial_result=result,
    )
    return result


@operation(Domain.ALGEBRA, "exponential", required=("base", "target"))
def exponential(inputs: Mapping[str, Any], trace: TraceBuilder) -> float:
    """Solve base^x = target for x."""
    base = parse_real(inputs["base"], "base")
    target = parse_real(inputs["target"], "target")
    _check_log_domain(base, target, "target")
    trace.note_rounding()

    trace.add(
        "Take logarithms of both sides and bring the exponent down.",
        formula="b^x = t  ⇒  x·ln(b) = ln(t)",
        values={"b": base, "t": target},
    )
    ln_target = math.log(target)
    ln_base = math.log(base)
    result = ln_target / ln_base
    trace.add(
        "Divide by ln(b).",
        formula="x = ln(t) / ln(b)",
        substitution=f"x = {trace.show(ln_target)} / {trace.show(ln_base)}",
        partial_result=result,
    )
    trace.add(
        "Verify by substitution.",
        formula="b^x ≈ t",
        substitution=f"{trace.show(base)}^{trace.show(result)} = {trace.show(base ** result)}",
        partial_result=result,
    )
    return result


def _parse_count(raw: Any, name: str) -> int:
    """Non-negative integer for factorial-based counting (violations are DomainError)."""
    number = parse_number(raw, name)
    if not is_integral(number):
        raise MathDomainError(f"{name} must be a whole number (got {raw})", "FACTORIAL_DOMAIN")
    value = int(number)
    if value < 0:
        raise MathDomainError(f"{name} must not be negative (got {value})", "FACTORIAL_DOMAIN")
    if value > config.MAX_FACTORIAL_N:
        raise ValidationError(
            f"{name} must not exceed {config.MAX_FACTORIAL_N}", "TOO_LARGE"
        )
    return value


def _parse_n_r(inputs: Mapping[str, Any]) -> tuple[int, int]:
    try:
        n = _parse_count(inputs["n"], "n")
        r = _parse_count(inputs["r"], "r")
    except MathDomainError as e:
        raise MathDomainError(e.message, "COMBINATORICS_DOMAIN") from e
    if r > n:
        raise MathDomainError(f"r must not exceed n (got n={n}, r={r})", "COMBINATORICS_DOMAIN")
    return n, r


@operation(Domain.ALGEBRA, "factorial", required=("n",))
def factorial(inputs: Mapping[str, Any], trace: TraceBuilder) -> int:
    """Exact n!."""
    n = _parse_count(inputs["n"], "n")
    if n == 0:
        trace.mark_degenerate("empty-product", "0! = 1 by definition (empty product).", partial_result=1)
        return 1
    result = exact_factorial(n)
    shown = " × ".join(str(k) for k in range(n, 0, -1)) if n <= 12 else f"{n} × {n - 1} × … × 1"
    trace.add(
        "Multiply every integer from n down to 1.",
        formula="n! = n·(n−1)···1",
        substitution=f"{n}! = {shown}",
        partial_result=result,
    )
    return result


@operation(Domain.ALGEBRA, "permutation", required=("n", "r"))
def permutation(inputs: Mapping[str, Any], trace: TraceBuilder) -> int:
    """P(n, r) = n! / (n−r)! with exact integers."""
    n, r = _parse_n_r(inputs)
    n_fact = exact_factorial(n)
    rest_fact = exact_factorial(n - r)
    trace.add("Compute n!.", formula="n!", values={"n": n}, partial_result=n_fact)
    trace.add(
        "Compute (n − r)!.", formula="(n − r)!", substitution=f"{n - r}!", partial_result=rest_fact
    )
    result = falling_factorial(n, r)
    trace.add(
        "Divide.",
        formula="P(n, r) = n! / (n − r)!",
        substitution=f"P({n}, {r}) = {n_fact} / {rest_fact}",
        partial_result=result,
    )
    return result


@operation(Domain.ALGEBRA, "combination", required=("n", "r"))
def combination(inputs: Mapping[str, Any], trace: TraceBuilder) -> int:
    """C(n, r) = n! / (r!(n−r)!) with exact integers."""
    n, r = _parse_n_r(inputs)
    n_fact = exact_factorial(n)
    r_fact = exact_factorial(r)
    rest_fact = exact_factorial(n - r)
    trace.add("Compute n!.", formula="n!", values={"n": n}, partial_result=n_fact)
    trace.add("Compute r!.", formula="r!", values={"r": r}, partial_result=r_fact)
    trace.add(
        "Compute (n − r)!.", formula="(n − r)!", substitution=f"{n - r}!", partial_result=rest_fact
    )
    result = n_fact // (r_fact * rest_fact)
    trace.add(
        "Divide.",
        formula="C(n, r) = n! / (r!·(n − r)!)",
        substitution=f"C({n}, {r}) = {n_fact} / ({r_fact}·{rest_fact})",
        partial_result=result,
    )
    return result


@operation(Domain.ALGEBRA, "linear-inequality", required=("expression",))
def linear_inequality(inputs: Mapping[str, Any], trace: TraceBuilder) -> Any:
    """Solve a·x ± b ⋚ c for x, flipping the operator when dividing by a negative a."""
    a, var, b, op, c = parse_linear_inequality(inputs["expression"])
    show = trace.show
    trace.add(
        f"Read the inequality: a = {show(to_exact(a))}, b = {show(to_exact(b))}, "
        f"c = {show(to_exact(c))}.",
        formula=f"a·{var} + b {op} c",
        values={"a": to_exact(a), "b": to_exact(b), "c": to_exact(c)},
    )

    moved = c - b
    trace.add(
        "Move the constant term to the right-hand side.",
        formula=f"a·{var} {op} c − b",
        substitution=f"{show(to_exact(a))}{var} {op} {show(to_exact(c))} − ({show(to_exact(b))})"
        f" = {show(to_exact(moved))}",
        partial_result=to_exact(moved),
    )

    if a == 0:
        holds = bool(_compare(sp.Integer(0), op, moved))
        trace.mark_degenerate(
            "zero-coefficient",
            f"The coefficient of {var} is 0, leaving 0 {op} {show(to_exact(moved))}: "
            + (f"true for every real {var}." if holds else f"never true, no real {var} satisfies it."),
            partial_result=holds,
        )
        return holds

    final_op = op
    if a < 0:
        final_op = FLIPPED[op]
        trace.add(
            f"The coefficient a = {show(to_exact(a))} is negative: dividing by it flips "
            f"the inequality sign from {op} to {final_op}.",
            formula="a < 0  ⇒  flip the operator",
        )
    boundary = to_exact(moved / a)
    trace.add(
        f"Divide both sides by a = {show(to_exact(a))}.",
        formula=f"{var} {final_op} (c − b) / a",
        substitution=f"{var} {final_op} {show(to_exact(moved))} / {show(to_exact(a))}",
        partial_result=boundary,
    )
    solution = InequalitySolution(var, final_op, boundary)
    trace.add(f"Solution: {solution}.", partial_result=solution)
    return solution


def _compare(left: Any, op: str, right: Any) -> bool:
    if op == "<":
        return left < right
    if op == ">":
        return left > right
    if op == "<=":
        return left <= right
    return left >= right


# gate -> (formula, the gate it negates or None)
LOGIC_GATES = {
    "and": ("X ∧ Y", None),
    "or": ("X ∨ Y", None),
    "not": ("¬X", None),
    "nand": ("¬(X ∧ Y)", "and"),
    "nor": ("¬(X ∨ Y)", "or"),
    "xor": ("X ⊕ Y", None),
}


def _bit(level: bool) -> str:
    return "1" if level else "0"


def _apply_gate(gate: str, x: bool, y: bool) -> bool:
    if gate == "and":
        return x and y
    if gate == "or":
        return x or y
    if gate == "xor":
        return x != y
    return not x


@operation(Domain.ALGEBRA, "logic-gate", required=("gate", "x"), optional=("y",))
def logic_gate(inputs: Mapping[str, Any], trace: TraceBuilder) -> bool:
    """Evaluate a two-input logic gate (NOT takes X only)."""
    gate = parse_choice(inputs["gate"], LOGIC_GATES, "gate")
    x = parse_bool(inputs["x"], "x")
    has_y = inputs.get("y") is not None and str(inputs["y"]).strip() != ""
    if gate == "not":
        if has_y:
            raise ValidationError("NOT takes a single input x", "UNEXPECTED_PARAMETER")
        trace.add(f"Read the input: X = {_bit(x)}.")
        result = not x
        trace.add("NOT inverts its input.", formula="¬X", substitution=f"¬{_bit(x)}",
                  partial_result=result)
        return result
    if not has_y:
        raise ValidationError(f"{gate.upper()} needs both inputs x and y", "MISSING_PARAMETER")
    y = parse_bool(inputs["y"], "y")
    trace.add(f"Read the inputs: X = {_bit(x)}, Y = {_bit(y)}.")

    formula, negated = LOGIC_GATES[gate]
    if negated:
        inner_formula = LOGIC_GATES[negated][0]
        inner = _apply_gate(negated, x, y)
        trace.add(
            f"{gate.upper()} is the negation of {negated.upper()}; evaluate {negated.upper()} first.",
            formula=inner_formula,
            substitution=inner_formula.replace("X", _bit(x)).replace("Y", _bit(y)),
            partial_result=inner,
        )
        result = not inner
        trace.add("Invert it.", formula=formula, substitution=f"¬{_bit(inner)}",
                  partial_result=result)
    else:
        result = _apply_gate(gate, x, y)
        trace.add(
            f"Apply {gate.upper()}.",
            formula=formula,
            substitution=formula.replace("X", _bit(x)).replace("Y", _bit(y)),
            partial_result=result,
        )
    trace.add(f"Output: {_bit(result)} ({str(result).upper()}).", partial_result=result)
    return result
