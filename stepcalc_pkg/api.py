"""Public API for stepcalc - returns structured results without side effects.

Every function here builds a :class:`ComputationRequest` and routes it
through :func:`dispatch.compute`; invalid input never raises, it comes back
as a non-Ok :class:`ComputationResult`.
"""

from __future__ import annotations

from typing import Any

from . import dispatch
from .types import ComputationRequest, ComputationResult, Domain


def _run(domain: Domain, operation: str, /, **inputs: Any) -> ComputationResult:
    given = {k: v for k, v in inputs.items() if v is not None}
    return dispatch.compute(ComputationRequest(domain, operation, given))


def compute(domain: Domain | str, operation: str, **inputs: Any) -> ComputationResult:
    """Run any operation by domain and name.

    Example:
        >>> from stepcalc_pkg.api import compute
        >>> compute("number-theory", "gcd-lcm", a=12, b=18).value
        (6, 36)
    """
    return dispatch.compute(ComputationRequest(domain, operation, inputs))


# --- Number theory --------------------------------------------------------


def gcd_lcm(a: Any, b: Any) -> ComputationResult:
    """GCD and LCM of two positive integers; value is ``(gcd, lcm)``.

    Example:
        >>> from stepcalc_pkg.api import gcd_lcm
        >>> gcd_lcm(48, 18).value
        (6, 144)
    """
    return _run(Domain.NUMBER_THEORY, "gcd-lcm", a=a, b=b)


def primality(n: Any) -> ComputationResult:
    """Primality test; value is a ``PrimalityReport``.

    Example:
        >>> from stepcalc_pkg.api import primality
        >>> primality(360).value.factors
        ((2, 3), (3, 2), (5, 1))
    """
    return _run(Domain.NUMBER_THEORY, "primality", n=n)


def simplify_root(n: Any) -> ComputationResult:
    """Simplify √n to ``coefficient·√radicand``.

    Args:
        n: Positive integer under the root

    Returns:
        ComputationResult whose value is a ``RootForm``

    Example:
        >>> from stepcalc_pkg.api import simplify_root
        >>> simplify_root(72).value
        RootForm(coefficient=6, radicand=2)
    """
    return _run(Domain.NUMBER_THEORY, "simplify-root", n=n)


def prime_sieve(limit: Any) -> ComputationResult:
    """List every prime up to ``limit`` with the Sieve of Eratosthenes.

    Args:
        limit: Upper bound (inclusive), at most ``config.MAX_SIEVE_LIMIT``

    Returns:
        ComputationResult whose value is a tuple of primes

    Example:
        >>> from stepcalc_pkg.api import prime_sieve
        >>> prime_sieve(10).value
        (2, 3, 5, 7)
    """
    return _run(Domain.NUMBER_THEORY, "prime-sieve", limit=limit)


def set_operation(a: Any, b: Any, operation: str) -> ComputationResult:
    """Union, intersection or difference of two integer sets.

    Args:
        a: First set as "1, 2, 3" text or a sequence of integers
        b: Second set, same forms as ``a``
        operation: "union", "intersection" or "difference"

    Returns:
        ComputationResult whose value is a sorted tuple

    Example:
        >>> from stepcalc_pkg.api import set_operation
        >>> set_operation("1 2 3", "2 3 4", "difference").value
        (1,)
    """
    return _run(Domain.NUMBER_THEORY, "set-operation", a=a, b=b, operation=operation)


def base_convert(number: Any, from_base: Any, to_base: Any) -> ComputationResult:
    """Convert an integer between bases 2 to 36.

    Args:
        number: Digits in ``from_base`` (letters for digits above 9)
        from_base: Base the number is written in
        to_base: Base to convert to

    Returns:
        ComputationResult whose value is the upper-case digit string

    Example:
        >>> from stepcalc_pkg.api import base_convert
        >>> base_convert("FF", 16, 2).value
        '11111111'
    """
    return _run(
        Domain.NUMBER_THEORY, "base-convert", number=number, from_base=from_base, to_base=to_base
    )


def sort_numbers(values: Any, order: str | None = None) -> ComputationResult:
    """Sort a list of numbers.

    Args:
        values: Numbers as "5 1 99" / "5, 1, 99" text or a sequence
        order: "ascending" (default) or "descending"

    Returns:
        ComputationResult whose value is the sorted tuple

    Example:
        >>> from stepcalc_pkg.api import sort_numbers
        >>> sort_numbers("5 1 99 42 -10").value
        (-10, 1, 5, 42, 99)
    """
    return _run(Domain.NUMBER_THEORY, "sort-numbers", values=values, order=order)


# --- Algebra ----------------------------------------------------------------


def quadratic(a: Any, b: Any, c: Any) -> ComputationResult:
    """Solve ax² + bx + c = 0.

    The value is a sorted pair of real roots, a single repeated root, or a
    ``ComplexPair`` when the discriminant is negative.

    Example:
        >>> from stepcalc_pkg.api import quadratic
        >>> quadratic(1, -5, 6).value
        (2, 3)
        >>> quadratic(1, 0, 1).value
        ComplexPair(real=0, imaginary=1)
    """
    return _run(Domain.ALGEBRA, "quadratic", a=a, b=b, c=c)


def logarithm(base: Any, value: Any) -> ComputationResult:
    """Compute log_base(value) by change of base.

    Args:
        base: Positive base other than 1
        value: Positive argument

    Returns:
        ComputationResult whose value is a float

    Example:
        >>> from stepcalc_pkg.api import logarithm
        >>> round(logarithm(10, 1000).value, 9)
        3.0
    """
    return _run(Domain.ALGEBRA, "logarithm", base=base, value=value)


def exponential(base: Any, target: Any) -> ComputationResult:
    """Solve ``base^x = target``."""
    return _run(Domain.ALGEBRA, "exponential", base=base, target=target)


def permutation(n: Any, r: Any) -> ComputationResult:
    """Ordered selections nPr = n! / (n − r)!.

    Example:
        >>> from stepcalc_pkg.api import permutation
        >>> permutation(10, 3).value
        720
    """
    return _run(Domain.ALGEBRA, "permutation", n=n, r=r)


def combination(n: Any, r: Any) -> ComputationResult:
    """Unordered selections nCr = n! / (r!·(n − r)!).

    Example:
        >>> from stepcalc_pkg.api import combination
        >>> combination(10, 3).value
        120
    """
    return _run(Domain.ALGEBRA, "combination", n=n, r=r)


def factorial(n: Any) -> ComputationResult:
    """Exact n! for 0 ≤ n ≤ ``config.MAX_FACTORIAL_N``."""
    return _run(Domain.ALGEBRA, "factorial", n=n)


def linear_inequality(expression: str) -> ComputationResult:
    """Solve ``a·x ± b ⋚ c``.

    Example:
        >>> from stepcalc_pkg.api import linear_inequality
        >>> str(linear_inequality("-2x + 3 > 7").value)
        'x < -2'
    """
    return _run(Domain.ALGEBRA, "linear-inequality", expression=expression)


def logic_gate(gate: str, x: Any, y: Any = None) -> ComputationResult:
    """Evaluate a logic gate.

    Args:
        gate: AND, OR, NOT, NAND, NOR or XOR (case-insensitive)
        x: First input (1/0, true/false)
        y: Second input; omitted for NOT

    Returns:
        ComputationResult whose value is a bool

    Example:
        >>> from stepcalc_pkg.api import logic_gate
        >>> logic_gate("nand", 1, 1).value
        False
    """
    return _run(Domain.ALGEBRA, "logic-gate", gate=gate, x=x, y=y)


# --- Geometry ---------------------------------------------------------------


def solid(shape: str, **dimensions: Any) -> ComputationResult:
    """Volume and surface areas of a solid; value is ``SolidMeasures``.

    Example:
        >>> from stepcalc_pkg.api import solid
        >>> solid("cube", a=2).value.total_surface_area
        24.0
    """
    return _run(Domain.GEOMETRY, "calculate", shape=shape, **dimensions)


# --- Trigonometry -------------------------------------------------------------


def normalize_angle(angle: Any, range: str | None = None) -> ComputationResult:  # noqa: A002
    """Reduce an angle in degrees and find its quadrant.

    Args:
        angle: Angle in degrees
        range: "unsigned" for [0°, 360°) (default) or "signed" for [−180°, 180°)

    Returns:
        ComputationResult whose value is a ``NormalizedAngle``

    Example:
        >>> from stepcalc_pkg.api import normalize_angle
        >>> normalize_angle(-30).value
        NormalizedAngle(degrees=330, quadrant=4)
    """
    return _run(Domain.TRIGONOMETRY, "normalize", angle=angle, range=range)


def to_radians(degrees: Any) -> ComputationResult:
    """Convert degrees to radians.

    Example:
        >>> from stepcalc_pkg.api import to_radians
        >>> round(to_radians(180).value, 6)
        3.141593
    """
    return _run(Domain.TRIGONOMETRY, "to-radians", degrees=degrees)


def to_degrees(radians: Any) -> ComputationResult:
    """Convert radians ("pi/2" is accepted) to degrees."""
    return _run(Domain.TRIGONOMETRY, "to-degrees", radians=radians)


def trig_function(function: str, angle: Any, unit: str | None = None) -> ComputationResult:
    """sin, cos, tan, csc, sec or cot of an angle (degrees unless ``unit="radians"``)."""
    return _run(Domain.TRIGONOMETRY, "function", function=function, angle=angle, unit=unit)


def pythagorean_identities(angle: Any, unit: str | None = None) -> ComputationResult:
    """Check sin² + cos² = 1, 1 + tan² = sec² and 1 + cot² = csc² at an angle.

    Returns:
        ComputationResult whose value is a tuple of ``IdentityCheck``
    """
    return _run(Domain.TRIGONOMETRY, "pythagorean-identities", angle=angle, unit=unit)


def double_angle(angle: Any, unit: str | None = None) -> ComputationResult:
    """sin 2θ, cos 2θ and tan 2θ as ``TrigValues``."""
    return _run(Domain.TRIGONOMETRY, "double-angle", angle=angle, unit=unit)


def half_angle(angle: Any, unit: str | None = None) -> ComputationResult:
    """sin θ/2, cos θ/2 and tan θ/2 as ``TrigValues`` (principal roots)."""
    return _run(Domain.TRIGONOMETRY, "half-angle", angle=angle, unit=unit)


def inverse_trig(function: str, value: Any) -> ComputationResult:
    """asin, acos or atan; value is ``AngleReading(degrees, radians)``."""
    return _run(Domain.TRIGONOMETRY, "inverse", function=function, value=value)


def pythagorean(a: Any = None, b: Any = None, c: Any = None) -> ComputationResult:
    """Missing side of a right triangle; give exactly two of a, b and hypotenuse c.

    Example:
        >>> from stepcalc_pkg.api import pythagorean
        >>> pythagorean(a=3, b=4).value
        5
    """
    return _run(Domain.TRIGONOMETRY, "pythagorean", a=a, b=b, c=c)


def right_triangle(adjacent: Any, angle: Any) -> ComputationResult:
    """Solve a right triangle from a leg and its adjacent acute angle.

    Args:
        adjacent: Length of the leg next to ``angle``
        angle: Acute angle in degrees, 0 < angle < 90

    Returns:
        ComputationResult whose value is a ``TriangleSolution``
    """
    return _run(Domain.TRIGONOMETRY, "right-triangle", adjacent=adjacent, angle=angle)


def triangle_sas(a: Any, b: Any, angle_c: Any) -> ComputationResult:
    """Solve a triangle from two sides and the included angle C (degrees).

    Returns:
        ComputationResult whose value is a ``TriangleSolution``
    """
    return _run(Domain.TRIGONOMETRY, "triangle-sas", a=a, b=b, angle_c=angle_c)


def triangle_aas(a: Any, angle_a: Any, angle_b: Any) -> ComputationResult:
    """Solve a triangle from side a, its opposite angle A and a second angle B (degrees).

    Returns:
        ComputationResult whose value is a ``TriangleSolution``
    """
    return _run(Domain.TRIGONOMETRY, "triangle-aas", a=a, angle_a=angle_a, angle_b=angle_b)
