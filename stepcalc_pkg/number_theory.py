"""Number-theory operations.

This module provides:
- GCD/LCM with every Euclidean reduction traced
- Primality testing and prime factorization with exponents
- Square-root simplification (coefficient·√radicand, radicand square-free)
- Prime listing by the Sieve of Eratosthenes
- Union / intersection / difference of integer sets
- Conversion between number bases 2-36
- Sorting a list of numbers

All arithmetic is on Python ints; only irrational entries given to
``sort-numbers`` are compared as floats.
"""

from __future__ import annotations

import string
from math import isqrt
from typing import Any, Mapping

from . import config
from .engine import operation
from .parser import (
    parse_choice,
    parse_int_list,
    parse_integer,
    parse_number_list,
    parse_positive_integer,
    strip_input,
)
from .primitives import (
    euclid_reductions,
    factor_exponents,
    gcd,
    is_perfect_square,
    is_prime,
    lcm,
    sieve,
)
from .trace import TraceBuilder
from .types import Domain, MathDomainError, PrimalityReport, RootForm, ValidationError

DIGITS = string.digits + string.ascii_uppercase
SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def format_factorization(pairs: list[tuple[int, int]] | tuple[tuple[int, int], ...]) -> str:
    """``[(2, 3), (3, 2)]`` -> ``2³·3²``."""
    return "·".join(
        str(p) if e == 1 else f"{p}{str(e).translate(SUPERSCRIPTS)}" for p, e in pairs
    )


@operation(Domain.NUMBER_THEORY, "gcd-lcm", required=("a", "b"))
def gcd_lcm(inputs: Mapping[str, Any], trace: TraceBuilder) -> tuple[int, int]:
    """Greatest common divisor and least common multiple of two positive integers."""
    a = parse_positive_integer(inputs["a"], "a")
    b = parse_positive_integer(inputs["b"], "b")

    trace.add(
        f"Start the Euclidean algorithm with GCD({a}, {b}).",
        formula="GCD(a, b) = GCD(b, a mod b)",
    )
    for x, y, remainder in euclid_reductions(a, b):
        trace.add(
            f"Reduce ({x}, {y}) -> ({y}, {remainder}).",
            formula="GCD(a, b) = GCD(b, a mod b)",
            values={"a": x, "b": y},
            partial_result=remainder,
        )
    g = gcd(a, b)
    trace.add(
        f"The remainder reached 0, so the last non-zero divisor {g} is the GCD.",
        formula="GCD(a, 0) = a",
        values={"a": g},
        partial_result=g,
    )
    product = a * b
    lcm_value = lcm(a, b)
    trace.add(
        "Compute the LCM from the GCD just found.",
        formula="LCM(a, b) = |a·b| / GCD(a, b)",
        substitution=f"LCM({a}, {b}) = {product} / {g}",
        partial_result=lcm_value,
    )
    return g, lcm_value


@operation(Domain.NUMBER_THEORY, "primality", required=("n",))
def primality(inputs: Mapping[str, Any], trace: TraceBuilder) -> PrimalityReport:
    """Primality test with the full prime factorization when composite."""
    n = parse_positive_integer(inputs["n"], "n")
    if n > config.MAX_TRIAL_DIVISION_N:
        raise ValidationError(
            f"n is too large for trial division (> {config.MAX_TRIAL_DIVISION_N})",
            "TOO_LARGE",
        )

    if n == 1:
        report = PrimalityReport(1, False, ())
        trace.mark_degenerate(
            "neither-prime-nor-composite",
            "1 is neither prime nor composite: it has exactly one positive divisor.",
            partial_result=report,
        )
        return report
    if n == 2:
        report = PrimalityReport(2, True, ((2, 1),))
        trace.add("2 is prime: it is the only even prime.", partial_result=report)
        return report

    limit = isqrt(n)
    trace.add(
        f"Test divisibility by every prime p ≤ √{n}; ⌊√{n}⌋ = {limit}.",
        formula="p | n for prime p ≤ √n",
    )
    prime = is_prime(n)
    first_divisor = None
    for p in sieve(limit):
        divides = n % p == 0
        trace.add(
            f"{n} mod {p} = {n % p}: {'divisible' if divides else 'not divisible'}.",
            formula="n mod p",
            values={"n": n, "p": p},
            partial_result=n % p,
        )
        if divides:
            first_divisor = p
            break

    if prime:
        report = PrimalityReport(n, True, ((n, 1),))
        trace.add(
            f"No prime up to {limit} divides {n}, so {n} is prime.", partial_result=report
        )
        return report

    pairs = factor_exponents(n)
    trace.add(
        f"{n} is composite ({first_divisor} divides it). Factor by repeated division.",
    )
    remaining = n
    for p, e in pairs:
        remaining //= p**e
        trace.add(
            f"Divide out {p} {e} time(s), leaving {remaining}.",
            formula="n / p^e",
            substitution=f"{remaining * p**e} / {p}^{e} = {remaining}",
            partial_result=remaining,
        )
    report = PrimalityReport(n, False, tuple(pairs))
    trace.add(
        f"Prime factorization: {n} = {format_factorization(pairs)}.",
        partial_result=report,
    )
    return report


@operation(Domain.NUMBER_THEORY, "simplify-root", required=("n",))
def simplify_root(inputs: Mapping[str, Any], trace: TraceBuilder) -> RootForm:
    """Write √n as coefficient·√radicand with a square-free radicand."""
    n = parse_integer(inputs["n"], "n")
    if n < 0:
        raise MathDomainError(
            f"√{n} is not a real number: the radicand must be non-negative",
            "NEGATIVE_RADICAND",
        )
    if n == 0:
        root = RootForm(0, 0)
        trace.mark_degenerate("zero-radicand", "√0 = 0.", partial_result=root)
        return root

    coefficient, radicand = 1, n
    trace.add(
        f"Look for perfect-square factors i² of {n} for increasing i.",
        formula="√(i²·m) = i·√m",
    )
    i = 2
    while i * i <= radicand:
        while radicand % (i * i) == 0:
            radicand //= i * i
            coefficient *= i
            trace.add(
                f"{i}² divides the radicand; pull {i} outside the root.",
                formula="√n = c·√m",
                substitution=f"√{n} = {coefficient}·√{radicand}",
                partial_result=RootForm(coefficient, radicand),
            )
        i += 1

    root = RootForm(coefficient, radicand)
    if is_perfect_square(n):
        trace.add(f"{n} is a perfect square: √{n} = {coefficient}.", partial_result=root)
    elif coefficient == 1:
        trace.add(
            f"{n} has no perfect-square factor other than 1; √{n} is already simplest.",
            partial_result=root,
        )
    else:
        trace.add(
            f"Largest square factor is {coefficient ** 2}.",
            formula="√n = √(c²·m) = c·√m",
            substitution=f"√{n} = √({coefficient ** 2}·{radicand}) = {coefficient}·√{radicand}",
            partial_result=root,
        )
    return root


@operation(Domain.NUMBER_THEORY, "prime-sieve", required=("limit",))
def prime_sieve(inputs: Mapping[str, Any], trace: TraceBuilder) -> tuple[int, ...]:
    """All primes up to a limit by the Sieve of Eratosthenes."""
    limit = parse_integer(inputs["limit"], "limit")
    if limit > config.MAX_SIEVE_LIMIT:
        raise ValidationError(
            f"limit must not exceed {config.MAX_SIEVE_LIMIT:,}", "TOO_LARGE"
        )
    if limit < 2:
        trace.mark_degenerate("empty-range", f"There are no primes ≤ {limit}.", partial_result=())
        return ()

    trace.add(
        f"Mark 2..{limit} as candidates; cross out multiples of each prime p with p² ≤ {limit}.",
        formula="cross out p², p²+p, p²+2p, ...",
    )
    for p in sieve(isqrt(limit)):
        trace.add(
            f"{p} is prime; cross out its multiples from {p * p}.",
            formula="p² ≤ limit",
            values={"p": p, "limit": limit},
        )
    primes = tuple(sieve(limit))
    trace.add(f"{len(primes)} numbers remain uncrossed: these are the primes.", partial_result=primes)
    return primes


SET_OPERATIONS = {
    "union": ("A ∪ B", "every element of either set, without repeats"),
    "intersection": ("A ∩ B", "elements present in both sets"),
    "difference": ("A − B", "elements of A that are not in B"),
}


@operation(Domain.NUMBER_THEORY, "set-operation", required=("a", "b", "operation"))
def set_operation(inputs: Mapping[str, Any], trace: TraceBuilder) -> tuple[int, ...]:
    """Union, intersection or difference of two integer sets."""
    kind = parse_choice(inputs["operation"], SET_OPERATIONS, "operation")
    set_a = sorted(set(parse_int_list(inputs["a"], "a")))
    set_b = sorted(set(parse_int_list(inputs["b"], "b")))
    if not set_a or not set_b:
        raise ValidationError("Both sets need at least one integer", "EMPTY_INPUT")

    trace.add(f"Remove repeats and sort: A = {_set_text(set_a)}, B = {_set_text(set_b)}.")
    symbol, description = SET_OPERATIONS[kind]
    if kind == "union":
        result = sorted(set(set_a) | set(set_b))
    elif kind == "intersection":
        result = sorted(set(set_a) & set(set_b))
    else:
        result = sorted(set(set_a) - set(set_b))
    value = tuple(result)
    trace.add(
        f"{symbol} collects {description}.",
        formula=symbol,
        substitution=f"{_set_text(set_a)} {symbol[2]} {_set_text(set_b)} = {_set_text(result)}",
        partial_result=value,
    )
    return value


def _set_text(items: list[int]) -> str:
    return "{" + ", ".join(str(i) for i in items) + "}"


def _parse_base(raw: Any, name: str) -> int:
    base = parse_integer(raw, name)
    if not 2 <= base <= 36:
        raise ValidationError(f"{name} must be between 2 and 36", "UNKNOWN_CHOICE")
    return base


@operation(Domain.NUMBER_THEORY, "base-convert", required=("number", "from_base", "to_base"))
def base_convert(inputs: Mapping[str, Any], trace: TraceBuilder) -> str:
    """Convert an integer written in one base to another base."""
    from_base = _parse_base(inputs["from_base"], "from_base")
    to_base = _parse_base(inputs["to_base"], "to_base")
    text = strip_input(str(inputs["number"]), "number").replace("−", "-")
    text = text.upper().replace(" ", "")
    negative = text.startswith("-")
    digits = text.lstrip("+-")
    if not digits or any(ch not in DIGITS[:from_base] for ch in digits):
        raise ValidationError(
            f"{text!r} is not a valid base-{from_base} number", "NOT_A_NUMBER"
        )

    value = 0
    terms = []
    for position, ch in enumerate(reversed(digits)):
        value += DIGITS.index(ch) * from_base**position
        terms.append(f"{DIGITS.index(ch)}·{from_base}^{position}")
    trace.add(
        f"Expand the base-{from_base} digits by position.",
        formula="Σ dᵢ·bⁱ",
        substitution=" + ".join(reversed(terms)) + f" = {value}",
        partial_result=-value if negative else value,
    )

    if value == 0:
        converted = "0"
    else:
        remainders = []
        quotient = value
        while quotient:
            quotient, remainder = divmod(quotient, to_base)
            remainders.append(DIGITS[remainder])
            trace.add(
                f"Divide by {to_base}: quotient {quotient}, remainder {DIGITS[remainder]}.",
                formula="q, r = divmod(n, b)",
                partial_result=remainder,
            )
        converted = "".join(reversed(remainders))
        trace.add("Read the remainders from last to first.")
    if negative and converted != "0":
        converted = "-" + converted
    trace.add(
        f"{text} in base {from_base} is {converted} in base {to_base}.",
        partial_result=converted,
    )
    return converted


SORT_ORDERS = ("ascending", "descending")


@operation(Domain.NUMBER_THEORY, "sort-numbers", required=("values",), optional=("order",))
def sort_numbers(inputs: Mapping[str, Any], trace: TraceBuilder) -> tuple[Any, ...]:
    """Arrange a list of real numbers from smallest to largest (or the reverse).

    Repeated values are kept; plain decimals and fractions stay exact.
    """
    order = parse_choice(inputs.get("order") or "ascending", SORT_ORDERS, "order")
    values = parse_number_list(inputs["values"], "values")
    show = trace.show
    trace.add(f"Read {len(values)} value(s): {', '.join(show(v) for v in values)}.")
    if len(values) == 1:
        result = (values[0],)
        trace.mark_degenerate(
            "single-value", "A single value is already in order.", partial_result=result
        )
        return result

    ascending = sorted(values)
    trace.add(
        f"Smallest value {show(ascending[0])}, largest value {show(ascending[-1])}.",
        formula="min ≤ … ≤ max",
        partial_result=(ascending[0], ascending[-1]),
    )
    repeats = len(values) - len(set(values))
    if repeats:
        trace.add(f"{repeats} repeated value(s) keep their place next to their equals.")
    result = tuple(ascending)
    trace.add(
        "Arrange from smallest to largest.",
        substitution=" ≤ ".join(show(v) for v in result),
        partial_result=result,
    )
    if order == "descending":
        result = tuple(reversed(ascending))
        trace.add(
            "Reverse for descending order.",
            substitution=" ≥ ".join(show(v) for v in result),
            partial_result=result,
        )
    return result
