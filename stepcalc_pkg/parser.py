"""Input parsing for the computation engine.

This module handles:
- Input sanitization and validation (length, forbidden tokens)
- Exact reading of plain numeric literals ("12", "-2.5", "3/4")
- SymPy parsing of constant expressions ("2*pi", "sqrt(2)/2", "3^2")
- Typed coercion helpers (integers, positive integers, reals, choices, lists)
- The linear-inequality reader for the ``a·x ± b ⋚ c`` contract

Every helper raises :class:`ValidationError` (reported as InvalidInput);
range checks that are mathematical rather than type-related stay in the
domain modules.
"""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable

import sympy as sp
from sympy import parse_expr
from sympy.parsing.sympy_parser import TokenError

from . import config
from .config import (
    ALLOWED_SYMPY_NAMES,
    BARE_INEQUALITY_RE,
    LINEAR_INEQUALITY_RE,
    LIST_SEPARATOR_RE,
    PLAIN_NUMBER_RE,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .types import ValidationError

logger = get_logger("parser")

# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
    ";",
)


def strip_input(raw: str, name: str = "value") -> str:
    """Strip raw text and enforce the empty and length limits."""
    text = raw.strip()
    if not text:
        raise ValidationError(f"Parameter '{name}' cannot be empty", "EMPTY_INPUT")
    if len(text) > config.MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Parameter '{name}' too long (>{config.MAX_INPUT_LENGTH} characters)",
            "TOO_LONG",
        )
    return text


def sanitize(raw: str, name: str = "value") -> str:
    """Strip and validate raw text before any parsing."""
    text = strip_input(raw, name).replace("−", "-").replace("π", "pi").replace("×", "*")
    lowered = text.lower()
    for token in FORBIDDEN_TOKENS:
        if token in lowered:
            logger.warning("Blocked forbidden token %r in parameter %s", token, name)
            raise ValidationError(
                f"Input contains forbidden token: {token}", "FORBIDDEN_TOKEN"
            )
    return text


def parse_number(raw: Any, name: str = "value") -> sp.Expr:
    """Parse raw input into a finite real SymPy number.

    Plain literals are read exactly as ``Rational``; other text must be a
    constant expression over the whitelisted names.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"Parameter '{name}' must be numeric", "NOT_A_NUMBER")
    if isinstance(raw, int):
        return sp.Integer(raw)
    if isinstance(raw, Fraction):
        return sp.Rational(raw.numerator, raw.denominator)
    if isinstance(raw, Decimal):
        return sp.Rational(str(raw))
    if isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            raise ValidationError(f"Parameter '{name}' must be finite", "NOT_A_NUMBER")
        return sp.Float(raw)
    if isinstance(raw, sp.Basic):
        expr = raw
    elif isinstance(raw, str):
        text = sanitize(raw, name)
        compact = text.replace(" ", "")
        if PLAIN_NUMBER_RE.match(compact):
            try:
                expr = sp.Rational(compact)
            except (ValueError, TypeError, ZeroDivisionError) as e:
                raise ValidationError(
                    f"Parameter '{name}' is not a valid number: {text!r}", "NOT_A_NUMBER"
                ) from e
        else:
            try:
                expr = parse_expr(
                    text,
                    local_dict=dict(ALLOWED_SYMPY_NAMES),
                    transformations=TRANSFORMATIONS,
                    evaluate=True,
                )
            except (
                SyntaxError,
                TokenError,
                TypeError,
                ValueError,
                AttributeError,
                NameError,
                ZeroDivisionError,
            ) as e:
                raise ValidationError(
                    f"Could not parse parameter '{name}': {text!r}", "PARSE_ERROR"
                ) from e
    else:
        raise ValidationError(
            f"Parameter '{name}' has unsupported type {type(raw).__name__}", "NOT_A_NUMBER"
        )

    if not isinstance(expr, sp.Expr) or expr.free_symbols:
        raise ValidationError(
            f"Parameter '{name}' must be a number, got {raw!r}", "NOT_A_NUMBER"
        )
    if expr.has(sp.zoo, sp.oo, -sp.oo, sp.nan) or expr.is_real is False or not expr.is_finite:
        raise ValidationError(
            f"Parameter '{name}' must be a finite real number", "NOT_A_NUMBER"
        )
    return expr


def parse_integer(raw: Any, name: str = "value") -> int:
    """Parse an exact integer; non-integral numbers are InvalidInput."""
    number = parse_number(raw, name)
    if not is_integral(number):
        raise ValidationError(f"Parameter '{name}' must be an integer", "NOT_INTEGER")
    return int(number)


def parse_positive_integer(raw: Any, name: str = "value") -> int:
    value = parse_integer(raw, name)
    if value <= 0:
        raise ValidationError(
            f"Parameter '{name}' must be a positive integer", "NOT_POSITIVE"
        )
    return value


def finite_float(number: sp.Expr, name: str) -> float:
    """Convert a parsed number to float; overflow to infinity is InvalidInput."""
    try:
        value = float(number)
    except OverflowError as e:
        raise ValidationError(
            f"Parameter '{name}' is too large to evaluate numerically", "TOO_LARGE"
        ) from e
    if not math.isfinite(value):
        raise ValidationError(
            f"Parameter '{name}' is too large to evaluate numerically", "TOO_LARGE"
        )
    return value


def parse_real(raw: Any, name: str = "value") -> float:
    """Parse a number that must fit in a finite float."""
    return finite_float(parse_number(raw, name), name)


def parse_exact(raw: Any, name: str = "value") -> int | Fraction | float:
    """Like :func:`to_exact` on a parsed number; irrational values must fit a float."""
    number = parse_number(raw, name)
    if number.is_Rational:
        return to_exact(number)
    return finite_float(number, name)


def is_integral(number: sp.Expr) -> bool:
    """True for exact integers and for floats with no fractional part."""
    if number.is_Integer:
        return True
    if number.is_Float:
        return float(number).is_integer()
    return False


def parse_choice(raw: Any, choices: Iterable[str], name: str = "value") -> str:
    """Match raw text against a fixed set of identifiers (case-insensitive)."""
    options = tuple(choices)
    key = sanitize(str(raw), name).lower().replace("_", "-")
    if key not in options:
        raise ValidationError(
            f"Parameter '{name}' must be one of {', '.join(options)}; got {raw!r}",
            "UNKNOWN_CHOICE",
        )
    return key


def parse_int_list(raw: Any, name: str = "value") -> list[int]:
    """Parse a comma/space separated list of integers."""
    if isinstance(raw, (list, tuple, set, frozenset)):
        items = list(raw)
    else:
        text = sanitize(str(raw), name)
        items = [part for part in LIST_SEPARATOR_RE.split(text) if part]
    if len(items) > config.MAX_SET_SIZE:
        raise ValidationError(
            f"Parameter '{name}' has too many elements (>{config.MAX_SET_SIZE})",
            "TOO_LARGE",
        )
    return [parse_integer(item, name) for item in items]


def parse_number_list(raw: Any, name: str = "value") -> list[int | Fraction | float]:
    """Parse a comma/space separated list of real numbers, keeping rationals exact."""
    if isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        text = sanitize(str(raw), name)
        items = [part for part in LIST_SEPARATOR_RE.split(text) if part]
    if not items:
        raise ValidationError(f"Parameter '{name}' needs at least one number", "EMPTY_INPUT")
    if len(items) > config.MAX_SET_SIZE:
        raise ValidationError(
            f"Parameter '{name}' has too many elements (>{config.MAX_SET_SIZE})",
            "TOO_LARGE",
        )
    return [parse_exact(item, name) for item in items]


TRUE_WORDS = ("1", "true", "t", "yes", "on")
FALSE_WORDS = ("0", "false", "f", "no", "off")


def parse_bool(raw: Any, name: str = "value") -> bool:
    """Read a logic level: 1/0, true/false, yes/no or on/off."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    key = strip_input(str(raw), name).lower()
    if key in TRUE_WORDS:
        return True
    if key in FALSE_WORDS:
        return False
    raise ValidationError(
        f"Parameter '{name}' must be a logic level (1/0, true/false); got {raw!r}",
        "NOT_A_BOOLEAN",
    )


def to_exact(number: sp.Expr) -> int | Fraction | float:
    """Convert a SymPy number to int, Fraction or float."""
    if number.is_Integer:
        return int(number)
    if number.is_Rational:
        return Fraction(int(number.p), int(number.q))
    return float(number)


def _literal(text: str) -> sp.Rational:
    return sp.Rational(text.replace(" ", ""))


def parse_linear_inequality(raw: Any) -> tuple[sp.Rational, str, sp.Rational, str, sp.Rational]:
    """Read ``a·x ± b ⋚ c`` (or the bare ``x ⋚ c``).

    Returns:
        Tuple ``(a, variable, b, operator, c)`` with ``b`` already signed,
        so the inequality reads ``a·variable + b  operator  c``.
    """
    if not isinstance(raw, str):
        raise ValidationError("Inequality must be given as text", "MALFORMED_INEQUALITY")
    text = sanitize(raw, "expression")
    match = LINEAR_INEQUALITY_RE.match(text)
    if match:
        coef_text = match.group("coef").replace(" ", "")
        if coef_text in ("", "+"):
            a = sp.Integer(1)
        elif coef_text == "-":
            a = sp.Integer(-1)
        else:
            a = _literal(coef_text)
        b = _literal(match.group("const"))
        if match.group("sign") == "-":
            b = -b
        return a, match.group("var"), b, match.group("op"), _literal(match.group("rhs"))
    match = BARE_INEQUALITY_RE.match(text)
    if match:
        return (
            sp.Integer(1),
            match.group("var"),
            sp.Integer(0),
            match.group("op"),
            _literal(match.group("rhs")),
        )
    raise ValidationError(
        f"Malformed inequality {text!r}; expected the form a·x ± b < c "
        "(operators <, >, <=, >=), e.g. '2x + 5 > 15'",
        "MALFORMED_INEQUALITY",
    )
