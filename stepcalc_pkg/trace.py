"""Derivation trace builder.

Each operation gets its own :class:`TraceBuilder`; steps are appended in call
order and can never be edited or removed. Values inserted into substitution
text are shown at a fixed number of fractional digits (``OUTPUT_PRECISION``),
the underlying computation keeps full precision.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Any, Iterator, Mapping

import sympy as sp

from . import config
from .types import DerivationStep

_SIMPLE_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")
_TARGET_RE = re.compile(r"^[^\W\d]\w*$")


def show(value: Any, precision: int | None = None) -> str:
    """Render a value for trace text (rounding floats, never ints)."""
    if precision is None:
        precision = config.OUTPUT_PRECISION
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Fraction):
        return str(value.numerator) if value.denominator == 1 else str(value)
    if isinstance(value, sp.Basic):
        if value.is_Integer or value.is_Rational:
            return str(value)
        try:
            return show(float(value), precision)
        except TypeError:
            return sp.sstr(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return str(value)
        text = f"{value:.{precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return "0" if text in ("-0", "") else text
    if isinstance(value, (tuple, list)):
        return "(" + ", ".join(show(v, precision) for v in value) + ")"
    return str(value)


def substitute(formula: str, values: Mapping[str, Any], precision: int | None = None) -> str:
    """Insert concrete values for the parameter names of ``formula``.

    A bare target name on the left (``V = π·r²·h``) is left intact;
    any other formula is substituted throughout.
    """
    lhs, sep, rhs = formula.partition(" = ")
    if not sep or not _TARGET_RE.match(lhs):
        lhs, sep, rhs = "", "", formula
    # longest names first so "r1" is not clobbered by "r"
    for name in sorted(values, key=len, reverse=True):
        shown = show(values[name], precision)
        if not _SIMPLE_NUMBER_RE.match(shown):
            shown = f"({shown})"
        pattern = rf"(?<![A-Za-z0-9_]){re.escape(name)}(?![A-Za-z0-9_])"
        rhs = re.sub(pattern, lambda _m, s=shown: s, rhs)
    return f"{lhs}{sep}{rhs}" if sep else rhs


class TraceBuilder:
    """Append-only accumulator of :class:`DerivationStep` records."""

    def __init__(self, precision: int | None = None):
        self._steps: list[DerivationStep] = []
        self.precision = config.OUTPUT_PRECISION if precision is None else precision
        self.degenerate_case: str | None = None

    def add(
        self,
        narrative: str,
        formula: str = "",
        values: Mapping[str, Any] | None = None,
        partial_result: Any = None,
        substitution: str | None = None,
    ) -> DerivationStep:
        """Append a step; ``substitution`` defaults to ``formula`` with ``values`` inserted."""
        if substitution is None:
            substitution = substitute(formula, values, self.precision) if values else ""
        step = DerivationStep(
            ordinal=len(self._steps) + 1,
            narrative=narrative,
            formula=formula,
            substitution=substitution,
            partial_result=partial_result,
        )
        self._steps.append(step)
        return step

    def note_rounding(self) -> DerivationStep:
        return self.add(
            f"Floating values in this trace are shown rounded to {self.precision} "
            "fractional digits; the computation itself uses full double precision."
        )

    def mark_degenerate(self, case: str, narrative: str, **kwargs: Any) -> DerivationStep:
        """Record that a special-cased branch replaced the general formula."""
        if self.degenerate_case is None:
            self.degenerate_case = case
        return self.add(narrative, **kwargs)

    def show(self, value: Any) -> str:
        return show(value, self.precision)

    @property
    def steps(self) -> tuple[DerivationStep, ...]:
        return tuple(self._steps)

    @property
    def last(self) -> DerivationStep | None:
        return self._steps[-1] if self._steps else None

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[DerivationStep]:
        return iter(tuple(self._steps))
