"""Centralized configuration for stepcalc.

This module defines:
- Display precision for derivation traces
- Numeric tolerances for zero tests and verification steps
- Input validation limits (length, operand sizes)
- Allowed SymPy names and transformations for numeric input
- Regex patterns for parsing

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with STEPCALC_)
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("stepcalc")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# Trace display configuration
OUTPUT_PRECISION = int(
    os.getenv("STEPCALC_OUTPUT_PRECISION", "6")
)  # fractional digits shown for floating values

# Numeric tolerance constants
NUMERIC_TOLERANCE = float(
    os.getenv("STEPCALC_NUMERIC_TOLERANCE", "1e-12")
)  # a trig denominator this close to zero is treated as zero
VERIFY_TOLERANCE = float(
    os.getenv("STEPCALC_VERIFY_TOLERANCE", "1e-9")
)  # For verification steps and identity checks

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("STEPCALC_MAX_INPUT_LENGTH", "1000"))  # characters
MAX_FACTORIAL_N = int(os.getenv("STEPCALC_MAX_FACTORIAL_N", "5000"))
MAX_TRIAL_DIVISION_N = int(
    os.getenv("STEPCALC_MAX_TRIAL_DIVISION_N", str(10**12))
)  # O(sqrt(n)) trial division stays interactive below this
MAX_SIEVE_LIMIT = int(os.getenv("STEPCALC_MAX_SIEVE_LIMIT", "100000"))
MAX_SET_SIZE = int(os.getenv("STEPCALC_MAX_SET_SIZE", "1000"))

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "e": sp.E,
    "sqrt": sp.sqrt,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

# Plain numeric literals that can be read exactly without SymPy's parser
PLAIN_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)(/\d+)?$")
LIST_SEPARATOR_RE = re.compile(r"[\s,]+")

# a*x +/- b (op) c, with an optional coefficient
LINEAR_INEQUALITY_RE = re.compile(
    r"^\s*(?P<coef>[+-]?\s*(\d+(\.\d*)?|\.\d+)?)\s*\*?\s*(?P<var>[A-Za-z])"
    r"\s*(?P<sign>[+-])\s*(?P<const>\d+(\.\d*)?|\.\d+)"
    r"\s*(?P<op><=|>=|<|>)\s*(?P<rhs>[+-]?\s*(\d+(\.\d*)?|\.\d+))\s*$"
)
# x (op) c
BARE_INEQUALITY_RE = re.compile(
    r"^\s*(?P<var>[A-Za-z])\s*(?P<op><=|>=|<|>)"
    r"\s*(?P<rhs>[+-]?\s*(\d+(\.\d*)?|\.\d+))\s*$"
)
