"""Unit tests for parser module."""

import unittest
from decimal import Decimal
from fractions import Fraction

import sympy as sp

from stepcalc_pkg.parser import (
    parse_choice,
    parse_int_list,
    parse_integer,
    parse_linear_inequality,
    parse_number,
    parse_positive_integer,
    parse_real,
    sanitize,
    to_exact,
)
from stepcalc_pkg.types import ValidationError


class TestSanitize(unittest.TestCase):
    def test_strips_and_normalizes_symbols(self):
        self.assertEqual(sanitize("  −2 × π "), "-2 * pi")

    def test_empty_input(self):
        with self.assertRaises(ValidationError) as ctx:
            sanitize("   ")
        self.assertEqual(ctx.exception.code, "EMPTY_INPUT")

    def test_too_long(self):
        with self.assertRaises(ValidationError) as ctx:
            sanitize("1" * 10001)
        self.assertEqual(ctx.exception.code, "TOO_LONG")

    def test_forbidden_token(self):
        for text in ("__import__('os')", "import os", "1; 2"):
            with self.assertRaises(ValidationError) as ctx:
                sanitize(text)
            self.assertEqual(ctx.exception.code, "FORBIDDEN_TOKEN")


class TestParseNumber(unittest.TestCase):
    def test_plain_literals_are_exact(self):
        self.assertEqual(parse_number("12"), sp.Integer(12))
        self.assertEqual(parse_number("-2.5"), sp.Rational(-5, 2))
        self.assertEqual(parse_number("3/4"), sp.Rational(3, 4))
        self.assertTrue(parse_number("0.1").is_Rational)

    def test_python_numbers(self):
        self.assertEqual(parse_number(7), sp.Integer(7))
        self.assertEqual(parse_number(Fraction(1, 3)), sp.Rational(1, 3))
        self.assertEqual(parse_number(Decimal("0.25")), sp.Rational(1, 4))
        self.assertAlmostEqual(float(parse_number(0.5)), 0.5)

    def test_expressions(self):
        self.assertEqual(parse_number("2^3"), sp.Integer(8))
        self.assertEqual(parse_number("sqrt(2)/2"), sp.sqrt(2) / 2)
        self.assertEqual(parse_number("2pi"), 2 * sp.pi)

    def test_rejects_non_numbers(self):
        cases = {
            "abc": "NOT_A_NUMBER",
            "x + 1": "NOT_A_NUMBER",
            "3/0": "NOT_A_NUMBER",
            "sqrt(-1)": "NOT_A_NUMBER",
            "2 +* 3": "PARSE_ERROR",
        }
        for text, code in cases.items():
            with self.assertRaises(ValidationError, msg=text) as ctx:
                parse_number(text)
            self.assertEqual(ctx.exception.code, code, text)

    def test_rejects_bool_and_non_finite(self):
        for raw in (True, float("inf"), float("nan"), None):
            with self.assertRaises(ValidationError):
                parse_number(raw)


class TestTypedHelpers(unittest.TestCase):
    def test_parse_integer(self):
        self.assertEqual(parse_integer("42"), 42)
        self.assertEqual(parse_integer(6.0), 6)
        with self.assertRaises(ValidationError) as ctx:
            parse_integer("2.5")
        self.assertEqual(ctx.exception.code, "NOT_INTEGER")

    def test_parse_positive_integer(self):
        self.assertEqual(parse_positive_integer("5"), 5)
        with self.assertRaises(ValidationError) as ctx:
            parse_positive_integer("0")
        self.assertEqual(ctx.exception.code, "NOT_POSITIVE")

    def test_parse_real(self):
        self.assertAlmostEqual(parse_real("pi"), 3.141592653589793)

    def test_parse_choice(self):
        self.assertEqual(parse_choice("SIN", ("sin", "cos")), "sin")
        with self.assertRaises(ValidationError) as ctx:
            parse_choice("sinh", ("sin", "cos"))
        self.assertEqual(ctx.exception.code, "UNKNOWN_CHOICE")

    def test_parse_int_list(self):
        self.assertEqual(parse_int_list("1, 2 3,4"), [1, 2, 3, 4])
        self.assertEqual(parse_int_list([5, "6"]), [5, 6])

    def test_to_exact(self):
        self.assertEqual(to_exact(sp.Integer(3)), 3)
        self.assertIsInstance(to_exact(sp.Integer(3)), int)
        self.assertEqual(to_exact(sp.Rational(1, 2)), Fraction(1, 2))
        self.assertIsInstance(to_exact(sp.sqrt(2)), float)


class TestLinearInequality(unittest.TestCase):
    def test_full_form(self):
        a, var, b, op, c = parse_linear_inequality("-2x + 3 > 7")
        self.assertEqual((a, var, b, op, c), (-2, "x", 3, ">", 7))

    def test_minus_constant_and_star(self):
        a, var, b, op, c = parse_linear_inequality("3*y - 1.5 <= 6")
        self.assertEqual((a, var, op), (3, "y", "<="))
        self.assertEqual(b, sp.Rational(-3, 2))
        self.assertEqual(c, 6)

    def test_implicit_coefficient(self):
        self.assertEqual(parse_linear_inequality("x + 5 > 15")[0], 1)
        self.assertEqual(parse_linear_inequality("-x + 5 > 15")[0], -1)

    def test_bare_form(self):
        self.assertEqual(parse_linear_inequality("x >= -4"), (1, "x", 0, ">=", -4))

    def test_malformed(self):
        for text in ("7 < 2x + 3", "2x > ", "x^2 + 1 > 0", "2x + 3 = 7", "x + y > 1"):
            with self.assertRaises(ValidationError, msg=text) as ctx:
                parse_linear_inequality(text)
            self.assertEqual(ctx.exception.code, "MALFORMED_INEQUALITY")


if __name__ == "__main__":
    unittest.main()
