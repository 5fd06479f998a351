"""Tests for the presentation helpers."""

import json
from fractions import Fraction

import pytest

from stepcalc_pkg.api import linear_inequality, primality, quadratic, solid
from stepcalc_pkg.formatter import (
    format_number,
    format_step,
    format_trace,
    format_value,
    render_result,
)
from stepcalc_pkg.types import (
    ComplexPair,
    DerivationStep,
    InequalitySolution,
    PrimalityReport,
    RootForm,
    TrigValues,
)


class TestFormatValue:
    def test_numbers(self):
        assert format_number(3628800) == "3,628,800"
        assert format_number(1234) == "1234"
        assert format_number(Fraction(-2, 3)) == "-2/3"
        assert format_number(0.1 + 0.2, 6) == "0.3"
        assert format_number(True) == "true"

    def test_tagged_values(self):
        assert format_value(ComplexPair(-1, 2)) == "-1 ± 2i"
        assert format_value(InequalitySolution("x", "<", -2)) == "x < -2"
        assert format_value(PrimalityReport(360, False, ((2, 3), (3, 2), (5, 1)))) == (
            "360 = 2³·3²·5 (composite)"
        )
        assert format_value(PrimalityReport(7, True, ((7, 1),))) == "7 is prime"
        assert format_value(RootForm(6, 2)) == "6√2"
        assert format_value(RootForm(1, 7)) == "√7"
        assert format_value(RootForm(12, 1)) == "12"
        assert format_value(TrigValues(1.0, 0.0, None)) == "sin = 1, cos = 0, tan = undefined"

    def test_tuples(self):
        assert format_value((6, 36)) == "(6, 36)"
        assert format_value(()) == "()"


class TestTraceFormatting:
    def test_format_step(self):
        step = DerivationStep(2, "Volume.", "V = a³", "V = 2³", 8.0)
        assert format_step(step) == "2. Volume.\n   V = a³\n   V = 2³\n   = 8"

    def test_markdown_style(self):
        text = format_trace(solid("cube", a=2).trace, style="markdown")
        assert "`V = a³`" in text
        assert "**8**" in text

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            format_trace([], style="html")


class TestRenderResult:
    def test_human(self):
        text = render_result(quadratic(1, 0, 1))
        assert text.startswith("Result: 0 ± 1i")
        assert "Steps:" in text

    def test_human_error(self):
        text = render_result(linear_inequality("7 < 2x + 3"))
        assert text.startswith("Error [MALFORMED_INEQUALITY]")

    def test_special_case_is_shown(self):
        assert "Special case: neither-prime-nor-composite" in render_result(primality(1))

    def test_json(self):
        data = json.loads(render_result(linear_inequality("-2x + 3 > 7"), "json"))
        assert data["value"]["text"] == "x < -2"
        assert data["status"] == "ok"
