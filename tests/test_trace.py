"""Tests for the derivation trace builder."""

from fractions import Fraction

import pytest
import sympy as sp

from stepcalc_pkg import config
from stepcalc_pkg.trace import TraceBuilder, show, substitute


class TestShow:
    def test_ints_are_never_rounded(self):
        assert show(12345678901234567890) == "12345678901234567890"

    def test_floats_rounded_and_trimmed(self):
        assert show(3.14159265358979, 4) == "3.1416"
        assert show(2.5, 6) == "2.5"
        assert show(8.0, 6) == "8"

    def test_negative_zero(self):
        assert show(-0.0000001, 3) == "0"

    def test_fraction_and_sympy(self):
        assert show(Fraction(3, 4)) == "3/4"
        assert show(Fraction(4, 2)) == "2"
        assert show(sp.Rational(-1, 3)) == "-1/3"
        assert show(sp.sqrt(2), 3) == "1.414"

    def test_default_precision_follows_config(self, monkeypatch):
        monkeypatch.setattr(config, "OUTPUT_PRECISION", 2)
        assert show(1 / 3) == "0.33"


class TestSubstitute:
    def test_keeps_target_name(self):
        assert substitute("V = π·r²·h", {"r": 3, "h": 4}) == "V = π·3²·4"

    def test_longer_names_first(self):
        text = substitute("x = r1 + r", {"r": 1, "r1": 2})
        assert text == "x = 2 + 1"

    def test_negative_values_parenthesized(self):
        assert substitute("Δ = b² − 4ac", {"b": -3}) == "Δ = (-3)² − 4ac"

    def test_whole_formula_when_lhs_is_not_a_name(self):
        assert substitute("GCD(a, b) = GCD(b, a mod b)", {"a": 48, "b": 18}) == (
            "GCD(48, 18) = GCD(18, 48 mod 18)"
        )


class TestTraceBuilder:
    def test_ordinals_are_contiguous(self):
        trace = TraceBuilder()
        trace.add("one")
        trace.add("two", formula="y = x", values={"x": 1})
        trace.add("three", partial_result=3)
        assert [s.ordinal for s in trace.steps] == [1, 2, 3]
        assert trace.steps[1].substitution == "y = 1"
        assert trace.last.partial_result == 3
        assert len(trace) == 3

    def test_explicit_substitution_wins(self):
        trace = TraceBuilder()
        step = trace.add("n", formula="a + b", values={"a": 1}, substitution="custom")
        assert step.substitution == "custom"

    def test_steps_are_immutable_snapshot(self):
        trace = TraceBuilder()
        trace.add("one")
        snapshot = trace.steps
        trace.add("two")
        assert len(snapshot) == 1
        with pytest.raises(AttributeError):
            snapshot[0].narrative = "changed"

    def test_first_degenerate_case_sticks(self):
        trace = TraceBuilder()
        trace.mark_degenerate("first", "special")
        trace.mark_degenerate("second", "another")
        assert trace.degenerate_case == "first"
        assert len(trace) == 2

    def test_rounding_note_mentions_precision(self):
        trace = TraceBuilder(precision=4)
        step = trace.note_rounding()
        assert "4 fractional digits" in step.narrative
        assert trace.show(1 / 3) == "0.3333"
