"""Tests for the number-theory operations."""

import math
from fractions import Fraction
from math import prod

import pytest

from stepcalc_pkg.number_theory import (
    base_convert,
    format_factorization,
    gcd_lcm,
    prime_sieve,
    primality,
    set_operation,
    simplify_root,
    sort_numbers,
)
from stepcalc_pkg.primitives import is_prime
from stepcalc_pkg.types import PrimalityReport, RootForm, Status


def _ordinals_contiguous(result):
    return [s.ordinal for s in result.trace] == list(range(1, len(result.trace) + 1))


class TestGcdLcm:
    def test_basic(self):
        result = gcd_lcm({"a": "48", "b": "18"})
        assert result.ok
        assert result.value == (6, 144)
        assert _ordinals_contiguous(result)

    def test_every_reduction_is_traced(self):
        result = gcd_lcm({"a": 48, "b": 18})
        reductions = [s for s in result.trace if s.narrative.startswith("Reduce")]
        assert [s.partial_result for s in reductions] == [12, 6, 0]

    @pytest.mark.parametrize("a,b", [(1, 1), (12, 18), (17, 5), (2**61 - 1, 2**31 - 1), (10**18, 6)])
    def test_gcd_times_lcm_is_product(self, a, b):
        g, l = gcd_lcm({"a": a, "b": b}).value
        assert g * l == a * b

    def test_rejects_non_positive(self):
        result = gcd_lcm({"a": "0", "b": "5"})
        assert result.status is Status.INVALID_INPUT
        assert result.error_code == "NOT_POSITIVE"

    def test_rejects_text(self):
        result = gcd_lcm({"a": "twelve", "b": "5"})
        assert result.status is Status.INVALID_INPUT
        assert result.value is None

    def test_missing_and_unexpected_parameters(self):
        assert gcd_lcm({"a": 4}).error_code == "MISSING_PARAMETER"
        assert gcd_lcm({"a": 4, "b": 6, "c": 1}).error_code == "UNEXPECTED_PARAMETER"


class TestPrimality:
    def test_one_is_neither(self):
        result = primality({"n": 1})
        assert result.ok
        assert result.value == PrimalityReport(1, False, ())
        assert result.degenerate_case == "neither-prime-nor-composite"

    def test_prime(self):
        result = primality({"n": 97})
        assert result.value.is_prime
        assert result.value.factors == ((97, 1),)
        assert result.degenerate_case is None

    def test_composite_factorization(self):
        result = primality({"n": "360"})
        assert result.value == PrimalityReport(360, False, ((2, 3), (3, 2), (5, 1)))
        assert "2³·3²·5" in result.trace[-1].narrative

    def test_agrees_with_trial_division(self):
        for n in range(2, 10001, 37):
            report = primality({"n": n}).value
            assert report.is_prime == is_prime(n)
            assert prod(p**e for p, e in report.factors) == n

    def test_every_n_to_10000_matches_naive_division(self):
        for n in range(2, 10001):
            expected = all(n % d for d in range(2, n))
            assert primality({"n": n}).value.is_prime is expected, n

    def test_too_large(self):
        result = primality({"n": 10**13})
        assert result.status is Status.INVALID_INPUT
        assert result.error_code == "TOO_LARGE"


class TestSimplifyRoot:
    @pytest.mark.parametrize(
        "n,expected",
        [(72, RootForm(6, 2)), (50, RootForm(5, 2)), (7, RootForm(1, 7)), (144, RootForm(12, 1))],
    )
    def test_known_values(self, n, expected):
        assert simplify_root({"n": n}).value == expected

    def test_round_trip_and_square_free(self):
        for n in range(1, 500):
            c, m = simplify_root({"n": n}).value
            assert c * c * m == n
            assert all(m % (k * k) for k in range(2, int(m**0.5) + 1))

    def test_zero(self):
        result = simplify_root({"n": 0})
        assert result.value == RootForm(0, 0)
        assert result.degenerate_case == "zero-radicand"

    def test_negative_is_domain_error(self):
        result = simplify_root({"n": -8})
        assert result.status is Status.DOMAIN_ERROR
        assert result.error_code == "NEGATIVE_RADICAND"


class TestSieveSetsBases:
    def test_sieve(self):
        assert prime_sieve({"limit": 20}).value == (2, 3, 5, 7, 11, 13, 17, 19)

    def test_sieve_empty_range(self):
        result = prime_sieve({"limit": 1})
        assert result.value == ()
        assert result.degenerate_case == "empty-range"

    def test_sieve_limit(self):
        assert prime_sieve({"limit": 10**6}).error_code == "TOO_LARGE"

    @pytest.mark.parametrize(
        "kind,expected",
        [("union", (1, 2, 3, 4, 5)), ("intersection", (3,)), ("difference", (1, 2))],
    )
    def test_set_operations(self, kind, expected):
        result = set_operation({"a": "3, 1, 2, 2", "b": "5 4 3", "operation": kind})
        assert result.value == expected

    def test_unknown_set_operation(self):
        result = set_operation({"a": "1", "b": "2", "operation": "xor"})
        assert result.error_code == "UNKNOWN_CHOICE"

    def test_base_convert(self):
        assert base_convert({"number": "255", "from_base": 10, "to_base": 16}).value == "FF"
        assert base_convert({"number": "ff", "from_base": 16, "to_base": 2}).value == "11111111"
        assert base_convert({"number": "0", "from_base": 10, "to_base": 2}).value == "0"
        assert base_convert({"number": "-10", "from_base": 10, "to_base": 2}).value == "-1010"

    def test_base_convert_letters_are_digits(self):
        result = base_convert({"number": "OPEN", "from_base": 36, "to_base": 10})
        assert result.ok, result.error_message
        assert result.value == "1152671"
        assert base_convert({"number": "1152671", "from_base": 10, "to_base": 36}).value == "OPEN"

    def test_base_convert_bad_digit(self):
        result = base_convert({"number": "129", "from_base": 2, "to_base": 10})
        assert result.error_code == "NOT_A_NUMBER"


def test_format_factorization():
    assert format_factorization([(2, 3), (3, 2), (5, 1)]) == "2³·3²·5"
    assert format_factorization([(7, 12)]) == "7¹²"


class TestSortNumbers:
    def test_ascending(self):
        result = sort_numbers({"values": "5 1 99 42 -10"})
        assert result.value == (-10, 1, 5, 42, 99)
        assert "-10 ≤ 1 ≤ 5 ≤ 42 ≤ 99" in [s.substitution for s in result.trace]

    def test_descending(self):
        result = sort_numbers({"values": "3, 1, 2", "order": "descending"})
        assert result.value == (3, 2, 1)
        assert result.trace[-1].narrative == "Reverse for descending order."

    def test_mixed_exact_and_irrational(self):
        value = sort_numbers({"values": "sqrt(2) 1/2 -0.25 pi"}).value
        assert value[:2] == (Fraction(-1, 4), Fraction(1, 2))
        assert value[2:] == pytest.approx((math.sqrt(2), math.pi))

    def test_repeats_are_kept(self):
        result = sort_numbers({"values": [4, 1, 4, 1]})
        assert result.value == (1, 1, 4, 4)
        assert any("repeated" in s.narrative for s in result.trace)

    def test_single_value(self):
        result = sort_numbers({"values": "7"})
        assert result.value == (7,)
        assert result.degenerate_case == "single-value"

    @pytest.mark.parametrize("values,code", [("1 two 3", "NOT_A_NUMBER"), (",", "EMPTY_INPUT")])
    def test_invalid(self, values, code):
        result = sort_numbers({"values": values})
        assert result.status is Status.INVALID_INPUT
        assert result.error_code == code
