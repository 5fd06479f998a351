"""Tests for the dispatch façade and the operation registry."""

import logging
import unittest

import pytest

from stepcalc_pkg.dispatch import compute, operations, shapes
from stepcalc_pkg.engine import REGISTRY, lookup, operation
from stepcalc_pkg.types import (
    ComputationRequest,
    ComputationResult,
    Domain,
    Status,
    UnknownOperationError,
)

SAMPLE_REQUESTS = [
    ("number-theory", "gcd-lcm", {"a": "12", "b": "18"}),
    ("number-theory", "primality", {"n": "91"}),
    ("number-theory", "simplify-root", {"n": "72"}),
    ("number-theory", "prime-sieve", {"limit": "30"}),
    ("number-theory", "set-operation", {"a": "1 2 3", "b": "2 3 4", "operation": "union"}),
    ("number-theory", "base-convert", {"number": "255", "from_base": "10", "to_base": "16"}),
    ("number-theory", "sort-numbers", {"values": "5 1 99 42 -10"}),
    ("algebra", "quadratic", {"a": "1", "b": "-3", "c": "2"}),
    ("algebra", "logarithm", {"base": "10", "value": "1000"}),
    ("algebra", "exponential", {"base": "2", "target": "10"}),
    ("algebra", "permutation", {"n": "5", "r": "2"}),
    ("algebra", "combination", {"n": "5", "r": "2"}),
    ("algebra", "factorial", {"n": "6"}),
    ("algebra", "linear-inequality", {"expression": "-2x + 3 > 7"}),
    ("algebra", "logic-gate", {"gate": "xor", "x": "1", "y": "0"}),
    ("geometry", "calculate", {"shape": "cone", "r": "3", "h": "4"}),
    ("trigonometry", "normalize", {"angle": "-30"}),
    ("trigonometry", "to-radians", {"degrees": "90"}),
    ("trigonometry", "to-degrees", {"radians": "pi"}),
    ("trigonometry", "function", {"function": "tan", "angle": "30"}),
    ("trigonometry", "pythagorean-identities", {"angle": "40"}),
    ("trigonometry", "double-angle", {"angle": "40"}),
    ("trigonometry", "half-angle", {"angle": "40"}),
    ("trigonometry", "inverse", {"function": "atan", "value": "1"}),
    ("trigonometry", "pythagorean", {"a": "6", "b": "8"}),
    ("trigonometry", "right-triangle", {"adjacent": "2", "angle": "30"}),
    ("trigonometry", "triangle-sas", {"a": "2", "b": "3", "angle_c": "60"}),
    ("trigonometry", "triangle-aas", {"a": "2", "angle_a": "40", "angle_b": "60"}),
]


class TestCompute:
    @pytest.mark.parametrize("domain,name,inputs", SAMPLE_REQUESTS)
    def test_every_operation_succeeds_with_a_trace(self, domain, name, inputs):
        result = compute(ComputationRequest(domain, name, inputs))
        assert isinstance(result, ComputationResult)
        assert result.status is Status.OK, result.error_message
        assert result.trace
        assert [s.ordinal for s in result.trace] == list(range(1, len(result.trace) + 1))
        assert result.trace[-1].partial_result == result.value
        assert result.domain is Domain.parse(domain)
        assert result.operation == name

    @pytest.mark.parametrize("domain,name,inputs", SAMPLE_REQUESTS)
    def test_results_are_deterministic(self, domain, name, inputs):
        first = compute(ComputationRequest(domain, name, inputs))
        second = compute(ComputationRequest(domain, name, inputs))
        assert first == second

    def test_non_ok_results_carry_no_value(self):
        result = compute(ComputationRequest("algebra", "logarithm", {"base": "1", "value": "5"}))
        assert result.status is Status.DOMAIN_ERROR
        assert result.value is None
        assert result.error_message

    def test_unknown_operation_raises(self):
        with pytest.raises(UnknownOperationError):
            compute(ComputationRequest("algebra", "integrate", {}))

    def test_every_sample_covers_the_registry(self):
        sampled = {(Domain.parse(d), n) for d, n, _ in SAMPLE_REQUESTS}
        assert sampled == set(REGISTRY)


class TestRequest(unittest.TestCase):
    def test_domain_parsing(self):
        self.assertIs(Domain.parse("NUMBER_THEORY"), Domain.NUMBER_THEORY)
        self.assertIs(Domain.parse("Trigonometry"), Domain.TRIGONOMETRY)
        with self.assertRaises(ValueError):
            Domain.parse("calculus")

    def test_inputs_are_read_only(self):
        source = {"a": "1"}
        request = ComputationRequest("number-theory", "GCD-LCM", source)
        source["a"] = "2"
        self.assertEqual(request.inputs["a"], "1")
        self.assertEqual(request.operation, "gcd-lcm")
        with self.assertRaises(TypeError):
            request.inputs["a"] = "3"

    def test_result_to_dict_is_json_friendly(self):
        result = compute(ComputationRequest("algebra", "linear-inequality", {"expression": "3x - 1 <= 1"}))
        data = result.to_dict()
        self.assertTrue(data["ok"])
        self.assertEqual(data["value"]["boundary"], "2/3")
        self.assertEqual(data["value"]["text"], "x <= 2/3")
        self.assertEqual(data["trace"][0]["ordinal"], 1)


class TestRegistry:
    def test_operations_listing(self):
        listed = operations()
        assert len(listed) == len(REGISTRY) == 28
        assert [s.name for s in operations(Domain.GEOMETRY)] == ["calculate"]
        assert all(s.summary for s in listed if s.name not in ("to-radians", "to-degrees"))

    def test_lookup_unknown_domain(self):
        with pytest.raises(ValueError):
            lookup("calculus", "derivative")

    def test_shapes_reexported(self):
        assert "frustum" in shapes()


@pytest.fixture
def scratch_operation():
    registered = []

    def register(name, func, **kwargs):
        wrapped = operation(Domain.ALGEBRA, name, **kwargs)(func)
        registered.append((Domain.ALGEBRA, name))
        return wrapped

    yield register
    for key in registered:
        REGISTRY.pop(key, None)


class TestOperationDecorator:
    def test_internal_fault_propagates_and_is_logged(self, scratch_operation, caplog):
        def broken(inputs, trace):
            raise RuntimeError("boom")

        run = scratch_operation("scratch-broken", broken)
        with caplog.at_level(logging.ERROR, logger="stepcalc"):
            with pytest.raises(RuntimeError):
                run({})
        assert "scratch-broken" in caplog.text

    def test_partial_trace_survives_errors(self, scratch_operation):
        from stepcalc_pkg.types import MathDomainError

        def half_done(inputs, trace):
            trace.add("first step")
            raise MathDomainError("nope", "UNDEFINED")

        result = scratch_operation("scratch-half", half_done)({})
        assert result.status is Status.DOMAIN_ERROR
        assert [s.narrative for s in result.trace] == ["first step"]

    def test_final_step_appended_when_missing(self, scratch_operation):
        result = scratch_operation("scratch-plain", lambda inputs, trace: 42)({})
        assert result.value == 42
        assert result.trace[-1].narrative == "Final result."

    def test_duplicate_registration_rejected(self, scratch_operation):
        scratch_operation("scratch-dup", lambda inputs, trace: 1)
        with pytest.raises(ValueError):
            operation(Domain.ALGEBRA, "scratch-dup")(lambda inputs, trace: 2)
