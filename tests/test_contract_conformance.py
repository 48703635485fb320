"""Contract conformance tests.

These tests are *driven by* the contract: they iterate over every
postcondition, error condition, and algebraic property defined in
``contract.build_contract`` and verify the implementation satisfies them.

If the contract changes (e.g. a new postcondition is added), these tests
automatically cover it.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings, assume
from hypothesis.strategies import integers, sampled_from

from biginteger import BigInteger
from contract import SHIFT_LIMIT, build_contract

CONTRACT = build_contract()

signed = integers(min_value=-(10 ** 80), max_value=10 ** 80)
amounts = integers(min_value=-200, max_value=200)
bases = sampled_from([2, 3, 10, 16, 36, 37, 100, -2, -7, -10, -100])

ARITHMETIC = ["add", "subtract", "multiply", "divide", "mod", "and", "or", "xor", "compare"]


def _check_postconditions(op_name: str, a: int, b: int) -> None:
    op = CONTRACT.operations[op_name]
    result = op.invoke(a, b)
    for post in op.postconditions:
        assert post.check(a, b, result), (
            f"Postcondition '{post.name}' failed: {op_name}({a}, {b}) = {result}"
        )


# ===================================================================
# POSTCONDITIONS (property-based)
# ===================================================================

class TestPostconditions:
    """Every postcondition in the contract holds for random inputs."""

    @given(op_name=sampled_from(ARITHMETIC), a=signed, b=signed)
    @settings(max_examples=500)
    def test_arithmetic_postconditions(self, op_name, a, b):
        assume(b != 0 or op_name not in ("divide", "mod"))
        _check_postconditions(op_name, a, b)

    @given(op_name=sampled_from(["shift_left", "shift_right"]), a=signed, n=amounts)
    @settings(max_examples=300)
    def test_shift_postconditions(self, op_name, a, n):
        _check_postconditions(op_name, a, n)

    @given(a=signed, base=bases)
    @settings(max_examples=300)
    def test_format_postconditions(self, a, base):
        _check_postconditions("format", a, base)


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition in the contract triggers correctly."""

    @pytest.mark.parametrize("op_name", ["divide", "mod"])
    @pytest.mark.parametrize("a", [0, 1, -1, 10 ** 40, -(10 ** 40)])
    def test_division_by_zero(self, op_name, a):
        op = CONTRACT.operations[op_name]
        for ec in op.error_conditions:
            assert ec.trigger(a, 0)
            with pytest.raises(ec.exception):
                op.invoke(a, 0)

    @pytest.mark.parametrize("op_name", ["shift_left", "shift_right"])
    @pytest.mark.parametrize("n", [SHIFT_LIMIT + 1, -(SHIFT_LIMIT + 1), 10 ** 30])
    def test_shift_out_of_range(self, op_name, n):
        op = CONTRACT.operations[op_name]
        for ec in op.error_conditions:
            assert ec.trigger(7, n)
            with pytest.raises(ec.exception):
                op.invoke(7, n)

    @pytest.mark.parametrize("a", [1, -1, 10 ** 40])
    def test_base_zero(self, a):
        op = CONTRACT.operations["format"]
        for ec in op.error_conditions:
            assert ec.trigger(a, 0)
            with pytest.raises(ec.exception):
                op.invoke(a, 0)

    def test_base_zero_accepts_zero(self):
        op = CONTRACT.operations["format"]
        assert not any(ec.trigger(0, 0) for ec in op.error_conditions)
        assert op.invoke(0, 0) == "0"


# ===================================================================
# ALGEBRAIC PROPERTIES (property-based)
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property in the contract holds for random inputs."""

    @given(a=signed, b=signed)
    @settings(max_examples=300)
    def test_binary_properties(self, a, b):
        for op_name, prop in CONTRACT.all_properties:
            if prop.arity != 2:
                continue
            assert prop.check(BigInteger(a), BigInteger(b)), (
                f"Property '{prop.name}' failed for {op_name}({a}, {b})"
            )

    @given(a=signed)
    @settings(max_examples=300)
    def test_unary_properties(self, a):
        for op_name, prop in CONTRACT.all_properties:
            if prop.arity != 1:
                continue
            assert prop.check(BigInteger(a)), (
                f"Property '{prop.name}' failed for {op_name}({a})"
            )


# ===================================================================
# EXHAUSTIVE VERIFICATION (small values)
# ===================================================================

class TestExhaustive:
    """For small values, check *every* input pair against postconditions."""

    VALUES = range(-16, 17)

    @pytest.mark.parametrize("op_name", ARITHMETIC)
    def test_all_pairs(self, op_name):
        checked = 0
        for a in self.VALUES:
            for b in self.VALUES:
                if b == 0 and op_name in ("divide", "mod"):
                    continue
                _check_postconditions(op_name, a, b)
                checked += 1
        if op_name in ("divide", "mod"):
            assert checked == 33 * 32
        else:
            assert checked == 33 * 33

    def test_all_pairs_format(self):
        for a in self.VALUES:
            for base in (-16, -3, -2, -1, 1, 2, 3, 16):
                _check_postconditions("format", a, base)
