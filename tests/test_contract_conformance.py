"""Contract conformance tests.

These tests are *driven by* the contract: they iterate over every
postcondition, error condition, and algebraic property defined in
``contracts.build_contract`` and verify the engines satisfy them.

If the contract changes (e.g. a new postcondition is added), these tests
automatically cover it.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers

from contracts import (
    CONTRACTS,
    ENGINE_BRANCHES,
    build_contract,
    multiplication_bound,
    reference_product,
)
from exponentiator import Exponentiator
from factory import exponent_domain
from integers import I8, I32, INT_KINDS

# ---------------------------------------------------------------------------
# Configuration - i8 so exhaustive checks are fast
# ---------------------------------------------------------------------------

KIND = I8
CONTRACT = build_contract(KIND)
EX = Exponentiator(KIND)
EXPONENTS = exponent_domain(KIND)
bounded = integers(min_value=KIND.lo, max_value=KIND.hi)
exponent = integers(min_value=0, max_value=EXPONENTS[-1])


def _valid(op_name: str, b: int, e: int) -> bool:
    return not any(
        ec.trigger(b, e) for ec in CONTRACT.operations[op_name].error_conditions
    )


# ===================================================================
# HELPERS
# ===================================================================

class TestHelpers:

    def test_reference_product(self):
        assert reference_product(3, 0) == 1
        assert reference_product(0, 0) == 1
        assert reference_product(-2, 7) == -128
        assert reference_product(7, 8) == 5_764_801

    def test_multiplication_bound(self):
        assert multiplication_bound(1) == 1
        assert multiplication_bound(2) == 3
        assert multiplication_bound(255) == 15
        assert multiplication_bound(256) == 17

    def test_contracts_for_every_kind(self):
        assert set(CONTRACTS) == set(INT_KINDS)
        assert CONTRACTS[I32].kind is I32

    def test_branch_ids_unique(self):
        ids = [b.id for b in ENGINE_BRANCHES]
        assert len(ids) == len(set(ids))
        assert CONTRACT.branches is ENGINE_BRANCHES


# ===================================================================
# POSTCONDITIONS - property-based
# ===================================================================

class TestPostconditions:
    """Every postcondition holds for random valid inputs."""

    @pytest.mark.parametrize("op_name", ["pow", "checked_pow", "wrapping_pow"])
    @given(b=bounded, e=exponent)
    @settings(max_examples=300)
    def test_postconditions(self, op_name, b, e):
        if not _valid(op_name, b, e):
            return
        result = getattr(EX, op_name)(b, e)
        for post in CONTRACT.operations[op_name].postconditions:
            assert post.check(b, e, result), (
                f"Postcondition '{post.name}' failed: {op_name}({b}, {e}) = {result}"
            )


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition triggers the declared exception."""

    @pytest.mark.parametrize("op_name", ["pow", "checked_pow", "wrapping_pow"])
    def test_error_conditions(self, op_name):
        op = getattr(EX, op_name)
        bases = [KIND.lo - 1, -3, 0, 2, 7, 16, KIND.hi, KIND.hi + 1]
        for b in bases:
            for e in [-1, *EXPONENTS]:
                for ec in CONTRACT.operations[op_name].error_conditions:
                    if ec.trigger(b, e):
                        with pytest.raises(ec.exception):
                            op(b, e)

    def test_overflow_error_triggers(self):
        overflow = next(
            ec for ec in CONTRACT.operations["pow"].error_conditions
            if ec.name == "overflow_error"
        )
        assert overflow.trigger(7, 8)
        assert not overflow.trigger(-2, 7)
        assert not overflow.trigger(200, 1)


# ===================================================================
# ALGEBRAIC PROPERTIES - property-based
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property holds for random inputs."""

    @given(data=integers(min_value=0, max_value=2**32))
    @settings(max_examples=200)
    def test_properties(self, data):
        for op_name, prop in CONTRACT.all_properties:
            combo = []
            seed = data
            for name in prop.inputs:
                if name == "base":
                    combo.append(KIND.lo + seed % KIND.width)
                    seed //= KIND.width
                else:
                    combo.append(EXPONENTS[seed % len(EXPONENTS)])
                    seed //= len(EXPONENTS)
            assert prop.check(EX, *combo), (
                f"Property '{prop.name}' failed for {op_name}{tuple(combo)}"
            )


# ===================================================================
# EXHAUSTIVE VERIFICATION - i8
# ===================================================================

class TestExhaustive:
    """For i8, check *every* base against every exponent in the domain."""

    @pytest.mark.parametrize("op_name", ["pow", "checked_pow", "wrapping_pow"])
    def test_all_pairs(self, op_name):
        op = getattr(EX, op_name)
        checked = 0
        for b in KIND.all_values():
            for e in EXPONENTS:
                checked += 1
                if not _valid(op_name, b, e):
                    continue
                result = op(b, e)
                for post in CONTRACT.operations[op_name].postconditions:
                    assert post.check(b, e, result)
        assert checked == KIND.width * len(EXPONENTS)

    def test_exhaustive_pair_count(self):
        """Sanity: confirm the expected number of pairs."""
        assert KIND.width == 256
        assert len(EXPONENTS) == 12
