"""Property-based tests using Hypothesis.

These verify relationships that must hold for *all* bases and exponents
of a kind.  They complement the white-box tests by exploring the input
space broadly, including the 32- and 64-bit kinds the factory only
samples.
"""
from __future__ import annotations

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from bindings import power
from contracts import reference_product
from engine import checked_pow, pow
from integers import I8, I16, I32, I64, INT_KINDS, U8, U32, U64, USIZE, IntKind


def values(kind: IntKind):
    """Hypothesis strategy for ints within a kind."""
    return st.integers(min_value=kind.lo, max_value=kind.hi)


small_bases = st.integers(min_value=-40, max_value=40)
exponents = st.integers(min_value=0, max_value=70)


# ===================================================================
# UNCHECKED
# ===================================================================

class TestPowProperties:

    @pytest.mark.parametrize("kind", [I8, U8, I32, U64])
    @given(data=st.data())
    def test_zero_exponent_is_identity(self, kind, data):
        b = data.draw(values(kind))
        assert pow(kind(b), 0) == 1

    @pytest.mark.parametrize("kind", [I8, U8, I32, U64])
    @given(data=st.data())
    def test_unit_exponent_is_base(self, kind, data):
        b = data.draw(values(kind))
        assert pow(kind(b), 1) == b

    @given(b=small_bases, e=exponents)
    @settings(max_examples=300)
    def test_repeated_product_i64(self, b, e):
        expected = reference_product(b, e)
        if I64.contains(expected):
            assert pow(I64(b), e) == expected
        else:
            with pytest.raises(OverflowError):
                pow(I64(b), e)

    @given(b=values(I16), e=st.integers(min_value=0, max_value=20))
    @settings(max_examples=300)
    def test_wrapping_is_product_mod_width(self, b, e):
        assert pow(I16.wrapping(b), e) == I16.wrap(reference_product(b, e))

    @given(b=st.integers(min_value=-(10**6), max_value=10**6), e=exponents)
    def test_python_ints_exact(self, b, e):
        assert pow(b, e) == b**e

    @given(
        b=st.integers(min_value=-12, max_value=12),
        e1=st.integers(min_value=0, max_value=12),
        e2=st.integers(min_value=0, max_value=12),
    )
    def test_composition(self, b, e1, e2):
        assert pow(pow(b, e1), e2) == pow(b, e1 * e2)

    @given(b=small_bases, e=st.integers(min_value=0, max_value=40))
    def test_composition_in_kind(self, b, e):
        assume(I64.contains(reference_product(b, 2 * e)))
        assert pow(pow(I64(b), e), 2) == pow(I64(b), 2 * e)


# ===================================================================
# CHECKED
# ===================================================================

class TestCheckedPowProperties:

    @pytest.mark.parametrize("kind", INT_KINDS)
    @given(b=small_bases, e=exponents)
    @settings(max_examples=100)
    def test_exact_or_none(self, kind, b, e):
        assume(kind.contains(b))
        expected = reference_product(b, e)
        result = checked_pow(kind(b), e)
        if kind.contains(expected):
            assert result == expected
        else:
            assert result is None

    @given(b=values(I32), e=exponents)
    def test_none_exactly_when_pow_raises(self, b, e):
        result = checked_pow(I32(b), e)
        if result is None:
            with pytest.raises(OverflowError):
                pow(I32(b), e)
        else:
            assert pow(I32(b), e) == result

    @given(b=values(U32), e=exponents)
    def test_native_agrees(self, b, e):
        result = checked_pow(U32(b), e)
        if result is None:
            with pytest.raises(OverflowError):
                U32(b).pow(e)
        else:
            assert U32(b).pow(e) == result


# ===================================================================
# OPERATOR
# ===================================================================

class TestOperatorProperties:

    @given(b=values(U8), e=st.integers(min_value=0, max_value=255))
    def test_operator_matches_engine(self, b, e):
        expected = checked_pow(U8(b), e)
        for exp_kind in (U8, USIZE):
            if expected is None:
                with pytest.raises(OverflowError):
                    power(U8(b), exp_kind(e))
            else:
                assert power(U8(b), exp_kind(e)) == expected
