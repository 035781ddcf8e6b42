"""
Tests for the verified power factory.

The factory must hand out correct Exponentiators for every kind, and
must refuse to hand out a broken one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from exponentiator import Exponentiator
from factory import (
    PowFactory,
    VerificationError,
    VerificationReport,
    VerificationResult,
    _generate_samples,
    edge_bases,
    edge_exponents,
    exponent_domain,
)
from integers import I8, I16, I64, U8, U16, U64


# ---------------------------------------------------------------------------
# Broken implementations the factory must reject
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OffByOneExponentiator(Exponentiator):
    """Multiplies one time too few."""

    def pow(self, base: int, exp: int) -> int:
        if exp == 0:
            return 1
        return super().pow(base, exp - 1) * (base if exp == 1 else 1)


@dataclass(frozen=True)
class SilentOverflowExponentiator(Exponentiator):
    """Wraps where it should report overflow."""

    def checked_pow(self, base: int, exp: int) -> int | None:
        return self.wrapping_pow(base, exp)


@dataclass(frozen=True)
class CrashingExponentiator(Exponentiator):
    def native_pow(self, base: int, exp: int) -> int:
        raise ZeroDivisionError("boom")


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestFactoryCreate:

    @pytest.mark.parametrize("kind", [I8, U8])
    def test_exhaustive_kinds(self, kind):
        ex = PowFactory.create(kind)
        assert isinstance(ex, Exponentiator)
        assert ex.kind is kind
        assert ex.pow(2, 4) == 16

    @pytest.mark.parametrize("kind", [I16, U16, I64, U64])
    def test_sampled_kinds(self, kind):
        ex = PowFactory.create(kind)
        assert ex.checked_pow(3, 4) == 81
        assert ex.checked_pow(2, kind.bits) is None

    def test_uses_supplied_registry(self, registry):
        ex = PowFactory.create(U8, registry)
        assert ex.registry is registry

    def test_logs_verification(self, caplog):
        with caplog.at_level(logging.INFO, logger="factory"):
            PowFactory.create(U8)
        assert "verified u8" in caplog.text


class TestVerify:

    def test_report_covers_every_property(self):
        report = PowFactory.verify(Exponentiator(I8))
        names = [r.property_name for r in report.results]
        assert "pow.repeated_product" in names
        assert "checked_pow.agrees_with_pow" in names
        assert "wrapping_pow.agrees_when_in_bounds" in names
        assert report.passed
        assert report.tests_run > 0

    def test_exhaustive_counts(self):
        report = PowFactory.verify(Exponentiator(U8))
        by_name = {r.property_name: r for r in report.results}
        n_exp = len(exponent_domain(U8))
        assert by_name["pow.zero_exponent"].tests_run == 256
        assert by_name["pow.repeated_product"].tests_run == 256 * n_exp
        assert by_name["pow.composition"].tests_run == 256 * n_exp * n_exp

    def test_sample_count(self):
        report = PowFactory.verify(Exponentiator(I64))
        by_name = {r.property_name: r for r in report.results}
        assert by_name["pow.repeated_product"].tests_run == PowFactory.SAMPLE_COUNT


# ---------------------------------------------------------------------------
# Rejection
# ---------------------------------------------------------------------------

class TestFactoryRejects:

    def test_off_by_one_rejected(self):
        report = PowFactory.verify(OffByOneExponentiator(I8))
        assert not report.passed
        failed = {r.property_name for r in report.results if not r.passed}
        assert "pow.repeated_product" in failed

    def test_silent_overflow_rejected(self):
        report = PowFactory.verify(SilentOverflowExponentiator(I8))
        failed = [r for r in report.results if not r.passed]
        assert [r.property_name for r in failed] == ["checked_pow.agrees_with_pow"]
        assert failed[0].counterexample is not None

    def test_exception_recorded(self):
        report = PowFactory.verify(CrashingExponentiator(U8))
        failed = next(r for r in report.results if not r.passed)
        assert failed.property_name == "pow.native_agreement"
        assert failed.error == "ZeroDivisionError: boom"
        assert failed.tests_run == 1

    def test_create_raises_verification_error(self, monkeypatch):
        monkeypatch.setattr("factory.Exponentiator", OffByOneExponentiator)
        with pytest.raises(VerificationError) as info:
            PowFactory.create(I8)
        assert not info.value.report.passed
        assert "Verification failed" in str(info.value)


# ---------------------------------------------------------------------------
# Reports and inputs
# ---------------------------------------------------------------------------

class TestReports:

    def test_result_repr(self):
        ok = VerificationResult("pow.unit_exponent", True, tests_run=3)
        bad = VerificationResult("pow.unit_exponent", False, (5,), tests_run=1)
        assert repr(ok) == "[PASS] pow.unit_exponent (3 tests)"
        assert repr(bad) == "[FAIL] pow.unit_exponent (1 tests)  counterexample=(5,)"

    def test_summary(self):
        report = VerificationReport("i8")
        report.results.append(VerificationResult("a", True, tests_run=1))
        report.results.append(VerificationResult("b", False, (1, 2), tests_run=2))
        text = report.summary()
        assert text.startswith("--- i8 ---")
        assert text.endswith("=> FAILED")
        assert report.tests_run == 3


class TestInputs:

    def test_exponent_domain(self):
        domain = exponent_domain(I8)
        assert domain[:10] == list(range(10))
        assert domain[-2:] == [16, 33]

    def test_edge_values(self):
        assert edge_bases(U8) == [0, 1, 2, 3, 254, 255]
        assert edge_bases(I8) == [-128, -127, -3, -2, -1, 0, 1, 2, 3, 126, 127]
        assert edge_exponents(I64) == [0, 1, 2, 3, 32, 63, 64, 65]

    def test_samples_are_deterministic_and_in_range(self):
        first = _generate_samples(I16, ("base", "exponent"), exponent_domain(I16), 300, 7)
        second = _generate_samples(I16, ("base", "exponent"), exponent_domain(I16), 300, 7)
        assert first == second
        assert len(first) == 300
        for b, e in first:
            assert I16.contains(b)
            assert e in exponent_domain(I16)
