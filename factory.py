"""
The verified power factory.

The factory does NOT just construct an Exponentiator - it *verifies* it
against the power contract before releasing it.

Flow:
  1. Caller requests an Exponentiator for an integer kind.
  2. Factory builds the implementation.
  3. Factory runs every algebraic property of the contract against it.
  4. If verification passes  -> return the Exponentiator.
     If verification fails   -> raise, never hand out a broken instance.

For 8-bit kinds every base is checked against every exponent in
``exponent_domain``; wider kinds are checked on edge values plus a seeded
random sample.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field

from contracts import AlgebraicProperty, PowContract, build_contract
from exponentiator import Exponentiator
from integers import IntKind
from ops import PowRegistry

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one property."""

    property_name: str
    passed: bool
    counterexample: tuple | None = None
    error: str | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        err = f"  error={self.error}" if self.error else ""
        return f"[{status}] {self.property_name} ({self.tests_run} tests){ce}{err}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying a whole contract."""

    kind_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.kind_name} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when an implementation fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# Input domains
# ---------------------------------------------------------------------------

def exponent_domain(kind: IntKind) -> list[int]:
    """Exponents worth checking: every overflow boundary plus a few large ones."""
    return list(range(kind.bits + 2)) + [2 * kind.bits, 4 * kind.bits + 1]


def edge_exponents(kind: IntKind) -> list[int]:
    candidates = [0, 1, 2, 3, kind.bits // 2, kind.bits - 1, kind.bits, kind.bits + 1]
    return sorted(set(candidates))


def edge_bases(kind: IntKind) -> list[int]:
    candidates = [
        kind.lo, kind.lo + 1, -3, -2, -1, 0, 1, 2, 3, kind.hi - 1, kind.hi,
    ]
    return sorted({v for v in candidates if kind.contains(v)})


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class PowFactory:
    """Produces Exponentiator instances that are proven against the contract."""

    EXHAUSTIVE_THRESHOLD = 256  # max kind width for brute-force check
    SAMPLE_COUNT = 500
    SEED = 0

    @classmethod
    def create(
        cls, kind: IntKind, registry: PowRegistry | None = None
    ) -> Exponentiator:
        """Build, verify, and return an Exponentiator."""
        ex = Exponentiator(kind) if registry is None else Exponentiator(kind, registry)
        report = cls.verify(ex)
        if not report.passed:
            logger.warning("verification of %s failed", kind.name)
            raise VerificationError(report)
        logger.info(
            "verified %s: %d properties, %d checks",
            kind.name, len(report.results), report.tests_run,
        )
        return ex

    @classmethod
    def verify(
        cls, ex: Exponentiator, contract: PowContract | None = None
    ) -> VerificationReport:
        if contract is None:
            contract = build_contract(ex.kind)
        report = VerificationReport(kind_name=ex.kind.name)
        for op_name, prop in contract.all_properties:
            result = cls._verify_property(prop, ex)
            result.property_name = f"{op_name}.{prop.name}"
            report.results.append(result)
        return report

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_property(
        cls, prop: AlgebraicProperty, ex: Exponentiator
    ) -> VerificationResult:
        tests_run = 0
        for combo in cls._inputs(prop, ex.kind):
            tests_run += 1
            try:
                ok = prop.check(ex, *combo)
            except (ArithmeticError, ValueError, TypeError) as e:
                return VerificationResult(
                    property_name=prop.name,
                    passed=False,
                    counterexample=combo,
                    error=f"{type(e).__name__}: {e}",
                    tests_run=tests_run,
                )
            if not ok:
                return VerificationResult(
                    property_name=prop.name,
                    passed=False,
                    counterexample=combo,
                    tests_run=tests_run,
                )

        return VerificationResult(
            property_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )

    @classmethod
    def _inputs(cls, prop: AlgebraicProperty, kind: IntKind):
        exponents = exponent_domain(kind)

        if kind.width <= cls.EXHAUSTIVE_THRESHOLD:
            domains = [
                kind.all_values() if name == "base" else exponents
                for name in prop.inputs
            ]
            return itertools.product(*domains)

        return _generate_samples(
            kind, prop.inputs, exponents, cls.SAMPLE_COUNT, cls.SEED
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _generate_samples(
    kind: IntKind,
    inputs: tuple[str, ...],
    exponents: list[int],
    count: int,
    seed: int,
) -> list[tuple[int, ...]]:
    """Edge-case combinations followed by a seeded random fill."""
    rng = random.Random(seed)
    edges = [
        edge_bases(kind) if name == "base" else edge_exponents(kind)
        for name in inputs
    ]

    samples: list[tuple[int, ...]] = list(itertools.product(*edges))

    def draw(name: str) -> int:
        if name == "exponent":
            return rng.choice(exponents)
        # half of the bases small enough to survive a few squarings
        if rng.random() < 0.5:
            limit = 1 << max(1, kind.bits // 8)
            return rng.randint(max(kind.lo, -limit), min(kind.hi, limit))
        return rng.randint(kind.lo, kind.hi)

    while len(samples) < count:
        samples.append(tuple(draw(name) for name in inputs))

    return samples
