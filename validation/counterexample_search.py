"""Counterexample search - discovers gaps in the engines or the tests.

This module runs independently of the test suite.  For one integer kind
it systematically searches for:

1. Postcondition violations: inputs where an engine doesn't match the
   contract's expected output.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field

sys.path.insert(0, ".")

from contracts import PowContract, build_contract
from exponentiator import Exponentiator
from factory import exponent_domain
from integers import I8, U8, I16, IntKind


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found - all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def _bases(kind: IntKind, limit: int | None) -> range | list[int]:
    if limit is None or kind.width <= limit:
        return kind.all_values()
    step = kind.width // limit
    return list(range(kind.lo, kind.hi + 1, step)) + [kind.hi]


def search_postcondition_violations(
    ex: Exponentiator,
    contract: PowContract,
    limit: int | None = None,
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every base and exponent in the domain."""
    cxs: list[Counterexample] = []
    checks = 0
    kind = contract.kind

    for op_name, op_contract in contract.operations.items():
        op = getattr(ex, op_name)
        for b in _bases(kind, limit):
            for e in exponent_domain(kind):
                # Skip inputs that are supposed to error
                if any(ec.trigger(b, e) for ec in op_contract.error_conditions):
                    checks += 1
                    continue

                try:
                    result = op(b, e)
                except Exception as err:
                    cxs.append(Counterexample(
                        category="unexpected_error",
                        operation=op_name,
                        inputs=(b, e),
                        expected="no error",
                        actual=f"{type(err).__name__}: {err}",
                        description="Operation raised an unexpected exception",
                    ))
                    checks += 1
                    continue

                for post in op_contract.postconditions:
                    if not post.check(b, e, result):
                        cxs.append(Counterexample(
                            category="postcondition_violation",
                            operation=op_name,
                            inputs=(b, e),
                            expected=post.description,
                            actual=f"result={result}",
                            description=f"Postcondition '{post.name}' violated",
                        ))
                checks += 1

    return cxs, checks


def search_error_condition_violations(
    ex: Exponentiator,
    contract: PowContract,
    limit: int | None = None,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception."""
    cxs: list[Counterexample] = []
    checks = 0
    kind = contract.kind

    bases = [kind.lo - 1, *_bases(kind, limit), kind.hi + 1]
    exponents = [-2, -1, *exponent_domain(kind)]

    for op_name, op_contract in contract.operations.items():
        op = getattr(ex, op_name)
        for b, e in itertools.product(bases, exponents):
            for ec in op_contract.error_conditions:
                if not ec.trigger(b, e):
                    continue
                checks += 1
                try:
                    result = op(b, e)
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=op_name,
                        inputs=(b, e),
                        expected=f"{ec.exception.__name__}",
                        actual=f"result={result}",
                        description=(
                            f"Error condition '{ec.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))
                except ec.exception:
                    pass  # expected
                except Exception as err:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=op_name,
                        inputs=(b, e),
                        expected=f"{ec.exception.__name__}",
                        actual=f"{type(err).__name__}: {err}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_property_violations(
    ex: Exponentiator,
    contract: PowContract,
    limit: int | None = None,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property over the input domain."""
    cxs: list[Counterexample] = []
    checks = 0
    kind = contract.kind

    for op_name, prop in contract.all_properties:
        domains = [
            _bases(kind, limit) if name == "base" else exponent_domain(kind)
            for name in prop.inputs
        ]
        for combo in itertools.product(*domains):
            checks += 1
            try:
                holds = prop.check(ex, *combo)
            except Exception as err:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual=f"{type(err).__name__}: {err}",
                    description=f"Property '{prop.name}' raised",
                ))
                continue
            if not holds:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(kind: IntKind, limit: int | None = None) -> SearchReport:
    """Run complete counterexample search for one kind.

    ``limit`` caps the number of bases tried for wide kinds.
    """
    ex = Exponentiator(kind)
    contract = build_contract(kind)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(ex, contract, limit)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several kinds."""
    configs = [
        ("i8  (exhaustive)", I8, None),
        ("u8  (exhaustive)", U8, None),
        ("i16 (1024 bases)", I16, 1024),
    ]

    all_passed = True
    for name, kind, limit in configs:
        print(f"\n--- Kind: {name} ---")
        report = run_search(kind, limit)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL KINDS PASSED")
    else:
        print("SOME KINDS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
