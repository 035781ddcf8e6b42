"""Machine-readable contract for the power engines.

Each operation is described by:
- postconditions: what the result must satisfy given valid inputs
- error conditions: which inputs must raise, and with what
- algebraic properties: relationships that must hold across calls

Predicates work on plain ints.  The verified factory and the validation
tools iterate over the contract to check an ``Exponentiator`` and to search
for counterexamples.

Layers
------
PowContract       the full contract for one integer kind
OperationContract per-operation contract (post/error/properties)
BranchSpec        every decision point that white-box tests must cover
build_contract()  constructs a PowContract for a given kind
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from integers import INT_KINDS, U8, U16, U32, USIZE, IntKind


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    inputs: tuple[str, ...]     # "base" / "exponent" for each free input
    check: Callable[..., bool]

    @property
    def arity(self) -> int:
        return len(self.inputs)


@dataclass(frozen=True)
class OperationContract:
    name: str
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the engine that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str


@dataclass(frozen=True)
class PowContract:
    """Complete contract for the engines bound to one kind."""

    kind: IntKind
    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out


# ---------------------------------------------------------------------------
# Helpers used inside the predicates
# ---------------------------------------------------------------------------

def reference_product(base: int, exp: int) -> int:
    """``base`` multiplied by itself ``exp`` times, one factor at a time."""
    result = 1
    for _ in range(exp):
        result *= base
    return result


def multiplication_bound(exp: int) -> int:
    """Most multiplications the engine may spend on ``exp`` (exp >= 1)."""
    return 2 * (exp.bit_length() - 1) + 1


def _raises(fn: Callable[[], object], exc: type) -> bool:
    try:
        fn()
    except exc:
        return True
    return False


ENGINE_BRANCHES = [
    BranchSpec("POW-ZERO", "Zero exponent returns the identity", "exp == 0", "pow"),
    BranchSpec(
        "POW-STRIP", "Trailing zero bit stripped by squaring",
        "exp > 0 and exp & 1 == 0", "pow",
    ),
    BranchSpec(
        "POW-ONE", "Exponent reduced to 1, base returned without accumulator",
        "exp >> trailing_zeros(exp) == 1", "pow",
    ),
    BranchSpec(
        "POW-ACC-INIT", "Accumulator seeded with a copy of the base",
        "exp >> trailing_zeros(exp) > 1", "pow",
    ),
    BranchSpec("POW-LOOP", "Halve exponent and square base", "exp > 1", "pow"),
    BranchSpec(
        "POW-ACC", "Set bit multiplied into the accumulator",
        "exp & 1 == 1 after halving", "pow",
    ),
    BranchSpec("CHK-ZERO", "Zero exponent returns the identity", "exp == 0", "checked_pow"),
    BranchSpec(
        "CHK-STRIP-OVF", "Overflow while stripping trailing zero bits",
        "checked_mul(base, base) is None during strip", "checked_pow",
    ),
    BranchSpec(
        "CHK-ONE", "Exponent reduced to 1 without overflow",
        "exp >> trailing_zeros(exp) == 1", "checked_pow",
    ),
    BranchSpec(
        "CHK-SQUARE-OVF", "Overflow while squaring inside the loop",
        "checked_mul(base, base) is None in loop", "checked_pow",
    ),
    BranchSpec(
        "CHK-ACC-OVF", "Overflow while accumulating",
        "checked_mul(acc, base) is None", "checked_pow",
    ),
    BranchSpec(
        "CHK-DONE", "Loop finished without overflow",
        "every multiplication succeeded", "checked_pow",
    ),
]


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(kind: IntKind) -> PowContract:
    """Construct the full power contract for an integer kind."""

    def fits(b: int, e: int) -> bool:
        return kind.contains(reference_product(b, e))

    def exp_kinds_for(e: int) -> list[IntKind]:
        return [k for k in (U8, U16, U32, USIZE) if k.contains(e)]

    def operator_agrees(ex, b: int, e: int) -> bool:
        if not fits(b, e):
            return True
        expected = ex.pow(b, e)
        return all(
            ex.power(b, e, exp_kind, base_by_ref, exp_by_ref) == expected
            for exp_kind in exp_kinds_for(e)
            for base_by_ref in (False, True)
            for exp_by_ref in (False, True)
        )

    def composes(ex, b: int, e1: int, e2: int) -> bool:
        if not (fits(b, e1) and fits(b, e1 * e2)):
            return True
        return ex.pow(ex.pow(b, e1), e2) == ex.pow(b, e1 * e2)

    def checked_agrees(ex, b: int, e: int) -> bool:
        result = ex.checked_pow(b, e)
        if result is None:
            return _raises(lambda: ex.pow(b, e), OverflowError)
        return ex.pow(b, e) == result

    negative_exponent = ErrorCondition(
        "negative_exponent",
        "ValueError for a negative exponent",
        lambda b, e: e < 0,
        ValueError,
    )
    base_out_of_bounds = ErrorCondition(
        "base_out_of_bounds",
        "ValueError for a base outside the kind",
        lambda b, e: not kind.contains(b),
        ValueError,
    )

    # ------------------------------------------------------------------ pow
    pow_contract = OperationContract(
        name="pow",
        postconditions=[
            Postcondition(
                "result_in_bounds",
                "Result is within the kind",
                lambda b, e, result: kind.contains(result),
            ),
            Postcondition(
                "result_correct",
                "Result equals the repeated product",
                lambda b, e, result: result == reference_product(b, e),
            ),
        ],
        error_conditions=[
            base_out_of_bounds,
            negative_exponent,
            ErrorCondition(
                "overflow_error",
                "OverflowError when the product leaves the kind",
                lambda b, e: e >= 0 and kind.contains(b) and not fits(b, e),
                OverflowError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "pow(b, 0) == 1", ("base",),
                lambda ex, b: ex.pow(b, 0) == 1,
            ),
            AlgebraicProperty(
                "unit_exponent", "pow(b, 1) == b", ("base",),
                lambda ex, b: ex.pow(b, 1) == b,
            ),
            AlgebraicProperty(
                "repeated_product",
                "pow(b, e) is the repeated product, or raises OverflowError",
                ("base", "exponent"),
                lambda ex, b, e: (
                    ex.pow(b, e) == reference_product(b, e) if fits(b, e)
                    else _raises(lambda: ex.pow(b, e), OverflowError)
                ),
            ),
            AlgebraicProperty(
                "native_agreement",
                "native pow agrees with the squaring engine",
                ("base", "exponent"),
                lambda ex, b, e: (
                    ex.native_pow(b, e) == ex.pow(b, e) if fits(b, e)
                    else _raises(lambda: ex.native_pow(b, e), OverflowError)
                ),
            ),
            AlgebraicProperty(
                "operator_agreement",
                "power(b, e) == pow(b, e) for every exponent kind and calling shape",
                ("base", "exponent"),
                operator_agrees,
            ),
            AlgebraicProperty(
                "composition",
                "pow(pow(b, e1), e2) == pow(b, e1 * e2) without overflow",
                ("base", "exponent", "exponent"),
                composes,
            ),
        ],
    )

    # ---------------------------------------------------------- checked_pow
    checked_contract = OperationContract(
        name="checked_pow",
        postconditions=[
            Postcondition(
                "exact_or_none",
                "Result is the repeated product if it fits, otherwise None",
                lambda b, e, result: result == (
                    reference_product(b, e) if fits(b, e) else None
                ),
            ),
        ],
        error_conditions=[base_out_of_bounds, negative_exponent],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "checked_pow(b, 0) == 1", ("base",),
                lambda ex, b: ex.checked_pow(b, 0) == 1,
            ),
            AlgebraicProperty(
                "unit_exponent", "checked_pow(b, 1) == b", ("base",),
                lambda ex, b: ex.checked_pow(b, 1) == b,
            ),
            AlgebraicProperty(
                "agrees_with_pow",
                "checked_pow is None exactly when pow overflows",
                ("base", "exponent"),
                checked_agrees,
            ),
        ],
    )

    # --------------------------------------------------------- wrapping_pow
    wrapping_contract = OperationContract(
        name="wrapping_pow",
        postconditions=[
            Postcondition(
                "result_in_bounds",
                "Result is within the kind",
                lambda b, e, result: kind.contains(result),
            ),
            Postcondition(
                "result_wrapped",
                "Result equals the repeated product wrapped into the kind",
                lambda b, e, result: result == kind.wrap(reference_product(b, e)),
            ),
        ],
        error_conditions=[base_out_of_bounds, negative_exponent],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "wrapping_pow(b, 0) == 1", ("base",),
                lambda ex, b: ex.wrapping_pow(b, 0) == 1,
            ),
            AlgebraicProperty(
                "agrees_when_in_bounds",
                "wrapping_pow(b, e) == pow(b, e) when nothing overflows",
                ("base", "exponent"),
                lambda ex, b, e: (
                    not fits(b, e) or ex.wrapping_pow(b, e) == ex.pow(b, e)
                ),
            ),
        ],
    )

    return PowContract(
        kind=kind,
        operations={
            "pow": pow_contract,
            "checked_pow": checked_contract,
            "wrapping_pow": wrapping_contract,
        },
        branches=ENGINE_BRANCHES,
    )


CONTRACTS = {kind: build_contract(kind) for kind in INT_KINDS}
