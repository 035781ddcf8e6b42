"""Per-kind power operations over plain Python ints.

An ``Exponentiator`` binds the engines to one integer kind.  Inputs and
outputs are plain ints, so the contract and the HTTP layer never deal with
``FixedInt`` boxing.  Bases outside the kind's range are rejected with
ValueError before any multiplication happens.
"""
from __future__ import annotations

from dataclasses import dataclass

import engine
from bindings import REGISTRY
from integers import USIZE, IntKind
from ops import PowRegistry, Ref


@dataclass(frozen=True)
class Exponentiator:
    kind: IntKind
    registry: PowRegistry = REGISTRY

    def pow(self, base: int, exp: int) -> int:
        """Squaring engine; OverflowError when the result leaves the kind."""
        return engine.pow(self.kind(base), exp).value

    def checked_pow(self, base: int, exp: int) -> int | None:
        result = engine.checked_pow(self.kind(base), exp)
        return None if result is None else result.value

    def wrapping_pow(self, base: int, exp: int) -> int:
        return engine.pow(self.kind.wrapping(base), exp).value

    def native_pow(self, base: int, exp: int) -> int:
        return self.kind(base).pow(exp).value

    def power(
        self,
        base: int,
        exp: int,
        exp_kind: IntKind = USIZE,
        base_by_ref: bool = False,
        exp_by_ref: bool = False,
    ) -> int:
        """Operator form, in any of the four calling shapes."""
        b = self.kind(base)
        e = exp_kind(exp)
        return self.registry.power(
            Ref(b) if base_by_ref else b,
            Ref(e) if exp_by_ref else e,
        ).value
