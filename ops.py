"""
The power operator.

A ``PowRegistry`` maps a (base kind, exponent kind) pair to exactly one
``Binding``.  Generic code raises a value to a power through
``registry.power(base, exp)`` without knowing which primitive backs the
pair: the squaring engine, a native integer power, or a float power.

Every binding for a given base kind produces the same output kind, so
raising a value to exponents of different widths always yields the same
type.

Operands may be handed over directly or through a ``Ref``.  A referenced
operand is duplicated before the binding sees it, so the four calling
shapes (value/value, ref/value, value/ref, ref/ref) agree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Iterator

from floats import F64, Float32
from integers import FixedInt, Wrapping
from traits import duplicate

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    """Which primitive backs a binding."""

    ENGINE = "engine"       # squaring engine, engine.pow
    NATIVE = "native"       # the base type's own integer power
    POWI = "powi"           # float raised to an integer
    POWF = "powf"           # float raised to a float


class NoPowBinding(TypeError):
    """Raised when no binding exists for a (base kind, exponent kind) pair."""

    def __init__(self, base_kind: Hashable, exp_kind: Hashable) -> None:
        self.base_kind = base_kind
        self.exp_kind = exp_kind
        super().__init__(f"no power binding for ({base_kind!r}, {exp_kind!r})")


@dataclass(frozen=True)
class Ref:
    """Read-only handle on an operand owned by someone else."""

    value: Any


def kind_of(value: Any) -> Hashable:
    """Return the registry key for a base or exponent value."""
    if isinstance(value, (FixedInt, Wrapping, Float32)):
        return value.kind
    if isinstance(value, float):
        return F64
    return type(value)


def _deref(operand: Any) -> Any:
    if isinstance(operand, Ref):
        return duplicate(operand.value)
    return operand


@dataclass(frozen=True)
class Binding:
    """One (base kind, exponent kind) implementation of the power operator."""

    base_kind: Hashable
    exp_kind: Hashable
    output_kind: Hashable
    strategy: Strategy
    method: Callable[[Any, Any], Any]

    def __call__(self, base: Any, exp: Any) -> Any:
        return self.method(base, exp)


class PowRegistry:
    """All power bindings known to a program."""

    def __init__(self) -> None:
        self._bindings: dict[tuple[Hashable, Hashable], Binding] = {}
        self._outputs: dict[Hashable, Hashable] = {}

    # -- registration -----------------------------------------------------

    def register(
        self,
        base_kind: Hashable,
        exp_kind: Hashable,
        method: Callable[[Any, Any], Any],
        strategy: Strategy,
        output_kind: Hashable | None = None,
    ) -> Binding:
        if output_kind is None:
            output_kind = base_kind
        key = (base_kind, exp_kind)
        if key in self._bindings:
            raise ValueError(
                f"power binding for ({base_kind!r}, {exp_kind!r}) already registered"
            )
        expected = self._outputs.setdefault(base_kind, output_kind)
        if expected != output_kind:
            raise ValueError(
                f"{base_kind!r} already produces {expected!r}, "
                f"cannot also produce {output_kind!r}"
            )
        binding = Binding(base_kind, exp_kind, output_kind, strategy, method)
        self._bindings[key] = binding
        logger.debug(
            "registered %s ** %s -> %s (%s)",
            base_kind, exp_kind, output_kind, strategy.value,
        )
        return binding

    # -- lookup -----------------------------------------------------------

    def binding(self, base_kind: Hashable, exp_kind: Hashable) -> Binding:
        try:
            return self._bindings[(base_kind, exp_kind)]
        except KeyError:
            raise NoPowBinding(base_kind, exp_kind) from None

    def output_kind(self, base_kind: Hashable) -> Hashable:
        return self._outputs[base_kind]

    def power(self, base: Any, exp: Any) -> Any:
        """Raise ``base`` to ``exp`` using the binding for their kinds."""
        base, exp = _deref(base), _deref(exp)
        return self.binding(kind_of(base), kind_of(exp))(base, exp)

    def exponent_kinds(self, base_kind: Hashable) -> list[Hashable]:
        return [e for (b, e) in self._bindings if b == base_kind]

    def __contains__(self, key: tuple[Hashable, Hashable]) -> bool:
        return key in self._bindings

    def __iter__(self) -> Iterator[Binding]:
        return iter(self._bindings.values())

    def __len__(self) -> int:
        return len(self._bindings)
