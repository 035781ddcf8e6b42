"""Numeric capabilities consumed by the squaring engine.

The engine does not define arithmetic.  It asks three things of a base
value and leaves everything else to the type:

- ``one(x)``: the multiplicative identity of x's type
- ``checked_mul(a, b)``: the product, or None on overflow
- ``duplicate(x)``: an independent copy of x

Each is a single-dispatch function.  Builtin numbers are registered here;
any other type opts in by defining ``one()`` / ``checked_mul()`` methods, or
by registering an implementation.
"""
from __future__ import annotations

import copy
from decimal import Decimal
from fractions import Fraction
from functools import singledispatch
from typing import Any, Optional, Protocol, TypeVar

T = TypeVar("T")


class Multiplicative(Protocol):
    def __mul__(self, other: Any) -> Any: ...


class CheckedMultiplicative(Protocol):
    def checked_mul(self, other: Any) -> Optional[Any]: ...


# ---------------------------------------------------------------------------
# Multiplicative identity
# ---------------------------------------------------------------------------

@singledispatch
def one(value: T) -> T:
    """Return the multiplicative identity for the type of ``value``."""
    method = getattr(value, "one", None)
    if not callable(method):
        raise TypeError(
            f"{type(value).__name__} has no multiplicative identity"
        )
    return method()


@one.register
def _(value: int) -> int:
    return 1


@one.register
def _(value: float) -> float:
    return 1.0


@one.register
def _(value: complex) -> complex:
    return complex(1.0, 0.0)


@one.register
def _(value: Fraction) -> Fraction:
    return Fraction(1)


@one.register
def _(value: Decimal) -> Decimal:
    return Decimal(1)


# ---------------------------------------------------------------------------
# Checked multiplication
# ---------------------------------------------------------------------------

@singledispatch
def checked_mul(a: T, b: T) -> Optional[T]:
    """Return ``a * b``, or None if the product overflows a's type."""
    method = getattr(a, "checked_mul", None)
    if not callable(method):
        raise TypeError(
            f"{type(a).__name__} does not support checked multiplication"
        )
    return method(b)


@checked_mul.register
def _(a: int, b: int) -> int:
    # Python ints are unbounded.
    return a * b


@checked_mul.register
def _(a: Fraction, b: Fraction) -> Fraction:
    return a * b


# ---------------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------------

@singledispatch
def duplicate(value: T) -> T:
    return copy.copy(value)
