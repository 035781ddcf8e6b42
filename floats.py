"""
Floating-point kinds and their native power primitives.

F64 is Python's own ``float``.  F32 values are ``Float32`` instances, which
round every value through IEEE-754 binary32.

``powi`` and ``powf`` follow IEEE-754 semantics: a result too large for the
format becomes an infinity, an undefined one becomes NaN.  Python's own
``math.pow`` raises in both situations, so the exceptions are mapped back to
the values the format defines.
"""

from __future__ import annotations

import math
import operator
import struct
from dataclasses import dataclass

import engine


@dataclass(frozen=True)
class FloatKind:
    name: str
    bits: int

    def __call__(self, value):
        if self.bits == 32:
            return Float32(value)
        return float(value)

    def __repr__(self) -> str:
        return self.name.upper()


F32 = FloatKind("f32", 32)
F64 = FloatKind("f64", 64)

FLOAT_KINDS = (F32, F64)


def to_f32(value: float) -> float:
    """Round a double to the nearest binary32 value."""
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _is_odd_integer(y: float) -> bool:
    return y.is_integer() and abs(y) < 2.0 ** 53 and int(y) % 2 == 1


def powf(x: float, y: float) -> float:
    """General power with IEEE-754 results, including fractional exponents."""
    x, y = float(x), float(y)
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0 and _is_odd_integer(y):
            return -math.inf
        return math.inf
    except ValueError:
        if x == 0.0:
            # 0 ** negative: pole
            if _is_odd_integer(y):
                return math.copysign(math.inf, x)
            return math.inf
        return math.nan


def powi(x: float, n: int) -> float:
    """Integer power; ``n`` may be negative."""
    return powf(x, float(n))


@dataclass(frozen=True, eq=False)
class Float32:
    """A single-precision float."""

    value: float

    kind = F32

    def __post_init__(self):
        object.__setattr__(self, "value", to_f32(self.value))

    def __mul__(self, other):
        if not isinstance(other, Float32):
            return NotImplemented
        return Float32(self.value * other.value)

    def one(self) -> Float32:
        return Float32(1.0)

    def powi(self, n: int) -> Float32:
        """Integer power, rounding to single precision after every multiplication."""
        n = operator.index(n)
        result = engine.pow(self, abs(n))
        if n >= 0:
            return result
        if result.value == 0.0:
            return Float32(math.copysign(math.inf, result.value))
        return Float32(1.0 / result.value)

    def powf(self, y) -> Float32:
        return Float32(powf(self.value, float(y)))

    def __pow__(self, exp):
        from bindings import power
        return power(self, exp)

    def __float__(self) -> float:
        return self.value

    def __eq__(self, other):
        if isinstance(other, Float32):
            return self.value == other.value
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self) -> str:
        return f"F32({self.value!r})"
