"""
Fixed-width integer kinds for the power engine.

A kind is an inclusive integer domain [lo, hi] fixed by a bit width and a
signedness, like a machine integer.  Values of a kind are immutable
``FixedInt`` instances; ``Wrapping`` values of the same kind wrap on
overflow instead of raising.

Overflow semantics of the three multiplications a ``FixedInt`` offers:

  a * b              raise OverflowError (never wraps silently)
  a.checked_mul(b)   return None
  a.wrapping_mul(b)  modular wrap-around (like C unsigned)
"""

from __future__ import annotations

import operator
import struct
from dataclasses import dataclass


PLATFORM_BITS = struct.calcsize("P") * 8


@dataclass(frozen=True)
class IntKind:
    """An integer domain of ``bits`` width, signed or unsigned."""

    name: str
    bits: int
    signed: bool

    def __post_init__(self):
        if self.bits <= 0:
            raise ValueError(f"bits ({self.bits}) must be positive")

    @property
    def lo(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def hi(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return 1 << self.bits

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def wrap(self, value: int) -> int:
        return self.lo + (value - self.lo) % self.width

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def __call__(self, value) -> FixedInt:
        return FixedInt(self, value)

    @property
    def wrapping(self) -> WrappingKind:
        return WrappingKind(self)

    def __repr__(self) -> str:
        return self.name.upper()


@dataclass(frozen=True)
class WrappingKind:
    """The wrap-on-overflow counterpart of an integer kind."""

    inner: IntKind

    @property
    def name(self) -> str:
        return f"Wrapping<{self.inner.name}>"

    def __call__(self, value) -> Wrapping:
        return Wrapping(self, value)

    def __repr__(self) -> str:
        return f"{self.inner!r}.wrapping"


def _check_operand(kind: IntKind, value) -> int:
    value = operator.index(value)
    if not kind.contains(value):
        raise ValueError(f"{value} is outside bounds [{kind.lo}, {kind.hi}]")
    return value


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class FixedInt:
    """An integer that lives in the domain of its kind."""

    kind: IntKind
    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", _check_operand(self.kind, self.value))

    def _same_kind(self, other) -> bool:
        return isinstance(other, FixedInt) and other.kind == self.kind

    # -- multiplication ---------------------------------------------------

    def __mul__(self, other):
        if not self._same_kind(other):
            return NotImplemented
        raw = self.value * other.value
        if not self.kind.contains(raw):
            raise OverflowError(
                f"{self.kind.name} multiplication overflowed: "
                f"{self.value} * {other.value}"
            )
        return FixedInt(self.kind, raw)

    def checked_mul(self, other: FixedInt) -> FixedInt | None:
        if not self._same_kind(other):
            raise TypeError(f"cannot multiply {self!r} by {other!r}")
        raw = self.value * other.value
        if not self.kind.contains(raw):
            return None
        return FixedInt(self.kind, raw)

    def wrapping_mul(self, other: FixedInt) -> FixedInt:
        if not self._same_kind(other):
            raise TypeError(f"cannot multiply {self!r} by {other!r}")
        return FixedInt(self.kind, self.kind.wrap(self.value * other.value))

    def one(self) -> FixedInt:
        return FixedInt(self.kind, 1)

    # -- powers -----------------------------------------------------------

    def pow(self, exp) -> FixedInt:
        """Native power: exact result, or OverflowError if it leaves the kind."""
        exp = operator.index(exp)
        if exp < 0:
            raise ValueError("negative exponents not supported")
        overflow = OverflowError(
            f"{self.kind.name} power overflowed: {self.value} ** {exp}"
        )
        if self.value == -1:
            raw = -1 if exp & 1 else 1
        elif self.value in (0, 1):
            raw = self.value if exp else 1
        elif exp >= self.kind.bits:
            # |base| >= 2 already leaves the kind at 2 ** bits
            raise overflow
        else:
            raw = self.value ** exp
        if not self.kind.contains(raw):
            raise overflow
        return FixedInt(self.kind, raw)

    def __pow__(self, exp):
        from bindings import power
        return power(self, exp)

    # -- conversions and comparison ---------------------------------------

    def __index__(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value

    def __eq__(self, other):
        if isinstance(other, FixedInt):
            return self.kind == other.kind and self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self) -> str:
        return f"{self.kind!r}({self.value})"


@dataclass(frozen=True, eq=False)
class Wrapping:
    """An integer whose multiplication wraps modulo 2**bits."""

    kind: WrappingKind
    value: int

    def __post_init__(self):
        object.__setattr__(
            self, "value", _check_operand(self.kind.inner, self.value)
        )

    def __mul__(self, other):
        if not (isinstance(other, Wrapping) and other.kind == self.kind):
            return NotImplemented
        return Wrapping(self.kind, self.kind.inner.wrap(self.value * other.value))

    def one(self) -> Wrapping:
        return Wrapping(self.kind, 1)

    def __pow__(self, exp):
        from bindings import power
        return power(self, exp)

    def __index__(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value

    def __eq__(self, other):
        if isinstance(other, Wrapping):
            return self.kind == other.kind and self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self) -> str:
        return f"{self.kind!r}({self.value})"


# ---------------------------------------------------------------------------
# Kind presets
# ---------------------------------------------------------------------------

I8 = IntKind("i8", 8, signed=True)
I16 = IntKind("i16", 16, signed=True)
I32 = IntKind("i32", 32, signed=True)
I64 = IntKind("i64", 64, signed=True)
ISIZE = IntKind("isize", PLATFORM_BITS, signed=True)

U8 = IntKind("u8", 8, signed=False)
U16 = IntKind("u16", 16, signed=False)
U32 = IntKind("u32", 32, signed=False)
U64 = IntKind("u64", 64, signed=False)
USIZE = IntKind("usize", PLATFORM_BITS, signed=False)

SIGNED_KINDS = (I8, I16, I32, I64, ISIZE)
UNSIGNED_KINDS = (U8, U16, U32, U64, USIZE)
INT_KINDS = (U8, I8, U16, I16, U32, I32, U64, I64, USIZE, ISIZE)

KINDS_BY_NAME = {kind.name: kind for kind in INT_KINDS}
