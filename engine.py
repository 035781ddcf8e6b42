"""Exponentiation by squaring.

Two engines share one control flow:

``pow``          multiplies with ``*``; overflow is whatever the base type's
                 multiplication does (raise, wrap, or go to infinity).
``checked_pow``  multiplies with ``checked_mul``; the first overflow
                 abandons the computation and returns None.

Trailing zero bits of the exponent are stripped by plain squaring before
the accumulator is set up, so a power-of-two exponent costs only a chain of
squarings.  Decision branches are annotated with the branch ids listed in
``contracts.ENGINE_BRANCHES`` so white-box tests can trace coverage.
"""
from __future__ import annotations

import operator
from typing import Optional, TypeVar

from traits import checked_mul, duplicate, one

T = TypeVar("T")


def _exponent(exp) -> int:
    exp = operator.index(exp)
    if exp < 0:
        raise ValueError("negative exponents not supported")
    return exp


def pow(base: T, exp: int) -> T:
    """Raise ``base`` to the non-negative integer power ``exp``.

    >>> from integers import I8, U8
    >>> pow(I8(2), 4)
    I8(16)
    >>> pow(U8(6), 3)
    U8(216)
    """
    exp = _exponent(exp)
    if exp == 0:                                                  # POW-ZERO
        return one(base)

    while exp & 1 == 0:                                           # POW-STRIP
        base = base * base
        exp >>= 1
    if exp == 1:                                                  # POW-ONE
        return base

    acc = duplicate(base)                                         # POW-ACC-INIT
    while exp > 1:                                                # POW-LOOP
        exp >>= 1
        base = base * base
        if exp & 1 == 1:                                          # POW-ACC
            acc = acc * base
    return acc


def checked_pow(base: T, exp: int) -> Optional[T]:
    """Like ``pow``, but return None if any multiplication overflows.

    >>> from integers import I8, U32
    >>> checked_pow(I8(2), 4)
    I8(16)
    >>> checked_pow(I8(7), 8) is None
    True
    >>> checked_pow(U32(7), 8)
    U32(5764801)
    """
    exp = _exponent(exp)
    if exp == 0:                                                  # CHK-ZERO
        return one(base)

    while exp & 1 == 0:
        base = checked_mul(base, base)
        if base is None:                                          # CHK-STRIP-OVF
            return None
        exp >>= 1
    if exp == 1:                                                  # CHK-ONE
        return base

    acc = duplicate(base)
    while exp > 1:
        exp >>= 1
        base = checked_mul(base, base)
        if base is None:                                          # CHK-SQUARE-OVF
            return None
        if exp & 1 == 1:
            acc = checked_mul(acc, base)
            if acc is None:                                       # CHK-ACC-OVF
                return None
    return acc                                                    # CHK-DONE
