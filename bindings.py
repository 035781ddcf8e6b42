"""
Power bindings for every supported (base kind, exponent kind) pair.

The table mirrors what each numeric kind offers natively:

  integer kinds    u8, u16, u32 exponents -> native integer power
                   usize exponent         -> squaring engine
  wrapping kinds   u8, u16, u32, usize    -> squaring engine (wraps)
  f32              i8, u8, i16, u16, i32  -> powi
                   f32                    -> powf
  f64              i8, u8, i16, u16, i32  -> powi
                   f32, f64               -> powf
"""

from __future__ import annotations

from typing import Any

import engine
from floats import F32, F64, Float32, powf, powi
from integers import I8, I16, I32, INT_KINDS, U8, U16, U32, USIZE
from ops import PowRegistry, Strategy

INT_EXPONENTS = (U8, U16, U32, USIZE)
NATIVE_INT_EXPONENTS = (U8, U16, U32)
FLOAT_INT_EXPONENTS = (I8, U8, I16, U16, I32)


def _engine_pow(base, exp):
    return engine.pow(base, int(exp))


def _native_int_pow(base, exp):
    return base.pow(int(exp))


def _f32_powi(base: Float32, exp) -> Float32:
    return base.powi(int(exp))


def _f32_powf(base: Float32, exp: Float32) -> Float32:
    return base.powf(exp.value)


def _f64_powi(base: float, exp) -> float:
    return powi(base, int(exp))


def _f64_powf(base: float, exp) -> float:
    return powf(base, float(exp))


def build_registry() -> PowRegistry:
    """Return a registry holding every standard binding."""
    registry = PowRegistry()

    for kind in INT_KINDS:
        for exp_kind in NATIVE_INT_EXPONENTS:
            registry.register(kind, exp_kind, _native_int_pow, Strategy.NATIVE)
        registry.register(kind, USIZE, _engine_pow, Strategy.ENGINE)

    for kind in INT_KINDS:
        for exp_kind in INT_EXPONENTS:
            registry.register(
                kind.wrapping, exp_kind, _engine_pow, Strategy.ENGINE
            )

    for exp_kind in FLOAT_INT_EXPONENTS:
        registry.register(F32, exp_kind, _f32_powi, Strategy.POWI)
        registry.register(F64, exp_kind, _f64_powi, Strategy.POWI)
    registry.register(F32, F32, _f32_powf, Strategy.POWF)
    registry.register(F64, F32, _f64_powf, Strategy.POWF)
    registry.register(F64, F64, _f64_powf, Strategy.POWF)

    return registry


REGISTRY = build_registry()


def power(base: Any, exp: Any) -> Any:
    """Raise ``base`` to ``exp`` through the standard bindings.

    >>> from integers import U32
    >>> power(U32(10), U32(2))
    U32(100)
    """
    return REGISTRY.power(base, exp)
