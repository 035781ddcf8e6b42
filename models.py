"""Request and response models for the power API.

A request names an integer kind, a base, a non-negative exponent, and the
evaluation strategy.  The base must fit the kind; the models reject it
before any arithmetic runs.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from integers import KINDS_BY_NAME, IntKind


class KindName(str, Enum):
    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    USIZE = "usize"
    ISIZE = "isize"

    @property
    def kind(self) -> IntKind:
        return KINDS_BY_NAME[self.value]


class EvalStrategy(str, Enum):
    UNCHECKED = "unchecked"   # squaring engine, overflow is an error
    CHECKED = "checked"       # squaring engine, overflow yields null
    WRAPPING = "wrapping"     # squaring engine over wrapping values
    NATIVE = "native"         # the kind's own integer power


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

class PowRequest(BaseModel):
    """Payload for evaluating base ** exponent in one integer kind."""

    kind: KindName
    base: int
    exponent: int = Field(..., ge=0, le=2**32 - 1)
    strategy: EvalStrategy = EvalStrategy.UNCHECKED

    @model_validator(mode="after")
    def base_fits_kind(self) -> PowRequest:
        kind = self.kind.kind
        if not kind.contains(self.base):
            raise ValueError(
                f"base {self.base} is outside bounds [{kind.lo}, {kind.hi}] "
                f"of {kind.name}"
            )
        return self


class PowResponse(BaseModel):
    kind: KindName
    base: int
    exponent: int
    strategy: EvalStrategy
    result: int | None
    overflowed: bool = False


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------

class BindingInfo(BaseModel):
    """One (base kind, exponent kind) binding of the power operator."""

    base: str
    exponent: str
    output: str
    strategy: str


class BindingListResponse(BaseModel):
    items: list[BindingInfo]
    total: int


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

class VerifyRequest(BaseModel):
    kind: KindName


class PropertyOutcome(BaseModel):
    name: str
    passed: bool
    tests_run: int
    counterexample: list[int] | None = None
    error: str | None = None


class VerifyResponse(BaseModel):
    kind: KindName
    passed: bool
    tests_run: int
    properties: list[PropertyOutcome] = Field(default_factory=list)
