"""FastAPI endpoints for power evaluation.

Routes
------
POST   /pow            Evaluate base ** exponent in an integer kind
GET    /pow/bindings   List the registered power bindings
POST   /pow/verify     Verify the engines of one kind against the contract
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from exponentiator import Exponentiator
from factory import PowFactory, VerificationReport
from integers import IntKind
from models import (
    BindingInfo,
    BindingListResponse,
    EvalStrategy,
    PowRequest,
    PowResponse,
    PropertyOutcome,
    VerifyRequest,
    VerifyResponse,
)
from ops import PowRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pow", tags=["pow"])

# The registry is injected by the app factory (see app.py).
_registry: PowRegistry | None = None
_exponentiators: dict[IntKind, Exponentiator] = {}


def set_registry(registry: PowRegistry) -> None:
    """Inject the registry. Called once at app startup."""
    global _registry
    _registry = registry
    _exponentiators.clear()


def get_registry() -> PowRegistry:
    assert _registry is not None, "Registry not initialized"
    return _registry


def get_exponentiator(kind: IntKind) -> Exponentiator:
    """Return the verified Exponentiator for a kind, building it on first use."""
    ex = _exponentiators.get(kind)
    if ex is None:
        ex = PowFactory.create(kind, get_registry())
        _exponentiators[kind] = ex
    return ex


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

def _overflow(e: OverflowError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


def _label(kind) -> str:
    return getattr(kind, "name", repr(kind))


def _verify_response(request: VerifyRequest, report: VerificationReport) -> VerifyResponse:
    return VerifyResponse(
        kind=request.kind,
        passed=report.passed,
        tests_run=report.tests_run,
        properties=[
            PropertyOutcome(
                name=r.property_name,
                passed=r.passed,
                tests_run=r.tests_run,
                counterexample=list(r.counterexample) if r.counterexample else None,
                error=r.error,
            )
            for r in report.results
        ],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=PowResponse)
def evaluate(payload: PowRequest) -> PowResponse:
    """Evaluate base ** exponent with the requested strategy."""
    ex = get_exponentiator(payload.kind.kind)
    b, e = payload.base, payload.exponent

    try:
        if payload.strategy == EvalStrategy.CHECKED:
            result = ex.checked_pow(b, e)
        elif payload.strategy == EvalStrategy.WRAPPING:
            result = ex.wrapping_pow(b, e)
        elif payload.strategy == EvalStrategy.NATIVE:
            result = ex.native_pow(b, e)
        else:
            result = ex.pow(b, e)
    except OverflowError as err:
        logger.info("rejected %s ** %s in %s: %s", b, e, payload.kind.value, err)
        raise _overflow(err) from err

    return PowResponse(
        kind=payload.kind,
        base=b,
        exponent=e,
        strategy=payload.strategy,
        result=result,
        overflowed=result is None,
    )


@router.get("/bindings", response_model=BindingListResponse)
def list_bindings(
    base: str | None = Query(default=None, description="Filter by base kind name"),
) -> BindingListResponse:
    """List the registered bindings."""
    items = [
        BindingInfo(
            base=_label(b.base_kind),
            exponent=_label(b.exp_kind),
            output=_label(b.output_kind),
            strategy=b.strategy.value,
        )
        for b in get_registry()
    ]
    if base is not None:
        items = [i for i in items if i.base == base]
    return BindingListResponse(items=items, total=len(items))


@router.post("/verify", response_model=VerifyResponse)
def verify(payload: VerifyRequest) -> VerifyResponse:
    """Run the contract against the engines of one kind."""
    kind = payload.kind.kind
    ex = Exponentiator(kind, get_registry())
    report = PowFactory.verify(ex)
    if report.passed:
        _exponentiators[kind] = ex
    else:
        logger.warning("verification of %s failed", kind.name)
    return _verify_response(payload, report)
