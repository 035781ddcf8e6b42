"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_registry
from bindings import REGISTRY
from ops import PowRegistry


def create_app(registry: PowRegistry | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional registry for testing; uses the standard bindings
    if omitted.
    """
    if registry is None:
        registry = REGISTRY

    set_registry(registry)

    app = FastAPI(
        title="Power API",
        description=(
            "Exponentiation by squaring over fixed-width integer kinds. "
            "Every kind's engines are verified against the power contract "
            "before the first evaluation is served."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
