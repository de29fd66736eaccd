from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .dependencies import build_resolver
from .routers import coefficients

logger = logging.getLogger("sash_coefficients")

app = FastAPI(
    title="Sash Coefficient Service",
    description="Dimension-dependent coefficient lookup for order line items",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(coefficients.router, prefix="/api")


@app.get("/health")
def health():
    resolver = getattr(app.state, "resolver", None)
    return {
        "status": "ok",
        "app": "sash-coefficients",
        "systems": len(resolver.table) if resolver is not None else 0,
    }


@app.on_event("startup")
def load_coefficients():
    """Load the coefficient table once. A malformed dataset aborts startup."""
    app.state.resolver = build_resolver()
    logger.info("Coefficient service ready with %d systems", len(app.state.resolver.table))
