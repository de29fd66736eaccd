"""
Wiring for the coefficient service: builds the process-wide resolver from
settings and hands it to route handlers.
"""

from fastapi import HTTPException, Request

from .config import settings
from .policies.registry import get_bucketing_policy, get_fallback_policy
from .resolver import CoefficientResolver
from .table_store import CoefficientTable


def build_resolver(path: str = None, bucketing_mode: str = None,
                   fallback_mode: str = None) -> CoefficientResolver:
    """Load the table and assemble the configured policies. Raises on any defect."""
    table = CoefficientTable.load(path or settings.COEFFICIENTS_PATH)
    return CoefficientResolver(
        table,
        bucketing=get_bucketing_policy(bucketing_mode or settings.BUCKETING_MODE),
        fallback=get_fallback_policy(fallback_mode or settings.FALLBACK_MODE),
    )


def get_resolver(request: Request) -> CoefficientResolver:
    resolver = getattr(request.app.state, "resolver", None)
    if resolver is None:
        raise HTTPException(status_code=503, detail="Coefficient table not loaded")
    return resolver
