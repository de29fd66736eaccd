"""
Coefficient resolver: (system, category, width, height) -> coefficient.

Deterministic and side-effect free with respect to the loaded table:
1. Reject non-positive / non-finite dimensions (InvalidDimensions).
2. Find the system (exact, then case-insensitive) or raise UnknownSystem.
3. Find the category (exact, then case-insensitive); otherwise ask the
   fallback policy for a substitute and flag the result (UnknownCategory
   when it declines).
4. Clamp each axis to the grid bounds, noting any clamp in the warning.
5. Hand the clamped point to the bucketing policy.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidDimensions, UnknownCategory, UnknownSystem
from .policies.base import BucketingPolicy, FallbackPolicy
from .policies.bucketing import CeilingBucketing
from .policies.fallback import FirstAvailableFallback
from .schemas import ResolutionRequest, ResolutionResult
from .table_store import CoefficientTable

logger = logging.getLogger(__name__)


def _is_valid_dimension(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def clamp(value: float, axis: Sequence[float]) -> Tuple[float, Optional[str]]:
    """
    Clamp value to [axis[0], axis[-1]].
    Returns (clamped_value, side) where side is "below", "above" or None.
    """
    if value < axis[0]:
        return axis[0], "below"
    if value > axis[-1]:
        return axis[-1], "above"
    return value, None


class CoefficientResolver:
    """
    Resolves coefficients against one CoefficientTable.

    Policies default to ceiling bucketing and first-available fallback.
    """

    def __init__(self, table: CoefficientTable,
                 bucketing: BucketingPolicy = None,
                 fallback: FallbackPolicy = None):
        self.table = table
        self.bucketing = bucketing or CeilingBucketing()
        self.fallback = fallback or FirstAvailableFallback()

    def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        if not (_is_valid_dimension(request.width) and _is_valid_dimension(request.height)):
            raise InvalidDimensions(request.width, request.height)

        system_key = self.table.match_system_key(request.system_key)
        if system_key is None:
            raise UnknownSystem(request.system_key)

        notes: List[str] = []
        is_fallback = False

        category = self.table.match_category(system_key, request.category)
        if category is None:
            available = self.table.categories(system_key)
            category = self.fallback.choose(request.category, available)
            if category is None:
                # Policy declined to substitute
                raise UnknownCategory(system_key, request.category)
            is_fallback = True
            notes.append(
                f'Category "{request.category}" is not configured for system '
                f'"{system_key}"; using category "{category}" instead.'
            )
            logger.warning(
                "Category %r missing for system %r, falling back to %r",
                request.category, system_key, category,
            )

        grid = self.table.lookup_grid(system_key, category)

        width, width_side = clamp(request.width, grid.widths)
        if width_side:
            notes.append(_out_of_range_note("Width", request.width, width_side, width))
        height, height_side = clamp(request.height, grid.heights)
        if height_side:
            notes.append(_out_of_range_note("Height", request.height, height_side, height))
        if width_side or height_side:
            logger.warning(
                "Clamped %.3fx%.3f to %.3fx%.3f for %s/%s",
                request.width, request.height, width, height, system_key, category,
            )

        coefficient = self.bucketing.value_at(grid, width, height)

        return ResolutionResult(
            coefficient=coefficient,
            is_fallback_category=is_fallback,
            warning=" ".join(notes) if notes else None,
            used_system_key=system_key,
            used_category=category,
        )

    def systems(self) -> List[str]:
        """Known system keys, sorted. Mirrors the table exactly."""
        return sorted(self.table.systems())


def _out_of_range_note(axis_name: str, requested: float, side: str, used: float) -> str:
    bound = "minimum" if side == "below" else "maximum"
    return (
        f"{axis_name} {requested:g} m is {side} the measured range; "
        f"using the {bound} {used:g} m (extrapolated)."
    )
