"""
Abstract bases for resolution policies.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..schemas import Grid

# Tolerance when comparing a requested dimension against a breakpoint.
# Dimensions arrive as mm/1000 floats, so 1.5 may show up as 1.5000000000000002.
BREAKPOINT_EPSILON = 1e-9


class BucketingPolicy(ABC):
    """Maps an in-bounds (width, height) onto a coefficient from the grid."""

    name = "abstract"

    @abstractmethod
    def value_at(self, grid: Grid, width: float, height: float) -> float:
        """
        Width and height are already clamped to the grid bounds.
        Returns the coefficient.
        """
        pass


class FallbackPolicy(ABC):
    """Picks a substitute category when the requested one is not configured."""

    name = "abstract"

    @abstractmethod
    def choose(self, requested: str, available: Sequence[str]) -> Optional[str]:
        """
        Returns one of `available`, or None if nothing can substitute.
        `available` is never empty for a loaded table.
        """
        pass
