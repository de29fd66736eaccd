import bisect
from typing import Sequence, Tuple

from ..schemas import Grid
from .base import BREAKPOINT_EPSILON, BucketingPolicy


def ceiling_index(axis: Sequence[float], value: float) -> int:
    """Index of the smallest breakpoint >= value. Value must be <= axis[-1]."""
    index = bisect.bisect_left(axis, value - BREAKPOINT_EPSILON)
    return min(index, len(axis) - 1)


def bracket(axis: Sequence[float], value: float) -> Tuple[int, int]:
    """
    Indices (lo, hi) of the breakpoints surrounding value.
    lo == hi when value sits on a breakpoint or the axis has a single point.
    """
    hi = ceiling_index(axis, value)
    if abs(axis[hi] - value) <= BREAKPOINT_EPSILON or hi == 0:
        return hi, hi
    return hi - 1, hi


class CeilingBucketing(BucketingPolicy):
    """
    Cost a unit against the next-larger measured size on each axis.
    Exact breakpoint matches use that breakpoint.
    """

    name = "ceiling"

    def value_at(self, grid: Grid, width: float, height: float) -> float:
        i = ceiling_index(grid.widths, width)
        j = ceiling_index(grid.heights, height)
        return grid.values[i][j]


class BilinearInterpolation(BucketingPolicy):
    """Continuous blend of the four grid points bracketing (width, height)."""

    name = "bilinear"

    def value_at(self, grid: Grid, width: float, height: float) -> float:
        i1, i2 = bracket(grid.widths, width)
        j1, j2 = bracket(grid.heights, height)

        q11 = grid.values[i1][j1]
        q12 = grid.values[i1][j2]
        q21 = grid.values[i2][j1]
        q22 = grid.values[i2][j2]

        tx = _fraction(grid.widths[i1], grid.widths[i2], width)
        ty = _fraction(grid.heights[j1], grid.heights[j2], height)

        low = q11 + (q21 - q11) * tx
        high = q12 + (q22 - q12) * tx
        return low + (high - low) * ty


def _fraction(lo: float, hi: float, value: float) -> float:
    if hi == lo:
        return 0.0
    return (value - lo) / (hi - lo)
