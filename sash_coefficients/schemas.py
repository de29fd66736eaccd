import math
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator


class Grid(BaseModel):
    """
    Measured coefficients for one (system, category) pair.

    values[i][j] is the coefficient measured at (widths[i], heights[j]).
    Axes are strictly increasing and non-empty; values is exactly
    len(widths) x len(heights). Instances are frozen once validated.
    """

    widths: Tuple[float, ...]
    heights: Tuple[float, ...]
    values: Tuple[Tuple[float, ...], ...]

    class Config:
        frozen = True

    @field_validator("widths", "heights")
    @classmethod
    def _strictly_increasing(cls, axis, info):
        if len(axis) == 0:
            raise ValueError(f"{info.field_name} must contain at least one breakpoint")
        for value in axis:
            if not math.isfinite(value):
                raise ValueError(f"{info.field_name} contains a non-finite breakpoint: {value}")
        for prev, cur in zip(axis, axis[1:]):
            if cur <= prev:
                raise ValueError(
                    f"{info.field_name} must be strictly increasing ({prev} followed by {cur})"
                )
        return axis

    @model_validator(mode="after")
    def _values_match_axes(self):
        if len(self.values) != len(self.widths):
            raise ValueError(
                f"values has {len(self.values)} rows, expected {len(self.widths)} (one per width)"
            )
        for i, row in enumerate(self.values):
            if len(row) != len(self.heights):
                raise ValueError(
                    f"values[{i}] has {len(row)} columns, expected {len(self.heights)} (one per height)"
                )
            if not all(math.isfinite(v) for v in row):
                raise ValueError(f"values[{i}] contains a non-finite coefficient")
        return self


class ResolutionRequest(BaseModel):
    """One coefficient lookup. Width and height are in meters."""

    system_key: str = Field(alias="systemKey")
    category: str
    width: float
    height: float

    class Config:
        frozen = True
        populate_by_name = True


class ResolutionResult(BaseModel):
    coefficient: float
    is_fallback_category: bool = Field(default=False, alias="isFallbackCategory")
    warning: Optional[str] = None
    used_system_key: Optional[str] = Field(default=None, alias="usedSystemKey")
    used_category: Optional[str] = Field(default=None, alias="usedCategory")

    class Config:
        frozen = True
        populate_by_name = True

    def to_wire(self) -> dict:
        """Response body as sent over HTTP. camelCase, warning omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AxisRange(BaseModel):
    min: float
    max: float


class GridRanges(BaseModel):
    system_key: str = Field(alias="systemKey")
    category: str
    width_range: AxisRange = Field(alias="widthRange")
    height_range: AxisRange = Field(alias="heightRange")

    class Config:
        populate_by_name = True
