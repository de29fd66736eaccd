from fastapi import APIRouter, Depends, HTTPException
from typing import List

from ..errors import InvalidDimensions, UnknownCategory, UnknownSystem
from ..resolver import CoefficientResolver
from ..dependencies import get_resolver
from .. import schemas

router = APIRouter(prefix="/coefficients", tags=["coefficients"])


@router.post(
    "/calculate",
    response_model=schemas.ResolutionResult,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
def calculate(request: schemas.ResolutionRequest,
              resolver: CoefficientResolver = Depends(get_resolver)):
    """Resolve the coefficient for one sash."""
    try:
        return resolver.resolve(request)
    except (UnknownSystem, UnknownCategory) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidDimensions as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/systems", response_model=List[str])
def list_systems(resolver: CoefficientResolver = Depends(get_resolver)):
    """Known system keys, exactly the loaded table's keys."""
    return resolver.systems()


@router.get("/systems/{system_key}/categories", response_model=List[str])
def list_categories(system_key: str, resolver: CoefficientResolver = Depends(get_resolver)):
    if not resolver.table.has_system(system_key):
        raise HTTPException(status_code=404, detail=f"Unknown system key: {system_key!r}")
    return list(resolver.table.categories(system_key))


@router.get(
    "/systems/{system_key}/ranges",
    response_model=schemas.GridRanges,
    response_model_by_alias=True,
)
def get_ranges(system_key: str, category: str,
               resolver: CoefficientResolver = Depends(get_resolver)):
    if not resolver.table.has_system(system_key):
        raise HTTPException(status_code=404, detail=f"Unknown system key: {system_key!r}")
    ranges = resolver.table.ranges(system_key, category)
    if ranges is None:
        raise HTTPException(
            status_code=404,
            detail=f"Category {category!r} not configured for system {system_key!r}",
        )
    return ranges
