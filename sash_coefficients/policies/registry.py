"""
Policy registry: maps configuration names to policy classes.
"""

from .base import BucketingPolicy, FallbackPolicy
from .bucketing import BilinearInterpolation, CeilingBucketing
from .fallback import FirstAvailableFallback

BUCKETING_REGISTRY: dict[str, type] = {
    CeilingBucketing.name: CeilingBucketing,
    BilinearInterpolation.name: BilinearInterpolation,
}

FALLBACK_REGISTRY: dict[str, type] = {
    FirstAvailableFallback.name: FirstAvailableFallback,
}


def get_bucketing_policy(name: str) -> BucketingPolicy:
    """Returns an instance of the named bucketing policy, or raises ValueError."""
    if name not in BUCKETING_REGISTRY:
        raise ValueError(
            f"No bucketing policy registered as: {name}. "
            f"Available: {list(BUCKETING_REGISTRY.keys())}"
        )
    return BUCKETING_REGISTRY[name]()


def get_fallback_policy(name: str) -> FallbackPolicy:
    """Returns an instance of the named fallback policy, or raises ValueError."""
    if name not in FALLBACK_REGISTRY:
        raise ValueError(
            f"No fallback policy registered as: {name}. "
            f"Available: {list(FALLBACK_REGISTRY.keys())}"
        )
    return FALLBACK_REGISTRY[name]()
