from typing import Optional, Sequence

from .base import FallbackPolicy


class FirstAvailableFallback(FallbackPolicy):
    """Substitute the lexicographically first category the system carries."""

    name = "first_available"

    def choose(self, requested: str, available: Sequence[str]) -> Optional[str]:
        if not available:
            return None
        return min(available)
