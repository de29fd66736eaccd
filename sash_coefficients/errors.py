"""
Error taxonomy for coefficient resolution.

Cancellation of a superseded request is not an error and has no class here:
it is plain asyncio.CancelledError and never reaches a caller's callbacks.
"""


class CoefficientError(Exception):
    """Base class for every coefficient resolution failure."""


class DatasetIntegrityError(CoefficientError):
    """The static dataset violates a grid invariant. Fatal at startup."""


class UnknownSystem(CoefficientError):
    """System key not present in the coefficient table. Never retried."""

    def __init__(self, system_key: str):
        self.system_key = system_key
        super().__init__(f"Unknown system key: {system_key!r}")


class UnknownCategory(CoefficientError):
    """Category missing for a known system and the fallback policy offered no substitute."""

    def __init__(self, system_key: str, category: str):
        self.system_key = system_key
        self.category = category
        super().__init__(f"Unknown category {category!r} for system {system_key!r}")


class InvalidDimensions(CoefficientError):
    """Width or height is non-positive or non-finite."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        super().__init__(
            f"Width and height must be positive finite numbers, got width={width!r}, height={height!r}"
        )


class TransportFailure(CoefficientError):
    """Network or protocol level failure of a non-cancelled request."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
