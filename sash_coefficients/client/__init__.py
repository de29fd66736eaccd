"""
Order-editor side of coefficient resolution: per-sash debounce, cancellation
of superseded requests, and a session-wide result cache.
"""

from .resolution_client import ResolutionClient, SashResolutionState, fingerprint
from .transport import HttpTransport, LocalTransport, Transport

__all__ = [
    "ResolutionClient",
    "SashResolutionState",
    "fingerprint",
    "Transport",
    "HttpTransport",
    "LocalTransport",
]
