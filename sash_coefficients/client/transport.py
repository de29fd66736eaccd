"""
Transports: one request/response exchange per resolution attempt.

Every transport is awaited inside an asyncio task. Aborting the exchange is
cancelling that task: the awaiting coroutine receives CancelledError and any
open connection is closed.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import ValidationError

from ..config import settings
from ..errors import InvalidDimensions, TransportFailure, UnknownCategory, UnknownSystem
from ..resolver import CoefficientResolver
from ..schemas import ResolutionRequest, ResolutionResult

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/api/coefficients/calculate"


class Transport(ABC):

    @abstractmethod
    async def send(self, request: ResolutionRequest) -> ResolutionResult:
        """
        Perform one resolution exchange.
        Raises UnknownSystem / UnknownCategory / InvalidDimensions for rejected
        requests and TransportFailure for anything else that went wrong.
        """
        pass


class LocalTransport(Transport):
    """Runs the resolver in-process. Used offline and in tests."""

    def __init__(self, resolver: CoefficientResolver):
        self.resolver = resolver

    async def send(self, request: ResolutionRequest) -> ResolutionResult:
        # Yield once so cancellation behaves like a real exchange
        await asyncio.sleep(0)
        return self.resolver.resolve(request)


class HttpTransport(Transport):
    """
    POSTs to the coefficient service's /api/coefficients/calculate endpoint.

    Each exchange opens its own httpx.AsyncClient. Cancelling the awaiting
    task unwinds the client context, which closes the connection.
    """

    def __init__(self, base_url: str = None, timeout: float = None,
                 http_transport: httpx.AsyncBaseTransport = None):
        self.base_url = (base_url or settings.CLIENT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS
        self.http_transport = http_transport

    @property
    def url(self) -> str:
        return self.base_url + CALCULATE_PATH

    async def send(self, request: ResolutionRequest) -> ResolutionResult:
        payload = json.dumps(request.model_dump(by_alias=True)).encode("utf-8")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.http_transport) as client:
                response = await client.post(
                    self.url,
                    content=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            raise TransportFailure(f"Coefficient request to {self.url} failed: {e}") from e
        return self._parse_response(request, response.status_code, response.content)

    def _parse_response(self, request: ResolutionRequest, status: int, body: bytes) -> ResolutionResult:
        if status == 404:
            # Only the service's own rejections name the key; a 404 from a
            # wrong base URL or proxy is a transport problem
            detail = _error_detail(body)
            if detail.startswith("Unknown system key"):
                raise UnknownSystem(request.system_key)
            if detail.startswith("Unknown category"):
                raise UnknownCategory(request.system_key, request.category)
        if status == 422:
            raise InvalidDimensions(request.width, request.height)
        if status < 200 or status >= 300:
            logger.warning("Coefficient service returned HTTP %d: %s", status, body[:200])
            raise TransportFailure(f"Coefficient service returned HTTP {status}", status_code=status)

        try:
            data = json.loads(body)
            return ResolutionResult.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise TransportFailure(f"Malformed coefficient response: {e}", status_code=status) from e


def _error_detail(body: bytes) -> str:
    """The "detail" string of a FastAPI error body, or "" for anything else."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ""
    if isinstance(data, dict) and isinstance(data.get("detail"), str):
        return data["detail"]
    return ""
