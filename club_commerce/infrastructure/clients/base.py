"""Shared HTTP plumbing for the club services gateway"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from club_commerce.config import settings
from club_commerce.domain.exceptions import (
    AuthenticationError,
    InvalidResponseShapeError,
    RemoteServiceError,
)
from club_commerce.domain.models import ClubContext
from club_commerce.infrastructure.observability.metrics import (
    remote_call_failures_counter,
    remote_call_latency_histogram,
)

logger = logging.getLogger(__name__)

# Async callable returning the signed-in user's identity token
TokenProvider = Callable[[], Awaitable[Optional[str]]]

ModelT = TypeVar("ModelT", bound=BaseModel)


def context_params(context: ClubContext) -> Dict[str, str]:
    """Club context in the gateway's camelCase query/body form"""
    return {
        "clubName": context.club_name or "",
        "ageGroup": context.age_group or "",
        "division": context.division or "",
    }


class ClubServiceClient:
    """Base client for one club service behind the gateway"""

    service = "club"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.token_provider = token_provider
        self.transport = transport

    async def _auth_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token_provider is None:
            return headers

        try:
            token = await self.token_provider()
        except Exception as e:
            raise AuthenticationError(
                "Authentication token could not be retrieved. Please log out and log in again."
            ) from e

        if not token:
            raise AuthenticationError("User not authenticated - please log in again")

        headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        """
        Perform one request and return the response whatever its status.

        Raises:
            AuthenticationError: No identity token available
            RemoteServiceError: On timeout or transport failure
        """
        headers = await self._auth_headers()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with remote_call_latency_histogram.labels(service=self.service).time():
                    return await client.request(
                        method,
                        f"{self.base_url}{path}",
                        params=params,
                        json=json,
                        headers=headers,
                    )
            except httpx.TimeoutException as e:
                self._record_failure()
                raise RemoteServiceError(f"{self.service.capitalize()} service timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                self._record_failure()
                raise RemoteServiceError(f"{self.service.capitalize()} service unreachable: {e}") from e

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        """Like _send, but a non-success status raises RemoteServiceError"""
        response = await self._send(method, path, params=params, json=json)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._record_failure()
            raise RemoteServiceError(
                f"{self.service.capitalize()} service error: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        return response

    def _parse(self, response: httpx.Response, model: Type[ModelT]) -> ModelT:
        """Validate a JSON body against its expected shape"""
        try:
            return model.model_validate(response.json())
        except (KeyError, ValueError, TypeError) as e:
            self._record_failure()
            raise InvalidResponseShapeError(
                f"Invalid {model.__name__} from {self.service} service: {e}",
                status_code=response.status_code,
            ) from e

    def _record_failure(self) -> None:
        remote_call_failures_counter.labels(service=self.service).inc()
