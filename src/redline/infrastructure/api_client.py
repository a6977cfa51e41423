"""Async HTTP helper for the revision API.

Wraps :class:`httpx.AsyncClient` with JSON handling, bearer-token auth and
failure normalization. Retries are opt-in per call and only cover transport
failures; an HTTP error status is an answer, not a reason to retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..errors import ErrorLocation, HttpError, NetworkError, RevisionError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ClientSettings:
    """Subset of settings required to configure the API client."""

    base_url: str
    api_token: str = ""
    request_timeout: float | None = 30.0
    max_retries: int = 3
    retry_min_seconds: float = 0.1
    retry_max_seconds: float = 2.0
    default_headers: Mapping[str, str] | None = None


@dataclass(slots=True)
class ApiResponse:
    """Envelope returned when a request is made with ``raise_errors=False``."""

    data: Any
    error: RevisionError | None
    status: int
    success: bool


class ApiClient:
    """Async JSON client with optional exponential-backoff retry."""

    def __init__(
        self,
        settings: ClientSettings,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or self._build_client(settings, transport)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def request(
        self,
        method: str,
        path: str,
        json: Any | None = None,
        params: Mapping[str, Any] | None = None,
        *,
        retry: bool = False,
        retry_count: int | None = None,
        raise_errors: bool = True,
    ) -> Any:
        """Send a request and return the decoded body.

        Args:
            method: HTTP method.
            path: Path relative to the configured base URL.
            json: Optional JSON body; ignored for GET.
            params: Query parameters; None values are dropped.
            retry: Retry transport failures with exponential backoff.
            retry_count: Attempts when retrying; defaults to ``max_retries``.
            raise_errors: When False, return an :class:`ApiResponse` instead
                of raising.

        Raises:
            NetworkError: No response was received.
            HttpError: The server returned a non-2xx status.
        """
        method = method.upper()
        query = {key: value for key, value in (params or {}).items() if value is not None}
        body = json if method != "GET" else None

        try:
            response = await self._send(method, path, body, query, retry=retry, retry_count=retry_count)
            data = _decode_body(response)
            if not response.is_success:
                raise _http_error(response, data)
        except RevisionError as exc:
            LOGGER.warning(
                "API request failed [%s]: %s %s -> %s",
                ErrorLocation.API_REQUEST,
                method,
                path,
                exc,
            )
            if raise_errors:
                raise
            status = exc.status if isinstance(exc, HttpError) else 0
            return ApiResponse(data=None, error=exc, status=status, success=False)

        if raise_errors:
            return data
        return ApiResponse(data=data, error=None, status=response.status_code, success=True)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any | None = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json, **kwargs)

    async def patch(self, path: str, json: Any | None = None, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, json, **kwargs)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        body: Any | None,
        params: Mapping[str, Any],
        *,
        retry: bool,
        retry_count: int | None,
    ) -> httpx.Response:
        attempts = 1
        if retry:
            attempts = max(1, retry_count if retry_count is not None else self._settings.max_retries)
        try:
            async for attempt in self._retrying(attempts):
                with attempt:
                    LOGGER.debug(
                        "HTTP %s %s (attempt %d/%d)",
                        method,
                        path,
                        attempt.retry_state.attempt_number,
                        attempts,
                    )
                    return await self._client.request(method, path, json=body, params=params or None)
        except httpx.TransportError as exc:
            raise NetworkError(
                message=f"Network request failed: {method} {path}",
                details={"reason": str(exc) or type(exc).__name__},
            ) from exc
        raise NetworkError(message=f"Network request failed: {method} {path}")  # pragma: no cover

    def _retrying(self, attempts: int) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_min_seconds,
                max=self._settings.retry_max_seconds,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
        )

    def _build_client(
        self,
        settings: ClientSettings,
        transport: httpx.AsyncBaseTransport | None,
    ) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if settings.default_headers:
            headers.update(settings.default_headers)
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        return httpx.AsyncClient(
            base_url=settings.base_url,
            headers=headers,
            timeout=settings.request_timeout,
            transport=transport,
        )


def _decode_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            LOGGER.debug("Response declared JSON but could not be decoded")
            return None
    if content_type.startswith("text/"):
        return response.text
    return None


def _http_error(response: httpx.Response, data: Any) -> HttpError:
    message = None
    if isinstance(data, Mapping) and data.get("message"):
        message = str(data["message"])
    if not message:
        message = f"API Error: {response.status_code} {response.reason_phrase}".rstrip()
    return HttpError(
        message=message,
        status=response.status_code,
        data=data,
        details={"url": str(response.request.url)},
    )


__all__ = ["ApiClient", "ApiResponse", "ClientSettings"]
