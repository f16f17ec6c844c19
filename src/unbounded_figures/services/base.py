"""Base HTTP client for external API integrations."""

from abc import ABC, abstractmethod
from typing import Any

import httpx


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Raised when the upstream service rejects the presented credentials."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status_code=401)


class NotFoundError(APIError):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class BaseAPIClient(ABC):
    """Abstract base class for external API clients.

    Owns a lazily created ``httpx.AsyncClient`` and maps HTTP failures
    onto the exceptions above.
    """

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        """Initialize the base API client.

        Args:
            base_url: The base URL for the API.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def default_headers(self) -> dict[str, str]:
        """Return default headers for API requests."""
        ...

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request to the API.

        Raises:
            AuthenticationError: If the credentials are rejected (401/403).
            NotFoundError: If the resource is not found (404).
            APIError: For transport failures and other HTTP errors.
        """
        client = await self._get_client()

        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        try:
            response = await client.request(
                method=method,
                url=endpoint.lstrip("/"),
                params=params,
                headers=request_headers,
            )
        except httpx.TimeoutException as e:
            raise APIError(f"Request timed out: {e}", status_code=504) from e
        except httpx.RequestError as e:
            raise APIError(f"Request failed: {e}", status_code=502) from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON response or raise the matching error."""
        if response.status_code in (401, 403):
            raise AuthenticationError()

        if response.status_code == 404:
            raise NotFoundError()

        if response.status_code >= 400:
            raise APIError(
                f"Upstream error: {response.text}",
                status_code=502,
            )

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON response: {e}", status_code=502) from e

    async def get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make a GET request to the API."""
        return await self._request("GET", endpoint, params=params, headers=headers)

    async def __aenter__(self) -> "BaseAPIClient":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
