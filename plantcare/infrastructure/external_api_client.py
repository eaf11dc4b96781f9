"""
Infrastructure layer: Base HTTP client for external APIs with retry logic.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from plantcare.config import settings

logger = logging.getLogger(__name__)


class ExternalAPIError(Exception):
    """
    Raised when an external API call fails.

    Attributes:
        message: Human-readable description including the upstream status/body
        status_code: HTTP status to report to our own callers
        retryable: Whether the failure is transient (5xx or transport error)
    """

    def __init__(self, message: str, status_code: int = 502, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


class MissingCredentialsError(ExternalAPIError):
    """Raised when an API key required for a call is not configured."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500, retryable=False)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ExternalAPIError) and exc.retryable


class ExternalAPIClient:
    """
    Shared HTTP plumbing for external API clients.

    Wraps an httpx.AsyncClient and retries transient failures with
    exponential backoff. The number of attempts comes from settings and
    defaults to a single pass.
    """

    service_name = "External API"

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        min_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL all endpoints are relative to
            headers: Default headers sent with every request
            timeout: Request timeout in seconds
            max_attempts: Total attempts per request (1 disables retries)
            min_wait: Minimum backoff between attempts in seconds
            max_wait: Maximum backoff between attempts in seconds
        """
        self.base_url = base_url
        self.max_attempts = max_attempts or settings.max_retry_attempts
        self.min_wait = settings.retry_min_wait if min_wait is None else min_wait
        self.max_wait = settings.retry_max_wait if max_wait is None else max_wait
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={"accept": "application/json", **(headers or {})},
            timeout=timeout or settings.request_timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request, retrying transient failures.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            ExternalAPIError: If the request fails after all attempts
        """
        retryer = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=settings.retry_backoff_multiplier,
                min=self.min_wait,
                max=self.max_wait,
            ),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async for attempt in retryer:
            with attempt:
                return await self._send(method, endpoint, **kwargs)

    async def _send(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(
                f"{self.service_name} returned {status_code} for {method} {endpoint}"
            )
            # Server errors (5xx) are transient, client errors (4xx) are not
            raise ExternalAPIError(
                f"{self.service_name} error: {status_code} - {e.response.text}",
                status_code=502 if status_code >= 500 else status_code,
                retryable=status_code >= 500,
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"{self.service_name} request error: {e}")
            raise ExternalAPIError(
                f"{self.service_name} request error: {str(e)}",
                retryable=True,
            ) from e
        except ValueError as e:
            raise ExternalAPIError(
                f"{self.service_name} returned invalid JSON"
            ) from e
