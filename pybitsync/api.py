"""API client for Bitbucket."""

from __future__ import annotations

import logging
import random
import re
import threading
import time
from typing import Any
from urllib.parse import quote

import httpx

from .config import config
from .exceptions import (
    BitbucketAPIError,
    BitbucketAuthenticationError,
    BitbucketConfigError,
    BitbucketError,
    BitbucketInvalidResponseError,
    BitbucketNetworkError,
    BitbucketNotFoundError,
    BitbucketPermissionError,
    BitbucketRateLimitError,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def expand_path(path_template: str, params: dict[str, Any]) -> str:
    """Substitute ``{name}`` placeholders in a path template.

    Values are URL-quoted, slashes are kept so that file paths expand into
    nested path segments.

    Args:
        path_template: Template such as ``repositories/{username}/{repo_slug}``
        params: Values for the placeholders

    Returns:
        Expanded path

    Raises:
        KeyError: If a placeholder has no value in params
    """

    def replace(match: re.Match[str]) -> str:
        return quote(str(params[match.group(1)]), safe="/")

    return _PLACEHOLDER.sub(replace, path_template)


class BitbucketClient:
    """Client for the Bitbucket REST API.

    A single instance is meant to be shared by every part of a sync; the
    underlying httpx client is thread-safe.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        api_url: str | None = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Bitbucket API client.

        Args:
            username: Optional account name (uses config if not provided)
            password: Optional app password (uses config if not provided)
            api_url: Optional API URL (uses config if not provided)
            max_retries: Maximum number of retry attempts (default: 3)
            retry_delay: Initial delay between retries in seconds (default: 1.0)
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport, mainly for tests
        """
        self.username = username or config.username
        self.password = password or config.password
        self.api_url = (api_url or config.api_url).rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._transport = transport

        if not self.username or not self.password:
            raise BitbucketConfigError(
                "Bitbucket credentials not configured. Please set BITBUCKET_USER "
                "and BITBUCKET_PASSWORD environment variables."
            )

        self._client: httpx.Client | None = None
        self._closed = False
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client.

        Raises:
            BitbucketError: If the client has been closed
        """
        with self._lock:
            if self._closed:
                raise BitbucketError("Bitbucket client is closed")
            if self._client is None:
                self._client = httpx.Client(
                    auth=(self.username or "", self.password or ""),
                    timeout=httpx.Timeout(self.timeout),
                    follow_redirects=True,
                    transport=self._transport,
                )
            return self._client

    def close(self) -> None:
        """Close the client and release connections.

        Requests made after this, for instance by downloads still running
        when a sync failed, raise instead of opening a new connection.
        """
        with self._lock:
            self._closed = True
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> BitbucketClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if a request should be retried.

        Args:
            exception: The exception that occurred
            attempt: Current attempt number (0-based)

        Returns:
            True if the request should be retried, False otherwise
        """
        if attempt >= self.max_retries:
            return False

        if isinstance(exception, (BitbucketNetworkError, BitbucketRateLimitError)):
            return True

        if isinstance(exception, BitbucketAPIError) and exception.status_code:
            return 500 <= exception.status_code < 600

        return False

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Calculate delay before next retry using exponential backoff.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        base_delay = self.retry_delay * (2**attempt)
        # +/- 25% jitter
        jitter = base_delay * 0.25 * (2 * random.random() - 1)
        return base_delay + jitter

    def _error_from_response(self, response: httpx.Response) -> BitbucketAPIError:
        """Map an error response to the matching exception.

        Args:
            response: Response with a 4xx or 5xx status

        Returns:
            Exception describing the failure
        """
        status_code = response.status_code
        url = str(response.request.url)

        if status_code == 401:
            return BitbucketAuthenticationError(
                "Invalid credentials or unauthorized access", status_code, url
            )
        elif status_code == 403:
            return BitbucketPermissionError(
                "Access forbidden - check your permissions", status_code, url
            )
        elif status_code == 404:
            return BitbucketNotFoundError("Resource not found", status_code, url)
        elif status_code == 429:
            return BitbucketRateLimitError(
                "Rate limit exceeded - please try again later", status_code, url
            )

        error_msg = f"API request failed with status {status_code}"
        try:
            if response.content:
                error_data = response.json()
                if isinstance(error_data, dict):
                    detail = error_data.get("error")
                    if isinstance(detail, dict):
                        detail = detail.get("message")
                    msg = detail or error_data.get("message")
                    if msg:
                        error_msg = f"{error_msg}: {msg}"
        except ValueError:
            # Body is not JSON, keep the status-based message
            pass

        return BitbucketAPIError(error_msg, status_code, url)

    def _retry_delay_for(
        self, error: Exception, response: httpx.Response | None, attempt: int
    ) -> float:
        if isinstance(error, BitbucketRateLimitError) and response is not None:
            retry_after = response.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                return float(retry_after)
        return self._calculate_retry_delay(attempt)

    def _request(
        self, method: str, endpoint: str, raw: bool = False, **kwargs: Any
    ) -> Any:
        """Make an API request with retry logic.

        Args:
            method: HTTP method
            endpoint: API endpoint path, relative to the API URL
            raw: Return the body as bytes instead of decoding JSON
            **kwargs: Additional arguments passed to httpx

        Returns:
            Decoded JSON data, or bytes when raw is set

        Raises:
            BitbucketAPIError: If the request fails after all retries
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        client = self._get_client()

        for attempt in range(self.max_retries + 1):
            response: httpx.Response | None = None
            try:
                response = client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                error: BitbucketAPIError = BitbucketNetworkError(
                    f"Network error: {e}", url=url
                )
                if self._should_retry(error, attempt):
                    time.sleep(self._calculate_retry_delay(attempt))
                    continue
                raise error from e

            if response.is_error:
                error = self._error_from_response(response)
                if self._should_retry(error, attempt):
                    delay = self._retry_delay_for(error, response, attempt)
                    logger.debug(
                        "Retrying %s %s in %.2fs (%s)", method, url, delay, error
                    )
                    time.sleep(delay)
                    continue
                raise error

            if raw:
                return response.content

            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise BitbucketInvalidResponseError(
                    "Invalid JSON response from server", response.status_code, url
                ) from e

        # Unreachable: the final attempt either returns or raises
        raise BitbucketAPIError("Request failed after all retry attempts", url=url)

    def get(
        self, path_template: str, params: dict[str, Any], raw: bool = False
    ) -> Any:
        """GET a path template expanded with params.

        Args:
            path_template: Template such as
                ``repositories/{username}/{repo_slug}/src/{revision}/rules``
            params: Placeholder values
            raw: Return the body as bytes instead of decoding JSON

        Returns:
            Decoded JSON data, or bytes when raw is set

        Examples:
            >>> client.get(
            ...     "repositories/{username}/{repo_slug}",
            ...     {"username": "acme", "repo_slug": "tenant"},
            ... )
        """
        return self._request("GET", expand_path(path_template, params), raw=raw)
