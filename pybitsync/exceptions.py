"""Exceptions raised by pybitsync."""

from typing import Any, Optional


class BitbucketError(Exception):
    """Base exception for all pybitsync errors."""


class BitbucketConfigError(BitbucketError):
    """Raised when required configuration is missing."""


class InvalidRepositoryError(BitbucketError, ValueError):
    """Raised when a repository specifier cannot be parsed."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"Invalid repository: {repository}")


class DuplicateEntityFileError(BitbucketError):
    """Raised when two files claim the same slot of one entity."""

    def __init__(self, entity: str, slot: str, path: str):
        self.entity = entity
        self.slot = slot
        self.path = path
        super().__init__(f"Duplicate {slot} for '{entity}': {path}")


class BitbucketAPIError(BitbucketError):
    """Raised when a Bitbucket API request fails.

    Attributes:
        status_code: HTTP status code of the failed response, if any
        report: Structured description of the failure, suitable for
            forwarding to a progress log
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.report: dict[str, Any] = {
            "type": "error",
            "message": message,
            "status_code": status_code,
            "url": url,
        }


class BitbucketAuthenticationError(BitbucketAPIError):
    """Raised on 401 responses."""


class BitbucketPermissionError(BitbucketAPIError):
    """Raised on 403 responses."""


class BitbucketNotFoundError(BitbucketAPIError):
    """Raised on 404 responses."""


class BitbucketRateLimitError(BitbucketAPIError):
    """Raised on 429 responses."""


class BitbucketNetworkError(BitbucketAPIError):
    """Raised when the server could not be reached."""


class BitbucketInvalidResponseError(BitbucketAPIError):
    """Raised when a response body cannot be decoded."""
