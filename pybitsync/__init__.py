"""pybitsync - fetch rules, database scripts and pages from Bitbucket."""

from .api import BitbucketClient
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
    DuplicateEntityFileError,
    InvalidRepositoryError,
)
from .models import (
    DatabaseEntity,
    DatabaseScript,
    DownloadedFile,
    PageEntity,
    RemoteFile,
    RepositoryRef,
    RuleEntity,
    SyncResult,
)
from .utils import parse_repository

__all__ = [
    "BitbucketClient",
    "BitbucketError",
    "BitbucketAPIError",
    "BitbucketAuthenticationError",
    "BitbucketConfigError",
    "BitbucketInvalidResponseError",
    "BitbucketNetworkError",
    "BitbucketNotFoundError",
    "BitbucketPermissionError",
    "BitbucketRateLimitError",
    "DuplicateEntityFileError",
    "InvalidRepositoryError",
    "RepositoryRef",
    "RemoteFile",
    "DownloadedFile",
    "RuleEntity",
    "PageEntity",
    "DatabaseScript",
    "DatabaseEntity",
    "SyncResult",
    "parse_repository",
]
