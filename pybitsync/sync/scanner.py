"""Remote tree scanning for sync operations."""

import logging
from typing import Any, Callable

from ..api import BitbucketClient
from ..config import (
    DATABASE_CONNECTIONS_DIRECTORY,
    PAGES_DIRECTORY,
    RULES_DIRECTORY,
)
from ..exceptions import BitbucketNotFoundError
from ..models import RemoteFile, RepositoryRef
from .concurrency import run_all
from .paths import valid_files_only, valid_page_files_only

logger = logging.getLogger(__name__)

SOURCE_PATH = "repositories/{username}/{repo_slug}/src/{revision}/{directory}"


def _files_from_listing(
    listing: Any, is_valid: Callable[[str], bool]
) -> list[RemoteFile]:
    """Extract the valid files of a directory listing.

    A listing without a ``files`` list is not an error; it is read as an
    empty directory. Entries without a string ``path`` are skipped.

    Args:
        listing: Decoded listing response
        is_valid: Path filter

    Returns:
        List of RemoteFile objects that pass the filter
    """
    if not isinstance(listing, dict) or not isinstance(listing.get("files"), list):
        return []

    return [
        RemoteFile.from_listing(entry)
        for entry in listing["files"]
        if isinstance(entry, dict)
        and isinstance(entry.get("path"), str)
        and is_valid(entry["path"])
    ]


class TreeScanner:
    """Lists the rules, database connection and page files of a revision.

    Examples:
        >>> scanner = TreeScanner(client)
        >>> files = scanner.scan(RepositoryRef("acme", "tenant"), "8f3e2a1")
        >>> for f in files:
        ...     print(f.path)
    """

    def __init__(self, client: BitbucketClient):
        """Initialize tree scanner.

        Args:
            client: Bitbucket API client
        """
        self.client = client

    def _list(
        self, repository: RepositoryRef, revision: str, directory: str
    ) -> Any:
        params = {**repository.params, "revision": revision, "directory": directory}
        logger.debug("Listing %s at %s", directory, revision)
        return self.client.get(SOURCE_PATH, params)

    def _list_top_level(
        self, repository: RepositoryRef, revision: str, directory: str
    ) -> Any:
        """List a top level directory, reading a missing directory as empty."""
        try:
            return self._list(repository, revision, directory)
        except BitbucketNotFoundError:
            logger.debug("Directory %s not found, treating as empty", directory)
            return None

    def get_rules_tree(
        self, repository: RepositoryRef, revision: str
    ) -> list[RemoteFile]:
        """Get the rule files."""
        listing = self._list_top_level(repository, revision, RULES_DIRECTORY)
        return _files_from_listing(listing, valid_files_only)

    def get_pages_tree(
        self, repository: RepositoryRef, revision: str
    ) -> list[RemoteFile]:
        """Get the page files."""
        listing = self._list_top_level(repository, revision, PAGES_DIRECTORY)
        return _files_from_listing(listing, valid_page_files_only)

    def get_connection_tree(
        self, repository: RepositoryRef, revision: str, directory: str
    ) -> list[RemoteFile]:
        """Get the script files of one database connection.

        Unlike the top level listings, a missing directory here is an error.
        """
        listing = self._list(repository, revision, directory)
        return _files_from_listing(listing, valid_files_only)

    def get_connections_tree(
        self, repository: RepositoryRef, revision: str
    ) -> list[RemoteFile]:
        """Get the script files of all database connections.

        Every connection sub directory is listed at the same time.
        """
        listing = self._list_top_level(
            repository, revision, DATABASE_CONNECTIONS_DIRECTORY
        )
        if not isinstance(listing, dict):
            return []

        subdirs = [d for d in listing.get("directories") or [] if isinstance(d, str)]
        tasks = [
            lambda d=d: self.get_connection_tree(
                repository, revision, f"{DATABASE_CONNECTIONS_DIRECTORY}/{d}"
            )
            for d in subdirs
        ]

        files: list[RemoteFile] = []
        for data in run_all(tasks, max_workers=len(tasks)):
            files.extend(data)
        return files

    def scan(self, repository: RepositoryRef, revision: str) -> list[RemoteFile]:
        """List every relevant file of a revision.

        Args:
            repository: Repository to scan
            revision: Commit to read

        Returns:
            Rule, database and page files, each path once

        Raises:
            BitbucketAPIError: On any listing failure other than a missing
                top level directory
        """
        rules, connections, pages = run_all(
            [
                lambda: self.get_rules_tree(repository, revision),
                lambda: self.get_connections_tree(repository, revision),
                lambda: self.get_pages_tree(repository, revision),
            ],
            max_workers=3,
        )

        files: list[RemoteFile] = []
        seen: set[str] = set()
        for remote_file in [*rules, *connections, *pages]:
            if remote_file.path not in seen:
                seen.add(remote_file.path)
                files.append(remote_file)

        logger.debug(
            "Found %d rule, %d database and %d page file(s)",
            len(rules),
            len(connections),
            len(pages),
        )
        return files
