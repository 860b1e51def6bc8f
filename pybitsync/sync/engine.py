"""Core sync engine fetching deployable entities from a repository."""

import json
import logging
import time
from typing import Any, Callable, Optional

from ..api import BitbucketClient
from ..models import RemoteFile, RepositoryRef, SyncResult
from ..progress import ProgressLog
from ..utils import parse_repository
from .concurrency import run_all
from .downloader import EntityDownloader
from .grouping import group_databases, group_pages, group_rules
from .operations import SyncOperations
from .scanner import TreeScanner

logger = logging.getLogger(__name__)

REPOSITORY_PATH = "repositories/{username}/{repo_slug}"

Unify = Callable[[list[dict[str, Any]]], Any]


def _reconcile(unify: Optional[Unify], entities: list[Any]) -> Any:
    if unify is None:
        return entities
    return unify([entity.to_dict() for entity in entities])


class SyncEngine:
    """Core sync engine that collects rules, databases and pages.

    The engine owns no reconciliation logic: the downloaded entities are
    passed, in their ``to_dict`` layout, to ``unify_scripts`` (rules and
    pages) and ``unify_databases`` and their results are returned as they
    are. Without those functions the entities themselves are returned.
    """

    def __init__(
        self,
        client: BitbucketClient,
        unify_scripts: Optional[Unify] = None,
        unify_databases: Optional[Unify] = None,
    ):
        """Initialize sync engine.

        Args:
            client: Bitbucket API client shared by every request of a sync
            unify_scripts: Reconciles rule and page entities (default: none)
            unify_databases: Reconciles database entities (default: none)
        """
        self.client = client
        self.unify_scripts = unify_scripts
        self.unify_databases = unify_databases
        self.operations = SyncOperations(client)
        self.scanner = TreeScanner(client)
        self.downloader = EntityDownloader(self.operations)

    def check_repository(self, repository: str) -> RepositoryRef:
        """Parse a repository specifier and make sure the repository exists.

        Args:
            repository: ``owner/name`` or a repository URL

        Returns:
            RepositoryRef of the repository

        Raises:
            InvalidRepositoryError: If the specifier cannot be parsed
            BitbucketAPIError: If the repository cannot be read
        """
        repo = parse_repository(repository)
        self.client.get(REPOSITORY_PATH, repo.params)
        return repo

    def get_tree(
        self,
        repository: RepositoryRef,
        revision: str,
        progress: Optional[ProgressLog] = None,
    ) -> list[RemoteFile]:
        """List the relevant files, reporting listing failures to progress."""
        try:
            return self.scanner.scan(repository, revision)
        except Exception as e:
            report = getattr(e, "report", None)
            if progress is not None and hasattr(progress, "log") and report:
                progress.log(report)
            raise

    def sync(
        self,
        repository: str,
        branch: str,
        revision: str,
        progress: Optional[ProgressLog] = None,
    ) -> SyncResult:
        """Get everything that needs to be applied from a revision.

        Args:
            repository: ``owner/name`` or a repository URL
            branch: Branch the revision belongs to. Only logged; every read
                is pinned to revision.
            revision: Commit to read
            progress: Optional log receiving the error report if listing the
                tree fails

        Returns:
            SyncResult with the reconciled rules, databases and pages

        Raises:
            InvalidRepositoryError: If the repository specifier is malformed
            BitbucketAPIError: If any request fails. No partial result is
                returned.

        Examples:
            >>> engine = SyncEngine(client, unify_scripts, unify_databases)
            >>> result = engine.sync("acme/tenant", "master", "8f3e2a1")
            >>> result.rules
        """
        start_time = time.time()
        repo = self.check_repository(repository)
        logger.debug("Syncing %s (branch %s) at %s", repo, branch, revision)

        files = self.get_tree(repo, revision, progress)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Files in tree: %s",
                json.dumps([{"path": f.path, "sha": f.sha} for f in files], indent=2),
            )

        rules, pages, databases = run_all(
            [
                lambda: self.downloader.download_rules(
                    repo, group_rules(files), revision
                ),
                lambda: self.downloader.download_pages(
                    repo, group_pages(files), revision
                ),
                lambda: self.downloader.download_databases(
                    repo, group_databases(files), revision
                ),
            ],
            max_workers=3,
        )

        logger.debug(
            "Downloaded %d rule(s), %d page(s) and %d database(s) in %.2fs",
            len(rules),
            len(pages),
            len(databases),
            time.time() - start_time,
        )
        return SyncResult(
            rules=_reconcile(self.unify_scripts, rules),
            databases=_reconcile(self.unify_databases, databases),
            pages=_reconcile(self.unify_scripts, pages),
        )


def sync_repository(
    repository: str,
    branch: str,
    revision: str,
    progress: Optional[ProgressLog] = None,
    unify_scripts: Optional[Unify] = None,
    unify_databases: Optional[Unify] = None,
) -> SyncResult:
    """Run one sync with a client configured from the environment."""
    with BitbucketClient() as client:
        engine = SyncEngine(client, unify_scripts, unify_databases)
        return engine.sync(repository, branch, revision, progress)
