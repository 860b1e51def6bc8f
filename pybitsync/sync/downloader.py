"""Concurrent download of grouped entities."""

import logging
from typing import Callable, TypeVar

from ..config import MAX_CONCURRENT_ENTITY_DOWNLOADS
from ..models import (
    DatabaseEntity,
    DatabaseScript,
    DownloadedFile,
    PageEntity,
    RemoteFile,
    RepositoryRef,
    RuleEntity,
)
from ..utils import format_size
from .concurrency import run_all
from .grouping import DatabaseFiles, PageFiles, RuleFiles
from .operations import SyncOperations

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EntityDownloader:
    """Downloads the files of rules, pages and databases.

    The files of one entity are fetched at the same time and the entity only
    succeeds if all of them do. At most ``max_concurrent`` entities of a
    category are in flight, to stay within the API rate limits.
    """

    def __init__(
        self,
        operations: SyncOperations,
        max_concurrent: int = MAX_CONCURRENT_ENTITY_DOWNLOADS,
    ):
        """Initialize entity downloader.

        Args:
            operations: File operations used for every download
            max_concurrent: Entities downloaded at the same time per category
        """
        self.operations = operations
        self.max_concurrent = max_concurrent

    def _fetch(
        self,
        repository: RepositoryRef,
        files: list[RemoteFile],
        revision: str,
    ) -> list[DownloadedFile]:
        tasks = [
            lambda f=f: self.operations.download_file(repository, f, revision)
            for f in files
        ]
        return run_all(tasks, max_workers=len(tasks))

    def _download_each(self, names: list[str], build: Callable[[str], E]) -> list[E]:
        return run_all(
            [lambda name=name: build(name) for name in names],
            max_workers=self.max_concurrent,
        )

    def download_rule(
        self,
        repository: RepositoryRef,
        name: str,
        rule: RuleFiles,
        revision: str,
    ) -> RuleEntity:
        """Download a single rule with its metadata."""
        entity = RuleEntity(name=name)
        slots = [f for f in (rule.script, rule.metadata) if f is not None]
        files = self._fetch(repository, slots, revision)
        contents = iter(f.contents for f in files)

        # Results come back in slot order
        if rule.script is not None:
            entity.has_script = True
            entity.script_contents = next(contents)
        if rule.metadata is not None:
            entity.has_metadata = True
            entity.metadata_contents = next(contents)

        logger.debug(
            "Downloaded rule %s (%s)",
            name,
            format_size(sum(len(f.contents) for f in files)),
        )
        return entity

    def download_page(
        self,
        repository: RepositoryRef,
        name: str,
        page: PageFiles,
        revision: str,
    ) -> PageEntity:
        """Download a single page with its metadata."""
        entity = PageEntity(name=name)
        slots = [f for f in (page.html, page.metadata) if f is not None]
        contents = iter(f.contents for f in self._fetch(repository, slots, revision))

        if page.html is not None:
            entity.html_contents = next(contents)
        if page.metadata is not None:
            entity.has_metadata = True
            entity.metadata_contents = next(contents)

        logger.debug("Downloaded page %s", name)
        return entity

    def download_database(
        self,
        repository: RepositoryRef,
        name: str,
        database: DatabaseFiles,
        revision: str,
    ) -> DatabaseEntity:
        """Download all scripts of a database connection."""
        files = self._fetch(
            repository, [script.file for script in database.scripts], revision
        )
        entity = DatabaseEntity(
            name=name,
            scripts=[
                DatabaseScript(name=script.name, contents=downloaded.contents)
                for script, downloaded in zip(database.scripts, files)
            ],
        )

        logger.debug("Downloaded database %s (%d scripts)", name, len(entity.scripts))
        return entity

    def download_rules(
        self,
        repository: RepositoryRef,
        rules: dict[str, RuleFiles],
        revision: str,
    ) -> list[RuleEntity]:
        """Download all rules.

        Args:
            repository: Repository holding the files
            rules: Output of group_rules
            revision: Commit the files are read at

        Returns:
            Rule entities in the order of rules

        Raises:
            BitbucketAPIError: If any file fails to download
        """
        return self._download_each(
            list(rules),
            lambda name: self.download_rule(repository, name, rules[name], revision),
        )

    def download_pages(
        self,
        repository: RepositoryRef,
        pages: dict[str, PageFiles],
        revision: str,
    ) -> list[PageEntity]:
        """Download all pages."""
        return self._download_each(
            list(pages),
            lambda name: self.download_page(repository, name, pages[name], revision),
        )

    def download_databases(
        self,
        repository: RepositoryRef,
        databases: dict[str, DatabaseFiles],
        revision: str,
    ) -> list[DatabaseEntity]:
        """Download all database scripts."""
        return self._download_each(
            list(databases),
            lambda name: self.download_database(
                repository, name, databases[name], revision
            ),
        )
