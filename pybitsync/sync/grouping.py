"""Grouping of repository files into rules, pages and databases.

Each grouper keeps only the files of its own category and returns a mapping
from entity name to the files making up the entity, ordered by name so the
result does not depend on listing order.

A slot holds exactly one file. When two files map to the same slot, such as
``rules/a.js`` and ``rules/a.JS``, grouping raises
``DuplicateEntityFileError`` and the sync fails instead of keeping whichever
file was listed last.
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional

from ..exceptions import DuplicateEntityFileError
from ..models import RemoteFile
from .paths import get_database_script_details, is_database_connection, is_page, is_rule

logger = logging.getLogger(__name__)


@dataclass
class RuleFiles:
    """Files of one rule."""

    script: Optional[RemoteFile] = None
    metadata: Optional[RemoteFile] = None


@dataclass
class PageFiles:
    """Files of one page."""

    html: Optional[RemoteFile] = None
    metadata: Optional[RemoteFile] = None


@dataclass
class DatabaseScriptFile:
    """A database script role and the file implementing it."""

    name: str
    file: RemoteFile


@dataclass
class DatabaseFiles:
    """Scripts of one database connection."""

    scripts: list[DatabaseScriptFile] = field(default_factory=list)


def _set_slot(
    entity: str, slot: str, current: Optional[RemoteFile], remote_file: RemoteFile
) -> RemoteFile:
    if current is not None and current.path != remote_file.path:
        raise DuplicateEntityFileError(entity, slot, remote_file.path)
    return remote_file


def group_rules(files: list[RemoteFile]) -> dict[str, RuleFiles]:
    """Determine if each rule has the script, the metadata or both.

    Args:
        files: Files from the tree scan

    Returns:
        Mapping of rule name to its files

    Raises:
        DuplicateEntityFileError: If two files map to the same rule slot
            (e.g. ``a.js`` and ``a.JS``)
    """
    rules: dict[str, RuleFiles] = {}

    for remote_file in files:
        if not is_rule(remote_file.path):
            continue

        path = PurePosixPath(remote_file.path)
        extension = path.suffix.lower()
        if extension not in (".js", ".json"):
            continue

        rule = rules.setdefault(path.stem, RuleFiles())
        if extension == ".js":
            rule.script = _set_slot(path.stem, "script", rule.script, remote_file)
        else:
            rule.metadata = _set_slot(
                path.stem, "metadata", rule.metadata, remote_file
            )

    return dict(sorted(rules.items()))


def group_pages(files: list[RemoteFile]) -> dict[str, PageFiles]:
    """Pair each page with its metadata.

    Args:
        files: Files from the tree scan

    Returns:
        Mapping of page name to its files
    """
    pages: dict[str, PageFiles] = {}

    for remote_file in files:
        if not is_page(remote_file.path):
            continue

        path = PurePosixPath(remote_file.path)
        page = pages.setdefault(path.stem, PageFiles())
        if path.suffix != ".json":
            page.html = _set_slot(path.stem, "html", page.html, remote_file)
        else:
            page.metadata = _set_slot(
                path.stem, "metadata", page.metadata, remote_file
            )

    return dict(sorted(pages.items()))


def group_databases(files: list[RemoteFile]) -> dict[str, DatabaseFiles]:
    """Collect the scripts of each database connection.

    Args:
        files: Files from the tree scan

    Returns:
        Mapping of database name to its scripts, sorted by script name
    """
    databases: dict[str, DatabaseFiles] = {}

    for remote_file in files:
        if not is_database_connection(remote_file.path):
            continue

        details = get_database_script_details(remote_file.path)
        if details is None:
            continue

        database = databases.setdefault(details.database, DatabaseFiles())
        for existing in database.scripts:
            if existing.name == details.name:
                _set_slot(details.database, details.name, existing.file, remote_file)
                break
        else:
            database.scripts.append(
                DatabaseScriptFile(name=details.name, file=remote_file)
            )

    for database in databases.values():
        database.scripts.sort(key=lambda script: script.name)

    logger.debug("Grouped %d database(s)", len(databases))
    return dict(sorted(databases.items()))
