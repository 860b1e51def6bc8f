"""Classification of repository paths into rules, databases and pages.

Categories are told apart by their top level directory. The prefix checks
include the trailing slash, so ``rules-old/a.js`` is not a rule.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from ..config import (
    DATABASE_CONNECTIONS_DIRECTORY,
    DATABASE_SCRIPTS,
    PAGE_NAMES,
    PAGES_DIRECTORY,
    RULES_DIRECTORY,
)

_RULE_FILE = re.compile(r"\.(js|json)$", re.IGNORECASE)
_JS_FILE = re.compile(r"\.js$", re.IGNORECASE)


@dataclass(frozen=True)
class DatabaseScriptDetails:
    """Database and script role encoded in a database-connections path."""

    database: str
    name: str


def is_rule(path: str) -> bool:
    """Check if a file is part of the rules folder."""
    return path.startswith(f"{RULES_DIRECTORY}/")


def is_database_connection(path: str) -> bool:
    """Check if a file is part of the database connections folder."""
    return path.startswith(f"{DATABASE_CONNECTIONS_DIRECTORY}/")


def is_page(path: str) -> bool:
    """Check if a file is one of the known pages."""
    return path.startswith(f"{PAGES_DIRECTORY}/") and path.split("/")[-1] in PAGE_NAMES


def get_database_script_details(path: str) -> Optional[DatabaseScriptDetails]:
    """Get the details of a database script.

    Only ``database-connections/<database>/<script>.js`` paths qualify, and
    the script name must be one of the known roles.

    Args:
        path: Repository path

    Returns:
        DatabaseScriptDetails, or None if the path is not a database script

    Examples:
        >>> get_database_script_details("database-connections/users/login.js")
        DatabaseScriptDetails(database='users', name='login')
        >>> get_database_script_details("database-connections/users/notes.js")
    """
    parts = path.split("/")
    if len(parts) != 3 or not _JS_FILE.search(parts[2]):
        return None

    script_name = PurePosixPath(parts[2]).stem
    if script_name not in DATABASE_SCRIPTS:
        return None

    return DatabaseScriptDetails(database=parts[1], name=script_name)


def valid_files_only(path: str) -> bool:
    """Only javascript and json rules, and known database scripts."""
    if is_rule(path):
        return bool(_RULE_FILE.search(path))
    elif is_database_connection(path):
        return get_database_script_details(path) is not None
    return False


def valid_page_files_only(path: str) -> bool:
    """Only the known pages can be deployed."""
    return is_page(path)
