"""Sync engine for pybitsync - fetch rules, databases and pages."""

from .concurrency import run_all
from .downloader import EntityDownloader
from .engine import SyncEngine, sync_repository
from .grouping import (
    DatabaseFiles,
    DatabaseScriptFile,
    PageFiles,
    RuleFiles,
    group_databases,
    group_pages,
    group_rules,
)
from .operations import SyncOperations
from .paths import (
    DatabaseScriptDetails,
    get_database_script_details,
    is_database_connection,
    is_page,
    is_rule,
    valid_files_only,
    valid_page_files_only,
)
from .scanner import TreeScanner

__all__ = [
    "SyncEngine",
    "sync_repository",
    "SyncOperations",
    "TreeScanner",
    "EntityDownloader",
    "run_all",
    "RuleFiles",
    "PageFiles",
    "DatabaseFiles",
    "DatabaseScriptFile",
    "group_rules",
    "group_pages",
    "group_databases",
    "DatabaseScriptDetails",
    "get_database_script_details",
    "is_database_connection",
    "is_page",
    "is_rule",
    "valid_files_only",
    "valid_page_files_only",
]
