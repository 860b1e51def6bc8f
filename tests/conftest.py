"""Shared fixtures for the sync tests."""

import pytest
from helpers import listing


@pytest.fixture
def repository_tree():
    """A tree with rules, two database connections and pages."""
    return {
        "rules": listing("rules/a.js", "rules/a.json", "rules/b.js", "rules/notes.md"),
        "database-connections": listing(directories=["db1", "db2"]),
        "database-connections/db1": listing(
            "database-connections/db1/login.js",
            "database-connections/db1/create.js",
        ),
        "database-connections/db2": listing("database-connections/db2/readme.md"),
        "pages": listing("pages/login.html", "pages/login.json", "pages/unknown.html"),
    }
