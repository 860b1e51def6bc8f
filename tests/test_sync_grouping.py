"""Tests for grouping files into entities."""

import pytest

from pybitsync.exceptions import DuplicateEntityFileError
from pybitsync.models import RemoteFile
from pybitsync.sync.grouping import group_databases, group_pages, group_rules


def files(*paths: str) -> list[RemoteFile]:
    return [RemoteFile(path=p, sha=f"sha-{p}") for p in paths]


class TestGroupRules:
    """Tests for group_rules."""

    def test_script_and_metadata(self):
        rules = group_rules(files("rules/a.js", "rules/a.json", "rules/b.js"))

        assert list(rules) == ["a", "b"]
        assert rules["a"].script.path == "rules/a.js"
        assert rules["a"].metadata.path == "rules/a.json"
        assert rules["b"].script.path == "rules/b.js"
        assert rules["b"].metadata is None

    def test_metadata_only(self):
        rules = group_rules(files("rules/c.json"))
        assert rules["c"].script is None
        assert rules["c"].metadata.path == "rules/c.json"

    def test_other_categories_ignored(self):
        rules = group_rules(
            files("pages/login.html", "database-connections/db/login.js", "a.js")
        )
        assert rules == {}

    def test_unsupported_extension_ignored(self):
        assert group_rules(files("rules/a.md")) == {}

    def test_order_independent(self):
        paths = ["rules/b.js", "rules/a.json", "rules/a.js"]
        assert group_rules(files(*paths)) == group_rules(files(*reversed(paths)))
        assert list(group_rules(files(*paths))) == ["a", "b"]

    def test_duplicate_slot(self):
        with pytest.raises(DuplicateEntityFileError) as exc_info:
            group_rules(files("rules/a.js", "rules/a.JS"))

        assert exc_info.value.entity == "a"
        assert exc_info.value.slot == "script"


class TestGroupPages:
    """Tests for group_pages."""

    def test_html_and_metadata(self):
        pages = group_pages(
            files("pages/login.html", "pages/login.json", "pages/unknown.html")
        )

        assert list(pages) == ["login"]
        assert pages["login"].html.path == "pages/login.html"
        assert pages["login"].metadata.path == "pages/login.json"

    def test_html_only(self):
        pages = group_pages(files("pages/error_page.html"))
        assert pages["error_page"].metadata is None


class TestGroupDatabases:
    """Tests for group_databases."""

    def test_scripts_per_database(self):
        databases = group_databases(
            files(
                "database-connections/db2/verify.js",
                "database-connections/db1/login.js",
                "database-connections/db2/create.js",
                "database-connections/db1/readme.md",
            )
        )

        assert list(databases) == ["db1", "db2"]
        assert [s.name for s in databases["db1"].scripts] == ["login"]
        assert [s.name for s in databases["db2"].scripts] == ["create", "verify"]
        assert databases["db2"].scripts[1].file.path == (
            "database-connections/db2/verify.js"
        )

    def test_unclassified_files_never_grouped(self):
        databases = group_databases(
            files(
                "database-connections/db1/helper.js",
                "database-connections/login.js",
                "rules/login.js",
            )
        )
        assert databases == {}

    def test_duplicate_script(self):
        with pytest.raises(DuplicateEntityFileError):
            group_databases(
                files(
                    "database-connections/db1/login.js",
                    "database-connections/db1/login.JS",
                )
            )
