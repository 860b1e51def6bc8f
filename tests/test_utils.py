"""Unit tests for utility functions."""

import pytest

from pybitsync.exceptions import InvalidRepositoryError
from pybitsync.models import RepositoryRef
from pybitsync.utils import format_size, parse_repository


class TestParseRepository:
    """Tests for parse_repository function."""

    def test_owner_and_name(self):
        """Test the short owner/name form."""
        assert parse_repository("acme/tenant") == RepositoryRef("acme", "tenant")

    def test_url_form(self):
        """Test the five segment URL form."""
        repo = parse_repository("https://bitbucket.org/acme/tenant")
        assert repo.owner == "acme"
        assert repo.name == "tenant"

    def test_url_prefix_ignored(self):
        """Test that the first three segments are not looked at."""
        repo = parse_repository("a/b/c/acme/tenant")
        assert repo == RepositoryRef("acme", "tenant")

    @pytest.mark.parametrize(
        "specifier",
        ["", "tenant", "a/b/c", "a/b/c/d", "https://bitbucket.org/acme/tenant/src"],
    )
    def test_invalid_segment_count(self, specifier):
        """Test that other segment counts are rejected."""
        with pytest.raises(InvalidRepositoryError) as exc_info:
            parse_repository(specifier)

        assert exc_info.value.repository == specifier
        assert f"Invalid repository: {specifier}" in str(exc_info.value)

    def test_invalid_repository_is_value_error(self):
        """Test that InvalidRepositoryError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_repository("tenant")

    def test_params(self):
        """Test path template parameters of a repository."""
        repo = parse_repository("acme/tenant")
        assert repo.params == {"username": "acme", "repo_slug": "tenant"}
        assert str(repo) == "acme/tenant"


class TestFormatSize:
    """Tests for format_size function."""

    def test_bytes(self):
        assert format_size(512) == "512 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(2 * 1024 * 1024 * 1024) == "2.0 GB"
