"""Helpers faking a Bitbucket repository behind a mock client."""

from typing import Any, Optional
from unittest.mock import Mock

from pybitsync.api import BitbucketClient
from pybitsync.exceptions import BitbucketNotFoundError
from pybitsync.sync.engine import REPOSITORY_PATH
from pybitsync.sync.operations import RAW_FILE_PATH
from pybitsync.sync.scanner import SOURCE_PATH


def listing(*paths: str, directories: Optional[list[str]] = None) -> dict:
    """Build a directory listing response."""
    return {
        "files": [{"path": p, "sha": f"sha-{p}"} for p in paths],
        "directories": directories or [],
    }


def make_client(
    listings: dict[str, Any],
    contents: Optional[dict[str, bytes]] = None,
    errors: Optional[dict[str, Exception]] = None,
) -> Mock:
    """Create a mock client serving a fixed tree.

    Args:
        listings: Directory path -> listing response
        contents: File path -> raw contents (defaults to the path encoded)
        errors: Directory or file path -> exception to raise instead

    Directories missing from listings answer with a 404.
    """
    contents = contents or {}
    errors = errors or {}
    client = Mock(spec=BitbucketClient)

    def get(path_template: str, params: dict, raw: bool = False) -> Any:
        if path_template == REPOSITORY_PATH:
            return {"slug": params["repo_slug"]}
        if path_template == SOURCE_PATH:
            directory = params["directory"]
            if directory in errors:
                raise errors[directory]
            if directory not in listings:
                raise BitbucketNotFoundError("Resource not found", 404)
            return listings[directory]
        if path_template == RAW_FILE_PATH:
            filename = params["filename"]
            if filename in errors:
                raise errors[filename]
            return contents.get(filename, filename.encode())
        raise AssertionError(f"Unexpected request: {path_template}")

    client.get.side_effect = get
    return client


def requested(client: Mock, path_template: str) -> list[dict]:
    """Params of every request made for a path template."""
    return [c.args[1] for c in client.get.call_args_list if c.args[0] == path_template]
