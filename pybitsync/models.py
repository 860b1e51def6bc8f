"""Data models for repository files and deployable entities."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class RepositoryRef:
    """Owner and slug of a Bitbucket repository."""

    owner: str
    name: str

    @property
    def params(self) -> dict[str, str]:
        """Path template parameters identifying this repository."""
        return {"username": self.owner, "repo_slug": self.name}

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RemoteFile:
    """Represents a file in the repository tree at a given revision."""

    path: str
    """Path relative to the repository root"""

    sha: str = ""
    """Content hash reported by the directory listing"""

    @classmethod
    def from_listing(cls, data: dict[str, Any]) -> "RemoteFile":
        """Create RemoteFile from a directory listing entry."""
        return cls(path=data["path"], sha=data.get("sha") or "")


@dataclass
class DownloadedFile:
    """Contents of a RemoteFile."""

    path: str
    contents: bytes


@dataclass
class RuleEntity:
    """A rule: script, metadata or both."""

    name: str
    has_script: bool = False
    script_contents: Optional[bytes] = None
    has_metadata: bool = False
    metadata_contents: Optional[bytes] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "script": self.has_script,
            "metadata": self.has_metadata,
        }
        if self.has_script:
            data["scriptFile"] = self.script_contents
        if self.has_metadata:
            data["metadataFile"] = self.metadata_contents
        return data


@dataclass
class PageEntity:
    """A hosted page: html, metadata or both."""

    name: str
    has_metadata: bool = False
    html_contents: Optional[bytes] = None
    metadata_contents: Optional[bytes] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "metadata": self.has_metadata}
        if self.html_contents is not None:
            data["htmlFile"] = self.html_contents
        if self.has_metadata:
            data["metadataFile"] = self.metadata_contents
        return data


@dataclass
class DatabaseScript:
    """One custom database script, named after its role (login, create...)."""

    name: str
    contents: bytes


@dataclass
class DatabaseEntity:
    """A database connection and its scripts."""

    name: str
    scripts: list[DatabaseScript] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "scripts": [
                {"name": script.name, "scriptFile": script.contents}
                for script in self.scripts
            ],
        }


@dataclass
class SyncResult:
    """Reconciled rules, databases and pages of one sync."""

    rules: Any
    databases: Any
    pages: Any
