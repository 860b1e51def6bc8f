"""Utility functions for pybitsync."""

from .exceptions import InvalidRepositoryError
from .models import RepositoryRef


def parse_repository(repository: str) -> RepositoryRef:
    """Parse a repository specifier.

    Accepts ``owner/name`` or a five segment form such as
    ``https://bitbucket.org/owner/name``, where the leading three segments
    are ignored.

    Args:
        repository: Repository specifier

    Returns:
        RepositoryRef for the repository

    Raises:
        InvalidRepositoryError: If the specifier has any other shape

    Examples:
        >>> parse_repository("acme/rules")
        RepositoryRef(owner='acme', name='rules')
        >>> parse_repository("https://bitbucket.org/acme/rules")
        RepositoryRef(owner='acme', name='rules')
    """
    parts = (repository or "").split("/")
    if len(parts) == 2:
        owner, name = parts
        return RepositoryRef(owner=owner, name=name)
    if len(parts) == 5:
        owner, name = parts[3], parts[4]
        return RepositoryRef(owner=owner, name=name)

    raise InvalidRepositoryError(repository)


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
