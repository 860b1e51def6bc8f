"""Configuration for pybitsync.

Repository layout constants are fixed; credentials and the API location are
read from the environment each time they are accessed.
"""

import os
from typing import Optional

# =============================================================================
# Repository layout
# =============================================================================

RULES_DIRECTORY: str = "rules"
DATABASE_CONNECTIONS_DIRECTORY: str = "database-connections"
PAGES_DIRECTORY: str = "pages"

# Hosted pages that may be deployed; other files under pages/ are ignored
PAGE_NAMES: tuple[str, ...] = (
    "error_page.html",
    "error_page.json",
    "guardian_multifactor.html",
    "guardian_multifactor.json",
    "login.html",
    "login.json",
    "password_reset.html",
    "password_reset.json",
)

# Custom database script roles
DATABASE_SCRIPTS: tuple[str, ...] = (
    "change_email",
    "change_password",
    "create",
    "delete",
    "get_user",
    "login",
    "verify",
)

# =============================================================================
# Remote access
# =============================================================================

DEFAULT_API_URL: str = "https://api.bitbucket.org/1.0"

# Entities downloaded at the same time per category
MAX_CONCURRENT_ENTITY_DOWNLOADS: int = 2


class Config:
    """Environment backed settings."""

    @property
    def username(self) -> Optional[str]:
        return os.environ.get("BITBUCKET_USER") or None

    @property
    def password(self) -> Optional[str]:
        return os.environ.get("BITBUCKET_PASSWORD") or None

    @property
    def api_url(self) -> str:
        return os.environ.get("BITBUCKET_API_URL") or DEFAULT_API_URL


config = Config()
