"""Configuration constants for checkvist-mcp."""

import os
from pathlib import Path

from dotenv import load_dotenv

CHECKVIST_API_BASE: str = "https://checkvist.com"

# Credentials are read from the environment, optionally seeded from a .env file.
USERNAME_ENV: str = "CHECKVIST_USERNAME"
API_KEY_ENV: str = "CHECKVIST_API_KEY"
DOTENV_FILES: list[Path] = [
    Path.cwd() / ".env",
    Path("~/.config/checkvist-mcp/.env").expanduser(),
]

# Login tokens are valid for a day; refresh an hour early.
TOKEN_LIFETIME_SECONDS: int = 24 * 60 * 60
TOKEN_REFRESH_MARGIN_SECONDS: int = 60 * 60

REQUEST_TIMEOUT_SECONDS: float = 30.0

# View defaults. A max_depth of UNLIMITED_DEPTH means "show all levels".
UNLIMITED_DEPTH: int = 99
SUMMARY_MAX_DEPTH: int = UNLIMITED_DEPTH
SUBTREE_MAX_DEPTH: int = 3
PAGINATED_MAX_DEPTH: int = 2
PREVIEW_MAX_DEPTH: int = 1
PAGE_SIZE: int = 1

NOTE_TRUNCATE_LENGTH: int = 150
SUBTREE_NOTE_LIMIT: int = 2
ULTRA_COMPACT_CONTENT_LENGTH: int = 40

# Stats recommendation tiers, by total task count.
SMALL_CHECKLIST_LIMIT: int = 50
MEDIUM_CHECKLIST_LIMIT: int = 200
LARGE_CHECKLIST_SUGGESTED_DEPTH: int = 3


def load_credentials() -> tuple[str, str]:
    """Return (username, api_key), loading .env files first.

    Raises:
        RuntimeError: If either value is missing.
    """
    for dotenv_path in DOTENV_FILES:
        if dotenv_path.is_file():
            load_dotenv(dotenv_path, override=False)

    username = os.environ.get(USERNAME_ENV)
    api_key = os.environ.get(API_KEY_ENV)
    if not username or not api_key:
        msg = f"{USERNAME_ENV} and {API_KEY_ENV} must be set (environment or .env file)"
        raise RuntimeError(msg)
    return username, api_key
