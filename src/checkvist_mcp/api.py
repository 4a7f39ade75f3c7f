"""Checkvist API client with login token caching."""

import time
from typing import Any

import requests
from loguru import logger

from checkvist_mcp.config import (
    CHECKVIST_API_BASE,
    REQUEST_TIMEOUT_SECONDS,
    TOKEN_LIFETIME_SECONDS,
    TOKEN_REFRESH_MARGIN_SECONDS,
    load_credentials,
)
from checkvist_mcp.errors import RemoteError
from checkvist_mcp.protocols import HttpMethod

_STATUS_TIPS = {
    401: "Check your CHECKVIST_USERNAME and CHECKVIST_API_KEY",
    403: "You may not have permission to perform this action",
    404: "Verify that the checklist_id or task_id exists",
    422: "Check that all required fields are provided and valid",
}


class CheckvistApi:
    """Encapsulated Checkvist API with a cached login token."""

    def __init__(
        self,
        *,
        username: str | None = None,
        api_key: str | None = None,
        base_url: str = CHECKVIST_API_BASE,
    ) -> None:
        if username is None or api_key is None:
            username, api_key = load_credentials()
        self.username = username
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.sess = requests.Session()
        self._token: str | None = None
        self._token_expiry: float = 0.0

        logger.debug("API ready: user {!r}, base {!r}", self.username, self.base_url)

    def login(self) -> str:
        """Return a valid auth token, logging in again when it is close to expiry."""
        if self._token and time.time() < self._token_expiry - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token

        logger.debug("Requesting new auth token for {!r}", self.username)
        try:
            r = self.sess.post(
                f"{self.base_url}/auth/login.json",
                params={"version": "2"},
                json={"username": self.username, "remote_key": self.api_key},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            msg = f"Authentication request failed: {e}"
            raise RemoteError(msg) from e

        if not r.ok:
            msg = f"Authentication failed: {r.status_code} {r.reason}"
            raise RemoteError(msg, status_code=r.status_code)

        try:
            token: str = r.json()["token"]
        except (ValueError, KeyError, TypeError) as e:
            msg = f"Authentication failed: unexpected login response ({e!r})"
            raise RemoteError(msg, status_code=r.status_code) from e
        self._token = token
        self._token_expiry = time.time() + TOKEN_LIFETIME_SECONDS
        return token

    def call(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Invoke a Checkvist API endpoint, return the decoded JSON."""
        token = self.login()
        logger.debug("Making request: {} {!r} {}", method, path, repr(params)[:32])

        kwargs: dict[str, Any] = {
            "headers": {"X-Client-Token": token},
            "params": params or None,
            "timeout": REQUEST_TIMEOUT_SECONDS,
        }
        if body is not None and method in ("POST", "PUT"):
            kwargs["json"] = body

        try:
            r = self.sess.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            msg = f"Checkvist API request failed: ({method} {path!r}) -> {e}"
            raise RemoteError(msg) from e

        if not r.ok:
            msg = f"Checkvist API error: {r.status_code} - {r.text}"
            tip = _STATUS_TIPS.get(r.status_code)
            if tip:
                msg += f"\n\nTip: {tip}"
            raise RemoteError(msg, status_code=r.status_code)

        return r.json()
