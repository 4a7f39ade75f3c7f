"""Tests for CheckvistApi — HTTP client with login token caching."""

import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from checkvist_mcp.api import CheckvistApi
from checkvist_mcp.config import TOKEN_LIFETIME_SECONDS
from checkvist_mcp.errors import RemoteError


@pytest.fixture
def api_with_mock_session() -> tuple[CheckvistApi, MagicMock]:
    """Create a CheckvistApi with explicit credentials and a mocked requests.Session."""
    with patch("checkvist_mcp.api.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        api = CheckvistApi(username="me@example.com", api_key="secret")

    mock_session.post.return_value = _make_response({"token": "tok-1"})
    return api, mock_session


def _make_response(data: Any, *, status_code: int = 200, text: str = "") -> MagicMock:
    """Create a mock HTTP response with given JSON data."""
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = "Error" if status_code >= 400 else "OK"
    response.json.return_value = data
    response.text = text
    return response


def test_init_reads_credentials_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("checkvist_mcp.config.DOTENV_FILES", [])
    monkeypatch.setenv("CHECKVIST_USERNAME", "env-user")
    monkeypatch.setenv("CHECKVIST_API_KEY", "env-key")

    with patch("checkvist_mcp.api.requests.Session"):
        api = CheckvistApi()

    assert api.username == "env-user"
    assert api.api_key == "env-key"


def test_init_raises_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("checkvist_mcp.config.DOTENV_FILES", [])
    monkeypatch.delenv("CHECKVIST_USERNAME", raising=False)
    monkeypatch.delenv("CHECKVIST_API_KEY", raising=False)

    with pytest.raises(RuntimeError, match="CHECKVIST_USERNAME and CHECKVIST_API_KEY"):
        CheckvistApi()


def test_init_loads_dotenv_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("CHECKVIST_USERNAME=file-user\nCHECKVIST_API_KEY=file-key\n")
    monkeypatch.setattr("checkvist_mcp.config.DOTENV_FILES", [dotenv])

    with patch.dict(os.environ), patch("checkvist_mcp.api.requests.Session"):
        os.environ.pop("CHECKVIST_USERNAME", None)
        os.environ.pop("CHECKVIST_API_KEY", None)
        api = CheckvistApi()

    assert api.username == "file-user"
    assert api.api_key == "file-key"


def test_call_logs_in_and_sends_token_header(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.return_value = _make_response([{"id": 1}])

    result = api.call("/checklists.json", params={"archived": "true"})

    assert result == [{"id": 1}]
    login_kwargs = mock_session.post.call_args.kwargs
    assert login_kwargs["json"] == {"username": "me@example.com", "remote_key": "secret"}
    assert login_kwargs["params"] == {"version": "2"}

    method, url = mock_session.request.call_args.args
    kwargs = mock_session.request.call_args.kwargs
    assert method == "GET"
    assert url == "https://checkvist.com/checklists.json"
    assert kwargs["headers"] == {"X-Client-Token": "tok-1"}
    assert kwargs["params"] == {"archived": "true"}
    assert "json" not in kwargs


def test_call_sends_json_body_for_post(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.return_value = _make_response({"id": 5})

    api.call("/checklists/1/tasks.json", method="POST", body={"task": {"content": "x"}})

    assert mock_session.request.call_args.kwargs["json"] == {"task": {"content": "x"}}


def test_token_is_reused_until_close_to_expiry(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.return_value = _make_response({})

    with patch("checkvist_mcp.api.time.time", return_value=1_000_000.0):
        api.call("/auth/curr_user.json")
        api.call("/auth/curr_user.json")
    assert mock_session.post.call_count == 1

    # 23.5 hours later the token is inside the refresh margin.
    later = 1_000_000.0 + TOKEN_LIFETIME_SECONDS - 1800
    with patch("checkvist_mcp.api.time.time", return_value=later):
        api.call("/auth/curr_user.json")
    assert mock_session.post.call_count == 2


def test_login_failure_raises_remote_error(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.post.return_value = _make_response({}, status_code=401)

    with pytest.raises(RemoteError, match="Authentication failed: 401") as exc_info:
        api.call("/checklists.json")
    assert exc_info.value.status_code == 401
    mock_session.request.assert_not_called()


@pytest.mark.parametrize("login_body", [{}, ["token"], None])
def test_malformed_login_response_raises_remote_error(
    api_with_mock_session: tuple[CheckvistApi, MagicMock], login_body: Any
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.post.return_value = _make_response(login_body)

    with pytest.raises(RemoteError, match="unexpected login response"):
        api.call("/checklists.json")
    mock_session.request.assert_not_called()


def test_undecodable_login_response_raises_remote_error(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    response = _make_response(None)
    response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
    mock_session.post.return_value = response

    with pytest.raises(RemoteError, match="unexpected login response"):
        api.call("/checklists.json")


def test_http_error_includes_status_tip(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.return_value = _make_response(None, status_code=404, text="Not found")

    with pytest.raises(RemoteError) as exc_info:
        api.call("/checklists/9/tasks.json")

    message = str(exc_info.value)
    assert message.startswith("Checkvist API error: 404 - Not found")
    assert "Tip: Verify that the checklist_id or task_id exists" in message
    assert exc_info.value.status_code == 404


def test_http_error_without_tip(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.return_value = _make_response(None, status_code=500, text="boom")

    with pytest.raises(RemoteError) as exc_info:
        api.call("/checklists.json")
    assert "Tip:" not in str(exc_info.value)


def test_connection_error_becomes_remote_error(
    api_with_mock_session: tuple[CheckvistApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.request.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(RemoteError, match="unreachable"):
        api.call("/checklists.json")
