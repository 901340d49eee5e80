"""Tests for GitHub API client behavior with mocked HTTP."""

import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghyearbook.config import Config
from ghyearbook.errors import ApiError, AuthenticationError
from ghyearbook.github_client import GitHubClient


def _build_client() -> GitHubClient:
    return GitHubClient(config=Config(token="gh-token", year=2025))


def _response(status_code: int, payload=None, text: str = "", headers: dict | None = None):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    response.json.return_value = payload if payload is not None else {}
    return response


def test_client_sends_bearer_token():
    """Verify the session authenticates with the configured token."""
    client = _build_client()

    assert client._session.headers["Authorization"] == "Bearer gh-token"


def test_get_json_retries_on_429_and_succeeds():
    """Verify get_json retries after HTTP 429 and eventually returns the JSON payload."""
    client = _build_client()
    first = _response(429, payload={}, headers={"Retry-After": "1"})
    second = _response(200, payload={"login": "octocat"})

    client._session.request = Mock(side_effect=[first, second])

    with patch("ghyearbook.github_client.time.sleep") as sleep_mock:
        payload = client.get_json("user")

    assert payload == {"login": "octocat"}
    assert client._session.request.call_count == 2
    sleep_mock.assert_called_once_with(1)


def test_get_json_retries_on_5xx_and_raises_after_max_retries():
    """Verify retryable server errors raise ApiError once the retry limit is reached."""
    client = _build_client()
    server_error = _response(503, text="service unavailable")
    client._session.request = Mock(side_effect=[server_error] * client._MAX_RETRIES)

    with patch("ghyearbook.github_client.time.sleep") as sleep_mock:
        with pytest.raises(ApiError):
            client.get_json("user")

    assert client._session.request.call_count == client._MAX_RETRIES
    assert sleep_mock.call_count == client._MAX_RETRIES - 1


def test_get_json_network_errors_raise_api_error_after_retries():
    """Verify transport exceptions are retried and then surfaced as ApiError."""
    client = _build_client()
    client._session.request = Mock(side_effect=requests.ConnectionError("down"))

    with patch("ghyearbook.github_client.time.sleep"):
        with pytest.raises(ApiError):
            client.get_json("user")

    assert client._session.request.call_count == client._MAX_RETRIES


def test_unauthorized_raises_authentication_error_without_retry():
    """Verify HTTP 401 is a distinct authentication failure and is not retried."""
    client = _build_client()
    client._session.request = Mock(return_value=_response(401, text="Bad credentials"))

    with pytest.raises(AuthenticationError):
        client.get_json("user")

    assert client._session.request.call_count == 1


def test_get_json_rejects_non_object_payload():
    """Verify a JSON array where an object is expected raises ApiError."""
    client = _build_client()
    client._session.request = Mock(return_value=_response(200, payload=[1, 2]))

    with pytest.raises(ApiError):
        client.get_json("user")


def test_graphql_posts_query_and_returns_data():
    """Verify GraphQL queries are POSTed with variables and the data object is returned."""
    client = _build_client()
    client._session.request = Mock(return_value=_response(200, payload={"data": {"viewer": {"login": "me"}}}))

    data = client.graphql("query { viewer { login } }", {"a": 1})

    assert data == {"viewer": {"login": "me"}}
    args, kwargs = client._session.request.call_args
    assert args == ("POST", client._GRAPHQL_URL)
    assert kwargs["json"] == {"query": "query { viewer { login } }", "variables": {"a": 1}}


def test_graphql_errors_raise_api_error():
    """Verify non-NOT_FOUND GraphQL errors raise ApiError with the first message."""
    client = _build_client()
    payload = {"data": None, "errors": [{"type": "FORBIDDEN", "message": "Resource not accessible"}]}
    client._session.request = Mock(return_value=_response(200, payload=payload))

    with pytest.raises(ApiError, match="Resource not accessible"):
        client.graphql("query { viewer { login } }")


def test_graphql_not_found_errors_return_partial_data():
    """Verify NOT_FOUND errors leave the null node for the caller to interpret."""
    client = _build_client()
    payload = {
        "data": {"user": None},
        "errors": [{"type": "NOT_FOUND", "message": "Could not resolve to a User"}],
    }
    client._session.request = Mock(return_value=_response(200, payload=payload))

    assert client.graphql("query { user(login: \"ghost\") { id } }") == {"user": None}
