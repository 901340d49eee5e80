"""GitHub REST and GraphQL API client for yearly activity retrieval."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, AuthenticationError

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub REST and GraphQL APIs."""

    _REST_URL = "https://api.github.com"
    _GRAPHQL_URL = "https://api.github.com/graphql"
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the access token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified REST URL from an API path."""
        return f"{self._REST_URL}/{path.lstrip('/')}"

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                pass

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Execute a request with retry logic for 429/5xx responses.

        Raises:
            AuthenticationError: If GitHub rejects the token (HTTP 401).
            ApiError: If the request repeatedly fails, returns HTTP >= 400,
                or does not return valid JSON.
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.request(method, url, timeout=self._timeout_seconds, **kwargs)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"GitHub request failed after retries: {method} {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = status_code == 429 or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                backoff = self._extract_backoff_seconds(response, attempt)
                logger.debug(
                    "Retrying GitHub request",
                    extra={"url": url, "status_code": status_code, "attempt": attempt, "backoff": backoff},
                )
                time.sleep(backoff)
                continue

            if status_code == 401:
                raise AuthenticationError(
                    "GitHub rejected the access token (HTTP 401). Re-authenticate and try again."
                )

            if status_code >= 400:
                raise ApiError(
                    "GitHub API request failed: "
                    f"{method} {url} returned {status_code} - {response.text}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"GitHub API returned invalid JSON: {method} {url}") from exc

        raise ApiError(f"GitHub request failed after retries: {method} {url}") from last_error

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a REST resource and return its JSON object."""
        url = self._build_url(path)
        payload = self._request_json("GET", url, params=dict(params or {}))

        if not isinstance(payload, dict):
            raise ApiError(f"GitHub API returned unexpected payload shape: GET {url}")

        return payload

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object.

        Errors of type ``NOT_FOUND`` are not raised: GitHub reports them next to a
        partial ``data`` object whose missing nodes are ``null``, and the caller
        decides whether the missing node is fatal.

        Raises:
            ApiError: If the response carries any other GraphQL error or no data.
        """
        payload = self._request_json(
            "POST",
            self._GRAPHQL_URL,
            json={"query": query, "variables": variables or {}},
        )

        if not isinstance(payload, dict):
            raise ApiError("GitHub GraphQL API returned unexpected payload shape.")

        errors: List[Dict[str, Any]] = payload.get("errors") or []
        fatal_errors = [error for error in errors if error.get("type") != "NOT_FOUND"]
        if fatal_errors:
            message = fatal_errors[0].get("message") or "Unknown error"
            raise ApiError(f"GitHub GraphQL error: {message}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise ApiError("GitHub GraphQL API returned no data.")

        if errors:
            logger.debug(
                "GraphQL query returned NOT_FOUND errors",
                extra={"errors": [error.get("message") for error in errors]},
            )

        return data
