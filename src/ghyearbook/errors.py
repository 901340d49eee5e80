"""Custom exception types for the GitHub yearbook stats generator."""

from __future__ import annotations


class YearbookError(Exception):
    """Base exception for all recoverable yearbook errors."""


class ConfigurationError(YearbookError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(YearbookError):
    """Raised when GitHub credentials are missing, expired or rejected.

    The whole run must stop: the caller has to re-authenticate before any
    fetch is retried.
    """


class ApiError(YearbookError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class ResourceNotFoundError(ApiError):
    """Raised when the root resource of a query (for example the user) does not exist."""


class FetchError(ApiError):
    """Raised when fetching one raw resource fails.

    ``resource`` names the failing fetch (``profile``, ``contributions``,
    ``repos``, ``collaborators``, ``stars`` or ``orgs``) so callers can
    report a specific message.
    """

    def __init__(self, resource: str, message: str) -> None:
        super().__init__(f"Failed to fetch {resource}: {message}")
        self.resource = resource
