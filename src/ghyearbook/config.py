"""Configuration parsing and validation for the GitHub yearbook stats generator."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from .errors import AuthenticationError, ConfigurationError

DEFAULT_YEAR = 2025
MIN_YEAR = 2020
MAX_YEAR = 2030

DEFAULT_MAX_REPOS = 100
MAX_COLLABORATORS = 20
TOP_LANGUAGES_LIMIT = 10
TOP_REPOS_LIMIT = 10

_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38}$")
_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the yearbook generator."""

    token: str
    year: int
    username: Optional[str] = None
    include_private_repos: bool = False
    max_repos: int = DEFAULT_MAX_REPOS


def validate_username(username: str) -> str:
    """Return ``username`` stripped, or raise if it is not a valid GitHub login."""
    normalized = username.strip()
    if not _USERNAME_PATTERN.match(normalized):
        raise ConfigurationError(f"Invalid GitHub username format: '{username}'.")
    return normalized


def load_config(
    username: Optional[str] = None,
    year: int = DEFAULT_YEAR,
    include_private_repos: bool = False,
    max_repos: int = DEFAULT_MAX_REPOS,
) -> Config:
    """Build and validate application configuration.

    Args:
        username: GitHub login to analyze. ``None`` means the authenticated user.
        year: Calendar year to aggregate.
        include_private_repos: Whether private repositories are kept.
        max_repos: Upper bound on contributed repositories fetched.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If the year, username or repository cap is invalid.
        AuthenticationError: If no GitHub token is configured.
    """
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ConfigurationError(
            f"Invalid value for 'year': expected an integer between {MIN_YEAR} and {MAX_YEAR}."
        )

    if max_repos <= 0:
        raise ConfigurationError("Invalid value for 'max_repos': expected an integer greater than 0.")

    if username is not None:
        username = validate_username(username)

    token = ""
    for env_var in _TOKEN_ENV_VARS:
        token = os.getenv(env_var, "").strip()
        if token:
            break

    if not token:
        raise AuthenticationError(
            "Missing required GitHub access token. "
            "Set the 'GITHUB_TOKEN' environment variable before running the generator."
        )

    return Config(
        token=token,
        year=year,
        username=username,
        include_private_repos=include_private_repos,
        max_repos=max_repos,
    )
