"""Application orchestration for the GitHub yearbook stats generator."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, TypeVar

from .achievements import calculate_achievements
from .clearance import calculate_clearance_level
from .cli import parse_args
from .config import Config, load_config
from .errors import ApiError, AuthenticationError, ConfigurationError, FetchError
from .fetchers import (
    fetch_collaborators_for_year,
    fetch_total_owned_repo_stars,
    fetch_user_contributions_for_year,
    fetch_user_core_profile,
    fetch_user_owned_orgs,
    fetch_user_repos_for_year,
)
from .github_client import GitHubClient
from .models import RawYearData, YearSummary
from .report import generate_report, summary_to_dict
from .stats import compute_aggregated_year_stats

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_API_ERROR = 4

T = TypeVar("T")


def configure_logging(verbose: bool = False) -> None:
    """Configure process-wide logging for CLI execution."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def fetch_resource(resource: str, fetch: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run one fetcher, tagging any non-authentication failure with ``resource``.

    Raises:
        AuthenticationError: Unchanged, so the whole run stops for re-authentication.
        FetchError: For every other recoverable failure.
    """
    logger.info("Fetching %s...", resource)
    try:
        result = fetch(*args, **kwargs)
    except AuthenticationError:
        raise
    except ApiError as exc:
        logger.error("Failed to fetch %s", resource, extra={"resource": resource, "error": str(exc)})
        raise FetchError(resource, str(exc)) from exc

    return result


def collect_year_data(client: GitHubClient, config: Config) -> RawYearData:
    """Fetch the five raw inputs for one user and year.

    When ``config.username`` names someone other than the authenticated user,
    that user's public profile is analyzed and owned organizations are skipped,
    since the organization list describes the token holder. The
    owned-organizations list degrades to empty on failure because it only
    refines ownership and star totals. Every other fetch is fatal.
    """
    profile = fetch_resource("profile", fetch_user_core_profile, client)
    owned_orgs: List[str] = []

    if config.username and config.username.lower() != profile.login.lower():
        logger.info(
            "Analyzing a user other than the authenticated account",
            extra={"username": config.username, "viewer": profile.login},
        )
        profile = fetch_resource("profile", fetch_user_core_profile, client, config.username)
    else:
        try:
            owned_orgs = fetch_resource("orgs", fetch_user_owned_orgs, client)
        except FetchError as exc:
            logger.warning("Continuing without owned organizations", extra={"error": str(exc)})

    username = profile.login

    contributions = fetch_resource(
        "contributions", fetch_user_contributions_for_year, client, username, config.year
    )
    repos = fetch_resource(
        "repos",
        fetch_user_repos_for_year,
        client,
        username,
        include_private=config.include_private_repos,
        owned_orgs=owned_orgs,
        max_repos=config.max_repos,
    )
    collaborators = fetch_resource("collaborators", fetch_collaborators_for_year, client, username, config.year)
    total_owned_stars = fetch_resource("stars", fetch_total_owned_repo_stars, client, username, owned_orgs)

    logger.info(
        "Fetched raw year data",
        extra={
            "username": username,
            "year": config.year,
            "owned_orgs": len(owned_orgs),
            "total_contributions": contributions.total_contributions,
            "repos": len(repos),
            "collaborators": len(collaborators),
            "total_owned_stars": total_owned_stars,
        },
    )

    return RawYearData(
        profile=profile,
        contributions=contributions,
        repos=repos,
        collaborators=collaborators,
        total_owned_stars=total_owned_stars,
    )


def build_year_summary(raw: RawYearData, now: datetime) -> YearSummary:
    """Aggregate raw data and derive achievements and the clearance level."""
    stats, commit_timestamps = compute_aggregated_year_stats(raw)
    achievements = calculate_achievements(stats, commit_timestamps)
    clearance = calculate_clearance_level(
        raw.profile.created_at,
        stats.followers,
        stats.total_contributions,
        now,
    )

    return YearSummary(
        stats=stats,
        commit_timestamps=commit_timestamps,
        achievements=achievements,
        clearance=clearance,
    )


def orchestrate_year_stats(argv: Optional[Sequence[str]] = None) -> int:
    """Run the full yearbook workflow and return a process exit code."""
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        config = load_config(
            username=args.username,
            year=args.year,
            include_private_repos=args.include_private,
            max_repos=args.max_repos,
        )
        client = GitHubClient(config=config)

        raw = collect_year_data(client, config)
        summary = build_year_summary(raw, datetime.now(timezone.utc))
        username = raw.profile.login

        if args.json:
            print(json.dumps(summary_to_dict(summary), indent=2))
        else:
            print(generate_report(summary, username=username, year=config.year))

        return EXIT_SUCCESS
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        print(f"ERROR: {exc} Please re-authenticate with GitHub.", file=sys.stderr)
        return EXIT_AUTHENTICATION_ERROR
    except ApiError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_API_ERROR
    except Exception as exc:
        logger.exception("Unexpected failure while generating yearbook")
        print(f"ERROR: Unexpected failure: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR


def main() -> int:
    """Console-script entry point."""
    return orchestrate_year_stats()


if __name__ == "__main__":
    raise SystemExit(main())
