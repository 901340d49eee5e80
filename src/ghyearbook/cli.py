"""Command-line argument parsing for the GitHub yearbook stats generator."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import DEFAULT_MAX_REPOS, DEFAULT_YEAR


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for yearbook generation.

    Returns:
        Parsed CLI arguments containing the username, year, private-repository
        flag, repository cap, output format and verbosity.
    """
    parser = argparse.ArgumentParser(
        prog="github-yearbook",
        description=(
            "Aggregate a GitHub user's activity for one year into stats, "
            "achievements and a clearance level."
        ),
    )

    parser.add_argument(
        "--username",
        default=None,
        help="GitHub login to analyze (default: the authenticated user).",
    )
    parser.add_argument(
        "--year",
        type=_positive_int,
        default=DEFAULT_YEAR,
        help=f"Calendar year to aggregate (default: {DEFAULT_YEAR}).",
    )
    parser.add_argument(
        "--include-private",
        action="store_true",
        help="Include private repositories in the repository breakdown.",
    )
    parser.add_argument(
        "--max-repos",
        type=_positive_int,
        default=DEFAULT_MAX_REPOS,
        help=f"Maximum number of contributed repositories to fetch (default: {DEFAULT_MAX_REPOS}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary snapshot as JSON instead of a text report.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
