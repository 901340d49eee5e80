"""Aggregation engine turning raw yearly GitHub data into ``AggregatedStats``.

This module provides pure, deterministic helpers for:
- Bucketing daily contributions into a 12-month histogram.
- Computing the busiest week, the longest and the current streak.
- Extracting the most active weekday and UTC hour.
- Normalizing language shares across repositories.
- Classifying repositories into FLAGSHIP / PATROL / SHUTTLE roles by stars.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .config import TOP_LANGUAGES_LIMIT, TOP_REPOS_LIMIT
from .models import (
    FLAGSHIP,
    PATROL,
    SHUTTLE,
    AggregatedStats,
    ContributionDay,
    ContributionWeek,
    LanguageStat,
    MonthlyContribution,
    RawYearData,
    RepoContributionData,
)

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DEFAULT_MOST_ACTIVE_DAY = "Monday"
DEFAULT_MOST_ACTIVE_HOUR = 14
PATROL_SIZE = 4


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO8601 timestamp into a UTC datetime.

    Returns ``None`` for empty or malformed values. Naive values are taken as UTC.
    """
    if not value:
        return None

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _dated_days(days: Iterable[ContributionDay]) -> Iterator[Tuple[ContributionDay, date]]:
    """Yield each day with its parsed date, skipping days whose date is malformed."""
    for day in days:
        try:
            day_date = date.fromisoformat(day.date[:10])
        except ValueError:
            logger.debug("Ignoring contribution day with malformed date", extra={"date": day.date})
            continue
        yield day, day_date


def flatten_days(weeks: Iterable[ContributionWeek]) -> List[ContributionDay]:
    """Flatten weeks into one list of days sorted chronologically.

    Days with a malformed date are dropped.
    """
    dated = _dated_days(day for week in weeks for day in week.contribution_days)
    return [day for day, _ in sorted(dated, key=lambda pair: pair[1])]


def contributions_by_month(weeks: Iterable[ContributionWeek]) -> List[MonthlyContribution]:
    """Sum daily counts into 12 month buckets keyed by each day's calendar month."""
    histogram = [MonthlyContribution(month=month, count=0) for month in range(1, 13)]

    for week in weeks:
        for day, day_date in _dated_days(week.contribution_days):
            histogram[day_date.month - 1].count += day.contribution_count

    return histogram


def max_weekly_contributions(weeks: Iterable[ContributionWeek]) -> int:
    """Return the largest single-week contribution total (0 for no weeks)."""
    maximum = 0
    for week in weeks:
        maximum = max(maximum, sum(day.contribution_count for day in week.contribution_days))
    return maximum


def compute_streaks(days: Sequence[ContributionDay]) -> Tuple[int, int]:
    """Compute ``(longest_streak, current_streak)`` over chronologically sorted days.

    Only an explicit zero-count day breaks a run; days absent from the data do
    not. The current streak counts nonzero days backwards from the latest day.
    """
    longest = 0
    run = 0
    for day in days:
        if day.contribution_count > 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    current = 0
    for day in reversed(days):
        if day.contribution_count <= 0:
            break
        current += 1

    return longest, current


def most_active_day(days: Iterable[ContributionDay]) -> str:
    """Return the weekday name with the most contributions.

    Ties go to the weekday seen first; ``"Monday"`` when there are no days.
    """
    totals: Dict[str, int] = {}
    for day, day_date in _dated_days(days):
        name = WEEKDAY_NAMES[day_date.weekday()]
        totals[name] = totals.get(name, 0) + day.contribution_count

    if not totals:
        return DEFAULT_MOST_ACTIVE_DAY
    return max(totals.items(), key=lambda item: item[1])[0]


def most_active_hour(commit_timestamps: Iterable[str]) -> int:
    """Return the UTC hour with the most commits, first-seen on ties, 14 when empty."""
    totals: Dict[int, int] = {}
    for timestamp in commit_timestamps:
        parsed = parse_timestamp(timestamp)
        if parsed is None:
            logger.debug("Ignoring malformed commit timestamp", extra={"timestamp": timestamp})
            continue
        totals[parsed.hour] = totals.get(parsed.hour, 0) + 1

    if not totals:
        return DEFAULT_MOST_ACTIVE_HOUR
    return max(totals.items(), key=lambda item: item[1])[0]


def aggregate_languages(
    repos: Iterable[RepoContributionData],
    limit: int = TOP_LANGUAGES_LIMIT,
) -> List[LanguageStat]:
    """Combine per-repository language shares into a normalized top-``limit`` list.

    Each language's raw percentages are summed across repositories, then every
    total is divided by the grand total so the full list sums to 100. The color
    of the first repository mentioning a language is kept.
    """
    totals: Dict[str, float] = {}
    colors: Dict[str, Optional[str]] = {}

    for repo in repos:
        for share in repo.languages:
            if share.name not in totals:
                totals[share.name] = 0.0
                colors[share.name] = share.color
            totals[share.name] += share.percentage

    grand_total = sum(totals.values())
    languages = [
        LanguageStat(
            language=name,
            percentage=(total / grand_total) * 100 if grand_total > 0 else 0.0,
            color=colors[name],
        )
        for name, total in totals.items()
    ]
    languages.sort(key=lambda stat: stat.percentage, reverse=True)
    return languages[:limit]


def classify_repo_roles(repos: Iterable[RepoContributionData]) -> List[RepoContributionData]:
    """Rank repositories by stars and assign roles.

    The top repository becomes FLAGSHIP, the next four PATROL, the rest SHUTTLE.
    The sort is stable, so equally starred repositories keep their input order.
    New records are returned; the inputs are left untouched.
    """
    ranked = sorted(repos, key=lambda repo: repo.stargazers_count, reverse=True)
    classified: List[RepoContributionData] = []

    for index, repo in enumerate(ranked):
        if index == 0:
            role = FLAGSHIP
        elif index <= PATROL_SIZE:
            role = PATROL
        else:
            role = SHUTTLE
        classified.append(replace(repo, role=role))

    return classified


def compute_aggregated_year_stats(raw: RawYearData) -> Tuple[AggregatedStats, List[str]]:
    """Aggregate the five raw inputs into ``AggregatedStats``.

    Returns the stats together with the commit timestamps, which the
    achievement rules need in addition to the stats.
    """
    contributions = raw.contributions
    weeks = contributions.weeks
    days = flatten_days(weeks)
    commit_timestamps = list(contributions.commit_timestamps)

    longest_streak, current_streak = compute_streaks(days)
    ranked_repos = classify_repo_roles(raw.repos)

    stats = AggregatedStats(
        total_contributions=contributions.total_contributions,
        total_commits=contributions.total_commit_contributions,
        total_prs=contributions.total_pull_request_contributions,
        total_issues=contributions.total_issue_contributions,
        total_stars_earned=raw.total_owned_stars,
        contributions_by_month=contributions_by_month(weeks),
        top_languages=aggregate_languages(raw.repos),
        top_repos=ranked_repos[:TOP_REPOS_LIMIT],
        total_repos_contributed=len(ranked_repos),
        collaborators=list(raw.collaborators),
        longest_streak=longest_streak,
        current_streak=current_streak,
        most_active_day=most_active_day(days),
        most_active_hour=most_active_hour(commit_timestamps),
        max_weekly_contributions=max_weekly_contributions(weeks),
        followers=raw.profile.followers,
    )

    logger.debug(
        "Aggregated yearly stats",
        extra={
            "total_contributions": stats.total_contributions,
            "days": len(days),
            "repos": stats.total_repos_contributed,
            "longest_streak": longest_streak,
        },
    )

    return stats, commit_timestamps
