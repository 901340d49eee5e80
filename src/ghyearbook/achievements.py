"""Achievement catalog and rule evaluation over aggregated yearly stats."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Achievement, AggregatedStats
from .stats import parse_timestamp

_SATURDAY = 5
_SUNDAY = 6


def has_commits_during_hours(timestamps: Iterable[str], start_hour: int, end_hour: int) -> bool:
    """Return whether any timestamp's UTC hour falls in ``[start_hour, end_hour)``.

    A window with ``start_hour > end_hour`` wraps past midnight, e.g. 22 -> 6.
    A window with ``start_hour == end_hour`` is empty and never matches.
    Malformed timestamps are ignored.
    """
    for timestamp in timestamps:
        parsed = parse_timestamp(timestamp)
        if parsed is None:
            continue

        hour = parsed.hour
        if start_hour <= end_hour:
            if start_hour <= hour < end_hour:
                return True
        elif hour >= start_hour or hour < end_hour:
            return True

    return False


def has_weekend_commits(timestamps: Iterable[str]) -> bool:
    """Return whether any timestamp falls on a UTC Saturday or Sunday."""
    for timestamp in timestamps:
        parsed = parse_timestamp(timestamp)
        if parsed is not None and parsed.weekday() in (_SATURDAY, _SUNDAY):
            return True
    return False


ACHIEVEMENTS: Tuple[Achievement, ...] = (
    Achievement(
        code="NIGHT_OWL",
        name="Night Owl",
        description="Made commits between midnight and 4 AM",
        icon="moon",
        check=lambda stats, timestamps: has_commits_during_hours(timestamps, 0, 4),
    ),
    Achievement(
        code="EARLY_BIRD",
        name="Early Bird",
        description="Made commits between 5 AM and 7 AM",
        icon="sun",
        check=lambda stats, timestamps: has_commits_during_hours(timestamps, 5, 7),
    ),
    Achievement(
        code="STREAK_MASTER",
        name="Streak Master",
        description="Maintained a 30+ day contribution streak",
        icon="fire",
        check=lambda stats, timestamps: stats.longest_streak >= 30,
    ),
    Achievement(
        code="CENTURY",
        name="Century",
        description="Made 100+ contributions in a single month",
        icon="trophy",
        check=lambda stats, timestamps: any(m.count >= 100 for m in stats.contributions_by_month),
    ),
    Achievement(
        code="POLYGLOT",
        name="Polyglot",
        description="Used 5+ programming languages",
        icon="languages",
        check=lambda stats, timestamps: len(stats.top_languages) >= 5,
    ),
    Achievement(
        code="GALAXY_WANDERER",
        name="Galaxy Wanderer",
        description="Contributed to 10+ repositories",
        icon="rocket",
        check=lambda stats, timestamps: stats.total_repos_contributed >= 10,
    ),
    Achievement(
        code="TEAM_PLAYER",
        name="Team Player",
        description="Collaborated with 10+ developers",
        icon="users",
        check=lambda stats, timestamps: len(stats.collaborators) >= 10,
    ),
    Achievement(
        code="CONSISTENT",
        name="Consistent",
        description="Made contributions every month",
        icon="calendar",
        check=lambda stats, timestamps: len(stats.contributions_by_month) == 12
        and all(m.count > 0 for m in stats.contributions_by_month),
    ),
    Achievement(
        code="THOUSAND_CLUB",
        name="Thousand Club",
        description="Made 1000+ contributions in the year",
        icon="star",
        check=lambda stats, timestamps: stats.total_contributions >= 1000,
    ),
    Achievement(
        code="PR_MACHINE",
        name="PR Machine",
        description="Opened 50+ pull requests",
        icon="git-pull-request",
        check=lambda stats, timestamps: stats.total_prs >= 50,
    ),
    Achievement(
        code="STAR_COLLECTOR",
        name="Star Collector",
        description="Own repositories with 100+ total stars",
        icon="stars",
        check=lambda stats, timestamps: stats.total_stars_earned >= 100,
    ),
    Achievement(
        code="BUG_HUNTER",
        name="Bug Hunter",
        description="Opened 30+ issues",
        icon="bug",
        check=lambda stats, timestamps: stats.total_issues >= 30,
    ),
    Achievement(
        code="OPEN_SOURCERER",
        name="Open Sourcerer",
        description="Contributed to 5+ public repositories",
        icon="globe",
        check=lambda stats, timestamps: sum(1 for repo in stats.top_repos if not repo.is_private) >= 5,
    ),
    Achievement(
        code="FIRST_CONTACT",
        name="First Contact",
        description="Made your first contribution of the year",
        icon="hand",
        check=lambda stats, timestamps: stats.total_contributions >= 1,
    ),
    Achievement(
        code="WARP_SPEED",
        name="Warp Speed",
        description="Made 50+ contributions in a single week",
        icon="zap",
        check=lambda stats, timestamps: stats.max_weekly_contributions >= 50,
    ),
    Achievement(
        code="WEEKEND_WARRIOR",
        name="Weekend Warrior",
        description="Made contributions on weekends",
        icon="calendar-check",
        check=lambda stats, timestamps: has_weekend_commits(timestamps),
    ),
)


def get_achievement(code: str) -> Optional[Achievement]:
    """Look up a catalog entry by code."""
    for achievement in ACHIEVEMENTS:
        if achievement.code == code:
            return achievement
    return None


def calculate_achievements(
    stats: AggregatedStats,
    commit_timestamps: Optional[Sequence[str]] = None,
) -> List[str]:
    """Evaluate every rule independently and return earned codes in catalog order.

    Missing commit timestamps count as no evidence, so timestamp-based rules
    are simply not earned.
    """
    timestamps: Sequence[str] = commit_timestamps or ()
    return [achievement.code for achievement in ACHIEVEMENTS if achievement.check(stats, timestamps)]
