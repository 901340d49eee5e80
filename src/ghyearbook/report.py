"""Report rendering and snapshot serialization for a computed year summary.

This module provides utilities for:
- Building a human-readable text report of a ``YearSummary``.
- Converting a ``YearSummary`` into a JSON-serializable snapshot whose keys
  match the stored summary shape (camelCase).
"""

from __future__ import annotations

from typing import Any, Dict, List

from .achievements import get_achievement
from .models import AggregatedStats, RepoContributionData, YearSummary

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_percentage(value: float) -> str:
    """Format a share as a one-decimal percentage."""
    return f"{value:.1f}%"


def format_hour(hour: int) -> str:
    """Format a UTC hour of day as ``HH:00 UTC``."""
    return f"{hour:02d}:00 UTC"


def _repo_to_dict(repo: RepoContributionData) -> Dict[str, Any]:
    return {
        "repoId": repo.repo_id,
        "fullName": repo.full_name,
        "description": repo.description,
        "isPrivate": repo.is_private,
        "isOwner": repo.is_owner,
        "primaryLanguage": repo.primary_language,
        "languages": [
            {"name": share.name, "percentage": share.percentage, "color": share.color}
            for share in repo.languages
        ],
        "stargazersCount": repo.stargazers_count,
        "forksCount": repo.forks_count,
        "commitsByUser": repo.commits_by_user,
        "prsByUser": repo.prs_by_user,
        "issuesByUser": repo.issues_by_user,
        "role": repo.role,
    }


def stats_to_dict(stats: AggregatedStats) -> Dict[str, Any]:
    """Serialize ``AggregatedStats`` with camelCase keys."""
    return {
        "totalContributions": stats.total_contributions,
        "totalCommits": stats.total_commits,
        "totalPRs": stats.total_prs,
        "totalIssues": stats.total_issues,
        "totalStarsEarned": stats.total_stars_earned,
        "contributionsByMonth": [{"month": m.month, "count": m.count} for m in stats.contributions_by_month],
        "topLanguages": [
            {"language": lang.language, "percentage": lang.percentage, "color": lang.color}
            for lang in stats.top_languages
        ],
        "topRepos": [_repo_to_dict(repo) for repo in stats.top_repos],
        "totalReposContributed": stats.total_repos_contributed,
        "collaborators": [
            {
                "githubId": collaborator.github_id,
                "username": collaborator.username,
                "avatarUrl": collaborator.avatar_url,
                "interactionScore": collaborator.interaction_score,
            }
            for collaborator in stats.collaborators
        ],
        "longestStreak": stats.longest_streak,
        "currentStreak": stats.current_streak,
        "mostActiveDay": stats.most_active_day,
        "mostActiveHour": stats.most_active_hour,
        "maxWeeklyContributions": stats.max_weekly_contributions,
        "followers": stats.followers,
    }


def summary_to_dict(summary: YearSummary) -> Dict[str, Any]:
    """Serialize a full ``YearSummary`` into a JSON-ready snapshot."""
    snapshot = stats_to_dict(summary.stats)
    snapshot["commitTimestamps"] = list(summary.commit_timestamps)
    snapshot["achievements"] = list(summary.achievements)
    snapshot["clearance"] = {
        "level": summary.clearance.level,
        "title": summary.clearance.title,
        "score": summary.clearance.score,
    }
    return snapshot


def generate_report(summary: YearSummary, username: str, year: int) -> str:
    """Generate a human-readable yearbook report.

    Args:
        summary: Computed stats, achievements and clearance level.
        username: GitHub login the summary belongs to.
        year: Calendar year that was aggregated.

    Returns:
        Formatted multi-line text report.
    """
    stats = summary.stats
    clearance = summary.clearance

    lines: List[str] = [
        f"GitHub Yearbook: {username} ({year})",
        f"Clearance: Level {clearance.level} - {clearance.title}",
        "",
        "1) Totals",
        f"   Contributions: {stats.total_contributions}",
        f"   Commits: {stats.total_commits}",
        f"   Pull requests: {stats.total_prs}",
        f"   Issues: {stats.total_issues}",
        f"   Stars on owned repositories: {stats.total_stars_earned}",
        "",
        "2) Activity",
        f"   Longest streak: {stats.longest_streak} days",
        f"   Current streak: {stats.current_streak} days",
        f"   Busiest week: {stats.max_weekly_contributions} contributions",
        f"   Most active day: {stats.most_active_day}",
        f"   Most active hour: {format_hour(stats.most_active_hour)}",
        "   Monthly: "
        + ", ".join(
            f"{MONTH_ABBREVIATIONS[m.month - 1]} {m.count}" for m in stats.contributions_by_month
        ),
        "",
        "3) Top Languages",
    ]

    if stats.top_languages:
        lines.extend(
            f"   {lang.language}: {format_percentage(lang.percentage)}" for lang in stats.top_languages
        )
    else:
        lines.append("   n/a")

    lines.extend(["", f"4) Top Repositories ({stats.total_repos_contributed} contributed)"])
    if stats.top_repos:
        lines.extend(
            f"   [{repo.role}] {repo.full_name} ({repo.stargazers_count} stars)" for repo in stats.top_repos
        )
    else:
        lines.append("   n/a")

    lines.extend(["", "5) Collaborators"])
    if stats.collaborators:
        lines.extend(
            f"   {collaborator.username}: {collaborator.interaction_score}"
            for collaborator in stats.collaborators
        )
    else:
        lines.append("   n/a")

    lines.extend(["", f"6) Achievements ({len(summary.achievements)} earned)"])
    for code in summary.achievements:
        achievement = get_achievement(code)
        if achievement is None:
            lines.append(f"   {code}")
        else:
            lines.append(f"   {achievement.name}: {achievement.description}")

    return "\n".join(lines)
