"""Tests for the achievement catalog and rule evaluation."""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghyearbook.achievements import (
    ACHIEVEMENTS,
    calculate_achievements,
    get_achievement,
    has_commits_during_hours,
    has_weekend_commits,
)
from ghyearbook.models import (
    AggregatedStats,
    CollaboratorData,
    LanguageStat,
    MonthlyContribution,
    RepoContributionData,
)

DEMO_HISTOGRAM = [245, 198, 312, 189, 276, 234, 201, 298, 267, 245, 212, 170]


def _stats(**overrides) -> AggregatedStats:
    stats = AggregatedStats(
        total_contributions=0,
        total_commits=0,
        total_prs=0,
        total_issues=0,
        total_stars_earned=0,
        contributions_by_month=[MonthlyContribution(month=m, count=0) for m in range(1, 13)],
        top_languages=[],
        top_repos=[],
        total_repos_contributed=0,
        collaborators=[],
        longest_streak=0,
        current_streak=0,
        most_active_day="Monday",
        most_active_hour=14,
        max_weekly_contributions=0,
        followers=0,
    )
    return replace(stats, **overrides)


def _histogram(counts):
    return [MonthlyContribution(month=i + 1, count=count) for i, count in enumerate(counts)]


def _repo(index: int, private: bool = False) -> RepoContributionData:
    return RepoContributionData(
        repo_id=str(index),
        full_name=f"octocat/r{index}",
        description=None,
        is_private=private,
        is_owner=False,
        primary_language=None,
        languages=[],
        stargazers_count=0,
        forks_count=0,
    )


def test_catalog_has_sixteen_unique_codes():
    """Verify the fixed catalog size and code uniqueness."""
    codes = [achievement.code for achievement in ACHIEVEMENTS]

    assert len(codes) == 16
    assert len(set(codes)) == 16


def test_get_achievement_returns_catalog_entry_or_none():
    """Verify catalog lookup by code."""
    assert get_achievement("NIGHT_OWL").name == "Night Owl"
    assert get_achievement("UNKNOWN") is None


def test_empty_stats_earn_nothing():
    """Verify an empty year earns no achievements, FIRST_CONTACT included."""
    assert calculate_achievements(_stats(), []) == []
    assert calculate_achievements(_stats()) == []


def test_demo_histogram_earns_century_and_consistent():
    """Verify a busy, evenly spread year earns CENTURY and CONSISTENT."""
    earned = calculate_achievements(_stats(contributions_by_month=_histogram(DEMO_HISTOGRAM)))

    assert "CENTURY" in earned
    assert "CONSISTENT" in earned


def test_consistent_requires_every_month():
    """Verify one empty month prevents CONSISTENT."""
    counts = list(DEMO_HISTOGRAM)
    counts[6] = 0

    assert "CONSISTENT" not in calculate_achievements(_stats(contributions_by_month=_histogram(counts)))


def test_streak_master_flips_at_thirty_without_side_effects():
    """Verify a 29 -> 30 longest streak changes only STREAK_MASTER."""
    before = calculate_achievements(_stats(longest_streak=29, total_contributions=40))
    after = calculate_achievements(_stats(longest_streak=30, total_contributions=40))

    assert "STREAK_MASTER" not in before
    assert set(after) - set(before) == {"STREAK_MASTER"}
    assert set(before) - set(after) == set()


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"total_contributions": 1}, "FIRST_CONTACT"),
        ({"total_contributions": 1000}, "THOUSAND_CLUB"),
        ({"total_prs": 50}, "PR_MACHINE"),
        ({"total_stars_earned": 100}, "STAR_COLLECTOR"),
        ({"total_issues": 30}, "BUG_HUNTER"),
        ({"max_weekly_contributions": 50}, "WARP_SPEED"),
        ({"total_repos_contributed": 10}, "GALAXY_WANDERER"),
    ],
)
def test_threshold_rules_trigger_at_boundary(overrides, code):
    """Verify numeric thresholds are inclusive and one below does not trigger."""
    assert code in calculate_achievements(_stats(**overrides))

    below = {key: value - 1 for key, value in overrides.items()}
    assert code not in calculate_achievements(_stats(**below))


def test_galaxy_wanderer_uses_uncapped_repo_count():
    """Verify the rule reads the full contributed count, not the capped top list."""
    stats = _stats(top_repos=[_repo(i) for i in range(3)], total_repos_contributed=25)

    assert "GALAXY_WANDERER" in calculate_achievements(stats)


def test_polyglot_and_team_player_count_entries():
    """Verify POLYGLOT needs five languages and TEAM_PLAYER ten collaborators."""
    languages = [LanguageStat(language=f"L{i}", percentage=20.0, color=None) for i in range(5)]
    collaborators = [
        CollaboratorData(github_id=f"u{i}", username=f"u{i}", avatar_url=None, interaction_score=1)
        for i in range(10)
    ]

    earned = calculate_achievements(_stats(top_languages=languages, collaborators=collaborators))
    assert {"POLYGLOT", "TEAM_PLAYER"} <= set(earned)

    earned = calculate_achievements(_stats(top_languages=languages[:4], collaborators=collaborators[:9]))
    assert not {"POLYGLOT", "TEAM_PLAYER"} & set(earned)


def test_open_sourcerer_counts_public_top_repos():
    """Verify five public repositories in the top list earn OPEN_SOURCERER."""
    public = [_repo(i) for i in range(5)]
    mixed = [_repo(i) for i in range(4)] + [_repo(9, private=True)] * 3

    assert "OPEN_SOURCERER" in calculate_achievements(_stats(top_repos=public))
    assert "OPEN_SOURCERER" not in calculate_achievements(_stats(top_repos=mixed))


def test_timestamp_rules():
    """Verify NIGHT_OWL, EARLY_BIRD and WEEKEND_WARRIOR read UTC commit timestamps."""
    # 2025-01-06 is a Monday, 2025-01-04 a Saturday.
    assert calculate_achievements(_stats(), ["2025-01-06T03:59:00Z"]) == ["NIGHT_OWL"]
    assert calculate_achievements(_stats(), ["2025-01-06T06:30:00Z"]) == ["EARLY_BIRD"]
    assert calculate_achievements(_stats(), ["2025-01-06T04:00:00Z"]) == []
    assert calculate_achievements(_stats(), ["2025-01-04T12:00:00Z"]) == ["WEEKEND_WARRIOR"]


def test_timestamp_rules_ignore_malformed_values():
    """Verify unparseable timestamps never raise and count as no evidence."""
    assert calculate_achievements(_stats(), ["", "yesterday"]) == []


def test_has_commits_during_hours_supports_wrapping_windows():
    """Verify windows crossing midnight match hours on both sides."""
    assert has_commits_during_hours(["2025-01-06T23:00:00Z"], 22, 6)
    assert has_commits_during_hours(["2025-01-06T05:00:00Z"], 22, 6)
    assert not has_commits_during_hours(["2025-01-06T06:00:00Z"], 22, 6)
    assert not has_commits_during_hours(["2025-01-06T12:00:00Z"], 22, 6)
    assert not has_commits_during_hours(["2025-01-06T04:00:00Z"], 4, 4)
    assert not has_commits_during_hours([], 0, 4)


def test_has_weekend_commits_sunday():
    """Verify Sunday counts as a weekend day."""
    assert has_weekend_commits(["2025-01-05T10:00:00Z"])
    assert not has_weekend_commits(["2025-01-07T10:00:00Z"])


def test_results_follow_catalog_order():
    """Verify earned codes are returned in catalog order."""
    stats = _stats(total_contributions=1000, longest_streak=45)
    catalog_order = [achievement.code for achievement in ACHIEVEMENTS]

    earned = calculate_achievements(stats, ["2025-01-04T01:00:00Z"])

    assert earned == sorted(earned, key=catalog_order.index)
    assert earned == ["NIGHT_OWL", "STREAK_MASTER", "THOUSAND_CLUB", "FIRST_CONTACT", "WEEKEND_WARRIOR"]
