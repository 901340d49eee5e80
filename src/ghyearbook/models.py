"""Domain models for GitHub yearly activity aggregation.

These dataclasses intentionally model only the subset of API payload fields that
are required for aggregation, achievements and clearance scoring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

FLAGSHIP = "FLAGSHIP"
PATROL = "PATROL"
SHUTTLE = "SHUTTLE"


@dataclass(slots=True)
class UserCoreProfile:
    """Identity snapshot of the authenticated GitHub user."""

    id: int
    login: str
    name: Optional[str]
    avatar_url: str
    email: Optional[str]
    bio: Optional[str]
    public_repos: int
    followers: int
    following: int
    created_at: str


@dataclass(slots=True)
class ContributionDay:
    """One day of the contribution calendar (``date`` is ``YYYY-MM-DD``)."""

    date: str
    contribution_count: int


@dataclass(slots=True)
class ContributionWeek:
    """One calendar week, days in chronological order."""

    contribution_days: List[ContributionDay] = field(default_factory=list)


@dataclass(slots=True)
class ContributionData:
    """Contribution calendar and category totals for one year."""

    total_contributions: int
    weeks: List[ContributionWeek]
    restricted_contributions_count: int
    total_commit_contributions: int
    total_pull_request_contributions: int
    total_issue_contributions: int
    commit_timestamps: List[str] = field(default_factory=list)


@dataclass(slots=True)
class LanguageShare:
    """Share of a repository's bytes written in one language."""

    name: str
    percentage: float
    color: Optional[str]


@dataclass(slots=True)
class RepoContributionData:
    """A repository the user contributed to during the year.

    ``commits_by_user``, ``prs_by_user`` and ``issues_by_user`` are reserved and
    stay at zero: the contributed-repositories query has no per-repo attribution.
    """

    repo_id: str
    full_name: str
    description: Optional[str]
    is_private: bool
    is_owner: bool
    primary_language: Optional[str]
    languages: List[LanguageShare]
    stargazers_count: int
    forks_count: int
    commits_by_user: int = 0
    prs_by_user: int = 0
    issues_by_user: int = 0
    role: str = SHUTTLE


@dataclass(slots=True)
class CollaboratorData:
    """Another user the subject interacted with, scored by interaction weight."""

    github_id: str
    username: str
    avatar_url: Optional[str]
    interaction_score: int


@dataclass(slots=True)
class MonthlyContribution:
    """Contribution total for one calendar month (1-12)."""

    month: int
    count: int


@dataclass(slots=True)
class LanguageStat:
    """Normalized share of one language across all contributed repositories."""

    language: str
    percentage: float
    color: Optional[str]


@dataclass(slots=True)
class AggregatedStats:
    """Canonical yearly summary produced by the aggregation engine."""

    total_contributions: int
    total_commits: int
    total_prs: int
    total_issues: int
    total_stars_earned: int
    contributions_by_month: List[MonthlyContribution]
    top_languages: List[LanguageStat]
    top_repos: List[RepoContributionData]
    total_repos_contributed: int
    collaborators: List[CollaboratorData]
    longest_streak: int
    current_streak: int
    most_active_day: str
    most_active_hour: int
    max_weekly_contributions: int
    followers: int


@dataclass(frozen=True)
class Achievement:
    """Static catalog entry pairing an achievement code with its predicate."""

    code: str
    name: str
    description: str
    icon: str
    check: Callable[[AggregatedStats, Sequence[str]], bool]


@dataclass(frozen=True)
class ClearanceLevel:
    """Rank derived from account age, followers and contribution volume."""

    level: int
    title: str
    score: float


@dataclass(slots=True)
class RawYearData:
    """The five raw inputs consumed by the aggregation engine."""

    profile: UserCoreProfile
    contributions: ContributionData
    repos: List[RepoContributionData]
    collaborators: List[CollaboratorData]
    total_owned_stars: int


@dataclass(slots=True)
class YearSummary:
    """Everything a presentation layer needs for one user and year."""

    stats: AggregatedStats
    commit_timestamps: List[str]
    achievements: List[str]
    clearance: ClearanceLevel
