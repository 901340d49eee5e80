"""Raw data fetchers for one user's GitHub activity in a calendar year.

Each fetcher performs only outbound reads and returns one normalized raw shape:
- the core profile of the authenticated user or a named user,
- organizations the authenticated user administers,
- the total stars of repositories the user owns (personally or via orgs),
- the contribution calendar and sampled commit timestamps for the year,
- the repositories contributed to during the year,
- the collaborator leaderboard for the year.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_MAX_REPOS, MAX_COLLABORATORS
from .errors import ApiError, AuthenticationError, ResourceNotFoundError
from .github_client import GitHubClient
from .models import (
    CollaboratorData,
    ContributionData,
    ContributionDay,
    ContributionWeek,
    LanguageShare,
    RepoContributionData,
    UserCoreProfile,
)
from .pagination import Page, iter_pages, page_info, walk_pages

logger = logging.getLogger(__name__)

_REPOS_PAGE_SIZE = 50
_STARS_PAGE_SIZE = 100
_COMMIT_SAMPLE_REPOSITORIES = 50
_COMMIT_SAMPLE_PER_REPOSITORY = 100

OWNED_ORGS_QUERY = """
query {
  viewer {
    organizations(first: 100) {
      nodes {
        login
        viewerIsAMember
        viewerCanAdminister
      }
    }
  }
}
"""

PERSONAL_REPO_STARS_QUERY = """
query($username: String!, $first: Int!, $after: String) {
  user(login: $username) {
    repositories(first: $first, after: $after, ownerAffiliations: OWNER) {
      pageInfo { hasNextPage endCursor }
      nodes { stargazerCount }
    }
  }
}
"""

ORG_REPO_STARS_QUERY = """
query($orgLogin: String!, $first: Int!, $after: String) {
  organization(login: $orgLogin) {
    repositories(first: $first, after: $after) {
      pageInfo { hasNextPage endCursor }
      nodes { stargazerCount }
    }
  }
}
"""

CONTRIBUTIONS_QUERY = """
query($username: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays { date contributionCount }
        }
      }
      restrictedContributionsCount
      totalCommitContributions
      totalPullRequestContributions
      totalIssueContributions
      commitContributionsByRepository(maxRepositories: %(max_repositories)d) {
        contributions(first: %(max_commits)d) {
          nodes { occurredAt }
        }
      }
    }
  }
}
""" % {
    "max_repositories": _COMMIT_SAMPLE_REPOSITORIES,
    "max_commits": _COMMIT_SAMPLE_PER_REPOSITORY,
}

REPOSITORIES_QUERY = """
query($username: String!, $first: Int!, $after: String) {
  user(login: $username) {
    repositoriesContributedTo(
      first: $first
      after: $after
      contributionTypes: [COMMIT, ISSUE, PULL_REQUEST, REPOSITORY]
      includeUserRepositories: true
    ) {
      pageInfo { hasNextPage endCursor }
      nodes {
        id
        nameWithOwner
        description
        isPrivate
        owner { login }
        primaryLanguage { name color }
        languages(first: 5, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node { name color }
          }
        }
        stargazerCount
        forkCount
      }
    }
  }
}
"""

COLLABORATORS_QUERY = """
query($username: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      pullRequestContributions(first: 100) {
        nodes {
          pullRequest {
            author { login avatarUrl }
            reviews(first: 10) {
              nodes {
                author { login avatarUrl }
              }
            }
          }
        }
      }
      issueContributions(first: 100) {
        nodes {
          issue {
            participants(first: 10) {
              nodes { login avatarUrl }
            }
          }
        }
      }
    }
  }
}
"""


def year_window(year: int) -> Dict[str, str]:
    """Return the inclusive UTC ``from``/``to`` bounds of a calendar year."""
    return {
        "from": f"{year}-01-01T00:00:00Z",
        "to": f"{year}-12-31T23:59:59Z",
    }


def _nodes(connection: Optional[Dict[str, Any]]) -> List[Any]:
    """Return the non-null ``nodes`` of a connection that may itself be null."""
    if not connection:
        return []
    return [node for node in connection.get("nodes") or [] if node is not None]


def _require_user(data: Dict[str, Any], username: str) -> Dict[str, Any]:
    user = data.get("user")
    if user is None:
        raise ResourceNotFoundError(f"GitHub user '{username}' was not found.")
    return user


def fetch_user_core_profile(client: GitHubClient, username: Optional[str] = None) -> UserCoreProfile:
    """Fetch the authenticated user's profile, or the public profile of ``username``.

    Raises:
        AuthenticationError: If the authenticated payload lacks the account
            identity, which means the token is not bound to a usable account.
        ResourceNotFoundError: If the profile of ``username`` lacks its identity.
    """
    user = client.get_json("user" if username is None else f"users/{username}")

    user_id = user.get("id")
    login = user.get("login")
    if user_id is None or not login:
        if username is not None:
            raise ResourceNotFoundError(f"GitHub user '{username}' was not found.")
        raise AuthenticationError(
            "GitHub profile payload is missing required fields; re-authenticate and try again."
        )

    return UserCoreProfile(
        id=int(user_id),
        login=str(login),
        name=user.get("name"),
        avatar_url=user.get("avatar_url") or "",
        email=user.get("email"),
        bio=user.get("bio"),
        public_repos=int(user.get("public_repos") or 0),
        followers=int(user.get("followers") or 0),
        following=int(user.get("following") or 0),
        created_at=user.get("created_at") or "",
    )


def fetch_user_owned_orgs(client: GitHubClient) -> List[str]:
    """List lower-cased logins of organizations the authenticated user can administer."""
    data = client.graphql(OWNED_ORGS_QUERY)
    viewer = data.get("viewer") or {}

    return [
        str(org["login"]).lower()
        for org in _nodes(viewer.get("organizations"))
        if org.get("viewerCanAdminister") and org.get("login")
    ]


def _star_counts(connection: Optional[Dict[str, Any]]) -> Optional[Page[int]]:
    if connection is None:
        return None
    has_next_page, end_cursor = page_info(connection)
    return Page(
        items=[int(node.get("stargazerCount") or 0) for node in _nodes(connection)],
        has_next_page=has_next_page,
        end_cursor=end_cursor,
    )


def fetch_total_owned_repo_stars(client: GitHubClient, username: str, owned_orgs: Sequence[str]) -> int:
    """Sum stars over the user's own repositories and every administered organization's.

    A failing organization is skipped, keeping whatever it contributed before the
    failure, so siblings are still counted. Authentication failures propagate.

    Raises:
        ResourceNotFoundError: If the user does not exist.
    """

    def fetch_personal_page(cursor: Optional[str]) -> Optional[Page[int]]:
        data = client.graphql(
            PERSONAL_REPO_STARS_QUERY,
            {"username": username, "first": _STARS_PAGE_SIZE, "after": cursor},
        )
        return _star_counts(_require_user(data, username).get("repositories"))

    total_stars = sum(iter_pages(fetch_personal_page))

    for org_login in owned_orgs:

        def fetch_org_page(cursor: Optional[str], org_login: str = org_login) -> Optional[Page[int]]:
            data = client.graphql(
                ORG_REPO_STARS_QUERY,
                {"orgLogin": org_login, "first": _STARS_PAGE_SIZE, "after": cursor},
            )
            organization = data.get("organization")
            if organization is None:
                return None
            return _star_counts(organization.get("repositories"))

        try:
            for stars in iter_pages(fetch_org_page):
                total_stars += stars
        except AuthenticationError:
            raise
        except ApiError as exc:
            logger.warning(
                "Skipping organization after repository listing failed",
                extra={"org": org_login, "error": str(exc)},
            )

    return total_stars


def fetch_user_contributions_for_year(client: GitHubClient, username: str, year: int) -> ContributionData:
    """Fetch the daily contribution calendar and sampled commit timestamps for ``year``.

    Commit timestamps are a sample capped at 50 repositories with 100 commits
    each, so hour-of-day statistics are not exhaustive for very active users.

    Raises:
        ResourceNotFoundError: If the user does not exist.
    """
    window = year_window(year)
    data = client.graphql(
        CONTRIBUTIONS_QUERY,
        {"username": username, "from": window["from"], "to": window["to"]},
    )
    collection = _require_user(data, username).get("contributionsCollection") or {}
    calendar = collection.get("contributionCalendar") or {}

    weeks: List[ContributionWeek] = []
    for week in calendar.get("weeks") or []:
        days = [
            ContributionDay(date=str(day["date"]), contribution_count=int(day.get("contributionCount") or 0))
            for day in (week or {}).get("contributionDays") or []
            if day and day.get("date")
        ]
        weeks.append(ContributionWeek(contribution_days=days))

    commit_timestamps: List[str] = []
    for repo in collection.get("commitContributionsByRepository") or []:
        for commit in _nodes((repo or {}).get("contributions")):
            occurred_at = commit.get("occurredAt")
            if occurred_at:
                commit_timestamps.append(str(occurred_at))

    return ContributionData(
        total_contributions=int(calendar.get("totalContributions") or 0),
        weeks=weeks,
        restricted_contributions_count=int(collection.get("restrictedContributionsCount") or 0),
        total_commit_contributions=int(collection.get("totalCommitContributions") or 0),
        total_pull_request_contributions=int(collection.get("totalPullRequestContributions") or 0),
        total_issue_contributions=int(collection.get("totalIssueContributions") or 0),
        commit_timestamps=commit_timestamps,
    )


def compute_language_shares(edges: Sequence[Dict[str, Any]]) -> List[LanguageShare]:
    """Convert GraphQL language edges (bytes per language) into percentage shares."""
    valid_edges = [edge for edge in edges if edge and (edge.get("node") or {}).get("name")]
    total_size = sum(int(edge.get("size") or 0) for edge in valid_edges)

    return [
        LanguageShare(
            name=str(edge["node"]["name"]),
            percentage=(int(edge.get("size") or 0) / total_size) * 100 if total_size > 0 else 0.0,
            color=edge["node"].get("color"),
        )
        for edge in valid_edges
    ]


def _to_repo(node: Dict[str, Any], username: str, owned_orgs: Sequence[str]) -> RepoContributionData:
    owner_login = str((node.get("owner") or {}).get("login") or "").lower()
    is_owner = owner_login == username.lower() or owner_login in owned_orgs
    primary_language = node.get("primaryLanguage") or {}

    return RepoContributionData(
        repo_id=str(node["id"]),
        full_name=str(node["nameWithOwner"]),
        description=node.get("description"),
        is_private=bool(node.get("isPrivate")),
        is_owner=is_owner,
        primary_language=primary_language.get("name"),
        languages=compute_language_shares((node.get("languages") or {}).get("edges") or []),
        stargazers_count=int(node.get("stargazerCount") or 0),
        forks_count=int(node.get("forkCount") or 0),
    )


def fetch_user_repos_for_year(
    client: GitHubClient,
    username: str,
    include_private: bool = False,
    owned_orgs: Sequence[str] = (),
    max_repos: int = DEFAULT_MAX_REPOS,
) -> List[RepoContributionData]:
    """List repositories the user contributed to, tagged with languages and ownership.

    Private repositories are skipped unless ``include_private`` is set. At most
    ``max_repos`` repositories are returned.

    Raises:
        ResourceNotFoundError: If the user does not exist.
    """
    normalized_orgs = [org.lower() for org in owned_orgs]

    def fetch_page(cursor: Optional[str]) -> Optional[Page[RepoContributionData]]:
        data = client.graphql(
            REPOSITORIES_QUERY,
            {"username": username, "first": _REPOS_PAGE_SIZE, "after": cursor},
        )
        connection = _require_user(data, username).get("repositoriesContributedTo")
        if connection is None:
            return None

        has_next_page, end_cursor = page_info(connection)
        all_nodes = _nodes(connection)
        nodes = [node for node in all_nodes if node.get("id") and node.get("nameWithOwner")]
        if len(nodes) < len(all_nodes):
            logger.debug("Skipped repositories without an identity", extra={"username": username})
        repos = [
            _to_repo(node, username, normalized_orgs)
            for node in nodes
            if include_private or not node.get("isPrivate")
        ]
        return Page(items=repos, has_next_page=has_next_page, end_cursor=end_cursor)

    repos = walk_pages(fetch_page, max_items=max_repos)

    logger.info(
        "Fetched contributed repositories",
        extra={"username": username, "repos": len(repos), "include_private": include_private},
    )
    return repos


class _CollaboratorTally:
    """Accumulates interaction scores per login in discovery order."""

    def __init__(self, username: str) -> None:
        self._username = username.lower()
        self._collaborators: Dict[str, CollaboratorData] = {}

    def add(self, actor: Optional[Dict[str, Any]], weight: int) -> None:
        if not actor or not actor.get("login"):
            return

        login = str(actor["login"])
        if login.lower() == self._username:
            return

        existing = self._collaborators.get(login)
        if existing is not None:
            existing.interaction_score += weight
            return

        self._collaborators[login] = CollaboratorData(
            github_id=login,
            username=login,
            avatar_url=actor.get("avatarUrl"),
            interaction_score=weight,
        )

    def top(self, limit: int) -> List[CollaboratorData]:
        ranked = sorted(self._collaborators.values(), key=lambda c: c.interaction_score, reverse=True)
        return ranked[:limit]


def fetch_collaborators_for_year(
    client: GitHubClient,
    username: str,
    year: int,
    limit: int = MAX_COLLABORATORS,
) -> List[CollaboratorData]:
    """Build the collaborator leaderboard from pull-request and issue contributions.

    Pull-request authors and issue participants score 1 per interaction,
    reviewers score 2. Deleted pull requests, issues or authors (``null`` in the
    payload) are skipped.

    Raises:
        ResourceNotFoundError: If the user does not exist.
    """
    window = year_window(year)
    data = client.graphql(
        COLLABORATORS_QUERY,
        {"username": username, "from": window["from"], "to": window["to"]},
    )
    collection = _require_user(data, username).get("contributionsCollection") or {}
    tally = _CollaboratorTally(username)
    skipped = 0

    for contribution in _nodes(collection.get("pullRequestContributions")):
        pull_request = contribution.get("pullRequest")
        if pull_request is None:
            skipped += 1
            continue

        tally.add(pull_request.get("author"), 1)
        for review in _nodes(pull_request.get("reviews")):
            tally.add(review.get("author"), 2)

    for contribution in _nodes(collection.get("issueContributions")):
        issue = contribution.get("issue")
        if issue is None:
            skipped += 1
            continue

        for participant in _nodes(issue.get("participants")):
            tally.add(participant, 1)

    if skipped:
        logger.debug("Skipped deleted pull requests or issues", extra={"skipped": skipped})

    return tally.top(limit)
