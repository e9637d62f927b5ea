"""GitHub API client."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from .events import parse_github_datetime
from .models import ProjectSummary, PullRequest, PullRequestState

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.github.com"


class GitHubError(Exception):
    """Base class for GitHub client failures."""


class AuthenticationError(GitHubError):
    """Raised when the token cannot be used to reach GitHub."""


@dataclass(frozen=True)
class RateLimit:
    """Core API quota as reported by GitHub."""

    limit: int
    remaining: int
    reset_at: datetime


def project_from_repo(repo: dict) -> ProjectSummary:
    """Build a ProjectSummary from a repository listing record."""
    return ProjectSummary(
        name=repo["name"],
        description=repo.get("description"),
        url=repo["html_url"],
        language=repo.get("language"),
    )


def pull_request_from_record(record: dict) -> PullRequest:
    """Build a PullRequest from a pull request listing record."""
    if record.get("merged_at"):
        state = PullRequestState.MERGED
    else:
        state = PullRequestState.parse(record.get("state"))
    return PullRequest(
        title=record["title"],
        url=record["html_url"],
        author=record["user"]["login"],
        date=parse_github_datetime(record["updated_at"]),
        state=state,
    )


class GitHubClient:
    """Sequential GitHub REST client for daily reports."""

    def __init__(
        self,
        token: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            endpoint: API endpoint URL (for GitHub Enterprise)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.token = token
        self.endpoint = endpoint.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token}",
        }
        self.timeout = timeout
        self.transport = transport
        self.api_call_count = 0
        self.rate_limit_remaining: int | None = None

    def _client(self) -> httpx.Client:
        return httpx.Client(
            headers=self.headers, timeout=self.timeout, transport=self.transport
        )

    def _track_rate_limit(self, response: httpx.Response) -> None:
        """Record the remaining quota from response headers.

        Advisory only: requests are never delayed because of it.
        """
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and remaining.isdigit():
            self.rate_limit_remaining = int(remaining)

    def _get(self, path: str, params: dict | None = None) -> Any:
        """Make a single GET request and return the decoded JSON body."""
        url = f"{self.endpoint}{path}"
        with self._client() as client:
            logger.debug(f"GitHub API: GET {url} (params: {params})")
            response = client.get(url, params=params)
            self.api_call_count += 1
            self._track_rate_limit(response)
            response.raise_for_status()
            return response.json()

    def _get_paginated(self, path: str, params: dict | None = None) -> list[dict]:
        """Make paginated GET requests following the Link header.

        Args:
            path: API path, e.g. ``/users/octocat/repos``
            params: Query parameters for the first page

        Returns:
            List of all results from paginated responses
        """
        results = []
        params = dict(params or {})
        params.setdefault("per_page", 100)
        url = f"{self.endpoint}{path}"

        with self._client() as client:
            page_num = 1
            while url:
                logger.debug(f"GitHub API: GET {url} (page {page_num}, params: {params})")
                response = client.get(url, params=params)
                self.api_call_count += 1
                self._track_rate_limit(response)
                response.raise_for_status()
                data = response.json()

                if isinstance(data, list):
                    logger.debug(f"GitHub API: Received {len(data)} items")
                    results.extend(data)
                else:
                    results.append(data)

                url = self._get_next_page_url(response.headers.get("Link", ""))
                # The next-page URL already carries the query string
                params = None
                page_num += 1

        logger.debug(f"GitHub API: Total results: {len(results)}")
        return results

    def _get_next_page_url(self, link_header: str) -> str | None:
        """Extract next page URL from Link header.

        Args:
            link_header: GitHub Link header value

        Returns:
            URL of next page or None if no more pages
        """
        if not link_header:
            return None

        for link in link_header.split(","):
            parts = link.split(";")
            if len(parts) == 2 and 'rel="next"' in parts[1]:
                return parts[0].strip("<> ")

        return None

    def get_authenticated_user(self) -> dict:
        """Fetch the user the token belongs to.

        Returns:
            User record (``login`` and profile fields)

        Raises:
            AuthenticationError: If GitHub cannot be reached or rejects the token
        """
        try:
            return self._get("/user")
        except httpx.HTTPError as e:
            raise AuthenticationError(f"GitHub authentication failed: {e}") from e

    def get_rate_limit(self) -> RateLimit | None:
        """Fetch the core API quota, or None if it cannot be read."""
        try:
            data = self._get("/rate_limit")
            core = data["resources"]["core"] if "resources" in data else data["rate"]
            return RateLimit(
                limit=core["limit"],
                remaining=core["remaining"],
                reset_at=datetime.fromtimestamp(core["reset"], tz=timezone.utc),
            )
        except (httpx.HTTPError, KeyError, TypeError) as e:
            logger.debug(f"Rate limit check failed: {e}")
            return None

    def list_user_repos(self, username: str) -> list[dict]:
        """List all repositories of a user, most recently updated first."""
        return self._get_paginated(
            f"/users/{username}/repos", {"type": "all", "sort": "updated"}
        )

    def get_last_pull_request(self, owner: str, repo: str) -> PullRequest | None:
        """Fetch the most recently updated pull request of a repository.

        Any request failure (missing permissions, empty repositories, network
        errors) is routine and yields None without being reported.

        Args:
            owner: Repository owner login
            repo: Repository name

        Returns:
            PullRequest or None if the repository has none
        """
        try:
            prs = self._get(
                f"/repos/{owner}/{repo}/pulls",
                {"state": "all", "sort": "updated", "direction": "desc", "per_page": 1},
            )
        except httpx.HTTPError as e:
            logger.debug(f"No pull request info for {owner}/{repo}: {e}")
            return None

        if not prs:
            return None
        return pull_request_from_record(prs[0])

    def get_repo_details(self, repo: dict) -> ProjectSummary:
        """Build a ProjectSummary for a listed repository, with its latest PR.

        Args:
            repo: Repository listing record

        Returns:
            ProjectSummary for the repository
        """
        project = project_from_repo(repo)
        last_pr = self.get_last_pull_request(repo["owner"]["login"], repo["name"])
        if last_pr:
            project.last_pr = last_pr
        return project

    def list_user_events(self, username: str) -> list[dict]:
        """Fetch the most recent page of a user's public and private events."""
        return self._get(f"/users/{username}/events", {"per_page": 100})
