"""Collect GitHub data into a Report."""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

import httpx

from .events import activities_from_events
from .github_client import GitHubClient
from .models import Activity, ErrorRecord, ProjectSummary, Report
from .run_log import RunLog

logger = logging.getLogger(__name__)

DEFAULT_LOW_RATE_LIMIT = 10
DEFAULT_LOOKBACK_DAYS = 7

# Errors recorded in the report without stopping the run
RECOVERABLE_ERRORS = (httpx.HTTPError, KeyError, TypeError, ValueError)


def correlate_activities(
    projects: list[ProjectSummary], activities: Iterable[Activity]
) -> int:
    """Attach activities to the projects of their repositories.

    An activity belongs to the first project whose name equals its
    repository name, either as given (``owner/repo`` or ``repo``) or
    reduced to the part after the last ``/``. Activities with no matching
    project are dropped.

    Args:
        projects: Projects in listing order
        activities: Activities to attach

    Returns:
        Number of activities attached
    """
    attached = 0
    for activity in activities:
        short_name = activity.repo_name.split("/")[-1]
        project = next(
            (p for p in projects if p.name in (activity.repo_name, short_name)),
            None,
        )
        if project is None:
            logger.debug(f"No project for activity in {activity.repo_name}, dropping")
            continue
        project.add_activity(activity)
        attached += 1
    return attached


def minimal_project(repo: dict) -> ProjectSummary:
    """Build a ProjectSummary from whatever listing metadata is present."""
    return ProjectSummary(
        name=repo.get("name") or repo.get("full_name") or "unknown",
        description=repo.get("description"),
        url=repo.get("html_url") or "",
        language=repo.get("language"),
    )


class ReportBuilder:
    """Run the fetch, correlate and aggregate steps for one user."""

    def __init__(
        self,
        client: GitHubClient,
        log: RunLog,
        low_rate_limit_threshold: int = DEFAULT_LOW_RATE_LIMIT,
        activity_lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    ):
        """Initialize the builder.

        Args:
            client: GitHub API client
            log: RunLog for user-facing messages
            low_rate_limit_threshold: Warn when fewer requests remain
            activity_lookback_days: Ignore events older than this
        """
        self.client = client
        self.log = log
        self.low_rate_limit_threshold = low_rate_limit_threshold
        self.activity_lookback_days = activity_lookback_days

    def _record_error(self, report: Report, message: str, context: str | None = None) -> None:
        self.log.error(message, context)
        report.add_error(ErrorRecord(message=message, context=context))

    def connect(self) -> dict:
        """Validate the token.

        Raises:
            AuthenticationError: If GitHub rejects the token or is unreachable
        """
        user = self.client.get_authenticated_user()
        self.log.success(f"Connected to GitHub as: {user['login']}")
        return user

    def check_rate_limit(self) -> None:
        rate = self.client.get_rate_limit()
        if rate is None:
            self.log.warning("Could not check rate limit")
            return

        reset = rate.reset_at.astimezone().strftime("%H:%M:%S")
        self.log.info(f"Rate limit: {rate.remaining} requests remaining (resets at {reset})")
        if rate.remaining < self.low_rate_limit_threshold:
            self.log.warning(
                "Low rate limit remaining - consider waiting before making more requests"
            )

    def build(self, username: str | None = None) -> Report:
        """Build the report.

        Args:
            username: User to report on (defaults to the token's owner)

        Returns:
            Populated Report

        Raises:
            AuthenticationError: If the connection check fails
            httpx.HTTPError: If the repository list cannot be fetched
        """
        with self.log.progress("Connecting to GitHub..."):
            user = self.connect()
        username = username or user["login"]

        self.check_rate_limit()

        report = Report(username=username)

        with self.log.progress("Fetching repositories..."):
            self.log.info(f"Fetching repositories for user: {username}")
            repos = self.client.list_user_repos(username)
            self.log.success(f"Found {len(repos)} repositories")
        report.set_total_repos(len(repos))

        self.log.console.print(f"\n[bold]Processing {len(repos)} repositories...[/bold]\n")
        with self.log.progress("Processing repositories..."):
            for index, repo in enumerate(repos, start=1):
                full_name = repo.get("full_name") or repo.get("name", "")
                self.log.progress_with_percentage(index, len(repos), full_name)
                try:
                    project = self.client.get_repo_details(repo)
                except RECOVERABLE_ERRORS as e:
                    self._record_error(report, f"Failed to process repo: {full_name}", str(e))
                    project = minimal_project(repo)
                report.add_project(project)

        with self.log.progress("Fetching your recent activity..."):
            activities = self._fetch_activities(report, username)

        attached = correlate_activities(report.projects, activities)
        logger.debug(f"Correlated {attached} of {len(activities)} activities")
        self.report_api_usage()

        return report

    def report_api_usage(self) -> None:
        """Show the request count and the quota left after the run."""
        remaining = self.client.rate_limit_remaining
        logger.debug(f"GitHub API calls made: {self.client.api_call_count}")
        if remaining is None:
            return

        self.log.info(
            f"GitHub API calls made: {self.client.api_call_count}, "
            f"{remaining} requests remaining"
        )
        if remaining < self.low_rate_limit_threshold:
            self.log.warning("Low rate limit remaining after this run")

    def _fetch_activities(self, report: Report, username: str) -> list[Activity]:
        self.log.info("Fetching recent user activity...")
        since = datetime.now().astimezone() - timedelta(days=self.activity_lookback_days)
        try:
            events = self.client.list_user_events(username)
            activities = activities_from_events(events, since)
        except RECOVERABLE_ERRORS as e:
            self._record_error(report, "Failed to fetch user activity", str(e))
            return []

        self.log.success(f"Found {len(activities)} recent activities")
        return activities
