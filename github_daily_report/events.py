"""Conversion of GitHub events into activities."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from .models import Activity, ActivityType

logger = logging.getLogger(__name__)


def parse_github_datetime(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp such as ``2024-01-05T10:00:00Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _pull_request_event(event: dict) -> Activity | None:
    payload = event["payload"]
    if payload.get("action") != "opened":
        return None
    pull_request = payload["pull_request"]
    return Activity(
        type=ActivityType.PR_CREATED,
        title=pull_request["title"],
        url=pull_request["html_url"],
        date=parse_github_datetime(event["created_at"]),
        repo_name=event["repo"]["name"],
    )


def _issue_comment_event(event: dict) -> Activity:
    payload = event["payload"]
    issue = payload["issue"]
    # Comments on pull requests arrive as issue comments with a PR reference
    if issue.get("pull_request"):
        activity_type = ActivityType.PR_COMMENTED
    else:
        activity_type = ActivityType.ISSUE_COMMENTED
    return Activity(
        type=activity_type,
        title=f"Comment on: {issue['title']}",
        url=payload["comment"]["html_url"],
        date=parse_github_datetime(event["created_at"]),
        repo_name=event["repo"]["name"],
    )


def _pull_request_review_event(event: dict) -> Activity:
    payload = event["payload"]
    return Activity(
        type=ActivityType.PR_REVIEWED,
        title=f"Review: {payload['pull_request']['title']}",
        url=payload["review"]["html_url"],
        date=parse_github_datetime(event["created_at"]),
        repo_name=event["repo"]["name"],
    )


EVENT_HANDLERS: dict[str, Callable[[dict], Activity | None]] = {
    "PullRequestEvent": _pull_request_event,
    "IssueCommentEvent": _issue_comment_event,
    "PullRequestReviewEvent": _pull_request_review_event,
}


def activity_from_event(event: dict) -> Activity | None:
    """Build an Activity from a raw event record.

    Args:
        event: Event as returned by the GitHub events API

    Returns:
        Activity, or None for event types that are not tracked
    """
    handler = EVENT_HANDLERS.get(event.get("type"))
    if handler is None:
        return None
    return handler(event)


def activities_from_events(events: Iterable[dict], since: datetime) -> list[Activity]:
    """Convert events created at or after ``since`` into activities.

    Args:
        events: Raw event records
        since: Oldest event time to consider

    Returns:
        Activities in feed order
    """
    activities = []
    for event in events:
        if parse_github_datetime(event["created_at"]) < since:
            continue

        activity = activity_from_event(event)
        if activity is not None:
            activities.append(activity)

    logger.debug(f"Converted {len(activities)} activities from events since {since}")
    return activities
