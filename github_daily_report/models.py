"""Data models for daily activity reports."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum

NO_DESCRIPTION = "No description available"


def _as_local(value: datetime) -> datetime:
    """Return an aware datetime; naive values are taken as local time."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def yesterday_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` interval covering yesterday.

    The start is midnight of the calendar day before ``now`` and the end is
    24 hours later. A naive ``now`` is local wall time, and the start then
    takes the UTC offset in effect at that midnight rather than the one in
    effect at ``now``. An aware ``now`` keeps its own time zone.

    Args:
        now: Reference time (defaults to the current local time)

    Returns:
        Tuple of (start, end) aware datetimes
    """
    if now is None:
        now = datetime.now()
    day = now.date() - timedelta(days=1)
    if now.tzinfo is None:
        start = datetime.combine(day, time.min).astimezone()
    else:
        start = datetime.combine(day, time.min, tzinfo=now.tzinfo)
    return start, start + timedelta(hours=24)


def is_yesterday(timestamp: datetime, now: datetime | None = None) -> bool:
    """Check whether a timestamp falls inside yesterday's window.

    Args:
        timestamp: Time to check
        now: Reference time (defaults to the current local time)

    Returns:
        True if ``start <= timestamp < end``
    """
    start, end = yesterday_window(now)
    return start <= _as_local(timestamp) < end


def format_short_date(value: datetime) -> str:
    """Format a datetime as a short local date, e.g. ``Jan 5, 2024``."""
    local = _as_local(value).astimezone()
    return f"{local.strftime('%b')} {local.day}, {local.year}"


class PullRequestState(str, Enum):
    """State of a pull request."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "PullRequestState":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class ActivityType(str, Enum):
    """Kinds of user activity picked up from the events feed."""

    PR_CREATED = "pr_created"
    PR_COMMENTED = "pr_commented"
    PR_REVIEWED = "pr_reviewed"
    ISSUE_COMMENTED = "issue_commented"


_ACTIVITY_LABELS = {
    ActivityType.PR_CREATED: "Created PR",
    ActivityType.PR_COMMENTED: "Commented on PR",
    ActivityType.PR_REVIEWED: "Reviewed PR",
    ActivityType.ISSUE_COMMENTED: "Commented on Issue",
}


@dataclass(frozen=True)
class PullRequest:
    """The most recently updated pull request of a repository."""

    title: str
    url: str
    author: str
    date: datetime
    state: PullRequestState = PullRequestState.UNKNOWN

    def is_from_yesterday(self, now: datetime | None = None) -> bool:
        return is_yesterday(self.date, now)

    def get_formatted_date(self) -> str:
        return format_short_date(self.date)


@dataclass(frozen=True)
class Activity:
    """A single user action (PR opened, comment, review) on a repository.

    ``type`` is normally an ActivityType, but any other raw string is kept
    as-is and displayed verbatim.
    """

    type: str
    title: str
    url: str
    date: datetime
    repo_name: str

    def is_from_yesterday(self, now: datetime | None = None) -> bool:
        return is_yesterday(self.date, now)

    def get_formatted_date(self) -> str:
        return format_short_date(self.date)

    def get_type_display(self) -> str:
        """Return a human label for the activity type."""
        return _ACTIVITY_LABELS.get(self.type, self.type)


@dataclass
class ProjectSummary:
    """One repository and the activities correlated to it."""

    name: str
    description: str | None
    url: str
    language: str | None = None
    last_pr: PullRequest | None = None
    activities: list[Activity] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.description:
            self.description = NO_DESCRIPTION

    def add_activity(self, activity: Activity) -> None:
        """Append an activity, keeping correlation order."""
        self.activities.append(activity)

    def has_yesterday_activity(self, now: datetime | None = None) -> bool:
        if any(activity.is_from_yesterday(now) for activity in self.activities):
            return True
        return self.last_pr is not None and self.last_pr.is_from_yesterday(now)

    def get_yesterday_activities(self, now: datetime | None = None) -> list[Activity]:
        return [a for a in self.activities if a.is_from_yesterday(now)]


@dataclass(frozen=True)
class ErrorRecord:
    """A recoverable error collected during a run."""

    message: str
    context: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())


@dataclass(frozen=True)
class ExecutiveSummary:
    """Headline counts of a report."""

    total_repos: int
    active_repos: int
    total_activities: int
    created_prs: int
    comments: int
    reviews: int
    has_errors: bool
    error_count: int


@dataclass
class Report:
    """Complete daily activity report for one user."""

    username: str
    # Naive local time, so the yesterday window follows local DST rules
    generated_at: datetime = field(default_factory=datetime.now)
    projects: list[ProjectSummary] = field(default_factory=list)
    total_repos_analyzed: int = 0
    errors: list[ErrorRecord] = field(default_factory=list)

    @property
    def report_date(self) -> date:
        """Calendar date the report covers."""
        return yesterday_window(self.generated_at)[0].date()

    def add_project(self, project: ProjectSummary) -> None:
        self.projects.append(project)

    def set_total_repos(self, count: int) -> None:
        self.total_repos_analyzed = count

    def add_error(self, error: ErrorRecord) -> None:
        self.errors.append(error)

    def get_active_projects(self, now: datetime | None = None) -> list[ProjectSummary]:
        return [p for p in self.projects if p.has_yesterday_activity(now)]

    def get_inactive_projects(self, now: datetime | None = None) -> list[ProjectSummary]:
        return [p for p in self.projects if not p.has_yesterday_activity(now)]

    def get_all_yesterday_activities(self, now: datetime | None = None) -> list[Activity]:
        """Collect yesterday's activities across projects, most recent first."""
        activities = []
        for project in self.projects:
            activities.extend(project.get_yesterday_activities(now))
        return sorted(activities, key=lambda a: _as_local(a.date), reverse=True)

    def get_executive_summary(self, now: datetime | None = None) -> ExecutiveSummary:
        """Compute headline counts from the current report state."""
        activities = self.get_all_yesterday_activities(now)

        def count(activity_type: ActivityType) -> int:
            return sum(1 for a in activities if a.type == activity_type)

        return ExecutiveSummary(
            total_repos=self.total_repos_analyzed,
            active_repos=len(self.get_active_projects(now)),
            total_activities=len(activities),
            created_prs=count(ActivityType.PR_CREATED),
            comments=count(ActivityType.PR_COMMENTED),
            reviews=count(ActivityType.PR_REVIEWED),
            has_errors=bool(self.errors),
            error_count=len(self.errors),
        )
