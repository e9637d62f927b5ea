"""Tests for markdown report generation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from github_daily_report.models import (
    Activity,
    ActivityType,
    ErrorRecord,
    ProjectSummary,
    PullRequest,
    PullRequestState,
    Report,
)
from github_daily_report.report import FOOTER, build_markdown, generate_markdown_report

NOW = datetime(2024, 1, 10, 15, 30, tzinfo=timezone.utc)
YESTERDAY_NOON = datetime(2024, 1, 9, 12, tzinfo=timezone.utc)


def _make_report(**kwargs) -> Report:
    report = Report(username="octocat", generated_at=NOW)

    active = ProjectSummary(
        name="octo-repo",
        description="Active work",
        url="https://github.com/octocat/octo-repo",
        language="Python",
        last_pr=PullRequest(
            title="Bump deps",
            url="https://github.com/octocat/octo-repo/pull/2",
            author="dependabot",
            date=YESTERDAY_NOON,
            state=PullRequestState.MERGED,
        ),
    )
    active.add_activity(
        Activity(
            type=ActivityType.PR_CREATED,
            title="Add parser",
            url="https://github.com/octocat/octo-repo/pull/3",
            date=YESTERDAY_NOON,
            repo_name="octocat/octo-repo",
        )
    )
    idle = ProjectSummary(
        name="dusty",
        description=None,
        url="https://github.com/octocat/dusty",
        language=None,
    )

    for project in kwargs.get("projects", [active, idle]):
        report.add_project(project)
    report.set_total_repos(len(report.projects))
    for error in kwargs.get("errors", []):
        report.add_error(error)
    return report


def _section_headings(markdown: str) -> list[str]:
    return [line for line in markdown.splitlines() if line.startswith("## ")]


def test_section_order():
    markdown = build_markdown(_make_report(errors=[ErrorRecord("boom")]), NOW)
    assert _section_headings(markdown) == [
        "## Executive Summary",
        "## Yesterday's Activities",
        "## Active Projects",
        "## All Repositories (2 total)",
        "## Errors Encountered",
    ]
    assert markdown.startswith("# GitHub Activity Report")
    assert markdown.rstrip().endswith(FOOTER)


def test_header_metadata():
    markdown = build_markdown(_make_report(), NOW)
    assert "**User:** octocat" in markdown
    assert "**Report Date:** Tuesday, January 09, 2024" in markdown


def test_executive_summary_counts():
    markdown = build_markdown(_make_report(), NOW)
    assert "- **Total Repositories Analyzed:** 2" in markdown
    assert "- **Active Repositories:** 1" in markdown
    assert "- **Total Activities:** 1" in markdown
    assert "  - PRs Created: 1" in markdown
    assert "  - Reviews Given: 0" in markdown


def test_active_project_details():
    markdown = build_markdown(_make_report(), NOW)
    assert "### [octo-repo](https://github.com/octocat/octo-repo)" in markdown
    assert "**Language:** Python" in markdown
    assert "- Created PR: [Add parser](https://github.com/octocat/octo-repo/pull/3)" in markdown
    assert "**Latest PR:** [Bump deps](https://github.com/octocat/octo-repo/pull/2) by dependabot" in markdown


def test_repository_list_status_markers():
    markdown = build_markdown(_make_report(), NOW)
    assert "🟢 [octo-repo](https://github.com/octocat/octo-repo) (Python)" in markdown
    assert "⚪ [dusty](https://github.com/octocat/dusty)  " in markdown
    assert "No description available" in markdown


def test_repository_list_omitted_when_all_active():
    report = _make_report()
    report.projects.pop()
    markdown = build_markdown(report, NOW)
    assert "## All Repositories" not in markdown
    assert "## Active Projects" in markdown


def test_no_repositories():
    report = _make_report(projects=[])
    markdown = build_markdown(report, NOW)
    assert report.total_repos_analyzed == 0
    assert "## Active Projects" not in markdown
    assert "## All Repositories" not in markdown
    assert "## Yesterday's Activities" not in markdown
    assert "- **Total Repositories Analyzed:** 0" in markdown


def test_errors_section_lists_messages():
    errors = [
        ErrorRecord("Failed to process repo: octocat/dusty", "timed out"),
        ErrorRecord("Failed to fetch user activity"),
    ]
    markdown = build_markdown(_make_report(errors=errors), NOW)
    assert "2 error(s) occurred during report generation." in markdown
    assert "- Failed to process repo: octocat/dusty (timed out)" in markdown
    assert "- Failed to fetch user activity" in markdown


def test_no_errors_section_without_errors():
    assert "## Errors Encountered" not in build_markdown(_make_report(), NOW)


def test_old_activity_not_listed():
    report = _make_report()
    for project in report.projects:
        project.activities.clear()
        project.last_pr = None
    report.projects[0].add_activity(
        Activity(
            type=ActivityType.PR_REVIEWED,
            title="Old review",
            url="https://x",
            date=YESTERDAY_NOON - timedelta(days=3),
            repo_name="octo-repo",
        )
    )
    markdown = build_markdown(report, NOW)
    assert "Old review" not in markdown
    assert "## Active Projects" not in markdown


def test_generate_markdown_report_writes_file(tmp_path):
    output = tmp_path / "report.md"
    generate_markdown_report(_make_report(), output, NOW)
    content = output.read_text(encoding="utf-8")
    assert content == build_markdown(_make_report(), NOW)


def test_window_follows_generation_time():
    """The activity filter uses the same day as the Report Date header."""
    report = _make_report()
    report.generated_at = datetime(2024, 1, 10, 23, 59, tzinfo=timezone.utc)

    markdown = build_markdown(report)

    assert "**Report Date:** Tuesday, January 09, 2024" in markdown
    assert "- **Total Activities:** 1" in markdown
    assert "Add parser" in markdown


def test_written_file_follows_generation_time(tmp_path):
    output = tmp_path / "report.md"
    generate_markdown_report(_make_report(), output)
    assert "## Yesterday's Activities" in output.read_text(encoding="utf-8")
