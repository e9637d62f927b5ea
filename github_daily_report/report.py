"""Markdown report generation."""

from datetime import datetime
from pathlib import Path

from .models import ExecutiveSummary, ProjectSummary, Report

FOOTER = "*Report generated by GitHub Daily Report*"


def generate_markdown_report(
    report: Report, output_path: str | Path, now: datetime | None = None
) -> None:
    """Generate a Markdown report and write it to a file.

    Args:
        report: Report object containing all projects and activities
        output_path: Path where the report should be written
        now: Reference time for the yesterday window
            (defaults to the report's generation time)
    """
    output_path = Path(output_path)

    md_content = build_markdown(report, now)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(md_content)


def build_markdown(report: Report, now: datetime | None = None) -> str:
    """Build the complete Markdown content for the report.

    Args:
        report: Report object containing all projects and activities
        now: Reference time for the yesterday window
            (defaults to the report's generation time)

    Returns:
        Complete Markdown document as a string
    """
    now = now or report.generated_at
    summary = report.get_executive_summary(now)
    active_projects = report.get_active_projects(now)
    activities = report.get_all_yesterday_activities(now)

    lines = []

    lines.append("# GitHub Activity Report")
    lines.append("")
    lines.append(f"**User:** {report.username}  ")
    lines.append(f"**Generated:** {report.generated_at.strftime('%B %d, %Y at %I:%M %p')}  ")
    lines.append(f"**Report Date:** {report.report_date.strftime('%A, %B %d, %Y')}")
    lines.append("")

    lines.extend(_build_summary(summary))
    lines.append("")

    if activities:
        lines.append("## Yesterday's Activities")
        lines.append("")
        for activity in activities:
            lines.append(f"### {activity.get_type_display()}")
            lines.append(f"**{activity.title}**")
            lines.append(f"- Repository: {activity.repo_name}")
            lines.append(f"- Date: {activity.get_formatted_date()}")
            lines.append(f"- [View on GitHub]({activity.url})")
            lines.append("")

    if active_projects:
        lines.append("## Active Projects")
        lines.append("")
        for project in active_projects:
            lines.extend(_build_active_project(project, now))
            lines.append("")

    if len(report.projects) > len(active_projects):
        lines.append(f"## All Repositories ({len(report.projects)} total)")
        lines.append("")
        for project in report.projects:
            status = "🟢" if project.has_yesterday_activity(now) else "⚪"
            entry = f"{status} [{project.name}]({project.url})"
            if project.language:
                entry += f" ({project.language})"
            lines.append(f"{entry}  ")
            lines.append(project.description)
            lines.append("")

    if summary.has_errors:
        lines.append("## Errors Encountered")
        lines.append("")
        lines.append(
            f"{summary.error_count} error(s) occurred during report generation."
        )
        lines.append("")
        for error in report.errors:
            entry = f"- {error.message}"
            if error.context:
                entry += f" ({error.context})"
            lines.append(entry)
        lines.append("")

    lines.append("---")
    lines.append(FOOTER)
    lines.append("")

    return "\n".join(lines)


def _build_summary(summary: ExecutiveSummary) -> list[str]:
    """Build the executive summary section.

    Args:
        summary: ExecutiveSummary of the report

    Returns:
        List of Markdown lines
    """
    return [
        "## Executive Summary",
        "",
        f"- **Total Repositories Analyzed:** {summary.total_repos}",
        f"- **Active Repositories:** {summary.active_repos}",
        f"- **Total Activities:** {summary.total_activities}",
        f"  - PRs Created: {summary.created_prs}",
        f"  - Comments Made: {summary.comments}",
        f"  - Reviews Given: {summary.reviews}",
    ]


def _build_active_project(project: ProjectSummary, now: datetime | None) -> list[str]:
    lines = [f"### [{project.name}]({project.url})", project.description, ""]

    if project.language:
        lines.append(f"**Language:** {project.language}  ")

    activities = project.get_yesterday_activities(now)
    if activities:
        lines.append("**Yesterday's Activities:**")
        for activity in activities:
            lines.append(f"- {activity.get_type_display()}: [{activity.title}]({activity.url})")

    if project.last_pr:
        pr = project.last_pr
        lines.append(
            f"**Latest PR:** [{pr.title}]({pr.url}) by {pr.author} "
            f"({pr.get_formatted_date()}, {pr.state.value})"
        )

    return lines
