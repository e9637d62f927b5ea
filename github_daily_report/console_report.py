"""Terminal rendering of a report using rich."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from .models import Report


def render_console_report(
    report: Report, console: Console, now: datetime | None = None
) -> None:
    """Print the executive summary, activities and active projects.

    Args:
        report: Report to render
        console: Console to print to
        now: Reference time for the yesterday window
            (defaults to the report's generation time)
    """
    now = now or report.generated_at
    summary = report.get_executive_summary(now)
    active_projects = report.get_active_projects(now)
    activities = report.get_all_yesterday_activities(now)

    console.print("[bold underline]EXECUTIVE SUMMARY[/bold underline]")
    console.print(f"User: [cyan]{escape(report.username)}[/cyan]")
    console.print(f"Total Repositories: [yellow]{summary.total_repos}[/yellow]")
    console.print(f"Active Repositories (yesterday): [green]{summary.active_repos}[/green]")
    console.print(f"Total Activities: [blue]{summary.total_activities}[/blue]")

    if summary.total_activities > 0:
        console.print(f"  • PRs Created: [green]{summary.created_prs}[/green]")
        console.print(f"  • Comments Made: [blue]{summary.comments}[/blue]")
        console.print(f"  • Reviews Given: [magenta]{summary.reviews}[/magenta]")

    if summary.has_errors:
        console.print(f"Errors Encountered: [red]{summary.error_count}[/red]")

    if activities:
        console.print("\n[bold underline]YESTERDAY'S ACTIVITIES[/bold underline]")
        for activity in activities:
            console.print(
                f"[cyan]•[/cyan] {activity.get_type_display()}: {escape(activity.title)}"
            )
            console.print(f"  [bright_black]Repository:[/bright_black] {activity.repo_name}")
            console.print(f"  [bright_black]Time:[/bright_black] {activity.get_formatted_date()}")
            console.print(f"  [bright_black]URL:[/bright_black] {activity.url}\n")

    if active_projects:
        console.print("[bold underline]ACTIVE PROJECTS[/bold underline]")
        for project in active_projects:
            console.print(f"[cyan]•[/cyan] {escape(project.name)}")
            console.print(
                f"  [bright_black]Description:[/bright_black] {escape(project.description)}"
            )
            if project.language:
                console.print(f"  [bright_black]Language:[/bright_black] {project.language}")
            console.print(
                f"  [bright_black]Activities:[/bright_black] "
                f"{len(project.get_yesterday_activities(now))}"
            )
            console.print(f"  [bright_black]URL:[/bright_black] {project.url}\n")
    else:
        console.print("\n[yellow]No activity detected for yesterday.[/yellow]")
        console.print("This could mean:")
        console.print("• No GitHub activity occurred yesterday")
        console.print("• Activities occurred in private repositories not accessible")
        console.print("• Rate limiting prevented full data collection")


def print_processing_summary(report: Report, console: Console) -> None:
    """Print the list of errors collected during the run."""
    console.print("\n[bold]" + "=" * 50 + "[/bold]")
    console.print("[bold]PROCESSING SUMMARY[/bold]")
    console.print("[bold]" + "=" * 50 + "[/bold]")

    if not report.errors:
        console.print("\n[green]✓ All operations completed successfully![/green]")
        return

    console.print(f"\n[red]{len(report.errors)} error(s) occurred:[/red]")
    for index, error in enumerate(report.errors, start=1):
        console.print(f"[red]{index}. {escape(error.message)}[/red]")
        if error.context:
            console.print(f"[bright_black]   Context: {escape(error.context)}[/bright_black]")
