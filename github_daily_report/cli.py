"""Command-line interface for github-daily-report."""

import logging
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, load_config
from .console_report import print_processing_summary, render_console_report
from .github_client import GitHubClient, GitHubError
from .report import generate_markdown_report
from .report_builder import ReportBuilder
from .run_log import RunLog

app = typer.Typer(help="Generate a report of your GitHub activity from yesterday")
console = Console()


def main():
    """Entry point for the CLI application."""
    app()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_settings(config_file: Path | None) -> Settings:
    if config_file is None:
        return Settings()
    try:
        return load_config(config_file)
    except (OSError, ValueError, TypeError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def generate(
    token: str = typer.Option(
        ...,
        "--token",
        "-t",
        envvar="GITHUB_TOKEN",
        help="GitHub personal access token",
    ),
    username: str = typer.Option(
        None,
        "--username",
        "-u",
        help="GitHub username (defaults to the authenticated user)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output markdown file [default: github-report.md]",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional settings file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    endpoint: str = typer.Option(
        None,
        "--endpoint",
        help="API endpoint URL (for GitHub Enterprise)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log API requests",
    ),
):
    """Generate a report of yesterday's GitHub activity.

    Fetches every repository of the user, their most recent pull requests
    and the user's recent events, prints a summary and writes it as Markdown.
    """
    _configure_logging(verbose)
    settings = _load_settings(config_file)
    if endpoint:
        settings.endpoint = endpoint

    output_path = output or settings.output

    console.print("\n[bold blue]🚀 GitHub Activity Report Generator[/bold blue]\n")

    client = GitHubClient(token=token, endpoint=settings.endpoint, timeout=settings.timeout)
    builder = ReportBuilder(
        client,
        RunLog(console),
        low_rate_limit_threshold=settings.low_rate_limit_threshold,
        activity_lookback_days=settings.activity_lookback_days,
    )

    try:
        report = builder.build(username or settings.username)
    except (GitHubError, httpx.HTTPError) as e:
        console.print(f"[red]✗ Failed to generate report:[/red] {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]📊 REPORT GENERATED[/bold green]\n")
    render_console_report(report, console)

    try:
        generate_markdown_report(report, output_path)
    except OSError as e:
        console.print(f"[red]Error writing report:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Report saved to: {output_path}")
    print_processing_summary(report, console)


@app.command()
def validate(
    config_file: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """Validate a settings file without contacting GitHub."""
    settings = _load_settings(config_file)
    console.print("[green]✓[/green] Configuration is valid")
    console.print(f"\nEndpoint: {settings.endpoint}")
    console.print(f"Username: {settings.username or '(authenticated user)'}")
    console.print(f"Output: {settings.output}")
    console.print(f"Low rate limit threshold: {settings.low_rate_limit_threshold}")
    console.print(f"Activity lookback: {settings.activity_lookback_days} days")
    console.print(f"Timeout: {settings.timeout}s")


if __name__ == "__main__":
    main()
