"""Console messages and progress display for a single report run."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn


class RunLog:
    """User-facing log of one run.

    Messages are printed above the progress spinner while it is active. A new
    instance is created per run; nothing is kept at module level.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def info(self, message: str) -> None:
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def error(self, message: str, context: str | None = None) -> None:
        self.console.print(f"[red]✗[/red] {message}")
        if context:
            self.console.print(f"  [dim]{escape(context)}[/dim]")

    @contextmanager
    def progress(self, description: str) -> Iterator[None]:
        """Show a spinner with ``description`` for the duration of the block."""
        with Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            self._progress = progress
            self._task = progress.add_task(description, total=None)
            try:
                yield
            finally:
                self._progress = None
                self._task = None

    def update_progress(self, description: str) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, description=description)

    def progress_with_percentage(self, current: int, total: int, repo_name: str = "") -> None:
        """Update the spinner with ``[current/total] pct%`` and a repository name."""
        percentage = round(current / total * 100) if total else 100
        message = f"[{current}/{total}] {percentage}%"
        if repo_name:
            message += f" - Processing: [cyan]{escape(repo_name)}[/cyan]"
        self.update_progress(message)
