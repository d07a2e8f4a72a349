"""Rich console output for workflow steps."""

from typing import Optional

from rich.console import Console
from rich.markup import escape


class ScmLogger:
    """Rich console output for workflow steps."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize logger.

        Args:
            console: Rich Console instance
            verbose: Enable verbose output
        """
        self.console = console or Console()
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Blue info message."""
        self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def detail(self, message: str) -> None:
        """Dim diagnostic line, only shown in verbose mode."""
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def staged(self, path: str, is_dir: bool = False) -> None:
        """Audit line for a path added to the index."""
        marker = "* d" if is_dir else "*"
        self.console.print(f"[green]{marker}[/green] {escape(path)}")
