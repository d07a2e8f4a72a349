# scmapp Console Output
# Rich-based rendering of command results

from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from scmapp.workflow.dispatcher import RepoInfo, StatusReport


class Console:
    """
    Console output manager using Rich.

    Renders repository info and status reports for the CLI.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Existing Rich console to write to.
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_repo_info(self, info: RepoInfo) -> None:
        """Print repository path, identity, branch and short commit id."""
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("Key", style="bold")
        table.add_column("Value")

        table.add_row("Local Repo:", escape(str(info.path)))
        table.add_row("Author:", escape(info.author or "[not set]"))
        table.add_row("Email:", escape(info.email or "[not set]"))
        table.add_row("Branch:", escape(info.branch or "(detached)"))
        table.add_row("SHA:", info.short_id or "[dim]none[/dim]")

        self._console.print(table)

    def print_status(self, report: StatusReport) -> None:
        """Print repo info, local changes and the pending commit message."""
        self.print_repo_info(report.info)

        self._console.print()
        self._console.print("[bold]Local changes:[/bold]")
        if not report.entries:
            self._console.print("  [dim]No local changes[/dim]")
        for entry in report.entries:
            marker = report.marker(entry)
            line = f"{marker} {escape(entry.path)}"
            if self.verbose:
                line += f" [dim]({entry.state.value})[/dim]"
            self._console.print(line)

        self._console.print()
        self._console.print(
            Panel(
                escape(report.pending_message or ""),
                title="Message (to be used with next commit)",
                border_style="blue",
            )
        )

    def print_config_summary(self, config_path: str, created: bool) -> None:
        """Print configuration summary."""
        state = "created" if created else "already exists"
        self._console.print(
            Panel(
                f"Config: {escape(config_path)} ({state})",
                title="scmapp Configuration",
                border_style="blue",
            )
        )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
