import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from proctable.types import ProcessRecord

# Global consoles for UI functions
_console = Console()
_err_console = Console(stderr=True)

# Plain output for CI logs and other non-interactive terminals
_use_simple_ui = os.getenv("PROCTABLE_SIMPLE_UI") == "1"


def configure_logging(verbose: bool) -> None:
    """Route library debug logging through rich when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
    )


def render_processes_table(processes: list[ProcessRecord], keywords: list[str]):
    table = Table()

    table.add_column("PID", style="cyan", no_wrap=True, justify="right")
    table.add_column("PPID", style="magenta", no_wrap=True, justify="right")
    for keyword in keywords:
        table.add_column(keyword, style="green")
    table.add_column("Command", style="white", no_wrap=False)

    for proc in processes:
        # Shorten command for readability
        cmd_display = " ".join([proc.command, *proc.arguments])
        if len(cmd_display) > 80:
            cmd_display = cmd_display[:77] + "..."

        table.add_row(
            proc.pid,
            proc.ppid or "",
            *(proc.extras.get(keyword, "") for keyword in keywords),
            cmd_display,
        )

    _console.print(table)


def print_kill_summary(pid: str | int, signal: str, polls: int):
    """Print the outcome of a confirmed kill."""
    message = (
        f"Process [cyan bold]{pid}[/cyan bold] terminated with [yellow]{signal}[/yellow]\n"
        f"Confirmed absent after {polls} listings."
    )
    if _use_simple_ui:
        _console.print(f"[green]✅[/green] {message}")
    else:
        _console.print(Panel(f"[green]✅[/green] {message}", border_style="green", expand=False))


def print_success(message: str, prefix: str = "✅"):
    """Print a success message."""
    _console.print(f"[green]{prefix}[/green] {message}")


def print_step(message: str, prefix: str = "🔧"):
    """Print a step/progress message."""
    _console.print(f"[cyan]{prefix}[/cyan] {message}")


def print_error(message: str, prefix: str = "❌"):
    """Print an error message to stderr."""
    _err_console.print(f"[red]{prefix}[/red] {message}", highlight=False)
