import asyncio
import json

import typer

from proctable.errors import ProctableError
from proctable.query import lookup
from proctable.source import default_source
from proctable.terminate import Terminator, send_signal
from proctable.types import DEFAULT_SIGNAL, DEFAULT_TIMEOUT, ProcessRecord, Query, SignalSpec
from proctable.ui import (
    configure_logging,
    print_error,
    print_kill_summary,
    print_step,
    print_success,
    render_processes_table,
)

app = typer.Typer()


def lookup_handler(query: Query) -> list[ProcessRecord]:
    try:
        return asyncio.run(lookup(query, source=default_source()))
    except ProctableError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command(name="list", help="List running processes, optionally filtered.")
def list_processes(
    pid: list[str] = typer.Option(
        None, "--pid", help="Only show these PIDs. Repeat for several."
    ),
    command: str = typer.Option(
        None, "--command", "-c", help="Case-insensitive regex on the command."
    ),
    arguments: str = typer.Option(
        None, "--arguments", "-a", help="Case-insensitive regex on the arguments."
    ),
    ppid: str = typer.Option(None, "--ppid", help="Regex on the parent PID."),
    psargs: str = typer.Option(
        None, "--psargs", help="Raw arguments for the listing command."
    ),
    keyword: list[str] = typer.Option(
        None, "--keyword", "-k", help="Extra column to include. Repeat for several."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    configure_logging(verbose)
    keywords = keyword or []
    query = Query(
        pid=pid or None,
        command=command,
        arguments=arguments,
        ppid=ppid,
        psargs=psargs,
        keywords=keywords,
    )
    processes = lookup_handler(query)

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in processes], indent=2))
        return

    if not processes:
        print_error("No matching processes found.")
        raise typer.Exit(code=1)

    render_processes_table(processes, keywords)


@app.command(help="Terminate a process and wait until it is gone.")
def kill(
    pid: int = typer.Argument(..., help="The PID of the process to terminate."),
    signal: str = typer.Option(
        DEFAULT_SIGNAL, "--signal", "-s", help="Signal name or number."
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, "--timeout", "-t", help="Seconds to wait for confirmation."
    ),
    no_wait: bool = typer.Option(
        False, "--no-wait", help="Send the signal and exit without confirming."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    configure_logging(verbose)

    if no_wait:
        if not send_signal(pid, signal):
            print_error(f"Failed to send {signal} to process {pid}")
            raise typer.Exit(code=1)
        print_success(f"Sent [yellow]{signal}[/yellow] to process [cyan]{pid}[/cyan]")
        return

    terminator = Terminator(
        pid, SignalSpec(signal=signal, timeout=timeout), default_source()
    )
    print_step(f"Sending [yellow]{signal}[/yellow] to process [cyan]{pid}[/cyan]...")
    try:
        asyncio.run(terminator.run())
    except ProctableError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_kill_summary(pid, signal, terminator.polls)


if __name__ == "__main__":
    app()
