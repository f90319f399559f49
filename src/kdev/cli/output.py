"""Console utilities and formatting."""
import logging
from typing import List

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..devpod.listing import DevpodSummary


def print_error(error: Exception) -> None:
    """Prints a fatal error to stderr."""
    Console(stderr=True).print(f"[red]Error: {escape(str(error))}[/red]")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
    )


def create_devpod_table(devpods: List[DevpodSummary]) -> Table:
    """Create a table for displaying devpods."""
    table = Table()
    table.add_column("NAME", style="cyan")
    table.add_column("READY", style="green")
    table.add_column("STATUS", style="green")
    table.add_column("NODE", style="blue")
    table.add_column("AGE", style="yellow")

    for devpod in devpods:
        table.add_row(devpod.name, devpod.ready, devpod.phase, devpod.node, devpod.age)

    return table
