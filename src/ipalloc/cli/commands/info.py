"""Range inspection command."""

from typing import Annotated

import typer
from rich.table import Table

from ipalloc.cli.output import console, print_error, print_json
from ipalloc.config import config
from ipalloc.models.enums import OutputFormat
from ipalloc.models.ip_range import IPRange


def describe_range(ip_range: IPRange) -> dict:
    """Summarize a range as plain data."""
    network = ip_range.network
    return {
        "range": str(ip_range),
        "version": ip_range.version,
        "first": str(ip_range.start) if ip_range.size else None,
        "last": str(ip_range.last) if ip_range.last is not None else None,
        "size": ip_range.size,
        "network": str(network) if network else None,
        "netmask": str(network.netmask) if network else None,
    }


def info(
    range_spec: Annotated[
        str | None,
        typer.Argument(
            metavar="RANGE",
            help="Range such as 192.168.1.10-20, END exclusive "
            "(default: configured range)",
        ),
    ] = None,
):
    """Show the bounds and size of an address range."""
    try:
        ip_range = IPRange.parse(range_spec or config.DEFAULT_RANGE)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    data = describe_range(ip_range)
    if config.OUTPUT_FORMAT == OutputFormat.JSON:
        print_json(data)
        return

    table = Table(title="Address Range", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, value in data.items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)
