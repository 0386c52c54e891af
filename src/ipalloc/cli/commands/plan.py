"""Allocation dry-run command."""

from typing import Annotated

import typer
from rich.table import Table

from ipalloc.allocator import Allocator
from ipalloc.cli.output import console, print_error, print_json, print_warning
from ipalloc.config import config
from ipalloc.models.enums import OutputFormat
from ipalloc.models.ip_range import IPRange
from ipalloc.utils.logger import get_logger

logger = get_logger(__name__)


def plan(
    range_spec: Annotated[
        str | None,
        typer.Argument(
            metavar="RANGE",
            help="Range such as 192.168.1.10-20, END exclusive "
            "(default: configured range)",
        ),
    ] = None,
    reserve: Annotated[
        list[str] | None,
        typer.Option("--reserve", "-r", help="Address to reserve (repeatable)"),
    ] = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=0, help="Number of addresses to allocate"),
    ] = 1,
    release: Annotated[
        list[str] | None,
        typer.Option("--release", help="Address to release afterwards (repeatable)"),
    ] = None,
):
    """
    Dry-run an allocation plan against a range.

    Reservations are applied first, then COUNT allocations, then releases.
    """
    try:
        ip_range = IPRange.parse(range_spec or config.DEFAULT_RANGE)
        allocator = Allocator(ip_range)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    for address in reserve or []:
        if address not in ip_range:
            print_warning(f"{address} is not in {ip_range}, not reserved")
            continue
        allocator.reserve(address)

    assigned = []
    for _ in range(count):
        address = allocator.allocate()
        if address is None:
            print_warning(
                f"Range exhausted after {len(assigned)} of {count} allocations"
            )
            break
        assigned.append(address)

    for address in release or []:
        allocator.release(address)

    stats = allocator.stats()
    logger.info(f"Plan for {ip_range}: {stats}")

    if config.OUTPUT_FORMAT == OutputFormat.JSON:
        print_json(
            {
                "assigned": [str(a) for a in assigned],
                "allocated": [str(a) for a in allocator.allocated],
                "reserved": sorted(str(a) for a in allocator.reserved),
                "stats": stats,
            }
        )
        return

    table = Table(title=f"Allocation Plan: {ip_range}", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Address", style="cyan")
    table.add_column("State", style="green")
    for i, address in enumerate(assigned, 1):
        state = allocator.state_of(address)
        table.add_row(str(i), str(address), state.name.lower())
    console.print(table)

    console.print(
        f"size={stats['size']} allocated={stats['allocated']} "
        f"reserved={stats['reserved']} remaining={stats['remaining']}"
    )
