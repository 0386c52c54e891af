"""
ipalloc CLI entry point.

Usage:
    ipalloc [OPTIONS] COMMAND [ARGS]...

Commands:
    info  Show the bounds and size of an address range
    plan  Dry-run an allocation plan against a range
"""

from typing import Annotated

import typer

from ipalloc.cli.commands import info, plan
from ipalloc.config import config
from ipalloc.models.enums import LogLevel, OutputFormat
from ipalloc.utils.logger import configure_logging

app = typer.Typer(
    name="ipalloc",
    help="IP range allocation tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("info")(info.info)
app.command("plan")(plan.plan)


@app.callback()
def main(
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level", "-l", help="Logging verbosity", envvar="IPALLOC_LOG_LEVEL"
        ),
    ] = LogLevel.WARNING,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format", "-f", help="Output format: table|json", envvar="IPALLOC_FORMAT"
        ),
    ] = OutputFormat.TABLE,
):
    """
    IP range allocation tools.

    Inspect address ranges and dry-run allocations against them.
    """
    config.LOG_LEVEL = log_level
    config.OUTPUT_FORMAT = output_format
    configure_logging(config.LOG_LEVEL, config.get_log_file())


if __name__ == "__main__":
    app()
