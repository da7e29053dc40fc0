#!/usr/bin/env python3
"""driveinfo CLI - SMART, link and usage diagnostics for local drives."""
from typing import Optional

import typer
from rich.console import Console

from driveinfo import __version__
from driveinfo.cli_inspect_commands import register_inspect_commands
from driveinfo.cli_resolve_commands import register_resolve_commands
from driveinfo.cli_support import handle_cli_error, setup_file_logging
from driveinfo.core.config import load_config, set_config
from driveinfo.core.errors import ConfigError
from driveinfo.core.logger import get_logger, set_verbose

app = typer.Typer(
    name="driveinfo",
    help="""driveinfo - Disk diagnostics for Linux

Partition table, SMART health, NVMe PCIe link or SATA version, and
best-guess totals of data read/written.

Quick start:
  driveinfo list                  # Show detected disks
  driveinfo inspect /dev/sda      # Full report for one disk
  driveinfo resolve 48213577 -c 500107862016

Requires smartctl (smartmontools). Run as root for full SMART access.
""",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)


def _version_callback(value: bool):
    if value:
        console.print(f"driveinfo {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[str] = typer.Option(None, "--config", help="Path to driveinfo.yml"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Load configuration and logging before any command runs."""
    try:
        active = load_config(config)
    except ConfigError as e:
        handle_cli_error(e, console, verbose=verbose)
    set_config(active)

    set_verbose(verbose)
    if log_file or active.log_file:
        setup_file_logging(log_file=log_file or active.log_file, verbose=verbose)
    logger.debug(f"Active configuration: {active}")


# Attach modular subcommands
register_inspect_commands(app, console)
register_resolve_commands(app, console)

if __name__ == "__main__":
    app()
