"""Drive-focused CLI commands - list, inspect."""
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from driveinfo.cli_support import (
    get_link_detector,
    get_scanner,
    get_smart_query,
    handle_cli_error,
    print_warning,
)
from driveinfo.core.errors import DriveInfoError
from driveinfo.core.formatter import format_bytes
from driveinfo.core.logger import get_logger
from driveinfo.core.reporter import DriveReporter
from driveinfo.models.report import NOT_AVAILABLE, CounterReport, DriveReport

# Module-level console instance (will be set by register function)
console: Console = Console()
logger = get_logger(__name__)

LABEL_WIDTH = 35
FALLBACK_STYLE = "yellow"

# Units smartctl leaves off some values
VALUE_SUFFIXES = {"Power On Hours": " hours"}

TROUBLESHOOTING = (
    "If values above are missing, it could be:",
    "- Drive does not support SMART",
    "- USB adapter does not pass SMART commands through",
    "- Permissions error (run as root or set use_sudo: true)",
)


def list_disks():
    """List detected disks with type, size, logical block size and transport."""
    disks = get_scanner().discover_disks()
    if not disks:
        print_warning(console, "No disks found. Ensure drives are connected and visible.")
        raise typer.Exit(1)

    table = Table(title="Detected disks", show_header=True)
    table.add_column("Device", no_wrap=True)
    table.add_column("Type")
    table.add_column("Size")
    table.add_column("Block", justify="right")
    table.add_column("Transport")
    table.add_column("Model")
    table.add_column("Serial")

    for disk in disks:
        table.add_row(
            disk.device,
            disk.disk_type.value,
            format_bytes(disk.capacity_bytes) if disk.capacity_known else "Unknown",
            f"{disk.logical_block_size} B",
            "usb (bridge)" if disk.is_usb else (disk.transport or "-"),
            disk.model,
            disk.serial,
        )
    console.print(table)


def inspect(
    device: str = typer.Argument(..., help="Disk to inspect, e.g. /dev/sda or nvme0n1"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracebacks on errors"),
):
    """Show SMART health, link state and data read/written for one disk.

    Data read/written counters are converted to bytes using the unit that
    best matches the disk's capacity (logical block, 512 KiB or 1 MiB).
    """
    smart = get_smart_query()
    if not smart.available():
        handle_cli_error(
            DriveInfoError(f"{smart.smartctl_path} not found. Install smartmontools."),
            console,
        )

    reporter = DriveReporter(get_scanner(), get_link_detector(), smart)
    try:
        report = reporter.report(device)
    except DriveInfoError as e:
        logger.debug(f"inspect {device} failed: {e}")
        handle_cli_error(e, console, verbose=verbose)

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
        return

    render_report(report, console)


def _line(out: Console, label: str, value, style: Optional[str] = None) -> None:
    out.print(
        f"{label + ':':<{LABEL_WIDTH}} {value}",
        soft_wrap=True, highlight=False, markup=False, style=style,
    )


def _render_counter(out: Console, counter: CounterReport) -> None:
    _line(out, counter.name, counter.summary)
    if counter.best_guess is not None:
        # Fallback guesses matched no plausible unit
        style = FALLBACK_STYLE if counter.low_confidence else None
        _line(out, "  - Best guess", f"{counter.best_guess}  [{counter.label}]", style=style)


def _render_usage(out: Console, usage) -> None:
    for name, value in usage.items():
        if value is None:
            _line(out, name, NOT_AVAILABLE)
        else:
            _line(out, name, f"{value}{VALUE_SUFFIXES.get(name, '')}")


def render_report(report: DriveReport, out: Console) -> None:
    """Print a DriveReport as aligned label/value lines."""
    disk = report.disk
    interface = report.link.interface.value
    out.print(f"=== Disk Information for {disk.device} ===", soft_wrap=True, markup=False)
    _line(out, "Capacity", format_bytes(disk.capacity_bytes) if disk.capacity_known else "Unknown")
    _line(out, "Partition Table Type", report.partition_table or "Unknown")
    _line(out, "Logical Block Size", f"{disk.logical_block_size} bytes")
    transport = disk.transport or "Unknown"
    if disk.is_usb:
        transport += " (USB bridge, counters may use 1 MiB units)"
    _line(out, "Transport", transport)

    out.print("Disk State:", markup=False)
    _line(out, "SMART overall-health", report.health or "Health info not available.")
    _line(out, "Temperature", report.temperature or NOT_AVAILABLE)

    _line(out, "Interface", interface)
    _line(out, "Link Speed", report.link.link_speed)

    out.print(f"=== {interface}-Specific Data ===", markup=False)
    _render_counter(out, report.data_read)
    _render_counter(out, report.data_written)
    _render_usage(out, report.usage)

    identity = report.identity
    _line(out, "Rotation Speed", identity.get("Rotation Rate") or "Not applicable (SSD)")
    _line(out, "Cache Size", identity.get("Cache Size") or NOT_AVAILABLE)

    out.print("Basic Info:", markup=False)
    for name in ("Model Number", "Device Model", "Serial Number", "Firmware Version",
                 "User Capacity", "Namespace 1 Size/Capacity"):
        if identity.get(name):
            _line(out, name, identity[name])

    out.print("More info:", markup=False)
    extra = {name: value for name, value in report.more_info.items() if value is not None}
    if extra:
        for name, value in extra.items():
            _line(out, name, value)
    else:
        out.print(f"No extra {interface} info.", markup=False)

    if not (report.data_read.available or report.data_written.available or report.health):
        for hint in TROUBLESHOOTING:
            out.print(hint, markup=False)



def register_inspect_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach list and inspect to the root CLI."""
    global console
    console = shared_console
    app.command("list")(list_disks)
    app.command("inspect")(inspect)
