"""`driveinfo resolve` - run the unit resolver on user-supplied values."""
import typer
from rich.console import Console
from rich.table import Table

from driveinfo.core.formatter import format_bytes
from driveinfo.core.resolver import resolve
from driveinfo.core.sanitizer import sanitize
from driveinfo.models.disk import DEFAULT_BLOCK_SIZE, DiskDescriptor
from driveinfo.models.report import CANNOT_INTERPRET, NOT_AVAILABLE

# Module-level console instance (will be set by register function)
console: Console = Console()


def resolve_counter(
    counter: str = typer.Argument(..., help="Raw counter value, e.g. 48213577 or '48,213,577'"),
    capacity: int = typer.Option(..., "--capacity", "-c", min=0, help="Disk capacity in bytes (0 = unknown)"),
    block_size: int = typer.Option(
        DEFAULT_BLOCK_SIZE, "--block-size", "-b", min=0, help="Logical block size in bytes"
    ),
    show_candidates: bool = typer.Option(
        False, "--show-candidates", help="Show how every unit assumption scored"
    ),
):
    """Convert a SMART LBA counter into a best-guess byte total.

    Examples:
        driveinfo resolve 48213577 --capacity 500107862016
        driveinfo resolve "2,725,721" -c 1000204886016 --show-candidates
    """
    count = sanitize(counter)
    if count is None:
        console.print(f"Counter: {NOT_AVAILABLE}")
        return

    disk = DiskDescriptor(device="(command line)", capacity_bytes=capacity, logical_block_size=block_size)
    resolution = resolve(count, disk)
    if resolution is None:
        console.print(f"Counter: {count} LBAs (raw) - {CANNOT_INTERPRET} (disk capacity unknown)", soft_wrap=True)
        return

    console.print(f"Counter:    {count} LBAs (raw)", soft_wrap=True)
    console.print(f"Best guess: {format_bytes(resolution.bytes)}", soft_wrap=True)
    console.print(
        f"Assumption: {resolution.label}",
        soft_wrap=True,
        style="yellow" if resolution.fallback else None,
    )

    if show_candidates:
        table = Table(title="Unit candidates", show_header=True)
        table.add_column("Assumption")
        table.add_column("Bytes", justify="right")
        table.add_column("Share of disk", justify="right")
        table.add_column("Plausible")

        for entry in resolution.scores:
            table.add_row(
                entry.candidate.label,
                format_bytes(entry.bytes),
                f"{entry.ratio:.4%}",
                "yes" if entry.plausible else "no",
            )
        console.print(table)
        console.print(f"Selected by rule: {resolution.rule}")


def register_resolve_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach the resolve command to the root CLI."""
    global console
    console = shared_console
    app.command("resolve")(resolve_counter)
