"""Shared utilities for driveinfo CLI modules."""
from __future__ import annotations

import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from driveinfo.core.config import DriveInfoConfig, get_config
from driveinfo.discovery import LinkDetector, SmartQuery, SystemDiscovery


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("DRIVEINFO_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from driveinfo.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def get_scanner(config: Optional[DriveInfoConfig] = None, mock: Optional[bool] = None) -> SystemDiscovery:
    """Return a SystemDiscovery wired to the active config."""
    config = config or get_config()
    if mock is None:
        mock = is_mock()
    return SystemDiscovery(
        mock=mock,
        sysfs_root=config.sysfs_root,
        default_block_size=config.default_block_size,
        timeout=config.command_timeout,
    )


def get_smart_query(config: Optional[DriveInfoConfig] = None, mock: Optional[bool] = None) -> SmartQuery:
    """Return a SmartQuery wired to the active config."""
    config = config or get_config()
    if mock is None:
        mock = is_mock()
    return SmartQuery(
        smartctl_path=config.smartctl_path,
        use_sudo=config.use_sudo,
        timeout=config.command_timeout,
        mock=mock,
    )


def get_link_detector(config: Optional[DriveInfoConfig] = None, mock: Optional[bool] = None) -> LinkDetector:
    """Return a LinkDetector wired to the active config."""
    config = config or get_config()
    if mock is None:
        mock = is_mock()
    return LinkDetector(sysfs_root=config.sysfs_root, mock=mock)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {message}")
