"""Unified logging for driveinfo with console and file output."""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so report output stays clean
console = Console(stderr=True)

# Log file configuration
LOG_DIR = Path.home() / ".local" / "state" / "driveinfo"
LOG_FILE = LOG_DIR / "driveinfo.log"
FALLBACK_LOG_FILE = Path("/tmp/driveinfo.log")

# Track the file handler so repeated setup calls are no-ops
_file_handler: Optional[logging.Handler] = None


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Set up file logging for driveinfo runs.

    Args:
        log_file: Path to log file (defaults to ~/.local/state/driveinfo/driveinfo.log)
        verbose: Enable debug-level logging

    Returns:
        Path of the log file in use

    Note:
        Falls back to /tmp/driveinfo.log if the log directory is not writable.
    """
    global _file_handler

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file) if log_file else LOG_FILE

    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = FALLBACK_LOG_FILE

    root_logger = logging.getLogger("driveinfo")
    file_handler = logging.FileHandler(target_log_file)
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    _file_handler = file_handler
    set_verbose(verbose)
    root_logger.info(f"driveinfo logging initialized: {target_log_file}")
    return target_log_file


def set_verbose(verbose: bool) -> None:
    """Switch every driveinfo logger between INFO and DEBUG."""
    level = logging.DEBUG if verbose else logging.INFO
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not name.startswith("driveinfo") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            if isinstance(handler, RichHandler):
                handler.setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with console output.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger with Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        # Console shows warnings unless --verbose lowers the logger level
        handler.setLevel(logging.WARNING)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger
