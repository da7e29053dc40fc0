"""driveinfo - SMART and link diagnostics for locally attached drives."""

__version__ = "0.2.0"
