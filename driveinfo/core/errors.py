"""Exception types raised by driveinfo collaborators and configuration."""


class DriveInfoError(Exception):
    """Base class for driveinfo failures that abort a command."""


class ConfigError(DriveInfoError):
    """Configuration file is unreadable or fails validation."""


class SmartQueryError(DriveInfoError):
    """smartctl is missing, timed out, or could not be executed."""


class DeviceNotFoundError(DriveInfoError):
    """Requested device is not a detected disk."""
