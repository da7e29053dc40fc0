"""driveinfo runtime configuration and settings."""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from driveinfo.core.errors import ConfigError
from driveinfo.models.disk import DEFAULT_BLOCK_SIZE
from driveinfo.models.settings import DriveInfoSettings

# Config search paths (ordered by proximity to current run)
CONFIG_PATHS = [
    "./driveinfo.yml",
    str(Path.home() / ".config" / "driveinfo" / "driveinfo.yml"),
    "/etc/driveinfo/driveinfo.yml",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class DriveInfoConfig:
    """Runtime configuration for driveinfo.

    Attributes:
        smartctl_path: smartctl executable (default: "smartctl" on PATH)
        use_sudo: Run smartctl through sudo (default: False)
        command_timeout: Timeout in seconds for each external command (default: 15)
        sysfs_root: Where sysfs is mounted (default: /sys)
        default_block_size: Logical block size when sysfs has none (default: 512)
        log_file: Log file path, None for the default location
    """

    smartctl_path: str = "smartctl"
    use_sudo: bool = False
    command_timeout: int = 15  # USB bridges can take several seconds to answer
    sysfs_root: str = "/sys"
    default_block_size: int = DEFAULT_BLOCK_SIZE
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, base: Optional["DriveInfoConfig"] = None) -> "DriveInfoConfig":
        """Create config from environment variables on top of base.

        Environment variables:
            DRIVEINFO_SMARTCTL: smartctl executable
            DRIVEINFO_USE_SUDO: 1/true/yes to run smartctl via sudo
            DRIVEINFO_COMMAND_TIMEOUT: Command timeout in seconds
            DRIVEINFO_SYSFS_ROOT: sysfs mount point
            DRIVEINFO_LOG_FILE: Log file path

        Returns:
            DriveInfoConfig instance with values from environment or base
        """
        base = base or cls()
        use_sudo = os.getenv("DRIVEINFO_USE_SUDO")
        try:
            timeout = int(os.getenv("DRIVEINFO_COMMAND_TIMEOUT", base.command_timeout))
        except ValueError as e:
            raise ConfigError(f"DRIVEINFO_COMMAND_TIMEOUT must be an integer: {e}") from e

        return replace(
            base,
            smartctl_path=os.getenv("DRIVEINFO_SMARTCTL", base.smartctl_path),
            use_sudo=base.use_sudo if use_sudo is None else use_sudo.lower() in _TRUE_VALUES,
            command_timeout=timeout,
            sysfs_root=os.getenv("DRIVEINFO_SYSFS_ROOT", base.sysfs_root),
            log_file=os.getenv("DRIVEINFO_LOG_FILE", base.log_file),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "DriveInfoConfig":
        """Create config from a YAML file, validated against DriveInfoSettings.

        Raises:
            ConfigError: If the file cannot be read or fails validation
        """
        path = Path(config_path)
        try:
            with open(path) as f:
                raw = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        try:
            settings = DriveInfoSettings(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

        overrides = {
            f.name: getattr(settings, f.name)
            for f in fields(cls)
            if getattr(settings, f.name) is not None
        }
        return cls(**overrides)


def find_config(config_path: Optional[str] = None) -> Optional[str]:
    """Locate the active driveinfo.yml, or None when there is none."""
    if config_path:
        return config_path

    if env_config := os.environ.get("DRIVEINFO_CONFIG"):
        return env_config

    for path in CONFIG_PATHS:
        if Path(path).exists():
            return path

    return None


def load_config(config_path: Optional[str] = None) -> DriveInfoConfig:
    """Build config from defaults, the YAML file (if any) and the environment."""
    path = find_config(config_path)
    base = DriveInfoConfig.from_file(path) if path else DriveInfoConfig()
    return DriveInfoConfig.from_env(base)


# Global config instance (can be overridden)
_config: Optional[DriveInfoConfig] = None


def get_config() -> DriveInfoConfig:
    """Get the global driveinfo configuration.

    Returns:
        DriveInfoConfig instance (loads file and environment if not set)
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[DriveInfoConfig]):
    """Set the global driveinfo configuration (None resets it)."""
    global _config
    _config = config
