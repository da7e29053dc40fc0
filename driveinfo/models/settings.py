"""Schema of the driveinfo.yml configuration file."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DriveInfoSettings(BaseModel):
    """Settings accepted in driveinfo.yml. Unset keys keep their defaults."""

    model_config = ConfigDict(
        extra='forbid',
        json_schema_extra={
            "example": {
                "smartctl_path": "/usr/sbin/smartctl",
                "use_sudo": True,
                "command_timeout": 30,
                "default_block_size": 512,
            }
        },
    )

    smartctl_path: Optional[str] = Field(None, description="smartctl executable name or path")
    use_sudo: Optional[bool] = Field(None, description="Prefix smartctl calls with sudo")
    command_timeout: Optional[int] = Field(None, description="Per-command timeout in seconds")
    sysfs_root: Optional[str] = Field(None, description="Mount point of sysfs")
    default_block_size: Optional[int] = Field(None, description="Block size used when sysfs has none")
    log_file: Optional[str] = Field(None, description="File to write logs to")

    @field_validator('command_timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Timeouts must be positive."""
        if v is not None and v <= 0:
            raise ValueError(f"command_timeout must be positive. Got: {v}")
        return v

    @field_validator('default_block_size')
    @classmethod
    def validate_block_size(cls, v):
        """Block sizes are powers of two, 512 or larger."""
        if v is not None and (v < 512 or v & (v - 1)):
            raise ValueError(
                f"default_block_size must be a power of two >= 512. Got: {v}"
            )
        return v

    @field_validator('sysfs_root')
    @classmethod
    def validate_sysfs_root(cls, v):
        """sysfs root must be absolute."""
        if v is not None and not v.startswith('/'):
            raise ValueError(f"sysfs_root must be absolute (start with /). Got: {v}")
        return v
