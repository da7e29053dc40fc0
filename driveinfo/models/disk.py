"""Physical disk models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_BLOCK_SIZE = 512


class DiskType(Enum):
    """Disk technology type."""
    NVME = "nvme"
    SSD = "ssd"
    HDD = "hdd"
    UNKNOWN = "unknown"


class Interface(Enum):
    """Host interface used to pick link and counter sources."""
    NVME = "NVMe"
    SATA = "SATA"


@dataclass(frozen=True)
class DiskDescriptor:
    """Identifies a physical device and the sizes the resolver needs."""
    device: str                     # /dev/sda
    capacity_bytes: int = 0         # 0 means unknown
    logical_block_size: int = DEFAULT_BLOCK_SIZE
    disk_type: DiskType = DiskType.UNKNOWN
    model: str = "Unknown"
    serial: str = "unknown"
    transport: Optional[str] = None  # usb, sata, nvme (lsblk TRAN)

    def __post_init__(self):
        if self.capacity_bytes < 0:
            raise ValueError(f"capacity_bytes must be >= 0, got {self.capacity_bytes}")
        if self.logical_block_size < 0:
            raise ValueError(f"logical_block_size must be >= 0, got {self.logical_block_size}")
        if self.logical_block_size == 0:
            object.__setattr__(self, "logical_block_size", DEFAULT_BLOCK_SIZE)

    @property
    def name(self) -> str:
        """Kernel name without the /dev/ prefix."""
        return self.device.rsplit("/", 1)[-1]

    @property
    def capacity_known(self) -> bool:
        return self.capacity_bytes > 0

    @property
    def is_usb(self) -> bool:
        """True when attached through a USB bridge."""
        return self.transport == "usb"
