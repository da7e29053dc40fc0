"""Report models handed to the CLI for rendering."""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from driveinfo.models.disk import DiskDescriptor, Interface

NOT_AVAILABLE = "Not available"
CANNOT_INTERPRET = "cannot interpret"

STATUS_NOT_AVAILABLE = "not_available"
STATUS_CANNOT_INTERPRET = "cannot_interpret"
STATUS_RESOLVED = "resolved"
STATUS_FALLBACK = "fallback"


@dataclass
class CounterReport:
    """One SMART data counter (read or written) and its interpretation."""
    name: str                          # "Data Units Read"
    count: Optional[int] = None        # sanitized raw count, None if absent
    status: str = STATUS_NOT_AVAILABLE
    bytes: Optional[int] = None        # best-guess byte total
    best_guess: Optional[str] = None   # format_bytes(bytes)
    label: Optional[str] = None        # unit assumption used

    @property
    def available(self) -> bool:
        return self.count is not None

    @property
    def low_confidence(self) -> bool:
        return self.status == STATUS_FALLBACK

    @property
    def summary(self) -> str:
        """Single-line rendering of the raw count."""
        if self.count is None:
            return NOT_AVAILABLE
        if self.status == STATUS_CANNOT_INTERPRET:
            return f"{self.count} LBAs (raw) - {CANNOT_INTERPRET}"
        return f"{self.count} LBAs (raw)"


@dataclass
class LinkInfo:
    """Interface and negotiated link of a drive."""
    interface: Interface
    link_speed: str = "Unknown"


@dataclass
class DriveReport:  # pylint: disable=too-many-instance-attributes
    """Everything `driveinfo inspect` shows for one drive."""
    disk: DiskDescriptor
    link: LinkInfo
    partition_table: Optional[str] = None
    health: Optional[str] = None
    temperature: Optional[str] = None
    identity: Dict[str, Optional[str]] = field(default_factory=dict)
    data_read: CounterReport = field(default_factory=lambda: CounterReport("Data Units Read"))
    data_written: CounterReport = field(default_factory=lambda: CounterReport("Data Units Written"))
    usage: Dict[str, Optional[str]] = field(default_factory=dict)      # power-on hours, cycles, ...
    more_info: Dict[str, Optional[str]] = field(default_factory=dict)  # spare and error counters

    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to a JSON-ready mapping."""
        return {
            "device": self.disk.device,
            "capacity_bytes": self.disk.capacity_bytes,
            "logical_block_size": self.disk.logical_block_size,
            "transport": self.disk.transport,
            "usb_bridge": self.disk.is_usb,
            "disk_type": self.disk.disk_type.value,
            "model": self.disk.model,
            "serial": self.disk.serial,
            "partition_table": self.partition_table,
            "interface": self.link.interface.value,
            "link_speed": self.link.link_speed,
            "health": self.health,
            "temperature": self.temperature,
            "identity": dict(self.identity),
            "data_read": asdict(self.data_read),
            "data_written": asdict(self.data_written),
            "usage": dict(self.usage),
            "more_info": dict(self.more_info),
        }
