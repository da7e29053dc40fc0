"""Block device scanner (lsblk + sysfs)."""
import json
import subprocess
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from driveinfo.core.errors import DeviceNotFoundError
from driveinfo.core.logger import get_logger
from driveinfo.core.sanitizer import sanitize
from driveinfo.models.disk import DEFAULT_BLOCK_SIZE, DiskDescriptor, DiskType

logger = get_logger(__name__)

LSBLK_COLUMNS = "NAME,SIZE,TYPE,ROTA,MODEL,SERIAL,LOG-SEC,TRAN"


def run_command(args: List[str], timeout: Optional[int] = None) -> str:
    """Run a command and return its stdout; raises on failure."""
    result = subprocess.run(
        args, capture_output=True, text=True, check=True, timeout=timeout
    )
    return result.stdout


class SystemDiscovery:
    """Discover local disks and the sizes needed to interpret their counters."""

    def __init__(
        self,
        mock: bool = False,
        run: Optional[Callable[..., str]] = None,
        sysfs_root: str = "/sys",
        default_block_size: int = DEFAULT_BLOCK_SIZE,
        timeout: Optional[int] = None,
    ):
        self.mock = mock
        self.run = run or run_command
        self.sysfs_root = Path(sysfs_root)
        self.default_block_size = default_block_size
        self.timeout = timeout

    def discover_disks(self) -> List[DiskDescriptor]:
        """Discover all physical disks in the system."""
        if self.mock:
            return self._mock_disks()

        try:
            output = self.run(
                ['lsblk', '-J', '-b', '-d', '-o', LSBLK_COLUMNS], timeout=self.timeout
            )
            data = json.loads(output)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired,
                json.JSONDecodeError, FileNotFoundError) as e:
            logger.warning(f"lsblk failed, no disks detected: {e}")
            return []

        disks = []
        for device in data.get('blockdevices', []):
            if device.get('type') != 'disk':
                continue

            name = device['name']
            block_size = sanitize(device.get('log-sec'))
            disks.append(DiskDescriptor(
                device=f"/dev/{name}",
                capacity_bytes=sanitize(device.get('size')) or 0,
                logical_block_size=block_size or self.logical_block_size(name),
                disk_type=self._detect_disk_type(name, device.get('rota')),
                model=(device.get('model') or 'Unknown').strip(),
                serial=(device.get('serial') or 'unknown').strip(),
                transport=device.get('tran'),
            ))

        return disks

    def describe(self, device: str) -> DiskDescriptor:
        """Return the descriptor of one detected disk.

        Raises:
            DeviceNotFoundError: If device is not among the detected disks
        """
        for disk in self.discover_disks():
            if disk.device == device or disk.name == device:
                if not disk.capacity_known:
                    disk = replace(disk, capacity_bytes=self.capacity_bytes(disk.device))
                return disk
        raise DeviceNotFoundError(f"{device} is not a detected disk")

    def capacity_bytes(self, device: str) -> int:
        """Size of a single device in bytes, 0 when lsblk cannot tell."""
        if self.mock:
            return next((d.capacity_bytes for d in self._mock_disks() if d.device == device), 0)

        try:
            output = self.run(['lsblk', '-nb', '-o', 'SIZE', '-d', device], timeout=self.timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning(f"Could not read size of {device}: {e}")
            return 0

        lines = output.strip().splitlines()
        return (sanitize(lines[0]) if lines else None) or 0

    def logical_block_size(self, name: str) -> int:
        """Logical block size from sysfs queue attributes."""
        path = self.sysfs_root / "block" / Path(name).name / "queue" / "logical_block_size"
        try:
            value = sanitize(path.read_text())
        except OSError:
            logger.debug(f"{path} unreadable, assuming {self.default_block_size} B blocks")
            return self.default_block_size
        return value or self.default_block_size

    def partition_table_type(self, device: str) -> Optional[str]:
        """Partition table type (gpt, dos, ...) or None when unknown."""
        if self.mock:
            return "gpt"

        try:
            output = self.run(['lsblk', '-no', 'PTTYPE', device], timeout=self.timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning(f"Could not read partition table of {device}: {e}")
            return None

        lines = [line.strip() for line in output.splitlines() if line.strip()]
        return lines[0] if lines else None

    def _detect_disk_type(self, name: str, rotational) -> DiskType:
        """Detect disk type from device name and rotation."""
        if name.startswith('nvme'):
            return DiskType.NVME
        if rotational in (0, False, "0"):
            return DiskType.SSD
        if rotational in (1, True, "1"):
            return DiskType.HDD
        return DiskType.UNKNOWN

    def _mock_disks(self) -> List[DiskDescriptor]:
        """Mock disk data for testing."""
        return [
            DiskDescriptor(
                device="/dev/nvme0n1",
                capacity_bytes=1_000_204_886_016,  # 1TB
                logical_block_size=512,
                disk_type=DiskType.NVME,
                model="Samsung SSD 970 EVO Plus 1TB",
                serial="S4EWNF0M123456X",
                transport="nvme",
            ),
            DiskDescriptor(
                device="/dev/sda",
                capacity_bytes=500_107_862_016,  # 500GB
                logical_block_size=512,
                disk_type=DiskType.SSD,
                model="Samsung SSD 860 EVO 500GB",
                serial="S3YANB0K123456X",
                transport="usb",
            ),
        ]
