"""Host interface and link detection (PCIe via sysfs, SATA via smartctl)."""
import re
from pathlib import Path
from typing import Optional

from driveinfo.core.logger import get_logger
from driveinfo.models.disk import Interface
from driveinfo.models.report import LinkInfo

logger = get_logger(__name__)

UNKNOWN = "Unknown"

PCIE_ATTRIBUTES = (
    "current_link_speed",
    "current_link_width",
    "max_link_speed",
    "max_link_width",
)

_SATA_VERSION = re.compile(r"SATA Version is:\s*(.+)")


class LinkDetector:
    """
    Works out how a drive is attached and what link it negotiated.
    NVMe link state comes from the PCI device in sysfs, SATA link state
    from the "SATA Version is:" line of `smartctl -i`.
    """

    def __init__(self, sysfs_root: str = "/sys", mock: bool = False):
        self.sysfs_root = Path(sysfs_root)
        self.mock = mock

    # -----------------------------
    #  Core detection entry point
    # -----------------------------
    def detect(self, device: str, smart_info: Optional[str] = None) -> LinkInfo:
        interface = self.interface_for(device)
        if interface is Interface.NVME:
            return LinkInfo(interface, self._pcie_link(device))
        return LinkInfo(interface, self._sata_link(smart_info or ""))

    @staticmethod
    def interface_for(device: str) -> Interface:
        if device.startswith("/dev/nvme") or device.startswith("nvme"):
            return Interface.NVME
        return Interface.SATA

    # -----------------------------
    #  Individual detectors
    # -----------------------------
    def _pcie_link(self, device: str) -> str:
        if self.mock:
            return "Current: PCIe 8.0 GT/s PCIe x4, Max: PCIe 8.0 GT/s PCIe x4"

        name = Path(device).name
        pci_dir = (self.sysfs_root / "class" / "block" / name / "device" / "device").resolve()
        if not pci_dir.is_dir():
            logger.debug(f"No PCI device directory for {device} at {pci_dir}")
            return UNKNOWN

        values = {attr: self._read_attr(pci_dir / attr) for attr in PCIE_ATTRIBUTES}
        return (
            f"Current: PCIe {values['current_link_speed']} x{values['current_link_width']}, "
            f"Max: PCIe {values['max_link_speed']} x{values['max_link_width']}"
        )

    def _sata_link(self, smart_info: str) -> str:
        match = _SATA_VERSION.search(smart_info)
        if not match:
            return UNKNOWN
        return match.group(1).strip() or UNKNOWN

    # -----------------------------
    #  Utility helpers
    # -----------------------------
    def _read_attr(self, path: Path) -> str:
        try:
            return path.read_text().strip() or UNKNOWN
        except OSError:
            return UNKNOWN
