"""Assemble drive reports from collaborator output and the unit resolver."""
from typing import Optional

from driveinfo.core.formatter import format_bytes
from driveinfo.core.logger import get_logger
from driveinfo.core.resolver import resolve
from driveinfo.core.sanitizer import sanitize
from driveinfo.discovery.hwdetect import LinkDetector
from driveinfo.discovery.scanner import SystemDiscovery
from driveinfo.discovery.smartctl import SmartQuery
from driveinfo.models.disk import DiskDescriptor
from driveinfo.models.report import (
    STATUS_CANNOT_INTERPRET,
    STATUS_FALLBACK,
    STATUS_RESOLVED,
    CounterReport,
    DriveReport,
)

logger = get_logger(__name__)


def build_counter_report(name: str, raw: Optional[str], disk: DiskDescriptor) -> CounterReport:
    """Sanitize and interpret one raw SMART counter.

    Absent input stays "Not available" and is never resolved. A present
    count on a disk of unknown capacity is reported as "cannot interpret".
    """
    count = sanitize(raw)
    if count is None:
        return CounterReport(name)

    resolution = resolve(count, disk)
    if resolution is None:
        return CounterReport(name, count=count, status=STATUS_CANNOT_INTERPRET)

    return CounterReport(
        name,
        count=count,
        status=STATUS_FALLBACK if resolution.fallback else STATUS_RESOLVED,
        bytes=resolution.bytes,
        best_guess=format_bytes(resolution.bytes),
        label=resolution.label,
    )


class DriveReporter:
    """Collects everything `driveinfo inspect` shows for one drive."""

    def __init__(self, scanner: SystemDiscovery, detector: LinkDetector, smart: SmartQuery):
        self.scanner = scanner
        self.detector = detector
        self.smart = smart

    def report(self, device: str) -> DriveReport:
        """Build the report for a device.

        Raises:
            DeviceNotFoundError: If device is not a detected disk
            SmartQueryError: If smartctl cannot be run
        """
        disk = self.scanner.describe(device)
        logger.info(
            f"Inspecting {disk.device}: {disk.capacity_bytes} bytes, "
            f"{disk.logical_block_size} B logical blocks"
        )

        info = self.smart.info(disk.device)
        link = self.detector.detect(disk.device, smart_info=info)
        read_raw, written_raw = self.smart.counter_strings(disk.device, link.interface)

        return DriveReport(
            disk=disk,
            link=link,
            partition_table=self.scanner.partition_table_type(disk.device),
            health=self.smart.health_line(disk.device),
            temperature=self.smart.temperature_line(disk.device),
            identity=self.smart.identity(disk.device),
            data_read=build_counter_report("Data Units Read", read_raw, disk),
            data_written=build_counter_report("Data Units Written", written_raw, disk),
            usage=self.smart.usage_stats(disk.device, link.interface),
            more_info=self.smart.more_info(disk.device, link.interface),
        )
