"""Thin wrapper around smartctl.

Only raw text is handed back; the values are sanitized and interpreted by
driveinfo.core. smartctl encodes drive state in its exit status bitmask, so
a non-zero status still carries useful stdout and is not treated as a
failure.
"""
import re
import shutil
import subprocess
from typing import Callable, Dict, List, Optional, Tuple

from driveinfo.core.errors import SmartQueryError
from driveinfo.core.logger import get_logger
from driveinfo.models.disk import Interface

logger = get_logger(__name__)

IDENTITY_FIELDS = (
    "Model Number",
    "Device Model",
    "Serial Number",
    "Firmware Version",
    "User Capacity",
    "Namespace 1 Size/Capacity",
    "Rotation Rate",
    "Cache Size",
)

# SATA attribute IDs and the textual names some firmwares use instead
SATA_READ_ID = "242"
SATA_WRITTEN_ID = "241"
SATA_READ_NAMES = ("Total_LBAs_Read", "Total LBAs Read", "Data Units Read")
SATA_WRITTEN_NAMES = ("Total_LBAs_Written", "Total LBAs Written", "Data Units Written")

# Usage and wear figures shown next to the data counters
NVME_USAGE_FIELDS = ("Power Cycles", "Power On Hours", "NVMe Version", "Namespace 1 Size/Capacity")
NVME_MORE_INFO_FIELDS = ("Available Spare", "Unsafe Shutdowns", "Media and Data Integrity Errors")
SATA_USAGE_ATTRIBUTES = (
    ("Power On Hours", "9", "Power_On_Hours"),
    ("Power Cycles", "12", "Power_Cycle_Count"),
    ("Reallocated Sectors", "5", "Reallocated_Sector_Ct"),
)
SATA_MORE_INFO_ATTRIBUTES = (
    ("Current_Pending_Sector", "197", "Current_Pending_Sector"),
    ("Offline_Uncorrectable", "198", "Offline_Uncorrectable"),
)
# RAW_VALUE is the tenth column; some raw values carry extra text after it
RAW_VALUE_COLUMN = 9

_HEALTH = re.compile(r"^[ \t]*SMART overall-health self-assessment test result:[ \t]*(.+)$", re.MULTILINE)
_TEMPERATURE = re.compile(r"^.*Temperature:.*$", re.MULTILINE | re.IGNORECASE)


def run_smartctl(args: List[str], timeout: Optional[int] = None) -> str:
    """Run smartctl and return stdout regardless of its status bitmask."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise SmartQueryError(f"{args[0]} not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise SmartQueryError(f"{' '.join(args)} timed out after {timeout}s") from e

    if result.returncode:
        logger.debug(f"{' '.join(args)} exited with status {result.returncode}")
    return result.stdout


class SmartQuery:
    """Runs smartctl for one device and picks raw lines out of its output."""

    def __init__(
        self,
        smartctl_path: str = "smartctl",
        use_sudo: bool = False,
        timeout: Optional[int] = None,
        run: Optional[Callable[..., str]] = None,
        mock: bool = False,
    ):
        self.smartctl_path = smartctl_path
        self.use_sudo = use_sudo
        self.timeout = timeout
        self.run = run or run_smartctl
        self.mock = mock
        self._cache: Dict[Tuple[str, str], str] = {}

    def available(self) -> bool:
        """True if the smartctl executable can be found."""
        if self.mock:
            return True
        return shutil.which(self.smartctl_path) is not None

    # -----------------------------
    #  Raw queries
    # -----------------------------
    def info(self, device: str) -> str:
        return self._query("-i", device)

    def health(self, device: str) -> str:
        return self._query("-H", device)

    def attributes(self, device: str) -> str:
        return self._query("-A", device)

    def extended(self, device: str) -> str:
        return self._query("-x", device)

    def _query(self, flag: str, device: str) -> str:
        key = (flag, device)
        if key not in self._cache:
            if self.mock:
                self._cache[key] = _mock_output(flag, device)
            else:
                args = [self.smartctl_path, flag, device]
                if self.use_sudo:
                    args.insert(0, "sudo")
                self._cache[key] = self.run(args, timeout=self.timeout)
        return self._cache[key]

    # -----------------------------
    #  Line extraction
    # -----------------------------
    def counter_strings(self, device: str, interface: Interface) -> Tuple[Optional[str], Optional[str]]:
        """Raw (read, written) counter text for a device, None where absent."""
        if interface is Interface.NVME:
            text = self.extended(device)
            return (
                _field_value(text, "Data Units Read", strip_bracket=True),
                _field_value(text, "Data Units Written", strip_bracket=True),
            )

        text = self.attributes(device)
        return (
            _attribute_raw(text, SATA_READ_ID, SATA_READ_NAMES),
            _attribute_raw(text, SATA_WRITTEN_ID, SATA_WRITTEN_NAMES),
        )

    def usage_stats(self, device: str, interface: Interface) -> Dict[str, Optional[str]]:
        """Power-on time, power cycles and similar wear figures.

        NVMe values are the matching `smartctl -x` lines. SATA values are
        attribute raw values; Reallocated Sectors defaults to "0" when the
        drive does not report attribute 5.
        """
        if interface is Interface.NVME:
            text = self.extended(device)
            return {name: _field_value(text, name) for name in NVME_USAGE_FIELDS}

        stats = _attribute_values(self.attributes(device), SATA_USAGE_ATTRIBUTES)
        if stats["Reallocated Sectors"] is None:
            stats["Reallocated Sectors"] = "0"
        return stats

    def more_info(self, device: str, interface: Interface) -> Dict[str, Optional[str]]:
        """Spare capacity and error counters for the "More info" section."""
        if interface is Interface.NVME:
            text = self.extended(device)
            return {name: _field_value(text, name) for name in NVME_MORE_INFO_FIELDS}
        return _attribute_values(self.attributes(device), SATA_MORE_INFO_ATTRIBUTES)

    def health_line(self, device: str) -> Optional[str]:
        match = _HEALTH.search(self.health(device))
        return match.group(1).strip() if match else None

    def temperature_line(self, device: str) -> Optional[str]:
        match = _TEMPERATURE.search(self.extended(device))
        return match.group(0).strip() if match else None

    def identity(self, device: str) -> Dict[str, Optional[str]]:
        """Identity fields from `smartctl -i`, None where not reported."""
        text = self.info(device)
        return {name: _field_value(text, name) for name in IDENTITY_FIELDS}


def _field_value(text: str, name: str, strip_bracket: bool = False) -> Optional[str]:
    """Value of a `Name:   value` line, None when missing or empty."""
    match = re.search(rf"^[ \t]*{re.escape(name)}:[ \t]*(.+)$", text, re.MULTILINE)
    if not match:
        return None
    value = match.group(1).strip()
    if strip_bracket:
        # "1,778,273 [910 GB]" -> "1,778,273"
        value = value.split("[", 1)[0].strip()
    return value or None


def _attribute_row(text: str, attr_id: str, names: Tuple[str, ...]) -> Optional[List[str]]:
    """Columns of a SMART attribute row, matched by ID first, then by name."""
    rows = [line.split() for line in text.splitlines()]
    for parts in rows:
        if parts and parts[0] == attr_id:
            return parts

    lowered = [name.lower() for name in names]
    for line, parts in zip(text.splitlines(), rows):
        if parts and any(name in line.lower() for name in lowered):
            return parts
    return None


def _attribute_raw(text: str, attr_id: str, names: Tuple[str, ...]) -> Optional[str]:
    """Last column of a SMART attribute row (data counters)."""
    parts = _attribute_row(text, attr_id, names)
    return parts[-1] if parts else None


def _attribute_values(text: str, attributes) -> Dict[str, Optional[str]]:
    """RAW_VALUE of each (label, id, name) attribute, keyed by label.

    Raw values such as "21482 (190 12 0)" keep only their first token.
    """
    values: Dict[str, Optional[str]] = {}
    for label, attr_id, name in attributes:
        parts = _attribute_row(text, attr_id, (name,))
        if not parts:
            values[label] = None
        elif len(parts) > RAW_VALUE_COLUMN:
            values[label] = parts[RAW_VALUE_COLUMN]
        else:
            values[label] = parts[-1]
    return values


# -----------------------------
#  Mock data
# -----------------------------
_MOCK_NVME_INFO = """\
=== START OF INFORMATION SECTION ===
Model Number:                       Samsung SSD 970 EVO Plus 1TB
Serial Number:                      S4EWNF0M123456X
Firmware Version:                   2B2QEXM7
NVMe Version:                       1.3
Namespace 1 Size/Capacity:          1,000,204,886,016 [1.00 TB]
"""

_MOCK_NVME_EXTENDED = """\
=== START OF SMART DATA SECTION ===
SMART overall-health self-assessment test result: PASSED

SMART/Health Information (NVMe Log 0x02)
Critical Warning:                   0x00
Temperature:                        38 Celsius
Available Spare:                    100%
Available Spare Threshold:          10%
Percentage Used:                    1%
Data Units Read:                    1,930,112 [988 GB]
Data Units Written:                 2,725,721 [1.39 TB]
Power Cycles:                       73
Power On Hours:                     41
Unsafe Shutdowns:                   10
Media and Data Integrity Errors:    0
"""

_MOCK_SATA_INFO = """\
=== START OF INFORMATION SECTION ===
Device Model:     Samsung SSD 860 EVO 500GB
Serial Number:    S3YANB0K123456X
Firmware Version: RVT04B6Q
User Capacity:    500,107,862,016 bytes [500 GB]
Rotation Rate:    Solid State Device
SATA Version is:  SATA 3.2, 6.0 Gb/s (current: 6.0 Gb/s)
"""

_MOCK_SATA_ATTRIBUTES = """\
ID# ATTRIBUTE_NAME          FLAG     VALUE WORST THRESH TYPE      UPDATED  WHEN_FAILED RAW_VALUE
  5 Reallocated_Sector_Ct   0x0033   100   100   010    Pre-fail  Always       -       0
  9 Power_On_Hours          0x0032   095   095   000    Old_age   Always       -       21482
 12 Power_Cycle_Count       0x0032   099   099   000    Old_age   Always       -       842
190 Airflow_Temperature_Cel 0x0032   067   052   000    Old_age   Always       -       33
241 Total_LBAs_Written      0x0032   099   099   000    Old_age   Always       -       48213577
242 Total_LBAs_Read         0x0032   099   099   000    Old_age   Always       -       40960
197 Current_Pending_Sector  0x0032   100   100   000    Old_age   Always       -       0
198 Offline_Uncorrectable   0x0030   100   100   000    Old_age   Offline      -       0
"""

_MOCK_HEALTH = "SMART overall-health self-assessment test result: PASSED\n"


def _mock_output(flag: str, device: str) -> str:
    nvme = "nvme" in device
    if flag == "-i":
        return _MOCK_NVME_INFO if nvme else _MOCK_SATA_INFO
    if flag == "-H":
        return _MOCK_HEALTH
    if flag == "-A":
        return "" if nvme else _MOCK_SATA_ATTRIBUTES
    if nvme:
        return _MOCK_NVME_INFO + _MOCK_NVME_EXTENDED
    return _MOCK_SATA_INFO + _MOCK_SATA_ATTRIBUTES
