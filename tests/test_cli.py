"""CLI integration tests for list, inspect and resolve."""
import json

from rich.console import Console
from typer.testing import CliRunner

from driveinfo import cli_inspect_commands as inspect_commands
from driveinfo.cli import app
from driveinfo.cli_inspect_commands import render_report
from driveinfo.core.reporter import DriveReporter, build_counter_report
from driveinfo.discovery import LinkDetector, SmartQuery, SystemDiscovery
from driveinfo.discovery import smartctl as smartctl_module
from driveinfo.models.disk import DiskDescriptor, Interface
from driveinfo.models.report import DriveReport, LinkInfo

runner = CliRunner()


class TestMainHelp:
    """Test main CLI help output."""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "driveinfo - Disk diagnostics for Linux" in result.stdout
        assert "inspect" in result.stdout
        assert "resolve" in result.stdout
        assert "list" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "driveinfo" in result.stdout


class TestResolveCommand:
    """Test `driveinfo resolve`."""

    def test_logical_block_scenario(self):
        result = runner.invoke(app, ["resolve", "2000000000", "--capacity", "1000204886016"])

        assert result.exit_code == 0
        assert "Counter:    2000000000 LBAs (raw)" in result.stdout
        assert "953.67 GB (1024000000000 bytes)" in result.stdout
        assert "assumes logical block size (512 B)" in result.stdout

    def test_counter_with_separators(self):
        result = runner.invoke(app, ["resolve", "2,725,721", "-c", "1000204886016"])

        assert result.exit_code == 0
        assert "2725721 LBAs (raw)" in result.stdout
        assert "assumes 512 KiB per unit (vendor-scale)" in result.stdout

    def test_not_available(self):
        result = runner.invoke(app, ["resolve", "n/a", "-c", "1000204886016"])

        assert result.exit_code == 0
        assert "Not available" in result.stdout

    def test_unknown_capacity(self):
        result = runner.invoke(app, ["resolve", "48213577", "-c", "0"])

        assert result.exit_code == 0
        assert "cannot interpret" in result.stdout

    def test_fallback_is_marked(self):
        result = runner.invoke(app, ["resolve", "0", "-c", "1000204886016"])

        assert result.exit_code == 0
        assert "0 B (0 bytes)" in result.stdout
        assert "(fallback)" in result.stdout

    def test_show_candidates(self):
        result = runner.invoke(
            app, ["resolve", "40960", "-c", "500107862016", "--show-candidates"]
        )

        assert result.exit_code == 0
        assert "Unit candidates" in result.stdout
        assert "Selected by rule: bridge-quirk" in result.stdout

    def test_custom_block_size(self):
        result = runner.invoke(
            app, ["resolve", "250000000", "-c", "1000204886016", "--block-size", "4096"]
        )

        assert result.exit_code == 0
        assert "assumes logical block size (4096 B)" in result.stdout


class TestListCommand:
    """Test `driveinfo list`."""

    def test_list_mock_disks(self, mock_mode, monkeypatch):
        monkeypatch.setattr(inspect_commands, "console", Console(width=200))
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "/dev/nvme0n1" in result.stdout
        assert "/dev/sda" in result.stdout
        assert "nvme" in result.stdout
        assert "usb (bridge)" in result.stdout
        assert "S3YANB0K123456X" in result.stdout

    def test_list_no_disks(self, monkeypatch):
        monkeypatch.setattr(SystemDiscovery, "discover_disks", lambda self: [])
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "No disks found" in result.stdout


class TestInspectCommand:
    """Test `driveinfo inspect` in mock mode."""

    def test_inspect_sata(self, mock_mode):
        result = runner.invoke(app, ["inspect", "/dev/sda"])

        assert result.exit_code == 0
        output = result.stdout
        assert "=== Disk Information for /dev/sda ===" in output
        assert "Partition Table Type:" in output
        assert "SATA 3.2, 6.0 Gb/s (current: 6.0 Gb/s)" in output
        assert "48213577 LBAs (raw)" in output
        assert "[assumes logical block size (512 B)]" in output
        assert "[assumes 1 MiB per unit (USB-SATA quirk)]" in output
        assert "Solid State Device" in output
        assert f"{'Power On Hours:':<35} 21482 hours" in output
        assert f"{'Reallocated Sectors:':<35} 0" in output
        assert "More info:" in output
        assert f"{'Current_Pending_Sector:':<35} 0" in output
        assert "USB bridge" in output

    def test_inspect_nvme(self, mock_mode):
        result = runner.invoke(app, ["inspect", "nvme0n1"])

        assert result.exit_code == 0
        assert "=== NVMe-Specific Data ===" in result.stdout
        assert "Current: PCIe" in result.stdout
        assert "1930112 LBAs (raw)" in result.stdout
        assert "NVMe Version:" in result.stdout
        assert f"{'Power Cycles:':<35} 73" in result.stdout
        assert f"{'Unsafe Shutdowns:':<35} 10" in result.stdout

    def test_inspect_json(self, mock_mode):
        result = runner.invoke(app, ["inspect", "/dev/sda", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["device"] == "/dev/sda"
        assert payload["data_written"]["count"] == 48213577
        assert payload["data_read"]["label"] == "assumes 1 MiB per unit (USB-SATA quirk)"
        assert payload["usage"]["Power Cycles"] == "842"
        assert payload["more_info"]["Offline_Uncorrectable"] == "0"
        assert payload["disk_type"] == "ssd"
        assert payload["usb_bridge"] is True

    def test_inspect_unknown_device(self, mock_mode):
        result = runner.invoke(app, ["inspect", "/dev/sdz"])

        assert result.exit_code == 1
        assert "/dev/sdz is not a detected disk" in result.stdout

    def test_inspect_without_smartctl(self, monkeypatch):
        monkeypatch.setattr(smartctl_module.shutil, "which", lambda name: None)
        result = runner.invoke(app, ["inspect", "/dev/sda"])

        assert result.exit_code == 1
        assert "Install smartmontools" in result.stdout

    def test_invalid_config_file(self, tmp_path):
        path = tmp_path / "driveinfo.yml"
        path.write_text("command_timeout: -1\n")

        result = runner.invoke(app, ["--config", str(path), "resolve", "1", "-c", "1"])

        assert result.exit_code == 1
        assert "Error:" in result.stdout


def test_render_report_not_available(capsys):
    """Absent counters render as 'Not available' with troubleshooting hints."""
    smart = SmartQuery(run=lambda args, timeout=None: "")
    reporter = DriveReporter(SystemDiscovery(mock=True), LinkDetector(mock=True), smart)
    report = reporter.report("/dev/sda")

    render_report(report, Console(width=200))
    output = capsys.readouterr().out

    assert f"{'Data Units Read:':<35} Not available" in output
    assert f"{'Data Units Written:':<35} Not available" in output
    assert "Drive does not support SMART" in output
    assert "No extra SATA info." in output


def test_render_report_highlights_fallback_guess(capsys):
    """Low-confidence guesses are coloured; confident ones are not."""
    disk = DiskDescriptor(device="/dev/sdb", capacity_bytes=500_107_862_016)
    report = DriveReport(
        disk=disk,
        link=LinkInfo(Interface.SATA),
        data_read=build_counter_report("Data Units Read", "0", disk),
        data_written=build_counter_report("Data Units Written", "48213577", disk),
    )

    render_report(report, Console(width=200, force_terminal=True, color_system="standard"))
    lines = capsys.readouterr().out.splitlines()

    fallback = [line for line in lines if "(fallback)" in line]
    confident = [line for line in lines if "assumes logical block size" in line]
    assert len(fallback) == 1 and "\x1b[33m" in fallback[0]
    assert len(confident) == 1 and "\x1b[33m" not in confident[0]


def test_resolve_fallback_is_coloured(monkeypatch):
    from driveinfo import cli_resolve_commands as resolve_commands

    monkeypatch.setattr(
        resolve_commands, "console", Console(width=200, force_terminal=True, color_system="standard")
    )
    result = runner.invoke(app, ["resolve", "0", "-c", "1000204886016"])

    assert result.exit_code == 0
    assert "\x1b[33mAssumption:" in result.stdout
