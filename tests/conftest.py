"""Shared test fixtures for driveinfo tests."""
import pytest

from driveinfo.core import config as config_module

_ENV_VARS = (
    "DRIVEINFO_CONFIG",
    "DRIVEINFO_MOCK",
    "DRIVEINFO_SMARTCTL",
    "DRIVEINFO_USE_SUDO",
    "DRIVEINFO_COMMAND_TIMEOUT",
    "DRIVEINFO_SYSFS_ROOT",
    "DRIVEINFO_LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep host config files and environment out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "CONFIG_PATHS", [str(tmp_path / "absent.yml")])
    config_module.set_config(None)
    yield
    config_module.set_config(None)


@pytest.fixture
def mock_mode(monkeypatch):
    """Run collaborators against canned drives."""
    monkeypatch.setenv("DRIVEINFO_MOCK", "1")
