"""Tests for runtime configuration."""
import pytest

from driveinfo.core.config import (
    DriveInfoConfig,
    find_config,
    get_config,
    load_config,
    set_config,
)
from driveinfo.core.errors import ConfigError


class TestDriveInfoConfig:
    """Test defaults and environment overrides."""

    def test_defaults(self):
        config = DriveInfoConfig()
        assert config.smartctl_path == "smartctl"
        assert config.use_sudo is False
        assert config.command_timeout == 15
        assert config.sysfs_root == "/sys"
        assert config.default_block_size == 512
        assert config.log_file is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DRIVEINFO_SMARTCTL", "/opt/smartctl")
        monkeypatch.setenv("DRIVEINFO_USE_SUDO", "yes")
        monkeypatch.setenv("DRIVEINFO_COMMAND_TIMEOUT", "60")

        config = DriveInfoConfig.from_env()

        assert config.smartctl_path == "/opt/smartctl"
        assert config.use_sudo is True
        assert config.command_timeout == 60

    def test_from_env_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("DRIVEINFO_COMMAND_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="integer"):
            DriveInfoConfig.from_env()


class TestConfigFile:
    """Test YAML loading and validation."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "driveinfo.yml"
        path.write_text("use_sudo: true\ncommand_timeout: 30\ndefault_block_size: 4096\n")

        config = DriveInfoConfig.from_file(str(path))

        assert config.use_sudo is True
        assert config.command_timeout == 30
        assert config.default_block_size == 4096
        assert config.smartctl_path == "smartctl"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "driveinfo.yml"
        path.write_text("")
        assert DriveInfoConfig.from_file(str(path)) == DriveInfoConfig()

    @pytest.mark.parametrize("content,message", [
        ("unknown_key: 1\n", "unknown_key"),
        ("command_timeout: 0\n", "command_timeout must be positive"),
        ("default_block_size: 1000\n", "power of two"),
        ("sysfs_root: sys\n", "must be absolute"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("use_sudo: [unclosed\n", "Invalid YAML"),
    ])
    def test_invalid_file(self, tmp_path, content, message):
        path = tmp_path / "driveinfo.yml"
        path.write_text(content)
        with pytest.raises(ConfigError, match=message):
            DriveInfoConfig.from_file(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            DriveInfoConfig.from_file(str(tmp_path / "nope.yml"))


class TestLoadConfig:
    """Test lookup order and precedence."""

    def test_no_file_found(self):
        assert find_config() is None
        assert load_config() == DriveInfoConfig()

    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv("DRIVEINFO_CONFIG", "/env/driveinfo.yml")
        assert find_config("/custom/driveinfo.yml") == "/custom/driveinfo.yml"

    def test_env_path(self, monkeypatch):
        monkeypatch.setenv("DRIVEINFO_CONFIG", "/env/driveinfo.yml")
        assert find_config() == "/env/driveinfo.yml"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "driveinfo.yml"
        path.write_text("command_timeout: 30\nsmartctl_path: /usr/sbin/smartctl\n")
        monkeypatch.setenv("DRIVEINFO_COMMAND_TIMEOUT", "5")

        config = load_config(str(path))

        assert config.command_timeout == 5
        assert config.smartctl_path == "/usr/sbin/smartctl"

    def test_global_config(self):
        custom = DriveInfoConfig(command_timeout=99)
        set_config(custom)
        assert get_config() is custom
