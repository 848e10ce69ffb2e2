"""Unit tests for path management."""

import os
from pathlib import Path
from unittest.mock import patch

from dockstrap.core.paths import (
    APP_NAME,
    InstallPaths,
    get_config_dir,
    get_settings_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME
            assert get_settings_path() == tmp_path / APP_NAME / "config.toml"


class TestInstallPaths:
    """Tests for InstallPaths dataclass."""

    def test_system_defaults(self) -> None:
        """Default paths are the real system locations."""
        paths = InstallPaths()

        assert paths.daemon_config == Path("/etc/docker/daemon.json")
        assert paths.docker_data_dir == Path("/var/lib/docker")
        assert paths.apt_keyring == Path("/etc/apt/keyrings/docker.gpg")
        assert paths.apt_source_list == Path("/etc/apt/sources.list.d/docker.list")
        assert paths.os_release == Path("/etc/os-release")

    def test_rooted(self, tmp_path: Path) -> None:
        """All paths resolve under a custom root."""
        paths = InstallPaths(root=tmp_path)

        assert paths.daemon_config == tmp_path / "etc" / "docker" / "daemon.json"
        assert paths.docker_socket == tmp_path / "var" / "run" / "docker.sock"

    def test_backup_outside_removed_paths(self) -> None:
        """Backups are not inside anything removed on purge."""
        paths = InstallPaths()

        for removed in paths.removable_on_purge():
            assert not paths.backup_dir.is_relative_to(removed)

    def test_removable_on_purge(self) -> None:
        """Data, state, config and socket are removed."""
        assert InstallPaths().removable_on_purge() == [
            Path("/var/lib/docker"),
            Path("/var/lib/containerd"),
            Path("/etc/docker"),
            Path("/var/run/docker.sock"),
        ]
