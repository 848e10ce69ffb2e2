"""Filesystem locations used by the installer.

Two groups of paths live here:

- Per-user paths following the XDG Base Directory Specification, used for
  the installer's settings file (``~/.config/dockstrap/``).
- Fixed system paths touched on the host (daemon config, data directories,
  APT keyring and source list, run log). These hang off
  :class:`InstallPaths`, whose ``root`` can be pointed at a scratch
  directory so every filesystem effect stays testable.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "dockstrap"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/dockstrap/ (or XDG_CONFIG_HOME/dockstrap/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the default installer settings file path.

    Returns:
        Path to ~/.config/dockstrap/config.toml.
    """
    return get_config_dir() / "config.toml"


@dataclass(frozen=True, slots=True)
class InstallPaths:
    """System paths the installer reads, writes and removes.

    Attributes:
        root: Filesystem root all paths are resolved against.
    """

    root: Path = Path("/")

    def _at(self, absolute: str) -> Path:
        return self.root / absolute.lstrip("/")

    @property
    def os_release(self) -> Path:
        return self._at("/etc/os-release")

    @property
    def docker_config_dir(self) -> Path:
        return self._at("/etc/docker")

    @property
    def daemon_config(self) -> Path:
        return self.docker_config_dir / "daemon.json"

    @property
    def docker_data_dir(self) -> Path:
        return self._at("/var/lib/docker")

    @property
    def containerd_state_dir(self) -> Path:
        return self._at("/var/lib/containerd")

    @property
    def docker_socket(self) -> Path:
        return self._at("/var/run/docker.sock")

    @property
    def backup_dir(self) -> Path:
        """Directory holding daemon config backups.

        Kept outside the docker config directory, which the uninstall
        workflow removes right after taking the backup.
        """
        return self._at("/var/backups/dockstrap")

    @property
    def apt_keyring_dir(self) -> Path:
        return self._at("/etc/apt/keyrings")

    @property
    def apt_keyring(self) -> Path:
        return self.apt_keyring_dir / "docker.gpg"

    @property
    def apt_source_list(self) -> Path:
        return self._at("/etc/apt/sources.list.d/docker.list")

    def removable_on_purge(self) -> list[Path]:
        """Paths deleted when the operator does not preserve data.

        Returns:
            Data directory, runtime-state directory, config directory and
            control socket, in removal order.
        """
        return [
            self.docker_data_dir,
            self.containerd_state_dir,
            self.docker_config_dir,
            self.docker_socket,
        ]
