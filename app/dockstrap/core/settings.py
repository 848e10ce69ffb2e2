"""Installer settings.

Settings are optional: without a settings file the built-in defaults
apply. They are stored as TOML in ~/.config/dockstrap/config.toml or
passed explicitly with ``--config``.

Example::

    default_version = "26.1.0"
    registry_mirrors = ["https://mirror.example.com"]
    network_probe_hosts = ["1.1.1.1"]
"""

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dockstrap.core.errors import InstallerError, InvalidVersionFormat
from dockstrap.core.paths import get_settings_path
from dockstrap.models.request import DEFAULT_DOCKER_VERSION, validate_version

OFFICIAL_BASE_URL = "https://download.docker.com/linux"
MIRROR_BASE_URL = "https://mirrors.aliyun.com/docker-ce/linux"

DEFAULT_REGISTRY_MIRRORS: tuple[str, ...] = (
    "https://docker.rainbond.cc",
    "https://docker.1ms.run",
    "https://docker.m.daocloud.io",
    "https://dockerhub.icu",
    "https://docker.chenby.cn",
)

DEFAULT_PROBE_HOSTS: tuple[str, ...] = ("www.baidu.com", "www.google.com", "8.8.8.8")


class InstallerSettings(BaseModel):
    """Tunable installer settings.

    Attributes:
        default_version: Docker version offered when --version is not given.
        official_base_url: Docker's own repository base URL.
        mirror_base_url: Regional mirror repository base URL.
        registry_mirrors: Registry mirrors written to daemon.json.
        network_probe_hosts: Hosts pinged by the network pre-flight check.
        log_dir: Directory receiving the timestamped run log.
        smoke_test_image: Image run by the verifier.
        service_start_wait: Seconds to wait before re-checking the service.
    """

    model_config = ConfigDict(extra="forbid")

    default_version: Annotated[
        str,
        Field(description="Docker version installed by default"),
    ] = DEFAULT_DOCKER_VERSION
    official_base_url: str = OFFICIAL_BASE_URL
    mirror_base_url: str = MIRROR_BASE_URL
    registry_mirrors: Annotated[
        list[str],
        Field(description="Registry mirror URLs for daemon.json"),
    ] = list(DEFAULT_REGISTRY_MIRRORS)
    network_probe_hosts: Annotated[
        list[str],
        Field(min_length=1, description="Hosts probed for reachability, in order"),
    ] = list(DEFAULT_PROBE_HOSTS)
    log_dir: Path = Path("/var/log/docker-install")
    smoke_test_image: str = "hello-world"
    service_start_wait: Annotated[
        float,
        Field(ge=0, le=60, description="Seconds between service start and status check"),
    ] = 2.0

    @field_validator("default_version")
    @classmethod
    def check_default_version(cls, v: str) -> str:
        """Reject default versions that --version would reject."""
        try:
            return validate_version(v)
        except InvalidVersionFormat as e:
            raise ValueError(str(e)) from None

    @field_validator("official_base_url", "mirror_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended with '/'."""
        return v.rstrip("/")

    def repository_base_url(self, use_mirror: bool) -> str:
        """Select the repository endpoint for this run."""
        return self.mirror_base_url if use_mirror else self.official_base_url


class SettingsError(InstallerError):
    """Raised when the settings file cannot be loaded."""


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load installer settings from a TOML file.

    Args:
        path: Explicit settings file. If None, the default location is used
            and a missing file yields the built-in defaults.

    Returns:
        Validated InstallerSettings.

    Raises:
        SettingsError: If an explicit file is missing, the TOML syntax is
            invalid, or the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        if path is not None:
            raise SettingsError(
                f"Settings file not found: {settings_path}",
                hints=["Check the path passed to --config."],
            )
        return InstallerSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content in {settings_path}: {e}") from e
