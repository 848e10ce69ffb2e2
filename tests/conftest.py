"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, including
in-memory stand-ins for the package manager, init system and docker CLI
so pipeline scenarios run without touching the host.
"""

from pathlib import Path

import pytest
from dockstrap.core.paths import InstallPaths
from dockstrap.core.pipeline import SystemOperations
from dockstrap.core.preflight import GIB
from dockstrap.core.prompter import Prompter
from dockstrap.core.settings import InstallerSettings
from dockstrap.models.installation import ExistingInstallation, ReconcileAction
from dockstrap.models.platform import PackageManager, SystemProfile
from dockstrap.operators.base import PackageOperator
from dockstrap.runtime.docker import DockerClient
from dockstrap.services.systemd import ServiceManager
from dockstrap.utils.shell import CommandResult

UBUNTU_NOBLE_OS_RELEASE = """PRETTY_NAME="Ubuntu 24.04.1 LTS"
NAME="Ubuntu"
VERSION_ID="24.04"
VERSION="24.04.1 LTS (Noble Numbat)"
VERSION_CODENAME=noble
ID=ubuntu
ID_LIKE=debian
UBUNTU_CODENAME=noble
"""

ROCKY_9_OS_RELEASE = """NAME="Rocky Linux"
VERSION="9.4 (Blue Onyx)"
ID="rocky"
ID_LIKE="rhel centos fedora"
VERSION_ID="9.4"
PLATFORM_ID="platform:el9"
PRETTY_NAME="Rocky Linux 9.4 (Blue Onyx)"
"""

NOBLE_LISTING = [
    "5:27.5.1-1~ubuntu.24.04~noble",
    "5:27.5.0-1~ubuntu.24.04~noble",
    "5:26.1.0-1~ubuntu.24.04~noble",
    "5:24.0.10-1~ubuntu.24.04~noble",
    "5:24.0.1-1~ubuntu.24.04~noble",
]


def _ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


class FakeOperator(PackageOperator):
    """PackageOperator backed by an in-memory package set."""

    def __init__(
        self,
        manager: PackageManager = PackageManager.APT,
        versions: list[str] | None = None,
        installed: set[str] | None = None,
        target: tuple[str, int] | None = None,
        available: bool = True,
    ) -> None:
        self._manager = manager
        self.available = available
        self.versions = list(versions or [])
        self.installed = installed if installed is not None else set()
        self.target = target
        self.calls: list[tuple[str, ...]] = []

    @property
    def manager(self) -> PackageManager:
        return self._manager

    @property
    def command(self) -> str:
        return "apt-get" if self._manager is PackageManager.APT else self._manager.value

    def is_available(self) -> bool:
        return self.available

    def refresh_index(self) -> None:
        self.calls.append(("refresh",))

    def install_dependencies(self) -> None:
        self.calls.append(("dependencies",))

    def list_versions(self, package: str) -> list[str]:
        self.calls.append(("list", package))
        return list(self.versions)

    def installed_packages(self) -> set[str]:
        return set(self.installed)

    def install(self, specs: list[str]) -> None:
        self.calls.append(("install", *specs))
        self.installed.update(spec.split("=", 1)[0] for spec in specs)

    def purge(self, packages: list[str]) -> None:
        self.calls.append(("purge", *packages))
        self.installed.difference_update(packages)

    def configure_repository(
        self,
        base_url: str,
        profile: SystemProfile,
        paths: InstallPaths,
    ) -> str:
        self.calls.append(("repository", base_url))
        return f"{base_url}/{profile.distribution_id}"

    def release_target(self) -> tuple[str, int] | None:
        return self.target

    def called(self, name: str) -> bool:
        """Check if an operation with this name was recorded."""
        return any(call[0] == name for call in self.calls)


class FakeServiceManager(ServiceManager):
    """ServiceManager tracking unit state in memory."""

    def __init__(
        self,
        active: set[str] | None = None,
        start_fails: bool = False,
        stays_inactive: bool = False,
    ) -> None:
        self.active = set(active or ())
        self.enabled: set[str] = set()
        self.start_fails = start_fails
        self.stays_inactive = stays_inactive
        self.calls: list[tuple[str, ...]] = []

    def reload(self) -> CommandResult:
        self.calls.append(("reload",))
        return _ok()

    def start(self, unit: str) -> CommandResult:
        self.calls.append(("start", unit))
        if self.start_fails:
            return CommandResult(stdout="", stderr="Job for docker.service failed", returncode=1)
        if not self.stays_inactive:
            self.active.add(unit)
        return _ok()

    def stop(self, unit: str) -> CommandResult:
        self.calls.append(("stop", unit))
        self.active.discard(unit)
        return _ok()

    def enable(self, unit: str) -> CommandResult:
        self.calls.append(("enable", unit))
        self.enabled.add(unit)
        return _ok()

    def is_active(self, unit: str) -> bool:
        return unit in self.active

    def enabled_state(self, unit: str) -> str | None:
        return "enabled" if unit in self.enabled else "disabled"


class FakeDockerClient(DockerClient):
    """DockerClient whose presence follows a shared package set."""

    def __init__(
        self,
        packages: set[str],
        version: str = "27.5.0",
        compose: str | None = "2.32.4",
        smoke_output: str = "\nHello from Docker!\nThis message shows that your installation appears to be working correctly.\n",
    ) -> None:
        self.packages = packages
        self._version = version
        self._compose = compose
        self.smoke_output = smoke_output
        self.ran: list[str] = []

    def binary_path(self) -> str | None:
        if "docker-ce" in self.packages or "docker.io" in self.packages:
            return "/usr/bin/docker"
        return None

    def version(self) -> str | None:
        return self._version if self.binary_path() else None

    def info(self) -> CommandResult:
        return _ok("Server Version: 27.5.0\nStorage Driver: overlay2\n")

    def run_container(self, image: str) -> CommandResult:
        self.ran.append(image)
        return _ok(self.smoke_output)

    def compose_version(self) -> str | None:
        return self._compose


class ScriptedPrompter(Prompter):
    """Prompter returning preset answers and recording what was asked."""

    def __init__(
        self,
        action: ReconcileAction = ReconcileAction.REINSTALL,
        preserve: bool = False,
        version: str | None = None,
        compose: bool = True,
    ) -> None:
        self.action = action
        self.preserve = preserve
        self.version = version
        self.compose = compose
        self.asked: list[str] = []

    def choose_existing_action(self, existing: ExistingInstallation) -> ReconcileAction:
        self.asked.append("existing")
        return self.action

    def confirm_preserve_data(self) -> bool:
        self.asked.append("preserve")
        return self.preserve

    def choose_version(self, default: str) -> str:
        self.asked.append("version")
        return self.version or default

    def confirm_compose(self) -> bool:
        self.asked.append("compose")
        return self.compose


@pytest.fixture
def mock_madison_output() -> str:
    """Sample apt-cache madison output for docker-ce."""
    return """ docker-ce | 5:27.5.1-1~ubuntu.24.04~noble | https://download.docker.com/linux/ubuntu noble/stable amd64 Packages
 docker-ce | 5:27.5.0-1~ubuntu.24.04~noble | https://download.docker.com/linux/ubuntu noble/stable amd64 Packages
 docker-ce | 5:26.1.0-1~ubuntu.24.04~noble | https://download.docker.com/linux/ubuntu noble/stable amd64 Packages"""


@pytest.fixture
def mock_yum_list_output() -> str:
    """Sample yum list --showduplicates output for docker-ce."""
    return """Last metadata expiration check: 0:00:12 ago on Mon 20 Jan 2025 10:00:00 AM UTC.
Available Packages
docker-ce.x86_64                3:26.1.0-1.el9                 docker-ce-stable
docker-ce.x86_64                3:27.5.0-1.el9                 docker-ce-stable
docker-ce.x86_64                3:27.5.1-1.el9                 docker-ce-stable"""


@pytest.fixture
def install_paths(tmp_path: Path) -> InstallPaths:
    """InstallPaths rooted in a scratch directory with an Ubuntu os-release."""
    paths = InstallPaths(root=tmp_path)
    paths.os_release.parent.mkdir(parents=True, exist_ok=True)
    paths.os_release.write_text(UBUNTU_NOBLE_OS_RELEASE, encoding="utf-8")
    return paths


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Default settings with the run log kept in the scratch directory."""
    return InstallerSettings(log_dir=tmp_path / "log")


@pytest.fixture
def host_packages() -> set[str]:
    """Package set shared by the fake operator and docker client."""
    return set()


@pytest.fixture
def fake_operator(host_packages: set[str]) -> FakeOperator:
    """Fake APT operator offering the noble listing."""
    return FakeOperator(versions=NOBLE_LISTING, installed=host_packages)


@pytest.fixture
def fake_services() -> FakeServiceManager:
    """Fake init system with no active units."""
    return FakeServiceManager()


@pytest.fixture
def fake_docker(host_packages: set[str]) -> FakeDockerClient:
    """Fake docker CLI present once docker-ce is installed."""
    return FakeDockerClient(host_packages)


@pytest.fixture
def system_ops(
    fake_operator: FakeOperator,
    fake_services: FakeServiceManager,
    fake_docker: FakeDockerClient,
) -> SystemOperations:
    """SystemOperations wired to fakes for a healthy root session."""
    return SystemOperations(
        services=fake_services,
        docker=fake_docker,
        operator_factory=lambda manager: fake_operator,
        ping=lambda host: True,
        disk_usage=lambda path: 50 * GIB,
        geteuid=lambda: 0,
        machine="x86_64",
        sleep=lambda seconds: None,
        add_to_group=lambda user, group: _ok(),
        environ={"SUDO_USER": "alice", "USER": "root"},
    )


@pytest.fixture
def make_operator() -> type[FakeOperator]:
    """Factory for fake package operators."""
    return FakeOperator


@pytest.fixture
def make_services() -> type[FakeServiceManager]:
    """Factory for fake service managers."""
    return FakeServiceManager


@pytest.fixture
def make_docker() -> type[FakeDockerClient]:
    """Factory for fake docker clients."""
    return FakeDockerClient


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    """Factory for scripted prompters."""
    return ScriptedPrompter


@pytest.fixture
def write_os_release(install_paths: InstallPaths):
    """Replace the os-release file of the scratch root."""

    def _write(content: str) -> InstallPaths:
        install_paths.os_release.write_text(content, encoding="utf-8")
        return install_paths

    return _write


@pytest.fixture
def rocky_os_release() -> str:
    """os-release content of Rocky Linux 9."""
    return ROCKY_9_OS_RELEASE
