"""YUM and DNF package operator implementations.

Drives yum/dnf and rpm on CentOS, RHEL, Rocky, AlmaLinux and Fedora hosts.
"""

import logging

from dockstrap.core.errors import PackageOperationFailed
from dockstrap.core.paths import InstallPaths
from dockstrap.models.platform import PackageManager, SystemProfile
from dockstrap.operators.base import PackageOperator
from dockstrap.utils.shell import run_command

logger = logging.getLogger(__name__)


class YumOperator(PackageOperator):
    """Operator for yum-managed RPM hosts (RHEL and rebuilds)."""

    DEPENDENCIES = (
        "yum-utils",
        "device-mapper-persistent-data",
        "lvm2",
    )

    # Distribution tag in package releases and the rpm macro holding its major.
    DIST_TAG = "el"
    DIST_MACRO = "rhel"

    # Directory of the docker-ce.repo manifest under the repository base URL.
    REPO_DISTRO = "centos"

    @property
    def manager(self) -> PackageManager:
        return PackageManager.YUM

    @property
    def command(self) -> str:
        return "yum"

    def refresh_index(self) -> None:
        """Rebuild the metadata cache."""
        self._run_or_raise(
            [self.command, "makecache"],
            f"{self.command} makecache failed",
            hints=["Check the network connection and the configured repositories."],
        )

    def list_versions(self, package: str) -> list[str]:
        """List versions via ``list --showduplicates``, newest first.

        Listing lines look like::

            docker-ce.x86_64    3:27.5.0-1.el9    docker-ce-stable

        yum and dnf print ascending order, so the result is reversed.
        """
        result = run_command([self.command, "list", package, "--showduplicates"])
        if not result.success:
            logger.warning(
                "%s list %s failed: %s", self.command, package, result.error_output
            )
            return []

        versions: list[str] = []
        for line in result.stdout.splitlines():
            fields = line.split()
            if len(fields) < 2 or not fields[0].startswith(f"{package}."):
                continue
            if fields[1] not in versions:
                versions.append(fields[1])
        versions.reverse()
        return versions

    def installed_packages(self) -> set[str]:
        """Query the rpm database for installed package names.

        Raises:
            PackageOperationFailed: If rpm fails.
        """
        result = run_command(["rpm", "-qa", "--qf", "%{NAME}\\n"])
        if not result.success:
            msg = f"rpm -qa failed: {result.error_output or 'unknown error'}"
            raise PackageOperationFailed(msg, output=result.error_output)
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    def install(self, specs: list[str]) -> None:
        if not specs:
            return
        self._run_or_raise(
            [self.command, "install", "-y", *specs],
            "Docker installation failed",
            hints=[
                f"List available versions: {self.command} list docker-ce --showduplicates",
                "Check that the requested version number is correct.",
            ],
        )

    def purge(self, packages: list[str]) -> None:
        if not packages:
            return
        self._run_or_raise(
            [self.command, "remove", "-y", *packages],
            "Uninstall failed",
        )

    def add_repository(self, repo_url: str) -> None:
        """Register a .repo definition file by URL.

        Raises:
            PackageOperationFailed: If the repository cannot be added.
        """
        self._run_or_raise(
            ["yum-config-manager", "--add-repo", repo_url],
            "Adding the Docker repository failed",
            hints=[f"Check that {repo_url} is reachable."],
        )

    def repo_file_url(self, base_url: str) -> str:
        """Return the docker-ce.repo URL under a repository base URL."""
        return f"{base_url}/{self.REPO_DISTRO}/docker-ce.repo"

    def configure_repository(
        self,
        base_url: str,
        profile: SystemProfile,
        paths: InstallPaths,
    ) -> str:
        """Register the docker-ce.repo definition.

        The package manager imports the signing key on first use.
        """
        repo_url = self.repo_file_url(base_url)
        self.add_repository(repo_url)
        return repo_url

    def release_target(self) -> tuple[str, int] | None:
        major = self.dist_major()
        if major is None:
            return None
        return self.DIST_TAG, major

    def dist_major(self) -> int | None:
        """Expand the distribution major version macro via ``rpm -E``.

        Returns:
            The major version, or None if the macro is undefined.
        """
        macro = f"%{{{self.DIST_MACRO}}}"
        result = run_command(["rpm", "-E", macro])
        value = result.stdout.strip()
        if not result.success or not value.isdigit():
            logger.warning("rpm -E %s did not expand (got %r)", macro, value)
            return None
        return int(value)


class DnfOperator(YumOperator):
    """Operator for dnf-managed Fedora hosts."""

    DEPENDENCIES = ("dnf-plugins-core",)

    DIST_TAG = "fc"
    DIST_MACRO = "fedora"
    REPO_DISTRO = "fedora"

    @property
    def manager(self) -> PackageManager:
        return PackageManager.DNF

    @property
    def command(self) -> str:
        return "dnf"

    def add_repository(self, repo_url: str) -> None:
        self._run_or_raise(
            ["dnf", "config-manager", "--add-repo", repo_url],
            "Adding the Docker repository failed",
            hints=[f"Check that {repo_url} is reachable."],
        )
