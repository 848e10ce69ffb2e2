"""APT package operator implementation.

Drives apt-get, apt-cache and dpkg on Debian and Ubuntu hosts.
"""

import logging
from pathlib import Path
from tempfile import TemporaryDirectory

from dockstrap.core.errors import PackageOperationFailed
from dockstrap.core.paths import InstallPaths
from dockstrap.models.platform import PackageManager, SystemProfile
from dockstrap.operators.base import PackageOperator
from dockstrap.utils.fs import write_text_atomic
from dockstrap.utils.shell import run_command

logger = logging.getLogger(__name__)


class AptOperator(PackageOperator):
    """Operator for APT/dpkg packages."""

    KNOWN_PACKAGES = (
        "docker",
        "docker-engine",
        "docker.io",
        "docker-ce",
        "docker-ce-cli",
        "containerd.io",
        "docker-compose-plugin",
    )

    DEPENDENCIES = (
        "ca-certificates",
        "curl",
        "gnupg",
        "lsb-release",
        "apt-transport-https",
        "software-properties-common",
    )

    # dpkg-query format string: Package, status abbreviation ("ii " = installed)
    _DPKG_FORMAT = "${Package}\\t${db:Status-Abbrev}\\n"

    @property
    def manager(self) -> PackageManager:
        """Return APT as the package manager."""
        return PackageManager.APT

    @property
    def command(self) -> str:
        return "apt-get"

    def refresh_index(self) -> None:
        """Run apt-get update."""
        self._run_or_raise(
            ["apt-get", "update"],
            "apt-get update failed",
            hints=[
                "Check that /etc/apt/sources.list is configured correctly.",
                "Check the network connection.",
                "Try: apt-get update --fix-missing",
            ],
        )

    def list_versions(self, package: str) -> list[str]:
        """List versions via apt-cache madison (already newest first).

        Madison lines look like::

            docker-ce | 5:27.5.0-1~ubuntu.24.04~noble | https://... noble/stable amd64 Packages
        """
        result = run_command(["apt-cache", "madison", package])
        if not result.success:
            logger.warning("apt-cache madison %s failed: %s", package, result.error_output)
            return []

        versions: list[str] = []
        for line in result.stdout.splitlines():
            parts = [part.strip() for part in line.split("|")]
            if len(parts) < 2 or parts[0] != package or not parts[1]:
                logger.debug("Skipping madison line: %r", line[:100])
                continue
            if parts[1] not in versions:
                versions.append(parts[1])
        return versions

    def installed_packages(self) -> set[str]:
        """Query dpkg for packages in the installed state.

        Raises:
            PackageOperationFailed: If dpkg-query fails.
        """
        result = run_command(["dpkg-query", "-W", "-f", self._DPKG_FORMAT])
        if not result.success:
            msg = f"dpkg-query failed: {result.error_output or 'unknown error'}"
            raise PackageOperationFailed(msg, output=result.error_output)

        installed: set[str] = set()
        for line in result.stdout.splitlines():
            name, _, status = line.partition("\t")
            if name and status.startswith("ii"):
                installed.add(name.split(":", 1)[0])
        return installed

    def install(self, specs: list[str]) -> None:
        """Install packages using apt-get install."""
        if not specs:
            return
        self._run_or_raise(
            ["apt-get", "install", "-y", *specs],
            "Docker installation failed",
            hints=[
                "List available versions: apt-cache madison docker-ce",
                "Check that the requested version number is correct.",
            ],
        )

    def purge(self, packages: list[str]) -> None:
        """Purge packages, then autoremove their orphaned dependencies."""
        if not packages:
            return
        self._run_or_raise(
            ["apt-get", "purge", "-y", *packages],
            "Uninstall failed",
        )
        result = run_command(["apt-get", "autoremove", "-y"])
        if not result.success:
            logger.warning("apt-get autoremove failed: %s", result.error_output)

    def configure_repository(
        self,
        base_url: str,
        profile: SystemProfile,
        paths: InstallPaths,
    ) -> str:
        """Install the signing key and source list, then refresh the index.

        The key is fetched in ASCII-armored form and dearmored into the
        keyring directory; the source entry is restricted to the dpkg
        architecture and the distribution codename.
        """
        if not profile.codename:
            raise PackageOperationFailed(
                f"Cannot determine the codename of {profile.distribution_id} "
                f"{profile.distribution_version}",
                hints=["Check VERSION_CODENAME in /etc/os-release."],
            )

        repo_url = f"{base_url}/{profile.distribution_id}"
        self.install_signing_key(f"{repo_url}/gpg", paths.apt_keyring)

        arch = self.print_architecture()
        line = (
            f"deb [arch={arch} signed-by={paths.apt_keyring}] "
            f"{repo_url} {profile.codename} stable\n"
        )
        try:
            write_text_atomic(paths.apt_source_list, line)
        except OSError as e:
            raise PackageOperationFailed(
                f"Cannot write {paths.apt_source_list}: {e}",
            ) from e
        logger.info("Wrote repository source %s", paths.apt_source_list)

        self.refresh_index()
        return str(paths.apt_source_list)

    def install_signing_key(self, key_url: str, keyring: Path) -> None:
        """Download a signing key and store it dearmored in ``keyring``.

        Raises:
            PackageOperationFailed: If download or conversion fails.
        """
        keyring.parent.mkdir(parents=True, exist_ok=True)
        hints = [
            "Check the network connection.",
            "Try again through a proxy.",
            f"Download the key manually: curl -fsSL {key_url}",
        ]
        with TemporaryDirectory() as tmp:
            armored = Path(tmp) / "docker.asc"
            self._run_or_raise(
                ["curl", "-fsSL", key_url, "-o", str(armored)],
                "Downloading the GPG key failed",
                hints=hints,
            )
            self._run_or_raise(
                ["gpg", "--batch", "--yes", "--dearmor", "-o", str(keyring), str(armored)],
                "Converting the GPG key failed",
                hints=hints,
            )
        keyring.chmod(0o644)
        logger.info("Installed signing key %s", keyring)

    def print_architecture(self) -> str:
        """Return the dpkg architecture name (e.g. 'amd64', 'arm64').

        Raises:
            PackageOperationFailed: If dpkg cannot report it.
        """
        result = self._run_or_raise(
            ["dpkg", "--print-architecture"],
            "Cannot determine dpkg architecture",
        )
        return result.stdout.strip()

    def uninstall_command(self) -> str:
        return "sudo apt-get purge docker-ce docker-ce-cli containerd.io"
