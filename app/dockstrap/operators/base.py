"""Abstract base class for package operators.

This module defines the PackageOperator interface that every
package-manager family must implement. The pipeline only talks to this
interface, so tests can substitute an in-memory fake.
"""

import logging
from abc import ABC, abstractmethod

from dockstrap.core.errors import PackageOperationFailed
from dockstrap.core.paths import InstallPaths
from dockstrap.models.platform import PackageManager, SystemProfile
from dockstrap.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class PackageOperator(ABC):
    """Abstract base class for all package operators.

    Operators query and mutate the host package database for one
    package-manager family. Every mutating operation raises
    PackageOperationFailed on failure; nothing is retried.

    Example:
        >>> operator = get_operator(PackageManager.APT)
        >>> operator.refresh_index()
        >>> operator.install(["docker-ce", "docker-ce-cli"])
    """

    # Package names that indicate a prior Docker installation.
    KNOWN_PACKAGES: tuple[str, ...] = (
        "docker",
        "docker-engine",
        "docker-ce",
        "docker-ce-cli",
        "containerd.io",
        "docker-compose-plugin",
    )

    # Prerequisites installed before the Docker repository is added.
    DEPENDENCIES: tuple[str, ...] = ()

    @property
    @abstractmethod
    def manager(self) -> PackageManager:
        """Return the package-manager family this operator drives."""

    @property
    @abstractmethod
    def command(self) -> str:
        """Return the package-manager executable name."""

    @abstractmethod
    def refresh_index(self) -> None:
        """Refresh the package index.

        Raises:
            PackageOperationFailed: If the refresh fails.
        """

    @abstractmethod
    def list_versions(self, package: str) -> list[str]:
        """List available version strings for a package, newest first.

        Args:
            package: Package name to query.

        Returns:
            Raw version strings; empty if the package is unknown.
        """

    @abstractmethod
    def installed_packages(self) -> set[str]:
        """Return the names of all installed packages."""

    @abstractmethod
    def install(self, specs: list[str]) -> None:
        """Install packages.

        Args:
            specs: Package names, optionally with a pinned version.

        Raises:
            PackageOperationFailed: If the installation fails.
        """

    @abstractmethod
    def purge(self, packages: list[str]) -> None:
        """Remove packages together with their configuration.

        Raises:
            PackageOperationFailed: If the removal fails.
        """

    @abstractmethod
    def configure_repository(
        self,
        base_url: str,
        profile: SystemProfile,
        paths: InstallPaths,
    ) -> str:
        """Register the Docker package repository served under ``base_url``.

        Args:
            base_url: Repository endpoint (official or mirror).
            profile: Host profile, for distribution-specific paths.
            paths: System paths for key and source files.

        Returns:
            Description of what was registered, for display.

        Raises:
            PackageOperationFailed: If the repository cannot be registered.
        """

    def release_target(self) -> tuple[str, int] | None:
        """Return the (dist tag, major version) package releases must carry.

        Only RPM families tag releases with the distribution; the default
        is no constraint.
        """
        return None

    def is_available(self) -> bool:
        """Check if the package manager is available on the system."""
        return command_exists(self.command)

    def install_dependencies(self) -> None:
        """Install the prerequisites needed to add the Docker repository.

        Raises:
            PackageOperationFailed: If the installation fails.
        """
        if not self.DEPENDENCIES:
            return
        deps = list(self.DEPENDENCIES)
        logger.info("Installing dependencies: %s", " ".join(deps))
        self._run_or_raise(
            [self.command, "install", "-y", *deps],
            "Dependency installation failed",
            hints=[
                f"Run manually: {self.command} install -y {' '.join(deps)}",
                "Check the configured package sources.",
            ],
        )

    def find_installed(self, candidates: tuple[str, ...] | None = None) -> list[str]:
        """Return which candidate packages are installed, in candidate order.

        Args:
            candidates: Names to look for; defaults to KNOWN_PACKAGES.
        """
        installed = self.installed_packages()
        return [name for name in (candidates or self.KNOWN_PACKAGES) if name in installed]

    def uninstall_command(self) -> str:
        """Return the command an operator would run to remove Docker by hand."""
        return f"sudo {self.command} remove docker-ce docker-ce-cli containerd.io"

    def _run_or_raise(
        self,
        args: list[str],
        failure_message: str,
        hints: list[str] | None = None,
    ) -> CommandResult:
        """Run a command, raising PackageOperationFailed on a non-zero exit.

        The package manager's own error output is included in the error.
        """
        logger.info("Executing: %s", " ".join(args))
        result = run_command(args)
        if not result.success:
            output = result.error_output
            message = f"{failure_message} ({' '.join(args[:2])} exited with {result.returncode})"
            if output:
                message = f"{message}:\n{output}"
            raise PackageOperationFailed(message, output=output, hints=hints)
        return result
