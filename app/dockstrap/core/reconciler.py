"""Existing-installation reconciler.

Detects a prior Docker installation and, when the operator asks for a
reinstall, removes it. Detection combines two independent signals: the
docker binary on PATH and known package names in the package database.
"""

import logging
from datetime import datetime
from pathlib import Path

from dockstrap.core.paths import InstallPaths
from dockstrap.models.installation import ExistingInstallation
from dockstrap.operators.base import PackageOperator
from dockstrap.runtime.docker import DockerClient
from dockstrap.services.systemd import ServiceManager
from dockstrap.utils.fs import backup_file, remove_path
from dockstrap.utils.formatting import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

# The socket unit goes first so it cannot re-activate the service.
UNITS_STOP_ORDER: tuple[str, ...] = ("docker.socket", "docker", "containerd")


def detect_existing(operator: PackageOperator, docker: DockerClient) -> ExistingInstallation:
    """Probe the host for a prior Docker installation.

    Args:
        operator: Package operator for the host.
        docker: Docker CLI client.

    Returns:
        ExistingInstallation; ``found`` is False on a clean host.
    """
    binary = docker.binary_path()
    version = docker.version() if binary else None
    if binary:
        logger.info("Found docker binary at %s (version %s)", binary, version or "unknown")

    packages = tuple(operator.find_installed())
    if packages:
        logger.info("Found installed Docker packages: %s", ", ".join(packages))

    return ExistingInstallation(
        binary_path=binary,
        runtime_version=version,
        matched_packages=packages,
    )


def stop_runtime_units(services: ServiceManager) -> None:
    """Stop active Docker units; a failed stop is only a warning."""
    for unit in UNITS_STOP_ORDER:
        if not services.is_active(unit):
            continue
        result = services.stop(unit)
        if not result.success:
            print_warning(f"Failed to stop {unit}: {result.error_output or 'unknown error'}")


def remove_runtime_data(paths: InstallPaths, now: datetime | None = None) -> Path | None:
    """Back up daemon.json, then delete Docker's data, state and config.

    Args:
        paths: System paths.
        now: Timestamp for the backup name.

    Returns:
        Path of the daemon config backup, if one was made.
    """
    backup: Path | None = None
    try:
        backup = backup_file(paths.daemon_config, paths.backup_dir, now=now)
    except OSError as e:
        print_warning(f"Could not back up {paths.daemon_config}: {e}")
    if backup is not None:
        print_info(f"Backed up daemon configuration to {backup}")

    for path in paths.removable_on_purge():
        error = remove_path(path)
        if error is not None:
            print_warning(f"Failed to remove {path}: {error}")

    return backup


def uninstall_existing(
    existing: ExistingInstallation,
    operator: PackageOperator,
    services: ServiceManager,
    paths: InstallPaths,
    *,
    preserve_data: bool,
    now: datetime | None = None,
) -> Path | None:
    """Remove an existing installation.

    Stops the runtime units, purges the matched packages and, unless data
    is preserved, backs up the daemon config and deletes data, state and
    config directories plus the control socket.

    Args:
        existing: Detection result naming the packages to purge.
        operator: Package operator for the host.
        services: Init-system service manager.
        paths: System paths.
        preserve_data: Keep images, containers, volumes and configuration.
        now: Timestamp for the backup name.

    Returns:
        Path of the daemon config backup, if one was made.

    Raises:
        PackageOperationFailed: If purging the packages fails.
    """
    print_info("Stopping Docker services...")
    stop_runtime_units(services)

    if existing.matched_packages:
        print_info(f"Removing packages: {' '.join(existing.matched_packages)}")
        operator.purge(list(existing.matched_packages))

    backup: Path | None = None
    if preserve_data:
        print_info("Keeping Docker data, existing images and containers stay usable")
    else:
        print_warning("Removing Docker data directories...")
        backup = remove_runtime_data(paths, now=now)
        print_success("Docker data removed")

    print_success("Uninstall complete")
    return backup
