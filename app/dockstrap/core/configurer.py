"""Post-install configuration: daemon.json and docker group membership."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dockstrap.core.errors import InstallerError
from dockstrap.core.paths import InstallPaths
from dockstrap.core.settings import InstallerSettings
from dockstrap.models.daemon import DaemonConfig
from dockstrap.utils.formatting import print_info, print_success, print_warning
from dockstrap.utils.fs import write_text_atomic
from dockstrap.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

DOCKER_GROUP = "docker"


def build_daemon_config(settings: InstallerSettings) -> DaemonConfig:
    """Build the daemon configuration with the configured registry mirrors."""
    return DaemonConfig(registry_mirrors=list(settings.registry_mirrors))


def write_daemon_config(config: DaemonConfig, paths: InstallPaths) -> Path:
    """Write daemon.json, replacing any existing file.

    Callers wanting to keep local customizations must back the file up
    first.

    Raises:
        InstallerError: If the file cannot be written.
    """
    try:
        path = write_text_atomic(paths.daemon_config, config.to_json())
    except OSError as e:
        raise InstallerError(
            f"Cannot write {paths.daemon_config}: {e}",
            hints=[f"Check permissions on {paths.docker_config_dir}."],
        ) from e

    print_info(f"Wrote Docker daemon configuration: {path}")
    print_info(f"  registry mirrors: {len(config.registry_mirrors)} configured")
    print_info(
        f"  log rotation: {config.log_opts.max_size} per file, "
        f"{config.log_opts.max_file} files kept"
    )
    print_info(f"  storage driver: {config.storage_driver}")
    print_info("  live restore: enabled (containers survive daemon restarts)")
    return path


def invoking_user(environ: Mapping[str, str] | None = None) -> str | None:
    """Return the user who invoked the installer, looking through sudo."""
    env = os.environ if environ is None else environ
    return env.get("SUDO_USER") or env.get("USER") or None


def add_user_to_group(user: str, group: str) -> CommandResult:
    """Append ``group`` to the supplementary groups of ``user``."""
    return run_command(["usermod", "-aG", group, user])


def grant_group_membership(
    user: str | None,
    add_to_group=add_user_to_group,
) -> bool:
    """Let a non-root user talk to the daemon via the docker group.

    Failure is reported as a warning only.

    Args:
        user: Invoking user name.
        add_to_group: Callable performing the group change.

    Returns:
        True if the user was added.
    """
    if not user or user == "root":
        print_info("Running as root, skipping docker group setup")
        return False

    print_info(f"Adding user {user} to the {DOCKER_GROUP} group")
    result = add_to_group(user, DOCKER_GROUP)
    if not result.success:
        print_warning(f"Adding {user} to the {DOCKER_GROUP} group failed")
        print_warning(f"Run manually: sudo usermod -aG {DOCKER_GROUP} {user}")
        return False

    print_success("User permissions configured")
    print_warning(f"Log in again or run 'newgrp {DOCKER_GROUP}' for this to take effect")
    return True
