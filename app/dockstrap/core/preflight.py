"""Pre-flight checks.

Three independent checks guard every mutating action: privilege, network
reachability and free disk space. Each runs once, in that order, and
raises on failure.
"""

import logging
import os
import shutil
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from dockstrap.core.errors import (
    CommandLaunchFailed,
    InsufficientDiskSpace,
    InsufficientPrivilege,
    NetworkUnreachable,
)
from dockstrap.utils.shell import run_command

logger = logging.getLogger(__name__)

GIB = 1024**3
MIN_FREE_BYTES = 5 * GIB

# Per-host deadline for the reachability probe, in seconds.
PING_DEADLINE = 3


def check_privilege(euid: int) -> None:
    """Require the effective user to be root.

    Raises:
        InsufficientPrivilege: If ``euid`` is not 0.
    """
    if euid != 0:
        raise InsufficientPrivilege(
            "This installer must run with root privileges",
            hints=["Re-run it with sudo: sudo dockstrap"],
        )
    logger.info("Privilege check passed")


def ping_host(host: str) -> bool:
    """Send a single ICMP echo to ``host``.

    Returns:
        True if the host answered within the deadline.
    """
    try:
        result = run_command(
            ["ping", "-c", "1", "-W", str(PING_DEADLINE), host],
            timeout=PING_DEADLINE + 2,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Ping to %s timed out", host)
        return False
    except CommandLaunchFailed as e:
        logger.warning("Cannot probe %s: %s", host, e)
        return False
    return result.success


def check_network(hosts: Sequence[str], probe: Callable[[str], bool] = ping_host) -> str:
    """Probe hosts in order until one answers.

    Args:
        hosts: Hosts to probe, in order.
        probe: Reachability test for a single host.

    Returns:
        The first host that answered.

    Raises:
        NetworkUnreachable: If no host answered.
    """
    for host in hosts:
        if probe(host):
            logger.info("Network reachable (%s answered)", host)
            return host
        logger.debug("No answer from %s", host)

    raise NetworkUnreachable(
        "Network connection failed, no external host is reachable",
        hints=[
            "Check that the network connection is up.",
            "Check the firewall settings.",
            "Behind a proxy, export http_proxy/https_proxy "
            "(e.g. export https_proxy=http://proxy.example.com:8080).",
        ],
    )


def free_bytes(path: Path) -> int:
    """Return the free space available on the filesystem holding ``path``."""
    return shutil.disk_usage(path).free


def format_gib(size: int) -> str:
    """Format a byte count as GiB with two decimals."""
    return f"{size / GIB:.2f} GiB"


def check_disk_space(
    path: Path = Path("/"),
    usage: Callable[[Path], int] = free_bytes,
    minimum: int = MIN_FREE_BYTES,
) -> int:
    """Require at least ``minimum`` free bytes on the filesystem of ``path``.

    Returns:
        The free byte count.

    Raises:
        InsufficientDiskSpace: If free space is below ``minimum``.
    """
    available = usage(path)
    if available < minimum:
        raise InsufficientDiskSpace(
            f"Not enough disk space: {format_gib(available)} free, "
            f"at least {format_gib(minimum)} required",
            hints=["Free up disk space and run the installer again."],
        )
    logger.info("Disk space sufficient (%s free)", format_gib(available))
    return available


def current_euid() -> int:
    """Return the effective user id of this process."""
    return os.geteuid()
