"""Service controller for the Docker daemon."""

import logging
import time
from collections.abc import Callable

from dockstrap.core.errors import ServiceStartFailed
from dockstrap.services.systemd import ServiceManager
from dockstrap.utils.formatting import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

DOCKER_SERVICE = "docker"

_START_HINTS = [
    "Show the service log: journalctl -xeu docker.service",
    "Check the configuration file: /etc/docker/daemon.json",
    "Try starting it manually: systemctl start docker",
]


def start_service(
    services: ServiceManager,
    *,
    auto_start: bool,
    wait: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Start the daemon, confirm it stays up and optionally enable it.

    Args:
        services: Init-system service manager.
        auto_start: Enable the service at boot.
        wait: Seconds to wait before re-checking the service state.
        sleep: Sleep function.

    Raises:
        ServiceStartFailed: If the start command fails or the service is
            not active after ``wait`` seconds.
    """
    services.reload()

    print_info("Starting the Docker service...")
    result = services.start(DOCKER_SERVICE)
    if not result.success:
        raise ServiceStartFailed(
            f"Starting the Docker service failed: {result.error_output or 'unknown error'}",
            hints=_START_HINTS,
        )

    sleep(wait)
    if not services.is_active(DOCKER_SERVICE):
        raise ServiceStartFailed(
            "The Docker service is not active after starting it",
            hints=["Check the status: systemctl status docker", *_START_HINTS[:2]],
        )
    print_success("Docker service started")

    if auto_start:
        enabled = services.enable(DOCKER_SERVICE)
        if enabled.success:
            print_success("Docker service enabled at boot")
        else:
            print_warning(f"Enabling the Docker service failed: {enabled.error_output}")


def stop_if_running(services: ServiceManager) -> bool:
    """Stop the daemon if it is active; used as cleanup after a failure.

    Returns:
        True if a stop was attempted.
    """
    if not services.is_active(DOCKER_SERVICE):
        return False
    print_warning("Stopping the Docker service...")
    services.stop(DOCKER_SERVICE)
    return True
