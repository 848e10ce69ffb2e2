"""Post-install verification.

Five fatal checks in order (command on PATH, version, service active,
``docker info``, smoke-test container) and one best-effort check of the
compose plugin.
"""

import logging
from dataclasses import dataclass

from dockstrap.core.errors import VerificationFailed
from dockstrap.core.service import DOCKER_SERVICE
from dockstrap.runtime.docker import DockerClient
from dockstrap.services.systemd import ServiceManager
from dockstrap.utils.formatting import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

SMOKE_TEST_GREETING = "Hello from Docker"


@dataclass(frozen=True, slots=True)
class VerificationReport:
    """Facts gathered while verifying the installation.

    Attributes:
        runtime_version: Installed docker version.
        compose_version: Compose plugin version, if checked and available.
    """

    runtime_version: str
    compose_version: str | None = None


def verify_installation(
    docker: DockerClient,
    services: ServiceManager,
    *,
    image: str = "hello-world",
    check_compose: bool = True,
) -> VerificationReport:
    """Verify that the freshly installed runtime works end to end.

    Args:
        docker: Docker CLI client.
        services: Init-system service manager.
        image: Image for the smoke-test container.
        check_compose: Also query the compose plugin version.

    Returns:
        VerificationReport.

    Raises:
        VerificationFailed: On the first failing fatal check.
    """
    print_info("Checking the docker command...")
    if docker.binary_path() is None:
        raise VerificationFailed(
            "The docker command was not found",
            hints=["Check the PATH environment variable.", "Open a new login shell."],
        )
    print_success("docker command available")

    version = docker.version()
    if version is None:
        raise VerificationFailed("Cannot determine the installed docker version")
    print_success(f"docker version {version}")

    if not services.is_active(DOCKER_SERVICE):
        raise VerificationFailed(
            "The Docker service is not running",
            hints=["Check the status: systemctl status docker"],
        )
    print_success("Docker service running")

    info = docker.info()
    if not info.success:
        raise VerificationFailed(
            f"docker info failed: {info.error_output or 'unknown error'}",
            hints=["Run 'docker info' manually to inspect the daemon state."],
        )
    print_success("Docker system info available")

    print_info(f"Running test container ({image})...")
    run = docker.run_container(image)
    if not run.success or SMOKE_TEST_GREETING not in run.stdout:
        raise VerificationFailed(
            "The test container did not run successfully",
            hints=[
                "Check the network connection.",
                "Check the registry mirror configuration.",
                f"Run manually: docker run {image}",
            ],
        )
    print_success("Test container ran successfully")

    compose_version: str | None = None
    if check_compose:
        compose_version = docker.compose_version()
        if compose_version is None:
            print_warning("Docker Compose is not available (non-fatal)")
        else:
            print_success(f"Docker Compose {compose_version} available")

    print_success("All verification checks passed")
    return VerificationReport(runtime_version=version, compose_version=compose_version)
