"""Installation pipeline.

Runs the stages in order: probe the host, pre-flight checks, reconcile an
existing installation, settle the request, provision the repository,
resolve the version, install, configure, start the service and verify.
Every host interaction goes through :class:`SystemOperations`, so a run
can be driven end to end with fakes.
"""

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from dockstrap.core.configurer import (
    add_user_to_group,
    build_daemon_config,
    grant_group_membership,
    invoking_user,
    write_daemon_config,
)
from dockstrap.core.errors import UnsupportedPlatform
from dockstrap.core.installer import install_packages
from dockstrap.core.paths import InstallPaths
from dockstrap.core.preflight import (
    check_disk_space,
    check_network,
    check_privilege,
    current_euid,
    format_gib,
    free_bytes,
    ping_host,
)
from dockstrap.core.prober import detect_system
from dockstrap.core.prompter import Prompter
from dockstrap.core.reconciler import detect_existing, uninstall_existing
from dockstrap.core.repository import provision_repository
from dockstrap.core.resolver import resolve_packages
from dockstrap.core.service import start_service, stop_if_running
from dockstrap.core.settings import InstallerSettings
from dockstrap.core.verifier import VerificationReport, verify_installation
from dockstrap.models.installation import ExistingInstallation, ReconcileAction
from dockstrap.models.platform import PackageManager, SystemProfile
from dockstrap.models.request import InstallFlags, InstallRequest
from dockstrap.models.version import ResolvedPackageSet
from dockstrap.operators import get_operator
from dockstrap.operators.base import PackageOperator
from dockstrap.runtime.docker import DockerClient
from dockstrap.services.systemd import ServiceManager
from dockstrap.utils.formatting import print_info, print_step, print_success
from dockstrap.utils.shell import CommandResult

logger = logging.getLogger(__name__)


class InstallOutcome(Enum):
    """How a pipeline run ended without error."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    ABORTED = "aborted"


@dataclass
class SystemOperations:
    """Host collaborators used by the pipeline.

    Attributes:
        services: Init-system service manager.
        docker: Docker CLI client.
        operator_factory: Builds the package operator for a manager family.
        ping: Reachability probe for a single host.
        disk_usage: Free bytes on the filesystem holding a path.
        geteuid: Effective user id of the process.
        machine: ``uname -m`` override; None reads the running kernel.
        sleep: Sleep function used while waiting for the service.
        add_to_group: Adds a user to a supplementary group.
        environ: Environment used to find the invoking user.
    """

    services: ServiceManager
    docker: DockerClient
    operator_factory: Callable[[PackageManager], PackageOperator] = get_operator
    ping: Callable[[str], bool] = ping_host
    disk_usage: Callable[[Path], int] = free_bytes
    geteuid: Callable[[], int] = current_euid
    machine: str | None = None
    sleep: Callable[[float], None] = time.sleep
    add_to_group: Callable[[str, str], CommandResult] = add_user_to_group
    environ: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class InstallReport:
    """Outcome of a pipeline run.

    Attributes:
        outcome: How the run ended.
        profile: Detected host profile.
        existing: What the reconciler found.
        request: The settled request; None when the run ended early.
        resolved: Package set that was installed.
        verification: Facts gathered by the verifier.
        daemon_config_path: Location of the written daemon.json.
        backup_path: Backup of the previous daemon.json, if one was made.
        uninstall_command: Command to remove the runtime by hand.
    """

    outcome: InstallOutcome
    profile: SystemProfile
    existing: ExistingInstallation
    request: InstallRequest | None = None
    resolved: ResolvedPackageSet | None = None
    verification: VerificationReport | None = None
    daemon_config_path: Path | None = None
    backup_path: Path | None = None
    uninstall_command: str | None = None


@dataclass
class InstallPipeline:
    """Sequential Docker installation workflow.

    Example:
        >>> pipeline = InstallPipeline(settings, flags, prompter, ops)
        >>> report = pipeline.run()
        >>> report.outcome
        <InstallOutcome.COMPLETED: 'completed'>
    """

    settings: InstallerSettings
    flags: InstallFlags
    prompter: Prompter
    ops: SystemOperations
    paths: InstallPaths = field(default_factory=InstallPaths)
    now: datetime | None = None
    service_started: bool = field(default=False, init=False)

    def run(self) -> InstallReport:
        """Run every stage in order.

        Returns:
            InstallReport describing the outcome.

        Raises:
            InstallerError: From the first stage that fails.
        """
        print_step("Detecting system")
        profile = detect_system(self.paths.os_release, self.ops.machine)
        print_info(f"System: {profile.display_name}")
        print_info(f"Package manager: {profile.package_manager.value}")
        operator = self.ops.operator_factory(profile.package_manager)
        if not operator.is_available():
            raise UnsupportedPlatform(
                f"{operator.command} was not found on {profile.display_name}",
                hints=[f"Check that {operator.command} is installed and on PATH."],
            )

        print_step("Pre-flight checks")
        self.preflight()

        print_step("Checking for an existing installation")
        existing = detect_existing(operator, self.ops.docker)
        backup: Path | None = None
        if existing.found:
            action = self.prompter.choose_existing_action(existing)
            logger.info("Existing installation decision: %s", action.value)
            if action is ReconcileAction.SKIP:
                print_success(f"Keeping the existing Docker {existing.runtime_version or ''}".rstrip())
                return InstallReport(InstallOutcome.SKIPPED, profile, existing)
            if action is ReconcileAction.ABORT:
                print_info("Exiting without changes")
                return InstallReport(InstallOutcome.ABORTED, profile, existing)
            if action is ReconcileAction.REINSTALL:
                preserve = self.prompter.confirm_preserve_data()
                backup = uninstall_existing(
                    existing,
                    operator,
                    self.ops.services,
                    self.paths,
                    preserve_data=preserve,
                    now=self.now,
                )
            else:
                print_info("Installing over the existing runtime")
        else:
            print_success("No existing Docker installation found")

        print_step("Selecting Docker version")
        request = self.settle_request()

        print_step("Preparing the package manager")
        operator.refresh_index()
        operator.install_dependencies()

        print_step("Adding the Docker repository")
        provision_repository(
            operator,
            profile,
            self.settings,
            self.paths,
            use_mirror=request.use_mirror,
        )

        print_step("Resolving the Docker version")
        resolved = resolve_packages(request, profile, operator)

        print_step("Installing Docker")
        install_packages(operator, resolved)
        print_success("Docker packages installed")

        print_step("Configuring Docker")
        config_path = write_daemon_config(build_daemon_config(self.settings), self.paths)
        grant_group_membership(invoking_user(self.ops.environ), self.ops.add_to_group)

        print_step("Starting Docker")
        self.service_started = True
        start_service(
            self.ops.services,
            auto_start=request.auto_start,
            wait=self.settings.service_start_wait,
            sleep=self.ops.sleep,
        )

        print_step("Verifying the installation")
        verification = verify_installation(
            self.ops.docker,
            self.ops.services,
            image=self.settings.smoke_test_image,
            check_compose=request.install_compose,
        )

        return InstallReport(
            outcome=InstallOutcome.COMPLETED,
            profile=profile,
            existing=existing,
            request=request,
            resolved=resolved,
            verification=verification,
            daemon_config_path=config_path,
            backup_path=backup,
            uninstall_command=operator.uninstall_command(),
        )

    def preflight(self) -> None:
        """Run the privilege, network and disk checks in order."""
        check_privilege(self.ops.geteuid())
        print_success("Running as root")

        host = check_network(self.settings.network_probe_hosts, probe=self.ops.ping)
        print_success(f"Network reachable ({host})")

        free = check_disk_space(self.paths.root, usage=self.ops.disk_usage)
        print_success(f"Disk space sufficient ({format_gib(free)} free)")

    def settle_request(self) -> InstallRequest:
        """Fill undecided flags from prompts and freeze the request."""
        if self.flags.version is not None:
            version = self.flags.version
            print_info(f"Using the requested version: {version}")
        else:
            version = self.prompter.choose_version(self.settings.default_version)

        install_compose = self.flags.install_compose
        if install_compose is None:
            install_compose = self.prompter.confirm_compose()
        print_info(
            "Docker Compose will be installed" if install_compose else "Skipping Docker Compose"
        )

        return InstallRequest(
            desired_version=version,
            install_compose=install_compose,
            use_mirror=self.flags.use_mirror,
            auto_start=self.flags.auto_start,
        )

    def cleanup(self) -> bool:
        """Best-effort compensation after a fatal error.

        Only a daemon this run started is stopped. Failures before the
        service stage leave the host as it was, including a daemon that
        was already running.

        Returns:
            True if a stop was attempted.
        """
        if not self.service_started:
            logger.info("Service stage not reached, nothing to clean up")
            return False
        return stop_if_running(self.ops.services)
