"""Service control through systemd.

Defines the ServiceManager interface used by the pipeline and its systemctl
implementation.
"""

import logging
from abc import ABC, abstractmethod

from dockstrap.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class ServiceManager(ABC):
    """Abstract interface to the host init system.

    Control operations return the command result instead of raising; the
    calling stage decides whether a failure is fatal.
    """

    @abstractmethod
    def reload(self) -> CommandResult:
        """Reload unit definitions."""

    @abstractmethod
    def start(self, unit: str) -> CommandResult:
        """Start a unit."""

    @abstractmethod
    def stop(self, unit: str) -> CommandResult:
        """Stop a unit."""

    @abstractmethod
    def enable(self, unit: str) -> CommandResult:
        """Enable a unit at boot."""

    @abstractmethod
    def is_active(self, unit: str) -> bool:
        """Check if a unit is currently active."""

    @abstractmethod
    def enabled_state(self, unit: str) -> str | None:
        """Return the unit's enablement state ('enabled', 'disabled', ...)."""


class SystemdServiceManager(ServiceManager):
    """ServiceManager backed by systemctl."""

    def reload(self) -> CommandResult:
        logger.info("Reloading systemd unit files")
        return run_command(["systemctl", "daemon-reload"])

    def start(self, unit: str) -> CommandResult:
        logger.info("Starting %s", unit)
        return run_command(["systemctl", "start", unit])

    def stop(self, unit: str) -> CommandResult:
        logger.info("Stopping %s", unit)
        return run_command(["systemctl", "stop", unit])

    def enable(self, unit: str) -> CommandResult:
        logger.info("Enabling %s at boot", unit)
        return run_command(["systemctl", "enable", unit])

    def is_active(self, unit: str) -> bool:
        return run_command(["systemctl", "is-active", "--quiet", unit]).success

    def enabled_state(self, unit: str) -> str | None:
        result = run_command(["systemctl", "is-enabled", unit])
        state = result.stdout.strip()
        return state or None
