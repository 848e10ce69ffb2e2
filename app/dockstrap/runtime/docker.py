"""Docker CLI client.

Wraps the handful of ``docker`` invocations the installer needs to detect
an existing runtime and to verify a fresh one.
"""

import re
from abc import ABC, abstractmethod

from dockstrap.utils.shell import CommandResult, command_path, run_command

_VERSION_RE = re.compile(r"\d+\.\d+\.\d+")


def parse_version(text: str) -> str | None:
    """Extract the first X.Y.Z version from command output."""
    match = _VERSION_RE.search(text)
    return match.group(0) if match else None


class DockerClient(ABC):
    """Abstract interface to the docker command-line tool."""

    @abstractmethod
    def binary_path(self) -> str | None:
        """Return the docker binary location, or None if not on PATH."""

    @abstractmethod
    def version(self) -> str | None:
        """Return the X.Y.Z version reported by ``docker --version``."""

    @abstractmethod
    def info(self) -> CommandResult:
        """Run ``docker info``."""

    @abstractmethod
    def run_container(self, image: str) -> CommandResult:
        """Run a disposable container from ``image`` and return its output."""

    @abstractmethod
    def compose_version(self) -> str | None:
        """Return the compose plugin version, or None if unavailable."""


class DockerCli(DockerClient):
    """DockerClient that shells out to the real docker binary."""

    def __init__(self, executable: str = "docker") -> None:
        self._executable = executable

    def binary_path(self) -> str | None:
        return command_path(self._executable)

    def version(self) -> str | None:
        if self.binary_path() is None:
            return None
        result = run_command([self._executable, "--version"], timeout=30.0)
        if not result.success:
            return None
        return parse_version(result.stdout)

    def info(self) -> CommandResult:
        return run_command([self._executable, "info"])

    def run_container(self, image: str) -> CommandResult:
        return run_command([self._executable, "run", "--rm", image])

    def compose_version(self) -> str | None:
        result = run_command([self._executable, "compose", "version", "--short"], timeout=30.0)
        if not result.success:
            return None
        return result.stdout.strip() or None
