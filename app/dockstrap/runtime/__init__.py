"""Client for the installed Docker CLI."""

from dockstrap.runtime.docker import DockerClient, DockerCli

__all__ = ["DockerCli", "DockerClient"]
