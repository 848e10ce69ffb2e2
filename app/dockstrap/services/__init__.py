"""Init-system service control."""

from dockstrap.services.systemd import ServiceManager, SystemdServiceManager

__all__ = ["ServiceManager", "SystemdServiceManager"]
