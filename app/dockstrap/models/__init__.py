"""Data models for the installation pipeline.

Exports the value types passed between pipeline stages.
"""

from dockstrap.models.installation import ExistingInstallation, ReconcileAction
from dockstrap.models.platform import Architecture, PackageManager, SystemProfile
from dockstrap.models.request import InstallFlags, InstallRequest, validate_version
from dockstrap.models.version import (
    DebianVersion,
    ResolvedPackageSet,
    RpmVersion,
)

__all__ = [
    "Architecture",
    "DebianVersion",
    "ExistingInstallation",
    "InstallFlags",
    "InstallRequest",
    "PackageManager",
    "ReconcileAction",
    "ResolvedPackageSet",
    "RpmVersion",
    "SystemProfile",
    "validate_version",
]
