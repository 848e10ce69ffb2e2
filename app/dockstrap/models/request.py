"""Install request models.

The CLI collects raw flags into :class:`InstallFlags`. Decisions left open
by the flags are settled by interactive prompts, and the result is frozen
into an :class:`InstallRequest` that every later stage receives.
"""

import re
from dataclasses import dataclass

from dockstrap.core.errors import InvalidVersionFormat

VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")

DEFAULT_DOCKER_VERSION = "27.5.0"


def validate_version(version: str) -> str:
    """Validate a strict X.Y.Z version string.

    Args:
        version: Version text to validate.

    Returns:
        The version, stripped of surrounding whitespace.

    Raises:
        InvalidVersionFormat: If the text is not three dot-separated integers.
    """
    candidate = version.strip()
    if not VERSION_PATTERN.match(candidate):
        raise InvalidVersionFormat(
            f"Invalid version format: {version!r}, expected X.Y.Z (e.g. 24.0.7)",
        )
    return candidate


@dataclass(frozen=True, slots=True)
class InstallFlags:
    """Options as supplied on the command line.

    ``None`` means the flag was not given and the decision is prompted for.

    Attributes:
        version: Requested Docker version, already validated.
        install_compose: False when --no-compose was given.
        use_mirror: Whether to use the regional mirror endpoint.
        auto_start: Whether to enable the service at boot.
    """

    version: str | None = None
    install_compose: bool | None = None
    use_mirror: bool = True
    auto_start: bool = True


@dataclass(frozen=True, slots=True)
class InstallRequest:
    """Fully decided installation request.

    Attributes:
        desired_version: Docker version to install (X.Y.Z).
        install_compose: Whether to install the compose plugin.
        use_mirror: Whether to use the regional mirror endpoint.
        auto_start: Whether to enable the service at boot.
    """

    desired_version: str
    install_compose: bool = True
    use_mirror: bool = True
    auto_start: bool = True

    def __post_init__(self) -> None:
        """Validate the requested version."""
        validate_version(self.desired_version)
