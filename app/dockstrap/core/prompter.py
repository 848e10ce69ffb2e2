"""Interface for the operator decisions the pipeline cannot make alone."""

from abc import ABC, abstractmethod

from dockstrap.models.installation import ExistingInstallation, ReconcileAction

# Versions offered when asking which release to install, newest first.
COMMON_VERSIONS: tuple[str, ...] = ("27.5.0", "26.1.0", "25.0.0", "24.0.9", "23.0.6")


class Prompter(ABC):
    """Source of operator decisions.

    The CLI implementation asks on the terminal; tests script the answers.
    """

    @abstractmethod
    def choose_existing_action(self, existing: ExistingInstallation) -> ReconcileAction:
        """Decide what to do with an existing installation.

        Raises:
            InvalidChoice: If the answer is not one of the offered options.
        """

    @abstractmethod
    def confirm_preserve_data(self) -> bool:
        """Ask whether images, containers and volumes survive a reinstall."""

    @abstractmethod
    def choose_version(self, default: str) -> str:
        """Return the X.Y.Z version to install.

        Raises:
            InvalidVersionFormat: If a custom version is malformed.
        """

    @abstractmethod
    def confirm_compose(self) -> bool:
        """Ask whether to install the compose plugin."""
