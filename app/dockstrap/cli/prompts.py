"""Interactive prompts on the terminal."""

import typer
from rich.markup import escape

from dockstrap.cli.display import create_existing_table
from dockstrap.core.errors import InvalidChoice
from dockstrap.core.prompter import COMMON_VERSIONS, Prompter
from dockstrap.models.installation import ExistingInstallation, ReconcileAction
from dockstrap.models.request import validate_version
from dockstrap.utils.formatting import console, print_info

# Menu entries for an existing installation, in display order.
EXISTING_MENU: tuple[tuple[ReconcileAction, str], ...] = (
    (ReconcileAction.REINSTALL, "Uninstall the existing Docker and reinstall (recommended)"),
    (ReconcileAction.SKIP, "Skip installation and keep the current version"),
    (ReconcileAction.UPGRADE_IN_PLACE, "Upgrade to the requested version only"),
    (ReconcileAction.ABORT, "Exit"),
)


class ConsolePrompter(Prompter):
    """Prompter backed by typer.prompt and typer.confirm."""

    def choose_existing_action(self, existing: ExistingInstallation) -> ReconcileAction:
        console.print(create_existing_table(existing))
        console.print()
        for number, (_, label) in enumerate(EXISTING_MENU, start=1):
            console.print(f"  [header]{number})[/] {label}")
        console.print()

        answer = typer.prompt(f"Choose an option [1-{len(EXISTING_MENU)}]").strip()
        if not answer.isdigit() or not 1 <= int(answer) <= len(EXISTING_MENU):
            raise InvalidChoice(f"Invalid option: {answer!r}")

        action, label = EXISTING_MENU[int(answer) - 1]
        print_info(f"Selected: {label}")
        return action

    def confirm_preserve_data(self) -> bool:
        return typer.confirm("Keep Docker images and container data?", default=False)

    def choose_version(self, default: str) -> str:
        console.print(f"Default version: [success]{escape(default)}[/]")
        console.print("Common Docker versions:")
        for version in COMMON_VERSIONS:
            console.print(f"  - {version}")
        console.print()

        if typer.confirm(f"Use the default version {default}?", default=True):
            print_info(f"Using the default version: {default}")
            return default

        custom = typer.prompt(
            "Docker version to install (e.g. 24.0.7)",
            default="",
            show_default=False,
        ).strip()
        if not custom:
            print_info(f"Using the default version: {default}")
            return default

        version = validate_version(custom)
        print_info(f"Installing Docker version: {version}")
        return version

    def confirm_compose(self) -> bool:
        return typer.confirm("Install Docker Compose?", default=True)
