"""Console output for the updater."""

from rich.console import Console
from rich.table import Table

from .models import (
    OBSOLETE_RECOMMENDATION,
    RunConfig,
    UnsupportedModuleReport,
    UpdateOutcome,
    UpdateStatus,
)

PHASES = [
    "1. Consolidating configuration",
    "2. Checking packages",
    "3. Updating packages",
    "4. Report",
]

STATUS_STYLES = {
    UpdateStatus.UPDATED: "green",
    UpdateStatus.NOT_CHANGED: "yellow",
    UpdateStatus.FAILED: "red",
}


class UpdateOutput:
    """Prints headers, tool output and tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def line(self, text: str = "") -> None:
        # Tool output is full of square brackets, never treat it as markup
        self.console.print(
            text, markup=False, highlight=False, emoji=False, soft_wrap=True
        )

    def header1(self, text: str) -> None:
        self.line(f"// {text.upper()} //\n")

    def header2(self, text: str) -> None:
        self.line(f"/// {text} ///\n")

    def setup(self, config: RunConfig) -> None:
        self.header1("Setup")
        self.line(f"Environments: {', '.join(config.environments)}")
        self.line(f"GIT author will be overridden with: {config.author}")
        if config.only_security:
            self.line("Only security updates will be done")
        if config.no_dev:
            self.line("Dev packages won't be updated")
        if config.packages is not None:
            self.line(f"Packages: {', '.join(config.packages)}")
        self.line()

    def summary(self) -> None:
        self.header1("Summary")
        for phase in PHASES:
            self.line(phase)
        self.line()

    def failure(self, package: str, error: str) -> None:
        """Highlight a failed update and its error output."""
        banner = "!" * 51
        self.console.print(f"\n{banner}", style="red", markup=False)
        self.line(error.rstrip())
        self.console.print(
            f"Updating {package} FAILED: recovering previous state.",
            style="red",
            markup=False,
        )
        self.console.print(banner, style="red", markup=False)

    def outcomes(self, outcomes: list[UpdateOutcome]) -> None:
        if not outcomes:
            self.line("No packages were processed.")
            return

        table = Table(title="Update results")
        table.add_column("Package")
        table.add_column("Status")
        table.add_column("From")
        table.add_column("To")
        for outcome in outcomes:
            style = STATUS_STYLES[outcome.status]
            table.add_row(
                outcome.package,
                f"[{style}]{outcome.status.value}[/{style}]",
                outcome.from_version or "",
                outcome.to_version or "",
            )
        self.console.print(table)

    def unsupported_modules(self, report: UnsupportedModuleReport) -> None:
        if not len(report):
            self.line("No obsolete modules found")
            return

        table = Table(title="Unsupported modules")
        table.add_column("Module")
        table.add_column("Current version")
        table.add_column("Recommended version")
        table.add_column("Environments")
        for module in report.modules:
            table.add_row(
                module.name,
                module.current_version,
                module.recommended_version or OBSOLETE_RECOMMENDATION,
                ", ".join(module.environments),
            )
        self.console.print(table)
