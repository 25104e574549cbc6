"""Progress and outcome reporting.

Best-effort steps (dependency install, git init) return a :class:`StepResult`
instead of raising; the :class:`Reporter` renders every result the same way
and prints the final summary.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import BaseModel, Field, computed_field
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import utils


class StepResult(BaseModel):
    """Outcome of a best-effort external step."""

    name: str = Field(..., description="Short step name, e.g. 'install' or 'git'")
    ok: bool = Field(default=True)
    message: str = Field(default="", description="Human-readable outcome")
    remediation: list[str] = Field(
        default_factory=list, description="Commands the user can run to finish the step"
    )
    skipped: bool = Field(default=False, description="Step was not attempted")

    @classmethod
    def success(cls, name: str, message: str) -> "StepResult":
        return cls(name=name, ok=True, message=message)

    @classmethod
    def failure(cls, name: str, message: str, remediation: list[str]) -> "StepResult":
        return cls(name=name, ok=False, message=message, remediation=remediation)

    @classmethod
    def skip(cls, name: str, message: str, remediation: list[str] | None = None) -> "StepResult":
        return cls(
            name=name, ok=True, skipped=True, message=message, remediation=remediation or []
        )


class ScaffoldReport(BaseModel):
    """Summary of a completed scaffolding run."""

    root: Path
    target_dir: str
    package_name: str
    template: str
    package_manager: str
    features: list[str] = Field(default_factory=list)
    files_written: int = Field(default=0, ge=0)
    steps: list[StepResult] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def warnings(self) -> int:
        """Number of best-effort steps that failed."""
        return sum(1 for step in self.steps if not step.ok)


class Reporter:
    """Console front-end for a scaffolding run."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or utils.console

    # -- Line output -------------------------------------------------------

    def intro(self) -> None:
        self.console.print(
            Panel(
                "Welcome to [bold bright_cyan]create-tsx-app[/bold bright_cyan]! "
                "This tool will help you set up a new TypeScript project with tsx.",
                border_style="bright_cyan",
            )
        )

    def step(self, message: str) -> None:
        self.console.print(f"[cyan]>[/cyan] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")

    def warn(self, message: str) -> None:
        self.console.print(f"[bold yellow]{message}[/bold yellow]")

    def error(self, message: str, hint: str = "") -> None:
        self.console.print(f"[bold red]{message}[/bold red]")
        if hint:
            self.info(hint)

    def cancelled(self, message: str = "Operation cancelled") -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while a long-running step executes."""
        with self.console.status(message, spinner="dots"):
            yield

    # -- Results -----------------------------------------------------------

    def step_result(self, result: StepResult) -> None:
        """Render a best-effort step outcome, with manual commands on failure."""
        if result.ok and not result.skipped:
            self.console.print(f"[green]+[/green] {result.message}")
        elif result.ok:
            self.info(result.message)
        else:
            self.warn(result.message)
        for command in result.remediation:
            self.console.print(f"  You can run [bold]`{command}`[/bold] manually.")

    def summary(self, report: ScaffoldReport) -> None:
        """Print the summary table and the next-steps panel."""
        rows = {
            "Project": str(report.root),
            "Package name": report.package_name,
            "Template": report.template,
            "Package manager": report.package_manager,
            "Features": ", ".join(report.features) or "none",
            "Files written": str(report.files_written),
            "Warnings": str(report.warnings),
        }
        table = Table(title="Summary", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="dim", no_wrap=True)
        table.add_column("Value")
        for key, value in rows.items():
            table.add_row(key, value)

        self.console.print()
        self.console.print(table)
        self.console.print()

        pm = report.package_manager
        lines = ["[bold green]Project created successfully![/bold green]", "", "Next steps:"]
        number = 1
        if report.target_dir != ".":
            lines.append(f"  {number}. Navigate to your project: cd {report.target_dir}")
            number += 1
        lines.append(f"  {number}. Start developing: {pm} run dev")
        lines.append(f"  {number + 1}. Build your project: {pm} run build")
        self.console.print(Panel("\n".join(lines), border_style="green"))
