"""Dependency planning and installation.

Works out which npm packages a generated project needs and installs them with
the detected package manager.  Installation is best-effort: a failing install
is reported with the equivalent manual commands and never aborts the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import FeatureToggles, PackageManager, TemplateId
from .reporter import StepResult
from .utils import run_command

BASE_DEV_DEPENDENCIES: tuple[str, ...] = ("typescript", "tsx", "@types/node")

TEMPLATE_DEPENDENCIES: dict[TemplateId, tuple[tuple[str, ...], tuple[str, ...]]] = {
    TemplateId.BASIC: ((), ()),
    TemplateId.EXPRESS: (
        ("express", "cors", "helmet", "morgan"),
        ("@types/express", "@types/cors", "@types/morgan"),
    ),
    TemplateId.FASTIFY: (
        (
            "fastify",
            "@fastify/cors",
            "@fastify/helmet",
            "@fastify/swagger",
            "@fastify/swagger-ui",
        ),
        (),
    ),
}

LINT_DEPENDENCIES: tuple[str, ...] = (
    "eslint",
    "@eslint/js",
    "@typescript-eslint/eslint-plugin",
    "@typescript-eslint/parser",
)
FORMAT_DEPENDENCIES: tuple[str, ...] = ("prettier",)
LINT_FORMAT_DEPENDENCIES: tuple[str, ...] = ("eslint-plugin-prettier", "eslint-config-prettier")
ENV_DEPENDENCIES: tuple[str, ...] = ("dotenv",)


@dataclass
class DependencyPlan:
    """Runtime and development packages for a project, in install order."""

    runtime: list[str] = field(default_factory=list)
    development: list[str] = field(default_factory=list)

    def add(self, packages: tuple[str, ...], *, dev: bool) -> None:
        target = self.development if dev else self.runtime
        for package in packages:
            if package not in target:
                target.append(package)

    @property
    def total(self) -> int:
        return len(self.runtime) + len(self.development)


def plan_dependencies(template: TemplateId, features: FeatureToggles) -> DependencyPlan:
    """Return the packages implied by *template* and *features*."""
    plan = DependencyPlan()
    plan.add(BASE_DEV_DEPENDENCIES, dev=True)

    runtime, development = TEMPLATE_DEPENDENCIES[template]
    plan.add(runtime, dev=False)
    plan.add(development, dev=True)

    if features.lint:
        plan.add(LINT_DEPENDENCIES, dev=True)
    if features.format:
        plan.add(FORMAT_DEPENDENCIES, dev=True)
    if features.lint and features.format:
        plan.add(LINT_FORMAT_DEPENDENCIES, dev=True)
    if features.env:
        plan.add(ENV_DEPENDENCIES, dev=False)
    return plan


# ---------------------------------------------------------------------------
# Package manager syntax
# ---------------------------------------------------------------------------


def resolve_package_manager(name: str) -> tuple[PackageManager, bool]:
    """Map *name* onto a known package manager.

    Returns:
        ``(manager, recognised)``; unknown names map to npm with
        ``recognised`` set to ``False`` so the caller can warn.
    """
    manager = PackageManager.from_name(name)
    if manager is None:
        return PackageManager.default(), False
    return manager, True


def install_args(manager: PackageManager, packages: list[str], *, dev: bool) -> list[str]:
    """Return the argument list installing *packages* with *manager*."""
    verb = "install" if manager is PackageManager.NPM else "add"
    args = [manager.value, verb]
    if dev:
        args.append("-D")
    return args + list(packages)


def install_command(manager: PackageManager, packages: list[str], *, dev: bool) -> list[str]:
    """Return the non-interactive install command run by the scaffolder."""
    return install_args(manager, packages, dev=dev) + ["--silent"]


def manual_command(manager: PackageManager, packages: list[str], *, dev: bool) -> str:
    """Return the install command the user can run by hand."""
    return " ".join(install_args(manager, packages, dev=dev))


def manual_commands(manager: PackageManager, plan: DependencyPlan) -> list[str]:
    """Return the manual commands equivalent to installing the whole *plan*."""
    commands: list[str] = []
    if plan.runtime:
        commands.append(manual_command(manager, plan.runtime, dev=False))
    if plan.development:
        commands.append(manual_command(manager, plan.development, dev=True))
    return commands


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------


async def install_dependencies(
    plan: DependencyPlan,
    manager: PackageManager,
    root: Path,
) -> StepResult:
    """Install *plan* inside *root*: runtime packages first, then dev packages.

    Never raises for process failures; a non-zero exit (or a binary that
    cannot be started) yields a failed :class:`StepResult` carrying the
    manual commands.
    """
    groups = [(plan.runtime, False), (plan.development, True)]
    for packages, dev in groups:
        if not packages:
            continue
        cmd = install_command(manager, packages, dev=dev)
        try:
            returncode, _, stderr = await run_command(cmd, cwd=root)
        except OSError as exc:
            returncode, stderr = -1, str(exc)
        if returncode != 0:
            message = "Failed to install dependencies."
            if stderr:
                message = f"{message} {stderr.splitlines()[-1]}"
            return StepResult.failure("install", message, manual_commands(manager, plan))

    return StepResult.success(
        "install", f"Installed {plan.total} dependencies using {manager.value}."
    )
