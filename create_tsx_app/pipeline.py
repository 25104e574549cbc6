"""create-tsx-app orchestrator.

Runs one scaffolding pass, strictly forward:

1. PROBE    -- Node.js version, package manager, git availability.
2. RESOLVE  -- Template, target directory, overwrite choice, package name, toggles.
3. GENERATE -- Clear the directory if asked, copy the template, write package.json.
4. INSTALL  -- Install dependencies with the detected package manager (best-effort).
5. GIT      -- Initialise a repository with one commit (best-effort).

Usage::

    python -m create_tsx_app my-app
    python -m create_tsx_app my-app --template express --no-prettier
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .config import CliOptions, EnvironmentFacts, Settings, TemplateId
from .errors import ConfigurationError, CopyError, PromptCancelled
from .installer import (
    install_dependencies,
    manual_commands,
    plan_dependencies,
    resolve_package_manager,
)
from .probe import probe_environment
from .prompts import Prompter
from .reporter import Reporter, ScaffoldReport, StepResult
from .repository import init_repository
from .resolver import InputResolver
from .scaffolder import ProjectGenerator

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


async def check_environment(settings: Settings, reporter: Reporter) -> EnvironmentFacts:
    """Probe the host and fail fast on an unusable environment.

    Raises:
        ConfigurationError: If Node.js is too old or the package manager
            binary cannot be executed.
    """
    forced = None
    if settings.package_manager:
        forced, recognised = resolve_package_manager(settings.package_manager)
        if not recognised:
            reporter.warn(
                f"Unknown package manager: {settings.package_manager}. Falling back to npm."
            )

    facts = await probe_environment(
        min_node_version=settings.min_node_version,
        package_manager=forced,
        timeout=settings.probe_timeout,
    )

    if not facts.runtime.is_valid:
        raise ConfigurationError(
            f"Node.js version {facts.runtime.required_version} or higher is required. "
            f"You are using {facts.runtime.current_version}.",
            hint="Please update Node.js: https://nodejs.org/",
        )
    if not facts.package_manager_available:
        manager = facts.package_manager.value
        raise ConfigurationError(
            f'Package manager "{manager}" is not installed or not available.',
            hint=f"Please install {manager} or use a different package manager.",
        )
    return facts


async def init(
    options: CliOptions,
    *,
    settings: Settings | None = None,
    facts: EnvironmentFacts | None = None,
    prompter: Prompter | None = None,
    reporter: Reporter | None = None,
    cwd: Path | None = None,
) -> ScaffoldReport | None:
    """Scaffold one project.

    Args:
        options: Parsed command line options.
        settings: Tool settings; defaults to :meth:`Settings.from_env`.
        facts: Pre-probed environment facts; probed here when omitted.
        prompter: Prompt implementation (replaced in tests).
        reporter: Console reporter.
        cwd: Directory relative target paths are resolved against.

    Returns:
        The run summary, or ``None`` when the user chose to cancel at the
        non-empty directory prompt.

    Raises:
        ConfigurationError: Fatal validation failures; nothing was written.
        CopyError: A template entry failed to copy; earlier files remain.
        PromptCancelled: The user aborted a prompt.
    """
    settings = settings or Settings.from_env()
    reporter = reporter or Reporter()
    prompter = prompter or Prompter(reporter.console)

    if facts is None:
        facts = await check_environment(settings, reporter)

    reporter.intro()

    config = InputResolver(options, facts, prompter, reporter, cwd=cwd).resolve()
    if config is None:
        reporter.cancelled()
        return None

    generator = ProjectGenerator(config, settings.templates_dir)

    reporter.step(f"Scaffolding project in {config.root}...")
    written = await generator.generate()

    manager = facts.package_manager
    plan = plan_dependencies(config.template, config.features)
    if options.install:
        reporter.step(f"Installing {plan.total} dependencies using {manager.value}...")
        with reporter.status("Downloading packages..."):
            install_result = await install_dependencies(plan, manager, config.root)
    else:
        install_result = StepResult.skip(
            "install", "Skipped dependency installation.", manual_commands(manager, plan)
        )
    reporter.step_result(install_result)
    steps = [install_result]

    if config.features.git:
        reporter.step("Initializing Git repository...")
        git_result = await init_repository(config.root)
        reporter.step_result(git_result)
        steps.append(git_result)

    report = ScaffoldReport(
        root=config.root,
        target_dir=config.target_dir,
        package_name=config.package_name,
        template=config.template.value,
        package_manager=manager.value,
        features=sorted(config.features.enabled()),
        files_written=len(written),
        steps=steps,
    )
    reporter.summary(report)
    return report


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _add_toggle(
    parser: argparse.ArgumentParser, name: str, aliases: Sequence[str], help_text: str
) -> None:
    """Register ``--<name>[=BOOL]`` plus ``--no-<name>`` style negations."""
    parser.add_argument(
        f"--{name}",
        dest=name,
        nargs="?",
        const=True,
        default=True,
        type=_parse_bool,
        metavar="BOOL",
        help=argparse.SUPPRESS,
    )
    negations = [f"--no-{alias}" for alias in aliases]
    parser.add_argument(*negations, dest=name, action="store_false", help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-tsx-app",
        description="Scaffold a new TypeScript project powered by tsx",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-tsx-app my-app\n"
            "  create-tsx-app my-app --interactive\n"
            "  create-tsx-app my-app --template express\n"
            "  create-tsx-app my-app --no-eslint --no-prettier\n"
        ),
    )
    parser.add_argument(
        "target_dir",
        nargs="?",
        default=None,
        help="Directory to create the project in (prompted when omitted)",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-o", "--overwrite", "--force",
        dest="overwrite",
        action="store_true",
        help="Overwrite existing directory without asking",
    )
    parser.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Enable interactive prompts (default: auto-setup with all features)",
    )
    parser.add_argument(
        "-t", "--template",
        default=TemplateId.BASIC.value,
        help=f"Project template: {', '.join(TemplateId.names())} (default: basic)",
    )
    parser.add_argument(
        "--no-install",
        dest="install",
        action="store_false",
        help="Skip dependency installation",
    )
    _add_toggle(parser, "lint", ("eslint", "lint"), "Skip ESLint configuration")
    _add_toggle(parser, "format", ("prettier", "format"), "Skip Prettier configuration")
    _add_toggle(parser, "git", ("git",), "Skip Git repository initialization")
    _add_toggle(parser, "env", ("env",), "Skip environment variables setup")
    return parser


def parse_options(argv: Sequence[str] | None = None) -> CliOptions:
    """Parse *argv* into :class:`CliOptions` (argparse exits on --help/--version)."""
    args = build_parser().parse_args(argv)
    return CliOptions(
        target_dir=args.target_dir,
        template=args.template,
        overwrite=args.overwrite,
        interactive=args.interactive,
        install=args.install,
        lint=args.lint,
        format=args.format,
        git=args.git,
        env=args.env,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``create-tsx-app`` / ``python -m create_tsx_app``."""
    options = parse_options(argv)
    reporter = Reporter()

    try:
        asyncio.run(init(options, reporter=reporter))
    except ConfigurationError as exc:
        reporter.error(str(exc), exc.hint)
        return EXIT_ERROR
    except CopyError as exc:
        reporter.error(str(exc))
        return EXIT_ERROR
    except PromptCancelled as exc:
        reporter.cancelled(str(exc))
        return EXIT_CANCELLED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
