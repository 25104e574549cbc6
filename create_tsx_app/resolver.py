"""Turn command line options and prompt answers into a ``ScaffoldConfig``.

Resolution runs in a fixed order: template, target directory, what to do with
a non-empty directory, package name, then the feature toggles (lint, format,
git, env).  Nothing here writes to disk; a cancelled prompt therefore leaves
the filesystem untouched.
"""

from __future__ import annotations

from pathlib import Path

from .config import (
    DEFAULT_TARGET_DIR,
    CliOptions,
    EnvironmentFacts,
    FeatureToggles,
    OverwriteMode,
    ScaffoldConfig,
    TemplateId,
)
from .errors import ConfigurationError
from .prompts import Prompter
from .reporter import Reporter
from .scaffolder.guard import resolve_overwrite
from .utils import (
    DEFAULT_PACKAGE_NAME,
    format_target_dir,
    is_valid_package_name,
    to_valid_package_name,
)

INVALID_PACKAGE_NAME = "Invalid package name."

TOGGLE_QUESTIONS: dict[str, str] = {
    "lint": "Add ESLint for code linting?",
    "format": "Add Prettier for code formatting?",
    "git": "Initialize Git repository?",
    "env": "Setup environment variables (.env file)?",
}


def validate_template(name: str) -> TemplateId:
    """Return the :class:`TemplateId` called *name*.

    Raises:
        ConfigurationError: If *name* is not a known template.
    """
    try:
        return TemplateId(name)
    except ValueError:
        raise ConfigurationError(
            f'Invalid template "{name}". '
            f"Available templates: {', '.join(TemplateId.names())}"
        ) from None


def _check_package_name(name: str) -> str | None:
    return None if is_valid_package_name(name) else INVALID_PACKAGE_NAME


class InputResolver:
    """Resolve every input of a run, prompting where needed."""

    def __init__(
        self,
        options: CliOptions,
        facts: EnvironmentFacts,
        prompter: Prompter,
        reporter: Reporter,
        cwd: Path | None = None,
    ) -> None:
        self.options = options
        self.facts = facts
        self.prompter = prompter
        self.reporter = reporter
        self.cwd = cwd or Path.cwd()

    def resolve(self) -> ScaffoldConfig | None:
        """Return the resolved configuration.

        Returns ``None`` when the user chose to cancel at the non-empty
        directory prompt.

        Raises:
            ConfigurationError: For an unknown template.
            PromptCancelled: When a prompt is aborted.
        """
        template = validate_template(self.options.template)
        target_dir = self.resolve_target_dir()
        root = self.resolve_root(target_dir)

        overwrite = resolve_overwrite(
            root, target_dir, force=self.options.overwrite, prompter=self.prompter
        )
        if overwrite is OverwriteMode.CANCEL:
            return None

        return ScaffoldConfig(
            target_dir=target_dir,
            root=root,
            package_name=self.resolve_package_name(root),
            template=template,
            features=self.resolve_features(),
            overwrite=overwrite,
        )

    # -- Individual steps --------------------------------------------------

    def resolve_target_dir(self) -> str:
        if self.options.target_dir:
            target_dir = format_target_dir(self.options.target_dir)
            if target_dir:
                return target_dir
        answer = self.prompter.text("App name:", default=DEFAULT_TARGET_DIR)
        return format_target_dir(answer) or DEFAULT_TARGET_DIR

    def resolve_root(self, target_dir: str) -> Path:
        path = Path(target_dir).expanduser()
        if not path.is_absolute():
            path = self.cwd / path
        return path.resolve()

    def resolve_package_name(self, root: Path) -> str:
        """Derive the package name from the project directory's name.

        The normalised candidate is used as-is when it is valid.  Otherwise
        (a directory such as ``_`` normalises to nothing) the user is asked
        for a name, seeded with ``tsx-app`` and re-validated on every answer.
        """
        candidate = to_valid_package_name(root.name)
        if is_valid_package_name(candidate):
            return candidate
        return self.prompter.text(
            "Package name:", default=DEFAULT_PACKAGE_NAME, validate=_check_package_name
        )

    def resolve_features(self) -> FeatureToggles:
        values: dict[str, bool] = {}
        for name in FeatureToggles.ORDER:
            value = getattr(self.options, name)
            if name == "git" and not self.facts.git_available:
                self.reporter.warn(
                    "Git is not installed. Git repository initialization will be skipped."
                )
                self.reporter.info(
                    "Install Git to enable repository initialization: "
                    "https://git-scm.com/downloads"
                )
                values[name] = False
                continue
            if self.options.interactive:
                value = self.prompter.confirm(TOGGLE_QUESTIONS[name], default=value)
            values[name] = value
        return FeatureToggles(**values)
