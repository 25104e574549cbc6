"""create-tsx-app: scaffold TypeScript projects powered by tsx.

Creates a project directory from one of the bundled templates, rewrites its
``package.json``, installs dependencies with the package manager that
launched the tool, and initialises a git repository.

Quick usage::

    from create_tsx_app import CliOptions, init

    report = await init(CliOptions(target_dir="my-app", template="express"))
"""

__version__ = "0.1.0"

from .config import (  # noqa: E402
    CliOptions,
    EnvironmentFacts,
    FeatureToggles,
    PackageManager,
    ScaffoldConfig,
    Settings,
    TemplateId,
)
from .errors import ConfigurationError, CopyError, PromptCancelled, ScaffoldError  # noqa: E402
from .pipeline import init, main  # noqa: E402

__all__ = [
    "CliOptions",
    "ConfigurationError",
    "CopyError",
    "EnvironmentFacts",
    "FeatureToggles",
    "PackageManager",
    "PromptCancelled",
    "ScaffoldConfig",
    "ScaffoldError",
    "Settings",
    "TemplateId",
    "__version__",
    "init",
    "main",
]
