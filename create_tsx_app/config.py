"""create-tsx-app configuration.

Typed models for everything a run decides before touching the filesystem.
All models use Pydantic v2 so they are validated at construction time; the
resolved models are frozen because they are produced once and then threaded
through the rest of the stages unchanged.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .utils import DEFAULT_PACKAGE_NAME, is_valid_package_name

DEFAULT_TARGET_DIR = DEFAULT_PACKAGE_NAME
DEFAULT_MIN_NODE_VERSION = "18.0.0"
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "scaffolder" / "templates"

# Settings field -> environment variable that overrides it.
_SETTINGS_ENV_VARS: dict[str, str] = {
    "templates_dir": "CREATE_TSX_APP_TEMPLATES_DIR",
    "min_node_version": "CREATE_TSX_APP_MIN_NODE",
    "package_manager": "CREATE_TSX_APP_PACKAGE_MANAGER",
    "probe_timeout": "CREATE_TSX_APP_PROBE_TIMEOUT",
}


# ---------------------------------------------------------------------------
# Closed sets
# ---------------------------------------------------------------------------


class TemplateId(str, Enum):
    """Project templates shipped with the scaffolder."""

    BASIC = "basic"
    EXPRESS = "express"
    FASTIFY = "fastify"

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]


class PackageManager(str, Enum):
    """Package managers the installer knows how to drive."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"

    @classmethod
    def default(cls) -> "PackageManager":
        return cls.NPM

    @classmethod
    def from_name(cls, name: str) -> "PackageManager | None":
        """Return the member called *name* (case-insensitive), or ``None``."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class OverwriteMode(str, Enum):
    """What to do with a target directory that already has content."""

    NONE = "none"
    REMOVE = "remove"
    IGNORE = "ignore"
    CANCEL = "cancel"


# ---------------------------------------------------------------------------
# Feature toggles
# ---------------------------------------------------------------------------


class FeatureToggles(BaseModel):
    """Optional features of the generated project."""

    model_config = ConfigDict(frozen=True)

    lint: bool = Field(default=True, description="ESLint configuration and scripts")
    format: bool = Field(default=True, description="Prettier configuration and scripts")
    git: bool = Field(default=True, description="Initialise a git repository")
    env: bool = Field(default=True, description=".env file and dotenv-aware scripts")

    # Fixed order in which toggles are resolved and prompted.
    ORDER: ClassVar[tuple[str, ...]] = ("lint", "format", "git", "env")

    def enabled(self) -> frozenset[str]:
        """Return the names of all enabled toggles."""
        return frozenset(name for name in self.ORDER if getattr(self, name))


# ---------------------------------------------------------------------------
# Environment facts
# ---------------------------------------------------------------------------


class VersionCheck(BaseModel):
    """Result of comparing the runtime version against the required minimum."""

    model_config = ConfigDict(frozen=True)

    current: tuple[int, int, int]
    required: tuple[int, int, int]

    @property
    def is_valid(self) -> bool:
        return self.current >= self.required

    @property
    def current_version(self) -> str:
        return ".".join(str(part) for part in self.current)

    @property
    def required_version(self) -> str:
        return ".".join(str(part) for part in self.required)


class EnvironmentFacts(BaseModel):
    """Everything probed about the host, gathered once at startup."""

    model_config = ConfigDict(frozen=True)

    runtime: VersionCheck
    package_manager: PackageManager = PackageManager.NPM
    git_available: bool = False
    package_manager_available: bool = False


# ---------------------------------------------------------------------------
# Command line options
# ---------------------------------------------------------------------------


class CliOptions(BaseModel):
    """Raw, unvalidated options as parsed from the command line."""

    target_dir: str | None = None
    template: str = TemplateId.BASIC.value
    overwrite: bool = False
    interactive: bool = False
    install: bool = True
    lint: bool = True
    format: bool = True
    git: bool = True
    env: bool = True


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------


class ScaffoldConfig(BaseModel):
    """Fully-resolved inputs for a single scaffolding run."""

    model_config = ConfigDict(frozen=True)

    target_dir: str = Field(..., description="Target directory as given by the user")
    root: Path = Field(..., description="Absolute path of the project directory")
    package_name: str = Field(..., description="Validated package.json name")
    template: TemplateId = Field(default=TemplateId.BASIC)
    features: FeatureToggles = Field(default_factory=FeatureToggles)
    overwrite: OverwriteMode = Field(default=OverwriteMode.NONE)

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        if not is_valid_package_name(value):
            raise ValueError(f"invalid package name: {value!r}")
        return value


# ---------------------------------------------------------------------------
# Settings (environment overrides)
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Tool-level settings that do not come from the command line."""

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    min_node_version: str = Field(default=DEFAULT_MIN_NODE_VERSION)
    package_manager: str | None = Field(
        default=None, description="Force a package manager instead of detecting one"
    )
    probe_timeout: float = Field(
        default=10.0, gt=0, description="Timeout in seconds for tool availability probes"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            CREATE_TSX_APP_TEMPLATES_DIR, CREATE_TSX_APP_MIN_NODE,
            CREATE_TSX_APP_PACKAGE_MANAGER, CREATE_TSX_APP_PROBE_TIMEOUT.

        Raises:
            ConfigurationError: If a variable holds an unusable value.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("CREATE_TSX_APP_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["CREATE_TSX_APP_TEMPLATES_DIR"])
        if os.environ.get("CREATE_TSX_APP_MIN_NODE"):
            kwargs["min_node_version"] = os.environ["CREATE_TSX_APP_MIN_NODE"]
        if os.environ.get("CREATE_TSX_APP_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["CREATE_TSX_APP_PACKAGE_MANAGER"]
        if os.environ.get("CREATE_TSX_APP_PROBE_TIMEOUT"):
            kwargs["probe_timeout"] = os.environ["CREATE_TSX_APP_PROBE_TIMEOUT"]

        try:
            return cls(**kwargs)
        except ValidationError as exc:
            fields = ", ".join(
                _SETTINGS_ENV_VARS.get(str(error["loc"][0]), str(error["loc"][0]))
                for error in exc.errors()
            )
            raise ConfigurationError(
                f"Invalid value for {fields}.",
                hint="Fix or unset the environment variable and try again.",
            ) from exc
