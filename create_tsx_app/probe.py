"""Host environment probing.

Works out which package manager launched the scaffolder, which Node.js
version is installed, and whether git and the package manager binary can be
executed.  Everything is gathered once by :func:`probe_environment` and passed
around as an :class:`~create_tsx_app.config.EnvironmentFacts` value; nothing
else in the package reads ``os.environ`` for these facts.
"""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping, Sequence

from .config import (
    DEFAULT_MIN_NODE_VERSION,
    EnvironmentFacts,
    PackageManager,
    VersionCheck,
)
from .utils import run_command

# Launcher names (file-name stems) and the package manager they belong to.
_LAUNCHER_NAMES: dict[str, PackageManager] = {
    "pnpm": PackageManager.PNPM,
    "pnpx": PackageManager.PNPM,
    "yarn": PackageManager.YARN,
    "yarnpkg": PackageManager.YARN,
    "bun": PackageManager.BUN,
    "bunx": PackageManager.BUN,
    "npm": PackageManager.NPM,
    "npx": PackageManager.NPM,
}

_PATH_SEPARATORS = re.compile(r"[\\/]")
_STEM_SEPARATORS = re.compile(r"[.\-]")

# Variables set by a package manager's own installer or shim.
_TOOL_MARKERS: tuple[tuple[str, PackageManager], ...] = (
    ("PNPM_HOME", PackageManager.PNPM),
    ("PNPM_SCRIPT_SRC_DIR", PackageManager.PNPM),
    ("YARN_VERSION", PackageManager.YARN),
    ("YARN_WRAP_OUTPUT", PackageManager.YARN),
    ("BUN_INSTALL", PackageManager.BUN),
)

_VERSION_PATTERN = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


# ---------------------------------------------------------------------------
# Package manager detection
# ---------------------------------------------------------------------------


def _recognize(path: str) -> PackageManager | None:
    """Return the package manager a launcher *path* belongs to.

    Only whole path segments count: a segment matches when its stem (the part
    before the first ``.`` or ``-``) is a known launcher name, so
    ``/usr/lib/node_modules/npm/bin/npm-cli.js`` is npm while
    ``/home/ubuntu/.venv/bin/python`` matches nothing.  The file name is
    checked before its parent directories.
    """
    for segment in reversed(_PATH_SEPARATORS.split(path.lower())):
        stem = _STEM_SEPARATORS.split(segment, maxsplit=1)[0]
        manager = _LAUNCHER_NAMES.get(stem)
        if manager is not None:
            return manager
    return None


def detect_package_manager(
    environ: Mapping[str, str] | None = None,
    argv: Sequence[str] | None = None,
) -> PackageManager:
    """Identify the package manager that invoked the scaffolder.

    Sources are consulted in priority order and the first recognisable one
    wins:

    1. the launcher path (``npm_execpath``, then ``_``),
    2. the ``npm_config_user_agent`` string (e.g. ``"pnpm/9.1.0 npm/? node/v20"``),
    3. installer markers such as ``PNPM_HOME`` or ``BUN_INSTALL``,
    4. the process arguments.

    Falls back to npm when nothing matches.

    Args:
        environ: Environment mapping. Defaults to ``os.environ``.
        argv: Process arguments. Defaults to ``sys.argv``.
    """
    env = os.environ if environ is None else environ
    args = sys.argv if argv is None else argv

    for launcher in (env.get("npm_execpath", ""), env.get("_", "")):
        manager = _recognize(launcher)
        if manager is not None:
            return manager

    user_agent = env.get("npm_config_user_agent", "")
    if user_agent:
        manager = PackageManager.from_name(user_agent.split(" ", 1)[0].split("/", 1)[0])
        if manager is not None:
            return manager

    for marker, manager in _TOOL_MARKERS:
        if env.get(marker):
            return manager

    for arg in args:
        manager = _recognize(arg)
        if manager is not None:
            return manager

    return PackageManager.default()


# ---------------------------------------------------------------------------
# Runtime version
# ---------------------------------------------------------------------------


def parse_version(text: str) -> tuple[int, int, int]:
    """Parse a dotted version string into a ``(major, minor, patch)`` triple.

    A leading ``v`` is ignored, missing components count as zero and any
    pre-release or build suffix is dropped.  Unparseable input yields
    ``(0, 0, 0)``.

    Examples::

        parse_version("v20.11.1")   -> (20, 11, 1)
        parse_version("18")         -> (18, 0, 0)
        parse_version("21.0.0-rc")  -> (21, 0, 0)
    """
    match = _VERSION_PATTERN.match(text.strip())
    if not match:
        return (0, 0, 0)
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return (major, minor, patch)


def validate_runtime_version(
    current: str, required: str = DEFAULT_MIN_NODE_VERSION
) -> VersionCheck:
    """Compare *current* against *required*, major first, boundary inclusive."""
    return VersionCheck(current=parse_version(current), required=parse_version(required))


async def detect_runtime_version(timeout: float | None = 10.0) -> str:
    """Return the installed ``node --version`` string, or ``"0.0.0"`` if absent."""
    try:
        returncode, stdout, _ = await run_command(["node", "--version"], timeout=timeout)
    except OSError:
        return "0.0.0"
    if returncode != 0 or not stdout:
        return "0.0.0"
    return stdout.splitlines()[0]


# ---------------------------------------------------------------------------
# Tool availability
# ---------------------------------------------------------------------------


async def is_tool_available(name: str, timeout: float | None = 10.0) -> bool:
    """Return ``True`` iff ``<name> --version`` runs and exits successfully.

    Output is captured and discarded.  A missing binary, a permission error,
    a non-zero exit or a timeout all count as "not available".
    """
    try:
        returncode, _, _ = await run_command([name, "--version"], timeout=timeout)
    except OSError:
        return False
    return returncode == 0


async def probe_environment(
    *,
    min_node_version: str = DEFAULT_MIN_NODE_VERSION,
    package_manager: PackageManager | None = None,
    environ: Mapping[str, str] | None = None,
    argv: Sequence[str] | None = None,
    timeout: float | None = 10.0,
) -> EnvironmentFacts:
    """Gather every environment fact the scaffolder needs, once.

    Args:
        min_node_version: Minimum supported Node.js version.
        package_manager: Skip detection and use this package manager.
        environ: Environment mapping used for detection.
        argv: Process arguments used for detection.
        timeout: Timeout for each trial invocation.
    """
    manager = package_manager or detect_package_manager(environ=environ, argv=argv)
    node_version = await detect_runtime_version(timeout=timeout)

    return EnvironmentFacts(
        runtime=validate_runtime_version(node_version, min_node_version),
        package_manager=manager,
        git_available=await is_tool_available("git", timeout=timeout),
        package_manager_available=await is_tool_available(manager.value, timeout=timeout),
    )
