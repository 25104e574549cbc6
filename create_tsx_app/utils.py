"""Shared utility functions for create-tsx-app.

Provides async command execution, target-directory and package-name helpers,
and the shared Rich console used by every stage of the scaffolder.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from rich.console import Console

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously, capturing its output.

    Args:
        cmd: Program followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for the process to exit, however long it takes.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple with both streams decoded and
        stripped.  The child inherits the parent's environment.

    Raises:
        OSError: If the program cannot be started (e.g. it is not installed).
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Target directory / package name helpers
# ---------------------------------------------------------------------------

DEFAULT_PACKAGE_NAME = "tsx-app"

_TRAILING_SLASHES = re.compile(r"/+$")

_PACKAGE_NAME_PATTERN = re.compile(
    r"(?:@[a-z0-9\-*~][a-z0-9\-*._~]*/)?[a-z0-9\-~][a-z0-9\-._~]*"
)


def format_target_dir(target_dir: str) -> str:
    """Trim surrounding whitespace and trailing slashes from a target directory.

    Examples::

        format_target_dir("  my-app/ ")  -> "my-app"
        format_target_dir("my-app//")    -> "my-app"
    """
    result = target_dir.strip()
    # Stripping slashes can expose whitespace that was inside them.
    while True:
        stripped = _TRAILING_SLASHES.sub("", result).strip()
        if stripped == result:
            return result
        result = stripped


def is_valid_package_name(name: str) -> bool:
    """Return ``True`` if *name* is an acceptable ``package.json`` name."""
    return bool(_PACKAGE_NAME_PATTERN.fullmatch(name))


def to_valid_package_name(name: str) -> str:
    """Normalise an arbitrary directory name into a package name candidate.

    * Lowercases the input and trims surrounding whitespace.
    * Collapses whitespace runs to a single hyphen.
    * Drops one leading dot or underscore.
    * Replaces every run of characters outside ``[a-z0-9-~]`` with a hyphen.

    The result is a candidate only: an input that normalises to nothing
    (``""``, ``"."``, ``"_"``) yields ``""``, which
    :func:`is_valid_package_name` rejects.

    Examples::

        to_valid_package_name("My App")   -> "my-app"
        to_valid_package_name(".hidden")  -> "hidden"
    """
    result = name.strip().lower()
    result = re.sub(r"\s+", "-", result)
    result = re.sub(r"^[._]", "", result)
    result = re.sub(r"[^a-z0-9\-~]+", "-", result)
    return result

