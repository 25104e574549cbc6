"""Git repository initialisation for generated projects."""

from __future__ import annotations

from pathlib import Path

from .reporter import StepResult
from .utils import run_command

INITIAL_COMMIT_MESSAGE = "Initial commit"


class GitCommandError(Exception):
    """Raised when a git command exits with a non-zero code."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def _run_git(*args: str, cwd: Path) -> str:
    """Run ``git <args>`` in *cwd* and return stdout.

    Raises GitCommandError if the command cannot be started or fails.
    """
    cmd = ["git", *args]
    cmd_str = " ".join(cmd)
    try:
        returncode, stdout, stderr = await run_command(cmd, cwd=cwd)
    except OSError as exc:
        raise GitCommandError(f"Could not run {cmd_str}: {exc}", command=cmd_str) from exc

    if returncode != 0:
        raise GitCommandError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )
    return stdout


async def init_repository(root: Path) -> StepResult:
    """Create a git repository in *root* with a single initial commit.

    The three steps (init, stage everything, commit) run in order; the first
    failure stops the sequence and is reported, never raised.
    """
    try:
        await _run_git("init", cwd=root)
        await _run_git("add", ".", cwd=root)
        await _run_git("commit", "-m", INITIAL_COMMIT_MESSAGE, cwd=root)
    except GitCommandError as exc:
        return StepResult.failure(
            "git",
            f"Failed to initialize Git repository ({exc.command or 'git'}).",
            ["git init"],
        )
    return StepResult.success("git", "Git repository initialized with initial commit.")
