"""Target directory checks.

Decides whether the project directory can be written to, and clears it when
the user has explicitly agreed to.  Existing git metadata is always kept.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from ..config import OverwriteMode
from ..errors import ConfigurationError
from ..prompts import Prompter

GIT_DIR = ".git"

_CHOICES: tuple[tuple[str, str], ...] = (
    (OverwriteMode.CANCEL.value, "Cancel operation"),
    (OverwriteMode.REMOVE.value, "Remove existing files and continue"),
    (OverwriteMode.IGNORE.value, "Ignore files and continue"),
)


def is_dir_empty(path: str | Path) -> bool:
    """Return ``True`` if *path* is missing, empty, or holds only ``.git``.

    A path that exists but is not a directory is never empty.
    """
    directory = Path(path)
    if not directory.is_dir():
        return not directory.exists()
    entries = [entry.name for entry in directory.iterdir()]
    return not entries or entries == [GIT_DIR]


def empty_dir(path: str | Path) -> None:
    """Remove everything inside *path* except ``.git``.

    A missing directory is a no-op, as is an entry that disappears while the
    directory is being cleared.
    """
    directory = Path(path)
    if not directory.exists():
        return
    for entry in directory.iterdir():
        if entry.name == GIT_DIR:
            continue
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry, ignore_errors=True)
        else:
            entry.unlink(missing_ok=True)


def resolve_overwrite(
    root: Path,
    target_dir: str,
    *,
    force: bool,
    prompter: Prompter,
) -> OverwriteMode:
    """Decide how to treat an existing, non-empty project directory.

    Returns :attr:`OverwriteMode.NONE` straight away when *root* is empty.
    With *force* set, a non-empty directory is cleared without asking.
    Otherwise the user picks one of :attr:`OverwriteMode.CANCEL`,
    :attr:`OverwriteMode.REMOVE` or :attr:`OverwriteMode.IGNORE`.

    Raises:
        ConfigurationError: If *root* exists but is not a directory.
    """
    if root.exists() and not root.is_dir():
        raise ConfigurationError(
            f'Target "{target_dir}" already exists and is not a directory.',
            hint="Choose a different target directory or remove the file.",
        )
    if is_dir_empty(root):
        return OverwriteMode.NONE
    if force:
        return OverwriteMode.REMOVE

    subject = "Current directory" if target_dir == "." else f'Target "{target_dir}"'
    answer = prompter.select(
        f"{subject} is not empty. Please choose how to proceed:", _CHOICES
    )
    return OverwriteMode(answer)
