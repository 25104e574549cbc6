"""Exceptions raised by the scaffolding stages.

Only :mod:`create_tsx_app.pipeline` turns these into exit codes; every other
module raises them and lets them propagate.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class ConfigurationError(ScaffoldError):
    """Raised when the run cannot start (bad runtime, template, or tooling).

    ``hint`` carries remediation text shown to the user below the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        self.hint = hint
        super().__init__(message)


class CopyError(ScaffoldError):
    """Raised when a template entry cannot be copied into the project."""

    def __init__(self, entry: str, reason: str) -> None:
        self.entry = entry
        self.reason = reason
        super().__init__(f"Failed to copy {entry}: {reason}")


class PromptCancelled(ScaffoldError):
    """Raised when the user aborts an interactive prompt."""

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message)
