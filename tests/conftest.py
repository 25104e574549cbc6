"""Shared pytest fixtures for the create-tsx-app test suite.

Provides reusable fixtures for:
- Scripted prompt answers (no real terminal input)
- A reporter that writes to an in-memory console
- Pre-probed environment facts
- A minimal on-disk template tree
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from create_tsx_app.config import EnvironmentFacts, PackageManager, VersionCheck
from create_tsx_app.errors import PromptCancelled
from create_tsx_app.prompts import Prompter
from create_tsx_app.reporter import Reporter

# ---------------------------------------------------------------------------
# Prompts & reporting
# ---------------------------------------------------------------------------


class ScriptedPrompter(Prompter):
    """Prompter that replays queued answers and records every question.

    Queue the ``PromptCancelled`` class itself to simulate the user aborting.
    """

    def __init__(self, answers: Sequence[Any] = (), console: Console | None = None) -> None:
        super().__init__(console or Console(file=io.StringIO()))
        self.answers = list(answers)
        self.asked: list[tuple[str, str, Any]] = []

    def _next(self, kind: str, message: str, default: Any) -> Any:
        self.asked.append((kind, message, default))
        if not self.answers:
            raise AssertionError(f"unexpected {kind} prompt: {message!r}")
        answer = self.answers.pop(0)
        if answer is PromptCancelled:
            raise PromptCancelled()
        return answer

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        while True:
            value = self._next("text", message, default)
            error = validate(value) if validate else None
            if error is None:
                return value
            self.console.print(error)

    def confirm(self, message: str, default: bool = True) -> bool:
        answer = self._next("confirm", message, default)
        return default if answer is None else answer

    def select(self, message: str, choices: Sequence[tuple[str, str]]) -> str:
        return self._next("select", message, [value for value, _ in choices])


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer (read it via ``console.file``)."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def reporter(console: Console) -> Reporter:
    return Reporter(console)


@pytest.fixture
def prompter_factory(console: Console) -> Callable[..., ScriptedPrompter]:
    """Build a ScriptedPrompter with the given answers.

    Usage:
        def test_x(prompter_factory):
            prompter = prompter_factory(["my-app", True, PromptCancelled])
    """
    def factory(answers: Sequence[Any] = ()) -> ScriptedPrompter:
        return ScriptedPrompter(answers, console=console)

    return factory


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture
def facts() -> EnvironmentFacts:
    """A healthy environment: Node 20, npm and git available."""
    return EnvironmentFacts(
        runtime=VersionCheck(current=(20, 11, 1), required=(18, 0, 0)),
        package_manager=PackageManager.NPM,
        git_available=True,
        package_manager_available=True,
    )


@pytest.fixture
def facts_without_git(facts: EnvironmentFacts) -> EnvironmentFacts:
    return facts.model_copy(update={"git_available": False})


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """A small template tree mirroring the bundled layout.

    ``basic/`` holds ``src/index.ts`` and a ``package.json`` stub; ``common/``
    holds every asset from the asset table plus a README with a placeholder.
    """
    root = tmp_path / "templates"
    basic = root / "basic"
    (basic / "src").mkdir(parents=True)
    (basic / "src" / "index.ts").write_text("console.log('hi');\n", encoding="utf-8")
    (basic / "package.json").write_text(
        json.dumps(
            {
                "name": "tsx-app",
                "version": "0.1.0",
                "type": "module",
                "scripts": {"build": "tsc"},
            },
            indent=2,
        ),
        encoding="utf-8",
    )

    common = root / "common"
    common.mkdir()
    for name in (
        "_gitignore",
        "_eslint.config.js",
        "_eslint.prettier.config.js",
        "_prettierrc.json",
        "_prettierignore",
        "_env",
        "tsconfig.json",
    ):
        (common / name).write_text(f"// {name}\n", encoding="utf-8")
    (common / "README.md").write_text(
        "# {{PROJECT_NAME}}\n\nRun {{PROJECT_NAME}} with tsx.\n", encoding="utf-8"
    )
    return root


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
