"""Interactive prompts.

Thin wrapper around :mod:`rich.prompt` that turns a user abort (Ctrl-C or
end-of-input) into :class:`~create_tsx_app.errors.PromptCancelled`, so every
caller sees cancellation as one distinct outcome rather than a value.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .errors import PromptCancelled
from .utils import console as default_console

T = TypeVar("T")

# A validator returns an error message, or None when the value is acceptable.
Validator = Callable[[str], "str | None"]


class Prompter:
    """Ask the user yes/no, free-text and single-choice questions."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def _ask(self, ask: Callable[[], T]) -> T:
        try:
            return ask()
        except (KeyboardInterrupt, EOFError) as exc:
            self.console.print()
            raise PromptCancelled() from exc

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str:
        """Ask for a line of text, re-asking until *validate* accepts it."""
        while True:
            answer = self._ask(
                lambda: Prompt.ask(message, default=default, console=self.console)
            )
            value = (answer or "").strip()
            error = validate(value) if validate else None
            if error is None:
                return value
            self.console.print(f"[bold red]{error}[/bold red]")

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question seeded with *default*."""
        return self._ask(
            lambda: Confirm.ask(message, default=default, console=self.console)
        )

    def select(self, message: str, choices: Sequence[tuple[str, str]]) -> str:
        """Ask the user to pick one of *choices* (``(value, label)`` pairs).

        Options are listed with 1-based numbers; the returned value is the
        ``value`` of the chosen pair.
        """
        self.console.print(message)
        for index, (_, label) in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]) {label}")
        numbers = [str(index) for index in range(1, len(choices) + 1)]
        picked = self._ask(
            lambda: Prompt.ask(
                "Select an option",
                choices=numbers,
                default=numbers[0],
                console=self.console,
            )
        )
        return choices[int(picked) - 1][0]
