"""Unit tests for the Rich-backed prompter (create_tsx_app.prompts)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from create_tsx_app.errors import PromptCancelled
from create_tsx_app.prompts import Prompter

pytestmark = pytest.mark.unit


@pytest.fixture
def prompter(console) -> Prompter:
    return Prompter(console)


class TestText:
    def test_returns_stripped_answer(self, prompter):
        with patch("create_tsx_app.prompts.Prompt.ask", return_value="  my-app  "):
            assert prompter.text("App name:", default="tsx-app") == "my-app"

    def test_passes_default(self, prompter):
        with patch("create_tsx_app.prompts.Prompt.ask", return_value="tsx-app") as ask:
            prompter.text("App name:", default="tsx-app")
        assert ask.call_args.kwargs["default"] == "tsx-app"

    def test_reasks_until_valid(self, prompter, console):
        def validate(value):
            return None if value == "ok" else "Invalid package name."

        with patch("create_tsx_app.prompts.Prompt.ask", side_effect=["Bad Name", "ok"]) as ask:
            assert prompter.text("Package name:", validate=validate) == "ok"
        assert ask.call_count == 2
        assert "Invalid package name." in console.file.getvalue()

    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    def test_abort_raises_cancelled(self, prompter, error):
        with patch("create_tsx_app.prompts.Prompt.ask", side_effect=error):
            with pytest.raises(PromptCancelled):
                prompter.text("App name:")


class TestConfirm:
    def test_returns_answer(self, prompter):
        with patch("create_tsx_app.prompts.Confirm.ask", return_value=False) as ask:
            assert prompter.confirm("Add ESLint for code linting?", default=True) is False
        assert ask.call_args.kwargs["default"] is True

    def test_abort_raises_cancelled(self, prompter):
        with patch("create_tsx_app.prompts.Confirm.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(PromptCancelled):
                prompter.confirm("Initialize Git repository?")


class TestSelect:
    CHOICES = [("cancel", "Cancel operation"), ("remove", "Remove"), ("ignore", "Ignore")]

    def test_maps_number_to_value(self, prompter):
        with patch("create_tsx_app.prompts.Prompt.ask", return_value="3"):
            assert prompter.select("Pick one", self.CHOICES) == "ignore"

    def test_lists_choices(self, prompter, console):
        with patch("create_tsx_app.prompts.Prompt.ask", return_value="1") as ask:
            prompter.select("Pick one", self.CHOICES)
        output = console.file.getvalue()
        assert "Pick one" in output
        assert "Cancel operation" in output
        assert ask.call_args.kwargs["choices"] == ["1", "2", "3"]
        assert ask.call_args.kwargs["default"] == "1"

    def test_abort_raises_cancelled(self, prompter):
        with patch("create_tsx_app.prompts.Prompt.ask", side_effect=EOFError):
            with pytest.raises(PromptCancelled):
                prompter.select("Pick one", self.CHOICES)
