"""Unit tests for target directory checks (create_tsx_app.scaffolder.guard)."""

from __future__ import annotations

import pytest

from create_tsx_app.config import OverwriteMode
from create_tsx_app.errors import ConfigurationError
from create_tsx_app.scaffolder.guard import empty_dir, is_dir_empty, resolve_overwrite

pytestmark = pytest.mark.unit


class TestIsDirEmpty:
    def test_missing(self, tmp_path):
        assert is_dir_empty(tmp_path / "nope")

    def test_empty(self, tmp_path):
        assert is_dir_empty(tmp_path)

    def test_only_git(self, tmp_path):
        (tmp_path / ".git").mkdir()
        assert is_dir_empty(tmp_path)

    def test_with_file(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        assert not is_dir_empty(tmp_path)

    def test_git_and_file(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".env").write_text("A=1")
        assert not is_dir_empty(str(tmp_path))

    def test_file_is_not_empty(self, tmp_path):
        target = tmp_path / "my-app"
        target.write_text("x")
        assert not is_dir_empty(target)


class TestEmptyDir:
    def test_missing_is_noop(self, tmp_path):
        empty_dir(tmp_path / "nope")
        assert not (tmp_path / "nope").exists()

    def test_removes_everything_but_git(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (tmp_path / "src" / "deep").mkdir(parents=True)
        (tmp_path / "src" / "deep" / "a.ts").write_text("x")
        (tmp_path / "package.json").write_text("{}")

        empty_dir(tmp_path)

        assert [entry.name for entry in tmp_path.iterdir()] == [".git"]
        assert (tmp_path / ".git" / "HEAD").is_file()
        assert is_dir_empty(tmp_path)

    def test_symlink_removed_not_followed(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")
        project = tmp_path / "project"
        project.mkdir()
        (project / "link").symlink_to(outside, target_is_directory=True)

        empty_dir(project)

        assert not (project / "link").exists()
        assert (outside / "keep.txt").is_file()


class TestResolveOverwrite:
    def test_empty_directory_needs_no_decision(self, tmp_path, prompter_factory):
        prompter = prompter_factory()
        mode = resolve_overwrite(tmp_path, "x", force=False, prompter=prompter)
        assert mode is OverwriteMode.NONE
        assert prompter.asked == []

    def test_force_removes_without_asking(self, tmp_path, prompter_factory):
        (tmp_path / "a").write_text("a")
        prompter = prompter_factory()
        mode = resolve_overwrite(tmp_path, "x", force=True, prompter=prompter)
        assert mode is OverwriteMode.REMOVE
        assert prompter.asked == []

    @pytest.mark.parametrize(
        "answer, expected",
        [
            ("cancel", OverwriteMode.CANCEL),
            ("remove", OverwriteMode.REMOVE),
            ("ignore", OverwriteMode.IGNORE),
        ],
    )
    def test_user_choice(self, tmp_path, prompter_factory, answer, expected):
        (tmp_path / "a").write_text("a")
        prompter = prompter_factory([answer])
        mode = resolve_overwrite(tmp_path, "my-app", force=False, prompter=prompter)
        assert mode is expected
        kind, message, values = prompter.asked[0]
        assert kind == "select"
        assert message == 'Target "my-app" is not empty. Please choose how to proceed:'
        assert values == ["cancel", "remove", "ignore"]

    def test_current_directory_wording(self, tmp_path, prompter_factory):
        (tmp_path / "a").write_text("a")
        prompter = prompter_factory(["ignore"])
        resolve_overwrite(tmp_path, ".", force=False, prompter=prompter)
        assert prompter.asked[0][1].startswith("Current directory is not empty.")

    def test_existing_file_rejected(self, tmp_path, prompter_factory):
        target = tmp_path / "my-app"
        target.write_text("not a directory")
        prompter = prompter_factory()
        with pytest.raises(ConfigurationError, match='"my-app" already exists') as info:
            resolve_overwrite(target, "my-app", force=True, prompter=prompter)
        assert info.value.hint
        assert prompter.asked == []
        assert target.read_text() == "not a directory"
