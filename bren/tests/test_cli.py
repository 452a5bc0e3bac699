"""Tests for CLI commands."""

import stat
from pathlib import Path

import pytest
from click.testing import CliRunner

from bren import __version__
from bren.cli import cli
from bren.processors.tree_walker import TreeWalker


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


def make_tree() -> None:
    Path("photos/sub").mkdir(parents=True)
    Path("photos/photo.jpg").write_text("jpg")
    Path("photos/.bashrc").write_text("rc")
    Path("photos/sub/b.txt").write_text("b")


class TestRenameCommand:
    """Tests for the rename command."""

    def test_renames_with_counter(self, runner: CliRunner) -> None:
        """Test the default counter strategy end to end."""
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img"])

            assert result.exit_code == 0, result.output
            assert Path("photos/img(1)").read_text() == "rc"
            assert Path("photos/img(2).jpg").read_text() == "jpg"
            assert Path("photos/sub/img(3).txt").read_text() == "b"
            assert "Renamed 3 of 3 file(s)" in result.output

    def test_top_only(self, runner: CliRunner) -> None:
        """Test that --top-only leaves subdirectories alone."""
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img", "--top-only", "--strip-extension"])

            assert result.exit_code == 0, result.output
            assert Path("photos/img(2)").read_text() == "jpg"
            assert Path("photos/sub/b.txt").exists()

    def test_dry_run_changes_nothing(self, runner: CliRunner) -> None:
        """Test that --dry-run prints the plan and leaves files in place."""
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img", "--dry-run"])

            assert result.exit_code == 0, result.output
            assert "Dry run" in result.output
            assert "Would rename 3 of 3 file(s)" in result.output
            assert Path("photos/photo.jpg").exists()
            assert not Path("photos/img(2).jpg").exists()

    def test_collision_is_reported_not_fatal(self, runner: CliRunner) -> None:
        """Test that a skipped file does not change the exit status."""
        with runner.isolated_filesystem():
            Path("photos").mkdir()
            Path("photos/aaa.jpg").write_text("new")
            Path("photos/img(1).jpg").write_text("existing")

            result = runner.invoke(cli, ["rename", "photos", "-b", "img"])

            assert result.exit_code == 0, result.output
            assert Path("photos/aaa.jpg").read_text() == "new"
            assert "skipped 1" in result.output

    def test_sha256_without_basename(self, runner: CliRunner) -> None:
        """Test that the content hash strategy needs no basename."""
        with runner.isolated_filesystem():
            Path("files").mkdir()
            Path("files/doc.txt").write_text("hello")

            result = runner.invoke(cli, ["rename", "files", "--sha256"])

            assert result.exit_code == 0, result.output
            digest = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
            assert Path(f"files/{digest}.txt").read_text() == "hello"

    def test_hook_runs_for_each_file(self, runner: CliRunner) -> None:
        """Test that the hook receives every new path."""
        with runner.isolated_filesystem():
            Path("files").mkdir()
            Path("files/a.txt").touch()
            hook = Path("hook.sh")
            hook.write_text('#!/bin/sh\necho "$1" >> hook.log\n')
            hook.chmod(hook.stat().st_mode | stat.S_IXUSR)

            result = runner.invoke(cli, ["rename", "files", "-b", "doc", "-c", "hook.sh"])

            assert result.exit_code == 0, result.output
            assert Path("hook.log").read_text().strip() == str(Path("files/doc(1).txt").absolute())

    def test_progress_bar(self, runner: CliRunner) -> None:
        """Test that --progress renames the same files as a plain run."""
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img", "--progress"])

            assert result.exit_code == 0, result.output
            assert Path("photos/img(2).jpg").read_text() == "jpg"
            assert Path("photos/sub/img(3).txt").read_text() == "b"
            assert "Renamed 3 of 3 file(s)" in result.output

    def test_interrupt_keeps_completed_moves(self, runner: CliRunner, monkeypatch) -> None:
        """Test that Ctrl-C exits with 130 and leaves finished renames in place."""
        real_process_file = TreeWalker.process_file
        calls = []

        def interrupted_process_file(self, path, counters, planned=None):
            calls.append(path)
            if len(calls) > 1:
                raise KeyboardInterrupt
            return real_process_file(self, path, counters, planned)

        monkeypatch.setattr(TreeWalker, "process_file", interrupted_process_file)

        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img"])

            assert result.exit_code == 130
            assert "Interrupted" in result.output
            assert Path("photos/img(1)").read_text() == "rc"
            assert Path("photos/photo.jpg").exists()
            assert Path("photos/sub/b.txt").exists()


class TestConfigurationErrors:
    """Tests for errors reported before any file is touched."""

    def test_missing_basename(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos"])

            assert result.exit_code != 0
            assert "basename is required" in result.output
            assert Path("photos/photo.jpg").exists()

    def test_conflicting_strategies(self, runner: CliRunner) -> None:
        """Test that a second strategy flag is an error, not an override."""
        with runner.isolated_filesystem():
            make_tree()

            result = runner.invoke(cli, ["rename", "photos", "-b", "img", "--random", "--date"])

            assert result.exit_code != 0
            assert "Only one naming strategy can be selected" in result.output
            assert Path("photos/photo.jpg").exists()

    def test_missing_path(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["rename", "nowhere", "-b", "img"])

            assert result.exit_code != 0
            assert "does not exist" in result.output

    def test_path_is_a_file(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("file.txt").touch()

            result = runner.invoke(cli, ["rename", "file.txt", "-b", "img"])

            assert result.exit_code != 0
            assert Path("file.txt").exists()

    def test_hook_not_executable(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            make_tree()
            Path("hook.sh").write_text("#!/bin/sh\n")
            Path("hook.sh").chmod(0o644)

            result = runner.invoke(cli, ["rename", "photos", "-b", "img", "-c", "hook.sh"])

            assert result.exit_code != 0
            assert "not executable" in result.output
            assert Path("photos/photo.jpg").exists()


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_strategies(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["rename", "--help"])

        assert result.exit_code == 0
        for flag in ("--original", "--random", "--date", "--sha256", "--dry-run", "--top-only"):
            assert flag in result.output
