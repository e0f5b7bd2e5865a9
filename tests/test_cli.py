"""
Tests for the command line interface.

Run with:
    pytest tests/test_cli.py -v
"""

from pathlib import Path

import pytest
from git import Repo
from loguru import logger
from typer.testing import CliRunner

from commity import __version__
from commity.cli import EXIT_ABORTED, EXIT_ERROR, app, parse_overrides
from tests.conftest import ScriptedPrompter


runner = CliRunner()

ANSWERS = {"type": ["fix"], "header": ["correct off-by-one in parser"]}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()


@pytest.fixture
def use_prompter(monkeypatch, settings):
    """Replace the terminal prompter with a scripted one."""
    def install(prompter):
        monkeypatch.setattr("commity.form.collector.RichPrompter", lambda console: prompter)
        return prompter
    return install


def _invoke(*args):
    return runner.invoke(app, list(args))


class TestParseOverrides:

    def test_pairs(self):
        assert parse_overrides(["type=fix", "scope=cli"]) == {"type": "fix", "scope": "cli"}

    def test_value_may_contain_equals(self):
        assert parse_overrides(["header=a=b"]) == {"header": "a=b"}

    def test_empty_value(self):
        assert parse_overrides(["body="]) == {"body": ""}

    def test_none(self):
        assert parse_overrides(None) == {}


class TestCommit:

    def test_commit(self, configured_repo, use_prompter):
        use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", configured_repo.working_dir)

        assert result.exit_code == 0, result.output
        assert "Commit successful!" in result.output
        assert Repo(configured_repo.working_dir).head.commit.message == "fix: correct off-by-one in parser"

    def test_set_option(self, configured_repo, use_prompter):
        prompter = use_prompter(ScriptedPrompter({"header": ["correct off-by-one in parser"]}))
        result = _invoke("--repo", configured_repo.working_dir, "--set", "type=docs", "-s", "breaking_change=1")

        assert result.exit_code == 0, result.output
        assert prompter.seeds["type"] == "docs"
        assert Repo(configured_repo.working_dir).head.commit.message == "docs!: correct off-by-one in parser"

    def test_set_without_equals_is_usage_error(self, configured_repo, use_prompter):
        use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", configured_repo.working_dir, "--set", "type")
        assert result.exit_code == 2

    def test_dry_run(self, configured_repo, use_prompter):
        before = configured_repo.head.commit.hexsha
        use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", configured_repo.working_dir, "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Dry run complete" in result.output
        assert Repo(configured_repo.working_dir).head.commit.hexsha == before

    def test_no_store(self, configured_repo, use_prompter, settings):
        use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", configured_repo.working_dir, "--no-store")

        assert result.exit_code == 0, result.output
        assert not settings.cache_dir.exists() or not any(settings.cache_dir.iterdir())

    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output


class TestExitCodes:

    def test_abort_exits_130(self, configured_repo, use_prompter):
        use_prompter(ScriptedPrompter(confirm_overview=False))
        result = _invoke("--repo", configured_repo.working_dir)

        assert result.exit_code == EXIT_ABORTED
        assert "Commit canceled" in result.output
        assert "Error" not in result.output

    def test_interrupt_exits_130(self, configured_repo, use_prompter):
        use_prompter(ScriptedPrompter(ANSWERS, abort_on="header"))
        result = _invoke("--repo", configured_repo.working_dir)
        assert result.exit_code == EXIT_ABORTED

    def test_nothing_staged(self, git_repo, use_prompter):
        use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", git_repo.working_dir)

        assert result.exit_code == EXIT_ERROR
        assert "Nothing to commit" in result.output

    def test_not_a_repository(self, tmp_path, use_prompter):
        use_prompter(ScriptedPrompter(ANSWERS))
        plain = tmp_path / "plain"
        plain.mkdir()
        result = _invoke("--repo", str(plain))
        assert result.exit_code == EXIT_ERROR

    def test_unknown_entry_type(self, staged_repo, use_prompter):
        (Path(staged_repo.working_dir) / ".commity.yaml").write_text(
            "entries:\n  - type: Weird\n    name: x\ntemplate: x\n"
        )
        prompter = use_prompter(ScriptedPrompter(ANSWERS))
        result = _invoke("--repo", staged_repo.working_dir)

        assert result.exit_code == EXIT_ERROR
        assert "Weird" in result.output
        assert prompter.asked == []


class TestSubcommands:

    def test_show_config(self, configured_repo, settings):
        result = _invoke("show-config", "--repo", configured_repo.working_dir)
        assert result.exit_code == 0, result.output
        assert "breaking_change" in result.output

    def test_clear_cache(self, configured_repo, use_prompter, settings):
        use_prompter(ScriptedPrompter(ANSWERS))
        assert _invoke("--repo", configured_repo.working_dir).exit_code == 0

        result = _invoke("clear-cache", "--repo", configured_repo.working_dir)
        assert result.exit_code == 0, result.output
        assert "Remembered values cleared" in result.output

        result = _invoke("clear-cache", "--repo", configured_repo.working_dir)
        assert "No remembered values" in result.output
