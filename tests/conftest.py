"""Shared fixtures: sample configurations, throwaway repositories, scripted prompts."""

from pathlib import Path

import pytest
from git import Repo

from commity.config.parser import parse_configuration_text
from commity.config.settings import Settings


SAMPLE_TEMPLATE = (
    "{{ .type }}{{ if .breaking_change }}!{{ end }}: {{ .header }}"
    "{{ if .body }}\n{{ .body }}{{ end }}"
)

SAMPLE_YAML = """\
entries:
  - type: Choice
    name: type
    label: Commit Type
    description: What are you committing?
    default: feat
    store: true
    choices:
      - value: feat
        label: A new feature
      - value: fix
        label: A bug fix
      - value: docs
        label: Documentation only
      - value: refactor
        label: Restructuring code
  - type: Text
    name: header
    label: Commit Header
    minLength: 10
    maxLength: 50
  - type: Text
    name: body
    label: Commit Body
    multiLine: true
  - type: Boolean
    name: breaking_change
    label: Breaking Change
    default: false
template: "{{ .type }}{{ if .breaking_change }}!{{ end }}: {{ .header }}{{ if .body }}\\n{{ .body }}{{ end }}"
overview: true
"""


class ScriptedPrompter:
    """Prompter that replays answers per field name.

    Each field maps to a list of answers consumed in order, so a test can feed
    an invalid answer followed by a valid one. A field without answers keeps
    its current value, like pressing Enter.
    """

    def __init__(self, answers=None, confirm_overview=True, abort_on=None):
        self.answers = {name: list(values) for name, values in (answers or {}).items()}
        self.confirm = confirm_overview
        self.abort_on = abort_on
        self.asked = []
        self.seeds = {}
        self.overview = None

    def _next(self, entry, current):
        self.asked.append(entry.name)
        self.seeds.setdefault(entry.name, current)
        if entry.name == self.abort_on:
            raise KeyboardInterrupt
        pending = self.answers.get(entry.name)
        if pending:
            return pending.pop(0)
        return current

    def confirm_overview(self, overview):
        self.overview = overview
        return self.confirm

    def ask_text(self, entry, current):
        return self._next(entry, current)

    def ask_multiline(self, entry, current):
        return self._next(entry, current)

    def ask_choice(self, entry, current):
        return self._next(entry, current)

    def ask_boolean(self, entry, current):
        return self._next(entry, current)


@pytest.fixture
def sample_yaml():
    return SAMPLE_YAML


@pytest.fixture
def sample_config():
    return parse_configuration_text(SAMPLE_YAML)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings whose config and data directories live under tmp_path."""
    monkeypatch.delenv("COMMITY_STORAGE__ENABLED", raising=False)
    monkeypatch.setenv("COMMITY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("COMMITY_DATA_DIR", str(tmp_path / "data"))
    return Settings()


def _init_repo(path: Path) -> Repo:
    path.mkdir(parents=True, exist_ok=True)
    repo = Repo.init(path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
    return repo


@pytest.fixture
def git_repo(tmp_path):
    """A repository with one commit and nothing staged."""
    repo = _init_repo(tmp_path / "repo")
    readme = Path(repo.working_dir) / "README.md"
    readme.write_text("# Test Project\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    return repo


@pytest.fixture
def staged_repo(git_repo):
    """A repository with one modified and one new file staged."""
    root = Path(git_repo.working_dir)
    (root / "README.md").write_text("# Test Project\n\nMore text.\n")
    (root / "app.py").write_text("print('hello')\n")
    git_repo.index.add(["README.md", "app.py"])
    return git_repo


@pytest.fixture
def configured_repo(staged_repo):
    """A staged repository carrying the sample .commity.yaml."""
    (Path(staged_repo.working_dir) / ".commity.yaml").write_text(SAMPLE_YAML)
    return staged_repo
