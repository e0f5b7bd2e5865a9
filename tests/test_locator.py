"""
Tests for settings and configuration file lookup.

Run with:
    pytest tests/test_locator.py -v
"""

import pytest

from commity.config.locator import find_config_file
from commity.config.settings import Settings
from commity.exceptions import ConfigNotFoundError


class TestSettings:

    def test_directory_overrides(self, settings, tmp_path):
        assert settings.config_dir == tmp_path / "config"
        assert settings.data_dir == tmp_path / "data"
        assert settings.cache_dir == tmp_path / "data" / "cache"
        assert settings.global_config_path == tmp_path / "config" / "commity.yaml"
        assert settings.log_file == tmp_path / "data" / "commity.log"

    def test_defaults(self, settings):
        assert settings.config_filename == ".commity.yaml"
        assert settings.storage.enabled is True
        assert settings.ui.log_level == "WARNING"

    def test_nested_environment(self, settings, monkeypatch):
        monkeypatch.setenv("COMMITY_STORAGE__ENABLED", "false")
        monkeypatch.setenv("COMMITY_UI__LOG_LEVEL", "DEBUG")
        loaded = Settings()
        assert loaded.storage.enabled is False
        assert loaded.ui.log_level == "DEBUG"


class TestFindConfigFile:

    def test_in_start_directory(self, tmp_path, settings):
        project = tmp_path / "project"
        project.mkdir()
        (project / ".commity.yaml").write_text("entries: []\n")
        assert find_config_file(project, settings) == (project / ".commity.yaml").resolve()

    def test_walks_up_to_boundary(self, tmp_path, settings):
        project = tmp_path / "project"
        nested = project / "src" / "pkg"
        nested.mkdir(parents=True)
        (project / ".commity.yaml").write_text("entries: []\n")
        found = find_config_file(nested, settings, stop_at=project)
        assert found == (project / ".commity.yaml").resolve()

    def test_nearest_file_wins(self, tmp_path, settings):
        project = tmp_path / "project"
        nested = project / "sub"
        nested.mkdir(parents=True)
        (project / ".commity.yaml").write_text("outer\n")
        (nested / ".commity.yaml").write_text("inner\n")
        assert find_config_file(nested, settings, stop_at=project) == (nested / ".commity.yaml").resolve()

    def test_does_not_cross_boundary(self, tmp_path, settings):
        (tmp_path / ".commity.yaml").write_text("entries: []\n")
        project = tmp_path / "project"
        project.mkdir()
        with pytest.raises(ConfigNotFoundError):
            find_config_file(project, settings, stop_at=project)

    def test_global_fallback(self, tmp_path, settings):
        project = tmp_path / "project"
        project.mkdir()
        settings.config_dir.mkdir(parents=True)
        settings.global_config_path.write_text("entries: []\n")
        assert find_config_file(project, settings, stop_at=project) == settings.global_config_path

    def test_repository_file_beats_global(self, tmp_path, settings):
        project = tmp_path / "project"
        project.mkdir()
        (project / ".commity.yaml").write_text("entries: []\n")
        settings.config_dir.mkdir(parents=True)
        settings.global_config_path.write_text("entries: []\n")
        assert find_config_file(project, settings, stop_at=project) == (project / ".commity.yaml").resolve()

    def test_not_found_names_locations(self, tmp_path, settings):
        project = tmp_path / "project"
        project.mkdir()
        with pytest.raises(ConfigNotFoundError) as excinfo:
            find_config_file(project, settings, stop_at=project)
        assert ".commity.yaml" in str(excinfo.value)
        assert str(settings.global_config_path) in str(excinfo.value)
