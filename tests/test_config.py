# tests/test_config.py
"""Tests for settings loading and run option merging."""

from datetime import date
from pathlib import Path

import pytest

from docindex.core.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_yaml,
)
from docindex.core.paths import DocIndexPaths
from docindex.indexing.config import (
    DEFAULT_BATCH_SIZE,
    IndexerSettings,
    RunOptions,
    build_run_options,
    load_settings,
)

pytestmark = pytest.mark.tier1

SETTINGS_YAML = """
state_dir: {state_dir}

defaults:
  incremental: true
  batch_size: 50

sources:
  - name: handbook
    type: File
    path: ./docs
    categories: [runbooks]
  - name: ops-wiki
    type: wiki
    base_url: https://wiki.example.com
    auth: {{token_env: WIKI_TOKEN}}
    enabled: false
    metadata: {{space_key: OPS}}
"""


def _write(tmp_path: Path, text: str, name: str = "docindex.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadSettings:
    """Tests for load_settings."""

    def test_loads_sources_and_defaults(self, tmp_path):
        path = _write(tmp_path, SETTINGS_YAML.format(state_dir=tmp_path / "state"))

        settings = load_settings(path)

        assert settings.resolved_state_dir() == tmp_path / "state"
        assert [s.name for s in settings.sources] == ["handbook", "ops-wiki"]
        assert settings.sources[0].type == "file"
        assert settings.sources[1].enabled is False
        assert settings.get_source("ops-wiki").auth.token_env == "WIKI_TOKEN"
        assert settings.get_source("nope") is None
        assert settings.defaults.incremental is True
        assert settings.defaults.batch_size == 50

    def test_default_path_is_workspace_config(self, tmp_path):
        DocIndexPaths.workspace().mkdir(parents=True)
        _write(DocIndexPaths.workspace(), "sources: []\n", name="config.yaml")

        settings = load_settings()

        assert settings.sources == []
        assert settings.resolved_state_dir() == DocIndexPaths.state_dir()

    def test_empty_file_gives_defaults(self, tmp_path):
        settings = load_settings(_write(tmp_path, ""))

        assert settings == IndexerSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError) as exc_info:
            load_settings(tmp_path / "missing.yaml")

        assert "missing.yaml" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_settings(_write(tmp_path, "sources: [unclosed\n"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_yaml(_write(tmp_path, "- a\n- b\n"))

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ConfigError):
            load_yaml(tmp_path)

    @pytest.mark.parametrize(
        "text, needle",
        [
            (
                "sources:\n  - {name: a, type: file}\n  - {name: a, type: web}\n",
                "duplicate source name",
            ),
            ("unexpected: true\n", "unexpected"),
            ("defaults: {batch_size: 0}\n", "batch_size"),
            ("sources:\n  - {name: a, type: file, timeout_s: 0}\n", "timeout_s"),
            ("sources:\n  - {type: file}\n", "name"),
        ],
    )
    def test_validation_errors(self, tmp_path, text, needle):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_settings(_write(tmp_path, text))

        assert needle in str(exc_info.value)


class TestRunOptions:
    """Tests for RunOptions and build_run_options."""

    def test_defaults(self):
        options = RunOptions()

        assert options.batch_size == DEFAULT_BATCH_SIZE
        assert options.parallel is False
        assert options.incremental is False
        assert options.dry_run is False
        assert options.sources == []

    def test_unknown_keys_are_ignored(self):
        options = RunOptions.model_validate({"parallel": True, "colour": "blue"})

        assert options.parallel is True

    def test_comma_separated_sources(self):
        assert RunOptions(sources="handbook, wiki,,git").sources == ["handbook", "wiki", "git"]

    def test_since_accepts_dates(self):
        assert RunOptions(since=date(2024, 1, 31)).since == "2024-01-31"
        assert RunOptions(since=" 2024-01-31 ").since == "2024-01-31"

    def test_invalid_since_is_a_validation_error(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            build_run_options(IndexerSettings(), since="2024-13-45")

        assert "since" in str(exc_info.value)

    def test_since_from_overrides(self):
        assert build_run_options(IndexerSettings(), since="2024-05-01").since == "2024-05-01"

    def test_overrides_win_over_settings_defaults(self):
        settings = IndexerSettings(defaults=RunOptions(incremental=True, batch_size=50))

        options = build_run_options(settings, batch_size=10, parallel=True)

        assert options.batch_size == 10
        assert options.parallel is True
        assert options.incremental is True

    def test_none_overrides_are_not_given(self):
        settings = IndexerSettings(defaults=RunOptions(incremental=True, batch_size=50))

        options = build_run_options(settings, incremental=None, batch_size=None)

        assert options.incremental is True
        assert options.batch_size == 50

    def test_explicit_false_overrides(self):
        settings = IndexerSettings(defaults=RunOptions(incremental=True))

        assert build_run_options(settings, incremental=False).incremental is False
