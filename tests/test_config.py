"""Tests for configuration loading and threshold validation."""

import os

import pytest

from codeshape.config import AnalysisConfig, RuleSettings, load_config
from codeshape.exceptions import ConfigFileError, InvalidConfigError
from codeshape.models import Severity


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files and CODESHAPE_* variables out."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CODESHAPE_"):
            monkeypatch.delenv(key)


class TestRuleSettings:
    """Threshold lookup with fallback to defaults."""

    def test_unset_uses_default(self):
        assert RuleSettings().threshold("threshold", 10) == 10

    def test_valid_override(self):
        assert RuleSettings(thresholds={"threshold": 12}).threshold("threshold", 10) == 12

    @pytest.mark.parametrize("bad", [-1, "ten", True, float("nan"), 2.5])
    def test_invalid_falls_back(self, bad, caplog):
        assert RuleSettings(thresholds={"threshold": bad}).threshold("threshold", 10) == 10
        assert "Ignoring threshold" in caplog.text

    def test_whole_float_accepted_for_int(self):
        assert RuleSettings(thresholds={"threshold": 12.0}).threshold("threshold", 10) == 12

    def test_float_default_accepts_int(self):
        assert RuleSettings(thresholds={"similarity": 90}).threshold("similarity", 85.0) == 90

    def test_list_threshold(self):
        settings = RuleSettings(thresholds={"allowed": [0, 1, 60]})
        assert settings.threshold("allowed", [0, 1]) == [0, 1, 60]
        assert RuleSettings(thresholds={"allowed": 5}).threshold("allowed", [0, 1]) == [0, 1]

    def test_thresholds_are_read_only(self):
        settings = RuleSettings(thresholds={"threshold": 1})
        with pytest.raises(TypeError):
            settings.thresholds["threshold"] = 2

    def test_from_dict_collects_loose_keys(self):
        settings = RuleSettings.from_dict(
            "nesting-depth", {"threshold": 3, "exclude": "tests/*", "enabled": False}
        )
        assert settings.thresholds["threshold"] == 3
        assert settings.exclude == ("tests/*",)
        assert settings.enabled is False


class TestAnalysisConfig:
    """Validation and derived values."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.fail_severity is Severity.LOW
        assert config.is_enabled("magic-number")
        assert config.is_reported("magic-number")

    def test_invalid_workers(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(workers=0)

    def test_invalid_fail_on(self):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(fail_on="urgent")

    def test_disabled_by_rule_table(self):
        config = AnalysisConfig(rules={"todo-comment": RuleSettings(enabled=False)})
        assert not config.is_enabled("todo-comment")


class TestLoadConfig:
    """Merging files, environment and overrides."""

    def test_project_file(self, tmp_path):
        (tmp_path / "codeshape.toml").write_text(
            'fail_on = "high"\n\n[rules.cyclomatic-complexity]\nthreshold = 12\n'
        )
        config = load_config()
        assert config.fail_on == "high"
        assert config.rule("cyclomatic-complexity").threshold("threshold", 10) == 12

    def test_explicit_file_merges_rule_tables(self, tmp_path):
        (tmp_path / "codeshape.toml").write_text("[rules.class-length]\nmax_lines = 400\n")
        extra = tmp_path / "extra.toml"
        extra.write_text("[rules.class-length]\nmax_methods = 30\n")
        rule = load_config(config_file=extra).rule("class-length")
        assert rule.threshold("max_lines", 300) == 400
        assert rule.threshold("max_methods", 20) == 30

    def test_pyproject_tool_table(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool.codeshape]\ndont_report = ["todo-comment"]\n')
        assert load_config(config_file=pyproject).dont_report == ["todo-comment"]

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("CODESHAPE_WORKERS", "3")
        monkeypatch.setenv("CODESHAPE_DISABLED_ANALYZERS", "magic-number, todo-comment")
        config = load_config()
        assert config.workers == 3
        assert config.disabled_analyzers == ["magic-number", "todo-comment"]

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("CODESHAPE_WORKERS", "3")
        assert load_config(workers=5).workers == 5

    def test_none_overrides_ignored(self):
        assert load_config(workers=None).workers is None

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("CODESHAPE_ALLOW_HIDDEN_FILES", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError) as excinfo:
            load_config(config_file=tmp_path / "nope.toml")
        assert excinfo.value.to_dict()["code"] == "CS103"

    def test_invalid_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("fail_on = \n")
        with pytest.raises(ConfigFileError):
            load_config(config_file=bad)

    def test_unknown_key(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("colour = true\n")
        with pytest.raises(InvalidConfigError, match="colour"):
            load_config(config_file=bad)
