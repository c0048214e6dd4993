"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from codeshape import __version__
from codeshape.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def project(write_tree):
    return write_tree(
        {
            "src/app.py": "# def compute(a, b):\n#     total = a + b\n#     return total\nvalue = 1\n",
            "src/clean.py": "value = 1\n",
        }
    )


class TestRulesCommand:
    def test_json_lists_every_analyzer(self):
        result = runner.invoke(app, ["rules", "--json"])
        assert result.exit_code == 0
        ids = [item["id"] for item in json.loads(result.stdout)]
        assert "cyclomatic-complexity" in ids
        assert "duplicate-code" in ids
        assert len(ids) == len(set(ids))

    def test_table(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "Analyzers" in result.stdout


class TestCheckCommand:
    """Exit codes and output modes of ``codeshape check``."""

    def test_failing_run(self, project):
        result = runner.invoke(app, ["check", str(project / "src"), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["summary"]["failed"] is True

    def test_clean_file(self, project):
        result = runner.invoke(app, ["check", str(project / "src" / "clean.py")])
        assert result.exit_code == 0
        assert "Summary" in result.stdout

    def test_fail_on_high(self, project):
        result = runner.invoke(app, ["check", str(project / "src"), "--fail-on", "HIGH"])
        assert result.exit_code == 0

    def test_disable(self, project):
        result = runner.invoke(
            app, ["check", str(project / "src"), "--json", "-d", "commented-code"]
        )
        assert result.exit_code == 0
        analyzers = [r["analyzer"] for r in json.loads(result.stdout)["results"]]
        assert "commented-code" not in analyzers

    def test_unknown_analyzer_is_usage_error(self, project):
        result = runner.invoke(app, ["check", str(project / "src"), "-d", "no-such-rule"])
        assert result.exit_code == 2

    def test_error_as_json(self, project):
        result = runner.invoke(
            app, ["check", str(project / "src"), "--json", "-d", "no-such-rule"]
        )
        assert result.exit_code == 2
        error = json.loads(result.stdout)["error"]
        assert error["code"] == "CS202"
        assert error["details"]["analyzer"] == "no-such-rule"

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path / "missing")])
        assert result.exit_code == 2

    def test_config_file(self, project, tmp_path):
        config = tmp_path / "strict.toml"
        config.write_text('dont_report = ["commented-code"]\n')
        result = runner.invoke(app, ["check", str(project / "src"), "-c", str(config)])
        assert result.exit_code == 0


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
