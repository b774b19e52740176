import json
import sys

from git import Repo
from rich.console import Console
from typer.testing import CliRunner

from conftest import commit_all
from typo3_conformance import __version__
from typo3_conformance.cli.app import app


runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"v{__version__}" in result.output


class TestReportCommand:
    def test_good_report(self, extension, report_file):
        result = runner.invoke(app, ["report", str(extension), str(report_file), "18", "17", "16", "15"])
        assert result.exit_code == 0
        assert "Final report generated successfully" in result.output
        text = report_file.read_text(encoding="utf-8")
        assert "**Total Score: 76/100**" in text
        assert "### ✅ GOOD Conformance Level" in text

    def test_omitted_scores_use_defaults(self, extension, report_file):
        result = runner.invoke(app, ["report", str(extension), str(report_file)])
        assert result.exit_code == 0
        assert "**Total Score: 70/100**" in report_file.read_text(encoding="utf-8")

    def test_best_practices_option(self, extension, report_file):
        result = runner.invoke(
            app,
            ["report", str(extension), str(report_file), "20", "20", "20", "20", "--best-practices", "20"],
        )
        assert result.exit_code == 0
        assert "| **TOTAL** | **100/100** | ✅ Excellent |" in report_file.read_text(encoding="utf-8")

    def test_missing_summary_table_exits_zero(self, extension, tmp_path):
        report_file = tmp_path / "plain.md"
        report_file.write_text("# Report\n", encoding="utf-8")
        result = runner.invoke(app, ["report", str(extension), str(report_file), "18", "17", "16", "15"])
        assert result.exit_code == 0
        assert "Summary table not found" in result.output
        assert "## Quick Action Checklist" in report_file.read_text(encoding="utf-8")

    def test_missing_report_file(self, extension, tmp_path):
        result = runner.invoke(app, ["report", str(extension), str(tmp_path / "none.md")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_bracketed_path_is_printed_literally(self, extension, tmp_path, monkeypatch):
        monkeypatch.setattr(sys.modules["typo3_conformance.cli.app"], "console", Console(width=500))
        missing = tmp_path / "notes[draft]" / "report.md"
        result = runner.invoke(app, ["report", str(extension), str(missing)])
        assert result.exit_code == 1
        assert "notes[draft]" in result.output

    def test_missing_project_directory(self, tmp_path, report_file):
        result = runner.invoke(app, ["report", str(tmp_path / "missing"), str(report_file)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_config(self, extension, report_file, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("weights: 1\n", encoding="utf-8")
        result = runner.invoke(app, ["report", str(extension), str(report_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCheckCommand:
    def test_json_output(self, extension, tmp_path):
        output = tmp_path / "report.md"
        result = runner.invoke(app, ["check", str(extension), "--output", str(output), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["project"] == "blog_example"
        assert data["summary"]["total"] == 88
        assert data["summary"]["tier"] == "excellent"
        assert data["summary"]["passed"] is True
        assert [c["key"] for c in data["categories"]] == [
            "structure", "coding", "architecture", "testing", "best_practices",
        ]
        assert output.is_file()

    def test_rich_output(self, extension, tmp_path):
        result = runner.invoke(app, ["check", str(extension), "-o", str(tmp_path / "report.md")])
        assert result.exit_code == 0
        assert "Conformance Score" in result.output
        assert "Extension Architecture" in result.output

    def test_below_threshold_exits_one(self, make_extension, tmp_path):
        path = make_extension({
            "Configuration/Services.yaml": None,
            "Classes/Service/Legacy.php": "<?php\n$x = array();\n",
            "Tests/Functional/Domain/Repository/PostRepositoryTest.php": None,
            "Tests/Unit/Domain/Repository/PostRepositoryTest.php": None,
            "README.md": None,
            "LICENSE": None,
            ".github/workflows/ci.yml": None,
        })
        result = runner.invoke(app, ["check", str(path), "-o", str(tmp_path / "report.md"), "-f", "json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["summary"]["passed"] is False

    def test_not_an_extension(self, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path)])
        assert result.exit_code == 1
        assert "Not a TYPO3 extension" in result.output

    def test_unknown_format(self, extension):
        result = runner.invoke(app, ["check", str(extension), "--format", "xml"])
        assert result.exit_code == 1
        assert "Unknown format" in result.output


class TestBaselineCommand:
    def test_outside_git_passes(self, extension):
        result = runner.invoke(app, ["baseline", str(extension)])
        assert result.exit_code == 0
        assert "Not a git repository" in result.output

    def test_violation_exits_one(self, make_extension):
        path = make_extension({"Build/phpstan-baseline.neon": "parameters:\n    count: 1\n"})
        commit_all(Repo.init(path))
        (path / "Build/phpstan-baseline.neon").write_text("parameters:\n    count: 4\n", encoding="utf-8")
        result = runner.invoke(app, ["baseline", str(path)])
        assert result.exit_code == 1
        assert "BASELINE VIOLATION DETECTED" in result.output

    def test_unreadable_git_index_exits_zero(self, make_extension):
        path = make_extension({"Build/phpstan-baseline.neon": "parameters:\n    count: 1\n"})
        commit_all(Repo.init(path))
        (path / ".git" / "index").write_bytes(b"garbage")
        result = runner.invoke(app, ["baseline", str(path)])
        assert result.exit_code == 0
        assert "git diff failed - skipping baseline check" in result.output
