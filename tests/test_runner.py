from datetime import datetime, timezone

import pytest
from git import Repo

from conftest import commit_all
from typo3_conformance.config import ScoringConfig, load_config
from typo3_conformance.errors import ConformanceError, NotAnExtensionError
from typo3_conformance.project import load_project
from typo3_conformance.runner import REPORTS_DIR, default_report_path, run_conformance


def test_exemplary_extension(extension, tmp_path):
    output = tmp_path / "out" / "report.md"
    run = run_conformance(extension, output=output)

    assert run.report_path == output
    assert run.card.scores == {
        "structure": 18,
        "coding": 18,
        "architecture": 18,
        "testing": 16,
        "best_practices": 18,
    }
    assert run.card.total == 88
    assert run.card.tier.key == "excellent"
    assert run.assembly.summary_updated
    assert run.baseline_passed
    assert run.passed

    text = output.read_text(encoding="utf-8")
    assert text.startswith("# TYPO3 Extension Conformance Report\n")
    assert "**Project:** blog_example" in text
    assert "| Best Practices | 18/20 | ✅ Passed |" in text
    assert "| **TOTAL** | **88/100** | ✅ Excellent |" in text
    for heading in (
        "## 1. File Structure Conformance",
        "## Documentation Conformance",
        "## 2. Coding Standards Conformance",
        "## 3. PHP Architecture Conformance",
        "## 4. Testing Standards Conformance",
        "## PHPStan Baseline Hygiene",
        "## 5. Best Practices Assessment",
        "## Overall Assessment",
        "## Quick Action Checklist",
    ):
        assert heading in text


def test_failing_checks_lower_scores(make_extension, tmp_path):
    path = make_extension({
        "Configuration/Services.yaml": None,
        "Classes/Service/Legacy.php": "<?php\n$x = array();\n",
        "README.md": None,
        "LICENSE": None,
        ".github/workflows/ci.yml": None,
    })
    run = run_conformance(path, output=tmp_path / "report.md")
    assert run.card.score("coding") == 12
    assert run.card.score("architecture") == 10
    assert run.card.score("best_practices") == 10
    assert run.card.total == 66
    assert run.card.tier.key == "good"
    assert run.passed
    assert "Add Configuration/Services.yaml with DI configuration" in run.assembly.checklist.high


def test_baseline_violation_fails_run(make_extension, tmp_path):
    path = make_extension({"Build/phpstan-baseline.neon": "parameters:\n    count: 1\n"})
    commit_all(Repo.init(path))
    (path / "Build/phpstan-baseline.neon").write_text("parameters:\n    count: 2\n", encoding="utf-8")

    run = run_conformance(path, output=tmp_path / "report.md")
    assert run.card.total >= run.exit_threshold
    assert not run.baseline_passed
    assert not run.passed


def test_exit_threshold_from_config(make_extension, tmp_path):
    path = make_extension({".typo3-conformance.yaml": "exit_threshold: 95\n"})
    config = load_config(project_dir=path)
    run = run_conformance(path, output=tmp_path / "report.md", config=config)
    assert run.exit_threshold == 95
    assert not run.passed


def test_default_report_location(extension):
    run = run_conformance(extension)
    assert run.report_path.parent == extension.resolve() / REPORTS_DIR
    assert run.report_path.name.startswith("conformance_")
    assert run.report_path.is_file()


def test_default_report_path_format(extension):
    project = load_project(extension)
    now = datetime(2024, 5, 1, 13, 4, 5, tzinfo=timezone.utc)
    assert default_report_path(project, now).name == "conformance_20240501_130405.md"


def test_not_an_extension(tmp_path):
    with pytest.raises(NotAnExtensionError):
        run_conformance(tmp_path)


def test_missing_directory(tmp_path):
    with pytest.raises(ConformanceError, match="not found"):
        run_conformance(tmp_path / "missing", config=ScoringConfig())
