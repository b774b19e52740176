"""
Conformance runner - full assessment of one extension

Flow:
1. Load the extension (composer.json or ext_emconf.php required)
2. Write the report header with an empty summary table
3. Run every registered check and append its section
4. Derive the category scores from the check outcomes
5. Assemble the report (summary rows, assessment, checklist)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from typo3_conformance.checks import CheckRegistry, CheckResult
from typo3_conformance.config import ScoringConfig
from typo3_conformance.errors import ReportFileError
from typo3_conformance.infrastructure import best_practices_score
from typo3_conformance.project import ExtensionProject, load_project
from typo3_conformance.report import AssemblyResult, assemble_report
from typo3_conformance.report.markdown import render_check_result, render_report_header
from typo3_conformance.scorer import ScoreCard, build_score_card

logger = logging.getLogger(__name__)


REPORTS_DIR = ".conformance-reports"
BASELINE_CHECK = "phpstan_baseline"


@dataclass
class ConformanceRun:
    """
    Outcome of a full conformance run

    Attributes:
        project: Assessed extension
        results: Check results in execution order
        card: Category scores
        assembly: Report assembly outcome
        exit_threshold: Minimum total for a successful run
    """
    project: ExtensionProject
    results: list[CheckResult]
    card: ScoreCard
    assembly: AssemblyResult
    exit_threshold: int

    @property
    def report_path(self) -> Path:
        return self.assembly.report_path

    @property
    def baseline_passed(self) -> bool:
        return all(r.passed for r in self.results if r.key == BASELINE_CHECK)

    @property
    def passed(self) -> bool:
        return self.card.total >= self.exit_threshold and self.baseline_passed


def default_report_path(project: ExtensionProject, now: Optional[datetime] = None) -> Path:
    now = now or datetime.now(timezone.utc)
    return project.path / REPORTS_DIR / f"conformance_{now.strftime('%Y%m%d_%H%M%S')}.md"


def derive_scores(
    project: ExtensionProject,
    results: list[CheckResult],
    config: ScoringConfig,
) -> ScoreCard:
    """
    Map check outcomes to category scores

    A scored check contributes its category's pass_score or fail_score;
    Best Practices is the share of infrastructure probes present.
    """
    scores: dict[str, int] = {}
    for result in results:
        if result.category is None:
            continue
        category = config.category(result.category)
        scores[result.category] = category.pass_score if result.passed else category.fail_score

    best_practices = config.category("best_practices")
    scores["best_practices"] = best_practices_score(project, best_practices.max_score)

    return build_score_card(config=config, **scores)


def write_report_header(project: ExtensionProject, report_path: Path) -> None:
    try:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(render_report_header(project.name), encoding="utf-8")
    except OSError as e:
        raise ReportFileError(f"Cannot create report file {report_path}: {e}") from e


def append_sections(report_path: Path, results: list[CheckResult]) -> None:
    try:
        with report_path.open("a", encoding="utf-8") as f:
            for result in results:
                f.write("\n" + render_check_result(result) + "\n")
    except OSError as e:
        raise ReportFileError(f"Cannot write report file {report_path}: {e}") from e


def run_conformance(
    target: Union[str, Path],
    output: Optional[Path] = None,
    config: Optional[ScoringConfig] = None,
) -> ConformanceRun:
    """
    Run every check against an extension and write the full report

    Args:
        target: Extension directory
        output: Report path (default .conformance-reports/conformance_<timestamp>.md)
        config: Scoring configuration (defaults when omitted)

    Returns:
        ConformanceRun

    Raises:
        ConformanceError: Directory missing or not an extension
        ReportFileError: Report cannot be written
    """
    config = config or ScoringConfig()
    project = load_project(target, require_extension=True)
    report_path = output or default_report_path(project)

    logger.info(f"Checking {project.path}")
    write_report_header(project, report_path)

    results: list[CheckResult] = []
    for check in CheckRegistry.get_all():
        logger.debug(f"Running check {check.key}")
        results.append(check.run(project))
    append_sections(report_path, results)

    card = derive_scores(project, results, config)
    assembly = assemble_report(project, report_path, card)

    return ConformanceRun(
        project=project,
        results=results,
        card=card,
        assembly=assembly,
        exit_threshold=config.exit_threshold,
    )
