"""
Report assembler - completes a conformance report with scores and advice

Steps:
1. Upsert one summary row per category and the TOTAL row
2. Append the Best Practices Assessment (infrastructure probes)
3. Append the Overall Assessment narrative of the total's tier
4. Append the Quick Action Checklist (score thresholds, code searches,
   configuration probes)
5. Append the resource links and write the report once

A report without a summary table is not an error: the trailing sections are
still appended and the result records that the summary was not updated.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from typo3_conformance.checks.architecture import GLOBALS_ACCESS, MAKE_INSTANCE, SERVICES_YAML
from typo3_conformance.errors import ReportFileError
from typo3_conformance.infrastructure import (
    GITHUB_WORKFLOWS,
    PHP_CS_FIXER_CONFIGS,
    PHPSTAN_CONFIGS,
    probes_by_group,
)
from typo3_conformance.project import ExtensionProject
from typo3_conformance.report.document import ReportDocument, SummaryRow
from typo3_conformance.report.markdown import SECTION_SEPARATOR
from typo3_conformance.scorer import ScoreCard

logger = logging.getLogger(__name__)


# ============================================================
# Narrative templates
# ============================================================

TIER_NARRATIVES: dict[str, str] = {
    "excellent": """\
### ✅ EXCELLENT Conformance Level

Your TYPO3 extension demonstrates strong adherence to official standards and best practices.

**Strengths:**
- Well-structured architecture following TYPO3 conventions
- Modern PHP patterns with dependency injection
- Good code quality and testing coverage
- Proper documentation and infrastructure

**Minor Improvements:**
- Continue maintaining high standards
- Keep dependencies updated
- Monitor code coverage trends""",
    "good": """\
### ✅ GOOD Conformance Level

Your TYPO3 extension follows most standards with some areas for improvement.

**Next Steps:**
1. Address critical issues identified above
2. Improve test coverage
3. Add missing configuration files
4. Update deprecated patterns

**Timeline:** 2-4 weeks for improvements""",
    "fair": """\
### ⚠️  FAIR Conformance Level

Your TYPO3 extension requires significant improvements to meet TYPO3 standards.

**Priority Actions:**
1. Fix critical file structure issues
2. Migrate deprecated patterns (GeneralUtility::makeInstance, $GLOBALS)
3. Add comprehensive testing infrastructure
4. Improve code quality (strict types, PHPDoc, PSR-12)
5. Add project infrastructure (CI/CD, quality tools)

**Timeline:** 4-8 weeks for comprehensive improvements""",
}

RESOURCES: list[tuple[str, str]] = [
    ("TYPO3 Extension Architecture", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/ExtensionArchitecture/"),
    ("Coding Guidelines", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/CodingGuidelines/"),
    ("Dependency Injection", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/ApiOverview/DependencyInjection/"),
    ("Testing Documentation", "https://docs.typo3.org/m/typo3/reference-coreapi/main/en-us/Testing/"),
    ("Tea Extension (Best Practice)", "https://github.com/TYPO3BestPractices/tea"),
]

FOOTER = "*Report generated by TYPO3 Extension Conformance Checker*"

NO_OPEN_ITEMS = "- ✅ No open items"

# Checklist items
ITEM_STRUCTURE = "Fix critical file structure issues (missing required files/directories)"
ITEM_MAKE_INSTANCE = "Migrate GeneralUtility::makeInstance to constructor injection"
ITEM_GLOBALS = "Remove $GLOBALS access, use dependency injection"
ITEM_SERVICES = "Add Configuration/Services.yaml with DI configuration"
ITEM_STRICT_TYPES = "Add declare(strict_types=1) to all PHP files"
ITEM_ARRAY_SYNTAX = "Replace array() with [] short syntax"
ITEM_UNIT_TESTS = "Add unit tests for untested classes"
ITEM_FUNCTIONAL_TESTS = "Add functional tests for repositories"
ITEM_CS_FIXER = "Configure PHP CS Fixer"
ITEM_PHPSTAN = "Configure PHPStan for static analysis"
ITEM_CI = "Set up CI/CD pipeline (GitHub Actions)"
ITEM_PHPDOC = "Improve PHPDoc comments coverage"
ITEM_EDITORCONFIG = "Add .editorconfig for consistent formatting"


# ============================================================
# Data models
# ============================================================

@dataclass
class ActionChecklist:
    """Quick action items by priority."""
    high: list[str] = field(default_factory=list)
    medium: list[str] = field(default_factory=list)
    low: list[str] = field(default_factory=list)

    @property
    def items(self) -> list[str]:
        return self.high + self.medium + self.low


@dataclass
class AssemblyResult:
    """
    Outcome of a report assembly

    Attributes:
        report_path: Report written
        total: Total score
        tier: Tier key of the total
        summary_updated: False when the report had no summary table
        checklist: Quick action items written
    """
    report_path: Path
    total: int
    tier: str
    summary_updated: bool
    checklist: ActionChecklist


# ============================================================
# Section builders
# ============================================================

def build_summary_rows(card: ScoreCard) -> list[SummaryRow]:
    """One row per category plus the TOTAL row."""
    rows = [
        SummaryRow(category.label, f"{score}/{category.max_score}", card.status_glyph(category.key))
        for category, score in card.rows()
    ]
    rows.append(SummaryRow(
        "**TOTAL**",
        f"**{card.total}/{card.max_total}**",
        card.tier.glyph,
    ))
    return rows


def build_best_practices_section(project: ExtensionProject) -> str:
    lines = [SECTION_SEPARATOR, "", "## 5. Best Practices Assessment"]
    for group, probes in probes_by_group().items():
        lines.extend(["", f"### {group}"])
        lines.extend(f"- **{p.label}:** {p.status(project)}" for p in probes)
    return "\n".join(lines)


def build_overall_assessment(card: ScoreCard) -> str:
    tier = card.tier
    narrative = TIER_NARRATIVES.get(tier.key, f"### {tier.glyph} {tier.label} Conformance Level")
    return "\n".join([
        SECTION_SEPARATOR,
        "",
        "## Overall Assessment",
        "",
        f"**Total Score: {card.total}/{card.max_total}**",
        "",
        narrative,
    ])


def build_checklist(project: ExtensionProject, card: ScoreCard) -> ActionChecklist:
    """Collect the quick action items for an extension and its scores."""
    checklist = ActionChecklist()

    if not card.passed("structure"):
        checklist.high.append(ITEM_STRUCTURE)
    if project.contains("Classes", MAKE_INSTANCE):
        checklist.high.append(ITEM_MAKE_INSTANCE)
    if project.contains("Classes", GLOBALS_ACCESS):
        checklist.high.append(ITEM_GLOBALS)
    if not project.has_file(SERVICES_YAML):
        checklist.high.append(ITEM_SERVICES)

    if not card.passed("coding"):
        checklist.medium.append(ITEM_STRICT_TYPES)
        checklist.medium.append(ITEM_ARRAY_SYNTAX)
    if not card.passed("testing"):
        checklist.medium.append(ITEM_UNIT_TESTS)
    if not project.has_dir("Tests/Functional"):
        checklist.medium.append(ITEM_FUNCTIONAL_TESTS)

    if not project.has_file(*PHP_CS_FIXER_CONFIGS):
        checklist.low.append(ITEM_CS_FIXER)
    if not project.has_file(*PHPSTAN_CONFIGS):
        checklist.low.append(ITEM_PHPSTAN)
    if not project.has_dir(GITHUB_WORKFLOWS):
        checklist.low.append(ITEM_CI)
    checklist.low.append(ITEM_PHPDOC)
    if not project.has_file(".editorconfig"):
        checklist.low.append(ITEM_EDITORCONFIG)

    return checklist


def render_checklist(checklist: ActionChecklist) -> str:
    lines = [SECTION_SEPARATOR, "", "## Quick Action Checklist"]
    groups = [
        ("High Priority (Fix Now)", checklist.high),
        ("Medium Priority (Fix Soon)", checklist.medium),
        ("Low Priority (Improve When Possible)", checklist.low),
    ]
    for heading, items in groups:
        lines.extend(["", f"### {heading}"])
        if items:
            lines.extend(f"- [ ] {item}" for item in items)
        else:
            lines.append(NO_OPEN_ITEMS)
    return "\n".join(lines)


def build_resources_section() -> str:
    lines = [SECTION_SEPARATOR, "", "## Resources", ""]
    lines.extend(f"- **{title}:** {url}" for title, url in RESOURCES)
    lines.extend(["", SECTION_SEPARATOR, "", FOOTER])
    return "\n".join(lines)


# ============================================================
# Assembly
# ============================================================

def assemble_report(
    project: ExtensionProject,
    report_path: Path,
    card: ScoreCard,
) -> AssemblyResult:
    """
    Complete a report file in place

    Args:
        project: Extension being assessed
        report_path: Existing markdown report
        card: Category scores

    Returns:
        AssemblyResult

    Raises:
        ReportFileError: Report missing, unreadable or unwritable
    """
    if not report_path.is_file():
        raise ReportFileError(f"Report file not found: {report_path}")
    try:
        # newline="" keeps the report's own line breaks
        with report_path.open(encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReportFileError(f"Cannot read report file {report_path}: {e}") from e

    document = ReportDocument.parse(text)

    summary_updated = document.has_summary_table
    if summary_updated:
        for row in build_summary_rows(card):
            document.upsert_row(row)
    else:
        logger.warning(
            f"No summary table (| Category | Score | Status |) in {report_path}; "
            "summary rows not written"
        )

    checklist = build_checklist(project, card)
    document.append_section(build_best_practices_section(project))
    document.append_section(build_overall_assessment(card))
    document.append_section(render_checklist(checklist))
    document.append_section(build_resources_section())

    try:
        with report_path.open("w", encoding="utf-8", newline="") as f:
            f.write(document.render())
    except OSError as e:
        raise ReportFileError(f"Cannot write report file {report_path}: {e}") from e

    logger.debug(f"Report assembled: total {card.total}, tier {card.tier.key}")
    return AssemblyResult(
        report_path=report_path,
        total=card.total,
        tier=card.tier.key,
        summary_updated=summary_updated,
        checklist=checklist,
    )
